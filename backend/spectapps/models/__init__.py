from .video import VideoHistory
