"""
Database model for generated video history
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Text, DateTime

from spectapps.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VideoHistory(Base):
    """A finished generation: the prompt the user typed and the video it produced"""
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    prompt = Column(Text, nullable=False)
    video_url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
