"""
Video Generation Services Package

Submits prompts to a remote prediction API, polls the resulting jobs and
extracts the produced video URL.
"""

from .base_provider import BaseJobClient, RemoteJobSnapshot, RemoteJobStatus, build_prediction_input
from .providers import ReplicateClient
from .extraction import extract_video_url
from .polling import PollingScheduler
from .status import GenerationRequest, GenerationState, GenerationStatus, JobHandle
from .orchestrator import GenerationOrchestrator, get_generation_orchestrator

__all__ = [
    "BaseJobClient",
    "RemoteJobSnapshot",
    "RemoteJobStatus",
    "build_prediction_input",
    "ReplicateClient",
    "extract_video_url",
    "PollingScheduler",
    "GenerationRequest",
    "GenerationState",
    "GenerationStatus",
    "JobHandle",
    "GenerationOrchestrator",
    "get_generation_orchestrator"
]
