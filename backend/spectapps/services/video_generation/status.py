"""
Request and status types shared by the scheduler and the orchestrator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from spectapps.core.exceptions import ValidationError


class GenerationState(Enum):
    """States of the generation state machine"""
    IDLE = "idle"
    STARTING = "starting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationStatus:
    """The single active status of an orchestrator.

    Only the field belonging to ``state`` is set: ``progress_text`` for
    processing, ``result_url`` for completed, ``reason`` for failed.
    """
    state: GenerationState
    progress_text: Optional[str] = None
    result_url: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "GenerationStatus":
        return cls(GenerationState.IDLE)

    @classmethod
    def starting(cls) -> "GenerationStatus":
        return cls(GenerationState.STARTING)

    @classmethod
    def processing(cls, progress_text: str) -> "GenerationStatus":
        return cls(GenerationState.PROCESSING, progress_text=progress_text)

    @classmethod
    def completed(cls, result_url: str) -> "GenerationStatus":
        return cls(GenerationState.COMPLETED, result_url=result_url)

    @classmethod
    def failed(cls, reason: str) -> "GenerationStatus":
        return cls(GenerationState.FAILED, reason=reason)

    @property
    def is_processing(self) -> bool:
        return self.state in (GenerationState.STARTING, GenerationState.PROCESSING)

    @property
    def is_terminal(self) -> bool:
        return self.state in (GenerationState.COMPLETED, GenerationState.FAILED)

    def to_dict(self):
        return {
            "state": self.state.value,
            "progress_text": self.progress_text,
            "result_url": self.result_url,
            "reason": self.reason
        }


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt and an optional start image, immutable once submitted"""
    prompt: str
    image: Optional[bytes] = None

    def __post_init__(self):
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValidationError("Prompt must not be empty")


@dataclass(frozen=True)
class JobHandle:
    """Identifies the remote job of the submission currently being polled"""
    job_id: str
    model_version_id: str
