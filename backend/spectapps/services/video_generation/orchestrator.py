"""
Video Generation Orchestrator - single-flight state machine that submits a
prompt to the prediction API and follows the job to completion
"""

import asyncio
import logging
from typing import Callable, List, Optional

from spectapps.core.config import settings
from spectapps.core.exceptions import SpectAppsException
from spectapps.services.history import HistoryStore

from .base_provider import BaseJobClient, build_prediction_input
from .polling import PollingScheduler
from .status import GenerationRequest, GenerationState, GenerationStatus, JobHandle

logger = logging.getLogger(__name__)

NOT_STARTED = "Video generation could not be started"

StatusListener = Callable[[GenerationStatus], None]


class GenerationOrchestrator:
    """
    Drives one video generation at a time.

    All state changes happen on the event loop that calls ``submit`` and
    ``cancel``; network calls are the only suspension points. Consumers
    follow progress through ``subscribe`` or by reading ``status``.
    """

    def __init__(
        self,
        client: BaseJobClient,
        history: Optional[HistoryStore] = None,
        model_name: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        poll_interval: Optional[float] = None
    ):
        self.client = client
        self.history = history
        self.model_name = model_name or settings.REPLICATE_MODEL
        self.aspect_ratio = aspect_ratio or settings.VIDEO_ASPECT_RATIO
        interval = settings.POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        self.scheduler = PollingScheduler(client, interval)

        self._status = GenerationStatus.idle()
        self._job_handle: Optional[JobHandle] = None
        self._request: Optional[GenerationRequest] = None
        self._submission = 0
        self._listeners: List[StatusListener] = []
        self._history_task: Optional[asyncio.Task] = None

    @property
    def status(self) -> GenerationStatus:
        return self._status

    @property
    def job_handle(self) -> Optional[JobHandle]:
        return self._job_handle

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a listener for status changes; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def enhance_prompt(self, prompt: str) -> str:
        return f"{prompt.strip()}, aspect ratio {self.aspect_ratio}"

    async def submit(self, request: GenerationRequest) -> bool:
        """
        Start generating a video for ``request``.

        Returns False, changing nothing, while another submission is starting
        or processing. Failures end in the failed state rather than raising.
        """
        if self._status.is_processing:
            logger.warning(f"Submission rejected, generation already {self._status.state.value}")
            return False

        self.scheduler.stop()
        self._job_handle = None
        self._request = request
        self._submission += 1
        token = self._submission

        self._set_status(GenerationStatus.starting())
        logger.info(f"Starting video generation with model {self.model_name}")

        try:
            version_id = await self.client.resolve_model(self.model_name)
            if token != self._submission:
                logger.info("Submission cancelled while resolving model")
                return True

            payload = build_prediction_input(
                self.enhance_prompt(request.prompt),
                request.image,
                self.aspect_ratio
            )
            snapshot = await self.client.create_job(version_id, payload)
        except asyncio.CancelledError:
            if token == self._submission:
                self._set_status(GenerationStatus.idle())
            raise
        except Exception as e:
            if token != self._submission:
                return True
            message = e.message if isinstance(e, SpectAppsException) else str(e)
            logger.error(f"Video generation failed to start: {message}")
            self._set_status(GenerationStatus.failed(message))
            return True

        if token != self._submission:
            logger.info(f"Submission cancelled, ignoring job {snapshot.id}")
            return True

        if not snapshot.status.is_pending:
            logger.error(f"Job {snapshot.id} was created in state {snapshot.status.value}")
            self._set_status(GenerationStatus.failed(NOT_STARTED))
            return True

        self._job_handle = JobHandle(job_id=snapshot.id, model_version_id=version_id)
        self._set_status(GenerationStatus.processing(snapshot.status.value))

        # a listener may have cancelled on the processing transition
        if token != self._submission:
            logger.info(f"Submission cancelled, not polling job {snapshot.id}")
            return True

        self.scheduler.start(snapshot.id, self._on_poll_update)
        return True

    def cancel(self) -> bool:
        """
        Stop following the current generation and return to idle.

        The remote job is not cancelled; its result is simply ignored.
        """
        if not self._status.is_processing:
            return False

        self.scheduler.stop()
        self._submission += 1
        job_id = self._job_handle.job_id if self._job_handle else None
        self._job_handle = None
        self._set_status(GenerationStatus.idle())
        logger.info(f"Video generation cancelled (job {job_id})")
        return True

    async def wait(self) -> None:
        """Wait until the current job stops being polled and its result is recorded"""
        await self.scheduler.wait()
        task = self._history_task
        if task is not None:
            await asyncio.wait({task})

    def close(self) -> None:
        self.scheduler.stop()

    def _on_poll_update(self, event: GenerationStatus) -> None:
        if self._status.state != GenerationState.PROCESSING:
            logger.debug(f"Ignoring poll update {event.state.value} in state {self._status.state.value}")
            return

        self._set_status(event)

        if event.state == GenerationState.COMPLETED and self.history is not None and self._request is not None:
            self._history_task = asyncio.get_running_loop().create_task(
                self._record_history(self._request.prompt, event.result_url)
            )

    async def _record_history(self, prompt: str, result_url: str) -> None:
        # the store commits synchronously, keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self.history.append, prompt, result_url)
        except Exception:
            # status stays completed
            logger.exception(f"Failed to save video {result_url} to history")

    def _set_status(self, status: GenerationStatus) -> None:
        previous, self._status = self._status, status
        if previous.state != status.state:
            logger.info(f"Generation status: {previous.state.value} -> {status.state.value}")

        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Status listener raised")


# Global service instance
_generation_orchestrator: Optional[GenerationOrchestrator] = None


def get_generation_orchestrator() -> GenerationOrchestrator:
    """Get global generation orchestrator instance"""
    global _generation_orchestrator
    if _generation_orchestrator is None:
        from spectapps.db.session import SessionLocal
        from spectapps.services.history import SQLHistoryStore
        from .providers import ReplicateClient

        _generation_orchestrator = GenerationOrchestrator(
            client=ReplicateClient(),
            history=SQLHistoryStore(SessionLocal)
        )
    return _generation_orchestrator
