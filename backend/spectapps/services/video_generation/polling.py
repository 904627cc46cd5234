"""
Status polling for a single remote prediction
"""

import asyncio
import logging
from typing import Callable, Optional

from spectapps.core.exceptions import CanceledError, GenerationError, InvalidOutputFormatError
from .base_provider import BaseJobClient, RemoteJobSnapshot, RemoteJobStatus
from .extraction import extract_video_url
from .status import GenerationStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 3.0

UNKNOWN_ERROR = "unknown error"
CANCELED_BY_REMOTE = CanceledError().message
INVALID_OUTPUT = InvalidOutputFormatError().message

UpdateCallback = Callable[[GenerationStatus], None]


class PollingScheduler:
    """
    Checks a job's status every ``interval`` seconds until it reaches a
    terminal state or ``stop()`` is called.

    Checks run one after another inside a single task, so a slow status
    request delays the next tick instead of overlapping with it.
    """

    def __init__(self, client: BaseJobClient, interval: float = DEFAULT_POLL_INTERVAL):
        self.client = client
        self.interval = interval
        self.job_id: Optional[str] = None
        self.active = False
        self._task: Optional[asyncio.Task] = None

    def start(self, job_id: str, on_update: UpdateCallback) -> None:
        if self.active:
            self.stop()

        self.job_id = job_id
        self.active = True
        self._task = asyncio.get_running_loop().create_task(self._run(job_id, on_update))
        logger.info(f"Polling started for job {job_id} every {self.interval}s")

    def stop(self) -> None:
        """Stop polling; safe to call repeatedly or when never started"""
        if not self.active and self._task is None:
            return

        self.active = False
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        logger.debug(f"Polling stopped for job {self.job_id}")

    async def wait(self) -> None:
        """Wait for the current polling run to finish"""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    async def _run(self, job_id: str, on_update: UpdateCallback) -> None:
        while self.active:
            await asyncio.sleep(self.interval)
            if not self.active:
                break

            try:
                snapshot = await self.client.get_status(job_id)
            except Exception as e:
                if not self.active:
                    break
                message = e.message if isinstance(e, GenerationError) else f"Network error: {e}"
                logger.error(f"Status check failed for job {job_id}: {message}")
                self._finish(on_update, GenerationStatus.failed(message))
                break

            # stop() ran while the request was outstanding
            if not self.active:
                break

            event = self._translate(snapshot)
            if event.is_terminal:
                self._finish(on_update, event)
                break
            on_update(event)

    def _finish(self, on_update: UpdateCallback, event: GenerationStatus) -> None:
        self.active = False
        self._task = None
        on_update(event)

    def _translate(self, snapshot: RemoteJobSnapshot) -> GenerationStatus:
        logger.debug(f"Job {snapshot.id} status: {snapshot.status.value}")

        if snapshot.status.is_pending:
            return GenerationStatus.processing(snapshot.status.value)

        if snapshot.status == RemoteJobStatus.SUCCEEDED:
            if snapshot.output is None:
                logger.error(f"Job {snapshot.id} succeeded without output")
                return GenerationStatus.failed(INVALID_OUTPUT)
            try:
                url = extract_video_url(snapshot.output)
            except GenerationError as e:
                logger.error(f"Could not extract video URL for job {snapshot.id}: {e.message}")
                return GenerationStatus.failed(INVALID_OUTPUT)
            logger.info(f"Job {snapshot.id} produced video {url}")
            return GenerationStatus.completed(url)

        if snapshot.status == RemoteJobStatus.FAILED:
            return GenerationStatus.failed(snapshot.error or UNKNOWN_ERROR)

        return GenerationStatus.failed(CANCELED_BY_REMOTE)
