"""
Base job client for remote video prediction services
"""

import abc
import base64
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass
from enum import Enum
import aiohttp

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


class RemoteJobStatus(Enum):
    """Lifecycle states reported by the prediction API"""
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_pending(self) -> bool:
        return self in (RemoteJobStatus.STARTING, RemoteJobStatus.PROCESSING)


@dataclass(frozen=True)
class RemoteJobSnapshot:
    """One observation of a remote job, produced per request and never persisted"""
    id: str
    status: RemoteJobStatus
    output: Any = None
    error: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "RemoteJobSnapshot":
        """Build a snapshot from a prediction payload.

        Raises ValueError for payloads that cannot be read as a prediction.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Prediction payload is not an object: {data!r}")

        job_id = data.get("id")
        if not job_id:
            raise ValueError(f"Prediction payload has no id: {data}")

        status = RemoteJobStatus(data.get("status"))

        error = data.get("error")
        return cls(
            id=str(job_id),
            status=status,
            output=data.get("output"),
            error=str(error) if error is not None else None
        )


def encode_image(image: bytes) -> str:
    """Encode raw image bytes as a JPEG data URL"""
    return DATA_URL_PREFIX + base64.b64encode(image).decode("ascii")


def build_prediction_input(prompt: str, image: Optional[bytes], aspect_ratio: str) -> Dict[str, Any]:
    """
    Build the prediction input mapping.

    The image is optional; if it cannot be encoded it is dropped and the
    prediction runs on the prompt alone.
    """
    payload: Dict[str, Any] = {
        "prompt": prompt,
        "aspect_ratio": aspect_ratio,
    }

    if image is None:
        logger.info("No start image supplied, using prompt only")
        return payload

    try:
        payload["start_image"] = encode_image(image)
        logger.info(f"Start image attached ({len(image)} bytes)")
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not encode start image, submitting without it: {e}")

    return payload


class BaseJobClient(abc.ABC):
    """Base class for remote prediction APIs driven by the orchestrator"""

    def __init__(self, api_key: str, base_url: str, timeout: int = 60):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def open(self) -> None:
        """Create the HTTP session if it is not open yet"""
        if self.session and not self.session.closed:
            return
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        connector = aiohttp.TCPConnector(limit=10, limit_per_host=5)
        self.session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers=self._get_default_headers()
        )

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default headers for API requests"""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": "SpectApps-VideoGeneration/1.0"
        }

    @abc.abstractmethod
    async def resolve_model(self, name: str) -> str:
        """Return the latest version id of a named model"""
        pass

    @abc.abstractmethod
    async def create_job(self, version_id: str, input: Dict[str, Any]) -> RemoteJobSnapshot:
        """Create a prediction and return its first snapshot"""
        pass

    @abc.abstractmethod
    async def get_status(self, job_id: str) -> RemoteJobSnapshot:
        """Fetch the current snapshot of a prediction"""
        pass

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Make a single HTTP request; failures are raised to the caller"""
        if not self.session or self.session.closed:
            await self.open()

        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

        try:
            async with self.session.request(
                method=method,
                url=url,
                json=data,
                params=params
            ) as response:

                if response.status == 429:
                    logger.warning(f"Rate limited by {self.__class__.__name__}")

                response.raise_for_status()

                content_type = response.headers.get('Content-Type', '')
                if 'application/json' in content_type:
                    return await response.json()
                else:
                    text = await response.text()
                    return {"response": text}

        except aiohttp.ClientError as e:
            logger.error(f"Request failed for {self.__class__.__name__}: {method} {url}: {e}")
            raise
