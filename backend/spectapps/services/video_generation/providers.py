"""
Replicate implementation of the prediction job client
"""

import asyncio
import logging
from typing import Dict, Any, Optional
import aiohttp

from spectapps.core.config import settings
from spectapps.core.exceptions import ModelNotFoundError, SubmissionFailedError, NetworkError
from .base_provider import BaseJobClient, RemoteJobSnapshot

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class ReplicateClient(BaseJobClient):
    """Replicate prediction API client.

    One instance is shared by the whole process and passed to the
    orchestrator; it holds a single aiohttp session.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        super().__init__(
            api_key if api_key is not None else settings.REPLICATE_API_TOKEN,
            base_url or settings.REPLICATE_BASE_URL,
            timeout or settings.REPLICATE_REQUEST_TIMEOUT
        )

    async def resolve_model(self, name: str) -> str:
        """Look up the latest version id for an ``owner/name`` model"""
        if "/" not in name:
            raise ModelNotFoundError(f"Invalid model name: {name}")

        try:
            response = await self._make_request("GET", f"/models/{name}")
        except aiohttp.ClientResponseError as e:
            if e.status == 404:
                raise ModelNotFoundError(f"Model not found: {name}") from e
            raise NetworkError(f"Network error: {e.message or e}") from e
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Network error: {e}") from e

        if not isinstance(response, dict):
            raise NetworkError(f"Unexpected model response for {name}")

        latest_version = response.get("latest_version")
        version_id = latest_version.get("id") if isinstance(latest_version, dict) else None
        if not version_id:
            raise ModelNotFoundError(f"Model version not found for {name}")

        logger.info(f"Resolved model {name} to version {version_id}")
        return version_id

    async def create_job(self, version_id: str, input: Dict[str, Any]) -> RemoteJobSnapshot:
        """Create a prediction for a model version"""
        payload = {
            "version": version_id,
            "input": input
        }

        logger.info(f"Creating prediction with input keys: {sorted(input.keys())}")

        try:
            response = await self._make_request("POST", "/predictions", payload)
            snapshot = RemoteJobSnapshot.from_response(response)
        except aiohttp.ClientResponseError as e:
            raise SubmissionFailedError(f"Video generation could not be started: {e.message or e}") from e
        except TRANSPORT_ERRORS as e:
            raise SubmissionFailedError(f"Video generation could not be started: {e}") from e
        except ValueError as e:
            raise SubmissionFailedError(f"Unexpected prediction response: {e}") from e

        logger.info(f"Replicate prediction created: {snapshot.id} ({snapshot.status.value})")
        return snapshot

    async def get_status(self, job_id: str) -> RemoteJobSnapshot:
        """Fetch the current state of a prediction"""
        try:
            response = await self._make_request("GET", f"/predictions/{job_id}")
            return RemoteJobSnapshot.from_response(response)
        except aiohttp.ClientResponseError as e:
            raise NetworkError(f"Network error: {e.message or e}") from e
        except TRANSPORT_ERRORS as e:
            raise NetworkError(f"Network error: {e}") from e
        except ValueError as e:
            raise NetworkError(f"Unexpected prediction response: {e}") from e
