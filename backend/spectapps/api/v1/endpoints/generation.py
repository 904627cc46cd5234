"""
API endpoints for submitting and following a video generation
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from spectapps.core.exceptions import GenerationInProgressError
from spectapps.schemas.generation import GenerationStatusResponse, CancelResponse
from spectapps.services.video_generation.orchestrator import (
    GenerationOrchestrator, get_generation_orchestrator
)
from spectapps.services.video_generation.status import GenerationRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _status_response(orchestrator: GenerationOrchestrator) -> GenerationStatusResponse:
    handle = orchestrator.job_handle
    return GenerationStatusResponse(
        **orchestrator.status.to_dict(),
        job_id=handle.job_id if handle else None
    )


@router.post("", response_model=GenerationStatusResponse, status_code=status.HTTP_202_ACCEPTED)
async def submit_generation(
    prompt: str = Form(...),
    image: Optional[UploadFile] = File(None),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator)
):
    """
    Submit a prompt and optional start image.

    The job is created before the response is sent; progress is then read
    from ``GET /generations/current``.
    """
    image_bytes = await image.read() if image is not None else None
    request = GenerationRequest(prompt=prompt, image=image_bytes or None)

    accepted = await orchestrator.submit(request)
    if not accepted:
        raise GenerationInProgressError()

    return _status_response(orchestrator)


@router.get("/current", response_model=GenerationStatusResponse)
async def get_current_generation(
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator)
):
    return _status_response(orchestrator)


@router.post("/current/cancel", response_model=CancelResponse)
async def cancel_current_generation(
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator)
):
    cancelled = orchestrator.cancel()
    return CancelResponse(cancelled=cancelled, status=_status_response(orchestrator))
