from fastapi import APIRouter, Depends, Query

from spectapps.core.config import settings
from spectapps.schemas.generation import HistoryItem, HistoryResponse
from spectapps.services.history import HistoryStore
from spectapps.services.video_generation.orchestrator import (
    GenerationOrchestrator, get_generation_orchestrator
)

router = APIRouter()


def get_history_store(
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator)
) -> HistoryStore:
    return orchestrator.history


@router.get("", response_model=HistoryResponse)
def list_history(
    limit: int = Query(settings.HISTORY_LIMIT, ge=1, le=50),
    store: HistoryStore = Depends(get_history_store)
):
    """
    Recently generated videos, newest first
    """
    if store is None:
        return HistoryResponse(items=[])

    records = store.list_recent(limit)
    return HistoryResponse(items=[HistoryItem(**record.to_dict()) for record in records])
