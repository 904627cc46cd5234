from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

class GenerationStatusResponse(BaseModel):
    state: str  # idle, starting, processing, completed, failed
    progress_text: Optional[str] = None
    result_url: Optional[str] = None
    reason: Optional[str] = None
    job_id: Optional[str] = None

class CancelResponse(BaseModel):
    cancelled: bool
    status: GenerationStatusResponse

class HistoryItem(BaseModel):
    id: int
    prompt: str
    result_url: str
    created_at: datetime

class HistoryResponse(BaseModel):
    items: List[HistoryItem]
