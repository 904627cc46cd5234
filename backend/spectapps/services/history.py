"""
History of finished video generations
"""

import abc
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from sqlalchemy.orm import Session

from spectapps.core.config import settings
from spectapps.models.video import VideoHistory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    """A stored generation result"""
    id: Any
    prompt: str
    result_url: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "result_url": self.result_url,
            "created_at": self.created_at.isoformat()
        }


class HistoryStore(abc.ABC):
    """Where completed generations are recorded"""

    @abc.abstractmethod
    def append(self, prompt: str, result_url: str) -> HistoryRecord:
        pass

    @abc.abstractmethod
    def list_recent(self, limit: int = settings.HISTORY_LIMIT) -> List[HistoryRecord]:
        """Most recent records first"""
        pass


class InMemoryHistoryStore(HistoryStore):

    def __init__(self):
        self._records: List[HistoryRecord] = []

    def append(self, prompt: str, result_url: str) -> HistoryRecord:
        record = HistoryRecord(
            id=len(self._records) + 1,
            prompt=prompt,
            result_url=result_url,
            created_at=datetime.now(timezone.utc)
        )
        self._records.append(record)
        return record

    def list_recent(self, limit: int = settings.HISTORY_LIMIT) -> List[HistoryRecord]:
        return list(reversed(self._records))[:limit]


class SQLHistoryStore(HistoryStore):
    """History kept in the ``videos`` table"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def append(self, prompt: str, result_url: str) -> HistoryRecord:
        db = self.session_factory()
        try:
            row = VideoHistory(prompt=prompt, video_url=result_url)
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.info(f"Saved video {row.id} to history")
            return self._to_record(row)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list_recent(self, limit: int = settings.HISTORY_LIMIT) -> List[HistoryRecord]:
        db = self.session_factory()
        try:
            rows = (
                db.query(VideoHistory)
                .order_by(VideoHistory.created_at.desc(), VideoHistory.id.desc())
                .limit(limit)
                .all()
            )
            return [self._to_record(row) for row in rows]
        finally:
            db.close()

    @staticmethod
    def _to_record(row: VideoHistory) -> HistoryRecord:
        return HistoryRecord(
            id=row.id,
            prompt=row.prompt,
            result_url=row.video_url,
            created_at=row.created_at
        )
