"""
Symptom history service.

Best-effort persistence of symptom checks. Writes and reads never raise:
failures are logged and handed back as ``PersistResult`` / ``HistoryResult``
so a storage outage cannot block the triage reply.
"""

from typing import Any, Dict, Optional

from core.database import Database
from core.logging import get_logger
from repositories.symptom_record import SymptomRecordRepository
from schemas.symptom_checker import (
    HistoryResult,
    PersistResult,
    SymptomRecordCreate,
)

logger = get_logger(__name__)


class SymptomHistoryService:
    """Persistence adapter over the symptom record repository."""

    def __init__(self, database: Database, history_limit: int = 50, context_limit: int = 5):
        self.database = database
        self.history_limit = history_limit
        self.context_limit = context_limit

    async def save(self, symptom: str, response: Dict[str, Any], kind: str = "basic") -> PersistResult:
        """Insert one record for a completed symptom check."""
        if not self.database.enabled:
            logger.info("Persistence disabled, symptom record not saved", kind=kind)
            return PersistResult(saved=False, error="Database is not configured")

        try:
            async with self.database.session() as session:
                repo = SymptomRecordRepository(session)
                record = await repo.create_record(
                    SymptomRecordCreate(kind=kind, symptom=symptom, response=response)
                )
            return PersistResult(saved=True, record_id=record.id)
        except Exception as e:
            logger.error(f"Failed to save symptom record: {e}", kind=kind)
            return PersistResult(saved=False, error=str(e))

    async def recent(self, limit: Optional[int] = None, kind: Optional[str] = "basic") -> HistoryResult:
        """Return up to ``limit`` records, newest first, capped at the history limit."""
        limit = min(limit or self.history_limit, self.history_limit)

        if not self.database.enabled:
            return HistoryResult(error="Database is not configured")

        try:
            async with self.database.session() as session:
                records = await SymptomRecordRepository(session).get_recent(limit=limit, kind=kind)
            logger.info(f"Found {len(records)} symptom records", kind=kind)
            return HistoryResult(records=records)
        except Exception as e:
            logger.error(f"Failed to fetch symptom history: {e}")
            return HistoryResult(error=str(e))

    async def context(self) -> HistoryResult:
        """Recent basic checks used to inform a detailed analysis."""
        return await self.recent(limit=self.context_limit)
