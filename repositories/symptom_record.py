"""
Symptom Record Repository

Data access layer for stored symptom checks.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.symptom_record import SymptomRecord
from schemas.symptom_checker import SymptomRecordCreate, SymptomRecordRead

logger = logging.getLogger(__name__)


class SymptomRecordRepository:
    """Repository for symptom records. Records are insert-only."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create_record(self, record_data: SymptomRecordCreate) -> SymptomRecordRead:
        """Insert one symptom record."""
        try:
            new_record = SymptomRecord(**record_data.model_dump())
            self.db_session.add(new_record)
            await self.db_session.commit()
            await self.db_session.refresh(new_record)
            logger.info(f"Created symptom record ID {new_record.id} ({new_record.kind})")
            return SymptomRecordRead.model_validate(new_record)

        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.exception(f"Database error creating symptom record: {str(e)}")
            raise

    async def get_by_id(self, record_id: str) -> Optional[SymptomRecordRead]:
        """Get a single record by ID."""
        try:
            result = await self.db_session.execute(
                select(SymptomRecord).where(SymptomRecord.id == record_id)
            )
            record = result.scalar_one_or_none()

            if record:
                return SymptomRecordRead.model_validate(record)
            return None

        except SQLAlchemyError as e:
            logger.exception(f"Database error getting symptom record by ID: {str(e)}")
            raise

    async def get_recent(
        self,
        limit: int = 50,
        kind: Optional[str] = "basic"
    ) -> List[SymptomRecordRead]:
        """Get the most recent records, newest first."""
        try:
            query = select(SymptomRecord)

            if kind:
                query = query.where(SymptomRecord.kind == kind)

            query = (
                query
                .order_by(SymptomRecord.timestamp.desc())
                .order_by(SymptomRecord.id.desc())
                .limit(limit)
            )

            result = await self.db_session.execute(query)
            records = result.scalars().all()

            return [SymptomRecordRead.model_validate(record) for record in records]

        except SQLAlchemyError as e:
            logger.exception(f"Database error getting recent symptom records: {str(e)}")
            raise

