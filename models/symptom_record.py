"""
Symptom Record Model

Database model for storing one symptom check and the structured reply it got.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from core.database import Base


def _new_record_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SymptomRecord(Base):
    """A symptom check and its triage or detailed reply. Never updated."""

    __tablename__ = "symptom_records"

    id = Column(String(32), primary_key=True, default=_new_record_id)
    kind = Column(String(20), nullable=False, default="basic")

    symptom = Column(Text, nullable=False)
    response = Column(JSON, nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utc_now)

    __table_args__ = (
        Index("ix_symptom_records_kind_timestamp", "kind", "timestamp"),
    )

    def __repr__(self):
        return f"<SymptomRecord(id='{self.id}', kind='{self.kind}', timestamp='{self.timestamp}')>"
