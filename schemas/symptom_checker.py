"""
Symptom Checker Schemas

Pydantic models for symptom check requests, the structured AI replies and
stored symptom records.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    """Join list replies into one block of text."""
    if isinstance(value, list):
        return "\n".join(str(item).strip() for item in value if str(item).strip())
    if isinstance(value, str):
        return value.strip()
    return value


class SymptomPromptRequest(BaseModel):
    """Body of POST /symptom."""
    prompt: Optional[str] = None

    @property
    def cleaned_prompt(self) -> str:
        return (self.prompt or "").strip()


class DetailedSymptomRequest(SymptomPromptRequest):
    """Body of POST /detailed-symptom."""
    include_history: bool = True


class VoiceRequest(BaseModel):
    """Body of POST /voice. ``audio`` is base64 encoded."""
    model_config = ConfigDict(populate_by_name=True)

    audio: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")


class TriageResult(BaseModel):
    """Basic triage reply."""
    model_config = ConfigDict(extra="ignore")

    urgency: Literal["low", "medium", "high"]
    suggestion: str
    next_steps: str

    @field_validator("urgency", mode="before")
    @classmethod
    def normalize_urgency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("suggestion", "next_steps", mode="before")
    @classmethod
    def join_text(cls, value: Any) -> Any:
        return _as_text(value)


class DetailedAnalysis(BaseModel):
    """Detailed (premium) analysis reply."""
    model_config = ConfigDict(extra="ignore")

    possible_conditions: str
    risk_factors: str
    lifestyle_recommendations: str
    when_to_seek_immediate_care: str
    historical_insights: Optional[str] = None
    monitoring_suggestions: Optional[str] = None

    @field_validator(
        "possible_conditions",
        "risk_factors",
        "lifestyle_recommendations",
        "when_to_seek_immediate_care",
        "historical_insights",
        "monitoring_suggestions",
        mode="before",
    )
    @classmethod
    def join_text(cls, value: Any) -> Any:
        return _as_text(value)


class TriageOutcome(BaseModel):
    """What the AI gateway hands back: always a complete result."""
    result: Dict[str, Any]
    fallback: bool = False
    error: Optional[str] = None


RecordKind = Literal["basic", "detailed"]


class SymptomRecordCreate(BaseModel):
    """Schema for writing a symptom record."""
    kind: RecordKind = "basic"
    symptom: str
    response: Dict[str, Any]


class SymptomRecordRead(BaseModel):
    """Schema for reading a symptom record."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(serialization_alias="_id")
    kind: RecordKind
    symptom: str
    response: Dict[str, Any]
    timestamp: datetime


class PersistResult(BaseModel):
    """Outcome of a best-effort write. Callers may ignore it."""
    saved: bool
    record_id: Optional[str] = None
    error: Optional[str] = None


class HistoryResult(BaseModel):
    """Outcome of a history read. ``records`` is empty when ``error`` is set."""
    records: List[SymptomRecordRead] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
