from pydantic import BaseModel, Field
from typing import Optional, Any, Dict, List, Literal

ResponseStatus = Literal["success", "error"]


class TriageResponse(BaseModel):
    status: ResponseStatus = "success"
    output: Dict[str, Any]
    message: Optional[str] = None


class HistoryContext(BaseModel):
    historyUsed: bool = False
    totalHistoryEntries: int = 0


class DetailedResponse(BaseModel):
    status: ResponseStatus = "success"
    output: Dict[str, Any]
    context: Optional[HistoryContext] = None
    message: Optional[str] = None


class VoiceResponse(BaseModel):
    status: ResponseStatus = "success"
    text: Optional[str] = None
    message: Optional[str] = None


class HistoryResponse(BaseModel):
    status: ResponseStatus = "success"
    history: List[Dict[str, Any]] = Field(default_factory=list)
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    version: str
    database: bool


class StandardErrorResponse(BaseModel):
    status: ResponseStatus = "error"
    message: str
    detail: Optional[Any] = None
