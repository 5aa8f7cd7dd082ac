"""
Symptom checker API endpoints.

Basic triage, detailed analysis and stored history.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.deps import get_history_service, get_triage_service
from schemas.responses import (
    DetailedResponse,
    HistoryContext,
    HistoryResponse,
    StandardErrorResponse,
    TriageResponse,
)
from schemas.symptom_checker import DetailedSymptomRequest, SymptomPromptRequest
from services.history_service import SymptomHistoryService
from services.triage_service import (
    ERROR_DETAILED_ANALYSIS,
    ERROR_TRIAGE_RESULT,
    TriageService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _missing_prompt() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=StandardErrorResponse(message="No prompt provided").model_dump(exclude_none=True),
    )


@router.post("/symptom", response_model=TriageResponse, response_model_exclude_none=True)
async def check_symptom(
    payload: Optional[SymptomPromptRequest] = None,
    triage_service: TriageService = Depends(get_triage_service),
    history_service: SymptomHistoryService = Depends(get_history_service),
):
    """Quick triage of a symptom description. Always answers with a complete result."""
    prompt = payload.cleaned_prompt if payload else ""
    if not prompt:
        return _missing_prompt()

    try:
        outcome = await triage_service.assess(prompt)
        if outcome.fallback:
            logger.warning(f"Basic triage fell back to default result: {outcome.error}")

        persisted = await history_service.save(prompt, outcome.result, kind="basic")
        if not persisted.saved:
            logger.warning(f"Symptom check not persisted: {persisted.error}")

        return TriageResponse(output=outcome.result)

    except Exception as e:
        logger.exception(f"Basic triage failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=TriageResponse(
                status="error",
                message="No response from AI",
                output=dict(ERROR_TRIAGE_RESULT),
            ).model_dump(exclude_none=True),
        )


@router.post("/detailed-symptom", response_model=DetailedResponse, response_model_exclude_none=True)
async def detailed_symptom(
    payload: Optional[DetailedSymptomRequest] = None,
    triage_service: TriageService = Depends(get_triage_service),
    history_service: SymptomHistoryService = Depends(get_history_service),
):
    """Detailed analysis for the dashboard, informed by recent symptom checks when available."""
    prompt = payload.cleaned_prompt if payload else ""
    if not prompt:
        return _missing_prompt()

    try:
        history = []
        if payload.include_history:
            recent = await history_service.context()
            if recent.ok:
                history = recent.records
            else:
                logger.warning(f"Detailed analysis continuing without history: {recent.error}")

        outcome = await triage_service.analyze(prompt, history=history)
        if outcome.fallback:
            logger.warning(f"Detailed analysis fell back to default result: {outcome.error}")

        persisted = await history_service.save(prompt, outcome.result, kind="detailed")
        if not persisted.saved:
            logger.warning(f"Detailed analysis not persisted: {persisted.error}")

        return DetailedResponse(
            output=outcome.result,
            context=HistoryContext(historyUsed=bool(history), totalHistoryEntries=len(history)),
        )

    except Exception as e:
        logger.exception(f"Detailed analysis failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=DetailedResponse(
                status="error",
                message="AI response failed",
                output=dict(ERROR_DETAILED_ANALYSIS),
            ).model_dump(exclude_none=True),
        )


@router.get("/history", response_model=HistoryResponse, response_model_exclude_none=True)
async def get_history(
    history_service: SymptomHistoryService = Depends(get_history_service),
):
    """Most recent symptom checks, newest first."""
    result = await history_service.recent()

    if not result.ok:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=HistoryResponse(
                status="error",
                message="Failed to fetch symptom history",
            ).model_dump(),
        )

    return HistoryResponse(
        history=[
            record.model_dump(by_alias=True, mode="json", exclude={"kind"})
            for record in result.records
        ]
    )
