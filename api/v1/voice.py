"""
Voice transcription API endpoint.

Forwards browser-recorded audio to ElevenLabs speech-to-text.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.deps import get_transcription_service
from schemas.responses import StandardErrorResponse, VoiceResponse
from schemas.symptom_checker import VoiceRequest
from services.transcription_service import TranscriptionError, TranscriptionService

logger = logging.getLogger(__name__)
router = APIRouter()


def _voice_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=StandardErrorResponse(message=message).model_dump(exclude_none=True),
    )


@router.post("/voice", response_model=VoiceResponse, response_model_exclude_none=True)
async def transcribe_voice(
    payload: Optional[VoiceRequest] = None,
    transcription_service: TranscriptionService = Depends(get_transcription_service),
):
    if not payload or not payload.audio:
        return _voice_error(status.HTTP_400_BAD_REQUEST, "No audio data provided")

    try:
        text = await transcription_service.transcribe(payload.audio, payload.mime_type)
        return VoiceResponse(text=text)

    except ValueError as e:
        logger.info(f"Rejected voice payload: {e}")
        return _voice_error(status.HTTP_400_BAD_REQUEST, "Invalid audio data")
    except TranscriptionError as e:
        logger.error(f"ElevenLabs API error: {e.body}")
        return _voice_error(e.status_code, f"ElevenLabs API error: {e.body}")
    except Exception as e:
        logger.exception(f"Voice processing error: {e}")
        return _voice_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Voice processing failed")
