"""
Speech-to-text service for ElevenLabs integration.

Takes the base64 audio the browser records and returns the plain transcript.
"""

import base64
import binascii
from typing import Optional

import httpx

from core.config import Settings
from core.logging import get_logger

logger = get_logger(__name__)


class TranscriptionError(Exception):
    """Provider call failed. Carries the provider status and raw body."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Transcription failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def decode_audio(audio_b64: str) -> bytes:
    """Decode a base64 payload, accepting data URLs."""
    if audio_b64.startswith("data:") and "," in audio_b64:
        audio_b64 = audio_b64.split(",", 1)[1]
    try:
        audio = base64.b64decode(audio_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Audio payload is not valid base64") from e
    if not audio:
        raise ValueError("Audio payload is empty")
    return audio


def audio_filename(mime_type: str) -> str:
    """audio/webm;codecs=opus -> audio.webm"""
    subtype = mime_type.split("/", 1)[-1].split(";", 1)[0].strip()
    return f"audio.{subtype or 'webm'}"


class TranscriptionService:
    """ElevenLabs speech-to-text client."""

    DEFAULT_MIME_TYPE = "audio/webm"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.elevenlabs.io",
        header_key: str = "xi-api-key",
        model_id: str = "scribe_v1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.header_key = header_key
        self.model_id = model_id
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "TranscriptionService":
        return cls(
            api_key=app_settings.ELEVENLABS_API_KEY,
            base_url=app_settings.ELEVENLABS_BASE_URL,
            header_key=app_settings.ELEVENLABS_HEADER_KEY,
            model_id=app_settings.ELEVENLABS_STT_MODEL,
            timeout=app_settings.TRANSCRIPTION_TIMEOUT_SECONDS,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def transcribe(self, audio_b64: str, mime_type: Optional[str] = None) -> str:
        """
        Upload the audio and return the transcript text.

        Raises:
            ValueError: the payload cannot be decoded
            TranscriptionError: the provider is not configured or answered non-2xx
        """
        audio = decode_audio(audio_b64)
        mime_type = mime_type or self.DEFAULT_MIME_TYPE

        if not self.enabled:
            raise TranscriptionError(503, "Transcription provider is not configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url}/v1/speech-to-text",
                headers={self.header_key: self.api_key},
                data={"model_id": self.model_id},
                files={"file": (audio_filename(mime_type), audio, mime_type)},
            )

        if not response.is_success:
            logger.error(
                "ElevenLabs speech-to-text error",
                status_code=response.status_code,
                body=response.text,
            )
            raise TranscriptionError(response.status_code, response.text)

        try:
            text = response.json().get("text") or ""
        except ValueError:
            raise TranscriptionError(502, response.text)
        logger.info(f"Transcription successful ({len(text)} chars)")
        return text
