"""
Triage service backed by the OpenAI chat completions API.

Key features:
- Fixed instruction preamble per detail level, followed by the user's text
- One model call per request, no retries
- Markdown fences stripped before strict JSON decoding
- Complete default result whenever the reply cannot be used
"""

import json
import re
from typing import Any, Dict, List, Optional, Type

from openai import AsyncOpenAI
from pydantic import BaseModel

from core.config import Settings
from core.logging import get_logger
from schemas.symptom_checker import (
    DetailedAnalysis,
    SymptomRecordRead,
    TriageOutcome,
    TriageResult,
)

logger = get_logger(__name__)


DEFAULT_TRIAGE_RESULT: Dict[str, str] = {
    "urgency": "medium",
    "suggestion": "Rest, drink fluids, monitor symptoms.",
    "next_steps": "See a doctor if symptoms worsen.",
}

# Returned alongside HTTP 500 when the handler itself fails
ERROR_TRIAGE_RESULT: Dict[str, str] = {
    "urgency": "medium",
    "suggestion": "Rest and drink fluids",
    "next_steps": "See a doctor if symptoms worsen",
}

DEFAULT_DETAILED_ANALYSIS: Dict[str, str] = {
    "possible_conditions": "Common cold or mild infection.",
    "risk_factors": "Recent exposure to illness or low immunity.",
    "lifestyle_recommendations": "Rest, stay hydrated, and eat nutritious foods.",
    "when_to_seek_immediate_care": "If high fever, chest pain, or breathing difficulty occurs.",
}

ERROR_DETAILED_ANALYSIS: Dict[str, str] = {
    "possible_conditions": "Mild infection or fatigue-related issue.",
    "risk_factors": "Dehydration or lack of rest.",
    "lifestyle_recommendations": "Get proper sleep, stay hydrated, and eat balanced meals.",
    "when_to_seek_immediate_care": "If symptoms worsen or include high fever or chest pain.",
}


TRIAGE_PROMPT = """
You are a helpful health assistant.
Respond ONLY in JSON format with this structure:

{
  "urgency": "low/medium/high",
  "suggestion": "advice here",
  "next_steps": "when to see a doctor"
}

Do NOT include markdown, explanations, or any text outside JSON.
Do NOT diagnose.
"""

DETAILED_PROMPT = """
You are a medical AI assistant. Your task is to provide **detailed health insights**.

Follow these rules strictly:

1. Respond **only in JSON format** with the following structure:
{
  "possible_conditions": "Explain possible causes in simple, non-alarming language.",
  "risk_factors": "List possible risk factors related to symptoms.",
  "lifestyle_recommendations": "Provide simple lifestyle or self-care tips.",
  "when_to_seek_immediate_care": "Mention clear signs for when to see a doctor or visit ER."%(history_fields)s
}

2. **Detect the language of the user's input** and respond **strictly in that language**.
Do NOT translate, summarize, or switch languages under any circumstances.

3. **Do NOT include markdown, code blocks, or extra text outside JSON.**

4. Keep explanations short, helpful, and reassuring.
Never diagnose or guarantee conditions.
"""

HISTORY_FIELDS = """,
  "historical_insights": "Patterns across the previous symptom checks listed below.",
  "monitoring_suggestions": "What to keep track of given those patterns.\""""

_FENCE_RE = re.compile(r"```json|```")


def strip_code_fences(text: Optional[str]) -> str:
    """Remove markdown code fence markers and surrounding whitespace."""
    return _FENCE_RE.sub("", text or "").strip()


def decode_reply(raw_text: Optional[str], schema: Type[BaseModel]) -> Dict[str, Any]:
    """
    Decode a model reply into a complete ``schema`` dump.

    Raises ValueError (json.JSONDecodeError included) or a pydantic
    ValidationError when the reply cannot be used as a whole.
    """
    cleaned = strip_code_fences(raw_text)
    if not cleaned:
        raise ValueError("Empty response from model")

    parsed = json.loads(cleaned)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")

    return schema.model_validate(parsed).model_dump(exclude_none=True)


def format_history(history: List[SymptomRecordRead]) -> str:
    lines = []
    for record in history:
        urgency = record.response.get("urgency", "unknown")
        lines.append(f"- {record.timestamp:%Y-%m-%d %H:%M}: {record.symptom} (urgency: {urgency})")
    return "\n".join(lines)


class TriageService:
    """AI gateway for basic triage and detailed analysis."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        max_tokens: int = 700,
        temperature: float = 0.2,
        client: Optional[Any] = None,
    ):
        self.client = client
        if self.client is None and api_key:
            try:
                self.client = AsyncOpenAI(api_key=api_key)
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI client: {e}")
                self.client = None

        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "TriageService":
        return cls(
            api_key=app_settings.OPENAI_API_KEY,
            model=app_settings.OPENAI_MODEL,
            max_tokens=app_settings.OPENAI_MAX_TOKENS,
            temperature=app_settings.OPENAI_TEMPERATURE,
        )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    @staticmethod
    def build_prompt(preamble: str, user_text: str) -> str:
        return f"{preamble}\nUser: {user_text}"

    def build_detailed_prompt(self, user_text: str, history: Optional[List[SymptomRecordRead]] = None) -> str:
        if not history:
            return self.build_prompt(DETAILED_PROMPT % {"history_fields": ""}, user_text)

        preamble = DETAILED_PROMPT % {"history_fields": HISTORY_FIELDS}
        preamble += f"\nPrevious symptom checks (newest first):\n{format_history(history)}\n"
        return self.build_prompt(preamble, user_text)

    async def _complete(self, full_prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": full_prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def _run(self, full_prompt: str, schema: Type[BaseModel], default: Dict[str, str]) -> TriageOutcome:
        if not self.client:
            logger.warning("OpenAI client not available, returning default result")
            return TriageOutcome(result=dict(default), fallback=True, error="OpenAI API key not configured")

        try:
            raw = await self._complete(full_prompt)
            logger.debug("Raw model response", raw=raw)
            result = decode_reply(raw, schema)
        except Exception as e:
            logger.warning(f"Model reply unusable, returning default result: {e}")
            return TriageOutcome(result=dict(default), fallback=True, error=str(e))

        return TriageOutcome(result=result)

    async def assess(self, prompt: str) -> TriageOutcome:
        """Basic triage: urgency, suggestion and next steps."""
        return await self._run(
            self.build_prompt(TRIAGE_PROMPT, prompt),
            TriageResult,
            DEFAULT_TRIAGE_RESULT,
        )

    async def analyze(self, prompt: str, history: Optional[List[SymptomRecordRead]] = None) -> TriageOutcome:
        """Detailed analysis, optionally informed by previous symptom checks."""
        return await self._run(
            self.build_detailed_prompt(prompt, history),
            DetailedAnalysis,
            DEFAULT_DETAILED_ANALYSIS,
        )
