"""Google Gemini wrapper acting as the scoring oracle."""

import logging
import re

from google import genai
from google.genai import types

from models.schemas.criterion import OracleReply, ScoringContext
from services.exceptions import OracleError

logger = logging.getLogger(__name__)

DEFAULT_SELF_REPORTED_CONFIDENCE = 85

_CONFIDENCE_PERCENT = re.compile(r"confidence[:\s]*(\d+)%", re.IGNORECASE)


def build_system_instruction(context: ScoringContext) -> str:
    profile = context.user_profile
    specializations = ", ".join(profile.craft_specialization) or "general crafts"
    return f"""You are an expert multi-craft evaluator with deep knowledge of woodworking, metalworking,
blacksmithing, pottery, leathercraft, weaving, stonemasonry, glasswork, jewelry making and general
workshop practice.

Current user context:
- Craft specializations: {specializations}
- Skill level: {profile.skill_level}
- Bio: {profile.bio or 'Not provided'}

Guidelines:
1. Judge the work against standards appropriate to the craft type
2. Emphasize safety considerations specific to the craft
3. Be encouraging while giving concrete, constructive guidance
4. Rate your confidence (0-100) in every assessment you give"""


def split_self_reported_confidence(text: str) -> tuple[str, int]:
    """Pull a trailing "confidence: N%" statement out of free text."""
    confidence = DEFAULT_SELF_REPORTED_CONFIDENCE
    match = _CONFIDENCE_PERCENT.search(text)
    if match:
        confidence = max(0, min(100, int(match.group(1))))
    cleaned = _CONFIDENCE_PERCENT.sub("", text)
    cleaned = re.sub(r"\n\s*\n", "\n\n", cleaned).strip()
    return cleaned, confidence


class GeminiOracle:
    """Oracle backed by the Gemini async API.

    Returns None when no API key is configured or the call fails, so callers
    fall back instead of crashing; retries are not attempted here.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 800,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client: genai.Client | None = None
        if api_key:
            self._client = genai.Client(api_key=api_key)
        else:
            logger.warning("No GEMINI_API_KEY set - scoring oracle disabled")

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def generate(self, prompt: str, context: ScoringContext) -> OracleReply | None:
        if self._client is None:
            return None

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=build_system_instruction(context),
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
            )
            raw = (response.text or "").strip()
            if not raw:
                raise OracleError("Gemini returned an empty reply")

            text, confidence = split_self_reported_confidence(raw)
            return OracleReply(text=text, self_reported_confidence=confidence)

        except OracleError as e:
            logger.error("Unusable Gemini reply: %s", e)
            return None
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            return None

    async def ping(self) -> bool:
        """Cheap connectivity probe used by the health check."""
        reply = await self.generate("Reply with the single word OK.", ScoringContext())
        return reply is not None
