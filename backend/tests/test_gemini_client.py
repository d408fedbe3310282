"""Tests for the Gemini-backed oracle that do not touch the network."""

import pytest

from models.schemas.criterion import ScoringContext, UserContext
from services.gemini_client import (
    DEFAULT_SELF_REPORTED_CONFIDENCE,
    GeminiOracle,
    build_system_instruction,
    split_self_reported_confidence,
)


class TestSplitSelfReportedConfidence:
    def test_extracts_and_strips(self):
        text, confidence = split_self_reported_confidence(
            "SCORE: 80 | FEEDBACK: tidy\n\nConfidence: 72%"
        )
        assert confidence == 72
        assert text == "SCORE: 80 | FEEDBACK: tidy"

    def test_default_when_absent(self):
        text, confidence = split_self_reported_confidence("SCORE: 80 | CONFIDENCE: 60")
        assert confidence == DEFAULT_SELF_REPORTED_CONFIDENCE
        assert text == "SCORE: 80 | CONFIDENCE: 60"


class TestSystemInstruction:
    def test_includes_user_context(self):
        context = ScoringContext(
            user_profile=UserContext(
                craft_specialization=["pottery"], skill_level="journeyman", bio="Potter"
            )
        )
        instruction = build_system_instruction(context)
        assert "Craft specializations: pottery" in instruction
        assert "Skill level: journeyman" in instruction
        assert "Bio: Potter" in instruction


class TestUnconfiguredOracle:
    def test_not_configured_without_key(self):
        assert GeminiOracle(api_key="").configured is False

    @pytest.mark.asyncio
    async def test_generate_returns_none(self):
        oracle = GeminiOracle(api_key="")
        assert await oracle.generate("Evaluate this", ScoringContext()) is None
        assert await oracle.ping() is False
