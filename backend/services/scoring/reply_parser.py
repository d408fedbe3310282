"""Parsers for the oracle's tagged text replies.

Criterion replies look like ``SCORE: 82 | FEEDBACK: ... | CONFIDENCE: 75`` but
nothing guarantees that shape, so every field has its own default.
"""

import re

from models.responses import ProjectFeedback
from models.schemas.enums import CriterionKind
from models.schemas.criterion import CriterionAssessment

DEFAULT_SCORE = 70
FEEDBACK_PREVIEW_CHARS = 200

_TAG_PREFIX = r"(?:\*\*)?\s*"
_SCORE = re.compile(_TAG_PREFIX + r"SCORE\s*(?:\*\*)?\s*[:=]\s*(?:\*\*)?\s*(\d{1,3})", re.IGNORECASE)
_CONFIDENCE = re.compile(
    _TAG_PREFIX + r"CONFIDENCE\s*(?:\*\*)?\s*[:=]\s*(?:\*\*)?\s*(\d{1,3})", re.IGNORECASE
)
_FEEDBACK = re.compile(
    _TAG_PREFIX
    + r"FEEDBACK\s*(?:\*\*)?\s*[:=]\s*(.+?)\s*"
    + r"(?=\||\bCONFIDENCE\s*(?:\*\*)?\s*[:=]|\bSCORE\s*(?:\*\*)?\s*[:=]|$)",
    re.IGNORECASE | re.DOTALL,
)

_SECTION_TAGS = {
    "summary": "overall_feedback",
    "overall feedback": "overall_feedback",
    "overall": "overall_feedback",
    "strengths": "strengths",
    "improvement areas": "improvement_areas",
    "areas for improvement": "improvement_areas",
    "improvements": "improvement_areas",
    "next step suggestions": "next_step_suggestions",
    "next steps": "next_step_suggestions",
}
# Tags need a colon so prose like "Strengths include..." is not read as a header
_SECTION_HEADER = re.compile(
    r"^\s*(?:#+\s*)?(?:\*\*)?\s*(" + "|".join(_SECTION_TAGS) + r")"
    r"\s*(?:\*\*)?\s*:\s*(?:\*\*)?\s*(.*)$",
    re.IGNORECASE,
)
_LIST_MARKER = re.compile(r"^[\d\-\*\s\.\)•]+")
_ITEMS_PER_SECTION = 3


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def parse_criterion_reply(
    criterion: CriterionKind,
    text: str,
    default_confidence: int,
) -> CriterionAssessment:
    """Parse a criterion reply, defaulting each missing field independently."""
    score_match = _SCORE.search(text)
    confidence_match = _CONFIDENCE.search(text)
    feedback_match = _FEEDBACK.search(text)

    score = _clamp(int(score_match.group(1))) if score_match else DEFAULT_SCORE
    confidence = (
        _clamp(int(confidence_match.group(1)))
        if confidence_match
        else _clamp(default_confidence)
    )
    feedback = feedback_match.group(1).strip(" *\n\t") if feedback_match else ""
    if not feedback:
        feedback = text.strip()[:FEEDBACK_PREVIEW_CHARS]

    return CriterionAssessment(
        criterion=criterion,
        score=score,
        feedback=feedback,
        confidence=confidence,
    )


def _strip_marker(line: str) -> str:
    return _LIST_MARKER.sub("", line).strip()


def parse_feedback_reply(text: str) -> ProjectFeedback | None:
    """Parse the narrative feedback reply. Returns None when nothing usable is present."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return None

    sections: dict[str, list[str]] = {
        "overall_feedback": [],
        "strengths": [],
        "improvement_areas": [],
        "next_step_suggestions": [],
    }
    current: str | None = None
    tagged = False
    for line in lines:
        header = _SECTION_HEADER.match(line)
        if header:
            tagged = True
            current = _SECTION_TAGS[header.group(1).lower()]
            rest = header.group(2).strip()
            if rest:
                sections[current].append(_strip_marker(rest) if current != "overall_feedback" else rest)
            continue
        if current is not None:
            sections[current].append(line if current == "overall_feedback" else _strip_marker(line))

    if tagged:
        overall = " ".join(sections["overall_feedback"]).strip()
        if not overall:
            return None
        return ProjectFeedback(
            overall_feedback=overall,
            strengths=[s for s in sections["strengths"] if s],
            improvement_areas=[s for s in sections["improvement_areas"] if s],
            next_step_suggestions=[s for s in sections["next_step_suggestions"] if s],
        )

    # Untagged reply: first line is the summary, then three lines per list
    n = _ITEMS_PER_SECTION
    return ProjectFeedback(
        overall_feedback=lines[0],
        strengths=[_strip_marker(line) for line in lines[1:1 + n]],
        improvement_areas=[_strip_marker(line) for line in lines[1 + n:1 + 2 * n]],
        next_step_suggestions=[_strip_marker(line) for line in lines[1 + 2 * n:1 + 3 * n]],
    )
