"""All prompt templates for oracle calls."""

from models.requests import ProjectScoringRequest
from models.responses import DocumentationAnalysis
from models.schemas.enums import CriterionKind
from services import craft_profiles

REPLY_FORMAT = "Format: SCORE: [number] | FEEDBACK: [detailed analysis] | CONFIDENCE: [number]"

CRITERION_RUBRICS: dict[CriterionKind, list[str]] = {
    CriterionKind.TECHNICAL_EXECUTION: [
        "Precision and accuracy of work",
        "Proper technique application",
        "Consistency throughout project",
        "Attention to detail",
        "Finishing quality",
    ],
    CriterionKind.DOCUMENTATION_COMPLETENESS: [
        "Clear before/during/after photos",
        "Detailed process description",
        "Materials and tools documentation",
        "Challenges and solutions noted",
        "Learning outcomes shared",
    ],
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: [
        "Correct tool selection for tasks",
        "Proper tool handling and technique",
        "Efficiency in tool usage",
        "Tool maintenance awareness",
        "Alternative tool considerations",
    ],
    CriterionKind.SAFETY_ADHERENCE: [
        "Use of appropriate PPE (Personal Protective Equipment)",
        "Safe work environment setup",
        "Proper material handling",
        "Risk awareness and mitigation",
        "Emergency preparedness",
    ],
    CriterionKind.INNOVATION_CREATIVITY: [
        "Original design elements",
        "Creative problem-solving",
        "Adaptation of techniques",
        "Unique material usage",
        "Artistic expression",
    ],
}

CRITERION_TITLES: dict[CriterionKind, str] = {
    CriterionKind.TECHNICAL_EXECUTION: "Technical Execution",
    CriterionKind.DOCUMENTATION_COMPLETENESS: "Documentation Completeness",
    CriterionKind.TOOL_USAGE_APPROPRIATENESS: "Tool Usage Appropriateness",
    CriterionKind.SAFETY_ADHERENCE: "Safety Adherence",
    CriterionKind.INNOVATION_CREATIVITY: "Innovation/Creativity",
}


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _joined_or_unspecified(items: list[str]) -> str:
    return ", ".join(items) or "Not specified"


def _criterion_header(kind: CriterionKind, request: ProjectScoringRequest) -> str:
    return (
        f"Evaluate the {kind.label} of this {request.craft_type.value} project (0-100 scale):\n\n"
        f"Project Description: {request.description}"
    )


def _rubric_section(kind: CriterionKind, weight: float) -> str:
    return (
        f"Evaluation Criteria ({CRITERION_TITLES[kind]} - {weight:.0%} weight):\n"
        f"{_bullets(CRITERION_RUBRICS[kind])}"
    )


def build_technical_prompt(request: ProjectScoringRequest, weight: float) -> str:
    kind = CriterionKind.TECHNICAL_EXECUTION
    indicators = craft_profiles.quality_indicators(request.craft_type)
    return f"""{_criterion_header(kind, request)}
Images Available: {len(request.image_urls)} photos
Materials Used: {_joined_or_unspecified(request.materials)}

{_rubric_section(kind, weight)}

{request.craft_type.value.capitalize()} quality indicators:
{_bullets(indicators)}

Based on the description and available information, provide:
1. Score (0-100): Technical execution quality
2. Specific feedback on technique application
3. Areas of strength in execution
4. Areas needing improvement
5. Confidence level (0-100) in this assessment

{REPLY_FORMAT}"""


def build_documentation_prompt(
    request: ProjectScoringRequest,
    weight: float,
    analysis: DocumentationAnalysis,
) -> str:
    kind = CriterionKind.DOCUMENTATION_COMPLETENESS

    def yes_no(flag: bool) -> str:
        return "Yes" if flag else "No"

    return f"""{_criterion_header(kind, request)}
Images: {len(request.image_urls)} photos
Process Documentation: {yes_no(analysis.has_process_photos)}
Materials Listed: {yes_no(analysis.has_materials_list)}
Tools Listed: {yes_no(analysis.has_tools_list)}
Time Tracked: {yes_no(analysis.has_time_tracking)}
Challenges Noted: {yes_no(analysis.has_challenges_noted)}

Base Documentation Score: {analysis.completeness}/100

{_rubric_section(kind, weight)}

Provide refined scoring and feedback considering the quality of documentation beyond just completeness.

{REPLY_FORMAT}"""


def build_tool_usage_prompt(request: ProjectScoringRequest, weight: float) -> str:
    kind = CriterionKind.TOOL_USAGE_APPROPRIATENESS
    skill_level = request.user_skill_level.value if request.user_skill_level else "apprentice"
    return f"""{_criterion_header(kind, request)}
Tools Used: {_joined_or_unspecified(request.tools_used)}
User Skill Level: {skill_level}

{_rubric_section(kind, weight)}

Consider whether the tools are appropriate for:
- The specific craft type and techniques
- The user's skill level
- The project complexity
- Safety requirements

{REPLY_FORMAT}"""


def build_safety_prompt(request: ProjectScoringRequest, weight: float) -> str:
    kind = CriterionKind.SAFETY_ADHERENCE
    considerations = craft_profiles.safety_considerations(request.craft_type)
    return f"""{_criterion_header(kind, request)}
Tools Used: {_joined_or_unspecified(request.tools_used)}
Images Available: {len(request.image_urls)} photos

{_rubric_section(kind, weight)}

{request.craft_type.value.capitalize()} safety considerations:
{_bullets(considerations)}

Look for evidence of:
- Safety equipment mentions or visibility
- Proper technique descriptions that indicate safety awareness
- Risk mitigation strategies
- Safe workspace organization

{REPLY_FORMAT}"""


def build_innovation_prompt(request: ProjectScoringRequest, weight: float) -> str:
    kind = CriterionKind.INNOVATION_CREATIVITY
    return f"""{_criterion_header(kind, request)}
Materials Used: {_joined_or_unspecified(request.materials)}

{_rubric_section(kind, weight)}

Look for evidence of:
- Novel approaches to traditional techniques
- Creative material combinations
- Unique design solutions
- Personal artistic expression
- Problem-solving innovation

{REPLY_FORMAT}"""


def build_feedback_prompt(
    request: ProjectScoringRequest,
    overall_score: int,
    scores: dict[CriterionKind, int],
) -> str:
    """Narrative feedback call, seeded with the aggregate and per-criterion scores."""
    score_lines = "\n".join(
        f"- {CRITERION_TITLES[kind]}: {scores[kind]}/100" for kind in CriterionKind
    )
    return f"""Provide comprehensive feedback for this {request.craft_type.value} project:

Project: {request.description}
Overall Score: {overall_score}/100

Individual Scores:
{score_lines}

Provide:
1. Overall feedback summary (2-3 sentences)
2. Top 3 strengths demonstrated
3. Top 3 areas for improvement
4. 3 specific next-step suggestions for skill development

Be encouraging while providing constructive guidance for improvement.

Respond using exactly these section headers, one bullet per line:
SUMMARY: <2-3 sentences>
STRENGTHS:
- <strength>
IMPROVEMENTS:
- <improvement area>
NEXT STEPS:
- <next step>"""
