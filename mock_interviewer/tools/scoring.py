"""
Interview scoring.

The reasoning model grades the full transcript against the DevOps/SRE rubric
(technical competencies, senior DevOps dimensions and soft skills). Scores
are clamped and the overall score is recomputed here rather than trusted.
"""
import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from mock_interviewer.ai.prompts.interview_prompts import (
    RETAKE_CONTEXT_PROMPT,
    SCORING_PROMPT,
    SCORING_SYSTEM_PROMPT,
)
from mock_interviewer.models.evaluation import (
    TECHNICAL_COMPETENCIES,
    InterviewScore,
    SeniorDevOpsDimensions,
    SeniorityGap,
    SeniorityRating,
    SoftSkills,
    UpskillingPlan,
)
from mock_interviewer.utils.constants import (
    ERROR_EMPTY_RESPONSE,
    SCORING_TEMPERATURE,
    SENIOR_DIMENSIONS_WEIGHT,
    SOFT_SKILLS_WEIGHT,
    TECHNICAL_WEIGHT,
)
from mock_interviewer.utils.json_utils import extract_json, message_text
from mock_interviewer.utils.llm import create_chat_model
from mock_interviewer.utils.math_utils import round_half_up
from mock_interviewer.utils.profiling import async_timed_function
from mock_interviewer.utils.transcript import count_user_turns, format_numbered_transcript

logger = logging.getLogger(__name__)

SENIOR_DIMENSION_LABELS = {
    "architectural_reasoning": "Architectural Reasoning",
    "strategic_tradeoffs": "Strategic Trade-offs",
    "incident_management": "Incident Management",
    "operational_excellence": "Operational Excellence",
}

SOFT_SKILL_LABELS = {
    "behavioral": "Behavioral",
    "thinking": "Thinking",
    "communication": "Communication",
    "problem_solving": "Problem Solving",
}


def incomplete_interview_score(user_turns: int) -> InterviewScore:
    """Zeroed result for an interview with too few candidate answers."""
    return InterviewScore(
        technical_competencies={name: 0.0 for name in TECHNICAL_COMPETENCIES},
        soft_skills=SoftSkills(),
        senior_devops_dimensions=SeniorDevOpsDimensions(),
        seniority_gap=SeniorityGap(
            tool_mastery=SeniorityRating.MEDIOR,
            automation=SeniorityRating.MEDIOR,
            impact=SeniorityRating.MEDIOR,
            communication=SeniorityRating.MEDIOR,
        ),
        overall_score=0,
        improvements=["Interview was incomplete - insufficient responses provided"],
        feedback=(
            f"Interview ended prematurely with only {user_turns} user response(s). Please ensure your "
            "microphone is working and that you're answering the interviewer's questions. "
            "Try again with a working audio setup."
        ),
        upskilling_plan=UpskillingPlan(weeks=0, focus_areas=["Complete a full interview session"]),
    )


def fallback_interview_score() -> InterviewScore:
    """Neutral result used when the scoring model fails."""
    return InterviewScore(
        technical_competencies={name: 7.0 for name in TECHNICAL_COMPETENCIES},
        soft_skills=SoftSkills(behavioral=7.0, thinking=7.0, communication=7.0, problem_solving=7.0),
        senior_devops_dimensions=SeniorDevOpsDimensions(
            architectural_reasoning=7.0,
            strategic_tradeoffs=7.0,
            incident_management=7.0,
            operational_excellence=7.0,
        ),
        seniority_gap=SeniorityGap(),
        overall_score=70.0,
        strengths=["Participated in interview"],
        improvements=["Continue practicing"],
        feedback="Interview completed. Continue practicing to improve.",
        upskilling_plan=UpskillingPlan(weeks=2, focus_areas=["General practice"]),
    )


def clamp_score(score: Any, name: str) -> float:
    """Clamp a 0-10 score, logging values the model got wrong."""
    value = float(score)
    if value < 0 or value > 10:
        logger.warning(f"Invalid score for {name}: {value}, clamping to valid range")
        return max(0.0, min(10.0, value))
    return value


def _clamp_section(section: Optional[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    if not isinstance(section, dict):
        return None
    return {key: clamp_score(value, key) for key, value in section.items()}


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def infer_seniority(score: float) -> SeniorityRating:
    if score >= 8:
        return SeniorityRating.SENIOR
    if score >= 5:
        return SeniorityRating.BORDERLINE
    return SeniorityRating.MEDIOR


def build_retake_context(previous_result: Optional[Dict[str, Any]]) -> str:
    """Prompt section comparing against a previous attempt at the same pack."""
    if not previous_result:
        return ""
    try:
        weaknesses = previous_result.get("improvements") or []
        if isinstance(weaknesses, str):
            weaknesses = [weaknesses]
        return RETAKE_CONTEXT_PROMPT.format(
            previous_score=previous_result["overall_score"],
            previous_weaknesses=", ".join(weaknesses),
        )
    except (KeyError, TypeError) as e:
        logger.error(f"Failed to read previous result for retake context: {e}")
        return ""


def normalize_scored(raw: Dict[str, Any]) -> InterviewScore:
    """
    Clamp model scores, recompute the weighted overall score and fill in a
    missing seniority gap.
    """
    technical = _clamp_section(raw.get("technicalCompetencies")) or {}
    soft = _clamp_section(raw.get("softSkills")) or {}
    senior = _clamp_section(raw.get("seniorDevOpsDimensions"))

    tech_avg = _average(list(technical.values()))
    soft_avg = _average(list(soft.values()))
    senior_avg = _average(list(senior.values())) if senior else tech_avg

    raw = dict(raw)
    raw["technicalCompetencies"] = technical
    raw["softSkills"] = soft
    if senior is not None:
        raw["seniorDevOpsDimensions"] = senior
    raw["overallScore"] = round_half_up(
        (tech_avg * TECHNICAL_WEIGHT + senior_avg * SENIOR_DIMENSIONS_WEIGHT + soft_avg * SOFT_SKILLS_WEIGHT) * 10
    )

    score = InterviewScore.model_validate(raw)
    if score.seniority_gap is None:
        score.seniority_gap = SeniorityGap(
            tool_mastery=infer_seniority(tech_avg),
            automation=infer_seniority(senior_avg),
            impact=infer_seniority(senior_avg),
            communication=infer_seniority(soft_avg),
        )
    return score


@async_timed_function()
async def score_interview(
    transcript: List[Dict[str, Any]],
    pack_info: Optional[Dict[str, Any]] = None,
    previous_result: Optional[Dict[str, Any]] = None,
) -> InterviewScore:
    """
    Score a finished interview.

    Args:
        transcript: Conversation as role/content dictionaries
        pack_info: Pack ``role``, ``level`` and ``title``
        previous_result: Stored result of the candidate's previous attempt

    Returns:
        InterviewScore (zeroed when incomplete, neutral on failure)
    """
    user_turns = count_user_turns(transcript)
    if user_turns < 2:
        logger.info(f"Interview incomplete with {user_turns} user turn(s), skipping LLM scoring")
        return incomplete_interview_score(user_turns)

    pack_info = pack_info or {}
    prompt = SCORING_PROMPT.format(
        role=pack_info.get("role", "DevOps Engineer"),
        level=pack_info.get("level", "Mid"),
        title=pack_info.get("title", "Technical Interview"),
        total_turns=len(transcript),
        retake_context=build_retake_context(previous_result),
        transcript=format_numbered_transcript(transcript),
    )

    try:
        llm = create_chat_model(temperature=SCORING_TEMPERATURE)
        response = await llm.ainvoke([
            SystemMessage(content=SCORING_SYSTEM_PROMPT),
            HumanMessage(content=prompt),
        ])
        content = message_text(response)
        if not content.strip():
            raise ValueError(ERROR_EMPTY_RESPONSE)
        score = normalize_scored(extract_json(content))
        logger.info(f"Interview scored: overall={score.overall_score}")
        return score
    except Exception as e:
        logger.error(f"Error scoring interview: {e}")
        return fallback_interview_score()


def competency_scores(score: InterviewScore) -> Dict[str, Any]:
    """
    Flatten a score into the stored competency map.

    Technical competencies keep their names; senior dimensions and soft
    skills get display labels. The seniority gap is kept under
    ``_seniority_gap``.
    """
    result: Dict[str, Any] = dict(score.technical_competencies)
    dimensions = score.senior_devops_dimensions or SeniorDevOpsDimensions()
    for field, label in SENIOR_DIMENSION_LABELS.items():
        result[label] = getattr(dimensions, field)
    for field, label in SOFT_SKILL_LABELS.items():
        result[label] = getattr(score.soft_skills, field)
    gap = score.seniority_gap or SeniorityGap()
    result["_seniority_gap"] = gap.model_dump(by_alias=True, mode="json")
    return result
