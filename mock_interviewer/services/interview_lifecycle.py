"""
Interview lifecycle: start, system prompt assembly, finish and call reports.
"""
import logging
from typing import Any, Dict, List, Optional

from mock_interviewer.ai.interview_packs import InterviewPack, get_pack
from mock_interviewer.ai.prompts.persona_prompts import SystemPromptContext, generate_system_prompt
from mock_interviewer.core.interview_brain import (
    advance_state,
    apply_next_question,
    brain_state_from_dict,
    brain_state_to_dict,
    get_next_question,
)
from mock_interviewer.models.interview_state import InterviewState
from mock_interviewer.models.job_description import CandidateBackground, ParsedJD
from mock_interviewer.services.interview_repository import InterviewRepository, utcnow
from mock_interviewer.services.question_tracking import get_previous_questions, save_question_turn
from mock_interviewer.tools.feedback_pipeline import generate_feedback_pipeline
from mock_interviewer.tools.jd_parser import parse_job_description
from mock_interviewer.tools.scoring import competency_scores, score_interview
from mock_interviewer.utils.config import get_interview_config
from mock_interviewer.utils.constants import InterviewPhase, SessionStatus, Speaker
from mock_interviewer.utils.event_log import log_interview_error, log_interview_event
from mock_interviewer.utils.math_utils import round_half_up
from mock_interviewer.utils.transcript import count_user_turns, non_system_messages, turns_to_messages

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """Raised when a session id (or the pack it points at) does not exist."""


def load_session(repo: InterviewRepository, session_id: str) -> Dict[str, Any]:
    session = repo.get_session(session_id)
    if not session:
        raise SessionNotFoundError(f"Session {session_id} not found")
    return session


def session_pack(session: Dict[str, Any]) -> InterviewPack:
    pack = get_pack(session.get("pack_id", ""))
    if not pack:
        raise SessionNotFoundError(f"Pack {session.get('pack_id')} not found")
    return pack


def session_transcript(repo: InterviewRepository, session_id: str) -> List[Dict[str, str]]:
    """Stored turns as role/content chat messages."""
    return turns_to_messages(repo.get_turns(session_id))


def parsed_jd_for(session: Dict[str, Any]) -> Optional[ParsedJD]:
    data = session.get("jd_parsed")
    if not data:
        return None
    try:
        return ParsedJD.model_validate(data)
    except ValueError as e:
        logger.error(f"Failed to load stored JD for session {session.get('session_id')}: {e}")
        return None


def interview_state_for(session: Dict[str, Any]) -> Optional[InterviewState]:
    data = session.get("interview_state")
    if not data:
        return None
    try:
        return InterviewState.model_validate(data)
    except ValueError as e:
        logger.warning(f"Ignoring invalid stored interview state: {e}")
        return None


def candidate_background(session: Dict[str, Any]) -> Optional[CandidateBackground]:
    """What the session knows about the candidate: profile skills plus the analysed intro."""
    skills = list(session.get("user_skills") or [])
    state = interview_state_for(session)
    if not skills and not state:
        return None
    if not state:
        return CandidateBackground(skills=skills)
    profile = state.candidate_profile
    return CandidateBackground(
        skills=skills + [s for s in profile.skills if s not in skills],
        experience_years=profile.experience_years,
        level=state.candidate_level,
        technologies=profile.technologies,
    )


async def start_interview(
    repo: InterviewRepository,
    session_id: str,
    jd_text: Optional[str] = None,
    is_practice: bool = False,
) -> Dict[str, Any]:
    """
    Move a session to IN_PROGRESS, parsing the job description if one was given.

    Returns:
        The updated session

    Raises:
        SessionNotFoundError: If the session does not exist
    """
    session = load_session(repo, session_id)

    jd_parsed = None
    if jd_text and jd_text.strip():
        logger.info(f"JD provided for session {session_id} ({len(jd_text)} characters), parsing")
        try:
            jd_parsed = (await parse_job_description(jd_text)).to_json_dict()
        except Exception as e:
            logger.error(f"Failed to parse JD: {e}")
            jd_parsed = {"role": "Software Engineer", "level": "Mid", "keywords": []}
    else:
        logger.info("No JD provided, skipping parsing")

    fields = {
        "status": SessionStatus.IN_PROGRESS,
        "started_at": utcnow(),
        "jd_raw": jd_text or None,
        "jd_parsed": jd_parsed,
        "is_practice": is_practice,
        "system_prompt": None,
    }
    repo.update_session(session_id, fields)
    log_interview_event("start", session_id, session.get("user_id"), pack_id=session.get("pack_id"),
                        is_practice=is_practice)
    return {**session, **fields}


def build_system_prompt(
    repo: InterviewRepository,
    session: Dict[str, Any],
    retrieved_context: Optional[str] = None,
) -> str:
    """Assemble the interviewer system prompt for a session."""
    pack = session_pack(session)
    previous_questions = get_previous_questions(
        repo, session["user_id"], session["pack_id"], exclude_session_id=session["session_id"]
    )
    context = SystemPromptContext(
        user_skills=session.get("user_skills") or [],
        target_role=pack.level,
        jd_text=session.get("jd_raw") or pack.description,
        interview_type_title=pack.title,
        parsed_jd=parsed_jd_for(session),
        previous_questions=previous_questions,
        pack_role=pack.role,
        candidate_profile=candidate_background(session),
        retrieved_context=retrieved_context,
        is_practice=bool(session.get("is_practice")),
        duration_minutes=get_interview_config()["duration_minutes"],
    )
    return generate_system_prompt(context)


def get_or_build_system_prompt(repo: InterviewRepository, session: Dict[str, Any]) -> str:
    """Return the session's cached system prompt, building and caching it on first use."""
    cached = session.get("system_prompt")
    if cached:
        return cached
    prompt = build_system_prompt(repo, session)
    repo.update_session(session["session_id"], {"system_prompt": prompt})
    session["system_prompt"] = prompt
    return prompt


def _complete(repo: InterviewRepository, session: Dict[str, Any], status: str = SessionStatus.COMPLETED) -> None:
    repo.update_session(session["session_id"], {"status": status, "ended_at": utcnow()})
    log_interview_event("end", session["session_id"], session.get("user_id"),
                        pack_id=session.get("pack_id"), status=status)


async def finish_interview(repo: InterviewRepository, session_id: str) -> Optional[Dict[str, Any]]:
    """
    Score a session and mark it COMPLETED.

    Practice sessions are completed without scoring.

    Returns:
        The stored result, or None for practice sessions
    """
    session = load_session(repo, session_id)
    if session.get("is_practice"):
        _complete(repo, session)
        return None

    pack = session_pack(session)
    previous_result = repo.get_previous_result(session["user_id"], session["pack_id"], exclude_session_id=session_id)

    try:
        score = await score_interview(
            session_transcript(repo, session_id),
            pack_info={"role": pack.role, "level": pack.level, "title": pack.title},
            previous_result=previous_result,
        )
    except Exception as e:
        log_interview_error(session_id, e, session.get("user_id"))
        raise

    threshold = get_interview_config()["certificate_threshold"]
    result = {
        "overall_score": score.overall_score,
        "competency_scores": competency_scores(score),
        "strengths": score.strengths,
        "improvements": score.improvements,
        "upskilling_plan": score.upskilling_plan.model_dump(),
        "feedback": score.feedback,
        "topic_breakdown": [t.to_json_dict() for t in score.topic_breakdown],
        "certificate_eligible": score.overall_score >= threshold,
    }
    repo.save_result(session_id, result)
    _complete(repo, session)
    return result


async def process_call_report(
    repo: InterviewRepository,
    session_id: str,
    transcript: List[Dict[str, Any]],
    duration_seconds: float,
) -> str:
    """
    Handle the end-of-call report from a voice session.

    Short calls and calls with fewer than two candidate answers are marked
    ABANDONED. Otherwise the topic feedback pipeline scores the call.

    Returns:
        The final session status
    """
    session = load_session(repo, session_id)
    conversation = non_system_messages(transcript)
    candidate_turns = count_user_turns(conversation)
    min_seconds = get_interview_config()["min_call_duration_seconds"]

    if duration_seconds < min_seconds or candidate_turns < 2:
        logger.warning(
            f"Interview abandoned: {round_half_up(duration_seconds)}s, {candidate_turns} candidate turns"
        )
        _complete(repo, session, SessionStatus.ABANDONED)
        return SessionStatus.ABANDONED

    try:
        report = await generate_feedback_pipeline(conversation)
        repo.save_result(session_id, {
            "overall_score": report.overall_score,
            "competency_scores": {t.topic: t.overall_score for t in report.topics},
            "strengths": [s for t in report.topics for s in t.key_strengths],
            "improvements": [w for t in report.topics for w in t.key_weaknesses],
            "upskilling_plan": {
                "weeks": report.upskilling_plan.weeks,
                "focus_areas": [w.focus for w in report.upskilling_plan.weekly_breakdown],
            },
            "feedback": f"Evaluated {len(report.topics)} topics. Overall score: {report.overall_score}/100.",
            "certificate_eligible": report.overall_score >= get_interview_config()["certificate_threshold"],
        })
        logger.info(f"Feedback generated and saved for session {session_id}")
    except Exception as e:
        log_interview_error(session_id, e, session.get("user_id"))

    _complete(repo, session)
    return SessionStatus.COMPLETED


def process_text_turn(repo: InterviewRepository, session_id: str, text: Optional[str] = None) -> Dict[str, Any]:
    """
    Record a typed candidate answer and pick the next question without a model.

    The first call (no text) opens with the introduction question. The rule
    based brain state is stored on the session between turns.

    Returns:
        Dictionary with ``question``, ``topic``, ``depth`` and ``phase``
    """
    session = load_session(repo, session_id)
    state = brain_state_from_dict(session.get("brain_state"))

    if text and text.strip():
        repo.add_turn(session_id, Speaker.USER, text.strip())
        state = advance_state(state, text.strip())

    next_question = get_next_question(state)
    state = apply_next_question(state, next_question)

    if next_question.topic == InterviewPhase.INTRODUCTION:
        save_question_turn(repo, session_id, next_question.question, infer_section=False)
    else:
        save_question_turn(repo, session_id, next_question.question, section=next_question.topic)
    repo.update_session(session_id, {"brain_state": brain_state_to_dict(state)})

    return {
        "question": next_question.question,
        "topic": next_question.topic,
        "depth": next_question.depth,
        "phase": state.phase,
    }
