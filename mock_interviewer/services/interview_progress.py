"""
Live interview progress for the interview room.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mock_interviewer.ai.interview_flow import get_interview_structure
from mock_interviewer.ai.interview_packs import get_pack
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import INTERVIEW_DURATION_MINUTES
from mock_interviewer.utils.constants import InterviewPhase, Speaker
from mock_interviewer.utils.math_utils import round_half_up

logger = logging.getLogger(__name__)

INTRODUCTION_MINUTES = 5
# Wrap-up is never reached by time alone in a 20 minute interview
WRAPUP_AFTER_MINUTES = 50


def _as_utc(value: datetime) -> datetime:
    # pymongo returns naive UTC datetimes unless tz_aware is set
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def phase_for_elapsed(elapsed_minutes: int) -> str:
    if elapsed_minutes < INTRODUCTION_MINUTES:
        return InterviewPhase.INTRODUCTION
    if elapsed_minutes < WRAPUP_AFTER_MINUTES:
        return InterviewPhase.TOPICS
    return InterviewPhase.WRAPUP


def get_interview_progress(
    repo: InterviewRepository,
    session_id: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Compute phase, topic coverage and timing for a session.

    Raises:
        ValueError: If the session (or its pack) does not exist
    """
    session = repo.get_session(session_id)
    pack = get_pack(session["pack_id"]) if session else None
    if not session or not pack:
        raise ValueError("Session not found")

    topics = get_interview_structure(pack.level)["topics"]
    topic_ids = [t["id"] for t in topics]

    start = session.get("started_at") or session.get("created_at")
    now = now or datetime.now(timezone.utc)
    elapsed = int((now - _as_utc(start)).total_seconds() // 60) if start else 0
    phase = phase_for_elapsed(elapsed)

    covered: List[str] = []
    for turn in repo.get_turns(session_id, speaker=Speaker.INTERVIEWER):
        section = turn.get("section")
        if section and section not in covered:
            covered.append(section)
    remaining = [topic_id for topic_id in topic_ids if topic_id not in covered]

    current_topic = None
    if phase == InterviewPhase.TOPICS:
        current_id = (covered[-1] if covered else None) or (remaining[0] if remaining else topic_ids[0])
        topic = next((t for t in topics if t["id"] == current_id), None)
        if topic:
            current_topic = {
                "id": topic["id"],
                "name": topic["name"],
                "index": topic_ids.index(current_id) + 1,
                "total": len(topic_ids),
            }

    total = INTERVIEW_DURATION_MINUTES
    return {
        "phase": phase,
        "current_topic": current_topic,
        "topics_covered": covered,
        "topics_remaining": remaining,
        "elapsed_minutes": elapsed,
        "remaining_minutes": max(0, total - elapsed),
        "progress_percentage": min(100, round_half_up(elapsed / total * 100)),
    }
