"""
Tracking of interviewer questions across sessions so retakes get new ones.
"""
import logging
from typing import Dict, List, Optional

from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.constants import PREVIOUS_SESSIONS_LIMIT, Speaker
from mock_interviewer.utils.question_utils import hash_question, is_question
from mock_interviewer.utils.topic_utils import infer_topic_from_question

logger = logging.getLogger(__name__)


def get_previous_questions(
    repo: InterviewRepository,
    user_id: str,
    pack_id: str,
    exclude_session_id: Optional[str] = None,
) -> List[str]:
    """
    Questions already asked to this user for this pack.

    Reads the last completed sessions (most recent first) and deduplicates
    by question hash.
    """
    sessions = repo.get_completed_sessions(user_id, pack_id, exclude_session_id, limit=PREVIOUS_SESSIONS_LIMIT)
    turns = repo.get_interviewer_questions([s["session_id"] for s in sessions])

    by_session: Dict[str, List[dict]] = {}
    for turn in turns:
        by_session.setdefault(turn["session_id"], []).append(turn)

    seen = set()
    questions: List[str] = []
    for session in sessions:
        for turn in by_session.get(session["session_id"], []):
            question_hash = turn.get("question_hash")
            if question_hash and question_hash not in seen:
                seen.add(question_hash)
                questions.append(turn["text"])

    logger.debug(f"Found {len(questions)} previous questions for user {user_id}, pack {pack_id}")
    return questions


def save_question_turn(
    repo: InterviewRepository,
    session_id: str,
    question_text: str,
    section: Optional[str] = None,
    infer_section: bool = True,
) -> dict:
    """
    Store an interviewer turn with question tracking metadata.

    Without an explicit section the topic is inferred from the question text,
    which drives progress tracking. Pass ``infer_section=False`` to store the
    turn with no section at all.
    """
    asked = is_question(question_text)
    if section is None and infer_section:
        section = infer_topic_from_question(question_text)
    return repo.add_turn(
        session_id,
        Speaker.INTERVIEWER,
        question_text,
        is_question=asked,
        question_hash=hash_question(question_text) if asked else None,
        section=section,
    )
