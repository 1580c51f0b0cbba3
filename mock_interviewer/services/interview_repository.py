"""
MongoDB persistence for interview sessions, turns and results.

Writes log and re-raise; reads log and return None or an empty list so a
database hiccup degrades a page instead of failing the interview.
"""
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pymongo
from pymongo.database import Database

from mock_interviewer.utils.config import get_db_config
from mock_interviewer.utils.constants import PREVIOUS_SESSIONS_LIMIT, SessionStatus, Speaker

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _strip_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is not None:
        document.pop("_id", None)
    return document


class InterviewRepository:
    """Stores sessions, turns and results in three MongoDB collections."""

    def __init__(self, database: Database, db_config: Optional[Dict[str, str]] = None):
        """
        Initialize the repository.

        Args:
            database: pymongo Database handle
            db_config: Collection names, defaults to ``get_db_config()``
        """
        config = db_config or get_db_config()
        self.db = database
        self.sessions = database[config["sessions_collection"]]
        self.turns = database[config["turns_collection"]]
        self.results = database[config["results_collection"]]

        try:
            self.sessions.create_index([("session_id", pymongo.ASCENDING)], unique=True, background=True)
            self.sessions.create_index(
                [("user_id", pymongo.ASCENDING), ("pack_id", pymongo.ASCENDING), ("status", pymongo.ASCENDING)],
                background=True,
            )
            self.turns.create_index([("session_id", pymongo.ASCENDING), ("timestamp", pymongo.ASCENDING)], background=True)
            self.results.create_index([("session_id", pymongo.ASCENDING)], unique=True, background=True)
        except Exception as e:
            logger.warning(f"Index creation warning (may already exist): {e}")

        logger.info(f"Interview repository initialized on database {database.name}")

    # Sessions

    def create_session(
        self,
        user_id: str,
        pack_id: str,
        is_practice: bool = False,
        user_skills: Optional[List[str]] = None,
    ) -> str:
        """
        Create a PENDING session.

        Returns:
            Session ID
        """
        session_id = str(uuid.uuid4())
        document = {
            "session_id": session_id,
            "user_id": user_id,
            "pack_id": pack_id,
            "status": SessionStatus.PENDING,
            "is_practice": is_practice,
            "user_skills": user_skills or [],
            "jd_raw": None,
            "jd_parsed": None,
            "system_prompt": None,
            "interview_state": None,
            "created_at": utcnow(),
            "started_at": None,
            "ended_at": None,
        }
        try:
            self.sessions.insert_one(document)
            logger.info(f"Created session {session_id} for user {user_id} (pack {pack_id})")
            return session_id
        except Exception as e:
            logger.error(f"Error creating session: {e}")
            raise

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        try:
            return _strip_id(self.sessions.find_one({"session_id": session_id}))
        except Exception as e:
            logger.error(f"Error retrieving session {session_id}: {e}")
            return None

    def update_session(self, session_id: str, fields: Dict[str, Any]) -> bool:
        """
        Set fields on a session.

        Returns:
            True if the session exists
        """
        try:
            result = self.sessions.update_one({"session_id": session_id}, {"$set": fields})
        except Exception as e:
            logger.error(f"Error updating session {session_id}: {e}")
            raise
        if result.matched_count == 0:
            logger.warning(f"Session {session_id} not found for update")
            return False
        return True

    def get_completed_sessions(
        self,
        user_id: str,
        pack_id: str,
        exclude_session_id: Optional[str] = None,
        limit: int = PREVIOUS_SESSIONS_LIMIT,
    ) -> List[Dict[str, Any]]:
        """Completed sessions for a user and pack, most recently ended first."""
        query: Dict[str, Any] = {"user_id": user_id, "pack_id": pack_id, "status": SessionStatus.COMPLETED}
        if exclude_session_id:
            query["session_id"] = {"$ne": exclude_session_id}
        try:
            cursor = self.sessions.find(query, sort=[("ended_at", pymongo.DESCENDING)], limit=limit)
            return [_strip_id(s) for s in cursor]
        except Exception as e:
            logger.error(f"Error retrieving completed sessions for user {user_id}: {e}")
            return []

    # Turns

    def add_turn(
        self,
        session_id: str,
        speaker: str,
        text: str,
        is_question: bool = False,
        question_hash: Optional[str] = None,
        section: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Append a turn to a session transcript."""
        document = {
            "session_id": session_id,
            "speaker": speaker,
            "text": text,
            "is_question": is_question,
            "question_hash": question_hash,
            "section": section,
            "timestamp": utcnow(),
        }
        try:
            self.turns.insert_one(document)
        except Exception as e:
            logger.error(f"Error adding turn to session {session_id}: {e}")
            raise
        return _strip_id(document)

    def get_turns(
        self,
        session_id: str,
        speaker: Optional[str] = None,
        questions_only: bool = False,
    ) -> List[Dict[str, Any]]:
        """Turns of a session in chronological order."""
        query: Dict[str, Any] = {"session_id": session_id}
        if speaker:
            query["speaker"] = speaker
        if questions_only:
            query["is_question"] = True
        try:
            return [_strip_id(t) for t in self.turns.find(query, sort=[("timestamp", pymongo.ASCENDING)])]
        except Exception as e:
            logger.error(f"Error retrieving turns for session {session_id}: {e}")
            return []

    def get_interviewer_questions(self, session_ids: List[str]) -> List[Dict[str, Any]]:
        """Interviewer question turns across several sessions."""
        if not session_ids:
            return []
        query = {"session_id": {"$in": session_ids}, "speaker": Speaker.INTERVIEWER, "is_question": True}
        try:
            return [_strip_id(t) for t in self.turns.find(query, sort=[("timestamp", pymongo.ASCENDING)])]
        except Exception as e:
            logger.error(f"Error retrieving previous questions: {e}")
            return []

    # Results

    def save_result(self, session_id: str, result: Dict[str, Any]) -> None:
        """Store (or replace) the result of a session."""
        document = {**result, "session_id": session_id, "created_at": utcnow()}
        try:
            self.results.replace_one({"session_id": session_id}, document, upsert=True)
            logger.info(f"Saved result for session {session_id} (score {result.get('overall_score')})")
        except Exception as e:
            logger.error(f"Error saving result for session {session_id}: {e}")
            raise

    def get_result(self, session_id: str) -> Optional[Dict[str, Any]]:
        try:
            return _strip_id(self.results.find_one({"session_id": session_id}))
        except Exception as e:
            logger.error(f"Error retrieving result for session {session_id}: {e}")
            return None

    def get_previous_result(
        self,
        user_id: str,
        pack_id: str,
        exclude_session_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Result of the most recent other completed attempt at the same pack."""
        previous = self.get_completed_sessions(user_id, pack_id, exclude_session_id, limit=1)
        if not previous:
            return None
        return self.get_result(previous[0]["session_id"])
