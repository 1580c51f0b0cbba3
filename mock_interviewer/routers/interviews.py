"""
FastAPI router for interview packs and sessions.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from mock_interviewer.ai.interview_packs import get_pack, list_packs
from mock_interviewer.services.interview_lifecycle import (
    SessionNotFoundError,
    finish_interview,
    process_call_report,
    process_text_turn,
    start_interview,
)
from mock_interviewer.services.interview_progress import get_interview_progress
from mock_interviewer.services.interview_repository import InterviewRepository

logger = logging.getLogger(__name__)


async def log_request_time(request: Request):
    """Log request timing for HTTP endpoints."""
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api", tags=["interviews"])


class CreateInterviewRequest(BaseModel):
    user_id: str
    pack_id: str
    is_practice: bool = False
    user_skills: List[str] = Field(default_factory=list)


class StartInterviewRequest(BaseModel):
    jd_text: Optional[str] = Field(None, description="Job description to tailor the interview to")
    is_practice: bool = False


class CallReportRequest(BaseModel):
    transcript: List[Dict[str, Any]] = Field(default_factory=list, description="role/content messages")
    duration_seconds: float = 0


class TextTurnRequest(BaseModel):
    text: Optional[str] = None


def get_repository(request: Request) -> InterviewRepository:
    """Dependency to get the interview repository from app state."""
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return repo


@router.get("/packs")
async def get_packs():
    """List the available interview packs."""
    return {"packs": [pack.to_dict() for pack in list_packs()]}


@router.post("/interviews")
@limiter.limit("10/minute")
async def create_interview(
    request: Request,
    body: CreateInterviewRequest,
    repo: InterviewRepository = Depends(get_repository),
    _: None = Depends(log_request_time),
):
    """Create a PENDING interview session for a pack."""
    if not get_pack(body.pack_id):
        raise HTTPException(status_code=404, detail=f"Interview pack {body.pack_id} not found")
    try:
        session_id = repo.create_session(
            body.user_id, body.pack_id, is_practice=body.is_practice, user_skills=body.user_skills
        )
    except Exception as e:
        logger.error(f"Error creating interview session: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create interview session: {str(e)}")
    return {"session_id": session_id, "pack_id": body.pack_id}


@router.post("/interviews/{session_id}/start")
async def start_interview_session(
    session_id: str,
    body: StartInterviewRequest,
    repo: InterviewRepository = Depends(get_repository),
    _: None = Depends(log_request_time),
):
    """Start a session, parsing the job description when one is given."""
    try:
        session = await start_interview(repo, session_id, jd_text=body.jd_text, is_practice=body.is_practice)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting interview {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start interview: {str(e)}")
    return {
        "session_id": session_id,
        "status": session["status"],
        "jd_parsed": session.get("jd_parsed"),
    }


@router.post("/interviews/{session_id}/turns")
async def text_turn(
    session_id: str,
    body: TextTurnRequest,
    repo: InterviewRepository = Depends(get_repository),
):
    """Submit a typed answer and get the next question."""
    try:
        return process_text_turn(repo, session_id, body.text)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing turn for {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process turn: {str(e)}")


@router.post("/interviews/{session_id}/finish")
async def finish_interview_session(
    session_id: str,
    repo: InterviewRepository = Depends(get_repository),
    _: None = Depends(log_request_time),
):
    """Score the session and mark it completed."""
    try:
        result = await finish_interview(repo, session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error finishing interview {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to finish interview: {str(e)}")
    return {"session_id": session_id, "result": result}


@router.post("/interviews/{session_id}/call-report")
async def call_report(
    session_id: str,
    body: CallReportRequest,
    repo: InterviewRepository = Depends(get_repository),
    _: None = Depends(log_request_time),
):
    """End-of-call report from the voice platform."""
    try:
        status = await process_call_report(repo, session_id, body.transcript, body.duration_seconds)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing call report for {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process call report: {str(e)}")
    return {"session_id": session_id, "status": status}


@router.get("/interviews/{session_id}/progress")
async def interview_progress(session_id: str, repo: InterviewRepository = Depends(get_repository)):
    try:
        return get_interview_progress(repo, session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/interviews/{session_id}/result")
async def interview_result(session_id: str, repo: InterviewRepository = Depends(get_repository)):
    result = repo.get_result(session_id)
    if not result:
        raise HTTPException(status_code=404, detail="Result not found")
    return result
