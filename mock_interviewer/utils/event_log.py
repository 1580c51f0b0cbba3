"""
Structured interview event logging.

Events go through the standard logging module with a JSON context suffix so
they can be grepped or shipped to a log aggregator without a custom handler.
"""
import json
import logging
from typing import Any, Optional

logger = logging.getLogger("mock_interviewer.events")


def _format(message: str, context: dict) -> str:
    clean = {k: v for k, v in context.items() if v is not None}
    return f"{message} {json.dumps(clean, default=str)}" if clean else message


def log_interview_event(event: str, session_id: str, user_id: Optional[str] = None, **context: Any) -> None:
    """Log an interview lifecycle event (start, end, abandon...)."""
    logger.info(_format(f"Interview {event}", {
        "session_id": session_id,
        "user_id": user_id,
        "action": f"interview_{event}",
        **context,
    }))


def log_interview_error(session_id: str, error: BaseException, user_id: Optional[str] = None) -> None:
    """Log a failure that happened while running an interview."""
    logger.error(_format("Interview error", {
        "session_id": session_id,
        "user_id": user_id,
        "action": "interview_error",
        "error": {"name": type(error).__name__, "message": str(error)},
    }))


def log_api_request(method: str, path: str, status_code: int, duration_ms: Optional[float] = None) -> None:
    """Log a completed API request."""
    logger.info(_format(f"API {method} {path}", {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2) if duration_ms is not None else None,
        "action": "api_request",
    }))
