"""
OpenAI-compatible chat completions endpoint.

Voice agent platforms call this as a custom LLM. Requests carrying a session
id are run through the interview pipeline (system prompt, state analysis,
knowledge-base retrieval, question tracking); anything else is proxied
straight to the model.
"""
import json
import time
import uuid
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from mock_interviewer.core.knowledge_base import KnowledgeBase
from mock_interviewer.core.state_manager import analyze_interview_state
from mock_interviewer.models.interview_state import InterviewState
from mock_interviewer.services.interview_lifecycle import (
    SessionNotFoundError,
    get_or_build_system_prompt,
    interview_state_for,
    load_session,
    session_pack,
)
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.services.question_tracking import save_question_turn
from mock_interviewer.utils.constants import (
    DEFAULT_CHAT_MAX_TOKENS,
    DEFAULT_CHAT_TEMPERATURE,
    DEFAULT_HISTORY_WINDOW,
    ERROR_NO_MESSAGES,
    Speaker,
)
from mock_interviewer.utils.json_utils import message_text
from mock_interviewer.utils.llm import create_chat_model
from mock_interviewer.utils.transcript import last_user_message, non_system_messages, to_langchain_messages

logger = logging.getLogger(__name__)

SESSION_HEADERS = ("x-session-id", "x-sessionid")
SESSION_KEYS = ("session_id", "sessionId")


async def log_request_time(request: Request):
    """Log request timing for the completion endpoint."""
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


limiter = Limiter(key_func=get_remote_address)

router = APIRouter(tags=["chat"])


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str
    content: Optional[str] = ""


class ChatCompletionRequest(BaseModel):
    """OpenAI chat completion body, plus the session fields voice platforms add."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    model: Optional[str] = None
    messages: List[ChatMessage] = Field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: bool = False
    metadata: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None
    session_id_camel: Optional[str] = Field(None, alias="sessionId")


def get_repository(request: Request) -> InterviewRepository:
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise RuntimeError("Database not initialized")
    return repo


def get_knowledge_base(request: Request) -> KnowledgeBase:
    kb = getattr(request.app.state, "knowledge_base", None)
    if kb is None:
        kb = KnowledgeBase()
        request.app.state.knowledge_base = kb
    return kb


def resolve_session_id(headers: Any, body: ChatCompletionRequest) -> Optional[str]:
    """
    Find the interview session id for a completion request.

    Checked in order: headers, top-level body fields, metadata, then any
    message that carries one.
    """
    for header in SESSION_HEADERS:
        if headers.get(header):
            return headers.get(header)

    if body.session_id or body.session_id_camel:
        return body.session_id or body.session_id_camel

    metadata = body.metadata or {}
    for key in SESSION_KEYS:
        if metadata.get(key):
            return metadata[key]

    for message in body.messages:
        extra = message.model_extra or {}
        for key in SESSION_KEYS:
            if extra.get(key):
                return extra[key]
    return None


def error_response(message: str, status_code: int = 500, error_type: str = "server_error") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": error_type}},
    )


def completion_payload(content: str, model: str) -> Dict[str, Any]:
    return {
        "id": f"chatcmpl-{uuid.uuid4().hex}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
    }


def chunk_payload(completion_id: str, model: str, delta: Dict[str, Any],
                  finish_reason: Optional[str] = None) -> str:
    chunk = {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": int(time.time()),
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    return f"data: {json.dumps(chunk)}\n\n"


def build_interview_system_prompt(base_prompt: str, state: Optional[InterviewState], context: str) -> str:
    """Append the analysed state and retrieved reference material to the system prompt."""
    prompt = base_prompt
    if state is not None:
        prompt += f"\n\n## Current Interview State:\n{json.dumps(state.to_json_dict(), indent=2)}"
    if context:
        prompt += f"\n\n## Additional Context from Knowledge Base:\n{context}"
    return prompt


def is_repeated_user_turn(repo: InterviewRepository, session_id: str, text: str) -> bool:
    # Voice platforms resend the last candidate message after an interruption
    stored = repo.get_turns(session_id, speaker=Speaker.USER)
    return bool(stored) and stored[-1].get("text") == text


async def prepare_interview_messages(
    repo: InterviewRepository,
    kb: KnowledgeBase,
    session_id: str,
    messages: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Run the per-turn interview pipeline and return the messages to send.

    Persists the candidate turn and the analysed state as side effects.
    """
    session = load_session(repo, session_id)
    pack = session_pack(session)
    base_prompt = get_or_build_system_prompt(repo, session)

    conversation = non_system_messages(messages)
    user_text = last_user_message(conversation)
    if user_text and not is_repeated_user_turn(repo, session_id, user_text):
        repo.add_turn(session_id, Speaker.USER, user_text)

    state = None
    try:
        state = await analyze_interview_state(
            conversation,
            pack_level=pack.level,
            pack_role=pack.role,
            jd_text=session.get("jd_raw"),
            previous_state=interview_state_for(session),
        )
        repo.update_session(session_id, {"interview_state": state.to_json_dict()})
    except Exception as e:
        logger.error(f"State analysis failed for session {session_id}: {e}")

    rag_query = (state.next_action.rag_query if state else None) or user_text
    context = await kb.retrieve_context(rag_query, pack.level) if rag_query else ""

    system_prompt = build_interview_system_prompt(base_prompt, state, context)
    return [{"role": "system", "content": system_prompt}] + conversation[-DEFAULT_HISTORY_WINDOW:]


async def stream_completion(
    messages: List[Dict[str, Any]],
    temperature: float,
    max_tokens: int,
    model: str,
    repo: Optional[InterviewRepository] = None,
    session_id: Optional[str] = None,
) -> AsyncIterator[str]:
    """Yield SSE chunk frames, then persist the full reply for interview sessions."""
    completion_id = f"chatcmpl-{uuid.uuid4().hex}"
    parts: List[str] = []
    try:
        llm = create_chat_model(temperature=temperature, max_tokens=max_tokens)
        yield chunk_payload(completion_id, model, {"role": "assistant"})
        async for chunk in llm.astream(to_langchain_messages(messages)):
            text = message_text(chunk)
            if text:
                parts.append(text)
                yield chunk_payload(completion_id, model, {"content": text})
        yield chunk_payload(completion_id, model, {}, finish_reason="stop")
    except Exception as e:
        logger.error(f"Streaming completion failed: {e}")
        yield f"data: {json.dumps({'error': {'message': str(e), 'type': 'server_error'}})}\n\n"

    yield "data: [DONE]\n\n"

    reply = "".join(parts).strip()
    if repo is not None and session_id and reply:
        try:
            save_question_turn(repo, session_id, reply)
        except Exception as e:
            logger.error(f"Failed to save interviewer turn for session {session_id}: {e}")


@router.get("/chat/completions")
async def chat_completions_ready():
    """Readiness probe for voice platforms validating the custom LLM URL."""
    return {"status": "ok", "object": "chat.completion"}


@router.post("/chat/completions")
@limiter.limit("120/minute")
async def chat_completions(
    request: Request,
    body: ChatCompletionRequest,
    _: None = Depends(log_request_time),
):
    """Create a chat completion, running the interview pipeline when a session is attached."""
    try:
        if not body.messages:
            return error_response(ERROR_NO_MESSAGES, status_code=400, error_type="invalid_request_error")

        messages = [m.model_dump(include={"role", "content"}) for m in body.messages]
        temperature = DEFAULT_CHAT_TEMPERATURE if body.temperature is None else body.temperature
        max_tokens = body.max_tokens or DEFAULT_CHAT_MAX_TOKENS
        model = body.model or "mock-interviewer"

        session_id = resolve_session_id(request.headers, body)
        repo = None
        if session_id:
            logger.info(f"Chat completion for interview session {session_id}")
            repo = get_repository(request)
            try:
                messages = await prepare_interview_messages(repo, get_knowledge_base(request), session_id, messages)
            except SessionNotFoundError as e:
                logger.warning(f"{e}, proxying to model without interview context")
                repo = None
        else:
            logger.info("Chat completion without session, proxying to model")

        if body.stream:
            return StreamingResponse(
                stream_completion(messages, temperature, max_tokens, model, repo, session_id),
                media_type="text/event-stream",
            )

        llm = create_chat_model(temperature=temperature, max_tokens=max_tokens)
        response = await llm.ainvoke(to_langchain_messages(messages))
        reply = message_text(response).strip()

        if repo is not None and reply:
            save_question_turn(repo, session_id, reply)

        return completion_payload(reply, model)
    except Exception as e:
        logger.error(f"Chat completion error: {e}", exc_info=True)
        return error_response(str(e))
