"""
LLM-driven interview state management.

After every candidate turn the reasoning model reads the recent conversation
and returns a structured ``InterviewState``: phase, topic, depth, inferred
candidate level and the next action (including a targeted knowledge-base
query). ``generate_next_question`` then turns that state into one question.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from mock_interviewer.ai.prompts.interview_prompts import NEXT_QUESTION_PROMPT, STATE_ANALYSIS_PROMPT
from mock_interviewer.models.interview_state import InterviewState, default_interview_state
from mock_interviewer.utils.constants import (
    DEFAULT_CHAT_TEMPERATURE,
    DEFAULT_HISTORY_WINDOW,
    DEFAULT_QUESTION_MAX_TOKENS,
    DEFAULT_QUESTION_WINDOW,
    ERROR_EMPTY_RESPONSE,
    FALLBACK_NEXT_QUESTION,
    JD_TRUNCATE_CHARS,
    STATE_ANALYSIS_TEMPERATURE,
)
from mock_interviewer.utils.json_utils import extract_json, message_text
from mock_interviewer.utils.llm import create_chat_model
from mock_interviewer.utils.profiling import async_timed_function
from mock_interviewer.utils.transcript import format_recent_turns, to_langchain_messages

logger = logging.getLogger(__name__)


def build_state_analysis_prompt(
    pack_level: str,
    pack_role: str,
    jd_text: Optional[str] = None,
    previous_state: Optional[InterviewState] = None,
) -> str:
    """Fill the state analysis template for one session."""
    jd_line = f"- Job Description: {jd_text[:JD_TRUNCATE_CHARS]}..." if jd_text else ""
    previous = (
        json.dumps(previous_state.to_json_dict(), indent=2) if previous_state else "None (first turn)"
    )
    return STATE_ANALYSIS_PROMPT.format(
        pack_level=pack_level,
        pack_role=pack_role,
        jd_line=jd_line,
        previous_state=previous,
    )


@async_timed_function()
async def analyze_interview_state(
    history: List[Dict[str, Any]],
    pack_level: str,
    pack_role: str,
    jd_text: Optional[str] = None,
    previous_state: Optional[InterviewState] = None,
) -> InterviewState:
    """
    Analyze the candidate's last turn and decide the next interview action.

    Args:
        history: Conversation as role/content dictionaries
        pack_level: Interview pack level, e.g. "Senior"
        pack_role: Interview pack role, e.g. "DevOps Engineer"
        jd_text: Raw job description, if any
        previous_state: State returned for the previous turn

    Returns:
        The analysed state, or the default state when the model output is unusable

    Raises:
        ValueError: If the model returns an empty response
    """
    system_prompt = build_state_analysis_prompt(pack_level, pack_role, jd_text, previous_state)
    llm = create_chat_model(temperature=STATE_ANALYSIS_TEMPERATURE)
    messages = [SystemMessage(content=system_prompt)] + to_langchain_messages(history[-DEFAULT_HISTORY_WINDOW:])
    if len(messages) == 1:
        # Gemini rejects a conversation with only a system message
        messages.append(HumanMessage(content="Analyze the interview so far."))

    response = await llm.ainvoke(messages)
    content = message_text(response)
    if not content.strip():
        raise ValueError(f"{ERROR_EMPTY_RESPONSE} for state analysis")

    try:
        state = InterviewState.model_validate(extract_json(content))
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse LLM state response: {e}")
        return default_interview_state()

    logger.info(
        f"Interview state: phase={state.phase}, topic={state.current_topic}, "
        f"depth={state.question_depth}, action={state.next_action.action}"
    )
    return state


@async_timed_function()
async def generate_next_question(
    state: InterviewState,
    history: List[Dict[str, Any]],
    system_prompt: str,
) -> str:
    """
    Generate the next interviewer question from an analysed state.

    Args:
        state: Output of ``analyze_interview_state``
        history: Conversation as role/content dictionaries
        system_prompt: Interviewer system prompt for the session

    Returns:
        Question text, or a generic follow-up when the model gives nothing
    """
    question_prompt = NEXT_QUESTION_PROMPT.format(
        state=json.dumps(state.to_json_dict(), indent=2),
        window=DEFAULT_QUESTION_WINDOW,
        recent_turns=format_recent_turns(history, DEFAULT_QUESTION_WINDOW),
        question_type=state.next_action.question_type,
        question_depth=state.question_depth,
    )

    try:
        llm = create_chat_model(temperature=DEFAULT_CHAT_TEMPERATURE, max_tokens=DEFAULT_QUESTION_MAX_TOKENS)
        response = await llm.ainvoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=question_prompt),
        ])
        question = message_text(response).strip()
    except Exception as e:
        logger.error(f"Error generating next question: {e}")
        return FALLBACK_NEXT_QUESTION

    return question or FALLBACK_NEXT_QUESTION
