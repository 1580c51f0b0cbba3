"""
Transcript utilities for the Mock Interviewer.

Conversations move through the system as lists of ``{"role", "content"}``
dictionaries (the OpenAI chat shape). This module converts them to and from
LangChain messages and stored interview turns, and renders them for prompts.
"""
import logging
from typing import Any, Dict, Iterable, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from mock_interviewer.utils.constants import Speaker

logger = logging.getLogger(__name__)

def to_langchain_messages(messages: Iterable[Dict[str, Any]]) -> List[BaseMessage]:
    """
    Convert chat dictionaries into LangChain messages.

    Args:
        messages: Dictionaries with ``role`` and ``content`` keys

    Returns:
        List of LangChain messages (unknown roles are skipped)
    """
    converted: List[BaseMessage] = []
    for message in messages:
        role = message.get("role")
        content = message.get("content") or ""
        if role == "system":
            converted.append(SystemMessage(content=content))
        elif role == "user":
            converted.append(HumanMessage(content=content))
        elif role in ("assistant", "bot"):
            converted.append(AIMessage(content=content))
        else:
            logger.debug(f"Skipping message with unsupported role: {role}")
    return converted

def turns_to_messages(turns: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Convert stored interview turns into chat dictionaries."""
    return [
        {
            "role": "assistant" if turn.get("speaker") == Speaker.INTERVIEWER else "user",
            "content": turn.get("text", ""),
        }
        for turn in turns
    ]

def non_system_messages(messages: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop system messages from a conversation."""
    return [m for m in messages if m.get("role") != "system"]

def last_user_message(messages: List[Dict[str, Any]]) -> str:
    """Return the content of the most recent user message, or an empty string."""
    for message in reversed(messages):
        if message.get("role") == "user":
            return message.get("content") or ""
    return ""

def count_user_turns(messages: Iterable[Dict[str, Any]]) -> int:
    """Count the candidate messages in a conversation."""
    return sum(1 for m in messages if m.get("role") == "user")

def format_numbered_transcript(messages: Iterable[Dict[str, Any]]) -> str:
    """
    Render a conversation as a numbered transcript for evaluation prompts.

    Example:
        1. ASSISTANT: Tell me about yourself.

        2. USER: I'm a DevOps engineer...
    """
    return "\n\n".join(
        f"{idx}. {str(m.get('role', '')).upper()}: {m.get('content', '')}"
        for idx, m in enumerate(messages, start=1)
    )

def format_recent_turns(messages: List[Dict[str, Any]], limit: int) -> str:
    """Render the last ``limit`` messages as ``role: content`` lines."""
    return "\n".join(f"{m.get('role')}: {m.get('content')}" for m in messages[-limit:])
