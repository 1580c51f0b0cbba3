"""
Unit tests for transcript helpers.
"""
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from mock_interviewer.utils.constants import Speaker
from mock_interviewer.utils.transcript import (
    count_user_turns,
    format_numbered_transcript,
    format_recent_turns,
    last_user_message,
    non_system_messages,
    to_langchain_messages,
    turns_to_messages,
)


class TestTranscript:
    """Test transcript conversions."""

    def test_to_langchain_messages(self):
        messages = to_langchain_messages([
            {"role": "system", "content": "You are an interviewer."},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
            {"role": "bot", "content": "Next question"},
            {"role": "tool", "content": "ignored"},
        ])
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, AIMessage]

    def test_turns_to_messages(self):
        turns = [
            {"speaker": Speaker.INTERVIEWER, "text": "Tell me about yourself."},
            {"speaker": Speaker.USER, "text": "I run EKS clusters."},
        ]
        assert turns_to_messages(turns) == [
            {"role": "assistant", "content": "Tell me about yourself."},
            {"role": "user", "content": "I run EKS clusters."},
        ]

    def test_non_system_and_last_user(self):
        messages = [
            {"role": "system", "content": "prompt"},
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "question"},
            {"role": "user", "content": "second"},
            {"role": "assistant", "content": "follow-up"},
        ]
        assert len(non_system_messages(messages)) == 4
        assert last_user_message(messages) == "second"
        assert count_user_turns(messages) == 2

    def test_last_user_message_empty(self):
        assert last_user_message([{"role": "assistant", "content": "hi"}]) == ""

    def test_format_numbered_transcript(self):
        text = format_numbered_transcript([
            {"role": "assistant", "content": "Q1"},
            {"role": "user", "content": "A1"},
        ])
        assert text == "1. ASSISTANT: Q1\n\n2. USER: A1"

    def test_format_recent_turns(self):
        messages = [{"role": "user", "content": str(i)} for i in range(5)]
        assert format_recent_turns(messages, 2) == "user: 3\nuser: 4"
