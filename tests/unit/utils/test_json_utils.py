"""
Unit tests for LLM JSON extraction.
"""
import pytest
from langchain_core.messages import AIMessage

from mock_interviewer.utils.json_utils import extract_json, message_text


class TestExtractJson:
    """Test extract_json."""

    def test_plain_object(self):
        assert extract_json('{"score": 7}') == {"score": 7}

    def test_fenced_block(self):
        content = 'Here is the result:\n```json\n{"topics": ["Kubernetes"]}\n```\nDone.'
        assert extract_json(content) == {"topics": ["Kubernetes"]}

    def test_object_surrounded_by_prose(self):
        content = 'Sure! {"phase": "technical", "questionDepth": 2} Let me know.'
        assert extract_json(content)["questionDepth"] == 2

    def test_empty_response_raises(self):
        with pytest.raises(ValueError):
            extract_json("   ")

    def test_no_json_raises(self):
        with pytest.raises(ValueError, match="No JSON object"):
            extract_json("I cannot evaluate this transcript.")

    def test_array_is_not_an_object(self):
        with pytest.raises(ValueError):
            extract_json("[1, 2, 3]")


class TestMessageText:
    """Test message_text."""

    def test_ai_message(self):
        assert message_text(AIMessage(content="Hello")) == "Hello"

    def test_content_parts(self):
        message = AIMessage(content=[{"type": "text", "text": "Hel"}, {"type": "text", "text": "lo"}])
        assert message_text(message) == "Hello"

    def test_raw_string(self):
        assert message_text("plain") == "plain"

    def test_none_content(self):
        assert message_text(None) == ""
