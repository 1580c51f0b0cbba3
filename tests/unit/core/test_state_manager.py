"""
Unit tests for the LLM interview state manager.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from mock_interviewer.core.state_manager import (
    analyze_interview_state,
    build_state_analysis_prompt,
    generate_next_question,
)
from mock_interviewer.models.interview_state import InterviewState, default_interview_state
from mock_interviewer.utils.constants import FALLBACK_NEXT_QUESTION

HISTORY = [
    {"role": "assistant", "content": "Tell me about yourself."},
    {"role": "user", "content": "Six years on EKS and Terraform."},
]


class TestBuildStateAnalysisPrompt:
    def test_first_turn(self):
        prompt = build_state_analysis_prompt("Senior", "DevOps Engineer")
        assert "None (first turn)" in prompt
        assert "- Job Description" not in prompt

    def test_jd_is_truncated(self):
        prompt = build_state_analysis_prompt("Senior", "DevOps Engineer", jd_text="x" * 800)
        assert "x" * 500 + "..." in prompt
        assert "x" * 501 not in prompt


class TestAnalyzeInterviewState:
    """Test analyze_interview_state."""

    @pytest.mark.asyncio
    async def test_parses_state(self, fake_llm, analysed_state_json):
        llm = fake_llm(analysed_state_json)
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm) as factory:
            state = await analyze_interview_state(HISTORY, "Senior", "DevOps Engineer")

        assert state.next_action.rag_query == "EKS ingress 502 troubleshooting"
        assert state.candidate_level == "senior"
        factory.assert_called_once_with(temperature=0.3)
        messages = llm.ainvoke.call_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert len(messages) == 3

    @pytest.mark.asyncio
    async def test_history_window(self, fake_llm, analysed_state_json):
        llm = fake_llm(analysed_state_json)
        history = [{"role": "user", "content": str(i)} for i in range(15)]
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm):
            await analyze_interview_state(history, "Senior", "SRE")
        messages = llm.ainvoke.call_args.args[0]
        assert len(messages) == 11
        assert messages[1].content == "5"

    @pytest.mark.asyncio
    async def test_empty_history_gets_a_human_turn(self, fake_llm, analysed_state_json):
        llm = fake_llm(analysed_state_json)
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm):
            await analyze_interview_state([], "Entry", "DevOps Engineer")
        messages = llm.ainvoke.call_args.args[0]
        assert isinstance(messages[-1], HumanMessage)

    @pytest.mark.asyncio
    async def test_invalid_output_falls_back_to_default(self, fake_llm):
        with patch("mock_interviewer.core.state_manager.create_chat_model",
                   return_value=fake_llm({"phase": "lunch", "questionDepth": 9})):
            state = await analyze_interview_state(HISTORY, "Senior", "SRE")
        assert state == default_interview_state()

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, fake_llm):
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=fake_llm("  ")):
            with pytest.raises(ValueError):
                await analyze_interview_state(HISTORY, "Senior", "SRE")


class TestGenerateNextQuestion:
    @pytest.fixture
    def state(self, analysed_state_json):
        return InterviewState.model_validate(analysed_state_json)

    @pytest.mark.asyncio
    async def test_returns_model_question(self, fake_llm, state):
        llm = fake_llm("  What happens when the ingress controller itself fails?  ")
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm) as factory:
            question = await generate_next_question(state, HISTORY, "system prompt")
        assert question == "What happens when the ingress controller itself fails?"
        factory.assert_called_once_with(temperature=0.7, max_tokens=150)

    @pytest.mark.asyncio
    async def test_model_error_falls_back(self, state):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm):
            assert await generate_next_question(state, HISTORY, "prompt") == FALLBACK_NEXT_QUESTION

    @pytest.mark.asyncio
    async def test_empty_output_falls_back(self, state):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content=""))
        with patch("mock_interviewer.core.state_manager.create_chat_model", return_value=llm):
            assert await generate_next_question(state, HISTORY, "prompt") == FALLBACK_NEXT_QUESTION
