"""
Unit tests for the topic feedback pipeline.
"""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage

from mock_interviewer.ai.prompts.interview_prompts import (
    TOPIC_EXTRACTION_SYSTEM_PROMPT,
    TOPIC_SCORING_SYSTEM_PROMPT,
)
from mock_interviewer.tools.feedback_pipeline import generate_feedback_pipeline

TRANSCRIPT = [
    {"role": "assistant", "content": "How do you store Terraform state?"},
    {"role": "user", "content": "Locally, and we commit it."},
]


def _routing_llm(plan_response=None):
    """Answer each pipeline stage by its system prompt."""
    async def respond(messages):
        system, human = messages[0].content, messages[1].content
        if system == TOPIC_EXTRACTION_SYSTEM_PROMPT:
            payload = {"topics": [{"name": "Kubernetes"}, {"name": "Terraform", "category": "IaC"}]}
        elif system == TOPIC_SCORING_SYSTEM_PROMPT:
            if '"Kubernetes"' in human:
                payload = {"overallScore": 8, "keyStrengths": ["Debugging order"]}
            else:
                payload = {"overallScore": 5, "keyWeaknesses": ["Commits state to Git"]}
        elif plan_response is not None:
            return AIMessage(content=plan_response)
        else:
            payload = {"weeks": 1, "weeklyBreakdown": [{"week": 1, "focus": "Terraform remote state"}]}
        return AIMessage(content=json.dumps(payload))

    llm = MagicMock()
    llm.ainvoke = AsyncMock(side_effect=respond)
    return llm


class TestFeedbackPipeline:
    @pytest.mark.asyncio
    async def test_full_pipeline(self):
        llm = _routing_llm()
        with patch("mock_interviewer.tools.feedback_pipeline.create_chat_model", return_value=llm):
            report = await generate_feedback_pipeline(TRANSCRIPT)

        assert [t.topic for t in report.topics] == ["Kubernetes", "Terraform"]
        assert report.overall_score == 65
        assert report.upskilling_plan.weekly_breakdown[0].focus == "Terraform remote state"
        plan_prompt = llm.ainvoke.call_args_list[-1].args[0][1].content
        assert "Terraform (5/10): Commits state to Git" in plan_prompt
        assert "Kubernetes (8" not in plan_prompt

    @pytest.mark.asyncio
    async def test_plan_failure_uses_fallback(self):
        with patch("mock_interviewer.tools.feedback_pipeline.create_chat_model",
                   return_value=_routing_llm(plan_response="not json")):
            report = await generate_feedback_pipeline(TRANSCRIPT)
        assert report.upskilling_plan.weeks == 2
        assert report.upskilling_plan.weekly_breakdown[0].focus == "General DevOps practice"

    @pytest.mark.asyncio
    async def test_extraction_failure_gives_empty_report(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))
        with patch("mock_interviewer.tools.feedback_pipeline.create_chat_model", return_value=llm):
            report = await generate_feedback_pipeline(TRANSCRIPT)
        assert report.topics == []
        assert report.overall_score == 0
        assert report.timestamp
