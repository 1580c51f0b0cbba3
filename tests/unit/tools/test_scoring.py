"""
Unit tests for interview scoring.
"""
from unittest.mock import patch

import pytest

from mock_interviewer.models.evaluation import TECHNICAL_COMPETENCIES
from mock_interviewer.tools.scoring import (
    build_retake_context,
    clamp_score,
    competency_scores,
    normalize_scored,
    score_interview,
)

TRANSCRIPT = [
    {"role": "assistant", "content": "How would you debug a CrashLoopBackOff?"},
    {"role": "user", "content": "kubectl describe, then logs --previous, then events."},
    {"role": "assistant", "content": "And if the logs are empty?"},
    {"role": "user", "content": "Check the entrypoint and resource limits for OOMKilled."},
]

RAW_SCORE = {
    "technicalCompetencies": {"Terraform": 12, "Helm Charts": 6},
    "softSkills": {"behavioral": 8, "thinking": 8, "communication": 8, "problemSolving": 8},
    "overallScore": 12,
    "strengths": ["Clear debugging order"],
    "feedback": "Solid.",
}


class TestNormalizeScored:
    def test_clamp(self):
        assert clamp_score(12, "x") == 10.0
        assert clamp_score(-1, "x") == 0.0
        assert clamp_score("7.5", "x") == 7.5

    def test_overall_is_recomputed(self):
        score = normalize_scored(RAW_SCORE)
        assert score.technical_competencies == {"Terraform": 10.0, "Helm Charts": 6.0}
        assert score.overall_score == 80
        assert score.seniority_gap.tool_mastery == "senior"
        assert score.seniority_gap.communication == "senior"

    def test_competency_scores(self):
        result = competency_scores(normalize_scored(RAW_SCORE))
        assert result["Terraform"] == 10.0
        assert result["Problem Solving"] == 8
        assert result["Architectural Reasoning"] == 0
        assert result["_seniority_gap"]["toolMastery"] == "senior"

    def test_retake_context(self):
        context = build_retake_context({"overall_score": 55, "improvements": "Terraform state"})
        assert "Previous Overall Score: 55" in context
        assert "Terraform state" in context
        assert build_retake_context(None) == ""
        assert build_retake_context({"improvements": []}) == ""


class TestScoreInterview:
    """Test score_interview."""

    @pytest.mark.asyncio
    async def test_incomplete_interview_skips_model(self):
        with patch("mock_interviewer.tools.scoring.create_chat_model") as factory:
            score = await score_interview(TRANSCRIPT[:2])
        factory.assert_not_called()
        assert score.overall_score == 0
        assert "only 1 user response(s)" in score.feedback
        assert set(score.technical_competencies) == set(TECHNICAL_COMPETENCIES)

    @pytest.mark.asyncio
    async def test_scores_with_model(self, fake_llm):
        llm = fake_llm(RAW_SCORE)
        with patch("mock_interviewer.tools.scoring.create_chat_model", return_value=llm):
            score = await score_interview(
                TRANSCRIPT,
                pack_info={"role": "SRE", "level": "Senior", "title": "SRE Deep Dive"},
                previous_result={"overall_score": 55, "improvements": ["Helm"]},
            )
        assert score.overall_score == 80
        prompt = llm.ainvoke.call_args.args[0][1].content
        assert "SRE - Senior" in prompt
        assert "Previous Overall Score: 55" in prompt
        assert "4. USER: Check the entrypoint" in prompt

    @pytest.mark.asyncio
    async def test_model_failure_returns_neutral_score(self, fake_llm):
        with patch("mock_interviewer.tools.scoring.create_chat_model", return_value=fake_llm("oops")):
            score = await score_interview(TRANSCRIPT)
        assert score.overall_score == 70
        assert score.strengths == ["Participated in interview"]
