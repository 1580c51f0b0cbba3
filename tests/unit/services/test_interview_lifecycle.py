"""
Unit tests for the interview lifecycle service.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mock_interviewer.core.interview_brain import INTRO_QUESTION
from mock_interviewer.models.evaluation import DetailedUpskillingPlan, FeedbackReport, TopicScore, WeeklyPlan
from mock_interviewer.models.job_description import ParsedJD
from mock_interviewer.services.interview_lifecycle import (
    SessionNotFoundError,
    candidate_background,
    finish_interview,
    get_or_build_system_prompt,
    process_call_report,
    process_text_turn,
    start_interview,
)
from mock_interviewer.tools.scoring import normalize_scored
from mock_interviewer.utils.constants import SessionStatus, Speaker

LIFECYCLE = "mock_interviewer.services.interview_lifecycle"

CALL_TRANSCRIPT = [
    {"role": "system", "content": "You are an interviewer."},
    {"role": "assistant", "content": "Tell me about yourself."},
    {"role": "user", "content": "Six years on EKS."},
    {"role": "assistant", "content": "How do you handle node upgrades?"},
    {"role": "user", "content": "Surge node groups with PDBs."},
]


@pytest.fixture
def session():
    return {
        "session_id": "s1",
        "user_id": "user-1",
        "pack_id": "devops-senior",
        "status": SessionStatus.PENDING,
        "is_practice": False,
        "user_skills": ["Terraform"],
    }


@pytest.fixture
def repo(session):
    repo = MagicMock()
    repo.get_session.return_value = session
    repo.get_turns.return_value = []
    repo.get_completed_sessions.return_value = []
    repo.get_interviewer_questions.return_value = []
    repo.get_previous_result.return_value = None
    return repo


class TestStartInterview:
    """Test start_interview."""

    @pytest.mark.asyncio
    async def test_start_with_jd(self, repo):
        with patch(f"{LIFECYCLE}.parse_job_description",
                   AsyncMock(return_value=ParsedJD(role="SRE", level="Senior"))) as parse:
            session = await start_interview(repo, "s1", jd_text="Senior SRE, EKS and Terraform")

        parse.assert_awaited_once_with("Senior SRE, EKS and Terraform")
        assert session["status"] == SessionStatus.IN_PROGRESS
        assert session["jd_parsed"]["role"] == "SRE"
        fields = repo.update_session.call_args.args[1]
        assert fields["jd_raw"] == "Senior SRE, EKS and Terraform"
        assert fields["system_prompt"] is None

    @pytest.mark.asyncio
    async def test_start_without_jd(self, repo):
        with patch(f"{LIFECYCLE}.parse_job_description", AsyncMock()) as parse:
            session = await start_interview(repo, "s1", jd_text="   ", is_practice=True)
        parse.assert_not_awaited()
        assert session["jd_parsed"] is None
        assert session["is_practice"] is True

    @pytest.mark.asyncio
    async def test_unknown_session(self, repo):
        repo.get_session.return_value = None
        with pytest.raises(SessionNotFoundError):
            await start_interview(repo, "missing")


class TestSystemPrompt:
    def test_cached_prompt_is_reused(self, repo, session):
        session["system_prompt"] = "cached"
        assert get_or_build_system_prompt(repo, session) == "cached"
        repo.update_session.assert_not_called()

    def test_prompt_is_built_and_cached(self, repo, session):
        prompt = get_or_build_system_prompt(repo, session)
        assert prompt
        repo.update_session.assert_called_once_with("s1", {"system_prompt": prompt})
        repo.get_completed_sessions.assert_called_once()

    def test_candidate_background(self, session, analysed_state_json):
        assert candidate_background({"user_skills": []}) is None
        session["interview_state"] = analysed_state_json
        background = candidate_background(session)
        assert background.skills == ["Terraform", "EKS"]
        assert background.experience_years == 6
        assert background.level == "senior"


class TestFinishInterview:
    @pytest.mark.asyncio
    async def test_practice_is_not_scored(self, repo, session):
        session["is_practice"] = True
        with patch(f"{LIFECYCLE}.score_interview", AsyncMock()) as score:
            assert await finish_interview(repo, "s1") is None
        score.assert_not_awaited()
        assert repo.update_session.call_args.args[1]["status"] == SessionStatus.COMPLETED
        repo.save_result.assert_not_called()

    @pytest.mark.asyncio
    async def test_scored_interview(self, repo):
        score = normalize_scored({
            "technicalCompetencies": {"Terraform": 8},
            "softSkills": {"behavioral": 8, "thinking": 8, "communication": 8, "problemSolving": 8},
            "strengths": ["Remote state"],
        })
        repo.get_previous_result.return_value = {"overall_score": 50}
        with patch(f"{LIFECYCLE}.score_interview", AsyncMock(return_value=score)) as score_mock:
            result = await finish_interview(repo, "s1")

        assert score_mock.await_args.kwargs["previous_result"] == {"overall_score": 50}
        assert score_mock.await_args.kwargs["pack_info"]["level"] == "Senior"
        assert result["overall_score"] == 80
        assert result["certificate_eligible"] is True
        assert result["competency_scores"]["Terraform"] == 8
        repo.save_result.assert_called_once_with("s1", result)
        assert repo.update_session.call_args.args[1]["status"] == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_scoring_error_propagates(self, repo):
        with patch(f"{LIFECYCLE}.score_interview", AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(RuntimeError):
                await finish_interview(repo, "s1")
        repo.update_session.assert_not_called()


class TestCallReport:
    @pytest.mark.asyncio
    async def test_short_call_is_abandoned(self, repo):
        with patch(f"{LIFECYCLE}.generate_feedback_pipeline", AsyncMock()) as pipeline:
            status = await process_call_report(repo, "s1", CALL_TRANSCRIPT, duration_seconds=120)
        assert status == SessionStatus.ABANDONED
        pipeline.assert_not_awaited()
        assert repo.update_session.call_args.args[1]["status"] == SessionStatus.ABANDONED

    @pytest.mark.asyncio
    async def test_one_answer_is_abandoned(self, repo):
        status = await process_call_report(repo, "s1", CALL_TRANSCRIPT[:3], duration_seconds=900)
        assert status == SessionStatus.ABANDONED

    @pytest.mark.asyncio
    async def test_full_call_is_scored(self, repo):
        report = FeedbackReport(
            topics=[
                TopicScore(topic="Kubernetes", overall_score=8, key_strengths=["Upgrades"]),
                TopicScore(topic="Terraform", overall_score=6, key_weaknesses=["State locking"]),
            ],
            overall_score=70,
            upskilling_plan=DetailedUpskillingPlan(weeks=1, weekly_breakdown=[WeeklyPlan(week=1, focus="State")]),
            timestamp="2026-03-01T12:00:00+00:00",
        )
        with patch(f"{LIFECYCLE}.generate_feedback_pipeline", AsyncMock(return_value=report)) as pipeline:
            status = await process_call_report(repo, "s1", CALL_TRANSCRIPT, duration_seconds=900)

        assert status == SessionStatus.COMPLETED
        assert all(m["role"] != "system" for m in pipeline.await_args.args[0])
        saved = repo.save_result.call_args.args[1]
        assert saved["competency_scores"] == {"Kubernetes": 8, "Terraform": 6}
        assert saved["improvements"] == ["State locking"]
        assert saved["upskilling_plan"] == {"weeks": 1, "focus_areas": ["State"]}
        assert saved["certificate_eligible"] is True

    @pytest.mark.asyncio
    async def test_feedback_failure_still_completes(self, repo):
        with patch(f"{LIFECYCLE}.generate_feedback_pipeline", AsyncMock(side_effect=RuntimeError("quota"))):
            status = await process_call_report(repo, "s1", CALL_TRANSCRIPT, duration_seconds=900)
        assert status == SessionStatus.COMPLETED
        repo.save_result.assert_not_called()


class TestTextTurns:
    def test_first_turn_asks_for_introduction(self, repo):
        reply = process_text_turn(repo, "s1")
        assert reply == {"question": INTRO_QUESTION, "topic": "introduction", "depth": 0, "phase": "introduction"}
        args, kwargs = repo.add_turn.call_args
        assert args[1] == Speaker.INTERVIEWER
        assert kwargs["section"] is None

    def test_answer_moves_into_topics(self, repo, session):
        process_text_turn(repo, "s1")
        session["brain_state"] = repo.update_session.call_args.args[1]["brain_state"]
        repo.add_turn.reset_mock()

        reply = process_text_turn(repo, "s1", "  I work with Kubernetes at a startup, 4 years in.  ")

        assert reply["topic"] == "kubernetes"
        assert reply["phase"] == "topics"
        assert reply["depth"] == 0
        user_call, question_call = repo.add_turn.call_args_list
        assert user_call.args == ("s1", Speaker.USER, "I work with Kubernetes at a startup, 4 years in.")
        assert question_call.kwargs["section"] == "kubernetes"
        stored = repo.update_session.call_args.args[1]["brain_state"]
        assert stored["candidate_intro"]["technologies"] == ["kubernetes"]
