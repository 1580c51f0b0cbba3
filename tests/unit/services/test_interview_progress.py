"""
Unit tests for live interview progress.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from mock_interviewer.services.interview_progress import get_interview_progress, phase_for_elapsed

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.get_turns.return_value = []
    return repo


class TestInterviewProgress:
    def test_phase_thresholds(self):
        assert phase_for_elapsed(0) == "introduction"
        assert phase_for_elapsed(5) == "topics"
        assert phase_for_elapsed(50) == "wrapup"

    def test_topics_phase(self, repo):
        repo.get_session.return_value = {"pack_id": "devops-senior", "started_at": NOW - timedelta(minutes=10)}
        repo.get_turns.return_value = [
            {"section": "kubernetes"},
            {"section": None},
            {"section": "cicd"},
            {"section": "kubernetes"},
        ]

        progress = get_interview_progress(repo, "s1", now=NOW)

        assert progress["phase"] == "topics"
        assert progress["topics_covered"] == ["kubernetes", "cicd"]
        assert progress["current_topic"] == {"id": "cicd", "name": "CI/CD Tools", "index": 2, "total": 8}
        assert "kubernetes" not in progress["topics_remaining"]
        assert progress["elapsed_minutes"] == 10
        assert progress["remaining_minutes"] == 10
        assert progress["progress_percentage"] == 50

    def test_introduction_with_naive_start(self, repo):
        repo.get_session.return_value = {
            "pack_id": "devops-senior",
            "started_at": None,
            "created_at": (NOW - timedelta(minutes=2)).replace(tzinfo=None),
        }
        progress = get_interview_progress(repo, "s1", now=NOW)
        assert progress["phase"] == "introduction"
        assert progress["current_topic"] is None
        assert progress["elapsed_minutes"] == 2

    def test_progress_is_capped(self, repo):
        repo.get_session.return_value = {"pack_id": "devops-senior", "started_at": NOW - timedelta(minutes=45)}
        progress = get_interview_progress(repo, "s1", now=NOW)
        assert progress["remaining_minutes"] == 0
        assert progress["progress_percentage"] == 100
        assert progress["current_topic"]["id"] == "kubernetes"

    def test_unknown_session(self, repo):
        repo.get_session.return_value = None
        with pytest.raises(ValueError):
            get_interview_progress(repo, "missing")

    def test_half_percent_rounds_up(self, repo, monkeypatch):
        monkeypatch.setattr("mock_interviewer.services.interview_progress.INTERVIEW_DURATION_MINUTES", 8)
        repo.get_session.return_value = {"pack_id": "devops-senior", "started_at": NOW - timedelta(minutes=1)}
        progress = get_interview_progress(repo, "s1", now=NOW)
        assert progress["progress_percentage"] == 13
