"""
Integration tests for the command-line interface.

The model, vector store and scoring calls are patched so the commands run
end to end without network access.
"""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from mock_interviewer import __version__
from mock_interviewer.cli import cli
from mock_interviewer.models.job_description import ParsedJD
from mock_interviewer.models.interview_state import default_interview_state
from mock_interviewer.tools.scoring import fallback_interview_score


@pytest.fixture
def runner():
    return CliRunner()


def test_version_is_set():
    assert __version__ == "0.1.0"


def test_simulate_unknown_pack(runner):
    result = runner.invoke(cli, ["simulate", "--pack-id", "no-such-pack"])
    assert result.exit_code == 2
    assert "Unknown pack" in result.output


def test_simulate_runs_turns_and_scores(runner):
    with patch("mock_interviewer.cli.analyze_interview_state",
               AsyncMock(return_value=default_interview_state())) as analyze, \
            patch("mock_interviewer.cli.generate_next_question",
                  AsyncMock(return_value="How do you manage Terraform state?")), \
            patch("mock_interviewer.cli._mock_candidate_answer",
                  AsyncMock(return_value="Remote backend in S3 with DynamoDB locking.")), \
            patch("mock_interviewer.cli.score_interview",
                  AsyncMock(return_value=fallback_interview_score())) as score:
        result = runner.invoke(cli, ["simulate", "--pack-id", "devops-senior", "--turns", "2"])

    assert result.exit_code == 0, result.output
    assert result.output.count("INTERVIEWER: How do you manage Terraform state?") == 2
    assert analyze.await_count == 2
    transcript = score.await_args.args[0]
    assert [m["role"] for m in transcript] == ["assistant", "user", "assistant", "user"]
    assert score.await_args.kwargs["pack_info"]["level"] == "Senior"
    assert json.loads(result.output[result.output.index("{"):])["overallScore"] == 70


def test_simulate_with_jd_file_parses_it(runner, tmp_path):
    jd_file = tmp_path / "jd.txt"
    jd_file.write_text("Senior Platform Engineer. Terraform and EKS required.", encoding="utf-8")
    parsed = ParsedJD(role="Platform Engineer", level="Senior", tools=["Terraform", "EKS"])
    with patch("mock_interviewer.cli.parse_job_description", AsyncMock(return_value=parsed)) as parse, \
            patch("mock_interviewer.cli.analyze_interview_state",
                  AsyncMock(return_value=default_interview_state())), \
            patch("mock_interviewer.cli.generate_next_question",
                  AsyncMock(return_value="How do you structure Terraform modules?")) as ask, \
            patch("mock_interviewer.cli._mock_candidate_answer", AsyncMock(return_value="By environment.")), \
            patch("mock_interviewer.cli.score_interview", AsyncMock(return_value=fallback_interview_score())):
        result = runner.invoke(cli, ["simulate", "--turns", "1", "--jd-file", str(jd_file)])

    assert result.exit_code == 0, result.output
    parse.assert_awaited_once_with("Senior Platform Engineer. Terraform and EKS required.")
    assert "Parsed JD: Platform Engineer (Senior), tools: Terraform, EKS" in result.output
    system_prompt = ask.await_args.args[2]
    assert "JD PROVIDED - USE AS PRIMARY SOURCE" in system_prompt
    assert "MANDATORY TECHNOLOGIES: Terraform, EKS" in system_prompt

def test_ingest(runner, tmp_path):
    (tmp_path / "notes.md").write_text("# Notes\n\nReadiness probes gate traffic.", encoding="utf-8")
    kb = MagicMock()
    kb.add_documents.return_value = 1
    with patch("mock_interviewer.cli.KnowledgeBase", return_value=kb):
        result = runner.invoke(cli, ["ingest", "--data-dir", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Ingested 1/1 chunks" in result.output
    documents = kb.add_documents.call_args.args[0]
    assert documents[0].metadata["title"] == "Notes"


def test_coverage_summary(runner):
    report = {
        "summary": {
            "total_topics": 2,
            "covered_topics": 1,
            "coverage_percent": 50.0,
            "breakdown": {"id_matches": 1, "semantic_matches": 0, "missing": 1},
        },
        "details": [
            {"topic": "Pod Lifecycle and States", "status": "id"},
            {"topic": "Service Mesh", "status": "missing"},
        ],
    }
    kb = MagicMock()
    kb.check_coverage = AsyncMock(return_value=report)
    with patch("mock_interviewer.cli.KnowledgeBase", return_value=kb):
        result = runner.invoke(cli, ["coverage"])

    assert result.exit_code == 0, result.output
    assert "Coverage: 1/2 (50.0%)" in result.output
    assert "[missing] Service Mesh" in result.output
    assert "Pod Lifecycle" not in result.output
