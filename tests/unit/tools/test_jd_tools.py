"""
Unit tests for job description parsing and gap analysis.
"""
from unittest.mock import patch

import pytest

from mock_interviewer.models.job_description import CandidateBackground, ParsedJD
from mock_interviewer.tools.jd_gap_analysis import analyze_jd_gaps, generate_gap_analysis_instructions
from mock_interviewer.tools.jd_parser import extract_keywords_fallback, parse_job_description
from mock_interviewer.utils.constants import NO_GAPS_INSTRUCTIONS

JD_TEXT = "We need AWS, Kubernetes and Terraform experience."


class TestParseJobDescription:
    """Test parse_job_description."""

    def test_keyword_fallback(self):
        assert extract_keywords_fallback(JD_TEXT) == ["AWS", "Kubernetes", "Terraform"]

    @pytest.mark.asyncio
    async def test_parses_model_output(self, fake_llm):
        llm = fake_llm({
            "role": "Site Reliability Engineer",
            "level": "Senior",
            "requiredSkills": ["Kubernetes"],
            "tools": ["Terraform", "AWS"],
            "experienceYears": 5,
            "remote": None,
            "teamSize": "",
        })
        with patch("mock_interviewer.tools.jd_parser.create_chat_model", return_value=llm) as factory:
            parsed = await parse_job_description(JD_TEXT)

        factory.assert_called_once_with(temperature=0.3, fast=True)
        assert parsed.role == "Site Reliability Engineer"
        assert parsed.required_skills == ["Kubernetes"]
        assert parsed.experience_years == 5
        assert parsed.team_size == "Unknown"
        assert parsed.remote is None

    @pytest.mark.asyncio
    async def test_invalid_output_uses_keywords(self, fake_llm):
        with patch("mock_interviewer.tools.jd_parser.create_chat_model", return_value=fake_llm("no json here")):
            parsed = await parse_job_description(JD_TEXT)
        assert parsed.role == "Software Engineer"
        assert parsed.level == "Mid"
        assert parsed.keywords == ["AWS", "Kubernetes", "Terraform"]


class TestGapAnalysis:
    @pytest.fixture
    def jd(self):
        return ParsedJD(
            required_skills=["Kubernetes", "Terraform", "Python"],
            tools=["ArgoCD", "Kubernetes"],
            responsibilities=["Own disaster recovery runbooks"],
            experience_years=8,
            company_stage="Enterprise",
        )

    @pytest.fixture
    def candidate(self):
        return CandidateBackground(skills=["Kubernetes"], technologies=["kubernetes"], experience_years=5)

    def test_pressure_points(self, jd, candidate):
        gap = analyze_jd_gaps(jd, candidate)
        assert gap.missing_required_skills == ["Terraform", "Python"]
        assert gap.missing_technologies == ["ArgoCD"]
        assert gap.critical_gaps == ["Disaster Recovery"]
        assert gap.experience_gap.gap == 3
        assert gap.scale_gap is None
        assert gap.pressure_points == ["Terraform", "Python", "Disaster Recovery", "3 years of experience gap"]

    def test_small_experience_gap_is_not_a_pressure_point(self, jd, candidate):
        candidate.experience_years = 7
        gap = analyze_jd_gaps(jd, candidate)
        assert gap.experience_gap.gap == 1
        assert "1 years of experience gap" not in gap.pressure_points

    def test_startup_scale_gap(self, candidate):
        jd = ParsedJD(responsibilities=["Run multi-region failover"], company_stage="Startup")
        gap = analyze_jd_gaps(jd, candidate)
        assert gap.scale_gap.candidate_background == "Startup Experience"
        assert "High Availability & Multi-Region" in gap.pressure_points

    def test_instructions(self, jd, candidate):
        instructions = generate_gap_analysis_instructions(analyze_jd_gaps(jd, candidate))
        assert "**Missing Required Skills:** Terraform, Python" in instructions
        assert "JD requires 8 years, candidate has 5" in instructions
        assert "**Critical Gaps:** Disaster Recovery" in instructions
        assert instructions.endswith("that's a major red flag")

    def test_no_gaps(self):
        gap = analyze_jd_gaps(ParsedJD(), CandidateBackground())
        assert generate_gap_analysis_instructions(gap) == NO_GAPS_INSTRUCTIONS
