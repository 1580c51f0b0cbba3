"""
Unit tests for interviewer system prompt assembly.
"""
import pytest

from mock_interviewer.ai.prompts.persona_prompts import (
    SystemPromptContext,
    generate_system_prompt,
    get_interviewer_persona,
    scenario_difficulty,
    select_expert_scenarios,
)
from mock_interviewer.models.job_description import CandidateBackground, ParsedJD
from mock_interviewer.utils.constants import NO_PREVIOUS_QUESTIONS


class TestPersona:
    @pytest.mark.parametrize("level,title", [
        ("Entry", "Senior Engineer"),
        ("Senior", "Cloud Architect"),
        ("Mid-Senior", "Cloud Architect"),
        ("Principal", "Lead Architect"),
    ])
    def test_persona_for_level(self, level, title):
        assert get_interviewer_persona(level).title.startswith(title)

    @pytest.mark.parametrize("level,expected", [
        ("Entry", "entry"),
        ("Mid-Senior", "senior"),
        ("Senior", "senior"),
        ("Principal", "principal"),
        ("Mid", "mid"),
    ])
    def test_scenario_difficulty(self, level, expected):
        assert scenario_difficulty(level) == expected


class TestSelectExpertScenarios:
    def test_excludes_asked_titles(self):
        previous = ["Earlier we covered the Bursty Workload Cold-Start Problem in depth."]
        ids = {s.id for s in select_expert_scenarios(["kubernetes"], "Senior", previous)}
        assert "k8s-001" not in ids
        assert "k8s-004" in ids

    def test_pending_questions_exclude_pending_titles(self):
        scenarios = select_expert_scenarios(["kubernetes"], "Senior", ["Why are my pods pending?"])
        assert all("pending" not in s.title.lower() for s in scenarios)

    def test_limit(self):
        assert len(select_expert_scenarios([], "Principal", [], limit=2)) == 2


class TestGenerateSystemPrompt:
    """Test generate_system_prompt."""

    @pytest.fixture
    def base_context(self):
        return SystemPromptContext(
            target_role="Senior",
            pack_role="DevOps Engineer",
            interview_type_title="DevOps Engineer - Senior",
            jd_text="Advanced role simulation.",
        )

    @pytest.fixture
    def parsed_jd(self):
        return ParsedJD(
            role="Senior DevOps Engineer",
            level="Senior",
            tools=["Kubernetes", "Jenkins"],
            technical_requirements=["Operate EKS clusters at scale"],
            company_culture="We value ownership and collaboration",
            experience_years=7,
            company_stage="Startup",
        )

    def test_regular_mode_without_jd(self, base_context):
        prompt = generate_system_prompt(base_context)
        assert "Cloud Architect (Interviewer Persona)" in prompt
        assert "REGULAR INTERVIEW MODE - NO HINTS" in prompt
        assert "NO JD PROVIDED - CANDIDATE-DRIVEN" in prompt
        assert "No JD gap analysis available" in prompt
        assert NO_PREVIOUS_QUESTIONS in prompt
        assert "approximately 20 MINUTES" in prompt
        assert "I heard you mentioned the technologies you mentioned" in prompt
        assert "[RELEVANT AWS ARCHITECTURAL STANDARDS & CONTEXT]" not in prompt

    def test_practice_mode(self, base_context):
        base_context.is_practice = True
        assert "PRACTICE MODE - HINTS & GUIDANCE ENABLED" in generate_system_prompt(base_context)

    def test_user_skills_json_string(self, base_context):
        base_context.user_skills = '["Kubernetes", "Terraform"]'
        assert "I heard you mentioned Kubernetes, Terraform" in generate_system_prompt(base_context)

    def test_invalid_user_skills_ignored(self, base_context):
        base_context.user_skills = "not json"
        assert "the technologies you mentioned" in generate_system_prompt(base_context)

    def test_previous_questions_listed(self, base_context):
        base_context.previous_questions = ["How do you debug a failing readiness probe?"]
        prompt = generate_system_prompt(base_context)
        assert '1. "How do you debug a failing readiness probe?"' in prompt

    def test_jd_driven_prompt(self, base_context, parsed_jd):
        base_context.parsed_jd = parsed_jd
        prompt = generate_system_prompt(base_context)
        assert "JD PROVIDED - USE AS PRIMARY SOURCE" in prompt
        assert "MANDATORY TECHNOLOGIES: Kubernetes, Jenkins" in prompt
        assert "MANDATORY TECHNICAL REQUIREMENTS: 1. Operate EKS clusters at scale" in prompt
        assert "**JD PRIORITY**: Kubernetes is mentioned in JD requirements" in prompt
        assert "Company Culture from JD" in prompt
        assert "collaborate with a difficult team member" in prompt
        assert "took ownership of a problem" in prompt
        assert "Let's dive into your experience with Kubernetes." in prompt

    def test_parsed_jd_ignored_when_jd_text_blank(self, base_context, parsed_jd):
        base_context.parsed_jd = parsed_jd
        base_context.jd_text = "   "
        prompt = generate_system_prompt(base_context)
        assert "NO JD PROVIDED - CANDIDATE-DRIVEN" in prompt
        assert "JD PRIORITY" not in prompt

    def test_gap_analysis_with_candidate_profile(self, base_context, parsed_jd):
        base_context.parsed_jd = parsed_jd
        base_context.candidate_profile = CandidateBackground(skills=["Docker"], experience_years=3)
        prompt = generate_system_prompt(base_context)
        assert "No JD gap analysis available" not in prompt

    def test_retrieved_context_appended(self, base_context):
        base_context.retrieved_context = "[SOURCE: AWS Well-Architected Framework]\nUse multiple AZs."
        prompt = generate_system_prompt(base_context)
        assert prompt.rstrip().endswith("(e.g., \"According to the AWS Security Pillar...\").")
        assert "Use multiple AZs." in prompt
