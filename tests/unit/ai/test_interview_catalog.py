"""
Unit tests for the topic catalog, packs, role prompts, question bank and
expert scenarios.
"""
import pytest

from mock_interviewer.ai.expert_scenarios import get_expert_scenarios, get_random_expert_scenario
from mock_interviewer.ai.interview_flow import (
    INTERVIEW_TOPICS,
    focus_for_level,
    get_interview_structure,
    get_topic,
    normalize_level,
)
from mock_interviewer.ai.interview_packs import get_pack, list_packs
from mock_interviewer.ai.prompts.role_prompts import DEFAULT_ROLE_KEY, ROLE_PROMPTS, get_role_prompt
from mock_interviewer.ai.question_bank import QUESTION_BANK, get_question_scenarios


class TestInterviewFlow:
    """Test the topic catalog."""

    def test_catalog_ids(self):
        assert [t.id for t in INTERVIEW_TOPICS] == [
            "kubernetes", "cicd", "deployment", "helm", "terraform", "cloud", "linux", "sre",
        ]

    @pytest.mark.parametrize("level,expected", [
        ("Entry", "entry"),
        ("Junior", "entry"),
        ("Mid-Senior", "mid"),
        ("medior", "mid"),
        ("Senior", "senior"),
        ("Lead", "senior"),
        ("Principal", "architect"),
        (None, "mid"),
    ])
    def test_normalize_level(self, level, expected):
        assert normalize_level(level) == expected

    def test_mid_focus_merges_entry_and_senior_without_duplicates(self):
        topic = get_topic("kubernetes")
        focus = focus_for_level(topic, "Mid")
        assert focus[:len(topic.entry_level_focus)] == topic.entry_level_focus
        assert focus.count("Linux Networking Basics") == 1
        assert "Taints and Tolerations" in focus

    def test_interview_structure(self):
        structure = get_interview_structure("Senior")
        assert structure["level"] == "senior"
        assert len(structure["topics"]) == len(INTERVIEW_TOPICS)
        assert structure["total_minutes"] == sum(t.estimated_minutes for t in INTERVIEW_TOPICS)
        assert structure["topics"][0]["focus"] == get_topic("kubernetes").senior_level_focus

    def test_unknown_topic(self):
        assert get_topic("cobol") is None


class TestInterviewPacks:
    def test_lookup(self):
        pack = get_pack("devops-senior")
        assert pack.role == "DevOps Engineer"
        assert pack.level == "Senior"
        assert pack.to_dict()["sections"][0]["title"] == "Warmup & Experience"

    def test_unknown_pack(self):
        assert get_pack("does-not-exist") is None

    def test_list_is_a_copy(self):
        packs = list_packs()
        packs.clear()
        assert len(list_packs()) == 7


class TestRolePrompts:
    def test_exact_key(self):
        assert get_role_prompt("SRE", "Mid-Senior") is ROLE_PROMPTS["SRE Mid-Senior"]

    def test_fuzzy_match_prefers_level(self):
        assert get_role_prompt("DevOps Engineer", "Senior") is ROLE_PROMPTS["DevOps Senior"]

    def test_unknown_role_uses_default(self):
        assert get_role_prompt("Data Analyst", "Entry") is ROLE_PROMPTS[DEFAULT_ROLE_KEY]


class TestQuestionBank:
    def test_exact_key_returns_whole_list(self):
        assert get_question_scenarios("DevOps", "Senior") == QUESTION_BANK["DevOps Senior"]

    def test_fuzzy_match_filters_by_band(self):
        scenarios = get_question_scenarios("DevOps Engineer", "Entry")
        assert scenarios
        assert all(s.difficulty == "entry" for s in scenarios)

    def test_returns_copy(self):
        scenarios = get_question_scenarios("DevOps", "Senior")
        scenarios.clear()
        assert QUESTION_BANK["DevOps Senior"]


class TestExpertScenarios:
    def test_senior_kubernetes(self):
        ids = {s.id for s in get_expert_scenarios(["Kubernetes"], "senior")}
        assert {"k8s-001", "k8s-004", "helm-001"} <= ids
        assert "k8s-003" not in ids

    def test_principal_without_tech_sees_everything(self):
        from mock_interviewer.ai.expert_scenarios import EXPERT_SCENARIOS
        assert len(get_expert_scenarios([], "principal")) == len(EXPERT_SCENARIOS)

    def test_entry_band_is_empty(self):
        assert get_expert_scenarios(["kubernetes"], "entry") == []

    def test_random_respects_exclusions(self):
        assert get_random_expert_scenario(["helm"], "senior", exclude_ids=["helm-001"]) is None
        assert get_random_expert_scenario(["helm"], "senior").id == "helm-001"
