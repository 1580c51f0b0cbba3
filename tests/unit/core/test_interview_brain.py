"""
Unit tests for the rule-based interview brain.
"""
import pytest

from mock_interviewer.core.interview_brain import (
    DEEP_FOLLOW_UP,
    DRILL_DOWN_FOLLOW_UPS,
    ENTRY_QUESTIONS,
    GENERIC_FOLLOW_UPS,
    INTRO_QUESTION,
    NO_INTRO_QUESTION,
    SCENARIO_QUESTIONS,
    BrainState,
    CandidateIntro,
    advance_state,
    apply_next_question,
    brain_state_from_dict,
    brain_state_to_dict,
    extract_candidate_intro,
    generate_progressive_question,
    get_next_question,
    get_topic_progression,
)
from mock_interviewer.utils.constants import InterviewPhase

SENIOR_INTRO = (
    "I'm a senior DevOps engineer with 6 years of experience. I work with Kubernetes and Terraform on AWS, "
    "and I have experience with Jenkins pipelines."
)


class TestExtractCandidateIntro:
    """Test extract_candidate_intro."""

    def test_senior_intro(self):
        intro = extract_candidate_intro(SENIOR_INTRO)
        assert intro.technologies == ["kubernetes", "terraform", "aws", "jenkins"]
        assert intro.experience_years == 6
        assert intro.level == "senior"
        assert "Kubernetes and Terraform on AWS" in intro.skills
        assert "Jenkins pipelines" in intro.skills

    @pytest.mark.parametrize("text,level", [
        ("I have 1 year in IT support.", "entry"),
        ("I've been doing this for 3 yrs now.", "mid"),
        ("I'm a principal engineer.", "architect"),
        ("I lead the platform team.", "senior"),
        ("I like containers.", None),
    ])
    def test_level_rules(self, text, level):
        assert extract_candidate_intro(text).level == level

    def test_zero_years_is_entry(self):
        assert extract_candidate_intro("0 years so far, just graduated").level == "entry"


class TestQuestions:
    def test_progression_puts_mentioned_topics_first(self):
        intro = CandidateIntro(technologies=["terraform", "aws"])
        assert get_topic_progression(intro) == ["cloud", "terraform", "kubernetes", "cicd", "deployment"]

    def test_entry_opening_is_definition(self):
        assert generate_progressive_question("terraform", "entry", 0) in ENTRY_QUESTIONS["terraform"]

    def test_mid_opening_is_scenario_with_tech(self):
        question = generate_progressive_question("kubernetes", "mid", 0, ["eks"])
        expected = [q.format(tech="eks") for q in SCENARIO_QUESTIONS["kubernetes"]["intermediate"]]
        assert question in expected

    def test_drill_down_on_keyword(self):
        question = generate_progressive_question(
            "kubernetes", "senior", 1, ["eks"], "I'd put an ingress controller in front of it"
        )
        assert question == DRILL_DOWN_FOLLOW_UPS[0][1]

    def test_generic_follow_ups(self):
        assert generate_progressive_question("kubernetes", "senior", 2, [], "I would check the logs") == \
            GENERIC_FOLLOW_UPS[2]
        assert generate_progressive_question("kubernetes", "senior", 4, [], "I would check the logs") == \
            DEEP_FOLLOW_UP

    def test_intro_phase(self):
        next_question = get_next_question(BrainState())
        assert next_question.question == INTRO_QUESTION
        assert next_question.topic == "introduction"

    def test_no_technologies_falls_back(self):
        state = BrainState(phase=InterviewPhase.TOPICS, candidate_intro=CandidateIntro())
        assert get_next_question(state).question == NO_INTRO_QUESTION


class TestStateFlow:
    """Walk a candidate through the brain."""

    def test_moves_to_next_topic_after_three_answers(self):
        state = BrainState()
        state = apply_next_question(state, get_next_question(state))
        state = advance_state(state, "I work with Kubernetes at a startup, 4 years in.")
        assert state.phase == InterviewPhase.TOPICS

        first = get_next_question(state)
        assert first.topic == "kubernetes"
        assert first.depth == 0
        state = apply_next_question(state, first)

        for _ in range(3):
            state = advance_state(state, "I would check the logs")
            state = apply_next_question(state, get_next_question(state))

        assert state.current_topic == "cicd"
        assert state.question_depth == 0
        assert state.topics_covered == ["kubernetes"]

    def test_state_round_trip(self):
        state = advance_state(BrainState(), SENIOR_INTRO)
        state = apply_next_question(state, get_next_question(state))
        assert brain_state_from_dict(brain_state_to_dict(state)) == state

    def test_empty_stored_state(self):
        assert brain_state_from_dict(None) == BrainState()
