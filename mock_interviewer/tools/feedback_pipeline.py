"""
Topic-based feedback pipeline.

Used for voice-call reports, where the conversation is not tied to a fixed
rubric:

1. The fast model extracts the technical topics that came up.
2. The reasoning model scores each topic concurrently, quoting evidence.
3. Weak topics feed a week-by-week upskilling plan.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from langchain_core.messages import HumanMessage, SystemMessage

from mock_interviewer.ai.prompts.interview_prompts import (
    TOPIC_EXTRACTION_PROMPT,
    TOPIC_EXTRACTION_SYSTEM_PROMPT,
    TOPIC_SCORING_PROMPT,
    TOPIC_SCORING_SYSTEM_PROMPT,
    UPSKILLING_PLAN_PROMPT,
    UPSKILLING_SYSTEM_PROMPT,
)
from mock_interviewer.models.evaluation import (
    DetailedUpskillingPlan,
    ExtractedTopic,
    FeedbackReport,
    TopicScore,
    WeeklyPlan,
)
from mock_interviewer.utils.constants import SCORING_TEMPERATURE, WEAK_TOPIC_THRESHOLD
from mock_interviewer.utils.json_utils import extract_json, message_text
from mock_interviewer.utils.llm import create_chat_model
from mock_interviewer.utils.math_utils import round_half_up
from mock_interviewer.utils.profiling import async_timed_function
from mock_interviewer.utils.transcript import format_numbered_transcript

logger = logging.getLogger(__name__)

UPSKILLING_TEMPERATURE = 0.3


async def _ask_json(system_prompt: str, prompt: str, temperature: float, fast: bool = False) -> Dict[str, Any]:
    llm = create_chat_model(temperature=temperature, fast=fast)
    response = await llm.ainvoke([SystemMessage(content=system_prompt), HumanMessage(content=prompt)])
    return extract_json(message_text(response))


async def extract_topics_from_transcript(transcript: List[Dict[str, Any]]) -> List[ExtractedTopic]:
    """
    Extract the technical topics discussed in a transcript.

    Returns:
        Extracted topics, empty on any failure
    """
    prompt = TOPIC_EXTRACTION_PROMPT.format(transcript=format_numbered_transcript(transcript))
    try:
        parsed = await _ask_json(TOPIC_EXTRACTION_SYSTEM_PROMPT, prompt, SCORING_TEMPERATURE, fast=True)
        topics = [ExtractedTopic.model_validate(t) for t in parsed.get("topics") or []]
    except Exception as e:
        logger.error(f"Error extracting topics: {e}")
        return []
    logger.info(f"Extracted {len(topics)} topics")
    return topics


async def score_topic_with_evidence(topic: ExtractedTopic, transcript: List[Dict[str, Any]]) -> TopicScore:
    """
    Score one topic with quoted evidence.

    Returns:
        TopicScore, or a neutral score of 5 when the model call fails
    """
    prompt = TOPIC_SCORING_PROMPT.format(topic=topic.name, transcript=format_numbered_transcript(transcript))
    try:
        parsed = await _ask_json(TOPIC_SCORING_SYSTEM_PROMPT, prompt, SCORING_TEMPERATURE)
        parsed.setdefault("topic", topic.name)
        return TopicScore.model_validate(parsed)
    except Exception as e:
        logger.error(f"Error scoring topic {topic.name}: {e}")
        return TopicScore(
            topic=topic.name,
            overall_score=5,
            key_weaknesses=["Unable to evaluate due to processing error"],
        )


def _fallback_plan() -> DetailedUpskillingPlan:
    return DetailedUpskillingPlan(
        weeks=2,
        weekly_breakdown=[
            WeeklyPlan(
                week=1,
                focus="General DevOps practice",
                tasks=["Review weak areas from interview", "Practice hands-on labs"],
                resources=["https://kubernetes.io/docs/"],
            )
        ],
    )


async def generate_detailed_upskilling_plan(topic_scores: List[TopicScore], overall_score: int) -> DetailedUpskillingPlan:
    """Build a week-by-week plan targeting topics scored below the weak threshold."""
    weak_topics = [t for t in topic_scores if t.overall_score < WEAK_TOPIC_THRESHOLD]
    weak_areas = "\n".join(
        f"- {t.topic} ({t.overall_score:g}/10): {', '.join(t.key_weaknesses)}" for t in weak_topics
    ) or "- None identified"

    prompt = UPSKILLING_PLAN_PROMPT.format(overall_score=overall_score, weak_areas=weak_areas)
    try:
        parsed = await _ask_json(UPSKILLING_SYSTEM_PROMPT, prompt, UPSKILLING_TEMPERATURE)
        return DetailedUpskillingPlan.model_validate(parsed)
    except Exception as e:
        logger.error(f"Error generating upskilling plan: {e}")
        return _fallback_plan()


@async_timed_function()
async def generate_feedback_pipeline(transcript: List[Dict[str, Any]]) -> FeedbackReport:
    """
    Run the full topic feedback pipeline over a transcript.

    Args:
        transcript: Conversation as role/content dictionaries

    Returns:
        FeedbackReport with scored topics, overall score (0-100) and plan
    """
    logger.info("Starting topic feedback pipeline")
    topics = await extract_topics_from_transcript(transcript)

    topic_scores = list(await asyncio.gather(*(score_topic_with_evidence(t, transcript) for t in topics)))
    logger.info(f"Scored {len(topic_scores)} topics")

    if topic_scores:
        overall_score = round_half_up(sum(t.overall_score for t in topic_scores) / len(topic_scores) * 10)
    else:
        overall_score = 0

    plan = await generate_detailed_upskilling_plan(topic_scores, overall_score)
    return FeedbackReport(
        topics=topic_scores,
        overall_score=overall_score,
        upskilling_plan=plan,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
