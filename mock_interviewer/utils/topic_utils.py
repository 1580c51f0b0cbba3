"""
Topic inference for interviewer questions.
"""
from typing import List, Optional, Tuple

from mock_interviewer.ai.interview_flow import INTERVIEW_TOPICS

# (topic id, keywords) checked after the catalog names
_FALLBACK_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("kubernetes", ("kubernetes", "k8s", "pod", "cluster")),
    ("cicd", ("ci/cd", "pipeline", "jenkins", "github actions")),
    ("terraform", ("terraform", "iac", "infrastructure as code")),
    ("helm", ("helm", "chart")),
    ("deployment", ("deployment", "rollout", "blue-green", "canary")),
    ("cloud", ("aws", "azure", "gcp", "cloud")),
]


def _topic_keywords(topic) -> List[str]:
    name = topic.name.lower()
    keywords = [topic.id, name]
    # Short fragments like "ci" would match inside unrelated words
    keywords.extend(part.strip() for part in name.split("/") if len(part.strip()) > 2)
    keywords.extend(part for part in name.split(" ") if len(part) > 2)
    return keywords


def infer_topic_from_question(question: str) -> Optional[str]:
    """
    Infer which catalog topic a question belongs to.

    Args:
        question: Interviewer question text

    Returns:
        Topic id, or None when nothing matches
    """
    lowered = question.lower()

    for topic in INTERVIEW_TOPICS:
        if any(keyword in lowered for keyword in _topic_keywords(topic)):
            return topic.id

    for topic_id, keywords in _FALLBACK_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return topic_id

    return None
