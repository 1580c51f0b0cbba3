"""
Question normalisation helpers used for duplicate detection.
"""
import re
import hashlib

_QUESTION_PATTERNS = [
    re.compile(r"\?"),
    re.compile(
        r"^(how|what|why|when|where|who|which|can|could|would|should|do|does|did|is|are|was|were)\s",
        re.IGNORECASE,
    ),
    re.compile(r"^tell me", re.IGNORECASE),
    re.compile(r"^explain", re.IGNORECASE),
    re.compile(r"^describe", re.IGNORECASE),
    re.compile(r"^walk me through", re.IGNORECASE),
    re.compile(r"^can you", re.IGNORECASE),
]


def normalize_question(question_text: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    normalized = re.sub(r"[^\w\s]", "", question_text.lower())
    return re.sub(r"\s+", " ", normalized).strip()


def hash_question(question_text: str) -> str:
    """Return a 16 character fingerprint of a question, stable across punctuation and case."""
    return hashlib.sha256(normalize_question(question_text).encode("utf-8")).hexdigest()[:16]


def is_question(message: str) -> bool:
    """Heuristic check for whether an interviewer message asks something."""
    stripped = message.strip()
    return any(pattern.search(stripped) for pattern in _QUESTION_PATTERNS)
