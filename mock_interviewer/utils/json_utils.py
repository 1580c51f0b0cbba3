"""
Helpers for pulling JSON objects out of LLM responses.
"""
import re
import json
from typing import Any, Dict

_FENCED_JSON = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.DOTALL)
_BARE_OBJECT = re.compile(r'(\{.*\})', re.DOTALL)


def extract_json(content: str) -> Dict[str, Any]:
    """
    Extract the first JSON object from a model response.

    Tries a fenced ```json block first, then the outermost {...} span.

    Args:
        content: Raw model output

    Returns:
        Parsed JSON object

    Raises:
        ValueError: If no JSON object can be parsed
    """
    if not content or not content.strip():
        raise ValueError("Empty response received")

    candidates = []
    fenced = _FENCED_JSON.search(content)
    if fenced:
        candidates.append(fenced.group(1))
    bare = _BARE_OBJECT.search(content)
    if bare:
        candidates.append(bare.group(1))
    candidates.append(content.strip())

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise ValueError(f"No JSON object found in response: {content[:200]}")


def message_text(message: Any) -> str:
    """Return the text of a LangChain message or raw string."""
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Gemini can return a list of content parts
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    return content or ""
