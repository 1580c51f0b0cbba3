"""
Chat model factory.

Every LLM call in the package goes through ``create_chat_model`` so the model
choice (reasoning vs fast) and sampling settings live in one place.
"""
import logging
from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from mock_interviewer.utils.config import get_llm_config

logger = logging.getLogger(__name__)


def create_chat_model(
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    fast: bool = False,
) -> ChatGoogleGenerativeAI:
    """
    Build a Gemini chat model.

    Args:
        temperature: Sampling temperature, defaults to LLM_TEMPERATURE
        max_tokens: Output token cap, unlimited when None
        fast: Use the cheap extraction model instead of the reasoning model

    Returns:
        Configured ChatGoogleGenerativeAI instance
    """
    llm_config = get_llm_config()
    model_name = llm_config["fast_model"] if fast else llm_config["model"]
    kwargs = {
        "model": model_name,
        "temperature": llm_config["temperature"] if temperature is None else temperature,
    }
    if max_tokens is not None:
        kwargs["max_output_tokens"] = max_tokens
    logger.debug(f"Creating chat model {model_name} (temperature={kwargs['temperature']})")
    return ChatGoogleGenerativeAI(**kwargs)
