"""
Job description parsing.

The fast model turns free-form JD text into a ``ParsedJD``. When the model
call or its JSON fails, a keyword scan keeps the interview going with a basic
structure.
"""
import logging
from typing import List

from langchain_core.messages import HumanMessage, SystemMessage

from mock_interviewer.ai.prompts.interview_prompts import JD_PARSING_PROMPT
from mock_interviewer.models.job_description import ParsedJD
from mock_interviewer.utils.constants import JD_PARSING_TEMPERATURE
from mock_interviewer.utils.json_utils import extract_json, message_text
from mock_interviewer.utils.llm import create_chat_model
from mock_interviewer.utils.profiling import async_timed_function

logger = logging.getLogger(__name__)

COMMON_TECH_KEYWORDS = [
    "AWS", "Azure", "GCP", "Kubernetes", "Docker", "Terraform", "Ansible",
    "CI/CD", "Jenkins", "GitLab", "GitHub Actions", "Python", "Go", "Java",
    "JavaScript", "TypeScript", "React", "Node.js", "PostgreSQL", "MongoDB",
    "Redis", "Kafka", "Elasticsearch", "Prometheus", "Grafana", "Splunk",
]

JD_PARSER_SYSTEM_PROMPT = "You are a JSON parser. Return only valid JSON, no markdown formatting, no explanations."


def extract_keywords_fallback(text: str) -> List[str]:
    """Case-insensitive scan for well-known technology names."""
    lowered = text.lower()
    return [keyword for keyword in COMMON_TECH_KEYWORDS if keyword.lower() in lowered]


def _drop_nulls(data: dict) -> dict:
    # Models answer null for unknown list fields; let the model defaults apply
    return {key: value for key, value in data.items() if value is not None and value != ""}


@async_timed_function()
async def parse_job_description(jd_text: str) -> ParsedJD:
    """
    Extract structured information from a job description.

    Args:
        jd_text: Raw job description

    Returns:
        ParsedJD (a keyword-only fallback on any failure)
    """
    try:
        logger.info("Parsing job description with LLM")
        llm = create_chat_model(temperature=JD_PARSING_TEMPERATURE, fast=True)
        response = await llm.ainvoke([
            SystemMessage(content=JD_PARSER_SYSTEM_PROMPT),
            HumanMessage(content=JD_PARSING_PROMPT.format(jd_text=jd_text)),
        ])
        content = message_text(response)
        if not content.strip():
            raise ValueError("No response from LLM")

        parsed = ParsedJD.model_validate(_drop_nulls(extract_json(content)))
        logger.info(f"Parsed JD: role={parsed.role}, level={parsed.level}, {len(parsed.tools)} tools")
        return parsed
    except Exception as e:
        logger.error(f"Error parsing JD: {e}")
        return ParsedJD(keywords=extract_keywords_fallback(jd_text))
