"""
Configuration module for the Mock Interviewer.

This module provides configuration settings and utilities for the Mock Interviewer.
"""
import os
import logging
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()
# Get the absolute path to the project root directory
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
ENV_FILE_PATH = os.path.join(PROJECT_ROOT, ".env")


# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def get_config_value(key: str, default: Optional[Any] = None) -> Any:
    """
    Get a configuration value from environment variables.

    Args:
        key: Configuration key
        default: Default value if not found

    Returns:
        Configuration value
    """
    return os.environ.get(key, default)


# MongoDB configuration
MONGODB_URI = get_config_value("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = get_config_value("MONGODB_DATABASE", "mock_interviewer")
MONGODB_SESSIONS_COLLECTION = get_config_value("MONGODB_SESSIONS_COLLECTION", "interview_sessions")
MONGODB_TURNS_COLLECTION = get_config_value("MONGODB_TURNS_COLLECTION", "interview_turns")
MONGODB_RESULTS_COLLECTION = get_config_value("MONGODB_RESULTS_COLLECTION", "interview_results")

# LLM configuration
GOOGLE_API_KEY = get_config_value("GOOGLE_API_KEY", "")
LLM_MODEL = get_config_value("LLM_MODEL", "gemini-1.5-pro")
LLM_FAST_MODEL = get_config_value("LLM_FAST_MODEL", "gemini-1.5-flash")
LLM_TEMPERATURE = float(get_config_value("LLM_TEMPERATURE", "0.7"))

# Vector store configuration
EMBEDDING_MODEL = get_config_value("EMBEDDING_MODEL", "models/embedding-001")
CHROMA_DB_URL = get_config_value("CHROMA_DB_URL", "http://localhost:8000")
CHROMA_COLLECTION_NAME = get_config_value("CHROMA_COLLECTION_NAME", "aws-well-architected")
KNOWLEDGE_BASE_DIR = get_config_value("KNOWLEDGE_BASE_DIR", os.path.join(PROJECT_ROOT, "data", "knowledge-base"))

# Interview configuration
INTERVIEW_DURATION_MINUTES = int(get_config_value("INTERVIEW_DURATION_MINUTES", "20"))
MIN_CALL_DURATION_SECONDS = int(get_config_value("MIN_CALL_DURATION_SECONDS", "300"))
CERTIFICATE_THRESHOLD = int(get_config_value("CERTIFICATE_THRESHOLD", "70"))

# Server configuration
SERVER_URL = get_config_value("SERVER_URL", "http://localhost:8080")
SERVER_HOST = get_config_value("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(get_config_value("SERVER_PORT", "8080"))
CORS_ORIGINS = get_config_value("CORS_ORIGINS", "http://localhost:3000")

def get_db_config() -> Dict[str, str]:
    """
    Get MongoDB configuration.

    Returns:
        Dictionary with MongoDB configuration
    """
    return {
        "uri": MONGODB_URI,
        "database": MONGODB_DATABASE,
        "sessions_collection": MONGODB_SESSIONS_COLLECTION,
        "turns_collection": MONGODB_TURNS_COLLECTION,
        "results_collection": MONGODB_RESULTS_COLLECTION,
    }

def get_llm_config() -> Dict[str, Any]:
    """
    Get LLM configuration.

    Returns:
        Dictionary with LLM configuration
    """
    return {
        "model": LLM_MODEL,
        "fast_model": LLM_FAST_MODEL,
        "temperature": LLM_TEMPERATURE,
    }

def get_vector_store_config() -> Dict[str, Any]:
    """
    Get vector store configuration.

    Returns:
        Dictionary with Chroma and embedding settings
    """
    return {
        "url": CHROMA_DB_URL,
        "collection_name": CHROMA_COLLECTION_NAME,
        "embedding_model": EMBEDDING_MODEL,
        "knowledge_base_dir": KNOWLEDGE_BASE_DIR,
    }

def get_interview_config() -> Dict[str, Any]:
    """
    Get interview timing and scoring configuration.

    Returns:
        Dictionary with interview configuration
    """
    return {
        "duration_minutes": INTERVIEW_DURATION_MINUTES,
        "min_call_duration_seconds": MIN_CALL_DURATION_SECONDS,
        "certificate_threshold": CERTIFICATE_THRESHOLD,
    }

def get_server_config() -> Dict[str, Any]:
    """Get HTTP server configuration."""
    return {
        "url": SERVER_URL,
        "host": SERVER_HOST,
        "port": SERVER_PORT,
        "cors_origins": [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()],
    }

def validate_config() -> None:
    """
    Validate the environment configuration.

    Raises:
        ValueError: Listing every invalid or missing setting
    """
    problems: List[str] = []

    if not GOOGLE_API_KEY:
        problems.append("GOOGLE_API_KEY: is required")
    for name, value in (("CHROMA_DB_URL", CHROMA_DB_URL), ("SERVER_URL", SERVER_URL)):
        if not value.startswith(("http://", "https://")):
            problems.append(f"{name}: must be a valid http(s) URL")
    if not MONGODB_URI.startswith("mongodb"):
        problems.append("MONGODB_URI: must be a valid MongoDB connection URI")

    if problems:
        raise ValueError(
            "Environment variable validation failed:\n"
            + "\n".join(problems)
            + f"\n\nPlease check your {ENV_FILE_PATH} file and ensure all required variables are set."
        )

def log_config():
    """Log current configuration values (excluding sensitive information)."""
    logger.info("Current configuration:")
    logger.info(f"- MongoDB Database: {MONGODB_DATABASE}")
    logger.info(f"- Sessions Collection: {MONGODB_SESSIONS_COLLECTION}")
    logger.info(f"- Turns Collection: {MONGODB_TURNS_COLLECTION}")
    logger.info(f"- Results Collection: {MONGODB_RESULTS_COLLECTION}")
    logger.info(f"- LLM Model: {LLM_MODEL} (fast: {LLM_FAST_MODEL})")
    logger.info(f"- LLM Temperature: {LLM_TEMPERATURE}")
    logger.info(f"- Embedding Model: {EMBEDDING_MODEL}")
    logger.info(f"- Chroma: {CHROMA_DB_URL} / {CHROMA_COLLECTION_NAME}")
    logger.info(f"- Interview Duration: {INTERVIEW_DURATION_MINUTES} minutes")
    logger.info(f"- Certificate Threshold: {CERTIFICATE_THRESHOLD}")
    logger.info(f"- Google API Key: {'Configured' if GOOGLE_API_KEY else 'Not configured'}")
