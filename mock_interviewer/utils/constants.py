"""
Constants used throughout the Mock Interviewer application.
"""

# Default configuration values
DEFAULT_HISTORY_WINDOW = 10  # Messages sent to the model per turn
DEFAULT_QUESTION_WINDOW = 3  # Turns used for next-question generation
DEFAULT_CHAT_TEMPERATURE = 0.7
DEFAULT_CHAT_MAX_TOKENS = 250
DEFAULT_QUESTION_MAX_TOKENS = 150
STATE_ANALYSIS_TEMPERATURE = 0.3
SCORING_TEMPERATURE = 0.1
JD_PARSING_TEMPERATURE = 0.3
JD_TRUNCATE_CHARS = 500
RAG_TOP_K = 3
RAG_SEMANTIC_MATCH_THRESHOLD = 0.85
AUTO_TAG_THRESHOLD = 1.2
MAX_PREVIOUS_QUESTIONS = 20
MAX_EXPERT_SCENARIOS = 10
PREVIOUS_SESSIONS_LIMIT = 10

# Scoring weights
TECHNICAL_WEIGHT = 0.4
SENIOR_DIMENSIONS_WEIGHT = 0.4
SOFT_SKILLS_WEIGHT = 0.2
WEAK_TOPIC_THRESHOLD = 7

# Knowledge base ingestion
CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200
INGEST_BATCH_SIZE = 100
SUPPORTED_EXTENSIONS = (".txt", ".md", ".markdown")
RAG_SOURCE_LABEL = "AWS Well-Architected Framework"

# Fallback messages
FALLBACK_NEXT_QUESTION = "Let's continue. Can you elaborate on that?"
NO_GAPS_INSTRUCTIONS = (
    "No significant gaps identified. Focus on testing depth of knowledge in areas they claim expertise."
)
NO_PREVIOUS_QUESTIONS = "None - this is the first interview session."

# Error messages
ERROR_NO_MESSAGES = "No messages provided"
ERROR_EMPTY_RESPONSE = "Empty response received"

# Interview phases
class InterviewPhase:
    INTRODUCTION = "introduction"
    TOPICS = "topics"
    WRAPUP = "wrapup"

# Session statuses
class SessionStatus:
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"

# Turn speakers
class Speaker:
    USER = "user"
    INTERVIEWER = "interviewer"
