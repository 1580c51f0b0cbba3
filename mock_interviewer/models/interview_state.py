"""
Interview state as analysed by the state manager after every candidate turn.

The model speaks camelCase JSON; fields are snake_case with camelCase aliases
so either form validates and ``to_json_dict`` gives back the camelCase form.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    INTRODUCTION = "introduction"
    TOPICS = "topics"
    WRAPUP = "wrapup"


class CandidateLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    ARCHITECT = "architect"


class Action(str, Enum):
    CONTINUE_TOPIC = "continue_topic"
    MOVE_TO_NEXT_TOPIC = "move_to_next_topic"
    DRILL_DOWN = "drill_down"
    WRAP_UP = "wrap_up"


class QuestionType(str, Enum):
    DEFINITION = "definition"
    SCENARIO = "scenario"
    DEEP_DIVE = "deep_dive"
    BEHAVIORAL = "behavioral"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class NextAction(_CamelModel):
    """What the interviewer should do with its next turn."""
    action: Action
    topic: Optional[str] = None
    question_type: Optional[QuestionType] = Field(None, alias="questionType")
    rag_query: Optional[str] = Field(None, alias="ragQuery", description="Targeted knowledge-base query")


class CandidateProfile(_CamelModel):
    """Candidate information extracted from the conversation so far."""
    skills: List[str] = Field(default_factory=list)
    experience_years: Optional[float] = Field(None, alias="experienceYears")
    technologies: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)


class InterviewState(_CamelModel):
    """Structured interview state returned by the analysis model."""
    phase: Phase
    current_topic: Optional[str] = Field(None, alias="currentTopic")
    topics_covered: List[str] = Field(default_factory=list, alias="topicsCovered")
    question_depth: float = Field(..., ge=0, le=5, alias="questionDepth")
    candidate_level: Optional[CandidateLevel] = Field(None, alias="candidateLevel")
    next_action: NextAction = Field(..., alias="nextAction")
    candidate_profile: CandidateProfile = Field(default_factory=CandidateProfile, alias="candidateProfile")


def default_interview_state() -> InterviewState:
    """State used when the analysis model returns something unusable."""
    return InterviewState(
        phase=Phase.INTRODUCTION,
        topics_covered=[],
        question_depth=0,
        next_action=NextAction(action=Action.CONTINUE_TOPIC, question_type=QuestionType.SCENARIO),
        candidate_profile=CandidateProfile(),
    )
