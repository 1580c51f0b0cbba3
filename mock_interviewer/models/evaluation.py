"""
Evaluation models for scoring and the topic feedback pipeline.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

TECHNICAL_COMPETENCIES = [
    "Kubernetes/OpenShift",
    "CI/CD Tools",
    "Deployment Strategy",
    "Helm Charts",
    "Terraform",
    "Cloud Provider Services",
]


class Assessment(str, Enum):
    STRONG = "strong"
    ADEQUATE = "adequate"
    WEAK = "weak"


class SeniorityRating(str, Enum):
    MEDIOR = "medior"
    BORDERLINE = "borderline"
    SENIOR = "senior"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class SubTopicScore(_CamelModel):
    """Score for one sub-topic of a technical area, backed by evidence."""
    name: str
    score: float = Field(..., description="Score out of 10")
    assessment: Optional[Assessment] = None
    evidence: str = Field("", description="What the candidate said or did")
    feedback: str = ""


class TopicBreakdown(_CamelModel):
    topic: str
    overall_score: float = Field(0, alias="overallScore")
    sub_topics: List[SubTopicScore] = Field(default_factory=list, alias="subTopics")
    key_strengths: List[str] = Field(default_factory=list, alias="keyStrengths")
    key_weaknesses: List[str] = Field(default_factory=list, alias="keyWeaknesses")
    resources: List[str] = Field(default_factory=list)


class SoftSkills(_CamelModel):
    behavioral: float = 0
    thinking: float = 0
    communication: float = 0
    problem_solving: float = Field(0, alias="problemSolving")


class SeniorDevOpsDimensions(_CamelModel):
    architectural_reasoning: float = Field(0, alias="architecturalReasoning")
    strategic_tradeoffs: float = Field(0, alias="strategicTradeoffs")
    incident_management: float = Field(0, alias="incidentManagement")
    operational_excellence: float = Field(0, alias="operationalExcellence")


class SeniorityGap(_CamelModel):
    tool_mastery: SeniorityRating = Field(SeniorityRating.BORDERLINE, alias="toolMastery")
    automation: SeniorityRating = SeniorityRating.BORDERLINE
    impact: SeniorityRating = SeniorityRating.BORDERLINE
    communication: SeniorityRating = SeniorityRating.BORDERLINE


class UpskillingPlan(BaseModel):
    weeks: int = 0
    focus_areas: List[str] = Field(default_factory=list)


class InterviewScore(_CamelModel):
    """Full scoring result for an interview session."""
    technical_competencies: Dict[str, float] = Field(default_factory=dict, alias="technicalCompetencies")
    topic_breakdown: List[TopicBreakdown] = Field(default_factory=list, alias="topicBreakdown")
    soft_skills: SoftSkills = Field(default_factory=SoftSkills, alias="softSkills")
    senior_devops_dimensions: Optional[SeniorDevOpsDimensions] = Field(None, alias="seniorDevOpsDimensions")
    seniority_gap: Optional[SeniorityGap] = Field(None, alias="seniorityGap")
    overall_score: float = Field(0, ge=0, le=100, alias="overallScore")
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    feedback: str = ""
    upskilling_plan: UpskillingPlan = Field(default_factory=UpskillingPlan, alias="upskillingPlan")

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "technicalCompetencies": {"Kubernetes/OpenShift": 8.0, "Terraform": 6.5},
                "softSkills": {"behavioral": 7.5, "thinking": 8.0, "communication": 7.5, "problemSolving": 8.0},
                "overallScore": 76,
                "strengths": ["Kubernetes Debugging: correctly walked through describe, logs, then events."],
                "improvements": ["Terraform State: use a remote backend instead of committing state to Git."],
                "feedback": "Strong Kubernetes troubleshooting, gaps in Terraform state management.",
                "upskillingPlan": {"weeks": 2, "focus_areas": ["Week 1: Terraform remote state"]},
            }
        },
    )


class ExtractedTopic(_CamelModel):
    """A technical topic found in a transcript by the fast model."""
    name: str
    category: str = "Other"
    mention_count: int = Field(1, alias="mentionCount")
    key_moments: List[str] = Field(default_factory=list, alias="keyMoments")


class TopicScore(_CamelModel):
    topic: str
    overall_score: float = Field(0, alias="overallScore")
    sub_topic_scores: List[SubTopicScore] = Field(default_factory=list, alias="subTopicScores")
    key_strengths: List[str] = Field(default_factory=list, alias="keyStrengths")
    key_weaknesses: List[str] = Field(default_factory=list, alias="keyWeaknesses")


class WeeklyPlan(BaseModel):
    week: int
    focus: str
    tasks: List[str] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)


class DetailedUpskillingPlan(_CamelModel):
    weeks: int = 0
    weekly_breakdown: List[WeeklyPlan] = Field(default_factory=list, alias="weeklyBreakdown")


class FeedbackReport(_CamelModel):
    """Output of the topic feedback pipeline."""
    topics: List[TopicScore] = Field(default_factory=list)
    overall_score: int = Field(0, alias="overallScore")
    upskilling_plan: DetailedUpskillingPlan = Field(default_factory=DetailedUpskillingPlan, alias="upskillingPlan")
    timestamp: str
