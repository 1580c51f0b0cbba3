"""
Job description models: the parsed JD and its gap analysis against a candidate.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParsedJD(BaseModel):
    """Structured job description extracted by the fast model."""
    model_config = ConfigDict(populate_by_name=True)

    role: str = "Software Engineer"
    level: str = Field("Mid", description="Entry, Mid, Senior or Principal")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills")
    preferred_skills: List[str] = Field(default_factory=list, alias="preferredSkills")
    tools: List[str] = Field(default_factory=list, description="Technologies, frameworks, platforms")
    company_culture: Optional[str] = Field(None, alias="companyCulture")
    team_size: str = Field("Unknown", alias="teamSize")
    responsibilities: List[str] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    experience_years: Optional[float] = Field(None, alias="experienceYears")
    location: Optional[str] = None
    remote: Optional[bool] = None
    keywords: List[str] = Field(default_factory=list)
    industry: Optional[str] = None
    company_stage: str = Field("Unknown", alias="companyStage", description="Startup, Scale-up, Enterprise")
    technical_requirements: List[str] = Field(default_factory=list, alias="technicalRequirements")
    key_responsibilities: List[str] = Field(default_factory=list, alias="keyResponsibilities")
    certifications: List[str] = Field(default_factory=list)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CandidateBackground(BaseModel):
    """What we know about the candidate when comparing against a JD."""
    skills: List[str] = Field(default_factory=list)
    experience_years: Optional[float] = None
    level: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)


class ExperienceGap(BaseModel):
    required: float
    candidate: float
    gap: float


class ScaleGap(BaseModel):
    jd_requires: List[str]
    candidate_background: str


class JDGapAnalysis(BaseModel):
    """Gaps between a JD and a candidate, plus the pressure points to test."""
    missing_required_skills: List[str] = Field(default_factory=list)
    missing_preferred_skills: List[str] = Field(default_factory=list)
    missing_technologies: List[str] = Field(default_factory=list)
    experience_gap: Optional[ExperienceGap] = None
    scale_gap: Optional[ScaleGap] = None
    critical_gaps: List[str] = Field(default_factory=list)
    pressure_points: List[str] = Field(default_factory=list)
