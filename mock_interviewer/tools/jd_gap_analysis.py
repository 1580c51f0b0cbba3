"""
Gap analysis between a parsed job description and a candidate.

The result names the "pressure points" the interviewer should probe first:
required skills the candidate does not list, critical responsibilities they
have no background in, large experience gaps and scale mismatches.
"""
import json
from typing import List, Optional

from mock_interviewer.models.job_description import (
    CandidateBackground,
    ExperienceGap,
    JDGapAnalysis,
    ParsedJD,
    ScaleGap,
)
from mock_interviewer.utils.constants import NO_GAPS_INSTRUCTIONS

HIGH_AVAILABILITY_SIGNALS = ("99.9", "99.99", "high availability", "ha", "multi-region", "disaster recovery")

# (gap name, JD responsibility keywords, candidate keywords, check technologies instead of skills)
CRITICAL_GAP_RULES = [
    ("Disaster Recovery", ("disaster recovery", "dr"), ("disaster", "dr"), False),
    ("Multi-Region Architecture", ("multi-region", "global"), ("multi-region", "global"), True),
    ("Cost Optimization", ("cost optimization", "cost"), ("cost", "optimization"), False),
    ("Security & Compliance", ("security", "compliance"), ("security", "compliance"), False),
]


def _overlaps(a: str, b: str) -> bool:
    return a in b or b in a


def _missing(required: List[str], have: List[str]) -> List[str]:
    return [item for item in required if not any(_overlaps(h, item.lower()) for h in have)]


def _experience_gap(jd: ParsedJD, candidate: CandidateBackground) -> Optional[ExperienceGap]:
    if not jd.experience_years or candidate.experience_years is None:
        return None
    gap = jd.experience_years - candidate.experience_years
    if gap <= 0:
        return None
    return ExperienceGap(required=jd.experience_years, candidate=candidate.experience_years, gap=gap)


def _scale_gap(jd: ParsedJD, candidate: CandidateBackground) -> Optional[ScaleGap]:
    jd_blob = json.dumps(jd.model_dump(by_alias=True)).lower()
    needs_ha = any(signal in jd_blob for signal in HIGH_AVAILABILITY_SIGNALS)
    if needs_ha and jd.company_stage == "Startup":
        return ScaleGap(
            jd_requires=["High Availability", "Multi-Region", "99.99% Uptime"],
            candidate_background=candidate.level or "Startup Experience",
        )
    return None


def analyze_jd_gaps(jd: ParsedJD, candidate: CandidateBackground) -> JDGapAnalysis:
    """
    Compare JD requirements with a candidate background.

    Args:
        jd: Parsed job description
        candidate: Candidate skills, technologies, years and level

    Returns:
        JDGapAnalysis with deduplicated pressure points
    """
    skills = [s.lower() for s in candidate.skills]
    technologies = [t.lower() for t in candidate.technologies]

    missing_required = _missing(jd.required_skills, skills)
    experience_gap = _experience_gap(jd, candidate)
    scale_gap = _scale_gap(jd, candidate)

    responsibilities = [r.lower() for r in jd.responsibilities]
    critical_gaps = []
    for name, jd_keywords, candidate_keywords, use_tech in CRITICAL_GAP_RULES:
        if not any(k in r for r in responsibilities for k in jd_keywords):
            continue
        background = technologies if use_tech else skills
        if not any(k in b for b in background for k in candidate_keywords):
            critical_gaps.append(name)

    pressure_points = missing_required[:3] + critical_gaps
    if experience_gap and experience_gap.gap >= 2:
        gap_years = int(experience_gap.gap) if float(experience_gap.gap).is_integer() else experience_gap.gap
        pressure_points.append(f"{gap_years} years of experience gap")
    if scale_gap:
        pressure_points.append("High Availability & Multi-Region")

    return JDGapAnalysis(
        missing_required_skills=missing_required,
        missing_preferred_skills=_missing(jd.preferred_skills, skills),
        missing_technologies=_missing(jd.tools, technologies),
        experience_gap=experience_gap,
        scale_gap=scale_gap,
        critical_gaps=critical_gaps,
        pressure_points=list(dict.fromkeys(pressure_points)),
    )


def generate_gap_analysis_instructions(gap: JDGapAnalysis) -> str:
    """Render a gap analysis as interviewer instructions."""
    if not gap.pressure_points:
        return NO_GAPS_INSTRUCTIONS

    lines = [
        "**CRITICAL: JD GAP ANALYSIS - PRESSURE POINTS**",
        "The candidate has gaps in the following areas. These are HIGH PRIORITY for testing:",
        "",
    ]
    if gap.missing_required_skills:
        lines += [
            f"**Missing Required Skills:** {', '.join(gap.missing_required_skills)}",
            "-> You MUST test these areas. If they claim to know them, drill deep.",
            "",
        ]
    if gap.missing_technologies:
        lines += [
            f"**Missing Technologies:** {', '.join(gap.missing_technologies)}",
            "-> Ask if they have experience. If yes, test thoroughly. If no, this is a red flag.",
            "",
        ]
    if gap.experience_gap:
        lines += [
            f"**Experience Gap:** JD requires {gap.experience_gap.required:g} years, "
            f"candidate has {gap.experience_gap.candidate:g}",
            "-> Test for depth and maturity, not just years. Look for advanced patterns.",
            "",
        ]
    if gap.scale_gap:
        lines += [
            f"**Scale Gap:** JD requires {', '.join(gap.scale_gap.jd_requires)}, "
            f"but candidate background suggests {gap.scale_gap.candidate_background}",
            "-> CRITICAL: Test High Availability, Disaster Recovery, Multi-Region scenarios heavily.",
            "-> This is where they're most likely to fail.",
            "",
        ]
    if gap.critical_gaps:
        lines += [
            f"**Critical Gaps:** {', '.join(gap.critical_gaps)}",
            "-> These are MUST-HAVE for this role. Test extensively.",
            "",
        ]
    lines += [
        "**INTERVIEW STRATEGY:**",
        "1. Start with pressure points early in the interview",
        "2. Drill deep on gaps - don't accept surface-level answers",
        "3. Use expert scenarios that test these specific gaps",
        "4. If they can't answer pressure point questions, that's a major red flag",
    ]
    return "\n".join(lines)
