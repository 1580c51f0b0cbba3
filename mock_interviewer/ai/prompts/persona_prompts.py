"""
Interviewer system prompt assembly.

``generate_system_prompt`` stitches the persona template together with role
guidance, JD integration, gap analysis, seed scenarios, previously asked
questions and the practice-mode rules for one interview session.
"""
import json
import random
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mock_interviewer.ai.expert_scenarios import ExpertScenario, get_expert_scenarios
from mock_interviewer.ai.interview_flow import InterviewTopic, get_topic
from mock_interviewer.ai.prompts.role_prompts import RolePromptConfig, get_role_prompt
from mock_interviewer.ai.question_bank import get_question_scenarios
from mock_interviewer.models.job_description import CandidateBackground, ParsedJD
from mock_interviewer.tools.jd_gap_analysis import analyze_jd_gaps, generate_gap_analysis_instructions
from mock_interviewer.utils.constants import MAX_EXPERT_SCENARIOS, MAX_PREVIOUS_QUESTIONS, NO_PREVIOUS_QUESTIONS

logger = logging.getLogger(__name__)


INTERVIEWER_PERSONA_PROMPT = """
# ROLE: {interviewer_persona}
{interviewer_persona_description}

**CRITICAL: You are a REAL INTERVIEWER, not a script reader. You LISTEN, ADAPT, and THINK on your feet.**

# GLOBAL RULES (ALWAYS APPLY)
1. **LISTEN FIRST, ADAPT ALWAYS**:
   - The candidate's introduction is GOLD. Use it to tailor EVERY question.
   - If they mention AWS, ask AWS-specific incidents. If they mention Jenkins, ask Jenkins-specific scenarios.
   - Example: If they say "I work with Kubernetes on AWS", ask about "EKS cluster issues" not generic "pod pending".

2. **INCIDENT-FIRST, BUT UNIQUE TO CANDIDATE**:
   - Every question must be scenario-based, starting from an incident or failure. NO definition/knowledge questions.
   - The example scenarios below are ONLY EXAMPLES of the format. NEVER use them verbatim.
   - CREATE UNIQUE scenarios from what the candidate ACTUALLY mentioned, the JD technologies and their level.

3. **NO ECHOING**:
   - NEVER repeat, paraphrase or summarize what the candidate just said.
   - Give a brief acknowledgment (1-2 words max: "Got it", "Makes sense") then IMMEDIATELY ask the next question.

4. **DRILL-DOWN DEEPLY (5 LEVELS MINIMUM)**:
   - Ask ONE question and drill down 5+ levels deep before moving to a new topic.
   - Keep drilling until you find their depth limit or they demonstrate expert knowledge.

5. **DYNAMIC SCENARIO SELECTION**:
   - Pick scenarios that match what the candidate mentioned.
   - Prioritize: JD requirements > Candidate's mentioned tech > Question bank scenarios

6. **INTERVIEW DURATION**:
   - This interview lasts approximately {duration_minutes} MINUTES.
   - Do NOT end the interview early and do NOT start wrap-up before most of the time has passed.

# JD INTEGRATION RULES
{jd_integration_instructions}

# JD GAP ANALYSIS & PRESSURE POINTS
{jd_gap_analysis}

# INTERVIEW STRUCTURE

## PHASE 1: INTRODUCTION & SETTING THE STAGE
**Your Introduction Script (KEEP IT SHORT - 2-3 sentences max):**
"Hi, I'm Alex. {interviewer_intro_line} I'll be conducting your technical interview today. To get started, could you give me a brief overview of your background? I'd like to hear about your years of experience, your current role, and the key technologies and tools you've worked with."

After their intro:
- EXTRACT their top skills/technologies, experience level and years of experience.
- START with the FIRST technology they mentioned and follow a logical flow: K8s -> CI/CD -> Cloud -> Terraform.
- ENTRY LEVEL: start with foundational questions, THEN build to scenarios.
- MID/SENIOR LEVEL: start with scenarios, then drill down.
- ONLY move to the next topic after drilling 3-5 questions deep on the current one.

**Setting the stage (2-3 sentences max):**
"Thank you. I heard you mentioned {candidate_technologies}. Let's dive into your experience with {first_topic}."
Then IMMEDIATELY ask your first specific question. DO NOT list or enumerate topics.

## PHASE 2: TECHNICAL TOPICS
**THIS PHASE IS FOR TECHNICAL QUESTIONS ONLY - NO BEHAVIORAL QUESTIONS**
{practice_mode_hints}
**DRILL-DOWN LIMITS:** after 3-4 follow-up questions on the SAME scenario, MOVE TO THE NEXT TOPIC.

**Available Topics to Cover (adapt order and depth based on candidate):**
{topic_sections}

## PHASE 3: WRAP-UP - BEHAVIORAL QUESTIONS ONLY
- Ask 2-3 behavioral questions, then ask if they have questions for you, then close professionally.
{behavioral_questions_from_culture}

# EVALUATION RUBRICS (Assess throughout)
1. Architectural Reasoning: blast radius, state management, regional failover, single points of failure.
2. Strategic Trade-offs: operational overhead, learning curve, team size, budget and timeline.
3. Incident Management: stakeholder communication, blameless post-mortems, MTTR, error budgets.
4. Operational Excellence: right-sizing, policy-as-code, governance, cost optimization.
Soft skills: behavioral, thinking, communication, problem-solving.

# PRESSURE PROMPT TECHNIQUE (The "Counter-Argument Loop")
When the candidate suggests a solution, push back with a counter-argument about timeline, budget, simplicity or
operational overhead. A senior explains the long-term debt; a medior agrees or gets defensive.

# ROLE-SPECIFIC GUIDANCE
{role_specific_guidance}

# EXPERT SCENARIO SEEDS (OUTCOME-BASED)
{expert_scenarios}
These are for YOUR reference only. DO NOT read them to the candidate; create your own unique scenarios.

# QUESTION BANK SCENARIOS
{question_bank_scenarios}
These show the format only. Prefer the expert scenarios above.

# PREVIOUS QUESTIONS (DO NOT REPEAT)
{previous_questions_list}

**Remember: You're a smart interviewer who adapts. Not a robot reading a script.**
"""

PRACTICE_MODE_HINTS = """
# PRACTICE MODE - HINTS & GUIDANCE ENABLED

**This is PRACTICE MODE. Your role is to TEACH and GUIDE, not just assess.**
The candidate can ask for a hint at any time ("I need a hint", "I'm stuck", "I don't know").

HINT RULES:
1. Provide hints when asked, when the candidate seems stuck, or after 2-3 incorrect attempts.
2. Use progressive hints: subtle ("Think about..."), moderate ("Have you considered...?"),
   explicit ("One approach is..."), direct ("The solution involves...").
3. Prefer the Socratic method: leading questions over direct answers.
4. Encourage after hints ("You're on the right track!") and follow up with an edge case to check understanding.
"""

REGULAR_MODE_RULES = """
# REGULAR INTERVIEW MODE - NO HINTS

**This is a scored interview. Do NOT provide hints or guidance.**
- Assess their knowledge as-is
- Only provide minimal clarification if they ask about the question itself (not the answer)
"""

CONTEXT_BLOCK = """
[RELEVANT AWS ARCHITECTURAL STANDARDS & CONTEXT]
{retrieved_context}

[INSTRUCTION ON USING CONTEXT]
- Use the above AWS standards to FACT-CHECK the candidate.
- If their answer contradicts the standards (e.g. they ignore "Security Pillar" advice), CHALLENGE them.
- Cite the standard provided above if relevant (e.g., "According to the AWS Security Pillar...").
"""

GENERAL_BEHAVIORAL_QUESTIONS = [
    "\"Tell me about a time you had to work under significant pressure during a critical production incident. How did you handle it?\"",
    "\"Describe a situation where you had to collaborate with someone who had a different technical approach than you. How did you resolve the disagreement?\"",
    "\"Give me an example of how you've handled a situation where you had to learn something new quickly to solve a problem.\"",
]

# (culture keywords, behavioral question), checked in order
CULTURE_QUESTIONS = [
    (("collaborat", "team"),
     "\"Tell me about a time you had to collaborate with a difficult team member or stakeholder during a critical incident. How did you handle it?\""),
    (("innov", "creativ", "experiment"),
     "\"Describe a situation where you had to innovate or think creatively to solve a problem when standard solutions weren't working.\""),
    (("fast", "agile", "startup"),
     "\"Give me an example of how you've balanced technical perfection with the need to move quickly and meet tight deadlines.\""),
    (("customer", "user", "client"),
     "\"Tell me about a time you had to prioritize customer needs over technical preferences. How did you make that decision?\""),
    (("learn", "growth", "develop"),
     "\"Describe a situation where you had to quickly learn a new technology or tool to solve a critical problem. How did you approach it?\""),
    (("ownership", "accountable", "responsib"),
     "\"Give me an example of a time you took ownership of a problem that wasn't technically your responsibility. What was the outcome?\""),
    (("communicat", "transparent", "open"),
     "\"Tell me about a time you had to communicate a complex technical issue to a non-technical stakeholder during an incident. How did you approach it?\""),
]

# (topic id, section heading, short name used for JD matching, adaptation hint)
TOPIC_SECTIONS = [
    ("kubernetes", "Kubernetes/OpenShift", "Kubernetes",
     "If they mentioned EKS, ask EKS-specific scenarios. If GKE, ask GKE-specific. If they didn't mention K8s, ask if they have experience or move on."),
    ("cicd", "CI/CD Tools", "CI/CD",
     "If they use GitHub Actions, ask GitHub Actions scenarios. If they use Jenkins, ask Jenkins scenarios. Match their tools!"),
    ("deployment", "Deployment Strategy", None,
     "Adapt to their deployment patterns (blue-green, canary, rolling, etc.)"),
    ("helm", "Helm Charts", None,
     "Only if they mentioned Helm or K8s. Otherwise, skip or ask briefly."),
    ("terraform", "Terraform", None,
     "If they use CloudFormation, ask CloudFormation scenarios. If they use Pulumi, ask Pulumi. Match their IaC tool!"),
    ("cloud", "Cloud Provider Services", "Cloud",
     "If they mentioned AWS, ask AWS-specific services. If GCP, ask GCP. If Azure, ask Azure. Match their cloud!"),
]

DEFAULT_TOPIC_LABELS = {
    "kubernetes": "Kubernetes/Container Orchestration",
    "cicd": "CI/CD Pipelines",
    "deployment": "Deployment Strategies",
    "terraform": "Infrastructure as Code",
    "cloud": "Cloud Services",
}


@dataclass(frozen=True)
class InterviewerPersona:
    title: str
    description: str
    intro: str


class SystemPromptContext(BaseModel):
    """Everything known about a session when building its system prompt."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user_skills: Union[str, List[str], None] = Field(None, description="JSON list string or list of skills")
    target_role: str = Field("Mid-Senior", description="Pack level, e.g. Entry, Senior, Principal")
    jd_text: str = ""
    interview_type_title: str = ""
    parsed_jd: Optional[ParsedJD] = None
    previous_questions: List[str] = Field(default_factory=list)
    pack_role: Optional[str] = None
    candidate_profile: Optional[CandidateBackground] = None
    retrieved_context: Optional[str] = None
    is_practice: bool = False
    duration_minutes: int = 20


def get_interviewer_persona(level: str) -> InterviewerPersona:
    """Pick the interviewer persona that fits the candidate's level."""
    lowered = (level or "").lower()
    if "entry" in lowered or "junior" in lowered:
        return InterviewerPersona(
            title="Senior Engineer (Interviewer Persona)",
            description=(
                'You are "Alex," a Senior Engineer at a Tier-1 tech firm. You are interviewing a junior/entry-level '
                "candidate for a DevOps/SRE position. Your role is to assess their foundational knowledge, "
                "problem-solving approach, and potential for growth. You should be supportive but thorough, helping "
                "them think through problems while evaluating their technical understanding."
            ),
            intro="I'm a Senior Engineer here,",
        )
    if "architect" in lowered or "principal" in lowered:
        return InterviewerPersona(
            title="Lead Architect (Interviewer Persona)",
            description=(
                'You are "Alex," a Lead Architect at a Tier-1 tech firm. You are interviewing a Cloud Architect '
                "candidate. Your role is to assess their architectural thinking, strategic decision-making, system "
                "design capabilities, and ability to balance technical excellence with business constraints. You "
                "should challenge their assumptions and evaluate their ability to design systems at scale."
            ),
            intro="I'm a Lead Architect here,",
        )
    return InterviewerPersona(
        title="Cloud Architect (Interviewer Persona)",
        description=(
            'You are "Alex," a Cloud Architect at a Tier-1 tech firm. You are interviewing a Senior DevOps/SRE '
            "candidate. Your role is to assess their depth of technical knowledge, strategic thinking, ability to "
            "handle complex incidents, and their understanding of trade-offs between technical solutions and "
            "business needs. You should challenge them with real-world scenarios and evaluate their senior-level "
            "competencies."
        ),
        intro="I'm a Cloud Architect here,",
    )


def scenario_difficulty(level: str) -> str:
    """Map a pack level onto an expert scenario difficulty."""
    lowered = (level or "").lower()
    if "entry" in lowered:
        return "entry"
    if "principal" in lowered or "architect" in lowered:
        return "principal"
    if "senior" in lowered:
        return "senior"
    return "mid"


def _parse_user_skills(user_skills: Union[str, List[str], None]) -> List[str]:
    if not user_skills:
        return []
    if isinstance(user_skills, list):
        return [str(s) for s in user_skills]
    try:
        parsed = json.loads(user_skills)
    except (TypeError, ValueError):
        logger.debug("User skills are not valid JSON, ignoring")
        return []
    return [str(s) for s in parsed] if isinstance(parsed, list) else []


def _format_role_guidance(role_prompt: RolePromptConfig) -> str:
    def bullets(items: List[str]) -> str:
        return "\n".join(f"- {item}" for item in items)

    return (
        f"PERSONA: {role_prompt.persona}\n\n"
        f"FOCUS AREAS:\n{bullets(role_prompt.focus_areas)}\n\n"
        f"EVALUATION CRITERIA:\n{bullets(role_prompt.evaluation_criteria)}\n\n"
        f"COMMON INCIDENT SCENARIOS TO EXPLORE:\n{bullets(role_prompt.common_scenarios)}"
    )


def _jd_integration(parsed_jd: Optional[ParsedJD], has_jd: bool) -> str:
    if not has_jd:
        return (
            "**NO JD PROVIDED - CANDIDATE-DRIVEN:**\n"
            "- Use candidate's introduction and profile as primary source.\n"
            "- Focus on technologies and experiences they mention.\n"
            "- Still cover all topics but adapt based on their experience."
        )
    lines = [
        "**JD PROVIDED - USE AS PRIMARY SOURCE:**",
        "- JD is the PRIMARY source for questions. Prioritize JD requirements over candidate intro.",
        "- If JD mentions a technology, you MUST ask about it even if candidate didn't mention it.",
        "- Adapt incident scenarios to match JD requirements.",
    ]
    if parsed_jd.technical_requirements:
        numbered = ", ".join(f"{i}. {req}" for i, req in enumerate(parsed_jd.technical_requirements, start=1))
        lines.append(f"- MANDATORY TECHNICAL REQUIREMENTS: {numbered}")
    if parsed_jd.tools:
        lines.append(f"- MANDATORY TECHNOLOGIES: {', '.join(parsed_jd.tools)}")
    return "\n".join(lines)


def _format_previous_questions(previous_questions: List[str]) -> str:
    if not previous_questions:
        return NO_PREVIOUS_QUESTIONS
    return "\n".join(
        f'{i}. "{q}"' for i, q in enumerate(previous_questions[:MAX_PREVIOUS_QUESTIONS], start=1)
    )


def _already_asked(scenario: ExpertScenario, previous_questions: List[str]) -> bool:
    title = scenario.title.lower()
    opening = " ".join(scenario.scenario.lower().split()[:10])
    for question in previous_questions:
        lowered = question.lower()
        if title in lowered or opening in lowered:
            return True
        if "pending" in title and "pending" in lowered:
            return True
    return False


def select_expert_scenarios(
    technologies: List[str],
    level: str,
    previous_questions: List[str],
    limit: int = MAX_EXPERT_SCENARIOS,
) -> List[ExpertScenario]:
    """Shuffle the matching expert scenarios, skipping ones already asked."""
    candidates = get_expert_scenarios(technologies or ["kubernetes", "aws"], scenario_difficulty(level))
    available = [s for s in candidates if not _already_asked(s, previous_questions)]
    random.shuffle(available)
    return available[:limit]


def _format_expert_scenarios(scenarios: List[ExpertScenario]) -> str:
    if not scenarios:
        return "No expert scenarios available for this role/tech stack."
    blocks = []
    for i, s in enumerate(scenarios, start=1):
        blocks.append(
            f"{i}. **{s.title}**\n"
            f"   Scenario: {s.scenario}\n"
            f"   Complexity: {s.complexity}\n"
            f"   Drill-down path: {' -> '.join(s.drill_down_path[:3])}...\n"
            f"   Adapt to: {', '.join(s.applicable_tech)}"
        )
    return "\n\n".join(blocks)


def _format_question_bank(role: str, level: str) -> str:
    scenarios = get_question_scenarios(role, level)
    if not scenarios:
        return "No scenarios available for this role."
    return "\n".join(f'{i}. {s.scenario}: "{s.question_template}"' for i, s in enumerate(scenarios, start=1))


def _behavioral_section(parsed_jd: Optional[ParsedJD], has_jd: bool) -> str:
    if has_jd and parsed_jd.company_culture:
        culture = parsed_jd.company_culture.lower()
        questions = [q for keywords, q in CULTURE_QUESTIONS if any(k in culture for k in keywords)]
        if not questions:
            questions = list(GENERAL_BEHAVIORAL_QUESTIONS)
        numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(questions[:5], start=1))
        return (
            f"**Company Culture from JD**: {parsed_jd.company_culture}\n\n"
            f"**Behavioral Questions to Ask (choose 2-3):**\n{numbered}\n\n"
            "- Ask these questions ONLY in the wrap-up phase\n"
            "- Listen for alignment with company culture/values"
        )
    numbered = "\n".join(f"{i}. {q}" for i, q in enumerate(GENERAL_BEHAVIORAL_QUESTIONS, start=1))
    return (
        "**No JD provided - Use General Behavioral Questions:**\n"
        f"Ask 2-3 of these questions in wrap-up phase:\n{numbered}"
    )


def _topic_focus(topic: InterviewTopic, level: str) -> str:
    lowered = level.lower()
    if "architect" in lowered:
        items = topic.architect_level_focus
    elif "entry" in lowered:
        items = topic.entry_level_focus
    else:
        items = topic.senior_level_focus
    return ", ".join(items[:3])


def _jd_priority_note(parsed_jd: Optional[ParsedJD], has_jd: bool, topic_id: str, name: Optional[str]) -> str:
    if not has_jd or not name:
        return ""
    needles = (topic_id, name.lower())
    mentioned = any(n in t.lower() for t in parsed_jd.tools for n in needles) or any(
        n in r.lower() for r in parsed_jd.technical_requirements for n in needles
    )
    if mentioned:
        return f"**JD PRIORITY**: {name} is mentioned in JD requirements - cover this thoroughly."
    return ""


def _topic_sections(parsed_jd: Optional[ParsedJD], has_jd: bool, level: str) -> str:
    sections = []
    for topic_id, heading, jd_name, hint in TOPIC_SECTIONS:
        topic = get_topic(topic_id)
        lines = [f"### {heading}"]
        if topic:
            lines.append(f"Example scenario (adapt to the candidate's stack): {topic.incident_prompt}")
        note = _jd_priority_note(parsed_jd, has_jd, topic_id, jd_name)
        if note:
            lines.append(note)
        if topic:
            lines.append(f"Focus areas: {_topic_focus(topic, level)}")
        lines.append(f"**BUT**: {hint}")
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def generate_system_prompt(context: SystemPromptContext) -> str:
    """
    Build the interviewer system prompt for a session.

    Args:
        context: Session context (pack, JD, candidate, history, mode)

    Returns:
        The complete system prompt
    """
    role_key = context.pack_role or (context.interview_type_title.split(" ")[0] if context.interview_type_title else "") or "SRE"
    level_key = context.target_role or "Mid-Senior"
    persona = get_interviewer_persona(level_key)
    parsed_jd = context.parsed_jd
    has_jd = bool(parsed_jd and context.jd_text and context.jd_text.strip())

    if has_jd and context.candidate_profile:
        gap_analysis = generate_gap_analysis_instructions(analyze_jd_gaps(parsed_jd, context.candidate_profile))
    else:
        gap_analysis = "No JD gap analysis available. Focus on testing depth of knowledge."

    skills = _parse_user_skills(context.user_skills)
    candidate_technologies = ", ".join(skills[:5]) if skills else "the technologies you mentioned"

    if parsed_jd and parsed_jd.tools:
        topics_to_cover = parsed_jd.tools[:5]
    else:
        topics_to_cover = list(DEFAULT_TOPIC_LABELS.values())
    first_topic = topics_to_cover[0] if topics_to_cover else "your experience with infrastructure"

    scenario_tech = parsed_jd.tools if parsed_jd else []
    expert_scenarios = select_expert_scenarios(scenario_tech, level_key, context.previous_questions)

    prompt = INTERVIEWER_PERSONA_PROMPT.format(
        interviewer_persona=persona.title,
        interviewer_persona_description=persona.description,
        interviewer_intro_line=persona.intro,
        duration_minutes=context.duration_minutes,
        jd_integration_instructions=_jd_integration(parsed_jd, has_jd),
        jd_gap_analysis=gap_analysis,
        candidate_technologies=candidate_technologies,
        first_topic=first_topic,
        practice_mode_hints=PRACTICE_MODE_HINTS if context.is_practice else REGULAR_MODE_RULES,
        topic_sections=_topic_sections(parsed_jd, has_jd, level_key),
        behavioral_questions_from_culture=_behavioral_section(parsed_jd, has_jd),
        role_specific_guidance=_format_role_guidance(get_role_prompt(role_key, level_key)),
        expert_scenarios=_format_expert_scenarios(expert_scenarios),
        question_bank_scenarios=_format_question_bank(role_key, level_key),
        previous_questions_list=_format_previous_questions(context.previous_questions),
    )

    if context.retrieved_context and context.retrieved_context.strip():
        prompt += CONTEXT_BLOCK.format(retrieved_context=context.retrieved_context)

    return prompt
