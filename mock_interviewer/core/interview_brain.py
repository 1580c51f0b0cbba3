"""
Rule-based interview brain.

Extracts what a candidate says about themselves and walks topics from basic
to advanced questions without calling a model. Used for the plain text turn
endpoint and the offline interview simulator.
"""
import re
import random
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from mock_interviewer.utils.constants import InterviewPhase

logger = logging.getLogger(__name__)

TECH_KEYWORDS = [
    "kubernetes", "k8s", "docker", "terraform", "aws", "azure", "gcp",
    "jenkins", "github actions", "gitlab", "ci/cd", "helm", "ansible",
    "prometheus", "grafana", "elk", "vault", "consul", "nginx",
    "istio", "linkerd", "kafka", "redis", "postgresql", "mongodb",
]

INTRO_QUESTION = (
    "To get started, could you give me a brief overview of your background? I'd like to hear about your "
    "years of experience, your current role, and the key technologies and tools you've worked with."
)
NO_INTRO_QUESTION = "Could you tell me about your experience with Kubernetes or container orchestration?"

STANDARD_TOPIC_ORDER = ["kubernetes", "cicd", "deployment", "terraform", "cloud"]
TOPICS_PER_DEPTH_LIMIT = 3

_YEARS_PATTERN = re.compile(r"(\d+)\s*(?:years?|yrs?|yr)", re.IGNORECASE)
_SKILL_PATTERNS = [
    re.compile(r"(?:I|we|my team)\s+(?:work|worked|use|used|have|had)\s+(?:with|on)\s+([^.,!?]+)", re.IGNORECASE),
    re.compile(r"(?:experience|expertise|knowledge)\s+(?:with|in|on)\s+([^.,!?]+)", re.IGNORECASE),
]

ENTRY_QUESTIONS: Dict[str, List[str]] = {
    "kubernetes": [
        "What are the different types of services available in Kubernetes?",
        "If I want to expose an application outside of Kubernetes, how can I do that?",
        "What's the difference between a Deployment and a StatefulSet?",
        "How do you scale a Kubernetes application?",
    ],
    "cicd": [
        "What is CI/CD and why is it important?",
        "Walk me through a typical CI/CD pipeline.",
        "What happens when a CI/CD pipeline fails?",
    ],
    "cloud": [
        "What is a VPC and why do we need it?",
        "How do you secure network traffic in the cloud?",
        "What's the difference between public and private subnets?",
    ],
    "terraform": [
        "What is Infrastructure as Code?",
        "How does Terraform manage state?",
        "What happens when you run terraform apply?",
    ],
}

# {tech} is replaced with the candidate's first technology, or the topic id
SCENARIO_QUESTIONS: Dict[str, Dict[str, List[str]]] = {
    "kubernetes": {
        "intermediate": [
            "Your {tech} pods are stuck in Pending state. Walk me through your debugging process.",
            "You need to expose a service outside the cluster. What options do you have?",
            "Your application needs to scale based on CPU usage. How would you configure this?",
        ],
        "advanced": [
            "Your {tech} cluster nodes are being terminated unexpectedly during peak traffic. How do you debug and resolve this?",
            "You're seeing network connectivity issues between pods across different namespaces. How do you troubleshoot?",
            "Your StatefulSet is experiencing data corruption. Walk me through your recovery process.",
        ],
    },
    "cicd": {
        "intermediate": [
            "Your CI/CD pipeline is failing during the deployment stage. How do you debug this?",
            "A production deployment failed halfway through rollout. How do you handle this?",
        ],
        "advanced": [
            "Your CI/CD system is down and blocking all deployments. How do you restore service?",
            "A security scan in your pipeline is blocking a critical hotfix. How do you proceed?",
        ],
    },
    "cloud": {
        "intermediate": [
            "You need to set up networking between two VPCs in different regions. How would you do this?",
            "Your application needs cross-region encryption. Walk me through your approach.",
        ],
        "advanced": [
            "You're experiencing network latency between regions. How do you optimize this?",
            "Your multi-region setup needs disaster recovery. How do you design this?",
        ],
    },
}

# (keywords in the last answer, follow-up question), first match wins
DRILL_DOWN_FOLLOW_UPS = [
    (("ingress", "ingress controller"),
     "You mentioned using an ingress controller. What happens if the ingress controller itself fails? "
     "How do you ensure high availability?"),
    (("load balancer", "alb", "nlb"),
     "Good. Now, if you're using a load balancer, how do you handle SSL/TLS termination? "
     "What about certificate management?"),
    (("service", "clusterip"),
     "You mentioned using a Service. What's the difference between ClusterIP, NodePort, and LoadBalancer? "
     "When would you use each?"),
    (("hpa", "horizontal pod autoscaler"),
     "You mentioned HPA. How does HPA decide when to scale? What metrics does it use? "
     "What if the metrics are delayed?"),
    (("vpc", "virtual private cloud"),
     "You mentioned VPC. How do you handle cross-region communication? What about encryption in transit?"),
]

GENERIC_FOLLOW_UPS = {
    1: "Good. Now, let's say that solution fails. What's your backup plan? How do you ensure reliability?",
    2: "What about edge cases? What happens under high load? How do you handle failures?",
}
DEEP_FOLLOW_UP = (
    "Let's go deeper. What are the trade-offs of that approach? What are the limitations? How would you improve it?"
)
ELABORATE_FOLLOW_UP = "Can you elaborate on that? Walk me through the specific steps."


@dataclass
class CandidateIntro:
    """What the candidate told us about themselves."""
    technologies: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    experience_years: Optional[int] = None
    level: Optional[str] = None


@dataclass
class BrainState:
    phase: str = InterviewPhase.INTRODUCTION
    current_topic: Optional[str] = None
    topics_covered: List[str] = field(default_factory=list)
    question_depth: int = 0
    candidate_intro: Optional[CandidateIntro] = None
    last_question: Optional[str] = None
    last_answer: Optional[str] = None


@dataclass(frozen=True)
class NextQuestion:
    question: str
    topic: str
    depth: int


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_candidate_intro(intro_text: str) -> CandidateIntro:
    """
    Pull technologies, years of experience, level and skill phrases out of
    a candidate's introduction.
    """
    lower = intro_text.lower()
    technologies = [tech for tech in TECH_KEYWORDS if tech in lower]

    years_match = _YEARS_PATTERN.search(lower)
    years = int(years_match.group(1)) if years_match else None

    level = None
    if "junior" in lower or "entry" in lower or (years is not None and years < 2):
        level = "entry"
    elif "senior" in lower or "lead" in lower or (years is not None and years >= 5):
        level = "senior"
    elif "architect" in lower or "principal" in lower:
        level = "architect"
    elif years is not None and years >= 2:
        level = "mid"

    skills = []
    for pattern in _SKILL_PATTERNS:
        for match in pattern.finditer(intro_text):
            skill = match.group(1).strip()
            if 3 < len(skill) < 50:
                skills.append(skill)

    return CandidateIntro(
        technologies=_unique(technologies),
        skills=_unique(skills),
        experience_years=years,
        level=level,
    )


def get_topic_progression(intro: CandidateIntro) -> List[str]:
    """Order topics so the ones the candidate mentioned come first."""
    techs = intro.technologies
    priority = []
    if any("kubernetes" in t or "k8s" in t for t in techs):
        priority.append("kubernetes")
    if any("ci/cd" in t or "jenkins" in t or "github" in t for t in techs):
        priority.append("cicd")
    if any("aws" in t or "azure" in t or "gcp" in t for t in techs):
        priority.append("cloud")
    if any("terraform" in t or "iac" in t for t in techs):
        priority.append("terraform")

    priority.extend(topic for topic in STANDARD_TOPIC_ORDER if topic not in priority)
    return priority


def _entry_question(topic: str) -> str:
    return random.choice(ENTRY_QUESTIONS.get(topic, ENTRY_QUESTIONS["kubernetes"]))


def _scenario_question(topic: str, candidate_tech: List[str], difficulty: str) -> str:
    tech = candidate_tech[0] if candidate_tech else topic
    options = SCENARIO_QUESTIONS.get(topic, {}).get(difficulty) or SCENARIO_QUESTIONS["kubernetes"]["intermediate"]
    return random.choice(options).format(tech=tech)


def _drill_down_question(previous_answer: str, depth: int) -> str:
    lower = previous_answer.lower()
    for keywords, question in DRILL_DOWN_FOLLOW_UPS:
        if any(keyword in lower for keyword in keywords):
            return question
    if depth in GENERIC_FOLLOW_UPS:
        return GENERIC_FOLLOW_UPS[depth]
    if depth >= 3:
        return DEEP_FOLLOW_UP
    return ELABORATE_FOLLOW_UP


def generate_progressive_question(
    topic: str,
    level: str,
    depth: int,
    candidate_tech: Optional[List[str]] = None,
    previous_answer: Optional[str] = None,
) -> str:
    """
    Pick a question for a topic at the given depth.

    Depth 0 opens with a definition (entry) or a scenario (mid, senior). From
    depth 1 the previous answer drives a drill-down follow-up.
    """
    candidate_tech = candidate_tech or []
    if level == "entry" and depth == 0:
        return _entry_question(topic)
    if level in ("mid", "senior") and depth == 0:
        return _scenario_question(topic, candidate_tech, "intermediate")
    if previous_answer and depth > 0:
        return _drill_down_question(previous_answer, depth)
    return _scenario_question(topic, candidate_tech, "advanced" if depth > 2 else "intermediate")


def get_next_question(state: BrainState) -> NextQuestion:
    """Decide the next question from the current brain state."""
    if state.phase == InterviewPhase.INTRODUCTION:
        return NextQuestion(question=INTRO_QUESTION, topic="introduction", depth=0)

    intro = state.candidate_intro
    if intro is None or not intro.technologies:
        return NextQuestion(question=NO_INTRO_QUESTION, topic="kubernetes", depth=0)

    progression = get_topic_progression(intro)
    level = intro.level or "mid"

    if state.question_depth >= TOPICS_PER_DEPTH_LIMIT and state.current_topic:
        current_index = progression.index(state.current_topic) if state.current_topic in progression else -1
        if current_index + 1 < len(progression):
            next_topic = progression[current_index + 1]
            logger.debug(f"Moving from {state.current_topic} to {next_topic}")
            return NextQuestion(
                question=generate_progressive_question(next_topic, level, 0, intro.technologies),
                topic=next_topic,
                depth=0,
            )

    topic = state.current_topic or progression[0]
    return NextQuestion(
        question=generate_progressive_question(
            topic, level, state.question_depth, intro.technologies, state.last_answer
        ),
        topic=topic,
        depth=state.question_depth,
    )


def advance_state(state: BrainState, candidate_answer: str) -> BrainState:
    """
    Record a candidate answer and move the state forward.

    The first answer is treated as the introduction; after that each answer
    deepens the current topic until the next question switches topics.
    """
    if state.phase == InterviewPhase.INTRODUCTION:
        state.candidate_intro = extract_candidate_intro(candidate_answer)
        state.phase = InterviewPhase.TOPICS
        state.last_answer = candidate_answer
        return state

    state.last_answer = candidate_answer
    state.question_depth += 1
    return state


def apply_next_question(state: BrainState, next_question: NextQuestion) -> BrainState:
    """Point the state at the question that was just asked."""
    if next_question.topic != "introduction":
        if next_question.topic != state.current_topic and state.current_topic:
            if state.current_topic not in state.topics_covered:
                state.topics_covered.append(state.current_topic)
        state.current_topic = next_question.topic
        state.question_depth = next_question.depth
    state.last_question = next_question.question
    return state


def brain_state_to_dict(state: BrainState) -> Dict[str, Any]:
    return asdict(state)


def brain_state_from_dict(data: Optional[Dict[str, Any]]) -> BrainState:
    """Rebuild a stored brain state, starting fresh when nothing is stored."""
    if not data:
        return BrainState()
    values = dict(data)
    intro = values.pop("candidate_intro", None)
    state = BrainState(**values)
    if intro:
        state.candidate_intro = CandidateIntro(**intro)
    return state
