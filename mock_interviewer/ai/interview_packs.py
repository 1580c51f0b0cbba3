"""
Interview pack catalog.

A pack is what a candidate books: a role and level, a nominal duration and a
list of sections. Role and level feed the role prompts and question bank.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PackSection:
    title: str
    duration: int
    competencies: List[str]
    questions: List[str]


@dataclass(frozen=True)
class InterviewPack:
    id: str
    title: str
    role: str
    level: str
    duration_minutes: int
    description: str
    sections: List[PackSection]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _cloud_architect_pack(pack_id: str, title: str, provider: str, services: str,
                          design_question: str, tradeoff_question: str) -> InterviewPack:
    return InterviewPack(
        id=pack_id,
        title=title,
        role="Cloud Architect",
        level="Principal",
        duration_minutes=60,
        description=(
            "High-level system design interview. Focuses on requirements gathering, trade-offs, "
            f"and cost optimization on {provider}."
        ),
        sections=[
            PackSection("Requirements Gathering", 10, ["requirements_analysis", "stakeholder_management"],
                        ["Clarify the problem statement"]),
            PackSection("Architecture Design", 30, ["system_design", services, "scalability"],
                        [design_question]),
            PackSection("Trade-offs & Cost", 20, ["cost_optimization", "operational_excellence"],
                        [tradeoff_question]),
        ],
    )


INTERVIEW_PACKS: List[InterviewPack] = [
    InterviewPack(
        id="devops-entry",
        title="DevOps Engineer - Entry Level",
        role="DevOps Engineer",
        level="Entry",
        duration_minutes=45,
        description=(
            "Perfect for junior candidates. Covers basic DevOps concepts, CI/CD fundamentals, and cloud basics."
        ),
        sections=[
            PackSection("Warmup & Concepts", 5, ["communication", "basic_definitions"],
                        ["Tell me about yourself", "What does DevOps mean to you?"]),
            PackSection("Linux & Scripting", 10, ["bash", "python", "linux_internals"],
                        ["How do you check running processes?", "Basic bash scripting scenario"]),
            PackSection("CI/CD Basics", 15, ["ci_cd_pipelines", "git_flow"],
                        ["Explain a simple CI/CD pipeline", "How do you handle merge conflicts?"]),
            PackSection("Cloud & Containers", 10, ["docker", "aws_basics"],
                        ["What is a Docker container?", "EC2 vs S3 basics"]),
        ],
    ),
    InterviewPack(
        id="devops-senior",
        title="DevOps Engineer - Senior",
        role="DevOps Engineer",
        level="Senior",
        duration_minutes=60,
        description=(
            "Advanced role simulation. Focuses on scalability, incident management, and complex infrastructure."
        ),
        sections=[
            PackSection("Warmup & Experience", 5, ["leadership", "project_impact"], []),
            PackSection("Incident Scenario", 20, ["troubleshooting", "observability", "pressure_handling"],
                        ["System is down, 502 errors, what do you do?"]),
            PackSection("CI/CD & Automation", 15, ["advanced_pipelines", "security", "optimization"],
                        ["Design a secure pipeline for financial data"]),
            PackSection("Kubernetes & Infrastructure", 15, ["kubernetes_architecture", "terraform", "ha_design"],
                        ["Architect a multi-region HA cluster"]),
        ],
    ),
    InterviewPack(
        id="sre-mid-senior",
        title="SRE Engineer",
        role="SRE",
        level="Mid-Senior",
        duration_minutes=45,
        description="Focused drill on handling production outages, root cause analysis, and postmortems.",
        sections=[
            PackSection("On-Call Simulation", 25, ["alert_triage", "mitigation", "communication"],
                        ["PagerDuty fires at 3AM. Database CPU 100%. Go."]),
            PackSection("Root Cause Analysis", 15, ["rca", "system_understanding"],
                        ["How do you prevent this from happening again?"]),
            PackSection("Postmortem & Behavioral", 5, ["learning_culture", "collaboration"],
                        ["Describe a time you failed in prod"]),
        ],
    ),
    _cloud_architect_pack("aws-cloud-architect", "AWS Cloud Architect", "AWS", "aws_services",
                          "Design a Netflix-like video streaming architecture",
                          "Serverless vs Containers? Cost vs Latency?"),
    _cloud_architect_pack("gcp-architect", "GCP Architect", "Google Cloud", "gcp_services",
                          "Design a Global Spanner-based architecture",
                          "Cloud Run vs GKE? Cost vs Latency?"),
    _cloud_architect_pack("azure-architect", "Azure Architect", "Azure", "azure_services",
                          "Design a multi-region architecture using AKS and CosmosDB",
                          "App Service vs AKS? Cost vs Latency?"),
    InterviewPack(
        id="chaos-engineering",
        title="Chaos Engineering",
        role="Chaos Engineer",
        level="Senior",
        duration_minutes=45,
        description=(
            "Dive deep into resilience testing. \"What happens if this service fails?\" is the only question "
            "that matters here."
        ),
        sections=[
            PackSection("Hypothesis Definition", 15, ["scientific_method", "chaos_principles"],
                        ["Define steady state for the recommendations service"]),
            PackSection("Blast Radius", 15, ["safety", "monitoring"],
                        ["How do you minimize user impact during a region failover test?"]),
            PackSection("Automation", 15, ["continuous_verification", "tooling"],
                        ["Design a system to automatically inject latency"]),
        ],
    ),
]

_PACKS_BY_ID: Dict[str, InterviewPack] = {pack.id: pack for pack in INTERVIEW_PACKS}


def get_pack(pack_id: str) -> Optional[InterviewPack]:
    return _PACKS_BY_ID.get(pack_id)


def list_packs() -> List[InterviewPack]:
    return list(INTERVIEW_PACKS)
