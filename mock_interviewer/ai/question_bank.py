"""
Question bank: example incident scenarios per interview role.

These are templates for the interviewer model to adapt to the candidate's
stack (EKS vs GKE, Terraform vs CloudFormation...). They are never meant to
be read to the candidate verbatim.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from mock_interviewer.ai.prompts.role_prompts import DEFAULT_ROLE_KEY, fuzzy_match_key


@dataclass(frozen=True)
class QuestionScenario:
    scenario: str
    question_template: str
    competencies: List[str]
    difficulty: str  # entry | mid | senior | principal
    follow_up_questions: List[str] = field(default_factory=list)


QUESTION_BANK: Dict[str, List[QuestionScenario]] = {
    "DevOps Entry": [
        QuestionScenario(
            scenario="Pod stuck in Pending state",
            question_template="You notice that your Kubernetes pods are stuck in Pending state. Walk me through how you would debug this issue.",
            follow_up_questions=[
                "What would be your first command to check?",
                "What are common reasons for pods to be stuck in Pending?",
                "How would you check if there are enough resources available?",
            ],
            competencies=["kubernetes", "troubleshooting", "debugging"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="CI/CD pipeline failure",
            question_template="Your CI/CD pipeline failed during deployment. How would you investigate what went wrong?",
            follow_up_questions=[
                "Where would you look first for error logs?",
                "What are common causes of pipeline failures?",
                "How would you prevent this from happening again?",
            ],
            competencies=["ci_cd", "debugging", "automation"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="High CPU usage",
            question_template="You receive an alert that a server's CPU usage is at 95%. What steps would you take to investigate?",
            follow_up_questions=[
                "What commands would you run first?",
                "How would you identify which process is consuming CPU?",
                "What would you do if it's a production service?",
            ],
            competencies=["linux", "monitoring", "troubleshooting"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="Database connection issues",
            question_template="An application is unable to connect to the database. How would you troubleshoot this?",
            follow_up_questions=[
                "What would you check first?",
                "How would you verify network connectivity?",
                "What are common causes of database connection failures?",
            ],
            competencies=["networking", "databases", "troubleshooting"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="Docker container not starting",
            question_template="A Docker container fails to start. Walk me through your debugging process.",
            follow_up_questions=[
                "What command would you use to check container logs?",
                "How would you verify the container image is correct?",
                "What are common reasons containers fail to start?",
            ],
            competencies=["docker", "containers", "debugging"],
            difficulty="entry",
        ),
    ],
    "DevOps Senior": [
        QuestionScenario(
            scenario="Pod stuck in Pending state",
            question_template="Your EKS cluster has multiple pods stuck in Pending state across different namespaces. Walk me through your systematic approach to debug and resolve this.",
            follow_up_questions=[
                "How would you check node capacity and resource allocation?",
                "What would you look for in node conditions and events?",
                "How would you handle this if it's affecting production traffic?",
                "What preventive measures would you implement?",
            ],
            competencies=["kubernetes", "aws", "incident_response", "capacity_planning"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Multi-region deployment failure",
            question_template="A deployment succeeded in us-east-1 but failed in eu-west-1. How would you investigate and resolve this?",
            follow_up_questions=[
                "What differences would you check between regions?",
                "How would you handle partial deployments?",
                "What rollback strategy would you use?",
                "How would you prevent this in future deployments?",
            ],
            competencies=["multi_region", "deployment_strategies", "disaster_recovery"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Terraform state conflict",
            question_template="You encounter a Terraform state lock conflict. Multiple engineers are trying to apply changes simultaneously. How do you resolve this?",
            follow_up_questions=[
                "What are the risks of force-unlocking the state?",
                "How would you prevent this from happening again?",
                "What state management strategy would you recommend?",
            ],
            competencies=["terraform", "iac", "collaboration", "state_management"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Cost optimization",
            question_template="Your AWS bill has increased by 40% this month. How would you identify and optimize costs without impacting performance?",
            follow_up_questions=[
                "What AWS services would you audit first?",
                "How would you identify unused resources?",
                "What cost optimization strategies would you implement?",
                "How would you balance cost vs performance?",
            ],
            competencies=["cost_optimization", "aws", "resource_management"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Security incident",
            question_template="You discover that an S3 bucket containing sensitive data is publicly accessible. Walk me through your incident response process.",
            follow_up_questions=[
                "What immediate actions would you take?",
                "How would you assess the scope of exposure?",
                "What remediation steps would you implement?",
                "How would you prevent this in the future?",
            ],
            competencies=["security", "incident_response", "aws", "compliance"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="GitOps workflow failure",
            question_template="Your GitOps workflow using ArgoCD is not syncing changes from Git to Kubernetes. How would you debug this?",
            follow_up_questions=[
                "What would you check in ArgoCD first?",
                "How would you verify Git repository connectivity?",
                "What are common causes of sync failures?",
                "How would you implement monitoring for this?",
            ],
            competencies=["gitops", "argocd", "kubernetes", "automation"],
            difficulty="senior",
        ),
    ],
    "SRE Entry": [
        QuestionScenario(
            scenario="Service returning 500 errors",
            question_template="Your service is returning 500 errors to users. Walk me through how you would investigate this incident.",
            follow_up_questions=[
                "Where would you look first for error logs?",
                "How would you check if it's affecting all users or a subset?",
                "What metrics would you check?",
                "How would you communicate this to stakeholders?",
            ],
            competencies=["incident_response", "debugging", "observability"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="High latency",
            question_template="Users are reporting slow response times. How would you investigate and identify the bottleneck?",
            follow_up_questions=[
                "What metrics would you check first?",
                "How would you trace a request through your system?",
                "What tools would you use for profiling?",
            ],
            competencies=["performance", "observability", "troubleshooting"],
            difficulty="entry",
        ),
        QuestionScenario(
            scenario="Alert fatigue",
            question_template="Your team is receiving too many alerts, and important ones are being missed. How would you address this?",
            follow_up_questions=[
                "How would you prioritize alerts?",
                "What criteria would you use to reduce noise?",
                "How would you ensure critical alerts aren't missed?",
            ],
            competencies=["monitoring", "alerting", "oncall"],
            difficulty="entry",
        ),
    ],
    "SRE Mid-Senior": [
        QuestionScenario(
            scenario="Pod stuck in Pending state",
            question_template="Production pods are stuck in Pending state during peak traffic. This is causing user-facing errors. Walk me through your incident response.",
            follow_up_questions=[
                "How would you prioritize this incident?",
                "What immediate actions would you take to restore service?",
                "How would you investigate root cause while maintaining service?",
                "What would you check in node conditions, resource quotas, and pod specs?",
                "How would you prevent this from happening again?",
            ],
            competencies=["incident_command", "kubernetes", "reliability", "post_mortem"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Cascading failure",
            question_template="A database slowdown is causing cascading failures across multiple services. Walk me through how you would handle this incident.",
            follow_up_questions=[
                "How would you stop the cascade?",
                "What circuit breaker patterns would you implement?",
                "How would you coordinate with multiple teams?",
                "What would you include in the post-mortem?",
            ],
            competencies=["incident_command", "distributed_systems", "reliability_patterns"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="SLO violation",
            question_template="Your service is violating its SLO. Error budget is running out. How would you address this?",
            follow_up_questions=[
                "How would you communicate this to product teams?",
                "What immediate actions would you take?",
                "How would you negotiate error budgets?",
                "What trade-offs would you consider?",
            ],
            competencies=["slo_sli", "error_budgets", "stakeholder_management"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Multi-region failover",
            question_template="You need to failover traffic from us-east-1 to eu-west-1 due to a regional outage. Walk me through the process.",
            follow_up_questions=[
                "How would you verify eu-west-1 is healthy?",
                "What would you check before routing traffic?",
                "How would you minimize data loss?",
                "What would you monitor during failover?",
            ],
            competencies=["disaster_recovery", "multi_region", "incident_command"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Capacity planning",
            question_template="Your service needs to handle 10x traffic increase in 3 months. How would you plan for this?",
            follow_up_questions=[
                "How would you estimate resource requirements?",
                "What bottlenecks would you identify?",
                "How would you test your capacity?",
                "What would you monitor?",
            ],
            competencies=["capacity_planning", "scalability", "performance"],
            difficulty="senior",
        ),
    ],
    "SRE Principal": [
        QuestionScenario(
            scenario="Organizational reliability",
            question_template="Your organization has 1000+ microservices with inconsistent reliability practices. How would you establish a reliability culture?",
            follow_up_questions=[
                "How would you get buy-in from engineering teams?",
                "What policies and standards would you establish?",
                "How would you measure success?",
                "What cultural changes would you drive?",
            ],
            competencies=["organizational_strategy", "culture", "leadership"],
            difficulty="principal",
        ),
        QuestionScenario(
            scenario="Error budget policy",
            question_template="You need to establish error budget policies across multiple product teams. How would you approach this?",
            follow_up_questions=[
                "How would you negotiate error budgets with product teams?",
                "What happens when error budgets are exhausted?",
                "How would you balance feature velocity vs reliability?",
                "How would you handle exceptions?",
            ],
            competencies=["error_budgets", "policy", "stakeholder_management"],
            difficulty="principal",
        ),
        QuestionScenario(
            scenario="Global architecture",
            question_template="Design a system architecture that achieves 99.99% availability across multiple regions.",
            follow_up_questions=[
                "What architectural patterns would you use?",
                "How would you handle data consistency?",
                "What trade-offs would you make?",
                "How would you test this architecture?",
            ],
            competencies=["architecture", "multi_region", "reliability"],
            difficulty="principal",
        ),
    ],
    "Cloud Architect": [
        QuestionScenario(
            scenario="System design at scale",
            question_template="Design a system to handle 1 million concurrent users. Walk me through your architecture.",
            follow_up_questions=[
                "How would you handle database scaling?",
                "What caching strategy would you use?",
                "How would you ensure high availability?",
                "What trade-offs would you make?",
            ],
            competencies=["system_design", "scalability", "architecture"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Serverless vs containers",
            question_template="You need to choose between AWS Lambda and ECS for a new service. Walk me through your decision-making process.",
            follow_up_questions=[
                "What factors would influence your decision?",
                "What are the trade-offs?",
                "How would you estimate costs?",
                "When would you choose one over the other?",
            ],
            competencies=["architecture", "trade_offs", "cost_optimization"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Cloud migration",
            question_template="You need to migrate a monolith to microservices on AWS. Walk me through your migration strategy.",
            follow_up_questions=[
                "What migration approach would you use?",
                "How would you minimize downtime?",
                "What challenges would you anticipate?",
                "How would you measure success?",
            ],
            competencies=["migration", "architecture", "strategy"],
            difficulty="senior",
        ),
    ],
    "Chaos Engineer": [
        QuestionScenario(
            scenario="Chaos experiment design",
            question_template="Design a chaos experiment to test database failover. Walk me through your approach.",
            follow_up_questions=[
                "What hypothesis would you test?",
                "How would you define steady state?",
                "What safety measures would you implement?",
                "How would you measure blast radius?",
            ],
            competencies=["chaos_engineering", "experimentation", "safety"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Blast radius containment",
            question_template="You want to test a region failover but need to ensure minimal user impact. How would you design this experiment?",
            follow_up_questions=[
                "How would you limit blast radius?",
                "What safeguards would you put in place?",
                "How would you monitor the experiment?",
                "What abort conditions would you define?",
            ],
            competencies=["chaos_engineering", "safety", "monitoring"],
            difficulty="senior",
        ),
        QuestionScenario(
            scenario="Automated chaos",
            question_template="How would you automate chaos experiments to run continuously?",
            follow_up_questions=[
                "What infrastructure would you need?",
                "How would you ensure safety?",
                "How would you handle failures?",
                "What would you monitor?",
            ],
            competencies=["automation", "chaos_engineering", "reliability"],
            difficulty="senior",
        ),
    ],
}


def _matches_level(scenario: QuestionScenario, level: str) -> bool:
    lowered = level.lower()
    if "entry" in lowered:
        return scenario.difficulty == "entry"
    if "principal" in lowered:
        return scenario.difficulty == "principal"
    return scenario.difficulty in ("mid", "senior")


def get_question_scenarios(role: str, level: str) -> List[QuestionScenario]:
    """
    Get question scenarios for a role and level.

    An exact "<role> <level>" key returns its whole list. A fuzzy role match
    is filtered down to the requested difficulty band, keeping the unfiltered
    list when the band is empty.
    """
    key = f"{role} {level}"
    if key in QUESTION_BANK:
        return list(QUESTION_BANK[key])

    matched = fuzzy_match_key(key, list(QUESTION_BANK))
    if matched:
        scenarios = QUESTION_BANK[matched]
        filtered = [s for s in scenarios if _matches_level(s, level)]
        return filtered or list(scenarios)

    return list(QUESTION_BANK.get(DEFAULT_ROLE_KEY, []))
