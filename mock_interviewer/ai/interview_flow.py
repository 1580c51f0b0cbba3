"""
Interview topic catalog.

Each topic carries focus areas per seniority band. The focus items double as
knowledge-base lookup keys (see ``KnowledgeBase.check_coverage``), so renaming
one means re-tagging the matching knowledge-base document.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class InterviewTopic:
    """A technical area the interviewer can cover."""
    id: str
    name: str
    description: str
    entry_level_focus: List[str]
    senior_level_focus: List[str]
    architect_level_focus: List[str]
    estimated_minutes: int
    incident_prompt: str

    def all_focus_items(self) -> List[str]:
        return self.entry_level_focus + self.senior_level_focus + self.architect_level_focus


INTERVIEW_TOPICS: List[InterviewTopic] = [
    InterviewTopic(
        id="kubernetes",
        name="Kubernetes",
        description="Container orchestration, design patterns, and troubleshooting",
        entry_level_focus=[
            "Pod Lifecycle and States",
            "Linux Networking Basics",
            "Deployments vs StatefulSets",
            "Service Types (ClusterIP vs NodePort)",
            "ConfigMaps and Secrets Usage",
            "Basic Troubleshooting (kubectl logs/describe)",
        ],
        senior_level_focus=[
            "Debug Ingress 502/504 Errors",
            "Multi Tenant application deployment",
            "EKS API Server Latency/Outage",
            "Linux Networking Basics",
            "Affinity and Anti-Affinity Rules",
            "Taints and Tolerations",
            "Network Policies & Isolation",
            "Persistent Volume Lifecycle",
        ],
        architect_level_focus=[
            "Kubernetes OpenShift Reference Architecture",
            "Multi-Tenant Cluster Design",
            "Service Mesh (Istio/Linkerd) Pros/Cons",
            "Operator Pattern vs Helm",
            "Cluster Autoscaling Strategies (Karpenter vs CA)",
            "EKS Upgrade Strategy (Blue/Green Control Plane)",
        ],
        estimated_minutes=10,
        incident_prompt=(
            "A Kubernetes cluster is experiencing wide-scale pod failures and network timeouts. "
            "Based on \"Pod Lifecycle\" or general K8s principles, walk me through your troubleshooting process."
        ),
    ),
    InterviewTopic(
        id="cicd",
        name="CI/CD Tools",
        description="Pipeline design, automation strategies, and deployment safety",
        entry_level_focus=[
            "GitHub Actions Basics",
            "Jenkins Job Configuration",
            "GitLab CI Stage Definitions",
            "Artifact Management (Nexus/Artifactory)",
            "Docker Build Caching",
            "Triggering Pipelines (Webhooks vs Cron)",
        ],
        senior_level_focus=[
            "GitLab CI Pipelines",
            "GitOps & ArgoCD Integration",
            "Secure Secrets Injection (Vault/AWS Secrets)",
            "Container Scanning (Trivy/Clair)",
            "Parallelizing Build Stages",
            "Pipeline Templates & Shared Libraries",
        ],
        architect_level_focus=[
            "GitOps & ArgoCD Integration",
            "DORA Metrics Implementation",
            "Internal Developer Platform (IDP) Concept",
            "Compliance as Code in Pipelines",
            "Multi-Region Deployment Pipelines",
            "Self-Hosted Runners Scaling",
        ],
        estimated_minutes=8,
        incident_prompt=(
            "Your CI/CD pipeline is broken. Using principles from \"GitHub Actions\" or generic pipeline logic, "
            "explain how you diagnose a stalled worker or failed build step."
        ),
    ),
    InterviewTopic(
        id="deployment",
        name="Deployment Strategy",
        description="Release patterns, safety mechanisms, and availability",
        entry_level_focus=[
            "Pipeline Rollback Strategies",
            "Blue/Green Deployment Basics",
            "Canary Deployment Basics",
            "Rolling Update Configuration",
            "Smoke Testing vs Unit Testing",
        ],
        senior_level_focus=[
            "Pipeline Rollback Strategies",
            "Automated Canary Analysis",
            "Feature Flags (LaunchDarkly/Split)",
            "Database Migration Strategies (Zero Downtime)",
            "Handling Failed Rollbacks",
        ],
        architect_level_focus=[
            "Pipeline Rollback Strategies",
            "Global Traffic Management (Geo-DNS)",
            "Multi-Cloud Failover Strategy",
            "Chaos Engineering (Gremlin/Chaos Mesh)",
            "Service Level Objectives (SLOs) in Release Engineering",
        ],
        estimated_minutes=6,
        incident_prompt=(
            "A deployment failed in production. According to \"Pipeline Rollback Strategies\" or general best "
            "practices, how do you safely revert to the last known good state?"
        ),
    ),
    InterviewTopic(
        id="helm",
        name="Helm Charts",
        description="Package management for Kubernetes",
        entry_level_focus=[
            "Kubernetes OpenShift Reference Architecture",
            "Helm Directory Structure",
            "Helm Install/Upgrade/Rollback",
            "Values.yaml Overrides",
            "Helm Templates Syntax",
        ],
        senior_level_focus=[
            "Kubernetes OpenShift Reference Architecture",
            "Library Charts",
            "Helm Hooks (pre-install, post-install)",
            "Managing Chart Dependencies (requirements.yaml)",
            "Debugging Helm Template Rendering",
        ],
        architect_level_focus=[
            "Kubernetes OpenShift Reference Architecture",
            "Helm Registry Management",
            "Versioning Strategy for Artifacts",
            "GitOps with Helm (Flux/ArgoCD)",
            "Securing Helm Charts (Provenance/Signing)",
        ],
        estimated_minutes=5,
        incident_prompt="Discuss Helm chart management strategies within a Kubernetes environment.",
    ),
    InterviewTopic(
        id="terraform",
        name="Terraform",
        description="Infrastructure as Code principles and state management",
        entry_level_focus=[
            "Terraform Principles",
            "Terraform Init/Plan/Apply Workflow",
            "Resource vs Data Source",
            "Output Values",
            "Basic State Management",
        ],
        senior_level_focus=[
            "Terraform State Drift Recovery",
            "Remote Backends (S3 + DynamoDB)",
            "Terraform Modules Refactoring",
            "State Locking Issues",
            "Importing Existing Resources",
        ],
        architect_level_focus=[
            "Terraform Principles",
            "Terragrunt vs Terraform Cloud",
            "Multi-Account InfoSec Policy",
            "Policy as Code (Sentinel/OPA)",
            "Module Versioning Strategy",
        ],
        estimated_minutes=8,
        incident_prompt=(
            "Your infrastructure state is out of sync. Using \"State Drift Recovery\" guidelines or general best "
            "practices, how do you reconcile discrepancy?"
        ),
    ),
    InterviewTopic(
        id="cloud",
        name="Cloud Provider Services",
        description="AWS/Azure/GCP core services and architecture",
        entry_level_focus=[
            "AWS Core Services",
            "Azure & GCP Services",
            "AWS EC2 Instance Types",
            "S3 Storage Classes",
            "IAM Roles vs Users",
            "VPC, Subnets, and Route Tables",
        ],
        senior_level_focus=[
            "AWS Security & Landing Zone",
            "Transit Gateway vs VPC Peering",
            "KMS Key Management",
            "Disaster Recovery Deployment",
            "AWS CloudFormation",
            "Multi account Iam Access Management",
            "Setting up VPN Tunnel",
            "Connecting AWS services using PrivateLink",
            "Cross-Account Access Delegation",
            "Cost Optimization (Savings Plans)",
        ],
        architect_level_focus=[
            "AWS Advanced Networking & Cloud Migration",
            "AWS Well-Architected Framework",
            "Serverless Architecture Patterns",
            "Data Lake Architecture",
            "Hybrid Cloud Connectivity (Direct Connect)",
            "Disaster Recovery Tiers (Pilot Light to Active-Active)",
        ],
        estimated_minutes=12,
        incident_prompt=(
            "Design a cloud landing zone. Referencing \"AWS Security\" docs or general principles, how do you "
            "handle multi-account access?"
        ),
    ),
    InterviewTopic(
        id="linux",
        name="Linux System Internals",
        description="Kernel, networking, filesystems, and troubleshooting",
        entry_level_focus=[
            "Linux Permissions (chmod/chown)",
            "Standard Streams (stdin/stdout/stderr)",
            "Process Management (ps, top, kill)",
            "File System Hierarchy",
            "Basic Networking (curl, ping, netstat)",
        ],
        senior_level_focus=[
            "Linux Networking Basics",
            "Kernel Namespaces & Cgroups",
            "TCP/IP Stack Tuning",
            "Troubleshooting High Load (Load Average vs CPU)",
            "Memory Management (OOM Killer, Swap)",
            "Systemd Unit Files",
        ],
        architect_level_focus=[
            "eBPF Tracing & Observability",
            "Kernel Tuning for High Performance",
            "Container Runtime Internals (runc/containerd)",
            "Storage Subsystems (ZFS/Btrfs)",
            "Security Modules (SELinux/AppArmor)",
        ],
        estimated_minutes=8,
        incident_prompt=(
            "A server is unresponsive with high load. Using \"Linux Networking\" concepts or general system tools, "
            "how do you diagnose the bottleneck?"
        ),
    ),
    InterviewTopic(
        id="sre",
        name="SRE",
        description="Site Reliability Engineering principles",
        entry_level_focus=[
            "Observability & SRE Principles",
            "The 4 Golden Signals",
            "Logging vs Tracing vs Metrics",
            "Alert Fatigue",
        ],
        senior_level_focus=[
            "Incident Command Checklist",
            "Runbook creation",
            "Error Budgets Calculation",
            "Root Cause Analysis (5 Whys)",
        ],
        architect_level_focus=[
            "Observability & SRE Principles",
            "Designing for 99.99% Availability",
            "Chaos Engineering Strategy",
            "Cultural Transformation to SRE",
        ],
        estimated_minutes=8,
        incident_prompt=(
            "You are the Incident Commander. Using the \"Incident Command Checklist\" or standard SRE protocols, "
            "walk me through a major outage response."
        ),
    ),
]

_TOPICS_BY_ID: Dict[str, InterviewTopic] = {topic.id: topic for topic in INTERVIEW_TOPICS}


def get_topic(topic_id: str) -> Optional[InterviewTopic]:
    """Look up a topic by id."""
    return _TOPICS_BY_ID.get(topic_id)


def normalize_level(level: Optional[str]) -> str:
    """
    Map a free-form seniority label onto entry / mid / senior / architect.

    Pack levels look like "Entry", "Mid-Senior", "Senior" or "Principal".
    """
    lowered = (level or "").lower()
    if "entry" in lowered or "junior" in lowered:
        return "entry"
    if "principal" in lowered or "architect" in lowered:
        return "architect"
    if lowered.startswith("mid") or lowered == "medior":
        return "mid"
    if "senior" in lowered or "lead" in lowered:
        return "senior"
    return "mid"


def focus_for_level(topic: InterviewTopic, level: Optional[str]) -> List[str]:
    """Return the focus list that matches a seniority label."""
    band = normalize_level(level)
    if band == "entry":
        return list(topic.entry_level_focus)
    if band == "senior":
        return list(topic.senior_level_focus)
    if band == "architect":
        return list(topic.architect_level_focus)
    return topic.entry_level_focus + [
        item for item in topic.senior_level_focus if item not in topic.entry_level_focus
    ]


def get_interview_structure(level: Optional[str]) -> Dict[str, Any]:
    """
    Build the topic plan for an interview at the given level.

    Returns:
        Dictionary with ``level``, ``topics`` (id, name, estimated_minutes,
        focus) and ``total_minutes``
    """
    topics = [
        {
            "id": topic.id,
            "name": topic.name,
            "estimated_minutes": topic.estimated_minutes,
            "focus": focus_for_level(topic, level),
        }
        for topic in INTERVIEW_TOPICS
    ]
    return {
        "level": normalize_level(level),
        "topics": topics,
        "total_minutes": sum(t["estimated_minutes"] for t in topics),
    }
