"""
Prompt templates for the Mock Interviewer's LLM calls.

Templates are filled with ``str.format``; literal JSON braces are doubled.
"""

# Interview state analysis (runs after every candidate turn)
STATE_ANALYSIS_PROMPT = """You are an AI system that analyzes interview conversations and determines the next best action.

Your task:
1. Analyze the conversation history
2. Extract candidate information (skills, experience, level)
3. Determine interview phase (introduction, topics, wrapup)
4. Decide the next action (continue topic, move to next, drill down, wrap up)
5. Generate a targeted RAG query if needed for context retrieval

Context:
- Interview Level: {pack_level}
- Interview Role: {pack_role}
{jd_line}

Previous State:
{previous_state}

Return a structured JSON object with:
- phase: Current interview phase ("introduction" | "topics" | "wrapup")
- currentTopic: Current technical topic being discussed
- topicsCovered: List of topics already covered
- questionDepth: How deep we've gone (0-5, where 0=basic, 5=expert)
- candidateLevel: Inferred candidate level ("entry" | "mid" | "senior" | "architect")
- nextAction: What to do next (action: "continue_topic" | "move_to_next_topic" | "drill_down" | "wrap_up",
  topic, questionType: "definition" | "scenario" | "deep_dive" | "behavioral", ragQuery)
- candidateProfile: Extracted candidate information (skills, experienceYears, technologies, strengths, gaps)

Be dynamic and adaptive. If the candidate shows deep knowledge, increase depth. If they struggle, provide more foundational questions.

Return ONLY the JSON object, no markdown, no explanation."""

NEXT_QUESTION_PROMPT = """Based on the interview state, generate the next question.

Interview State:
{state}

Conversation History (last {window} turns):
{recent_turns}

Generate a natural, conversational question that:
1. Matches the questionType: {question_type}
2. Is appropriate for depth level: {question_depth}
3. Builds on the conversation naturally
4. Is specific and actionable

Return only the question text, no additional commentary."""

# Scoring
SCORING_SYSTEM_PROMPT = "You are a JSON parser. Return only valid JSON, no markdown formatting, no explanations."

RETAKE_CONTEXT_PROMPT = """
PREVIOUS SESSION CONTEXT (RETAKE):
- Previous Overall Score: {previous_score}
- Previous Performance: The candidate previously scored {previous_score}/100.
- Previous Weaknesses: {previous_weaknesses}

COMPARISON TASK:
- You MUST explicitly compare their current performance to their previous session.
- Did they address the "Previous Weaknesses"?
- Mention "Improved", "Regressed", or "Stagnant" in the feedback.
"""

SCORING_PROMPT = """You are a STRICT technical interviewer evaluating a DevOps/SRE interview. You must be HONEST and ACCURATE in your assessment.

INTERVIEW CONTEXT:
- Role: {role} - {level}
- Interview Type: {title}
- Total Turns: {total_turns}
{retake_context}

CONVERSATION HISTORY:
{transcript}

CRITICAL EVALUATION RULES:
1. **PENALIZE WRONG ANSWERS**: If the candidate gives incorrect technical information, significantly lower their score
2. **REWARD CORRECT ANSWERS**: Only give high scores for demonstrably correct technical knowledge
3. **BE STRICT**: A score of 7-8 means they got MOST things right, not just participated
4. **NO PARTICIPATION TROPHIES**: Simply answering doesn't mean they answered correctly

EVALUATION RUBRIC (BE STRICT):
Score each competency out of 10, where:
- 9-10: Exceptional (expert-level, answers are CORRECT and COMPREHENSIVE)
- 7-8: Strong (solid knowledge, MOST answers are correct, minor gaps or inaccuracies)
- 5-6: Adequate (basic understanding, SOME correct answers but also WRONG answers, significant gaps)
- 3-4: Weak (MOSTLY WRONG answers, significant technical errors)
- 1-2: Poor (consistently WRONG answers, fundamental misunderstandings)

TECHNICAL COMPETENCIES (score each):
1. Kubernetes/OpenShift - Pod Lifecycle, Deployments, Secrets, ConfigMaps, Networking, RBAC
2. CI/CD Tools - Pipeline Design, Testing Integration, Artifact Management, Security Scanning
3. Deployment Strategy - Blue/Green, Canary, Rolling Updates, Rollback Strategies
4. Helm Charts - Templating, Values Management, Chart Structure, Security
5. Terraform - State Management, Modules, Providers, Security Best Practices
6. Cloud Provider Services - Compute, Storage, Networking, Security, Cost Optimization

For EACH technical competency provide a topicBreakdown entry with sub-topics, each carrying a score,
an assessment (strong|adequate|weak), the evidence (what they said) and specific feedback.

SENIOR DEVOPS EVALUATION DIMENSIONS (score each out of 10):
1. Architectural Reasoning: 1-4 syntax-focused, no failure modes; 5-7 some risks; 8-10 blast radius,
   state management, regional failover, single points of failure.
2. Strategic Trade-offs: 1-4 "industry standard" picks; 5-7 some trade-offs; 8-10 fits team, budget and timeline.
3. Incident Management: 1-4 only the technical fix; 5-7 some process; 8-10 stakeholder communication,
   blameless post-mortems, MTTR, error budgets.
4. Operational Excellence: 1-4 "make it work"; 5-7 mentions cost or security; 8-10 right-sizing,
   policy-as-code, governance, security drift prevention.

SOFT SKILLS (score each out of 10; technical correctness matters more):
behavioral, thinking, communication, problemSolving.

SENIORITY GAP ANALYSIS ("medior" | "borderline" | "senior"):
- toolMastery: knows CLI/syntax vs knows internals & limits
- automation: writes scripts vs builds platforms
- impact: solves the ticket vs improves DORA metrics
- communication: explains the "how" vs translates to business value

FEEDBACK REQUIREMENTS:
- strengths (3-5 items), evidence-based with specific examples from the interview
- improvements (2-4 items), quoting what was wrong, the correct approach and an actionable step
- feedback: 2-4 sentences; if this is a retake, state "Improved", "Regressed", or "Stagnant"
- upskillingPlan: week-by-week focus areas citing official documentation. DO NOT invent URLs.

Calculate overallScore (0-100) as (techAvg * 0.4 + seniorAvg * 0.4 + softAvg * 0.2) * 10.

Return ONLY valid JSON in this exact format:
{{
  "technicalCompetencies": {{
    "Kubernetes/OpenShift": 8.0,
    "CI/CD Tools": 7.5,
    "Deployment Strategy": 7.0,
    "Helm Charts": 7.5,
    "Terraform": 8.5,
    "Cloud Provider Services": 8.0
  }},
  "topicBreakdown": [
    {{
      "topic": "Kubernetes/OpenShift",
      "overallScore": 8.0,
      "subTopics": [
        {{"name": "Pod Lifecycle & Debugging", "score": 9, "assessment": "strong",
          "evidence": "Correctly identified 'kubectl describe pod, logs, events' sequence",
          "feedback": "Excellent debugging methodology."}}
      ],
      "keyStrengths": ["Pod debugging"],
      "keyWeaknesses": ["Secret management security"],
      "resources": ["kubernetes.io/docs/concepts/configuration/secret/"]
    }}
  ],
  "softSkills": {{"behavioral": 7.5, "thinking": 8.0, "communication": 7.5, "problemSolving": 8.0}},
  "seniorDevOpsDimensions": {{
    "architecturalReasoning": 8.5,
    "strategicTradeoffs": 7.0,
    "incidentManagement": 8.0,
    "operationalExcellence": 7.5
  }},
  "seniorityGap": {{"toolMastery": "senior", "automation": "medior", "impact": "senior", "communication": "borderline"}},
  "overallScore": 77.5,
  "strengths": ["..."],
  "improvements": ["..."],
  "feedback": "...",
  "upskillingPlan": {{"weeks": 4, "focus_areas": ["Week 1: ..."]}}
}}

Return ONLY the JSON object, no markdown, no explanation."""

# Topic feedback pipeline
TOPIC_EXTRACTION_SYSTEM_PROMPT = "You are a technical interview analyzer. Extract topics discussed. Return only JSON."

TOPIC_EXTRACTION_PROMPT = """Analyze this technical interview transcript and extract all technical topics discussed.

For each topic, identify:
1. The specific technology/concept (e.g., "Kubernetes Pod Debugging", "Terraform State Management")
2. Category (Kubernetes, Terraform, CI/CD, AWS, Networking, Security, Other)
3. How many times it was mentioned
4. Key moments (short quotes showing when it was discussed)

Conversation:
{transcript}

Return ONLY valid JSON:
{{
  "topics": [
    {{
      "name": "Kubernetes Pod Lifecycle",
      "category": "Kubernetes",
      "mentionCount": 5,
      "keyMoments": ["discussed crashlooping pods", "explained kubectl describe output"]
    }}
  ]
}}"""

TOPIC_SCORING_SYSTEM_PROMPT = "You are a strict technical evaluator. Score based on correctness. Return only JSON."

TOPIC_SCORING_PROMPT = """You are evaluating a candidate's performance on the topic: "{topic}"

Conversation context:
{transcript}

Analyze ONLY the parts of the conversation related to "{topic}".

For this topic:
1. Break down into 2-4 sub-topics
2. For each sub-topic, provide:
   - Score (0-10)
   - Assessment (strong/adequate/weak)
   - Evidence: QUOTE or paraphrase what the candidate said
   - Specific feedback with technical accuracy check

CRITICAL: Base scores on CORRECTNESS, not participation.
- If they gave WRONG technical information, score 3-6
- If they gave CORRECT answers, score 7-10

Return ONLY valid JSON:
{{
  "topic": "{topic}",
  "overallScore": 7.5,
  "subTopicScores": [
    {{
      "name": "Pod Lifecycle Understanding",
      "score": 9,
      "assessment": "strong",
      "evidence": "Correctly explained 'kubectl describe pod shows events, then kubectl logs for container output'",
      "feedback": "Excellent understanding of pod debugging workflow."
    }}
  ],
  "keyStrengths": ["Strong debugging methodology"],
  "keyWeaknesses": ["Missed secret management best practices"]
}}"""

UPSKILLING_SYSTEM_PROMPT = (
    "You are a learning path expert. Create actionable, specific upskilling plans. Return only JSON."
)

UPSKILLING_PLAN_PROMPT = """Create a detailed upskilling plan for a DevOps/SRE candidate who scored {overall_score}/100.

Weak areas identified:
{weak_areas}

Create a 3-4 week plan with:
1. Week-by-week focus areas (prioritize critical gaps)
2. 3-4 specific, actionable tasks per week
3. Curated resources (documentation, tutorials, hands-on labs)

IMPORTANT:
- Tasks should be SPECIFIC (not "learn Kubernetes" but "Complete K8s CKA sections 2-4 on pod lifecycle")
- Include hands-on practice (not just reading)
- Provide actual resource links where possible

Return ONLY valid JSON:
{{
  "weeks": 4,
  "weeklyBreakdown": [
    {{
      "week": 1,
      "focus": "Kubernetes Secret Management & Security",
      "tasks": ["Practice: Set up Sealed Secrets or External Secrets Operator"],
      "resources": ["https://kubernetes.io/docs/concepts/configuration/secret/"]
    }}
  ]
}}"""

# Job description parsing
JD_PARSING_PROMPT = """You are an expert at parsing job descriptions. Extract structured information from the following job description.

Return ONLY valid JSON in this exact format:
{{
  "role": "exact job title",
  "level": "Entry|Mid|Senior|Principal",
  "requiredSkills": ["skill1", "skill2"],
  "preferredSkills": ["skill1", "skill2"],
  "tools": ["AWS", "Kubernetes", "Docker", "Terraform", "CI/CD tools"],
  "companyCulture": "brief description if mentioned",
  "teamSize": "Small (2-5)|Medium (6-15)|Large (16+)|Unknown",
  "responsibilities": ["responsibility1", "responsibility2"],
  "qualifications": ["qualification1", "qualification2"],
  "experienceYears": null,
  "location": null,
  "remote": null,
  "keywords": ["keyword1", "keyword2"],
  "industry": null,
  "companyStage": "Startup|Scale-up|Enterprise|Unknown",
  "technicalRequirements": ["specific technical requirement 1"],
  "keyResponsibilities": ["key responsibility 1"],
  "certifications": ["certification1"]
}}

IMPORTANT:
- Extract ALL technologies, tools, and platforms mentioned (AWS, Azure, GCP, Kubernetes, Terraform, CI/CD tools, etc.)
- Extract ALL technical requirements mentioned in "Technical Requirements" or "Requirements" sections
- Extract key responsibilities that should be tested in an interview
- Extract any certifications mentioned
- Be thorough - this information will be used to construct interview questions

Job Description:
{jd_text}

Return ONLY the JSON object, no markdown, no explanation."""
