"""Built-in output types.

Each output type bundles the default section drivers, the element field
schema, the ordered instruction directives and a fallback prompt template
used when a request carries no directives of its own.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .schemas import Driver, FieldSpec, InstructionDirective


@dataclass(frozen=True)
class OutputType:
    id: str
    name: str
    description: str
    section_label: str
    element_label: str
    fields: List[FieldSpec]
    drivers: List[Driver]
    directives: List[InstructionDirective]
    # Fallback template; {driver} and {label} are substituted
    role: str
    task: str
    guidelines: List[str] = field(default_factory=list)
    supports_deep_dive: bool = True
    supports_deeper_questions: bool = False

    def summary(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sectionLabel": self.section_label,
            "elementLabel": self.element_label,
            "fields": [f.to_wire() for f in self.fields],
            "sectionDrivers": [d.to_wire() for d in self.drivers],
            "supportsDeepDive": self.supports_deep_dive,
            "supportsDeeperQuestions": self.supports_deeper_questions,
        }


def _drivers(pairs) -> List[Driver]:
    return [Driver(name=name, description=description) for name, description in pairs]


def _fields(specs) -> List[FieldSpec]:
    out = []
    for i, (key, label, ftype) in enumerate(specs):
        out.append(FieldSpec(key=key, label=label, type=ftype, primary=(i == 0)))
    return out


def _directives(pairs) -> List[InstructionDirective]:
    return [InstructionDirective(label=label, content=content) for label, content in pairs]


BUSINESS_PERSPECTIVES = _drivers([
    ("Strategic Perspective", "Alignment with long-term goals, vision, mission, and competitive positioning"),
    ("Financial Perspective", "Revenue impact, cost implications, budget considerations, ROI, and profitability"),
    ("Customer Perspective", "Customer experience, satisfaction, retention, value delivery, and loyalty"),
    ("Operational Perspective", "Process efficiency, workflows, resource utilization, and day-to-day execution"),
    ("Risk & Compliance Perspective", "Regulatory compliance, risk assessment, mitigation strategies, and governance"),
    ("People & Culture Perspective", "Team dynamics, talent management, morale, skills development, and organizational culture"),
    ("Innovation & Growth Perspective", "New opportunities, emerging trends, R&D, creative solutions, and market expansion"),
    ("Technology Perspective", "Technical feasibility, digital transformation, tools, systems, and infrastructure"),
    ("Data & Analytics Perspective", "Metrics, KPIs, data-driven decisions, measurement, and reporting"),
    ("Stakeholder Perspective", "Expectations and needs of investors, board members, partners, and regulators"),
    ("Competitive Perspective", "Market positioning, competitor analysis, differentiation, and benchmarking"),
    ("Ethical & Social Responsibility Perspective", "Ethical considerations, social impact, sustainability, diversity, and inclusion"),
    ("Change Management Perspective", "Adoption, resistance, communication, transition planning, and organizational readiness"),
    ("Quality Perspective", "Standards, continuous improvement, defect prevention, and excellence"),
    ("Supply Chain & Vendor Perspective", "Supplier relationships, procurement, logistics, partnerships, and dependencies"),
    ("Legal Perspective", "Contracts, intellectual property, liability, regulatory requirements, and legal obligations"),
    ("Communication Perspective", "Internal and external messaging, transparency, branding, and information flow"),
    ("Scalability Perspective", "Growth capacity, resource scaling, system elasticity, and long-term sustainability"),
    ("Time & Priority Perspective", "Urgency, deadlines, sequencing, opportunity cost, and resource allocation over time"),
    ("User Experience Perspective", "Usability, accessibility, design thinking, user journeys, and satisfaction"),
    ("Knowledge Management Perspective", "Documentation, institutional knowledge, learning, best practices, and knowledge transfer"),
    ("Cross-Functional Perspective", "Inter-departmental collaboration, dependencies, alignment, and shared objectives"),
    ("Sustainability & Environmental Perspective", "Environmental impact, green practices, carbon footprint, and long-term ecological responsibility"),
    ("Crisis & Continuity Perspective", "Business continuity, disaster recovery, contingency planning, and resilience"),
    ("Market & Industry Perspective", "Industry trends, market dynamics, economic conditions, and sector-specific considerations"),
])

CHECKLIST_DIMENSIONS = _drivers([
    ("Preparation & Prerequisites", "Everything needed before starting: inputs, approvals, context gathering, and readiness checks"),
    ("Stakeholder Alignment", "People to inform, consult, or get approval from, managing expectations and securing buy-in"),
    ("Process & Execution", "The core steps of doing the work: sequencing, methods, and execution standards"),
    ("Quality & Validation", "Checks, reviews, and validations to ensure the work meets standards and produces correct results"),
    ("Risk & Contingency", "Potential failure points, risk mitigation steps, fallback plans, and early warning signs"),
    ("Compliance & Governance", "Regulatory requirements, policy adherence, audit readiness, and organizational standards"),
    ("Communication & Handoff", "Who needs to know what, when to communicate, status updates, and transition of responsibility"),
    ("Documentation & Evidence", "What to record, how to document decisions, creating audit trails, and preserving institutional knowledge"),
    ("Tools & Resources", "Systems, tools, data sources, templates, and supporting materials needed for success"),
    ("Timeline & Milestones", "Key deadlines, sequencing constraints, dependencies, and checkpoint dates"),
    ("Review & Continuous Improvement", "Post-completion review, lessons learned, feedback loops, and optimization opportunities"),
    ("Edge Cases & Exceptions", "Unusual scenarios, special conditions, override procedures, and non-standard paths"),
])

DOSSIER_SECTIONS = _drivers([
    ("Overview & Background", "Foundational context: history, origins, mission, and the broader landscape this subject operates within"),
    ("Key Players & Stakeholders", "Leadership, decision-makers, influencers, partners, and key relationships that shape direction and outcomes"),
    ("Market Position & Dynamics", "Market share, competitive standing, target segments, positioning strategy, and market trends affecting this subject"),
    ("Financial & Business Model", "Revenue streams, cost structure, funding, profitability, financial health indicators, and business model mechanics"),
    ("Products & Services", "Core offerings, product portfolio, service capabilities, differentiation, and value proposition"),
    ("Strengths & Vulnerabilities", "Core competencies, competitive advantages, known weaknesses, capability gaps, and areas of exposure"),
    ("Strategic Direction & Roadmap", "Stated strategy, growth plans, announced initiatives, investment signals, and likely future moves"),
    ("Technology & Infrastructure", "Technology stack, platforms, digital capabilities, innovation posture, and technical strengths or debts"),
    ("Regulatory & Compliance Landscape", "Regulatory environment, compliance obligations, legal exposure, industry standards, and governance posture"),
    ("Risks & Threats", "External threats, internal risks, market disruptions, dependency risks, and scenarios that could destabilize this subject"),
    ("Opportunities & Entry Points", "Exploitable gaps, partnership openings, market white spaces, timing advantages, and strategic leverage points"),
])

PLAYBOOK_PHASES = _drivers([
    ("Preparation & Prerequisites", "Everything needed before starting: inputs, approvals, resources, skills, and readiness checks"),
    ("Foundation & Setup", "Initial setup steps: environment configuration, stakeholder alignment, baseline establishment, and kickoff activities"),
    ("Core Execution", "The primary work: step-by-step instructions for the main activities, processes, and deliverables"),
    ("Stakeholder Management", "Engaging the right people: communication cadences, escalation paths, feedback loops, and alignment checkpoints"),
    ("Quality Gates & Checkpoints", "Validation points: reviews, approvals, acceptance criteria, and go/no-go decision moments"),
    ("Exception Handling", "When things go wrong: troubleshooting guides, fallback procedures, edge cases, and recovery playbooks"),
    ("Scaling & Optimization", "Going from working to working well: performance tuning, capacity planning, and efficiency improvements"),
    ("Communication & Reporting", "Keeping everyone informed: status reports, dashboards, stakeholder updates, and documentation requirements"),
    ("Measurement & Review", "Tracking success: KPIs, metrics, retrospectives, lessons learned, and continuous improvement loops"),
    ("Handoff & Closeout", "Wrapping up: transition of ownership, final documentation, archival, and post-completion follow-ups"),
])

DECISION_DOMAINS = _drivers([
    ("Strategic Direction", "Decisions about vision, positioning, market entry or exit, competitive strategy, and long-term direction"),
    ("Resource Allocation", "Decisions about budget distribution, headcount, tooling investments, and where to invest versus divest"),
    ("Prioritization & Sequencing", "Decisions about what to do first, what to defer, how to sequence initiatives, and where to focus limited capacity"),
    ("Risk & Trade-offs", "Decisions about acceptable risk levels, speed-vs-quality trade-offs, cost-vs-capability balances, and uncertainty tolerance"),
    ("People & Organization", "Decisions about hiring, team structure, role definitions, delegation, skills investment, and culture shaping"),
    ("Technology & Infrastructure", "Decisions about platforms, build-vs-buy, architecture choices, tooling, and technical debt management"),
    ("Customer & Market", "Decisions about target segments, pricing, positioning, go-to-market approach, and customer experience trade-offs"),
    ("Process & Operations", "Decisions about workflows, standards, automation, operational models, and efficiency-vs-flexibility trade-offs"),
    ("Partnerships & Vendors", "Decisions about who to partner with, what to outsource, vendor selection, and collaboration models"),
    ("Governance & Compliance", "Decisions about policies, controls, approval flows, regulatory responses, and organizational accountability"),
    ("Communication & Transparency", "Decisions about what to share, when to communicate, with whom, through which channels, and how much to disclose"),
    ("Innovation & Experimentation", "Decisions about what to pilot, when to scale experiments, how to manage innovation risk, and when to kill initiatives"),
])

EMAIL_COURSE_STAGES = _drivers([
    ("Foundation & Context", "Set the stage: why this topic matters, what's at stake, and how this course will help"),
    ("Current State Assessment", "Help the reader diagnose where they stand today: self-assessment, common patterns, and gaps"),
    ("Core Frameworks", "Introduce the key mental models, frameworks, and principles that underpin success in this area"),
    ("Strategic Approach", "How to think strategically about this topic: planning, prioritization, and decision-making"),
    ("Practical Implementation", "Step-by-step guidance on execution: what to do on Day 1, Week 1, Month 1"),
    ("Common Pitfalls & Solutions", "The most frequent mistakes, anti-patterns, and how to avoid or recover from them"),
    ("Advanced Techniques", "Going beyond basics: power moves, nuanced strategies, and expert-level approaches"),
    ("Measurement & Optimization", "How to track success, interpret signals, and continuously improve outcomes"),
    ("Real-World Application", "Case studies, worked examples, and scenario-based learning to build practical intuition"),
    ("Action Plan & Next Steps", "Putting it all together: personalized action plan, accountability framework, and ongoing resources"),
])

PROMPT_USE_CASES = _drivers([
    ("Research & Discovery", "Gathering information, market intelligence, competitive analysis, and landscape mapping"),
    ("Analysis & Diagnosis", "Breaking down complex problems, root cause analysis, pattern recognition, and data interpretation"),
    ("Strategy & Planning", "Setting direction, creating plans, defining roadmaps, and making strategic decisions"),
    ("Communication & Writing", "Drafting emails, reports, proposals, presentations, and stakeholder communications"),
    ("Decision Support", "Evaluating options, building business cases, scenario modeling, and trade-off analysis"),
    ("Process Design & Optimization", "Creating workflows, improving processes, identifying bottlenecks, and automation opportunities"),
    ("Stakeholder Management", "Preparing for meetings, navigating objections, building alignment, and managing expectations"),
    ("Problem Solving & Troubleshooting", "Diagnosing issues, generating solutions, evaluating fixes, and preventing recurrence"),
    ("Learning & Skill Building", "Explaining concepts, creating study guides, generating practice scenarios, and knowledge synthesis"),
    ("Creative & Ideation", "Brainstorming, innovation workshops, reframing challenges, and generating novel approaches"),
])

BATTLE_CARD_LENSES = _drivers([
    ("Current Landscape", "The state of play today: key players, dominant approaches, and the baseline the reader operates from"),
    ("Strengths & Advantages", "What the reader (or their approach) does well: capabilities, differentiators, and leverage points"),
    ("Weaknesses & Risks", "Vulnerabilities, blind spots, and areas where the reader is exposed or under-performing"),
    ("Emerging Forces", "New trends, technologies, entrants, or shifts that will reshape the landscape"),
    ("Strategic Response", "How to respond: positioning, actions, investments, and narrative to stay ahead"),
])

CHEAT_SHEET_CATEGORIES = _drivers([
    ("Key Terminology & Definitions", "Essential vocabulary, acronyms, and domain-specific terms one must know to operate effectively"),
    ("Core Principles & Rules", "Foundational rules, governing principles, and non-negotiable standards that guide decisions and behavior"),
    ("Common Patterns & Templates", "Reusable structures, proven templates, standard formats, and go-to approaches for recurring situations"),
    ("Formulas & Calculations", "Key formulas, conversion factors, calculation methods, and quantitative shortcuts used frequently"),
    ("Do's & Don'ts", "Best practices to follow and anti-patterns to avoid, hard-won wisdom distilled into clear guidance"),
    ("Rules of Thumb & Shortcuts", "Quick heuristics, mental models, estimation techniques, and decision shortcuts for rapid judgment calls"),
    ("Common Mistakes & Fixes", "Frequent errors, their root causes, diagnostic steps, and proven solutions to resolve them quickly"),
    ("Key Metrics & Benchmarks", "Critical numbers to know: industry benchmarks, target ranges, thresholds, and performance indicators"),
    ("Essential Tools & Resources", "Must-have tools, reference materials, useful websites, recommended software, and go-to resources"),
    ("Quick Reference", "At-a-glance summaries, comparison tables, decision trees, and lookup information for daily use"),
])

AGENT_OPPORTUNITY_AREAS = _drivers([
    ("Research & Intelligence Gathering", "Agents that find, synthesize, and surface relevant information so the user can make better decisions faster"),
    ("Outreach & Communication", "Agents that draft, personalize, sequence, and manage communication workflows across channels and contacts"),
    ("Content Creation & Personalization", "Agents that generate, adapt, or curate content for different audiences, formats, and channels"),
    ("Data Analysis & Reporting", "Agents that monitor, analyze, and summarize data into actionable insights, trend reports, and anomaly alerts"),
    ("Scheduling & Coordination", "Agents that manage calendars, meetings, follow-ups, handoffs, and task sequencing without manual nudging"),
    ("Monitoring & Alerts", "Agents that watch for signals, triggers, or anomalies and notify proactively about price changes, SLA breaches, or deadline risks"),
    ("Process Automation & Workflows", "Agents that orchestrate multi-step processes end-to-end: approvals, onboarding flows, and data pipelines"),
    ("Quality Assurance & Review", "Agents that check, validate, score, or audit work output before it reaches stakeholders"),
    ("Training & Knowledge Management", "Agents that capture, organize, and deliver institutional knowledge: onboarding guides, FAQ bots, and skill gap analysis"),
    ("Customer & Stakeholder Engagement", "Agents that manage relationships, track sentiment, and surface engagement opportunities across the stakeholder lifecycle"),
])

EBOOK_CHAPTERS = _drivers([
    ("Foundations & Overview", "Setting the stage: what this topic is, why it matters now, and how it fits into the reader's professional world"),
    ("Core Concepts & Terminology", "The essential building blocks, key definitions, and mental models the reader must understand before going deeper"),
    ("The Current Landscape", "How things work today: established approaches, prevailing tools, key players, and the status quo"),
    ("Practical Applications", "Concrete, real-world ways the reader can apply this topic in their daily work"),
    ("Implementation Guide", "Step-by-step guidance for getting started, from tools and setup to a clear path from zero to competent"),
    ("Advanced Strategies", "Sophisticated techniques, patterns, and compound approaches for readers ready to move beyond the basics"),
    ("Common Pitfalls & Mistakes", "The traps, misconceptions, and anti-patterns that derail practitioners, and how to avoid or recover from each"),
    ("Case Studies & Examples", "Real-world stories, before-and-after scenarios, and worked examples that bring abstract concepts to life"),
    ("Future Trends & Outlook", "Where this field is headed: emerging developments, industry shifts, and what the reader should prepare for"),
    ("Your Action Plan", "A structured, personalized plan for the reader to act on what they have learned, with milestones and next steps"),
])


QUESTIONS = OutputType(
    id="questions",
    name="Question Book",
    description="Multi-perspective questions with thinking frameworks, checklists, and resources",
    section_label="Perspective",
    element_label="Question",
    fields=_fields([
        ("question", "Question", "long-text"),
        ("relevance", "Why This Matters", "long-text"),
        ("infoPrompt", "How to Find the Answer", "long-text"),
        ("actionSteps", "What to Do With the Answer", "long-text"),
        ("redFlags", "Red Flags to Watch For", "long-text"),
        ("keyMetrics", "Key Metrics to Track", "short-text"),
    ]),
    drivers=BUSINESS_PERSPECTIVES,
    directives=_directives([
        ("Role", "You are an expert thinking coach and organizational consultant who has conducted 200+ strategic reviews for leadership teams and advised executives on high-stakes decisions."),
        ("Task", "Generate 3-5 thoughtful, probing questions from this perspective, questions that a senior leader would pause and seriously consider, not questions with obvious answers."),
        ("Process", "Before generating, identify the 2-3 most important context constraints that should shape every question. Then for this perspective, determine the specific angles that go beyond surface-level inquiry. Prioritize questions that expose hidden dependencies, second-order effects, or uncomfortable trade-offs."),
        ("Relevance filter", "Only generate questions if this perspective is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Specificity", "Every question must be specific to the described context, not generic."),
        ("Context integration", "Actively incorporate all context provided to make questions sharper and more actionable."),
        ("Relevance notes", "Each question must come with a relevance note explaining why this question matters for this specific context and what kind of insight it can unlock."),
        ("Actionable info prompts", "Each question must include an infoPrompt: a practical guidance note telling the user exactly what data sources, documents, people, metrics, tools, or analysis methods they should consult to answer the question well."),
        ("Action steps", "Each question should include actionSteps: once the answer is known, what concrete actions should be taken."),
        ("Red flags", "Each question should include redFlags: warning signs or problematic answers to watch for."),
        ("Key metrics", "Each question should include keyMetrics: specific KPIs, benchmarks, or numbers the user should reference when answering."),
        ("Verification", "Before finalizing, re-read each question and ask: would this question be noticeably different if the context fields changed? If not, make it more specific to the provided context."),
        ("Tailoring", "Tailor questions to the specific context fields provided."),
    ]),
    role="You are an expert thinking coach and organizational consultant.",
    task='Generate 3-5 thoughtful, probing questions specifically from the "{driver}" {label}.',
    guidelines=[
        "Only generate questions if this {label} is genuinely relevant to the given context. If not relevant, return an empty elements array.",
        "Every question must be specific to the described situation, not generic.",
        "Each question must come with a relevance note and an actionable info prompt.",
        "Questions should provoke deep thinking and help uncover blind spots.",
    ],
    supports_deeper_questions=True,
)

CHECKLIST = OutputType(
    id="checklist",
    name="Checklist",
    description="Actionable checklists organized by category with priority levels",
    section_label="Dimension",
    element_label="Item",
    fields=_fields([
        ("item", "Checklist Item", "short-text"),
        ("description", "Description", "long-text"),
        ("priority", "Priority", "short-text"),
        ("commonMistakes", "Common Mistakes", "long-text"),
        ("tips", "Pro Tips", "long-text"),
        ("verificationMethod", "How to Verify", "short-text"),
    ]),
    drivers=CHECKLIST_DIMENSIONS,
    directives=_directives([
        ("Role", "You are an expert process consultant and operations advisor who has designed operational readiness checklists for product launches, compliance audits, and cross-functional initiatives."),
        ("Task", "Generate a thorough checklist for this dimension where every item is concrete enough that two different people could independently agree on whether it is complete."),
        ("Process", "Before generating, identify the scope and risk profile of the context. Determine what categories of failure are most likely and most costly, then prioritize items where skipping them leads to real, measurable harm."),
        ("Item count", "Generate 4-8 specific, actionable checklist items relevant to the given context."),
        ("Relevance filter", "Only include items if this dimension is genuinely relevant. If not relevant, return an empty elements array."),
        ("Priority levels", "Assign priority: High (must-do, blocking), Medium (should-do, important), Low (nice-to-have, optimization). Reserve High for truly blocking items."),
        ("Descriptions", "The description should explain WHY this matters and HOW to execute it well."),
        ("Common mistakes", "Each item should include commonMistakes: what people typically get wrong on this item, shortcuts that backfire, or pitfalls to avoid."),
        ("Pro tips", "Each item should include tips: practical advice from experienced practitioners on how to do this faster, better, or more reliably."),
        ("Verification method", "Each item should include verificationMethod: what artifact, test, or approval proves completion."),
        ("Verification", "Before finalizing, verify that two different people could independently agree on whether each item is complete, and that not everything is High priority."),
        ("Tailoring", "Tailor everything to the specific context provided."),
    ]),
    role="You are an expert process consultant and operations advisor.",
    task='Generate a thorough checklist for the "{driver}" {label}.',
    guidelines=[
        "Generate 4-8 specific, actionable checklist items relevant to this context.",
        "Only include items if this {label} is genuinely relevant. If not relevant, return an empty elements array.",
        "Each item must be concrete and verifiable, not vague guidance.",
        "Assign priority: High, Medium, or Low.",
    ],
)

DOSSIER = OutputType(
    id="dossier",
    name="Dossier",
    description="Intelligence briefings organized by research area with findings, implications, and evidence",
    section_label="Intelligence Area",
    element_label="Briefing",
    fields=_fields([
        ("title", "Briefing Title", "short-text"),
        ("summary", "Executive Summary", "long-text"),
        ("keyFindings", "Key Findings", "long-text"),
        ("strategicImplications", "Strategic Implications", "long-text"),
        ("evidence", "Evidence & Sources", "long-text"),
        ("riskAssessment", "Risk Assessment", "long-text"),
        ("opportunities", "Opportunities", "long-text"),
    ]),
    drivers=DOSSIER_SECTIONS,
    directives=_directives([
        ("Role", "You are a senior intelligence analyst who has produced strategic intelligence briefings for executive decision-makers, with expertise in competitive intelligence, market analysis, and evidence-graded assessments."),
        ("Task", "Generate 3-5 intelligence briefings for this research area that a busy executive could read in 5 minutes and know both what changed and what to do differently."),
        ("Process", "Before generating, identify who the intelligence consumer is, what decisions they face, and what they need to know to act. Clearly distinguish confirmed facts from analytical assessments."),
        ("Relevance filter", "Only generate briefings if this intelligence area is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Executive summary", 'The "summary" field must provide the key takeaway a busy decision-maker needs in 2-3 sentences.'),
        ("Key findings", 'The "keyFindings" field must present specific, concrete findings backed by observable signals, data points, or patterns.'),
        ("Strategic implications", 'The "strategicImplications" field must tell the reader what to CHANGE, not just what to "monitor."'),
        ("Evidence", 'The "evidence" field must cite the types of evidence, data sources, reports, or observable signals that support the findings.'),
        ("Risk assessment", "Each briefing should include riskAssessment: what threats or vulnerabilities this area reveals and their likelihood."),
        ("Opportunities", "Each briefing should include opportunities: what openings, advantages, or leverage points this intelligence reveals."),
        ("Verification", "Before finalizing, check that each briefing tells the decision-maker something new AND what to do differently."),
        ("Tailoring", "Tailor the intelligence to the specific context, industry, and decision-making needs provided."),
    ]),
    role="You are a senior intelligence analyst and strategic research expert.",
    task='Generate thorough intelligence briefings for the "{driver}" {label}.',
    guidelines=[
        "Only generate briefings if this {label} is genuinely relevant. If not relevant, return an empty elements array.",
        "Ground all analysis in evidence and observable signals, not speculation.",
        "Surface both risks and opportunities with equal rigor.",
    ],
)

PLAYBOOK = OutputType(
    id="playbook",
    name="Playbook",
    description="Step-by-step operational execution guides organized by phase",
    section_label="Phase",
    element_label="Play",
    fields=_fields([
        ("title", "Play Title", "short-text"),
        ("objective", "Objective", "long-text"),
        ("instructions", "Step-by-Step Instructions", "long-text"),
        ("decisionCriteria", "Decision Criteria", "long-text"),
        ("expectedOutcome", "Expected Outcome", "long-text"),
        ("commonPitfalls", "Common Pitfalls", "long-text"),
        ("tips", "Pro Tips", "long-text"),
        ("timeEstimate", "Time Estimate", "short-text"),
    ]),
    drivers=PLAYBOOK_PHASES,
    directives=_directives([
        ("Role", "You are a senior operations strategist who has designed and deployed execution playbooks for product launches, market entries, and operational transformations."),
        ("Task", "Generate 3-5 actionable plays for this execution phase, detailed enough that someone who just joined the team could follow the instructions without asking a single clarifying question."),
        ("Process", "Before generating, identify the team's capabilities, constraints, and timeline. For this phase, identify both standard plays that must be executed well and differentiator plays that create outsized results."),
        ("Relevance filter", "Only generate plays if this phase is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Instructions", 'The "instructions" field must provide numbered, concrete, step-by-step guidance naming tools, methods, and sequences.'),
        ("Decision criteria", 'The "decisionCriteria" field must describe when to proceed, when to pivot, and what signals to watch for, using "If X, then Y" where applicable.'),
        ("Expected outcome", 'The "expectedOutcome" field must describe the tangible deliverable, state, or result when this play is executed well.'),
        ("Time estimate", "Each play should include timeEstimate: a realistic time range that accounts for team size, approvals, and dependencies."),
        ("Verification", "Before finalizing, check that every decision point makes the signals for each path explicit."),
        ("Tailoring", "Tailor plays to the specific context, team size, resources, and constraints provided."),
    ]),
    role="You are a senior operations strategist and execution expert.",
    task='Generate 3-5 actionable plays for the "{driver}" {label}.',
    guidelines=[
        "Only generate plays if this {label} is genuinely relevant. If not relevant, return an empty elements array.",
        "Each play must include clear objectives, step-by-step instructions, and expected outcomes.",
        "Surface common pitfalls and practical tips from experienced practitioners.",
    ],
)

DECISION_BOOKS = OutputType(
    id="decision-books",
    name="Decision Book",
    description="Structured decision guides organized by domain with options, trade-offs, and decision criteria",
    section_label="Decision Domain",
    element_label="Decision",
    fields=_fields([
        ("decision", "The Decision", "long-text"),
        ("context", "Why This Decision Matters", "long-text"),
        ("options", "Key Options & Trade-offs", "long-text"),
        ("criteria", "Decision Criteria", "long-text"),
        ("risks", "Risks & Failure Modes", "long-text"),
        ("stakeholders", "Key Stakeholders & Impact", "long-text"),
        ("recommendation", "Recommended Path", "long-text"),
    ]),
    drivers=DECISION_DOMAINS,
    directives=_directives([
        ("Role", "You are a senior decision strategist and organizational advisor who has facilitated high-stakes decision workshops for executive teams."),
        ("Task", "Generate 3-5 key decisions that must be made within this decision domain, decisions that surface genuine dilemmas where reasonable people could disagree."),
        ("Process", "Before generating, identify the reader's role, authority level, and constraints. Avoid decisions with obvious answers."),
        ("Relevance filter", "Only generate decisions if this domain is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Stakes", 'The "context" field must explain what is at stake and who is affected.'),
        ("Options & trade-offs", 'The "options" field must present at least 2-3 realistic alternatives, including the status quo, with honest trade-offs for each.'),
        ("Decision criteria", 'The "criteria" field must specify factors specific to THIS decision, not generic ones.'),
        ("Recommendation", "Each decision should include a recommendation that commits to a reasoned position and states when an alternative would be better."),
        ("Verification", "Before finalizing, check that two competent leaders with different priorities could legitimately choose different options."),
        ("Tailoring", "Tailor decisions to the specific role, their authority level, and organizational context."),
    ]),
    role="You are a senior decision strategist and organizational advisor.",
    task='Generate 3-5 key decisions within the "{driver}" {label}.',
    guidelines=[
        "Only generate decisions if this {label} is genuinely relevant. If not relevant, return an empty elements array.",
        "Each decision must include why it matters, realistic options and trade-offs, and guiding criteria.",
        "Surface the hard choices that often go unexamined.",
    ],
    supports_deeper_questions=True,
)


EMAIL_COURSE = OutputType(
    id="email-course",
    name="Email Course",
    description="Multi-part email sequences for nurturing, onboarding, or education",
    section_label="Module",
    element_label="Email",
    fields=_fields([
        ("subject", "Subject Line", "short-text"),
        ("body", "Email Body", "long-text"),
        ("callToAction", "Call to Action", "short-text"),
        ("keyTakeaway", "Key Takeaway", "short-text"),
        ("subjectLineVariants", "Subject Line Alternatives", "long-text"),
        ("sendTiming", "Recommended Send Timing", "short-text"),
    ]),
    drivers=EMAIL_COURSE_STAGES,
    directives=_directives([
        ("Role", "You are an expert email course creator and instructional designer who has built 50+ email courses for SaaS companies, with deep knowledge of subject-line psychology, educational scaffolding, and drip-sequence design."),
        ("Task", "Generate 2-4 emails for this module of an email course that a marketing director would approve for sending without edits."),
        ("Process", "Before generating, map the knowledge gap this module addresses. Each email should have exactly one core teaching point: hook curiosity with the opener, deliver a quick win in the middle, and build toward mastery by the close."),
        ("Self-contained", "Each email should be self-contained but build on the overall module theme."),
        ("Subject lines", 'Subject lines must be compelling and specific. Good: "The 3-minute audit that reveals your biggest pipeline leak". Bad: "Module 2: Understanding Sales Pipeline Fundamentals".'),
        ("Email body length", "Email bodies should be 150-300 words: educational, conversational, and scannable with short paragraphs."),
        ("Call to action", "Each email must end with a clear, specific call to action achievable in under 30 minutes."),
        ("Key takeaway", "Each email should include keyTakeaway: the single most important lesson the reader can remember."),
        ("Subject alternatives", "Each email should include subjectLineVariants: 2-3 alternative subject lines, one curiosity-driven, one urgency-driven, one benefit-driven."),
        ("Send timing", 'Each email should include sendTiming: when in the sequence this email should go out (e.g., "Day 3" or "2 days after previous").'),
        ("Tone", "Write as an expert peer, not a lecturer."),
        ("Minimum output", "If this module is not very relevant to the context, still include at least 1 email."),
    ]),
    role="You are an email marketing and education expert.",
    task='Create the emails for the "{driver}" {label} of a structured email course.',
    guidelines=[
        "Each module should have 3-5 emails.",
        "Each email needs a compelling subject line, educational body, and clear call to action.",
        "Tailor content to the specific context and audience provided.",
    ],
)

PROMPTS = OutputType(
    id="prompts",
    name="Prompt Pack",
    description="Curated AI prompt templates for specific roles and tasks",
    section_label="Category",
    element_label="Prompt",
    fields=_fields([
        ("prompt", "Prompt", "long-text"),
        ("context", "When to Use", "long-text"),
        ("expectedOutput", "Expected Output", "long-text"),
        ("variations", "Prompt Variations", "long-text"),
        ("tips", "Tips for Better Results", "long-text"),
        ("exampleOutput", "Example Output Snippet", "long-text"),
    ]),
    drivers=PROMPT_USE_CASES,
    directives=_directives([
        ("Role", "You are an expert AI prompt engineer who has designed prompt libraries for enterprise teams, with deep expertise in persona-setting, output format control, and few-shot prompting techniques."),
        ("Task", "Generate 3-5 ready-to-use AI prompt templates for this use case, each dramatically more effective than a naive question on the same topic."),
        ("Process", "Before generating, identify the reader's role, daily tasks, and AI tools available. Each prompt should include at least 2 of: persona setting, output format specification, constraints, examples, or chain-of-thought instructions."),
        ("Copy-paste ready", "Each prompt must be complete and copy-paste ready."),
        ("Placeholders", "Include [bracketed placeholders] where the user needs to fill in specifics."),
        ("Context field", 'The "context" field should describe the specific trigger or situation when this prompt is most useful.'),
        ("Expected output", 'The "expectedOutput" should set realistic expectations for what the AI will produce.'),
        ("Variations", "Each prompt should include variations: 2-3 alternative versions that serve genuinely different use cases, not rephrasings."),
        ("Tips", "Each prompt should include tips: practical, concrete advice for getting better results."),
        ("Example output", "Each prompt should include exampleOutput: a short sample of what good output looks like."),
        ("Complexity range", "Vary the complexity: include both quick tactical prompts and deeper strategic ones."),
        ("Minimum output", "If this use case is not very relevant, still include at least 1 prompt."),
    ]),
    role="You are an AI prompt engineering expert.",
    task='Create ready-to-use AI prompts for the "{driver}" {label}.',
    guidelines=[
        "Each category should have 3-5 specific prompts.",
        "Each prompt should be a complete, copy-paste-ready template.",
        "Include context about when to use each prompt and what output to expect.",
    ],
)

BATTLE_CARDS = OutputType(
    id="battle-cards",
    name="Battle Cards",
    description="Structured analysis cards organized by lens for competitive intel, impact assessment, or any structured comparison",
    section_label="Lens",
    element_label="Card",
    fields=_fields([
        ("title", "Card Title", "short-text"),
        ("strengths", "Strengths & Advantages", "long-text"),
        ("weaknesses", "Weaknesses & Risks", "long-text"),
        ("talkingPoints", "Key Talking Points", "long-text"),
        ("objectionHandling", "Objection Handling", "long-text"),
        ("winStrategy", "Strategic Response", "long-text"),
        ("pricingIntel", "Pricing & Packaging Intel", "long-text"),
    ]),
    drivers=BATTLE_CARD_LENSES,
    directives=_directives([
        ("Role", "You are a structured analysis and strategic intelligence expert who has built competitive intelligence programs for sales teams, with expertise in win/loss analysis and objection handling frameworks."),
        ("Task", "Generate 3-5 battle cards for this analytical lens that a sales rep could pull up during a live meeting and immediately use."),
        ("Process", "Before generating, identify the competitive landscape, the reader's position within it, and the conversations these cards will support. Write each card assuming it will be read in a 2-minute break during a meeting."),
        ("Relevance filter", "Only generate cards if this lens is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Strengths", "Identify real strengths and advantages: what works well, why, and what leverage it provides."),
        ("Weaknesses", "Identify real weaknesses, risks, and vulnerabilities that an informed insider would agree are real."),
        ("Talking points", "Key talking points must be specific, conversational, and immediately usable, not generic marketing copy."),
        ("Objection handling", 'Each card should include objectionHandling formatted as "When they say X, you say Y". Empty string if not applicable.'),
        ("Strategic response", "Each card should include winStrategy: the specific game plan given the strengths and weaknesses."),
        ("Pricing intel", "Each card should include pricingIntel: relevant pricing, cost, or resource implications. Empty string if not applicable."),
        ("Tailoring", "Tailor all analysis to the specific context provided."),
    ]),
    role="You are a structured analysis and strategic intelligence expert.",
    task='Create battle cards for the "{driver}" {label}.',
    guidelines=[
        "Each section should have 3-5 analysis cards.",
        "Each card needs a clear title and structured fields covering strengths, weaknesses, and strategic response.",
        "Focus on actionable intelligence the reader can use immediately.",
    ],
)

CHEAT_SHEETS = OutputType(
    id="cheat-sheets",
    name="Cheat Sheet",
    description="Concise quick-reference cards organized by category with definitions, examples, and shortcuts",
    section_label="Category",
    element_label="Entry",
    fields=_fields([
        ("term", "Term / Concept", "short-text"),
        ("definition", "Definition", "long-text"),
        ("example", "Example / Usage", "long-text"),
        ("relatedConcepts", "Related Concepts", "short-text"),
        ("commonMistakes", "Common Mistakes", "long-text"),
        ("quickTip", "Quick Tip", "short-text"),
    ]),
    drivers=CHEAT_SHEET_CATEGORIES,
    directives=_directives([
        ("Role", "You are an expert educator and knowledge distiller who creates scannable, high-density reference materials used daily by practitioners."),
        ("Task", "Generate 4-8 quick-reference entries for this category, where every entry can be absorbed in under 10 seconds."),
        ("Process", "Before generating, identify the reader's domain and what they need to reference quickly during work. Prioritize terms by reference frequency."),
        ("Relevance filter", "Only generate entries if this category is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Density", "Every entry must be concise and information-dense. This is a cheat sheet, not a textbook."),
        ("Definition", 'The "definition" field must provide a clear, jargon-free explanation in 1-3 sentences.'),
        ("Example", 'The "example" field must include a concrete, practical example showing the concept in action within the given context.'),
        ("Related concepts", 'The "relatedConcepts" field should list 2-4 closely related terms or concepts.'),
        ("Common mistakes", "Each entry should include commonMistakes: the most frequent misunderstandings or misapplications of this concept."),
        ("Quick tip", "Each entry should include quickTip: the one thing an expert would tell a colleague in passing."),
        ("Tailoring", "Tailor all entries to the specific context, industry terminology, and audience level provided."),
    ]),
    role="You are an expert educator and knowledge distiller.",
    task='Generate a concise, scannable cheat sheet for the "{driver}" {label}.',
    guidelines=[
        "Create 4-8 entries, optimized for at-a-glance use.",
        "Include concrete examples and common mistakes for each entry.",
        "Prioritize the most important, most-referenced information.",
    ],
)

AGENT_BOOK = OutputType(
    id="agent-book",
    name="Agent Book",
    description="AI agent ideas organized by workflow opportunity: what to build, how it works, and how to get started",
    section_label="Opportunity Area",
    element_label="Agent",
    fields=_fields([
        ("agentName", "Agent Name", "short-text"),
        ("description", "What It Does", "long-text"),
        ("howItWorks", "How It Works", "long-text"),
        ("keyCapabilities", "Key Capabilities", "long-text"),
        ("dataAndTools", "Data & Tools Needed", "long-text"),
        ("complexity", "Implementation Complexity", "short-text"),
        ("expectedImpact", "Expected Impact", "long-text"),
        ("quickStart", "Quick-Start Hint", "long-text"),
    ]),
    drivers=AGENT_OPPORTUNITY_AREAS,
    directives=_directives([
        ("Role", "You are an AI agent strategist who identifies high-impact opportunities to deploy AI agents across workflows."),
        ("Task", "Generate 3-5 AI agent ideas for this opportunity area, ranging from quick-win automations to ambitious multi-step orchestrations."),
        ("Relevance filter", "Only generate agents if this opportunity area is genuinely relevant to the given context. If not relevant, return an empty elements array."),
        ("Specificity", "Every agent must be specific to the described context, not generic."),
        ("How it works", 'The "howItWorks" field must describe the trigger, the steps the agent takes, and what it hands back.'),
        ("Data and tools", 'The "dataAndTools" field must name the data sources, integrations, and tools the agent needs.'),
        ("Complexity", 'The "complexity" field must be Low, Medium, or High with a one-line justification.'),
        ("Quick start", "Each agent should include quickStart: the smallest first version someone could build this week."),
        ("Tailoring", "Tailor agents to the specific role, industry, and workflow context provided."),
    ]),
    role="You are an AI agent strategist who identifies high-impact opportunities to deploy AI agents across workflows.",
    task='Generate 3-5 AI agent ideas for the "{driver}" {label}.',
    guidelines=[
        "Only generate agents if this {label} is genuinely relevant. If not relevant, return an empty elements array.",
        "Each agent must include a clear name, description, architecture, and implementation guidance.",
        "Tailor agents to the specific role, industry, and workflow context provided.",
    ],
)

EBOOK = OutputType(
    id="ebook",
    name="e-Book",
    description="Long-form guides organized into chapters for education, training, and thought leadership",
    section_label="Chapter",
    element_label="Section",
    fields=_fields([
        ("title", "Section Title", "short-text"),
        ("content", "Content", "long-text"),
        ("keyInsight", "Key Insight", "long-text"),
        ("practicalExample", "Practical Example", "long-text"),
        ("actionItem", "Reader Action Item", "long-text"),
    ]),
    drivers=EBOOK_CHAPTERS,
    directives=_directives([
        ("Role", "You are an expert author and instructional designer who creates compelling, comprehensive guides."),
        ("Task", "Generate 3-5 substantial sub-sections for this chapter, each teaching the reader something they will truly understand afterwards."),
        ("Long-form content", 'The "content" field must contain rich, long-form prose of 400-800 words, not bullet points or summaries.'),
        ("Progression", "Build progressively within the chapter from context-setting to actionable knowledge."),
        ("Examples", 'The "practicalExample" field must illustrate the sub-section with a concrete scenario from the given context.'),
        ("Action item", "Each sub-section should include actionItem: one thing the reader should do after reading it."),
        ("Tailoring", "Tailor depth, terminology, and examples to the specific audience and context provided."),
    ]),
    role="You are an expert author and instructional designer who creates compelling, comprehensive guides.",
    task='Write the sub-sections for the "{driver}" {label} of an e-Book.',
    guidelines=[
        "Create 3-5 substantial sub-sections.",
        "Each sub-section must contain rich, long-form prose, not bullet points or summaries.",
        "Include concrete examples, scenarios, and practical illustrations throughout.",
    ],
)


OUTPUT_TYPES: Dict[str, OutputType] = {
    t.id: t for t in (
        QUESTIONS, CHECKLIST, EMAIL_COURSE, PROMPTS, BATTLE_CARDS, DECISION_BOOKS,
        DOSSIER, PLAYBOOK, CHEAT_SHEETS, AGENT_BOOK, EBOOK,
    )
}


def get_output_type(output_type_id: str) -> Optional[OutputType]:
    return OUTPUT_TYPES.get(output_type_id)
