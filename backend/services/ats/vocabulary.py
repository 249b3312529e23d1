"""Word lists used by the ATS heuristics."""

# Strong action verbs, grouped for report wording
ACTION_VERB_CATEGORIES: dict[str, tuple[str, ...]] = {
    "leadership": (
        "led", "directed", "managed", "supervised", "coordinated", "headed",
        "oversaw", "spearheaded", "orchestrated", "mentored",
    ),
    "achievement": (
        "achieved", "accomplished", "delivered", "exceeded", "outperformed",
        "surpassed", "attained", "earned", "won", "secured",
    ),
    "creation": (
        "created", "designed", "developed", "built", "established", "founded",
        "initiated", "launched", "pioneered", "introduced",
    ),
    "improvement": (
        "improved", "enhanced", "optimized", "streamlined", "upgraded",
        "transformed", "revamped", "modernized", "strengthened", "boosted",
        "reduced", "increased", "decreased", "grew", "scaled", "tripled",
        "doubled", "simplified", "consolidated", "overhauled", "refactored",
    ),
    "analysis": (
        "analyzed", "assessed", "evaluated", "researched", "investigated",
        "examined", "reviewed", "audited", "diagnosed", "identified",
    ),
    "communication": (
        "presented", "communicated", "negotiated", "collaborated", "liaised",
        "facilitated", "mediated", "advocated", "articulated", "persuaded",
        "partnered", "trained", "published",
    ),
    "technical": (
        "implemented", "engineered", "programmed", "automated", "configured",
        "deployed", "integrated", "architected", "coded", "debugged",
        "migrated", "tested", "resolved", "standardized", "executed",
    ),
}

STRONG_VERBS: frozenset[str] = frozenset(
    verb for verbs in ACTION_VERB_CATEGORIES.values() for verb in verbs
)

WEAK_PHRASES: tuple[str, ...] = (
    "responsible for",
    "helped with",
    "helped",
    "assisted",
    "worked on",
    "participated in",
    "was involved in",
    "duties included",
    "tasked with",
    "in charge of",
)

SOFT_SKILLS: tuple[str, ...] = (
    "communication", "leadership", "teamwork", "problem-solving",
    "critical thinking", "time management", "adaptability", "flexibility",
    "creativity", "innovation", "attention to detail", "organization",
    "interpersonal", "collaboration", "decision making", "analytical",
    "strategic thinking", "project management", "conflict resolution",
    "negotiation", "presentation", "customer service", "self-motivated",
    "initiative", "work ethic", "reliability", "accountability",
    "multitasking", "prioritization", "emotional intelligence", "mentoring",
)

TECH_SKILLS_BY_DOMAIN: dict[str, tuple[str, ...]] = {
    "programming": (
        "javascript", "python", "java", "c++", "c#", "ruby", "php", "swift",
        "kotlin", "go", "rust", "typescript", "scala", "perl", "r",
    ),
    "frontend": (
        "react", "angular", "vue", "html", "css", "sass", "tailwind",
        "bootstrap", "jquery", "webpack", "next.js", "nuxt", "svelte", "redux",
    ),
    "backend": (
        "node.js", "express", "django", "flask", "spring", "rails", "laravel",
        "fastapi", ".net", "graphql", "rest", "microservices",
    ),
    "database": (
        "sql", "mysql", "postgresql", "mongodb", "redis", "elasticsearch",
        "oracle", "dynamodb", "cassandra", "firebase", "supabase",
    ),
    "cloud": (
        "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "jenkins",
        "ci/cd", "devops", "serverless", "lambda",
    ),
    "data": (
        "machine learning", "deep learning", "data science", "pandas", "numpy",
        "tensorflow", "pytorch", "spark", "hadoop", "tableau", "power bi",
        "data analysis",
    ),
    "mobile": (
        "ios", "android", "react native", "flutter", "xamarin", "ionic",
        "mobile development",
    ),
    "tools": (
        "git", "github", "gitlab", "jira", "confluence", "figma", "postman",
        "agile", "scrum",
    ),
}

TECH_SKILLS: frozenset[str] = frozenset(
    skill for skills in TECH_SKILLS_BY_DOMAIN.values() for skill in skills
)

EDUCATION_KEYWORDS: tuple[str, ...] = (
    "bachelor", "master", "phd", "mba", "degree", "certification",
    "certified", "diploma", "university", "college", "graduate",
    "undergraduate",
)

# Reference set used when no job description is supplied. Deliberately
# small and role-agnostic, scored against a looser coverage target.
GENERIC_VOCABULARY: tuple[str, ...] = (
    "communication", "leadership", "teamwork", "collaboration",
    "problem-solving", "project management", "stakeholder", "strategy",
    "analysis", "planning", "management", "customer", "quality",
    "process improvement", "results", "budget", "reporting", "training",
    "deadline", "cross-functional",
)

# Words that signal an achievement statement
ACHIEVEMENT_WORDS: frozenset[str] = frozenset({
    "increased", "reduced", "decreased", "improved", "grew", "saved",
    "cut", "boosted", "generated", "delivered", "achieved", "exceeded",
    "optimized", "accelerated", "expanded", "raised", "lowered", "won",
    "scaled", "launched", "streamlined", "managed", "led",
})
