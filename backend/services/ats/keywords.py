"""Keyword extraction and matching for CV-JD analysis.

Builds the reference term set from a job description (curated dictionary
hits plus TF-IDF discovery, ranked by frequency in the JD), resolves skill
synonyms, and matches against CV vocabulary with exact, stemmed and fuzzy
comparison. Without a job description the generic professional vocabulary
is used instead, scored against a looser coverage target.
"""

import logging
import re

from rapidfuzz import fuzz

from config import AtsPolicy
from models.cv import CVDocument
from models.responses import KeywordDensityEntry
from models.schemas.sub_scores import KeywordResult
from services.ats.text import cv_text, extract_terms, normalize, stem
from services.ats.vocabulary import GENERIC_VOCABULARY, SOFT_SKILLS, TECH_SKILLS
from services.similarity import extract_tfidf_keywords

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JD boilerplate filtering: non-technical terms TF-IDF often picks up
# ---------------------------------------------------------------------------
JD_STOPWORDS: frozenset[str] = frozenset({
    # Company / HR boilerplate
    "opportunity", "opportunities", "position", "positions", "role", "roles",
    "candidate", "candidates", "applicant", "applicants", "application",
    "applications", "employment", "employer", "employee", "employees",
    "company", "organization", "team", "teams", "department",
    # Compensation & benefits
    "compensation", "salary", "benefits", "bonus", "equity", "insurance",
    "401k", "pto", "vacation", "retirement",
    # Legal / EEO
    "privacy", "notice", "policy", "equal", "discrimination", "disability",
    "veteran", "gender", "orientation", "national", "origin", "age",
    "protected", "status", "eeo", "affirmative", "accommodation",
    # Generic JD filler
    "range", "related", "including", "based", "preferred", "required",
    "minimum", "experience", "qualified", "qualification", "qualifications",
    "responsible", "responsibilities", "requirement", "requirements",
    "description", "overview", "summary", "mission", "vision",
    "passionate", "exciting", "innovative", "dynamic", "diverse",
    "competitive", "flexible", "remote", "hybrid", "onsite", "location",
    "office", "plus", "ideal", "looking", "seeking", "join",
    # Generic action words that aren't skills
    "deliver", "manage", "create", "build", "develop", "maintain",
    "implement", "design", "support", "ensure", "provide", "work",
    "working", "help", "apply", "knowledge", "ability", "familiarity",
    "understanding", "skills", "skill",
    # Common words that sneak through TF-IDF
    "job", "career", "people", "year", "years", "day", "time",
    "great", "best", "good", "strong", "key", "core", "new", "well",
    "full", "level", "senior", "junior", "mid", "staff",
})

_JD_BOILERPLATE_RE = re.compile(
    r"(?:^|\n)\s*(?:"
    r"what\s+we\s+offer|"
    r"(?:our|the)\s+(?:benefits|perks|compensation)|"
    r"(?:salary|pay|compensation)\s+(?:range|information)|"
    r"equal\s+(?:opportunity|employment)|"
    r"privacy\s+(?:notice|policy)|"
    r"about\s+(?:us|the\s+company)|"
    r"who\s+we\s+are)",
    re.IGNORECASE | re.MULTILINE,
)

_BOILERPLATE_PHRASES = frozenset({
    "equal opportunity", "employment opportunity", "national origin",
    "gender identity", "sexual orientation", "veteran status",
    "base salary", "salary range", "full time", "part time", "paid time",
})

# ---------------------------------------------------------------------------
# Skill synonym mapping: aliases -> canonical form
# ---------------------------------------------------------------------------
SKILL_SYNONYMS: dict[str, str] = {
    # JavaScript ecosystem
    "js": "javascript", "es6": "javascript", "ts": "typescript",
    "react.js": "react", "reactjs": "react",
    "vue.js": "vue", "vuejs": "vue",
    "angular.js": "angular", "angularjs": "angular",
    "node": "node.js", "nodejs": "node.js",
    "next": "next.js", "nextjs": "next.js",
    "express.js": "express", "expressjs": "express",
    # Python ecosystem
    "py": "python", "python3": "python",
    "sklearn": "scikit-learn", "torch": "pytorch", "fast api": "fastapi",
    # Cloud & DevOps
    "k8s": "kubernetes", "kube": "kubernetes",
    "amazon web services": "aws", "google cloud": "gcp",
    "google cloud platform": "gcp", "microsoft azure": "azure",
    "cicd": "ci/cd", "docker compose": "docker",
    # Databases
    "postgres": "postgresql", "mongo": "mongodb", "mssql": "sql server",
    "dynamo": "dynamodb",
    # Languages
    "c sharp": "c#", "csharp": "c#", "cpp": "c++", "golang": "go",
    # AI/ML
    "ml": "machine learning", "dl": "deep learning",
    "nlp": "natural language processing",
    "genai": "generative ai", "large language models": "llm",
    # Methodologies and soft skills
    "rest api": "rest", "restful": "rest", "rest apis": "rest",
    "pm": "project management", "agile methodology": "agile",
    "problem solving": "problem-solving", "team work": "teamwork",
    "cross functional": "cross-functional",
}

# Curated dictionary layer for terms TF-IDF misses on short documents
COMMON_KEYWORDS: frozenset[str] = TECH_SKILLS | frozenset(SOFT_SKILLS) | frozenset({
    "machine learning", "natural language processing", "computer vision",
    "generative ai", "llm", "scikit-learn", "kafka", "snowflake",
    "bigquery", "linux", "ansible", "grpc", "kanban", "sql server",
})

REFERENCE_TOP_N = 25


def canonicalize(term: str) -> str:
    """Resolve a term to its canonical form via synonym dictionary."""
    lower = term.lower().strip()
    return SKILL_SYNONYMS.get(lower, lower)


def _extract_relevant_jd_sections(job_description: str) -> str:
    """Drop trailing boilerplate (benefits, EEO, company blurb) from a JD."""
    match = _JD_BOILERPLATE_RE.search(job_description)
    if match and match.start() > 50:
        return job_description[: match.start()].strip()
    return job_description.strip()


def _is_technical_term(term: str) -> bool:
    words = term.lower().split()
    if not words or any(w.isdigit() for w in words):
        return False
    if len(words) == 1:
        return words[0] not in JD_STOPWORDS and len(words[0]) > 1
    if any(w in JD_STOPWORDS for w in words):
        return False
    return term.lower() not in _BOILERPLATE_PHRASES


def _term_frequency(term: str, normalized_text: str) -> int:
    pattern = rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9+#])"
    return len(re.findall(pattern, normalized_text))


def extract_reference_terms(job_description: str, top_n: int = REFERENCE_TOP_N) -> list[str]:
    """Significant JD terms, most frequent first (ties: dictionary hits, then alphabetical)."""
    relevant = _extract_relevant_jd_sections(job_description)
    if not relevant:
        return []

    normalized = normalize(relevant)
    jd_terms = extract_terms(relevant)
    canonical_jd = {canonicalize(t) for t in jd_terms}

    dict_hits = {kw for kw in COMMON_KEYWORDS if kw in canonical_jd}
    tfidf_hits = {
        canonicalize(kw)
        for kw in extract_tfidf_keywords(relevant, top_n=top_n * 2)
        if _is_technical_term(kw)
    }

    frequencies: dict[str, int] = {}
    for term in dict_hits | tfidf_hits:
        aliases = [a for a, canon in SKILL_SYNONYMS.items() if canon == term]
        frequencies[term] = sum(_term_frequency(t, normalized) for t in [term, *aliases])

    ranked = sorted(
        frequencies,
        key=lambda t: (-frequencies[t], t not in dict_hits, t),
    )
    # Drop single words already covered by a ranked phrase
    phrases = [t for t in ranked if " " in t]
    ranked = [
        t for t in ranked
        if " " in t or t in dict_hits or not any(t in p.split() for p in phrases)
    ]
    return ranked[:top_n]


class _CVVocabulary:
    """Precomputed forms of the CV text used for matching."""

    def __init__(self, text: str):
        self.terms = extract_terms(text)
        self.padded = f" {' '.join(normalize(text).split())} "
        self.canonical = {canonicalize(t) for t in self.terms}
        self.stems = {stem(t) for t in self.canonical}

    def contains(self, keyword: str, fuzzy_threshold: int) -> bool:
        canon = canonicalize(keyword)

        # 1. Exact term or phrase
        if keyword in self.terms or f" {keyword} " in self.padded:
            return True

        # 2. Synonym resolution
        if canon in self.canonical or f" {canon} " in self.padded:
            return True

        # 3. Stem match
        if stem(canon) in self.stems:
            return True

        # 4. Fuzzy match for typos and close variants
        if len(canon) >= 4:
            width = len(canon.split())
            for term in self.canonical:
                if len(term) >= 4 and len(term.split()) == width and fuzz.ratio(canon, term) >= fuzzy_threshold:
                    return True
        return False


def match_keywords(
    text: str, reference: list[str], fuzzy_threshold: int = 85
) -> tuple[list[str], list[str]]:
    """Split reference terms into (matched, missing), preserving reference order."""
    vocabulary = _CVVocabulary(text)
    matched: list[str] = []
    missing: list[str] = []
    for term in reference:
        (matched if vocabulary.contains(term, fuzzy_threshold) else missing).append(term)
    return matched, missing


def score_keywords(
    cv: CVDocument, job_description: str | None, policy: AtsPolicy
) -> KeywordResult:
    """Keyword sub-score: coverage of the reference term set."""
    reference = extract_reference_terms(job_description) if job_description and job_description.strip() else []
    used_generic = not reference
    if used_generic:
        reference = list(GENERIC_VOCABULARY)

    matched, missing = match_keywords(cv_text(cv), reference, policy.fuzzy_threshold)

    coverage = len(matched) / len(reference)
    if used_generic:
        target = policy.generic_coverage_target or 1.0
        coverage = coverage / target
    score = round(min(1.0, coverage) * 100)

    return KeywordResult(
        score=score,
        matched=matched[: policy.max_matched_keywords],
        missing=missing[: policy.max_missing_keywords],
        reference_size=len(reference),
        used_generic_vocabulary=used_generic,
    )


def keyword_density(cv: CVDocument, keywords: list[str]) -> dict[str, KeywordDensityEntry]:
    """Occurrence count and share of total words for each keyword.

    A keyword that never appears is flagged "missing"; more than ten
    occurrences is flagged "overused".
    """
    normalized = normalize(cv_text(cv))
    total_words = len(normalized.split())
    densities: dict[str, KeywordDensityEntry] = {}
    for kw in keywords:
        count = _term_frequency(kw.lower(), normalized)
        if count == 0:
            recommendation = f'"{kw}" is not mentioned - consider adding it naturally'
        elif count > 10:
            recommendation = f'"{kw}" appears {count} times - may seem repetitive'
        else:
            recommendation = ""
        densities[kw] = KeywordDensityEntry(
            count=count,
            density=round(count / total_words * 100, 2) if total_words else 0.0,
            recommendation=recommendation,
        )
    return densities


def split_by_category(terms: list[str]) -> tuple[list[str], list[str]]:
    """Partition terms into (technical, soft) using the curated lists."""
    soft = set(SOFT_SKILLS)
    technical = [t for t in terms if t not in soft]
    return technical, [t for t in terms if t in soft]
