"""Local ATS heuristic scorer.

Combines the five sub-scores into one deterministic result:
1. Structure (sections present and complete)
2. Keywords (JD terms, or generic vocabulary without a JD)
3. Action verbs (strong leading verbs vs weak phrases)
4. Metrics (quantified achievements)
5. Formatting (ATS-safe text)

The overall score is a fixed weighted sum of the breakdown, so the same
CV and job description always produce the same result.
"""

import logging

from config import AtsPolicy, settings
from models.cv import CVDocument
from models.responses import (
    AnalysisDetails,
    AnalysisResult,
    AtsReport,
    JobMatch,
    ScoreBreakdown,
)
from models.schemas.sub_scores import (
    FormattingResult,
    KeywordResult,
    MetricsResult,
    StructureResult,
    VerbResult,
)
from services import section_parser
from services.ats.action_verbs import score_action_verbs
from services.ats.formatting import score_formatting
from services.ats.keywords import (
    extract_reference_terms,
    match_keywords,
    score_keywords,
    split_by_category,
)
from services.ats.metrics import score_metrics
from services.ats.structure import score_structure
from services.ats.text import cv_statements, cv_text
from services.ats.vocabulary import EDUCATION_KEYWORDS
from services.similarity import tfidf_cosine

logger = logging.getLogger(__name__)

ATS_READY_THRESHOLD = 70


def grade_for(score: int) -> str:
    if score >= 80:
        return "A"
    if score >= 70:
        return "B"
    if score >= 60:
        return "C"
    if score >= 50:
        return "D"
    return "F"


def weights_for(policy: AtsPolicy, generic: bool) -> dict[str, float]:
    if generic:
        return {
            "structure": policy.generic_weight_structure,
            "keywords": policy.generic_weight_keywords,
            "action_verbs": policy.generic_weight_action_verbs,
            "metrics": policy.generic_weight_metrics,
            "formatting": policy.generic_weight_formatting,
        }
    return {
        "structure": policy.weight_structure,
        "keywords": policy.weight_keywords,
        "action_verbs": policy.weight_action_verbs,
        "metrics": policy.weight_metrics,
        "formatting": policy.weight_formatting,
    }


def compute_overall(breakdown: ScoreBreakdown, weights: dict[str, float]) -> int:
    """Weighted sum of the breakdown, clamped to 0-100."""
    total = sum(weights.values()) or 1.0
    raw = sum(getattr(breakdown, name) * weight for name, weight in weights.items()) / total
    return min(100, max(0, round(raw)))


def _suggestions(
    structure: StructureResult,
    keywords: KeywordResult,
    verbs: VerbResult,
    metrics: MetricsResult,
    formatting: FormattingResult,
) -> list[str]:
    suggestions = list(structure.issues)

    if keywords.missing:
        source = "common professional terms" if keywords.used_generic_vocabulary else "keywords from the job description"
        suggestions.append(f"Add {source}: {', '.join(keywords.missing[:5])}")

    if verbs.weak_phrases:
        phrases = ", ".join(f'"{p}"' for p in verbs.weak_phrases[:3])
        suggestions.append(f"Replace weak phrases such as {phrases} with strong action verbs")
    if verbs.statement_count and verbs.score < 60:
        suggestions.append("Start more bullet points with strong action verbs like led, built or reduced")

    if metrics.score < 60:
        suggestions.append("Quantify achievements with numbers, percentages or amounts")
    for sentence in metrics.opportunities[:2]:
        suggestions.append(f'Add a measurable result to: "{sentence[:80]}"')

    suggestions.extend(formatting.issues)
    return suggestions


def _strengths(
    structure: StructureResult,
    keywords: KeywordResult,
    verbs: VerbResult,
    metrics: MetricsResult,
    formatting: FormattingResult,
) -> list[str]:
    strengths = []
    if structure.score >= 80:
        strengths.append("Well-structured CV with all key sections")
    if keywords.score >= 70:
        if keywords.used_generic_vocabulary:
            strengths.append("Good coverage of professional vocabulary")
        else:
            strengths.append("Strong keyword match with the job description")
    if verbs.strong_verbs:
        strengths.append(f"Uses strong action verbs ({', '.join(verbs.strong_verbs[:4])})")
    if len(metrics.metrics) >= 3:
        strengths.append(f"Quantifies achievements with {len(metrics.metrics)} metrics")
    if formatting.score == 100:
        strengths.append("Clean, ATS-friendly formatting")
    return strengths


def analyze_local(
    cv: CVDocument,
    job_description: str | None = None,
    policy: AtsPolicy | None = None,
) -> AnalysisResult:
    """Run every heuristic over the CV and aggregate into an AnalysisResult."""
    policy = policy or settings.ats
    statements = cv_statements(cv)

    structure = score_structure(cv, policy)
    keywords = score_keywords(cv, job_description, policy)
    verbs = score_action_verbs(statements, policy)
    metrics = score_metrics(statements, policy)
    formatting = score_formatting(cv, policy)

    breakdown = ScoreBreakdown(
        structure=structure.score,
        keywords=keywords.score,
        action_verbs=verbs.score,
        metrics=metrics.score,
        formatting=formatting.score,
    )
    overall = compute_overall(breakdown, weights_for(policy, keywords.used_generic_vocabulary))

    suggestions = list(dict.fromkeys(_suggestions(structure, keywords, verbs, metrics, formatting)))
    strengths = list(dict.fromkeys(_strengths(structure, keywords, verbs, metrics, formatting)))

    logger.debug("Local ATS score %d (%s)", overall, breakdown)
    return AnalysisResult(
        overall_score=overall,
        breakdown=breakdown,
        matched_keywords=keywords.matched,
        missing_keywords=keywords.missing,
        suggestions=suggestions[: policy.max_suggestions],
        strengths=strengths[: policy.max_strengths],
        details=AnalysisDetails(
            missing_sections=structure.missing_sections,
            strong_verbs=verbs.strong_verbs,
            weak_phrases=verbs.weak_phrases,
            metrics_found=metrics.metrics,
            metric_opportunities=metrics.opportunities,
            formatting_issues=formatting.issues,
            used_generic_vocabulary=keywords.used_generic_vocabulary,
        ),
        grade=grade_for(overall),
        ats_ready=overall >= ATS_READY_THRESHOLD,
    )


def generate_report(result: AnalysisResult) -> AtsReport:
    score = result.overall_score
    return AtsReport(
        score=score,
        grade=grade_for(score),
        status="ATS Ready" if score >= ATS_READY_THRESHOLD else "Needs Improvement",
        top_strengths=result.strengths[:3],
        top_improvements=result.suggestions[:5],
        keyword_gaps=result.missing_keywords[:10],
    )


def cv_experience_years(cv: CVDocument) -> float:
    """Total years across experience entries, from their start and end dates."""
    total_months = 0
    for exp in cv.experience:
        start_year, start_month = section_parser.parse_date(exp.start_date)
        end_raw = "present" if exp.current or not exp.end_date.strip() else exp.end_date
        end_year, end_month = section_parser.parse_date(end_raw)
        if start_year and end_year:
            months = (end_year - start_year) * 12 + (end_month - start_month)
            if 0 < months < 600:
                total_months += months
    return round(total_months / 12, 1)


def compare_to_job(cv: CVDocument, job_description: str) -> JobMatch:
    """Category-level comparison of a CV with one job description."""
    text = cv_text(cv)
    reference = extract_reference_terms(job_description)
    technical, soft = split_by_category(reference)

    tech_matched, tech_missing = match_keywords(text, technical)
    soft_matched, _ = match_keywords(text, soft)

    jd_lower = job_description.lower()
    text_lower = text.lower()
    required_education = [kw for kw in EDUCATION_KEYWORDS if kw in jd_lower]

    required_years = section_parser.extract_required_years(job_description)
    years = cv_experience_years(cv)

    return JobMatch(
        technical_match=round(100 * len(tech_matched) / len(technical)) if technical else 100,
        soft_skills_match=round(100 * len(soft_matched) / len(soft)) if soft else 100,
        education_match=not required_education or any(kw in text_lower for kw in required_education),
        required_years=required_years,
        cv_years=years,
        experience_match=years >= required_years,
        matched_technical=tech_matched,
        missing_technical=tech_missing,
        text_similarity=round(tfidf_cosine(text, job_description), 3) if text and job_description.strip() else 0.0,
    )
