"""All prompt templates for Gemini API calls."""

import json

from models.cv import CVDocument
from models.responses import AnalysisResult


def _cv_digest(cv: CVDocument) -> str:
    """Compact plain-text rendering of a CV for prompts."""
    info = cv.personal_info
    lines = [
        f"Name: {info.full_name or 'Not provided'}",
        f"Title: {info.title or 'Not provided'}",
        f"Summary: {cv.summary or 'Not provided'}",
        "Experience:",
    ]
    for exp in cv.experience:
        dates = f"{exp.start_date} - {'Present' if exp.current else exp.end_date}".strip(" -")
        lines.append(f"- {exp.title} at {exp.company} ({dates})")
        if exp.description:
            lines.append(f"  {exp.description}")
        lines.extend(f"  * {b}" for b in exp.bullets)
    lines.append("Education:")
    lines.extend(f"- {e.degree} {e.field} from {e.school}".replace("  ", " ") for e in cv.education)
    lines.append(f"Technical Skills: {', '.join(cv.skills.technical) or 'None'}")
    lines.append(f"Soft Skills: {', '.join(cv.skills.soft) or 'None'}")
    if cv.projects:
        lines.append("Projects:")
        lines.extend(f"- {p.name}: {p.description}" for p in cv.projects)
    return "\n".join(lines)


def build_ats_prompt(
    cv: CVDocument,
    job_description: str = "",
    local_result: AnalysisResult | None = None,
) -> str:
    """ATS assessment in the same five categories as the local scorer.

    Includes the local heuristic scores as context to help calibrate the model.
    """
    context_section = ""
    if local_result is not None:
        b = local_result.breakdown
        context_section = f"""
LOCAL HEURISTIC PRE-ANALYSIS (use as calibration reference, not as final scores):
- structure {b.structure}, keywords {b.keywords}, action_verbs {b.action_verbs}, metrics {b.metrics}, formatting {b.formatting}
- Keywords already matched: {', '.join(local_result.matched_keywords)}
- Keywords detected as missing: {', '.join(local_result.missing_keywords)}
---
"""

    jd_section = (
        f"\nTARGET JOB DESCRIPTION:\n---\n{job_description}\n---\n"
        if job_description.strip()
        else "\nNo job description supplied: judge against general ATS best practice.\n"
    )

    return f"""You are an expert ATS (Applicant Tracking System) analyst and professional resume reviewer.

Score this CV for ATS compatibility using the rubric below.

SCORING RUBRIC (follow strictly):
- 0-40:  Likely rejected by automated screening.
- 40-60: Parses, but weak keyword coverage or content quality.
- 60-80: Good. Minor gaps in keywords, metrics or structure.
- 80-100: Excellent. Clean structure, strong verbs, quantified results.

CATEGORIES:
- structure: expected sections present and complete
- keywords: coverage of relevant terms
- action_verbs: strong, specific verbs instead of filler
- metrics: quantified achievements
- formatting: plain text that ATS parsers read reliably
{context_section}CV:
---
{_cv_digest(cv)}
---
{jd_section}
Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "overall_score": <integer 0-100>,
  "breakdown": {{
    "structure": <integer 0-100>,
    "keywords": <integer 0-100>,
    "action_verbs": <integer 0-100>,
    "metrics": <integer 0-100>,
    "formatting": <integer 0-100>
  }},
  "matched_keywords": [<keywords present in the CV>],
  "missing_keywords": [<important keywords absent from the CV>],
  "suggestions": [<3-5 specific, actionable improvements>],
  "strengths": [<2-4 specific strengths>],
  "summary": "<2-3 sentence assessment>"
}}"""


def build_summary_prompt(cv: CVDocument, target_role: str = "") -> str:
    positions = len(cv.experience)
    return f"""You are an expert CV writer and ATS optimization specialist.

Write a professional summary that:
- is 3-4 sentences long
- includes relevant keywords naturally
- highlights quantifiable achievements
- uses strong action verbs
- does not start sentences with "I"

Details:
- Current/Target Job Title: {cv.personal_info.title or 'Professional'}
- Positions held: {positions or 'Not specified'}
- Key Skills: {', '.join(cv.skills.technical[:10]) or 'Various professional skills'}
- Target Role: {target_role or cv.personal_info.title or 'Similar position'}

Recent experience:
{_cv_digest(cv)}

Provide ONLY the summary text, no explanations or formatting."""


def build_improve_prompt(text: str, section: str = "experience", keywords: list[str] | None = None) -> str:
    keyword_line = f"Keywords to incorporate naturally: {', '.join(keywords)}\n" if keywords else ""
    return f"""You are an expert CV writer specializing in ATS optimization.

Improve this {section} content:
- use strong action verbs (Led, Developed, Implemented, Achieved)
- quantify achievements with numbers when possible
- remove weak phrases and filler words
- never change factual information, only the wording

Original content:
---
{text}
---
{keyword_line}
Provide ONLY the improved content, keeping the same structure."""


def build_bullets_prompt(job_title: str, company: str, description: str, skills: list[str]) -> str:
    return f"""You are an expert CV writer. Generate 4-6 impactful bullet points for this job experience.

Each bullet must start with a strong action verb, include a quantifiable result where plausible
(%, $, counts) and be at most two lines.

Job Title: {job_title or 'Not specified'}
Company: {company or 'Not specified'}
Responsibilities: {description or 'General duties'}
Skills Used: {', '.join(skills) or 'Various skills'}

Respond with ONLY a JSON object: {{"bullets": ["Bullet 1", "Bullet 2"]}}"""


def build_tailor_prompt(cv: CVDocument, job_description: str) -> str:
    return f"""You are an expert at tailoring CVs for specific job applications.
Compare the CV with the job description and recommend concrete changes.

CV:
---
{_cv_digest(cv)}
---

JOB DESCRIPTION:
---
{job_description}
---

Respond with ONLY valid JSON in this structure:
{{
  "match_score": <integer 0-100>,
  "summary_revision": "<suggested new summary>",
  "skills_to_highlight": [<skills>],
  "skills_to_add": [<skills>],
  "experience_enhancements": [{{"position": "<job title>", "suggestions": [<suggestions>]}}],
  "keywords_to_add": [<keywords>],
  "overall_feedback": "<brief assessment>"
}}"""


def build_keywords_prompt(job_description: str) -> str:
    return f"""You are an expert at analyzing job descriptions and extracting ATS-relevant keywords.

JOB DESCRIPTION:
---
{job_description}
---

Respond with ONLY valid JSON in this structure:
{{
  "technical_skills": [<skills>],
  "soft_skills": [<skills>],
  "tools": [<tools>],
  "certifications": [<certifications>],
  "industry_terms": [<terms>]
}}"""


def build_parse_cv_prompt(cv_text: str) -> str:
    schema = CVDocument().model_dump(exclude={"section_order"})
    schema["experience"] = [{
        "title": "", "company": "", "location": "", "start_date": "",
        "end_date": "", "current": False, "description": "", "bullets": [],
    }]
    schema["education"] = [{"degree": "", "field": "", "school": "", "start_date": "", "end_date": ""}]
    return f"""Extract structured information from the following CV text.

CV TEXT:
---
{cv_text}
---

Respond with ONLY valid JSON matching this structure (leave unknown fields empty):
{json.dumps(schema, indent=2)}"""
