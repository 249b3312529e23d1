"""Render a CVDocument to PDF with reportlab.

Content is laid out as a flowable story so long CVs continue onto further
pages. Paper is US letter or A4.
"""

import html
import logging
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from models.cv import CVDocument
from services.cv_templates import CVTemplate, get_template, resolve_section_order
from services.errors import ValidationFailure

logger = logging.getLogger(__name__)

PAPER_SIZES = {"letter": letter, "a4": A4}

SECTION_TITLES = {
    "summary": "Professional Summary",
    "experience": "Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}


def _esc(text: str) -> str:
    return html.escape(text.strip(), quote=False)


def _styles(template: CVTemplate) -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    accent = colors.HexColor(template.accent_color)
    text = colors.HexColor(template.text_color)
    align = TA_CENTER if template.centered_header else TA_LEFT
    return {
        "name": ParagraphStyle(
            "CVName", parent=base["Title"], fontName=template.heading_font,
            fontSize=template.name_size, leading=template.name_size * 1.2,
            textColor=colors.HexColor(template.header_color), alignment=align, spaceAfter=2,
        ),
        "headline": ParagraphStyle(
            "CVHeadline", parent=base["Normal"], fontName=template.font,
            fontSize=template.font_size + 2, leading=(template.font_size + 2) * 1.3,
            textColor=accent, alignment=align,
        ),
        "contact": ParagraphStyle(
            "CVContact", parent=base["Normal"], fontName=template.font,
            fontSize=template.font_size - 1, leading=template.font_size * 1.3,
            textColor=text, alignment=align, spaceAfter=6,
        ),
        "heading": ParagraphStyle(
            "CVHeading", parent=base["Heading2"], fontName=template.heading_font,
            fontSize=template.heading_size, leading=template.heading_size * 1.25,
            textColor=accent, spaceBefore=10, spaceAfter=2,
        ),
        "entry": ParagraphStyle(
            "CVEntry", parent=base["Normal"], fontName=template.heading_font,
            fontSize=template.font_size + 0.5, leading=template.font_size * 1.4, textColor=text,
        ),
        "meta": ParagraphStyle(
            "CVMeta", parent=base["Normal"], fontName=template.font,
            fontSize=template.font_size - 1, leading=template.font_size * 1.3,
            textColor=colors.HexColor("#6b7280"),
        ),
        "body": ParagraphStyle(
            "CVBody", parent=base["Normal"], fontName=template.font,
            fontSize=template.font_size, leading=template.font_size * 1.4,
            textColor=text, spaceAfter=4,
        ),
    }


def _heading(title: str, template: CVTemplate, styles) -> list:
    label = title.upper() if template.uppercase_headings else title
    return [
        Paragraph(_esc(label), styles["heading"]),
        HRFlowable(width="100%", thickness=1, color=colors.HexColor(template.accent_color), spaceAfter=4),
    ]


def _bullets(items: list[str], styles) -> list:
    cleaned = [b for b in items if b.strip()]
    if not cleaned:
        return []
    return [ListFlowable(
        [ListItem(Paragraph(_esc(b), styles["body"]), leftIndent=12) for b in cleaned],
        bulletType="bullet", start="•", leftIndent=10,
    )]


def _date_range(start: str, end: str, current: bool = False) -> str:
    end = "Present" if current else end
    return " - ".join(p for p in (start.strip(), end.strip()) if p)


def _header(cv: CVDocument, styles) -> list:
    info = cv.personal_info
    story = [Paragraph(_esc(info.full_name or "Curriculum Vitae"), styles["name"])]
    if info.title.strip():
        story.append(Paragraph(_esc(info.title), styles["headline"]))
    contact = [v for v in (info.email, info.phone, info.location, info.linkedin, info.website) if v.strip()]
    if contact:
        story.append(Paragraph(" | ".join(_esc(v) for v in contact), styles["contact"]))
    return story


def _summary(cv: CVDocument, styles) -> list:
    if not cv.summary.strip():
        return []
    return [Paragraph(_esc(cv.summary), styles["body"])]


def _experience(cv: CVDocument, styles) -> list:
    story = []
    for entry in cv.experience:
        heading = " at ".join(_esc(v) for v in (entry.title, entry.company) if v.strip())
        if heading:
            story.append(Paragraph(heading, styles["entry"]))
        meta = " | ".join(v for v in (_date_range(entry.start_date, entry.end_date, entry.current), entry.location.strip()) if v)
        if meta:
            story.append(Paragraph(_esc(meta), styles["meta"]))
        if entry.description.strip():
            story.append(Paragraph(_esc(entry.description), styles["body"]))
        story.extend(_bullets(entry.bullets, styles))
        story.append(Spacer(1, 6))
    return story


def _education(cv: CVDocument, styles) -> list:
    story = []
    for entry in cv.education:
        degree = " in ".join(v.strip() for v in (entry.degree, entry.field) if v.strip())
        heading = ", ".join(_esc(v) for v in (degree, entry.school) if v.strip())
        if heading:
            story.append(Paragraph(heading, styles["entry"]))
        extras = [_date_range(entry.start_date, entry.end_date), entry.location.strip()]
        if entry.gpa.strip():
            extras.append(f"GPA {entry.gpa.strip()}")
        if entry.honors.strip():
            extras.append(entry.honors.strip())
        meta = " | ".join(v for v in extras if v)
        if meta:
            story.append(Paragraph(_esc(meta), styles["meta"]))
        story.append(Spacer(1, 6))
    return story


def _skills(cv: CVDocument, styles) -> list:
    groups = [
        ("Technical", cv.skills.technical),
        ("Soft skills", cv.skills.soft),
        ("Languages", cv.skills.languages),
        ("Certifications", cv.skills.certifications),
    ]
    return [
        Paragraph(f"<b>{label}:</b> {_esc(', '.join(values))}", styles["body"])
        for label, values in groups if values
    ]


def _projects(cv: CVDocument, styles) -> list:
    story = []
    for project in cv.projects:
        if project.name.strip():
            story.append(Paragraph(_esc(project.name), styles["entry"]))
        meta = " | ".join(v for v in (", ".join(project.technologies), project.url.strip()) if v)
        if meta:
            story.append(Paragraph(_esc(meta), styles["meta"]))
        if project.description.strip():
            story.append(Paragraph(_esc(project.description), styles["body"]))
        story.append(Spacer(1, 4))
    return story


def _certifications(cv: CVDocument, styles) -> list:
    story = []
    for cert in cv.certifications:
        line = " - ".join(_esc(v) for v in (cert.name, cert.issuer, cert.date) if v.strip())
        if line:
            story.append(Paragraph(line, styles["body"]))
    return story


_SECTION_RENDERERS = {
    "summary": _summary,
    "experience": _experience,
    "education": _education,
    "skills": _skills,
    "projects": _projects,
    "certifications": _certifications,
}


def build_story(cv: CVDocument, template: CVTemplate) -> list:
    styles = _styles(template)
    story = _header(cv, styles)
    for section in resolve_section_order(cv):
        body = _SECTION_RENDERERS[section](cv, styles)
        if body:
            story.extend(_heading(SECTION_TITLES[section], template, styles))
            story.extend(body)
    return story


def render_cv_pdf(cv: CVDocument, template_id: str = "modern", paper: str = "letter") -> bytes:
    pagesize = PAPER_SIZES.get(paper.strip().lower())
    if pagesize is None:
        raise ValidationFailure(f"Unsupported paper size '{paper}', expected letter or a4")
    template = get_template(template_id)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        leftMargin=0.7 * inch,
        rightMargin=0.7 * inch,
        title=cv.personal_info.full_name or "CV",
        author=cv.personal_info.full_name,
    )
    doc.build(build_story(cv, template))
    logger.info("Rendered CV PDF with template=%s paper=%s (%d pages)", template.id, paper, doc.page)
    return buffer.getvalue()
