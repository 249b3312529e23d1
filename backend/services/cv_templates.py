"""CV template registry.

Templates carry the presentation settings the PDF exporter needs: accent
colour, fonts and sizes. Unknown ids resolve to the modern template.
"""

from pydantic import BaseModel

from models.cv import DEFAULT_SECTION_ORDER, CVDocument


class CVTemplate(BaseModel):
    id: str
    name: str
    description: str
    ats_score: int
    layout: str = "single-column"
    features: list[str] = []
    accent_color: str = "#333333"
    header_color: str = "#333333"
    text_color: str = "#333333"
    font: str = "Helvetica"
    heading_font: str = "Helvetica-Bold"
    font_size: float = 10
    heading_size: float = 12
    name_size: float = 20
    uppercase_headings: bool = False
    centered_header: bool = False


TEMPLATES: dict[str, CVTemplate] = {t.id: t for t in [
    CVTemplate(
        id="modern",
        name="Modern",
        description="Clean, contemporary design with subtle accents",
        ats_score=95,
        features=["Clean layout", "ATS-friendly", "Professional fonts", "Subtle color accents"],
        accent_color="#667eea",
        header_color="#764ba2",
    ),
    CVTemplate(
        id="professional",
        name="Professional",
        description="Traditional format perfect for corporate roles",
        ats_score=98,
        features=["Traditional layout", "Maximum ATS compatibility", "Conservative design", "Clear hierarchy"],
        accent_color="#1a1a2e",
        header_color="#1a1a2e",
        font="Times-Roman",
        heading_font="Times-Bold",
        font_size=11,
        uppercase_headings=True,
    ),
    CVTemplate(
        id="creative",
        name="Creative",
        description="Distinctive design for creative industries",
        ats_score=88,
        layout="sidebar",
        features=["Unique layout", "Visual appeal", "Sidebar design", "Color blocks"],
        accent_color="#f59e0b",
        header_color="#f59e0b",
    ),
    CVTemplate(
        id="minimalist",
        name="Minimalist",
        description="Simple, elegant design with focus on content",
        ats_score=97,
        features=["Clean whitespace", "High readability", "Simple typography", "No distractions"],
        accent_color="#6b7280",
        header_color="#111827",
        heading_size=11,
        uppercase_headings=True,
    ),
    CVTemplate(
        id="executive",
        name="Executive",
        description="Sophisticated design for senior positions",
        ats_score=94,
        features=["Premium look", "Authority presence", "Elegant typography", "Refined details"],
        accent_color="#0f172a",
        header_color="#0f172a",
        font="Times-Roman",
        heading_font="Times-Bold",
        font_size=11,
        name_size=22,
        centered_header=True,
    ),
    CVTemplate(
        id="tech",
        name="Tech",
        description="Modern design optimized for tech roles",
        ats_score=93,
        features=["Code-inspired", "Skills showcase", "Modern aesthetics", "Tech-friendly"],
        accent_color="#65a30d",
        header_color="#18181b",
        heading_font="Courier-Bold",
    ),
    CVTemplate(
        id="awesome",
        name="Awesome CV",
        description="LaTeX-inspired professional design",
        ats_score=96,
        features=["LaTeX-style", "Clean typography", "Professional", "Tabular skills"],
        accent_color="#0395DE",
        header_color="#333333",
        name_size=24,
        centered_header=True,
        uppercase_headings=True,
    ),
    CVTemplate(
        id="onyx",
        name="Onyx",
        description="Professional indigo-themed layout",
        ats_score=95,
        features=["Professional", "Indigo accents", "Clean sections", "Profile links"],
        accent_color="#6366f1",
        header_color="#111827",
        text_color="#1f2937",
        uppercase_headings=True,
    ),
]}

DEFAULT_TEMPLATE_ID = "modern"


def get_template(template_id: str | None) -> CVTemplate:
    return TEMPLATES.get((template_id or "").strip().lower(), TEMPLATES[DEFAULT_TEMPLATE_ID])


def list_templates() -> list[CVTemplate]:
    return list(TEMPLATES.values())


def resolve_section_order(cv: CVDocument) -> list[str]:
    """The document's order with unknown ids and duplicates dropped, then any missing default sections."""
    order = []
    for section in cv.section_order:
        key = section.strip().lower()
        if key in DEFAULT_SECTION_ORDER and key not in order:
            order.append(key)
    order.extend(s for s in DEFAULT_SECTION_ORDER if s not in order)
    return order
