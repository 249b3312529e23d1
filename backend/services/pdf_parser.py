import io
import re

import pdfplumber
from docx import Document

from services.ats.text import BULLET_MARKERS, strip_bullet
from services.errors import ValidationFailure

_NUMBERED_RE = re.compile(r"^\d{1,2}[.)]\s")

SUPPORTED_EXTENSIONS = (".pdf", ".docx")


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file, table cells included."""
    doc = Document(io.BytesIO(docx_bytes))
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text.strip() for cell in row.cells if cell.text.strip()))
    return "\n".join(lines).strip()


def extract_document(filename: str, content: bytes) -> str:
    """Text of an uploaded CV, dispatched on the file extension."""
    name = (filename or "").lower()
    if not name.endswith(SUPPORTED_EXTENSIONS):
        raise ValidationFailure("Only PDF and DOCX files are supported")
    try:
        text = extract_text(content) if name.endswith(".pdf") else extract_text_docx(content)
    except Exception as e:
        raise ValidationFailure(f"Could not parse {name.rsplit('.', 1)[-1].upper()} file") from e
    if not text:
        raise ValidationFailure("Could not extract any text from the uploaded file")
    return text


def is_bullet_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and (stripped[0] in BULLET_MARKERS or bool(_NUMBERED_RE.match(stripped)))


def extract_bullets(text: str) -> list[str]:
    """Bullet-point lines from CV text, markers and numbering removed."""
    bullets = []
    for line in text.split("\n"):
        if is_bullet_line(line):
            cleaned = strip_bullet(line)
            if cleaned:
                bullets.append(cleaned)
    return bullets
