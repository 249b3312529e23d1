import io

import pytest
from docx import Document

from services.errors import ValidationFailure
from services.pdf_export import render_cv_pdf
from services.pdf_parser import extract_bullets, extract_document, extract_text_docx, is_bullet_line


def test_extract_bullets():
    text = """John Doe
Software Engineer

Experience:
• Built REST APIs serving 1M requests/day
- Led team of 5 engineers
* Improved test coverage from 40% to 90%
1. Deployed microservices on Kubernetes

Skills:
Python, JavaScript, Docker
"""
    bullets = extract_bullets(text)
    assert len(bullets) == 4
    assert "Built REST APIs serving 1M requests/day" in bullets
    assert "Led team of 5 engineers" in bullets
    assert "Deployed microservices on Kubernetes" in bullets


def test_extract_bullets_empty():
    assert extract_bullets("") == []
    assert extract_bullets("No bullets here\nJust plain text") == []


def test_extract_bullets_unicode_markers():
    text = "◆ Designed CI/CD pipeline\n■ Automated testing process\n→ Reduced deploy time"
    bullets = extract_bullets(text)
    assert len(bullets) == 3
    assert "Designed CI/CD pipeline" in bullets


def test_extract_bullets_two_digit_numbered():
    text = "10. Managed Kubernetes cluster\n12) Wrote integration tests"
    assert extract_bullets(text) == ["Managed Kubernetes cluster", "Wrote integration tests"]


def test_is_bullet_line():
    assert is_bullet_line("  • Shipped")
    assert is_bullet_line("3) Shipped")
    assert not is_bullet_line("2019 - 2021")
    assert not is_bullet_line("   ")


def _docx_bytes() -> bytes:
    doc = Document()
    doc.add_paragraph("Jane Doe")
    doc.add_paragraph("Experience")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "Docker"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def test_extract_text_docx_includes_tables():
    text = extract_text_docx(_docx_bytes())
    assert text.startswith("Jane Doe")
    assert "Python | Docker" in text


def test_extract_document_dispatches_on_extension():
    assert "Jane Doe" in extract_document("CV.DOCX", _docx_bytes())


def test_extract_document_rejects_other_types():
    with pytest.raises(ValidationFailure, match="PDF and DOCX"):
        extract_document("cv.txt", b"plain text")


def test_extract_document_rejects_corrupt_pdf():
    with pytest.raises(ValidationFailure, match="Could not parse PDF"):
        extract_document("cv.pdf", b"not really a pdf")


def test_extract_document_pdf(sample_cv):
    text = extract_document("cv.pdf", render_cv_pdf(sample_cv))
    assert "Jane Doe" in text
