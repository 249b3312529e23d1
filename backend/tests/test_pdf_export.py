"""Tests for CV PDF rendering."""

import io

import pdfplumber
import pytest

from models.cv import CVDocument, ExperienceEntry, PersonalInfo
from services.cv_templates import TEMPLATES, get_template
from services.errors import ValidationFailure
from services.pdf_export import build_story, render_cv_pdf


def _pages(pdf_bytes: bytes):
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        return [(float(p.width), float(p.height), p.extract_text() or "") for p in pdf.pages]


def test_renders_pdf(sample_cv):
    content = render_cv_pdf(sample_cv)
    assert content.startswith(b"%PDF")


def test_letter_page_size(sample_cv):
    width, height, _ = _pages(render_cv_pdf(sample_cv, paper="letter"))[0]
    assert (round(width), round(height)) == (612, 792)


def test_a4_page_size(sample_cv):
    width, height, _ = _pages(render_cv_pdf(sample_cv, paper="A4"))[0]
    assert (round(width), round(height)) == (595, 842)


def test_content_in_document(sample_cv):
    text = "\n".join(t for _, _, t in _pages(render_cv_pdf(sample_cv, template_id="professional")))
    assert "Jane Doe" in text
    assert "TechCorp" in text


def test_long_cv_flows_onto_more_pages():
    cv = CVDocument(
        personal_info=PersonalInfo(first_name="Long", last_name="Career"),
        experience=[
            ExperienceEntry(
                title=f"Engineer {i}",
                company=f"Company {i}",
                start_date="2010-01",
                end_date="2011-01",
                bullets=[f"Delivered project {i}.{j} that improved throughput by {j * 5}%" for j in range(8)],
            )
            for i in range(12)
        ],
    )
    assert len(_pages(render_cv_pdf(cv))) > 1


def test_empty_cv_still_renders():
    assert render_cv_pdf(CVDocument()).startswith(b"%PDF")


def test_markup_characters_are_escaped():
    cv = CVDocument(personal_info=PersonalInfo(first_name="R&D", last_name="<Lead>"), summary="Used C++ & <b>Go")
    assert render_cv_pdf(cv).startswith(b"%PDF")


def test_unsupported_paper_size(sample_cv):
    with pytest.raises(ValidationFailure, match="paper size"):
        render_cv_pdf(sample_cv, paper="legal")


@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_every_template_renders(sample_cv, template_id):
    assert render_cv_pdf(sample_cv, template_id=template_id).startswith(b"%PDF")


def test_empty_sections_are_skipped():
    cv = CVDocument(summary="Backend engineer")
    story = build_story(cv, get_template("modern"))
    rendered = " ".join(getattr(f, "text", "") for f in story)
    assert "SUMMARY" in rendered.upper()
    assert "EXPERIENCE" not in rendered.upper()
