from datetime import datetime

import pytest

from services.section_parser import (
    DATE_RANGE_RE,
    extract_contact_info,
    extract_required_years,
    parse_date,
    parse_sections,
)


SAMPLE_CV_TEXT = """John Doe
john.doe@email.com | (555) 123-4567
linkedin.com/in/johndoe | github.com/johndoe

Summary
Experienced software engineer with 5+ years building web applications.

Experience
Senior Software Engineer | TechCorp | 2021 - Present
• Built REST APIs serving 1M requests/day
• Led team of 5 engineers

Software Engineer | StartupXYZ | 2019 - 2021
• Developed React frontend components
• Implemented CI/CD pipelines

Education
B.S. Computer Science | State University | 2019

Skills
Python, JavaScript, React, Docker, AWS, PostgreSQL, Git

Languages
English, German
"""


def test_parse_sections_detects_all():
    sections = parse_sections(SAMPLE_CV_TEXT)
    assert set(sections) == {"header", "summary", "experience", "education", "skills", "languages"}


def test_parse_sections_content():
    sections = parse_sections(SAMPLE_CV_TEXT)
    assert "REST APIs" in sections["experience"]
    assert "Computer Science" in sections["education"]
    assert "Python" in sections["skills"]
    assert sections["header"].startswith("John Doe")


def test_parse_sections_header_variants():
    text = "Jane\nPROFESSIONAL EXPERIENCE:\nDev at Acme\nTechnical Skills\nGo\nLicenses & Certifications\nCKA"
    sections = parse_sections(text)
    assert sections["experience"] == "Dev at Acme"
    assert sections["skills"] == "Go"
    assert sections["certifications"] == "CKA"


def test_parse_sections_empty():
    sections = parse_sections("")
    assert len(sections) <= 1  # At most 'header' with empty content


def test_extract_contact_info():
    contact = extract_contact_info(SAMPLE_CV_TEXT)
    assert contact["email"] == "john.doe@email.com"
    assert contact["linkedin"] == "linkedin.com/in/johndoe"
    assert contact["website"] == "github.com/johndoe"
    assert "123-4567" in contact["phone"]


def test_extract_contact_info_missing():
    assert extract_contact_info("No contact details here") == {
        "email": None, "phone": None, "linkedin": None, "website": None,
    }


@pytest.mark.parametrize("line,start,end", [
    ("Engineer | Acme | Jan 2019 - Present", "Jan 2019", "Present"),
    ("March 2018 – Nov 2022", "March 2018", "Nov 2022"),
    ("2015 to 2017", "2015", "2017"),
    ("01/2020 - 06/2021", "01/2020", "06/2021"),
])
def test_date_range_pattern(line, start, end):
    match = DATE_RANGE_RE.search(line)
    assert match.group(1) == start
    assert match.group(2) == end


@pytest.mark.parametrize("value,expected", [
    ("Jan 2020", (2020, 1)),
    ("September 2018", (2018, 9)),
    ("2020-03", (2020, 3)),
    ("07/2019", (2019, 7)),
    ("2017", (2017, 1)),
    ("", (0, 0)),
    ("someday", (0, 0)),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_parse_date_present():
    now = datetime.now()
    assert parse_date("Present") == (now.year, now.month)


def test_extract_required_years():
    assert extract_required_years("5+ years of experience with Python") == 5
    assert extract_required_years("3 years experience in Python; 7+ yrs of professional experience") == 7


def test_extract_required_years_none():
    assert extract_required_years("We value curiosity.") == 0
