"""CV section segmentation, contact extraction and date parsing."""

import re
from datetime import datetime

# Section header patterns and their canonical names
SECTION_PATTERNS: dict[str, list[str]] = {
    "experience": [
        r"(?:work|professional|employment)\s*(?:experience|history)",
        r"experience",
        r"career\s*(?:history|path)",
    ],
    "education": [
        r"education(?:al)?\s*(?:background|qualifications|history)?",
        r"academic\s*(?:background|qualifications)",
    ],
    "skills": [
        r"(?:technical|core|key|professional)?\s*skills",
        r"(?:technical|core)?\s*(?:competencies|proficiencies|expertise)",
        r"technologies",
    ],
    "languages": [
        r"languages?",
    ],
    "summary": [
        r"(?:professional|executive|career)?\s*summary",
        r"(?:career|professional)?\s*objective",
        r"profile",
        r"about\s*me",
    ],
    "projects": [
        r"(?:key|notable|selected|personal)?\s*projects",
        r"portfolio",
    ],
    "certifications": [
        r"certific(?:ations?|ates?)",
        r"licen[sc]es?\s*(?:&|and)?\s*certific(?:ations?|ates?)",
    ],
}

# Compile all patterns into a single regex per section
_COMPILED: dict[str, re.Pattern] = {}
for section, patterns in SECTION_PATTERNS.items():
    combined = "|".join(patterns)
    _COMPILED[section] = re.compile(
        rf"^\s*(?:{combined})\s*:?\s*$", re.IGNORECASE | re.MULTILINE
    )

# Contact info patterns
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"\+?\d[\d\s\-().]{6,15}\d")
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[\w-]+/?", re.IGNORECASE)
URL_RE = re.compile(r"(?:https?://)?(?:www\.)?(?:github\.com/[\w-]+|[\w-]+\.(?:dev|io|me))\b", re.IGNORECASE)


def parse_sections(text: str) -> dict[str, str]:
    """Split CV text into named sections.

    Returns a dict mapping section name -> section text content.
    Unmatched text at the top goes into 'header'.
    """
    sections: dict[str, str] = {}
    current_section = "header"
    current_lines: list[str] = []

    for line in text.split("\n"):
        matched_section = None
        stripped = line.strip()

        if stripped:
            for section_name, pattern in _COMPILED.items():
                if pattern.match(stripped):
                    matched_section = section_name
                    break

        if matched_section:
            if current_lines:
                sections[current_section] = "\n".join(current_lines).strip()
            current_section = matched_section
            current_lines = []
        else:
            current_lines.append(line)

    if current_lines:
        sections[current_section] = "\n".join(current_lines).strip()

    return sections


def extract_contact_info(text: str) -> dict[str, str | None]:
    """Extract contact information from CV text."""
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    linkedin_match = LINKEDIN_RE.search(text)
    url_match = URL_RE.search(text)

    return {
        "email": email_match.group() if email_match else None,
        "phone": phone_match.group().strip() if phone_match else None,
        "linkedin": linkedin_match.group() if linkedin_match else None,
        "website": url_match.group() if url_match else None,
    }


# ---------------------------------------------------------------------------
# Experience duration extraction
# ---------------------------------------------------------------------------

# "5+ years of experience" or "3 years experience in Python"
EXP_YEARS_RE = re.compile(
    r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:\w+\s+){0,2}?(?:experience|exp\b)",
    re.IGNORECASE,
)

# Date ranges: "Jan 2019 - Present", "2020 - 2023", "March 2018 – Nov 2022"
_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
DATE_RANGE_RE = re.compile(
    rf"({_MONTHS}\.?\s*\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}})"
    r"\s*(?:[-–—]|to)\s*"
    rf"({_MONTHS}\.?\s*\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}}|[Pp]resent|[Cc]urrent|[Nn]ow)",
    re.IGNORECASE,
)

_MONTH_MAP = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9,
    "september": 9, "oct": 10, "october": 10, "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


def parse_date(date_str: str) -> tuple[int, int]:
    """Parse a date string into (year, month).

    Accepts "Present", "Jan 2020", "01/2020", "2020-01" and bare years.
    Returns (year, 1) if the month is unknown and (0, 0) if unparseable.
    """
    date_str = date_str.strip().rstrip(".")
    if not date_str:
        return 0, 0
    if date_str.lower() in ("present", "current", "now"):
        now = datetime.now()
        return now.year, now.month

    # "2020-01" (HTML month inputs) and "01/2020"
    iso = re.fullmatch(r"(\d{4})-(\d{1,2})(?:-\d{1,2})?", date_str)
    if iso:
        return int(iso.group(1)), int(iso.group(2))
    slash = re.fullmatch(r"(\d{1,2})/(\d{4})", date_str)
    if slash:
        return int(slash.group(2)), int(slash.group(1))

    # "Month Year"
    parts = date_str.split()
    if len(parts) == 2:
        month_str = parts[0].lower().rstrip(".")
        if month_str in _MONTH_MAP and parts[1].isdigit():
            return int(parts[1]), _MONTH_MAP[month_str]

    # Bare year anywhere in the string
    year_match = re.search(r"\b(19[7-9]\d|20\d{2}|2100)\b", date_str)
    if year_match:
        return int(year_match.group(1)), 1

    return 0, 0


def extract_required_years(job_description: str) -> float:
    """Extract required years of experience from a job description."""
    best = 0.0
    for match in EXP_YEARS_RE.finditer(job_description):
        years = float(match.group(1))
        if years > best:
            best = years
    return best
