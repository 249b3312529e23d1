"""German apprenticeship (Ausbildung) vocabulary and posting details extraction."""

import re

from models.jobs import AusbildungDetails, JobPosting

AUSBILDUNG_KEYWORDS = [
    "ausbildung",
    "azubi",
    "auszubildende",
    "berufsausbildung",
    "lehrstelle",
    "lehrling",
    "trainee",
    "dual studium",
    "duales studium",
]

AUSBILDUNG_FIELDS = [
    {"id": "kaufmaennisch", "name": "Kaufmännische Berufe", "name_en": "Commercial/Business"},
    {"id": "it", "name": "IT & Informatik", "name_en": "IT & Computer Science"},
    {"id": "handwerk", "name": "Handwerk & Technik", "name_en": "Crafts & Technical"},
    {"id": "gesundheit", "name": "Gesundheit & Pflege", "name_en": "Healthcare & Nursing"},
    {"id": "gastronomie", "name": "Gastronomie & Hotel", "name_en": "Gastronomy & Hotel"},
    {"id": "einzelhandel", "name": "Einzelhandel & Verkauf", "name_en": "Retail & Sales"},
    {"id": "industrie", "name": "Industrie & Produktion", "name_en": "Industry & Production"},
    {"id": "logistik", "name": "Logistik & Transport", "name_en": "Logistics & Transport"},
    {"id": "elektro", "name": "Elektro & Elektronik", "name_en": "Electrical & Electronics"},
    {"id": "bau", "name": "Bau & Architektur", "name_en": "Construction & Architecture"},
    {"id": "medien", "name": "Medien & Design", "name_en": "Media & Design"},
    {"id": "banken", "name": "Banken & Versicherung", "name_en": "Banking & Insurance"},
]

DEFAULT_DURATION = "2-3.5 Jahre"
DEFAULT_GERMAN_LEVEL = "B1"
DEFAULT_GERMAN_NOTE = "Most Ausbildung positions require at least B1-B2 German for vocational school"

_MONTHS = "januar|februar|märz|april|mai|juni|juli|august|september|oktober|november|dezember"

_DURATION_RANGE_RE = re.compile(r"(\d(?:[,.]\d)?)\s*-\s*(\d(?:[,.]\d)?)\s*(?:jahre?|years?)\b")
_DURATION_RE = re.compile(r"(\d(?:[,.]\d)?)\s*(?:jahre?|years?)\b")
_START_MONTH_RE = re.compile(rf"(?:ab|start:?|beginn:?)\s+({_MONTHS})\s*(\d{{4}})")
_START_DATE_RE = re.compile(r"(?:ausbildungsbeginn|beginn|start):?\s*(\d{1,2}\.\d{1,2}\.\d{4})")
_YEAR_RE = re.compile(r"\b(20[2-3]\d)\b")
_SALARY_BY_YEAR_RE = re.compile(
    r"1\.\s*(?:ausbildungs)?jahr:?\s*(\d[\d.,]*)\s*€?.*?2\.\s*(?:ausbildungs)?jahr:?\s*(\d[\d.,]*)\s*€?"
    r"(?:.*?3\.\s*(?:ausbildungs)?jahr:?\s*(\d[\d.,]*))?",
    re.S,
)
_SALARY_RE = [
    re.compile(r"ausbildungsvergütung:?\s*(\d[\d.,]*)\s*€?"),
    re.compile(r"vergütung:?\s*(\d[\d.,]*)\s*€?"),
    re.compile(r"(\d{3,4})\s*€?\s*(?:pro monat|monatlich|/monat)"),
]

_CEFR = r"(a1|a2|b1|b2|c1|c2)"
_GERMAN_CEFR_RE = [
    re.compile(rf"deutsch(?:kenntnisse)?[:\s]*(?:mind\.?|mindestens|minimum)?\s*{_CEFR}\b"),
    re.compile(rf"german[:\s]*(?:min\.?|minimum)?\s*{_CEFR}\b"),
    re.compile(rf"\b{_CEFR}\s*(?:deutsch|german)"),
    re.compile(rf"sprachniveau[:\s]*{_CEFR}\b"),
]

EDUCATION_LEVELS = [
    (("abitur", "hochschulreife"), "Abitur / Fachabitur"),
    (("mittlere reife", "realschulabschluss"), "Mittlere Reife"),
    (("hauptschulabschluss", "hauptschule"), "Hauptschulabschluss"),
]

BENEFIT_KEYWORDS = {
    "übernahmegarantie": "Übernahmegarantie",
    "übernahme": "Übernahmechance nach Ausbildung",
    "fahrtkosten": "Fahrtkostenzuschuss",
    "essenszuschuss": "Essenszuschuss",
    "kantine": "Betriebskantine",
    "urlaubsgeld": "Urlaubsgeld",
    "weihnachtsgeld": "Weihnachtsgeld",
    "13. gehalt": "13. Gehalt",
    "vermögenswirksame": "Vermögenswirksame Leistungen",
    "azubi-ticket": "Azubi-Ticket",
    "laptop": "Laptop/Arbeitsmittel",
    "betriebliche altersvorsorge": "Betriebliche Altersvorsorge",
    "weiterbildung": "Weiterbildungsmöglichkeiten",
    "auslandseinsatz": "Auslandseinsatz möglich",
}

OTHER_LANGUAGES = {
    "englisch": "English",
    "english": "English",
    "französisch": "French",
    "spanisch": "Spanish",
    "italienisch": "Italian",
    "türkisch": "Turkish",
    "russisch": "Russian",
    "arabisch": "Arabic",
    "polnisch": "Polish",
    "chinesisch": "Chinese",
    "japanisch": "Japanese",
}


def has_ausbildung_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(kw in lowered for kw in AUSBILDUNG_KEYWORDS)


def field_name(field_id: str) -> str | None:
    for field in AUSBILDUNG_FIELDS:
        if field["id"] == field_id:
            return field["name"]
    return None


def build_query(query: str, field: str = "", start_year: str = "") -> str:
    """Search terms for an apprenticeship search; the user's own terms are always kept."""
    terms = query.strip()
    if not has_ausbildung_keyword(terms):
        terms = f"ausbildung {terms}".strip()
    name = field_name(field) if field else None
    if name:
        terms += f" {name}"
    if start_year:
        terms += f" {start_year}"
    return terms


def _duration(text: str) -> str:
    match = _DURATION_RANGE_RE.search(text)
    if match:
        return f"{match.group(1)}-{match.group(2)} Jahre"
    match = _DURATION_RE.search(text)
    if match:
        return f"{match.group(1)} Jahre"
    return DEFAULT_DURATION


def _start_date(text: str, title: str) -> str | None:
    for source in (text, title):
        match = _START_MONTH_RE.search(source)
        if match:
            return f"{match.group(1).capitalize()} {match.group(2)}"
        match = _START_DATE_RE.search(source)
        if match:
            return match.group(1)
    match = _YEAR_RE.search(title) or _YEAR_RE.search(text)
    return f"Ab {match.group(1)}" if match else None


def _education(text: str) -> str:
    found = [label for needles, label in EDUCATION_LEVELS if any(n in text for n in needles)]
    return ", ".join(found) if found else "Schulabschluss erforderlich"


def _training_salary(text: str, salary_min: float | None) -> dict[str, str] | None:
    match = _SALARY_BY_YEAR_RE.search(text)
    if match:
        salary = {"year1": f"€{match.group(1)}", "year2": f"€{match.group(2)}"}
        if match.group(3):
            salary["year3"] = f"€{match.group(3)}"
        return salary
    for pattern in _SALARY_RE:
        match = pattern.search(text)
        if match:
            return {"monthly": f"€{match.group(1)}/Monat"}
    if salary_min:
        return {"monthly": f"€{round(salary_min / 12)}/Monat"}
    return None


def _school_schedule(text: str) -> str:
    if "berufsschule" in text or "berufskolleg" in text:
        return "Blockunterricht" if "blockunterricht" in text else "Teilzeit (1-2 Tage/Woche)"
    return "Dual (Betrieb + Berufsschule)"


def _is_dual_study(title: str, text: str) -> bool:
    return "dual" in title or "duales studium" in text or "dual study" in text


def _benefits(text: str) -> list[str]:
    found = [label for keyword, label in BENEFIT_KEYWORDS.items() if keyword in text]
    return list(dict.fromkeys(found))


def _career_prospects(text: str, dual_study: bool) -> list[str]:
    prospects = []
    if "aufstiegschance" in text or "karrierechance" in text:
        prospects.append("Aufstiegsmöglichkeiten")
    if "weiterbildung" in text or "fortbildung" in text:
        prospects.append("Weiterbildungsmöglichkeiten")
    if "meister" in text or "techniker" in text:
        prospects.append("Meister/Techniker Qualifikation")
    if "studium" in text and not dual_study:
        prospects.append("Studium nach Ausbildung möglich")
    return prospects


def _chamber(text: str) -> str | None:
    if re.search(r"\bihk\b", text):
        return "IHK"
    if re.search(r"\bhwk\b", text):
        return "HWK"
    return None


def german_level(text: str) -> tuple[str, str | None]:
    """CEFR code for the German requirement, and a note when it was only assumed."""
    for pattern in _GERMAN_CEFR_RE:
        match = pattern.search(text)
        if match:
            return match.group(1).upper(), None
    if re.search(r"muttersprache\s+deutsch|deutsch\s+als\s+muttersprache", text):
        return "C2", None
    if "deutsch" in text and re.search(r"verhandlungssicher|flie(?:ß|ss)end|perfekt", text):
        return "C1", None
    if re.search(r"sehr\s+gute?\s+deutsch|deutsch\s+in\s+wort\s+und\s+schrift", text):
        return "B2", None
    if re.search(r"gute?\s+deutsch", text):
        return "B1", None
    if "deutsch" in text and re.search(r"grundkenntnisse|anfänger", text):
        return "A2", None
    return DEFAULT_GERMAN_LEVEL, DEFAULT_GERMAN_NOTE


def _other_languages(text: str) -> list[str]:
    return list(dict.fromkeys(lang for word, lang in OTHER_LANGUAGES.items() if word in text))


def extract_details(job: JobPosting) -> AusbildungDetails:
    text = (job.description or "").lower()
    title = (job.title or "").lower()
    dual = _is_dual_study(title, text)
    level, note = german_level(text)
    return AusbildungDetails(
        duration=_duration(text),
        start_date=_start_date(text, title),
        education_required=_education(text),
        training_salary=_training_salary(text, job.salary_min),
        vocational_school=_school_schedule(text),
        is_dual_study=dual,
        benefits=_benefits(text),
        career_prospects=_career_prospects(text, dual),
        chamber=_chamber(text),
        german_level=level,
        german_level_note=note,
        other_languages=_other_languages(text),
    )
