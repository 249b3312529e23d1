"""Tests for German apprenticeship query building and detail extraction."""

import pytest

from models.jobs import JobPosting
from services.jobs import ausbildung


def make_job(description: str, title: str = "Ausbildung Fachinformatiker", salary_min=None) -> JobPosting:
    return JobPosting(
        id="ausbildung_1", external_id="1", source="ausbildung",
        title=title, description=description, salary_min=salary_min,
    )


@pytest.mark.parametrize("query,field,year,expected", [
    ("developer", "", "", "ausbildung developer"),
    ("Azubi Koch", "", "", "Azubi Koch"),
    ("", "it", "2025", "ausbildung IT & Informatik 2025"),
    ("Mechatroniker", "unknown", "", "ausbildung Mechatroniker"),
])
def test_build_query(query, field, year, expected):
    assert ausbildung.build_query(query, field, year) == expected


def test_extract_details_from_full_posting():
    job = make_job(
        "Ausbildungsdauer: 3 Jahre. Beginn: ab August 2025. Voraussetzung: Mittlere Reife. "
        "1. Jahr: 1.000 € 2. Jahr: 1.100 € 3. Jahr: 1.200 € "
        "Berufsschule im Blockunterricht. Übernahmegarantie und Fahrtkosten. "
        "Abschluss vor der IHK. Deutschkenntnisse mindestens B2. Englisch von Vorteil."
    )
    details = ausbildung.extract_details(job)
    assert details.duration == "3 Jahre"
    assert details.start_date == "August 2025"
    assert details.education_required == "Mittlere Reife"
    assert details.training_salary == {"year1": "€1.000", "year2": "€1.100", "year3": "€1.200"}
    assert details.vocational_school == "Blockunterricht"
    assert "Übernahmegarantie" in details.benefits
    assert "Fahrtkostenzuschuss" in details.benefits
    assert details.chamber == "IHK"
    assert details.german_level == "B2"
    assert details.german_level_note is None
    assert details.other_languages == ["English"]
    assert not details.is_dual_study


def test_defaults_for_empty_posting():
    details = ausbildung.extract_details(make_job(""))
    assert details.duration == ausbildung.DEFAULT_DURATION
    assert details.german_level == "B1"
    assert details.german_level_note == ausbildung.DEFAULT_GERMAN_NOTE
    assert details.education_required == "Schulabschluss erforderlich"
    assert details.training_salary is None
    assert details.chamber is None


def test_monthly_salary_from_annual_minimum():
    details = ausbildung.extract_details(make_job("Wir bieten eine tolle Ausbildung.", salary_min=12000))
    assert details.training_salary == {"monthly": "€1000/Monat"}


def test_dual_study_and_year_in_title():
    details = ausbildung.extract_details(make_job("Duales Studium Informatik", title="Duales Studium 2026"))
    assert details.is_dual_study
    assert details.start_date == "Ab 2026"


@pytest.mark.parametrize("text,level", [
    ("Deutsch als Muttersprache", "C2"),
    ("Verhandlungssicheres Deutsch", "C1"),
    ("Sehr gute Deutschkenntnisse in Wort und Schrift", "B2"),
    ("Gute Deutschkenntnisse", "B1"),
    ("German: min. A2", "A2"),
])
def test_german_level(text, level):
    assert ausbildung.german_level(text.lower())[0] == level
