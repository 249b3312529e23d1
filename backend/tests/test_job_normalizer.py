"""Tests for job posting normalization."""

import pytest

from services.jobs.normalizer import (
    detect_language,
    detect_location_type,
    experience_from_title,
    format_salary,
    normalize_experience_level,
    normalize_job,
    normalize_job_type,
    normalize_morocco,
    normalize_morocco_location,
    normalize_remoteok,
    parse_posted_date,
    skills_from_description,
    stable_hash,
)


class TestFormatSalary:
    def test_range_in_thousands(self):
        assert format_salary(50000, 80000, "USD") == "$50k - $80k"

    def test_lower_bound_only(self):
        assert format_salary(40000, None, "EUR") == "From €40k"

    def test_upper_bound_only(self):
        assert format_salary(None, 90000, "GBP") == "Up to £90k"

    def test_unknown_currency_is_suffixed(self):
        assert format_salary(12000, 15000, "MAD") == "12k - 15k MAD"

    def test_no_bounds(self):
        assert format_salary(None, None) is None

    def test_millions(self):
        assert format_salary(1_500_000, None, "USD") == "From $1.5M"


class TestPostedDate:
    def test_epoch_seconds(self):
        assert parse_posted_date(0) == "1970-01-01T00:00:00+00:00"

    def test_epoch_string(self):
        assert parse_posted_date("86400") == "1970-01-02T00:00:00+00:00"

    def test_iso_with_z(self):
        assert parse_posted_date("2024-03-01T10:00:00Z") == "2024-03-01T10:00:00+00:00"

    def test_naive_iso_treated_as_utc(self):
        assert parse_posted_date("2024-03-01T10:00:00") == "2024-03-01T10:00:00+00:00"

    def test_offset_converted_to_utc(self):
        assert parse_posted_date("2024-03-01T12:00:00+02:00") == "2024-03-01T10:00:00+00:00"

    @pytest.mark.parametrize("value", [None, "", "last tuesday"])
    def test_unreadable(self, value):
        assert parse_posted_date(value) is None


@pytest.mark.parametrize("raw,expected", [
    ("FULL_TIME", "full-time"),
    ("Part-time", "part-time"),
    ("Freelance", "contract"),
    ("Internship", "internship"),
    ("Temporary", "temporary"),
    (None, "full-time"),
])
def test_normalize_job_type(raw, expected):
    assert normalize_job_type(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("Entry Level", "entry"),
    ("Senior Level", "senior"),
    ("Director", "executive"),
    ("Internship", "intern"),
    ("", "mid"),
])
def test_normalize_experience_level(raw, expected):
    assert normalize_experience_level(raw) == expected


@pytest.mark.parametrize("title,expected", [
    ("Senior Backend Engineer", "senior"),
    ("Junior Developer", "entry"),
    ("Software Engineering Intern", "intern"),
    ("Head of Data", "executive"),
    ("Backend Engineer", "mid"),
])
def test_experience_from_title(title, expected):
    assert experience_from_title(title) == expected


@pytest.mark.parametrize("location,expected", [
    ("Remote - Europe", "remote"),
    ("Anywhere", "remote"),
    ("Berlin (Hybrid)", "hybrid"),
    ("Berlin, Germany", "onsite"),
    (None, "onsite"),
])
def test_detect_location_type(location, expected):
    assert detect_location_type(location) == expected


def test_normalize_remoteok():
    job = normalize_remoteok({
        "id": "123",
        "position": "Senior Python Developer",
        "company": "Acme",
        "location": "Worldwide",
        "tags": ["python", "django"],
        "salary_min": 120000,
        "salary_max": 160000,
        "epoch": 0,
        "url": "https://remoteok.com/remote-jobs/123",
    })
    assert job.id == "remoteok_123"
    assert job.location_type == "remote"
    assert job.experience_level == "senior"
    assert job.salary == "$120k - $160k"
    assert job.skills == ["python", "django"]
    assert "Remote" in job.tags
    assert "$100k+" in job.tags
    assert job.posted_at == "1970-01-01T00:00:00+00:00"


def test_normalize_remoteok_defaults():
    job = normalize_remoteok({"id": 7})
    assert job.title == "Unknown Position"
    assert job.company == "Unknown Company"
    assert job.apply_url == "https://remoteok.com/remote-jobs/7"


def test_normalize_remoteok_epoch_zero_is_a_date():
    assert normalize_remoteok({"id": 1, "epoch": 0, "date": "2024-05-01"}).posted_at == "1970-01-01T00:00:00+00:00"
    assert normalize_remoteok({"id": 1, "date": "2024-05-01T00:00:00Z"}).posted_at == "2024-05-01T00:00:00+00:00"


def test_description_skills_match_whole_words():
    text = "Maintain good email hygiene and support our Googlers with JavaScript tooling."
    assert skills_from_description(text) == ["JavaScript"]


def test_description_skills_keep_symbol_names():
    skills = skills_from_description("We use C++, C# and Go, plus some AI work on Node.js.")
    assert skills == ["C++", "C#", "Go", "Node.js", "AI"]


def test_normalize_job_unknown_source_uses_base_fields():
    job = normalize_job({"id": "x1", "title": "Engineer", "company": "Acme"}, "somewhere")
    assert job.source == "somewhere"
    assert job.title == "Engineer"


class TestMorocco:
    def test_stable_hash_is_deterministic(self):
        assert stable_hash("https://rekrute.com/offre/1") == stable_hash("https://rekrute.com/offre/1")
        assert stable_hash("a") != stable_hash("b")
        assert stable_hash("") == "0"

    def test_location_gets_country_suffix(self):
        assert normalize_morocco_location("Casablanca") == "Casablanca, Maroc"
        assert normalize_morocco_location("Rabat, Maroc") == "Rabat, Maroc"
        assert normalize_morocco_location(None) == "Maroc"

    def test_language_detection(self):
        assert detect_language("Nous recherchons un développeur pour notre équipe") == "fr"
        assert detect_language("We are hiring a developer for our team") == "en"
        assert detect_language("مطلوب مهندس") == "ar"
        assert detect_language("Développeur Java") == "fr"

    def test_normalize_posting(self):
        url = "https://www.rekrute.com/offre-emploi-dev-123.html"
        job = normalize_morocco(
            {"title": "Développeur Java", "company": "OCP", "location": "Casablanca", "url": url},
            board="rekrute",
            board_name="ReKrute",
        )
        assert job.id == f"morocco_rekrute_{stable_hash(url)}"
        assert job.source == "morocco_rekrute"
        assert job.country == "MA"
        assert job.salary_currency == "MAD"
        assert job.location == "Casablanca, Maroc"
        assert job.language == "fr"
        assert job.apply_url == url
        assert "Java" in job.skills

    def test_numeric_salary_formatted_in_dirhams(self):
        job = normalize_morocco({"title": "Comptable", "salary": 8000}, board="emploi")
        assert job.salary == "8,000 MAD"
        assert job.company == "Entreprise Marocaine"
