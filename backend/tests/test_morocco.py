"""Tests for Moroccan job board listing parsing."""

from datetime import datetime, timezone

from services.jobs.morocco import BOARDS_BY_ID, parse_listing, parse_relative_date

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)

JSON_LD_PAGE = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@graph": [
  {"@type": "WebSite", "name": "Rekrute"},
  {"@type": "JobPosting",
   "title": "Développeur Java",
   "hiringOrganization": {"name": "OCP"},
   "jobLocation": [{"address": {"addressLocality": "Casablanca"}}],
   "description": "<p>Nous recherchons un <b>développeur</b></p>",
   "url": "/offre-emploi-java-123.html",
   "datePosted": "2024-05-01",
   "employmentType": ["CDI"],
   "baseSalary": {"value": {"minValue": 15000}}}
]}
</script>
</head><body>
<article class="job-card"><h2>Card title that should be ignored</h2></article>
</body></html>
"""


def test_json_ld_preferred_over_cards():
    jobs = parse_listing(JSON_LD_PAGE, "https://www.rekrute.com")
    assert len(jobs) == 1
    job = jobs[0]
    assert job["title"] == "Développeur Java"
    assert job["company"] == "OCP"
    assert job["location"] == "Casablanca"
    assert job["description"] == "Nous recherchons un développeur"
    assert job["url"] == "https://www.rekrute.com/offre-emploi-java-123.html"
    assert job["job_type"] == "CDI"
    assert job["salary"] == 15000


def test_invalid_json_ld_falls_back_to_cards():
    page = """
    <script type="application/ld+json">{broken</script>
    <article class="job-card">
      <h3>Chef de projet</h3>
      <a href="/jobs/42">Voir l'offre</a>
      <div class="company-name">Maroc Telecom</div>
    </article>
    """
    jobs = parse_listing(page, "https://www.emploi.ma")
    assert jobs == [{
        "title": "Chef de projet",
        "company": "Maroc Telecom",
        "location": "Maroc",
        "url": "https://www.emploi.ma/jobs/42",
        "posted_at": None,
    }]


def test_card_title_from_link_class():
    page = '<div class="job-listing"><a class="job-title" href="https://x.ma/o/1">Agent commercial</a></div>'
    jobs = parse_listing(page, "https://x.ma")
    assert jobs[0]["title"] == "Agent commercial"
    assert jobs[0]["url"] == "https://x.ma/o/1"


def test_cards_without_title_are_skipped():
    page = '<li class="offre"><span class="date">hier</span></li>'
    assert parse_listing(page, "https://x.ma") == []


def test_empty_page():
    assert parse_listing("<html><body>Aucune offre</body></html>", "https://x.ma") == []


class TestRelativeDates:
    def test_today(self):
        assert parse_relative_date("Aujourd'hui", now=NOW) == NOW.isoformat()

    def test_yesterday(self):
        assert parse_relative_date("Publié hier", now=NOW).startswith("2024-05-09")

    def test_days_ago(self):
        assert parse_relative_date("il y a 3 jours", now=NOW).startswith("2024-05-07")

    def test_absolute_date(self):
        assert parse_relative_date("15/04/2024", now=NOW) == "2024-04-15T00:00:00+00:00"

    def test_unreadable(self):
        assert parse_relative_date("bientôt", now=NOW) is None


def test_board_params_use_board_vocabulary():
    params = BOARDS_BY_ID["dreamjob"].build_params(query="python", city="Rabat", job_type="internship", page=3)
    assert params == {"keywords": "python", "location": "Rabat", "type": "Stage", "page": 3}


def test_board_ignores_unsupported_filters():
    params = BOARDS_BY_ID["alwadifa"].build_params(query="infirmier", city="Fès", sector="sante", page=1)
    assert params == {"s": "infirmier", "paged": 1}
