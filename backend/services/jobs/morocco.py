"""Moroccan job boards: board registry and listing-page parsing.

None of these boards publish an API. Listing pages are read for schema.org
JobPosting JSON-LD first; pages without it fall back to common card markup.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MOROCCO_CITIES = [
    "Casablanca", "Rabat", "Marrakech", "Fès", "Tanger", "Agadir",
    "Meknès", "Oujda", "Kenitra", "Tétouan", "Safi", "El Jadida",
    "Nador", "Beni Mellal", "Khouribga", "Taza", "Mohammedia",
    "Essaouira", "Settat", "Ksar El Kebir", "Larache", "Salé",
    "Temara", "Errachidia", "Ouarzazate", "Berkane",
]

MOROCCO_SECTORS = [
    {"id": "informatique", "name": "Informatique / IT", "name_en": "IT / Technology"},
    {"id": "commercial", "name": "Commercial / Vente", "name_en": "Sales / Business"},
    {"id": "marketing", "name": "Marketing / Communication", "name_en": "Marketing / Communication"},
    {"id": "finance", "name": "Finance / Comptabilité", "name_en": "Finance / Accounting"},
    {"id": "rh", "name": "Ressources Humaines", "name_en": "Human Resources"},
    {"id": "ingenierie", "name": "Ingénierie / Technique", "name_en": "Engineering / Technical"},
    {"id": "sante", "name": "Santé / Médical", "name_en": "Healthcare / Medical"},
    {"id": "education", "name": "Éducation / Formation", "name_en": "Education / Training"},
    {"id": "hotellerie", "name": "Hôtellerie / Tourisme", "name_en": "Hospitality / Tourism"},
    {"id": "logistique", "name": "Logistique / Transport", "name_en": "Logistics / Transport"},
    {"id": "industrie", "name": "Industrie / Production", "name_en": "Industry / Manufacturing"},
    {"id": "btp", "name": "BTP / Construction", "name_en": "Construction"},
    {"id": "banque", "name": "Banque / Assurance", "name_en": "Banking / Insurance"},
    {"id": "juridique", "name": "Juridique / Droit", "name_en": "Legal"},
    {"id": "agriculture", "name": "Agriculture / Agroalimentaire", "name_en": "Agriculture / Food"},
]

# Board contract vocabulary, keyed by our normalized job type
CONTRACT_TERMS = {
    "full-time": "CDI",
    "part-time": "CDD",
    "contract": "CDD",
    "internship": "Stage",
    "freelance": "Freelance",
    "temporary": "Intérim",
}


@dataclass(frozen=True)
class MoroccoBoard:
    """One job board and the names of its search query parameters."""

    id: str
    name: str
    base_url: str
    search_path: str
    priority: int
    query_param: str | None = "q"
    city_param: str | None = None
    sector_param: str | None = None
    contract_param: str | None = None
    page_param: str = "page"
    extra_params: dict = field(default_factory=dict)

    def search_url(self) -> str:
        return urljoin(self.base_url, self.search_path)

    def build_params(self, query: str = "", city: str = "", sector: str = "", job_type: str = "", page: int = 1) -> dict:
        params = dict(self.extra_params)
        if query and self.query_param:
            params[self.query_param] = query
        if city and self.city_param:
            params[self.city_param] = city
        if sector and self.sector_param:
            params[self.sector_param] = sector
        if job_type and self.contract_param:
            params[self.contract_param] = CONTRACT_TERMS.get(job_type, job_type)
        params[self.page_param] = page
        return params


MOROCCO_BOARDS = [
    MoroccoBoard(
        "emploi", "Emploi.ma", "https://www.emploi.ma", "/recherche-jobs-maroc", 1,
        city_param="lieu", sector_param="secteur", contract_param="contrat",
    ),
    MoroccoBoard(
        "dreamjob", "Dreamjob.ma", "https://www.dreamjob.ma", "/offres-emploi", 2,
        query_param="keywords", city_param="location", sector_param="category", contract_param="type",
    ),
    MoroccoBoard(
        "rekrute", "Rekrute.com", "https://www.rekrute.com", "/offres.html", 3,
        query_param="s", city_param="city", sector_param="sector", contract_param="contract", page_param="p",
    ),
    MoroccoBoard(
        "marocannonces", "MarocAnnonces", "https://www.marocannonces.com", "/maroc/offres-emploi", 4,
        query_param="texte", city_param="ville",
    ),
    MoroccoBoard(
        "alwadifa", "Alwadifa-Maroc", "https://alwadifa-maroc.com", "/", 5,
        query_param="s", page_param="paged",
    ),
    MoroccoBoard(
        "emploipublic", "Emploi-Public.ma", "https://www.emploi-public.ma", "/concours", 6,
        city_param="ville", sector_param="ministere",
    ),
    MoroccoBoard(
        "stagiaires", "Stagiaires.ma", "https://www.stagiaires.ma", "/recherche", 7,
        city_param="ville", sector_param="secteur",
    ),
]

BOARDS_BY_ID = {board.id: board for board in MOROCCO_BOARDS}

DEFAULT_COMPANY = "Entreprise Marocaine"
DEFAULT_LOCATION = "Maroc"

_CARD_CLASS = {
    "article": re.compile(r"job"),
    "li": re.compile(r"offre"),
    "div": re.compile(r"job-listing"),
}
_DAYS_AGO_RE = re.compile(r"(\d+)\s*(?:jours?|days?)")


def parse_relative_date(text: str, now: datetime | None = None) -> str | None:
    """French/English listing dates ("aujourd'hui", "hier", "il y a 3 jours") to ISO 8601."""
    now = now or datetime.now(timezone.utc)
    cleaned = " ".join(text.lower().split())
    if "aujourd'hui" in cleaned or "aujourd’hui" in cleaned or "today" in cleaned:
        return now.isoformat()
    if "hier" in cleaned or "yesterday" in cleaned:
        return (now - timedelta(days=1)).isoformat()
    match = _DAYS_AGO_RE.search(cleaned)
    if match:
        return (now - timedelta(days=int(match.group(1)))).isoformat()
    for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%d.%m.%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(cleaned, fmt).replace(tzinfo=timezone.utc).isoformat()
        except ValueError:
            continue
    return None


def _text(html_fragment: str | None) -> str:
    if not html_fragment:
        return ""
    return BeautifulSoup(html_fragment, "html.parser").get_text(" ", strip=True)


def _from_json_ld(item: dict, base_url: str) -> dict:
    organization = item.get("hiringOrganization") or {}
    locations = item.get("jobLocation") or {}
    if isinstance(locations, list):
        locations = locations[0] if locations else {}
    address = locations.get("address") or {} if isinstance(locations, dict) else {}
    salary = item.get("baseSalary") or {}
    salary_value = salary.get("value") if isinstance(salary, dict) else None
    if isinstance(salary_value, dict):
        salary_value = salary_value.get("value") or salary_value.get("minValue")
    employment = item.get("employmentType")
    if isinstance(employment, list):
        employment = employment[0] if employment else None
    url = item.get("url") or item.get("@id")
    return {
        "title": _text(item.get("title")),
        "company": (organization.get("name") if isinstance(organization, dict) else organization) or DEFAULT_COMPANY,
        "location": (address.get("addressLocality") if isinstance(address, dict) else None) or DEFAULT_LOCATION,
        "description": _text(item.get("description")),
        "url": urljoin(base_url, url) if url else None,
        "posted_at": item.get("datePosted"),
        "expires_at": item.get("validThrough"),
        "salary": salary_value,
        "job_type": employment,
    }


def _json_ld_postings(soup: BeautifulSoup, base_url: str) -> list[dict]:
    jobs = []
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            continue
        candidates = data if isinstance(data, list) else [data]
        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            items = candidate.get("@graph") if isinstance(candidate.get("@graph"), list) else [candidate]
            for item in items:
                if isinstance(item, dict) and item.get("@type") == "JobPosting":
                    job = _from_json_ld(item, base_url)
                    if job["title"]:
                        jobs.append(job)
    return jobs


def _card_postings(soup: BeautifulSoup, base_url: str) -> list[dict]:
    jobs = []
    for tag, pattern in _CARD_CLASS.items():
        for card in soup.find_all(tag, class_=pattern):
            title_el = None
            heading = card.find(["h1", "h2", "h3"])
            if heading is not None:
                title_el = heading.find("a") or heading
            if title_el is None:
                title_el = card.find("a", class_=re.compile(r"title"))
            if title_el is None:
                continue
            title = title_el.get_text(" ", strip=True)
            if not title:
                continue
            company_el = card.find(class_=re.compile(r"company|entreprise"))
            location_el = card.find(class_=re.compile(r"location|ville"))
            date_el = card.find(class_=re.compile(r"date"))
            link = title_el if title_el.name == "a" and title_el.get("href") else card.find("a", href=True)
            jobs.append({
                "title": title,
                "company": company_el.get_text(" ", strip=True) if company_el else DEFAULT_COMPANY,
                "location": location_el.get_text(" ", strip=True) if location_el else DEFAULT_LOCATION,
                "url": urljoin(base_url, link["href"]) if link else None,
                "posted_at": parse_relative_date(date_el.get_text(" ", strip=True)) if date_el else None,
            })
    return jobs


def parse_listing(html: str, base_url: str) -> list[dict]:
    """Raw postings from a board listing page; JSON-LD wins over card markup."""
    soup = BeautifulSoup(html, "html.parser")
    jobs = _json_ld_postings(soup, base_url)
    if jobs:
        return jobs
    jobs = _card_postings(soup, base_url)
    if not jobs:
        logger.debug("No postings found on %s listing page", base_url)
    return jobs
