"""Convert raw provider payloads into JobPosting records.

Every source has its own field names; after normalization all jobs share
the same vocabulary for job type (full-time, part-time, contract,
internship, temporary, freelance), experience level (intern, entry, mid,
senior, executive) and location type (remote, hybrid, onsite).
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from models.jobs import JobPosting

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "INR": "₹", "AUD": "A$", "CAD": "C$"}

SOURCE_NAMES = {
    "remoteok": "RemoteOK",
    "adzuna": "Adzuna",
    "jsearch": "JSearch",
    "themuse": "The Muse",
    "ausbildung": "Ausbildung (Adzuna DE)",
}

DESCRIPTION_SKILLS = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Ruby", "Go", "Rust", "PHP",
    "React", "Vue", "Angular", "Node.js", "Django", "Flask", "Spring", "Rails",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Terraform",
    "SQL", "PostgreSQL", "MySQL", "MongoDB", "Redis", "Elasticsearch",
    "Git", "CI/CD", "Agile", "Scrum",
    "Machine Learning", "AI", "Data Science", "Deep Learning",
]
MAX_DESCRIPTION_SKILLS = 10
_DESCRIPTION_SKILL_RES = [
    (skill, re.compile(rf"(?<![\w+#]){re.escape(skill)}(?![\w+#])", re.IGNORECASE))
    for skill in DESCRIPTION_SKILLS
]

# Morocco boards publish in French first
MOROCCO_JOB_TYPES = {
    "cdi": "full-time",
    "contrat à durée indéterminée": "full-time",
    "temps plein": "full-time",
    "permanent": "full-time",
    "cdd": "contract",
    "contrat à durée déterminée": "contract",
    "interim": "contract",
    "intérim": "contract",
    "temporary": "contract",
    "stage": "internship",
    "internship": "internship",
    "freelance": "freelance",
    "temps partiel": "part-time",
    "part-time": "part-time",
    "full-time": "full-time",
    "contract": "contract",
}

MOROCCO_EXPERIENCE_LEVELS = {
    "débutant": "entry",
    "debutant": "entry",
    "junior": "entry",
    "entry": "entry",
    "entry level": "entry",
    "confirmé": "mid",
    "confirme": "mid",
    "expérimenté": "mid",
    "experimente": "mid",
    "mid": "mid",
    "mid-level": "mid",
    "senior": "senior",
    "expert": "senior",
    "lead": "senior",
}

MOROCCO_CITY_NAMES = [
    "casablanca", "rabat", "marrakech", "fes", "fès", "tanger", "tangier",
    "agadir", "meknes", "meknès", "oujda", "kenitra", "kénitra", "tetouan",
    "tétouan", "safi", "el jadida", "nador", "beni mellal", "mohammedia",
    "essaouira", "settat", "salé", "temara",
]

MOROCCO_TECH_SKILLS = [
    "javascript", "python", "java", "php", "react", "angular", "vue",
    "node.js", "nodejs", "sql", "mongodb", "aws", "azure", "docker",
    "kubernetes", "git", "agile", "scrum", "devops", "ci/cd",
    "machine learning", "data science", "excel", "powerbi", "tableau",
    "sap", "salesforce", "wordpress", "laravel", "django", "spring",
]
MOROCCO_BUSINESS_SKILLS = [
    "gestion de projet", "management", "commercial", "vente",
    "marketing", "communication", "comptabilité", "finance",
    "ressources humaines", "logistique", "supply chain",
    "qualité", "audit", "juridique", "bilingue", "anglais", "français",
]
MAX_MOROCCO_SKILLS = 5

_FRENCH_MARKERS = ["nous", "notre", "vous", "pour", "dans", "avec", "une", "des"]
_ENGLISH_MARKERS = ["the", "and", "for", "with", "our", "your", "we"]
_ARABIC_MARKERS = ["مطلوب", "وظيفة", "عمل"]


# -- shared helpers -----------------------------------------------------------

def normalize_job_type(value: str | None) -> str:
    if not value:
        return "full-time"
    lowered = value.lower()
    if "full" in lowered:
        return "full-time"
    if "part" in lowered:
        return "part-time"
    if "contract" in lowered or "freelance" in lowered:
        return "contract"
    if "intern" in lowered:
        return "internship"
    if "temp" in lowered:
        return "temporary"
    return "full-time"


def normalize_experience_level(value: str | None) -> str:
    if not value:
        return "mid"
    lowered = value.lower()
    if "entry" in lowered or "junior" in lowered or "jr" in lowered:
        return "entry"
    if "senior" in lowered or "sr" in lowered or "lead" in lowered:
        return "senior"
    if "executive" in lowered or "director" in lowered or "vp" in lowered:
        return "executive"
    if "intern" in lowered:
        return "intern"
    return "mid"


def experience_from_title(title: str | None) -> str:
    if not title:
        return "mid"
    lowered = title.lower()
    if any(w in lowered for w in ("senior", "sr.", "lead", "principal")):
        return "senior"
    if any(w in lowered for w in ("junior", "jr.", "entry")):
        return "entry"
    if "intern" in lowered:
        return "intern"
    if any(w in lowered for w in ("director", "vp", "head of")):
        return "executive"
    return "mid"


def detect_location_type(location: str | None) -> str:
    lowered = (location or "").lower()
    if "remote" in lowered or "anywhere" in lowered:
        return "remote"
    if "hybrid" in lowered:
        return "hybrid"
    return "onsite"


def format_number(value: float) -> str:
    """12000 -> '12k', 1500000 -> '1.5M'."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{round(value / 1000)}k"
    return f"{value:g}"


def format_salary(salary_min: float | None, salary_max: float | None, currency: str = "USD") -> str | None:
    symbol = CURRENCY_SYMBOLS.get(currency, "")
    suffix = "" if symbol else f" {currency}"
    if salary_min and salary_max:
        return f"{symbol}{format_number(salary_min)} - {symbol}{format_number(salary_max)}{suffix}"
    if salary_min:
        return f"From {symbol}{format_number(salary_min)}{suffix}"
    if salary_max:
        return f"Up to {symbol}{format_number(salary_max)}{suffix}"
    return None


def country_from_location(location: str | None) -> str:
    if not location:
        return ""
    return location.split(",")[-1].strip()


def skills_from_description(description: str | None) -> list[str]:
    if not description:
        return []
    return [skill for skill, pattern in _DESCRIPTION_SKILL_RES if pattern.search(description)][:MAX_DESCRIPTION_SKILLS]


def salary_tags(salary_min: float | None) -> list[str]:
    tags = []
    if salary_min and salary_min >= 100_000:
        tags.append("$100k+")
    if salary_min and salary_min >= 150_000:
        tags.append("$150k+")
    return tags


def parse_posted_date(value: Any) -> str | None:
    """Epoch seconds or an ISO string to ISO 8601 UTC; None when unreadable."""
    if value in (None, ""):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.isdigit():
        return parse_posted_date(int(text))
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def _dedupe(items) -> list[str]:
    return list(dict.fromkeys(i for i in items if i))


# -- per-source normalizers ----------------------------------------------------

def normalize_base(job: dict, source: str) -> JobPosting:
    raw_id = str(job.get("id") or "")
    salary_min = job.get("salary_min")
    salary_max = job.get("salary_max")
    currency = job.get("salary_currency") or "USD"
    job_type = normalize_job_type(job.get("job_type") or job.get("type"))
    tags = [job_type]
    if job.get("remote") or job.get("is_remote"):
        tags.append("Remote")
    tags.extend(salary_tags(salary_min))
    return JobPosting(
        id=f"{source}_{raw_id}",
        external_id=raw_id,
        source=source,
        source_name=SOURCE_NAMES.get(source, source),
        title=job.get("title") or "Unknown Position",
        company=job.get("company") or job.get("company_name") or "Unknown Company",
        company_logo=job.get("logo") or job.get("company_logo"),
        location=job.get("location") or "Remote",
        location_type=detect_location_type(job.get("location")),
        country=job.get("country") or None,
        city=job.get("city") or None,
        salary=job.get("salary") or format_salary(salary_min, salary_max, currency),
        salary_min=salary_min,
        salary_max=salary_max,
        salary_currency=currency,
        job_type=job_type,
        experience_level=normalize_experience_level(job.get("experience_level") or job.get("experience")),
        description=job.get("description") or "",
        skills=_dedupe([*(job.get("skills") or []), *(job.get("tags") or [])]),
        tags=_dedupe(tags),
        apply_url=job.get("url") or job.get("apply_url") or "",
        posted_at=parse_posted_date(job.get("date") or job.get("posted_at") or job.get("created_at")),
        expires_at=parse_posted_date(job.get("expires_at")),
        featured=bool(job.get("featured")),
    )


def normalize_remoteok(job: dict) -> JobPosting:
    epoch = job.get("epoch")
    title = job.get("position") or job.get("title") or "Unknown Position"
    tags = job.get("tags") or []
    return JobPosting(
        id=f"remoteok_{job.get('id')}",
        external_id=str(job.get("id")),
        source="remoteok",
        source_name=SOURCE_NAMES["remoteok"],
        title=title,
        company=job.get("company") or "Unknown Company",
        company_logo=job.get("company_logo") or job.get("logo") or None,
        location=job.get("location") or "Remote",
        location_type="remote",
        country=country_from_location(job.get("location")) or None,
        salary=format_salary(job.get("salary_min"), job.get("salary_max"), "USD"),
        salary_min=job.get("salary_min") or None,
        salary_max=job.get("salary_max") or None,
        salary_currency="USD",
        job_type="full-time",
        experience_level=experience_from_title(title),
        description=job.get("description") or "",
        skills=list(tags),
        tags=_dedupe([*tags, "Remote", *salary_tags(job.get("salary_min"))]),
        apply_url=job.get("url") or job.get("apply_url") or f"https://remoteok.com/remote-jobs/{job.get('id')}",
        posted_at=parse_posted_date(epoch if epoch is not None else job.get("date")),
    )


def normalize_adzuna(job: dict, currency: str = "GBP", source: str = "adzuna") -> JobPosting:
    location = job.get("location") or {}
    area = location.get("area") or []
    category = (job.get("category") or {}).get("label")
    return JobPosting(
        id=f"{source}_{job.get('id')}",
        external_id=str(job.get("id")),
        source=source,
        source_name=SOURCE_NAMES.get(source, source),
        title=job.get("title") or "Unknown Position",
        company=(job.get("company") or {}).get("display_name") or "Unknown Company",
        location=location.get("display_name") or "Unknown Location",
        location_type=detect_location_type(location.get("display_name")),
        country=area[0] if area else None,
        city=area[-1] if len(area) > 1 else None,
        salary=format_salary(job.get("salary_min"), job.get("salary_max"), currency),
        salary_min=job.get("salary_min") or None,
        salary_max=job.get("salary_max") or None,
        salary_currency=currency,
        job_type=normalize_job_type(job.get("contract_time") or job.get("contract_type")),
        experience_level=experience_from_title(job.get("title")),
        description=job.get("description") or "",
        skills=skills_from_description(job.get("description")),
        tags=_dedupe([category, job.get("contract_type")]),
        apply_url=job.get("redirect_url") or "",
        posted_at=parse_posted_date(job.get("created")),
    )


def _jsearch_location(job: dict) -> str:
    parts = [p for p in (job.get("job_city"), job.get("job_state"), job.get("job_country")) if p]
    if job.get("job_is_remote"):
        return f"Remote ({', '.join(parts)})" if parts else "Remote"
    return ", ".join(parts) or "Unknown Location"


def normalize_jsearch(job: dict) -> JobPosting:
    currency = job.get("job_salary_currency") or "USD"
    mentioned = (job.get("job_required_experience") or {}).get("experience_mentioned")
    required_skills = job.get("job_required_skills") or []
    return JobPosting(
        id=f"jsearch_{job.get('job_id')}",
        external_id=str(job.get("job_id")),
        source="jsearch",
        source_name=SOURCE_NAMES["jsearch"],
        title=job.get("job_title") or "Unknown Position",
        company=job.get("employer_name") or "Unknown Company",
        company_logo=job.get("employer_logo"),
        location=_jsearch_location(job),
        location_type="remote" if job.get("job_is_remote") else "onsite",
        country=job.get("job_country") or None,
        city=job.get("job_city") or None,
        salary=format_salary(job.get("job_min_salary"), job.get("job_max_salary"), currency),
        salary_min=job.get("job_min_salary"),
        salary_max=job.get("job_max_salary"),
        salary_currency=currency,
        job_type=normalize_job_type(job.get("job_employment_type")),
        experience_level=(
            normalize_experience_level(mentioned[0]) if isinstance(mentioned, list) and mentioned
            else experience_from_title(job.get("job_title"))
        ),
        description=job.get("job_description") or "",
        skills=list(required_skills) or skills_from_description(job.get("job_description")),
        tags=_dedupe([
            job.get("job_employment_type"),
            "Remote" if job.get("job_is_remote") else None,
            job.get("employer_company_type"),
        ]),
        apply_url=job.get("job_apply_link") or job.get("job_google_link") or "",
        posted_at=parse_posted_date(job.get("job_posted_at_datetime_utc") or job.get("job_posted_at_timestamp")),
        expires_at=parse_posted_date(job.get("job_offer_expiration_datetime_utc")),
        featured=bool(job.get("job_is_highlighted")),
    )


def normalize_themuse(job: dict) -> JobPosting:
    locations = job.get("locations") or [{}]
    location_name = (locations[0] or {}).get("name") or ""
    categories = [c.get("name") for c in job.get("categories") or [] if c.get("name")]
    levels = [lv.get("name") for lv in job.get("levels") or [] if lv.get("name")]
    company = job.get("company") or {}
    return JobPosting(
        id=f"themuse_{job.get('id')}",
        external_id=str(job.get("id")),
        source="themuse",
        source_name=SOURCE_NAMES["themuse"],
        title=job.get("name") or "Unknown Position",
        company=company.get("name") or "Unknown Company",
        company_logo=company.get("logo"),
        location=location_name or "Unknown Location",
        location_type=detect_location_type(location_name),
        country=country_from_location(location_name) or None,
        city=location_name.split(",")[0].strip() or None,
        job_type=normalize_job_type(job.get("type")),
        experience_level=normalize_experience_level(levels[0] if levels else None),
        description=job.get("contents") or "",
        skills=categories,
        tags=_dedupe([*categories, *levels]),
        apply_url=(job.get("refs") or {}).get("landing_page") or f"https://www.themuse.com/jobs/{job.get('id')}",
        posted_at=parse_posted_date(job.get("publication_date")),
    )


# -- Morocco -------------------------------------------------------------------

def stable_hash(text: str) -> str:
    """31-multiplier 32-bit string hash in base 36; stable across processes."""
    value = 0
    for ch in text:
        value = ((value << 5) - value + ord(ch)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    value = abs(value)
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def normalize_morocco_location(location: str | None) -> str:
    if not location:
        return "Maroc"
    lowered = location.lower()
    if "maroc" in lowered or "morocco" in lowered:
        return location
    if any(city in lowered for city in MOROCCO_CITY_NAMES):
        return f"{location}, Maroc"
    return location


def detect_language(text: str) -> str:
    """'ar', 'fr' or 'en'; French when nothing decides it."""
    lowered = text.lower()
    if any(marker in lowered for marker in _ARABIC_MARKERS):
        return "ar"
    words = set(lowered.split())
    french = sum(1 for w in _FRENCH_MARKERS if w in words)
    english = sum(1 for w in _ENGLISH_MARKERS if w in words)
    if french > english:
        return "fr"
    if english > 0:
        return "en"
    return "fr"


def morocco_skills(title: str, description: str) -> list[str]:
    text = f"{title} {description}".lower()
    found = [s for s in (*MOROCCO_TECH_SKILLS, *MOROCCO_BUSINESS_SKILLS) if s in text]
    return _dedupe(s[:1].upper() + s[1:] for s in found)[:MAX_MOROCCO_SKILLS]


def normalize_morocco(job: dict, board: str, board_name: str = "") -> JobPosting:
    """Normalize a scraped Moroccan posting; `board` is the job board id (emploi, rekrute, ...)."""
    title = job.get("title") or "Offre d'emploi"
    company = job.get("company") or "Entreprise Marocaine"
    description = job.get("description") or ""
    url = job.get("url") or ""
    digest = stable_hash(url) if url else stable_hash(f"{title}-{company}-{board}")
    raw_type = (job.get("job_type") or "").strip()
    raw_level = (job.get("experience_level") or "").strip()
    salary = job.get("salary")
    if isinstance(salary, (int, float)):
        salary = f"{salary:,.0f} MAD"
    skills = job.get("skills") or morocco_skills(title, description)
    location = normalize_morocco_location(job.get("location"))
    return JobPosting(
        id=f"morocco_{board}_{digest}",
        external_id=digest,
        source=f"morocco_{board}",
        source_name=board_name or board,
        title=title,
        company=company,
        company_logo=job.get("company_logo"),
        location=location,
        location_type=detect_location_type(location),
        country="MA",
        city=job.get("city") or None,
        salary=str(salary) if salary else None,
        salary_min=job.get("salary_min"),
        salary_max=job.get("salary_max"),
        salary_currency="MAD",
        job_type=MOROCCO_JOB_TYPES.get(raw_type.lower(), normalize_job_type(raw_type)),
        experience_level=MOROCCO_EXPERIENCE_LEVELS.get(raw_level.lower()) or (
            normalize_experience_level(raw_level) if raw_level else experience_from_title(title)
        ),
        description=description,
        skills=skills,
        tags=job.get("tags") or skills,
        apply_url=job.get("apply_url") or url,
        posted_at=parse_posted_date(job.get("posted_at")),
        expires_at=parse_posted_date(job.get("expires_at")),
        featured=bool(job.get("featured")),
        language=detect_language(f"{title} {description}"),
    )


NORMALIZERS = {
    "remoteok": normalize_remoteok,
    "adzuna": normalize_adzuna,
    "jsearch": normalize_jsearch,
    "themuse": normalize_themuse,
}


def normalize_job(job: dict, source: str) -> JobPosting:
    normalizer = NORMALIZERS.get(source)
    if normalizer is None:
        logger.warning("No normalizer for source %s, using base fields", source)
        return normalize_base(job, source)
    return normalizer(job)
