from pydantic import BaseModel, Field


class AusbildungDetails(BaseModel):
    duration: str | None = None
    start_date: str | None = None
    education_required: str | None = None
    training_salary: dict[str, str] | None = None
    vocational_school: str | None = None
    is_dual_study: bool = False
    benefits: list[str] = []
    career_prospects: list[str] = []
    chamber: str | None = None  # "IHK" | "HWK"
    german_level: str = "B1"
    german_level_note: str | None = None
    other_languages: list[str] = []


class JobPosting(BaseModel):
    id: str
    external_id: str
    source: str
    source_name: str = ""
    title: str = ""
    company: str = ""
    company_logo: str | None = None
    location: str = ""
    location_type: str = "onsite"  # "remote" | "hybrid" | "onsite"
    country: str | None = None
    city: str | None = None
    salary: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    salary_currency: str | None = None
    job_type: str = "full-time"
    experience_level: str | None = None
    description: str = ""
    skills: list[str] = []
    tags: list[str] = []
    apply_url: str = ""
    posted_at: str | None = None  # ISO 8601
    expires_at: str | None = None
    featured: bool = False
    is_ausbildung: bool = False
    ausbildung_details: AusbildungDetails | None = None
    language: str | None = None


class JobSearchFilters(BaseModel):
    query: str = ""
    location: str = ""
    country: str = ""
    city: str = ""
    remote: bool = False
    job_type: str = ""
    experience_level: str = ""
    salary_min: float | None = None
    salary_max: float | None = None
    sources: list[str] = []
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=50)
    # Ausbildung mode
    is_ausbildung: bool = False
    ausbildung_field: str = ""
    start_year: str = ""
    # Morocco mode
    is_morocco: bool = False
    morocco_sources: list[str] = []
    sector: str = ""

    def cache_key(self) -> tuple:
        """Canonical (query, filters, page) tuple; list order and case do not matter."""
        data = self.model_dump()
        key = []
        for name in sorted(data):
            value = data[name]
            if isinstance(value, list):
                value = tuple(sorted(str(v).lower() for v in value))
            elif isinstance(value, str):
                value = value.strip().lower()
            key.append((name, value))
        return tuple(key)


class Pagination(BaseModel):
    page: int = 1
    limit: int = 20
    total: int = 0
    total_pages: int = 0


class JobSearchPage(BaseModel):
    jobs: list[JobPosting] = []
    pagination: Pagination = Pagination()
    sources: list[str] = []
    errors: dict[str, str] = {}
    cached: bool = False


class SmartTip(BaseModel):
    type: str
    keyword: str
    context: str = ""
    instruction: str = ""
    is_bot_filter: bool = False


class JobDetailResponse(BaseModel):
    job: JobPosting
    smart_tips: list[SmartTip] = []
