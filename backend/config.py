import os

from pydantic import BaseModel
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class AtsPolicy(BaseModel):
    """Tunable weights and deductions for the ATS heuristic scorer.

    None of these values has a derivation beyond "reads sensibly on real CVs";
    override them through ATS__<FIELD> environment variables.
    """

    # Sub-score weights when a job description is supplied
    weight_structure: float = 0.20
    weight_keywords: float = 0.35
    weight_action_verbs: float = 0.15
    weight_metrics: float = 0.15
    weight_formatting: float = 0.15

    # Sub-score weights against the generic vocabulary
    generic_weight_structure: float = 0.30
    generic_weight_keywords: float = 0.20
    generic_weight_action_verbs: float = 0.20
    generic_weight_metrics: float = 0.15
    generic_weight_formatting: float = 0.15

    # Hybrid merge
    hybrid_local_weight: float = 0.4
    hybrid_model_weight: float = 0.6

    # Display caps
    max_missing_keywords: int = 10
    max_matched_keywords: int = 25
    max_suggestions: int = 8
    max_strengths: int = 6

    # Structure section shares (sum to 100)
    share_contact: int = 20
    share_summary: int = 15
    share_experience: int = 30
    share_education: int = 15
    share_skills: int = 20

    # Action verbs
    strong_verb_target_ratio: float = 0.6
    weak_phrase_penalty: int = 10

    # Metrics
    metric_full_rate_threshold: int = 5
    metric_points_full_rate: int = 15
    metric_points_diminished: int = 5

    # Formatting penalties
    penalty_image: int = 15
    penalty_multi_column: int = 10
    penalty_bullet_inconsistency: int = 10
    penalty_overlong_field: int = 5
    penalty_no_bullets: int = 10
    max_field_length: int = 100
    max_description_line_length: int = 300

    # Keywords
    fuzzy_threshold: int = 85
    generic_coverage_target: float = 0.5


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    model_timeout_seconds: float = 20.0

    # Job providers
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    jsearch_api_key: str = ""
    http_timeout_seconds: float = 15.0
    provider_timeout_seconds: float = 10.0

    # Caches
    job_cache_ttl_seconds: int = 900
    job_cache_max_entries: int = 100
    job_details_cache_size: int = 20
    job_details_ttl_seconds: int = 900

    # Persistence
    cv_db_path: str = "careerforge.db"

    max_upload_size_mb: int = 5
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    ats: AtsPolicy = AtsPolicy()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
