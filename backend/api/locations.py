from fastapi import APIRouter

from services import location
from services.errors import NotFoundError
from services.jobs.morocco import MOROCCO_CITIES, MOROCCO_SECTORS

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/countries")
async def countries(q: str = "", region: str = ""):
    found = location.search_countries(q)
    if region:
        found = [c for c in found if c.region.lower() == region.strip().lower()]
    return {"countries": found, "regions": location.get_regions()}


@router.get("/countries/{code}/cities")
async def cities(code: str, q: str = ""):
    country = location.get_country_by_code(code)
    if country is None:
        raise NotFoundError(f"Unknown country code '{code}'")
    return {"country": country, "cities": location.search_cities(code, q)}


@router.get("/morocco")
async def morocco_reference():
    """Cities and sectors offered by the Moroccan job boards."""
    return {"cities": MOROCCO_CITIES, "sectors": MOROCCO_SECTORS}
