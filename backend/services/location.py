"""Country and city lookup for job search location preferences."""

from pydantic import BaseModel


class Country(BaseModel):
    code: str
    name: str
    region: str
    has_ausbildung: bool = False


def _c(code: str, name: str, region: str, ausbildung: bool = False) -> Country:
    return Country(code=code, name=name, region=region, has_ausbildung=ausbildung)


COUNTRIES: list[Country] = sorted([
    _c("US", "United States", "North America"),
    _c("CA", "Canada", "North America"),
    _c("MX", "Mexico", "North America"),
    _c("GB", "United Kingdom", "Europe"),
    _c("DE", "Germany", "Europe", ausbildung=True),
    _c("AT", "Austria", "Europe", ausbildung=True),
    _c("CH", "Switzerland", "Europe", ausbildung=True),
    _c("FR", "France", "Europe"),
    _c("NL", "Netherlands", "Europe"),
    _c("BE", "Belgium", "Europe"),
    _c("IE", "Ireland", "Europe"),
    _c("LU", "Luxembourg", "Europe"),
    _c("ES", "Spain", "Europe"),
    _c("IT", "Italy", "Europe"),
    _c("PT", "Portugal", "Europe"),
    _c("GR", "Greece", "Europe"),
    _c("SE", "Sweden", "Europe"),
    _c("NO", "Norway", "Europe"),
    _c("DK", "Denmark", "Europe"),
    _c("FI", "Finland", "Europe"),
    _c("PL", "Poland", "Europe"),
    _c("CZ", "Czech Republic", "Europe"),
    _c("HU", "Hungary", "Europe"),
    _c("RO", "Romania", "Europe"),
    _c("UA", "Ukraine", "Europe"),
    _c("RU", "Russia", "Europe"),
    _c("AE", "United Arab Emirates", "Middle East"),
    _c("SA", "Saudi Arabia", "Middle East"),
    _c("QA", "Qatar", "Middle East"),
    _c("KW", "Kuwait", "Middle East"),
    _c("BH", "Bahrain", "Middle East"),
    _c("JO", "Jordan", "Middle East"),
    _c("LB", "Lebanon", "Middle East"),
    _c("PS", "Palestine", "Middle East"),
    _c("TR", "Turkey", "Middle East"),
    _c("MA", "Morocco", "North Africa"),
    _c("DZ", "Algeria", "North Africa"),
    _c("TN", "Tunisia", "North Africa"),
    _c("EG", "Egypt", "North Africa"),
    _c("ZA", "South Africa", "Africa"),
    _c("NG", "Nigeria", "Africa"),
    _c("KE", "Kenya", "Africa"),
    _c("IN", "India", "Asia"),
    _c("PK", "Pakistan", "Asia"),
    _c("CN", "China", "Asia"),
    _c("JP", "Japan", "Asia"),
    _c("KR", "South Korea", "Asia"),
    _c("SG", "Singapore", "Asia"),
    _c("AU", "Australia", "Oceania"),
    _c("NZ", "New Zealand", "Oceania"),
    _c("BR", "Brazil", "South America"),
    _c("AR", "Argentina", "South America"),
    _c("CL", "Chile", "South America"),
    _c("CO", "Colombia", "South America"),
], key=lambda c: c.name)

_BY_CODE = {c.code: c for c in COUNTRIES}

CITIES_BY_COUNTRY: dict[str, list[str]] = {code: sorted(cities) for code, cities in {
    "US": [
        "New York, NY", "Los Angeles, CA", "Chicago, IL", "Houston, TX", "Phoenix, AZ",
        "Philadelphia, PA", "San Diego, CA", "Dallas, TX", "San Jose, CA", "Austin, TX",
        "San Francisco, CA", "Seattle, WA", "Denver, CO", "Boston, MA", "Washington, DC",
        "Atlanta, GA", "Miami, FL", "Minneapolis, MN", "Portland, OR", "Salt Lake City, UT",
    ],
    "GB": [
        "London", "Birmingham", "Manchester", "Glasgow", "Liverpool", "Leeds", "Sheffield",
        "Edinburgh", "Bristol", "Nottingham", "Cambridge", "Oxford", "Cardiff", "Belfast",
    ],
    "CA": [
        "Toronto, ON", "Montreal, QC", "Vancouver, BC", "Calgary, AB", "Edmonton, AB",
        "Ottawa, ON", "Winnipeg, MB", "Quebec City, QC", "Halifax, NS", "Victoria, BC",
    ],
    "AU": [
        "Sydney, NSW", "Melbourne, VIC", "Brisbane, QLD", "Perth, WA", "Adelaide, SA",
        "Gold Coast, QLD", "Canberra, ACT", "Hobart, TAS", "Darwin, NT",
    ],
    "DE": [
        "Berlin", "Hamburg", "München", "Köln", "Frankfurt", "Stuttgart", "Düsseldorf",
        "Leipzig", "Dortmund", "Essen", "Bremen", "Dresden", "Hannover", "Nürnberg",
        "Duisburg", "Bochum", "Bonn", "Münster", "Karlsruhe", "Mannheim", "Augsburg", "Wiesbaden",
    ],
    "AT": ["Wien", "Graz", "Linz", "Salzburg", "Innsbruck", "Klagenfurt", "Villach", "Wels"],
    "CH": ["Zürich", "Genf", "Basel", "Lausanne", "Bern", "Winterthur", "Luzern", "St. Gallen", "Lugano"],
    "FR": [
        "Paris", "Marseille", "Lyon", "Toulouse", "Nice", "Nantes", "Strasbourg",
        "Montpellier", "Bordeaux", "Lille", "Rennes", "Grenoble",
    ],
    "NL": ["Amsterdam", "Rotterdam", "The Hague", "Utrecht", "Eindhoven", "Groningen", "Leiden"],
    "IN": [
        "Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Kolkata", "Pune",
        "Ahmedabad", "Jaipur", "Noida", "Gurgaon", "Kochi",
    ],
    "AE": ["Dubai", "Abu Dhabi", "Sharjah", "Al Ain", "Ajman"],
    "SG": ["Singapore"],
    "IE": ["Dublin", "Cork", "Limerick", "Galway", "Waterford"],
    "ES": ["Madrid", "Barcelona", "Valencia", "Seville", "Zaragoza", "Málaga", "Bilbao"],
    "MA": [
        "Casablanca", "Rabat", "Marrakech", "Fès", "Tanger", "Agadir", "Meknès", "Oujda",
        "Kenitra", "Tétouan", "Safi", "El Jadida", "Nador", "Beni Mellal", "Mohammedia",
        "Essaouira", "Settat", "Salé", "Temara",
    ],
    "DZ": ["Algiers", "Oran", "Constantine", "Annaba", "Blida", "Sétif"],
    "TN": ["Tunis", "Sfax", "Sousse", "Kairouan", "Bizerte", "Monastir"],
    "EG": ["Cairo", "Alexandria", "Giza", "Port Said", "Suez", "Luxor", "Mansoura"],
    "SA": ["Riyadh", "Jeddah", "Mecca", "Medina", "Dammam", "Khobar"],
    "PS": ["Gaza", "Ramallah", "Hebron", "Nablus", "Bethlehem", "Jenin"],
    "PK": ["Karachi", "Lahore", "Faisalabad", "Rawalpindi", "Islamabad", "Peshawar"],
    "BR": ["São Paulo", "Rio de Janeiro", "Brasília", "Belo Horizonte", "Curitiba", "Porto Alegre"],
}.items()}

DEFAULT_CITIES: list[str] = []


def get_country_by_code(code: str) -> Country | None:
    return _BY_CODE.get(code.strip().upper())


def get_country_by_name(name: str) -> Country | None:
    lowered = name.strip().lower()
    return next((c for c in COUNTRIES if c.name.lower() == lowered), None)


def search_countries(query: str = "") -> list[Country]:
    if not query.strip():
        return list(COUNTRIES)
    needle = query.strip().lower()
    return [c for c in COUNTRIES if needle in c.name.lower() or needle in c.code.lower()]


def get_regions() -> list[str]:
    return sorted({c.region for c in COUNTRIES})


def get_cities_for_country(code: str) -> list[str]:
    return list(CITIES_BY_COUNTRY.get(code.strip().upper(), DEFAULT_CITIES))


def search_cities(code: str, query: str = "") -> list[str]:
    cities = get_cities_for_country(code)
    if not query.strip():
        return cities
    needle = query.strip().lower()
    return [city for city in cities if needle in city.lower()]


def supports_ausbildung(code: str) -> bool:
    country = get_country_by_code(code)
    return bool(country and country.has_ausbildung)


def format_location(city: str | None, country: str | None) -> str:
    if city and country:
        return f"{city}, {country}"
    return city or country or "Remote"


def parse_location(location: str | None) -> dict[str, str | None]:
    """'Berlin, Germany' -> city Berlin, country Germany; a single part is taken as the city."""
    if not location or not location.strip():
        return {"city": None, "country": None}
    parts = [p.strip() for p in location.split(",") if p.strip()]
    if len(parts) >= 2:
        return {"city": parts[0], "country": parts[-1]}
    return {"city": parts[0], "country": None}
