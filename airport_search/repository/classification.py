"""Heuristic international/domestic classification and military-base filtering.

``is_international`` applies an ordered rule chain; the first matching rule
decides. It is a heuristic and is allowed to be wrong for edge cases.
"""

import re
from typing import FrozenSet, Union

from airport_search.dataset.parser import normalize_text
from airport_search.models import RawRecord

INTERNATIONAL_MARKERS = ("international", "intl")
DOMESTIC_MARKERS = (
    "regional",
    "municipal",
    "county",
    "field",
    "airfield",
    "strip",
    "local",
    "community",
    "heliport",
)
HUB_MARKERS = ("hub", "gateway", "metropolitan")
LONG_NAME_THRESHOLD = 35

MAJOR_HUB_CITIES: FrozenSet[str] = frozenset(
    {
        "new york", "los angeles", "chicago", "atlanta", "dallas", "dallas fort worth",
        "houston", "miami", "san francisco", "seattle", "denver", "boston", "las vegas",
        "orlando", "phoenix", "philadelphia", "detroit", "minneapolis", "charlotte",
        "newark", "honolulu", "toronto", "vancouver", "montreal", "calgary",
        "mexico city", "cancun", "sao paulo", "rio de janeiro", "buenos aires",
        "bogota", "lima", "santiago", "panama city", "london", "paris", "frankfurt",
        "amsterdam", "madrid", "barcelona", "rome", "milan", "munich", "zurich",
        "vienna", "istanbul", "moscow", "dublin", "copenhagen", "stockholm", "oslo",
        "helsinki", "lisbon", "brussels", "athens", "dubai", "abu dhabi", "doha",
        "tel aviv", "cairo", "johannesburg", "nairobi", "addis ababa", "lagos",
        "casablanca", "mumbai", "delhi", "new delhi", "bangalore", "singapore",
        "hong kong", "tokyo", "osaka", "seoul", "beijing", "shanghai", "guangzhou",
        "taipei", "bangkok", "kuala lumpur", "jakarta", "manila", "sydney",
        "melbourne", "brisbane", "auckland",
    }
)

NATIONAL_CAPITALS: FrozenSet[str] = frozenset(
    {
        "washington", "ottawa", "mexico city", "havana", "kingston", "san jose",
        "guatemala city", "managua", "tegucigalpa", "san salvador", "panama city",
        "bogota", "caracas", "quito", "lima", "la paz", "brasilia", "asuncion",
        "montevideo", "buenos aires", "santiago", "london", "dublin", "paris",
        "brussels", "amsterdam", "luxembourg", "berlin", "bern", "vienna", "rome",
        "madrid", "lisbon", "copenhagen", "oslo", "stockholm", "helsinki",
        "reykjavik", "warsaw", "prague", "bratislava", "budapest", "ljubljana",
        "zagreb", "belgrade", "sarajevo", "podgorica", "skopje", "tirana",
        "sofia", "bucharest", "chisinau", "kyiv", "kiev", "minsk", "vilnius",
        "riga", "tallinn", "moscow", "athens", "nicosia", "valletta", "ankara",
        "tbilisi", "yerevan", "baku", "tehran", "baghdad", "riyadh", "amman",
        "beirut", "damascus", "kuwait", "manama", "muscat", "sanaa", "cairo",
        "tripoli", "tunis", "algiers", "rabat", "dakar", "accra", "abuja",
        "nairobi", "addis ababa", "kampala", "kigali", "dar es salaam", "lusaka",
        "harare", "pretoria", "windhoek", "gaborone", "maputo", "antananarivo",
        "luanda", "kinshasa", "khartoum", "islamabad", "kabul", "new delhi",
        "kathmandu", "dhaka", "colombo", "male", "tashkent", "astana", "bishkek",
        "dushanbe", "ashgabat", "beijing", "ulaanbaatar", "seoul", "pyongyang",
        "tokyo", "taipei", "hanoi", "vientiane", "phnom penh", "bangkok",
        "naypyidaw", "kuala lumpur", "singapore", "jakarta", "manila",
        "bandar seri begawan", "canberra", "wellington", "suva", "port moresby",
    }
)

MILITARY_PATTERNS = (
    "air force base",
    "afb",
    "naval air station",
    "nas",
    "joint base",
    "army airfield",
    "army air field",
    "marine corps air station",
    "mcas",
    "air national guard",
    "air reserve base",
    "naval air facility",
    "military",
    "air base",
)
_MILITARY_RE = re.compile(r"\b(?:" + "|".join(re.escape(p) for p in MILITARY_PATTERNS) + r")\b")

Classifiable = Union[RawRecord, str]


def _as_record(subject: Classifiable) -> RawRecord:
    if isinstance(subject, RawRecord):
        return subject
    return RawRecord(id=0, name=subject or "", city="", country="", iata=None, icao=None, lat=0.0, lng=0.0)


def is_international(subject: Classifiable) -> bool:
    """Classify an airport record (or a bare airport name) as international."""
    record = _as_record(subject)
    name = record.name.lower()
    city = normalize_text(record.city)

    if any(marker in name for marker in INTERNATIONAL_MARKERS):
        return True
    if any(marker in name for marker in DOMESTIC_MARKERS):
        return False
    if city and city in MAJOR_HUB_CITIES:
        return True
    if city and city in NATIONAL_CAPITALS:
        return True
    if len(record.name) > LONG_NAME_THRESHOLD:
        return True
    if any(marker in name for marker in HUB_MARKERS):
        return True
    return False


def is_military_base(name: str) -> bool:
    return _MILITARY_RE.search((name or "").lower()) is not None


__all__ = [
    "DOMESTIC_MARKERS",
    "HUB_MARKERS",
    "INTERNATIONAL_MARKERS",
    "LONG_NAME_THRESHOLD",
    "MAJOR_HUB_CITIES",
    "MILITARY_PATTERNS",
    "NATIONAL_CAPITALS",
    "is_international",
    "is_military_base",
]
