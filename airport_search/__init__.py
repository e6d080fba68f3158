"""Airport resolution and search engine.

Typical use:

    from airport_search import build_resolver, load_config

    resolver = build_resolver(load_config())
    resolver.search_airports_near_location("New York")
"""

from airport_search.config import AppConfig, load_config
from airport_search.errors import (
    AirportSearchError,
    CoordinatesUnavailable,
    ExternalServiceUnavailable,
    OperationCancelled,
)
from airport_search.models import Airport, Coordinates, PlaceRecord, SearchResult
from airport_search.resolver import (
    AirportResolver,
    build_resolver,
    format_airport_display,
    format_airport_with_distance,
)

__all__ = [
    "Airport",
    "AirportResolver",
    "AirportSearchError",
    "AppConfig",
    "Coordinates",
    "CoordinatesUnavailable",
    "ExternalServiceUnavailable",
    "OperationCancelled",
    "PlaceRecord",
    "SearchResult",
    "build_resolver",
    "format_airport_display",
    "format_airport_with_distance",
    "load_config",
]
