"""Airport repository and classification rules."""

from airport_search.repository.airports import (
    DEFAULT_MAX_DISTANCE_KM,
    DEFAULT_MAX_RESULTS,
    AirportRepository,
    ProximityPolicy,
    to_airport,
)
from airport_search.repository.classification import is_international, is_military_base

__all__ = [
    "AirportRepository",
    "DEFAULT_MAX_DISTANCE_KM",
    "DEFAULT_MAX_RESULTS",
    "ProximityPolicy",
    "is_international",
    "is_military_base",
    "to_airport",
]
