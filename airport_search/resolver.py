"""Unified airport resolver combining the static dataset with a geocoding provider.

The repository is authoritative. The geocoding client is consulted to resolve
coordinates for free-text locations, and as a fallback when the repository
finds nothing near a location or too little for a text query. Provider
failures are logged and skipped; they only surface, as
``CoordinatesUnavailable``, when no path produced a usable location.
"""

import logging
import math
import re
import threading
from typing import List, Optional, Set

from airport_search.api import GeocodingClient, NullGeocodingClient, build_geocoding_client
from airport_search.config import AppConfig
from airport_search.dataset import DatasetLoader
from airport_search.errors import AirportSearchError, CoordinatesUnavailable, ExternalServiceUnavailable
from airport_search.geo import haversine_km
from airport_search.models import Airport, Coordinates, PlaceRecord, SearchLocation, SearchResult
from airport_search.repository import (
    DEFAULT_MAX_DISTANCE_KM,
    DEFAULT_MAX_RESULTS,
    AirportRepository,
    is_international,
)

LOGGER = logging.getLogger(__name__)

IATA_IN_NAME = re.compile(r"\(([A-Z]{3})\)")
QUERY_FALLBACK_THRESHOLD = 5
MERGED_RESULT_LIMIT = 20
UNKNOWN = "Unknown"


def extract_iata_from_name(name: str) -> str:
    match = IATA_IN_NAME.search(name or "")
    return match.group(1) if match else ""


def extract_city_from_address(address: str) -> str:
    parts = (address or "").split(",")
    if len(parts) >= 2:
        return parts[0].strip()
    tokens = (address or "").split()
    return tokens[0] if tokens else UNKNOWN


def extract_country_from_address(address: str) -> str:
    parts = (address or "").split(",")
    if len(parts) >= 2:
        return parts[-1].strip()
    return UNKNOWN


def place_to_airport(place: PlaceRecord, reference: Optional[Coordinates] = None) -> Airport:
    """Normalize an external place into the ``Airport`` shape."""
    distance = haversine_km(reference, place.coordinates) if reference is not None else None
    return Airport(
        iata_code=extract_iata_from_name(place.name),
        name=place.name,
        city=extract_city_from_address(place.formatted_address),
        country=extract_country_from_address(place.formatted_address),
        coordinates=place.coordinates,
        is_international=is_international(place.name),
        distance=distance,
    )


def format_airport_display(airport: Airport) -> str:
    return f"{airport.name} ({airport.iata_code}) - {airport.city}, {airport.country}"


def format_airport_with_distance(airport: Airport) -> str:
    base = format_airport_display(airport)
    if airport.distance is None:
        return base
    # round half up, not Python's round-half-even
    return f"{base} - {int(math.floor(airport.distance + 0.5))}km away"


class AirportResolver:
    """Public entry point for airport lookups and searches."""

    def __init__(
        self,
        repository: Optional[AirportRepository] = None,
        geocoder: Optional[GeocodingClient] = None,
    ) -> None:
        self._repository = repository if repository is not None else AirportRepository()
        self._geocoder = geocoder if geocoder is not None else NullGeocodingClient()

    @property
    def repository(self) -> AirportRepository:
        return self._repository

    @property
    def geocoder(self) -> GeocodingClient:
        return self._geocoder

    def get_airport_by_iata_code(
        self, code: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Airport]:
        return self._repository.get_by_iata_code(code, cancel_event)

    def validate_iata_code(self, code: str) -> bool:
        """Return True when ``code`` names an airport in the dataset; never raises."""
        if not isinstance(code, str) or len(code) != 3:
            return False
        try:
            return self._repository.get_by_iata_code(code.upper()) is not None
        except AirportSearchError as exc:
            LOGGER.warning("IATA validation for %r failed: %s", code, exc)
            return False

    def get_coordinates_for_location(
        self, location_name: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Coordinates]:
        if not self._geocoder.enabled or not location_name:
            return None
        try:
            return self._geocoder.resolve_coordinates(location_name, cancel_event)
        except ExternalServiceUnavailable as exc:
            LOGGER.warning("Geocoding %r failed: %s", location_name, exc)
            return None

    def search_airports_near_location(
        self,
        location_name: str,
        coordinates: Optional[Coordinates] = None,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        max_results: int = DEFAULT_MAX_RESULTS,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchResult:
        """Airports near a location, falling back to the places provider.

        Raises:
            CoordinatesUnavailable: when neither the caller, the geocoder, the
                dataset's city index nor the places fallback yields a location.
        """
        if coordinates is None:
            coordinates = self.get_coordinates_for_location(location_name, cancel_event)

        primary: Optional[SearchResult] = None
        primary_error: Optional[CoordinatesUnavailable] = None
        try:
            primary = self._repository.search_near_location(
                location_name, coordinates, max_distance_km, max_results, cancel_event
            )
        except CoordinatesUnavailable as exc:
            primary_error = exc

        if primary is not None and primary.airports:
            return primary
        if not self._geocoder.enabled:
            if primary is not None:
                return primary
            raise primary_error

        LOGGER.info("No dataset airports near %r; trying places fallback", location_name)
        reference = coordinates
        if reference is None and primary is not None:
            reference = primary.search_location.coordinates
        try:
            fallback = self._search_places_near(
                location_name, reference, max_distance_km, max_results, cancel_event
            )
        except ExternalServiceUnavailable as exc:
            LOGGER.warning("Places fallback for %r failed: %s", location_name, exc)
            if primary is not None:
                return primary
            raise CoordinatesUnavailable(location_name, str(exc)) from exc

        if fallback is not None:
            return fallback
        if primary is not None:
            return primary
        raise primary_error

    def _search_places_near(
        self,
        location_name: str,
        reference: Optional[Coordinates],
        max_distance_km: float,
        max_results: int,
        cancel_event: Optional[threading.Event],
    ) -> Optional[SearchResult]:
        places = self._geocoder.search_places(f"{location_name} airports", reference, cancel_event)
        if reference is None:
            if not places:
                return None
            center = places[0].coordinates
        else:
            center = reference

        airports = [place_to_airport(place, reference) for place in places]
        if reference is not None:
            airports = [a for a in airports if a.distance is not None and a.distance <= max_distance_km]
            airports.sort(key=lambda a: a.distance)
        return SearchResult(
            search_location=SearchLocation(name=location_name, coordinates=center),
            airports=airports[: max(0, max_results)],
        )

    def search_airports_by_query(
        self, text: str, cancel_event: Optional[threading.Event] = None
    ) -> List[Airport]:
        results = self._repository.search_by_query(text, cancel_event)
        if len(results) >= QUERY_FALLBACK_THRESHOLD or not self._geocoder.enabled or not text:
            return results

        try:
            places = self._geocoder.search_places(text, None, cancel_event)
        except ExternalServiceUnavailable as exc:
            LOGGER.warning("Places search for %r failed: %s", text, exc)
            return results

        merged = list(results)
        seen: Set[str] = {airport.iata_code for airport in results if airport.iata_code}
        for airport in (place_to_airport(place) for place in places):
            if airport.iata_code and airport.iata_code in seen:
                continue
            if airport.iata_code:
                seen.add(airport.iata_code)
            merged.append(airport)
        return merged[:MERGED_RESULT_LIMIT]

    format_airport_display = staticmethod(format_airport_display)
    format_airport_with_distance = staticmethod(format_airport_with_distance)

    def close(self) -> None:
        self._geocoder.close()

    def __enter__(self) -> "AirportResolver":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


def build_resolver(config: AppConfig, *, offline: bool = False) -> AirportResolver:
    """Wire a resolver from configuration."""
    loader = DatasetLoader.from_config(config, offline=offline)
    geocoder = NullGeocodingClient() if offline else build_geocoding_client(config)
    return AirportResolver(AirportRepository(loader), geocoder)


__all__ = [
    "AirportResolver",
    "build_resolver",
    "extract_city_from_address",
    "extract_country_from_address",
    "extract_iata_from_name",
    "format_airport_display",
    "format_airport_with_distance",
    "place_to_airport",
]
