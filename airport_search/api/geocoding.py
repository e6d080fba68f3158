"""Geocoding capability interface and shared payload mapping."""

import logging
import threading
from typing import Any, Iterable, List, Mapping, Optional

from airport_search.models import Coordinates, PlaceRecord

LOGGER = logging.getLogger(__name__)


class GeocodingClient:
    """Protocol-like interface for resolving locations and searching places.

    Implementations raise ``ExternalServiceUnavailable`` on provider or
    transport failure and ``OperationCancelled`` when the token is set.
    """

    enabled = True

    def resolve_coordinates(
        self, location_text: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Coordinates]:  # pragma: no cover - interface only
        raise NotImplementedError

    def search_places(
        self,
        query_text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[PlaceRecord]:  # pragma: no cover - interface only
        raise NotImplementedError

    def autocomplete(
        self,
        text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Mapping[str, Any]]:  # pragma: no cover - interface only
        raise NotImplementedError

    def get_place_by_id(
        self, place_id: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[PlaceRecord]:  # pragma: no cover - interface only
        raise NotImplementedError

    def close(self) -> None:
        pass


class NullGeocodingClient(GeocodingClient):
    """Stand-in used when no provider is configured."""

    enabled = False

    def resolve_coordinates(self, location_text, cancel_event=None):
        return None

    def search_places(self, query_text, coordinates=None, cancel_event=None):
        return []

    def autocomplete(self, text, coordinates=None, cancel_event=None):
        return []

    def get_place_by_id(self, place_id, cancel_event=None):
        return None


def coordinates_from_location(location: Any) -> Optional[Coordinates]:
    """Read ``{"lat": .., "lng": ..}`` into ``Coordinates``."""
    if not isinstance(location, Mapping):
        return None
    try:
        return Coordinates(float(location["lat"]), float(location["lng"]))
    except (KeyError, TypeError, ValueError):
        return None


def place_from_payload(place: Any) -> Optional[PlaceRecord]:
    """Map a provider place object onto ``PlaceRecord``; ``None`` when it has no location."""
    if not isinstance(place, Mapping):
        return None
    geometry = place.get("geometry") or {}
    coordinates = coordinates_from_location(geometry.get("location") if isinstance(geometry, Mapping) else None)
    if coordinates is None:
        return None
    return PlaceRecord(
        name=str(place.get("name") or ""),
        formatted_address=str(place.get("formatted_address") or place.get("vicinity") or ""),
        coordinates=coordinates,
        types=tuple(place.get("types") or ()),
        place_id=place.get("place_id"),
    )


def places_from_payload(places: Iterable[Any], limit: Optional[int] = None) -> List[PlaceRecord]:
    records: List[PlaceRecord] = []
    for place in places or []:
        record = place_from_payload(place)
        if record is None:
            LOGGER.debug("Skipping place without a location: %r", place)
            continue
        records.append(record)
        if limit is not None and len(records) >= limit:
            break
    return records


__all__ = [
    "GeocodingClient",
    "NullGeocodingClient",
    "coordinates_from_location",
    "place_from_payload",
    "places_from_payload",
]
