"""Clients for the Google Geocoding/Places web services.

``GooglePlacesClient`` calls Google directly with an API key.
``ProxiedPlacesClient`` calls a server-side proxy exposing ``placeSearch`` and
``geocodePlace`` endpoints, so the key never leaves the server.
"""

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

import requests

from airport_search.api.geocoding import (
    GeocodingClient,
    coordinates_from_location,
    place_from_payload,
    places_from_payload,
)
from airport_search.errors import ExternalServiceUnavailable
from airport_search.logging_utils import perf
from airport_search.models import Coordinates, PlaceRecord
from airport_search.network import get_json, post_json

LOGGER = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"
TEXT_SEARCH_RADIUS_M = 100_000
AUTOCOMPLETE_RADIUS_M = 50_000
PLACE_DETAIL_FIELDS = "name,formatted_address,geometry,types"
OK_STATUSES = {"OK", "ZERO_RESULTS"}


class _HttpGeocodingClient(GeocodingClient):
    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        attempts: int = 2,
        delay_seconds: float = 1.0,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._attempts = attempts
        self._delay_seconds = delay_seconds

    def _call(
        self,
        method: str,
        url: str,
        label: str,
        cancel_event: Optional[threading.Event],
        *,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        options = {
            "timeout": self._timeout,
            "attempts": self._attempts,
            "delay_seconds": self._delay_seconds,
            "cancel_event": cancel_event,
            "label": label,
        }
        try:
            if method == "POST":
                return post_json(self._session, url, payload or {}, **options)
            return get_json(self._session, url, params=params, **options)
        except (requests.RequestException, ValueError) as exc:
            raise ExternalServiceUnavailable(f"{label} failed: {exc}") from exc

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


class GooglePlacesClient(_HttpGeocodingClient):
    """Direct Google Geocoding + Places Text Search client."""

    def __init__(self, api_key: str, **kwargs: Any) -> None:
        if not api_key:
            raise ValueError("api_key must be provided")
        super().__init__(**kwargs)
        self._api_key = api_key

    def _get(self, url: str, params: Dict[str, Any], label: str, cancel_event) -> Mapping[str, Any]:
        data = self._call("GET", url, label, cancel_event, params={**params, "key": self._api_key})
        if not isinstance(data, Mapping):
            raise ExternalServiceUnavailable(f"{label} returned a non-object payload")
        status = data.get("status")
        if status not in OK_STATUSES:
            raise ExternalServiceUnavailable(
                f"{label} status={status} message={data.get('error_message', '')}"
            )
        if status == "ZERO_RESULTS":
            LOGGER.info("%s: no results for %r", label, params.get("address") or params.get("query") or params.get("input"))
        return data

    @perf("api.geocode", tags={"component": "api", "provider": "google"})
    def resolve_coordinates(
        self, location_text: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Coordinates]:
        if not location_text:
            raise ValueError("location_text must be provided")
        data = self._get(GEOCODE_URL, {"address": location_text}, "api.geocode", cancel_event)
        results = data.get("results") or []
        if not results:
            return None
        return coordinates_from_location((results[0].get("geometry") or {}).get("location"))

    @perf("api.text_search", tags={"component": "api", "provider": "google"})
    def search_places(
        self,
        query_text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[PlaceRecord]:
        if not query_text:
            raise ValueError("query_text must be provided")
        params: Dict[str, Any] = {"query": query_text, "type": "airport"}
        if coordinates is not None:
            params["location"] = f"{coordinates.lat},{coordinates.lng}"
            params["radius"] = TEXT_SEARCH_RADIUS_M
        data = self._get(f"{PLACES_BASE_URL}/textsearch/json", params, "api.text_search", cancel_event)
        return places_from_payload(data.get("results") or [])

    @perf("api.autocomplete", tags={"component": "api", "provider": "google"})
    def autocomplete(
        self,
        text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Mapping[str, Any]]:
        params: Dict[str, Any] = {"input": text}
        if coordinates is not None:
            params["location"] = f"{coordinates.lat},{coordinates.lng}"
            params["radius"] = AUTOCOMPLETE_RADIUS_M
        data = self._get(f"{PLACES_BASE_URL}/autocomplete/json", params, "api.autocomplete", cancel_event)
        return list(data.get("predictions") or [])

    @perf("api.place_details", tags={"component": "api", "provider": "google"})
    def get_place_by_id(
        self, place_id: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[PlaceRecord]:
        params = {"place_id": place_id, "fields": PLACE_DETAIL_FIELDS}
        data = self._get(f"{PLACES_BASE_URL}/details/json", params, "api.place_details", cancel_event)
        result = data.get("result")
        if not result:
            return None
        return place_from_payload({**result, "place_id": result.get("place_id", place_id)})


class ProxiedPlacesClient(_HttpGeocodingClient):
    """Client for a server-side places proxy exposed as HTTPS callable functions.

    Requests are POSTed as ``{"data": <payload>}`` and answered as
    ``{"result": {"success": true, "data": ...}}``. ``placeSearch`` returns
    ``data = {"results": [...]}`` and ``geocodePlace`` returns
    ``data = {"lat": .., "lng": ..}`` or ``data = null``.
    """

    def __init__(self, base_url: str, **kwargs: Any) -> None:
        if not base_url:
            raise ValueError("base_url must be provided")
        super().__init__(**kwargs)
        self._base_url = base_url.rstrip("/")

    def _post(self, endpoint: str, payload: Dict[str, Any], cancel_event) -> Any:
        label = f"proxy.{endpoint}"
        body = self._call("POST", f"{self._base_url}/{endpoint}", label, cancel_event, payload={"data": payload})
        if not isinstance(body, Mapping):
            raise ExternalServiceUnavailable(f"{label} returned a non-object payload")
        if body.get("error"):
            raise ExternalServiceUnavailable(f"{label} error: {body['error']}")
        result = body.get("result")
        if not isinstance(result, Mapping) or result.get("success") is False:
            raise ExternalServiceUnavailable(f"{label} returned no successful result")
        return result.get("data")

    def _place_search(self, query, coordinates, max_results, cancel_event) -> List[PlaceRecord]:
        payload: Dict[str, Any] = {"q": query, "maxResults": max_results}
        if coordinates is not None:
            payload["location"] = coordinates.as_dict()
        data = self._post("placeSearch", payload, cancel_event)
        results = data.get("results") if isinstance(data, Mapping) else None
        return places_from_payload(results or [], limit=max_results)

    @perf("api.geocode", tags={"component": "api", "provider": "proxy"})
    def resolve_coordinates(
        self, location_text: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Coordinates]:
        if not location_text:
            raise ValueError("location_text must be provided")
        return coordinates_from_location(self._post("geocodePlace", {"address": location_text}, cancel_event))

    @perf("api.text_search", tags={"component": "api", "provider": "proxy"})
    def search_places(
        self,
        query_text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[PlaceRecord]:
        if not query_text:
            raise ValueError("query_text must be provided")
        return self._place_search(query_text, coordinates, 10, cancel_event)

    def autocomplete(
        self,
        text: str,
        coordinates: Optional[Coordinates] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Mapping[str, Any]]:
        places = self._place_search(text, coordinates, 5, cancel_event)
        return [
            {"description": place.name, "place_id": place.place_id, "formatted_address": place.formatted_address}
            for place in places
        ]

    def get_place_by_id(self, place_id, cancel_event=None):
        # the proxy has no place-details endpoint
        return None


__all__ = [
    "GEOCODE_URL",
    "PLACES_BASE_URL",
    "GooglePlacesClient",
    "ProxiedPlacesClient",
]
