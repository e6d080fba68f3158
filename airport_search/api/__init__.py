"""External geocoding/places providers.

``build_geocoding_client`` picks the provider from configuration: an API key
selects the direct Google client, a proxy URL selects the proxied client, and
otherwise the null client is returned.
"""

from typing import Optional

import requests

from airport_search.api.geocoding import GeocodingClient, NullGeocodingClient
from airport_search.api.google_places import GooglePlacesClient, ProxiedPlacesClient
from airport_search.config import AppConfig


def build_geocoding_client(
    config: AppConfig, session: Optional[requests.Session] = None
) -> GeocodingClient:
    options = {
        "session": session,
        "timeout": config.request_timeout,
        "attempts": config.retry_attempts,
        "delay_seconds": config.retry_delay_seconds,
    }
    if config.google_places_api_key:
        return GooglePlacesClient(config.google_places_api_key, **options)
    if config.places_proxy_url:
        return ProxiedPlacesClient(config.places_proxy_url, **options)
    return NullGeocodingClient()


__all__ = [
    "GeocodingClient",
    "GooglePlacesClient",
    "NullGeocodingClient",
    "ProxiedPlacesClient",
    "build_geocoding_client",
]
