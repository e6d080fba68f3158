"""Error taxonomy for the airport search engine.

Only ``CoordinatesUnavailable`` and ``OperationCancelled`` reach callers of the
resolver. The others are recovered internally: ``DatasetUnavailable`` by the
embedded fallback dataset, ``MalformedRecord`` by skipping the row, and
``ExternalServiceUnavailable`` by skipping the geocoding fallback.
"""


class AirportSearchError(Exception):
    """Base class for all airport search errors."""


class DatasetUnavailable(AirportSearchError):
    """The primary airport dataset could not be fetched or parsed."""


class MalformedRecord(AirportSearchError):
    """A single dataset row failed validation."""


class ExternalServiceUnavailable(AirportSearchError):
    """The geocoding provider is missing or a call to it failed."""


class OperationCancelled(AirportSearchError):
    """The caller cancelled the operation before it completed."""


class CoordinatesUnavailable(AirportSearchError):
    """No coordinates could be resolved for a location by any path."""

    def __init__(self, location_name: str, reason: str = "") -> None:
        message = f"Could not find coordinates for location: {location_name}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.location_name = location_name


__all__ = [
    "AirportSearchError",
    "CoordinatesUnavailable",
    "DatasetUnavailable",
    "ExternalServiceUnavailable",
    "MalformedRecord",
    "OperationCancelled",
]
