"""Typed records shared by the dataset, repository and resolver layers."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def as_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class RawRecord:
    """One retained row of the airport dataset."""

    id: int
    name: str
    city: str
    country: str
    iata: Optional[str]
    icao: Optional[str]
    lat: float
    lng: float
    altitude: int = 0
    timezone_offset: float = 0.0
    dst: str = ""
    tz: str = ""
    type: str = "airport"
    source: str = ""

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)


@dataclass(frozen=True)
class Airport:
    """Query-facing airport entity.

    ``iata_code`` is empty for external results without a recognisable code.
    ``distance`` is kilometres from the search location and is only set by
    proximity queries.
    """

    iata_code: str
    name: str
    city: str
    country: str
    coordinates: Coordinates
    is_international: bool
    distance: Optional[float] = None

    def with_distance(self, distance: Optional[float]) -> "Airport":
        return replace(self, distance=distance)

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "iataCode": self.iata_code,
            "name": self.name,
            "city": self.city,
            "country": self.country,
            "coordinates": self.coordinates.as_dict(),
            "isInternational": self.is_international,
        }
        if self.distance is not None:
            data["distance"] = self.distance
        return data


@dataclass(frozen=True)
class PlaceRecord:
    """Normalized result from an external geocoding/places provider."""

    name: str
    formatted_address: str
    coordinates: Coordinates
    types: Tuple[str, ...] = ()
    place_id: Optional[str] = None


@dataclass(frozen=True)
class SearchLocation:
    name: str
    coordinates: Coordinates


@dataclass
class SearchResult:
    search_location: SearchLocation
    airports: List[Airport] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "airports": [airport.as_dict() for airport in self.airports],
            "searchLocation": {
                "name": self.search_location.name,
                "coordinates": self.search_location.coordinates.as_dict(),
            },
        }


__all__ = [
    "Airport",
    "Coordinates",
    "PlaceRecord",
    "RawRecord",
    "SearchLocation",
    "SearchResult",
]
