"""Read-only query engine over the loaded airport dataset.

The dataset is loaded lazily, exactly once per repository instance, under a
lock. After loading, the record list and both indexes are replaced as a unit
and never mutated, so queries need no locking.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from airport_search.dataset import DatasetLoader, LoadedDataset, normalize_text
from airport_search.errors import CoordinatesUnavailable
from airport_search.geo import haversine_km
from airport_search.logging_utils import perf
from airport_search.models import Airport, Coordinates, RawRecord, SearchLocation, SearchResult
from airport_search.network import check_cancelled
from airport_search.repository.classification import is_international, is_military_base

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_KM = 200.0
DEFAULT_MAX_RESULTS = 5
QUERY_RESULT_LIMIT = 20

SCORE_EXACT_IATA = 100
SCORE_NAME = 50
SCORE_CITY = 30
SCORE_COUNTRY = 10
SCORE_WORD_NAME = 5
SCORE_WORD_CITY = 3
SCORE_WORD_COUNTRY = 1
MIN_WORD_LENGTH = 3


@dataclass(frozen=True)
class ProximityPolicy:
    """How many airports of each class a proximity search may return."""

    international: int = 3
    domestic: int = 2


@dataclass(frozen=True)
class _Indexes:
    records: Tuple[RawRecord, ...]
    by_iata: Dict[str, RawRecord]
    by_city: Dict[str, Tuple[RawRecord, ...]]
    source: str


def _build_indexes(dataset: LoadedDataset) -> _Indexes:
    by_iata: Dict[str, RawRecord] = {}
    by_city: Dict[str, List[RawRecord]] = {}
    for record in dataset.records:
        if record.iata:
            by_iata[record.iata.upper()] = record
        city = normalize_text(record.city)
        if city:
            by_city.setdefault(city, []).append(record)
    return _Indexes(
        records=tuple(dataset.records),
        by_iata=by_iata,
        by_city={city: tuple(items) for city, items in by_city.items()},
        source=dataset.source,
    )


def to_airport(record: RawRecord, distance: Optional[float] = None) -> Airport:
    return Airport(
        iata_code=record.iata or "",
        name=record.name,
        city=record.city,
        country=record.country,
        coordinates=record.coordinates,
        is_international=is_international(record),
        distance=distance,
    )


def score_record(record: RawRecord, normalized_query: str, query_words: Sequence[str]) -> int:
    """Relevance score of ``record`` for an already-normalized query."""
    score = 0
    name = normalize_text(record.name)
    city = normalize_text(record.city)
    country = normalize_text(record.country)

    if record.iata and normalized_query.upper() == record.iata:
        score += SCORE_EXACT_IATA
    if normalized_query in name:
        score += SCORE_NAME
    if normalized_query in city:
        score += SCORE_CITY
    if normalized_query in country:
        score += SCORE_COUNTRY

    for word in query_words:
        if word in name:
            score += SCORE_WORD_NAME
        if word in city:
            score += SCORE_WORD_CITY
        if word in country:
            score += SCORE_WORD_COUNTRY
    return score


class AirportRepository:
    """Exact-code lookup, proximity search and scored text search over airports."""

    def __init__(
        self,
        loader: Optional[DatasetLoader] = None,
        *,
        policy: Optional[ProximityPolicy] = None,
    ) -> None:
        self._loader = loader if loader is not None else DatasetLoader()
        self._policy = policy or ProximityPolicy()
        self._lock = threading.Lock()
        self._indexes: Optional[_Indexes] = None

    @property
    def loaded(self) -> bool:
        return self._indexes is not None

    @property
    def source(self) -> Optional[str]:
        return self._indexes.source if self._indexes else None

    def __len__(self) -> int:
        return len(self._indexes.records) if self._indexes else 0

    def ensure_loaded(self, cancel_event: Optional[threading.Event] = None) -> _Indexes:
        """Load the dataset once; concurrent first callers wait for the same load."""
        indexes = self._indexes
        if indexes is not None:
            return indexes
        with self._lock:
            if self._indexes is None:
                dataset = self._loader.load(cancel_event)
                self._indexes = _build_indexes(dataset)
                LOGGER.info("Airport repository ready with %d airports (source=%s)", len(self), dataset.source)
            return self._indexes

    def reload(self, cancel_event: Optional[threading.Event] = None) -> None:
        with self._lock:
            dataset = self._loader.load(cancel_event)
            self._indexes = _build_indexes(dataset)

    def load_dataset(self, dataset: LoadedDataset) -> None:
        """Install an already-loaded dataset, bypassing the loader."""
        with self._lock:
            self._indexes = _build_indexes(dataset)

    @perf("repository.get_by_iata_code", tags={"component": "repository"})
    def get_by_iata_code(
        self, code: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Airport]:
        indexes = self.ensure_loaded(cancel_event)
        record = indexes.by_iata.get((code or "").strip().upper())
        return to_airport(record) if record else None

    def coordinates_for_city(
        self, location_name: str, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Coordinates]:
        indexes = self.ensure_loaded(cancel_event)
        key = normalize_text(location_name)
        if not key:
            return None
        matches = indexes.by_city.get(key)
        return matches[0].coordinates if matches else None

    @perf("repository.search_near_location", tags={"component": "repository"})
    def search_near_location(
        self,
        location_name: str,
        coordinates: Optional[Coordinates] = None,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        max_results: int = DEFAULT_MAX_RESULTS,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchResult:
        """Closest international and domestic airports within ``max_distance_km``.

        At most ``policy.international`` international and ``policy.domestic``
        domestic airports are selected; a short class is not backfilled from
        the other. The merged list is sorted by ascending distance and capped
        at ``max_results``.

        Raises:
            CoordinatesUnavailable: when no coordinates are given and the
                location is not a known city in the dataset.
        """
        indexes = self.ensure_loaded(cancel_event)
        center = coordinates if coordinates is not None else self.coordinates_for_city(location_name, cancel_event)
        if center is None:
            raise CoordinatesUnavailable(location_name, "not a known city in the airport dataset")
        check_cancelled(cancel_event, "search_near_location")

        international: List[Tuple[float, RawRecord]] = []
        domestic: List[Tuple[float, RawRecord]] = []
        for record in indexes.records:
            if not record.iata or is_military_base(record.name):
                continue
            distance = haversine_km(center, record.coordinates)
            if distance > max_distance_km:
                continue
            bucket = international if is_international(record) else domestic
            bucket.append((distance, record))

        international.sort(key=lambda item: item[0])
        domestic.sort(key=lambda item: item[0])
        selected = international[: self._policy.international] + domestic[: self._policy.domestic]
        selected.sort(key=lambda item: item[0])

        airports = [to_airport(record, distance) for distance, record in selected[: max(0, max_results)]]
        LOGGER.debug(
            "Proximity search %r within %.0fkm: %d international, %d domestic candidates, %d returned",
            location_name,
            max_distance_km,
            len(international),
            len(domestic),
            len(airports),
        )
        return SearchResult(
            search_location=SearchLocation(name=location_name, coordinates=center),
            airports=airports,
        )

    @perf("repository.search_by_query", tags={"component": "repository"})
    def search_by_query(
        self, text: str, cancel_event: Optional[threading.Event] = None
    ) -> List[Airport]:
        """Scored free-text search over IATA code, name, city and country."""
        indexes = self.ensure_loaded(cancel_event)
        normalized_query = normalize_text(text)
        if not normalized_query:
            return []
        query_words = [word for word in normalized_query.split(" ") if len(word) >= MIN_WORD_LENGTH]

        scored: List[Tuple[int, RawRecord]] = []
        for record in indexes.records:
            if is_military_base(record.name):
                continue
            score = score_record(record, normalized_query, query_words)
            if score > 0:
                scored.append((score, record))

        # sort is stable, so equal scores keep dataset order
        scored.sort(key=lambda item: item[0], reverse=True)
        return [to_airport(record) for _, record in scored[:QUERY_RESULT_LIMIT]]


__all__ = [
    "AirportRepository",
    "DEFAULT_MAX_DISTANCE_KM",
    "DEFAULT_MAX_RESULTS",
    "ProximityPolicy",
    "QUERY_RESULT_LIMIT",
    "score_record",
    "to_airport",
]
