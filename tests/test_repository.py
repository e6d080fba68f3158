import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from airport_search.dataset import DatasetLoader, LoadedDataset
from airport_search.errors import CoordinatesUnavailable, OperationCancelled
from airport_search.models import Coordinates, RawRecord
from airport_search.repository import AirportRepository, ProximityPolicy


def _record(iata: str, name: str, lat: float, lng: float, city: str = "Smallville") -> RawRecord:
    return RawRecord(
        id=1, name=name, city=city, country="Testland",
        iata=iata, icao=None, lat=lat, lng=lng,
    )


def _repository_for(records, **kwargs) -> AirportRepository:
    repo = AirportRepository(MagicMock(spec=DatasetLoader), **kwargs)
    repo.load_dataset(LoadedDataset(list(records), "test"))
    return repo


# exact lookup

@pytest.mark.parametrize("code", ["JFK", "jfk", " Jfk "])
def test_get_by_iata_code_is_case_insensitive(repository, code):
    airport = repository.get_by_iata_code(code)

    assert airport is not None
    assert airport.iata_code == "JFK"
    assert airport.name == "John F Kennedy International Airport"
    assert airport.is_international is True
    assert airport.distance is None


def test_get_by_iata_code_returns_none_for_unknown(repository):
    assert repository.get_by_iata_code("XXX") is None
    assert repository.get_by_iata_code("") is None


def test_domestic_airport_is_flagged(repository):
    assert repository.get_by_iata_code("TEB").is_international is False


# proximity search

def test_search_near_location_returns_sorted_mix(repository, nyc):
    result = repository.search_near_location("New York", nyc, max_distance_km=50)

    codes = [a.iata_code for a in result.airports]
    assert codes == ["LGA", "EWR", "TEB", "JFK", "HPN"]
    distances = [a.distance for a in result.airports]
    assert distances == sorted(distances)
    assert all(d <= 50 for d in distances)
    assert result.airports[0].distance == pytest.approx(13.3, abs=0.5)
    assert result.search_location.name == "New York"
    assert result.search_location.coordinates == nyc


def test_search_near_location_excludes_military_bases(repository, nyc):
    result = repository.search_near_location("New York", nyc, max_distance_km=100, max_results=10)
    assert "NBK" not in [a.iata_code for a in result.airports]


def test_search_near_location_respects_max_results(repository, nyc):
    result = repository.search_near_location("New York", nyc, max_distance_km=50, max_results=3)
    assert [a.iata_code for a in result.airports] == ["LGA", "EWR", "TEB"]


def test_search_near_location_respects_max_distance(repository, nyc):
    result = repository.search_near_location("New York", nyc, max_distance_km=15)
    assert [a.iata_code for a in result.airports] == ["LGA", "EWR"]


def test_search_near_location_caps_each_class_without_backfill():
    origin = Coordinates(10.0, 10.0)
    records = [
        _record("AAA", "Alpha International", 10.01, 10.0),
        _record("BBB", "Bravo International", 10.02, 10.0),
        _record("CCC", "Charlie International", 10.03, 10.0),
        _record("DDD", "Delta International", 10.04, 10.0),
        _record("EEE", "Echo International", 10.05, 10.0),
        _record("FFF", "Foxtrot Municipal", 10.06, 10.0),
    ]
    repo = _repository_for(records)

    result = repo.search_near_location("Origin", origin, max_distance_km=100, max_results=5)

    assert [a.iata_code for a in result.airports] == ["AAA", "BBB", "CCC", "FFF"]


def test_proximity_policy_is_configurable():
    origin = Coordinates(10.0, 10.0)
    records = [
        _record("AAA", "Alpha International", 10.01, 10.0),
        _record("BBB", "Bravo Municipal", 10.02, 10.0),
        _record("CCC", "Charlie Municipal", 10.03, 10.0),
    ]
    repo = _repository_for(records, policy=ProximityPolicy(international=0, domestic=1))

    result = repo.search_near_location("Origin", origin)

    assert [a.iata_code for a in result.airports] == ["BBB"]


def test_search_near_location_uses_city_index_without_coordinates(repository):
    result = repository.search_near_location("Sao Paulo", max_distance_km=50)

    assert result.search_location.coordinates == Coordinates(-23.435556, -46.473056)
    assert [a.iata_code for a in result.airports] == ["GRU"]
    assert result.airports[0].distance == pytest.approx(0.0)


def test_search_near_location_unknown_city_raises(repository):
    with pytest.raises(CoordinatesUnavailable) as excinfo:
        repository.search_near_location("Atlantis")

    assert excinfo.value.location_name == "Atlantis"
    assert "Could not find coordinates for location: Atlantis" in str(excinfo.value)


@pytest.mark.parametrize("location", ["", "   ", "?!"])
def test_search_near_location_blank_name_does_not_match_blank_city(location):
    repo = _repository_for([_record("AAA", "Nameless Field", 10.0, 10.0, city="")])

    assert repo.coordinates_for_city(location) is None
    with pytest.raises(CoordinatesUnavailable):
        repo.search_near_location(location)


def test_search_near_location_honours_cancellation(repository, nyc):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled):
        repository.search_near_location("New York", nyc, cancel_event=cancel)


def test_search_near_location_empty_when_nothing_in_range(repository):
    result = repository.search_near_location("Middle of the ocean", Coordinates(0.5, -30.0))
    assert result.airports == []


# scored text search

def test_search_by_query_matches_city(repository):
    results = repository.search_by_query("Los Angeles")
    assert results[0].iata_code == "LAX"


def test_search_by_query_ranks_exact_code_first(repository):
    results = repository.search_by_query("jfk")
    assert results[0].iata_code == "JFK"


def test_search_by_query_ignores_diacritics(repository):
    results = repository.search_by_query("sao paulo")
    assert [a.iata_code for a in results] == ["GRU"]


def test_search_by_query_excludes_military_bases(repository):
    assert repository.search_by_query("Brooklyn") == []
    assert "NBK" not in [a.iata_code for a in repository.search_by_query("New York")]


def test_search_by_query_keeps_dataset_order_for_ties(repository):
    results = repository.search_by_query("united states")
    assert [a.iata_code for a in results] == ["JFK", "LGA", "EWR", "TEB", "HPN", "LAX", "BUR", "LHR"]


@pytest.mark.parametrize("text", ["", "   ", "?!"])
def test_search_by_query_empty_query_returns_nothing(repository, text):
    assert repository.search_by_query(text) == []


def test_search_by_query_caps_results():
    records = [_record(f"A{chr(65 + i // 26)}{chr(65 + i % 26)}", f"Test Field {i}", 1.0, 1.0 + i) for i in range(30)]
    repo = _repository_for(records)

    assert len(repo.search_by_query("test")) == 20


# loading

def test_dataset_is_loaded_once(sample_dataset_text):
    loader = MagicMock(spec=DatasetLoader)
    loader.load.return_value = DatasetLoader.load_text(sample_dataset_text, source="sample")
    repo = AirportRepository(loader)

    assert not repo.loaded
    repo.get_by_iata_code("JFK")
    repo.search_by_query("London")

    loader.load.assert_called_once()
    assert repo.loaded
    assert repo.source == "sample"
    assert len(repo) == 10


def test_ensure_loaded_returns_the_same_indexes(sample_dataset_text):
    loader = MagicMock(spec=DatasetLoader)
    loader.load.return_value = DatasetLoader.load_text(sample_dataset_text, source="sample")
    repo = AirportRepository(loader)

    first = repo.ensure_loaded()

    assert repo.ensure_loaded() is first
    assert "JFK" in first.by_iata
    loader.load.assert_called_once()


def test_concurrent_first_queries_share_one_load(sample_dataset_text):
    dataset = DatasetLoader.load_text(sample_dataset_text, source="sample")

    def slow_load(cancel_event=None):
        time.sleep(0.05)
        return dataset

    loader = MagicMock(spec=DatasetLoader)
    loader.load.side_effect = slow_load
    repo = AirportRepository(loader)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: repo.get_by_iata_code("LHR"), range(8)))

    assert loader.load.call_count == 1
    assert all(r is not None and r.iata_code == "LHR" for r in results)


def test_reload_replaces_dataset(sample_dataset_text):
    loader = MagicMock(spec=DatasetLoader)
    loader.load.side_effect = [
        DatasetLoader.load_text(sample_dataset_text, source="sample"),
        DatasetLoader.load_fallback(),
    ]
    repo = AirportRepository(loader)

    assert repo.get_by_iata_code("TEB") is not None
    repo.reload()

    assert repo.source == "fallback"
    assert repo.get_by_iata_code("TEB") is None
    assert repo.get_by_iata_code("CDG") is not None
