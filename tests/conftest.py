"""Shared pytest fixtures for the airport_search package tests.

Provides a small OpenFlights-format dataset, repositories loaded from it, and
configuration objects that keep logs under ``tmp_path``. Nothing here touches
the network.
"""

from pathlib import Path
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
import requests

from airport_search.config import AppConfig
from airport_search.dataset import DatasetLoader
from airport_search.models import Coordinates, PlaceRecord
from airport_search.repository import AirportRepository

SAMPLE_DATASET = "\n".join(
    [
        '3797,"John F Kennedy International Airport","New York","United States","JFK","KJFK",40.63980103,-73.77890015,13,-5,"A","America/New_York","airport","OurAirports"',
        '3697,"La Guardia Airport","New York","United States","LGA","KLGA",40.77719879,-73.87259674,21,-5,"A","America/New_York","airport","OurAirports"',
        '3494,"Newark Liberty International Airport","Newark","United States","EWR","KEWR",40.692501068115234,-74.168701171875,18,-5,"A","America/New_York","airport","OurAirports"',
        '3857,"Teterboro Airport","Teterboro","United States","TEB","KTEB",40.85010147,-74.06079865,9,-5,"A","America/New_York","airport","OurAirports"',
        '3669,"Westchester County Airport","White Plains","United States","HPN","KHPN",41.06700134,-73.70760345,439,-5,"A","America/New_York","airport","OurAirports"',
        '9001,"Brooklyn Naval Air Station","New York","United States","NBK","KNBK",40.5900,-73.8900,10,-5,"A","America/New_York","airport","OurAirports"',
        '3484,"Los Angeles International Airport","Los Angeles","United States","LAX","KLAX",33.94250107,-118.4079971,125,-8,"A","America/Los_Angeles","airport","OurAirports"',
        '3644,"Bob Hope Airport","Burbank","United States","BUR","KBUR",34.20069885,-118.3590012,778,-8,"A","America/Los_Angeles","airport","OurAirports"',
        '507,"London Heathrow Airport","London","United Kingdom","LHR","EGLL",51.4706,-0.461941,83,0,"E","Europe/London","airport","OurAirports"',
        '2564,"Guarulhos - Governador André Franco Montoro International Airport","São Paulo","Brazil","GRU","SBGR",-23.435556,-46.473056,2459,-3,"S","America/Sao_Paulo","airport","OurAirports"',
        # rows below are dropped on load
        '8001,"Penn Station","New York","United States","ZYP",\\N,40.7506,-73.9935,0,-5,"A","America/New_York","station","User"',
        '8002,"Some Private Strip","Nowhere","United States",\\N,"K00X",40.5,-74.2,10,-5,"A","America/New_York","airport","OurAirports"',
        '8003,"Null Island Airport","Null","Nowhere","NUL","XXXX",0,0,0,0,"U","Etc/UTC","airport","OurAirports"',
        '8004,"Lowercase Code Airport","Somewhere","United States","abc","KABC",41.0,-75.0,0,-5,"A","America/New_York","airport","OurAirports"',
        "8005,this line is truncated",
    ]
)

RETAINED_CODES = ["JFK", "LGA", "EWR", "TEB", "HPN", "NBK", "LAX", "BUR", "LHR", "GRU"]

NYC = Coordinates(40.7128, -74.0060)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config fixture pointing logs at a temporary directory."""
    return AppConfig(
        log_directory=tmp_path,
        log_level="INFO",
        retry_attempts=1,
        retry_delay_seconds=0.0,
    )


@pytest.fixture
def sample_dataset_text() -> str:
    return SAMPLE_DATASET


@pytest.fixture
def repository(sample_dataset_text: str) -> AirportRepository:
    """Repository loaded from the sample dataset; its loader is never called."""
    loader = MagicMock(spec=DatasetLoader)
    repo = AirportRepository(loader)
    repo.load_dataset(DatasetLoader.load_text(sample_dataset_text, source="sample"))
    return repo


class FakeGeocoder:
    """In-memory geocoding client recording its calls."""

    enabled = True

    def __init__(
        self,
        coordinates: Optional[Coordinates] = None,
        places: Optional[List[PlaceRecord]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.coordinates = coordinates
        self.places = places or []
        self.error = error
        self.resolve_calls: List[str] = []
        self.search_calls: List[tuple] = []
        self.closed = False

    def resolve_coordinates(self, location_text, cancel_event=None):
        self.resolve_calls.append(location_text)
        if self.error is not None:
            raise self.error
        return self.coordinates

    def search_places(self, query_text, coordinates=None, cancel_event=None):
        self.search_calls.append((query_text, coordinates))
        if self.error is not None:
            raise self.error
        return list(self.places)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_geocoder_factory():
    return FakeGeocoder


def make_response(payload=None, *, status_code: int = 200, text: str = "", headers=None) -> MagicMock:
    """Build a ``requests.Response``-like mock."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.text = text
    response.json.return_value = payload
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} error")
        error.response = response
        response.raise_for_status.side_effect = error
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def nyc() -> Coordinates:
    return NYC
