"""Fixtures for integration tests that hit the live dataset and places services."""

import pytest

from airport_search.config import AppConfig, load_config


@pytest.fixture(scope="session")
def app_config() -> AppConfig:
    try:
        return load_config()
    except ValueError as exc:
        pytest.skip(f"Configuration in .env is invalid: {exc}")
