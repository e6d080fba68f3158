"""Configuration utilities for the airport search engine.

This module reads environment variables (optionally from an `.env` file) and
produces an application configuration object consumed across the project.

See `.env.example` for supported keys, including `GOOGLE_PLACES_API_KEY`,
`PLACES_PROXY_URL`, `AIRPORT_DATASET_URL`, `AIRPORT_PROXY_URL`, the
`HTTP_*` network settings, `LOG_DIR`, `LOG_LEVEL`, and optional `APP_NAME`.

Usage example:

    from airport_search.config import load_config

    config = load_config()
    resolver = build_resolver(config)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, MutableMapping, Optional, TypeVar

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_FILE = REPO_ROOT / ".env"

OPENFLIGHTS_DATASET_URL = (
    "https://raw.githubusercontent.com/jpatokal/openflights/master/data/airports.dat"
)

T = TypeVar("T")


def _load_env_file(path: Path) -> Dict[str, str]:
    """Parse a dotenv-style file into a dictionary."""
    if not path.exists():
        return {}

    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip("\"'")
    return data


def _merge_envs(dotenv_values: Mapping[str, str], env: MutableMapping[str, str]) -> Dict[str, str]:
    """Merge dotenv values with the current environment, preferring os.environ."""
    merged = dict(dotenv_values)
    merged.update(env)  # os.environ wins
    return merged


def load_environment(env_file: Optional[Path] = None) -> Dict[str, str]:
    """Return the dotenv file merged with ``os.environ``."""
    return _merge_envs(_load_env_file(env_file or DEFAULT_ENV_FILE), os.environ)


def _parse_value(values: Mapping[str, str], key: str, default: T, cast: Callable[[str], T]) -> T:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be a valid {cast.__name__}, got {raw!r}") from exc


def _optional(values: Mapping[str, str], key: str) -> Optional[str]:
    value = (values.get(key) or "").strip()
    return value or None


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration values."""

    log_directory: Path
    log_level: str
    app_name: str = "airport-search"
    google_places_api_key: Optional[str] = None
    places_proxy_url: Optional[str] = None
    dataset_url: str = OPENFLIGHTS_DATASET_URL
    dataset_proxy_url: Optional[str] = None
    request_timeout: float = 10.0
    retry_attempts: int = 2
    retry_delay_seconds: float = 1.0


def load_config(env_file: Optional[Path] = None) -> AppConfig:
    """Load configuration values using environment defaults."""
    merged = load_environment(env_file)

    log_directory = Path(merged.get("LOG_DIR", REPO_ROOT / "logs"))
    if not log_directory.is_absolute():
        log_directory = REPO_ROOT / log_directory

    log_level = merged.get("LOG_LEVEL", "INFO").upper()

    retry_attempts = _parse_value(merged, "HTTP_RETRY_ATTEMPTS", 2, int)
    if retry_attempts < 1:
        raise ValueError("HTTP_RETRY_ATTEMPTS must be at least 1")

    return AppConfig(
        log_directory=log_directory,
        log_level=log_level,
        app_name=merged.get("APP_NAME", "airport-search"),
        google_places_api_key=_optional(merged, "GOOGLE_PLACES_API_KEY"),
        places_proxy_url=_optional(merged, "PLACES_PROXY_URL"),
        dataset_url=_optional(merged, "AIRPORT_DATASET_URL") or OPENFLIGHTS_DATASET_URL,
        dataset_proxy_url=_optional(merged, "AIRPORT_PROXY_URL"),
        request_timeout=_parse_value(merged, "HTTP_TIMEOUT", 10.0, float),
        retry_attempts=retry_attempts,
        retry_delay_seconds=_parse_value(merged, "HTTP_RETRY_DELAY", 1.0, float),
    )


__all__ = ["AppConfig", "load_config", "load_environment", "REPO_ROOT", "OPENFLIGHTS_DATASET_URL"]
