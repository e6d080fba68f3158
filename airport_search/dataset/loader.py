"""Fetch the airport dataset through an ordered fallback chain.

1) A proxy endpoint returning pre-shaped JSON records (when configured).
2) A direct fetch of the flat OpenFlights-style dataset.
3) The embedded minimal fallback list.

Failures of (1) and (2) are logged and recovered; the loader itself never
raises except for caller cancellation.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import requests

from airport_search.config import AppConfig, OPENFLIGHTS_DATASET_URL
from airport_search.dataset.fallback import FALLBACK_AIRPORTS
from airport_search.dataset.parser import parse_dataset, parse_mappings
from airport_search.errors import DatasetUnavailable
from airport_search.logging_utils import perf, perf_span
from airport_search.models import RawRecord
from airport_search.network import get_json, get_text

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDataset:
    records: List[RawRecord]
    source: str
    skipped: int = 0


class DatasetLoader:
    """Loads airport records from the configured sources."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        dataset_url: str = OPENFLIGHTS_DATASET_URL,
        proxy_url: Optional[str] = None,
        timeout: float = 10.0,
        attempts: int = 2,
        delay_seconds: float = 1.0,
        offline: bool = False,
    ) -> None:
        self._session = session or requests.Session()
        self._dataset_url = dataset_url
        self._proxy_url = proxy_url
        self._timeout = timeout
        self._attempts = attempts
        self._delay_seconds = delay_seconds
        self._offline = offline

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        session: Optional[requests.Session] = None,
        offline: bool = False,
    ) -> "DatasetLoader":
        return cls(
            session=session,
            dataset_url=config.dataset_url,
            proxy_url=config.dataset_proxy_url,
            timeout=config.request_timeout,
            attempts=config.retry_attempts,
            delay_seconds=config.retry_delay_seconds,
            offline=offline,
        )

    def _request_kwargs(self, cancel_event: Optional[threading.Event], label: str) -> dict:
        return {
            "timeout": self._timeout,
            "attempts": self._attempts,
            "delay_seconds": self._delay_seconds,
            "cancel_event": cancel_event,
            "label": label,
        }

    def load_from_proxy(self, cancel_event: Optional[threading.Event] = None) -> LoadedDataset:
        if not self._proxy_url:
            raise DatasetUnavailable("no dataset proxy configured")
        try:
            payload = get_json(
                self._session,
                self._proxy_url,
                **self._request_kwargs(cancel_event, "dataset.proxy"),
            )
        except (requests.RequestException, ValueError) as exc:
            raise DatasetUnavailable(f"dataset proxy failed: {exc}") from exc

        if not isinstance(payload, dict) or not payload.get("success"):
            raise DatasetUnavailable("dataset proxy returned an unsuccessful payload")
        items = payload.get("data")
        if not isinstance(items, list):
            raise DatasetUnavailable("dataset proxy payload has no data list")

        records, skipped = parse_mappings(items, source="proxy")
        if not records:
            raise DatasetUnavailable("dataset proxy returned no usable airports")
        return LoadedDataset(records, "proxy", skipped)

    def load_direct(self, cancel_event: Optional[threading.Event] = None) -> LoadedDataset:
        try:
            text = get_text(
                self._session,
                self._dataset_url,
                **self._request_kwargs(cancel_event, "dataset.direct"),
            )
        except requests.RequestException as exc:
            raise DatasetUnavailable(f"dataset fetch failed: {exc}") from exc
        return self.load_text(text, source="direct")

    @staticmethod
    def load_text(text: str, source: str = "text") -> LoadedDataset:
        with perf_span("dataset.parse", tags={"source": source}, logger=LOGGER):
            records, skipped = parse_dataset(text)
        if not records:
            raise DatasetUnavailable(f"{source} dataset contained no usable airports")
        return LoadedDataset(records, source, skipped)

    @staticmethod
    def load_fallback() -> LoadedDataset:
        return LoadedDataset(list(FALLBACK_AIRPORTS), "fallback")

    @perf("dataset.load", tags={"component": "dataset"}, level=logging.INFO)
    def load(self, cancel_event: Optional[threading.Event] = None) -> LoadedDataset:
        """Walk the fallback chain and return the first usable dataset."""
        if self._offline:
            LOGGER.info("Offline mode: using embedded fallback airport dataset")
            return self.load_fallback()

        for name, step in (("proxy", self.load_from_proxy), ("direct", self.load_direct)):
            if name == "proxy" and not self._proxy_url:
                continue
            try:
                dataset = step(cancel_event)
            except DatasetUnavailable as exc:
                LOGGER.warning("Airport dataset source %s unavailable: %s", name, exc)
                continue
            LOGGER.info(
                "Loaded %d airports from %s source (%d rows skipped)",
                len(dataset.records),
                dataset.source,
                dataset.skipped,
            )
            return dataset

        LOGGER.warning("All airport dataset sources failed; using embedded fallback list")
        return self.load_fallback()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "DatasetLoader":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


__all__ = ["DatasetLoader", "LoadedDataset"]
