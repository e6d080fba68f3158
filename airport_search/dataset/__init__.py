"""Airport dataset loading and parsing."""

from airport_search.dataset.fallback import FALLBACK_AIRPORTS
from airport_search.dataset.loader import DatasetLoader, LoadedDataset
from airport_search.dataset.parser import (
    is_valid_iata,
    normalize_text,
    parse_dataset,
    parse_line,
    parse_mappings,
)

__all__ = [
    "FALLBACK_AIRPORTS",
    "DatasetLoader",
    "LoadedDataset",
    "is_valid_iata",
    "normalize_text",
    "parse_dataset",
    "parse_line",
    "parse_mappings",
]
