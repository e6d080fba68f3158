"""Parse the flat OpenFlights-style airport dataset into ``RawRecord`` rows.

Each line carries 14 comma-delimited fields (double-quoted when they contain
commas): id, name, city, country, IATA, ICAO, latitude, longitude, altitude,
UTC offset, DST flag, timezone name, type, source.

Parsing is lossy: a row that is malformed or fails validation is
dropped and counted, never raised to the caller.
"""

import csv
import logging
import re
import unicodedata
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from airport_search.errors import MalformedRecord
from airport_search.models import RawRecord

LOGGER = logging.getLogger(__name__)

FIELD_COUNT = 14
NULL_TOKEN = "\\N"
IATA_PATTERN = re.compile(r"^[A-Z]{3}$")
_NON_WORD = re.compile(r"[^\w\s]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str) -> str:
    """Strip diacritics, lowercase, and collapse punctuation to single spaces."""
    decomposed = unicodedata.normalize("NFKD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    lowered = _NON_WORD.sub(" ", stripped.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def split_line(line: str) -> List[str]:
    """Split one dataset line into fields, honouring double quotes."""
    try:
        return next(csv.reader([line]))
    except (csv.Error, StopIteration) as exc:
        raise MalformedRecord(f"unparsable line: {line[:80]!r}") from exc


def _to_optional_code(value: str) -> Optional[str]:
    text = (value or "").strip()
    if not text or text == NULL_TOKEN:
        return None
    return text


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def is_valid_iata(code: Optional[str]) -> bool:
    return bool(code) and IATA_PATTERN.match(code) is not None


def validate_record(record: RawRecord) -> RawRecord:
    """Return ``record`` if it should be retained, else raise ``MalformedRecord``."""
    if record.type != "airport":
        raise MalformedRecord(f"record {record.id} has type {record.type!r}")
    if not is_valid_iata(record.iata):
        raise MalformedRecord(f"record {record.id} has invalid IATA {record.iata!r}")
    if record.lat == 0 or record.lng == 0:
        raise MalformedRecord(f"record {record.id} has no coordinates")
    return record


def parse_fields(fields: List[str]) -> RawRecord:
    """Convert a list of 14 raw fields into a validated ``RawRecord``."""
    if len(fields) < FIELD_COUNT:
        raise MalformedRecord(f"expected {FIELD_COUNT} fields, got {len(fields)}")

    record = RawRecord(
        id=_to_int(fields[0]),
        name=fields[1].strip(),
        city=fields[2].strip(),
        country=fields[3].strip(),
        iata=_to_optional_code(fields[4]),
        icao=_to_optional_code(fields[5]),
        lat=_to_float(fields[6]),
        lng=_to_float(fields[7]),
        altitude=_to_int(fields[8]),
        timezone_offset=_to_float(fields[9]),
        dst=fields[10].strip(),
        tz=fields[11].strip(),
        type=fields[12].strip(),
        source=fields[13].strip(),
    )
    return validate_record(record)


def parse_line(line: str) -> RawRecord:
    return parse_fields(split_line(line))


def parse_dataset(text: str) -> Tuple[List[RawRecord], int]:
    """Parse the whole dataset body.

    Returns:
        A tuple of the retained records and the number of dropped lines.
    """
    records: List[RawRecord] = []
    skipped = 0
    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            records.append(parse_line(line))
        except MalformedRecord:
            skipped += 1
    LOGGER.debug("Parsed %d airport rows (%d skipped)", len(records), skipped)
    return records, skipped


def record_from_mapping(item: Mapping[str, Any], index: int = 0, source: str = "proxy") -> RawRecord:
    """Build a validated record from a pre-shaped ``{iata, name, city, country, lat, lng}`` item."""
    if not isinstance(item, Mapping):
        raise MalformedRecord(f"proxy item {index} is not an object")
    iata = _to_optional_code(str(item.get("iata") or ""))
    record = RawRecord(
        id=_to_int(item.get("id", index)),
        name=str(item.get("name") or "").strip(),
        city=str(item.get("city") or "").strip(),
        country=str(item.get("country") or "").strip(),
        iata=iata.upper() if iata else None,
        icao=_to_optional_code(str(item.get("icao") or "")),
        lat=_to_float(item.get("lat")),
        lng=_to_float(item.get("lng")),
        type=str(item.get("type") or "airport"),
        source=source,
    )
    return validate_record(record)


def parse_mappings(items: Iterable[Mapping[str, Any]], source: str = "proxy") -> Tuple[List[RawRecord], int]:
    records: List[RawRecord] = []
    skipped = 0
    for index, item in enumerate(items):
        try:
            records.append(record_from_mapping(item, index=index, source=source))
        except MalformedRecord:
            skipped += 1
    LOGGER.debug("Mapped %d proxy airport items (%d skipped)", len(records), skipped)
    return records, skipped


__all__ = [
    "FIELD_COUNT",
    "IATA_PATTERN",
    "is_valid_iata",
    "normalize_text",
    "parse_dataset",
    "parse_fields",
    "parse_line",
    "parse_mappings",
    "record_from_mapping",
    "split_line",
    "validate_record",
]
