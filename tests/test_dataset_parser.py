import pytest

from airport_search.dataset.parser import (
    normalize_text,
    parse_dataset,
    parse_line,
    parse_mappings,
    split_line,
)
from airport_search.errors import MalformedRecord

JFK_LINE = (
    '3797,"John F Kennedy International Airport","New York","United States","JFK","KJFK",'
    '40.63980103,-73.77890015,13,-5,"A","America/New_York","airport","OurAirports"'
)


def test_split_line_respects_quoted_commas():
    fields = split_line('1,"Washington, D.C. Heliport","Washington, D.C.","United States"')
    assert fields == ["1", "Washington, D.C. Heliport", "Washington, D.C.", "United States"]


def test_parse_line_builds_record():
    record = parse_line(JFK_LINE)

    assert record.id == 3797
    assert record.name == "John F Kennedy International Airport"
    assert record.city == "New York"
    assert record.iata == "JFK"
    assert record.icao == "KJFK"
    assert record.lat == pytest.approx(40.63980103)
    assert record.lng == pytest.approx(-73.77890015)
    assert record.altitude == 13
    assert record.timezone_offset == -5
    assert record.tz == "America/New_York"
    assert record.type == "airport"
    assert record.source == "OurAirports"


@pytest.mark.parametrize(
    "line",
    [
        "1,too,short",
        JFK_LINE.replace('"airport"', '"station"'),
        JFK_LINE.replace('"JFK"', "\\N"),
        JFK_LINE.replace('"JFK"', '"jfk"'),
        JFK_LINE.replace('"JFK"', '"JFKX"'),
        JFK_LINE.replace("40.63980103", "0"),
        JFK_LINE.replace("-73.77890015", "not-a-number"),
    ],
)
def test_parse_line_rejects_invalid_rows(line):
    with pytest.raises(MalformedRecord):
        parse_line(line)


def test_parse_dataset_skips_bad_rows_without_raising(sample_dataset_text):
    records, skipped = parse_dataset(sample_dataset_text)

    assert [r.iata for r in records] == [
        "JFK", "LGA", "EWR", "TEB", "HPN", "NBK", "LAX", "BUR", "LHR", "GRU",
    ]
    assert skipped == 5


def test_parse_dataset_ignores_blank_lines():
    records, skipped = parse_dataset(f"\n{JFK_LINE}\n\n")
    assert len(records) == 1
    assert skipped == 0


def test_parse_mappings_validates_proxy_items():
    items = [
        {"iata": "jfk", "name": "JFK Intl", "city": "New York", "country": "United States", "lat": 40.6, "lng": -73.7},
        {"iata": None, "name": "No Code", "city": "X", "country": "Y", "lat": 1, "lng": 1},
        {"iata": "ZZZ", "name": "Zero", "city": "X", "country": "Y", "lat": 0, "lng": 0},
        "not an object",
    ]

    records, skipped = parse_mappings(items)

    assert [r.iata for r in records] == ["JFK"]
    assert records[0].source == "proxy"
    assert skipped == 3


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("São Paulo", "sao paulo"),
        ("  Zürich-Kloten  ", "zurich kloten"),
        ("St. John's", "st john s"),
        ("MÉXICO", "mexico"),
        ("", ""),
    ],
)
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected
