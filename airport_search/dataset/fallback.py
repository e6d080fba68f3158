"""Embedded minimal airport list used when no network dataset can be loaded."""

from typing import List

from airport_search.models import RawRecord

FALLBACK_AIRPORTS: List[RawRecord] = [
    RawRecord(1, "John F Kennedy International Airport", "New York", "United States", "JFK", "KJFK",
              40.6413, -73.7781, 13, -5, "A", "America/New_York", "airport", "fallback"),
    RawRecord(2, "Los Angeles International Airport", "Los Angeles", "United States", "LAX", "KLAX",
              33.9425, -118.4081, 125, -8, "A", "America/Los_Angeles", "airport", "fallback"),
    RawRecord(3, "O'Hare International Airport", "Chicago", "United States", "ORD", "KORD",
              41.9786, -87.9048, 672, -6, "A", "America/Chicago", "airport", "fallback"),
    RawRecord(4, "Hartsfield Jackson Atlanta International Airport", "Atlanta", "United States", "ATL", "KATL",
              33.6367, -84.4281, 1026, -5, "A", "America/New_York", "airport", "fallback"),
    RawRecord(5, "Miami International Airport", "Miami", "United States", "MIA", "KMIA",
              25.7932, -80.2906, 8, -5, "A", "America/New_York", "airport", "fallback"),
    RawRecord(6, "Seattle Tacoma International Airport", "Seattle", "United States", "SEA", "KSEA",
              47.4502, -122.3088, 131, -8, "A", "America/Los_Angeles", "airport", "fallback"),
    RawRecord(7, "Denver International Airport", "Denver", "United States", "DEN", "KDEN",
              39.8561, -104.6737, 5431, -7, "A", "America/Denver", "airport", "fallback"),
    RawRecord(8, "Phoenix Sky Harbor International Airport", "Phoenix", "United States", "PHX", "KPHX",
              33.4343, -112.0116, 1135, -7, "N", "America/Phoenix", "airport", "fallback"),
    RawRecord(9, "Heathrow Airport", "London", "United Kingdom", "LHR", "EGLL",
              51.4706, -0.4619, 83, 0, "E", "Europe/London", "airport", "fallback"),
    RawRecord(10, "Charles de Gaulle Airport", "Paris", "France", "CDG", "LFPG",
              49.0097, 2.5479, 392, 1, "E", "Europe/Paris", "airport", "fallback"),
]

__all__ = ["FALLBACK_AIRPORTS"]
