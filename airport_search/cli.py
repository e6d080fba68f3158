"""Command-line interface for airport lookups and searches.

Exit codes: 0 on success, 1 when configuration or a --dataset-file cannot be
loaded, 2 when a location cannot be resolved to coordinates.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from airport_search.config import AppConfig, REPO_ROOT, load_config
from airport_search.dataset import DatasetLoader, LoadedDataset
from airport_search.errors import CoordinatesUnavailable, DatasetUnavailable
from airport_search.logging_utils import configure_logging, generate_session_id, perf_span
from airport_search.models import Airport, Coordinates
from airport_search.resolver import AirportResolver, build_resolver, format_airport_with_distance

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_UNRESOLVED = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up and search airports.")
    parser.add_argument(
        "--dataset-file",
        type=Path,
        default=None,
        help="Load airports from a local OpenFlights-format file instead of the network.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip all network calls; use the embedded fallback dataset unless --dataset-file is given.",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    parser.add_argument("--quiet", action="store_true", help="Do not echo log lines to stdout.")

    sub = parser.add_subparsers(dest="command", required=True)

    code = sub.add_parser("code", help="Look up an airport by IATA code.")
    code.add_argument("iata")

    near = sub.add_parser("near", help="Find airports near a location.")
    near.add_argument("location")
    near.add_argument("--lat", type=float, default=None, help="Latitude of the location.")
    near.add_argument("--lng", type=float, default=None, help="Longitude of the location.")
    near.add_argument(
        "--max-distance",
        type=float,
        default=200.0,
        help="Search radius in kilometres (default: 200).",
    )
    near.add_argument(
        "--max-results",
        type=int,
        default=5,
        help="Maximum airports to return (default: 5).",
    )

    search = sub.add_parser("search", help="Free-text airport search.")
    search.add_argument("query")

    validate = sub.add_parser("validate", help="Check whether an IATA code exists.")
    validate.add_argument("iata")

    args = parser.parse_args(argv)
    if args.command == "near" and (args.lat is None) != (args.lng is None):
        parser.error("--lat and --lng must be given together")
    return args


def _print_airports(airports: List[Airport], as_json: bool) -> None:
    if as_json:
        print(json.dumps([airport.as_dict() for airport in airports], indent=2))
        return
    if not airports:
        print("No airports found.")
    for airport in airports:
        print(format_airport_with_distance(airport))


def _read_dataset_file(path: Path) -> LoadedDataset:
    text = path.read_text(encoding="utf-8")
    return DatasetLoader.load_text(text, source=str(path))


def _build(config: AppConfig, args: argparse.Namespace, dataset: Optional[LoadedDataset]) -> AirportResolver:
    resolver = build_resolver(config, offline=args.offline)
    if dataset is not None:
        resolver.repository.load_dataset(dataset)
    return resolver


def session_id_for(args: argparse.Namespace) -> str:
    """Log session id naming the subcommand, e.g. ``near-20240101T120000Z``."""
    return generate_session_id(args.command)


def run(args: argparse.Namespace, config: AppConfig) -> int:
    dataset = None
    if args.dataset_file is not None:
        try:
            dataset = _read_dataset_file(args.dataset_file)
        except (OSError, UnicodeDecodeError, DatasetUnavailable) as exc:
            LOGGER.error("Failed to load dataset file %s: %s", args.dataset_file, exc)
            return EXIT_CONFIG

    with _build(config, args, dataset) as resolver:
        with perf_span(f"cli.{args.command}", logger=LOGGER):
            if args.command == "code":
                airport = resolver.get_airport_by_iata_code(args.iata)
                _print_airports([airport] if airport else [], args.json)
            elif args.command == "validate":
                valid = resolver.validate_iata_code(args.iata)
                print("valid" if valid else "invalid")
            elif args.command == "search":
                _print_airports(resolver.search_airports_by_query(args.query), args.json)
            else:
                coordinates = Coordinates(args.lat, args.lng) if args.lat is not None else None
                try:
                    result = resolver.search_airports_near_location(
                        args.location,
                        coordinates,
                        max_distance_km=args.max_distance,
                        max_results=args.max_results,
                    )
                except CoordinatesUnavailable as exc:
                    LOGGER.error("%s", exc)
                    return EXIT_UNRESOLVED
                if args.json:
                    print(json.dumps(result.as_dict(), indent=2))
                else:
                    _print_airports(result.airports, False)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config()
    except ValueError as exc:
        # Fall back to a default log location so the failure is still captured.
        fallback = AppConfig(log_directory=REPO_ROOT / "logs", log_level="INFO")
        configure_logging(fallback, session_id=session_id_for(args), include_console=not args.quiet)
        LOGGER.error("Failed to load configuration: %s", exc)
        return EXIT_CONFIG

    configure_logging(config, session_id=session_id_for(args), include_console=not args.quiet)
    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
