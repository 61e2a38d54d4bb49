"""Command-line interface for KMB route lookups and arrival boards."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from kmb_eta.adapters.cli.board_formatter import BoardFormatter, is_origin_terminus, to_jsonable
from kmb_eta.adapters.config import AppConfig
from kmb_eta.adapters.kmb_api import (
    KmbEtaRepository,
    KmbRouteCatalog,
    KmbStopNameResolver,
    KmbStopSequenceResolver,
    RetryingFetcher,
)
from kmb_eta.application.services import BoardSession, EtaReconciler, TransitBoardService
from kmb_eta.domain.models import DataUnavailable, Route

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_UNAVAILABLE = 2


def build_board_service(
    config: AppConfig, session: aiohttp.ClientSession
) -> TransitBoardService:
    """Wire the KMB adapters and application services together."""
    fetcher = RetryingFetcher(session, timeout_seconds=config.request_timeout_seconds)
    base_url = config.api_base_url

    route_catalog = KmbRouteCatalog(
        fetcher, base_url, language=config.language, retry_policy=config.catalog_retry_policy
    )
    stop_sequence_resolver = KmbStopSequenceResolver(
        fetcher, base_url, retry_policy=config.catalog_retry_policy
    )
    stop_name_resolver = KmbStopNameResolver(
        fetcher, base_url, language=config.language, retry_policy=config.lookup_retry_policy
    )
    eta_repository = KmbEtaRepository(
        fetcher, base_url, language=config.language, retry_policy=config.lookup_retry_policy
    )
    eta_reconciler = EtaReconciler(
        eta_repository,
        alternate_service_types=config.alternate_service_types,
        timezone=config.timezone,
    )
    return TransitBoardService(
        route_catalog,
        stop_sequence_resolver,
        stop_name_resolver,
        eta_reconciler,
        max_concurrent_lookups=config.max_concurrent_lookups,
    )


def _print_json(value: Any) -> None:
    print(json.dumps(to_jsonable(value), indent=2, ensure_ascii=False))


def _fail(message: str, exit_code: int) -> int:
    print(message, file=sys.stderr)
    return exit_code


async def _find_variant(
    service: TransitBoardService, formatter: BoardFormatter, code: str, variant: int
) -> Route | int:
    """Look up one variant of a route code, or return an exit code."""
    if not code.strip():
        return _fail(formatter.message("enter_code"), EXIT_NOT_FOUND)
    routes = await service.search_routes(code)
    if isinstance(routes, DataUnavailable):
        return _fail(formatter.message("routes_unavailable"), EXIT_UNAVAILABLE)
    if not routes or not 1 <= variant <= len(routes):
        return _fail(formatter.message("route_not_found"), EXIT_NOT_FOUND)
    return routes[variant - 1]


async def cmd_routes(
    service: TransitBoardService, formatter: BoardFormatter, args: argparse.Namespace
) -> int:
    """List every variant of a route code."""
    if not args.code.strip():
        return _fail(formatter.message("enter_code"), EXIT_NOT_FOUND)
    routes = await service.search_routes(args.code)
    if isinstance(routes, DataUnavailable):
        return _fail(formatter.message("routes_unavailable"), EXIT_UNAVAILABLE)
    if args.json:
        _print_json(routes)
        return 0 if routes else EXIT_NOT_FOUND
    if not routes:
        return _fail(formatter.message("route_not_found"), EXIT_NOT_FOUND)
    for index, route in enumerate(routes, start=1):
        print(f"  [{index}] {formatter.format_route(route)}")
    return 0


async def cmd_stops(
    service: TransitBoardService, formatter: BoardFormatter, args: argparse.Namespace
) -> int:
    """List the stops of one route variant."""
    route = await _find_variant(service, formatter, args.code, args.variant)
    if isinstance(route, int):
        return route
    stops = await service.list_stops(route)
    if isinstance(stops, DataUnavailable) or not stops:
        return _fail(formatter.message("stops_unavailable"), EXIT_UNAVAILABLE)
    if args.json:
        _print_json(stops)
        return 0
    print(formatter.format_route(route))
    for stop, details in stops:
        print(f"  {formatter.format_stop(stop, details)}  ({stop.stop_id})")
    return 0


async def cmd_eta(
    service: TransitBoardService, formatter: BoardFormatter, args: argparse.Namespace
) -> int:
    """Show the arrival board for a stop id and route code."""
    if not args.code.strip():
        return _fail(formatter.message("enter_code"), EXIT_NOT_FOUND)
    board = await service.get_board(args.stop, args.code.strip().upper())
    if args.json:
        _print_json(board)
    else:
        for line in formatter.format_board(board, stop_label=args.stop):
            print(line)
    return EXIT_UNAVAILABLE if isinstance(board, DataUnavailable) else 0


async def cmd_board(
    service: TransitBoardService, formatter: BoardFormatter, args: argparse.Namespace
) -> int:
    """Search, pick a variant and a stop, and show its board through a session."""
    if not args.code.strip():
        return _fail(formatter.message("enter_code"), EXIT_NOT_FOUND)
    session = BoardSession(service, auto_select_first_route=args.variant == 1)

    routes = await session.search(args.code)
    if isinstance(routes, DataUnavailable):
        return _fail(formatter.message("routes_unavailable"), EXIT_UNAVAILABLE)
    if not routes or not 1 <= args.variant <= len(routes):
        return _fail(formatter.message("route_not_found"), EXIT_NOT_FOUND)
    if args.variant != 1:
        await session.select_route(routes[args.variant - 1])

    state = session.state
    route = state.selected_route
    if route is None or isinstance(state.stops, DataUnavailable) or not state.stops:
        return _fail(formatter.message("stops_unavailable"), EXIT_UNAVAILABLE)

    selected = next(((s, d) for s, d in state.stops if s.sequence_number == args.seq), None)
    if selected is None:
        return _fail(formatter.message("stop_not_found"), EXIT_NOT_FOUND)
    stop, details = selected

    board = await session.select_stop(stop)
    if board is None:
        return _fail(formatter.message("eta_unavailable", stop=details.stop_id), EXIT_UNAVAILABLE)
    if args.json:
        _print_json({"route": route, "stop": list(selected), "board": board})
    else:
        print(formatter.format_route(route))
        print(formatter.format_stop(stop, details))
        lines = formatter.format_board(
            board,
            stop_label=formatter.stop_name(details),
            is_origin_terminus=is_origin_terminus(route, stop),
        )
        for line in lines:
            print(line)
    return EXIT_UNAVAILABLE if isinstance(board, DataUnavailable) else 0


COMMANDS = {
    "routes": cmd_routes,
    "stops": cmd_stops,
    "eta": cmd_eta,
    "board": cmd_board,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="KMB route lookup and arrival boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kmb-eta routes 1A
  kmb-eta stops 1A --variant 2
  kmb-eta eta 1A --stop 18492910339410B1
  kmb-eta board 1A --seq 5 --lang en
        """,
    )
    parser.add_argument(
        "--lang", choices=["tc", "sc", "en"], help="Language for names and messages"
    )
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--log-level", help="Logging level (default from LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    routes_parser = subparsers.add_parser("routes", help="List variants of a route code")
    routes_parser.add_argument("code", help="Route code (e.g., 1A)")

    stops_parser = subparsers.add_parser("stops", help="List the stops of a route variant")
    stops_parser.add_argument("code", help="Route code")
    stops_parser.add_argument("--variant", type=int, default=1, help="Variant number from 'routes'")

    eta_parser = subparsers.add_parser("eta", help="Show the arrival board for a stop")
    eta_parser.add_argument("code", help="Route code")
    eta_parser.add_argument("--stop", required=True, help="Stop id")

    board_parser = subparsers.add_parser("board", help="Pick a variant and stop, show its board")
    board_parser.add_argument("code", help="Route code")
    board_parser.add_argument("--variant", type=int, default=1, help="Variant number from 'routes'")
    board_parser.add_argument("--seq", type=int, default=1, help="Stop sequence number")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = AppConfig()
    if args.config:
        config.config_file = args.config
    config.load_toml()
    if args.lang:
        config.language = args.lang

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    formatter = BoardFormatter(config.language)
    async with aiohttp.ClientSession() as session:
        service = build_board_service(config, session)
        return await COMMANDS[args.command](service, formatter, args)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
