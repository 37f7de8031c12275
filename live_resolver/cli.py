"""
live_resolver CLI entry point.

Resolves one or more room ids on a platform and prints the result.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from live_resolver import __version__
from live_resolver.config import Config, ConfigError, load_config
from live_resolver.errors import (
    NetworkError,
    ProviderNotFoundError,
    ResolveError,
    SchemaMismatchError,
)
from live_resolver.models import LiveNode, NotLive
from live_resolver.providers import ProviderRegistry
from live_resolver.resolver import RoomOutcome, resolve_rooms
from live_resolver.transport import HttpClient

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_NOT_LIVE = 2
EXIT_NETWORK_ERROR = 3
EXIT_UPSTREAM_ERROR = 4
EXIT_INTERNAL_ERROR = 5


def setup_logging(level: str = "info") -> None:
    """Configure logging to stderr (stdout carries results)."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _parse_header(value: str) -> tuple[str, str]:
    """Parse a 'Name: value' header argument."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header: {value!r}. Use 'Name: value'")
    return name.strip(), header_value.strip()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="live-resolver",
        description="Resolve live-streaming room ids into playable stream URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  live-resolver bilibili 6
  live-resolver bilibili 6 21452505 --json
  live-resolver 173 96 --header "Referer: https://www.173.com/"
  live-resolver --list-platforms

Environment Variables:
  LIVE_RESOLVER_HTTP_TIMEOUT, LIVE_RESOLVER_USER_AGENT, LIVE_RESOLVER_LOG_LEVEL
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--list-platforms",
        action="store_true",
        help="List supported platforms and exit",
    )

    parser.add_argument("platform", nargs="?", help="Platform key, e.g. bilibili")
    parser.add_argument("room_ids", nargs="*", metavar="ROOM_ID", help="Room id(s) to resolve")

    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # Configuration
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("./config.yaml"),
        metavar="PATH",
        help="Path to config file (default: ./config.yaml)",
    )

    # HTTP
    http_group = parser.add_argument_group("HTTP")
    http_group.add_argument(
        "--header",
        "-H",
        type=_parse_header,
        action="append",
        dest="headers",
        metavar="'NAME: VALUE'",
        help="Extra request header (repeatable)",
    )
    http_group.add_argument(
        "--timeout",
        "-t",
        type=float,
        metavar="SECONDS",
        help="Per-request timeout in seconds (default: 10)",
    )
    http_group.add_argument(
        "--user-agent",
        metavar="TEXT",
        help="User-Agent header sent with every request",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        metavar="LEVEL",
        help="Log level: debug, info, warning, error",
    )

    return parser.parse_args(argv)


def _set_nested(d: dict, path: tuple, value: Any) -> None:
    """Set a nested dictionary value."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def args_to_dict(args: argparse.Namespace) -> dict:
    """Convert argparse namespace to nested config dict."""
    result: dict = {}

    mappings = {
        "timeout": ("http", "timeout"),
        "user_agent": ("http", "user_agent"),
        "log_level": ("logging", "level"),
    }

    for arg_name, path in mappings.items():
        value = getattr(args, arg_name, None)
        if value is None:
            continue
        _set_nested(result, path, value)

    # Headers apply to the selected platform only
    if getattr(args, "headers", None) and args.platform:
        _set_nested(result, ("headers", args.platform), dict(args.headers))

    return result


def outcome_exit_code(outcome: RoomOutcome) -> int:
    """Map a single room outcome to an exit code."""
    if isinstance(outcome, LiveNode):
        return EXIT_SUCCESS
    if isinstance(outcome, NotLive):
        return EXIT_NOT_LIVE
    if isinstance(outcome, NetworkError):
        return EXIT_NETWORK_ERROR
    if isinstance(outcome, ProviderNotFoundError):
        return EXIT_CONFIG_ERROR
    # Schema mismatches, missing tiers and any other upstream inconsistency
    if isinstance(outcome, ResolveError):
        return EXIT_UPSTREAM_ERROR
    return EXIT_INTERNAL_ERROR


def outcome_to_dict(room_id: str, outcome: RoomOutcome) -> dict[str, Any]:
    """JSON-friendly view of a room outcome."""
    if isinstance(outcome, (LiveNode, NotLive)):
        return outcome.to_dict()
    result: dict[str, Any] = {
        "room_id": room_id,
        "error": type(outcome).__name__,
        "message": str(outcome),
    }
    if isinstance(outcome, SchemaMismatchError):
        result["field"] = outcome.field
    return result


def print_outcome(room_id: str, outcome: RoomOutcome) -> None:
    """Print a human-readable room outcome."""
    if isinstance(outcome, LiveNode):
        print(f"{outcome.platform} room {outcome.room_id}: LIVE")
        if outcome.title:
            print(f"  Title: {outcome.title}")
        if outcome.anchor_name:
            print(f"  Anchor: {outcome.anchor_name}")
        if outcome.cover_url:
            print(f"  Cover: {outcome.cover_url}")
        if outcome.quality:
            print(f"  Quality: {outcome.quality}")
        if not outcome.stream_urls:
            print("  (no playable streams reported)")
        for url in outcome.stream_urls:
            print(f"  {url}")
    elif isinstance(outcome, NotLive):
        print(f"{outcome.platform} room {outcome.room_id}: not live")
    else:
        print(f"room {room_id}: error: {outcome}")


async def run_resolve(
    config: Config,
    platform: str,
    room_ids: Sequence[str],
    json_output: bool = False,
) -> int:
    """
    Resolve rooms and print results.

    Returns:
        Highest exit code across all rooms
    """
    async with HttpClient(
        user_agent=config.http.user_agent,
        timeout=config.http.timeout,
    ) as client:
        outcomes = await resolve_rooms(
            client, platform, room_ids, headers=config.headers_for(platform)
        )

    if json_output:
        output = {
            "platform": platform,
            "results": [
                outcome_to_dict(room_id, outcome) for room_id, outcome in zip(room_ids, outcomes)
            ],
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        for room_id, outcome in zip(room_ids, outcomes):
            print_outcome(room_id, outcome)

    return max((outcome_exit_code(o) for o in outcomes), default=EXIT_SUCCESS)


def list_platforms(json_output: bool) -> int:
    """Print registered platforms."""
    keys = ProviderRegistry.available()
    if json_output:
        print(json.dumps({"platforms": keys}, indent=2))
    else:
        for key in keys:
            provider_class = ProviderRegistry.get(key)
            homepage = provider_class.homepage if provider_class else ""
            print(f"  {key:<12} {homepage}")
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0=live, 1=config error, 2=not live, 3=network error, 4=upstream error,
        5=internal error
    """
    args = parse_args(argv)

    if args.list_platforms:
        return list_platforms(args.json_output)

    setup_logging("info")

    if not args.platform or not args.room_ids:
        logger.error("A platform and at least one room id are required")
        return EXIT_CONFIG_ERROR

    if ProviderRegistry.get(args.platform) is None:
        logger.error(
            f"Unknown platform '{args.platform}'. "
            f"Available platforms: {ProviderRegistry.available()}"
        )
        return EXIT_CONFIG_ERROR

    try:
        config = load_config(args.config, args_to_dict(args))
        setup_logging(config.logging.level)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    try:
        return asyncio.run(run_resolve(config, args.platform, args.room_ids, args.json_output))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_SUCCESS

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return EXIT_INTERNAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
