"""Command-line utility for the artifact cache.

Usage:
    actions-cache get KEY [KEY ...] [-o FILE]
    actions-cache url KEY [KEY ...]
    actions-cache put KEY (DATA | -f FILE)

Environment:
    ACTIONS_RUNTIME_TOKEN: Bearer token (required)
    ACTIONS_CACHE_URL: Cache service endpoint (required)
    ACTIONS_CACHE_LOG_LEVEL: Logging level (default: INFO)

Exit Codes:
    0: Success
    1: No matching entry (get, url)
    2: Configuration error
    3: Rate limited; the requested wait is printed
    4: Any other cache service or network failure
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from actions_cache.cache.client import CacheClient
from actions_cache.cache.lookup import join_key_prefixes
from actions_cache.core.config import get_settings
from actions_cache.core.exceptions import CacheError, CacheErrorKind
from actions_cache.core.logging import configure_logging, get_logger


logger = get_logger(__name__)

# Fixed key space so entries written by this tool can be read back by it.
DEFAULT_KEY_SPACE = "9796546c64ab15ab7468b479f3b3c20d5840af05ac0f999ad7a089512d01572e"

EXIT_OK = 0
EXIT_MISS = 1
EXIT_CONFIG = 2
EXIT_RATE_LIMITED = 3
EXIT_TRANSPORT = 4

_EXIT_CODES: dict[CacheErrorKind, int] = {
    CacheErrorKind.CONFIGURATION: EXIT_CONFIG,
    CacheErrorKind.RATE_LIMITED: EXIT_RATE_LIMITED,
    CacheErrorKind.TRANSPORT: EXIT_TRANSPORT,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="actions-cache",
        description="Store and retrieve entries in the artifact cache",
        epilog="Exit 0 on success, 1 on a cache miss, 2-4 on errors",
    )
    parser.add_argument(
        "--key-space",
        default=DEFAULT_KEY_SPACE,
        help="Key space (version) entries are stored under",
    )
    parser.add_argument(
        "--label",
        default=None,
        help="Client label sent as User-Agent (default: ACTIONS_CACHE_CLIENT_LABEL)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="Download the best matching entry")
    get.add_argument("keys", nargs="+", metavar="KEY", help="Key prefixes in order of preference")
    get.add_argument("-o", "--output", type=Path, help="Write content here instead of stdout")

    url = commands.add_parser("url", help="Print the download location of the best match")
    url.add_argument("keys", nargs="+", metavar="KEY", help="Key prefixes in order of preference")

    put = commands.add_parser("put", help="Store an entry")
    put.add_argument("key", metavar="KEY", help="Full key to store under")
    put.add_argument("data", nargs="?", help="Literal content to store")
    put.add_argument("-f", "--file", type=Path, help="Store the content of this file")

    return parser


def create_client(args: argparse.Namespace) -> CacheClient:
    """Create a client from the environment, honouring ``--label``."""
    settings = get_settings()
    if args.label:
        settings = settings.model_copy(update={"client_label": args.label})
    return CacheClient.from_env(settings)


async def run(args: argparse.Namespace, client: CacheClient) -> int:
    """Execute the parsed command against ``client``."""
    async with client:
        if args.command == "get":
            found = await client.get_bytes(args.key_space, args.keys)
            if found is None:
                print("no matching cache entry", file=sys.stderr)
                return EXIT_MISS
            hit, data = found
            print(f"hit: key={hit.key} scope={hit.scope} size={len(data)}", file=sys.stderr)
            if args.output is not None:
                args.output.write_bytes(data)
            else:
                sys.stdout.buffer.write(data)
                sys.stdout.flush()
            return EXIT_OK

        if args.command == "url":
            entry = await client.get_url(args.key_space, args.keys)
            if entry is None:
                print("no matching cache entry", file=sys.stderr)
                return EXIT_MISS
            print(f"{entry.hit.key}\t{entry.hit.scope}\t{entry.archive_location}")
            return EXIT_OK

        data = args.file.read_bytes() if args.file is not None else args.data.encode("utf-8")
        await client.put_bytes(args.key_space, args.key, data)
        print(f"stored: key={args.key} size={len(data)}", file=sys.stderr)
        return EXIT_OK


def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Reject malformed key prefixes and missing files as usage errors (exit 2)."""
    if args.command == "put":
        if (args.data is None) == (args.file is None):
            parser.error("put requires exactly one of DATA or --file")
        if args.file is not None and not args.file.is_file():
            parser.error(f"--file: no such file: {args.file}")
        return

    try:
        join_key_prefixes(args.keys)
    except ValueError as e:
        parser.error(str(e))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(parser, args)

    try:
        configure_logging()
        client = create_client(args)
        return asyncio.run(run(args, client))
    except CacheError as e:
        match e.kind:
            case CacheErrorKind.RATE_LIMITED:
                logger.warning("Rate limited", retry_after=e.retry_after)
            case CacheErrorKind.CONFIGURATION:
                logger.error("Invalid configuration", setting=e.setting, error=str(e))
            case CacheErrorKind.TRANSPORT:
                logger.error("Cache request failed", status=e.status_code, error=str(e))
        return _EXIT_CODES[e.kind]


if __name__ == "__main__":
    sys.exit(main())
