#!/usr/bin/env python3
"""
wikisearch command line

Usage:
    wikisearch --term java
    wikisearch --and java,programming --limit 10
    wikisearch --or java,python,ruby
    wikisearch --without java,coffee --count

Results print in ascending relevance order, one ``url=relevance`` per line,
so the best match is the last line.

Exit codes: 0 success, 1 index lookup failure, 2 usage error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

from wikisearch.clients import IndexGatewayProtocol, build_gateway
from wikisearch.core.config import Settings, get_settings
from wikisearch.core.exceptions import ConfigurationError, LookupFailure, UsageError
from wikisearch.core.logging import configure_logging, get_logger, query_context
from wikisearch.search import (
    Operator,
    QueryChain,
    QueryResult,
    RankedEntry,
    parse_terms,
    search,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_LOOKUP_FAILURE = 1
EXIT_USAGE = 2

_CHAIN_OPTIONS = {
    "and_terms": Operator.AND,
    "or_terms": Operator.OR,
    "without_terms": Operator.MINUS,
}


def parse_limit(value: str) -> int:
    """argparse type for ``--limit``: a positive integer.

    Raises:
        UsageError: If ``value`` is not an integer or is below 1
    """
    try:
        limit = int(value)
    except ValueError:
        raise UsageError(f"--limit must be an integer, got {value!r}") from None
    if limit < 1:
        raise UsageError(f"--limit must be at least 1, got {limit}")
    return limit


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wikisearch",
        description="Boolean search over a term -> url relevance index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Single term
    wikisearch --term java

    # Pages containing every term, lowest relevance first
    wikisearch --and java,programming

    # Pages containing java but not coffee
    wikisearch --without java,coffee
        """,
    )

    query = parser.add_mutually_exclusive_group(required=True)
    query.add_argument("--term", "-t", help="Search for a single term")
    query.add_argument(
        "--and",
        dest="and_terms",
        metavar="T1,T2,...",
        help="Pages containing all of the comma-separated terms",
    )
    query.add_argument(
        "--or",
        dest="or_terms",
        metavar="T1,T2,...",
        help="Pages containing any of the comma-separated terms",
    )
    query.add_argument(
        "--without",
        dest="without_terms",
        metavar="T1,T2,...",
        help="Pages containing the first term but none of the others",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--limit",
        "-n",
        type=parse_limit,
        default=None,
        help="Print only the first N ranked results",
    )
    output.add_argument(
        "--count",
        action="store_true",
        help="Print only the number of matching pages",
    )

    parser.add_argument(
        "--backend",
        choices=["redis", "http", "memory"],
        default=None,
        help="Index backend (default: WIKISEARCH_INDEX_BACKEND or redis)",
    )
    parser.add_argument("--redis-url", default=None, help="Redis URL of the index")
    parser.add_argument("--index-url", default=None, help="Base URL of the HTTP index service")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used to look up chained terms concurrently",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command line overrides applied."""
    overrides = {
        "index_backend": args.backend,
        "redis_url": args.redis_url,
        "index_url": args.index_url,
        "lookup_workers": args.workers,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def run_query(
    args: argparse.Namespace,
    gateway: IndexGatewayProtocol,
    settings: Settings,
) -> tuple[str, QueryResult]:
    """Evaluate the query described by ``args``.

    Returns:
        Tuple of (query label, result)
    """
    if args.term is not None:
        with query_context(args.term):
            return args.term, search(args.term, gateway)

    for option, operator in _CHAIN_OPTIONS.items():
        term_list = getattr(args, option)
        if term_list is not None:
            chain = QueryChain(max_workers=settings.lookup_workers)
            chained = chain.fold(parse_terms(term_list), operator, gateway.lookup)
            return chained.label, chained.result

    raise UsageError("One of --term, --and, --or or --without is required")


def print_results(label: str, entries: list[RankedEntry], out: TextIO) -> None:
    """Print a query header followed by ``url=relevance`` lines."""
    print(f"Query: {label}", file=out)
    for url, relevance in entries:
        print(f"{url}={relevance}", file=out)


def main(
    argv: Sequence[str] | None = None,
    gateway: IndexGatewayProtocol | None = None,
    out: TextIO | None = None,
) -> int:
    """Main entry point.

    Args:
        argv: Arguments (default: sys.argv[1:])
        gateway: Index gateway to query instead of the configured one
        out: Stream for results (default: stdout)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    out = out or sys.stdout
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    settings = apply_overrides(get_settings(), args)
    configure_logging(log_level=settings.log_level, json_output=settings.log_json)

    owns_gateway = gateway is None
    try:
        if gateway is None:
            gateway = build_gateway(settings)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        label, result = run_query(args, gateway, settings)
        limit = args.limit or settings.default_limit

        if args.count:
            print(f"Query: {label}", file=out)
            print(result.count(), file=out)
        elif limit is not None:
            print_results(label, result.top_n(limit), out)
        else:
            print_results(label, result.rank(), out)
        return EXIT_OK

    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except LookupFailure as e:
        logger.error("query_failed", term=e.term, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOOKUP_FAILURE
    finally:
        if owns_gateway:
            gateway.close()


if __name__ == "__main__":
    sys.exit(main())
