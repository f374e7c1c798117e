#!/usr/bin/env python3
# cli.py — CLI for Downpour

import argparse
import asyncio
import logging
import os
import sys

from downpour.core import LoadTester
from downpour.logging_config import setup_logging
from downpour.rendering import render_report, render_latency_histogram
from downpour.utils import is_http_url


class ConfigurationError(ValueError):
    """Invalid command-line configuration, reported before any request is sent."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="downpour",
        description="Downpour: bounded-concurrency HTTP load generator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--url",
        default="",
        help="URL of the service to test (required)",
    )
    parser.add_argument(
        "--requests",
        type=int,
        default=100,
        help="Total number of requests",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=10,
        help="Number of concurrent requests",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("HTTP_REQUEST_TIMEOUT_S", "30")),
        help="Per-request timeout in seconds",
    )

    # Output
    parser.add_argument(
        "--histogram",
        action="store_true",
        help="Print an ASCII latency histogram after the report",
    )
    parser.add_argument(
        "--histogram-bins",
        type=int,
        default=20,
        help="Number of histogram buckets",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., downpour.log)",
    )

    return parser


def validate_config(url: str, requests: int, concurrency: int, timeout: float = 30.0) -> None:
    if not url:
        raise ConfigurationError("URL is required")
    if not is_http_url(url):
        raise ConfigurationError(f"URL must be an absolute http(s) URL, got {url!r}")
    if requests <= 0:
        raise ConfigurationError("Number of requests must be greater than 0")
    if concurrency <= 0 or concurrency > requests:
        raise ConfigurationError(
            "Concurrency must be greater than 0 and less than or equal to the number of requests"
        )
    if timeout <= 0:
        raise ConfigurationError("Timeout must be greater than 0")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    try:
        validate_config(args.url, args.requests, args.concurrency, args.timeout)
        if args.histogram_bins < 1:
            raise ConfigurationError("Histogram bins must be at least 1")
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    print(f"Starting load test for {args.url}")
    print(f"Total requests: {args.requests}")
    print(f"Concurrency level: {args.concurrency}\n")

    tester = LoadTester(
        url=args.url,
        total_requests=args.requests,
        concurrency=args.concurrency,
        request_timeout_s=args.timeout,
        use_progress_bar=not args.no_progress,
    )

    try:
        report = asyncio.run(tester.run())
    except KeyboardInterrupt:
        logging.warning("Interrupted before all requests completed.")
        print("Interrupted.", file=sys.stderr)
        return 130

    print(render_report(report))
    if args.histogram:
        print()
        print(render_latency_histogram(list(report.durations), args.histogram_bins))

    return 0


if __name__ == "__main__":
    sys.exit(main())
