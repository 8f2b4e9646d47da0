"""
Entry point for `python -m server_date`.

Usage:
    python -m server_date --url https://example.com/ [--align] [--delay 0.1] [--json]
"""

import asyncio
import argparse
import json
import logging
import sys

from .errors import ConfigurationError
from .estimator import get_server_date
from .tick import DEFAULT_DELAY, DEFAULT_MAX_ATTEMPTS, get_aligned_server_date

logger = logging.getLogger("ServerDate")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Estimate a server's clock from its Date header")
    parser.add_argument("--url", "-u", required=True)
    parser.add_argument("--align", "-a", action="store_true", help="Refine by capturing a tick")
    parser.add_argument("--delay", "-d", type=float, default=DEFAULT_DELAY,
                        help="Seconds between tick samples")
    parser.add_argument("--max-attempts", type=int, default=DEFAULT_MAX_ATTEMPTS)
    parser.add_argument("--json", action="store_true", help="Print the estimate as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def run(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        if args.align:
            result = await get_aligned_server_date(
                url=args.url, delay=args.delay, max_attempts=args.max_attempts
            )
        else:
            result = await get_server_date(url=args.url)
    except ConfigurationError as e:
        logger.error(f"Invalid options: {e}")
        return 2

    if result is None:
        logger.error(f"No usable estimate from {args.url}")
        return 1

    if args.json:
        print(json.dumps(result.as_dict()))
    else:
        print(result)
    return 0


def main(argv=None):
    try:
        sys.exit(asyncio.run(run(argv)))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
