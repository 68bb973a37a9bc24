from __future__ import annotations

import argparse
import os
import random
import sys
import time
from typing import NoReturn

from rich.console import Console

from .errors import ScrapeError
from .http_client import HttpClient
from .links import osc8_link, plain_link
from .pipeline import Pipeline, RandomShuffler
from .table import render_table
from .variants import DEFAULT_VARIANT, VARIANTS, get_variant


class _UsageParser(argparse.ArgumentParser):
    """Bad arguments print the usage text and exit with status 0."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stdout)
        print(f"{self.prog}: {message}")
        raise SystemExit(0)


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return n


def _env_seed() -> int | None:
    raw = os.getenv("DEALS_SEED", "").strip()
    return int(raw) if raw.lstrip("-").isdigit() else None


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(prog="skroutz-deals", description="Show skroutz.gr price drops as a table.")
    parser.add_argument("-n", "--items", type=_positive_int, default=20, help="Number of products to show.")
    parser.add_argument("-p", "--pages", type=_positive_int, default=1, help="Number of listing pages to fetch.")
    parser.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT)
    parser.add_argument(
        "--order",
        default=os.getenv("DEALS_ORDER", "").strip() or None,
        help="Listing order passed as order_by. Defaults to the variant's order.",
    )
    parser.add_argument("--seed", type=int, default=_env_seed(), help="Seed for the shuffle.")
    parser.add_argument("--plain-links", action="store_true", help="Print raw URLs instead of terminal hyperlinks.")
    parser.add_argument("--time", action="store_true", help="Print the elapsed time.")
    parser.add_argument(
        "--timeout-seconds",
        type=float,
        default=float(os.getenv("TIMEOUT_SECONDS", "25")),
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    started = time.perf_counter()

    variant = get_variant(args.variant)
    proxy_url = os.getenv("PROXY_URL", "").strip() or None
    client = HttpClient(timeout_seconds=args.timeout_seconds, proxy_url=proxy_url)
    rng = random.Random(args.seed) if args.seed is not None else None
    pipeline = Pipeline(
        client,
        variant,
        shuffler=RandomShuffler(rng),
        decorate_link=plain_link if args.plain_links else osc8_link,
    )

    try:
        records = pipeline.run(args.items, pages=args.pages, order=args.order)
    except ScrapeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()

    elapsed = time.perf_counter() - started if args.time else None
    render_table(records, variant.columns, console=Console(), elapsed_seconds=elapsed)
    return 0
