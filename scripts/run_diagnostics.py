#!/usr/bin/env python
"""
Run a diagnostic suite or the dependency chain against a store seed.

Usage examples:

    # System health for a widget of the bundled demo store
    python scripts/run_diagnostics.py --widget wdg_123

    # Dependency chain for the same widget and a simulated shopper
    python scripts/run_diagnostics.py --widget wdg_123 --chain --cart-total 120 --tags VIP

    # Apply the instant fix at index 2 and print the result as JSON
    python scripts/run_diagnostics.py --widget wdg_123 --fix 2 --format json
"""

import argparse
import logging
from pathlib import Path

from dynadiag.checks import load_suite
from dynadiag.engine import apply_fix, build_chain, evaluate
from dynadiag.errors import InvalidFixRequest
from dynadiag.models import ShopperContext
from dynadiag.report import generate_markdown_report, generate_text_report, render_chain
from dynadiag.store import load_support_store


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run widget diagnostics against a store seed."
    )
    parser.add_argument(
        "--seed",
        type=str,
        default=None,
        help="Path to a store seed JSON file (defaults to the bundled demo store).",
    )
    parser.add_argument("--widget", type=str, default=None, help="Widget id to diagnose.")
    parser.add_argument(
        "--suite",
        type=str,
        default="system_health",
        help="Check suite from defs/index.json (ignored with --chain).",
    )
    parser.add_argument("--chain", action="store_true", help="Build the dependency chain instead.")
    parser.add_argument("--cart-total", type=str, default=None, help="Simulated shopper cart total.")
    parser.add_argument("--tags", type=str, default="", help="Simulated shopper tags, comma separated.")
    parser.add_argument("--device", type=str, default="Desktop", choices=["Desktop", "Mobile"])
    parser.add_argument(
        "--fix",
        type=int,
        action="append",
        default=[],
        help="Index of a failing entry to fix; may be repeated.",
    )
    parser.add_argument("--format", choices=["text", "markdown", "json"], default="text")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = load_support_store(Path(args.seed) if args.seed else None)

    shopper = None
    if args.cart_total is not None:
        shopper = ShopperContext(cart_total=args.cart_total, tags=args.tags, device=args.device)

    ctx = store.context_for(args.widget, shopper)
    if args.chain:
        report = build_chain(ctx.widget, ctx)
    else:
        report = evaluate(load_suite(args.suite), ctx)

    for index in args.fix:
        try:
            report = apply_fix(report, index)
        except InvalidFixRequest as exc:
            print(f"Fix rejected: {exc}")
            return 1

    if args.format == "json":
        print(report.to_json())
    elif args.format == "markdown":
        print(generate_markdown_report(report))
    elif args.chain:
        print(render_chain(report))
    else:
        print(generate_text_report(report))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
