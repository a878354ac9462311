from __future__ import annotations

import argparse
import json

from dynadiag.engine import simulate
from dynadiag.models import AudienceRule, ShopperContext


def main() -> None:
    parser = argparse.ArgumentParser(description="Would this shopper see the widget?")
    parser.add_argument("--cart-total", type=str, default="100")
    parser.add_argument("--tags", type=str, default="VIP", help="Comma separated customer tags.")
    parser.add_argument("--device", type=str, default="Mobile", choices=["Desktop", "Mobile"])
    parser.add_argument(
        "--exclude",
        type=str,
        default="Wholesale",
        help="Comma separated tags the rule excludes.",
    )
    args = parser.parse_args()

    shopper = ShopperContext(cart_total=args.cart_total, tags=args.tags, device=args.device)
    rule = AudienceRule(name="Simulator", excluded_tags=args.exclude)
    verdict = simulate(shopper, rule)

    print(verdict.headline)
    print(json.dumps(verdict.model_dump(), indent=2))


if __name__ == "__main__":
    main()
