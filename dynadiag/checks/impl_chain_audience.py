from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult


@register_check("chain_audience")
def run_chain_audience(ctx: CheckContext) -> CheckResult:
    """Stage 3: fail iff the audience rule requires a tag the shopper lacks."""
    widget = ctx.require("widget")
    rule = widget.audience

    if rule is None or not rule.required_tags:
        return ctx.passed("No exclusions found", label=rule.name if rule is not None else "Global")

    shopper = ctx.require("shopper")
    missing = sorted(rule.required_tags - shopper.tags)
    if missing:
        quoted = ", ".join(f'"{t}"' for t in missing)
        noun = "tag" if len(missing) == 1 else "tags"
        return ctx.failed(f"Current user missing {quoted} {noun}", label=rule.name)
    return ctx.passed("Shopper carries every required tag", label=rule.name)
