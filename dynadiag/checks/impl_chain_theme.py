from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult
from .zones import zone_registered


@register_check("chain_theme")
def run_chain_theme(ctx: CheckContext) -> CheckResult:
    """
    Stage 5: the app block must be verifiable for the widget zone.

    Depends on the Zone stage, but re-derives the zone lookup from the
    Context instead of reading the Zone result.
    """
    widget = ctx.require("widget")
    store = ctx.store
    label = store.theme_name or None

    if not zone_registered(store, widget.zone_id):
        return ctx.failed("Zone ID not found in theme.liquid", label=label)
    if not store.theme_integration_verified:
        return ctx.failed("App Block not verified: theme integration pending", label=label)
    return ctx.passed("App Block verified", label=label)
