from __future__ import annotations

from ..engine.check_runner import register_check, register_remedy
from ..engine.context import CheckContext
from ..results import CheckResult
from .zones import register_widget_zone, zone_registered


@register_check("zone_validator")
def run_zone_validator(ctx: CheckContext) -> CheckResult:
    widget = ctx.widget
    if widget is None:
        return ctx.passed("No widget selected; zone validation skipped.")

    zone = widget.zone_id
    if not zone_registered(ctx.store, zone):
        return ctx.failed(f"Zone '{zone}' not detected in 'theme.liquid'.", label=zone)
    return ctx.passed(f"Zone '{zone}' verified in theme.", label=zone)


register_remedy("zone_validator")(register_widget_zone)
