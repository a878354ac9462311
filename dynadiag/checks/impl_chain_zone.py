from __future__ import annotations

from ..engine.check_runner import register_check, register_remedy
from ..engine.context import CheckContext
from ..results import CheckResult
from .zones import colliding_apps, register_widget_zone, zone_registered


@register_check("chain_zone")
def run_chain_zone(ctx: CheckContext) -> CheckResult:
    """
    Stage 4.

    Status:
      - fail: the theme does not register the widget zone (fixable)
      - warning: a conflicting app is known to inject into the same zone
      - pass: otherwise
    """
    widget = ctx.require("widget")
    zone = widget.zone_id

    if not zone_registered(ctx.store, zone):
        return ctx.failed(f"Zone '{zone}' is not registered by the theme", label=zone)

    apps = colliding_apps(ctx.store, zone, ctx.setting("known_app_zones", {}))
    if apps:
        return ctx.warning(f"Zone exists but duplicates {', '.join(apps)} ID", label=zone)
    return ctx.passed("Zone registered in theme", label=zone)


register_remedy("chain_zone")(register_widget_zone)
