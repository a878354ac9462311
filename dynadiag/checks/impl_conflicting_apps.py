from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult


@register_check("conflicting_apps")
def run_conflicting_apps(ctx: CheckContext) -> CheckResult:
    apps = sorted(ctx.store.conflicting_apps)
    if not apps:
        return ctx.passed("No conflicting apps detected.")
    return ctx.warning(f"Conflicting apps installed: {', '.join(apps)}.")
