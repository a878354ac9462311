from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult


@register_check("widget_status")
def run_widget_status(ctx: CheckContext) -> CheckResult:
    widget = ctx.widget
    if widget is None:
        return ctx.passed("No widget selected; widget checks skipped.")
    if widget.is_active:
        return ctx.passed("Widget Status: Active", label=widget.name or widget.id)
    return ctx.warning("Widget Status: Inactive", label=widget.name or widget.id)
