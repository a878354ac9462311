from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult


@register_check("store_connection")
def run_store_connection(ctx: CheckContext) -> CheckResult:
    if ctx.store.api_connected:
        return ctx.passed("Store API Connection: Stable")
    return ctx.failed("Store API Connection: Unreachable")
