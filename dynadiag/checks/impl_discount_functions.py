from __future__ import annotations

from typing import List

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..models import DiscountLog, DiscountOutcome
from ..results import CheckResult


@register_check("discount_functions")
def run_discount_functions(ctx: CheckContext) -> CheckResult:
    """
    Inspect the recorded discount function runs.

    Status:
      - fail: any run ended in Error
      - warning: any run was Rejected
      - pass: every run applied, or nothing recorded
    """
    logs = ctx.store.discount_logs
    if not logs:
        return ctx.passed("No discount function runs recorded.")

    errors: List[DiscountLog] = [log for log in logs if log.result == DiscountOutcome.ERROR]
    rejected: List[DiscountLog] = [log for log in logs if log.result == DiscountOutcome.REJECTED]

    if errors:
        first = errors[0]
        more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
        return ctx.failed(f"{first.function_name} errored: {first.details}{more}", label=first.function_name)
    if rejected:
        first = rejected[0]
        more = f" (+{len(rejected) - 1} more)" if len(rejected) > 1 else ""
        return ctx.warning(f"{first.function_name} rejected: {first.details}{more}", label=first.function_name)
    return ctx.passed(f"{len(logs)} discount function run(s) applied.")
