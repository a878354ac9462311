from __future__ import annotations

import re

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult

# "<attribute> <operator> <value>", e.g. "Lifetime Value > $500"
_CONDITION_RE = re.compile(r"^\s*[A-Za-z][\w ]*?\s*(==|!=|>=|<=|=|>|<)\s*\S.*$")


def is_well_formed(condition: str) -> bool:
    return bool(_CONDITION_RE.match(condition or ""))


@register_check("chain_experience")
def run_chain_experience(ctx: CheckContext) -> CheckResult:
    # Advisory stage: never fails
    widget = ctx.require("widget")
    rule = widget.experience

    if rule is None:
        if widget.experience_id:
            return ctx.warning(
                f"Experience '{widget.experience_id}' has no declared condition",
                label=widget.experience_id,
            )
        return ctx.passed("No experience targeting; shown to every visitor", label="All Visitors")

    if is_well_formed(rule.condition):
        return ctx.passed(f"Logic: {rule.condition}", label=rule.name)
    return ctx.warning(f"Logic: '{rule.condition}' is not a well formed condition", label=rule.name)
