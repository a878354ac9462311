from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..engine.simulator import DEFAULT_AUDIENCE_RULE, simulate
from ..models import AudienceRule
from ..results import CheckResult


@register_check("audience_simulation")
def run_audience_simulation(ctx: CheckContext) -> CheckResult:
    """
    Evaluator wrapper around the audience simulator.

    A hidden verdict is a warning, not a failure: the widget behaves as
    configured, just not for this shopper. No shopper in the Context
    degrades to a warning through IncompleteContext.
    """
    shopper = ctx.require("shopper")

    rule = ctx.widget.audience if ctx.widget is not None else None
    if rule is None:
        excluded = ctx.setting("default_excluded_tags")
        if excluded is None:
            rule = DEFAULT_AUDIENCE_RULE
        else:
            rule = AudienceRule(name=DEFAULT_AUDIENCE_RULE.name, excluded_tags=frozenset(excluded))

    verdict = simulate(shopper, rule)
    if verdict.visible:
        return ctx.passed(verdict.headline, label=rule.name)
    return ctx.warning(verdict.headline, label=rule.name)
