from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..results import CheckResult


@register_check("theme_verified")
def run_theme_verified(ctx: CheckContext) -> CheckResult:
    theme = ctx.store.theme_name.strip()
    if not theme:
        return ctx.warning("Published theme could not be identified.")
    return ctx.passed(f"Theme Verified: {theme}", label=theme)
