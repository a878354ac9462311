from __future__ import annotations

from ..engine.check_runner import register_check, register_remedy
from ..engine.context import CheckContext
from ..models import Context
from ..results import CheckResult


@register_check("app_embed")
def run_app_embed(ctx: CheckContext) -> CheckResult:
    """
    The app embed block must be on in the published theme, otherwise no
    widget renders at all. Fixable: the fix switches the embed on.
    """
    if ctx.store.app_embed_enabled:
        return ctx.passed("App Embed: Enabled")
    return ctx.failed("CRITICAL: 'App Embed' is DISABLED in your Shopify Theme.")


@register_remedy("app_embed")
def enable_app_embed(context: Context) -> Context:
    return context.with_store(app_embed_enabled=True)
