from __future__ import annotations

from ..engine.check_runner import register_check, register_remedy
from ..engine.context import CheckContext
from ..models import Context
from ..results import CheckResult


@register_check("cart_status")
def run_cart_status(ctx: CheckContext) -> CheckResult:
    """
    Status:
      - fail: cart disabled (fixable)
      - warning: cart enabled but its cart profile is inactive
      - pass: otherwise
    """
    store = ctx.store
    profile = store.cart_profile
    label = profile.name if profile is not None else None

    if not store.cart_enabled:
        return ctx.failed("Cart Status: Disabled", label=label)
    if profile is not None and not profile.is_active:
        return ctx.warning(f"Cart profile '{profile.name}' is inactive.", label=label)
    if profile is not None:
        return ctx.passed(f"Cart Status: Enabled ({profile.type} profile '{profile.name}')", label=label)
    return ctx.passed("Cart Status: Enabled")


@register_remedy("cart_status")
def enable_cart(context: Context) -> Context:
    return context.with_store(cart_enabled=True)
