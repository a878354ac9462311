# dynadiag/engine/simulator.py

from __future__ import annotations

import logging
from typing import Optional

from ..models import AudienceRule, ShopperContext
from ..results import VisibilityVerdict

logger = logging.getLogger(__name__)

DEFAULT_AUDIENCE_RULE = AudienceRule(name="Default", excluded_tags=frozenset({"Wholesale"}))


def simulate(shopper: Optional[ShopperContext], rule: Optional[AudienceRule] = None) -> VisibilityVerdict:
    """
    Would this shopper see the widget.

    A decision list, first match wins:
      1. empty cart -> hidden
      2. shopper carries an excluded tag -> hidden
      3. rule limits devices and the shopper's is not one of them -> hidden
      4. visible

    Empty cart dominates tag exclusion; carts that are both empty and
    tagged must report the empty cart.
    """
    if rule is None:
        rule = DEFAULT_AUDIENCE_RULE

    if shopper is None:
        return VisibilityVerdict(visible=False, reason="No shopper context to simulate.")

    if shopper.cart_total == 0:
        verdict = VisibilityVerdict(visible=False, reason="Cart is empty.")
    else:
        excluded = sorted(shopper.tags & rule.excluded_tags)
        if excluded:
            verdict = VisibilityVerdict(visible=False, reason=f"Rule excludes '{excluded[0]}' tag.")
        elif rule.devices is not None and shopper.device not in rule.devices:
            targets = " and ".join(sorted(d.value for d in rule.devices)) or "no devices"
            verdict = VisibilityVerdict(visible=False, reason=f"Rule targets {targets} only.")
        else:
            verdict = VisibilityVerdict(visible=True, reason="All conditions met.")

    logger.debug("Audience rule %r -> %s", rule.name, verdict.headline)
    return verdict
