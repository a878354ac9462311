from __future__ import annotations

from ..engine.check_runner import register_check
from ..engine.context import CheckContext
from ..models import CampaignStatus
from ..results import CheckResult


@register_check("chain_campaign")
def run_chain_campaign(ctx: CheckContext) -> CheckResult:
    """
    Stage 1: the campaign behind the widget must be active.

    A campaign_id on the widget that does not resolve against the Context
    is a failure of this stage only; no campaign at all is incomplete context.
    """
    widget = ctx.widget
    campaign = ctx.campaign

    if widget is not None and widget.campaign_id:
        if campaign is None or campaign.id != widget.campaign_id:
            return ctx.failed(f"Campaign '{widget.campaign_id}' not found", label=widget.campaign_id)

    campaign = ctx.require("campaign")
    label = campaign.name or campaign.id
    observed = campaign.status.value.capitalize()
    if campaign.status == CampaignStatus.ACTIVE:
        return ctx.passed(f"Status: {observed}", label=label)
    return ctx.failed(f"Status: {observed}", label=label)
