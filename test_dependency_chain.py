"""
Unit tests for build_chain() - the five stage widget visibility chain
"""

import unittest

from pydantic import ValidationError

from dynadiag.engine import build_chain
from dynadiag.models import (
    AudienceRule,
    Campaign,
    Context,
    ExperienceRule,
    ShopperContext,
    StoreHealth,
    Widget,
)
from dynadiag.results import CHAIN_STAGES, CheckStatus, DependencyChain
from dynadiag.store import load_support_store

PASS, FAIL, WARNING = CheckStatus.PASS, CheckStatus.FAIL, CheckStatus.WARNING


def store(**changes):
    data = dict(
        theme_name="Dawn v11",
        theme_integration_verified=True,
        conflicting_apps=[],
        theme_zones=["cart_drawer", "post_purchase", "footer"],
    )
    data.update(changes)
    return StoreHealth(**data)


ACTIVE = Campaign(id="cmp_002", name="Welcome Series", status="active")

UPSELL = Widget(
    id="wdg_456",
    name="Slideout Upsell",
    zone_id="post_purchase",
    campaign_id="cmp_002",
    experience=ExperienceRule(name="New Visitors", condition="First Visit = True"),
    audience=AudienceRule(name="Global"),
)


class TestReferenceScenarios(unittest.TestCase):
    """The two worked examples from the demo store"""

    def test_wdg_123_chain(self):
        support = load_support_store()
        ctx = support.context_for("wdg_123", ShopperContext(cart_total="120", tags="VIP"))
        chain = build_chain(ctx.widget, ctx)

        self.assertIsInstance(chain, DependencyChain)
        self.assertEqual(chain.statuses, [PASS, PASS, FAIL, WARNING, FAIL])
        self.assertEqual(chain.stage("Campaign").label, "VIP Retention")
        self.assertEqual(chain.stage("Experience").detail, "Logic: Lifetime Value > $500")
        self.assertEqual(chain.stage("Audience").detail, 'Current user missing "Wholesale" tag')
        self.assertEqual(chain.stage("Zone").detail, "Zone exists but duplicates Rebuy ID")
        self.assertEqual(chain.stage("Theme").status, FAIL)

    def test_wdg_456_chain_all_pass(self):
        ctx = Context(store=store(conflicting_apps=["Rebuy", "Bold Options"]), campaign=ACTIVE)
        chain = build_chain(UPSELL, ctx)
        self.assertEqual(chain.statuses, [PASS] * 5)
        self.assertEqual(chain.stage("Campaign").detail, "Status: Active")
        self.assertEqual(chain.stage("Audience").detail, "No exclusions found")
        self.assertEqual(chain.stage("Theme").detail, "App Block verified")


class TestChainShape(unittest.TestCase):
    """Order preservation and no short-circuit"""

    def assert_full_chain(self, chain):
        self.assertEqual(len(chain), 5)
        self.assertEqual(tuple(chain.steps), CHAIN_STAGES)
        for entry in chain.results:
            self.assertTrue(entry.detail)

    def test_failing_campaign_still_evaluates_every_stage(self):
        draft = Campaign(id="cmp_002", name="Welcome Series", status="draft")
        chain = build_chain(UPSELL, Context(store=store(), campaign=draft))
        self.assert_full_chain(chain)
        self.assertEqual(chain.stage("Campaign").status, FAIL)
        self.assertEqual(chain.stage("Campaign").detail, "Status: Draft")
        self.assertEqual(chain.statuses[1:], [PASS] * 4)

    def test_no_widget_still_yields_five_stages(self):
        chain = build_chain(None, Context(store=store()))
        self.assert_full_chain(chain)
        self.assertEqual(chain.statuses, [WARNING] * 5)

    def test_widget_argument_overrides_context_widget(self):
        other = UPSELL.model_copy(update={"id": "wdg_other", "zone_id": "missing_zone"})
        ctx = Context(store=store(), widget=UPSELL, campaign=ACTIVE)
        chain = build_chain(other, ctx)
        self.assertEqual(chain.stage("Zone").status, FAIL)

    def test_chain_is_deterministic(self):
        ctx = Context(store=store(), campaign=ACTIVE)
        self.assertEqual(build_chain(UPSELL, ctx), build_chain(UPSELL, ctx))

    def test_chain_rejects_wrong_stages(self):
        with self.assertRaises(ValidationError):
            DependencyChain(report_id="x", results=())


class TestStageRules(unittest.TestCase):

    def chain(self, widget=UPSELL, campaign=ACTIVE, shopper=None, **store_changes):
        ctx = Context(store=store(**store_changes), campaign=campaign, shopper=shopper)
        return build_chain(widget, ctx)

    def test_unresolved_campaign_reference_fails(self):
        chain = self.chain(campaign=None)
        self.assertEqual(chain.stage("Campaign").status, FAIL)
        self.assertIn("cmp_002", chain.stage("Campaign").detail)
        self.assertIn("not found", chain.stage("Campaign").detail)

    def test_widget_without_campaign_is_incomplete(self):
        widget = UPSELL.model_copy(update={"campaign_id": None})
        chain = self.chain(widget=widget, campaign=None)
        self.assertEqual(chain.stage("Campaign").status, WARNING)

    def test_scheduled_campaign_fails(self):
        scheduled = ACTIVE.model_copy(update={"status": "scheduled"})
        chain = self.chain(campaign=Campaign.model_validate(scheduled.model_dump()))
        self.assertEqual(chain.stage("Campaign").status, FAIL)
        self.assertEqual(chain.stage("Campaign").detail, "Status: Scheduled")

    def test_experience_is_advisory(self):
        no_rule = UPSELL.model_copy(update={"experience": None})
        self.assertEqual(self.chain(widget=no_rule).stage("Experience").status, PASS)

        malformed = UPSELL.model_copy(
            update={"experience": ExperienceRule(name="Broken", condition="just some words")}
        )
        self.assertEqual(self.chain(widget=malformed).stage("Experience").status, WARNING)

    def test_audience_requires_tags(self):
        gated = UPSELL.model_copy(
            update={"audience": AudienceRule(name="Wholesale", required_tags=["Wholesale"])}
        )
        missing = self.chain(widget=gated, shopper=ShopperContext(cart_total="50", tags="VIP"))
        self.assertEqual(missing.stage("Audience").status, FAIL)

        present = self.chain(widget=gated, shopper=ShopperContext(cart_total="50", tags="VIP, Wholesale"))
        self.assertEqual(present.stage("Audience").status, PASS)

        unknown = self.chain(widget=gated, shopper=None)
        self.assertEqual(unknown.stage("Audience").status, WARNING)

    def test_zone_absent_fails_zone_and_theme(self):
        chain = self.chain(theme_zones=["footer"])
        self.assertEqual(chain.stage("Zone").status, FAIL)
        self.assertTrue(chain.stage("Zone").fixable)
        self.assertEqual(chain.stage("Theme").status, FAIL)
        self.assertEqual(chain.stage("Theme").detail, "Zone ID not found in theme.liquid")

    def test_zone_collision_only_warns(self):
        widget = UPSELL.model_copy(update={"zone_id": "cart_drawer"})
        chain = self.chain(widget=widget, conflicting_apps=["Rebuy"])
        self.assertEqual(chain.stage("Zone").status, WARNING)
        self.assertEqual(chain.stage("Theme").status, PASS)

    def test_installed_app_with_other_zones_does_not_collide(self):
        chain = self.chain(conflicting_apps=["Rebuy"])
        self.assertEqual(chain.stage("Zone").status, PASS)

    def test_unverified_theme_fails_theme_only(self):
        chain = self.chain(theme_integration_verified=False)
        self.assertEqual(chain.stage("Zone").status, PASS)
        self.assertEqual(chain.stage("Theme").status, FAIL)


if __name__ == "__main__":
    unittest.main()
