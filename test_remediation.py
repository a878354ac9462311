"""
Unit tests for instant fixes and the remediation ledger
"""

import threading
import unittest

from dynadiag.checks import load_suite
from dynadiag.engine import (
    RemediationLedger,
    apply_fix,
    build_chain,
    evaluate,
    remediated_context,
)
from dynadiag.errors import InvalidFixRequest
from dynadiag.models import Campaign, Context, StoreHealth, Widget
from dynadiag.results import CheckStatus, DependencyChain

PASS, FAIL = CheckStatus.PASS, CheckStatus.FAIL

WIDGET = Widget(id="wdg_fix", name="Cart Upsell", zone_id="cart_drawer", campaign_id="cmp_fix")
CAMPAIGN = Campaign(id="cmp_fix", name="Fix Me", status="active")


def broken_context(**changes):
    data = dict(
        app_embed_enabled=False,
        cart_enabled=False,
        theme_name="Dawn",
        theme_integration_verified=True,
        theme_zones=["footer"],
    )
    data.update(changes)
    return Context(store=StoreHealth(**data), widget=WIDGET, campaign=CAMPAIGN)


class TestApplyFix(unittest.TestCase):

    def setUp(self):
        self.ledger = RemediationLedger()
        self.ctx = broken_context()
        self.report = evaluate(load_suite("system_health"), self.ctx)
        self.embed = self.report.steps.index("App Embed")
        self.cart = self.report.steps.index("Cart")

    def test_fix_flips_only_target_entry(self):
        fixed = self.ledger.apply_fix(self.report, self.embed)
        self.assertEqual(fixed[self.embed].status, PASS)
        self.assertTrue(fixed[self.embed].fixed)
        self.assertEqual(fixed[self.embed].detail, "App Embed enabled automatically.")
        for i, (before, after) in enumerate(zip(self.report.results, fixed.results)):
            if i != self.embed:
                self.assertEqual(before, after)
        self.assertEqual(fixed.report_id, self.report.report_id)

    def test_original_report_is_unchanged(self):
        self.ledger.apply_fix(self.report, self.embed)
        self.assertEqual(self.report[self.embed].status, FAIL)

    def test_second_fix_of_same_index_is_rejected(self):
        self.ledger.apply_fix(self.report, self.embed)
        with self.assertRaises(InvalidFixRequest) as cm:
            self.ledger.apply_fix(self.report, self.embed)
        self.assertEqual(cm.exception.index, self.embed)
        self.assertEqual(cm.exception.report_id, self.report.report_id)

    def test_re_evaluated_report_shares_ledger_entry(self):
        self.ledger.apply_fix(self.report, self.embed)
        again = evaluate(load_suite("system_health"), self.ctx)
        self.assertTrue(self.ledger.is_fixed(again, self.embed))
        with self.assertRaises(InvalidFixRequest):
            self.ledger.apply_fix(again, self.embed)

    def test_fixes_to_different_indices_are_independent(self):
        first = self.ledger.apply_fix(self.report, self.embed)
        second = self.ledger.apply_fix(first, self.cart)
        self.assertEqual(second[self.embed].status, PASS)
        self.assertEqual(second[self.cart].status, PASS)
        self.assertEqual(self.ledger.fixed_indices(self.report), {self.embed, self.cart})

    def test_out_of_range_is_rejected(self):
        for index in (len(self.report), 99, -1):
            with self.assertRaises(InvalidFixRequest):
                self.ledger.apply_fix(self.report, index)

    def test_non_failing_entry_is_rejected(self):
        passing = self.report.steps.index("Store API")
        with self.assertRaises(InvalidFixRequest):
            self.ledger.apply_fix(self.report, passing)

    def test_failure_without_fix_is_rejected(self):
        ctx = broken_context(api_connected=False)
        report = evaluate(["store_connection"], ctx)
        self.assertEqual(report[0].status, FAIL)
        with self.assertRaises(InvalidFixRequest):
            self.ledger.apply_fix(report, 0)

    def test_rejection_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self.ledger.apply_fix(self.report, 99)

    def test_clear_forgets_fixes(self):
        self.ledger.apply_fix(self.report, self.embed)
        self.ledger.clear()
        self.assertFalse(self.ledger.is_fixed(self.report, self.embed))

    def test_module_level_apply_fix_accepts_ledger(self):
        fixed = apply_fix(self.report, self.embed, ledger=self.ledger)
        self.assertEqual(fixed[self.embed].status, PASS)
        self.assertTrue(self.ledger.is_fixed(self.report, self.embed))

    def test_concurrent_fixes_of_one_index(self):
        outcomes = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                self.ledger.apply_fix(self.report, self.embed)
                outcome = "ok"
            except InvalidFixRequest:
                outcome = "rejected"
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count("rejected"), 7)


class TestChainFixes(unittest.TestCase):
    """A fix is local; the chain is rebuilt to propagate it"""

    def setUp(self):
        self.ledger = RemediationLedger()
        self.ctx = broken_context()
        self.chain = build_chain(WIDGET, self.ctx)

    def test_zone_fix_leaves_theme_failing(self):
        self.assertEqual(self.chain.statuses[3:], [FAIL, FAIL])
        self.assertEqual(self.chain.fixable_indices(), [3])

        fixed = self.ledger.apply_fix(self.chain, 3)
        self.assertIsInstance(fixed, DependencyChain)
        self.assertEqual(fixed.stage("Zone").status, PASS)
        self.assertEqual(fixed.stage("Theme").status, FAIL)

    def test_theme_failure_is_not_fixable(self):
        with self.assertRaises(InvalidFixRequest):
            self.ledger.apply_fix(self.chain, 4)

    def test_rebuild_from_remediated_context(self):
        fixed = self.ledger.apply_fix(self.chain, 3)
        ctx = remediated_context(self.ctx, fixed)
        self.assertIn("cart_drawer", ctx.store.theme_zones)

        rebuilt = build_chain(WIDGET, ctx)
        self.assertEqual(rebuilt.statuses, [PASS] * 5)
        self.assertNotEqual(rebuilt.report_id, self.chain.report_id)

    def test_remediated_context_of_system_report(self):
        report = evaluate(load_suite("system_health"), self.ctx)
        embed = report.steps.index("App Embed")
        cart = report.steps.index("Cart")
        report = self.ledger.apply_fix(report, embed)
        report = self.ledger.apply_fix(report, cart)

        ctx = remediated_context(self.ctx, report)
        self.assertTrue(ctx.store.app_embed_enabled)
        self.assertTrue(ctx.store.cart_enabled)
        self.assertFalse(self.ctx.store.app_embed_enabled)

    def test_unfixed_report_leaves_context_alone(self):
        self.assertEqual(remediated_context(self.ctx, self.chain), self.ctx)


if __name__ == "__main__":
    unittest.main()
