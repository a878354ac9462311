"""
Unit tests for report renderers and report persistence
"""

import os
import tempfile
import unittest

from pydantic import ValidationError

from dynadiag.checks import load_suite
from dynadiag.engine import RemediationLedger, build_chain, evaluate
from dynadiag.io import load_report, save_report
from dynadiag.models import ShopperContext
from dynadiag.report import (
    generate_markdown_report,
    generate_text_report,
    render_chain,
    render_diagnostics_summary,
    summarize_counts,
)
from dynadiag.results import DependencyChain, DiagnosticReport
from dynadiag.store import load_support_store


class TestRenderers(unittest.TestCase):

    def setUp(self):
        support = load_support_store()
        self.ctx = support.context_for("wdg_123", ShopperContext(cart_total="120", tags="VIP"))
        self.report = evaluate(load_suite("system_health"), self.ctx)
        self.chain = build_chain(self.ctx.widget, self.ctx)

    def test_counts(self):
        self.assertEqual(summarize_counts(self.report), "pass: 6, warning: 1, fail: 1")

    def test_summary_lines(self):
        lines = render_diagnostics_summary(self.report).splitlines()
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[0], "[PASS] Store API Connection: Stable")
        self.assertTrue(lines[-1].startswith("[FAIL] "))

    def test_text_report(self):
        text = generate_text_report(self.report, title="System Health")
        self.assertIn(self.report.report_id, text)
        self.assertIn("Overall status: FAIL", text)

    def test_text_report_marks_fixes(self):
        ctx = self.ctx.with_store(app_embed_enabled=False)
        report = evaluate(load_suite("system_health"), ctx)
        self.assertIn("instant fix available", generate_text_report(report))
        fixed = RemediationLedger().apply_fix(report, report.steps.index("App Embed"))
        self.assertIn("fixed", generate_text_report(fixed))

    def test_markdown_table(self):
        md = generate_markdown_report(self.report)
        self.assertIn("| # | Step | Label | Status | Detail | Fix |", md)
        self.assertEqual(md.count("\n| "), 8 + 1)

    def test_chain_rendering(self):
        text = render_chain(self.chain)
        self.assertEqual(text.count("  v"), 4)
        self.assertTrue(text.startswith("Campaign (VIP Retention): PASS"))
        self.assertIn("Theme", text.splitlines()[-1])


class TestPersistence(unittest.TestCase):

    def setUp(self):
        support = load_support_store()
        self.ctx = support.context_for("wdg_123", ShopperContext(cart_total="120", tags="VIP"))
        fd, self.path = tempfile.mkstemp(suffix=".json")
        os.close(fd)

    def tearDown(self):
        os.remove(self.path)

    def test_report_survives_save_and_load(self):
        report = evaluate(load_suite("system_health"), self.ctx)
        save_report(report, self.path)
        self.assertEqual(load_report(self.path), report)

    def test_chain_loads_as_chain(self):
        chain = build_chain(self.ctx.widget, self.ctx)
        save_report(chain, self.path)
        loaded = load_report(self.path, DependencyChain)
        self.assertIsInstance(loaded, DependencyChain)
        self.assertEqual(loaded.stage("Zone"), chain.stage("Zone"))

    def test_system_report_is_not_a_chain(self):
        save_report(evaluate(load_suite("system_health"), self.ctx), self.path)
        self.assertIsInstance(load_report(self.path), DiagnosticReport)
        with self.assertRaises(ValidationError):
            load_report(self.path, DependencyChain)


if __name__ == "__main__":
    unittest.main()
