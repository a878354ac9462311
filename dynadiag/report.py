from __future__ import annotations

from typing import List

from .results import DependencyChain, DiagnosticReport


def summarize_counts(report: DiagnosticReport) -> str:
    counts = report.counts()
    return (
        f"pass: {counts['pass']}, "
        f"warning: {counts['warning']}, "
        f"fail: {counts['fail']}"
    )


def render_diagnostics_summary(report: DiagnosticReport) -> str:
    """One "[STATUS] detail" line per entry, as pasted into ticket descriptions."""
    lines = []
    for entry in report.results:
        lines.append(f"[{entry.status.value.upper()}] {entry.detail}")
    return "\n".join(lines)


def generate_text_report(report: DiagnosticReport, title: str = "Diagnostics") -> str:
    lines: List[str] = []

    lines.append(f"{title} ({report.report_id})")
    lines.append(f"Overall status: {report.severity.value.upper()} ({summarize_counts(report)})")
    lines.append("")

    for i, entry in enumerate(report.results):
        label = f" [{entry.label}]" if entry.label else ""
        lines.append(f"  {i}. {entry.step}{label}: {entry.status.value}")
        lines.append(f"      {entry.detail}")
        if entry.fixed:
            lines.append("      fixed")
        elif entry.can_fix:
            lines.append("      instant fix available")

    return "\n".join(lines)


def generate_markdown_report(report: DiagnosticReport, title: str = "Diagnostics") -> str:
    lines: List[str] = []

    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"- Report id: `{report.report_id}`")
    lines.append(f"- Overall status: **{report.severity.value.upper()}** ({summarize_counts(report)})")
    lines.append("")
    lines.append("| # | Step | Label | Status | Detail | Fix |")
    lines.append("|---|------|-------|--------|--------|-----|")
    for i, entry in enumerate(report.results):
        fix = "fixed" if entry.fixed else ("available" if entry.can_fix else "")
        lines.append(
            f"| {i} | {entry.step} | {entry.label or ''} | {entry.status.value} | "
            f"{entry.detail} | {fix} |"
        )
    lines.append("")

    return "\n".join(lines)


def render_chain(chain: DependencyChain) -> str:
    """Campaign -> ... -> Theme on one line each, arrows between stages."""
    lines: List[str] = []
    for i, entry in enumerate(chain.results):
        label = f" ({entry.label})" if entry.label else ""
        lines.append(f"{entry.step}{label}: {entry.status.value.upper()} - {entry.detail}")
        if i < len(chain) - 1:
            lines.append("  |")
            lines.append("  v")
    return "\n".join(lines)
