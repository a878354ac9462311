# dynadiag/engine/chain.py

from __future__ import annotations

import logging
from typing import Optional

from ..checks.definitions import load_suite
from ..models import Context, Widget
from ..results import DependencyChain
from .check_runner import evaluate

logger = logging.getLogger(__name__)

CHAIN_SUITE = "dependency_chain"


def build_chain(widget: Optional[Widget], context: Context) -> DependencyChain:
    """
    Evaluate the five widget-visibility stages for widget:

      Campaign -> Experience -> Audience -> Zone -> Theme

    Every stage is evaluated against the original Context even when an
    earlier one fails, so the whole causal trace is always present.
    """
    ctx = context.with_widget(widget)
    report = evaluate(load_suite(CHAIN_SUITE), ctx)
    chain = DependencyChain(report_id=report.report_id, results=report.results)
    logger.debug(
        "Dependency chain for %s: %s",
        widget.id if widget is not None else "<no widget>",
        [f"{r.step}:{r.status.value}" for r in chain.results],
    )
    return chain
