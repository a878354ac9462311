# dynadiag/engine/regression.py

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Tuple

from pydantic import BaseModel, ConfigDict

from ..models import Context
from ..results import CheckStatus
from .check_runner import CheckRef, evaluate, resolve_checks

logger = logging.getLogger(__name__)

DEFAULT_RUNS = 10


class RunStatus(str, Enum):
    PENDING = "pending"
    PASS = "pass"
    FAIL = "fail"


class RegressionRun(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    status: RunStatus = RunStatus.PENDING


class RegressionSuite(BaseModel):
    """Fixed-size set of re-runs used to confirm a fix holds."""
    model_config = ConfigDict(frozen=True)

    runs: Tuple[RegressionRun, ...]

    @classmethod
    def fresh(cls, size: int = DEFAULT_RUNS) -> "RegressionSuite":
        if size < 1:
            raise ValueError("a regression suite needs at least one run")
        return cls(runs=tuple(RegressionRun(id=i + 1) for i in range(size)))

    def record(self, run_id: int, status: RunStatus) -> "RegressionSuite":
        if not any(r.id == run_id for r in self.runs):
            raise KeyError(f"Unknown regression run: {run_id}")
        runs = tuple(
            r.model_copy(update={"status": RunStatus(status)}) if r.id == run_id else r
            for r in self.runs
        )
        return self.model_copy(update={"runs": runs})

    def reset(self) -> "RegressionSuite":
        return RegressionSuite.fresh(len(self.runs))

    @property
    def completed(self) -> int:
        return sum(1 for r in self.runs if r.status != RunStatus.PENDING)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.runs if r.status == RunStatus.PASS)

    @property
    def success_rate(self) -> int:
        """Percentage of completed runs that passed; 100 before any run completes."""
        if not self.completed:
            return 100
        return round(100 * self.passed / self.completed)


def run_regression(
    checks: Iterable[CheckRef],
    context: Context,
    runs: int = DEFAULT_RUNS,
) -> RegressionSuite:
    """
    Re-evaluate checks against context `runs` times.

    A run passes when it reproduces the first report exactly and that
    report has no failing entry. evaluate() is deterministic, so every run
    of one call agrees: this confirms the fixed Context is clean, it does
    not measure flakiness in a live storefront.
    """
    check_defs = resolve_checks(checks)
    suite = RegressionSuite.fresh(runs)
    baseline = evaluate(check_defs, context)

    for run in suite.runs:
        report = evaluate(check_defs, context)
        ok = report == baseline and report.severity != CheckStatus.FAIL
        suite = suite.record(run.id, RunStatus.PASS if ok else RunStatus.FAIL)

    logger.info("Regression over %d runs: %d%% passing", runs, suite.success_rate)
    return suite
