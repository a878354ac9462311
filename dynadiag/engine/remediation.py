# dynadiag/engine/remediation.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, Optional, Set, TypeVar

from ..errors import InvalidFixRequest
from ..models import Context
from ..results import CheckStatus, DiagnosticReport
from .check_runner import get_remedy

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=DiagnosticReport)


@dataclass
class RemediationLedger:
    """
    Records which (report, index) pairs have received an instant fix.

    Thread-safety:
      - apply_fix is a single atomic transition per (report_id, index).
      - Fixes to different indices of one report are independent; the
        second fix of the same index is rejected.
    """
    _fixed: Dict[str, Set[int]] = field(default_factory=dict)
    _lock: RLock = field(default_factory=RLock)

    def apply_fix(self, report: R, index: int) -> R:
        """
        Flip report[index] from fail to pass and return the new report.

        Only that entry changes. Downstream entries that depended on it
        keep their status until the report is rebuilt from a new Context.
        """
        with self._lock:
            if not 0 <= index < len(report):
                raise InvalidFixRequest(
                    f"No diagnostic at index {index} (report has {len(report)})",
                    report.report_id,
                    index,
                )
            if index in self._fixed.get(report.report_id, ()):
                raise InvalidFixRequest(
                    f"Diagnostic {index} of report {report.report_id} is already fixed",
                    report.report_id,
                    index,
                )

            entry = report[index]
            if entry.status != CheckStatus.FAIL:
                raise InvalidFixRequest(
                    f"Diagnostic {index} ({entry.step}) is {entry.status.value}, not fail",
                    report.report_id,
                    index,
                )
            if not entry.fixable:
                raise InvalidFixRequest(
                    f"Diagnostic {index} ({entry.step}) has no instant fix",
                    report.report_id,
                    index,
                )

            self._fixed.setdefault(report.report_id, set()).add(index)

        logger.info("Applied fix for %s (report %s, index %d)", entry.check_id, report.report_id, index)
        return report.replace_result(index, entry.as_fixed())

    def is_fixed(self, report: DiagnosticReport, index: int) -> bool:
        with self._lock:
            return index in self._fixed.get(report.report_id, ())

    def fixed_indices(self, report: DiagnosticReport) -> Set[int]:
        with self._lock:
            return set(self._fixed.get(report.report_id, ()))

    def clear(self) -> None:
        with self._lock:
            self._fixed.clear()


_DEFAULT_LEDGER = RemediationLedger()


def default_ledger() -> RemediationLedger:
    return _DEFAULT_LEDGER


def apply_fix(report: R, index: int, ledger: Optional[RemediationLedger] = None) -> R:
    return (ledger or _DEFAULT_LEDGER).apply_fix(report, index)


def remediated_context(context: Context, report: DiagnosticReport) -> Context:
    """
    New Context with the remedy of every fixed entry in report applied,
    in report order. Evaluating it again gives a consistent report,
    including downstream entries a local fix left untouched.
    """
    for entry in report.results:
        if not entry.fixed:
            continue
        remedy = get_remedy(entry.check_id)
        if remedy is None:
            logger.warning("Check %s was fixed but has no registered remedy", entry.check_id)
            continue
        context = remedy(context)
    return context
