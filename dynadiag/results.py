from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


SEVERITY_RANK = {CheckStatus.PASS: 0, CheckStatus.WARNING: 1, CheckStatus.FAIL: 2}

CHAIN_STAGES: Tuple[str, ...] = ("Campaign", "Experience", "Audience", "Zone", "Theme")


def worst_status(statuses: Iterable[CheckStatus]) -> CheckStatus:
    statuses = list(statuses)
    if not statuses:
        return CheckStatus.PASS
    return max(statuses, key=lambda s: SEVERITY_RANK[s])


class CheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    check_id: str
    step: str
    label: Optional[str] = None

    status: CheckStatus
    detail: str = ""

    fixable: bool = False
    fixed: bool = False
    # Detail shown once the instant fix has been applied
    fix_detail: Optional[str] = None

    @property
    def can_fix(self) -> bool:
        return self.fixable and self.status == CheckStatus.FAIL and not self.fixed

    def as_fixed(self) -> "CheckResult":
        return self.model_copy(
            update={
                "status": CheckStatus.PASS,
                "fixed": True,
                "detail": self.fix_detail or f"{self.step} fixed automatically",
            }
        )


class DiagnosticReport(BaseModel):
    """
    Ordered results of one evaluation pass.

    Order is evaluation order, not severity order. Reports are never
    mutated; replace_result() and apply_fix() hand back new ones that
    keep the same report_id.
    """
    model_config = ConfigDict(frozen=True)

    report_id: str
    results: Tuple[CheckResult, ...] = ()

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index: int) -> CheckResult:
        return self.results[index]

    @property
    def severity(self) -> CheckStatus:
        return worst_status(r.status for r in self.results)

    @property
    def steps(self) -> List[str]:
        return [r.step for r in self.results]

    @property
    def statuses(self) -> List[CheckStatus]:
        return [r.status for r in self.results]

    def has_failures(self) -> bool:
        return any(r.status == CheckStatus.FAIL for r in self.results)

    def fixable_indices(self) -> List[int]:
        return [i for i, r in enumerate(self.results) if r.can_fix]

    def counts(self) -> Dict[str, int]:
        out = {s.value: 0 for s in CheckStatus}
        for r in self.results:
            out[r.status.value] += 1
        return out

    def replace_result(self, index: int, result: CheckResult) -> "DiagnosticReport":
        results = list(self.results)
        results[index] = result
        return self.model_copy(update={"results": tuple(results)})

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, data: str) -> "DiagnosticReport":
        return cls.model_validate_json(data)


class DependencyChain(DiagnosticReport):
    """DiagnosticReport holding exactly the five widget-visibility stages."""

    @model_validator(mode="after")
    def _validate_stages(self):
        steps = tuple(r.step for r in self.results)
        if steps != CHAIN_STAGES:
            raise ValueError(
                f"dependency chain must hold stages {list(CHAIN_STAGES)}, got {list(steps)}"
            )
        return self

    def stage(self, name: str) -> CheckResult:
        return self.results[CHAIN_STAGES.index(name)]


class VisibilityVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    visible: bool
    reason: str

    @property
    def headline(self) -> str:
        return f"{'VISIBLE' if self.visible else 'HIDDEN'}: {self.reason}"
