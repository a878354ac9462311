from __future__ import annotations

from pathlib import Path
from typing import Type, TypeVar

from .results import DiagnosticReport

R = TypeVar("R", bound=DiagnosticReport)


def load_report(path: Path, cls: Type[R] = DiagnosticReport) -> R:
    """Load a saved report; pass DependencyChain as cls to re-validate the stages."""
    text = Path(path).read_text(encoding="utf-8")
    return cls.model_validate_json(text)


def save_report(report: DiagnosticReport, path: Path) -> None:
    Path(path).write_text(report.to_json(), encoding="utf-8")
