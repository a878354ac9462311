# dynadiag/engine/__init__.py

from .context import CheckContext
from .check_runner import (
    evaluate,
    get_check_runner,
    get_remedy,
    register_check,
    register_remedy,
    run_check,
)
from .chain import build_chain
from .simulator import simulate
from .remediation import RemediationLedger, apply_fix, default_ledger, remediated_context
from .regression import RegressionSuite, RunStatus, run_regression

__all__ = [
    "CheckContext",
    "RegressionSuite",
    "RemediationLedger",
    "RunStatus",
    "apply_fix",
    "build_chain",
    "default_ledger",
    "evaluate",
    "get_check_runner",
    "get_remedy",
    "register_check",
    "register_remedy",
    "remediated_context",
    "run_check",
    "run_regression",
    "simulate",
]
