"""
dynadiag package init.

Public surface of the widget diagnostics engine: the four engine
operations plus the records they take and return.
"""

from .engine import apply_fix, build_chain, evaluate, simulate
from .errors import (
    DiagnosticError,
    IncompleteContext,
    InvalidFixRequest,
    MalformedConfiguration,
)
from .models import Context, ShopperContext, StoreHealth, Widget
from .results import (
    CheckResult,
    CheckStatus,
    DependencyChain,
    DiagnosticReport,
    VisibilityVerdict,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "Context",
    "DependencyChain",
    "DiagnosticError",
    "DiagnosticReport",
    "IncompleteContext",
    "InvalidFixRequest",
    "MalformedConfiguration",
    "ShopperContext",
    "StoreHealth",
    "VisibilityVerdict",
    "Widget",
    "apply_fix",
    "build_chain",
    "evaluate",
    "simulate",
]
