# dynadiag/engine/check_runner.py

from __future__ import annotations

import hashlib
import json
import logging
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from ..checks import _ensure_impls_loaded
from ..checks.definitions import CheckDefinition, get_check_definition
from ..errors import IncompleteContext
from ..models import Context
from ..results import CheckResult, CheckStatus, DiagnosticReport
from .context import CheckContext

logger = logging.getLogger(__name__)

CheckFn = Callable[[CheckContext], CheckResult]
RemedyFn = Callable[[Context], Context]
CheckRef = Union[str, CheckDefinition]

_REGISTRY: Dict[str, CheckFn] = {}
_REMEDIES: Dict[str, RemedyFn] = {}


def register_check(check_id: str) -> Callable[[CheckFn], CheckFn]:
    """
    Decorator used by individual check implementations to register
    their runner.
    """
    def decorator(fn: CheckFn) -> CheckFn:
        _REGISTRY[check_id] = fn
        return fn
    return decorator


def register_remedy(check_id: str) -> Callable[[RemedyFn], RemedyFn]:
    """
    Decorator registering the Context change that an instant fix
    for check_id stands for.
    """
    def decorator(fn: RemedyFn) -> RemedyFn:
        _REMEDIES[check_id] = fn
        return fn
    return decorator


def get_check_runner(check_id: str) -> CheckFn:
    _ensure_impls_loaded()
    try:
        return _REGISTRY[check_id]
    except KeyError:
        raise KeyError(f"No runner registered for check id: {check_id!r}")


def get_remedy(check_id: str) -> Optional[RemedyFn]:
    _ensure_impls_loaded()
    return _REMEDIES.get(check_id)


def resolve_checks(checks: Iterable[CheckRef]) -> List[CheckDefinition]:
    return [c if isinstance(c, CheckDefinition) else get_check_definition(c) for c in checks]


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((_plain(v) for v in value), key=lambda v: json.dumps(v, sort_keys=True))
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value.normalize())
    return value


def report_identity(check_defs: Sequence[CheckDefinition], context: Context) -> str:
    """
    Stable identity for the report produced by check_defs over context.

    Same checks over an equal Context give the same id, so a report can
    be rebuilt bit for bit; any Context change gives a new id.
    """
    payload = {
        "checks": [d.id for d in check_defs],
        "context": _plain(context.model_dump()),
    }
    # Widget config is opaque; values json cannot encode hash by their str()
    text = json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def run_check(check_def: CheckDefinition, context: Context) -> CheckResult:
    """
    Run one check. Never raises for a well formed Context: a missing
    Context field becomes a warning, a crashing check becomes a failure.
    """
    ctx = CheckContext(check_def=check_def, context=context)
    runner = get_check_runner(check_def.id)
    try:
        return runner(ctx)
    except IncompleteContext as exc:
        logger.debug("Check %s skipped: %s", check_def.id, exc)
        return ctx.warning(f"{check_def.step} not evaluated: no {exc.field} in context.")
    except Exception as exc:
        logger.exception("Check %s raised while evaluating", check_def.id)
        return CheckResult(
            check_id=check_def.id,
            step=check_def.step,
            status=CheckStatus.FAIL,
            detail=f"{check_def.step} could not be evaluated: {exc}",
        )


def evaluate(checks: Iterable[CheckRef], context: Context) -> DiagnosticReport:
    """
    Run checks in declaration order against one Context snapshot.

    Every check runs; nothing short-circuits. The order is kept verbatim
    because it is read back to the user as a causal narrative.
    """
    check_defs = resolve_checks(checks)
    results = tuple(run_check(d, context) for d in check_defs)
    report = DiagnosticReport(report_id=report_identity(check_defs, context), results=results)
    logger.debug(
        "Evaluated %d checks (report %s): %s",
        len(results),
        report.report_id,
        report.counts(),
    )
    return report
