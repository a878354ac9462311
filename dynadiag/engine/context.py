# dynadiag/engine/context.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..checks.definitions import CheckDefinition
from ..errors import IncompleteContext
from ..models import Campaign, Context, ShopperContext, StoreHealth, Widget
from ..results import CheckResult, CheckStatus


@dataclass(frozen=True)
class CheckContext:
    """
    Execution context passed into each check runner.

    Carries:
      - the check definition (label, fixability, settings)
      - the read-only Context snapshot being diagnosed
    """
    check_def: CheckDefinition
    context: Context

    @property
    def store(self) -> StoreHealth:
        return self.context.store

    @property
    def widget(self) -> Optional[Widget]:
        return self.context.widget

    @property
    def shopper(self) -> Optional[ShopperContext]:
        return self.context.shopper

    @property
    def campaign(self) -> Optional[Campaign]:
        return self.context.campaign

    def require(self, field: str) -> Any:
        value = getattr(self.context, field)
        if value is None:
            raise IncompleteContext(field, self.check_def.id)
        return value

    def setting(self, key: str, default: Any = None) -> Any:
        return self.check_def.raw.get(key, default)

    def result(
        self,
        status: CheckStatus,
        detail: str,
        label: Optional[str] = None,
    ) -> CheckResult:
        # Only failing entries carry an instant fix
        fixable = self.check_def.fixable and status == CheckStatus.FAIL
        return CheckResult(
            check_id=self.check_def.id,
            step=self.check_def.step,
            label=label,
            status=status,
            detail=detail,
            fixable=fixable,
            fix_detail=self.check_def.fix_detail if fixable else None,
        )

    def passed(self, detail: str, label: Optional[str] = None) -> CheckResult:
        return self.result(CheckStatus.PASS, detail, label)

    def warning(self, detail: str, label: Optional[str] = None) -> CheckResult:
        return self.result(CheckStatus.WARNING, detail, label)

    def failed(self, detail: str, label: Optional[str] = None) -> CheckResult:
        return self.result(CheckStatus.FAIL, detail, label)
