from __future__ import annotations

from enum import Enum, IntEnum
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .checks.definitions import load_suite
from .engine.check_runner import CheckRef, evaluate
from .engine.remediation import RemediationLedger
from .errors import InvalidTransition
from .models import Context
from .report import render_diagnostics_summary
from .results import DiagnosticReport
from .triage import TicketDraft, TicketPriority, TicketType

SYSTEM_HEALTH_SUITE = "system_health"


class WizardStep(IntEnum):
    STORE = 1
    SCOPE = 2
    TRIAGE = 3
    EVIDENCE = 4
    REVIEW = 5


class Scope(str, Enum):
    WIDGET = "widget"
    CAMPAIGN = "campaign"
    GLOBAL = "global"


class IntakeSession(BaseModel):
    """
    State of one pass through the support intake wizard.

    Review cannot be reached without a diagnostic report, and the
    report (with any instant fixes) is what the ticket is created from.
    """
    model_config = ConfigDict(frozen=True)

    step: WizardStep = WizardStep.STORE
    store_url: str = ""
    contact_name: str = ""
    contact_email: Optional[str] = None
    scope: Scope = Scope.WIDGET
    widget_id: Optional[str] = None
    campaign_id: Optional[str] = None
    ticket_type: TicketType = TicketType.CONFIGURATION
    sub_category: str = ""
    impact: TicketPriority = TicketPriority.MEDIUM
    device: str = "Both"
    attachments: Tuple[str, ...] = ()
    report: Optional[DiagnosticReport] = None

    # Fixes applied to this session's report; replaced on every diagnostics run
    _ledger: Optional[RemediationLedger] = PrivateAttr(default=None)

    def update(self, **changes) -> "IntakeSession":
        session = self.model_validate({**self.model_dump(), **changes})
        session._ledger = self._ledger
        return session

    def advance(self) -> "IntakeSession":
        if self.step == WizardStep.REVIEW:
            raise InvalidTransition("Intake is already at review")
        if self.step == WizardStep.EVIDENCE and self.report is None:
            raise InvalidTransition("Run diagnostics before moving to review")
        return self.model_copy(update={"step": WizardStep(self.step + 1)})

    def back(self) -> "IntakeSession":
        if self.step == WizardStep.STORE:
            return self
        return self.model_copy(update={"step": WizardStep(self.step - 1)})

    def run_diagnostics(
        self,
        context: Context,
        checks: Optional[Iterable[CheckRef]] = None,
    ) -> "IntakeSession":
        """Evaluate the system-health suite and jump to review."""
        if self.step < WizardStep.EVIDENCE:
            raise InvalidTransition("Diagnostics run once the evidence step is reached")
        if checks is None:
            checks = load_suite(SYSTEM_HEALTH_SUITE)
        report = evaluate(checks, context)
        session = self.model_copy(update={"report": report, "step": WizardStep.REVIEW})
        session._ledger = RemediationLedger()
        return session

    def instant_fix(self, index: int) -> "IntakeSession":
        """
        Apply the instant fix for report[index].

        Fixes are tracked per diagnostics run, so two sessions on an equal
        Context fix independently, and re-running diagnostics starts clean.
        """
        if self.report is None or self._ledger is None:
            raise InvalidTransition("No diagnostics to fix")
        return self.model_copy(update={"report": self._ledger.apply_fix(self.report, index)})

    def describe(self, description: str, issue_url: Optional[str] = None) -> str:
        if self.scope == Scope.WIDGET:
            context_line = f"Widget: {self.widget_id or '-'}"
        elif self.scope == Scope.CAMPAIGN:
            context_line = f"Campaign: {self.campaign_id or '-'}"
        else:
            context_line = "Global Issue"

        contact = self.contact_name
        if self.contact_email:
            contact = f"{contact} ({self.contact_email})"

        diagnostics = render_diagnostics_summary(self.report) if self.report is not None else "Not run"
        attachments = ", ".join(self.attachments) if self.attachments else "None"
        parts = [
            f"**Contact:** {contact}",
            f"**Context:** {context_line}",
            f"**Category:** {self.ticket_type.value} > {self.sub_category}",
            f"**Impact:** {self.impact.value}",
            f"**Device:** {self.device}",
        ]
        if issue_url:
            parts.append(f"**Issue URL:** {issue_url}")
        parts += [
            "",
            "**Issue Description:**",
            description,
            "",
            "**System Diagnostics:**",
            diagnostics,
            "",
            "**Attachments:**",
            attachments,
        ]
        return "\n".join(parts).strip()

    def to_draft(self, subject: str = "", description: str = "", issue_url: Optional[str] = None) -> TicketDraft:
        if self.step != WizardStep.REVIEW or self.report is None:
            raise InvalidTransition("Submit is only possible from review with diagnostics")
        return TicketDraft(
            subject=subject or f"{self.sub_category or self.ticket_type.value} Issue",
            description=self.describe(description, issue_url),
            type=self.ticket_type,
            priority=self.impact,
            merchant_name=self.contact_name,
            merchant_email=self.contact_email,
            store_url=self.store_url,
            issue_url=issue_url,
            widget_id=self.widget_id if self.scope == Scope.WIDGET else None,
            campaign_id=self.campaign_id if self.scope == Scope.CAMPAIGN else None,
        )
