from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .checks.definitions import find_check_definition
from .errors import InvalidTransition, TicketResolved, UncorroboratedPriority
from .models import MigrationTask
from .results import CheckStatus, DiagnosticReport

logger = logging.getLogger(__name__)


class TicketStatus(str, Enum):
    OPEN = "Open"
    IN_REVIEW = "In Review"
    WAITING_FOR_APPROVAL = "Waiting for Approval"
    RESOLVED = "Resolved"


class TicketPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TicketType(str, Enum):
    BUG = "Bug"
    CONFIGURATION = "Configuration"
    STYLING = "Styling"
    MIGRATION = "Migration"
    FEATURE = "Feature Request"


class Sender(str, Enum):
    MERCHANT = "merchant"
    AGENT = "agent"
    SYSTEM = "system"


# Agent-driven moves; Resolved is terminal.
ALLOWED_TRANSITIONS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.OPEN: frozenset({
        TicketStatus.IN_REVIEW, TicketStatus.WAITING_FOR_APPROVAL, TicketStatus.RESOLVED,
    }),
    TicketStatus.IN_REVIEW: frozenset({
        TicketStatus.OPEN, TicketStatus.WAITING_FOR_APPROVAL, TicketStatus.RESOLVED,
    }),
    TicketStatus.WAITING_FOR_APPROVAL: frozenset({
        TicketStatus.OPEN, TicketStatus.IN_REVIEW, TicketStatus.RESOLVED,
    }),
    TicketStatus.RESOLVED: frozenset(),
}


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    sender: Sender
    content: str
    timestamp: datetime
    is_internal: bool = False


class TicketDraft(BaseModel):
    """What the intake flow hands over before a ticket exists."""
    model_config = ConfigDict(frozen=True)

    subject: str = "No Subject"
    description: str = ""
    type: TicketType = TicketType.CONFIGURATION
    priority: TicketPriority = TicketPriority.MEDIUM
    merchant_name: str = ""
    merchant_email: Optional[str] = None
    store_url: str = ""
    issue_url: Optional[str] = None
    widget_id: Optional[str] = None
    campaign_id: Optional[str] = None


class Ticket(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    subject: str
    description: str = ""
    type: TicketType
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority
    merchant_name: str = ""
    merchant_email: Optional[str] = None
    store_url: str = ""
    issue_url: Optional[str] = None
    created_at: datetime
    widget_id: Optional[str] = None
    campaign_id: Optional[str] = None
    messages: Tuple[Message, ...] = ()
    migration_tasks: Tuple[MigrationTask, ...] = ()
    tags: Tuple[str, ...] = Field(default_factory=tuple)

    @property
    def is_resolved(self) -> bool:
        return self.status == TicketStatus.RESOLVED


def priority_from_impact(impact: str) -> TicketPriority:
    """Map the wizard's impact choice one to one onto a priority."""
    try:
        return TicketPriority(impact)
    except ValueError:
        raise ValueError(f"Unknown impact level: {impact!r}")


def derive_tags(ticket_type: TicketType, report: Optional[DiagnosticReport]) -> Tuple[str, ...]:
    """
    Ticket tags at creation: the ticket type, then the tags of every
    failing or warning check, first occurrence order, no duplicates.
    """
    tags: List[str] = [ticket_type.value.replace(" ", "")]
    if report is not None:
        for entry in report.results:
            if entry.status == CheckStatus.PASS:
                continue
            check_def = find_check_definition(entry.check_id)
            for tag in (check_def.tags if check_def is not None else ()):
                if tag not in tags:
                    tags.append(tag)
    return tuple(tags)


def create_ticket(
    draft: TicketDraft,
    ticket_id: str,
    report: Optional[DiagnosticReport] = None,
    created_at: Optional[datetime] = None,
) -> Ticket:
    """
    Finalize a draft into an Open ticket.

    Critical priority needs corroboration: at least one failing entry in
    the diagnostic report. Other priorities are taken as supplied.
    """
    if draft.priority == TicketPriority.CRITICAL and (report is None or not report.has_failures()):
        raise UncorroboratedPriority(
            "Critical priority requires at least one failing diagnostic"
        )

    ticket = Ticket(
        id=ticket_id,
        subject=draft.subject,
        description=draft.description,
        type=draft.type,
        status=TicketStatus.OPEN,
        priority=draft.priority,
        merchant_name=draft.merchant_name,
        merchant_email=draft.merchant_email,
        store_url=draft.store_url,
        issue_url=draft.issue_url,
        created_at=created_at or datetime.now(timezone.utc),
        widget_id=draft.widget_id,
        campaign_id=draft.campaign_id,
        tags=derive_tags(draft.type, report),
    )
    logger.info("Created ticket %s (%s, %s)", ticket.id, ticket.type.value, ticket.priority.value)
    return ticket


def transition(ticket: Ticket, status: TicketStatus) -> Ticket:
    status = TicketStatus(status)
    if ticket.is_resolved:
        raise TicketResolved(f"Ticket {ticket.id} is resolved")
    if status == ticket.status:
        return ticket
    if status not in ALLOWED_TRANSITIONS[ticket.status]:
        raise InvalidTransition(
            f"Ticket {ticket.id} cannot move from {ticket.status.value} to {status.value}"
        )
    logger.info("Ticket %s: %s -> %s", ticket.id, ticket.status.value, status.value)
    return ticket.model_copy(update={"status": status})


def ensure_diagnosable(ticket: Ticket) -> Ticket:
    """Raise TicketResolved when diagnostics are requested for a resolved ticket."""
    if ticket.is_resolved:
        raise TicketResolved(f"Ticket {ticket.id} is resolved; diagnostics are closed")
    return ticket
