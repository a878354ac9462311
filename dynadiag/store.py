from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .engine.chain import build_chain
from .errors import MalformedConfiguration
from .models import Campaign, Context, MigrationStatus, ShopperContext, StoreHealth, Widget
from .results import DependencyChain, DiagnosticReport
from .triage import Ticket, TicketDraft, create_ticket, ensure_diagnosable, transition

logger = logging.getLogger(__name__)


class StoreSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    store: StoreHealth
    widgets: Tuple[Widget, ...] = ()
    campaigns: Tuple[Campaign, ...] = ()
    tickets: Tuple[Ticket, ...] = ()

    def widget(self, widget_id: str) -> Widget:
        for w in self.widgets:
            if w.id == widget_id:
                return w
        raise KeyError(f"Unknown widget: {widget_id!r}")

    def campaign(self, campaign_id: str) -> Campaign:
        for c in self.campaigns:
            if c.id == campaign_id:
                return c
        raise KeyError(f"Unknown campaign: {campaign_id!r}")

    def ticket(self, ticket_id: str) -> Ticket:
        for t in self.tickets:
            if t.id == ticket_id:
                return t
        raise KeyError(f"Unknown ticket: {ticket_id!r}")


class SupportStore:
    """
    Owner of tickets, widgets, campaigns and store health.

    Every mutation swaps in a new immutable StoreSnapshot. The engine
    only ever sees Contexts derived from a snapshot, never the store.
    """

    def __init__(self, snapshot: StoreSnapshot):
        self._snapshot = snapshot
        self._lock = RLock()
        self._ticket_seq = len(snapshot.tickets)

    @property
    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return self._snapshot

    def _swap(self, **changes: Any) -> StoreSnapshot:
        self._snapshot = self._snapshot.model_copy(update=changes)
        return self._snapshot

    def _next_ticket_id(self) -> str:
        existing = {t.id for t in self._snapshot.tickets}
        while True:
            self._ticket_seq += 1
            candidate = f"tkt_{self._ticket_seq:03d}"
            if candidate not in existing:
                return candidate

    # --- tickets ---------------------------------------------------------

    def create_ticket(
        self,
        draft: TicketDraft,
        report: Optional[DiagnosticReport] = None,
        created_at: Optional[datetime] = None,
    ) -> Ticket:
        with self._lock:
            ticket = create_ticket(draft, self._next_ticket_id(), report, created_at)
            # Newest first
            self._swap(tickets=(ticket,) + self._snapshot.tickets)
            return ticket

    def update_ticket(self, ticket_id: str, **changes: Any) -> Ticket:
        """
        Apply field changes to a ticket. A status change goes through the
        triage state machine; Resolved tickets reject it.
        """
        with self._lock:
            if "id" in changes:
                raise ValueError(f"Ticket id of {ticket_id!r} cannot be changed")
            ticket = self._snapshot.ticket(ticket_id)
            status = changes.pop("status", None)
            if status is not None:
                ticket = transition(ticket, status)
            if changes:
                ticket = Ticket.model_validate({**ticket.model_dump(), **changes})
            self._replace_ticket(ticket)
            return ticket

    def set_migration_status(self, ticket_id: str, task_id: str, status: MigrationStatus) -> Ticket:
        """Migration task status is set by agents; nothing advances it automatically."""
        with self._lock:
            ticket = self._snapshot.ticket(ticket_id)
            if not any(t.id == task_id for t in ticket.migration_tasks):
                raise KeyError(f"Unknown migration task {task_id!r} on ticket {ticket_id!r}")
            tasks = tuple(
                t.model_copy(update={"status": MigrationStatus(status)}) if t.id == task_id else t
                for t in ticket.migration_tasks
            )
            ticket = ticket.model_copy(update={"migration_tasks": tasks})
            self._replace_ticket(ticket)
            return ticket

    def _replace_ticket(self, ticket: Ticket) -> None:
        self._swap(tickets=tuple(ticket if t.id == ticket.id else t for t in self._snapshot.tickets))

    # --- widgets ---------------------------------------------------------

    def update_widget_config(self, widget_id: str, config: Union[str, Mapping[str, Any]]) -> Widget:
        """
        Replace a widget's configuration payload.

        The payload is opaque; it only has to be a JSON object.
        """
        if isinstance(config, str):
            try:
                config = json.loads(config)
            except json.JSONDecodeError as exc:
                raise MalformedConfiguration(f"Invalid JSON for widget {widget_id!r}: {exc}") from exc
        if not isinstance(config, Mapping):
            raise MalformedConfiguration(f"Widget {widget_id!r} config must be a JSON object")

        with self._lock:
            widget = self._snapshot.widget(widget_id).model_copy(update={"config": dict(config)})
            self._swap(widgets=tuple(widget if w.id == widget_id else w for w in self._snapshot.widgets))
            logger.info("Updated config for widget %s", widget_id)
            return widget

    # --- engine inputs ---------------------------------------------------

    def context_for(
        self,
        widget_id: Optional[str] = None,
        shopper: Optional[ShopperContext] = None,
        campaign_id: Optional[str] = None,
    ) -> Context:
        """
        Read-only Context for the engine. The campaign follows the widget
        unless campaign_id is given; an id that does not resolve leaves the
        campaign empty and the Campaign stage reports it.
        """
        snap = self.snapshot
        widget = snap.widget(widget_id) if widget_id else None
        cid = campaign_id or (widget.campaign_id if widget is not None else None)
        campaign = next((c for c in snap.campaigns if c.id == cid), None) if cid else None
        return Context(store=snap.store, widget=widget, shopper=shopper, campaign=campaign)

    def chain_for_ticket(self, ticket_id: str, shopper: Optional[ShopperContext] = None) -> DependencyChain:
        ticket = ensure_diagnosable(self.snapshot.ticket(ticket_id))
        if not ticket.widget_id:
            raise KeyError(f"Ticket {ticket_id!r} has no widget")
        ctx = self.context_for(ticket.widget_id, shopper)
        return build_chain(ctx.widget, ctx)


def _default_seed_path() -> Path:
    return Path(__file__).resolve().parent / "data" / "demo_store.json"


def load_support_store(path: Path | None = None) -> SupportStore:
    """Build a SupportStore from a JSON seed (the bundled demo store by default)."""
    if path is None:
        path = _default_seed_path()
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return SupportStore(StoreSnapshot.model_validate(data))
