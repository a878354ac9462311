from __future__ import annotations

from typing import Optional


class DiagnosticError(Exception):
    """Base class for every error raised by dynadiag."""


class InvalidFixRequest(DiagnosticError, ValueError):
    """
    apply_fix was called on an index that cannot be fixed: out of range,
    not failing, not fixable, or already fixed.
    """

    def __init__(self, message: str, report_id: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.report_id = report_id
        self.index = index


class IncompleteContext(DiagnosticError):
    """
    Raised by a check that needs a Context field which is absent.

    The evaluator turns this into a warning result for that check only.
    """

    def __init__(self, field: str, check_id: Optional[str] = None):
        self.field = field
        self.check_id = check_id
        where = f" for check {check_id!r}" if check_id else ""
        super().__init__(f"Context has no {field!r}{where}")


class MalformedConfiguration(DiagnosticError, ValueError):
    """Widget configuration payload could not be read as a JSON object."""


class UncorroboratedPriority(DiagnosticError, ValueError):
    """Critical priority requested without a failing diagnostic to back it."""


class InvalidTransition(DiagnosticError, ValueError):
    pass


class TicketResolved(DiagnosticError):
    """Resolved tickets accept no further transitions or diagnostics."""
