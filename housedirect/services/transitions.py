"""Allowed status transitions for verification requests, reports and leads.

Each table maps a current status to the set of statuses it may move to.
A status mapped to an empty set is terminal.
"""

from enum import Enum
from typing import Mapping, TypeVar

from housedirect.core.errors import InvalidTransitionError
from housedirect.models.enums import LeadStatus, ReportStatus, VerificationStatus

S = TypeVar("S", bound=Enum)


VERIFICATION_TRANSITIONS: Mapping[VerificationStatus, frozenset[VerificationStatus]] = {
    VerificationStatus.PENDING: frozenset(
        {VerificationStatus.APPROVED, VerificationStatus.REJECTED}
    ),
    VerificationStatus.APPROVED: frozenset(),
    VerificationStatus.REJECTED: frozenset(),
}

# Re-submitting an open status is allowed so admins can update their notes.
REPORT_TRANSITIONS: Mapping[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.NEW: frozenset(
        {
            ReportStatus.NEW,
            ReportStatus.INVESTIGATING,
            ReportStatus.RESOLVED,
            ReportStatus.DISMISSED,
        }
    ),
    ReportStatus.INVESTIGATING: frozenset(
        {ReportStatus.INVESTIGATING, ReportStatus.RESOLVED, ReportStatus.DISMISSED}
    ),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.DISMISSED: frozenset(),
}

LEAD_OPEN_STATUSES = frozenset(
    {
        LeadStatus.NEW,
        LeadStatus.CONTACTED,
        LeadStatus.VIEWING_SCHEDULED,
        LeadStatus.VIEWING_COMPLETED,
        LeadStatus.OFFER_MADE,
        LeadStatus.NEGOTIATING,
        LeadStatus.NURTURING,
    }
)

LEAD_CLOSED_STATUSES = frozenset({LeadStatus.CLOSED_WON, LeadStatus.CLOSED_LOST})

# Open leads move freely; a lost lead can only be re-opened into nurturing.
LEAD_TRANSITIONS: Mapping[LeadStatus, frozenset[LeadStatus]] = {
    **{status: frozenset(LeadStatus) for status in LEAD_OPEN_STATUSES},
    LeadStatus.CLOSED_LOST: frozenset({LeadStatus.NURTURING}),
    LeadStatus.CLOSED_WON: frozenset(),
}


def can_transition(table: Mapping[S, frozenset[S]], current: S, requested: S) -> bool:
    return requested in table.get(current, frozenset())


def ensure_transition(
    kind: str,
    table: Mapping[S, frozenset[S]],
    current: S,
    requested: S,
) -> None:
    """Raise InvalidTransitionError unless ``current -> requested`` is allowed."""
    if not can_transition(table, current, requested):
        raise InvalidTransitionError(kind, current.value, requested.value)
