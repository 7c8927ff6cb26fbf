"""Request status state machine.

State Flow:
    pending → accepted | declined   (recipient tenant responds)
    pending → expired               (sender tenant withdraws)

Terminal States: accepted, declined, expired

``expired`` means "withdrawn by the sender"; there is no time-based expiry.
"""

from enum import Enum
from typing import Dict, Optional


class RequestKind(str, Enum):
    """What a request is about."""
    TALENT = "talent"
    OPPORTUNITY = "opportunity"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class RequestEvent(str, Enum):
    """Workflow events, named as they appear in metrics and audit entries."""
    CREATE = "create"
    EDIT = "edit"
    WITHDRAW = "withdraw"
    ACCEPT = "accept"
    DECLINE = "decline"


class ResponseDecision(str, Enum):
    """Recipient's answer to a pending request."""
    ACCEPT = "accept"
    DECLINE = "decline"

    @property
    def event(self) -> RequestEvent:
        return RequestEvent.ACCEPT if self is ResponseDecision.ACCEPT else RequestEvent.DECLINE


# Status reached by each event from pending; terminal states accept no events
ALLOWED_TRANSITIONS: Dict[RequestStatus, Dict[RequestEvent, RequestStatus]] = {
    RequestStatus.PENDING: {
        RequestEvent.EDIT: RequestStatus.PENDING,
        RequestEvent.WITHDRAW: RequestStatus.EXPIRED,
        RequestEvent.ACCEPT: RequestStatus.ACCEPTED,
        RequestEvent.DECLINE: RequestStatus.DECLINED,
    },
    RequestStatus.ACCEPTED: {},
    RequestStatus.DECLINED: {},
    RequestStatus.EXPIRED: {},
}


def next_status(current: RequestStatus, event: RequestEvent) -> Optional[RequestStatus]:
    """Status after ``event``, or None if the event is not allowed from ``current``."""
    return ALLOWED_TRANSITIONS.get(current, {}).get(event)


def parse_status_filter(value: Optional[str]) -> Optional[RequestStatus]:
    """Interpret a listing status filter.

    "all", missing and unrecognized values all mean "no status predicate";
    an unrecognized value never raises.
    """
    if not value:
        return None
    try:
        return RequestStatus(value.strip().lower())
    except ValueError:
        return None


def parse_kind_filter(value: Optional[str]) -> Optional[RequestKind]:
    """Same permissive rule as parse_status_filter, for the kind filter."""
    if not value:
        return None
    try:
        return RequestKind(value.strip().lower())
    except ValueError:
        return None
