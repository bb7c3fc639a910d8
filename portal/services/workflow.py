# portal/services/workflow.py
"""
Status workflows for complaints and service requests.

Transitions only happen through explicit staff/admin action; nothing here
derives a status from dates or other record data.
"""
from typing import Dict, FrozenSet, List, Optional, TypeVar, Union

from portal.core.auth import require_staff
from portal.errors import InvalidStatusTransition
from portal.schemas.auth import User
from portal.schemas.complaints import ComplaintStatus
from portal.schemas.services import ServiceStatus

S = TypeVar("S", ComplaintStatus, ServiceStatus)

COMPLAINT_TRANSITIONS: Dict[ComplaintStatus, FrozenSet[ComplaintStatus]] = {
    ComplaintStatus.PENDING: frozenset(
        {ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED}
    ),
    ComplaintStatus.IN_PROGRESS: frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED}),
    ComplaintStatus.RESOLVED: frozenset({ComplaintStatus.CLOSED}),
    ComplaintStatus.CLOSED: frozenset(),
}

SERVICE_TRANSITIONS: Dict[ServiceStatus, FrozenSet[ServiceStatus]] = {
    ServiceStatus.PENDING: frozenset({ServiceStatus.APPROVED, ServiceStatus.REJECTED}),
    ServiceStatus.APPROVED: frozenset({ServiceStatus.BORROWED}),
    ServiceStatus.BORROWED: frozenset({ServiceStatus.RETURNED}),
    ServiceStatus.RETURNED: frozenset(),
    ServiceStatus.REJECTED: frozenset(),
}


def _table_for(status: Union[ComplaintStatus, ServiceStatus]) -> Dict:
    if isinstance(status, ComplaintStatus):
        return COMPLAINT_TRANSITIONS
    return SERVICE_TRANSITIONS


def _coerce(current: S, target: Union[str, S]) -> S:
    return type(current)(target)


def can_transition(current: S, target: Union[str, S]) -> bool:
    try:
        target = _coerce(current, target)
    except ValueError:
        return False
    return target in _table_for(current)[current]


def allowed_transitions(current: S) -> List[S]:
    """Reachable statuses in workflow order, for building a status picker."""
    reachable = _table_for(current)[current]
    return [status for status in type(current) if status in reachable]


def is_terminal(status: Union[ComplaintStatus, ServiceStatus]) -> bool:
    return not _table_for(status)[status]


def ensure_transition(current: S, target: Union[str, S], actor: Optional[User] = None) -> S:
    """Validate a staff-initiated status change and return the target status."""
    if actor is not None:
        require_staff(actor)
    if not can_transition(current, target):
        raise InvalidStatusTransition(str(current.value), str(getattr(target, "value", target)))
    return _coerce(current, target)
