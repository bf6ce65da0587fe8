"""
kinds.py
--------
The kind of a visit as a tagged variant, so callers never have to read
has_reservation / previous_visit / reservation side by side to work out what
a visit is.

    Reserved(details)         pre-booked by an admin
    Walkin()                  assigned through the rotation queue
    Returning(prior_staff_id) inherited from the most recent previous visit
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Reserved:
    details: object
    tag: str = "reserved"


@dataclass(frozen=True)
class Walkin:
    tag: str = "walkin"


@dataclass(frozen=True)
class Returning:
    prior_staff_id: Optional[int]
    previous_visit_id: Optional[int] = None
    tag: str = "returning"


VisitKind = Union[Reserved, Walkin, Returning]


def visit_kind(visitor) -> VisitKind:
    from .models import Reservation, Visitor

    if visitor.kind == Visitor.KIND_RESERVED:
        try:
            details = visitor.reservation
        except Reservation.DoesNotExist:
            details = None
        return Reserved(details=details)
    if visitor.kind == Visitor.KIND_RETURNING:
        return Returning(
            prior_staff_id=visitor.assigned_staff_id,
            previous_visit_id=visitor.previous_visit_id,
        )
    return Walkin()


def notification_reason(kind: VisitKind) -> str:
    """Event name sent to the assigned staff member for this kind of visit."""
    if isinstance(kind, Reserved):
        return "reserved_visitor"
    if isinstance(kind, Returning):
        return "returning_visitor"
    return "new_visitor"
