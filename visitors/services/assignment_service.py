"""
assignment_service.py
---------------------
Decides which staff member meets each visitor and drives the visit status.

Flows:
- Kiosk registration: a visitor seen before (same normalized name + phone)
  goes back to the staff member of their most recent visit, even if that
  staff member's slot is now inactive, and the queue is not touched.
  Everybody else is a walk-in and takes the next slot from the rotation; if
  the whole rotation is full the visit is stored unassigned.
- Reservations: admin-only; the requested staff member is looked up by exact
  name + org unit and the Reservation row is written with the Visitor.
- Status: waiting -> meeting -> completed. Only the assigned staff member may
  confirm. Completion hands the held slot load back to the queue.

Notes:
- Notifications go out after the registering transaction commits; a relay
  failure is logged by the relay and never undoes a registration.
"""

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from notifications.services.relay import NotificationRelay
from staff.permissions import is_admin
from staff.services.directory import find_staff_by_name_and_org_unit
from staff.services.work_order_queue import WorkOrderQueue

from ..exceptions import InvalidTransition, StaffNotFound
from ..kinds import notification_reason, visit_kind
from ..models import Reservation, Visitor, normalize_name, normalize_phone

logger = logging.getLogger(__name__)

VISITOR_FIELDS = ("city", "district", "gender", "age_group")
CONFIRM_TARGETS = (Visitor.STATUS_MEETING, Visitor.STATUS_COMPLETED)


def _require(data, fields):
    missing = [f for f in fields if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError({f: ["This field is required."] for f in missing})


def find_previous_visit(name, phone):
    """Most recent visit with the same normalized name and phone, or None."""
    name_key = normalize_name(name)
    phone_key = normalize_phone(phone)
    if not name_key or not phone_key:
        return None
    return (
        Visitor.objects.select_related("assigned_staff")
        .filter(name_key=name_key, phone_key=phone_key)
        .order_by("-visited_at", "-id")
        .first()
    )


class AssignmentService:
    def __init__(self, queue=None, relay=None):
        self.queue = queue or WorkOrderQueue()
        self.relay = relay or NotificationRelay()

    # -------------------- registration --------------------

    def register_visitor(self, data) -> Visitor:
        """
        Register a kiosk visit and assign a staff member.

        Args:
            data: mapping with name, phone, optional has_reservation and the
                optional questionnaire fields (city, district, gender, age_group).

        Raises:
            ValidationError: name or phone missing.
        """
        _require(data, ("name", "phone"))

        with transaction.atomic():
            visitor = Visitor(
                name=data["name"],
                phone=data["phone"],
                has_reservation=bool(data.get("has_reservation", False)),
                **{f: data.get(f) or "" for f in VISITOR_FIELDS},
            )

            previous = find_previous_visit(visitor.name, visitor.phone)
            if previous is not None:
                visitor.kind = Visitor.KIND_RETURNING
                visitor.previous_visit = previous
                visitor.assigned_staff_id = previous.assigned_staff_id
            else:
                visitor.kind = Visitor.KIND_WALKIN
                slot = self.queue.claim_next()
                if slot is not None:
                    visitor.assigned_staff_id = slot.staff_id
                    visitor.slot = slot
                else:
                    logger.warning("No staff available for walk-in %r; stored unassigned", visitor.name)

            visitor.save()

            if visitor.assigned_staff_id is not None:
                self._notify_after_commit(visitor)

        logger.info(
            "Registered visitor %s (%s) assigned to %s",
            visitor.pk, visitor.kind, visitor.assigned_staff_id,
        )
        return visitor

    def register_reservation(self, data, caller) -> Visitor:
        """
        Pre-book a visit with a named staff member.

        Args:
            data: name, phone, division, headquarters, team, staff_name and
                optional position / expected_visit_time.
            caller: the requesting user; must hold the admin role.

        Raises:
            PermissionDenied: caller is not an admin.
            ValidationError: a required field is missing.
            StaffNotFound: no staff member with that name in that org unit.
        """
        if not is_admin(caller):
            raise PermissionDenied("Only admins can create reservations.")
        _require(data, ("name", "phone", "division", "headquarters", "team", "staff_name"))

        org_path = "/".join(data[f].strip() for f in ("division", "headquarters", "team"))
        staff = find_staff_by_name_and_org_unit(
            data["staff_name"], data["division"], data["headquarters"], data["team"]
        )
        if staff is None:
            raise StaffNotFound(f"No staff member named {data['staff_name']!r} in {org_path}.")

        with transaction.atomic():
            visitor = Visitor.objects.create(
                name=data["name"],
                phone=data["phone"],
                has_reservation=True,
                kind=Visitor.KIND_RESERVED,
                assigned_staff=staff,
                **{f: data.get(f) or "" for f in VISITOR_FIELDS},
            )
            Reservation.objects.create(
                visitor=visitor,
                division=data["division"].strip(),
                headquarters=data["headquarters"].strip(),
                team=data["team"].strip(),
                staff_name=data["staff_name"].strip(),
                position=(data.get("position") or "").strip(),
                expected_visit_time=data.get("expected_visit_time"),
            )
            self._notify_after_commit(visitor)

        logger.info("Reservation %s created for staff %s", visitor.pk, staff.pk)
        return visitor

    # -------------------- status --------------------

    def _locked_visitor(self, visitor_id) -> Visitor:
        try:
            return Visitor.objects.select_for_update().get(pk=visitor_id)
        except Visitor.DoesNotExist:
            raise NotFound(f"Visitor {visitor_id} not found.")

    def confirm_visitor(self, visitor_id, caller, status=None) -> Visitor:
        """
        Assigned staff member acknowledges the visitor.

        status defaults to meeting; completed is also accepted.

        Raises:
            ValidationError: unknown target status.
            NotFound: unknown visitor.
            PermissionDenied: caller is not the assigned staff member.
            InvalidTransition: the visit is already completed.
        """
        target = status or Visitor.STATUS_MEETING
        if target not in CONFIRM_TARGETS:
            raise ValidationError({"status": [f"Must be one of: {', '.join(CONFIRM_TARGETS)}."]})

        with transaction.atomic():
            visitor = self._locked_visitor(visitor_id)
            if visitor.assigned_staff_id is None or visitor.assigned_staff_id != caller.pk:
                raise PermissionDenied("Only the assigned staff member can confirm this visitor.")
            if visitor.is_completed:
                raise InvalidTransition("This visit is already completed.")

            now = timezone.now()
            visitor.status = target
            visitor.notification_confirmed = True
            if visitor.confirmed_at is None:
                visitor.confirmed_at = now
            fields = ["status", "notification_confirmed", "confirmed_at", "updated_at"]
            if target == Visitor.STATUS_COMPLETED:
                fields += self._finish(visitor, now)
            visitor.save(update_fields=fields)

        logger.info("Visitor %s confirmed by %s -> %s", visitor.pk, caller.pk, target)
        return visitor

    def complete_visitor(self, visitor_id, caller) -> Visitor:
        """
        Close a visit that is in a meeting.

        Raises:
            NotFound: unknown visitor.
            PermissionDenied: caller is neither admin nor the assigned staff member.
            InvalidTransition: visit is still waiting or already completed.
        """
        with transaction.atomic():
            visitor = self._locked_visitor(visitor_id)
            if not (is_admin(caller) or visitor.assigned_staff_id == caller.pk):
                raise PermissionDenied("Only an admin or the assigned staff member can complete this visit.")
            if visitor.is_completed:
                raise InvalidTransition("This visit is already completed.")
            if visitor.status != Visitor.STATUS_MEETING:
                raise InvalidTransition("The visitor has to be confirmed before the visit can be completed.")

            fields = ["status", "updated_at"] + self._finish(visitor, timezone.now())
            visitor.save(update_fields=fields)

        logger.info("Visitor %s completed by %s", visitor.pk, caller.pk)
        return visitor

    def _finish(self, visitor, now):
        """Mark completed and give the held slot load back. Returns changed fields."""
        visitor.status = Visitor.STATUS_COMPLETED
        visitor.completed_at = now
        if visitor.slot_id is not None:
            self.queue.release(visitor.slot_id)
            visitor.slot = None
        return ["completed_at", "slot"]

    # -------------------- notifications --------------------

    def _notify_after_commit(self, visitor):
        reason = notification_reason(visit_kind(visitor))
        transaction.on_commit(
            lambda: self.relay.notify_assignment(visitor, reason),
            robust=True,
        )
