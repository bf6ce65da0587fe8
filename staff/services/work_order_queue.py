"""
work_order_queue.py
-------------------
Rank-ordered, capacity-bounded rotation of staff slots.

Rules:
- next_available: lowest-rank active slot with current_load < capacity.
- assign/release change current_load with a single conditional UPDATE, so two
  concurrent requests can never both take the last unit of a slot.
- claim_next is the atomic "find next + assign" unit used for walk-ins. If a
  concurrent claim takes the candidate first, the guard rejects and the scan
  moves on to the next slot.
- rank and staff are unique among active slots (DuplicateRank / DuplicateStaff).

Notes:
- Ranks decide the order; a slot that just got a visitor keeps its place until
  its load reaches capacity. There is no separate rotation cursor.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from ..exceptions import CapacityExceeded, DuplicateRank, DuplicateStaff
from ..models import StaffSlot, default_slot_capacity
from .directory import get_staff_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotUpdate:
    """Partial change to a slot; None means "leave as is"."""
    rank: Optional[int] = None
    active: Optional[bool] = None
    capacity: Optional[int] = None


class WorkOrderQueue:

    # -------------------- reads --------------------

    def active_slots(self):
        return StaffSlot.objects.filter(active=True).select_related("staff").order_by("rank")

    def get_slot(self, slot_id) -> StaffSlot:
        try:
            return StaffSlot.objects.select_related("staff").get(pk=slot_id)
        except StaffSlot.DoesNotExist:
            raise NotFound(f"Slot {slot_id} not found.")

    def next_available(self) -> Optional[StaffSlot]:
        """
        First active slot in rank order that still has spare capacity,
        or None when every active slot is full (or there are none).
        """
        return self._next_candidate()

    def _next_candidate(self, exclude=()):
        qs = self.active_slots().filter(current_load__lt=F("capacity"))
        if exclude:
            qs = qs.exclude(pk__in=exclude)
        return qs.first()

    # -------------------- load --------------------

    def _increment(self, slot_id, require_active=False) -> int:
        qs = StaffSlot.objects.filter(pk=slot_id, current_load__lt=F("capacity"))
        if require_active:
            qs = qs.filter(active=True)
        return qs.update(current_load=F("current_load") + 1, updated_at=timezone.now())

    def assign(self, slot_id) -> StaffSlot:
        """
        Take one unit of capacity on a slot.

        Raises:
            NotFound: unknown slot.
            CapacityExceeded: slot already full; load is left unchanged.
        """
        if not self._increment(slot_id):
            slot = self.get_slot(slot_id)
            raise CapacityExceeded(
                f"Slot #{slot.rank} is at capacity ({slot.current_load}/{slot.capacity})."
            )
        return self.get_slot(slot_id)

    def claim_next(self) -> Optional[StaffSlot]:
        """
        Find the next available slot and take one unit on it, as one step.

        Returns the claimed slot (with its new load) or None if no active slot
        has spare capacity.
        """
        lost = set()
        while True:
            candidate = self._next_candidate(exclude=lost)
            if candidate is None:
                return None
            if self._increment(candidate.pk, require_active=True):
                slot = self.get_slot(candidate.pk)
                logger.info(
                    "Claimed slot #%s for staff %s (load %s/%s)",
                    slot.rank, slot.staff_id, slot.current_load, slot.capacity,
                )
                return slot
            # Filled or deactivated since we read it.
            logger.debug("Lost race for slot %s, trying the next one", candidate.pk)
            lost.add(candidate.pk)

    def release(self, slot_id) -> StaffSlot:
        """Give back one unit of capacity (never below zero)."""
        slot = self.get_slot(slot_id)
        StaffSlot.objects.filter(pk=slot.pk, current_load__gt=0).update(
            current_load=F("current_load") - 1,
            updated_at=timezone.now(),
        )
        slot.refresh_from_db()
        return slot

    # -------------------- rotation admin --------------------

    def _ensure_rank_free(self, rank, exclude_pk=None):
        qs = StaffSlot.objects.filter(active=True, rank=rank)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateRank(f"Rank {rank} is already used by an active slot.")

    def _ensure_staff_free(self, staff_id, exclude_pk=None):
        qs = StaffSlot.objects.filter(active=True, staff_id=staff_id)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateStaff(f"Staff {staff_id} already has an active slot.")

    @staticmethod
    def _validate_rank(rank):
        if rank is None or int(rank) < 1:
            raise ValidationError({"rank": "Rank must be a positive integer."})
        return int(rank)

    @staticmethod
    def _validate_capacity(capacity, current_load=0):
        if capacity is None or int(capacity) < 1:
            raise ValidationError({"capacity": "Capacity must be at least 1."})
        if int(capacity) < current_load:
            raise ValidationError(
                {"capacity": f"Capacity cannot be lower than the current load ({current_load})."}
            )
        return int(capacity)

    def insert_slot(self, staff_id, rank, capacity=None) -> StaffSlot:
        """
        Add one staff member to the rotation at the given rank.

        Raises:
            NotFound: unknown staff.
            DuplicateRank / DuplicateStaff: collision with an active slot.
        """
        rank = self._validate_rank(rank)
        capacity = self._validate_capacity(capacity if capacity is not None else default_slot_capacity())
        staff = get_staff_user(staff_id)
        try:
            with transaction.atomic():
                self._ensure_rank_free(rank)
                self._ensure_staff_free(staff.pk)
                slot = StaffSlot.objects.create(staff=staff, rank=rank, capacity=capacity)
        except IntegrityError:
            # A concurrent insert won between our checks and the insert.
            self._ensure_rank_free(rank)
            self._ensure_staff_free(staff.pk)
            raise
        logger.info("Inserted slot #%s for staff %s", rank, staff.pk)
        return slot

    @transaction.atomic
    def replace_all(self, ordered_staff_ids):
        """
        Replace the whole rotation with the given staff, ranked 1..N.

        Either every id is valid and the rotation is replaced, or nothing
        changes.
        """
        ids = list(ordered_staff_ids or [])
        if not ids:
            raise ValidationError({"staff_ids": "Provide at least one staff id."})
        if len(set(ids)) != len(ids):
            raise ValidationError({"staff_ids": "Each staff member may appear only once."})

        staff = [get_staff_user(staff_id) for staff_id in ids]

        StaffSlot.objects.all().delete()
        capacity = default_slot_capacity()
        StaffSlot.objects.bulk_create(
            [StaffSlot(staff=user, rank=i, capacity=capacity) for i, user in enumerate(staff, start=1)]
        )
        logger.info("Rotation replaced with %d slot(s)", len(staff))
        return list(self.active_slots())

    @transaction.atomic
    def update_slot(self, slot_id, changes: SlotUpdate) -> StaffSlot:
        """
        Apply a partial update to rank/active/capacity after validating the
        merged result. current_load is never written here.
        """
        try:
            slot = StaffSlot.objects.select_for_update().get(pk=slot_id)
        except StaffSlot.DoesNotExist:
            raise NotFound(f"Slot {slot_id} not found.")

        rank = self._validate_rank(changes.rank if changes.rank is not None else slot.rank)
        active = changes.active if changes.active is not None else slot.active
        capacity = self._validate_capacity(
            changes.capacity if changes.capacity is not None else slot.capacity,
            current_load=slot.current_load,
        )

        if active:
            self._ensure_rank_free(rank, exclude_pk=slot.pk)
            self._ensure_staff_free(slot.staff_id, exclude_pk=slot.pk)

        slot.rank = rank
        slot.active = active
        slot.capacity = capacity
        slot.save(update_fields=["rank", "active", "capacity", "updated_at"])
        logger.info("Updated slot %s: rank=%s active=%s capacity=%s", slot.pk, rank, active, capacity)
        return slot

    def deactivate(self, slot_id) -> StaffSlot:
        return self.update_slot(slot_id, SlotUpdate(active=False))

    def reactivate(self, slot_id) -> StaffSlot:
        return self.update_slot(slot_id, SlotUpdate(active=True))
