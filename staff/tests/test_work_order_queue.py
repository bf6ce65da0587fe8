from django.test import TestCase
from rest_framework.exceptions import NotFound, ValidationError

from staff.exceptions import CapacityExceeded, DuplicateRank, DuplicateStaff
from staff.models import StaffSlot
from staff.services.work_order_queue import SlotUpdate, WorkOrderQueue

from .helpers import make_staff


class RacingQueue(WorkOrderQueue):
    """
    A queue where another kiosk fills the first candidate we look at, right
    after we read it and before our own claim lands.
    """

    def __init__(self, competitor):
        self.competitor = competitor
        self.raced = []

    def _next_candidate(self, exclude=()):
        candidate = super()._next_candidate(exclude)
        if candidate is not None and not self.raced:
            self.raced.append(candidate.pk)
            while StaffSlot.objects.get(pk=candidate.pk).has_capacity:
                self.competitor.assign(candidate.pk)
        return candidate


class WorkOrderQueueTests(TestCase):

    def setUp(self):
        self.queue = WorkOrderQueue()
        self.kim = make_staff("kim")
        self.lee = make_staff("lee")
        self.park = make_staff("park")

    def test_next_available_is_lowest_rank_with_capacity(self):
        """Lowest rank wins; full and inactive slots are skipped"""
        first = self.queue.insert_slot(self.kim.pk, rank=1, capacity=1)
        second = self.queue.insert_slot(self.lee.pk, rank=2, capacity=2)
        third = self.queue.insert_slot(self.park.pk, rank=3, capacity=2)

        self.assertEqual(self.queue.next_available().pk, first.pk)

        self.queue.assign(first.pk)
        self.assertEqual(self.queue.next_available().pk, second.pk)

        self.queue.deactivate(second.pk)
        self.assertEqual(self.queue.next_available().pk, third.pk)

    def test_next_available_is_deterministic(self):
        self.queue.insert_slot(self.lee.pk, rank=5)
        self.queue.insert_slot(self.kim.pk, rank=2)
        picks = {self.queue.next_available().pk for _ in range(5)}
        self.assertEqual(len(picks), 1)
        self.assertEqual(self.queue.next_available().staff_id, self.kim.pk)

    def test_next_available_none_when_empty_or_full(self):
        self.assertIsNone(self.queue.next_available())
        slot = self.queue.insert_slot(self.kim.pk, rank=1, capacity=1)
        self.queue.assign(slot.pk)
        self.assertIsNone(self.queue.next_available())
        self.assertIsNone(self.queue.claim_next())

    def test_assign_over_capacity_is_rejected(self):
        """Load never exceeds capacity; a rejected assign changes nothing"""
        slot = self.queue.insert_slot(self.kim.pk, rank=1, capacity=2)
        self.queue.assign(slot.pk)
        self.queue.assign(slot.pk)

        with self.assertRaises(CapacityExceeded):
            self.queue.assign(slot.pk)

        slot.refresh_from_db()
        self.assertEqual(slot.current_load, 2)

    def test_assign_unknown_slot(self):
        with self.assertRaises(NotFound):
            self.queue.assign(9999)

    def test_release_never_goes_below_zero(self):
        slot = self.queue.insert_slot(self.kim.pk, rank=1)
        self.queue.assign(slot.pk)
        self.assertEqual(self.queue.release(slot.pk).current_load, 0)
        self.assertEqual(self.queue.release(slot.pk).current_load, 0)

    def test_claim_next_fills_in_rank_order(self):
        self.queue.insert_slot(self.kim.pk, rank=1, capacity=2)
        self.queue.insert_slot(self.lee.pk, rank=2, capacity=1)

        claimed = [self.queue.claim_next() for _ in range(4)]
        self.assertEqual(
            [slot.staff_id if slot else None for slot in claimed],
            [self.kim.pk, self.kim.pk, self.lee.pk, None],
        )

    def test_claim_next_moves_on_after_losing_a_race(self):
        """The guard rejects a slot filled underneath us and the scan continues"""
        first = self.queue.insert_slot(self.kim.pk, rank=1, capacity=2)
        second = self.queue.insert_slot(self.lee.pk, rank=2, capacity=2)

        racing = RacingQueue(competitor=self.queue)
        claimed = racing.claim_next()

        self.assertEqual(racing.raced, [first.pk])
        self.assertEqual(claimed.pk, second.pk)
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.current_load, first.capacity)
        self.assertEqual(second.current_load, 1)

    def test_claim_next_gives_up_when_race_leaves_nothing(self):
        only = self.queue.insert_slot(self.kim.pk, rank=1, capacity=1)
        racing = RacingQueue(competitor=self.queue)
        self.assertIsNone(racing.claim_next())
        only.refresh_from_db()
        self.assertEqual(only.current_load, 1)

    def test_duplicate_rank_and_staff_rejected(self):
        self.queue.insert_slot(self.kim.pk, rank=1)
        with self.assertRaises(DuplicateRank):
            self.queue.insert_slot(self.lee.pk, rank=1)
        with self.assertRaises(DuplicateStaff):
            self.queue.insert_slot(self.kim.pk, rank=2)

    def test_inactive_slot_does_not_block_rank_or_staff(self):
        old = self.queue.insert_slot(self.kim.pk, rank=1)
        self.queue.deactivate(old.pk)
        again = self.queue.insert_slot(self.kim.pk, rank=1)
        self.assertTrue(again.active)

        with self.assertRaises(DuplicateRank):
            self.queue.reactivate(old.pk)

    def test_update_slot_rejects_capacity_below_load(self):
        slot = self.queue.insert_slot(self.kim.pk, rank=1, capacity=3)
        self.queue.assign(slot.pk)
        self.queue.assign(slot.pk)
        with self.assertRaises(ValidationError):
            self.queue.update_slot(slot.pk, SlotUpdate(capacity=1))
        updated = self.queue.update_slot(slot.pk, SlotUpdate(capacity=2, rank=4))
        self.assertEqual((updated.rank, updated.capacity, updated.current_load), (4, 2, 2))

    def test_replace_all_ranks_in_given_order(self):
        """Bulk replace yields ranks 1..N in input order with zero load"""
        self.queue.insert_slot(self.park.pk, rank=7)
        slots = self.queue.replace_all([self.lee.pk, self.park.pk, self.kim.pk])

        self.assertEqual(
            [(s.rank, s.staff_id, s.current_load) for s in slots],
            [(1, self.lee.pk, 0), (2, self.park.pk, 0), (3, self.kim.pk, 0)],
        )
        self.assertEqual(StaffSlot.objects.count(), 3)

    def test_replace_all_is_all_or_nothing(self):
        self.queue.insert_slot(self.kim.pk, rank=1)

        with self.assertRaises(NotFound):
            self.queue.replace_all([self.lee.pk, 424242])
        with self.assertRaises(ValidationError):
            self.queue.replace_all([self.lee.pk, self.lee.pk])
        with self.assertRaises(ValidationError):
            self.queue.replace_all([])

        self.assertEqual(
            list(StaffSlot.objects.values_list("staff_id", "rank")),
            [(self.kim.pk, 1)],
        )
