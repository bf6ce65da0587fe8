# staff/models.py
#
# Purpose:
# - StaffProfile: directory entry for a staff member (role + org unit + attendance).
# - StaffSlot: a staff member's position in the visitor intake rotation.
#
# Design highlights:
# - Identity is Django's auth User; StaffProfile hangs off it one-to-one so
#   token auth and the admin keep working unchanged.
# - StaffSlot rank and staff are unique among *active* slots only, so a
#   deactivated slot keeps its history without blocking a new one.
# - current_load <= capacity is enforced by a check constraint as well as by
#   the conditional UPDATE in staff.services.work_order_queue.
#
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q


def default_slot_capacity():
    return settings.VISITOR_DESK["DEFAULT_SLOT_CAPACITY"]


# -------------------------
# Staff directory entry
# -------------------------
class StaffProfile(models.Model):
    """
    Org metadata and attendance state for one staff member.
    """
    ROLE_ADMIN = "admin"
    ROLE_MANAGER = "manager"
    ROLE_STAFF = "staff"
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_MANAGER, "Manager"),
        (ROLE_STAFF, "Staff"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="staff_profile",
    )
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_STAFF)

    # Org unit, outermost first
    division = models.CharField(max_length=100)
    headquarters = models.CharField(max_length=100)
    team = models.CharField(max_length=100)
    position = models.CharField(max_length=100, blank=True)

    # Attendance (mobile app check-in/check-out)
    is_working = models.BooleanField(default=False)
    last_check_in = models.DateTimeField(null=True, blank=True)
    last_check_out = models.DateTimeField(null=True, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    location_updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["division", "headquarters", "team", "name"]
        indexes = [
            models.Index(fields=["name", "division", "headquarters", "team"], name="staff_profile_lookup_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.org_path})"

    @property
    def org_path(self):
        return "/".join([self.division, self.headquarters, self.team])


# -------------------------
# Work-order rotation slot
# -------------------------
class StaffSlot(models.Model):
    """
    One staff member's place in the intake rotation.

    - rank: ascending rotation order among active slots
    - current_load: visitors assigned through the queue and not yet released
    - capacity: maximum concurrent visitors (default from VISITOR_DESK)
    """
    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="work_slots",
    )
    rank = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    active = models.BooleanField(default=True)
    current_load = models.PositiveIntegerField(default=0)
    capacity = models.PositiveIntegerField(
        default=default_slot_capacity,
        validators=[MinValueValidator(1)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["rank", "id"]
        indexes = [
            models.Index(fields=["active", "rank"], name="staff_slot_active_rank_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["rank"],
                condition=Q(active=True),
                name="unique_active_slot_rank",
            ),
            models.UniqueConstraint(
                fields=["staff"],
                condition=Q(active=True),
                name="unique_active_slot_staff",
            ),
            models.CheckConstraint(
                condition=Q(current_load__lte=F("capacity")),
                name="slot_load_within_capacity",
            ),
            models.CheckConstraint(
                condition=Q(capacity__gte=1),
                name="slot_capacity_positive",
            ),
        ]

    def __str__(self):
        state = "active" if self.active else "inactive"
        return f"#{self.rank} {self.staff} ({self.current_load}/{self.capacity}, {state})"

    @property
    def has_capacity(self):
        return self.current_load < self.capacity
