# visitors/models.py
#
# Purpose:
# - Visitor: one row per physical visit registered at the kiosk (or pre-booked
#   by an admin). A repeat customer gets a new row on every visit.
# - Reservation: pre-booking details, present only for reserved visits.
#
# Design highlights:
# - name_key / phone_key are normalized copies of name and phone, recomputed
#   on every save; returning-visitor lookups only ever compare the keys.
# - slot remembers which rotation slot this visit is holding load on, so the
#   load can be given back when the visit completes.
# - status is a small state machine (waiting -> meeting -> completed); the
#   transitions live in visitors.services.assignment_service.
#
import re

from django.conf import settings
from django.db import models
from django.utils import timezone

_WS_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"\D")


def normalize_name(value):
    """Trim, collapse inner whitespace and casefold."""
    return _WS_RE.sub(" ", (value or "").strip()).casefold()


def normalize_phone(value):
    """Keep digits only, so '010-1111-2222' and '01011112222' match."""
    return _NON_DIGIT_RE.sub("", value or "")


# -------------------------
# Visit record
# -------------------------
class Visitor(models.Model):
    KIND_RESERVED = "reserved"
    KIND_WALKIN = "walkin"
    KIND_RETURNING = "returning"
    KIND_CHOICES = [
        (KIND_RESERVED, "Reserved"),
        (KIND_WALKIN, "Walk-in"),
        (KIND_RETURNING, "Returning"),
    ]

    STATUS_WAITING = "waiting"
    STATUS_MEETING = "meeting"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_WAITING, "Waiting"),
        (STATUS_MEETING, "Meeting"),
        (STATUS_COMPLETED, "Completed"),
    ]

    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)
    name_key = models.CharField(max_length=100, editable=False)
    phone_key = models.CharField(max_length=20, editable=False)

    has_reservation = models.BooleanField(default=False)
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default=KIND_WALKIN)

    # Optional kiosk questionnaire
    city = models.CharField(max_length=50, blank=True)
    district = models.CharField(max_length=50, blank=True)
    gender = models.CharField(max_length=10, blank=True)
    age_group = models.CharField(max_length=10, blank=True)

    assigned_staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_visitors",
    )
    slot = models.ForeignKey(
        "staff.StaffSlot",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="held_visits",
        help_text="Rotation slot whose load this visit holds until it completes.",
    )
    previous_visit = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_WAITING)
    notification_sent = models.BooleanField(default=False)
    notification_confirmed = models.BooleanField(default=False)

    visited_at = models.DateTimeField(default=timezone.now)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-visited_at", "-id"]
        indexes = [
            models.Index(fields=["name_key", "phone_key", "visited_at"], name="visitor_lookup_idx"),
            models.Index(fields=["phone_key"], name="visitor_phone_idx"),
            models.Index(fields=["status", "visited_at"], name="visitor_status_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_kind_display()}, {self.status})"

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.phone = (self.phone or "").strip()
        self.name_key = normalize_name(self.name)
        self.phone_key = normalize_phone(self.phone)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and ("name" in update_fields or "phone" in update_fields):
            kwargs["update_fields"] = set(update_fields) | {"name_key", "phone_key"}
        super().save(*args, **kwargs)

    @property
    def is_completed(self):
        return self.status == self.STATUS_COMPLETED


# -------------------------
# Pre-booking details
# -------------------------
class Reservation(models.Model):
    """
    Admin-entered reservation: who the visitor expects to meet and when.
    """
    visitor = models.OneToOneField(Visitor, on_delete=models.CASCADE, related_name="reservation")
    division = models.CharField(max_length=100)
    headquarters = models.CharField(max_length=100)
    team = models.CharField(max_length=100)
    staff_name = models.CharField(max_length=100)
    position = models.CharField(max_length=100, blank=True)
    expected_visit_time = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Reservation for {self.visitor.name} with {self.staff_name}"

    @property
    def org_path(self):
        return "/".join([self.division, self.headquarters, self.team])
