# notifications/models.py
#
# Purpose:
# - In-app notification feed for staff, admins and managers.
#
# Design:
# - One row per recipient per published event; topic records which channel
#   (staff.<id>, admin, manager) the row came from.
# - 'sent' marks that the in-app row was delivered; email is best effort.
#
from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    KIND_NEW_VISITOR = "new_visitor"
    KIND_RETURNING_VISITOR = "returning_visitor"
    KIND_RESERVED_VISITOR = "reserved_visitor"
    KIND_STATUS_UPDATE = "visitor_status_update"
    KIND_CHOICES = [
        (KIND_NEW_VISITOR, "New visitor"),
        (KIND_RETURNING_VISITOR, "Returning visitor"),
        (KIND_RESERVED_VISITOR, "Reserved visitor"),
        (KIND_STATUS_UPDATE, "Visitor status update"),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    topic = models.CharField(max_length=50)
    kind = models.CharField(max_length=30, choices=KIND_CHOICES)
    visitor = models.ForeignKey(
        "visitors.Visitor",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    payload = models.JSONField(default=dict, blank=True)
    sent = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "read_at"], name="notification_unread_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.kind} to {self.recipient} at {self.created_at:%Y-%m-%d %H:%M}"

    @property
    def is_read(self):
        return self.read_at is not None

    def mark_read(self):
        if self.read_at is None:
            self.read_at = timezone.now()
            self.save(update_fields=["read_at"])
