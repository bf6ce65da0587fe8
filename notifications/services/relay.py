"""
relay.py
--------
Fire-and-forget fan-out of visitor events to staff, admins and managers.

Topics:
- staff.<user id>  the one staff member a visitor was assigned to
- admin            every active user with the admin role
- manager          every active user with the manager role

Each publish writes one in-app Notification row per recipient and then emails
the recipients that have an address. Email runs on a small thread pool when
VISITOR_DESK["NOTIFICATION_ASYNC"] is on, inline otherwise.

Notes:
- Nothing in here raises to the caller. Delivery problems are logged and the
  registration or status change that triggered them stands.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from staff.models import StaffProfile
from staff.services.directory import display_name, users_with_role

from ..models import Notification

logger = logging.getLogger(__name__)

ADMIN_TOPIC = "admin"
MANAGER_TOPIC = "manager"
STAFF_TOPIC_PREFIX = "staff."

_executor = None


def staff_topic(user_id):
    return f"{STAFF_TOPIC_PREFIX}{user_id}"


def _get_executor():
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=settings.VISITOR_DESK["NOTIFICATION_WORKERS"],
            thread_name_prefix="notify",
        )
    return _executor


def _send(subject: str, body: str, to_email: str):
    """Send one email; failures are logged, never raised."""
    if not to_email:
        return
    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
            recipient_list=[to_email],
            fail_silently=False,
        )
    except Exception:
        logger.exception("Email to %s failed", to_email)


@dataclass(frozen=True)
class NotificationEvent:
    kind: str
    title: str
    message: str
    visitor_id: Optional[int] = None
    payload: dict = field(default_factory=dict)


class NotificationRelay:

    def recipients(self, topic):
        if topic == ADMIN_TOPIC:
            return list(users_with_role(StaffProfile.ROLE_ADMIN))
        if topic == MANAGER_TOPIC:
            return list(users_with_role(StaffProfile.ROLE_MANAGER))
        if topic.startswith(STAFF_TOPIC_PREFIX):
            user_id = topic[len(STAFF_TOPIC_PREFIX):]
            return list(get_user_model().objects.filter(pk=user_id, is_active=True))
        logger.warning("Unknown notification topic %r", topic)
        return []

    def publish(self, topic, event: NotificationEvent) -> int:
        """
        Deliver an event to everyone subscribed to a topic.
        Returns how many in-app notifications were written.
        """
        try:
            users = self.recipients(topic)
            rows = Notification.objects.bulk_create([
                Notification(
                    recipient=user,
                    topic=topic,
                    kind=event.kind,
                    visitor_id=event.visitor_id,
                    title=event.title,
                    message=event.message,
                    payload=event.payload,
                    sent=True,
                )
                for user in users
            ])
            self._email([u.email for u in users if u.email], event)
        except Exception:
            logger.exception("Publishing %s to %s failed", event.kind, topic)
            return 0
        logger.debug("Published %s to %s (%d recipients)", event.kind, topic, len(rows))
        return len(rows)

    def _email(self, addresses, event):
        if not addresses:
            return
        if settings.VISITOR_DESK["NOTIFICATION_ASYNC"]:
            pool = _get_executor()
            for address in addresses:
                pool.submit(_send, event.title, event.message, address)
        else:
            for address in addresses:
                _send(event.title, event.message, address)

    # -------------------- visitor events --------------------

    def notify_assignment(self, visitor, reason):
        """
        Tell the assigned staff member a visitor is here, and let admins and
        managers know. Marks the visitor's notification_sent flag.
        """
        try:
            staff_name = display_name(visitor.assigned_staff) if visitor.assigned_staff_id else None
            payload = {
                "visitor_id": visitor.pk,
                "visitor_name": visitor.name,
                "kind": visitor.kind,
                "staff_id": visitor.assigned_staff_id,
                "staff_name": staff_name,
                "reason": reason,
            }
            delivered = 0
            if visitor.assigned_staff_id is not None:
                delivered += self.publish(
                    staff_topic(visitor.assigned_staff_id),
                    NotificationEvent(
                        kind=reason,
                        title="Visitor arrived",
                        message=f"{visitor.name} is waiting for you at the front desk.",
                        visitor_id=visitor.pk,
                        payload=payload,
                    ),
                )
            office_event = NotificationEvent(
                kind=reason,
                title="New visitor",
                message=f"{visitor.name} registered and was assigned to {staff_name or 'nobody'}.",
                visitor_id=visitor.pk,
                payload=payload,
            )
            delivered += self.publish(ADMIN_TOPIC, office_event)
            delivered += self.publish(MANAGER_TOPIC, office_event)

            if delivered:
                type(visitor).objects.filter(pk=visitor.pk).update(notification_sent=True)
                visitor.notification_sent = True
        except Exception:
            logger.exception("Assignment notification for visitor %s failed", visitor.pk)

    def notify_status_update(self, visitor):
        """Fan a visitor status change out to the admin and manager topics."""
        event = NotificationEvent(
            kind=Notification.KIND_STATUS_UPDATE,
            title="Visitor status update",
            message=f"{visitor.name} is now {visitor.get_status_display().lower()}.",
            visitor_id=visitor.pk,
            payload={
                "visitor_id": visitor.pk,
                "visitor_name": visitor.name,
                "status": visitor.status,
                "staff_id": visitor.assigned_staff_id,
                "notification_confirmed": visitor.notification_confirmed,
            },
        )
        self.publish(ADMIN_TOPIC, event)
        self.publish(MANAGER_TOPIC, event)
