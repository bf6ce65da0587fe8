from django.core import mail
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from notifications.models import Notification
from notifications.services.relay import (
    ADMIN_TOPIC,
    MANAGER_TOPIC,
    NotificationEvent,
    NotificationRelay,
    staff_topic,
)
from staff.models import StaffProfile
from staff.tests.helpers import make_staff, sync_notifications
from visitors.models import Visitor


@sync_notifications()
class RelayTests(TestCase):

    def setUp(self):
        self.relay = NotificationRelay()
        self.admin = make_staff("boss", role=StaffProfile.ROLE_ADMIN, email="boss@example.com")
        self.manager = make_staff("mgr", role=StaffProfile.ROLE_MANAGER)
        self.kim = make_staff("kim", email="kim@example.com")
        self.event = NotificationEvent(kind="new_visitor", title="Visitor arrived", message="Hong is here.")

    def test_topics_resolve_to_roles(self):
        self.assertEqual(self.relay.recipients(ADMIN_TOPIC), [self.admin])
        self.assertEqual(self.relay.recipients(MANAGER_TOPIC), [self.manager])
        self.assertEqual(self.relay.recipients(staff_topic(self.kim.pk)), [self.kim])
        self.assertEqual(self.relay.recipients("nowhere"), [])

    def test_publish_writes_feed_row_and_email(self):
        count = self.relay.publish(staff_topic(self.kim.pk), self.event)
        self.assertEqual(count, 1)

        note = Notification.objects.get()
        self.assertEqual(note.recipient, self.kim)
        self.assertTrue(note.sent)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["kim@example.com"])
        self.assertIn("Hong is here.", mail.outbox[0].body)

    def test_notify_assignment_reaches_staff_admin_and_manager(self):
        visitor = Visitor.objects.create(name="Hong", phone="010", assigned_staff=self.kim)
        self.relay.notify_assignment(visitor, "new_visitor")

        self.assertEqual(
            sorted(Notification.objects.values_list("topic", flat=True)),
            sorted([ADMIN_TOPIC, MANAGER_TOPIC, staff_topic(self.kim.pk)]),
        )
        visitor.refresh_from_db()
        self.assertTrue(visitor.notification_sent)
        self.assertEqual(len(mail.outbox), 2)

    def test_status_update_skips_staff_topic(self):
        visitor = Visitor.objects.create(name="Hong", phone="010", assigned_staff=self.kim)
        with self.captureOnCommitCallbacks(execute=True):
            visitor.status = Visitor.STATUS_MEETING
            visitor.save()

        notes = Notification.objects.filter(kind=Notification.KIND_STATUS_UPDATE)
        self.assertEqual(sorted(n.recipient_id for n in notes), sorted([self.admin.pk, self.manager.pk]))

    def test_save_without_status_change_is_quiet(self):
        visitor = Visitor.objects.create(name="Hong", phone="010")
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            visitor.city = "Seoul"
            visitor.save()
        self.assertEqual(callbacks, [])


class NotificationApiTests(TestCase):

    def setUp(self):
        self.user = make_staff("kim")
        self.other = make_staff("lee")
        self.client = APIClient()
        self.client.force_authenticate(self.user)
        for title in ("One", "Two"):
            Notification.objects.create(
                recipient=self.user, topic=staff_topic(self.user.pk), kind="new_visitor",
                title=title, message="...", sent=True,
            )
        Notification.objects.create(
            recipient=self.other, topic=staff_topic(self.other.pk), kind="new_visitor",
            title="Not mine", message="...", sent=True,
        )

    def test_list_only_own_notifications(self):
        resp = self.client.get(reverse("notification-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(row["title"] for row in resp.data["results"]), ["One", "Two"])

    def test_mark_read(self):
        note = Notification.objects.filter(recipient=self.user).first()
        resp = self.client.post(reverse("notification-mark-read"), {"notification_ids": [note.id]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual((resp.data["marked"], resp.data["unread"]), (1, 1))
        note.refresh_from_db()
        self.assertTrue(note.is_read)

        unread = self.client.get(reverse("notification-list"), {"unread": "1"})
        self.assertEqual(unread.data["count"], 1)

    def test_mark_all_read_leaves_others_alone(self):
        resp = self.client.post(reverse("notification-mark-read"), {"all": True}, format="json")
        self.assertEqual(resp.data["marked"], 2)
        self.assertFalse(Notification.objects.get(recipient=self.other).is_read)

    def test_mark_read_needs_a_target(self):
        resp = self.client.post(reverse("notification-mark-read"), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
