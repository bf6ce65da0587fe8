from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from configmgr.services import update_kiosk_config
from staff.models import StaffProfile
from staff.services import attendance

from .helpers import make_staff


class CheckInApiTests(TestCase):
    """
    Mobile check-in / check-out, gated by the kiosk proximity radius.
    """

    def setUp(self):
        self.user = make_staff("kim")
        self.client = APIClient()
        self.client.force_authenticate(self.user)
        self.url = reverse("staff_check_in")

    def test_check_in_without_gate(self):
        """Radius 0: no coordinates needed"""
        resp = self.client.post(self.url, {}, format="json")
        self.assertEqual(resp.status_code, 200)
        profile = StaffProfile.objects.get(user=self.user)
        self.assertTrue(profile.is_working)
        self.assertIsNotNone(profile.last_check_in)

    def test_gate_requires_coordinates(self):
        update_kiosk_config(proximity_distance=100)
        resp = self.client.post(self.url, {}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(StaffProfile.objects.get(user=self.user).is_working)

    def test_gate_rejects_far_position(self):
        update_kiosk_config(latitude=37.5665, longitude=126.9780, proximity_distance=100)
        resp = self.client.post(self.url, {"latitude": 37.5765, "longitude": 126.9780}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("100 m", str(resp.data["detail"]))

    def test_gate_accepts_near_position(self):
        update_kiosk_config(latitude=37.5665, longitude=126.9780, proximity_distance=100)
        resp = self.client.post(self.url, {"latitude": 37.5667, "longitude": 126.9780}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data["proximity"]["passed"])
        profile = StaffProfile.objects.get(user=self.user)
        self.assertAlmostEqual(profile.latitude, 37.5667)

    def test_half_a_position_is_rejected(self):
        resp = self.client.post(self.url, {"latitude": 37.5}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_check_out(self):
        self.client.post(self.url, {}, format="json")
        resp = self.client.post(reverse("staff_check_out"), {}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data["is_working"])

    def test_user_without_profile_gets_404(self):
        from django.contrib.auth.models import User

        stranger = User.objects.create_user(username="stranger", password="testpass123")
        self.client.force_authenticate(stranger)
        resp = self.client.post(self.url, {}, format="json")
        self.assertEqual(resp.status_code, 404)


class AttendanceSummaryTests(TestCase):

    def test_counts_by_org_unit(self):
        a = make_staff("a", team="Team A")
        make_staff("b", team="Team A")
        make_staff("c", team="Team B")
        attendance.check_in(a)

        summary = attendance.attendance_summary(team="Team A")
        self.assertEqual((summary["total"], summary["working"], summary["not_working"]), (2, 1, 1))

        today = attendance.attendance_summary(date=timezone.localdate())
        self.assertEqual([p.user_id for p in today["staff"]], [a.pk])
