from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from staff.models import StaffProfile
from staff.services.work_order_queue import WorkOrderQueue
from staff.tests.helpers import make_staff
from visitors.models import Visitor


class KioskApiTests(TestCase):
    """
    The kiosk is not logged in: register and search are public.
    """

    def setUp(self):
        self.kim = make_staff("kim", name="Kim Minsu")
        WorkOrderQueue().insert_slot(self.kim.pk, rank=1)
        self.client = APIClient()

    def test_register_walkin(self):
        resp = self.client.post(
            "/api/visitors/register/",
            {"name": "Hong Gildong", "phone": "010-1111-2222", "city": "Seoul", "age_group": "30s"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["kind"], "walkin")
        self.assertEqual(resp.data["assigned_staff"], self.kim.pk)
        self.assertEqual(resp.data["assigned_staff_name"], "Kim Minsu")
        self.assertEqual(resp.data["city"], "Seoul")

    def test_register_requires_name_and_phone(self):
        resp = self.client.post("/api/visitors/register/", {"name": "Hong"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("phone", resp.data)

        resp = self.client.post("/api/visitors/register/", {"name": "Hong", "phone": "---"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_search_finds_latest_visit(self):
        self.client.post("/api/visitors/register/", {"name": "Hong Gildong", "phone": "010-1111-2222"}, format="json")
        resp = self.client.get("/api/visitors/search/", {"name": "hong gildong", "phone": "01011112222"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["assigned_staff_name"], "Kim Minsu")
        self.assertNotIn("phone", resp.data)

    def test_search_miss(self):
        resp = self.client.get("/api/visitors/search/", {"name": "Nobody", "phone": "000"})
        self.assertEqual(resp.status_code, 404)

    def test_reservations_need_admin(self):
        resp = self.client.post("/api/visitors/reservations/", {}, format="json")
        self.assertIn(resp.status_code, (401, 403))


class AdminApiTests(TestCase):

    def setUp(self):
        self.admin = make_staff("boss", role=StaffProfile.ROLE_ADMIN)
        self.kim = make_staff("kim", name="Kim Minsu")
        self.lee = make_staff("lee")
        queue = WorkOrderQueue()
        queue.insert_slot(self.kim.pk, rank=1, capacity=1)
        queue.insert_slot(self.lee.pk, rank=2)
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def _register(self, name, phone):
        return APIClient().post("/api/visitors/register/", {"name": name, "phone": phone}, format="json").data

    def test_reservation_endpoint(self):
        resp = self.client.post(
            "/api/visitors/reservations/",
            {
                "name": "Lee Younghee",
                "phone": "010-2222-3333",
                "division": "Sales",
                "headquarters": "Seoul HQ",
                "team": "Team A",
                "staff_name": "Kim Minsu",
                "expected_visit_time": "2026-10-20T10:00:00+09:00",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["kind"], "reserved")
        self.assertEqual(resp.data["reservation"]["staff_name"], "Kim Minsu")

    def test_reservation_for_unknown_staff_is_404(self):
        resp = self.client.post(
            "/api/visitors/reservations/",
            {
                "name": "Lee",
                "phone": "010",
                "division": "Sales",
                "headquarters": "Seoul HQ",
                "team": "Team A",
                "staff_name": "Nobody",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data["detail"].code, "staff_not_found")

    def test_reservation_with_slash_in_division_is_404(self):
        resp = self.client.post(
            "/api/visitors/reservations/",
            {
                "name": "Lee",
                "phone": "010",
                "division": "Sales/East",
                "headquarters": "Seoul HQ",
                "team": "Team A",
                "staff_name": "Kim Minsu",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data["detail"].code, "staff_not_found")

    def test_list_filters(self):
        self._register("A", "1")
        self._register("B", "2")
        Visitor.objects.filter(name="B").update(status=Visitor.STATUS_MEETING)

        resp = self.client.get("/api/visitors/", {"status": "meeting"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row["name"] for row in resp.data["results"]], ["B"])

        today = timezone.localdate().isoformat()
        self.assertEqual(self.client.get("/api/visitors/", {"date": today}).data["count"], 2)
        self.assertEqual(self.client.get("/api/visitors/", {"date": "2001-01-01"}).data["count"], 0)
        self.assertEqual(self.client.get("/api/visitors/", {"date": "yesterday"}).status_code, 400)

    def test_impossible_date_is_rejected(self):
        """Well-formed but nonexistent dates are a 400, not a server error"""
        resp = self.client.get("/api/visitors/", {"date": "2024-02-30"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("date", resp.data)

    def test_staff_only_see_their_visitors(self):
        self._register("A", "1")
        self._register("B", "2")
        client = APIClient()
        client.force_authenticate(self.lee)
        names = [row["name"] for row in client.get("/api/visitors/").data["results"]]
        self.assertEqual(names, ["B"])


class ConfirmApiTests(TestCase):

    def setUp(self):
        self.kim = make_staff("kim")
        self.lee = make_staff("lee")
        WorkOrderQueue().insert_slot(self.kim.pk, rank=1)
        self.visitor_id = APIClient().post(
            "/api/visitors/register/", {"name": "Hong", "phone": "010"}, format="json"
        ).data["id"]
        self.client = APIClient()

    def test_assigned_staff_confirms(self):
        self.client.force_authenticate(self.kim)
        resp = self.client.post(f"/api/visitors/{self.visitor_id}/confirm/", {}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["status"], "meeting")
        self.assertTrue(resp.data["notification_confirmed"])

        done = self.client.post(f"/api/visitors/{self.visitor_id}/complete/")
        self.assertEqual(done.status_code, 200)
        self.assertEqual(done.data["status"], "completed")

        again = self.client.post(f"/api/visitors/{self.visitor_id}/confirm/", {}, format="json")
        self.assertEqual(again.status_code, 409)

    def test_other_staff_is_forbidden(self):
        self.client.force_authenticate(self.lee)
        resp = self.client.post(f"/api/visitors/{self.visitor_id}/confirm/", {}, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_anonymous_cannot_confirm(self):
        resp = self.client.post(f"/api/visitors/{self.visitor_id}/confirm/", {}, format="json")
        self.assertIn(resp.status_code, (401, 403))

    def test_bad_status_value(self):
        self.client.force_authenticate(self.kim)
        resp = self.client.post(f"/api/visitors/{self.visitor_id}/confirm/", {"status": "waiting"}, format="json")
        self.assertEqual(resp.status_code, 400)
