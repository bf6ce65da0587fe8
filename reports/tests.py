from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from staff.models import StaffProfile
from staff.services import attendance
from staff.services.work_order_queue import WorkOrderQueue
from staff.tests.helpers import make_staff
from visitors.services.assignment_service import AssignmentService


class ReportsTests(TestCase):

    def setUp(self):
        self.manager = make_staff("mgr", role=StaffProfile.ROLE_MANAGER, team="Office")
        self.kim = make_staff("kim", name="Kim Minsu", team="Team A")
        self.lee = make_staff("lee", team="Team B")
        queue = WorkOrderQueue()
        queue.insert_slot(self.kim.pk, rank=1, capacity=2)
        service = AssignmentService(queue=queue)
        for i in range(3):
            service.register_visitor({"name": f"Guest {i}", "phone": f"010{i}"})
        self.client = APIClient()
        self.client.force_authenticate(self.manager)

    def test_summary(self):
        """Two walk-ins fill Kim's slot; the third waits unassigned"""
        resp = self.client.get("/api/reports/summary")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["by_kind"], {"reserved": 0, "walkin": 3, "returning": 0})
        self.assertEqual(resp.data["by_status"]["waiting"], 3)
        self.assertEqual(resp.data["unassigned"], 1)
        self.assertEqual(resp.data["top_staff"], [{"staff_id": self.kim.pk, "staff_name": "Kim Minsu", "count": 2}])
        self.assertEqual(resp.data["rotation"][0]["current_load"], 2)
        self.assertEqual(
            resp.data["visitors_per_day"],
            [{"day": timezone.localdate().isoformat(), "count": 3}],
        )

    def test_attendance(self):
        attendance.check_in(self.kim)
        resp = self.client.get("/api/reports/attendance", {"team": "Team A"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual((resp.data["total"], resp.data["working"]), (1, 1))
        self.assertEqual(resp.data["staff"][0]["name"], "Kim Minsu")

    def test_attendance_rejects_impossible_date(self):
        for value in ("2024-13-45", "2024-02-30"):
            resp = self.client.get("/api/reports/attendance", {"date": value})
            self.assertEqual(resp.status_code, 400)
            self.assertIn("date", resp.data)

    def test_plain_staff_forbidden(self):
        self.client.force_authenticate(self.lee)
        self.assertEqual(self.client.get("/api/reports/summary").status_code, 403)
        self.assertEqual(self.client.get("/api/reports/attendance").status_code, 403)
