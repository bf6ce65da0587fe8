from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

from staff.models import StaffProfile, StaffSlot

from .helpers import make_staff


class SlotApiTests(TestCase):
    """
    /api/staff/slots/ : reads for any logged-in user, writes for admins only.
    """

    def setUp(self):
        self.admin = make_staff("boss", role=StaffProfile.ROLE_ADMIN)
        self.kim = make_staff("kim")
        self.lee = make_staff("lee")
        self.client = APIClient()
        self.client.force_authenticate(self.admin)

    def test_create_and_list(self):
        resp = self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["current_load"], 0)
        self.assertEqual(resp.data["capacity"], 3)
        self.assertEqual(resp.data["staff_name"], "Kim")

        listing = self.client.get("/api/staff/slots/")
        self.assertEqual(listing.status_code, 200)
        self.assertEqual([row["rank"] for row in listing.data], [1])

    def test_duplicate_rank_is_conflict(self):
        self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json")
        resp = self.client.post("/api/staff/slots/", {"staff": self.lee.pk, "rank": 1}, format="json")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data["detail"].code, "duplicate_rank")

    def test_staff_cannot_write(self):
        self.client.force_authenticate(self.kim)
        resp = self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.get("/api/staff/slots/").status_code, 200)

    def test_anonymous_cannot_read(self):
        self.client.force_authenticate(None)
        self.assertIn(self.client.get("/api/staff/slots/").status_code, (401, 403))

    def test_bulk_replace_and_next(self):
        resp = self.client.post(
            "/api/staff/slots/bulk/", {"staff_ids": [self.lee.pk, self.kim.pk]}, format="json"
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["total"], 2)
        self.assertEqual([s["staff"] for s in resp.data["slots"]], [self.lee.pk, self.kim.pk])

        nxt = self.client.get("/api/staff/slots/next/")
        self.assertEqual(nxt.status_code, 200)
        self.assertEqual(nxt.data["staff"], self.lee.pk)

    def test_next_when_nobody_available(self):
        resp = self.client.get("/api/staff/slots/next/")
        self.assertEqual(resp.status_code, 404)

    def test_bulk_with_unknown_staff_changes_nothing(self):
        self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json")
        resp = self.client.post("/api/staff/slots/bulk/", {"staff_ids": [self.lee.pk, 999]}, format="json")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(list(StaffSlot.objects.values_list("staff_id", flat=True)), [self.kim.pk])

    def test_deactivate_hides_slot_from_list(self):
        slot = self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json").data
        resp = self.client.post(f"/api/staff/slots/{slot['id']}/deactivate/")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data["active"])

        self.assertEqual(self.client.get("/api/staff/slots/").data, [])
        everything = self.client.get("/api/staff/slots/?include_inactive=1").data
        self.assertEqual(len(everything), 1)

    def test_patch_capacity(self):
        slot = self.client.post("/api/staff/slots/", {"staff": self.kim.pk, "rank": 1}, format="json").data
        resp = self.client.patch(f"/api/staff/slots/{slot['id']}/", {"capacity": 5}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["capacity"], 5)

        empty = self.client.patch(f"/api/staff/slots/{slot['id']}/", {}, format="json")
        self.assertEqual(empty.status_code, 400)


class DirectoryApiTests(TestCase):

    def test_manager_can_filter_directory(self):
        manager = make_staff("mgr", role=StaffProfile.ROLE_MANAGER)
        make_staff("a", team="Team A")
        make_staff("b", team="Team B")
        client = APIClient()
        client.force_authenticate(manager)

        resp = client.get("/api/staff/directory/", {"team": "Team B"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row["name"] for row in resp.data["results"]], ["B"])

    def test_plain_staff_is_forbidden(self):
        client = APIClient()
        client.force_authenticate(make_staff("a"))
        self.assertEqual(client.get("/api/staff/directory/").status_code, 403)


class LoginTests(TestCase):

    def test_login_returns_token_and_role(self):
        make_staff("kim", role=StaffProfile.ROLE_MANAGER)
        client = APIClient()
        resp = client.post("/api/auth/login", {"username": "kim", "password": "testpass123"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["user"]["role"], "manager")

        client.credentials(HTTP_AUTHORIZATION=f"Token {resp.data['token']}")
        self.assertEqual(client.get("/api/staff/slots/").status_code, 200)
        self.assertEqual(client.post("/api/auth/logout").status_code, 200)

    def test_bad_password(self):
        make_staff("kim")
        resp = APIClient().post("/api/auth/login", {"username": "kim", "password": "nope"}, format="json")
        self.assertEqual(resp.status_code, 400)


class SeedRotationCommandTests(TestCase):

    def test_seed_rotation_from_usernames(self):
        kim = make_staff("kim")
        lee = make_staff("lee")
        call_command("seed_rotation", "lee", "kim", stdout=StringIO())
        self.assertEqual(
            list(StaffSlot.objects.order_by("rank").values_list("staff_id", flat=True)),
            [lee.pk, kim.pk],
        )
