from django.test import TestCase
from rest_framework.test import APIClient

from configmgr.models import SystemSetting
from configmgr.services import (
    PROXIMITY_MAX_DISTANCE,
    get_kiosk_config,
    get_proximity_distance,
    update_kiosk_config,
)
from staff.models import StaffProfile
from staff.tests.helpers import make_staff


class KioskConfigServiceTests(TestCase):

    def test_defaults_come_from_settings(self):
        """Seoul City Hall, gate off"""
        config = get_kiosk_config()
        self.assertEqual((config.latitude, config.longitude), (37.5665, 126.9780))
        self.assertEqual(config.proximity_distance, 0)

    def test_stored_values_win(self):
        update_kiosk_config(latitude=35.1796, longitude=129.0756, proximity_distance=250)
        config = get_kiosk_config()
        self.assertEqual((config.latitude, config.longitude), (35.1796, 129.0756))
        self.assertEqual(get_proximity_distance(), 250)

    def test_unparsable_value_falls_back(self):
        SystemSetting.objects.create(key=PROXIMITY_MAX_DISTANCE, value="far")
        with self.assertLogs("configmgr.services", level="WARNING"):
            self.assertEqual(get_proximity_distance(), 0)

    def test_partial_update_keeps_other_keys(self):
        update_kiosk_config(name="Lobby kiosk")
        update_kiosk_config(address="Main St 1")
        config = get_kiosk_config()
        self.assertEqual((config.name, config.address), ("Lobby kiosk", "Main St 1"))


class KioskConfigApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.url = "/api/config/kiosk/"

    def test_staff_can_read(self):
        self.client.force_authenticate(make_staff("kim"))
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["proximity_distance"], 0)

    def test_only_admin_can_write(self):
        self.client.force_authenticate(make_staff("kim"))
        self.assertEqual(self.client.put(self.url, {"proximity_distance": 50}, format="json").status_code, 403)

        self.client.force_authenticate(make_staff("boss", role=StaffProfile.ROLE_ADMIN))
        resp = self.client.put(self.url, {"proximity_distance": 50}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["proximity_distance"], 50)

    def test_negative_radius_rejected(self):
        self.client.force_authenticate(make_staff("boss", role=StaffProfile.ROLE_ADMIN))
        resp = self.client.put(self.url, {"proximity_distance": -1}, format="json")
        self.assertEqual(resp.status_code, 400)
