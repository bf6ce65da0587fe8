from django.test import SimpleTestCase

from staff.services.proximity import Coordinates, distance_meters, evaluate, is_within_range

CITY_HALL = Coordinates(37.5665, 126.9780)


class DistanceTests(SimpleTestCase):

    def test_same_point_is_zero(self):
        self.assertEqual(distance_meters(CITY_HALL, CITY_HALL), 0)

    def test_one_kilometre_north(self):
        """0.008993 degrees of latitude is about 1 km"""
        north = Coordinates(CITY_HALL.latitude + 0.008993, CITY_HALL.longitude)
        self.assertAlmostEqual(distance_meters(CITY_HALL, north), 1000, delta=10)

    def test_symmetric(self):
        other = Coordinates(37.4979, 127.0276)
        self.assertAlmostEqual(distance_meters(CITY_HALL, other), distance_meters(other, CITY_HALL))


class RangeTests(SimpleTestCase):

    def test_zero_radius_disables_gate(self):
        self.assertTrue(is_within_range(10_000_000, 0))

    def test_boundary_is_inclusive(self):
        self.assertTrue(is_within_range(100, 100))
        self.assertFalse(is_within_range(100.01, 100))

    def test_evaluate_reports_distance_and_result(self):
        near = Coordinates(CITY_HALL.latitude + 0.0005, CITY_HALL.longitude)
        far = Coordinates(CITY_HALL.latitude + 0.01, CITY_HALL.longitude)

        ok = evaluate(near, CITY_HALL, 100)
        self.assertTrue(ok.passed)
        self.assertLess(ok.distance_meters, 100)

        rejected = evaluate(far, CITY_HALL, 100)
        self.assertFalse(rejected.passed)
        self.assertEqual(rejected.max_distance, 100)
        self.assertIn("100 m", rejected.message)

        self.assertTrue(evaluate(far, CITY_HALL, 0).passed)
