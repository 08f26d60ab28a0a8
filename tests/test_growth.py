import math
import unittest

from aipulse.analytics.growth import calculate_trend


class TestGrowth(unittest.TestCase):
    def test_zero_handling(self):
        self.assertEqual(calculate_trend(0, 0), 0)
        self.assertEqual(calculate_trend(5, 0), 100)
        self.assertEqual(calculate_trend(0, 5), -100)

    def test_regular_growth(self):
        self.assertAlmostEqual(calculate_trend(15, 10), 50.0)
        self.assertAlmostEqual(calculate_trend(30, 10), 200.0)
        self.assertAlmostEqual(calculate_trend(5, 10), -50.0)

    def test_never_infinite(self):
        for cur, prev in [(0, 0), (1000, 0), (0, 1), (3, 7)]:
            self.assertTrue(math.isfinite(calculate_trend(cur, prev)))


if __name__ == "__main__":
    unittest.main()
