import os
import sys
import unittest

import numpy as np

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import MathTools


class MathToolsTestCase(unittest.TestCase):
    def test_constants(self) -> None:
        self.assertAlmostEqual(MathTools.BMI_UNDERWEIGHT, 18.5)
        self.assertAlmostEqual(MathTools.BMI_OVERWEIGHT, 25.0)

    def test_clamp(self) -> None:
        self.assertEqual(MathTools.clamp(5, 0, 10), 5)
        self.assertEqual(MathTools.clamp(-1, 0, 10), 0)
        self.assertEqual(MathTools.clamp(11, 0, 10), 10)
        with self.assertRaises(ValueError):
            MathTools.clamp(1, 2, 1)

    def test_round2_half_away_from_zero(self) -> None:
        self.assertEqual(MathTools.round2(0.125), 0.13)
        self.assertEqual(MathTools.round2(-0.125), -0.13)
        self.assertEqual(MathTools.round2(112.5), 112.5)
        self.assertEqual(MathTools.round2(0.0), 0.0)

    def test_grid_volume(self) -> None:
        cells = np.array([[10, 100], [5, 80], [0, 200]])
        self.assertEqual(MathTools.grid_volume(cells), 1400.0)
        self.assertEqual(MathTools.grid_volume(np.zeros((0, 2))), 0.0)

    def test_bmi(self) -> None:
        self.assertAlmostEqual(MathTools.bmi(70, 175), 22.857, places=3)
        self.assertIsNone(MathTools.bmi(None, 175))
        self.assertIsNone(MathTools.bmi(70, None))
        self.assertIsNone(MathTools.bmi(70, 0))

    def test_percent_change_and_share(self) -> None:
        self.assertAlmostEqual(MathTools.percent_change(100, 110), 10.0)
        self.assertEqual(MathTools.percent_change(0, 50), 0.0)
        self.assertAlmostEqual(MathTools.share(25, 200), 12.5)
        self.assertEqual(MathTools.share(5, 0), 0.0)


if __name__ == "__main__":
    unittest.main()
