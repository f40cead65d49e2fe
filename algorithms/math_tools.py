import math

import numpy as np


class MathTools:
    """Provides essential mathematical utilities for workout calculations."""

    BMI_UNDERWEIGHT: float = 18.5
    BMI_OVERWEIGHT: float = 25.0

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def round2(value: float) -> float:
        """Round to two decimals, halves away from zero."""
        scaled = math.floor(abs(value) * 100 + 0.5) / 100
        return math.copysign(scaled, value) if value else 0.0

    @staticmethod
    def grid_volume(cells: np.ndarray) -> float:
        """Return the reps x weight volume of a ``(..., 2)`` cell array."""
        if cells.size == 0:
            return 0.0
        return float(np.sum(cells[..., 0].astype(float) * cells[..., 1]))

    @staticmethod
    def bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
        """Return body-mass index or ``None`` when inputs are missing."""
        if weight_kg is None or height_cm is None or height_cm <= 0:
            return None
        height_m = height_cm / 100.0
        return weight_kg / (height_m * height_m)

    @staticmethod
    def percent_change(first: float, last: float) -> float:
        """Return the change from ``first`` to ``last`` in percent."""
        if first == 0:
            return 0.0
        return (last - first) / first * 100

    @staticmethod
    def share(part: float, total: float) -> float:
        """Return ``part`` as a percentage of ``total`` (0 for empty totals)."""
        if total <= 0:
            return 0.0
        return part / total * 100
