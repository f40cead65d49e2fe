from __future__ import annotations

from typing import Callable

from schemas import OneRMRequest, OneRMResponse, SetValues
from .math_tools import MathTools


class OneRMCalculator:
    """Estimate a one-rep max and build a percentage based set prescription."""

    DEFAULT_FORMULA: str = "brzycki"
    SET_COUNT: int = 6
    # (minimum percentage of 1RM, prescribed reps), checked top-down
    REP_TABLE: tuple[tuple[float, int], ...] = (
        (90.0, 3),
        (80.0, 5),
        (70.0, 8),
        (60.0, 10),
    )
    FALLBACK_REPS: int = 12

    @staticmethod
    def brzycki(weight: float, reps: int) -> float:
        if reps == 1:
            return weight
        return weight * (36.0 / (37.0 - reps))

    @staticmethod
    def epley(weight: float, reps: int) -> float:
        if reps == 1:
            return weight
        return weight * (1.0 + reps / 30.0)

    @staticmethod
    def lander(weight: float, reps: int) -> float:
        if reps == 1:
            return weight
        return weight * (100.0 / (101.3 - 2.67123 * reps))

    @classmethod
    def formulas(cls) -> dict[str, Callable[[float, int], float]]:
        return {
            "brzycki": cls.brzycki,
            "epley": cls.epley,
            "lander": cls.lander,
        }

    @classmethod
    def estimate(cls, weight: float, reps: int, formula: str = DEFAULT_FORMULA) -> float:
        """Return the unrounded 1RM; unknown formulas fall back to Brzycki."""
        func = cls.formulas().get(formula, cls.brzycki)
        return func(weight, reps)

    @classmethod
    def target_reps(cls, percentage: float) -> int:
        for threshold, reps in cls.REP_TABLE:
            if percentage >= threshold:
                return reps
        return cls.FALLBACK_REPS

    @classmethod
    def compute(cls, request: OneRMRequest) -> OneRMResponse:
        """Return the 1RM, target load and the fixed set prescription."""
        formula = request.formula or cls.DEFAULT_FORMULA
        one_rm = cls.estimate(request.weight, request.reps, formula)
        target_weight = MathTools.round2(one_rm * request.percentage / 100.0)
        target_reps = cls.target_reps(request.percentage)
        sets = [
            SetValues(reps=target_reps, weight=target_weight)
            for _ in range(cls.SET_COUNT)
        ]
        return OneRMResponse(
            one_rm=MathTools.round2(one_rm),
            target_weight=target_weight,
            target_reps=target_reps,
            percentage=request.percentage,
            formula=formula,
            sets=sets,
        )
