from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from algorithms.math_tools import MathTools
from localization import Translator, translator as default_translator
from schemas import ExerciseStat, MuscleGroupStat, ProfileStats


class RecommendationService:
    """Turn computed analytics into ordered advisory messages.

    Every rule is evaluated independently and in a fixed order. When no rule
    fires a single encouragement message is returned.
    """

    IMBALANCE_RATIO = 0.3
    MIN_WORKOUTS = 8
    MIN_EXERCISES = 5
    GOAL_MESSAGES = {
        "strength": "goal_strength",
        "mass": "goal_mass",
        "endurance": "goal_endurance",
        "weight_loss": "goal_weight_loss",
    }

    def __init__(self, translator: Translator | None = None) -> None:
        self.translator = translator or default_translator
        self.rules: List[Callable[..., List[str]]] = [
            self._bmi_rule,
            self._balance_rule,
            self._frequency_rule,
            self._diversity_rule,
            self._goal_rule,
        ]

    def _bmi_rule(self, stats: ProfileStats, language: str, **_: Any) -> List[str]:
        if stats.bmi is None:
            return []
        if stats.bmi < MathTools.BMI_UNDERWEIGHT:
            return [self.translator.gettext("bmi_low", language)]
        if stats.bmi > MathTools.BMI_OVERWEIGHT:
            return [self.translator.gettext("bmi_high", language)]
        return []

    def _balance_rule(
        self, balance: Sequence[MuscleGroupStat], language: str, **_: Any
    ) -> List[str]:
        if not balance:
            return []
        threshold = balance[0].volume * self.IMBALANCE_RATIO
        return [
            self.translator.gettext(
                "muscle_balance",
                language,
                group=entry.muscle_group,
                percentage=entry.percentage,
            )
            for entry in balance
            if entry.volume < threshold
        ]

    def _frequency_rule(self, stats: ProfileStats, language: str, **_: Any) -> List[str]:
        if stats.total_workouts >= self.MIN_WORKOUTS:
            return []
        return [self.translator.gettext("frequency", language)]

    def _diversity_rule(
        self, exercise_stats: Sequence[ExerciseStat], language: str, **_: Any
    ) -> List[str]:
        if len(exercise_stats) >= self.MIN_EXERCISES:
            return []
        return [self.translator.gettext("diversity", language)]

    def _goal_rule(self, goal: Optional[str], language: str, **_: Any) -> List[str]:
        key = self.GOAL_MESSAGES.get(goal or "")
        return [self.translator.gettext(key, language)] if key else []

    def recommend(
        self,
        goal: Optional[str],
        stats: ProfileStats,
        balance: Sequence[MuscleGroupStat],
        exercise_stats: Sequence[ExerciseStat],
        language: str | None = None,
    ) -> List[str]:
        lang = language or self.translator.language
        messages: List[str] = []
        for rule in self.rules:
            messages.extend(
                rule(
                    goal=goal,
                    stats=stats,
                    balance=balance,
                    exercise_stats=exercise_stats,
                    language=lang,
                )
            )
        if not messages:
            messages.append(self.translator.gettext("great_job", lang))
        return messages
