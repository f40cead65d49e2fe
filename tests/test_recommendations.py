import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from localization import Translator
from recommendation_service import RecommendationService
from schemas import ExerciseStat, MuscleGroupStat, ProfileStats


def busy_stats(bmi=None) -> ProfileStats:
    return ProfileStats(total_workouts=12, total_exercises=6, bmi=bmi)


VARIED = [ExerciseStat(exercise=f"E{i}") for i in range(6)]


class RecommendationServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.translator = Translator()
        self.service = RecommendationService(self.translator)

    def test_great_job_when_nothing_fires(self) -> None:
        messages = self.service.recommend(None, busy_stats(22.0), [], VARIED)
        self.assertEqual(messages, [self.translator.gettext("great_job")])

    def test_bmi_rules(self) -> None:
        low = self.service.recommend(None, busy_stats(17.0), [], VARIED)
        high = self.service.recommend(None, busy_stats(27.5), [], VARIED)
        self.assertEqual(low, [self.translator.gettext("bmi_low")])
        self.assertEqual(high, [self.translator.gettext("bmi_high")])

    def test_balance_threshold(self) -> None:
        balance = [
            MuscleGroupStat(muscle_group="Спина", volume=1000, percentage=62.5),
            MuscleGroupStat(muscle_group="Руки", volume=400, percentage=25.0),
            MuscleGroupStat(muscle_group="Пресс", volume=200, percentage=12.5),
        ]
        messages = self.service.recommend(None, busy_stats(), balance, VARIED)
        self.assertEqual(
            messages,
            ["💪 Уделите больше внимания группе мышц: Пресс (всего 12.5% от общего объема)"],
        )

    def test_goal_tips(self) -> None:
        for goal in ("strength", "mass", "endurance", "weight_loss"):
            with self.subTest(goal=goal):
                messages = self.service.recommend(goal, busy_stats(), [], VARIED)
                self.assertEqual(messages, [self.translator.gettext(f"goal_{goal}")])
        self.assertEqual(
            self.service.recommend("other", busy_stats(), [], VARIED),
            [self.translator.gettext("great_job")],
        )

    def test_rule_order(self) -> None:
        stats = ProfileStats(total_workouts=1, total_exercises=1, bmi=30.0)
        messages = self.service.recommend("mass", stats, [], [ExerciseStat(exercise="A")])
        self.assertEqual(
            messages,
            [
                self.translator.gettext("bmi_high"),
                self.translator.gettext("frequency"),
                self.translator.gettext("diversity"),
                self.translator.gettext("goal_mass"),
            ],
        )

    def test_english(self) -> None:
        messages = self.service.recommend(None, busy_stats(), [], VARIED, language="en")
        self.assertEqual(messages, ["✅ Great work! Keep it up."])


class TranslatorTestCase(unittest.TestCase):
    def test_fallbacks(self) -> None:
        tr = Translator()
        self.assertEqual(tr.gettext("week_label", week=2), "Неделя 2")
        self.assertEqual(tr.gettext("week_label", "en", week=2), "Week 2")
        self.assertEqual(tr.gettext("week_label", "de", week=3), "Неделя 3")
        self.assertEqual(tr.gettext("missing_key"), "missing_key")

    def test_languages(self) -> None:
        self.assertEqual(Translator().languages, ["en", "ru"])
        self.assertEqual(Translator("en").gettext("week_label", week=1), "Week 1")


if __name__ == "__main__":
    unittest.main()
