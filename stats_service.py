from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from algorithms.math_tools import MathTools
from db import ExerciseRepository, ProfileRepository, TrainingRepository
from localization import Translator, translator as default_translator
from models import WEEKS, TrainingRecord
from recommendation_service import RecommendationService
from schemas import (
    AnalyticsResult,
    ChartDataPoint,
    ChartSeries,
    Exercise,
    ExerciseStat,
    MuscleGroupStat,
    ProfileStats,
    ProgressStats,
)

CHART_METRICS = ("weight", "volume", "intensity")


def profile_stats(profile: Any, records: Sequence[TrainingRecord]) -> ProfileStats:
    """Totals over all records plus BMI when weight and height are known."""
    names = {r.exercise for r in records if r.exercise}
    return ProfileStats(
        total_workouts=len(records),
        total_exercises=len(names),
        total_volume=sum(r.volume() for r in records),
        average_intensity=0.0,
        bmi=MathTools.bmi(profile.weight, profile.height),
    )


def progress_stats(records: Sequence[TrainingRecord]) -> ProgressStats:
    """Find the exercise with the largest first-to-last max weight gain.

    Records whose heaviest cell is 0 carry no data point. Only a strictly
    positive gain counts, and on equal gains the exercise seen first wins.
    """
    if not records:
        return ProgressStats()
    points: Dict[str, List[float]] = {}
    for record in records:
        if not record.exercise:
            continue
        top = record.max_weight()
        if top > 0:
            points.setdefault(record.exercise, []).append(top)

    best_name = ""
    best_progress = 0.0
    for name, weights in points.items():
        if len(weights) < 2:
            continue
        change = MathTools.percent_change(weights[0], weights[-1])
        if change > best_progress:
            best_progress = change
            best_name = name
    return ProgressStats(
        weight_progress=best_progress,
        volume_progress=0.0,
        frequency_per_week=len(records) / WEEKS,
        most_improved_exercise=best_name,
    )


def muscle_group_balance(
    records: Sequence[TrainingRecord], catalog_by_name: Mapping[str, Exercise]
) -> List[MuscleGroupStat]:
    groups: Dict[str, MuscleGroupStat] = {}
    total = 0.0
    for record in records:
        entry = catalog_by_name.get(record.exercise)
        if entry is None or not entry.muscle_group:
            continue
        stat = groups.setdefault(
            entry.muscle_group, MuscleGroupStat(muscle_group=entry.muscle_group)
        )
        volume = record.volume()
        stat.count += 1
        stat.volume += volume
        total += volume
    for stat in groups.values():
        stat.percentage = MathTools.share(stat.volume, total)
    return sorted(groups.values(), key=lambda s: s.volume, reverse=True)


def exercise_stats(records: Sequence[TrainingRecord]) -> List[ExerciseStat]:
    stats: Dict[str, ExerciseStat] = {}
    for record in records:
        if not record.exercise:
            continue
        stat = stats.setdefault(record.exercise, ExerciseStat(exercise=record.exercise))
        stat.max_weight = max(stat.max_weight, record.max_weight())
        stat.total_volume += record.volume()
    return sorted(stats.values(), key=lambda s: s.total_volume, reverse=True)


def compute_analytics(
    profile: Any,
    records: Sequence[TrainingRecord],
    catalog_by_name: Mapping[str, Exercise],
    language: str | None = None,
    recommender: RecommendationService | None = None,
) -> AnalyticsResult:
    """Build the full analytics view for one profile.

    ``records`` must be in insertion order; progress and tie-breaking depend
    on it. Never raises for empty input.
    """
    stats = profile_stats(profile, records)
    balance = muscle_group_balance(records, catalog_by_name)
    per_exercise = exercise_stats(records)
    recommender = recommender or RecommendationService()
    recommendations = recommender.recommend(
        getattr(profile, "goal", None), stats, balance, per_exercise, language
    )
    return AnalyticsResult(
        profile=stats,
        progress=progress_stats(records),
        muscle_group_balance=balance,
        recommendations=recommendations,
        exercise_stats=per_exercise,
    )


def _week_value(record: TrainingRecord, metric: str, week: int) -> float:
    if metric == "weight":
        return record.week_max_weight(week)
    if metric == "volume":
        return record.week_volume(week)
    if metric == "intensity":
        return record.week_intensity(week)
    return 0.0


def compute_chart_series(
    records: Sequence[TrainingRecord],
    metric: str = "weight",
    exercise_filter: Optional[Iterable[str]] = None,
    period: str = "all",
    language: str | None = None,
    translator: Translator | None = None,
) -> ChartSeries:
    """Per-week values of ``metric`` for each exercise.

    Only the first record of each exercise is charted. Unknown metrics
    produce zeros.
    """
    translator = translator or default_translator
    wanted = set(exercise_filter or [])
    if wanted:
        records = [r for r in records if r.exercise in wanted]
    first: Dict[str, TrainingRecord] = {}
    for record in records:
        if record.exercise and record.exercise not in first:
            first[record.exercise] = record
    names = sorted(first)

    points = []
    for week in range(1, WEEKS + 1):
        points.append(
            ChartDataPoint(
                week=translator.gettext("week_label", language, week=week),
                exercise_data={
                    name: _week_value(first[name], metric, week) for name in names
                },
            )
        )
    return ChartSeries(
        chart_data=points, exercises=names, period=period, chart_type=metric
    )


class StatisticsService:
    """Compute profile analytics from stored training records."""

    def __init__(
        self,
        profile_repo: ProfileRepository,
        training_repo: TrainingRepository,
        exercise_repo: ExerciseRepository,
        recommender: RecommendationService | None = None,
        translator: Translator | None = None,
    ) -> None:
        self.profiles = profile_repo
        self.trainings = training_repo
        self.exercises = exercise_repo
        self.recommender = recommender or RecommendationService(translator)
        self.translator = translator or default_translator

    def analytics(self, profile_id: int, language: str | None = None) -> AnalyticsResult:
        profile = self.profiles.fetch(profile_id)
        records = self.trainings.fetch_for_profile(profile_id)
        return compute_analytics(
            profile,
            records,
            self.exercises.catalog_by_name(),
            language,
            self.recommender,
        )

    def progress_charts(
        self,
        profile_id: int,
        metric: str = "weight",
        period: str = "all",
        exercises: Optional[List[str]] = None,
        language: str | None = None,
    ) -> ChartSeries:
        records = self.trainings.fetch_for_profile(profile_id, exercises or None)
        return compute_chart_series(
            records, metric, exercises, period, language, self.translator
        )

    def profile_exercises(self, profile_id: int) -> List[str]:
        return self.trainings.exercise_names(profile_id)
