from __future__ import annotations

import datetime
from typing import Dict, List, Sequence

from db import (
    ProgramExerciseRepository,
    TrainingProgramRepository,
    month_bounds,
)
from schemas import PlanDay, ProgramExercise, TrainingProgram


class PlannerService:
    """Expands a weekly training program into dated plan days."""

    def __init__(
        self,
        program_repo: TrainingProgramRepository,
        program_exercise_repo: ProgramExerciseRepository,
    ) -> None:
        self.programs = program_repo
        self.program_exercises = program_exercise_repo

    @staticmethod
    def plan_days(
        program: TrainingProgram,
        exercises: Sequence[ProgramExercise],
        year: int,
        month: int,
    ) -> List[PlanDay]:
        """Return the days of ``month`` that fall inside ``program`` and have work.

        ``day_of_week`` runs from 1 (Monday) to 7 (Sunday). Exercises keep the
        order they are given in. Raises ``ValueError`` for an invalid month.
        """
        first, last = month_bounds(year, month)
        start = datetime.date.fromisoformat(program.start_date)
        end = datetime.date.fromisoformat(program.end_date)
        if start > last or end < first:
            return []
        start = max(start, first)
        end = min(end, last)

        by_weekday: Dict[int, List[ProgramExercise]] = {}
        for ex in exercises:
            by_weekday.setdefault(ex.day_of_week, []).append(ex)

        days: List[PlanDay] = []
        day = start
        while day <= end:
            planned = by_weekday.get(day.isoweekday())
            if planned:
                days.append(PlanDay(date=day.isoformat(), exercises=planned))
            day += datetime.timedelta(days=1)
        return days

    def plan_month(
        self, profile_id: int, program_id: int, year: int, month: int
    ) -> List[PlanDay]:
        program = self.programs.fetch(profile_id, program_id)
        exercises = self.program_exercises.fetch_for_program(program_id)
        return self.plan_days(program, exercises, year, month)
