import datetime
import logging
import sys

from db import (
    BodyWeightRepository,
    GoalRepository,
    ProfileRepository,
    TrainingRepository,
)
from models import TrainingRecord
from schemas import GoalRequest

logger = logging.getLogger(__name__)

# exercise -> (reps, starting kg, weekly increase in kg)
SAMPLE_PLAN = {
    "Жим штанги лежа": (8, 60, 2),
    "Приседания со штангой": (6, 80, 5),
    "Становая тяга": (5, 100, 5),
}


def sample_record(profile_id: int, exercise: str) -> TrainingRecord:
    """Three working days a week with a steady weekly load increase."""
    reps, start, step = SAMPLE_PLAN[exercise]
    record = TrainingRecord(profile_id=profile_id, exercise=exercise, weeks=4)
    for week in range(1, 5):
        for day in (1, 3, 5):
            record = record.with_cell(week, day, reps, start + step * (week - 1))
    return record


def seed(db_path: str = "training.db") -> bool:
    """Insert sample data for the default profile; returns False if not empty."""
    profiles = ProfileRepository(db_path)
    trainings = TrainingRepository(db_path)
    profile_id = profiles.default_profile_id()
    if trainings.fetch_all(profile_id):
        logger.info("Database already contains trainings")
        return False

    for exercise in SAMPLE_PLAN:
        trainings.create(sample_record(profile_id, exercise))
    BodyWeightRepository(db_path).log(
        profile_id, 80.0, "", datetime.date.today().isoformat()
    )
    GoalRepository(db_path).add(
        profile_id,
        GoalRequest(
            title="Жим 100 кг",
            type="weight",
            exercise="Жим штанги лежа",
            target_value=100,
        ),
    )
    logger.info("Seed data inserted for profile %d", profile_id)
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed(sys.argv[1] if len(sys.argv) > 1 else "training.db")
