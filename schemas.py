"""Pydantic models for request validation and JSON responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# 1RM calculator


class OneRMRequest(CamelModel):
    weight: float = Field(gt=0)
    reps: int = Field(gt=0, le=20)
    percentage: float = Field(ge=50, le=100)
    formula: str = ""


class SetValues(CamelModel):
    reps: int
    weight: float = Field(alias="kg")


class OneRMResponse(CamelModel):
    one_rm: float = Field(alias="oneRM")
    target_weight: float
    target_reps: int
    percentage: float
    formula: str
    sets: List[SetValues]


# analytics


class ProfileStats(CamelModel):
    total_workouts: int = 0
    total_exercises: int = 0
    total_volume: float = 0.0
    average_intensity: float = 0.0
    bmi: Optional[float] = None


class ProgressStats(CamelModel):
    weight_progress: float = 0.0
    volume_progress: float = 0.0
    frequency_per_week: float = 0.0
    most_improved_exercise: str = ""


class MuscleGroupStat(CamelModel):
    muscle_group: str
    count: int = 0
    volume: float = 0.0
    percentage: float = 0.0


class ExerciseStat(CamelModel):
    exercise: str
    max_weight: float = 0.0
    total_volume: float = 0.0
    # never populated by the analytics pass
    progress: float = 0.0


class AnalyticsResult(CamelModel):
    profile: ProfileStats
    progress: ProgressStats
    muscle_group_balance: List[MuscleGroupStat]
    recommendations: List[str]
    exercise_stats: List[ExerciseStat]


class ChartDataPoint(CamelModel):
    week: str
    exercise_data: Dict[str, float]


class ChartSeries(CamelModel):
    chart_data: List[ChartDataPoint]
    exercises: List[str]
    period: str = "all"
    chart_type: str = "weight"


class ProfileExercises(CamelModel):
    exercises: List[str]


# profiles and exercise catalog

FitnessGoal = Literal["strength", "mass", "endurance", "weight_loss", "other", ""]


class ProfilePayload(CamelModel):
    name: str = Field(min_length=1)
    age: Optional[int] = Field(default=None, gt=0)
    gender: str = ""
    weight: Optional[float] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    goal: FitnessGoal = ""
    experience: str = ""
    notes: str = ""


class Profile(ProfilePayload):
    id: int
    created_at: str
    updated_at: str


class ExercisePayload(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    muscle_group: str = ""
    is_custom: bool = True


class Exercise(ExercisePayload):
    id: int


# body weight and personal records


class BodyWeightRequest(CamelModel):
    weight: float = Field(gt=0)
    notes: str = ""
    date: str = ""


class BodyWeight(CamelModel):
    id: int
    profile_id: int
    date: str
    weight: float
    notes: str
    created_at: str
    updated_at: str


class PersonalRecordRequest(CamelModel):
    exercise: str = Field(min_length=1)
    weight: float = Field(gt=0)
    reps: int = Field(gt=0)
    date: str = ""


class PersonalRecord(CamelModel):
    id: int
    profile_id: int
    exercise: str
    weight: float
    reps: int
    date: str
    created_at: str
    updated_at: str


# goals

GoalType = Literal["weight", "reps", "volume", "body_weight", "custom"]


class GoalRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    type: GoalType
    exercise: str = ""
    target_value: float = Field(gt=0)
    unit: str = ""
    target_date: str = ""


class GoalProgressRequest(CamelModel):
    current_value: float = Field(ge=0)


class Goal(CamelModel):
    id: int
    profile_id: int
    title: str
    description: str
    type: str
    exercise: str
    target_value: float
    current_value: float
    unit: str
    target_date: str
    achieved: bool
    achieved_date: Optional[str] = None
    created_at: str
    updated_at: str


# training sessions


class SetEntry(CamelModel):
    weight: float = 0.0
    reps: int = 0
    rpe: int = 0


class TrainingSessionRequest(CamelModel):
    date: str = ""
    duration: int = 0
    notes: str = ""
    energy: int = 0
    mood: int = 0
    soreness: int = 0


class TrainingSession(CamelModel):
    id: int
    profile_id: int
    date: str
    duration: int
    notes: str
    energy: int
    mood: int
    soreness: int
    created_at: str
    updated_at: str


class SessionExerciseRequest(CamelModel):
    exercise: str = Field(min_length=1)
    sets: List[SetEntry] = Field(default_factory=list)
    notes: str = ""


class SessionExerciseUpdate(CamelModel):
    exercise: str = ""
    sets: List[SetEntry] = Field(default_factory=list)
    notes: str = ""


class TrainingSessionExercise(CamelModel):
    id: int
    training_session_id: int
    exercise: str
    sets: List[SetEntry]
    notes: str
    created_at: str
    updated_at: str


class TrainingSessionWithExercises(TrainingSession):
    exercises: List[TrainingSessionExercise] = Field(default_factory=list)


class TrainingHistory(CamelModel):
    sessions: List[TrainingSessionWithExercises]
    total_count: int
    page: int
    page_size: int
    has_more: bool


# programs


class TrainingProgramRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    is_active: bool = False


class TrainingProgram(CamelModel):
    id: int
    profile_id: int
    name: str
    description: str
    start_date: str
    end_date: str
    is_active: bool
    created_at: str
    updated_at: str


class ProgramExerciseRequest(CamelModel):
    exercise: str = Field(min_length=1)
    day_of_week: int = Field(ge=1, le=7)
    order: int = Field(ge=1)
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)
    weight: float = Field(default=0.0, ge=0)
    notes: str = ""


class ProgramExercise(CamelModel):
    id: int
    program_id: int
    exercise: str
    day_of_week: int
    order: int
    sets: int
    reps: int
    weight: float
    notes: str
    created_at: str
    updated_at: str


class ProgramSessionRequest(CamelModel):
    date: str = ""
    completed: bool = False
    notes: str = ""


class ProgramSession(CamelModel):
    id: int
    program_id: int
    date: str
    completed: bool
    notes: str
    created_at: str
    updated_at: str


class PlanDay(CamelModel):
    date: str
    exercises: List[ProgramExercise]
