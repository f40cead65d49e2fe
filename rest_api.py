import datetime
import logging
import os
from typing import List

from fastapi import APIRouter, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from algorithms import OneRMCalculator
from config import APP_VERSION, env_or
from db import (
    BodyWeightRepository,
    ExerciseRepository,
    GoalRepository,
    InvalidDateError,
    PersonalRecordRepository,
    ProfileRepository,
    ProgramExerciseRepository,
    ProgramSessionRepository,
    SessionExerciseRepository,
    SettingsRepository,
    TrainingProgramRepository,
    TrainingRepository,
    TrainingSessionRepository,
)
from localization import Translator
from models import TrainingPayload, TrainingRecord
from planner_service import PlannerService
from recommendation_service import RecommendationService
from schemas import (
    AnalyticsResult,
    BodyWeight,
    BodyWeightRequest,
    ChartSeries,
    Exercise,
    ExercisePayload,
    Goal,
    GoalProgressRequest,
    GoalRequest,
    OneRMRequest,
    OneRMResponse,
    PersonalRecord,
    PersonalRecordRequest,
    PlanDay,
    Profile,
    ProfileExercises,
    ProfilePayload,
    ProgramExercise,
    ProgramExerciseRequest,
    ProgramSession,
    ProgramSessionRequest,
    SessionExerciseRequest,
    SessionExerciseUpdate,
    TrainingHistory,
    TrainingProgram,
    TrainingProgramRequest,
    TrainingSession,
    TrainingSessionExercise,
    TrainingSessionRequest,
)
from stats_service import StatisticsService

logger = logging.getLogger(__name__)


def _month_query(year: str, month: str) -> tuple[int, int] | None:
    try:
        y, m = int(year), int(month)
    except ValueError:
        return None
    if m < 1 or m > 12 or y < datetime.MINYEAR or y > datetime.MAXYEAR:
        return None
    return y, m


class TrainingAPI:
    """Provides REST endpoints for training logs, programs and analytics."""

    def __init__(
        self,
        db_path: str = "training.db",
        yaml_path: str = "settings.yaml",
        *,
        cors_origin: str | None = None,
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.profiles = ProfileRepository(db_path)
        self.exercises = ExerciseRepository(db_path)
        self.trainings = TrainingRepository(db_path)
        self.body_weights = BodyWeightRepository(db_path)
        self.personal_records = PersonalRecordRepository(db_path)
        self.goals = GoalRepository(db_path)
        self.session_exercises = SessionExerciseRepository(db_path)
        self.sessions = TrainingSessionRepository(db_path, self.session_exercises)
        self.programs = TrainingProgramRepository(db_path)
        self.program_exercises = ProgramExerciseRepository(db_path)
        self.program_sessions = ProgramSessionRepository(db_path)
        self.translator = Translator(self.settings.get_text("language", "ru"))
        self.recommender = RecommendationService(self.translator)
        self.statistics = StatisticsService(
            self.profiles,
            self.trainings,
            self.exercises,
            recommender=self.recommender,
            translator=self.translator,
        )
        self.planner = PlannerService(self.programs, self.program_exercises)
        self.app = FastAPI(
            title="Training Tracker API",
            description="REST API for training logs, programs and analytics",
            version=APP_VERSION,
        )
        origin = cors_origin or env_or(
            "CORS_ORIGIN", self.settings.get_text("cors_origin", "*")
        )
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=[o.strip() for o in origin.split(",") if o.strip()],
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        )
        logger.info("Training API using %s (CORS origin %s)", db_path, origin)
        self._setup_routes()

    def _language(self) -> str:
        return self.settings.get_text("language", self.translator.language)

    def _require_profile(self, profile_id: int) -> Profile:
        try:
            return self.profiles.fetch(profile_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

    def _require_session(self, profile_id: int, session_id: int) -> TrainingSession:
        try:
            return self.sessions.fetch(profile_id, session_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

    def _require_program(self, profile_id: int, program_id: int) -> TrainingProgram:
        try:
            return self.programs.fetch(profile_id, program_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

    def _setup_routes(self) -> None:
        router = APIRouter(prefix="/api")
        trainings_router = APIRouter(prefix="/trainings", tags=["Trainings"])
        exercises_router = APIRouter(prefix="/exercises", tags=["Exercises"])
        profiles_router = APIRouter(prefix="/profiles", tags=["Profiles"])
        metrics_router = APIRouter(prefix="/profiles", tags=["Body Metrics"])
        goals_router = APIRouter(prefix="/profiles", tags=["Goals"])
        sessions_router = APIRouter(prefix="/profiles", tags=["Training Sessions"])
        programs_router = APIRouter(prefix="/profiles", tags=["Programs"])

        @self.app.get("/health")
        def health():
            return {"status": "ok", "version": APP_VERSION}

        # legacy training grids

        @trainings_router.get("")
        def list_trainings(profile_id: int | None = Query(default=None, alias="profileId")):
            return [r.to_dict() for r in self.trainings.fetch_all(profile_id)]

        @trainings_router.post("", status_code=201)
        def create_training(payload: TrainingPayload):
            profile_id = payload.profile_id or self.profiles.default_profile_id()
            self._require_profile(profile_id)
            record = TrainingRecord.from_mapping(
                payload.model_dump(), profile_id=profile_id
            )
            return self.trainings.create(record).to_dict()

        @trainings_router.put("/{training_id}")
        def update_training(training_id: int, payload: TrainingPayload):
            try:
                existing = self.trainings.fetch(training_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            profile_id = payload.profile_id or existing.profile_id
            self._require_profile(profile_id)
            record = TrainingRecord.from_mapping(
                payload.model_dump(), profile_id=profile_id
            )
            return self.trainings.update(training_id, record).to_dict()

        @trainings_router.delete("/{training_id}", status_code=204)
        def delete_training(training_id: int):
            try:
                self.trainings.delete(training_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # exercise catalog

        @exercises_router.get("", response_model=List[Exercise])
        def list_exercises():
            return self.exercises.fetch_all()

        @exercises_router.post("", response_model=Exercise, status_code=201)
        def create_exercise(payload: ExercisePayload):
            try:
                return self.exercises.add(payload.model_copy(update={"is_custom": True}))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.delete("/{exercise_id}", status_code=204)
        def delete_exercise(exercise_id: int):
            try:
                self.exercises.delete(exercise_id)
            except PermissionError as e:
                raise HTTPException(status_code=403, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # profiles and analytics

        @profiles_router.get("", response_model=List[Profile])
        def list_profiles():
            return self.profiles.fetch_all()

        @profiles_router.post("", response_model=Profile, status_code=201)
        def create_profile(payload: ProfilePayload):
            return self.profiles.create(payload)

        @profiles_router.put("/{profile_id}", response_model=Profile)
        def update_profile(profile_id: int, payload: ProfilePayload):
            try:
                return self.profiles.update(profile_id, payload)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @profiles_router.delete("/{profile_id}", status_code=204)
        def delete_profile(profile_id: int):
            self._require_profile(profile_id)
            try:
                self.profiles.delete(profile_id)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return Response(status_code=204)

        @profiles_router.get(
            "/{profile_id}/analytics",
            response_model=AnalyticsResult,
            response_model_exclude_none=True,
        )
        def profile_analytics(profile_id: int):
            self._require_profile(profile_id)
            return self.statistics.analytics(profile_id, self._language())

        @profiles_router.get("/{profile_id}/progress-charts", response_model=ChartSeries)
        def progress_charts(
            profile_id: int,
            chart_type: str = Query(default="weight", alias="type"),
            period: str = "all",
            exercises: List[str] = Query(default=[]),
        ):
            self._require_profile(profile_id)
            return self.statistics.progress_charts(
                profile_id, chart_type, period, exercises, self._language()
            )

        @profiles_router.get("/{profile_id}/exercises", response_model=ProfileExercises)
        def profile_exercises(profile_id: int):
            self._require_profile(profile_id)
            return ProfileExercises(
                exercises=self.statistics.profile_exercises(profile_id)
            )

        # body weight and personal records

        @metrics_router.get("/{profile_id}/body-weight", response_model=List[BodyWeight])
        def body_weight_history(profile_id: int):
            self._require_profile(profile_id)
            return self.body_weights.fetch_history(profile_id)

        @metrics_router.post(
            "/{profile_id}/body-weight", response_model=BodyWeight, status_code=201
        )
        def log_body_weight(profile_id: int, payload: BodyWeightRequest, response: Response):
            self._require_profile(profile_id)
            try:
                entry, created = self.body_weights.log(
                    profile_id, payload.weight, payload.notes, payload.date
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            if not created:
                response.status_code = 200
            return entry

        @metrics_router.put(
            "/{profile_id}/body-weight/{weight_id}", response_model=BodyWeight
        )
        def update_body_weight(profile_id: int, weight_id: int, payload: BodyWeightRequest):
            try:
                return self.body_weights.update(
                    profile_id, weight_id, payload.weight, payload.notes, payload.date
                )
            except InvalidDateError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @metrics_router.delete("/{profile_id}/body-weight/{weight_id}", status_code=204)
        def delete_body_weight(profile_id: int, weight_id: int):
            try:
                self.body_weights.delete(profile_id, weight_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        @metrics_router.get(
            "/{profile_id}/personal-records", response_model=List[PersonalRecord]
        )
        def list_personal_records(profile_id: int):
            self._require_profile(profile_id)
            return self.personal_records.fetch_all(profile_id)

        @metrics_router.post(
            "/{profile_id}/personal-records",
            response_model=PersonalRecord,
            status_code=201,
        )
        def add_personal_record(profile_id: int, payload: PersonalRecordRequest):
            self._require_profile(profile_id)
            try:
                return self.personal_records.add(
                    profile_id,
                    payload.exercise,
                    payload.weight,
                    payload.reps,
                    payload.date,
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @metrics_router.delete(
            "/{profile_id}/personal-records/{record_id}", status_code=204
        )
        def delete_personal_record(profile_id: int, record_id: int):
            try:
                self.personal_records.delete(profile_id, record_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # goals

        @goals_router.get("/{profile_id}/goals", response_model=List[Goal])
        def list_goals(profile_id: int):
            self._require_profile(profile_id)
            return self.goals.fetch_all(profile_id)

        @goals_router.post("/{profile_id}/goals", response_model=Goal, status_code=201)
        def add_goal(profile_id: int, payload: GoalRequest):
            self._require_profile(profile_id)
            try:
                return self.goals.add(profile_id, payload)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @goals_router.put("/{profile_id}/goals/{goal_id}", response_model=Goal)
        def update_goal(profile_id: int, goal_id: int, payload: GoalRequest):
            try:
                return self.goals.update(profile_id, goal_id, payload)
            except InvalidDateError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @goals_router.put("/{profile_id}/goals/{goal_id}/progress", response_model=Goal)
        def update_goal_progress(profile_id: int, goal_id: int, payload: GoalProgressRequest):
            try:
                return self.goals.update_progress(
                    profile_id, goal_id, payload.current_value
                )
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @goals_router.delete("/{profile_id}/goals/{goal_id}", status_code=204)
        def delete_goal(profile_id: int, goal_id: int):
            try:
                self.goals.delete(profile_id, goal_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # training sessions

        @sessions_router.get(
            "/{profile_id}/training-history", response_model=TrainingHistory
        )
        def training_history(
            profile_id: int,
            page: int = 1,
            page_size: int = Query(default=0, alias="pageSize"),
            date_from: str = Query(default="", alias="dateFrom"),
            date_to: str = Query(default="", alias="dateTo"),
        ):
            self._require_profile(profile_id)
            size = page_size or self.settings.get_int(
                "page_size", TrainingSessionRepository.DEFAULT_PAGE_SIZE
            )
            return self.sessions.history(profile_id, page, size, date_from, date_to)

        @sessions_router.post(
            "/{profile_id}/training-sessions",
            response_model=TrainingSession,
            status_code=201,
        )
        def create_session(profile_id: int, payload: TrainingSessionRequest):
            self._require_profile(profile_id)
            try:
                return self.sessions.create(profile_id, **payload.model_dump())
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @sessions_router.put(
            "/{profile_id}/training-sessions/{session_id}",
            response_model=TrainingSession,
        )
        def update_session(profile_id: int, session_id: int, payload: TrainingSessionRequest):
            try:
                return self.sessions.update(profile_id, session_id, **payload.model_dump())
            except InvalidDateError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @sessions_router.delete(
            "/{profile_id}/training-sessions/{session_id}", status_code=204
        )
        def delete_session(profile_id: int, session_id: int):
            try:
                self.sessions.delete(profile_id, session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        @sessions_router.post(
            "/{profile_id}/training-sessions/{session_id}/exercises",
            response_model=TrainingSessionExercise,
            status_code=201,
        )
        def add_session_exercise(
            profile_id: int, session_id: int, payload: SessionExerciseRequest
        ):
            self._require_session(profile_id, session_id)
            return self.session_exercises.add(
                session_id, payload.exercise, payload.sets, payload.notes
            )

        @sessions_router.put(
            "/{profile_id}/training-sessions/{session_id}/exercises/{exercise_id}",
            response_model=TrainingSessionExercise,
        )
        def update_session_exercise(
            profile_id: int,
            session_id: int,
            exercise_id: int,
            payload: SessionExerciseUpdate,
        ):
            self._require_session(profile_id, session_id)
            try:
                current = self.session_exercises.fetch(session_id, exercise_id)
                return self.session_exercises.update(
                    session_id,
                    exercise_id,
                    payload.exercise or current.exercise,
                    payload.sets,
                    payload.notes,
                )
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @sessions_router.delete(
            "/{profile_id}/training-sessions/{session_id}/exercises/{exercise_id}",
            status_code=204,
        )
        def delete_session_exercise(profile_id: int, session_id: int, exercise_id: int):
            self._require_session(profile_id, session_id)
            try:
                self.session_exercises.delete(session_id, exercise_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # programs

        @programs_router.get("/{profile_id}/programs", response_model=List[TrainingProgram])
        def list_programs(profile_id: int):
            self._require_profile(profile_id)
            return self.programs.fetch_all(profile_id)

        @programs_router.post(
            "/{profile_id}/programs", response_model=TrainingProgram, status_code=201
        )
        def create_program(profile_id: int, payload: TrainingProgramRequest):
            self._require_profile(profile_id)
            try:
                return self.programs.create(profile_id, payload)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @programs_router.put(
            "/{profile_id}/programs/{program_id}", response_model=TrainingProgram
        )
        def update_program(profile_id: int, program_id: int, payload: TrainingProgramRequest):
            try:
                return self.programs.update(profile_id, program_id, payload)
            except InvalidDateError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @programs_router.delete("/{profile_id}/programs/{program_id}", status_code=204)
        def delete_program(profile_id: int, program_id: int):
            try:
                self.programs.delete(profile_id, program_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        @programs_router.get(
            "/{profile_id}/programs/{program_id}/exercises",
            response_model=List[ProgramExercise],
        )
        def list_program_exercises(profile_id: int, program_id: int):
            self._require_program(profile_id, program_id)
            return self.program_exercises.fetch_for_program(program_id)

        @programs_router.post(
            "/{profile_id}/programs/{program_id}/exercises",
            response_model=ProgramExercise,
            status_code=201,
        )
        def add_program_exercise(
            profile_id: int, program_id: int, payload: ProgramExerciseRequest
        ):
            self._require_program(profile_id, program_id)
            return self.program_exercises.add(program_id, payload)

        @programs_router.put(
            "/{profile_id}/programs/{program_id}/exercises/{exercise_id}",
            response_model=ProgramExercise,
        )
        def update_program_exercise(
            profile_id: int,
            program_id: int,
            exercise_id: int,
            payload: ProgramExerciseRequest,
        ):
            self._require_program(profile_id, program_id)
            try:
                return self.program_exercises.update(program_id, exercise_id, payload)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @programs_router.delete(
            "/{profile_id}/programs/{program_id}/exercises/{exercise_id}",
            status_code=204,
        )
        def delete_program_exercise(profile_id: int, program_id: int, exercise_id: int):
            self._require_program(profile_id, program_id)
            try:
                self.program_exercises.delete(program_id, exercise_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        @programs_router.get(
            "/{profile_id}/programs/{program_id}/plan-days",
            response_model=List[PlanDay],
        )
        def program_plan_days(
            profile_id: int, program_id: int, year: str = "", month: str = ""
        ):
            self._require_program(profile_id, program_id)
            parsed = _month_query(year, month)
            if parsed is None:
                raise HTTPException(status_code=400, detail="Invalid year or month")
            try:
                return self.planner.plan_month(profile_id, program_id, *parsed)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @programs_router.get(
            "/{profile_id}/programs/{program_id}/sessions",
            response_model=List[ProgramSession],
        )
        def list_program_sessions(
            profile_id: int, program_id: int, year: str = "", month: str = ""
        ):
            self._require_program(profile_id, program_id)
            parsed = _month_query(year, month)
            if parsed is None:
                return self.program_sessions.fetch_for_program(program_id)
            return self.program_sessions.fetch_for_program(program_id, *parsed)

        @programs_router.post(
            "/{profile_id}/programs/{program_id}/sessions",
            response_model=ProgramSession,
            status_code=201,
        )
        def add_program_session(
            profile_id: int, program_id: int, payload: ProgramSessionRequest
        ):
            self._require_program(profile_id, program_id)
            try:
                return self.program_sessions.add(
                    program_id, payload.date, payload.completed, payload.notes
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @programs_router.put(
            "/{profile_id}/programs/{program_id}/sessions/{session_id}",
            response_model=ProgramSession,
        )
        def update_program_session(
            profile_id: int,
            program_id: int,
            session_id: int,
            payload: ProgramSessionRequest,
        ):
            self._require_program(profile_id, program_id)
            try:
                return self.program_sessions.update(
                    program_id, session_id, payload.date, payload.completed, payload.notes
                )
            except InvalidDateError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @programs_router.delete(
            "/{profile_id}/programs/{program_id}/sessions/{session_id}",
            status_code=204,
        )
        def delete_program_session(profile_id: int, program_id: int, session_id: int):
            self._require_program(profile_id, program_id)
            try:
                self.program_sessions.delete(program_id, session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return Response(status_code=204)

        # calculator

        @router.post("/calculate-1rm", response_model=OneRMResponse)
        def calculate_one_rm(payload: OneRMRequest):
            if not payload.formula:
                payload = payload.model_copy(
                    update={
                        "formula": self.settings.get_text(
                            "default_formula", OneRMCalculator.DEFAULT_FORMULA
                        )
                    }
                )
            return OneRMCalculator.compute(payload)

        router.include_router(trainings_router)
        router.include_router(exercises_router)
        router.include_router(profiles_router)
        router.include_router(metrics_router)
        router.include_router(goals_router)
        router.include_router(sessions_router)
        router.include_router(programs_router)
        self.app.include_router(router)


api = TrainingAPI(os.environ.get("TRAINING_DB", "training.db"))
app = api.app

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=api.settings.get_text("log_level", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(env_or("PORT", str(api.settings.get_int("port", 8080))))
    uvicorn.run(app, host="0.0.0.0", port=port)
