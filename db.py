import calendar
import csv
import datetime
import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from algorithms import MathTools
from config import YamlConfig
from models import CELL_COLUMNS, TrainingRecord
from schemas import (
    BodyWeight,
    Exercise,
    ExercisePayload,
    Goal,
    GoalRequest,
    PersonalRecord,
    Profile,
    ProfilePayload,
    ProgramExercise,
    ProgramExerciseRequest,
    ProgramSession,
    SetEntry,
    TrainingHistory,
    TrainingProgram,
    TrainingProgramRequest,
    TrainingSession,
    TrainingSessionExercise,
    TrainingSessionWithExercises,
)
from settings_schema import SettingsSchema

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
INVALID_DATE = "Invalid date format. Use YYYY-MM-DD"
START_DATE_ERROR = "Invalid start date format. Use YYYY-MM-DD"
END_DATE_ERROR = "Invalid end date format. Use YYYY-MM-DD"


class InvalidDateError(ValueError):
    """Raised when a date is missing or not in ``YYYY-MM-DD`` form."""


def now_timestamp() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")


def parse_date(value: Optional[str], message: str = INVALID_DATE) -> Optional[str]:
    """Normalize a ``YYYY-MM-DD`` string; empty input yields ``None``."""
    if not value:
        return None
    try:
        return datetime.datetime.strptime(value, DATE_FORMAT).date().isoformat()
    except ValueError:
        raise InvalidDateError(message) from None


def add_months(day: datetime.date, months: int) -> datetime.date:
    """Shift ``day`` by whole months, overflowing into the next month."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    return datetime.date(year, month, 1) + datetime.timedelta(days=day.day - 1)


def month_bounds(year: int, month: int) -> Tuple[datetime.date, datetime.date]:
    if not 1 <= month <= 12 or not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise ValueError("Invalid year or month")
    last = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, 1), datetime.date(year, month, last)


def _training_table() -> Tuple[str, List[str]]:
    cells = ",\n".join(
        f"                    {col} INTEGER NOT NULL DEFAULT 0" for col in CELL_COLUMNS
    )
    sql = (
        "CREATE TABLE trainings (\n"
        "                    id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
        "                    profile_id INTEGER NOT NULL,\n"
        "                    exercise TEXT NOT NULL DEFAULT '',\n"
        "                    weeks INTEGER NOT NULL DEFAULT 0,\n"
        f"{cells},\n"
        "                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE\n"
        "                );"
    )
    return sql, ["id", "profile_id", "exercise", "weeks", *CELL_COLUMNS]


class Database:
    """Provides SQLite connection management and schema initialization."""

    DEFAULT_PROFILE_NAME = "Основной профиль"
    # filled with 0 when a table rebuild adds them
    _NUMERIC_COLUMNS = {
        "weeks",
        "is_custom",
        "achieved",
        "completed",
        "is_active",
        "duration",
        "current_value",
        "target_value",
        "weight",
        "reps",
        "sets",
        "day_of_week",
        "order",
    }

    _TABLE_DEFINITIONS = {
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
        "profiles": (
            """CREATE TABLE profiles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    age INTEGER,
                    gender TEXT NOT NULL DEFAULT '',
                    weight REAL,
                    height INTEGER,
                    goal TEXT NOT NULL DEFAULT '',
                    experience TEXT NOT NULL DEFAULT '',
                    notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );""",
            [
                "id",
                "name",
                "age",
                "gender",
                "weight",
                "height",
                "goal",
                "experience",
                "notes",
                "created_at",
                "updated_at",
            ],
        ),
        "exercises": (
            """CREATE TABLE exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT NOT NULL DEFAULT '',
                    category TEXT NOT NULL DEFAULT '',
                    muscle_group TEXT NOT NULL DEFAULT '',
                    is_custom INTEGER NOT NULL DEFAULT 0
                );""",
            ["id", "name", "description", "category", "muscle_group", "is_custom"],
        ),
        "trainings": _training_table(),
        "body_weights": (
            """CREATE TABLE body_weights (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    profile_id INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    weight REAL NOT NULL,
                    notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "profile_id",
                "date",
                "weight",
                "notes",
                "created_at",
                "updated_at",
            ],
        ),
        "personal_records": (
            """CREATE TABLE personal_records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    profile_id INTEGER NOT NULL,
                    exercise TEXT NOT NULL,
                    weight REAL NOT NULL,
                    reps INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "profile_id",
                "exercise",
                "weight",
                "reps",
                "date",
                "created_at",
                "updated_at",
            ],
        ),
        "goals": (
            """CREATE TABLE goals (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    profile_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL,
                    exercise TEXT NOT NULL DEFAULT '',
                    target_value REAL NOT NULL,
                    current_value REAL NOT NULL DEFAULT 0,
                    unit TEXT NOT NULL DEFAULT '',
                    target_date TEXT NOT NULL,
                    achieved INTEGER NOT NULL DEFAULT 0,
                    achieved_date TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "profile_id",
                "title",
                "description",
                "type",
                "exercise",
                "target_value",
                "current_value",
                "unit",
                "target_date",
                "achieved",
                "achieved_date",
                "created_at",
                "updated_at",
            ],
        ),
        "training_sessions": (
            """CREATE TABLE training_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    profile_id INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    duration INTEGER NOT NULL DEFAULT 0,
                    notes TEXT NOT NULL DEFAULT '',
                    energy INTEGER NOT NULL DEFAULT 5,
                    mood INTEGER NOT NULL DEFAULT 5,
                    soreness INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "profile_id",
                "date",
                "duration",
                "notes",
                "energy",
                "mood",
                "soreness",
                "created_at",
                "updated_at",
            ],
        ),
        "training_session_exercises": (
            """CREATE TABLE training_session_exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    training_session_id INTEGER NOT NULL,
                    exercise TEXT NOT NULL DEFAULT '',
                    sets TEXT NOT NULL DEFAULT '[]',
                    notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(training_session_id) REFERENCES training_sessions(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "training_session_id",
                "exercise",
                "sets",
                "notes",
                "created_at",
                "updated_at",
            ],
        ),
        "training_programs": (
            """CREATE TABLE training_programs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    profile_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    start_date TEXT NOT NULL,
                    end_date TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(profile_id) REFERENCES profiles(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "profile_id",
                "name",
                "description",
                "start_date",
                "end_date",
                "is_active",
                "created_at",
                "updated_at",
            ],
        ),
        "program_exercises": (
            """CREATE TABLE program_exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    program_id INTEGER NOT NULL,
                    exercise TEXT NOT NULL,
                    day_of_week INTEGER NOT NULL,
                    "order" INTEGER NOT NULL,
                    sets INTEGER NOT NULL,
                    reps INTEGER NOT NULL,
                    weight REAL NOT NULL DEFAULT 0,
                    notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(program_id) REFERENCES training_programs(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "program_id",
                "exercise",
                "day_of_week",
                "order",
                "sets",
                "reps",
                "weight",
                "notes",
                "created_at",
                "updated_at",
            ],
        ),
        "program_sessions": (
            """CREATE TABLE program_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    program_id INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(program_id) REFERENCES training_programs(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "program_id",
                "date",
                "completed",
                "notes",
                "created_at",
                "updated_at",
            ],
        ),
    }

    def __init__(self, db_path: str = "training.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._import_exercise_catalog_data()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            conn.execute("PRAGMA foreign_keys=off;")
            # keep REFERENCES clauses pointing at the rebuilt table names
            conn.execute("PRAGMA legacy_alter_table=ON;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
                if table == "profiles":
                    # rebuilt legacy trainings rows are assigned to this profile
                    self._ensure_default_profile(conn)
            conn.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info("Rebuilding table %s to match current schema", table)
        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(f'"{c}"' for c in common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:

                def default_val(col: str) -> str:
                    if table == "profiles" and col in ("age", "weight", "height"):
                        return "NULL"
                    if col == "profile_id":
                        return "(SELECT MIN(id) FROM profiles)"
                    if col in ("created_at", "updated_at"):
                        return "datetime('now')"
                    if col in ("energy", "mood"):
                        return "5"
                    if col == "soreness":
                        return "1"
                    if col == "sets" and table == "training_session_exercises":
                        return "'[]'"
                    if col in CELL_COLUMNS or col in self._NUMERIC_COLUMNS:
                        return "0"
                    return "''"

                defaults = ", ".join(default_val(c) for c in missing)
                missing_cols = ", ".join(f'"{c}"' for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {missing_cols}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _ensure_default_profile(self, conn: sqlite3.Connection) -> None:
        row = conn.execute("SELECT COUNT(*) FROM profiles;").fetchone()
        if row[0]:
            return
        ts = now_timestamp()
        conn.execute(
            "INSERT INTO profiles (name, created_at, updated_at) VALUES (?, ?, ?);",
            (self.DEFAULT_PROFILE_NAME, ts, ts),
        )
        logger.info("Created default profile %r", self.DEFAULT_PROFILE_NAME)

    def _import_exercise_catalog_data(self) -> None:
        csv_path = os.path.join(os.path.dirname(__file__), "exercise_catalog.csv")
        if not os.path.exists(csv_path):
            return
        with open(csv_path, newline="", encoding="utf-8") as csvfile:
            reader = csv.DictReader(csvfile)
            records = [
                (
                    row["Name"],
                    row["Description"],
                    row["Category"],
                    row["Muscle Group"],
                )
                for row in reader
            ]
        with self._connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM exercises;").fetchone()[0]
            if count:
                return
            conn.executemany(
                "INSERT OR IGNORE INTO exercises (name, description, category, muscle_group, is_custom) "
                "VALUES (?, ?, ?, ?, 0);",
                records,
            )
        logger.info("Imported %d predefined exercises", len(records))

    def _init_settings(self) -> None:
        defaults = SettingsSchema().model_dump(exclude={"api_token"})
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, str(value)),
                )

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()

    def _exists(self, table: str, where: str, params: Tuple) -> bool:
        # subclasses redefine fetch_all for their own rows
        rows = BaseRepository.fetch_all(
            self, f"SELECT 1 FROM {table} WHERE {where} LIMIT 1;", params
        )
        return bool(rows)


class ProfileRepository(BaseRepository):
    """Repository for athlete profiles."""

    _COLUMNS = "id, name, age, gender, weight, height, goal, experience, notes, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> Profile:
        return Profile(
            id=row[0],
            name=row[1],
            age=row[2],
            gender=row[3] or "",
            weight=row[4],
            height=row[5],
            goal=row[6] or "",
            experience=row[7] or "",
            notes=row[8] or "",
            created_at=row[9],
            updated_at=row[10],
        )

    def fetch_all(self) -> List[Profile]:
        rows = super().fetch_all(f"SELECT {self._COLUMNS} FROM profiles ORDER BY id;")
        return [self._to_model(r) for r in rows]

    def fetch(self, profile_id: int) -> Profile:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM profiles WHERE id = ?;", (profile_id,)
        )
        if not rows:
            raise ValueError("profile not found")
        return self._to_model(rows[0])

    def default_profile_id(self) -> int:
        rows = super().fetch_all("SELECT MIN(id) FROM profiles;")
        if not rows or rows[0][0] is None:
            raise ValueError("profile not found")
        return int(rows[0][0])

    def create(self, payload: ProfilePayload) -> Profile:
        ts = now_timestamp()
        pid = self.execute(
            "INSERT INTO profiles (name, age, gender, weight, height, goal, experience, notes, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);",
            (
                payload.name,
                payload.age,
                payload.gender,
                payload.weight,
                payload.height,
                payload.goal,
                payload.experience,
                payload.notes,
                ts,
                ts,
            ),
        )
        return self.fetch(pid)

    def update(self, profile_id: int, payload: ProfilePayload) -> Profile:
        self.fetch(profile_id)
        self.execute(
            "UPDATE profiles SET name = ?, age = ?, gender = ?, weight = ?, height = ?, goal = ?, "
            "experience = ?, notes = ?, updated_at = ? WHERE id = ?;",
            (
                payload.name,
                payload.age,
                payload.gender,
                payload.weight,
                payload.height,
                payload.goal,
                payload.experience,
                payload.notes,
                now_timestamp(),
                profile_id,
            ),
        )
        return self.fetch(profile_id)

    def delete(self, profile_id: int) -> None:
        """Delete a profile and everything it owns; the last profile stays."""
        self.fetch(profile_id)
        count = super().fetch_all("SELECT COUNT(*) FROM profiles;")[0][0]
        if count <= 1:
            raise ValueError("Cannot delete the last profile")
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM training_session_exercises WHERE training_session_id IN "
                "(SELECT id FROM training_sessions WHERE profile_id = ?);",
                (profile_id,),
            )
            conn.execute(
                "DELETE FROM program_exercises WHERE program_id IN "
                "(SELECT id FROM training_programs WHERE profile_id = ?);",
                (profile_id,),
            )
            conn.execute(
                "DELETE FROM program_sessions WHERE program_id IN "
                "(SELECT id FROM training_programs WHERE profile_id = ?);",
                (profile_id,),
            )
            for table in (
                "trainings",
                "body_weights",
                "personal_records",
                "goals",
                "training_sessions",
                "training_programs",
            ):
                conn.execute(f"DELETE FROM {table} WHERE profile_id = ?;", (profile_id,))
            conn.execute("DELETE FROM profiles WHERE id = ?;", (profile_id,))


class ExerciseRepository(BaseRepository):
    """Repository for the exercise catalog."""

    _COLUMNS = "id, name, description, category, muscle_group, is_custom"

    @staticmethod
    def _to_model(row: Tuple) -> Exercise:
        return Exercise(
            id=row[0],
            name=row[1],
            description=row[2] or "",
            category=row[3] or "",
            muscle_group=row[4] or "",
            is_custom=bool(row[5]),
        )

    def fetch_all(self) -> List[Exercise]:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM exercises ORDER BY is_custom, category, name;"
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, exercise_id: int) -> Exercise:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM exercises WHERE id = ?;", (exercise_id,)
        )
        if not rows:
            raise ValueError("exercise not found")
        return self._to_model(rows[0])

    def add(self, payload: ExercisePayload) -> Exercise:
        if self._exists("exercises", "name = ?", (payload.name,)):
            raise ValueError("exercise already exists")
        eid = self.execute(
            "INSERT INTO exercises (name, description, category, muscle_group, is_custom) "
            "VALUES (?, ?, ?, ?, ?);",
            (
                payload.name,
                payload.description,
                payload.category,
                payload.muscle_group,
                int(payload.is_custom),
            ),
        )
        return self.fetch(eid)

    def delete(self, exercise_id: int) -> None:
        exercise = self.fetch(exercise_id)
        if not exercise.is_custom:
            raise PermissionError("cannot delete predefined exercises")
        self.execute("DELETE FROM exercises WHERE id = ?;", (exercise_id,))

    def catalog_by_name(self) -> Dict[str, Exercise]:
        return {e.name: e for e in self.fetch_all()}


class TrainingRepository(BaseRepository):
    """Repository for legacy four-week training grids."""

    MAX_WEEKS = 8

    _COLUMNS = ", ".join(["id", "profile_id", "exercise", "weeks", *CELL_COLUMNS])

    @staticmethod
    def _to_record(row: Tuple) -> TrainingRecord:
        return TrainingRecord.from_cells(
            row[4:], id=row[0], profile_id=row[1], exercise=row[2], weeks=row[3]
        )

    def fetch_all(self, profile_id: Optional[int] = None) -> List[TrainingRecord]:
        query = f"SELECT {self._COLUMNS} FROM trainings"
        params: Tuple = ()
        if profile_id is not None:
            query += " WHERE profile_id = ?"
            params = (profile_id,)
        rows = super().fetch_all(query + " ORDER BY id;", params)
        return [self._to_record(r) for r in rows]

    def fetch(self, training_id: int) -> TrainingRecord:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM trainings WHERE id = ?;", (training_id,)
        )
        if not rows:
            raise ValueError("training not found")
        return self._to_record(rows[0])

    def fetch_for_profile(
        self, profile_id: int, exercises: Optional[List[str]] = None
    ) -> List[TrainingRecord]:
        """Return a profile's records in insertion order, optionally by name."""
        query = f"SELECT {self._COLUMNS} FROM trainings WHERE profile_id = ?"
        params: list = [profile_id]
        if exercises:
            query += f" AND exercise IN ({', '.join('?' for _ in exercises)})"
            params.extend(exercises)
        rows = super().fetch_all(query + " ORDER BY id;", tuple(params))
        return [self._to_record(r) for r in rows]

    @classmethod
    def _weeks(cls, weeks: int) -> int:
        return int(MathTools.clamp(weeks, 1, cls.MAX_WEEKS))

    def create(self, record: TrainingRecord) -> TrainingRecord:
        columns = ["profile_id", "exercise", "weeks", *CELL_COLUMNS]
        placeholders = ", ".join("?" for _ in columns)
        tid = self.execute(
            f"INSERT INTO trainings ({', '.join(columns)}) VALUES ({placeholders});",
            (record.profile_id, record.exercise, self._weeks(record.weeks), *record.cells()),
        )
        return self.fetch(tid)

    def update(self, training_id: int, record: TrainingRecord) -> TrainingRecord:
        self.fetch(training_id)
        columns = ["profile_id", "exercise", "weeks", *CELL_COLUMNS]
        assignments = ", ".join(f"{c} = ?" for c in columns)
        self.execute(
            f"UPDATE trainings SET {assignments} WHERE id = ?;",
            (
                record.profile_id,
                record.exercise,
                self._weeks(record.weeks),
                *record.cells(),
                training_id,
            ),
        )
        return self.fetch(training_id)

    def delete(self, training_id: int) -> None:
        self.fetch(training_id)
        self.execute("DELETE FROM trainings WHERE id = ?;", (training_id,))

    def exercise_names(self, profile_id: int) -> List[str]:
        """Sorted distinct non-empty exercise names of a profile."""
        rows = super().fetch_all(
            "SELECT exercise FROM trainings WHERE profile_id = ? AND exercise != '' "
            "GROUP BY exercise ORDER BY exercise;",
            (profile_id,),
        )
        return [r[0] for r in rows]


class BodyWeightRepository(BaseRepository):
    """Repository for body weight logs."""

    _COLUMNS = "id, profile_id, date, weight, notes, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> BodyWeight:
        return BodyWeight(
            id=row[0],
            profile_id=row[1],
            date=row[2],
            weight=float(row[3]),
            notes=row[4] or "",
            created_at=row[5],
            updated_at=row[6],
        )

    def fetch_history(self, profile_id: int) -> List[BodyWeight]:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM body_weights WHERE profile_id = ? ORDER BY date DESC, id DESC;",
            (profile_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, profile_id: int, entry_id: int) -> BodyWeight:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM body_weights WHERE id = ? AND profile_id = ?;",
            (entry_id, profile_id),
        )
        if not rows:
            raise ValueError("body weight record not found")
        return self._to_model(rows[0])

    def log(
        self, profile_id: int, weight: float, notes: str = "", date: Optional[str] = None
    ) -> Tuple[BodyWeight, bool]:
        """Record a weigh-in; a second entry on the same date replaces the first.

        Returns the stored entry and whether a new row was created.
        """
        if weight <= 0:
            raise ValueError("weight must be positive")
        day = parse_date(date) or datetime.date.today().isoformat()
        ts = now_timestamp()
        rows = self.fetch_all(
            "SELECT id FROM body_weights WHERE profile_id = ? AND date = ?;",
            (profile_id, day),
        )
        if rows:
            self.execute(
                "UPDATE body_weights SET weight = ?, notes = ?, updated_at = ? WHERE id = ?;",
                (weight, notes, ts, rows[0][0]),
            )
            return self.fetch(profile_id, rows[0][0]), False
        entry_id = self.execute(
            "INSERT INTO body_weights (profile_id, date, weight, notes, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?);",
            (profile_id, day, weight, notes, ts, ts),
        )
        return self.fetch(profile_id, entry_id), True

    def update(
        self,
        profile_id: int,
        entry_id: int,
        weight: float,
        notes: str = "",
        date: Optional[str] = None,
    ) -> BodyWeight:
        if weight <= 0:
            raise ValueError("weight must be positive")
        current = self.fetch(profile_id, entry_id)
        day = parse_date(date) or current.date
        self.execute(
            "UPDATE body_weights SET date = ?, weight = ?, notes = ?, updated_at = ? WHERE id = ?;",
            (day, weight, notes, now_timestamp(), entry_id),
        )
        return self.fetch(profile_id, entry_id)

    def delete(self, profile_id: int, entry_id: int) -> None:
        self.fetch(profile_id, entry_id)
        self.execute("DELETE FROM body_weights WHERE id = ?;", (entry_id,))


class PersonalRecordRepository(BaseRepository):
    """Repository for personal records."""

    _COLUMNS = "id, profile_id, exercise, weight, reps, date, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> PersonalRecord:
        return PersonalRecord(
            id=row[0],
            profile_id=row[1],
            exercise=row[2],
            weight=float(row[3]),
            reps=int(row[4]),
            date=row[5],
            created_at=row[6],
            updated_at=row[7],
        )

    def fetch_all(self, profile_id: int) -> List[PersonalRecord]:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM personal_records WHERE profile_id = ? ORDER BY date DESC, id DESC;",
            (profile_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, profile_id: int, record_id: int) -> PersonalRecord:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM personal_records WHERE id = ? AND profile_id = ?;",
            (record_id, profile_id),
        )
        if not rows:
            raise ValueError("personal record not found")
        return self._to_model(rows[0])

    def add(
        self,
        profile_id: int,
        exercise: str,
        weight: float,
        reps: int,
        date: Optional[str] = None,
    ) -> PersonalRecord:
        day = parse_date(date) or datetime.date.today().isoformat()
        ts = now_timestamp()
        record_id = self.execute(
            "INSERT INTO personal_records (profile_id, exercise, weight, reps, date, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?);",
            (profile_id, exercise, weight, reps, day, ts, ts),
        )
        return self.fetch(profile_id, record_id)

    def delete(self, profile_id: int, record_id: int) -> None:
        self.fetch(profile_id, record_id)
        self.execute("DELETE FROM personal_records WHERE id = ?;", (record_id,))


class GoalRepository(BaseRepository):
    """Repository for goal management."""

    DEFAULT_UNITS = {
        "weight": "кг",
        "reps": "раз",
        "volume": "кг×раз",
        "body_weight": "кг",
    }
    FALLBACK_UNIT = "ед."

    _COLUMNS = (
        "id, profile_id, title, description, type, exercise, target_value, current_value, "
        "unit, target_date, achieved, achieved_date, created_at, updated_at"
    )

    @staticmethod
    def _to_model(row: Tuple) -> Goal:
        return Goal(
            id=row[0],
            profile_id=row[1],
            title=row[2],
            description=row[3] or "",
            type=row[4],
            exercise=row[5] or "",
            target_value=float(row[6]),
            current_value=float(row[7]),
            unit=row[8] or "",
            target_date=row[9],
            achieved=bool(row[10]),
            achieved_date=row[11],
            created_at=row[12],
            updated_at=row[13],
        )

    @classmethod
    def default_unit(cls, goal_type: str) -> str:
        return cls.DEFAULT_UNITS.get(goal_type, cls.FALLBACK_UNIT)

    def fetch_all(self, profile_id: int) -> List[Goal]:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM goals WHERE profile_id = ? ORDER BY created_at DESC, id DESC;",
            (profile_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, profile_id: int, goal_id: int) -> Goal:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM goals WHERE id = ? AND profile_id = ?;",
            (goal_id, profile_id),
        )
        if not rows:
            raise ValueError("goal not found")
        return self._to_model(rows[0])

    def add(self, profile_id: int, req: GoalRequest) -> Goal:
        target_date = parse_date(req.target_date) or add_months(
            datetime.date.today(), 1
        ).isoformat()
        ts = now_timestamp()
        goal_id = self.execute(
            "INSERT INTO goals (profile_id, title, description, type, exercise, target_value, current_value, "
            "unit, target_date, achieved, achieved_date, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?, 0, NULL, ?, ?);",
            (
                profile_id,
                req.title,
                req.description,
                req.type,
                req.exercise,
                req.target_value,
                req.unit or self.default_unit(req.type),
                target_date,
                ts,
                ts,
            ),
        )
        return self.fetch(profile_id, goal_id)

    def _save(self, goal: Goal) -> Goal:
        """Persist ``goal``, marking it achieved the first time it reaches target."""
        ts = now_timestamp()
        if goal.current_value >= goal.target_value and not goal.achieved:
            goal.achieved = True
            goal.achieved_date = ts
        self.execute(
            "UPDATE goals SET title = ?, description = ?, type = ?, exercise = ?, target_value = ?, "
            "current_value = ?, unit = ?, target_date = ?, achieved = ?, achieved_date = ?, updated_at = ? "
            "WHERE id = ?;",
            (
                goal.title,
                goal.description,
                goal.type,
                goal.exercise,
                goal.target_value,
                goal.current_value,
                goal.unit,
                goal.target_date,
                int(goal.achieved),
                goal.achieved_date,
                ts,
                goal.id,
            ),
        )
        return self.fetch(goal.profile_id, goal.id)

    def update(self, profile_id: int, goal_id: int, req: GoalRequest) -> Goal:
        goal = self.fetch(profile_id, goal_id)
        target_date = parse_date(req.target_date)
        if target_date:
            goal.target_date = target_date
        goal.title = req.title
        goal.description = req.description
        goal.type = req.type
        goal.exercise = req.exercise
        goal.target_value = req.target_value
        if req.unit:
            goal.unit = req.unit
        return self._save(goal)

    def update_progress(self, profile_id: int, goal_id: int, current_value: float) -> Goal:
        goal = self.fetch(profile_id, goal_id)
        goal.current_value = current_value
        return self._save(goal)

    def delete(self, profile_id: int, goal_id: int) -> None:
        self.fetch(profile_id, goal_id)
        self.execute("DELETE FROM goals WHERE id = ?;", (goal_id,))


class SessionExerciseRepository(BaseRepository):
    """Repository for exercises logged inside a training session."""

    _COLUMNS = "id, training_session_id, exercise, sets, notes, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> TrainingSessionExercise:
        return TrainingSessionExercise(
            id=row[0],
            training_session_id=row[1],
            exercise=row[2] or "",
            sets=[SetEntry(**s) for s in json.loads(row[3] or "[]")],
            notes=row[4] or "",
            created_at=row[5],
            updated_at=row[6],
        )

    @staticmethod
    def _dump_sets(sets: List[SetEntry]) -> str:
        return json.dumps([s.model_dump() for s in sets])

    def fetch_for_session(self, session_id: int) -> List[TrainingSessionExercise]:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM training_session_exercises WHERE training_session_id = ? ORDER BY id;",
            (session_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, session_id: int, exercise_id: int) -> TrainingSessionExercise:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM training_session_exercises WHERE id = ? AND training_session_id = ?;",
            (exercise_id, session_id),
        )
        if not rows:
            raise ValueError("exercise not found")
        return self._to_model(rows[0])

    def add(
        self, session_id: int, exercise: str, sets: List[SetEntry], notes: str = ""
    ) -> TrainingSessionExercise:
        ts = now_timestamp()
        exercise_id = self.execute(
            "INSERT INTO training_session_exercises (training_session_id, exercise, sets, notes, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?);",
            (session_id, exercise, self._dump_sets(sets), notes, ts, ts),
        )
        return self.fetch(session_id, exercise_id)

    def update(
        self,
        session_id: int,
        exercise_id: int,
        exercise: str,
        sets: List[SetEntry],
        notes: str = "",
    ) -> TrainingSessionExercise:
        self.fetch(session_id, exercise_id)
        self.execute(
            "UPDATE training_session_exercises SET exercise = ?, sets = ?, notes = ?, updated_at = ? WHERE id = ?;",
            (exercise, self._dump_sets(sets), notes, now_timestamp(), exercise_id),
        )
        return self.fetch(session_id, exercise_id)

    def delete(self, session_id: int, exercise_id: int) -> None:
        self.fetch(session_id, exercise_id)
        self.execute(
            "DELETE FROM training_session_exercises WHERE id = ?;", (exercise_id,)
        )


class TrainingSessionRepository(BaseRepository):
    """Repository for dated training sessions."""

    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    _COLUMNS = "id, profile_id, date, duration, notes, energy, mood, soreness, created_at, updated_at"

    def __init__(
        self,
        db_path: str = "training.db",
        exercise_repo: Optional[SessionExerciseRepository] = None,
    ) -> None:
        super().__init__(db_path)
        self.exercises = exercise_repo or SessionExerciseRepository(db_path)

    @staticmethod
    def _to_model(row: Tuple) -> TrainingSession:
        return TrainingSession(
            id=row[0],
            profile_id=row[1],
            date=row[2],
            duration=row[3],
            notes=row[4] or "",
            energy=row[5],
            mood=row[6],
            soreness=row[7],
            created_at=row[8],
            updated_at=row[9],
        )

    @staticmethod
    def _score(value: int, default: int) -> int:
        return value if 1 <= value <= 10 else default

    def fetch(self, profile_id: int, session_id: int) -> TrainingSession:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM training_sessions WHERE id = ? AND profile_id = ?;",
            (session_id, profile_id),
        )
        if not rows:
            raise ValueError("training session not found")
        return self._to_model(rows[0])

    def history(
        self,
        profile_id: int,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> TrainingHistory:
        """Return one page of sessions, newest first, with their exercises.

        Out-of-range paging falls back to page 1 and the default page size;
        unparseable date bounds are ignored.
        """
        page = page if page >= 1 else 1
        if page_size < 1 or page_size > self.MAX_PAGE_SIZE:
            page_size = self.DEFAULT_PAGE_SIZE
        offset = (page - 1) * page_size
        where = "profile_id = ?"
        params: list = [profile_id]
        for bound, op in ((date_from, ">="), (date_to, "<=")):
            try:
                day = parse_date(bound)
            except ValueError:
                day = None
            if day:
                where += f" AND date {op} ?"
                params.append(day)
        total = self.fetch_all(
            f"SELECT COUNT(*) FROM training_sessions WHERE {where};", tuple(params)
        )[0][0]
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM training_sessions WHERE {where} "
            "ORDER BY date DESC, id DESC LIMIT ? OFFSET ?;",
            (*params, page_size, offset),
        )
        sessions = []
        for row in rows:
            session = self._to_model(row)
            sessions.append(
                TrainingSessionWithExercises(
                    **session.model_dump(),
                    exercises=self.exercises.fetch_for_session(session.id),
                )
            )
        return TrainingHistory(
            sessions=sessions,
            total_count=total,
            page=page,
            page_size=page_size,
            has_more=total > offset + page_size,
        )

    def create(
        self,
        profile_id: int,
        date: Optional[str] = None,
        duration: int = 0,
        notes: str = "",
        energy: int = 0,
        mood: int = 0,
        soreness: int = 0,
    ) -> TrainingSession:
        day = parse_date(date) or datetime.date.today().isoformat()
        ts = now_timestamp()
        session_id = self.execute(
            "INSERT INTO training_sessions (profile_id, date, duration, notes, energy, mood, soreness, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);",
            (
                profile_id,
                day,
                duration,
                notes,
                self._score(energy, 5),
                self._score(mood, 5),
                self._score(soreness, 1),
                ts,
                ts,
            ),
        )
        return self.fetch(profile_id, session_id)

    def update(
        self,
        profile_id: int,
        session_id: int,
        date: Optional[str] = None,
        duration: int = 0,
        notes: str = "",
        energy: int = 0,
        mood: int = 0,
        soreness: int = 0,
    ) -> TrainingSession:
        current = self.fetch(profile_id, session_id)
        day = parse_date(date) or current.date
        self.execute(
            "UPDATE training_sessions SET date = ?, duration = ?, notes = ?, energy = ?, mood = ?, "
            "soreness = ?, updated_at = ? WHERE id = ?;",
            (day, duration, notes, energy, mood, soreness, now_timestamp(), session_id),
        )
        return self.fetch(profile_id, session_id)

    def delete(self, profile_id: int, session_id: int) -> None:
        self.fetch(profile_id, session_id)
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM training_session_exercises WHERE training_session_id = ?;",
                (session_id,),
            )
            conn.execute("DELETE FROM training_sessions WHERE id = ?;", (session_id,))


class TrainingProgramRepository(BaseRepository):
    """Repository for training programs."""

    _COLUMNS = "id, profile_id, name, description, start_date, end_date, is_active, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> TrainingProgram:
        return TrainingProgram(
            id=row[0],
            profile_id=row[1],
            name=row[2],
            description=row[3] or "",
            start_date=row[4],
            end_date=row[5],
            is_active=bool(row[6]),
            created_at=row[7],
            updated_at=row[8],
        )

    def fetch_all(self, profile_id: int) -> List[TrainingProgram]:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM training_programs WHERE profile_id = ? ORDER BY created_at DESC, id DESC;",
            (profile_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, profile_id: int, program_id: int) -> TrainingProgram:
        rows = super().fetch_all(
            f"SELECT {self._COLUMNS} FROM training_programs WHERE id = ? AND profile_id = ?;",
            (program_id, profile_id),
        )
        if not rows:
            raise ValueError("program not found")
        return self._to_model(rows[0])

    def _deactivate_others(self, profile_id: int, keep_id: int = 0) -> None:
        self.execute(
            "UPDATE training_programs SET is_active = 0 WHERE profile_id = ? AND id != ?;",
            (profile_id, keep_id),
        )

    def create(self, profile_id: int, req: TrainingProgramRequest) -> TrainingProgram:
        start = parse_date(req.start_date, START_DATE_ERROR)
        end = parse_date(req.end_date, END_DATE_ERROR)
        if not start:
            raise InvalidDateError(START_DATE_ERROR)
        if not end:
            raise InvalidDateError(END_DATE_ERROR)
        if req.is_active:
            self._deactivate_others(profile_id)
        ts = now_timestamp()
        program_id = self.execute(
            "INSERT INTO training_programs (profile_id, name, description, start_date, end_date, is_active, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?);",
            (profile_id, req.name, req.description, start, end, int(req.is_active), ts, ts),
        )
        return self.fetch(profile_id, program_id)

    def update(
        self, profile_id: int, program_id: int, req: TrainingProgramRequest
    ) -> TrainingProgram:
        current = self.fetch(profile_id, program_id)
        start = parse_date(req.start_date, START_DATE_ERROR) or current.start_date
        end = parse_date(req.end_date, END_DATE_ERROR) or current.end_date
        if req.is_active and not current.is_active:
            self._deactivate_others(profile_id, program_id)
        self.execute(
            "UPDATE training_programs SET name = ?, description = ?, start_date = ?, end_date = ?, "
            "is_active = ?, updated_at = ? WHERE id = ?;",
            (
                req.name,
                req.description,
                start,
                end,
                int(req.is_active),
                now_timestamp(),
                program_id,
            ),
        )
        return self.fetch(profile_id, program_id)

    def delete(self, profile_id: int, program_id: int) -> None:
        self.fetch(profile_id, program_id)
        with self._connection() as conn:
            conn.execute("DELETE FROM program_exercises WHERE program_id = ?;", (program_id,))
            conn.execute("DELETE FROM program_sessions WHERE program_id = ?;", (program_id,))
            conn.execute("DELETE FROM training_programs WHERE id = ?;", (program_id,))


class ProgramExerciseRepository(BaseRepository):
    """Repository for the weekly exercise plan of a program."""

    _COLUMNS = 'id, program_id, exercise, day_of_week, "order", sets, reps, weight, notes, created_at, updated_at'

    @staticmethod
    def _to_model(row: Tuple) -> ProgramExercise:
        return ProgramExercise(
            id=row[0],
            program_id=row[1],
            exercise=row[2],
            day_of_week=row[3],
            order=row[4],
            sets=row[5],
            reps=row[6],
            weight=float(row[7]),
            notes=row[8] or "",
            created_at=row[9],
            updated_at=row[10],
        )

    def fetch_for_program(self, program_id: int) -> List[ProgramExercise]:
        rows = self.fetch_all(
            f'SELECT {self._COLUMNS} FROM program_exercises WHERE program_id = ? ORDER BY day_of_week, "order", id;',
            (program_id,),
        )
        return [self._to_model(r) for r in rows]

    def fetch(self, program_id: int, exercise_id: int) -> ProgramExercise:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM program_exercises WHERE id = ? AND program_id = ?;",
            (exercise_id, program_id),
        )
        if not rows:
            raise ValueError("exercise not found")
        return self._to_model(rows[0])

    def add(self, program_id: int, req: ProgramExerciseRequest) -> ProgramExercise:
        ts = now_timestamp()
        exercise_id = self.execute(
            'INSERT INTO program_exercises (program_id, exercise, day_of_week, "order", sets, reps, weight, notes, created_at, updated_at) '
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);",
            (
                program_id,
                req.exercise,
                req.day_of_week,
                req.order,
                req.sets,
                req.reps,
                req.weight,
                req.notes,
                ts,
                ts,
            ),
        )
        return self.fetch(program_id, exercise_id)

    def update(
        self, program_id: int, exercise_id: int, req: ProgramExerciseRequest
    ) -> ProgramExercise:
        self.fetch(program_id, exercise_id)
        self.execute(
            'UPDATE program_exercises SET exercise = ?, day_of_week = ?, "order" = ?, sets = ?, reps = ?, '
            "weight = ?, notes = ?, updated_at = ? WHERE id = ?;",
            (
                req.exercise,
                req.day_of_week,
                req.order,
                req.sets,
                req.reps,
                req.weight,
                req.notes,
                now_timestamp(),
                exercise_id,
            ),
        )
        return self.fetch(program_id, exercise_id)

    def delete(self, program_id: int, exercise_id: int) -> None:
        self.fetch(program_id, exercise_id)
        self.execute("DELETE FROM program_exercises WHERE id = ?;", (exercise_id,))


class ProgramSessionRepository(BaseRepository):
    """Repository for dated sessions of a program."""

    _COLUMNS = "id, program_id, date, completed, notes, created_at, updated_at"

    @staticmethod
    def _to_model(row: Tuple) -> ProgramSession:
        return ProgramSession(
            id=row[0],
            program_id=row[1],
            date=row[2],
            completed=bool(row[3]),
            notes=row[4] or "",
            created_at=row[5],
            updated_at=row[6],
        )

    def fetch_for_program(
        self, program_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> List[ProgramSession]:
        """Sessions in date order; a valid year and month narrow the range."""
        query = f"SELECT {self._COLUMNS} FROM program_sessions WHERE program_id = ?"
        params: list = [program_id]
        if (
            year is not None
            and month is not None
            and 1 <= month <= 12
            and datetime.MINYEAR <= year <= datetime.MAXYEAR
        ):
            first, last = month_bounds(year, month)
            query += " AND date >= ? AND date <= ?"
            params.extend([first.isoformat(), last.isoformat()])
        rows = self.fetch_all(query + " ORDER BY date, id;", tuple(params))
        return [self._to_model(r) for r in rows]

    def fetch(self, program_id: int, session_id: int) -> ProgramSession:
        rows = self.fetch_all(
            f"SELECT {self._COLUMNS} FROM program_sessions WHERE id = ? AND program_id = ?;",
            (session_id, program_id),
        )
        if not rows:
            raise ValueError("session not found")
        return self._to_model(rows[0])

    def add(
        self,
        program_id: int,
        date: Optional[str] = None,
        completed: bool = False,
        notes: str = "",
    ) -> ProgramSession:
        day = parse_date(date) or datetime.date.today().isoformat()
        ts = now_timestamp()
        session_id = self.execute(
            "INSERT INTO program_sessions (program_id, date, completed, notes, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?);",
            (program_id, day, int(completed), notes, ts, ts),
        )
        return self.fetch(program_id, session_id)

    def update(
        self,
        program_id: int,
        session_id: int,
        date: Optional[str] = None,
        completed: bool = False,
        notes: str = "",
    ) -> ProgramSession:
        current = self.fetch(program_id, session_id)
        day = parse_date(date) or current.date
        self.execute(
            "UPDATE program_sessions SET date = ?, completed = ?, notes = ?, updated_at = ? WHERE id = ?;",
            (day, int(completed), notes, now_timestamp(), session_id),
        )
        return self.fetch(program_id, session_id)

    def delete(self, program_id: int, session_id: int) -> None:
        self.fetch(program_id, session_id)
        self.execute("DELETE FROM program_sessions WHERE id = ?;", (session_id,))


class SettingsRepository(BaseRepository):
    """Repository for application settings synchronized with ``settings.yaml``.

    The YAML file wins on read: edits made to it while the service runs are
    copied into the ``settings`` table before each lookup.
    """

    def __init__(
        self, db_path: str = "training.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    @staticmethod
    def _decode(key: str, value: str) -> int | str:
        field = SettingsSchema.model_fields.get(key)
        if field is None or field.annotation is not int:
            return value
        try:
            return int(value)
        except ValueError:
            return value

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        return {k: self._decode(k, v) for k, v in rows}

    def _write(self, conn, key: str, value) -> None:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, str(value)),
        )

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        with self._connection() as conn:
            for key, value in data.items():
                self._write(conn, key, value)

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_text(self, key: str, value: str) -> None:
        """Store one setting; unknown keys and invalid values raise ``ValueError``."""
        if key not in SettingsSchema.model_fields:
            raise ValueError(f"unknown setting: {key}")
        self._sync_from_yaml()
        merged = self._raw_all_settings()
        merged[key] = self._decode(key, value)
        # the file is written first so an invalid value never reaches the table
        self._yaml.save(merged)
        with self._connection() as conn:
            self._write(conn, key, value)

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()
