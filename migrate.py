import logging
import sqlite3
import sys

from db import Database, now_timestamp

logger = logging.getLogger(__name__)


def _columns(cur: sqlite3.Cursor, table: str) -> list[str]:
    cur.execute(f"PRAGMA table_info({table});")
    return [r[1] for r in cur.fetchall()]


def _default_profile_id(cur: sqlite3.Cursor) -> int:
    if not _columns(cur, "profiles"):
        cur.execute(Database._TABLE_DEFINITIONS["profiles"][0])
    cur.execute("SELECT MIN(id) FROM profiles;")
    row = cur.fetchone()
    if row[0] is not None:
        return row[0]
    ts = now_timestamp()
    cur.execute(
        "INSERT INTO profiles (name, created_at, updated_at) VALUES (?, ?, ?);",
        (Database.DEFAULT_PROFILE_NAME, ts, ts),
    )
    return cur.lastrowid


def migrate(db_path="training.db") -> list[str]:
    """Upgrade a pre-profile database in place and return the applied steps."""
    applied: list[str] = []
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cols = _columns(cur, "trainings")
        if cols and "profile_id" not in cols:
            profile_id = _default_profile_id(cur)
            cur.execute("ALTER TABLE trainings ADD COLUMN profile_id INTEGER;")
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_trainings_profile_id ON trainings(profile_id);"
            )
            cur.execute(
                "UPDATE trainings SET profile_id = ? WHERE profile_id IS NULL;",
                (profile_id,),
            )
            logger.info("Assigned %d trainings to profile %d", cur.rowcount, profile_id)
            applied.append("trainings.profile_id")
        if "exercise_order" in _columns(cur, "program_exercises"):
            cur.execute("ALTER TABLE program_exercises DROP COLUMN exercise_order;")
            logger.info("Dropped obsolete column program_exercises.exercise_order")
            applied.append("program_exercises.exercise_order")
        conn.commit()
    finally:
        conn.close()
    # bring every remaining table to the current layout
    Database(db_path)
    return applied


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = sys.argv[1] if len(sys.argv) > 1 else "training.db"
    migrate(path)
