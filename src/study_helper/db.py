"""Database initialization, connection management and JSON record storage."""
import json
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".study_helper" / "study.db")
SCHEMA_VERSION = "1"

COLLECTIONS = ("notes", "flashcard_sets", "flashcards", "quizzes", "quiz_attempts")

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    position INTEGER PRIMARY KEY AUTOINCREMENT,
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(collection, id)
);

CREATE INDEX IF NOT EXISTS idx_records_collection ON records(collection);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.execute(
        "INSERT OR IGNORE INTO user_settings (key, value) VALUES ('schema_version', ?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()
    conn.close()


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


def generate_id() -> str:
    return str(uuid.uuid4())


def generate_timestamp() -> str:
    return datetime.now().isoformat(timespec="microseconds")


def list_records(db_path: str, collection: str) -> list[dict]:
    """All records of a collection in stored (insertion) order."""
    _check_collection(collection)
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT data FROM records WHERE collection = ? ORDER BY position",
        (collection,),
    ).fetchall()
    conn.close()
    return [json.loads(row["data"]) for row in rows]


def get_record(db_path: str, collection: str, record_id: str) -> dict | None:
    _check_collection(collection)
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT data FROM records WHERE collection = ? AND id = ?",
        (collection, record_id),
    ).fetchone()
    conn.close()
    return json.loads(row["data"]) if row else None


def create_record(db_path: str, collection: str, payload: dict) -> dict:
    """Store a new record, assigning its id and timestamps."""
    _check_collection(collection)
    now = generate_timestamp()
    record = {**payload, "id": generate_id(), "created_at": now, "updated_at": now}
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO records (collection, id, data, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
        (collection, record["id"], json.dumps(record), now, now),
    )
    conn.commit()
    conn.close()
    return record


def update_record(db_path: str, collection: str, record_id: str, patch: dict) -> dict | None:
    """Merge patch into an existing record. Returns None if the id is unknown."""
    _check_collection(collection)
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT data FROM records WHERE collection = ? AND id = ?",
        (collection, record_id),
    ).fetchone()
    if row is None:
        conn.close()
        return None
    current = json.loads(row["data"])
    now = generate_timestamp()
    updated = {
        **current,
        **patch,
        "id": current["id"],
        "created_at": current["created_at"],
        "updated_at": now,
    }
    conn.execute(
        "UPDATE records SET data = ?, updated_at = ? WHERE collection = ? AND id = ?",
        (json.dumps(updated), now, collection, record_id),
    )
    conn.commit()
    conn.close()
    return updated


def remove_record(db_path: str, collection: str, record_id: str) -> bool:
    _check_collection(collection)
    conn = get_connection(db_path)
    cursor = conn.execute(
        "DELETE FROM records WHERE collection = ? AND id = ?",
        (collection, record_id),
    )
    conn.commit()
    conn.close()
    return cursor.rowcount > 0
