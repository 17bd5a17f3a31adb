"""SQLite persistence for thesauruses, word counters and settings."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .models import Word

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
CURRENT_THESAURUS_SETTING = "current_thesaurus"


@dataclass(frozen=True)
class ThesaurusInfo:
    """Stored thesaurus record."""

    id: int
    name: str
    word_count: int


class ProgressStore:
    """Database access layer for thesauruses and learning records."""

    def __init__(self, db_path: Path | str) -> None:
        """Open the database and bring its schema up to date."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )
            logger.debug("Applied schema migration %d", version)

    def _migrate_to_v1(self) -> None:
        """Create thesaurus, word, counter and settings tables."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS thesauruses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS words (
                    thesaurus_id INTEGER NOT NULL REFERENCES thesauruses(id) ON DELETE CASCADE,
                    position INTEGER NOT NULL,
                    term TEXT NOT NULL,
                    definition TEXT NOT NULL,
                    PRIMARY KEY (thesaurus_id, position)
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS word_progress (
                    thesaurus_id INTEGER NOT NULL REFERENCES thesauruses(id) ON DELETE CASCADE,
                    position INTEGER NOT NULL,
                    learn_count INTEGER NOT NULL DEFAULT 0,
                    revise_count INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (thesaurus_id, position)
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS thesaurus_settings (
                    thesaurus_id INTEGER NOT NULL REFERENCES thesauruses(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (thesaurus_id, name)
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS app_settings (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """)

    def list_thesauruses(self) -> list[ThesaurusInfo]:
        """Return thesauruses ordered by name."""
        rows = self._conn.execute("""
            SELECT t.id, t.name, COUNT(w.position) AS word_count
            FROM thesauruses t
            LEFT JOIN words w ON w.thesaurus_id = t.id
            GROUP BY t.id, t.name
            ORDER BY t.name
            """).fetchall()
        return [_thesaurus_from_row(row) for row in rows]

    def get_thesaurus(self, thesaurus_id: int) -> ThesaurusInfo | None:
        """Get one thesaurus by id."""
        row = self._conn.execute(
            """
            SELECT t.id, t.name, COUNT(w.position) AS word_count
            FROM thesauruses t
            LEFT JOIN words w ON w.thesaurus_id = t.id
            WHERE t.id = ?
            GROUP BY t.id, t.name
            """,
            (thesaurus_id,),
        ).fetchone()
        if row is None:
            return None
        return _thesaurus_from_row(row)

    def get_thesaurus_by_name(self, name: str) -> ThesaurusInfo | None:
        row = self._conn.execute("SELECT id FROM thesauruses WHERE name = ?", (name,)).fetchone()
        if row is None:
            return None
        return self.get_thesaurus(int(row["id"]))

    def create_thesaurus(self, name: str, words: Sequence[Word]) -> ThesaurusInfo:
        """Store a new thesaurus with its words in position order."""
        now = datetime.now(UTC).isoformat()
        with self._conn:
            cursor = self._conn.execute(
                "INSERT INTO thesauruses (name, created_at) VALUES (?, ?)",
                (name, now),
            )
            row_id = cursor.lastrowid
            if row_id is None:
                raise RuntimeError("Could not create thesaurus.")
            self._conn.executemany(
                "INSERT INTO words (thesaurus_id, position, term, definition) VALUES (?, ?, ?, ?)",
                [(row_id, position, word.term, word.definition) for position, word in enumerate(words)],
            )
        logger.info("Created thesaurus %r with %d words", name, len(words))
        return ThesaurusInfo(id=int(row_id), name=name, word_count=len(words))

    def append_words(self, thesaurus_id: int, words: Sequence[Word]) -> int:
        """Add words after the existing ones; return the new word count."""
        row = self._conn.execute(
            "SELECT COALESCE(MAX(position) + 1, 0) AS next_position FROM words WHERE thesaurus_id = ?",
            (thesaurus_id,),
        ).fetchone()
        start = int(row["next_position"])
        with self._conn:
            self._conn.executemany(
                "INSERT INTO words (thesaurus_id, position, term, definition) VALUES (?, ?, ?, ?)",
                [(thesaurus_id, start + offset, word.term, word.definition) for offset, word in enumerate(words)],
            )
        return start + len(words)

    def delete_thesaurus(self, thesaurus_id: int) -> bool:
        """Delete a thesaurus and its words, counters and settings."""
        with self._conn:
            self._conn.execute("DELETE FROM word_progress WHERE thesaurus_id = ?", (thesaurus_id,))
            self._conn.execute("DELETE FROM thesaurus_settings WHERE thesaurus_id = ?", (thesaurus_id,))
            self._conn.execute("DELETE FROM words WHERE thesaurus_id = ?", (thesaurus_id,))
            cursor = self._conn.execute("DELETE FROM thesauruses WHERE id = ?", (thesaurus_id,))
        return cursor.rowcount > 0

    def load_words(self, thesaurus_id: int) -> list[Word]:
        """Return the thesaurus words ordered by position."""
        rows = self._conn.execute(
            "SELECT term, definition FROM words WHERE thesaurus_id = ? ORDER BY position",
            (thesaurus_id,),
        ).fetchall()
        return [Word(term=str(row["term"]), definition=str(row["definition"])) for row in rows]

    def load_progress(self, thesaurus_id: int) -> tuple[list[int], list[int]]:
        """Return stored (learn_counts, revise_counts) as contiguous lists.

        The lists stop at the first position without a stored row, so a record
        saved before words were added comes back shorter than the word list.
        """
        rows = self._conn.execute(
            "SELECT position, learn_count, revise_count FROM word_progress WHERE thesaurus_id = ? ORDER BY position",
            (thesaurus_id,),
        ).fetchall()
        learn_counts: list[int] = []
        revise_counts: list[int] = []
        for expected, row in enumerate(rows):
            if int(row["position"]) != expected:
                break
            learn_counts.append(int(row["learn_count"]))
            revise_counts.append(int(row["revise_count"]))
        return (learn_counts, revise_counts)

    def save_progress(self, thesaurus_id: int, learn_counts: Sequence[int], revise_counts: Sequence[int]) -> None:
        """Replace the whole learning record of a thesaurus in one transaction."""
        if len(learn_counts) != len(revise_counts):
            raise ValueError("Learn and revise counts must have the same length.")
        with self._conn:
            self._conn.execute("DELETE FROM word_progress WHERE thesaurus_id = ?", (thesaurus_id,))
            self._conn.executemany(
                """
                INSERT INTO word_progress (thesaurus_id, position, learn_count, revise_count)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (thesaurus_id, position, learn, revise)
                    for position, (learn, revise) in enumerate(zip(learn_counts, revise_counts))
                ],
            )
        logger.debug("Saved progress for %d words of thesaurus %d", len(learn_counts), thesaurus_id)

    def load_settings(self, thesaurus_id: int) -> dict[str, str]:
        rows = self._conn.execute(
            "SELECT name, value FROM thesaurus_settings WHERE thesaurus_id = ?",
            (thesaurus_id,),
        ).fetchall()
        return {str(row["name"]): str(row["value"]) for row in rows}

    def save_settings(self, thesaurus_id: int, values: Mapping[str, str]) -> None:
        with self._conn:
            self._conn.executemany(
                """
                INSERT INTO thesaurus_settings (thesaurus_id, name, value)
                VALUES (?, ?, ?)
                ON CONFLICT(thesaurus_id, name) DO UPDATE SET value = excluded.value
                """,
                [(thesaurus_id, name, value) for name, value in values.items()],
            )

    def get_app_setting(self, name: str) -> str | None:
        row = self._conn.execute("SELECT value FROM app_settings WHERE name = ?", (name,)).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def set_app_setting(self, name: str, value: str) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO app_settings (name, value) VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET value = excluded.value
                """,
                (name, value),
            )

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort connection cleanup."""
        try:
            self.close()
        except Exception:
            pass


def _thesaurus_from_row(row: sqlite3.Row) -> ThesaurusInfo:
    return ThesaurusInfo(id=int(row["id"]), name=str(row["name"]), word_count=int(row["word_count"]))
