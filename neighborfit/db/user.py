"""User store operations.

IMPORT CONVENTION:
- Core accesses these through core.user property
- NO direct import needed when using Core API

Emails arrive here already normalized (see auth.schemas.normalize_email).
The UNIQUE constraint on users.email is the final arbiter for duplicates:
create() lets sqlite3.IntegrityError propagate so the caller can map it.
"""

import json
import sqlite3

from ..utils import isodatetime, uid


class UserOperations:
    """User persistence keyed by unique email."""

    def __init__(self, conn: sqlite3.Connection, autocommit: bool = False):
        """Initialize user operations.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            autocommit: Commit after each write (non-atomic Core)
        """
        self._conn = conn
        self._autocommit = autocommit

    def _commit(self) -> None:
        if self._autocommit:
            self._conn.commit()

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        preferences: dict | None = None
    ) -> str:
        """Insert a new user with an auto-generated UUID.

        Args:
            name: Display name
            email: Normalized email address
            password_hash: Digest produced by a PasswordHasher
            preferences: Initial preferences (defaults to empty)

        Returns:
            The new user ID

        Raises:
            sqlite3.IntegrityError: If the email is already taken
        """
        user_id = uid.generate_uuid()
        now = isodatetime.now()

        self._conn.execute(
            """INSERT INTO users (id, name, email, password_hash, preferences, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (user_id, name, email, password_hash, json.dumps(preferences or {}), now, now)
        )
        self._commit()
        return user_id

    def get_by_email(self, email: str) -> sqlite3.Row | None:
        """Get user row (including password_hash) by normalized email."""
        return self._conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email,)
        ).fetchone()

    def get_by_id(self, user_id: str) -> sqlite3.Row | None:
        """Get user row by ID, or None if it does not exist."""
        return self._conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        ).fetchone()

    def get_saved_neighborhoods(self, user_id: str) -> list[sqlite3.Row]:
        """Resolve a user's saved neighborhoods in the order they were saved."""
        cursor = self._conn.execute(
            """SELECT n.id, n.name, n.data
               FROM saved_neighborhoods s
               JOIN neighborhoods n ON n.id = s.neighborhood_id
               WHERE s.user_id = ?
               ORDER BY s.position""",
            (user_id,)
        )
        return cursor.fetchall()

    def save_neighborhood(self, user_id: str, neighborhood_id: str) -> None:
        """Append a neighborhood to the user's saved list.

        Saving a neighborhood that is already in the list is a no-op,
        so the existing position is kept.
        """
        row = self._conn.execute(
            "SELECT COALESCE(MAX(position), -1) + 1 FROM saved_neighborhoods WHERE user_id = ?",
            (user_id,)
        ).fetchone()

        self._conn.execute(
            """INSERT OR IGNORE INTO saved_neighborhoods (user_id, neighborhood_id, position, saved_at)
               VALUES (?, ?, ?, ?)""",
            (user_id, neighborhood_id, row[0], isodatetime.now())
        )
        self._conn.execute(
            "UPDATE users SET updated_at = ? WHERE id = ?",
            (isodatetime.now(), user_id)
        )
        self._commit()

    def count(self) -> int:
        """Count registered users."""
        return self._conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
