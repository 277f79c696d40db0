"""Neighborhood lookups.

Only what is needed to resolve users' saved neighborhoods lives here.
"""

import json
import sqlite3

from ..exceptions import ResourceNotFound
from ..utils import isodatetime, uid


class NeighborhoodOperations:
    """Neighborhood record operations."""

    def __init__(self, conn: sqlite3.Connection, autocommit: bool = False):
        self._conn = conn
        self._autocommit = autocommit

    def create(self, name: str, data: dict | None = None) -> str:
        """Insert a neighborhood and return its auto-generated ID."""
        neighborhood_id = uid.generate_uuid()

        self._conn.execute(
            """INSERT INTO neighborhoods (id, name, data, created_at)
               VALUES (?, ?, ?, ?)""",
            (neighborhood_id, name, json.dumps(data or {}), isodatetime.now())
        )
        if self._autocommit:
            self._conn.commit()
        return neighborhood_id

    def get_by_id(self, neighborhood_id: str) -> sqlite3.Row:
        """Get neighborhood by ID.

        Raises:
            ResourceNotFound: If neighborhood_id doesn't exist
        """
        row = self._conn.execute(
            "SELECT * FROM neighborhoods WHERE id = ?",
            (neighborhood_id,)
        ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"Neighborhood '{neighborhood_id}' not found",
                {"neighborhood_id": neighborhood_id}
            )

        return row
