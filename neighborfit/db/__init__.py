"""Database module for NeighborFit.

This module provides the Core API for database operations.
Core encapsulates connection management and provides access to the
user store and neighborhood lookups.

ARCHITECTURE:
- Core owns its connection (no Flask g.db dependency)
- Connection closes on context exit (atomic=True) or when Core is collected
- Each record type gets an encapsulated class with related operations

    # Autocommit (single read):
    core = get_core()
    row = core.user.get_by_email("ana@example.com")

    # Atomic (writes that must land together):
    with get_core(atomic=True) as core:
        user_id = core.user.create(name, email, password_hash)
"""

from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING
import sqlite3
from ..config import settings

# Context-local storage for atomic Core
_core_context: ContextVar["Core"] = ContextVar("_core_context", default=None)

if TYPE_CHECKING:
    from .neighborhood import NeighborhoodOperations
    from .user import UserOperations


class Core:
    """
    Database Core with record operations.

    Maintains its own connection and transaction state.
    Provides access to operations through properties.

    Connection Lifecycle:
    - atomic=True: Connection closes on __exit__ from context manager
    - atomic=False: Connection closes on close() or garbage collection
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, Core has autocommit semantics.
        """
        self._conn = connection
        self._atomic = atomic
        self._user_ops = None
        self._neighborhood_ops = None

    @property
    def user(self) -> "UserOperations":
        """User store operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn, autocommit=not self._atomic)
        return self._user_ops

    @property
    def neighborhood(self) -> "NeighborhoodOperations":
        """Neighborhood lookups.

        Lazy-loaded to avoid circular import issues.
        """
        if self._neighborhood_ops is None:
            from .neighborhood import NeighborhoodOperations
            self._neighborhood_ops = NeighborhoodOperations(self._conn, autocommit=not self._atomic)
        return self._neighborhood_ops

    def ping(self) -> str:
        """Read the schema version from the database file.

        Returns:
            Schema version string (e.g., '20260101')

        Raises:
            sqlite3.Error: If the file cannot be opened or was never initialized
        """
        row = self._conn.execute(
            "SELECT value FROM _schema_metadata WHERE key = 'version'"
        ).fetchone()
        return row[0] if row else "unknown"

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> "Core":
        """Enter context manager for atomic transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(atomic=True) as core:"
            )
        _core_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            # Always clear context and close connection
            _core_context.set(None)
            self._conn.close()

    def __del__(self):
        """Cleanup connection if not already closed.

        Called during garbage collection. Errors are ignored since the
        connection may already be closed.
        """
        if hasattr(self, "_conn") and self._conn:
            try:
                self._conn.close()
            except sqlite3.Error:
                pass


def _create_connection() -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(atomic: bool = False) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                All writes inside the block commit together or not at all.
                If False (default), each write commits immediately.

    Returns:
        Core instance with user/neighborhood operations
    """
    conn = _create_connection()
    return Core(conn, atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db():
    """Initialize database by running schema.sql if not already initialized."""
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with sqlite3.connect(str(db_path)) as db:
        cursor = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            # Database already initialized, skip
            return

        schema_path = Path(__file__).parent.parent / "schema" / "schema.sql"
        with open(schema_path, "r") as f:
            schema_sql = f.read()
        db.executescript(schema_sql)
        db.commit()
