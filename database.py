"""
EtherMom Bot - SQLite Database Module.
Holds the small amount of state that must survive between cron runs: whether
a low hashrate alert is currently outstanding.
"""

import logging
import sqlite3
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
DB_FILE = SCRIPT_DIR / "DB.db"

# bot_state key that marks an alert as already reported
REPORTED_KEY = "reported"
REPORTED_VALUE = "1"

logger = logging.getLogger("EtherMom")


def _get_connection() -> sqlite3.Connection:
    """Get a database connection with row factory enabled."""
    conn = sqlite3.connect(str(DB_FILE))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db() -> None:
    """Create all tables if they don't exist."""
    conn = _get_connection()
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS bot_state (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        conn.commit()
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Bot State
# ---------------------------------------------------------------------------

def get_state(key: str, default: str | None = None) -> str | None:
    """Get a value from bot_state."""
    conn = _get_connection()
    try:
        row = conn.execute(
            "SELECT value FROM bot_state WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default
    finally:
        conn.close()


def set_state(key: str, value: str) -> None:
    """Set a value in bot_state."""
    conn = _get_connection()
    try:
        conn.execute(
            "INSERT OR REPLACE INTO bot_state (key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()
    finally:
        conn.close()


def delete_state(key: str) -> bool:
    """Remove a key from bot_state. Returns True if a row was deleted."""
    conn = _get_connection()
    try:
        cursor = conn.execute("DELETE FROM bot_state WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Alert state
# ---------------------------------------------------------------------------

class AlertStateStore:
    """
    Durable "an alert is outstanding" flag.

    ``mark_outstanding`` and ``clear`` are idempotent and return True only
    when they actually change the flag, so callers can tell a first alert
    from a repeat and a genuine recovery from a no-op.
    """

    def is_outstanding(self) -> bool:
        raise NotImplementedError

    def mark_outstanding(self) -> bool:
        raise NotImplementedError

    def clear(self) -> bool:
        raise NotImplementedError


class MemoryAlertStateStore(AlertStateStore):
    """Process-local store, used by the tests."""

    def __init__(self, outstanding: bool = False) -> None:
        self._outstanding = outstanding

    def is_outstanding(self) -> bool:
        return self._outstanding

    def mark_outstanding(self) -> bool:
        changed = not self._outstanding
        self._outstanding = True
        return changed

    def clear(self) -> bool:
        changed = self._outstanding
        self._outstanding = False
        return changed


class SQLiteAlertStateStore(AlertStateStore):
    """Alert flag kept as a row in the bot_state table.

    A database that cannot be read is treated as "not outstanding" so that a
    broken state file leads to a repeated alert rather than a silent one.
    """

    def __init__(self, key: str = REPORTED_KEY) -> None:
        self.key = key

    def is_outstanding(self) -> bool:
        try:
            value = get_state(self.key)
        except sqlite3.Error as e:
            logger.error("Could not read alert state, assuming none: %s", e)
            return False
        if value is None:
            return False
        if value != REPORTED_VALUE:
            logger.warning("Unrecognised alert state %r, assuming none", value)
            return False
        return True

    def mark_outstanding(self) -> bool:
        changed = not self.is_outstanding()
        try:
            set_state(self.key, REPORTED_VALUE)
        except sqlite3.Error as e:
            logger.error("Could not save alert state: %s", e)
            return False
        return changed

    def clear(self) -> bool:
        changed = self.is_outstanding()
        try:
            delete_state(self.key)
        except sqlite3.Error as e:
            logger.error("Could not clear alert state: %s", e)
            return False
        return changed
