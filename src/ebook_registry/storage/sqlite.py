"""SQLite connection management, schema and state store."""

import json
import logging
import sqlite3
from pathlib import Path

from ebook_registry.models.ebook import Ebook

logger = logging.getLogger(__name__)

TOTAL_EBOOKS_KEY = "total_ebooks"

# Range of a SQLite INTEGER column; larger ids can never be stored.
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


def _storable(ebook_id: int) -> bool:
    return SQLITE_MIN_INTEGER <= ebook_id <= SQLITE_MAX_INTEGER


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    The connection runs in autocommit mode; transactions are opened
    explicitly with ``BEGIN`` by the caller. It may be used from any
    thread, so callers must serialize access themselves.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path), isolation_level=None, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the registry tables on an open connection if missing.

    Access rights and read counts deliberately carry no foreign key to
    ``ebooks``: their rows outlive a deleted ebook.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS ebooks (
            ebook_id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            author TEXT NOT NULL,
            file_size INTEGER NOT NULL,
            upload_time INTEGER NOT NULL,
            summary TEXT NOT NULL,
            categories_json TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS access_rights (
            ebook_id INTEGER NOT NULL,
            user TEXT NOT NULL,
            can_access INTEGER NOT NULL,
            PRIMARY KEY (ebook_id, user)
        );

        CREATE TABLE IF NOT EXISTS read_counts (
            ebook_id INTEGER PRIMARY KEY,
            count INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS registry_state (
            key TEXT PRIMARY KEY,
            value INTEGER NOT NULL
        );
        """
    )


class SqliteStore:
    """State store persisted in a SQLite database.

    Outside ``begin``/``commit`` every write commits on its own. Ids outside
    the SQLite INTEGER range read as absent.
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = get_connection(self.db_path)
        create_schema(self._conn)
        logger.debug("Opened SQLite state store at %s", self.db_path)

    def close(self) -> None:
        self._conn.close()

    def get_total_ebooks(self) -> int:
        row = self._conn.execute(
            "SELECT value FROM registry_state WHERE key = ?", (TOTAL_EBOOKS_KEY,)
        ).fetchone()
        return row["value"] if row else 0

    def set_total_ebooks(self, total: int) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO registry_state (key, value) VALUES (?, ?)",
            (TOTAL_EBOOKS_KEY, total),
        )

    def get_ebook(self, ebook_id: int) -> Ebook | None:
        if not _storable(ebook_id):
            return None
        row = self._conn.execute(
            "SELECT * FROM ebooks WHERE ebook_id = ?", (ebook_id,)
        ).fetchone()
        if row is None:
            return None
        return Ebook(
            ebook_id=row["ebook_id"],
            title=row["title"],
            author=row["author"],
            file_size=row["file_size"],
            upload_time=row["upload_time"],
            summary=row["summary"],
            categories=json.loads(row["categories_json"]),
        )

    def put_ebook(self, ebook: Ebook) -> None:
        self._conn.execute(
            """
            INSERT OR REPLACE INTO ebooks
                (ebook_id, title, author, file_size, upload_time, summary, categories_json)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                ebook.ebook_id,
                ebook.title,
                ebook.author,
                ebook.file_size,
                ebook.upload_time,
                ebook.summary,
                json.dumps(ebook.categories, ensure_ascii=False),
            ),
        )

    def delete_ebook(self, ebook_id: int) -> None:
        if not _storable(ebook_id):
            return
        self._conn.execute("DELETE FROM ebooks WHERE ebook_id = ?", (ebook_id,))

    def get_access(self, ebook_id: int, user: str) -> bool | None:
        if not _storable(ebook_id):
            return None
        row = self._conn.execute(
            "SELECT can_access FROM access_rights WHERE ebook_id = ? AND user = ?",
            (ebook_id, user),
        ).fetchone()
        return bool(row["can_access"]) if row else None

    def put_access(self, ebook_id: int, user: str, can_access: bool) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO access_rights (ebook_id, user, can_access) VALUES (?, ?, ?)",
            (ebook_id, user, int(can_access)),
        )

    def get_read_count(self, ebook_id: int) -> int | None:
        if not _storable(ebook_id):
            return None
        row = self._conn.execute(
            "SELECT count FROM read_counts WHERE ebook_id = ?", (ebook_id,)
        ).fetchone()
        return row["count"] if row else None

    def put_read_count(self, ebook_id: int, count: int) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO read_counts (ebook_id, count) VALUES (?, ?)",
            (ebook_id, count),
        )

    def begin(self) -> None:
        self._conn.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        self._conn.execute("COMMIT")

    def rollback(self) -> None:
        if not self._conn.in_transaction:
            logger.warning("Rollback requested with no transaction in progress")
            return
        self._conn.execute("ROLLBACK")
