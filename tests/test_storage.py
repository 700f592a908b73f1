"""Tests for state store backends."""

import sqlite3
import threading
from pathlib import Path

import pytest

from ebook_registry.models import Ebook
from ebook_registry.storage import (
    MemoryStore,
    SqliteStore,
    create_schema,
    get_connection,
)
from ebook_registry.storage.sqlite import SQLITE_MAX_INTEGER


def make_ebook(ebook_id: int = 1, **overrides: object) -> Ebook:
    fields = {
        "ebook_id": ebook_id,
        "title": "Dune",
        "author": "alice",
        "file_size": 2048,
        "upload_time": 3,
        "summary": "Spice",
        "categories": ["fiction", "ספרות"],
    }
    fields.update(overrides)
    return Ebook(**fields)


def table_names(db_path: Path) -> set[str]:
    conn = sqlite3.connect(str(db_path))
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    conn.close()
    return {row[0] for row in rows}


class TestSqliteSchema:
    def test_store_creates_registry_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "registry.db"
        SqliteStore(db_path).close()

        assert {"ebooks", "access_rights", "read_counts", "registry_state"} <= table_names(db_path)

    def test_reopening_existing_database(self, tmp_path: Path) -> None:
        db_path = tmp_path / "registry.db"
        SqliteStore(db_path).close()
        SqliteStore(db_path).close()  # Should not raise
        assert "ebooks" in table_names(db_path)

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "registry.db"
        SqliteStore(db_path).close()
        assert db_path.exists()

    def test_ebooks_columns(self) -> None:
        conn = get_connection(":memory:")
        create_schema(conn)
        columns = {row["name"] for row in conn.execute("PRAGMA table_info(ebooks)")}
        conn.close()

        assert columns == {
            "ebook_id",
            "title",
            "author",
            "file_size",
            "upload_time",
            "summary",
            "categories_json",
        }

    def test_orphan_tables_have_no_foreign_keys(self) -> None:
        conn = get_connection(":memory:")
        create_schema(conn)
        for table in ("access_rights", "read_counts"):
            assert conn.execute(f"PRAGMA foreign_key_list({table})").fetchall() == []
        conn.close()


class TestGetConnection:
    def test_returns_connection_with_row_factory(self, tmp_path: Path) -> None:
        conn = get_connection(tmp_path / "test.db")
        assert conn.row_factory == sqlite3.Row
        conn.close()

    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        conn = get_connection(tmp_path / "test.db")
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_usable_from_another_thread(self, tmp_path: Path) -> None:
        conn = get_connection(tmp_path / "test.db")
        errors: list[Exception] = []

        def worker() -> None:
            try:
                conn.execute("SELECT 1").fetchone()
            except sqlite3.Error as exc:
                errors.append(exc)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        conn.close()
        assert errors == []


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        yield MemoryStore()
    else:
        sqlite_store = SqliteStore(tmp_path / "store.db")
        yield sqlite_store
        sqlite_store.close()


class TestStateStore:
    def test_empty_store(self, store) -> None:
        assert store.get_total_ebooks() == 0
        assert store.get_ebook(1) is None
        assert store.get_access(1, "alice") is None
        assert store.get_read_count(1) is None

    def test_ebook_round_trip(self, store) -> None:
        ebook = make_ebook()
        store.put_ebook(ebook)
        assert store.get_ebook(1) == ebook

    def test_put_replaces(self, store) -> None:
        store.put_ebook(make_ebook())
        store.put_ebook(make_ebook(title="Dune Messiah"))
        assert store.get_ebook(1).title == "Dune Messiah"

    def test_delete_leaves_other_maps(self, store) -> None:
        store.put_ebook(make_ebook())
        store.put_access(1, "alice", True)
        store.put_read_count(1, 4)

        store.delete_ebook(1)

        assert store.get_ebook(1) is None
        assert store.get_access(1, "alice") is True
        assert store.get_read_count(1) == 4

    def test_total_ebooks(self, store) -> None:
        store.set_total_ebooks(5)
        assert store.get_total_ebooks() == 5

    def test_access_flags_are_per_user(self, store) -> None:
        store.put_access(1, "alice", True)
        store.put_access(1, "bob", False)
        assert store.get_access(1, "alice") is True
        assert store.get_access(1, "bob") is False
        assert store.get_access(2, "alice") is None

    def test_rollback_discards_writes(self, store) -> None:
        store.put_ebook(make_ebook())
        store.begin()
        store.put_ebook(make_ebook(2))
        store.set_total_ebooks(2)
        store.put_read_count(1, 9)
        store.delete_ebook(1)
        store.rollback()

        assert store.get_ebook(1) == make_ebook()
        assert store.get_ebook(2) is None
        assert store.get_total_ebooks() == 0
        assert store.get_read_count(1) is None

    def test_commit_keeps_writes(self, store) -> None:
        store.begin()
        store.put_ebook(make_ebook())
        store.set_total_ebooks(1)
        store.commit()
        assert store.get_ebook(1) is not None
        assert store.get_total_ebooks() == 1

    @pytest.mark.parametrize("ebook_id", [SQLITE_MAX_INTEGER + 1, 2**64])
    def test_ids_beyond_integer_range_are_absent(self, store, ebook_id: int) -> None:
        assert store.get_ebook(ebook_id) is None
        assert store.get_access(ebook_id, "alice") is None
        assert store.get_read_count(ebook_id) is None
        store.delete_ebook(ebook_id)  # Should not raise

    def test_largest_integer_id_round_trip(self, store) -> None:
        ebook = make_ebook(SQLITE_MAX_INTEGER)
        store.put_ebook(ebook)
        assert store.get_ebook(SQLITE_MAX_INTEGER) == ebook

    def test_rollback_without_transaction_is_noop(self, store) -> None:
        store.put_ebook(make_ebook())
        store.rollback()
        assert store.get_ebook(1) is not None


class TestMemoryStoreIsolation:
    def test_returned_records_are_copies(self) -> None:
        store = MemoryStore()
        store.put_ebook(make_ebook())
        fetched = store.get_ebook(1)
        fetched.categories.append("mutated")
        assert store.get_ebook(1).categories == ["fiction", "ספרות"]

    def test_nested_begin_rejected(self) -> None:
        store = MemoryStore()
        store.begin()
        with pytest.raises(RuntimeError):
            store.begin()


class TestSqliteStorePersistence:
    def test_state_survives_reopen(self, tmp_path: Path) -> None:
        db_path = tmp_path / "registry.db"
        first = SqliteStore(db_path)
        first.put_ebook(make_ebook())
        first.set_total_ebooks(1)
        first.put_access(1, "alice", True)
        first.close()

        second = SqliteStore(db_path)
        assert second.get_ebook(1) == make_ebook()
        assert second.get_total_ebooks() == 1
        assert second.get_access(1, "alice") is True
        second.close()

    def test_in_memory_database(self) -> None:
        store = SqliteStore(":memory:")
        store.put_read_count(7, 2)
        assert store.get_read_count(7) == 2
        store.close()
