"""State store interface shared by all storage backends."""

from typing import Protocol

from ebook_registry.models.ebook import Ebook


class StateStore(Protocol):
    """Key-value persistence for the registry.

    Holds the ebook map, the access-right map, the read-count map and the
    ``total_ebooks`` counter. ``begin``/``commit``/``rollback`` delimit one
    atomic call; the host runtime drives them, the registry never does.
    """

    def get_total_ebooks(self) -> int:
        """Return the highest ebook id ever allocated (0 when empty)."""

    def set_total_ebooks(self, total: int) -> None:
        """Store the highest allocated ebook id."""

    def get_ebook(self, ebook_id: int) -> Ebook | None:
        """Read one ebook record, or None if absent or deleted."""

    def put_ebook(self, ebook: Ebook) -> None:
        """Insert or replace the record keyed by ``ebook.ebook_id``."""

    def delete_ebook(self, ebook_id: int) -> None:
        """Remove one ebook record. Other maps are left untouched."""

    def get_access(self, ebook_id: int, user: str) -> bool | None:
        """Read one access flag, or None if no entry exists."""

    def put_access(self, ebook_id: int, user: str, can_access: bool) -> None:
        """Insert or replace one access flag."""

    def get_read_count(self, ebook_id: int) -> int | None:
        """Read one read counter, or None if no entry exists."""

    def put_read_count(self, ebook_id: int, count: int) -> None:
        """Insert or replace one read counter."""

    def begin(self) -> None:
        """Start an atomic unit of work."""

    def commit(self) -> None:
        """Make the current unit of work permanent."""

    def rollback(self) -> None:
        """Discard every write since ``begin``."""
