"""In-process state store backed by plain dictionaries."""

import copy
import logging
from dataclasses import dataclass, field

from ebook_registry.models.ebook import Ebook

logger = logging.getLogger(__name__)


@dataclass
class _State:
    total_ebooks: int = 0
    ebooks: dict[int, Ebook] = field(default_factory=dict)
    access_rights: dict[tuple[int, str], bool] = field(default_factory=dict)
    read_counts: dict[int, int] = field(default_factory=dict)


class MemoryStore:
    """Dictionary-backed store.

    Records are copied on the way in and out so callers can never mutate
    stored state behind the store's back. ``begin`` snapshots the whole
    state and ``rollback`` restores the snapshot.
    """

    def __init__(self) -> None:
        self._state = _State()
        self._snapshot: _State | None = None

    def get_total_ebooks(self) -> int:
        return self._state.total_ebooks

    def set_total_ebooks(self, total: int) -> None:
        self._state.total_ebooks = total

    def get_ebook(self, ebook_id: int) -> Ebook | None:
        ebook = self._state.ebooks.get(ebook_id)
        return ebook.model_copy(deep=True) if ebook is not None else None

    def put_ebook(self, ebook: Ebook) -> None:
        self._state.ebooks[ebook.ebook_id] = ebook.model_copy(deep=True)

    def delete_ebook(self, ebook_id: int) -> None:
        self._state.ebooks.pop(ebook_id, None)

    def get_access(self, ebook_id: int, user: str) -> bool | None:
        return self._state.access_rights.get((ebook_id, user))

    def put_access(self, ebook_id: int, user: str, can_access: bool) -> None:
        self._state.access_rights[(ebook_id, user)] = can_access

    def get_read_count(self, ebook_id: int) -> int | None:
        return self._state.read_counts.get(ebook_id)

    def put_read_count(self, ebook_id: int, count: int) -> None:
        self._state.read_counts[ebook_id] = count

    def begin(self) -> None:
        if self._snapshot is not None:
            raise RuntimeError("A transaction is already in progress")
        self._snapshot = copy.deepcopy(self._state)

    def commit(self) -> None:
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is None:
            logger.warning("Rollback requested with no transaction in progress")
            return
        self._state = self._snapshot
        self._snapshot = None
