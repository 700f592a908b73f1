"""Per-ebook read counters."""

from ebook_registry.storage.base import StateStore


class ReadCounter:
    def __init__(self, store: StateStore) -> None:
        self.store = store

    def get(self, ebook_id: int) -> int:
        count = self.store.get_read_count(ebook_id)
        return count if count is not None else 0

    def increment(self, ebook_id: int) -> int:
        count = self.get(ebook_id) + 1
        self.store.put_read_count(ebook_id, count)
        return count
