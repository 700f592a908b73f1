"""Ebook id allocation."""

from ebook_registry.storage.base import StateStore


class IdAllocator:
    """Issues ebook ids from the store's ``total_ebooks`` counter.

    ``allocate`` only peeks at the next id; ``commit`` advances the
    counter. Both must run inside the same atomic call as the insert.
    Uniqueness relies on calls being executed one at a time.
    """

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def allocate(self) -> int:
        return self.store.get_total_ebooks() + 1

    def commit(self, ebook_id: int) -> None:
        self.store.set_total_ebooks(ebook_id)

    @property
    def total(self) -> int:
        return self.store.get_total_ebooks()
