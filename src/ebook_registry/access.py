"""Per-user access flags for ebooks."""

from ebook_registry.storage.base import StateStore


class AccessControl:
    """Reads and writes (ebook id, user) access flags.

    Only the creation path writes a flag. There is no grant or revoke
    for other users, and ownership transfer leaves the flags alone.
    """

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def grant_creator(self, ebook_id: int, creator: str) -> None:
        self.store.put_access(ebook_id, creator, True)

    def check(self, ebook_id: int, user: str) -> bool:
        """Return the stored flag, denying access when no entry exists."""
        return bool(self.store.get_access(ebook_id, user))
