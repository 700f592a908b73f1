"""Ebook registry: record lifecycle, ownership and read gating."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ebook_registry.access import AccessControl
from ebook_registry.allocator import IdAllocator
from ebook_registry.counter import ReadCounter
from ebook_registry.models.context import ExecutionContext
from ebook_registry.models.ebook import Ebook, EbookMetadata
from ebook_registry.models.result import Err, ErrorKind, Ok, Result
from ebook_registry.storage.base import StateStore
from ebook_registry.validation import validate_fields

logger = logging.getLogger(__name__)

# Operations that run under an execution context and may change state.
PUBLIC_OPERATIONS = (
    "create",
    "read_metadata",
    "update",
    "transfer_ownership",
    "delete",
    "read",
)


class EbookRegistry:
    """Registry of ebooks with single-author ownership.

    Every public operation takes the caller's ``ExecutionContext`` and
    returns ``Ok`` or ``Err``. All checks run before the first write, so
    an ``Err`` never leaves partial state behind. Atomicity across calls
    and serial ordering are the host runtime's job.

    ``update``, ``transfer_ownership`` and ``delete`` are gated on the
    caller being the current author. ``read`` is the only operation gated
    on the access-right map.
    """

    def __init__(self, store: StateStore, admin: str | None = None) -> None:
        self.store = store
        self.allocator = IdAllocator(store)
        self.access = AccessControl(store)
        self.counter = ReadCounter(store)
        # Reserved administrator identity; no operation checks it.
        self.admin = admin

    def create(
        self,
        ctx: ExecutionContext,
        title: str,
        file_size: int,
        summary: str,
        categories: Sequence[str],
    ) -> Result[int]:
        """Register a new ebook owned by the caller.

        Args:
            ctx: Caller identity and current clock.
            title: 1-63 characters.
            file_size: 1-999,999,999.
            summary: 1-255 characters.
            categories: 1-8 items of 1-31 characters each.

        Returns:
            ``Ok`` with the new ebook id, or ``Err`` with the first
            validation failure.
        """
        error = validate_fields(title, file_size, summary, categories)
        if error is not None:
            rejected = Err(error=error)
            logger.debug("Rejected create by %s: %s", ctx.caller, rejected.message)
            return rejected

        ebook_id = self.allocator.allocate()
        if self.store.get_ebook(ebook_id) is not None:
            logger.error("Id counter points at existing ebook %d", ebook_id)
            return Err(error=ErrorKind.ALREADY_EXISTS)

        self.store.put_ebook(
            Ebook(
                ebook_id=ebook_id,
                title=title,
                author=ctx.caller,
                file_size=file_size,
                upload_time=ctx.clock,
                summary=summary,
                categories=list(categories),
            )
        )
        self.access.grant_creator(ebook_id, ctx.caller)
        self.allocator.commit(ebook_id)

        logger.info("Ebook %d created by %s at %d", ebook_id, ctx.caller, ctx.clock)
        return Ok(value=ebook_id)

    def read_metadata(self, ctx: ExecutionContext, ebook_id: int) -> Result[EbookMetadata]:
        """Return the stored record with its read count. No side effects."""
        ebook = self.store.get_ebook(ebook_id)
        if ebook is None:
            logger.debug("Metadata lookup for missing ebook %d by %s", ebook_id, ctx.caller)
            return Err(error=ErrorKind.NOT_FOUND)
        return Ok(
            value=EbookMetadata(**ebook.model_dump(), read_count=self.counter.get(ebook_id))
        )

    def update(
        self,
        ctx: ExecutionContext,
        ebook_id: int,
        new_title: str,
        new_size: int,
        new_summary: str,
        new_categories: Sequence[str],
    ) -> Result[None]:
        """Replace title, size, summary and categories.

        Author and upload time are kept. Checks run in the order
        existence, authorship, field validation.
        """
        ebook, error = self._owned_ebook(ctx, ebook_id, "update")
        if error is not None:
            return error

        invalid = validate_fields(new_title, new_size, new_summary, new_categories)
        if invalid is not None:
            rejected = Err(error=invalid)
            logger.debug("Rejected update of ebook %d: %s", ebook_id, rejected.message)
            return rejected

        self.store.put_ebook(
            ebook.model_copy(
                update={
                    "title": new_title,
                    "file_size": new_size,
                    "summary": new_summary,
                    "categories": list(new_categories),
                }
            )
        )
        logger.info("Ebook %d updated by %s", ebook_id, ctx.caller)
        return Ok()

    def transfer_ownership(
        self, ctx: ExecutionContext, ebook_id: int, new_author: str
    ) -> Result[None]:
        """Hand authorship to ``new_author``.

        The access-right map is not touched: the new author gains no read
        access flag and the previous author keeps theirs.
        """
        ebook, error = self._owned_ebook(ctx, ebook_id, "transfer")
        if error is not None:
            return error

        self.store.put_ebook(ebook.model_copy(update={"author": new_author}))
        logger.info(
            "Ebook %d transferred from %s to %s", ebook_id, ctx.caller, new_author
        )
        return Ok()

    def delete(self, ctx: ExecutionContext, ebook_id: int) -> Result[None]:
        """Remove the record. Its id is never reissued.

        Access rights and the read counter for the id stay in the store.
        """
        _, error = self._owned_ebook(ctx, ebook_id, "delete")
        if error is not None:
            return error

        self.store.delete_ebook(ebook_id)
        logger.info("Ebook %d deleted by %s", ebook_id, ctx.caller)
        return Ok()

    def read(self, ctx: ExecutionContext, ebook_id: int) -> Result[None]:
        """Record one read by the caller, who must hold an access right."""
        if self.store.get_ebook(ebook_id) is None:
            logger.debug("Read of missing ebook %d by %s", ebook_id, ctx.caller)
            return Err(error=ErrorKind.NOT_FOUND)
        if not self.access.check(ebook_id, ctx.caller):
            denied = Err(error=ErrorKind.ACCESS_DENIED)
            logger.warning(
                "Read of ebook %d by %s refused: %s", ebook_id, ctx.caller, denied.message
            )
            return denied

        count = self.counter.increment(ebook_id)
        logger.debug("Ebook %d read by %s (count=%d)", ebook_id, ctx.caller, count)
        return Ok()

    def get_total_ebooks(self) -> int:
        return self.allocator.total

    def has_access(self, ebook_id: int, user: str) -> bool:
        return self.access.check(ebook_id, user)

    def get_read_count(self, ebook_id: int) -> int:
        return self.counter.get(ebook_id)

    def _owned_ebook(
        self, ctx: ExecutionContext, ebook_id: int, action: str
    ) -> tuple[Ebook | None, Err | None]:
        ebook = self.store.get_ebook(ebook_id)
        if ebook is None:
            logger.debug("Cannot %s missing ebook %d", action, ebook_id)
            return None, Err(error=ErrorKind.NOT_FOUND)
        if ebook.author != ctx.caller:
            denied = Err(error=ErrorKind.UNAUTHORIZED)
            logger.warning(
                "%s of ebook %d by %s refused: %s", action, ebook_id, ctx.caller, denied.message
            )
            return None, denied
        return ebook, None
