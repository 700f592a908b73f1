"""Host runtime: supplies caller and clock, serializes and commits calls."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from ebook_registry.config import AppConfig, load_config
from ebook_registry.logging_config import setup_logging
from ebook_registry.models.context import ExecutionContext
from ebook_registry.models.result import Result
from ebook_registry.registry import PUBLIC_OPERATIONS, EbookRegistry
from ebook_registry.storage.base import StateStore
from ebook_registry.storage.memory import MemoryStore
from ebook_registry.storage.sqlite import SqliteStore

logger = logging.getLogger(__name__)


class RegistryHost:
    """Executes registry operations one at a time, each all-or-nothing.

    ``call`` holds a lock for the whole operation, so calls from several
    threads are applied in a serial order. Each call runs inside a store
    transaction that is committed on ``Ok``. It is rolled back on ``Err``,
    on any exception, or when the commit itself fails.
    """

    def __init__(
        self,
        store: StateStore,
        start_height: int = 0,
        admin: str | None = None,
    ) -> None:
        if start_height < 0:
            raise ValueError(f"start_height must be non-negative, got {start_height}")
        self.store = store
        self.registry = EbookRegistry(store, admin=admin)
        self._height = start_height
        self._lock = threading.Lock()

    @property
    def height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move the logical clock forward and return the new height."""
        if blocks < 0:
            raise ValueError(f"Clock cannot move backwards (blocks={blocks})")
        with self._lock:
            self._height += blocks
            return self._height

    def context(self, caller: str) -> ExecutionContext:
        return ExecutionContext(caller=caller, clock=self._height)

    def call(self, caller: str, operation: str, *args: Any, **kwargs: Any) -> Result[Any]:
        """Run one public registry operation on behalf of ``caller``.

        Args:
            caller: Authenticated identity of the caller.
            operation: Name of a public registry operation, e.g. ``"create"``.
            *args: Positional arguments after the execution context.
            **kwargs: Keyword arguments for the operation.

        Returns:
            The operation's ``Ok`` or ``Err``.

        Raises:
            ValueError: If ``operation`` is not a public registry operation.
        """
        if operation not in PUBLIC_OPERATIONS:
            raise ValueError(f"Unknown registry operation: {operation}")
        handler = getattr(self.registry, operation)

        with self._lock:
            ctx = self.context(caller)
            self.store.begin()
            try:
                result = handler(ctx, *args, **kwargs)
            except Exception:
                self.store.rollback()
                logger.exception("Operation %s by %s aborted", operation, caller)
                raise

            if not result.is_ok:
                self.store.rollback()
                return result
            try:
                self.store.commit()
            except Exception:
                self.store.rollback()
                logger.exception("Commit of %s by %s failed", operation, caller)
                raise
        return result


def create_store(config: AppConfig) -> StateStore:
    """Build the state store selected by ``config.storage.backend``."""
    if config.storage.backend == "sqlite":
        return SqliteStore(config.storage.sqlite_path)
    return MemoryStore()


def create_host(config: AppConfig) -> RegistryHost:
    """Build a host with the configured store, start height and admin."""
    store = create_store(config)
    logger.info(
        "Starting %s %s with %s store at height %d",
        config.app.name,
        config.app.version,
        config.storage.backend,
        config.host.start_height,
    )
    return RegistryHost(
        store,
        start_height=config.host.start_height,
        admin=config.registry.admin,
    )


def open_registry(config_path: str | Path = "config.yaml") -> RegistryHost:
    """Load configuration, set up logging and build the host.

    This is the entry point for embedding the registry in a process.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        A ready RegistryHost.
    """
    config = load_config(config_path)
    setup_logging(config.logging.level, config.logging.file)
    return create_host(config)
