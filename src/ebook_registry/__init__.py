"""Ebook registry: metadata, single-author ownership, read gating and counts."""

from ebook_registry.config import AppConfig, load_config
from ebook_registry.host import RegistryHost, create_host, create_store, open_registry
from ebook_registry.logging_config import setup_logging
from ebook_registry.models import (
    Ebook,
    EbookMetadata,
    Err,
    ErrorKind,
    ExecutionContext,
    Ok,
    Result,
)
from ebook_registry.registry import EbookRegistry

__all__ = [
    "AppConfig",
    "Ebook",
    "EbookMetadata",
    "EbookRegistry",
    "Err",
    "ErrorKind",
    "ExecutionContext",
    "Ok",
    "RegistryHost",
    "Result",
    "create_host",
    "create_store",
    "load_config",
    "open_registry",
    "setup_logging",
]
