"""Data models for the ebook registry."""

from ebook_registry.models.context import ExecutionContext
from ebook_registry.models.ebook import Ebook, EbookMetadata
from ebook_registry.models.result import ERROR_MESSAGES, Err, ErrorKind, Ok, Result

__all__ = [
    "ERROR_MESSAGES",
    "Ebook",
    "EbookMetadata",
    "Err",
    "ErrorKind",
    "ExecutionContext",
    "Ok",
    "Result",
]
