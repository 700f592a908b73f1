"""Field constraint checks applied before any registry mutation.

Every upper bound is exclusive: a title must be shorter than
``MAX_TITLE_LENGTH`` characters, so a 64-character title is rejected.
"""

from collections.abc import Sequence
from typing import Any

from ebook_registry.models.result import ErrorKind

MAX_TITLE_LENGTH = 64
MAX_SUMMARY_LENGTH = 256
MAX_FILE_SIZE = 1_000_000_000
MAX_CATEGORY_LENGTH = 32
MAX_CATEGORIES = 8


def _text_length_ok(value: Any, limit: int) -> bool:
    return isinstance(value, str) and 0 < len(value) < limit


def is_valid_title(title: Any) -> bool:
    return _text_length_ok(title, MAX_TITLE_LENGTH)


def is_valid_summary(summary: Any) -> bool:
    return _text_length_ok(summary, MAX_SUMMARY_LENGTH)


def is_valid_file_size(file_size: Any) -> bool:
    # bool is an int subclass; True must not pass as a size of 1
    if isinstance(file_size, bool) or not isinstance(file_size, int):
        return False
    return 0 < file_size < MAX_FILE_SIZE


def is_valid_category(category: Any) -> bool:
    return _text_length_ok(category, MAX_CATEGORY_LENGTH)


def is_valid_categories(categories: Any) -> bool:
    """Check the category list as a whole and every item in it.

    A bare string is a sequence too, but is never accepted as a list.
    """
    if isinstance(categories, str) or not isinstance(categories, Sequence):
        return False
    if not 1 <= len(categories) <= MAX_CATEGORIES:
        return False
    return all(is_valid_category(category) for category in categories)


def validate_fields(
    title: Any,
    file_size: Any,
    summary: Any,
    categories: Any,
) -> ErrorKind | None:
    """Validate a full set of ebook fields.

    Checks run in the order title, file size, summary, categories and
    stop at the first failure. An invalid summary is reported as
    ``INVALID_TITLE`` since the error vocabulary has no summary kind.

    Args:
        title: Candidate title.
        file_size: Candidate file size in bytes.
        summary: Candidate summary.
        categories: Candidate category list.

    Returns:
        The error kind of the first failing check, or None if all pass.
    """
    if not is_valid_title(title):
        return ErrorKind.INVALID_TITLE
    if not is_valid_file_size(file_size):
        return ErrorKind.INVALID_SIZE
    if not is_valid_summary(summary):
        return ErrorKind.INVALID_TITLE
    if not is_valid_categories(categories):
        return ErrorKind.INVALID_CATEGORIES
    return None
