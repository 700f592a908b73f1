"""Ebook data models."""

from pydantic import BaseModel, Field


class Ebook(BaseModel):
    """A registered ebook as held in the state store.

    ``author`` is the identity of the current owner and changes on
    ownership transfer. ``upload_time`` is the logical clock value at
    creation and never changes.
    """

    ebook_id: int
    title: str
    author: str
    file_size: int
    upload_time: int
    summary: str
    categories: list[str] = Field(default_factory=list)


class EbookMetadata(Ebook):
    """An ebook record together with its current read count."""

    read_count: int = 0
