"""
Pydantic schema definitions for the catalog module.

The ``Book`` model is the single entity held by the catalogue. Its
JSON form uses camelCase keys (``publishedDate``, ``isBorrowed`` ...)
while Python code works with the snake_case attribute names; both are
accepted on input. ``availabilityStatus`` is derived from
``is_borrowed`` every time a book is serialised, so it can never drift
from the borrow flag.

Request bodies get their own narrow models. ``BookCreate`` and
``BookUpdate`` only declare the fields a caller is allowed to supply,
so protected fields such as ``id`` or ``dueDate`` are dropped while
parsing instead of being deleted afterwards. Every response is wrapped
in an ``Envelope``.
"""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

AVAILABLE = "available"
UNAVAILABLE = "unavailable"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Book(_CamelModel):
    """A single book entry.

    ``borrower_id`` and ``due_date`` are only set while the book is on
    loan. ``due_date`` is an ISO-8601 UTC timestamp with millisecond
    precision, e.g. ``2026-11-02T09:30:00.000Z``.
    """

    id: str
    title: str
    author: str
    genre: str
    published_date: Optional[str] = None
    is_borrowed: bool = False
    borrower_id: Optional[str] = None
    due_date: Optional[str] = None

    @computed_field(alias="availabilityStatus")  # type: ignore[misc]
    @property
    def availability_status(self) -> str:
        return UNAVAILABLE if self.is_borrowed else AVAILABLE


class BookCreate(_CamelModel):
    """Body of ``POST /books``.

    The required fields default to ``None`` so that missing values reach
    the service, which reports them as a ``ValidationError``.
    """

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_date: Optional[str] = None


class BookUpdate(_CamelModel):
    """The fields of a book that ``PUT /books/{id}`` may change."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_date: Optional[str] = None


class BorrowRequest(_CamelModel):
    borrower_id: Optional[str] = None


DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """The ``{message, data?}`` wrapper returned by every endpoint."""

    message: str
    data: Optional[DataT] = None


BookEnvelope = Envelope[Book]
BookListEnvelope = Envelope[List[Book]]
