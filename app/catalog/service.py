"""
Business rules for the catalogue: CRUD plus the borrow/return cycle.

A book is either available or borrowed. ``borrow`` and ``return_book``
are the only operations that move it between the two states, and each
checks the current state first. ``borrower_id`` and ``due_date`` are
written by ``borrow`` and cleared by ``return_book``; ``update`` can
never reach them because ``BookUpdate`` does not declare them.

FastAPI runs sync endpoints in a thread pool, so every public method
holds ``self._lock`` for its whole body. A single call is atomic, but
there are no transactions spanning several calls. Methods return
copies of the stored books, never the live instances.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from . import errors
from .schemas import Book, BookCreate, BookUpdate
from .store import CatalogStore

logger = logging.getLogger(__name__)

DEFAULT_LOAN_PERIOD = timedelta(days=14)
DEFAULT_RECOMMENDATION_COUNT = 3
REQUIRED_FIELDS = ("title", "author", "genre")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_book_id() -> str:
    return str(uuid.uuid4())


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class CatalogService:
    """Operations over a ``CatalogStore``.

    Parameters
    ----------
    store : CatalogStore
        The store to read and mutate.
    clock : Callable[[], datetime]
        Returns the current time as an aware datetime. Used for due dates.
    id_factory : Callable[[], str]
        Produces ids for new books.
    loan_period : timedelta
        How long a borrowed book may be kept.
    recommendation_count : int
        How many books ``recommendations`` returns.
    """

    def __init__(
        self,
        store: CatalogStore,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_book_id,
        loan_period: timedelta = DEFAULT_LOAN_PERIOD,
        recommendation_count: int = DEFAULT_RECOMMENDATION_COUNT,
    ) -> None:
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self.loan_period = loan_period
        self.recommendation_count = recommendation_count
        self._lock = threading.RLock()

    def _require(self, book_id: str) -> Book:
        book = self.store.get(book_id)
        if book is None:
            raise errors.NotFoundError(book_id)
        return book

    def _next_id(self) -> str:
        book_id = self._id_factory()
        while book_id in self.store:
            book_id = self._id_factory()
        return book_id

    # ------------------------------------------------------------------
    # CRUD

    def list_all(self) -> List[Book]:
        with self._lock:
            return [b.model_copy() for b in self.store.all()]

    def get_by_id(self, book_id: str) -> Optional[Book]:
        with self._lock:
            book = self.store.get(book_id)
            return book.model_copy() if book is not None else None

    def add(self, data: BookCreate) -> Book:
        missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(data, name))]
        if missing:
            raise errors.ValidationError(
                "Missing required fields: title, author, and genre are required"
            )
        with self._lock:
            book = Book(
                id=self._next_id(),
                title=data.title,
                author=data.author,
                genre=data.genre,
                published_date=data.published_date,
            )
            self.store.add(book)
            logger.info("Added book %s (%r)", book.id, book.title)
            return book.model_copy()

    def update(self, book_id: str, patch: BookUpdate) -> Book:
        changes = patch.model_dump(exclude_unset=True)
        # null means "leave as is" for required fields
        for name in REQUIRED_FIELDS:
            if name in changes and changes[name] is None:
                del changes[name]
        blank = [name for name in REQUIRED_FIELDS if name in changes and _is_blank(changes[name])]
        with self._lock:
            book = self._require(book_id)
            if blank:
                raise errors.ValidationError(
                    f"Fields cannot be empty: {', '.join(blank)}", book_id
                )
            for name, value in changes.items():
                setattr(book, name, value)
            logger.info("Updated book %s: %s", book_id, sorted(changes))
            return book.model_copy()

    def delete(self, book_id: str) -> bool:
        with self._lock:
            removed = self.store.remove(book_id)
        if removed:
            logger.info("Deleted book %s", book_id)
        return removed

    # ------------------------------------------------------------------
    # Borrow / return

    def borrow(self, book_id: str, borrower_id: Optional[str]) -> Book:
        with self._lock:
            book = self._require(book_id)
            if book.is_borrowed:
                raise errors.ConflictError(f"Book with ID {book_id} is already borrowed", book_id)
            if _is_blank(borrower_id):
                raise errors.ValidationError("borrowerId is required", book_id)
            book.is_borrowed = True
            book.borrower_id = borrower_id
            book.due_date = format_timestamp(self._clock() + self.loan_period)
            logger.info("Book %s borrowed by %s, due %s", book_id, borrower_id, book.due_date)
            return book.model_copy()

    def return_book(self, book_id: str) -> Book:
        with self._lock:
            book = self._require(book_id)
            if not book.is_borrowed:
                raise errors.ConflictError(
                    f"Book with ID {book_id} is not currently borrowed", book_id
                )
            book.is_borrowed = False
            book.borrower_id = None
            book.due_date = None
            logger.info("Book %s returned", book_id)
            return book.model_copy()

    def recommendations(self) -> List[Book]:
        with self._lock:
            return [b.model_copy() for b in self.store.first(self.recommendation_count)]
