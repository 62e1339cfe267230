"""
In-memory data store for the catalogue API.

``CatalogStore`` keeps the books for the lifetime of the process in an
insertion-ordered mapping from id to ``Book``. Nothing is persisted.
The store does no locking and no business validation of its own; both
belong to ``CatalogService``, which is the only component that should
mutate it. To move to a database, provide another class with the same
methods and hand it to the service.

The default catalogue is seeded from ``sample_books.json``, which sits
next to this module.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .schemas import Book

logger = logging.getLogger(__name__)

SAMPLE_BOOKS_FILE = Path(__file__).resolve().parent / "sample_books.json"


def load_sample_books(path: Union[str, Path, None] = None) -> List[Book]:
    """Load the seed books from a JSON file.

    Parameters
    ----------
    path : str | Path | None
        Location of a JSON array of book objects (camelCase keys).
        Defaults to the bundled ``sample_books.json``.

    Returns
    -------
    List[Book]
        The parsed books, in file order. An empty list is returned when
        the file is missing or malformed; the problem is logged.
    """
    source = Path(path) if path is not None else SAMPLE_BOOKS_FILE
    try:
        with source.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError("expected a JSON array of books")
        books = [Book.model_validate(entry) for entry in raw]
        seen = set()
        for book in books:
            if book.id in seen:
                raise ValueError(f"duplicate book id {book.id!r}")
            seen.add(book.id)
        return books
    except (OSError, ValueError) as exc:
        logger.error("Could not load sample books from %s: %s", source, exc)
        return []


class CatalogStore:
    """Ordered collection of ``Book`` records keyed by id."""

    def __init__(self, books: Optional[Iterable[Book]] = None) -> None:
        self._books: Dict[str, Book] = {}
        for book in books or ():
            self.add(book)

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._books

    def all(self) -> List[Book]:
        return list(self._books.values())

    def first(self, n: int) -> List[Book]:
        return self.all()[: max(0, n)]

    def get(self, book_id: str) -> Optional[Book]:
        return self._books.get(book_id)

    def add(self, book: Book) -> Book:
        """Append ``book``; its id must not already be present."""
        if book.id in self._books:
            raise ValueError(f"Book with ID {book.id} already exists")
        self._books[book.id] = book
        return book

    def remove(self, book_id: str) -> bool:
        """Drop the book with ``book_id``. Returns whether one was removed."""
        return self._books.pop(book_id, None) is not None


def create_store(seed: bool = True, sample_file: Union[str, Path, None] = None) -> CatalogStore:
    """Build a store, optionally seeded with the sample books."""
    store = CatalogStore(load_sample_books(sample_file) if seed else None)
    logger.info("Catalog store initialised with %d book(s)", len(store))
    return store
