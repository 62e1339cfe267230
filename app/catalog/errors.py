"""
Exceptions raised by the catalogue service.

The router translates these into HTTP responses; see ``router.py`` for
the status codes each one maps to.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for every failure reported by ``CatalogService``."""

    def __init__(self, message: str, book_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.book_id = book_id


class ValidationError(CatalogError):
    """A required field is missing or blank."""


class NotFoundError(CatalogError):
    """No book with the requested id exists."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book with ID {book_id} not found", book_id)


class ConflictError(CatalogError):
    """The book is not in the right borrow state for the operation."""
