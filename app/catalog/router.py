"""
Route definitions for the catalogue API.

Endpoints under /books:
- GET    /books                  : list every book
- GET    /books/recommendations  : the first few books in catalogue order
- GET    /books/{book_id}        : get one book
- POST   /books                  : add a book
- PUT    /books/{book_id}        : update title/author/genre/publishedDate
- DELETE /books/{book_id}        : remove a book
- POST   /books/{book_id}/borrow : lend a book to ``borrowerId``
- POST   /books/{book_id}/return : take a book back

Successful responses are ``{message, data?}`` envelopes. Failures raise
``HTTPException``; ``app.main`` renders those as ``{message}``.

By default the status codes are the legacy ones: a missing
book (or, for borrow/return, a book in the wrong state) gives 404, and
every other failure, validation errors included, gives 500 with a
generic message. With ``strict_error_status`` enabled, validation errors
become 400 and state conflicts 409, and the error's own message is
returned.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from . import errors
from .schemas import (
    BookCreate,
    BookEnvelope,
    BookListEnvelope,
    BookUpdate,
    BorrowRequest,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

BOOK_NOT_FOUND = "Book not found"


def get_catalog(request: Request) -> CatalogService:
    """Dependency returning the service attached by ``create_app``."""
    return request.app.state.catalog


def _strict(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.strict_error_status)


def _http_error(
    request: Request,
    exc: Exception,
    error_message: str,
    not_found_message: Optional[str] = None,
) -> HTTPException:
    """Translate a service failure into the ``HTTPException`` to raise.

    ``not_found_message`` is the 404 text for endpoints that address a
    single book; endpoints without one report every failure as 500.
    """
    if isinstance(exc, errors.CatalogError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        if _strict(request):
            if isinstance(exc, errors.ValidationError):
                return HTTPException(status.HTTP_400_BAD_REQUEST, exc.message)
            if isinstance(exc, errors.NotFoundError):
                return HTTPException(status.HTTP_404_NOT_FOUND, exc.message)
            if isinstance(exc, errors.ConflictError):
                return HTTPException(status.HTTP_409_CONFLICT, exc.message)
        elif not_found_message and isinstance(exc, (errors.NotFoundError, errors.ConflictError)):
            return HTTPException(status.HTTP_404_NOT_FOUND, not_found_message)
    else:
        logger.exception("%s %s raised an unexpected error", request.method, request.url.path)
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, error_message)


@router.get("", response_model=BookListEnvelope, response_model_exclude_none=True)
def list_books(request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Return every book in catalogue order."""
    try:
        books = catalog.list_all()
    except Exception as exc:
        raise _http_error(request, exc, "Error retrieving books")
    return BookListEnvelope(message="Books retrieved", data=books)


@router.get("/recommendations", response_model=BookListEnvelope, response_model_exclude_none=True)
def get_recommendations(request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Return the first few books of the catalogue, in catalogue order."""
    try:
        books = catalog.recommendations()
    except Exception as exc:
        raise _http_error(request, exc, "Error fetching recommendations")
    return BookListEnvelope(message="Recommendations retrieved", data=books)


@router.get("/{book_id}", response_model=BookEnvelope, response_model_exclude_none=True)
def get_book(book_id: str, request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Return a single book by id, or 404 if it does not exist."""
    try:
        book = catalog.get_by_id(book_id)
    except Exception as exc:
        raise _http_error(request, exc, "Error retrieving book")
    if book is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, BOOK_NOT_FOUND)
    return BookEnvelope(message="Book retrieved", data=book)


@router.post(
    "",
    response_model=BookEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def add_book(
    request: Request,
    data: BookCreate = Body(...),
    catalog: CatalogService = Depends(get_catalog),
):
    """Add a book to the catalogue.

    Only ``title``, ``author``, ``genre`` and ``publishedDate`` are read from
    the body; the id and borrow state are always assigned by the service.
    """
    try:
        book = catalog.add(data)
    except Exception as exc:
        raise _http_error(request, exc, "Error adding book")
    return BookEnvelope(message="Book added", data=book)


@router.put("/{book_id}", response_model=BookEnvelope, response_model_exclude_none=True)
def update_book(
    book_id: str,
    request: Request,
    patch: BookUpdate = Body(...),
    catalog: CatalogService = Depends(get_catalog),
):
    """Change the editable fields of a book. Borrow state is left untouched."""
    try:
        book = catalog.update(book_id, patch)
    except Exception as exc:
        raise _http_error(request, exc, "Error updating book", BOOK_NOT_FOUND)
    return BookEnvelope(message="Book updated", data=book)


@router.delete("/{book_id}", response_model=BookEnvelope, response_model_exclude_none=True)
def delete_book(book_id: str, request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Remove a book from the catalogue."""
    try:
        removed = catalog.delete(book_id)
    except Exception as exc:
        raise _http_error(request, exc, "Error deleting book", BOOK_NOT_FOUND)
    if not removed:
        if _strict(request):
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"Book with ID {book_id} not found")
        raise HTTPException(status.HTTP_404_NOT_FOUND, BOOK_NOT_FOUND)
    return BookEnvelope(message="Book deleted")


@router.post("/{book_id}/borrow", response_model=BookEnvelope, response_model_exclude_none=True)
def borrow_book(
    book_id: str,
    request: Request,
    body: Optional[BorrowRequest] = Body(default=None),
    catalog: CatalogService = Depends(get_catalog),
):
    """Lend a book to ``borrowerId``.

    The due date is set to the current time plus the loan period (14 days
    by default). Borrowing a book that is already out is refused.
    """
    borrower_id = body.borrower_id if body is not None else None
    try:
        book = catalog.borrow(book_id, borrower_id)
    except Exception as exc:
        raise _http_error(
            request, exc, "Error borrowing book", "Book not found or already borrowed"
        )
    return BookEnvelope(message="Book borrowed", data=book)


@router.post("/{book_id}/return", response_model=BookEnvelope, response_model_exclude_none=True)
def return_book(book_id: str, request: Request, catalog: CatalogService = Depends(get_catalog)):
    """Mark a borrowed book as returned and clear its borrower and due date."""
    try:
        catalog.return_book(book_id)
    except Exception as exc:
        raise _http_error(
            request, exc, "Error returning book", "Book not found or not currently borrowed"
        )
    return BookEnvelope(message="Book returned")
