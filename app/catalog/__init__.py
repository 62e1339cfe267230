"""
Catalog package for the library catalogue API.

The package is layered leaf-first: ``schemas`` defines the ``Book``
model and the request/response bodies, ``store`` holds the books in
memory, ``service`` implements the CRUD and borrow/return rules on top
of a store, and ``router`` exposes the service over HTTP. Swapping the
in-memory store for a database only requires another object with the
``CatalogStore`` interface.
"""

from .router import router as catalog_router  # noqa: F401
