# app/main.py
import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog import catalog_router
from .catalog.service import CatalogService
from .catalog.store import create_store
from .config import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level.upper())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"message": "Invalid request body"})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


def create_app(settings: Optional[Settings] = None, catalog: Optional[CatalogService] = None) -> FastAPI:
    """Assemble the API around a fresh catalogue.

    ``catalog`` replaces the service built from ``settings``; tests use
    it to inject a store or a fixed clock.
    """
    settings = settings or get_settings()
    if catalog is None:
        store = create_store(seed=settings.seed_sample_books, sample_file=settings.sample_books_file)
        catalog = CatalogService(
            store,
            loan_period=timedelta(days=settings.loan_period_days),
            recommendation_count=settings.recommendation_count,
        )

    app = FastAPI(
        title=settings.app_title,
        description=(
            "In-memory library catalogue: add, update and delete books, "
            "and track who has borrowed what until when."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.catalog = catalog

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Liveness probe
    @app.get("/")
    def health_check():
        return {"status": "ok", "message": f"{settings.app_title} is running"}

    app.include_router(catalog_router)
    return app


configure_logging(get_settings().log_level)
app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
