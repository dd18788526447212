"""
FastAPI main application for the Bookshelf API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import FAIL_RESPONSES, HealthResponse, ResponseEnvelope
from bookshelf.models import BookFilters, BookPayload, Result, ResultStatus
from bookshelf.store import BookStore
from utilities.config import BookshelfConfig, config
from utilities.logger import StoreLogger

# Setup logging
logger = structlog.get_logger(__name__)

BOOK_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": BookPayload.model_json_schema(by_alias=True)}},
    }
}

router = APIRouter(tags=["Books"])


def get_book_store(request: Request) -> BookStore:
    """Resolve the store owned by the running application."""
    return request.app.state.book_store


async def read_payload(request: Request) -> Any:
    """Decode the JSON body; a missing or malformed body reads as ``None``."""
    try:
        return await request.json()
    except (ValueError, RecursionError):
        return None


def to_response(result: Result) -> JSONResponse:
    return JSONResponse(status_code=result.code, content=result.envelope())


def fail_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResponseEnvelope(status=ResultStatus.FAIL, message=message).model_dump(
            mode="json", exclude_none=True
        ),
    )


@router.post(
    "/books",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseEnvelope,
    responses=FAIL_RESPONSES,
    openapi_extra=BOOK_BODY,
)
async def create_book(request: Request, store: BookStore = Depends(get_book_store)):
    """Add a book to the shelf."""
    payload = await read_payload(request)
    return to_response(store.create_book(payload))


@router.get("/books", response_model=ResponseEnvelope)
async def get_books(
    name: Optional[str] = None,
    reading: Optional[str] = None,
    finished: Optional[str] = None,
    store: BookStore = Depends(get_book_store),
):
    """
    List books as ``{id, name, publisher}`` projections.

    - **name**: case-insensitive substring of the book name
    - **reading**: 1 for books being read, 0 for the rest
    - **finished**: 1 for finished books, 0 for the rest
    """
    filters = BookFilters.from_query(name=name, reading=reading, finished=finished)
    return to_response(store.list_books(filters))


@router.get("/books/{book_id}", response_model=ResponseEnvelope, responses=FAIL_RESPONSES)
async def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """Get a single book by ID."""
    return to_response(store.get_book(book_id))


@router.put(
    "/books/{book_id}",
    response_model=ResponseEnvelope,
    responses=FAIL_RESPONSES,
    openapi_extra=BOOK_BODY,
)
async def update_book(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    """Replace the editable fields of a book."""
    payload = await read_payload(request)
    return to_response(store.update_book(book_id, payload))


@router.delete("/books/{book_id}", response_model=ResponseEnvelope, responses=FAIL_RESPONSES)
async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """Remove a book from the shelf."""
    return to_response(store.delete_book(book_id))


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request, store: BookStore = Depends(get_book_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=request.app.version,
        books_count=len(store),
    )


def create_app(settings: Optional[BookshelfConfig] = None, store: Optional[BookStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the process configuration
        store: Book store to serve; a fresh empty store is created when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Bookshelf API", version=settings.api_version)
        yield
        logger.info("Shutting down Bookshelf API", books_count=len(app.state.book_store))

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )
    if store is None:
        store_logger = StoreLogger().bind_context(
            service=settings.api_title,
            version=settings.api_version,
        )
        store = BookStore(id_length=settings.book_id_length, logger=store_logger)
    app.state.book_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors (unknown route, bad method) in the response envelope."""
        response = fail_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request"
        logger.warning("Request validation failed", path=request.url.path, errors=len(errors))
        return fail_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        message = str(exc) if settings.debug else "Internal server error"
        return fail_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
