"""FastAPI application entry point for the Image API."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from image_api import __version__
from image_api.api import api_router
from image_api.core.config import settings
from image_api.core.logging_config import configure_logging
from image_api.core.security import APIKeyMiddleware
from image_api.database import dispose_engine, init_models
from image_api.exceptions import ImageAPIException, summarize_errors
from image_api.schemas import ErrorResponse
from image_api.storage import FileStorage

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    FileStorage(settings.STORAGE_ROOT).ensure_root()
    await init_models()
    if not settings.API_KEY:
        logger.warning("api_key_not_configured", header=settings.API_KEY_HEADER_NAME)
    logger.info("startup", version=__version__, storage_root=str(settings.STORAGE_ROOT))
    yield
    await dispose_engine()
    logger.info("shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Upload, search, fetch and delete images with metadata",
    version=__version__,
    lifespan=lifespan,
)

# Every route sits behind the API key check
app.add_middleware(
    APIKeyMiddleware,
    header_name=settings.API_KEY_HEADER_NAME,
    api_key=settings.API_KEY,
)

# Added last so preflight requests are answered before the API key check
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_PREFIX)


def _error_response(status_code: int, message: str, errors: dict | None = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, errors=errors).model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(ImageAPIException)
async def image_api_exception_handler(request: Request, exc: ImageAPIException) -> JSONResponse:
    """Render all ImageAPIException subclasses."""
    errors = getattr(exc, "errors", None)
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, status=exc.status_code, message=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status_code, message=exc.message)
    return _error_response(exc.status_code, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render framework validation failures in the same shape as upload validation."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # Drop the location prefix ("body", "query", "path")
        loc = [str(part) for part in error.get("loc", ())[1:]] or ["request"]
        errors.setdefault(".".join(loc), []).append(error.get("msg", "Invalid value."))
    return _error_response(422, summarize_errors(errors), errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.get("/health")
async def health_check():
    return {"status": "ok"}


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "image_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
