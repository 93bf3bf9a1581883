from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from streambean import __version__
from streambean.config import settings, setup_logging
from streambean.exceptions import StreambeanError
from streambean.pages import pages_router
from streambean.routers import main_router
from streambean.schemas import ErrorDetail, StandardErrorResponse


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Streambean API...")
    app.state.http_client = httpx.AsyncClient(timeout=settings.upstream_timeout_sec)
    logger.info("Streambean API started successfully")

    yield

    logger.info("Shutting down Streambean API...")
    try:
        await app.state.http_client.aclose()
    except Exception as e:
        logger.error(f"Error closing HTTP client: {e}", exc_info=True)
    logger.info("Streambean API stopped")


app = FastAPI(
    title="Streambean API",
    version=__version__,
    lifespan=lifespan
)

app.include_router(pages_router)
app.include_router(main_router)


def _error_response(status_code: int, code: str, message: str, context: dict | None = None) -> JSONResponse:
    body = StandardErrorResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        error=ErrorDetail(code=code, message=message, context=context),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(StreambeanError)
async def streambean_exception_handler(request: Request, exc: StreambeanError):
    """Render service errors as the standard error body"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}: {exc.message}")
    return _error_response(exc.status_code, exc.code, exc.message, exc.context)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with details"""
    logger.error(f"Validation error for {request.method} {request.url.path}")
    logger.error(f"Validation details: {exc.errors()}")

    # Create a properly serializable error response
    errors = []
    for error in exc.errors():
        errors.append({
            "type": error.get("type"),
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg"),
            "input": str(error.get("input", ""))[:100]
        })

    return _error_response(400, "VALIDATION_ERROR", "Invalid request parameters", {"errors": errors})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "streambean.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development",
    )
