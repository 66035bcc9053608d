# cinema_api/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from typing import Dict

from .errors import APIError
from .settings import settings
from .storage.sqlite_base import get_sqlite_db_connection, close_sqlite_db_connection
from .movies.endpoints import movies_router
from .users.endpoints import users_router
from .tokens.endpoints import tokens_router

# Configure logging based on debug mode setting
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level="DEBUG" if settings.debug_mode else "INFO",
        format='%(asctime)s - %(name)s [%(levelname)s] - %(message)s'
    )

logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG if settings.debug_mode else logging.INFO)


@asynccontextmanager
async def cinema_app_lifespan(app_instance: FastAPI):
    """Open the database (creating the schema if needed) on startup and close it on shutdown."""
    logger.info("Application startup initiated.")
    try:
        await get_sqlite_db_connection()
        logger.info("SQLite backend initialized.")
    except Exception as e:
        logger.error(f"Error during storage backend initialization: {e}", exc_info=True)
        raise

    yield

    logger.info("Application shutdown initiated.")
    await close_sqlite_db_connection()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug_mode,
    version=settings.app_version,
    lifespan=cinema_app_lifespan
)

if settings.cors_trusted_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_trusted_origins,
        allow_methods=["OPTIONS", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"]
    )


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    """Render application errors as {"error": ...} envelopes with their status and headers."""
    if exc.status_code >= 500:
        logger.error(f"API: {exc.kind.value} error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies, wrong JSON types, unknown fields and bad runtime strings are 400s."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid request")
    logger.info(f"API: rejected malformed request to {request.url.path}: {message}")
    detail = f"{location}: {message}" if location else message
    return JSONResponse(status_code=400, content={"error": f"body contains badly-formed data ({detail})"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"API: unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "the server encountered a problem and could not process your request"}
    )


@app.get("/v1/healthcheck", tags=["Health"])
async def healthcheck_api():
    """Health check endpoint reporting availability, environment and version."""
    details: Dict[str, str] = {}
    status_text = "available"
    try:
        conn = await get_sqlite_db_connection()
        conn.execute("SELECT 1")
        details["sqlite_main_db"] = "healthy"
    except Exception as e:
        details["sqlite_main_db"] = f"unhealthy: {e}"
        status_text = "degraded"

    return {
        "status": status_text,
        "system_info": {
            "environment": settings.environment,
            "version": settings.app_version
        },
        "details": details
    }


# Mount all routers
app.include_router(movies_router)
app.include_router(users_router)
app.include_router(tokens_router)
