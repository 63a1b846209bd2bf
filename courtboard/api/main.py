"""
Court Leaderboard API Server

FastAPI server that provides REST endpoints for player rankings, match
recording, courts, events and avatar assets.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from courtboard.api.routes import router, limiter as routes_limiter
from courtboard.database import db
from courtboard.database.seed_courts import seed_courts

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting up Court Leaderboard API...")

    # Initialize database (create tables if they don't exist)
    try:
        await db.init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        # Don't raise - allow app to start even if initialization fails

    # Seed default courts
    try:
        await seed_courts()
        logger.info("✓ Court seed data initialized")
    except Exception as e:
        logger.error(f"Failed to seed court data: {e}", exc_info=True)

    yield  # App is running

    # Shutdown
    logger.info("Shutting down Court Leaderboard API...")
    try:
        await db.close_database()
        logger.info("✓ Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}", exc_info=True)


app = FastAPI(
    title="Court Leaderboard API",
    description="API for player rankings, match recording, courts and events",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = routes_limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def format_validation_errors(errors) -> str:
    """Flatten pydantic errors into one plain-text reason."""
    missing = [str(err["loc"][-1]) for err in errors if err.get("type") == "missing"]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    reasons = []
    for err in errors:
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field = ".".join(
            str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")
        )
        reasons.append(f"{field}: {message}" if field else message)
    return "; ".join(reasons) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or incomplete input is a client error with a plain-text reason."""
    return PlainTextResponse(format_validation_errors(exc.errors()), status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors go back as plain text; unmatched routes read "Not Found"."""
    if exc.status_code == 405:
        # A known path with an unsupported method is still an unmatched route
        return PlainTextResponse("Not Found", status_code=404)
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


# Add CORS middleware (origins from ALLOWED_ORIGINS env var)
allowed_origins = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def cors_headers_for(request: Request) -> dict:
    """
    CORS headers for responses built outside CORSMiddleware.

    The catch-all Exception handler runs in ServerErrorMiddleware, which
    wraps CORSMiddleware, so its 500s would otherwise go out bare.
    """
    if "*" in allowed_origins:
        return {"Access-Control-Allow-Origin": "*"}
    origin = request.headers.get("origin")
    if origin and origin in allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: report the error text to the client."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(
        f"{type(exc).__name__}: {exc}", status_code=500, headers=cors_headers_for(request)
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
