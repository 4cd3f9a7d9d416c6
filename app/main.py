# app/main.py
from contextlib import asynccontextmanager
import logging
import time

from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException

from app.core.config import get_settings
from app.core.errors import AppError
from app.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import kv as _kv_models  # noqa: F401


# Routers
from app.routers.auth import router as auth_router
from app.routers.communities import router as communities_router
from app.routers.announcements import router as announcements_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create the kv_store table.
    """
    logger.info("🔄 Startup: Connecting to record store...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: record store OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: record store connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Community Backend",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Length"],
    max_age=600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration for every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


# --- Error shape: {"error": "..."} ---


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    body = {"error": exc.detail}
    if isinstance(exc, AppError):
        body["code"] = exc.code
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "validation_error"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(communities_router, prefix=settings.API_V1_STR)
app.include_router(announcements_router, prefix=settings.API_V1_STR)


@app.get(f"{settings.API_V1_STR}/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "community-backend"}
