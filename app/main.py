"""
FastAPI Main Application
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.api.v1 import api_router
from app import models  # noqa: F401  registers tables on Base.metadata
from app.database import engine, Base

setup_logging()
logger = logging.getLogger("app")


# Create database tables
def create_tables():
    """Create all database tables (off by default, the schema usually exists)"""
    Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_TABLES:
        create_tables()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield
    # uvicorn lets in-flight requests finish before the lifespan exits
    engine.dispose()
    logger.info("Database pool closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Employees Directory API",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

register_exception_handlers(app)


# Logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration; API responses are never cached"""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.error(f"{request.method} {request.url.path} -> 500 ({elapsed_ms:.1f} ms)")
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    if request.url.path.startswith(settings.API_V1_STR):
        response.headers["Cache-Control"] = "no-store"
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Authorization"],
    expose_headers=["X-Total-Count", "Location"],
)


# Register API routers
app.include_router(api_router, prefix=settings.API_V1_STR)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
