from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from auxia.core.config import settings
from auxia.core.database import init_db, close_db
from auxia.core.exceptions import AuxiaError, error_response
from auxia.core.logging_config import logger
from auxia.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from auxia.core.rate_limiter import limiter, rate_limit_exceeded_handler
from auxia.api.v1.router import api_router
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware


async def validate_critical_config():
    """Fail fast on settings the API cannot run without; warn on risky ones"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
    for name in ("SECRET_KEY", "JWT_SECRET_KEY"):
        value = getattr(settings, name)
        if not value or value.startswith("change-me"):
            errors.append(f"{name} is not set or still the example value")
    if settings.MAX_COURSES_PER_FACULTY < 1:
        errors.append("MAX_COURSES_PER_FACULTY must be at least 1")

    if settings.is_production:
        if settings.is_sqlite:
            warnings.append("SQLite in production - concurrent registrations will serialize")
        if settings.BCRYPT_ROUNDS < 10:
            warnings.append(f"BCRYPT_ROUNDS={settings.BCRYPT_ROUNDS} is too low for production")
        if "*" in settings.CORS_ORIGINS:
            warnings.append("CORS allows any origin")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info("Starting Auxia College Management API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    await validate_critical_config()

    await init_db()
    logger.info("[Startup] Database tables ready")

    yield

    logger.info("Shutting down Auxia College Management API...")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Role-based college management: courses, gradesheets, clubs, feedback and announcements",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(AuxiaError)
async def auxia_exception_handler(request: Request, exc: AuxiaError):
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": str(exc) if settings.DEBUG else "An error occurred",
            "error": {"code": "INTERNAL_ERROR", "message": "Internal server error", "details": {}},
        }
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the Auxia College Management API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"/api/{settings.API_VERSION}/health"
    }


# Include API router
app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")
