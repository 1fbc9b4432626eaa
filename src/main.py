"""Main FastAPI application for the Harmoniq catalog service."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import albums, artists, genres, health, singles, stats
from src.core.database import get_database
from src.core.settings import get_settings
from src.middleware.auth import AuthenticationMiddleware
from src.middleware.logging import LoggingMiddleware, configure_logging
from src.services.exceptions import CatalogServiceError

# Initialize logging
configure_logging()

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    await get_database().connect()
    yield
    # Shutdown
    await get_database().disconnect()


app = FastAPI(
    title="Harmoniq Catalog Service",
    description="Singles, albums, copyright splits and listen statistics for Harmoniq artists",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
)

# Security middleware
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.allowed_hosts
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Custom middleware stack (last added runs first)
app.add_middleware(LoggingMiddleware)
app.add_middleware(AuthenticationMiddleware)


# Exception handlers
@app.exception_handler(CatalogServiceError)
async def catalog_error_handler(request: Request, exc: CatalogServiceError):
    """Render service errors as JSON:API error documents."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"errors": exc.to_errors()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handle payload validation failures with JSON:API format."""
    return JSONResponse(
        status_code=422,
        content={
            "errors": [
                {
                    "status": "422",
                    "code": "VALIDATION_ERROR",
                    "title": "Validation Error",
                    "detail": error.get("msg", "Invalid value"),
                    "source": {"pointer": "/" + "/".join(str(part) for part in error.get("loc", ()))},
                }
                for error in exc.errors()
            ]
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with JSON:API format."""
    detail = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "errors": [{
                "status": str(exc.status_code),
                "code": detail.get("code", "HTTP_ERROR"),
                "title": detail.get("message", "HTTP Error"),
                "detail": detail.get("message", "HTTP Error"),
                "source": {"pointer": request.url.path}
            }]
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Handle 404 errors with JSON:API format."""
    return JSONResponse(
        status_code=404,
        content={
            "errors": [{
                "status": "404",
                "code": "RESOURCE_NOT_FOUND",
                "title": "Resource Not Found",
                "detail": "The requested resource was not found",
                "source": {"pointer": request.url.path}
            }]
        }
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    """Handle 500 errors with JSON:API format."""
    return JSONResponse(
        status_code=500,
        content={
            "errors": [{
                "status": "500",
                "code": "INTERNAL_ERROR",
                "title": "Internal Server Error",
                "detail": "An unexpected error occurred"
            }]
        }
    )


# Routes
app.include_router(health.router, prefix="", tags=["system"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": health.SERVICE_NAME,
        "version": health.SERVICE_VERSION,
        "status": "running",
        "api": {
            "docs": "/docs" if not settings.is_production else None,
            "openapi": "/openapi.json" if not settings.is_production else None
        }
    }


# Main API routes
app.include_router(genres.router, prefix=f"{settings.api_v1_prefix}/genres", tags=["genres"])
app.include_router(artists.router, prefix=f"{settings.api_v1_prefix}/artists", tags=["artists"])
app.include_router(singles.router, prefix=f"{settings.api_v1_prefix}/singles", tags=["singles"])
app.include_router(albums.router, prefix=f"{settings.api_v1_prefix}/albums", tags=["albums"])
app.include_router(stats.router, prefix=f"{settings.api_v1_prefix}/stats", tags=["stats"])


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
