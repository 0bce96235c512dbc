"""
FastAPI Movie Catalog API Service
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import HealthCheck, config
from catalog.database import Database
from catalog_api.cache import CacheService
from catalog_api.errors import CatalogError
from catalog_api.routers import actors, auth, directors, genres, movies


# Configure logging
logging.basicConfig(
    level=getattr(logging, config.app.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    logger.info("🚀 Starting Movie Catalog API...")

    await app.state.database.connect()
    await app.state.cache.connect()

    logger.info("✅ All services connected successfully")

    yield

    # Shutdown
    logger.info("🛑 Shutting down Movie Catalog API...")
    await app.state.database.disconnect()
    await app.state.cache.disconnect()
    logger.info("✅ Graceful shutdown completed")


# Create FastAPI app
app = FastAPI(
    title="Movie Catalog API",
    description="RESTful API for movies, directors, actors and genres",
    version=config.app.version,
    lifespan=lifespan,
    docs_url="/docs" if config.app.debug else None,
    redoc_url="/redoc" if config.app.debug else None
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.app.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Initialize services
app.state.database = Database(config.database)
app.state.cache = CacheService(config.redis)

app.include_router(auth.router)
app.include_router(movies.router)
app.include_router(directors.router)
app.include_router(actors.router)
app.include_router(genres.router)


@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "message": "Movie Catalog API",
        "version": config.app.version,
        "docs_url": "/docs" if config.app.debug else "Contact admin for API documentation"
    }


@app.get("/health", response_model=HealthCheck)
async def health_check(request: Request):
    """Health check endpoint"""
    services = {}

    db_status = await request.app.state.database.health_check()
    services["database"] = "healthy" if db_status else "unhealthy"

    cache_status = await request.app.state.cache.health_check()
    if cache_status is None:
        services["cache"] = "disabled"
    else:
        services["cache"] = "healthy" if cache_status else "unhealthy"

    # Overall status
    status_value = "healthy" if "unhealthy" not in services.values() else "degraded"

    return HealthCheck(
        status=status_value,
        timestamp=datetime.now(timezone.utc),
        version=config.app.version,
        services=services
    )


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Domain errors carry their own status"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid bodies and query strings are reported as 400"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "; ".join(problems) or "Invalid request"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"}
    )


def run():
    """Console entry point"""
    import uvicorn
    uvicorn.run(
        "catalog_api.main:app",
        host=config.app.host,
        port=config.app.port,
        log_level=config.app.log_level.lower(),
        reload=config.app.debug
    )


if __name__ == "__main__":
    run()
