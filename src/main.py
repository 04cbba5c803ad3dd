"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .config.database import init_db, close_db
from .config.storage import get_storage_client
from .core.exceptions import FileServiceError, InternalError, ValidationError
from .middleware.logging import RequestLoggingMiddleware
from .middleware.rate_limit import limiter
from .routers import files
from .schemas.shared import ErrorResponse
from .utils.logger import configure_logging, get_logger

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting application", version=settings.app_version)
    await init_db()
    get_storage_client()
    yield
    # Shutdown
    logger.info("Shutting down application")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Presigned direct-to-storage uploads, including multipart, with file metadata records",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(exc: FileServiceError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, error_code=exc.error_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True),
    )


# Exception handlers
@app.exception_handler(FileServiceError)
async def file_service_exception_handler(request: Request, exc: FileServiceError):
    """Render domain errors with their status code."""
    logger.info(
        "Request failed",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
    )
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client validation errors."""
    messages = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return error_response(ValidationError("; ".join(messages)))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return error_response(InternalError())


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# Include routers
app.include_router(files.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
