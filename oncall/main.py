"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .utils.logging import setup_logging
from .api.routes import auth, generation, health, linear, pipeline, voice
from .api.middleware.logging import LoggingMiddleware
from .api.middleware.error_handler import ErrorHandlerMiddleware

# Setup logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def _missing_settings() -> list[str]:
    required = {
        "OPENAI_API_KEY": settings.OPENAI_API_KEY,
        "SESSION_SECRET": settings.SESSION_SECRET,
        "PUBLIC_ORIGIN": settings.PUBLIC_ORIGIN,
        "LINEAR_OAUTH_CLIENT_ID": settings.LINEAR_OAUTH_CLIENT_ID,
        "LINEAR_OAUTH_CLIENT_SECRET": settings.LINEAR_OAUTH_CLIENT_SECRET,
        "ELEVENLABS_API_KEY": settings.ELEVENLABS_API_KEY,
        "ELEVENLABS_AGENT_ID": settings.ELEVENLABS_AGENT_ID,
    }
    return [name for name, value in required.items() if not value]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Missing credentials are reported here but do not stop startup; the
    routes that need them fail on first use.
    """
    logger.info(f"Starting {settings.APP_NAME} - Environment: {settings.ENVIRONMENT}")

    missing = _missing_settings()
    if missing:
        logger.warning(f"Missing configuration: {', '.join(missing)}")

    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Oncall",
    description=(
        "Listens to a voice conversation, detects UI requests, generates "
        "HTML/CSS mockup variants and exports the chosen one to Linear."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# Credentialed CORS requires an explicit origin
allowed_origins = [settings.PUBLIC_ORIGIN.rstrip("/")] if settings.PUBLIC_ORIGIN else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=bool(settings.PUBLIC_ORIGIN),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middleware
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": jsonable_encoder(exc.errors()),
            "message": "Invalid request body"
        }
    )


# Include routers
app.include_router(health.router)
app.include_router(voice.router)
app.include_router(generation.router)
app.include_router(linear.router)
app.include_router(auth.router)
app.include_router(pipeline.router)


@app.get("/", tags=["root"])
async def root() -> dict:
    """Root endpoint.

    Returns:
        Service name, version and docs location
    """
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "docs": "/docs" if not settings.is_production else None
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "oncall.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
