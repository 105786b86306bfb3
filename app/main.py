"""
Zalo SSO Relay - server-side token exchange and profile fetch
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .middleware.error_handler import ErrorHandlerMiddleware, validation_exception_handler
from .middleware.logging_config import setup_logging, get_logger
from .routers import health, zalo


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger = get_logger("main")
    logger.info("Starting Zalo relay service")
    if not settings.is_configured:
        logger.warning("ZALO_APP_ID or ZALO_SECRET_KEY missing; relays will answer 500")

    yield

    # Shutdown
    logger.info("Shutting down Zalo relay service")


app = FastAPI(
    title=settings.app_name,
    description="Relay for the Zalo OAuth token exchange and profile fetch",
    version="1.0.0",
    lifespan=lifespan
)

# Add middleware
app.add_middleware(ErrorHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(zalo.router)
app.include_router(health.router)
