"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handling, and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assistant_relay import __version__
from assistant_relay.api.chat import CHAT_FAILURE_MESSAGE
from assistant_relay.api.chat import router as chat_router
from assistant_relay.assistant.errors import RelayError
from assistant_relay.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Assistant Relay API...")
    yield
    # Shutdown
    logger.info("Shutting down Assistant Relay API...")


async def relay_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert relay errors raised outside a route body into the generic 500.

    Covers dependency failures such as a relay that cannot be configured.
    """
    logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=CHAT_FAILURE_MESSAGE).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Assistant Relay API",
        description=(
            "Chat relay for a hosted AI assistant. Creates or reuses conversation "
            "threads, submits user messages, waits for the assistant run to finish, "
            "and returns the normalized transcript."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(RelayError, relay_error_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "assistant-relay"}

    return application


app = create_app()
