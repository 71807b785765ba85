"""FastAPI demo application wiring both middlewares together.

This module shows how an embedding server uses webguard:
- Logging and tracing are configured from Settings first
- The fault handler is registered innermost so it sees handler exceptions
- The security headers middleware is registered outermost so that fault
  responses carry the security headers as well

Middleware are executed in reverse order of registration, so the last
middleware added is the first to process requests.
"""

from fastapi import FastAPI
from loguru import logger

from webguard.api.middleware.fault_handler import FaultHandlerMiddleware
from webguard.api.middleware.security_headers import SecurityHeadersMiddleware
from webguard.api.utils.log_context import add_installation_id
from webguard.api.utils.responses import ORJSONResponse
from webguard.core.config import Settings, get_settings
from webguard.core.faults import raise_fault
from webguard.core.logging import setup_logging
from webguard.core.observability import instrument_app, setup_tracing


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        default_response_class=ORJSONResponse,
    )

    # 2. Fault handler (recovers from exceptions raised by routes)
    application.add_middleware(
        FaultHandlerMiddleware,
        extra_fields=add_installation_id,
        dev_mode=settings.dev_mode,
    )

    # 1. Security headers (adds security headers to all responses)
    application.add_middleware(
        SecurityHeadersMiddleware,
        config=settings.security_config.to_header_config(),
        root_domain=settings.security_config.root_domain,
    )

    @application.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning a hello world message."""
        return {"message": f"Hello from {settings.app_name}!"}

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint for monitoring and container orchestration."""
        return {"status": "healthy"}

    if settings.dev_mode:

        @application.get("/fault")
        async def fault() -> None:
            """Raise a fault to try out the fault handler in development."""
            raise_fault("this is a test fault")

    logger.info(
        "Application created - {} v{} (dev_mode={})",
        settings.app_name,
        settings.app_version,
        settings.dev_mode,
    )

    instrument_app(application, settings)

    return application


app = create_app()
