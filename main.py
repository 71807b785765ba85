"""Main entry point for running the webguard demo application."""

import os
from typing import Any

import uvicorn
from loguru import logger

from webguard.api.main import app
from webguard.core.config import get_settings
from webguard.core.logging import UVICORN_LOGGERS, setup_logging


def build_uvicorn_log_config() -> dict[str, Any]:
    """Build a dictConfig routing uvicorn's loggers through Loguru."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {"class": "webguard.core.logging.InterceptHandler"},
        },
        "loggers": {
            name: {"handlers": ["default"], "level": "INFO", "propagate": False}
            for name in UVICORN_LOGGERS
        },
    }


def main() -> None:
    """Run the demo application with uvicorn."""
    settings = get_settings()
    setup_logging(settings)

    # Cloud Run sets PORT to the port the container should listen on
    port = int(os.environ.get("PORT", settings.api_port))

    # Reload needs the app as an import string
    target: Any = "webguard.api.main:app" if settings.debug else app
    mode = "development mode with auto-reload" if settings.debug else "production mode"
    logger.info("Starting Uvicorn on http://{}:{} ({})", settings.api_host, port, mode)

    uvicorn.run(
        target,
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=build_uvicorn_log_config(),
    )


if __name__ == "__main__":
    main()
