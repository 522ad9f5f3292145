"""Neo Messaging API main entry point."""

import logging

import uvicorn

from .config.logging_config import LoggingConfig
from .config.settings import get_settings

settings = get_settings()

# Configure logging based on environment
LoggingConfig.configure(log_level=settings.log_level, log_format=settings.log_format)

from .app import create_app  # noqa: E402

logger = logging.getLogger(__name__)

app = create_app(settings)


def main() -> None:
    """Run the application."""
    logger.info(f"Starting Neo Messaging API on {settings.host}:{settings.port}")

    uvicorn.run(
        "neo_messaging.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
