"""Entry point of the filebrowser server."""

import uvicorn

from .app import create_app
from .config.logging_config import get_logger, setup_logging
from .config.settings import get_settings

logger = get_logger(__name__)


def main() -> None:
    """Run the server on a TCP port or a unix socket."""
    setup_logging()
    settings = get_settings()
    app = create_app(settings)

    if settings.network == "unix":
        logger.info(f"Starting {settings.app_name} on unix socket {settings.host}")
        uvicorn.run(app, uds=settings.host, log_config=None)
    else:
        logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
