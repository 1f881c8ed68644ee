"""Command line entry point: read configuration, load the mapping, serve."""

import sys
from collections.abc import Sequence

import uvicorn
from dotenv import load_dotenv

from trigger_proxy.api.dependencies import initialize_services
from trigger_proxy.config import load_settings
from trigger_proxy.domain.errors import ConfigurationError, MappingLoadError
from trigger_proxy.logging_config import get_logger, setup_logging
from trigger_proxy.main import app

EXIT_FAIL = 1

logger = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the proxy. Returns a non-zero exit code when startup fails."""
    load_dotenv()
    setup_logging()
    logger.info("Starting trigger-proxy ...")

    try:
        settings = load_settings(argv)
        setup_logging(settings.log_level)
        initialize_services(settings)
    except (ConfigurationError, MappingLoadError) as exc:
        logger.error("%s", exc)
        return EXIT_FAIL

    logger.info("Serving on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
