from trigger_proxy.application.trigger_service import TriggerService
from trigger_proxy.config import Settings, load_settings
from trigger_proxy.infrastructure.mapping_table import MappingTable
from trigger_proxy.infrastructure.trigger_dispatcher import TriggerDispatcher
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)

_trigger_service: TriggerService | None = None


def initialize_services(settings: Settings | None = None) -> TriggerService:
    """Build the TriggerService once at startup.

    Raises ConfigurationError or MappingLoadError when the proxy cannot start.
    """
    global _trigger_service  # noqa: PLW0603
    if _trigger_service is not None:
        return _trigger_service

    settings = settings or load_settings([])
    logger.info("Project URL: %s", settings.project_url)
    logger.info("Found configured quiet period: %s", settings.quiet_period)
    if not settings.jenkins_user:
        logger.info("No JENKINS_USER defined, triggering with token")
    if not settings.verify_tls:
        logger.warning("TLS certificate verification is disabled for build triggers")

    mapping = MappingTable.load(settings.mapping_file, settings.file_matching)
    dispatcher = TriggerDispatcher(settings)

    _trigger_service = TriggerService(
        settings=settings,
        mapping=mapping,
        dispatcher=dispatcher,
    )
    logger.info("Initialized TriggerService")
    return _trigger_service


def get_trigger_service() -> TriggerService:
    """Return the singleton TriggerService, creating it on first call."""
    if _trigger_service is None:
        return initialize_services()
    return _trigger_service


def peek_trigger_service() -> TriggerService | None:
    """Return the TriggerService if it exists, without creating it."""
    return _trigger_service


def set_trigger_service(service: TriggerService | None) -> None:
    """Override the TriggerService singleton (for testing)."""
    global _trigger_service  # noqa: PLW0603
    _trigger_service = service
