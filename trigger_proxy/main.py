from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from trigger_proxy.api.admin_routes import router as admin_router
from trigger_proxy.api.dependencies import get_trigger_service, set_trigger_service
from trigger_proxy.api.health_routes import router as health_router
from trigger_proxy.api.trigger_routes import router as trigger_router
from trigger_proxy.logging_config import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Initialize the trigger service on startup, cancel pending timers on shutdown."""
    logger.info("Starting trigger-proxy")
    service = get_trigger_service()

    yield

    logger.info("Shutting down")
    service.shutdown()
    set_trigger_service(None)


app = FastAPI(
    title="trigger-proxy",
    description="Debounce repository notifications into build-server job triggers",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(admin_router)
app.include_router(trigger_router)
