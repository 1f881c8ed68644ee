from datetime import datetime, timezone

from fastapi import APIRouter

from trigger_proxy.api.dependencies import peek_trigger_service
from trigger_proxy.domain.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Health check endpoint")
def health_check() -> HealthResponse:
    """Report "ok" once the mapping is loaded, "starting" before that."""
    timestamp = datetime.now(tz=timezone.utc).isoformat()
    service = peek_trigger_service()
    if service is None:
        return HealthResponse(status="starting", timestamp=timestamp)

    status = service.get_status()
    return HealthResponse(
        status="ok",
        timestamp=timestamp,
        mapping_records=status.mapping_records,
        pending_jobs=len(status.pending_jobs),
    )
