from fastapi import APIRouter, HTTPException, Query

from trigger_proxy.api.dependencies import get_trigger_service
from trigger_proxy.domain.errors import MappingLoadError
from trigger_proxy.domain.models import (
    DispatchesResponse,
    DispatchItem,
    MappingReloadResponse,
    ProxyStatus,
)
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


@router.get(
    "/status",
    response_model=ProxyStatus,
    summary="Get mapping and pending timer state",
)
def get_status() -> ProxyStatus:
    """Return mapping statistics and jobs waiting for their quiet period."""
    return get_trigger_service().get_status()


@router.get(
    "/dispatches",
    response_model=DispatchesResponse,
    summary="Get recent trigger outcomes",
)
def get_dispatches(
    limit: int = Query(default=50, ge=1, le=100),
) -> DispatchesResponse:
    """Return the most recent trigger attempts, newest first."""
    records = get_trigger_service().get_recent_dispatches(limit)
    return DispatchesResponse(
        dispatches=[
            DispatchItem(
                job=r.job,
                outcome=r.outcome,
                status_code=r.status_code,
                timestamp=r.timestamp,
                detail=r.detail,
            )
            for r in records
        ],
        total=len(records),
    )


@router.post(
    "/mapping/reload",
    response_model=MappingReloadResponse,
    summary="Reload the mapping file",
    responses={422: {"description": "Mapping file could not be loaded"}},
)
def reload_mapping() -> MappingReloadResponse:
    """Re-read the mapping file and swap it in. The old table stays on failure."""
    try:
        records = get_trigger_service().reload_mapping()
    except MappingLoadError as exc:
        logger.exception("Mapping reload failed")
        raise HTTPException(
            status_code=422,
            detail={"error_code": "MAPPING_LOAD_FAILED", "detail": str(exc)},
        )

    return MappingReloadResponse(status="success", records=records)
