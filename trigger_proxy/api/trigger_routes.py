from fastapi import APIRouter, HTTPException, Query, Response

from trigger_proxy.api.dependencies import get_trigger_service
from trigger_proxy.domain.errors import EventParseError, ShuttingDownError
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["trigger"])


@router.api_route(
    "/",
    methods=["GET", "POST", "PUT"],
    summary="Accept a repository notification",
    response_class=Response,
    responses={503: {"description": "Proxy is shutting down"}},
)
def receive_notification(
    repo: str | None = Query(default=None, description="Repository name"),
    branch: str | None = Query(default=None, description="Branch name, defaults to master"),
    file: list[str] = Query(default=[], description="Changed files (file matching mode)"),
) -> Response:
    """Arm debounced triggers for every job mapped to the repository and branch.

    The caller always gets an empty acknowledgement; outcomes only show up in logs.
    """
    logger.info("Handling new request")
    service = get_trigger_service()

    try:
        service.handle_event(repo, branch, file)
    except EventParseError:
        logger.warning("Repo is missing, aborting request handling")
    except ShuttingDownError:
        raise HTTPException(
            status_code=503,
            detail={
                "error_code": "SHUTTING_DOWN",
                "detail": "The proxy is shutting down and no longer accepts events.",
            },
        )

    return Response(status_code=200)
