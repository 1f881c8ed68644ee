"""Fire build jobs on the remote build server over HTTP."""

import httpx

from trigger_proxy.config import Settings
from trigger_proxy.domain.constants import DISPATCH_TIMEOUT_SECONDS
from trigger_proxy.domain.errors import DispatchError
from trigger_proxy.infrastructure.dispatch_log import (
    FAILED,
    TRIGGERED,
    DispatchLog,
    DispatchRecord,
)
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)


def build_job_url(project_url: str, job: str) -> str:
    """Return the build trigger URL for a job under the project URL."""
    return f"{project_url}/job/{job}/build"


class TriggerDispatcher:
    """POST build triggers, authenticating with basic auth or a trigger token.

    With a username configured the token is sent as the basic-auth password.
    Without one the token goes on the query string as an anonymous trigger
    token. Failures are logged and recorded, never retried or raised.
    """

    def __init__(
        self,
        settings: Settings,
        dispatch_log: DispatchLog | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings
        self._dispatch_log = dispatch_log or DispatchLog()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=DISPATCH_TIMEOUT_SECONDS,
            verify=settings.verify_tls,
        )

    @property
    def dispatch_log(self) -> DispatchLog:
        """Return the log every trigger attempt is recorded in."""
        return self._dispatch_log

    def fire(self, job: str) -> bool:
        """Trigger a job. Returns True on a 2xx response."""
        try:
            status_code = self._post(job)
        except DispatchError as exc:
            logger.error("... %s failed: %s", job, exc)
            self._dispatch_log.record(
                DispatchRecord(
                    job=job,
                    outcome=FAILED,
                    status_code=exc.status_code,
                    detail=str(exc),
                )
            )
            return False

        logger.info("... %s triggered", job)
        self._dispatch_log.record(
            DispatchRecord(job=job, outcome=TRIGGERED, status_code=status_code)
        )
        return True

    def _post(self, job: str) -> int:
        url = build_job_url(self._settings.project_url, job)
        auth: httpx.BasicAuth | None = None
        params: dict[str, str] = {}

        if self._settings.jenkins_user:
            auth = httpx.BasicAuth(self._settings.jenkins_user, self._settings.jenkins_token)
        else:
            params["token"] = self._settings.jenkins_token

        if self._client.is_closed:
            raise DispatchError(job, "HTTP client is closed")

        try:
            response = self._client.post(
                url,
                auth=auth,
                params=params,
                timeout=DISPATCH_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as exc:
            raise DispatchError(job, f"request to {url} failed: {exc}") from exc

        if not response.is_success:
            raise DispatchError(
                job,
                f"status code {response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code

    def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._owns_client:
            self._client.close()
