import threading
from collections.abc import Sequence

from trigger_proxy.config import Settings
from trigger_proxy.domain.constants import DEFAULT_BRANCH, DISPATCH_TIMEOUT_SECONDS
from trigger_proxy.domain.errors import EventParseError
from trigger_proxy.domain.models import ProxyStatus
from trigger_proxy.infrastructure.debouncer import Debouncer
from trigger_proxy.infrastructure.dispatch_log import DispatchRecord
from trigger_proxy.infrastructure.mapping_table import MappingTable, build_key
from trigger_proxy.infrastructure.trigger_dispatcher import TriggerDispatcher
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)


class TriggerService:
    """Turn repository notifications into debounced job triggers."""

    def __init__(
        self,
        settings: Settings,
        mapping: MappingTable,
        dispatcher: TriggerDispatcher,
        debouncer: Debouncer | None = None,
    ) -> None:
        self._settings = settings
        self._mapping = mapping
        self._mapping_lock = threading.Lock()
        self._dispatcher = dispatcher
        self._debouncer = debouncer or Debouncer(
            callback=dispatcher.fire, delay=settings.quiet_period
        )

    @property
    def mapping(self) -> MappingTable:
        """Return the live mapping table."""
        return self._mapping

    def handle_event(
        self,
        repo: str | None,
        branch: str | None = None,
        files: Sequence[str] = (),
    ) -> list[str]:
        """Arm a debounce timer for every job subscribed to the event.

        Returns the armed job names. Raises EventParseError when repo is missing.
        """
        if not repo:
            raise EventParseError("repo is missing")
        if not branch:
            logger.info("Branch is missing. Assuming %s", DEFAULT_BRANCH)
            branch = DEFAULT_BRANCH

        logger.info("Handling event for repo=%s branch=%s files=%s", repo, branch, list(files))

        jobs = self._find_jobs(repo, branch, files)
        if not jobs:
            logger.info("No mappings found for %s", build_key([repo, branch]))
            return []

        logger.info("Number of mappings found: %d", len(jobs))
        # Same job listed twice would only reset its own timer
        armed = list(dict.fromkeys(jobs))
        for job in armed:
            self._debouncer.trigger(job)
        return armed

    def _find_jobs(self, repo: str, branch: str, files: Sequence[str]) -> list[str]:
        mapping = self._mapping
        if not self._settings.file_matching:
            return mapping.lookup(build_key([repo, branch]))

        jobs: list[str] = []
        for file_name in files:
            jobs.extend(mapping.lookup(build_key([repo, branch, file_name])))
        return jobs

    def reload_mapping(self) -> int:
        """Load the mapping file again and swap it in. Returns the record count.

        On failure the current table stays in place and the error propagates.
        """
        with self._mapping_lock:
            table = MappingTable.load(self._settings.mapping_file, self._settings.file_matching)
            self._mapping = table
        logger.info("Mapping reloaded: %d records", len(table))
        return len(table)

    def get_status(self) -> ProxyStatus:
        """Return current proxy state."""
        mapping = self._mapping
        return ProxyStatus(
            mapping_file=self._settings.mapping_file,
            mapping_records=len(mapping),
            mapping_keys=len(mapping.keys),
            quiet_period_seconds=self._settings.quiet_period,
            file_matching=self._settings.file_matching,
            pending_jobs=self._debouncer.pending_keys,
        )

    def get_recent_dispatches(self, limit: int = 50) -> list[DispatchRecord]:
        """Return the most recent dispatch outcomes, newest first."""
        return self._dispatcher.dispatch_log.get_recent(limit)

    def shutdown(self) -> None:
        """Cancel pending triggers, let running ones finish, release the HTTP client."""
        self._debouncer.cancel_all(wait=DISPATCH_TIMEOUT_SECONDS)
        self._dispatcher.close()
        logger.info("Trigger service stopped")
