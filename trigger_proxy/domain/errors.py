"""Error kinds raised across the proxy."""


class TriggerProxyError(Exception):
    """Base class for all proxy errors."""


class ConfigurationError(TriggerProxyError):
    """A required setting is missing or invalid. Fatal at startup."""


class MappingLoadError(TriggerProxyError):
    """The mapping file could not be read or parsed."""


class MalformedRecordError(MappingLoadError):
    """A mapping record has the wrong number of fields."""

    def __init__(self, line_number: int, field_count: int, expected: str) -> None:
        self.line_number = line_number
        self.field_count = field_count
        super().__init__(
            f"Malformed mapping record on line {line_number}: "
            f"got {field_count} fields, expected {expected}"
        )


class EventParseError(TriggerProxyError):
    """An inbound event lacks the repository parameter."""


class DispatchError(TriggerProxyError):
    """The outbound trigger call failed or returned a non-2xx status."""

    def __init__(self, job: str, message: str, status_code: int | None = None) -> None:
        self.job = job
        self.status_code = status_code
        super().__init__(message)


class ShuttingDownError(TriggerProxyError):
    """The proxy is shutting down and no longer accepts events."""
