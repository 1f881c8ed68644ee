from datetime import datetime

from pydantic import BaseModel, Field


# --- Health ---


class HealthResponse(BaseModel):
    """Response from GET /health."""

    status: str
    timestamp: str
    mapping_records: int | None = None
    pending_jobs: int = 0


# --- Proxy Status ---


class ProxyStatus(BaseModel):
    """Response from GET /status."""

    mapping_file: str
    mapping_records: int
    mapping_keys: int
    quiet_period_seconds: float
    file_matching: bool
    pending_jobs: list[str]


# --- Dispatches ---


class DispatchItem(BaseModel):
    """A single recorded trigger attempt."""

    job: str
    outcome: str
    status_code: int | None = None
    timestamp: datetime
    detail: str | None = None


class DispatchesResponse(BaseModel):
    """Response from GET /dispatches."""

    dispatches: list[DispatchItem]
    total: int = Field(description="Number of dispatches returned after applying the limit.")


# --- Mapping Reload ---


class MappingReloadResponse(BaseModel):
    """Response from POST /mapping/reload."""

    status: str
    records: int
