"""Process-wide settings, read once at startup from flags and environment."""

import argparse
import logging
import os
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trigger_proxy.domain.constants import (
    DEFAULT_HOST,
    DEFAULT_MAPPING_FILE,
    DEFAULT_PORT,
    DEFAULT_QUIET_PERIOD_SECONDS,
)
from trigger_proxy.domain.errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Immutable proxy configuration."""

    model_config = ConfigDict(frozen=True)

    jenkins_url: str = Field(min_length=1)
    jenkins_token: str = Field(min_length=1)
    jenkins_user: str = ""
    jenkins_multi: str = ""
    mapping_file: str = DEFAULT_MAPPING_FILE
    quiet_period: float = Field(default=DEFAULT_QUIET_PERIOD_SECONDS, ge=0)
    file_matching: bool = False
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    verify_tls: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def project_url(self) -> str:
        """Base URL that job paths are appended to."""
        url = self.jenkins_url.rstrip("/")
        if self.jenkins_multi:
            url = f"{url}/job/{self.jenkins_multi}"
        return url


def _env_flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


def _build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trigger-proxy",
        description="Debounce repository notifications into build-server job triggers.",
    )
    parser.add_argument(
        "--jenkins-url", default=environ.get("JENKINS_URL", ""), help="sets the jenkins url"
    )
    parser.add_argument(
        "--jenkins-user", default=environ.get("JENKINS_USER", ""), help="jenkins username"
    )
    parser.add_argument(
        "--jenkins-token",
        default=environ.get("JENKINS_TOKEN", ""),
        help="token for user or root token to trigger anonymously",
    )
    parser.add_argument(
        "--jenkins-multi",
        default=environ.get("JENKINS_MULTI", ""),
        help="root folder or multibranch job name",
    )
    parser.add_argument(
        "--mappingfile",
        dest="mapping_file",
        default=environ.get("MAPPING_FILE", DEFAULT_MAPPING_FILE),
        help="path to the mapping file",
    )
    parser.add_argument(
        "--quietperiod",
        dest="quiet_period",
        default=environ.get("QUIET_PERIOD", str(DEFAULT_QUIET_PERIOD_SECONDS)),
        help="seconds to wait after the last event before triggering a job",
    )
    parser.add_argument(
        "--filematch",
        dest="file_matching",
        action="store_true",
        default=_env_flag(environ.get("FILE_MATCHING")),
        help="match mappings on changed file names as well",
    )
    parser.add_argument("--host", default=environ.get("HOST", DEFAULT_HOST))
    parser.add_argument("--port", default=environ.get("PORT", str(DEFAULT_PORT)))
    parser.add_argument(
        "--verify-tls",
        action="store_true",
        default=_env_flag(environ.get("VERIFY_TLS")),
        help="verify the build server's TLS certificate",
    )
    parser.add_argument("--log-level", default=environ.get("LOG_LEVEL", "INFO"))
    return parser


def load_settings(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Parse flags (defaulting to environment variables) into Settings.

    Raises ConfigurationError when a required value is missing or a value
    cannot be converted.
    """
    environ = os.environ if environ is None else environ
    args = _build_parser(environ).parse_args(argv)

    if not args.jenkins_url:
        raise ConfigurationError("No JENKINS_URL defined")
    if not args.jenkins_token:
        raise ConfigurationError("No JENKINS_TOKEN defined")

    try:
        return Settings(**vars(args))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
