"""
Environment Config Provider - Load configuration from env vars and .env files.

Variables:
    JIRA_HOST            Jira instance URL (required)
    JIRA_USER            User name or email for basic auth
    JIRA_PASS            Password or API token
    JIRA_REST_API_V3     "true" to use /rest/api/3
    JIRA_TIMEOUT         Request timeout in seconds
    JIRA_VERIFY_SSL      "false" to skip TLS verification
    JIRA_UPLOAD_WORKERS  Concurrent attachment uploads
    JIRA_LOG_FILE        Log file path
    JIRA_LOG_LEVEL       DEBUG, INFO, WARNING, ERROR or CRITICAL
    JIRA_LOG_FORMAT      text or json
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from jira_rest.core.exceptions import ConfigurationError
from jira_rest.core.ports.config_provider import ConfigProviderPort, JiraConfig


TRUTHY = frozenset({"1", "true", "yes", "on"})


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def _as_number(key: str, value: Any, default: float, cast: type) -> Any:
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e


def config_from_mapping(values: Mapping[str, Any]) -> JiraConfig:
    """Build a JiraConfig from JIRA_* keys."""
    return JiraConfig(
        host=(values.get("JIRA_HOST") or "").rstrip("/"),
        user=values.get("JIRA_USER") or "",
        password=values.get("JIRA_PASS") or "",
        api_version="3" if _as_bool(values.get("JIRA_REST_API_V3"), False) else "2",
        timeout=_as_number("JIRA_TIMEOUT", values.get("JIRA_TIMEOUT"), 30.0, float),
        verify_ssl=_as_bool(values.get("JIRA_VERIFY_SSL"), True),
        upload_workers=_as_number("JIRA_UPLOAD_WORKERS", values.get("JIRA_UPLOAD_WORKERS"), 4, int),
        log_file=values.get("JIRA_LOG_FILE") or None,
        log_level=(values.get("JIRA_LOG_LEVEL") or "WARNING").upper(),
        log_format=(values.get("JIRA_LOG_FORMAT") or "text").lower(),
    )


def _validated(config: JiraConfig, source: str) -> JiraConfig:
    problems = config.validate()
    if problems:
        raise ConfigurationError(
            f"Invalid Jira configuration from {source}: {'; '.join(problems)}",
            problems=problems,
        )
    return config


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration from process environment, with .env as a fallback.

    Real environment variables win over values in the .env file.
    """

    def __init__(self, env_file: str | Path | None = ".env", environ: Mapping[str, str] | None = None):
        """
        Args:
            env_file: .env file to read; missing files are ignored
            environ: Environment mapping (defaults to os.environ)
        """
        self.env_file = Path(env_file) if env_file else None
        self.environ = environ if environ is not None else os.environ
        self.logger = logging.getLogger("EnvironmentConfigProvider")
        self._values: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return "environment"

    def _load_values(self) -> dict[str, Any]:
        if self._values is None:
            values: dict[str, Any] = {}
            if self.env_file and self.env_file.is_file():
                self.logger.debug(f"Reading {self.env_file}")
                values.update({k: v for k, v in dotenv_values(self.env_file).items() if v is not None})
            values.update({k: v for k, v in self.environ.items() if k.startswith("JIRA_")})
            self._values = values
        return self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._load_values().get(key, default)

    def load(self) -> JiraConfig:
        return _validated(config_from_mapping(self._load_values()), self.name)


class DictConfigProvider(ConfigProviderPort):
    """Configuration from an in-memory mapping of JIRA_* keys."""

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    @property
    def name(self) -> str:
        return "dict"

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def load(self) -> JiraConfig:
        return _validated(config_from_mapping(self._values), self.name)
