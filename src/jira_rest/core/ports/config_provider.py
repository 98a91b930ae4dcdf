"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from env vars and .env
- DictConfigProvider: Load from an in-memory mapping
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


SUPPORTED_API_VERSIONS = ("2", "3")
LOG_FORMATS = ("text", "json")


@dataclass
class JiraConfig:
    """Connection and logging settings for a Jira instance."""

    host: str
    user: str = ""
    password: str = ""  # password or API token
    api_version: str = "2"

    # Transport
    timeout: float = 30.0
    verify_ssl: bool = True
    upload_workers: int = 4

    # Logging
    log_file: str | None = None
    log_level: str = "WARNING"
    log_format: str = "text"

    @property
    def api_uri(self) -> str:
        """Path prefix of the REST API (e.g. /rest/api/2)."""
        return f"/rest/api/{self.api_version}"

    @property
    def auth(self) -> tuple[str, str] | None:
        """Basic-auth credentials, or None for anonymous access."""
        if self.user:
            return (self.user, self.password)
        return None

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.host:
            errors.append("Missing Jira host (JIRA_HOST)")
        elif not self.host.startswith(("http://", "https://")):
            errors.append(f"Jira host must be an http(s) URL, got {self.host!r}")
        if self.user and not self.password:
            errors.append("Missing password or API token for user (JIRA_PASS)")
        if self.api_version not in SUPPORTED_API_VERSIONS:
            errors.append(
                f"Unsupported API version {self.api_version!r}, "
                f"expected one of {', '.join(SUPPORTED_API_VERSIONS)}"
            )
        if self.timeout <= 0:
            errors.append("Timeout must be positive")
        if self.upload_workers < 1:
            errors.append("Upload workers must be at least 1")
        if self.log_format not in LOG_FORMATS:
            errors.append(f"Unknown log format {self.log_format!r}")

        return errors

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return not self.validate()


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> JiraConfig:
        """
        Load configuration from source.

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If the configuration is incomplete or invalid
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific raw configuration value.

        Args:
            key: Configuration key
            default: Default value if not found
        """
        ...
