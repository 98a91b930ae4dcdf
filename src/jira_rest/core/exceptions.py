"""
Exceptions for errors the client does not expect to recover from.

Transport failures and unexpected status codes are not exceptions; they come
back as ``Err`` values (see ``jira_rest.core.result``).
"""

from typing import Optional


class JiraRestError(Exception):
    """Base exception for jira_rest."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(JiraRestError):
    """Configuration is missing or invalid."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.problems = problems or []


class MappingError(JiraRestError):
    """A payload could not be mapped onto a record."""
    pass
