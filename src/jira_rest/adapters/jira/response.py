"""
Jira Client Response - Normalized wrapper around a raw HTTP response.

The wrapper carries the status code, the decoded JSON body (when there is
one) and any errors, whether reported by the server in Jira's error payload
or flagged later by the caller (unexpected status code).
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FailureReason(Enum):
    """Why a request produced no response at all."""

    CONNECTION = "connection"
    NOTHING_TO_UPLOAD = "nothing_to_upload"


@dataclass
class RequestFailure:
    """
    Returned (inside ``Err``) when no HTTP response is available.

    Attributes:
        reason: Failure category
        message: Human-readable description
        url: Target URL, when known
        cause: Underlying exception, when there was one
    """

    reason: FailureReason
    message: str
    url: Optional[str] = None
    cause: Optional[Exception] = None

    @property
    def error_message(self) -> str:
        return self.message

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


class JiraClientResponse:
    """
    Parsed HTTP response.

    Jira reports failures as::

        {"errorMessages": ["Issue does not exist"], "errors": {"summary": "required"}}

    Both parts end up in ``errors`` as plain strings.
    """

    def __init__(self, raw_response: Any, log: Any = None):
        self.raw = raw_response
        self.log = log or logging.getLogger("JiraClientResponse")
        self.code: int = raw_response.status_code
        self.data: Any = None
        self.errors: list[str] = []

    def parse(self) -> "JiraClientResponse":
        """
        Decode the body. Empty or non-JSON bodies leave ``data`` as None.

        Returns:
            self, for chaining
        """
        body = self.raw.text
        if not body:
            return self

        try:
            self.data = self.raw.json()
        except ValueError:
            self.log.debug(f"JiraRestApi response body is not JSON (status {self.code})")
            self.data = None
            return self

        if isinstance(self.data, dict):
            self._collect_server_errors(self.data)

        return self

    def _collect_server_errors(self, data: dict[str, Any]) -> None:
        messages = data.get("errorMessages")
        if isinstance(messages, list):
            self.errors.extend(str(message) for message in messages if message)

        field_errors = data.get("errors")
        if isinstance(field_errors, dict):
            self.errors.extend(f"{field}: {message}" for field, message in field_errors.items())

    @property
    def headers(self) -> dict[str, str]:
        return dict(getattr(self.raw, "headers", None) or {})

    def has_errors(self) -> bool:
        """Check if the server or the caller flagged this response."""
        return bool(self.errors)

    def set_error(self, message: str) -> None:
        """Flag a logical error on this response."""
        self.errors.append(message)

    def expect_codes(self, response_codes: Iterable[int]) -> bool:
        """
        Check the status code against the codes the caller expects.

        Flags an error naming both when it does not match.
        """
        codes = tuple(response_codes)
        if self.code in codes:
            return True
        self.set_error(
            f'Unexpected response code, expected "{", ".join(str(c) for c in codes)}", '
            f"{self.code} given"
        )
        return False

    @property
    def error_message(self) -> str:
        return "; ".join(self.errors)

    def __repr__(self) -> str:
        return f"JiraClientResponse(code={self.code}, errors={self.errors!r})"
