"""
Shared pytest fixtures for the jira_rest test suite.

Fixture Categories:
- Configuration: JiraConfig
- Transport: mock transport, response factories, settled futures
- Client: JiraClient wired to the mock transport
- Data: sample Jira payloads
"""

from __future__ import annotations

import json
from concurrent.futures import Future
from typing import Any
from unittest.mock import MagicMock

import pytest

from jira_rest.adapters.jira import JiraClient
from jira_rest.core.ports.config_provider import JiraConfig
from jira_rest.core.ports.transport import (
    HttpStatusError,
    HttpTransportPort,
    TransportConnectionError,
)


# =============================================================================
# Helpers
# =============================================================================


def _make_response(
    status_code: int = 200,
    body: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """
    Build a requests-like response.

    ``body`` is JSON-encoded into ``text``; pass ``text`` directly for
    non-JSON bodies.
    """
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = headers or {"Content-Type": "application/json"}

    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text

    def decode():
        return json.loads(text)

    response.json.side_effect = decode
    return response


def _http_error(status_code: int, body: Any = None) -> HttpStatusError:
    """Build the error a transport raises for a 4xx/5xx response."""
    response = _make_response(status_code, body)
    request = MagicMock()
    request.body = b'{"fields": {}}'
    request.headers = {"Content-Type": "application/json"}
    return HttpStatusError(f"failed with {status_code}", response=response, request=request)


def _settled(response: Any = None, error: Exception | None = None) -> Future:
    """Build an already-settled future."""
    future: Future = Future()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(response)
    return future


def _connection_error() -> TransportConnectionError:
    return TransportConnectionError("Could not reach jira.example.com: Name or service not known")


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def jira_config() -> JiraConfig:
    """A valid v2 configuration."""
    return JiraConfig(
        host="https://jira.example.com",
        user="jira-bot",
        password="secret-token",
    )


# =============================================================================
# Transport & Client
# =============================================================================


@pytest.fixture
def mock_transport() -> MagicMock:
    """Transport mock honouring the HttpTransportPort interface."""
    transport = MagicMock(spec=HttpTransportPort)
    transport.request.return_value = _make_response(200, {})
    return transport


@pytest.fixture
def client(jira_config, mock_transport) -> JiraClient:
    """JiraClient wired to the mock transport."""
    return JiraClient(jira_config, mock_transport)


# =============================================================================
# Sample Payloads
# =============================================================================


@pytest.fixture
def issue_type_payload() -> dict[str, Any]:
    return {
        "self": "https://jira.example.com/rest/api/2/issuetype/1",
        "id": "1",
        "description": "A problem which impairs or prevents the functions of the product.",
        "iconUrl": "https://jira.example.com/images/icons/bug.png",
        "name": "Bug",
        "subtask": False,
        "avatarId": 10303,
    }


@pytest.fixture
def issue_payload(issue_type_payload) -> dict[str, Any]:
    return {
        "expand": "renderedFields,names,schema",
        "id": "10002",
        "self": "https://jira.example.com/rest/api/2/issue/10002",
        "key": "PROJ-42",
        "fields": {
            "summary": "Login fails with SSO",
            "description": "Steps to reproduce...",
            "issuetype": issue_type_payload,
            "project": {"id": "10000", "key": "PROJ", "name": "Project"},
            "reporter": {"name": "alice", "displayName": "Alice", "active": True},
            "labels": ["sso", "login"],
            "fixVersions": [{"id": "10100", "name": "1.2.0", "released": False}],
            "comment": {
                "startAt": 0,
                "maxResults": 1,
                "total": 1,
                "comments": [{"id": "1", "body": "Seen on staging", "author": {"name": "bob"}}],
            },
            "customfield_10010": "PROJ-1",
            "customfield_10020": {"value": "High"},
        },
    }


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def make_response():
    """Factory for requests-like responses."""
    return _make_response


@pytest.fixture
def http_error():
    """Factory for HttpStatusError carrying a response."""
    return _http_error


@pytest.fixture
def settled():
    """Factory for already-settled futures."""
    return _settled


@pytest.fixture
def connection_error():
    """Factory for TransportConnectionError."""
    return _connection_error
