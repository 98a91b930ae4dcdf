"""
HTTP Transport Port - Abstract interface for the HTTP client.

The Jira client never talks to the network itself; it dispatches through a
transport injected at construction. That keeps the client testable with a
mock transport and lets callers swap in their own session configuration.

Implementations:
- RequestsTransport: requests.Session with a thread pool for async dispatch
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Optional


class TransportError(Exception):
    """Base exception for transport failures."""

    def __init__(self, message: str, request: Any = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.request = request
        self.cause = cause


class TransportConnectionError(TransportError):
    """The server could not be reached (DNS, refused connection, timeout)."""
    pass


class HttpStatusError(TransportError):
    """
    The server answered with a 4xx/5xx status.

    The response is attached so its body can still be parsed; Jira puts
    structured error detail there.
    """

    def __init__(self, message: str, response: Any, request: Any = None):
        super().__init__(message, request=request)
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class HttpTransportPort(ABC):
    """
    Abstract interface for HTTP dispatch.

    Supported options for ``request``/``request_async``/``get``:
        headers: Extra request headers.
        params: Query string parameters.
        json: Body to send as JSON.
        files: Multipart form files, as accepted by requests.
        stream: Leave the response body unread so it can be iterated.
        sink: Path or binary file object the response body is written to.

    Implementations raise ``TransportConnectionError`` when the server cannot
    be reached and ``HttpStatusError`` for 4xx/5xx responses.
    """

    @abstractmethod
    def request(self, method: str, url: str, **options: Any) -> Any:
        """
        Dispatch a request and wait for the response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Absolute URL or path relative to the configured host
            **options: See class docstring

        Returns:
            The response object
        """
        ...

    @abstractmethod
    def request_async(self, method: str, url: str, **options: Any) -> "Future[Any]":
        """
        Dispatch a request without waiting.

        Returns:
            A future resolving to the response, or failing with a
            TransportError
        """
        ...

    def get(self, url: str, **options: Any) -> Any:
        """Perform a GET request."""
        return self.request("GET", url, **options)

    def close(self) -> None:
        """Release pooled connections and workers."""
        pass
