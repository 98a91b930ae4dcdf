"""
Requests Transport - HttpTransportPort implementation over requests.

Synchronous calls go straight through a pooled ``requests.Session``.
Asynchronous calls are submitted to a thread pool and come back as
``concurrent.futures.Future`` objects.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, BinaryIO, Union

import requests
from requests.adapters import HTTPAdapter

from jira_rest.core.ports.config_provider import JiraConfig
from jira_rest.core.ports.transport import (
    HttpStatusError,
    HttpTransportPort,
    TransportConnectionError,
)


Sink = Union[str, Path, BinaryIO]


class RequestsTransport(HttpTransportPort):
    """
    HTTP transport backed by a requests Session.

    Features:
    - Base URL resolution for relative paths
    - Basic authentication and SSL verification settings
    - Connection pooling
    - Thread pool for concurrent dispatch (created on first use)
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_WORKERS = 4
    DEFAULT_POOL_CONNECTIONS = 10
    DEFAULT_POOL_MAXSIZE = 10
    DOWNLOAD_CHUNK_SIZE = 8192

    def __init__(
        self,
        base_url: str,
        auth: tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Jira instance URL (e.g., https://company.atlassian.net)
            auth: Optional (user, password or API token) for basic auth
            headers: Headers sent with every request
            timeout: Request timeout in seconds
            verify: Verify the server's TLS certificate
            max_workers: Thread pool size for async requests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_workers = max_workers
        self.logger = logging.getLogger("RequestsTransport")

        self._session = requests.Session()
        self._session.auth = auth
        self._session.verify = verify
        if headers:
            self._session.headers.update(headers)

        adapter = HTTPAdapter(
            pool_connections=self.DEFAULT_POOL_CONNECTIONS,
            pool_maxsize=max(self.DEFAULT_POOL_MAXSIZE, max_workers),
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: JiraConfig) -> "RequestsTransport":
        """Build a transport from a JiraConfig."""
        return cls(
            base_url=config.host,
            auth=config.auth,
            timeout=config.timeout,
            verify=config.verify_ssl,
            max_workers=config.upload_workers,
        )

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def resolve_url(self, url: str) -> str:
        """Resolve a path against the base URL; absolute URLs pass through."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: Any = None,
        json: Any = None,
        files: Any = None,
        stream: bool = False,
        sink: Sink | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        """
        Dispatch a request and wait for the response.

        Raises:
            TransportConnectionError: On connection errors and timeouts
            HttpStatusError: On 4xx/5xx responses
        """
        full_url = self.resolve_url(url)

        try:
            response = self._session.request(
                method,
                full_url,
                headers=headers,
                params=params,
                json=json,
                files=files,
                stream=stream or sink is not None,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise TransportConnectionError(
                f"Could not reach {full_url}: {e}",
                request=e.request,
                cause=e,
            ) from e

        if response.status_code >= 400:
            raise HttpStatusError(
                f"{method} {full_url} failed with status {response.status_code}",
                response=response,
                request=response.request,
            )

        if sink is not None:
            self._write_sink(response, sink)

        return response

    def request_async(self, method: str, url: str, **options: Any) -> "Future[requests.Response]":
        """Submit a request to the thread pool."""
        return self._get_executor().submit(self.request, method, url, **options)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="jira-rest",
                )
            return self._executor

    def _write_sink(self, response: requests.Response, sink: Sink) -> None:
        """Write the response body to a path or binary file object."""
        if hasattr(sink, "write"):
            for chunk in response.iter_content(chunk_size=self.DOWNLOAD_CHUNK_SIZE):
                sink.write(chunk)  # type: ignore[union-attr]
            return

        with open(sink, "wb") as fh:  # type: ignore[arg-type]
            for chunk in response.iter_content(chunk_size=self.DOWNLOAD_CHUNK_SIZE):
                fh.write(chunk)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the session and wait for pending async requests."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None
        self._session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
