"""
Jira API Client - Request, upload and download executors for the Jira REST API.

This handles the HTTP conversation with Jira through an injected transport.
The services (IssueService, IssueTypeService, FieldService) use it to bind
individual endpoints.

Outcomes come back as Results:
- Connection failures are logged at CRITICAL and returned as Err(RequestFailure)
- HTTP error responses are logged at ERROR and still parsed and returned,
  since Jira puts structured error detail in the body
- Status-code classification is left to ``extract_errors``
"""

import dataclasses
from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import Future, wait
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Optional, TypeVar, Union

from jira_rest.core.mapper import JsonMapper, filter_empty
from jira_rest.core.ports.config_provider import JiraConfig
from jira_rest.core.ports.transport import (
    HttpStatusError,
    HttpTransportPort,
    TransportConnectionError,
)
from jira_rest.core.result import Err, Ok, Result
from jira_rest.logging import ContextLogger

from .response import FailureReason, JiraClientResponse, RequestFailure


T = TypeVar("T")

DEFAULT_API_URI = "/rest/api/2"

# Payload goes in the query string for reads and in a JSON body for writes
QUERY_METHODS = frozenset({"GET"})
BODY_METHODS = frozenset({"POST", "PUT", "DELETE"})

DEFAULT_HEADERS = {
    "Accept": "*/*",
    "Content-Type": "application/json",
    "charset": "UTF-8",
}

UPLOAD_HEADERS = {
    "X-Atlassian-Token": "no-check",
}

# Longest request/response body kept in a log record
LOG_BODY_LIMIT = 4096

FileMap = Union[Mapping[Union[str, int], Union[str, Path]], Sequence[Union[str, Path]]]
ExecuteResult = Result[JiraClientResponse, RequestFailure]


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    body = str(body)
    if len(body) > LOG_BODY_LIMIT:
        return body[:LOG_BODY_LIMIT] + f"... ({len(body)} chars)"
    return body


def _headers(message: Any) -> dict[str, Any]:
    return dict(getattr(message, "headers", None) or {})


class JiraClient:
    """
    Jira REST API client.

    Example:
        >>> client = JiraClient(config, RequestsTransport.from_config(config))
        >>> result = client.execute("issuetype")
        >>> if result.is_ok():
        ...     print(result.unwrap().data)
    """

    def __init__(
        self,
        configuration: Optional[JiraConfig],
        transport: HttpTransportPort,
        log: Any = None,
    ):
        """
        Initialize the Jira client.

        Args:
            configuration: Jira configuration (selects the API version)
            transport: HTTP transport performing the network I/O
            log: Logger; any ``logging.Logger``-compatible object (Logger,
                LoggerAdapter) is wrapped in a ContextLogger so that
                request context can be attached to records
        """
        self.configuration = configuration
        self.transport = transport

        if log is None:
            log = ContextLogger("JiraClient")
        elif not isinstance(log, ContextLogger):
            log = ContextLogger(log)
        self.log = log

        self.api_uri = configuration.api_uri if configuration else DEFAULT_API_URI
        self.json_mapper = JsonMapper(
            logger=self.log,
            undefined_property_handler=self._handle_undefined_property,
        )

    def _handle_undefined_property(self, cls: type, key: str, value: Any) -> None:
        self.log.debug("Handle undefined property", record=cls.__name__, property=key)

    # -------------------------------------------------------------------------
    # Request Executor
    # -------------------------------------------------------------------------

    def execute(
        self,
        context: str,
        payload: Any = None,
        method: str = "GET",
    ) -> ExecuteResult:
        """
        Execute a REST request.

        Args:
            context: Resource path relative to the API root (e.g. 'issue/PROJ-1')
            payload: Query parameters for GET, JSON body for POST/PUT/DELETE.
                Records are serialized with empty fields removed.
            method: HTTP method

        Returns:
            Ok(JiraClientResponse), including for 4xx/5xx responses, or
            Err(RequestFailure) when the server could not be reached
        """
        method = method.upper()
        url = self.create_url_by_context(context)

        options: dict[str, Any] = {"headers": dict(DEFAULT_HEADERS)}
        data = self._prepare_payload(payload)
        if method in QUERY_METHODS:
            options["params"] = data
        elif method in BODY_METHODS:
            options["json"] = data

        self.log.debug("JiraRestApi request", method=method, url=url, options=options)

        try:
            response = self.transport.request(method, url, **options)
        except TransportConnectionError as e:
            self.log.critical(
                "JiraRestApi connection exception", method=method, url=url, error=str(e)
            )
            return Err(RequestFailure(FailureReason.CONNECTION, str(e), url=url, cause=e))
        except HttpStatusError as e:
            self._log_http_error(e, method=method, url=url, options=options)
            response = e.response
        else:
            self.log.debug(
                "JiraRestApi response",
                status=response.status_code,
                headers=_headers(response),
                body=_body_text(response.text),
            )

        return Ok(self.parse_response(response))

    def _prepare_payload(self, payload: Any) -> Any:
        if payload is None:
            return None
        if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            return self.json_mapper.to_json(payload)
        if isinstance(payload, list) and any(dataclasses.is_dataclass(item) for item in payload):
            return self.json_mapper.to_json(payload)
        return payload

    def _log_http_error(self, error: HttpStatusError, **context: Any) -> None:
        self.log.error(
            f"JiraRestApi response fail with code: {error.status_code}",
            status=error.status_code,
            request_body=_body_text(getattr(error.request, "body", None)),
            request_headers=_headers(error.request),
            response_body=_body_text(getattr(error.response, "text", None)),
            **context,
        )

    # -------------------------------------------------------------------------
    # File Upload Executor
    # -------------------------------------------------------------------------

    def upload(self, context: str, files: FileMap) -> Result[list[JiraClientResponse], RequestFailure]:
        """
        Upload files as multipart form data, one concurrent request per file.

        Files that do not exist are logged and skipped. The call returns once
        every request has settled.

        Args:
            context: Resource path (e.g. 'issue/PROJ-1/attachments')
            files: Mapping of name to path, or a sequence of paths. String
                names become the uploaded filename; integer keys and
                sequence entries use the file's own name.

        Returns:
            Ok(list of parsed responses) in input order, leaving out requests
            that never reached the server, or Err(RequestFailure) when no
            files were given
        """
        url = self.create_url_by_context(context)

        if not files:
            return Err(
                RequestFailure(FailureReason.NOTHING_TO_UPLOAD, "No files to upload", url=url)
            )

        entries: Iterable[tuple[Union[str, int], Union[str, Path]]] = (
            files.items() if isinstance(files, Mapping) else enumerate(files)
        )

        pending: list[tuple[str, Future[Any]]] = []

        with ExitStack() as stack:
            try:
                for name, file_path in entries:
                    path = Path(file_path)
                    if not path.is_file():
                        self.log.error(
                            f'JiraRestApi: Unable to upload file "{path}". File not found',
                            url=url,
                            path=str(path),
                        )
                        continue

                    filename = name if isinstance(name, str) else path.name
                    handle: BinaryIO = stack.enter_context(path.open("rb"))
                    options = {
                        "headers": dict(UPLOAD_HEADERS),
                        "files": {"file": (filename, handle)},
                    }

                    self.log.info(
                        "JiraRestApi requestAsync", method="POST", url=url, upload_name=filename
                    )
                    pending.append((filename, self.transport.request_async("POST", url, **options)))
            finally:
                # Join everything submitted before the handles close, even when
                # a later dispatch raised. One failure does not cancel the others
                wait([future for _, future in pending])

        results = []
        for filename, future in pending:
            response = self._settle_upload(future, url=url, upload_name=filename)
            if response is not None:
                results.append(self.parse_response(response))

        return Ok(results)

    def _settle_upload(self, future: "Future[Any]", **context: Any) -> Any:
        error = future.exception()

        if error is None:
            response = future.result()
            self.log.info(
                "JiraRestApi responseAsync",
                status=response.status_code,
                headers=_headers(response),
                body=_body_text(response.text),
                **context,
            )
            return response

        if isinstance(error, TransportConnectionError):
            self.log.critical("JiraRestApi connection exception", error=str(error), **context)
            return None

        if isinstance(error, HttpStatusError):
            self._log_http_error(error, method="POST", **context)
            return error.response

        raise error

    # -------------------------------------------------------------------------
    # Download Executor
    # -------------------------------------------------------------------------

    def download(
        self,
        from_url: str,
        destination: Union[str, Path, BinaryIO, None] = None,
    ) -> Result[Any, RequestFailure]:
        """
        Fetch a resource (e.g. attachment content) with the client's credentials.

        Args:
            from_url: Absolute URL or host-relative path
            destination: Path or binary file object to write the body to.
                Without one the response is returned with its body unread,
                ready for ``iter_content``.

        Returns:
            Ok(raw response), including for 4xx/5xx responses, or
            Err(RequestFailure) when the server could not be reached
        """
        options: dict[str, Any] = (
            {"stream": True} if destination is None else {"sink": destination}
        )

        self.log.info("JiraRestApi request", method="GET", url=from_url, options=options)

        try:
            response = self.transport.get(from_url, **options)
        except TransportConnectionError as e:
            self.log.critical(
                "JiraRestApi connection exception", method="GET", url=from_url, error=str(e)
            )
            return Err(RequestFailure(FailureReason.CONNECTION, str(e), url=from_url, cause=e))
        except HttpStatusError as e:
            self.log.error(
                f"JiraRestApi response fail with code: {e.status_code}",
                method="GET",
                url=from_url,
                status=e.status_code,
                request_body=_body_text(getattr(e.request, "body", None)),
                request_headers=_headers(e.request),
            )
            response = e.response
        else:
            self.log.info(
                "JiraRestApi response", status=response.status_code, headers=_headers(response)
            )

        return Ok(response)

    # -------------------------------------------------------------------------
    # Response Handling
    # -------------------------------------------------------------------------

    def parse_response(self, raw_response: Any) -> JiraClientResponse:
        """Wrap and parse a raw response."""
        return JiraClientResponse(raw_response, self.log).parse()

    def extract_errors(
        self,
        result: ExecuteResult,
        response_codes: Iterable[int] = (200,),
        callback: Optional[Callable[[JiraClientResponse], T]] = None,
    ) -> Result[T, Union[JiraClientResponse, RequestFailure]]:
        """
        Classify an executed request.

        Args:
            result: Outcome of ``execute``
            response_codes: Status codes that mean success for this endpoint
            callback: Builds the value from a successful response
                (defaults to the decoded body)

        Returns:
            Ok(callback(response)) when the status is expected and the server
            reported no errors; Err(response) with the error flagged
            otherwise. Transport failures pass through unchanged.
        """
        if result.is_err():
            return result  # type: ignore[return-value]

        response = result.unwrap()
        if not response.expect_codes(response_codes) or response.has_errors():
            return Err(response)

        if callback is None:
            return Ok(response.data)
        return Ok(callback(response))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def filter_empty(self, value: Any, predicate: Optional[Callable[[Any], bool]] = None) -> Any:
        """Recursively drop empty values (see ``jira_rest.core.mapper.filter_empty``)."""
        return filter_empty(value, predicate)

    def create_url_by_context(self, context: str) -> str:
        """Build the API path for a resource (a single leading slash is dropped)."""
        if context.startswith("/"):
            context = context[1:]
        return f"{self.api_uri}/{context}"
