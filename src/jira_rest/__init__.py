"""
jira_rest - Typed client for the Jira REST API.

Maps Jira resources onto dataclass records, executes requests through an
injected HTTP transport and reports outcomes as Ok/Err results.
"""

from .adapters.http import RequestsTransport
from .adapters.jira import (
    FailureReason,
    FieldService,
    FieldType,
    IssueService,
    IssueTypeService,
    JiraClient,
    JiraClientResponse,
    RequestFailure,
)
from .core.exceptions import ConfigurationError, JiraRestError, MappingError
from .core.mapper import JsonMapper, filter_empty
from .core.ports.config_provider import JiraConfig
from .core.result import Err, Ok, Result, ResultError
from .core.services import create_client, load_config

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "Err",
    "FailureReason",
    "FieldService",
    "FieldType",
    "IssueService",
    "IssueTypeService",
    "JiraClient",
    "JiraClientResponse",
    "JiraConfig",
    "JiraRestError",
    "JsonMapper",
    "MappingError",
    "Ok",
    "RequestFailure",
    "RequestsTransport",
    "Result",
    "ResultError",
    "create_client",
    "filter_empty",
    "load_config",
    "__version__",
]
