"""
Jira adapter - REST client and endpoint services for Atlassian Jira.

- JiraClient: Request, upload and download executors
- JiraClientResponse: Parsed response with error classification
- IssueService, IssueTypeService, FieldService: Endpoint bindings
"""

from .client import JiraClient
from .field_service import FieldService, FieldType
from .issue_service import IssueService
from .issue_type_service import IssueTypeService
from .response import FailureReason, JiraClientResponse, RequestFailure

__all__ = [
    # Client
    "JiraClient",
    "JiraClientResponse",
    "RequestFailure",
    "FailureReason",
    # Services
    "IssueService",
    "IssueTypeService",
    "FieldService",
    "FieldType",
]
