"""
Domain layer - typed records for Jira REST resources.
"""

from .entities import (
    Attachment,
    Comment,
    CommentPage,
    Component,
    Field,
    FieldSchema,
    Issue,
    IssueFields,
    IssueStatus,
    IssueType,
    Priority,
    Project,
    SearchResult,
    Transition,
    User,
    Version,
)

__all__ = [
    "Attachment",
    "Comment",
    "CommentPage",
    "Component",
    "Field",
    "FieldSchema",
    "Issue",
    "IssueFields",
    "IssueStatus",
    "IssueType",
    "Priority",
    "Project",
    "SearchResult",
    "Transition",
    "User",
    "Version",
]
