"""
Domain Entities - Records mirroring the Jira REST API JSON schema.

Records are passive: every field is optional and left as None until a
payload fills it. Attribute names are snake_case; the JSON key lives in the
field metadata when it differs. Serialization back to JSON goes through
``JsonMapper.to_json`` which drops empty fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def json_field(key: str) -> Any:
    """Declare an optional field stored under a different JSON key."""
    return field(default=None, metadata={"json": key})


def catch_all() -> Any:
    """Declare the field that collects keys the record does not define."""
    return field(default_factory=dict, metadata={"extra": True})


@dataclass
class IssueType:
    """An issue type (Bug, Story, Sub-task, ...)."""

    self_url: str | None = json_field("self")
    id: str | None = None
    description: str | None = None
    icon_url: str | None = json_field("iconUrl")
    name: str | None = None
    subtask: bool | None = None
    avatar_id: int | None = json_field("avatarId")


@dataclass
class User:
    """A Jira user (reporter, assignee, comment author)."""

    self_url: str | None = json_field("self")
    account_id: str | None = json_field("accountId")
    name: str | None = None
    key: str | None = None
    email_address: str | None = json_field("emailAddress")
    display_name: str | None = json_field("displayName")
    active: bool | None = None
    time_zone: str | None = json_field("timeZone")
    avatar_urls: dict[str, str] | None = json_field("avatarUrls")


@dataclass
class Project:
    self_url: str | None = json_field("self")
    id: str | None = None
    key: str | None = None
    name: str | None = None
    project_type_key: str | None = json_field("projectTypeKey")
    avatar_urls: dict[str, str] | None = json_field("avatarUrls")


@dataclass
class Priority:
    self_url: str | None = json_field("self")
    id: str | None = None
    name: str | None = None
    icon_url: str | None = json_field("iconUrl")
    status_color: str | None = json_field("statusColor")
    description: str | None = None


@dataclass
class IssueStatus:
    self_url: str | None = json_field("self")
    id: str | None = None
    name: str | None = None
    description: str | None = None
    icon_url: str | None = json_field("iconUrl")
    status_category: dict[str, Any] | None = json_field("statusCategory")


@dataclass
class Version:
    self_url: str | None = json_field("self")
    id: str | None = None
    name: str | None = None
    description: str | None = None
    archived: bool | None = None
    released: bool | None = None
    release_date: str | None = json_field("releaseDate")


@dataclass
class Component:
    self_url: str | None = json_field("self")
    id: str | None = None
    name: str | None = None
    description: str | None = None


@dataclass
class Comment:
    """A comment on an issue."""

    self_url: str | None = json_field("self")
    id: str | None = None
    author: User | None = None
    body: Any = None  # plain text on v2, ADF document on v3
    update_author: User | None = json_field("updateAuthor")
    created: str | None = None
    updated: str | None = None
    visibility: dict[str, str] | None = None


@dataclass
class Attachment:
    """File metadata returned by the attachments endpoint."""

    self_url: str | None = json_field("self")
    id: str | None = None
    filename: str | None = None
    author: User | None = None
    created: str | None = None
    size: int | None = None
    mime_type: str | None = json_field("mimeType")
    content: str | None = None
    thumbnail: str | None = None


@dataclass
class FieldSchema:
    type: str | None = None
    items: str | None = None
    system: str | None = None
    custom: str | None = None
    custom_id: int | None = json_field("customId")


@dataclass
class Field:
    """A system or custom field definition."""

    id: str | None = None
    key: str | None = None
    name: str | None = None
    custom: bool | None = None
    orderable: bool | None = None
    navigable: bool | None = None
    searchable: bool | None = None
    clause_names: list[str] | None = json_field("clauseNames")
    schema: FieldSchema | None = None

    # Only used when creating a custom field
    description: str | None = None
    type: str | None = None
    searcher_key: str | None = json_field("searcherKey")


@dataclass
class CommentPage:
    """Paged comment listing as returned by ``issue/{key}/comment``."""

    start_at: int | None = json_field("startAt")
    max_results: int | None = json_field("maxResults")
    total: int | None = None
    comments: list[Comment] | None = None


@dataclass
class IssueFields:
    """
    The ``fields`` object of an issue.

    Custom fields (``customfield_10010`` and friends) are not declared; they
    are kept in ``custom_fields`` and written back at the top level.
    """

    summary: str | None = None
    description: Any = None
    issue_type: IssueType | None = json_field("issuetype")
    project: Project | None = None
    reporter: User | None = None
    assignee: User | None = None
    priority: Priority | None = None
    status: IssueStatus | None = None
    labels: list[str] | None = None
    versions: list[Version] | None = None
    fix_versions: list[Version] | None = json_field("fixVersions")
    components: list[Component] | None = None
    attachment: list[Attachment] | None = None
    comment: CommentPage | None = None
    created: str | None = None
    updated: str | None = None
    due_date: str | None = json_field("duedate")
    environment: Any = None
    parent: dict[str, Any] | None = None

    custom_fields: dict[str, Any] = catch_all()

    def set_custom_field(self, field_id: str, value: Any) -> IssueFields:
        self.custom_fields[field_id] = value
        return self


@dataclass
class Transition:
    id: str | None = None
    name: str | None = None
    to: IssueStatus | None = None
    fields: dict[str, Any] | None = None


@dataclass
class Issue:
    """An issue with its fields."""

    self_url: str | None = json_field("self")
    id: str | None = None
    key: str | None = None
    expand: str | None = None
    fields: IssueFields | None = None
    rendered_fields: dict[str, Any] | None = json_field("renderedFields")
    names: dict[str, str] | None = None
    schema: dict[str, Any] | None = None
    transitions: list[Transition] | None = None


@dataclass
class SearchResult:
    """One page of a JQL search. Paging is left to the caller."""

    expand: str | None = None
    start_at: int | None = json_field("startAt")
    max_results: int | None = json_field("maxResults")
    total: int | None = None
    issues: list[Issue] | None = None
