"""
Issue Service - Bindings for the ``issue`` and ``search`` endpoints.

Covers issue CRUD, attachments, comments, transitions and JQL search.
Search paging is passed through as-is; fetching further pages is up to the
caller.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union
from urllib.parse import quote, urlencode

from jira_rest.core.domain.entities import (
    Attachment,
    Comment,
    CommentPage,
    Issue,
    IssueFields,
    SearchResult,
    Transition,
)
from jira_rest.core.exceptions import MappingError
from jira_rest.core.result import Ok, Result

from .client import FileMap, JiraClient
from .response import JiraClientResponse, RequestFailure


Failure = Union[JiraClientResponse, RequestFailure]


def _transition_items(data: Any) -> Any:
    """Unwrap ``{"transitions": [...]}``."""
    if not isinstance(data, Mapping):
        raise MappingError(
            f"Cannot read transitions from {type(data).__name__}, expected a JSON object"
        )
    return data.get("transitions", [])


class IssueService:
    """Issue operations built on JiraClient."""

    URI = "issue"

    def __init__(self, client: JiraClient):
        self.client = client
        self.mapper = client.json_mapper
        self.logger = logging.getLogger("IssueService")

    def _issue_uri(self, issue_key: str, *parts: str) -> str:
        return "/".join([self.URI, quote(issue_key, safe=""), *parts])

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def get(
        self,
        issue_key: str,
        fields: Optional[list[str]] = None,
        expand: Optional[list[str]] = None,
    ) -> Result[Issue, Failure]:
        """
        Fetch an issue.

        Args:
            issue_key: Issue key or id (e.g. 'PROJ-123')
            fields: Restrict the returned fields
            expand: Extra sections to expand (e.g. ['renderedFields', 'names'])
        """
        params = {}
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = ",".join(expand)

        result = self.client.execute(self._issue_uri(issue_key), params or None)
        return self.client.extract_errors(result, [200], lambda r: self.mapper.map(r.data, Issue))

    def create(self, issue_fields: IssueFields) -> Result[Issue, Failure]:
        """
        Create an issue.

        Returns:
            Ok(Issue) holding the new id, key and self link
        """
        payload = {"fields": self.mapper.to_json(issue_fields)}
        result = self.client.execute(self.URI, payload, "POST")
        return self.client.extract_errors(result, [201], lambda r: self.mapper.map(r.data, Issue))

    def update(
        self,
        issue_key: str,
        issue_fields: IssueFields,
        notify_users: bool = True,
    ) -> Result[bool, Failure]:
        """Update the given (non-empty) fields of an issue."""
        context = self._issue_uri(issue_key)
        if not notify_users:
            context += "?" + urlencode({"notifyUsers": "false"})

        payload = {"fields": self.mapper.to_json(issue_fields)}
        result = self.client.execute(context, payload, "PUT")
        return self.client.extract_errors(result, [204], lambda r: True)

    def delete(self, issue_key: str, delete_subtasks: bool = False) -> Result[bool, Failure]:
        """Delete an issue. Issues with subtasks need ``delete_subtasks``."""
        context = self._issue_uri(issue_key)
        if delete_subtasks:
            context += "?" + urlencode({"deleteSubtasks": "true"})

        result = self.client.execute(context, method="DELETE")
        return self.client.extract_errors(result, [204], lambda r: True)

    # -------------------------------------------------------------------------
    # Attachments
    # -------------------------------------------------------------------------

    def add_attachments(self, issue_key: str, files: FileMap) -> Result[list[Attachment], Failure]:
        """
        Attach files to an issue.

        Each file is its own request; files that are missing locally or
        rejected by the server are logged and left out.

        Returns:
            Ok(list of created attachments) in input order
        """
        uploaded = self.client.upload(self._issue_uri(issue_key, "attachments"), files)
        if uploaded.is_err():
            return uploaded  # type: ignore[return-value]

        attachments: list[Attachment] = []
        for response in uploaded.unwrap():
            result = self.client.extract_errors(
                Ok(response), [200], lambda r: self.mapper.map_list(r.data, Attachment)
            )
            if result.is_ok():
                attachments.extend(result.unwrap())
            else:
                self.logger.warning(
                    f"Attachment upload to {issue_key} rejected: {response.error_message}"
                )
        return Ok(attachments)

    def download_attachment(
        self,
        attachment: Attachment,
        destination: Union[str, Path, BinaryIO, None] = None,
    ) -> Result[Any, RequestFailure]:
        """
        Download attachment content.

        Raises:
            ValueError: If the attachment has no content URL
        """
        if not attachment.content:
            raise ValueError(f"Attachment {attachment.id or attachment.filename} has no content URL")
        return self.client.download(attachment.content, destination)

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def add_comment(self, issue_key: str, comment: Comment) -> Result[Comment, Failure]:
        result = self.client.execute(self._issue_uri(issue_key, "comment"), comment, "POST")
        return self.client.extract_errors(result, [201], lambda r: self.mapper.map(r.data, Comment))

    def get_comments(
        self,
        issue_key: str,
        start_at: int = 0,
        max_results: int = 50,
    ) -> Result[CommentPage, Failure]:
        params = {"startAt": start_at, "maxResults": max_results}
        result = self.client.execute(self._issue_uri(issue_key, "comment"), params)
        return self.client.extract_errors(
            result, [200], lambda r: self.mapper.map(r.data, CommentPage)
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def get_transitions(self, issue_key: str) -> Result[list[Transition], Failure]:
        result = self.client.execute(self._issue_uri(issue_key, "transitions"))
        return self.client.extract_errors(
            result,
            [200],
            lambda r: self.mapper.map_list(_transition_items(r.data), Transition),
        )

    def transition(
        self,
        issue_key: str,
        transition_id: str,
        fields: Optional[IssueFields] = None,
    ) -> Result[bool, Failure]:
        """Move an issue through a workflow transition."""
        payload: dict[str, Any] = {"transition": {"id": transition_id}}
        if fields is not None:
            payload["fields"] = self.mapper.to_json(fields)

        result = self.client.execute(self._issue_uri(issue_key, "transitions"), payload, "POST")
        return self.client.extract_errors(result, [204], lambda r: True)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = 50,
        fields: Optional[list[str]] = None,
        expand: Optional[list[str]] = None,
    ) -> Result[SearchResult, Failure]:
        """
        Run a JQL query and return one page of results.

        Args:
            jql: The JQL query string
            start_at: Index of the first issue to return
            max_results: Page size
            fields: Fields to include (Jira's default set when omitted)
            expand: Sections to expand

        Raises:
            ValueError: If the query is blank
        """
        if not jql.strip():
            raise ValueError("JQL query must not be empty")

        payload: dict[str, Any] = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
        }
        if fields:
            payload["fields"] = fields
        if expand:
            payload["expand"] = expand

        result = self.client.execute("search", payload, "POST")
        return self.client.extract_errors(
            result, [200], lambda r: self.mapper.map(r.data, SearchResult)
        )
