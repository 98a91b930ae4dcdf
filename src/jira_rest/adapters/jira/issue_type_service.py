"""
Issue Type Service - Bindings for the ``issuetype`` endpoints.
"""

from typing import Optional, Union
from urllib.parse import quote, urlencode

from jira_rest.core.domain.entities import IssueType
from jira_rest.core.result import Result

from .client import JiraClient
from .response import JiraClientResponse, RequestFailure


Failure = Union[JiraClientResponse, RequestFailure]


class IssueTypeService:
    """Read and manage issue types."""

    URI = "issuetype"

    def __init__(self, client: JiraClient):
        self.client = client
        self.mapper = client.json_mapper

    def _type_uri(self, issue_type_id: str) -> str:
        return f"{self.URI}/{quote(str(issue_type_id), safe='')}"

    def get_all(self) -> Result[list[IssueType], Failure]:
        """Fetch every issue type visible to the user."""
        result = self.client.execute(self.URI)
        return self.client.extract_errors(
            result, [200], lambda r: self.mapper.map_list(r.data, IssueType)
        )

    def get(self, issue_type_id: str) -> Result[IssueType, Failure]:
        result = self.client.execute(self._type_uri(issue_type_id))
        return self.client.extract_errors(
            result, [200], lambda r: self.mapper.map(r.data, IssueType)
        )

    def create(self, issue_type: IssueType) -> Result[IssueType, Failure]:
        """
        Create an issue type.

        Only name, description and type are sent; Jira derives the rest. The
        type is given by ``subtask`` (True for a sub-task type).
        """
        payload = {
            "name": issue_type.name,
            "description": issue_type.description,
            "type": "subtask" if issue_type.subtask else "standard",
        }
        result = self.client.execute(self.URI, self.client.filter_empty(payload), "POST")
        return self.client.extract_errors(
            result, [201], lambda r: self.mapper.map(r.data, IssueType)
        )

    def update(self, issue_type_id: str, issue_type: IssueType) -> Result[IssueType, Failure]:
        payload = {
            "name": issue_type.name,
            "description": issue_type.description,
            "avatarId": issue_type.avatar_id,
        }
        result = self.client.execute(
            self._type_uri(issue_type_id), self.client.filter_empty(payload), "PUT"
        )
        return self.client.extract_errors(
            result, [200], lambda r: self.mapper.map(r.data, IssueType)
        )

    def delete(
        self,
        issue_type_id: str,
        alternative_id: Optional[str] = None,
    ) -> Result[bool, Failure]:
        """
        Delete an issue type.

        Args:
            issue_type_id: Type to delete
            alternative_id: Type that existing issues are moved to
        """
        context = self._type_uri(issue_type_id)
        if alternative_id is not None:
            context += "?" + urlencode({"alternativeIssueTypeId": alternative_id})

        result = self.client.execute(context, method="DELETE")
        return self.client.extract_errors(result, [204], lambda r: True)
