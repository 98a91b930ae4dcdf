"""
Field Service - Bindings for the ``field`` endpoints.
"""

from enum import Enum
from typing import Union

from jira_rest.core.domain.entities import Field
from jira_rest.core.result import Result

from .client import JiraClient
from .response import JiraClientResponse, RequestFailure


Failure = Union[JiraClientResponse, RequestFailure]


class FieldType(Enum):
    """Which fields ``get_all`` returns."""

    ALL = "all"
    SYSTEM = "system"
    CUSTOM = "custom"


class FieldService:
    """List system and custom fields, create custom fields."""

    URI = "field"

    def __init__(self, client: JiraClient):
        self.client = client
        self.mapper = client.json_mapper

    def get_all(self, field_type: FieldType = FieldType.ALL) -> Result[list[Field], Failure]:
        result = self.client.execute(self.URI)
        fields = self.client.extract_errors(
            result, [200], lambda r: self.mapper.map_list(r.data, Field)
        )

        if field_type is FieldType.ALL:
            return fields
        want_custom = field_type is FieldType.CUSTOM
        return fields.map(lambda items: [f for f in items if bool(f.custom) == want_custom])

    def create(self, field: Field) -> Result[Field, Failure]:
        """
        Create a custom field.

        ``name`` and ``type`` are required by Jira; ``searcher_key`` and
        ``description`` are optional.
        """
        result = self.client.execute(self.URI, field, "POST")
        return self.client.extract_errors(result, [201], lambda r: self.mapper.map(r.data, Field))
