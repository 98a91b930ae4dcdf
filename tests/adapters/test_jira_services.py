"""
Tests for the endpoint services built on JiraClient.

Tests cover:
- IssueTypeService CRUD
- FieldService listing and filtering
- IssueService issues, attachments, comments, transitions and search
"""

from unittest.mock import MagicMock

import pytest

from jira_rest.adapters.jira import (
    FailureReason,
    FieldService,
    FieldType,
    IssueService,
    IssueTypeService,
    JiraClientResponse,
    RequestFailure,
)
from jira_rest.core.domain import (
    Attachment,
    Comment,
    CommentPage,
    Field,
    Issue,
    IssueFields,
    IssueType,
    Project,
    SearchResult,
    Transition,
)
from jira_rest.core.exceptions import MappingError


# =============================================================================
# IssueTypeService
# =============================================================================


class TestIssueTypeService:
    """Tests for IssueTypeService."""

    @pytest.fixture
    def service(self, client):
        return IssueTypeService(client)

    def test_get_all(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(200, [issue_type_payload])

        result = service.get_all()

        assert result.is_ok()
        types = result.unwrap()
        assert len(types) == 1
        assert isinstance(types[0], IssueType)
        assert types[0].name == "Bug"
        assert mock_transport.request.call_args.args == ("GET", "/rest/api/2/issuetype")

    def test_get(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(200, issue_type_payload)

        issue_type = service.get("1").unwrap()

        assert issue_type.id == "1"
        assert mock_transport.request.call_args.args[1] == "/rest/api/2/issuetype/1"

    def test_get_escapes_id(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(200, issue_type_payload)

        service.get("a/b")

        assert mock_transport.request.call_args.args[1] == "/rest/api/2/issuetype/a%2Fb"

    def test_get_not_found(self, service, mock_transport, http_error):
        mock_transport.request.side_effect = http_error(
            404, {"errorMessages": ["The issue type with id '99' does not exist"], "errors": {}}
        )

        result = service.get("99")

        assert result.is_err()
        response = result.unwrap_err()
        assert isinstance(response, JiraClientResponse)
        assert response.code == 404
        assert "does not exist" in response.errors[0]

    def test_create_standard_type(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(201, issue_type_payload)

        result = service.create(IssueType(name="Bug", subtask=False))

        assert result.unwrap().id == "1"
        args, kwargs = mock_transport.request.call_args
        assert args == ("POST", "/rest/api/2/issuetype")
        assert kwargs["json"] == {"name": "Bug", "type": "standard"}

    def test_create_subtask_type(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(201, {"id": "5", "subtask": True})

        service.create(IssueType(name="Sub-task", description="Part of a task", subtask=True))

        assert mock_transport.request.call_args.kwargs["json"] == {
            "name": "Sub-task",
            "description": "Part of a task",
            "type": "subtask",
        }

    def test_create_expects_201(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(200, issue_type_payload)

        result = service.create(IssueType(name="Bug"))

        assert result.is_err()
        assert result.unwrap_err().error_message == (
            'Unexpected response code, expected "201", 200 given'
        )

    def test_update(self, service, mock_transport, make_response, issue_type_payload):
        mock_transport.request.return_value = make_response(200, issue_type_payload)

        service.update("1", IssueType(name="Defect", avatar_id=10303))

        args, kwargs = mock_transport.request.call_args
        assert args == ("PUT", "/rest/api/2/issuetype/1")
        assert kwargs["json"] == {"name": "Defect", "avatarId": 10303}

    def test_delete_with_alternative(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(204)

        result = service.delete("3", alternative_id="1")

        assert result.unwrap() is True
        args = mock_transport.request.call_args.args
        assert args == ("DELETE", "/rest/api/2/issuetype/3?alternativeIssueTypeId=1")

    def test_connection_failure(self, service, mock_transport, connection_error):
        mock_transport.request.side_effect = connection_error()

        result = service.get_all()

        assert isinstance(result.unwrap_err(), RequestFailure)


# =============================================================================
# FieldService
# =============================================================================


class TestFieldService:
    """Tests for FieldService."""

    FIELDS = [
        {"id": "summary", "name": "Summary", "custom": False, "schema": {"type": "string", "system": "summary"}},
        {"id": "customfield_10010", "name": "Epic Link", "custom": True,
         "schema": {"type": "any", "custom": "com.pyxis.greenhopper.jira:gh-epic-link", "customId": 10010}},
    ]

    @pytest.fixture
    def service(self, client, mock_transport, make_response):
        mock_transport.request.return_value = make_response(200, self.FIELDS)
        return FieldService(client)

    def test_get_all(self, service):
        fields = service.get_all().unwrap()

        assert [f.id for f in fields] == ["summary", "customfield_10010"]
        assert fields[1].schema.custom_id == 10010

    def test_get_custom(self, service):
        fields = service.get_all(FieldType.CUSTOM).unwrap()

        assert [f.id for f in fields] == ["customfield_10010"]

    def test_get_system(self, service):
        fields = service.get_all(FieldType.SYSTEM).unwrap()

        assert [f.id for f in fields] == ["summary"]

    def test_create(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(201, {"id": "customfield_10100", "name": "Team"})

        field = Field(
            name="Team",
            type="com.atlassian.jira.plugin.system.customfieldtypes:textfield",
            searcher_key="com.atlassian.jira.plugin.system.customfieldtypes:textsearcher",
        )
        result = service.create(field)

        assert result.unwrap().id == "customfield_10100"
        assert mock_transport.request.call_args.kwargs["json"] == {
            "name": "Team",
            "type": "com.atlassian.jira.plugin.system.customfieldtypes:textfield",
            "searcherKey": "com.atlassian.jira.plugin.system.customfieldtypes:textsearcher",
        }


# =============================================================================
# IssueService
# =============================================================================


class TestIssueService:
    """Tests for IssueService issue CRUD."""

    @pytest.fixture
    def service(self, client):
        return IssueService(client)

    def test_get(self, service, mock_transport, make_response, issue_payload):
        mock_transport.request.return_value = make_response(200, issue_payload)

        issue = service.get("PROJ-42", fields=["summary", "status"], expand=["names"]).unwrap()

        assert isinstance(issue, Issue)
        assert issue.fields.summary == "Login fails with SSO"
        args, kwargs = mock_transport.request.call_args
        assert args == ("GET", "/rest/api/2/issue/PROJ-42")
        assert kwargs["params"] == {"fields": "summary,status", "expand": "names"}

    def test_get_without_params(self, service, mock_transport, make_response, issue_payload):
        mock_transport.request.return_value = make_response(200, issue_payload)

        service.get("PROJ-42")

        assert mock_transport.request.call_args.kwargs["params"] is None

    def test_get_escapes_key(self, service, mock_transport, make_response, issue_payload):
        mock_transport.request.return_value = make_response(200, issue_payload)

        service.get("PROJ/1")

        assert mock_transport.request.call_args.args[1] == "/rest/api/2/issue/PROJ%2F1"

    def test_create(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(
            201, {"id": "10003", "key": "PROJ-43", "self": "https://jira.example.com/rest/api/2/issue/10003"}
        )
        fields = IssueFields(
            summary="New issue",
            issue_type=IssueType(name="Task"),
            project=Project(key="PROJ"),
        ).set_custom_field("customfield_10010", "PROJ-1")

        issue = service.create(fields).unwrap()

        assert issue.key == "PROJ-43"
        assert mock_transport.request.call_args.kwargs["json"] == {
            "fields": {
                "summary": "New issue",
                "issuetype": {"name": "Task"},
                "project": {"key": "PROJ"},
                "customfield_10010": "PROJ-1",
            }
        }

    def test_create_validation_error(self, service, mock_transport, http_error):
        mock_transport.request.side_effect = http_error(
            400, {"errorMessages": [], "errors": {"project": "project is required"}}
        )

        result = service.create(IssueFields(summary="No project"))

        assert result.unwrap_err().errors[0] == "project: project is required"

    def test_update_without_notification(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(204)

        result = service.update("PROJ-42", IssueFields(summary="Renamed"), notify_users=False)

        assert result.unwrap() is True
        args, kwargs = mock_transport.request.call_args
        assert args == ("PUT", "/rest/api/2/issue/PROJ-42?notifyUsers=false")
        assert kwargs["json"] == {"fields": {"summary": "Renamed"}}

    def test_delete_with_subtasks(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(204)

        assert service.delete("PROJ-42", delete_subtasks=True).unwrap() is True
        assert mock_transport.request.call_args.args[1] == "/rest/api/2/issue/PROJ-42?deleteSubtasks=true"


class TestIssueServiceAttachments:
    """Tests for attachment upload and download."""

    @pytest.fixture
    def service(self, client):
        return IssueService(client)

    def test_add_attachments(self, service, mock_transport, tmp_path, make_response, settled):
        first = tmp_path / "log.txt"
        first.write_text("log")
        second = tmp_path / "screen.png"
        second.write_bytes(b"\x89PNG")

        def dispatch(method, url, **options):
            name = options["files"]["file"][0]
            return settled(make_response(200, [{"id": name, "filename": name}]))

        mock_transport.request_async.side_effect = dispatch

        attachments = service.add_attachments("PROJ-42", [first, second]).unwrap()

        assert [a.filename for a in attachments] == ["log.txt", "screen.png"]
        assert all(isinstance(a, Attachment) for a in attachments)
        assert mock_transport.request_async.call_args.args[1] == "/rest/api/2/issue/PROJ-42/attachments"

    def test_rejected_attachment_is_logged(self, service, mock_transport, tmp_path,
                                           settled, http_error, caplog):
        path = tmp_path / "huge.bin"
        path.write_bytes(b"0")
        mock_transport.request_async.return_value = settled(
            error=http_error(413, {"errorMessages": ["Attachment too large"]})
        )

        with caplog.at_level("WARNING", logger="IssueService"):
            attachments = service.add_attachments("PROJ-42", [path]).unwrap()

        assert attachments == []
        assert "Attachment too large" in caplog.text

    def test_nothing_to_upload(self, service):
        result = service.add_attachments("PROJ-42", [])

        assert result.unwrap_err().reason == FailureReason.NOTHING_TO_UPLOAD

    def test_download_attachment(self, service, mock_transport, make_response):
        mock_transport.get.return_value = make_response(200, text="data")
        attachment = Attachment(id="1", content="https://jira.example.com/secure/attachment/1/log.txt")

        result = service.download_attachment(attachment)

        assert result.is_ok()
        mock_transport.get.assert_called_once_with(attachment.content, stream=True)

    def test_download_attachment_without_content(self, service):
        with pytest.raises(ValueError):
            service.download_attachment(Attachment(id="1"))


class TestIssueServiceComments:
    @pytest.fixture
    def service(self, client):
        return IssueService(client)

    def test_add_comment(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(
            201, {"id": "100", "body": "Looks good", "author": {"name": "alice"}}
        )

        comment = service.add_comment("PROJ-42", Comment(body="Looks good")).unwrap()

        assert comment.id == "100"
        assert comment.author.name == "alice"
        args, kwargs = mock_transport.request.call_args
        assert args == ("POST", "/rest/api/2/issue/PROJ-42/comment")
        assert kwargs["json"] == {"body": "Looks good"}

    def test_get_comments(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(
            200, {"startAt": 10, "maxResults": 10, "total": 11, "comments": [{"id": "11"}]}
        )

        page = service.get_comments("PROJ-42", start_at=10, max_results=10).unwrap()

        assert isinstance(page, CommentPage)
        assert page.total == 11
        assert page.comments[0].id == "11"
        assert mock_transport.request.call_args.kwargs["params"] == {"startAt": 10, "maxResults": 10}


class TestIssueServiceTransitions:
    @pytest.fixture
    def service(self, client):
        return IssueService(client)

    def test_get_transitions(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(
            200,
            {"transitions": [{"id": "31", "name": "Done", "to": {"id": "10001", "name": "Done"}}]},
        )

        transitions = service.get_transitions("PROJ-42").unwrap()

        assert transitions == [
            Transition(id="31", name="Done", to=transitions[0].to),
        ]
        assert transitions[0].to.name == "Done"

    def test_get_transitions_rejects_non_object_body(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(200, [{"id": "31"}])

        with pytest.raises(MappingError, match="expected a JSON object"):
            service.get_transitions("PROJ-42")

    def test_transition_with_fields(self, service, mock_transport, make_response):
        mock_transport.request.return_value = make_response(204)

        result = service.transition("PROJ-42", "31", IssueFields(labels=["released"]))

        assert result.unwrap() is True
        assert mock_transport.request.call_args.kwargs["json"] == {
            "transition": {"id": "31"},
            "fields": {"labels": ["released"]},
        }


class TestIssueServiceSearch:
    @pytest.fixture
    def service(self, client):
        return IssueService(client)

    def test_search(self, service, mock_transport, make_response, issue_payload):
        mock_transport.request.return_value = make_response(
            200, {"startAt": 0, "maxResults": 50, "total": 1, "issues": [issue_payload]}
        )

        page = service.search("project = PROJ", fields=["summary"]).unwrap()

        assert isinstance(page, SearchResult)
        assert page.total == 1
        assert page.issues[0].key == "PROJ-42"
        args, kwargs = mock_transport.request.call_args
        assert args == ("POST", "/rest/api/2/search")
        assert kwargs["json"] == {
            "jql": "project = PROJ",
            "startAt": 0,
            "maxResults": 50,
            "fields": ["summary"],
        }

    def test_blank_jql_raises(self, service):
        with pytest.raises(ValueError):
            service.search("  ")

    def test_search_error(self, service, mock_transport, http_error):
        mock_transport.request.side_effect = http_error(
            400, {"errorMessages": ["Error in the JQL Query"], "errors": {}}
        )

        result = service.search("project = = PROJ")

        assert result.is_err()
        assert result.unwrap_err().errors == [
            "Error in the JQL Query",
            'Unexpected response code, expected "200", 400 given',
        ]
