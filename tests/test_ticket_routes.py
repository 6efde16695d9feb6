from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from helpdesk.core.config import Settings
from helpdesk.dependencies import tickets as ticket_deps
from helpdesk.main import create_app
from helpdesk.tickets.errors import BusinessRuleViolationError
from helpdesk.tickets.models import Ticket, TicketStatus

TICKET_BODY = {
    "userId": "user-001",
    "subject": "Payment issue",
    "description": "I was charged twice for the same order.",
}


def _create(client, **overrides):
    response = client.post("/tickets", json={**TICKET_BODY, **overrides})
    assert response.status_code == 201
    return response.json()


def _comment(client, ticket_id, content, visibility, author_id="agent-123"):
    return client.post(
        f"/tickets/{ticket_id}/comments",
        json={"authorId": author_id, "content": content, "visibility": visibility},
    )


def test_ping(client):
    assert client.get("/ping").json() == {"status": "ok"}


def test_create_ticket_returns_camel_case_representation(client):
    body = _create(client)

    assert set(body) == {
        "ticketId",
        "subject",
        "description",
        "status",
        "userId",
        "assigneeId",
        "createdAt",
        "updatedAt",
        "comments",
    }
    assert body["status"] == "open"
    assert body["userId"] == "user-001"
    assert body["assigneeId"] == "agent-123"
    assert body["comments"] == []


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"subject": "s", "description": "d"}, "userId: User ID is required and cannot be empty"),
        ({**TICKET_BODY, "subject": "   "}, "subject: Subject is required and cannot be empty"),
        ({**TICKET_BODY, "description": ""}, "description: Description is required and cannot be empty"),
    ],
)
def test_create_ticket_validation_errors(client, payload, expected):
    response = client.post("/tickets", json=payload)

    assert response.status_code == 400
    assert response.json() == {"code": "VALIDATION_ERROR", "message": expected}


def test_create_ticket_reports_every_blank_field(client):
    response = client.post("/tickets", json={})

    assert response.status_code == 400
    message = response.json()["message"]
    assert "userId: User ID is required and cannot be empty" in message
    assert "subject: Subject is required and cannot be empty" in message
    assert "description: Description is required and cannot be empty" in message


def test_malformed_json_is_a_validation_error(client):
    response = client.post(
        "/tickets", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_update_status_serializes_lowercase(client):
    ticket = _create(client)

    response = client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "IN_PROGRESS"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "in_progress"
    assert body["createdAt"] == ticket["createdAt"]


def test_update_closed_ticket_is_a_conflict(client):
    ticket = _create(client)
    assert client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "closed"}).status_code == 200

    response = client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "in_progress"})

    assert response.status_code == 409
    assert response.json() == {"code": "BUSINESS_RULE_VIOLATION", "message": "Cannot update closed ticket"}


def test_update_status_with_invalid_value(client):
    ticket = _create(client)

    response = client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "bogus"})

    assert response.status_code == 400
    assert response.json() == {
        "code": "INVALID_ARGUMENT",
        "message": "Invalid status value 'bogus'. Valid values are: open, in_progress, resolved, closed",
    }


def test_update_status_requires_value(client):
    ticket = _create(client)

    response = client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": " "})

    assert response.status_code == 400
    assert response.json() == {
        "code": "VALIDATION_ERROR",
        "message": "status: Status is required and cannot be empty",
    }


def test_update_status_missing_value(client):
    ticket = _create(client)

    response = client.patch(f"/tickets/{ticket['ticketId']}/status", json={})

    assert response.status_code == 400
    assert response.json() == {
        "code": "VALIDATION_ERROR",
        "message": "status: Status is required and cannot be empty",
    }


@pytest.mark.parametrize("ticket_id", [str(uuid4()), "not-a-uuid"])
def test_unknown_ticket_is_not_found(client, ticket_id):
    status_response = client.patch(f"/tickets/{ticket_id}/status", json={"status": "closed"})
    comment_response = _comment(client, ticket_id, "hello", "public")

    for response in (status_response, comment_response):
        assert response.status_code == 404
        assert response.json() == {
            "code": "RESOURCE_NOT_FOUND",
            "message": "The requested resource was not found",
        }


def test_add_comment_returns_ticket_with_comment(client):
    ticket = _create(client)

    response = _comment(client, ticket["ticketId"], "Escalating to billing", "INTERNAL")

    assert response.status_code == 201
    comment = response.json()["comments"][0]
    assert comment["visibility"] == "internal"
    assert comment["ticketId"] == ticket["ticketId"]
    assert comment["authorId"] == "agent-123"
    assert set(comment) == {"commentId", "ticketId", "authorId", "content", "visibility", "createdAt"}


def test_add_comment_with_invalid_visibility(client):
    ticket = _create(client)

    response = _comment(client, ticket["ticketId"], "hello", "sideways")

    assert response.status_code == 400
    assert response.json() == {
        "code": "INVALID_ARGUMENT",
        "message": "Invalid visibility value 'sideways'. Valid values are: public, internal",
    }


def test_add_comment_validation(client):
    ticket = _create(client)

    response = client.post(
        f"/tickets/{ticket['ticketId']}/comments",
        json={"authorId": "", "content": "hello", "visibility": "public"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "authorId: Author ID is required and cannot be empty"


def test_add_comment_missing_fields_use_wire_names(client):
    ticket = _create(client)

    response = client.post(f"/tickets/{ticket['ticketId']}/comments", json={"visibility": "public"})

    assert response.status_code == 400
    assert response.json() == {
        "code": "VALIDATION_ERROR",
        "message": (
            "authorId: Author ID is required and cannot be empty, "
            "content: Content is required and cannot be empty"
        ),
    }


def test_add_comment_missing_visibility(client):
    ticket = _create(client)

    response = client.post(
        f"/tickets/{ticket['ticketId']}/comments",
        json={"authorId": "agent-123", "content": "hello"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "visibility: Field required"


def test_listing_applies_comment_visibility(client):
    ticket = _create(client)
    _comment(client, ticket["ticketId"], "Public comment", "public")
    _comment(client, ticket["ticketId"], "Internal comment", "internal")
    _create(client, userId="user-002")

    customer = client.get("/tickets", params={"userId": "user-001"}).json()
    agent = client.get("/tickets", params={"assigneeId": "agent-123"}).json()
    everything = client.get("/tickets").json()

    assert len(customer) == 1
    assert [c["content"] for c in customer[0]["comments"]] == ["Public comment"]
    assert customer[0]["comments"][0]["visibility"] == "public"
    assert len(agent) == 2
    mine = next(t for t in agent if t["ticketId"] == ticket["ticketId"])
    assert {c["visibility"] for c in mine["comments"]} == {"public", "internal"}
    mine = next(t for t in everything if t["ticketId"] == ticket["ticketId"])
    assert len(mine["comments"]) == 2


def test_listing_filters_by_status(client):
    ticket = _create(client)
    _create(client)
    client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "resolved"})

    resolved = client.get("/tickets", params={"status": "RESOLVED"}).json()

    assert [t["ticketId"] for t in resolved] == [ticket["ticketId"]]
    assert client.get("/tickets", params={"userId": "nobody"}).json() == []


def test_metrics_endpoint_reports_ticket_counters(client):
    ticket = _create(client)
    _comment(client, ticket["ticketId"], "hi", "public")
    client.patch(f"/tickets/{ticket['ticketId']}/status", json={"status": "bogus"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "tickets_created_total 1.0" in response.text
    assert 'ticket_comments_total{visibility="public"} 1.0' in response.text
    assert (
        'ticket_operation_failures_total{operation="update_status",code="INVALID_ARGUMENT"} 1.0'
        in response.text
    )


def test_customer_prefix_setting_restricts_internal_comments():
    app = create_app(Settings(_env_file=None, customer_author_prefix="user-"))
    with TestClient(app) as client:
        ticket = _create(client)
        response = _comment(client, ticket["ticketId"], "secret", "internal", author_id="user-001")

    assert response.status_code == 400
    assert response.json() == {"code": "INVALID_ARGUMENT", "message": "Users can only post public comments"}


def test_routes_delegate_to_overridden_service():
    app = create_app(Settings(_env_file=None))
    service = MagicMock()
    now = datetime.now(timezone.utc)
    ticket_id = uuid4()
    service.update_status.side_effect = BusinessRuleViolationError("Cannot update closed ticket")
    service.list_tickets.return_value = [
        Ticket(
            ticket_id=ticket_id,
            subject="Subject",
            description="Body",
            status=TicketStatus.RESOLVED,
            user_id="user-001",
            assignee_id=None,
            created_at=now,
            updated_at=now,
        )
    ]
    app.dependency_overrides[ticket_deps.get_ticket_service] = lambda: service
    client = TestClient(app)

    listed = client.get("/tickets", params={"status": "resolved", "assigneeId": "agent-1"})
    conflict = client.patch(f"/tickets/{ticket_id}/status", json={"status": "open"})

    assert listed.status_code == 200
    assert listed.json()[0]["status"] == "resolved"
    assert listed.json()[0]["assigneeId"] is None
    service.list_tickets.assert_called_once_with(status="resolved", user_id=None, assignee_id="agent-1")
    assert conflict.status_code == 409
    service.update_status.assert_called_once_with(ticket_id, "open")
