from datetime import timedelta

import pytest
from django.utils import timezone

from core.utils.constants import (
    RequestActivityAction,
    RequestLinkType,
    RequestPriority,
    RequestStatus,
    RoleSlug,
)
from service_request.models import RequestActivity, RequestLink

pytestmark = pytest.mark.django_db

CREATE_URL = "/api/v1/request-links/"


def detail_url(token):
    return f"/api/v1/request-links/{token}/"


def submit_url(token):
    return f"/api/v1/request-links/{token}/submit/"


@pytest.fixture
def link_staff(user_factory, assign_roles):
    staff = user_factory(username="link_staff", first_name="Link", last_name="Staff")
    assign_roles(staff, RoleSlug.STAFF)
    return staff


@pytest.fixture
def issued_link(authed_client_factory, link_staff, location_factory, settings):
    settings.FRONTEND_URL = "https://desk.example.com/"
    client = authed_client_factory(link_staff)
    resp = client.post(
        CREATE_URL,
        {
            "link_type": RequestLinkType.SMS,
            "location_id": location_factory(name="Ward 4").id,
            "phone_numbers": ["+15550001", "+15550002"],
        },
        format="json",
    )
    assert resp.status_code == 201
    return resp.data["data"]


def test_create_link_binds_placeholder_request(issued_link, link_staff):
    link = RequestLink.objects.select_related("request").get(token=issued_link["token"])

    assert issued_link["url"] == f"https://desk.example.com/request/{link.token}"
    assert issued_link["phone_number"] == "+15550001"
    assert issued_link["location_name"] == "Ward 4"
    assert link.is_used is False
    assert link.expires_at - link.created_at == timedelta(days=7)
    assert link.request.status == RequestStatus.NEW
    assert link.request.title == "Request from link"
    assert link.request.service_type == "OTHER"
    assert link.request.created_by_id == link_staff.id
    assert link.request.requested_by == "Link Staff"


def test_requester_cannot_create_link(authed_client_factory, user_factory, assign_roles):
    requester = user_factory()
    assign_roles(requester, RoleSlug.REQUESTER)

    resp = authed_client_factory(requester).post(
        CREATE_URL, {"link_type": RequestLinkType.QR}, format="json"
    )

    assert resp.status_code == 403


def test_create_link_rejects_unknown_location(authed_client_factory, link_staff):
    resp = authed_client_factory(link_staff).post(
        CREATE_URL,
        {"link_type": RequestLinkType.QR, "location_id": 99999},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.data["error"] == "validation_error"
    assert not RequestLink.objects.exists()


def test_open_link_anonymously(api_client, issued_link):
    resp = api_client.get(detail_url(issued_link["token"]))

    assert resp.status_code == 200
    assert resp.data["data"]["token"] == issued_link["token"]


def test_unknown_link_returns_404(api_client):
    resp = api_client.get(detail_url("does-not-exist"))

    assert resp.status_code == 404
    assert resp.data["error"] == "not_found"


def test_submit_fills_request_and_consumes_link(api_client, issued_link):
    resp = api_client.post(
        submit_url(issued_link["token"]),
        {
            "service_type": "Plumbing",
            "title": "Sink blocked",
            "description": "Ward 4 sink",
            "priority": RequestPriority.HIGH,
            "requested_by": "Nurse Joy",
        },
        format="json",
    )

    assert resp.status_code == 200
    data = resp.data["data"]
    assert data["title"] == "Sink blocked"
    assert data["service_type"] == "Plumbing"
    assert data["priority"] == RequestPriority.HIGH
    assert data["requested_by"] == "Nurse Joy"
    assert data["status"] == RequestStatus.NEW

    link = RequestLink.objects.get(token=issued_link["token"])
    assert link.is_used is True
    actions = list(
        RequestActivity.domain.ledger_for(link.request).values_list("action", flat=True)
    )
    assert actions == [RequestActivityAction.CREATED, RequestActivityAction.UPDATED]


def test_used_link_cannot_be_reused(api_client, issued_link):
    payload = {"service_type": "Plumbing", "title": "Sink blocked"}
    assert api_client.post(submit_url(issued_link["token"]), payload, format="json").status_code == 200

    second = api_client.post(submit_url(issued_link["token"]), payload, format="json")
    opened = api_client.get(detail_url(issued_link["token"]))

    assert second.status_code == 400
    assert second.data["error"] == "link_unavailable"
    assert opened.status_code == 400


def test_expired_link_is_rejected(api_client, issued_link):
    RequestLink.objects.filter(token=issued_link["token"]).update(
        expires_at=timezone.now() - timedelta(minutes=1)
    )

    resp = api_client.post(
        submit_url(issued_link["token"]),
        {"service_type": "Plumbing", "title": "Sink blocked"},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.data["error"] == "link_unavailable"
    assert RequestLink.objects.get(token=issued_link["token"]).is_used is False


def test_submit_defaults_priority_to_medium(api_client, issued_link):
    resp = api_client.post(
        submit_url(issued_link["token"]),
        {"service_type": "Plumbing", "title": "Sink blocked"},
        format="json",
    )

    assert resp.data["data"]["priority"] == RequestPriority.MEDIUM
