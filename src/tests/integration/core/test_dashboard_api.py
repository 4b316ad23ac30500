from datetime import timedelta

import pytest
from django.db import DatabaseError
from django.utils import timezone

from core.utils.constants import RequestActivityAction, RequestStatus, RoleSlug
from service_request.services_analytics import RequestAnalyticsService, time_ago

pytestmark = pytest.mark.django_db

STATS_URL = "/api/v1/dashboard/stats/"
METRICS_URL = "/api/v1/dashboard/metrics/"


@pytest.fixture
def dashboard_users(user_factory, assign_roles):
    admin = user_factory(username="dash_admin", first_name="Admin")
    staff = user_factory(username="dash_staff", first_name="Staff")
    inactive_staff = user_factory(username="dash_gone", first_name="Gone", is_active=False)
    requester = user_factory(username="dash_requester", first_name="Requester")
    assign_roles(admin, RoleSlug.ADMIN)
    assign_roles(staff, RoleSlug.STAFF)
    assign_roles(inactive_staff, RoleSlug.STAFF)
    assign_roles(requester, RoleSlug.REQUESTER)
    return {"admin": admin, "staff": staff, "requester": requester}


def test_dashboard_requires_authentication(
    api_client, authed_client_factory, dashboard_users
):
    assert api_client.get(STATS_URL).status_code == 401
    assert api_client.get(METRICS_URL).status_code == 401

    client = authed_client_factory(dashboard_users["requester"])
    assert client.get(STATS_URL).status_code == 200
    assert client.get(METRICS_URL).status_code == 200


def test_dashboard_stats(authed_client_factory, dashboard_users, service_request_factory):
    now = timezone.now()
    done = service_request_factory(
        title="Done today",
        status=RequestStatus.COMPLETED,
        created_at=now - timedelta(minutes=3),
        completed_at=now - timedelta(minutes=1),
    )
    service_request_factory(title="Open today", created_at=now - timedelta(minutes=2))
    service_request_factory(
        title="Old completed",
        status=RequestStatus.COMPLETED,
        created_at=now - timedelta(days=3),
        completed_at=now - timedelta(days=2),
    )
    done.add_activity(
        action=RequestActivityAction.STATUS_CHANGED,
        description="Status changed from IN_PROGRESS to COMPLETED",
        user_id=dashboard_users["staff"].id,
        from_status=RequestStatus.IN_PROGRESS,
        to_status=RequestStatus.COMPLETED,
        created_at=now - timedelta(minutes=1),
    )

    resp = authed_client_factory(dashboard_users["admin"]).get(STATS_URL)

    assert resp.status_code == 200
    data = resp.data["data"]
    assert data["total_requests_today"] == 2
    assert data["completed_requests_today"] == 1
    assert data["total_completed"] == 2
    assert data["active_staff"] == 2
    assert data["average_response_minutes"] == 2
    assert data["recent_activities"][0]["request_id"] == done.request_id
    assert data["recent_activities"][0]["user"] == "Staff"
    assert data["recent_activities"][0]["time"] == "1 minute ago"


def test_request_metrics(authed_client_factory, dashboard_users, service_request_factory):
    now = timezone.now()
    service_request_factory(service_type="IT", created_at=now)
    service_request_factory(service_type="IT", created_at=now)
    service_request_factory(
        service_type="Plumbing",
        status=RequestStatus.COMPLETED,
        created_at=now,
        completed_at=now,
    )
    service_request_factory(service_type="Old", created_at=now - timedelta(days=30))

    resp = authed_client_factory(dashboard_users["admin"]).get(METRICS_URL, {"days": 3})

    assert resp.status_code == 200
    data = resp.data["data"]
    assert data["days"] == 3
    assert data["total_requests"] == 3
    assert data["completed_requests"] == 1
    assert data["work_hours"] == 2 * 3 * 8
    assert data["average_requests_per_staff"] == 1.5
    assert len(data["chart_data"]) == 3
    assert sum(point["value"] for point in data["chart_data"]) == 3
    assert data["requests_by_service_type"] == [
        {"type": "IT", "count": 2},
        {"type": "Plumbing", "count": 1},
    ]


def test_request_metrics_rejects_bad_days(authed_client_factory, dashboard_users):
    resp = authed_client_factory(dashboard_users["admin"]).get(METRICS_URL, {"days": 0})

    assert resp.status_code == 400


def test_dashboard_degrades_on_storage_error(
    authed_client_factory, dashboard_users, monkeypatch
):
    def broken(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(RequestAnalyticsService, "_dashboard_stats", broken)
    monkeypatch.setattr(RequestAnalyticsService, "_request_metrics", broken)
    client = authed_client_factory(dashboard_users["admin"])

    stats = client.get(STATS_URL)
    metrics = client.get(METRICS_URL, {"days": 5})

    assert stats.status_code == 200
    assert stats.data["data"] == RequestAnalyticsService.empty_dashboard()
    assert metrics.status_code == 200
    assert metrics.data["data"] == RequestAnalyticsService.empty_metrics(5)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=59), "59 minutes ago"),
        (timedelta(hours=2), "2 hours ago"),
        (timedelta(days=1, hours=1), "1 day ago"),
    ],
)
def test_time_ago(delta, expected):
    now = timezone.now()

    assert time_ago(now - delta, now=now) == expected
