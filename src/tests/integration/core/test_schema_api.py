import pytest

pytestmark = pytest.mark.django_db


def test_openapi_schema_lists_request_endpoints(api_client):
    resp = api_client.get("/api/schema/", {"format": "json"})

    assert resp.status_code == 200
    paths = set(resp.json()["paths"])
    assert "/api/v1/leaderboard/" in paths
    assert "/api/v1/request-links/{token}/submit/" in paths
    for path in (
        "/api/v1/leaderboard/download/",
        "/api/v1/locations/blocks/",
        "/api/v1/locations/departments/",
        "/api/v1/services/",
        "/api/v1/system/status/",
        "/api/v1/users/",
    ):
        assert path in paths
    assert any(
        path.startswith("/api/v1/requests/{") and path.endswith("/update/")
        for path in paths
    )
