import pytest

from core.utils.constants import RoleSlug
from facility.models import ServiceType

pytestmark = pytest.mark.django_db

SERVICES_URL = "/api/v1/services/"


def service_url(pk):
    return f"/api/v1/services/{pk}/"


@pytest.fixture
def catalog_users(user_factory, assign_roles):
    admin = user_factory(username="cat_admin", first_name="Admin")
    staff = user_factory(username="cat_staff", first_name="Staff")
    assign_roles(admin, RoleSlug.ADMIN)
    assign_roles(staff, RoleSlug.STAFF)
    return {"admin": admin, "staff": staff}


@pytest.fixture
def catalog(department_factory, location_factory):
    biomed = department_factory(name="Biomedical")
    return {
        "biomed": biomed,
        "electrical": ServiceType.objects.create(name="Electrical"),
        "plumbing": ServiceType.objects.create(
            name="Plumbing", description="Leaks and blockages"
        ),
        "retired": ServiceType.objects.create(name="Fax repair", is_active=False),
        "location": location_factory(name="Workshop"),
    }


def test_list_shows_active_entries_by_name(authed_client_factory, catalog_users, catalog):
    resp = authed_client_factory(catalog_users["staff"]).get(SERVICES_URL)

    assert resp.status_code == 200
    names = [row["name"] for row in resp.data["data"]["results"]]
    assert names == ["Electrical", "Plumbing"]


def test_list_filters(authed_client_factory, catalog_users, catalog):
    client = authed_client_factory(catalog_users["staff"])

    inactive = client.get(SERVICES_URL, {"is_active": "false"})
    assert [row["name"] for row in inactive.data["data"]["results"]] == ["Fax repair"]

    searched = client.get(SERVICES_URL, {"search": "leak"})
    assert [row["name"] for row in searched.data["data"]["results"]] == ["Plumbing"]


def test_any_authenticated_user_can_add_entry(
    authed_client_factory, catalog_users, catalog
):
    resp = authed_client_factory(catalog_users["staff"]).post(
        SERVICES_URL,
        {
            "name": "  Oxygen supply ",
            "department": catalog["biomed"].id,
            "location": catalog["location"].id,
            "sla_enabled": True,
            "sla_hours": 2,
            "sla_minutes": 30,
        },
        format="json",
    )

    assert resp.status_code == 201
    data = resp.data["data"]
    assert data["name"] == "Oxygen supply"
    assert data["department_name"] == "Biomedical"
    assert data["location_name"] == "Workshop"
    assert data["block_name"] == "Main Block"
    assert data["sla_total_minutes"] == 150
    assert data["display_to_customer"] is True
    assert data["is_active"] is True


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "electrical"},
        {"name": "   "},
        {"name": "Lifts", "sla_minutes": 60},
        {"name": "Lifts", "department": 99999},
    ],
)
def test_create_rejects_invalid_payload(
    authed_client_factory, catalog_users, catalog, payload
):
    resp = authed_client_factory(catalog_users["staff"]).post(
        SERVICES_URL, payload, format="json"
    )

    assert resp.status_code == 400
    assert ServiceType.objects.count() == 3


def test_update_is_admin_only(authed_client_factory, catalog_users, catalog):
    url = service_url(catalog["plumbing"].id)

    denied = authed_client_factory(catalog_users["staff"]).patch(
        url, {"display_to_customer": False}, format="json"
    )
    assert denied.status_code == 403

    resp = authed_client_factory(catalog_users["admin"]).patch(
        url, {"display_to_customer": False, "sla_enabled": True}, format="json"
    )
    assert resp.status_code == 200
    assert resp.data["data"]["display_to_customer"] is False
    assert resp.data["data"]["sla_total_minutes"] == 0


def test_delete_unused_entry_removes_it(authed_client_factory, catalog_users, catalog):
    resp = authed_client_factory(catalog_users["admin"]).delete(
        service_url(catalog["electrical"].id)
    )

    assert resp.status_code == 200
    assert resp.data["data"]["deleted"] is True
    assert not ServiceType.objects.filter(pk=catalog["electrical"].id).exists()


def test_delete_used_entry_deactivates_it(
    authed_client_factory, catalog_users, catalog, service_request_factory
):
    service_request_factory(service_type="Plumbing")

    resp = authed_client_factory(catalog_users["admin"]).delete(
        service_url(catalog["plumbing"].id)
    )

    assert resp.status_code == 200
    assert resp.data["data"]["deleted"] is False
    catalog["plumbing"].refresh_from_db()
    assert catalog["plumbing"].is_active is False


def test_staff_cannot_delete_entry(authed_client_factory, catalog_users, catalog):
    resp = authed_client_factory(catalog_users["staff"]).delete(
        service_url(catalog["electrical"].id)
    )

    assert resp.status_code == 403
    assert ServiceType.objects.filter(pk=catalog["electrical"].id).exists()
