import pytest

from core.utils.constants import RoleSlug
from facility.models import Block, Department, Location

pytestmark = pytest.mark.django_db

LOCATIONS_URL = "/api/v1/locations/"
BLOCKS_URL = "/api/v1/locations/blocks/"
DEPARTMENTS_URL = "/api/v1/locations/departments/"


def location_url(pk):
    return f"/api/v1/locations/{pk}/"


@pytest.fixture
def facility_users(user_factory, assign_roles):
    admin = user_factory(username="fac_admin", first_name="Admin")
    staff = user_factory(username="fac_staff", first_name="Staff")
    assign_roles(admin, RoleSlug.ADMIN)
    assign_roles(staff, RoleSlug.STAFF)
    return {"admin": admin, "staff": staff}


@pytest.fixture
def campus(department_factory, location_factory, service_request_factory):
    north = Block.objects.create(name="North Block")
    south = Block.objects.create(name="South Block")
    icu = department_factory(name="ICU")
    lab = department_factory(name="Lab")
    ward = location_factory(name="Ward 2", floor="2", block=north, department=icu)
    location_factory(name="Ward 10", floor="10", block=north, department=icu)
    location_factory(name="Old Store", floor="12", block=north, is_active=False)
    location_factory(name="Reception", floor="0", block=south, area_type="Front desk")
    service_request_factory(department=icu)
    service_request_factory(department=icu)
    return {"north": north, "south": south, "icu": icu, "lab": lab, "ward": ward}


def test_blocks_list_active_locations(authed_client_factory, facility_users, campus):
    resp = authed_client_factory(facility_users["staff"]).get(BLOCKS_URL)

    assert resp.status_code == 200
    blocks = resp.data["data"]
    assert [block["name"] for block in blocks] == ["North Block", "South Block"]
    north = blocks[0]
    assert north["areas"] == 2
    assert north["floors"] == 10
    assert {location["name"] for location in north["locations"]} == {
        "Ward 2",
        "Ward 10",
    }
    assert north["locations"][0]["department_name"] == "ICU"


def test_admin_creates_block(authed_client_factory, facility_users):
    client = authed_client_factory(facility_users["admin"])

    resp = client.post(BLOCKS_URL, {"name": " East Block "}, format="json")

    assert resp.status_code == 201
    assert resp.data["data"]["name"] == "East Block"
    assert resp.data["data"]["areas"] == 0
    assert resp.data["data"]["locations"] == []

    duplicate = client.post(BLOCKS_URL, {"name": "East Block"}, format="json")
    assert duplicate.status_code == 400


def test_staff_cannot_create_block(authed_client_factory, facility_users):
    resp = authed_client_factory(facility_users["staff"]).post(
        BLOCKS_URL, {"name": "West Block"}, format="json"
    )

    assert resp.status_code == 403
    assert not Block.objects.filter(name="West Block").exists()


def test_locations_list_hides_inactive_and_filters(
    authed_client_factory, facility_users, campus
):
    client = authed_client_factory(facility_users["staff"])

    resp = client.get(LOCATIONS_URL)
    assert resp.status_code == 200
    names = [row["name"] for row in resp.data["data"]["results"]]
    assert "Old Store" not in names
    assert len(names) == 3

    by_block = client.get(LOCATIONS_URL, {"block": campus["south"].id})
    assert [row["name"] for row in by_block.data["data"]["results"]] == ["Reception"]

    by_department = client.get(LOCATIONS_URL, {"department": campus["icu"].id})
    assert {row["name"] for row in by_department.data["data"]["results"]} == {
        "Ward 2",
        "Ward 10",
    }

    by_search = client.get(LOCATIONS_URL, {"search": "front"})
    assert [row["name"] for row in by_search.data["data"]["results"]] == ["Reception"]


def test_admin_creates_location(authed_client_factory, facility_users, campus):
    client = authed_client_factory(facility_users["admin"])
    payload = {
        "name": "Ward 3",
        "floor": "3",
        "area_type": "Ward",
        "block": campus["north"].id,
        "department": campus["icu"].id,
    }

    resp = client.post(LOCATIONS_URL, payload, format="json")

    assert resp.status_code == 201
    assert resp.data["data"]["block_name"] == "North Block"
    assert resp.data["data"]["department_name"] == "ICU"

    duplicate = client.post(LOCATIONS_URL, payload, format="json")
    assert duplicate.status_code == 400


def test_create_location_rejects_unknown_block(authed_client_factory, facility_users):
    resp = authed_client_factory(facility_users["admin"]).post(
        LOCATIONS_URL, {"name": "Nowhere", "block": 99999}, format="json"
    )

    assert resp.status_code == 400
    assert not Location.objects.filter(name="Nowhere").exists()


def test_admin_updates_location(authed_client_factory, facility_users, campus):
    resp = authed_client_factory(facility_users["admin"]).patch(
        location_url(campus["ward"].id),
        {"department": campus["lab"].id, "area_type": "Recovery"},
        format="json",
    )

    assert resp.status_code == 200
    campus["ward"].refresh_from_db()
    assert campus["ward"].department_id == campus["lab"].id
    assert campus["ward"].area_type == "Recovery"


def test_delete_location_deactivates(authed_client_factory, facility_users, campus):
    client = authed_client_factory(facility_users["admin"])

    resp = client.delete(location_url(campus["ward"].id))

    assert resp.status_code == 204
    campus["ward"].refresh_from_db()
    assert campus["ward"].is_active is False
    listed = client.get(LOCATIONS_URL)
    assert "Ward 2" not in [row["name"] for row in listed.data["data"]["results"]]


def test_staff_cannot_delete_location(authed_client_factory, facility_users, campus):
    resp = authed_client_factory(facility_users["staff"]).delete(
        location_url(campus["ward"].id)
    )

    assert resp.status_code == 403
    campus["ward"].refresh_from_db()
    assert campus["ward"].is_active is True


def test_departments_list_counts(authed_client_factory, facility_users, campus):
    resp = authed_client_factory(facility_users["staff"]).get(DEPARTMENTS_URL)

    assert resp.status_code == 200
    rows = {row["name"]: row for row in resp.data["data"]}
    assert list(rows) == ["ICU", "Lab"]
    assert rows["ICU"]["request_count"] == 2
    assert rows["ICU"]["location_count"] == 2
    assert rows["Lab"]["request_count"] == 0


def test_admin_creates_department(authed_client_factory, facility_users):
    client = authed_client_factory(facility_users["admin"])

    resp = client.post(
        DEPARTMENTS_URL, {"name": "Cardiology", "description": "Heart"}, format="json"
    )

    assert resp.status_code == 201
    assert resp.data["data"]["request_count"] == 0
    assert Department.objects.filter(name="Cardiology").exists()
    assert (
        client.post(DEPARTMENTS_URL, {"name": "Cardiology"}, format="json").status_code
        == 400
    )


def test_staff_cannot_create_department(authed_client_factory, facility_users):
    resp = authed_client_factory(facility_users["staff"]).post(
        DEPARTMENTS_URL, {"name": "Oncology"}, format="json"
    )

    assert resp.status_code == 403
