import pytest

from account.models import User
from core.utils.constants import RoleSlug

pytestmark = pytest.mark.django_db

USERS_URL = "/api/v1/users/"


def user_url(pk):
    return f"/api/v1/users/{pk}/"


@pytest.fixture
def people(user_factory, assign_roles, department_factory):
    icu = department_factory(name="ICU")
    lab = department_factory(name="Lab")
    hod = user_factory(username="um_hod", first_name="Hana", department=icu)
    staff = user_factory(username="um_staff", first_name="Sam", department=lab)
    nurse = user_factory(username="um_nurse", first_name="Nora", department=icu)
    requester = user_factory(username="um_requester", first_name="Rita")
    retired = user_factory(username="um_retired", first_name="Otto", is_active=False)
    assign_roles(hod, RoleSlug.HOD)
    assign_roles(staff, RoleSlug.STAFF)
    assign_roles(nurse, RoleSlug.STAFF)
    assign_roles(requester, RoleSlug.REQUESTER)
    return {
        "icu": icu,
        "lab": lab,
        "hod": hod,
        "staff": staff,
        "nurse": nurse,
        "requester": requester,
        "retired": retired,
    }


def test_list_users_grouped_by_department(authed_client_factory, people):
    resp = authed_client_factory(people["staff"]).get(USERS_URL)

    assert resp.status_code == 200
    data = resp.data["data"]
    assert data["total"] == 5
    groups = [
        (group["name"], [user["first_name"] for user in group["users"]])
        for group in data["by_department"]
    ]
    assert groups == [
        ("ICU", ["Hana", "Nora"]),
        ("Lab", ["Sam"]),
        (None, ["Otto", "Rita"]),
    ]


def test_list_users_filters(authed_client_factory, people):
    client = authed_client_factory(people["hod"])

    by_role = client.get(USERS_URL, {"role": RoleSlug.STAFF})
    assert [user["first_name"] for user in by_role.data["data"]["users"]] == [
        "Nora",
        "Sam",
    ]

    inactive = client.get(USERS_URL, {"is_active": "false"})
    assert [user["first_name"] for user in inactive.data["data"]["users"]] == ["Otto"]

    searched = client.get(USERS_URL, {"search": "um_req"})
    assert [user["first_name"] for user in searched.data["data"]["users"]] == ["Rita"]


def test_requester_cannot_list_users(authed_client_factory, people):
    assert authed_client_factory(people["requester"]).get(USERS_URL).status_code == 403


def test_manager_creates_user_with_role(api_client, authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).post(
        USERS_URL,
        {
            "email": "New.Tech@Example.com",
            "password": "secret123",
            "first_name": "New",
            "last_name": "Tech",
            "role": RoleSlug.STAFF,
            "department": people["lab"].id,
        },
        format="json",
    )

    assert resp.status_code == 201
    data = resp.data["data"]
    assert data["email"] == "new.tech@example.com"
    assert data["username"] == "new.tech@example.com"
    assert data["department_name"] == "Lab"
    assert [role["slug"] for role in data["roles"]] == [RoleSlug.STAFF]

    login = api_client.post(
        "/api/v1/auth/login/",
        {"username": "new.tech@example.com", "password": "secret123"},
        format="json",
    )
    assert login.status_code == 200


def test_create_defaults_to_staff_role(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).post(
        USERS_URL,
        {
            "email": "plain@example.com",
            "password": "secret123",
            "first_name": "Plain",
            "last_name": "User",
            "username": "plain",
        },
        format="json",
    )

    assert resp.status_code == 201
    assert resp.data["data"]["username"] == "plain"
    assert [role["slug"] for role in resp.data["data"]["roles"]] == [RoleSlug.STAFF]


def test_create_rejects_duplicate_email(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).post(
        USERS_URL,
        {
            "email": people["staff"].email.upper(),
            "password": "secret123",
            "first_name": "Copy",
            "last_name": "Cat",
        },
        format="json",
    )

    assert resp.status_code == 400
    assert resp.data["error"] == "validation_error"


def test_staff_cannot_create_user(authed_client_factory, people):
    resp = authed_client_factory(people["staff"]).post(
        USERS_URL,
        {
            "email": "blocked@example.com",
            "password": "secret123",
            "first_name": "Blocked",
            "last_name": "User",
        },
        format="json",
    )

    assert resp.status_code == 403
    assert not User.objects.filter(email="blocked@example.com").exists()


def test_manager_updates_role_department_and_password(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).put(
        user_url(people["nurse"].id),
        {
            "role": RoleSlug.HOD,
            "department": people["lab"].id,
            "password": "changed123",
            "last_name": "Senior",
        },
        format="json",
    )

    assert resp.status_code == 200
    assert [role["slug"] for role in resp.data["data"]["roles"]] == [RoleSlug.HOD]
    nurse = User.objects.get(pk=people["nurse"].id)
    assert nurse.department_id == people["lab"].id
    assert nurse.last_name == "Senior"
    assert nurse.check_password("changed123")


def test_manager_deactivates_user(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).patch(
        user_url(people["staff"].id), {"is_active": False}, format="json"
    )

    assert resp.status_code == 200
    assert resp.data["data"]["is_active"] is False


def test_manager_cannot_deactivate_self(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).patch(
        user_url(people["hod"].id), {"is_active": False}, format="json"
    )

    assert resp.status_code == 400
    people["hod"].refresh_from_db()
    assert people["hod"].is_active is True


def test_update_unknown_user_returns_404(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).patch(
        user_url(999999), {"first_name": "Ghost"}, format="json"
    )

    assert resp.status_code == 404


def test_empty_update_is_rejected(authed_client_factory, people):
    resp = authed_client_factory(people["hod"]).patch(
        user_url(people["staff"].id), {}, format="json"
    )

    assert resp.status_code == 400
