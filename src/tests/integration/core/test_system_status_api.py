import pytest

from core.utils.constants import RoleSlug
from system.models import SystemSetting
from system.services import SYSTEM_STATUS_KEY

pytestmark = pytest.mark.django_db

STATUS_URL = "/api/v1/system/status/"


@pytest.fixture
def hod(user_factory, assign_roles):
    user = user_factory(username="sys_hod", first_name="Hod")
    assign_roles(user, RoleSlug.HOD)
    return user


def test_status_defaults_to_active(authed_client_factory, user_factory):
    resp = authed_client_factory(user_factory()).get(STATUS_URL)

    assert resp.status_code == 200
    assert resp.data["data"]["is_active"] is True
    assert resp.data["data"]["updated_by"] is None
    assert SystemSetting.objects.get(key=SYSTEM_STATUS_KEY).value == "true"


def test_status_requires_authentication(api_client):
    assert api_client.get(STATUS_URL).status_code == 401


def test_manager_switches_system_off_and_on(authed_client_factory, hod):
    client = authed_client_factory(hod)

    resp = client.put(STATUS_URL, {"is_active": False}, format="json")

    assert resp.status_code == 200
    assert resp.data["data"]["is_active"] is False
    assert resp.data["data"]["updated_by"] == hod.id
    assert client.get(STATUS_URL).data["data"]["is_active"] is False

    switched_on = client.put(STATUS_URL, {"is_active": True}, format="json")
    assert switched_on.data["data"]["is_active"] is True
    assert SystemSetting.objects.filter(key=SYSTEM_STATUS_KEY).count() == 1


def test_staff_cannot_switch_system(authed_client_factory, user_factory, assign_roles):
    staff = user_factory()
    assign_roles(staff, RoleSlug.STAFF)

    resp = authed_client_factory(staff).put(
        STATUS_URL, {"is_active": False}, format="json"
    )

    assert resp.status_code == 403


def test_status_update_requires_boolean(authed_client_factory, hod):
    client = authed_client_factory(hod)

    assert client.put(STATUS_URL, {}, format="json").status_code == 400
    resp = client.put(STATUS_URL, {"is_active": "maybe"}, format="json")
    assert resp.status_code == 400
