import itertools
from collections.abc import Callable

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from account.models import User
from account.services import AccountService
from core.utils.constants import RequestPriority, RequestStatus
from facility.models import Block, Department, Location
from service_request.models import ServiceRequest


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def authed_client_factory() -> Callable[[User], APIClient]:
    def _make(user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _make


@pytest.fixture
def user_factory(db) -> Callable[..., User]:
    seq = itertools.count(1)

    def _create_user(**overrides) -> User:
        idx = next(seq)
        payload = {
            "username": f"user_{idx}",
            "password": "pass1234",
            "first_name": "User",
            "email": f"user_{idx}@example.com",
        }
        payload.update(overrides)
        return User.objects.create_user(**payload)

    return _create_user


@pytest.fixture
def assign_roles(db) -> Callable[..., User]:
    def _assign(user: User, *slugs: str) -> User:
        return AccountService.assign_roles(user, *slugs)

    return _assign


@pytest.fixture
def department_factory(db) -> Callable[..., Department]:
    seq = itertools.count(1)

    def _create_department(**overrides) -> Department:
        payload = {"name": f"Department {next(seq)}"}
        payload.update(overrides)
        return Department.objects.create(**payload)

    return _create_department


@pytest.fixture
def location_factory(db) -> Callable[..., Location]:
    seq = itertools.count(1)

    def _create_location(**overrides) -> Location:
        idx = next(seq)
        if "block" not in overrides:
            overrides["block"], _ = Block.objects.get_or_create(name="Main Block")
        payload = {"name": f"Room {idx:03d}", "floor": "1"}
        payload.update(overrides)
        return Location.objects.create(**payload)

    return _create_location


@pytest.fixture
def service_request_factory(db, user_factory) -> Callable[..., ServiceRequest]:
    seq = itertools.count(1)

    def _create_request(**overrides) -> ServiceRequest:
        idx = next(seq)
        if "created_by" not in overrides:
            overrides["created_by"] = user_factory(first_name="Creator")
        payload = {
            "request_id": f"REQ-TEST-{idx:04d}",
            "service_type": "Maintenance",
            "title": f"Request {idx}",
            "priority": RequestPriority.MEDIUM,
            "status": RequestStatus.NEW,
            "created_at": timezone.now(),
        }
        payload.update(overrides)
        return ServiceRequest.objects.create(**payload)

    return _create_request
