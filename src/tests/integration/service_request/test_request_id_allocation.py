import re
from datetime import datetime, timezone as dt_timezone

import pytest

from core.api.exceptions import DomainValidationError
from service_request.services_workflow import ServiceRequestWorkflowService

pytestmark = pytest.mark.django_db

NOW = datetime(2025, 2, 1, 12, 0, tzinfo=dt_timezone.utc)


def test_generated_id_format():
    request_id = ServiceRequestWorkflowService.generate_request_id(now=NOW)

    assert re.fullmatch(r"REQ-2025-\d{4}", request_id)


def test_allocation_retries_on_collision(service_request_factory, monkeypatch):
    service_request_factory(request_id="REQ-2025-0001")
    candidates = iter(["REQ-2025-0001", "REQ-2025-0001", "REQ-2025-0002"])
    monkeypatch.setattr(
        ServiceRequestWorkflowService,
        "generate_request_id",
        staticmethod(lambda now=None: next(candidates)),
    )

    assert ServiceRequestWorkflowService.allocate_request_id(now=NOW) == "REQ-2025-0002"


def test_allocation_gives_up_after_max_attempts(
    service_request_factory, monkeypatch, settings
):
    settings.REQUEST_ID_MAX_ATTEMPTS = 3
    service_request_factory(request_id="REQ-2025-0001")
    calls = []

    def always_taken(now=None):
        calls.append(now)
        return "REQ-2025-0001"

    monkeypatch.setattr(
        ServiceRequestWorkflowService, "generate_request_id", staticmethod(always_taken)
    )

    with pytest.raises(DomainValidationError):
        ServiceRequestWorkflowService.allocate_request_id(now=NOW)
    assert len(calls) == 3
