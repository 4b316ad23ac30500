import pytest
from django.core.exceptions import ValidationError

from core.utils.constants import RequestActivityAction, RequestStatus
from service_request.models import RequestActivity, ServiceRequest

pytestmark = pytest.mark.django_db


def test_request_activity_is_append_only(service_request_factory):
    service_request = service_request_factory()
    activity = service_request.add_activity(
        action=RequestActivityAction.STATUS_CHANGED,
        from_status=RequestStatus.NEW,
        to_status=RequestStatus.ASSIGNED,
        description="Status changed from NEW to ASSIGNED",
    )

    activity.description = "mutate"
    with pytest.raises(ValidationError):
        activity.save()

    with pytest.raises(ValidationError):
        RequestActivity.objects.filter(pk=activity.pk).update(description="mutate")

    with pytest.raises(ValidationError):
        activity.delete()

    with pytest.raises(ValidationError):
        RequestActivity.objects.filter(pk=activity.pk).delete()

    assert RequestActivity.objects.filter(pk=activity.pk).count() == 1


def test_deleting_request_removes_its_ledger(service_request_factory):
    service_request = service_request_factory()
    service_request.add_activity(
        action=RequestActivityAction.CREATED, to_status=RequestStatus.NEW
    )

    service_request.delete()

    assert not ServiceRequest.objects.filter(pk=service_request.pk).exists()
    assert RequestActivity.objects.count() == 0
