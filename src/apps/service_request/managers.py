from __future__ import annotations

from django.db import models
from django.db.models import Q

from core.models import AppendOnlyQuerySet
from core.utils.constants import RequestStatus


class ServiceRequestQuerySet(models.QuerySet):
    def completed(self):
        return self.filter(status=RequestStatus.COMPLETED, completed_at__isnull=False)

    def completed_between(self, *, start=None, end=None):
        queryset = self.completed()
        if start is not None:
            queryset = queryset.filter(completed_at__gte=start)
        if end is not None:
            queryset = queryset.filter(completed_at__lt=end)
        return queryset

    def scheduled(self):
        return self.filter(scheduled_date__isnull=False)

    def for_department(self, department):
        if department is None:
            return self
        if isinstance(department, int) or str(department).isdigit():
            return self.filter(department_id=int(department))
        return self.filter(department__name__iexact=str(department))

    def visible_to(self, user):
        return self.filter(Q(created_by=user) | Q(assigned_to=user))

    def search(self, term: str):
        return self.filter(
            Q(title__icontains=term)
            | Q(description__icontains=term)
            | Q(request_id__icontains=term)
        )


class ServiceRequestDomainManager(
    models.Manager.from_queryset(ServiceRequestQuerySet)
):
    def request_id_taken(self, request_id: str) -> bool:
        return self.get_queryset().filter(request_id=request_id).exists()

    def scheduled_on_or_before(self, day):
        """Scheduled rows whose first occurrence is not after ``day``."""
        return (
            self.get_queryset()
            .scheduled()
            .filter(scheduled_date__lte=day)
            .exclude(status=RequestStatus.CANCELLED)
            .select_related("location", "department", "assigned_to")
            .order_by("scheduled_time", "id")
        )


class RequestActivityQuerySet(AppendOnlyQuerySet):
    def for_request(self, request):
        return self.filter(request=request)

    def chronological(self):
        return self.order_by("created_at", "id")

    def recent(self, limit: int = 10):
        return self.select_related("request", "user").order_by("-created_at", "-id")[
            :limit
        ]


class RequestActivityDomainManager(
    models.Manager.from_queryset(RequestActivityQuerySet)
):
    def ledger_for(self, request):
        return self.get_queryset().for_request(request).chronological()


class RequestLinkDomainManager(models.Manager):
    def get_by_token(self, token: str):
        return (
            self.get_queryset()
            .select_related("request", "location")
            .filter(token=token)
            .first()
        )
