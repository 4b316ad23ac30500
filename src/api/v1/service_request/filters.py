from django_filters import rest_framework as filters

from core.utils.constants import RequestPriority, RequestStatus
from service_request.models import ServiceRequest

ORDERING_CHOICES = (
    ("created_at", "created_at"),
    ("-created_at", "-created_at"),
    ("priority", "priority"),
    ("-priority", "-priority"),
    ("completed_at", "completed_at"),
    ("-completed_at", "-completed_at"),
)


class ServiceRequestFilterSet(filters.FilterSet):
    status = filters.ChoiceFilter(field_name="status", choices=RequestStatus.choices)
    priority = filters.ChoiceFilter(
        field_name="priority", choices=RequestPriority.choices
    )
    department = filters.NumberFilter(field_name="department_id")
    assigned_to = filters.NumberFilter(field_name="assigned_to_id")
    location = filters.NumberFilter(field_name="location_id")
    service_type = filters.CharFilter(field_name="service_type", lookup_expr="iexact")
    search = filters.CharFilter(method="filter_search")
    ordering = filters.ChoiceFilter(method="filter_ordering", choices=ORDERING_CHOICES)

    class Meta:
        model = ServiceRequest
        fields = (
            "status",
            "priority",
            "department",
            "assigned_to",
            "location",
            "service_type",
            "search",
            "ordering",
        )

    @staticmethod
    def filter_search(queryset, name, value):
        term = str(value or "").strip()
        if not term:
            return queryset
        return queryset.search(term)

    @staticmethod
    def filter_ordering(queryset, name, value):
        return queryset.order_by(value, "-id")
