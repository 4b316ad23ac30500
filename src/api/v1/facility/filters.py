from django.db.models import Q
from django_filters import rest_framework as filters

from facility.models import Location, ServiceType


class LocationFilterSet(filters.FilterSet):
    block = filters.NumberFilter(field_name="block_id")
    department = filters.NumberFilter(field_name="department_id")
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Location
        fields = ("block", "department", "search")

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(area_type__icontains=value))


class ServiceTypeFilterSet(filters.FilterSet):
    is_active = filters.BooleanFilter(field_name="is_active")
    department = filters.NumberFilter(field_name="department_id")
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = ServiceType
        fields = ("is_active", "department", "search")

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value)
        )
