from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.facility.filters import LocationFilterSet, ServiceTypeFilterSet
from api.v1.facility.serializers import (
    BlockSerializer,
    DepartmentSerializer,
    LocationSerializer,
    ServiceTypeSerializer,
)
from core.api.permissions import IsAdmin
from core.api.views import BaseAPIView, BaseModelViewSet
from facility.models import Location, ServiceType
from facility.services import FacilityService


class FacilityManageMixin:
    """Reads for every authenticated user; listed write actions for admins."""

    admin_actions = frozenset({"create", "update", "partial_update", "destroy"})

    def get_permissions(self):
        action = getattr(self, "action", None) or self.request.method.lower()
        if action in self.admin_actions:
            permission_classes = (IsAuthenticated, IsAdmin)
        else:
            permission_classes = (IsAuthenticated,)
        return [permission() for permission in permission_classes]


@extend_schema(
    tags=["Facility"],
    summary="List or create blocks",
    description=(
        "GET returns every block with its active locations, the number of "
        "active areas and the highest floor. POST creates a block (admin)."
    ),
)
class BlockListCreateAPIView(FacilityManageMixin, BaseAPIView):
    serializer_class = BlockSerializer
    admin_actions = frozenset({"post"})

    def get(self, request, *args, **kwargs):
        blocks = FacilityService.blocks_with_locations()
        return Response(self.get_serializer(blocks, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        block = serializer.save()
        block = FacilityService.blocks_with_locations().get(pk=block.pk)
        return Response(
            self.get_serializer(block).data, status=status.HTTP_201_CREATED
        )


@extend_schema(
    tags=["Facility"],
    summary="List or create departments",
    description=(
        "GET returns departments by name with request and location counts. "
        "POST creates a department (admin)."
    ),
)
class DepartmentListCreateAPIView(FacilityManageMixin, BaseAPIView):
    serializer_class = DepartmentSerializer
    admin_actions = frozenset({"post"})

    def get(self, request, *args, **kwargs):
        departments = FacilityService.departments_with_counts()
        return Response(self.get_serializer(departments, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        department = serializer.save()
        department = FacilityService.departments_with_counts().get(pk=department.pk)
        return Response(
            self.get_serializer(department).data, status=status.HTTP_201_CREATED
        )


@extend_schema(
    tags=["Facility"],
    summary="Locations CRUD",
    description=(
        "Lists active locations ordered by block, floor and name with block, "
        "department and search filters. Create, update and delete are admin "
        "only; delete deactivates the location."
    ),
)
class LocationViewSet(FacilityManageMixin, BaseModelViewSet):
    serializer_class = LocationSerializer
    queryset = Location.objects.select_related("block", "department").order_by(
        "block__name", "floor", "name", "id"
    )
    filter_backends = (DjangoFilterBackend,)
    filterset_class = LocationFilterSet

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == "list":
            return queryset.filter(is_active=True)
        return queryset

    def destroy(self, request, *args, **kwargs):
        FacilityService.deactivate_location(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    tags=["Facility"],
    summary="Service catalog CRUD",
    description=(
        "Lists catalog entries by name, active ones unless is_active is given. "
        "Any authenticated user may add an entry; updates and deletes are admin "
        "only. Deleting an entry that requests already use deactivates it "
        "instead."
    ),
)
class ServiceTypeViewSet(FacilityManageMixin, BaseModelViewSet):
    serializer_class = ServiceTypeSerializer
    queryset = ServiceType.objects.select_related(
        "department", "location__block"
    ).order_by("name", "id")
    filter_backends = (DjangoFilterBackend,)
    filterset_class = ServiceTypeFilterSet
    admin_actions = frozenset({"update", "partial_update", "destroy"})

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == "list" and "is_active" not in self.request.query_params:
            return queryset.filter(is_active=True)
        return queryset

    def destroy(self, request, *args, **kwargs):
        service_type = self.get_object()
        deleted = FacilityService.delete_service_type(service_type)
        return Response(
            {"id": int(kwargs["pk"]), "deleted": deleted, "is_active": False},
            status=status.HTTP_200_OK,
        )
