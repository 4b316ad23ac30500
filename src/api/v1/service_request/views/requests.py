from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.service_request.filters import ServiceRequestFilterSet
from api.v1.service_request.permissions import RequestListAllPermission
from api.v1.service_request.serializers import (
    ServiceRequestCreateSerializer,
    ServiceRequestSerializer,
)
from core.api.views import BaseListViewSet
from service_request.models import ServiceRequest
from service_request.services_workflow import ServiceRequestWorkflowService


class ServiceRequestViewSet(BaseListViewSet):
    serializer_class = ServiceRequestSerializer
    filter_backends = (DjangoFilterBackend,)
    filterset_class = ServiceRequestFilterSet
    queryset = ServiceRequest.domain.select_related(
        "location__block", "department", "created_by", "assigned_to"
    ).order_by("-created_at", "-id")

    def get_serializer_class(self):
        if self.action == "create":
            return ServiceRequestCreateSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == "mine":
            return queryset.visible_to(self.request.user)
        return queryset

    def get_permissions(self):
        permission_classes = [IsAuthenticated]
        if self.action == "list":
            permission_classes += [RequestListAllPermission]
        return [permission() for permission in permission_classes]

    @extend_schema(
        tags=["Requests"],
        summary="List requests",
        description=(
            "Lists service requests newest first. Supports status, priority, "
            "department, assigned_to, location, service_type, search and ordering."
        ),
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=["Requests"],
        summary="List my requests",
        description="Lists requests created by or assigned to the current user.",
    )
    def mine(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        tags=["Requests"],
        summary="Create request",
        description=(
            "Creates a service request in NEW status with a generated request id "
            "and writes the initial activity entry."
        ),
        request=ServiceRequestCreateSerializer,
        responses=ServiceRequestSerializer,
    )
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service_request = ServiceRequestWorkflowService.create_request(
            actor=request.user,
            data=serializer.validated_data,
        )
        return Response(
            ServiceRequestSerializer(service_request).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        tags=["Requests"],
        summary="Retrieve request",
        description="Returns a single request with location, department and users.",
    )
    def retrieve(self, request, pk: int, *args, **kwargs):
        service_request = get_object_or_404(self.get_queryset(), pk=pk)
        return Response(self.get_serializer(service_request).data)
