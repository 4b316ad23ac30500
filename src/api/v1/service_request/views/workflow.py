from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.service_request.permissions import (
    RequestDeletePermission,
    RequestWorkflowPermission,
)
from api.v1.service_request.serializers import (
    RequestActivitySerializer,
    ServiceRequestSerializer,
    ServiceRequestUpdateSerializer,
)
from core.api.views import BaseViewSet, ListAPIView
from service_request.models import RequestActivity, ServiceRequest
from service_request.services_tat import TurnaroundTimeService
from service_request.services_workflow import ServiceRequestWorkflowService


class ServiceRequestWorkflowViewSet(BaseViewSet):
    serializer_class = ServiceRequestUpdateSerializer
    queryset = ServiceRequest.objects.select_related(
        "location__block", "department", "created_by", "assigned_to"
    )

    def get_permissions(self):
        if self.action == "update_request":
            permission_classes = (IsAuthenticated, RequestWorkflowPermission)
        elif self.action == "destroy":
            permission_classes = (IsAuthenticated, RequestDeletePermission)
        else:
            permission_classes = (IsAuthenticated,)
        return [permission() for permission in permission_classes]

    @extend_schema(
        tags=["Requests / Workflow"],
        summary="Update request",
        description=(
            "Applies a status transition, reassignment and/or field edits. Status "
            "changes follow the transition table; reaching COMPLETED stamps "
            "completed_at once. Each change is recorded in the activity ledger."
        ),
        responses=ServiceRequestSerializer,
    )
    def update_request(self, request, pk: int, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service_request = ServiceRequestWorkflowService.apply_transition(
            pk,
            actor_user_id=request.user.id,
            changes=serializer.validated_data,
        )
        service_request = self.get_queryset().get(pk=service_request.pk)
        return Response(
            ServiceRequestSerializer(service_request).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["Requests / Workflow"],
        summary="Delete request",
        description="Hard-deletes the request together with its activities and links.",
    )
    def destroy(self, request, pk: int, *args, **kwargs):
        ServiceRequestWorkflowService.delete_request(pk, actor_user_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Requests / Workflow"],
        summary="Request turnaround time",
        description=(
            "Turnaround time of a completed request excluding ON_HOLD intervals. "
            "applicable is false and tat_seconds null for requests not completed."
        ),
    )
    def tat(self, request, pk: int, *args, **kwargs):
        service_request = get_object_or_404(self.get_queryset(), pk=pk)
        return Response(TurnaroundTimeService.tat_payload(service_request))


@extend_schema(
    tags=["Requests / Workflow"],
    summary="List request activities",
    description="Returns the activity ledger of a request in chronological order.",
)
class RequestActivityListAPIView(ListAPIView):
    serializer_class = RequestActivitySerializer
    permission_classes = (IsAuthenticated,)

    def get_queryset(self):
        service_request = get_object_or_404(ServiceRequest, pk=self.kwargs["pk"])
        return RequestActivity.domain.ledger_for(service_request).select_related(
            "user"
        )
