from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from api.v1.service_request.permissions import RequestLinkCreatePermission
from api.v1.service_request.serializers import (
    RequestLinkCreateSerializer,
    RequestLinkSerializer,
    RequestLinkSubmitSerializer,
    ServiceRequestSerializer,
)
from core.api.views import BaseViewSet
from service_request.services_links import RequestLinkService


class RequestLinkViewSet(BaseViewSet):
    serializer_class = RequestLinkCreateSerializer

    def get_serializer_class(self):
        if self.action == "submit":
            return RequestLinkSubmitSerializer
        return super().get_serializer_class()

    def get_permissions(self):
        if self.action == "create":
            permission_classes = (IsAuthenticated, RequestLinkCreatePermission)
        else:
            permission_classes = (AllowAny,)
        return [permission() for permission in permission_classes]

    @extend_schema(
        tags=["Request Links"],
        summary="Create request link",
        description=(
            "Issues a single-use link bound to a placeholder request. The link "
            "expires after the configured number of days."
        ),
        responses=RequestLinkSerializer,
    )
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        link = RequestLinkService.create_link(
            actor=request.user,
            link_type=serializer.validated_data["link_type"],
            location_id=serializer.validated_data.get("location_id"),
            phone_numbers=serializer.validated_data.get("phone_numbers"),
        )
        return Response(
            RequestLinkSerializer(link).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        tags=["Request Links"],
        summary="Open request link",
        description="Returns link details while it is unused and not expired.",
        responses=RequestLinkSerializer,
    )
    def retrieve(self, request, token: str, *args, **kwargs):
        link = RequestLinkService.get_available_link(token)
        return Response(RequestLinkSerializer(link).data)

    @extend_schema(
        tags=["Request Links"],
        summary="Submit request via link",
        description=(
            "Fills the placeholder request with the submitted details and marks "
            "the link as used."
        ),
        responses=ServiceRequestSerializer,
    )
    def submit(self, request, token: str, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service_request = RequestLinkService.submit(
            token, data=serializer.validated_data
        )
        return Response(ServiceRequestSerializer(service_request).data)
