from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.permissions import IsManager
from core.api.views import BaseAPIView
from system.models import SystemSetting
from system.services import SystemSettingService


class SystemStatusSerializer(serializers.ModelSerializer):
    is_active = serializers.BooleanField(source="as_bool", read_only=True)
    updated_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = SystemSetting
        fields = ("is_active", "updated_at", "updated_by")
        read_only_fields = fields


class SystemStatusUpdateSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


@extend_schema(
    tags=["System"],
    summary="Get or set the system active status",
    description=(
        "GET returns whether the portal is switched on (active until first "
        "set). PUT switches it on or off and records who did it; admins and "
        "heads of department only."
    ),
    request=SystemStatusUpdateSerializer,
    responses=SystemStatusSerializer,
)
class SystemStatusAPIView(BaseAPIView):
    serializer_class = SystemStatusUpdateSerializer

    def get_permissions(self):
        if self.request.method == "PUT":
            permission_classes = (IsAuthenticated, IsManager)
        else:
            permission_classes = (IsAuthenticated,)
        return [permission() for permission in permission_classes]

    def get(self, request, *args, **kwargs):
        setting = SystemSettingService.get_system_status()
        return Response(SystemStatusSerializer(setting).data, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        setting = SystemSettingService.set_system_status(
            is_active=serializer.validated_data["is_active"],
            actor=request.user,
        )
        return Response(SystemStatusSerializer(setting).data, status=status.HTTP_200_OK)
