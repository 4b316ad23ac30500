from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.views import BaseAPIView
from service_request.services_analytics import MAX_METRICS_DAYS, RequestAnalyticsService


class RequestMetricsQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(
        required=False, min_value=1, max_value=MAX_METRICS_DAYS, default=7
    )


@extend_schema(
    tags=["Dashboard"],
    summary="Dashboard stats",
    description=(
        "Today's created and completed request counts, active staff, total "
        "completed requests, average response minutes and the latest activities. "
        "Returns zeroed values when the data cannot be read."
    ),
)
class DashboardStatsAPIView(BaseAPIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        return Response(
            RequestAnalyticsService.dashboard_stats(), status=status.HTTP_200_OK
        )


@extend_schema(
    tags=["Dashboard"],
    summary="Request metrics",
    description=(
        "Per-day request counts and per-service-type breakdown for the last "
        "`days` days, with completed count and staff workload figures."
    ),
    parameters=[RequestMetricsQuerySerializer],
)
class RequestMetricsAPIView(BaseAPIView):
    permission_classes = (IsAuthenticated,)
    serializer_class = RequestMetricsQuerySerializer

    def get(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        payload = RequestAnalyticsService.request_metrics(
            days=serializer.validated_data.get("days", 7)
        )
        return Response(payload, status=status.HTTP_200_OK)
