from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.service_request.serializers import (
    DateRangeQuerySerializer,
    ScheduledRequestSerializer,
)
from core.api.views import BaseViewSet
from service_request.models import ServiceRequest
from service_request.services_schedule import ScheduleCalendarService

DATE_RANGE_PARAMETERS = [
    OpenApiParameter(name="date_from", type=str, required=True),
    OpenApiParameter(name="date_to", type=str, required=True),
]


class ScheduleViewSet(BaseViewSet):
    permission_classes = (IsAuthenticated,)

    def _date_range(self, request):
        serializer = DateRangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data["date_from"], serializer.validated_data["date_to"]

    @extend_schema(
        tags=["Requests / Schedule"],
        summary="Scheduled request calendar",
        description=(
            "Returns, for every day in the range, the scheduled requests whose "
            "recurrence rule applies on that day."
        ),
        parameters=DATE_RANGE_PARAMETERS,
    )
    def calendar(self, request, *args, **kwargs):
        date_from, date_to = self._date_range(request)
        days = ScheduleCalendarService.calendar(date_from, date_to)
        return Response(
            [
                {
                    "date": day.isoformat(),
                    "requests": ScheduledRequestSerializer(requests, many=True).data,
                }
                for day, requests in days.items()
            ]
        )

    @extend_schema(
        tags=["Requests / Schedule"],
        summary="Request occurrences",
        description="Dates in the range on which the request is scheduled.",
        parameters=DATE_RANGE_PARAMETERS,
    )
    def occurrences(self, request, pk: int, *args, **kwargs):
        service_request = get_object_or_404(ServiceRequest, pk=pk)
        date_from, date_to = self._date_range(request)
        dates = ScheduleCalendarService.occurrences(service_request, date_from, date_to)
        return Response(
            {
                "request_id": service_request.request_id,
                "dates": [day.isoformat() for day in dates],
            }
        )
