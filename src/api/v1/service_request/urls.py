from django.urls import path

from api.v1.service_request.views import (
    RequestActivityListAPIView,
    ScheduleViewSet,
    ServiceRequestViewSet,
    ServiceRequestWorkflowViewSet,
)

app_name = "service_request"

urlpatterns = [
    path("", ServiceRequestViewSet.as_view({"get": "list"}), name="request-list"),
    path(
        "mine/",
        ServiceRequestViewSet.as_view({"get": "mine"}),
        name="request-mine",
    ),
    path(
        "create/",
        ServiceRequestViewSet.as_view({"post": "create"}),
        name="request-create",
    ),
    path(
        "schedule/calendar/",
        ScheduleViewSet.as_view({"get": "calendar"}),
        name="request-schedule-calendar",
    ),
    path(
        "<int:pk>/",
        ServiceRequestViewSet.as_view({"get": "retrieve"}),
        name="request-detail",
    ),
    path(
        "<int:pk>/update/",
        ServiceRequestWorkflowViewSet.as_view(
            {"patch": "update_request", "put": "update_request"}
        ),
        name="request-update",
    ),
    path(
        "<int:pk>/delete/",
        ServiceRequestWorkflowViewSet.as_view({"delete": "destroy"}),
        name="request-delete",
    ),
    path(
        "<int:pk>/activities/",
        RequestActivityListAPIView.as_view(),
        name="request-activities",
    ),
    path(
        "<int:pk>/tat/",
        ServiceRequestWorkflowViewSet.as_view({"get": "tat"}),
        name="request-tat",
    ),
    path(
        "<int:pk>/occurrences/",
        ScheduleViewSet.as_view({"get": "occurrences"}),
        name="request-occurrences",
    ),
]
