from django.urls import path

from api.v1.facility.views import (
    BlockListCreateAPIView,
    DepartmentListCreateAPIView,
    LocationViewSet,
)

app_name = "facility"

location_list = LocationViewSet.as_view({"get": "list", "post": "create"})
location_detail = LocationViewSet.as_view(
    {
        "get": "retrieve",
        "put": "update",
        "patch": "partial_update",
        "delete": "destroy",
    }
)

urlpatterns = [
    path("", location_list, name="location-list"),
    path("<int:pk>/", location_detail, name="location-detail"),
    path("blocks/", BlockListCreateAPIView.as_view(), name="block-list"),
    path(
        "departments/", DepartmentListCreateAPIView.as_view(), name="department-list"
    ),
]
