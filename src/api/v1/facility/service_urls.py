from django.urls import path

from api.v1.facility.views import ServiceTypeViewSet

app_name = "services"

service_type_list = ServiceTypeViewSet.as_view({"get": "list", "post": "create"})
service_type_detail = ServiceTypeViewSet.as_view(
    {
        "get": "retrieve",
        "put": "update",
        "patch": "partial_update",
        "delete": "destroy",
    }
)

urlpatterns = [
    path("", service_type_list, name="service-type-list"),
    path("<int:pk>/", service_type_detail, name="service-type-detail"),
]
