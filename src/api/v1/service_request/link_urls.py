from django.urls import path

from api.v1.service_request.views import RequestLinkViewSet

app_name = "request_link"

urlpatterns = [
    path("", RequestLinkViewSet.as_view({"post": "create"}), name="link-create"),
    path(
        "<str:token>/",
        RequestLinkViewSet.as_view({"get": "retrieve"}),
        name="link-detail",
    ),
    path(
        "<str:token>/submit/",
        RequestLinkViewSet.as_view({"post": "submit"}),
        name="link-submit",
    ),
]
