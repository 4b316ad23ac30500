from django.urls import path

from api.v1.core.views.system import SystemStatusAPIView

app_name = "system"

urlpatterns = [
    path("status/", SystemStatusAPIView.as_view(), name="system-status"),
]
