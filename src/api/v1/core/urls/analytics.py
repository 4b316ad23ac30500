from django.urls import path

from api.v1.core.views.analytics import DashboardStatsAPIView, RequestMetricsAPIView

app_name = "dashboard"

urlpatterns = [
    path("stats/", DashboardStatsAPIView.as_view(), name="dashboard-stats"),
    path("metrics/", RequestMetricsAPIView.as_view(), name="dashboard-metrics"),
]
