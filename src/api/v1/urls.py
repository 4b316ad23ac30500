from django.urls import include, path

app_name = "url_router"

urlpatterns = [
    path("users/", include("api.v1.account.urls", namespace="account")),
    path("auth/", include("api.v1.core.urls.auth", namespace="auth")),
    path("locations/", include("api.v1.facility.urls", namespace="facility")),
    path("services/", include("api.v1.facility.service_urls", namespace="services")),
    path("requests/", include("api.v1.service_request.urls", namespace="requests")),
    path(
        "request-links/",
        include("api.v1.service_request.link_urls", namespace="request_links"),
    ),
    path("leaderboard/", include("api.v1.gamification.urls", namespace="leaderboard")),
    path("dashboard/", include("api.v1.core.urls.analytics", namespace="dashboard")),
    path("system/", include("api.v1.core.urls.system", namespace="system")),
]
