from django.urls import path

from api.v1.account.views import (
    MeAPIView,
    UserManagementDetailAPIView,
    UserManagementListAPIView,
)

app_name = "account"

urlpatterns = [
    path("", UserManagementListAPIView.as_view(), name="user-list"),
    path("<int:pk>/", UserManagementDetailAPIView.as_view(), name="user-detail"),
    path("me/", MeAPIView.as_view(), name="me"),
]
