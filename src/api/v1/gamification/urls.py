from django.urls import path

from api.v1.gamification.views import LeaderboardAPIView, LeaderboardDownloadAPIView

app_name = "gamification"

urlpatterns = [
    path("", LeaderboardAPIView.as_view(), name="leaderboard"),
    path("download/", LeaderboardDownloadAPIView.as_view(), name="leaderboard-download"),
]
