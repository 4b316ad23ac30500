from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.gamification.serializers import (
    LeaderboardQuerySerializer,
    UserScoreSerializer,
)
from core.api.views import BaseAPIView
from gamification.services import LeaderboardService, LeaderboardWindow


@extend_schema(
    tags=["Leaderboard"],
    summary="Team leaderboard",
    description=(
        "Ranks users by points earned from completed requests. month+year "
        "selects one month, year alone the whole year, neither all time. "
        "department accepts an id or a name. An empty list is returned when "
        "the data cannot be read."
    ),
    parameters=[LeaderboardQuerySerializer],
    responses=UserScoreSerializer(many=True),
)
class LeaderboardAPIView(BaseAPIView):
    permission_classes = (IsAuthenticated,)
    serializer_class = LeaderboardQuerySerializer

    def get(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        window = LeaderboardWindow.from_params(
            month=serializer.validated_data.get("month"),
            year=serializer.validated_data.get("year"),
        )
        department = serializer.validated_data.get("department") or None
        scores = LeaderboardService.compute_leaderboard(window, department)
        return Response(
            UserScoreSerializer([score.as_dict() for score in scores], many=True).data,
            status=status.HTTP_200_OK,
        )


@extend_schema(
    tags=["Leaderboard"],
    summary="Download team leaderboard as CSV",
    description=(
        "Same window and department filters as the leaderboard, rendered as a "
        "CSV attachment with rank, name, points and completed requests."
    ),
    parameters=[LeaderboardQuerySerializer],
    responses={(200, "text/csv"): OpenApiTypes.STR},
)
class LeaderboardDownloadAPIView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        serializer = LeaderboardQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        month = serializer.validated_data.get("month")
        year = serializer.validated_data.get("year")
        scores = LeaderboardService.compute_leaderboard(
            LeaderboardWindow.from_params(month=month, year=year),
            serializer.validated_data.get("department") or None,
        )

        response = HttpResponse(
            LeaderboardService.export_csv(scores), content_type="text/csv"
        )
        filename = LeaderboardService.export_filename(month=month, year=year)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
