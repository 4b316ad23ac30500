import csv
import io
import logging
from dataclasses import asdict, dataclass
from datetime import datetime

from django.db import DatabaseError

from core.api.exceptions import DomainValidationError
from core.utils.dates import month_bounds, year_bounds
from service_request.models import ServiceRequest

logger = logging.getLogger(__name__)

BASE_POINTS = 10
FAST_COMPLETION_MINUTES = 30
FAST_COMPLETION_BONUS = 20
QUICK_COMPLETION_MINUTES = 60
QUICK_COMPLETION_BONUS = 10
PRIORITY_BONUS = {1: 15, 2: 10}
CSV_HEADER = ("Rank", "Name", "Points", "Completed Requests")


@dataclass(slots=True)
class UserScore:
    user_id: int
    name: str
    points: int = 0
    completed_requests: int = 0
    rank: int = 0

    @property
    def achievements(self) -> int:
        return self.completed_requests

    def as_dict(self) -> dict[str, object]:
        return {**asdict(self), "achievements": self.achievements}


@dataclass(frozen=True, slots=True)
class LeaderboardWindow:
    """Half-open ``[start, end)`` completion window; ``None`` bounds are open."""

    start: datetime | None = None
    end: datetime | None = None

    @classmethod
    def from_params(cls, *, month: int | None = None, year: int | None = None):
        if month is not None and not 1 <= int(month) <= 12:
            raise DomainValidationError("month must be between 1 and 12.")
        if month is not None and year is None:
            raise DomainValidationError("year is required when month is given.")
        if year is None:
            return cls()
        if month is None:
            return cls(*year_bounds(int(year)))
        return cls(*month_bounds(int(year), int(month)))


class ScoringService:
    @staticmethod
    def speed_bonus(request) -> int:
        elapsed_minutes = (request.completed_at - request.created_at).total_seconds() / 60
        if elapsed_minutes < FAST_COMPLETION_MINUTES:
            return FAST_COMPLETION_BONUS
        if elapsed_minutes < QUICK_COMPLETION_MINUTES:
            return QUICK_COMPLETION_BONUS
        return 0

    @classmethod
    def score(cls, request) -> int:
        """Points for one completed request.

        Speed is measured on raw ``completed_at - created_at``, hold time
        included.
        """
        if request.completed_at is None or request.created_at is None:
            return 0
        return (
            BASE_POINTS
            + cls.speed_bonus(request)
            + PRIORITY_BONUS.get(int(request.priority), 0)
        )

    @staticmethod
    def attributed_user(request):
        return request.assigned_to or request.created_by


class LeaderboardService:
    @staticmethod
    def completed_requests(window: LeaderboardWindow, department=None):
        return (
            ServiceRequest.domain.completed_between(start=window.start, end=window.end)
            .for_department(department)
            .select_related("assigned_to", "created_by")
            .order_by("completed_at", "id")
        )

    @staticmethod
    def aggregate(requests) -> list[UserScore]:
        scores: dict[int, UserScore] = {}
        for request in requests:
            user = ScoringService.attributed_user(request)
            if user is None:
                continue
            entry = scores.get(user.pk)
            if entry is None:
                entry = scores[user.pk] = UserScore(
                    user_id=user.pk, name=user.display_name
                )
            entry.points += ScoringService.score(request)
            entry.completed_requests += 1

        ranked = sorted(scores.values(), key=lambda item: item.points, reverse=True)
        for position, entry in enumerate(ranked, start=1):
            entry.rank = position
        return ranked

    @classmethod
    def compute_leaderboard(
        cls, window: LeaderboardWindow | None = None, department=None
    ) -> list[UserScore]:
        """Ranked scores for the window; empty when storage fails."""
        window = window or LeaderboardWindow()
        try:
            requests = list(cls.completed_requests(window, department))
        except DatabaseError:
            logger.exception(
                "Leaderboard degraded to empty result: start=%s end=%s department=%s",
                window.start,
                window.end,
                department,
            )
            return []
        return cls.aggregate(requests)

    @staticmethod
    def export_csv(scores: list[UserScore]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for score in scores:
            writer.writerow(
                [score.rank, score.name, score.points, score.completed_requests]
            )
        return buffer.getvalue()

    @staticmethod
    def export_filename(*, month: int | None = None, year: int | None = None) -> str:
        return f"leaderboard-{month or 'all'}-{year or 'all'}.csv"
