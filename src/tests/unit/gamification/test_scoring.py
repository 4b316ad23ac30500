from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from core.api.exceptions import DomainValidationError
from gamification.services import LeaderboardService, LeaderboardWindow, ScoringService

T0 = datetime(2024, 6, 3, 9, 0, tzinfo=dt_timezone.utc)


def completed(minutes, priority, *, assigned_to=None, created_by=None):
    return SimpleNamespace(
        created_at=T0,
        completed_at=T0 + timedelta(minutes=minutes),
        priority=priority,
        assigned_to=assigned_to,
        created_by=created_by,
    )


def person(pk, name):
    return SimpleNamespace(pk=pk, display_name=name)


@pytest.mark.parametrize(
    ("minutes", "priority", "points"),
    [
        (25, 1, 45),
        (45, 3, 20),
        (90, 4, 10),
        (29, 2, 40),
        (30, 3, 20),
        (60, 1, 25),
    ],
)
def test_score_thresholds(minutes, priority, points):
    assert ScoringService.score(completed(minutes, priority)) == points


def test_score_without_completion_is_zero():
    request = completed(10, 1)
    request.completed_at = None

    assert ScoringService.score(request) == 0


def test_points_fall_back_to_creator():
    creator = person(7, "Creator")

    scores = LeaderboardService.aggregate([completed(25, 1, created_by=creator)])

    assert [(score.user_id, score.points) for score in scores] == [(7, 45)]


def test_requests_without_any_user_are_excluded():
    assert LeaderboardService.aggregate([completed(25, 1)]) == []


def test_aggregate_ranks_by_points():
    alice = person(1, "Alice")
    bob = person(2, "Bob")
    requests = [
        completed(90, 4, assigned_to=alice),
        completed(25, 1, assigned_to=bob),
        completed(45, 3, assigned_to=alice, created_by=bob),
    ]

    scores = LeaderboardService.aggregate(requests)

    assert [score.as_dict() for score in scores] == [
        {
            "user_id": 2,
            "name": "Bob",
            "points": 45,
            "completed_requests": 1,
            "rank": 1,
            "achievements": 1,
        },
        {
            "user_id": 1,
            "name": "Alice",
            "points": 30,
            "completed_requests": 2,
            "rank": 2,
            "achievements": 2,
        },
    ]


def test_window_requires_year_with_month():
    with pytest.raises(DomainValidationError):
        LeaderboardWindow.from_params(month=3)


def test_window_rejects_bad_month():
    with pytest.raises(DomainValidationError):
        LeaderboardWindow.from_params(month=13, year=2024)


def test_window_without_params_is_unbounded():
    assert LeaderboardWindow.from_params() == LeaderboardWindow()
