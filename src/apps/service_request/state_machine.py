from django.conf import settings

from core.api.exceptions import InvalidStatusError, InvalidTransitionError
from core.utils.constants import RequestStatus

ACTIVE_STATUSES = frozenset(
    {
        RequestStatus.NEW,
        RequestStatus.ASSIGNED,
        RequestStatus.IN_PROGRESS,
        RequestStatus.ACTION_TAKEN,
        RequestStatus.ON_HOLD,
    }
)
TERMINAL_STATUSES = frozenset({RequestStatus.CLOSED, RequestStatus.CANCELLED})


def _build_transition_table() -> dict[str, frozenset[str]]:
    table: dict[str, frozenset[str]] = {}
    for status in ACTIVE_STATUSES:
        table[status] = frozenset(
            (ACTIVE_STATUSES - {RequestStatus.NEW})
            | {RequestStatus.COMPLETED, RequestStatus.CANCELLED}
        )
    table[RequestStatus.COMPLETED] = frozenset(
        {RequestStatus.CLOSED, RequestStatus.IN_PROGRESS}
    )
    for status in TERMINAL_STATUSES:
        table[status] = frozenset()
    return table


class RequestStatusMachine:
    """Allow/deny decisions for ``(from_status, to_status)`` pairs.

    Re-applying the current status is always allowed so repeated
    submissions are recorded in the ledger instead of rejected.
    """

    TRANSITIONS = _build_transition_table()

    @staticmethod
    def parse_status(value) -> RequestStatus:
        normalized = str(value or "").strip().upper()
        if normalized not in RequestStatus.values:
            raise InvalidStatusError(f"Invalid status: {value!r}.")
        return RequestStatus(normalized)

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        if from_status == to_status:
            return True
        return to_status in cls.TRANSITIONS.get(from_status, frozenset())

    @classmethod
    def allowed_targets(cls, from_status: str) -> list[str]:
        targets = set(cls.TRANSITIONS.get(from_status, frozenset())) | {from_status}
        return [status for status in RequestStatus.values if status in targets]

    @classmethod
    def ensure_transition(cls, from_status: str, to_status: str) -> None:
        if not getattr(settings, "REQUEST_STRICT_TRANSITIONS", True):
            return
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(
                f"Request cannot move from {from_status} to {to_status}."
            )
