import logging
import traceback
from collections.abc import Mapping
from contextvars import ContextVar, Token

_current_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def bind_request_id(request_id: str) -> Token:
    return _current_request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _current_request_id.reset(token)


def current_request_id() -> str:
    return _current_request_id.get()


class RequestContextFilter(logging.Filter):
    """
    Adds request/user/IP/path/method/request_id + traceback info to log records.

    Records logged from the service layer carry no request object; they still
    get the request id bound by RequestIDMiddleware for the current context.
    """

    def filter(self, record):
        request = getattr(record, "request", None)

        if self._is_request_context(request):
            user = getattr(request, "user", None)
            record.user = getattr(user, "username", "Anonymous")
            record.method = getattr(request, "method", "-")
            record.path = getattr(request, "path", "-")
            meta = getattr(request, "META", {})
            record.ip = (
                meta.get("REMOTE_ADDR", "-") if isinstance(meta, Mapping) else "-"
            )
            record.request_id = getattr(request, "request_id", current_request_id())
        else:
            record.user = "Unknown"
            record.method = "-"
            record.path = "-"
            record.ip = "-"
            record.request_id = current_request_id()

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            record.traceback = "".join(
                traceback.format_exception(exc_type, exc_value, exc_tb)
            )
        else:
            record.traceback = "No traceback"

        return True

    @staticmethod
    def _is_request_context(request) -> bool:
        """
        Guard against non-HTTP objects (for example socket instances in devserver logs).
        """
        return (
            request is not None
            and hasattr(request, "method")
            and hasattr(request, "path")
            and hasattr(request, "META")
        )
