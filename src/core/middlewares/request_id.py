from __future__ import annotations

import uuid

from core.utils.logging import bind_request_id, reset_request_id


class RequestIDMiddleware:
    """
    Ensures every request has a correlation ID, exposes it to log records
    emitted outside the request object and echoes it in response headers.
    """

    REQUEST_META_HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"
    REQUEST_ATTR = "request_id"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = self._normalize_request_id(
            request.META.get(self.REQUEST_META_HEADER)
        )
        setattr(request, self.REQUEST_ATTR, request_id)
        token = bind_request_id(request_id)
        try:
            response = self.get_response(request)
        finally:
            reset_request_id(token)
        response[self.RESPONSE_HEADER] = request_id
        return response

    @staticmethod
    def _normalize_request_id(raw_value) -> str:
        if isinstance(raw_value, str):
            value = raw_value.strip()
            if value:
                return value[:128]
        return uuid.uuid4().hex
