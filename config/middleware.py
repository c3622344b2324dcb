import time
import uuid
import logging
from contextvars import ContextVar

logger = logging.getLogger("request")

current_request_id = ContextVar("current_request_id", default="-")


class RequestContextMiddleware:
    """
    Gives every request a request_id (also echoed as X-Request-ID)
    and writes one access line: HTTP METHOD PATH -> STATUS (ms)
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = request.META.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex[:10]
        token = current_request_id.set(request.request_id)
        t0 = time.time()
        response = None
        try:
            response = self.get_response(request)
            response["X-Request-ID"] = request.request_id
            return response
        finally:
            dur_ms = int((time.time() - t0) * 1000)
            status = getattr(response, "status_code", 500)
            user = getattr(request, "user", None)
            user_id = user.id if user is not None and getattr(user, "is_authenticated", False) else "-"
            logger.info("HTTP %s %s -> %s (%sms)", request.method, request.path, status, dur_ms,
                        extra={"user": user_id})
            current_request_id.reset(token)
