import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

SKIP_PATHS = ('/health/', '/static/')


def _actor(request: HttpRequest) -> str:
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return 'anonymous'
    return f"{user.employee_id or user.username}:{user.role}"


class SlowRequestLoggingMiddleware:
    """Warn about requests slower than SLOW_REQUEST_LOG_MS.

    Lock evaluation re-reads requests and overrides per student, so team
    summaries and bulk submissions are the usual suspects.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        if not getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True) or request.path.startswith(SKIP_PATHS):
            return self.get_response(request)

        threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= threshold_ms:
            logger.warning(
                'Slow request %s %s -> %s in %.0fms (actor=%s)',
                request.method,
                request.get_full_path(),
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
                _actor(request),
            )
        return response
