"""Custom middleware for the Club Training API."""
import logging
import time

logger = logging.getLogger('clubtraining.middleware')


class RequestLoggingMiddleware:
    """
    Log every API request with its method, path, response status and duration.

    Non-API routes (admin, swagger, health) are passed through silently.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        msg = f"{request.method} {request.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        if response.status_code >= 500:
            logger.error(msg)
        elif response.status_code >= 400:
            logger.warning(msg)
        else:
            logger.info(msg)
        return response
