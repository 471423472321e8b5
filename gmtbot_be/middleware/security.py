"""
Security middleware for request size limiting.
"""
import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware:
    """
    Rejects write requests whose declared body is larger than
    settings.MAX_REQUEST_SIZE_BYTES.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.method in ("POST", "PUT", "PATCH"):
            content_length = request.META.get("CONTENT_LENGTH")
            if content_length:
                try:
                    content_length = int(content_length)
                except (ValueError, TypeError):
                    # malformed header; Django's own parsing deals with it
                    content_length = 0
                if content_length > getattr(settings, "MAX_REQUEST_SIZE_BYTES", 1024 * 1024):
                    logger.warning(
                        "Request size limit exceeded: %s bytes from IP %s",
                        content_length,
                        request.META.get("REMOTE_ADDR"),
                    )
                    return JsonResponse({"error": "Request too large"}, status=413)

        return self.get_response(request)
