import logging

from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

UNAUTHORIZED_MSG = "Unauthorized"
INTERNAL_ERROR_MSG = "Internal server error"


def _first_message(data):
    """Flatten DRF error payloads (dict/list/str) into one readable string."""
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for field, value in data.items():
            msg = _first_message(value)
            if field == "non_field_errors":
                return msg
            return f"{field}: {msg}"
        return "Invalid request"
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid request"
    return str(data)


def api_exception_handler(exc, context):
    """
    DRF exception handler producing `{"error": "<string>"}` bodies.

    Authentication failures all collapse to the same 401 body so callers
    cannot tell a missing token from an expired or forged one.
    """
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response = exception_handler(exc, context)
        response.data = {"error": UNAUTHORIZED_MSG}
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return response

    response = exception_handler(exc, context)
    if response is not None:
        response.data = {"error": _first_message(response.data)}
        return response

    view = context.get("view")
    logger.error(
        "Unhandled error in %s", view.__class__.__name__ if view else "unknown view", exc_info=exc
    )
    return Response({"error": INTERNAL_ERROR_MSG}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
