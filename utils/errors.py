"""
Error taxonomy shared by every app.

Each error is a DRF APIException, so raising one from a service function is
enough: the project exception handler turns it into `{"error": "..."}` with
the matching status code.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed


class InvalidCredentials(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"
    default_code = "invalid_credentials"


class Unauthorized(AuthenticationFailed):
    """Missing, malformed, badly signed or expired token. Never more specific."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    default_code = "unauthorized"


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"
    default_code = "forbidden"


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class Conflict(APIException):
    # duplicate email; the frontend has always expected a 400 here
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "User already exists"
    default_code = "conflict"


class BadRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"
    default_code = "bad_request"
