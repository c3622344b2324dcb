# core/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException


class GradingError(APIException):
    """Base class for errors raised by the grading / transcript services."""


class NotFound(GradingError):
    """An enrollment, class, student or grade scale id does not resolve."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class BadRequest(GradingError):
    """Invalid state transition or a policy refusal (e.g. a transcript hold)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"
