"""Domain error taxonomy.

Every error is an APIException so the REST layer renders it with the right
status code without per-view translation:
    ValidationError (400) -> InvalidGrade
    DuplicateError (409)  -> DuplicateSubmission, AlreadyEnrolled
    NotFoundError (404)
    UpstreamError (502)   -> AssistantNotConfigured (500)
    ProfileMissing (401)
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class ValidationError(APIException):
    """Bad input shape or an out-of-range value."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class InvalidGrade(ValidationError):
    default_detail = "Grade must be between 0 and 100."
    default_code = "invalid_grade"


class DuplicateError(APIException):
    """A uniqueness rule would be broken by the write."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Record already exists."
    default_code = "duplicate"


class DuplicateSubmission(DuplicateError):
    default_detail = "Assignment already submitted."
    default_code = "duplicate_submission"


class AlreadyEnrolled(DuplicateError):
    default_detail = "Already enrolled in this course."
    default_code = "already_enrolled"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class UpstreamError(APIException):
    """The generative backend (or another remote collaborator) failed."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service failed."
    default_code = "upstream_error"


class AssistantNotConfigured(UpstreamError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "GEMINI_API_KEY is not configured"
    default_code = "assistant_not_configured"


class ProfileMissing(APIException):
    """Authenticated account without a profile row: treated as signed out."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Account has no profile. Sign in again."
    default_code = "profile_missing"
