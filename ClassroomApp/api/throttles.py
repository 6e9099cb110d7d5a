"""API throttling classes."""

from rest_framework.throttling import UserRateThrottle

class SubmissionRateThrottle(UserRateThrottle):
    """Throttle limiting submission create requests per user."""
    scope = "submission_create"

class AssistantRateThrottle(UserRateThrottle):
    """Throttle limiting assistant questions per user."""
    scope = "assistant"
