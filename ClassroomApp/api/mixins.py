from rest_framework.response import Response

from ClassroomApp.core.session import Session, resolve_session

class PaginationMixin:
    """Shared helper to reduce pagination boilerplate."""

    def paginate_and_respond(self, queryset, serializer_cls, many=True):
        page = self.paginate_queryset(queryset)
        serializer = serializer_cls(
            queryset if page is None else page, many=many, context=self.get_serializer_context()
        )
        if page is not None:
            return self.get_paginated_response(serializer.data)
        return Response(serializer.data)

class SessionMixin:
    """Resolves the caller's role-tagged session once per request."""

    @property
    def session(self) -> Session:
        if not hasattr(self.request, "_lms_session"):
            self.request._lms_session = resolve_session(self.request.user)
        return self.request._lms_session
