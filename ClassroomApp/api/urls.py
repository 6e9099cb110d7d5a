from django.urls import path, include
from rest_framework_nested import routers
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from ClassroomApp.api.views import (
    AssistantView,
    AssignmentViewSet,
    AttendanceViewSet,
    CourseFileViewSet,
    CourseViewSet,
    DashboardView,
    GradesView,
    LogoutView,
    MyAssignmentsView,
    ProfileView,
    RegistrationView,
    SubmissionViewSet,
)

router = routers.SimpleRouter()
router.register(r"courses", CourseViewSet, basename="course")

courses_router = routers.NestedSimpleRouter(router, r"courses", lookup="course")
courses_router.register(r"assignments", AssignmentViewSet, basename="course-assignments")
courses_router.register(r"attendance", AttendanceViewSet, basename="course-attendance")
courses_router.register(r"files", CourseFileViewSet, basename="course-files")

assignments_router = routers.NestedSimpleRouter(courses_router, r"assignments", lookup="assignment")
assignments_router.register(r"submissions", SubmissionViewSet, basename="assignment-submissions")

urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("auth/register/", RegistrationView.as_view(), name="auth-register"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("assignments/", MyAssignmentsView.as_view(), name="my-assignments"),
    path("grades/", GradesView.as_view(), name="grades"),
    path("assistant/", AssistantView.as_view(), name="assistant"),
    path("", include(router.urls)),
    path("", include(courses_router.urls)),
    path("", include(assignments_router.urls)),
]
