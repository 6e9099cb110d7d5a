"""REST API views for auth, profiles, courses, assignments, submissions, attendance, files and the assistant."""

import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date

from rest_framework import status, mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiResponse,
    OpenApiParameter,
)

from ClassroomApp.courses.models import Course
from ClassroomApp.learning.models import Assignment, Submission, CourseFile
from ClassroomApp.core.access import is_owner
from ClassroomApp.core.exceptions import NotFoundError, ValidationError
from ClassroomApp.core.session import TeacherSession
from ClassroomApp.api.mixins import PaginationMixin, SessionMixin
from ClassroomApp.api.throttles import SubmissionRateThrottle, AssistantRateThrottle
from ClassroomApp.core.permissions import (
    IsTeacher,
    IsStudent,
    IsCourseOwner,
    IsCourseMember,
    IsSubmissionParticipant,
)
from ClassroomApp.domain.services import (
    assistant_service,
    attendance_service,
    course_service,
    grade_summary,
    learning_service,
)
from ClassroomApp.api.serializers import (
    RegistrationSerializer,
    LogoutSerializer,
    ProfileSerializer,
    UserSerializer,
    CourseWriteSerializer,
    CourseReadSerializer,
    AssignmentWriteSerializer,
    AssignmentReadSerializer,
    StudentAssignmentSerializer,
    SubmissionWriteSerializer,
    SubmissionReadSerializer,
    GradeWriteSerializer,
    GradeSummarySerializer,
    AttendanceMarkSerializer,
    AttendanceRecordSerializer,
    AttendanceRowSerializer,
    CourseFileWriteSerializer,
    CourseFileReadSerializer,
    AssistantRequestSerializer,
)

logger = logging.getLogger(__name__)

AUTH_RESPONSES = {
    401: OpenApiResponse(description="Authentication required."),
    403: OpenApiResponse(description="Forbidden"),
    404: OpenApiResponse(description="Not Found"),
}

CONFLICT_RESPONSE = {
    409: OpenApiResponse(description="Record already exists."),
}

User = get_user_model()

# ---------- Auth ----------
@extend_schema(
    tags=["Auth"],
    request=RegistrationSerializer,
    responses={201: UserSerializer, 400: OpenApiResponse(description="Validation error")},
    description="Register a new user together with its student or teacher profile."
)
class RegistrationView(APIView):
    """User registration endpoint."""
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        ser = RegistrationSerializer(data=request.data, context={"request": request})
        ser.is_valid(raise_exception=True)
        user = ser.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Auth"],
    request=LogoutSerializer,
    responses={205: OpenApiResponse(description="Signed out.")},
    description=(
        "Blacklist the refresh token. A missing, expired or already revoked token "
        "counts as already signed out and still returns 205."
    ),
)
class LogoutView(APIView):
    """Sign-out; session errors are treated as the desired end state."""
    authentication_classes: list[type] = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        ser = LogoutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        raw = ser.validated_data.get("refresh")
        if raw:
            try:
                RefreshToken(raw).blacklist()
            except TokenError as exc:
                logger.info("Sign-out with unusable refresh token treated as signed out: %s", exc)
        return Response(status=status.HTTP_205_RESET_CONTENT)


# ---------- Profile & dashboard ----------
@extend_schema(tags=["Profile"], responses={200: ProfileSerializer, **AUTH_RESPONSES})
class ProfileView(SessionMixin, APIView):
    """Read or rename the caller's own profile."""
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(ProfileSerializer(self.session.profile).data)

    @extend_schema(request=ProfileSerializer)
    def patch(self, request: Request) -> Response:
        ser = ProfileSerializer(self.session.profile, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data)


@extend_schema(
    tags=["Dashboard"],
    responses={200: OpenApiResponse(description="Role-specific counters."), **AUTH_RESPONSES},
)
class DashboardView(SessionMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        session = self.session
        if isinstance(session, TeacherSession):
            courses = list(Course.objects.for_teacher(session.user).with_counts())
            return Response({
                "role": session.role,
                "courses": len(courses),
                "students": sum(c.enrollment_count for c in courses),
                "assignments": sum(c.assignment_count for c in courses),
                "submissions": Submission.objects.for_teacher(session.user).count(),
            })
        summary = grade_summary.summarize(learning_service.list_student_submissions(session.user))
        return Response({
            "role": session.role,
            "enrolled_courses": len(course_service.list_enrolled_course_ids(session.user)),
            "available_courses": Course.objects.count(),
            "submissions": summary["total_count"],
            "graded": summary["graded_count"],
            "average_grade": round(summary["average_grade"], 1),
        })


# ---------- Courses ----------
@extend_schema_view(
    list=extend_schema(
        tags=["Courses"],
        description="Teachers see the courses they own; students see every course they may enroll in.",
        responses={200: CourseReadSerializer(many=True), **AUTH_RESPONSES},
    ),
    retrieve=extend_schema(tags=["Courses"], responses={200: CourseReadSerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Courses"],
        request=CourseWriteSerializer,
        responses={201: CourseReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "owner-on-create"}},
    ),
    update=extend_schema(
        tags=["Courses"],
        request=CourseWriteSerializer,
        responses={200: CourseReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "owner"}},
    ),
    partial_update=extend_schema(
        tags=["Courses"],
        request=CourseWriteSerializer,
        responses={200: CourseReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "owner"}},
    ),
    destroy=extend_schema(
        tags=["Courses"],
        responses={204: OpenApiResponse(description="Deleted"), **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "owner"}},
    ),
    enrolled=extend_schema(tags=["Courses"], responses={200: CourseReadSerializer(many=True), **AUTH_RESPONSES}),
    enroll=extend_schema(
        tags=["Courses"],
        request=None,
        responses={201: CourseReadSerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
        extensions={"x-permissions": {"required_roles": ["student"], "ownership": "self"}},
    ),
    unenroll=extend_schema(
        tags=["Courses"],
        responses={204: OpenApiResponse(description="Unenrolled (or was not enrolled)."), **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["student"], "ownership": "self"}},
    ),
    students=extend_schema(tags=["Courses"], responses={200: UserSerializer(many=True), **AUTH_RESPONSES}),
)
class CourseViewSet(PaginationMixin, SessionMixin, viewsets.ModelViewSet):
    """CRUD and enrollment for courses."""
    queryset = Course.objects.all().select_related("teacher__profile")
    serializer_class = CourseWriteSerializer
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action in ("list", "retrieve", "enrolled"):
            return CourseReadSerializer
        if self.action == "students":
            return UserSerializer
        return CourseWriteSerializer

    def get_permissions(self) -> list:
        if self.action == "create":
            return [IsAuthenticated(), IsTeacher()]
        if self.action in ("update", "partial_update", "destroy", "students"):
            return [IsAuthenticated(), IsCourseOwner()]
        if self.action in ("enroll", "unenroll", "enrolled"):
            return [IsAuthenticated(), IsStudent()]
        return [IsAuthenticated()]

    def get_queryset(self):
        """Owned courses for teachers, the whole catalogue for students."""
        if getattr(self, "swagger_fake_view", False):
            return Course.objects.none()
        qs = Course.objects.select_related("teacher__profile").with_counts()
        if isinstance(self.session, TeacherSession):
            qs = qs.for_teacher(self.request.user)
        return qs.order_by("-created_at", "-id")

    def list(self, request: Request, *args, **kwargs) -> Response:
        return self.paginate_and_respond(self.get_queryset(), CourseReadSerializer)

    def create(self, request: Request, *args, **kwargs) -> Response:
        """Create a course and return read representation."""
        write_ser = self.get_serializer(data=request.data)
        write_ser.is_valid(raise_exception=True)
        course = course_service.create_course(request.user, write_ser.validated_data)
        read_ser = CourseReadSerializer(course, context={"request": request})
        return Response(read_ser.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, *args, **kwargs) -> Response:
        """Update a course (owner only)."""
        course = self.get_object()
        partial = kwargs.pop("partial", False)
        ser = CourseWriteSerializer(course, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        course = course_service.update_course(request.user, course, ser.validated_data)
        return Response(CourseReadSerializer(course).data)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        """Delete a course with its enrollments, assignments and attendance (owner only)."""
        course_service.delete_course(request.user, self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def enrolled(self, request: Request) -> Response:
        """Courses the calling student is enrolled in."""
        ids = course_service.list_enrolled_course_ids(request.user)
        return self.paginate_and_respond(self.get_queryset().filter(id__in=ids), CourseReadSerializer)

    @action(detail=True, methods=["post"])
    def enroll(self, request: Request, pk: int | None = None) -> Response:
        course = self.get_object()
        course_service.enroll(course, request.user)
        course = self.get_queryset().get(pk=course.pk)
        return Response(CourseReadSerializer(course).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"])
    def unenroll(self, request: Request, pk: int | None = None) -> Response:
        course_service.unenroll(self.get_object(), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def students(self, request: Request, pk: int | None = None) -> Response:
        """Roster of the course (owner only)."""
        return self.paginate_and_respond(course_service.roster(self.get_object()), UserSerializer)


# ---------- Assignments ----------
@extend_schema_view(
    list=extend_schema(tags=["Assignments"], responses={200: AssignmentReadSerializer(many=True), **AUTH_RESPONSES}),
    retrieve=extend_schema(tags=["Assignments"], responses={200: AssignmentReadSerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Assignments"],
        request=AssignmentWriteSerializer,
        responses={201: AssignmentReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
    ),
    update=extend_schema(
        tags=["Assignments"],
        request=AssignmentWriteSerializer,
        responses={200: AssignmentReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
    ),
    partial_update=extend_schema(
        tags=["Assignments"],
        request=AssignmentWriteSerializer,
        responses={200: AssignmentReadSerializer, **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
    ),
    destroy=extend_schema(
        tags=["Assignments"],
        responses={204: OpenApiResponse(description="Deleted"), **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
    ),
)
@extend_schema(parameters=[OpenApiParameter("course_pk", int, OpenApiParameter.PATH)])
class AssignmentViewSet(PaginationMixin, viewsets.ModelViewSet):
    """CRUD for assignments of one course; members read, the owner writes."""
    queryset = Assignment.objects.select_related("course")
    permission_classes = [IsAuthenticated, IsCourseMember]

    def get_serializer_class(self):
        return AssignmentReadSerializer if self.action in ("list", "retrieve") else AssignmentWriteSerializer

    def get_queryset(self):
        return self.queryset.filter(course_id=self.kwargs.get("course_pk")).order_by("-created_at", "-id")

    def list(self, request: Request, *args, **kwargs) -> Response:
        return self.paginate_and_respond(self.get_queryset(), AssignmentReadSerializer)

    def create(self, request: Request, *args, **kwargs) -> Response:
        ser = AssignmentWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        course = get_object_or_404(Course, pk=self.kwargs.get("course_pk"))
        assignment = learning_service.create_assignment(request.user, course, **ser.validated_data)
        return Response(AssignmentReadSerializer(assignment).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, *args, **kwargs) -> Response:
        assignment = self.get_object()
        partial = kwargs.pop("partial", False)
        ser = AssignmentWriteSerializer(assignment, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        assignment = learning_service.update_assignment(request.user, assignment, ser.validated_data)
        return Response(AssignmentReadSerializer(assignment).data)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        learning_service.delete_assignment(request.user, self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    tags=["Assignments"],
    description=(
        "Students: assignments of enrolled courses, soonest due first, each with the caller's "
        "submission and a derived status (Pending, Overdue, Submitted, Graded). "
        "Teachers: assignments of owned courses, newest first."
    ),
    responses={200: StudentAssignmentSerializer(many=True), **AUTH_RESPONSES},
)
class MyAssignmentsView(SessionMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        session = self.session
        if isinstance(session, TeacherSession):
            assignments = learning_service.list_teacher_assignments(session.user)
            return Response(AssignmentReadSerializer(assignments, many=True).data)
        rows = learning_service.list_student_assignments(session.user)
        return Response(StudentAssignmentSerializer([row._asdict() for row in rows], many=True).data)


# ---------- Submissions ----------
@extend_schema_view(
    list=extend_schema(tags=["Submissions"], responses={200: SubmissionReadSerializer(many=True), **AUTH_RESPONSES}),
    retrieve=extend_schema(tags=["Submissions"], responses={200: SubmissionReadSerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Submissions"],
        request=SubmissionWriteSerializer,
        description="Create the caller's single submission for the assignment. Endpoint is rate-limited.",
        responses={
            201: SubmissionReadSerializer,
            400: OpenApiResponse(description="Validation error."),
            429: OpenApiResponse(description="Too many requests / throttled."),
            **AUTH_RESPONSES,
            **CONFLICT_RESPONSE,
        },
        extensions={"x-permissions": {"required_roles": ["student"], "ownership": "self"}},
    ),
)
@extend_schema(
    parameters=[
        OpenApiParameter("course_pk", int, OpenApiParameter.PATH),
        OpenApiParameter("assignment_pk", int, OpenApiParameter.PATH),
    ]
)
class SubmissionViewSet(
    PaginationMixin,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """Submission creation, listing and grading."""

    permission_classes = [IsAuthenticated, IsCourseMember, IsSubmissionParticipant]
    member_writes = True
    throttle_classes: list[type] = []

    def get_serializer_class(self):
        return SubmissionWriteSerializer if self.action == "create" else SubmissionReadSerializer

    def get_throttles(self):
        """Apply rate throttle only on create."""
        if self.action == "create":
            self.throttle_classes = [SubmissionRateThrottle]
        return super().get_throttles()

    def _assignment(self) -> Assignment:
        return get_object_or_404(
            Assignment.objects.select_related("course"),
            pk=self.kwargs.get("assignment_pk"),
            course_id=self.kwargs.get("course_pk"),
        )

    def get_queryset(self):
        """All submissions for the course owner, own submissions otherwise."""
        if getattr(self, "swagger_fake_view", False):
            return Submission.objects.none()
        return learning_service.list_assignment_submissions(self.request.user, self._assignment())

    def list(self, request: Request, *args, **kwargs) -> Response:
        return self.paginate_and_respond(self.get_queryset(), SubmissionReadSerializer)

    def create(self, request: Request, *args, **kwargs) -> Response:
        ser = SubmissionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        submission = learning_service.submit(request.user, self._assignment(), ser.validated_data["content"])
        return Response(SubmissionReadSerializer(submission).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Grades"],
        request=GradeWriteSerializer,
        responses={200: SubmissionReadSerializer, 400: OpenApiResponse(description="Grade out of range."), **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
    )
    @action(detail=True, methods=["post"], url_path="grade", permission_classes=[IsAuthenticated, IsCourseOwner])
    def grade(self, request: Request, pk: int | None = None, *args, **kwargs) -> Response:
        """Grade (or re-grade) a submission."""
        submission = self.get_object()
        ser = GradeWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        graded = learning_service.grade_submission(
            request.user,
            submission,
            ser.validated_data["grade"],
            ser.validated_data.get("feedback", ""),
        )
        return Response(SubmissionReadSerializer(graded).data)


@extend_schema(
    tags=["Grades"],
    description="Caller's submissions (students) or submissions across owned courses (teachers), with a summary.",
    responses={200: OpenApiResponse(description="`{summary, submissions}`"), **AUTH_RESPONSES},
)
class GradesView(SessionMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        session = self.session
        if isinstance(session, TeacherSession):
            submissions = list(learning_service.list_teacher_submissions(session.user))
        else:
            submissions = list(learning_service.list_student_submissions(session.user))
        return Response({
            "summary": GradeSummarySerializer(grade_summary.summarize(submissions)).data,
            "submissions": SubmissionReadSerializer(submissions, many=True).data,
        })


# ---------- Attendance ----------
@extend_schema(parameters=[OpenApiParameter("course_pk", int, OpenApiParameter.PATH)])
class AttendanceViewSet(SessionMixin, viewsets.ViewSet):
    """Per-day attendance of a course: the teacher marks and reviews, students read their history."""
    permission_classes = [IsAuthenticated, IsCourseMember]

    def _course(self) -> Course:
        return get_object_or_404(Course, pk=self.kwargs.get("course_pk"))

    @extend_schema(
        tags=["Attendance"],
        parameters=[OpenApiParameter("date", str, OpenApiParameter.QUERY, required=True, description="YYYY-MM-DD")],
        responses={200: AttendanceRowSerializer(many=True), **AUTH_RESPONSES},
        description=(
            "Teacher: roster with stored status; unrecorded students display as present "
            "(`recorded: false`). Student: own records for the date."
        ),
    )
    def list(self, request: Request, course_pk: int | None = None) -> Response:
        course = self._course()
        try:
            day = parse_date(request.query_params.get("date") or "")
        except ValueError:
            day = None
        if day is None:
            raise ValidationError("Query parameter `date` (YYYY-MM-DD) is required")
        if is_owner(request.user, course):
            rows = attendance_service.get_attendance_sheet(course, day)
            return Response({
                "date": day,
                "records": attendance_service.get_attendance(course, day),
                "roster": AttendanceRowSerializer(rows, many=True).data,
            })
        records = attendance_service.get_attendance_history(course, request.user).filter(date=day)
        return Response({"date": day, "records": AttendanceRecordSerializer(records, many=True).data})

    @extend_schema(
        tags=["Attendance"],
        request=AttendanceMarkSerializer,
        responses={200: AttendanceRecordSerializer(many=True), 400: OpenApiResponse(description="Validation error."), **AUTH_RESPONSES},
        extensions={"x-permissions": {"required_roles": ["teacher"], "ownership": "course-owner"}},
        description="Replace the attendance of the date: students not listed end up with no record.",
    )
    def create(self, request: Request, course_pk: int | None = None) -> Response:
        ser = AttendanceMarkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        records = attendance_service.mark_attendance(
            request.user, self._course(), ser.validated_data["date"], ser.validated_data["statuses"],
        )
        return Response(AttendanceRecordSerializer(records, many=True).data)

    @extend_schema(
        tags=["Attendance"],
        parameters=[OpenApiParameter("student", int, OpenApiParameter.QUERY, required=False,
                                     description="Teacher only: whose history to read.")],
        responses={200: AttendanceRecordSerializer(many=True), **AUTH_RESPONSES},
    )
    @action(detail=False, methods=["get"])
    def history(self, request: Request, course_pk: int | None = None) -> Response:
        """Newest-first records of the caller (or, for the teacher, of `?student=`)."""
        course = self._course()
        student = request.user
        student_id = request.query_params.get("student")
        if student_id:
            if not is_owner(request.user, course):
                raise PermissionDenied("Only the course teacher can read another student's attendance")
            if not student_id.isdigit():
                raise ValidationError("Query parameter `student` must be an id")
            student = User.objects.filter(pk=int(student_id), enrollments__course=course).first()
            if student is None:
                raise NotFoundError("Student is not enrolled in this course")
        records = attendance_service.get_attendance_history(course, student)
        return Response(AttendanceRecordSerializer(records, many=True).data)


# ---------- Course files ----------
@extend_schema_view(
    list=extend_schema(tags=["Files"], responses={200: CourseFileReadSerializer(many=True), **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Files"],
        request={"multipart/form-data": CourseFileWriteSerializer},
        responses={201: CourseFileReadSerializer, 400: OpenApiResponse(description="Validation error."), **AUTH_RESPONSES},
    ),
    destroy=extend_schema(tags=["Files"], responses={204: OpenApiResponse(description="Deleted"), **AUTH_RESPONSES}),
)
@extend_schema(parameters=[OpenApiParameter("course_pk", int, OpenApiParameter.PATH)])
class CourseFileViewSet(
    PaginationMixin,
    SessionMixin,
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Course materials (teacher) and student uploads."""
    permission_classes = [IsAuthenticated, IsCourseMember]
    member_writes = True
    queryset = CourseFile.objects.select_related("uploader__profile")

    def get_serializer_class(self):
        return CourseFileWriteSerializer if self.action == "create" else CourseFileReadSerializer

    def get_queryset(self):
        return self.queryset.filter(course_id=self.kwargs.get("course_pk"))

    def list(self, request: Request, *args, **kwargs) -> Response:
        return self.paginate_and_respond(self.get_queryset(), CourseFileReadSerializer)

    def create(self, request: Request, *args, **kwargs) -> Response:
        ser = CourseFileWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        upload = ser.validated_data["file"]
        course = get_object_or_404(Course, pk=self.kwargs.get("course_pk"))
        course_file = CourseFile.objects.create(
            course=course,
            uploader=request.user,
            uploader_role=self.session.role,
            file=upload,
            file_name=upload.name,
            file_size=upload.size,
            file_type=ser.validated_data["file_type"],
            description=ser.validated_data.get("description", ""),
        )
        logger.info("File %s uploaded to course %s by %s", course_file.pk, course.pk, request.user.pk)
        return Response(CourseFileReadSerializer(course_file).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance: CourseFile) -> None:
        """Teachers delete any file of their course, students only their own."""
        if not is_owner(self.request.user, instance.course) and instance.uploader_id != self.request.user.id:
            raise PermissionDenied("Only the uploader or the course teacher can delete this file")
        instance.file.delete(save=False)
        instance.delete()


# ---------- Assistant ----------
@extend_schema(
    tags=["Assistant"],
    request=AssistantRequestSerializer,
    responses={
        200: OpenApiResponse(description="`{response}`"),
        400: OpenApiResponse(description="`{error}`: missing or invalid field."),
        500: OpenApiResponse(description="`{error}`: assistant not configured."),
        502: OpenApiResponse(description="`{error}`: generative backend failed."),
        **AUTH_RESPONSES,
    },
)
class AssistantView(SessionMixin, APIView):
    """Question/answer proxy over the caller's own data."""
    permission_classes = [IsAuthenticated]
    throttle_classes = [AssistantRateThrottle]

    def post(self, request: Request) -> Response:
        ser = AssistantRequestSerializer(data=request.data)
        if not ser.is_valid():
            return Response(
                {"error": "Question, userId, and userRole are required", "fields": ser.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = ser.validated_data
        session = self.session
        if data["userId"] != request.user.id or data["userRole"] != session.role:
            return Response({"error": "userId and userRole must match the signed-in user"}, status=status.HTTP_403_FORBIDDEN)
        return Response({"response": assistant_service.ask(session, data["question"])})

    def handle_exception(self, exc: Exception) -> Response:
        """Render every failure of this endpoint as `{error}`."""
        response = super().handle_exception(exc)
        if isinstance(response.data, dict) and "detail" in response.data:
            logger.warning("Assistant request failed (%s): %s", response.status_code, response.data["detail"])
            response.data = {"error": str(response.data["detail"])}
        return response
