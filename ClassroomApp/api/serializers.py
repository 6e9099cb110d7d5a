"""Serializers for registration, profiles, courses, assignments, submissions, attendance and files."""

from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth import password_validation
from django.db import transaction

from ClassroomApp.courses.models import Course
from ClassroomApp.learning.models import Assignment, Submission, AttendanceRecord, CourseFile
from ClassroomApp.core.choices import AttendanceStatus, UserRole
from ClassroomApp.core.validators import validate_file_size, validate_course_file_mime
from ClassroomApp.users.models import Profile

User = get_user_model()

class RegistrationSerializer(serializers.ModelSerializer):
    """Serializer handling user registration; creates the user and its profile."""
    password = serializers.CharField(write_only=True, help_text="User password (write‑only).")
    full_name = serializers.CharField(max_length=200, help_text="Display name.")
    role = serializers.ChoiceField(choices=UserRole.choices)

    class Meta:
        model = User
        fields = ["id", "email", "password", "full_name", "role"]

    def validate_password(self, value: str) -> str:
        password_validation.validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated: dict) -> User:
        """Create and return a new user with its profile."""
        user = User(email=validated["email"], username=validated["email"])
        user.set_password(validated["password"])
        user.save()
        Profile.objects.create(user=user, full_name=validated["full_name"], role=validated["role"])
        return user


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


class ProfileSerializer(serializers.ModelSerializer):
    """Own profile; only the display name is writable."""
    id = serializers.IntegerField(source="user.id", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Profile
        fields = ["id", "email", "full_name", "role", "created_at", "updated_at"]
        read_only_fields = ["role", "created_at", "updated_at"]


class UserSerializer(serializers.ModelSerializer):
    """Public, safe representation of a user."""
    full_name = serializers.CharField(source="profile.full_name", read_only=True, default="")
    role = serializers.CharField(source="profile.role", read_only=True, default=None)

    class Meta:
        model = User
        fields = ["id", "email", "full_name", "role"]


class CourseWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating/updating a course."""

    class Meta:
        model = Course
        fields = ["title", "description", "duration"]


class CourseReadSerializer(serializers.ModelSerializer):
    """Serializer for reading course details including the teacher and counts."""
    teacher = UserSerializer(read_only=True)
    enrollment_count = serializers.IntegerField(read_only=True, default=None)
    assignment_count = serializers.IntegerField(read_only=True, default=None)

    class Meta:
        model = Course
        fields = [
            "id", "title", "description", "duration", "teacher",
            "enrollment_count", "assignment_count", "created_at", "updated_at",
        ]


class AssignmentWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating/updating an assignment."""

    class Meta:
        model = Assignment
        fields = ["title", "description", "due_date"]


class AssignmentReadSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = Assignment
        fields = ["id", "course", "course_title", "title", "description", "due_date", "created_at"]


class SubmissionWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating a submission."""

    content = serializers.CharField(help_text="Textual answer.")

    class Meta:
        model = Submission
        fields = ["content"]


class SubmissionReadSerializer(serializers.ModelSerializer):
    """Detailed submission view including grade and student."""
    student = UserSerializer(read_only=True)
    assignment_title = serializers.CharField(source="assignment.title", read_only=True)
    course_id = serializers.IntegerField(source="assignment.course_id", read_only=True)
    course_title = serializers.CharField(source="assignment.course.title", read_only=True)

    class Meta:
        model = Submission
        fields = [
            "id", "assignment", "assignment_title", "course_id", "course_title", "student",
            "content", "grade", "feedback", "submitted_at", "graded_at",
        ]
        read_only_fields = fields


class GradeWriteSerializer(serializers.Serializer):
    """Grade payload; range is enforced by the grading service."""
    grade = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_grade(self, value: float) -> float:
        # FloatField coerces JSON true/false to 1.0/0.0
        if isinstance(self.initial_data.get("grade"), bool):
            raise serializers.ValidationError("A valid number is required.")
        return value


class StudentAssignmentSerializer(serializers.Serializer):
    """An assignment paired with the caller's submission and derived status."""
    assignment = AssignmentReadSerializer()
    submission = SubmissionReadSerializer(allow_null=True)
    status = serializers.CharField()


class AttendanceMarkSerializer(serializers.Serializer):
    date = serializers.DateField()
    statuses = serializers.DictField(
        child=serializers.ChoiceField(choices=AttendanceStatus.choices),
        allow_empty=True,
        help_text="Student id -> present/absent/late. Omitted students are left unrecorded.",
    )


class AttendanceRecordSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = ["id", "course", "course_title", "student", "date", "status", "created_at"]


class AttendanceRowSerializer(serializers.Serializer):
    student = UserSerializer()
    status = serializers.CharField()
    recorded = serializers.BooleanField()


class CourseFileWriteSerializer(serializers.ModelSerializer):
    file = serializers.FileField(help_text="Course material; size/type validated.")
    description = serializers.CharField(required=False, allow_blank=True, default="")

    class Meta:
        model = CourseFile
        fields = ["file", "description"]

    def validate_file(self, file_obj: object) -> object:
        """Validate upload size and MIME; remember the sniffed type."""
        validate_file_size(file_obj)
        self.sniffed_mime = validate_course_file_mime(file_obj)
        return file_obj

    def validate(self, attrs: dict) -> dict:
        attrs["file_type"] = getattr(self, "sniffed_mime", None) or ""
        return attrs


class CourseFileReadSerializer(serializers.ModelSerializer):
    uploader = UserSerializer(read_only=True)

    class Meta:
        model = CourseFile
        fields = [
            "id", "course", "uploader", "uploader_role", "file", "file_name",
            "file_size", "file_type", "description", "created_at",
        ]


class AssistantRequestSerializer(serializers.Serializer):
    question = serializers.CharField()
    userId = serializers.IntegerField()
    userRole = serializers.ChoiceField(choices=UserRole.choices)


class GradeSummarySerializer(serializers.Serializer):
    average_grade = serializers.FloatField()
    graded_count = serializers.IntegerField()
    total_count = serializers.IntegerField()
    completion_rate = serializers.FloatField()
