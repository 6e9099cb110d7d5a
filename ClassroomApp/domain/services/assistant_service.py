"""AI assistant: builds a role-specific data context and asks the Gemini API.

The context is the caller's own LMS data serialized as indented JSON:
    teacher -> owned courses (with counts) and their assignments
    student -> enrollments, submissions and attendance
"""

import json
import logging
from typing import Any

import requests
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db.models import Count

from ClassroomApp.core.exceptions import AssistantNotConfigured, UpstreamError
from ClassroomApp.core.session import Session, TeacherSession
from ClassroomApp.courses.models import Course, Enrollment
from ClassroomApp.learning.models import Assignment, AttendanceRecord, Submission

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "Sorry, I could not generate a response."

TEACHER_PROMPT = """
You are an AI assistant for a teacher in the classroom LMS.

Teacher's Courses:
{courses}

Teacher's Assignments:
{assignments}

Based on this data, answer the teacher's question helpfully and concisely.
"""

STUDENT_PROMPT = """
You are an AI assistant for a student in the classroom LMS.

Student's Enrolled Courses:
{enrollments}

Student's Submissions:
{submissions}

Student's Attendance:
{attendance}

Based on this data, answer the student's question helpfully and concisely.
"""


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, cls=DjangoJSONEncoder)


def _teacher_context(session: TeacherSession) -> str:
    courses = list(
        Course.objects.for_teacher(session.user)
        .with_counts()
        .order_by("-created_at")
        .values("id", "title", "description", "duration", "created_at", "enrollment_count", "assignment_count")
    )
    assignments = list(
        Assignment.objects.for_teacher(session.user)
        .annotate(submission_count=Count("submissions"))
        .order_by("-created_at")
        .values("id", "title", "description", "due_date", "course_id", "course__title", "submission_count")
    )
    return TEACHER_PROMPT.format(courses=_dump(courses), assignments=_dump(assignments))


def _student_context(session: Session) -> str:
    user = session.user
    enrollments = list(
        Enrollment.objects.for_student(user)
        .values("course_id", "enrolled_at", "course__title", "course__description", "course__teacher_id")
    )
    submissions = list(
        Submission.objects.for_student(user)
        .values(
            "id", "content", "grade", "feedback", "submitted_at", "graded_at",
            "assignment__title", "assignment__due_date", "assignment__course_id",
        )
    )
    attendance = list(
        AttendanceRecord.objects.filter(student=user)
        .order_by("-date")
        .values("date", "status", "course_id", "course__title")
    )
    return STUDENT_PROMPT.format(
        enrollments=_dump(enrollments),
        submissions=_dump(submissions),
        attendance=_dump(attendance),
    )


def build_context(session: Session) -> str:
    """Role-specific instruction text with the caller's data embedded."""
    if isinstance(session, TeacherSession):
        return _teacher_context(session)
    return _student_context(session)


def _extract_text(payload: dict) -> str:
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return FALLBACK_RESPONSE
    return text or FALLBACK_RESPONSE


def generate(context: str, question: str) -> str:
    """POST the prompt to Gemini generateContent and return the first candidate's text.

    Raises:
        AssistantNotConfigured: GEMINI_API_KEY is empty.
        UpstreamError: network failure or non-2xx reply.
    """
    api_key = settings.GEMINI_API_KEY
    if not api_key:
        logger.error("Assistant called but GEMINI_API_KEY is not configured")
        raise AssistantNotConfigured()
    url = f"{settings.GEMINI_API_URL.rstrip('/')}/models/{settings.GEMINI_MODEL}:generateContent"
    body = {
        "contents": [{"parts": [{"text": f"{context}\n\nUser Question: {question}"}]}],
        "generationConfig": {
            "temperature": settings.ASSISTANT_TEMPERATURE,
            "maxOutputTokens": settings.ASSISTANT_MAX_OUTPUT_TOKENS,
        },
    }
    try:
        r = requests.post(
            url,
            params={"key": api_key},
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=settings.ASSISTANT_TIMEOUT,
        )
        r.raise_for_status()
        payload = r.json()
    except requests.HTTPError as e:
        body_text = e.response.text if e.response is not None else ""
        logger.error(
            "Gemini generateContent failed: %s %s",
            getattr(e.response, "status_code", ""), body_text[:500],
        )
        raise UpstreamError("Failed to get response from AI")
    except (requests.RequestException, ValueError):
        logger.exception("Gemini generateContent request failed")
        raise UpstreamError("Failed to get response from AI")
    return _extract_text(payload)


def ask(session: Session, question: str) -> str:
    """Answer `question` for the session's user using their own LMS data."""
    context = build_context(session)
    logger.info("Assistant question from %s %s (%d context chars)", session.role, session.user.pk, len(context))
    return generate(context, question)
