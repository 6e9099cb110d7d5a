from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from ClassroomApp.core.choices import UserRole
from ClassroomApp.tests.helpers import make_user


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def teacher(db):
    return make_user("teacher@example.com", UserRole.TEACHER, "Tess Teacher")


@pytest.fixture
def other_teacher(db):
    return make_user("teacher2@example.com", UserRole.TEACHER)


@pytest.fixture
def student(db):
    return make_user("s1@example.com", UserRole.STUDENT, "Sam One")


@pytest.fixture
def student2(db):
    return make_user("s2@example.com", UserRole.STUDENT, "Sue Two")


@pytest.fixture
def course(teacher):
    from ClassroomApp.domain.services import course_service
    return course_service.create_course(teacher, {"title": "Algebra", "description": "Linear things", "duration": "8 weeks"})


@pytest.fixture
def enrolled(course, student, student2):
    from ClassroomApp.domain.services import course_service
    course_service.enroll(course, student)
    course_service.enroll(course, student2)
    return course


@pytest.fixture
def assignment(course, teacher):
    from ClassroomApp.domain.services import learning_service
    return learning_service.create_assignment(
        teacher, course, "Homework 1", "Solve it", due_date=timezone.now() + timedelta(days=3)
    )


@pytest.fixture
def past_assignment(course, teacher):
    from ClassroomApp.domain.services import learning_service
    return learning_service.create_assignment(
        teacher, course, "Late one", due_date=timezone.now() - timedelta(days=1)
    )
