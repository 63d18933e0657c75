# tests/test_courses.py
"""Courses, assignment and enrollment."""

import pytest
from sqlalchemy import select

from gyansetu.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from gyansetu.core.policy import Role
from gyansetu.models import Course, Question
from gyansetu.services import courses


def test_admin_creates_course(db_session, admin) -> None:
    course = courses.create_course(
        db_session, admin, name=" Operating Systems ", code="CS310", semester="", assigned_to=admin.id
    )
    assert course.name == "Operating Systems"
    assert course.semester is None
    assert course.assigned_to == admin.id


def test_students_cannot_create_courses(db_session, student) -> None:
    with pytest.raises(PermissionDeniedError, match="manage courses"):
        courses.create_course(db_session, student, name="Hacking", code="X1")


def test_course_name_and_code_required(db_session, admin) -> None:
    with pytest.raises(ValidationError, match="Name and code are required"):
        courses.create_course(db_session, admin, name="Networks", code="  ")


def test_duplicate_code_conflicts(db_session, admin, course) -> None:
    with pytest.raises(ConflictError):
        courses.create_course(db_session, admin, name="Copy", code=course.code)


def test_assignee_must_be_staff(db_session, admin, student) -> None:
    with pytest.raises(ValidationError, match="assigned to admins"):
        courses.create_course(db_session, admin, name="Compilers", code="CS420", assigned_to=student.id)


def test_list_courses_search(db_session, admin) -> None:
    courses.create_course(db_session, admin, name="Linear Algebra", code="MA201")
    courses.create_course(db_session, admin, name="Databases", code="CS340")

    assert [c.code for c in courses.list_courses(db_session)] == ["CS340", "MA201"]
    assert [c.code for c in courses.list_courses(db_session, search="algebra")] == ["MA201"]
    assert [c.code for c in courses.list_courses(db_session, search="cs3")] == ["CS340"]


def test_can_manage_course(make_user, course) -> None:
    owner = course.assigned_to
    other_admin = make_user(Role.ADMIN)
    root = make_user(Role.SUPERADMIN)
    pupil = make_user()

    assert courses.can_manage_course(root, course) is True
    assert courses.can_manage_course(other_admin, course) is False
    assert courses.can_manage_course(pupil, course) is False
    assert owner is not None

    course.assigned_to = None
    assert courses.can_manage_course(other_admin, course) is True


def test_update_course_by_owner(db_session, admin, course) -> None:
    updated = courses.update_course(db_session, admin, course.id, description="", semester="Spring")
    assert updated.description is None
    assert updated.semester == "Spring"

    cleared = courses.update_course(db_session, admin, course.id, assigned_to=None)
    assert cleared.assigned_to is None


def test_other_admin_cannot_update(db_session, make_user, course) -> None:
    with pytest.raises(PermissionDeniedError, match="assigned to another admin"):
        courses.update_course(db_session, make_user(Role.ADMIN), course.id, name="Mine")


def test_delete_course_removes_questions(db_session, admin, enrolled_student, course) -> None:
    db_session.add(Question(title="Exam date?", author_id=enrolled_student.id, course_id=course.id))
    db_session.commit()

    courses.delete_course(db_session, admin, course.id)

    db_session.expire_all()
    assert db_session.get(Course, course.id) is None
    assert db_session.scalars(select(Question)).all() == []
    assert courses.enrolled_courses(db_session, enrolled_student.id) == []


def test_enroll_and_unenroll(db_session, student, course) -> None:
    assert courses.can_post_in_course(db_session, student.id, course.id) is False
    courses.enroll(db_session, student, course.id)
    assert courses.can_post_in_course(db_session, student.id, course.id) is True
    assert [c.id for c in courses.enrolled_courses(db_session, student.id)] == [course.id]

    with pytest.raises(ConflictError, match="already enrolled"):
        courses.enroll(db_session, student, course.id)

    courses.unenroll(db_session, student, course.id)
    assert courses.can_post_in_course(db_session, student.id, course.id) is False
    with pytest.raises(NotFoundError, match="not enrolled"):
        courses.unenroll(db_session, student, course.id)


def test_admins_cannot_enroll(db_session, admin, course) -> None:
    with pytest.raises(PermissionDeniedError, match="cannot enroll"):
        courses.enroll(db_session, admin, course.id)


def test_enroll_in_missing_course(db_session, student) -> None:
    with pytest.raises(NotFoundError, match="Course not found"):
        courses.enroll(db_session, student, 4040)


def test_assigned_courses(db_session, admin, course) -> None:
    courses.create_course(db_session, admin, name="Unowned", code="ZZ100")
    assert [c.id for c in courses.assigned_courses(db_session, admin.id)] == [course.id]
