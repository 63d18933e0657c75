"""Course management and the enrollment gate."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from gyansetu.core.policy import Role, is_staff
from gyansetu.models import Course, Enrollment, Profile

logger = logging.getLogger(__name__)

_UNSET = object()


def get_course(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def list_courses(
    db: Session,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Course]:
    """Return courses ordered by code, optionally filtered by name or code."""
    stmt = select(Course)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(Course.name.ilike(pattern) | Course.code.ilike(pattern))
    return db.scalars(stmt.order_by(Course.code).offset(skip).limit(limit)).all()


def can_post_in_course(db: Session, user_id: int, course_id: int) -> bool:
    """Return True when the user is enrolled in the course."""
    return db.get(Enrollment, (user_id, course_id)) is not None


def can_manage_course(profile: Profile, course: Course) -> bool:
    """Superadmins manage every course; admins manage theirs and unassigned ones."""
    role = profile.role_enum
    if role == Role.SUPERADMIN:
        return True
    if role == Role.ADMIN:
        return course.assigned_to is None or course.assigned_to == profile.id
    return False


def _require_staff(actor: Profile) -> None:
    if not is_staff(actor.role):
        raise PermissionDeniedError("Only admins and superadmins can manage courses")


def _validate_assignee(db: Session, assigned_to: int | None) -> None:
    if assigned_to is None:
        return
    assignee = db.get(Profile, assigned_to)
    if assignee is None or not assignee.is_staff:
        raise ValidationError("Courses can only be assigned to admins")


def _commit_course(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("A course with this code already exists") from err


def create_course(
    db: Session,
    actor: Profile,
    *,
    name: str,
    code: str,
    description: str | None = None,
    semester: str | None = None,
    assigned_to: int | None = None,
) -> Course:
    _require_staff(actor)
    name, code = name.strip(), code.strip()
    if not name or not code:
        raise ValidationError("Name and code are required")
    _validate_assignee(db, assigned_to)

    course = Course(
        name=name,
        code=code,
        description=(description or "").strip() or None,
        semester=(semester or "").strip() or None,
        assigned_to=assigned_to,
    )
    db.add(course)
    _commit_course(db)
    db.refresh(course)
    logger.info("User %s created course %s (%s)", actor.id, course.id, course.code)
    return course


def update_course(
    db: Session,
    actor: Profile,
    course_id: int,
    *,
    name: str | None = None,
    code: str | None = None,
    description: str | None = None,
    semester: str | None = None,
    assigned_to: object = _UNSET,
) -> Course:
    """Update course fields; ``assigned_to=None`` clears the assignment."""
    _require_staff(actor)
    course = get_course(db, course_id)
    if not can_manage_course(actor, course):
        raise PermissionDeniedError("This course is assigned to another admin")

    if name is not None:
        if not name.strip():
            raise ValidationError("Name and code are required")
        course.name = name.strip()
    if code is not None:
        if not code.strip():
            raise ValidationError("Name and code are required")
        course.code = code.strip()
    if description is not None:
        course.description = description.strip() or None
    if semester is not None:
        course.semester = semester.strip() or None
    if assigned_to is not _UNSET:
        _validate_assignee(db, assigned_to)  # type: ignore[arg-type]
        course.assigned_to = assigned_to  # type: ignore[assignment]

    _commit_course(db)
    db.refresh(course)
    return course


def delete_course(db: Session, actor: Profile, course_id: int) -> None:
    """Delete a course; its enrollments and questions go with it."""
    _require_staff(actor)
    course = get_course(db, course_id)
    if not can_manage_course(actor, course):
        raise PermissionDeniedError("This course is assigned to another admin")
    db.delete(course)
    db.commit()
    logger.info("User %s deleted course %s", actor.id, course_id)


def enroll(db: Session, actor: Profile, course_id: int) -> Enrollment:
    if is_staff(actor.role):
        raise PermissionDeniedError("Admins cannot enroll in courses")
    get_course(db, course_id)
    if can_post_in_course(db, actor.id, course_id):
        raise ConflictError("You are already enrolled in this course")

    enrollment = Enrollment(student_id=actor.id, course_id=course_id)
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("You are already enrolled in this course") from err
    db.refresh(enrollment)
    logger.info("User %s enrolled in course %s", actor.id, course_id)
    return enrollment


def unenroll(db: Session, actor: Profile, course_id: int) -> None:
    enrollment = db.get(Enrollment, (actor.id, course_id))
    if enrollment is None:
        raise NotFoundError("You are not enrolled in this course")
    db.delete(enrollment)
    db.commit()


def enrolled_courses(db: Session, user_id: int) -> Sequence[Course]:
    return db.scalars(
        select(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .where(Enrollment.student_id == user_id)
        .order_by(Course.code)
    ).all()


def assigned_courses(db: Session, admin_id: int) -> Sequence[Course]:
    return db.scalars(
        select(Course).where(Course.assigned_to == admin_id).order_by(Course.code)
    ).all()
