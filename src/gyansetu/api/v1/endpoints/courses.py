# src/gyansetu/api/v1/endpoints/courses.py
"""Course and enrollment endpoints for the GyanSetu API."""

from fastapi import APIRouter, Query, status

from gyansetu.schemas.common import SuccessResponse
from gyansetu.schemas.course import (
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    EnrollmentResponse,
)
from gyansetu.services import courses as course_service

from ..dependencies import CurrentUserDep, SessionDep, StaffDep

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/", response_model=list[CourseResponse])
async def list_courses(
    db: SessionDep,
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
) -> list[CourseResponse]:
    """List courses ordered by code."""
    found = course_service.list_courses(db, search=search, skip=skip, limit=limit)
    return [CourseResponse.model_validate(course) for course in found]


@router.get("/mine", response_model=list[CourseResponse])
async def my_courses(current_user: CurrentUserDep, db: SessionDep) -> list[CourseResponse]:
    """Courses the caller is enrolled in."""
    found = course_service.enrolled_courses(db, current_user.id)
    return [CourseResponse.model_validate(course) for course in found]


@router.get("/assigned", response_model=list[CourseResponse])
async def assigned_courses(current_user: StaffDep, db: SessionDep) -> list[CourseResponse]:
    """Courses assigned to the calling admin."""
    found = course_service.assigned_courses(db, current_user.id)
    return [CourseResponse.model_validate(course) for course in found]


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int, db: SessionDep) -> CourseResponse:
    return CourseResponse.model_validate(course_service.get_course(db, course_id))


@router.post("/", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CourseResponse:
    course = course_service.create_course(
        db,
        current_user,
        name=payload.name,
        code=payload.code,
        description=payload.description,
        semester=payload.semester,
        assigned_to=payload.assigned_to,
    )
    return CourseResponse.model_validate(course)


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: int,
    payload: CourseUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CourseResponse:
    """Update a course; only fields present in the body change."""
    changes = payload.model_dump(exclude_unset=True)
    course = course_service.update_course(db, current_user, course_id, **changes)
    return CourseResponse.model_validate(course)


@router.delete("/{course_id}", response_model=SuccessResponse)
async def delete_course(
    course_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    course_service.delete_course(db, current_user, course_id)
    return SuccessResponse()


@router.post(
    "/{course_id}/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def enroll(course_id: int, current_user: CurrentUserDep, db: SessionDep) -> EnrollmentResponse:
    enrollment = course_service.enroll(db, current_user, course_id)
    return EnrollmentResponse.model_validate(enrollment)


@router.delete("/{course_id}/enroll", response_model=SuccessResponse)
async def unenroll(course_id: int, current_user: CurrentUserDep, db: SessionDep) -> SuccessResponse:
    course_service.unenroll(db, current_user, course_id)
    return SuccessResponse()


@router.get("/{course_id}/can-post")
async def can_post(course_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    """Whether the caller may ask questions in the course."""
    course = course_service.get_course(db, course_id)
    return {
        "can_post": (
            not current_user.is_staff
            and course_service.can_post_in_course(db, current_user.id, course_id)
        ),
        "can_manage": course_service.can_manage_course(current_user, course),
    }
