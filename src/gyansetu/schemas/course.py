"""Course-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CourseCreate(BaseModel):
    """Schema for creating a course."""

    name: str = Field(..., min_length=1, max_length=200)
    code: str = Field(..., min_length=1, max_length=64)
    description: str | None = None
    semester: str | None = Field(None, max_length=64)
    assigned_to: int | None = Field(None, description="Admin responsible for the course")


class CourseUpdate(BaseModel):
    """Partial course update; send ``assigned_to: null`` to clear the assignment."""

    name: str | None = Field(None, max_length=200)
    code: str | None = Field(None, max_length=64)
    description: str | None = None
    semester: str | None = Field(None, max_length=64)
    assigned_to: int | None = None


class CourseResponse(BaseModel):
    id: int
    name: str
    code: str
    description: str | None
    semester: str | None
    assigned_to: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EnrollmentResponse(BaseModel):
    student_id: int
    course_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
