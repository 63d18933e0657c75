"""SQLAlchemy models for courses and student enrollment."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyansetu.db.session import Base
from gyansetu.db.time import utcnow


class Course(Base):
    """Course metadata used for scoping questions."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    semester: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Admin responsible for the course, if any.
    assigned_to: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    enrollments: Mapped[list[Enrollment]] = relationship(
        "Enrollment",
        back_populates="course",
        cascade="all, delete-orphan",
    )


class Enrollment(Base):
    """Join table mapping students into courses."""

    __tablename__ = "enrollments"

    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Presence implies permission to post in the course.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    course: Mapped[Course] = relationship("Course", back_populates="enrollments")
