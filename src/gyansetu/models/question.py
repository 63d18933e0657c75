# src/gyansetu/models/question.py
"""SQLAlchemy models for questions, answers and replies."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyansetu.db.session import Base
from gyansetu.db.time import utcnow

if TYPE_CHECKING:
    from .moderation import ModerationReport
    from .notification import Notification
    from .vote import AnswerVote, QuestionVote


class Question(Base):
    """Question posted by a student, optionally scoped to a course.

    A null ``course_id`` marks a general question. Deleting a question
    removes its answers, replies, votes, reports and notifications in the
    same transaction.
    """

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    best_answer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey(
            "answers.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_questions_best_answer_id",
        ),
        nullable=True,
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    answers: Mapped[list[Answer]] = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        foreign_keys="Answer.question_id",
        order_by="Answer.created_at",
    )
    votes: Mapped[list[QuestionVote]] = relationship(
        "QuestionVote",
        cascade="all, delete-orphan",
    )
    reports: Mapped[list[ModerationReport]] = relationship(
        "ModerationReport",
        cascade="all, delete-orphan",
        foreign_keys="ModerationReport.question_id",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        cascade="all, delete-orphan",
        foreign_keys="Notification.related_question_id",
    )

    @property
    def score(self) -> int:
        """Net vote total."""
        return sum(vote.vote for vote in self.votes)


class Answer(Base):
    """Answer to a question; at most one per question is accepted."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    question: Mapped[Question] = relationship(
        "Question",
        back_populates="answers",
        foreign_keys=[question_id],
    )
    replies: Mapped[list[Reply]] = relationship(
        "Reply",
        back_populates="answer",
        cascade="all, delete-orphan",
        order_by="Reply.created_at",
    )
    votes: Mapped[list[AnswerVote]] = relationship(
        "AnswerVote",
        cascade="all, delete-orphan",
    )
    reports: Mapped[list[ModerationReport]] = relationship(
        "ModerationReport",
        cascade="all, delete-orphan",
        foreign_keys="ModerationReport.answer_id",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        cascade="all, delete-orphan",
        foreign_keys="Notification.related_answer_id",
    )

    # Vote tallies are derived from the normalized vote table.
    @property
    def upvotes(self) -> int:
        return sum(1 for vote in self.votes if vote.vote == 1)

    @property
    def downvotes(self) -> int:
        return sum(1 for vote in self.votes if vote.vote == -1)

    @property
    def score(self) -> int:
        return self.upvotes - self.downvotes

    @property
    def upvoted_by(self) -> list[int]:
        """Deprecated view of the upvoters kept for older clients."""
        return sorted(vote.user_id for vote in self.votes if vote.vote == 1)


class Reply(Base):
    """Flat comment on an answer."""

    __tablename__ = "replies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    answer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    answer: Mapped[Answer] = relationship("Answer", back_populates="replies")
    reports: Mapped[list[ModerationReport]] = relationship(
        "ModerationReport",
        cascade="all, delete-orphan",
        foreign_keys="ModerationReport.reply_id",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        cascade="all, delete-orphan",
        foreign_keys="Notification.related_reply_id",
    )
