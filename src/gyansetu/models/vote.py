# src/gyansetu/models/vote.py
"""Models capturing voting interactions on questions and answers."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from gyansetu.db.session import Base
from gyansetu.db.time import utcnow

VOTE_UP = 1
VOTE_DOWN = -1


class QuestionVote(Base):
    """Per-user vote on a question.

    The composite primary key guarantees a single vote per (question, user).
    """

    __tablename__ = "question_votes"
    __table_args__ = (
        CheckConstraint("vote IN (1, -1)", name="ck_question_votes_vote"),
        Index("ix_question_votes_user_id", "user_id"),
    )

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # 1 = upvote, -1 = downvote.
    vote: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class AnswerVote(Base):
    """Per-user vote on an answer."""

    __tablename__ = "answer_votes"
    __table_args__ = (
        CheckConstraint("vote IN (1, -1)", name="ck_answer_votes_vote"),
        Index("ix_answer_votes_user_id", "user_id"),
    )

    answer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    vote: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
