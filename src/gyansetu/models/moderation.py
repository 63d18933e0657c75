# src/gyansetu/models/moderation.py
"""Models tracking user reports against questions, answers and replies."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gyansetu.db.session import Base
from gyansetu.db.time import utcnow

REPORT_STATUS_PENDING = "pending"
REPORT_STATUS_RESOLVED = "resolved"
REPORT_STATUS_DISMISSED = "dismissed"

REPORT_STATUSES = (REPORT_STATUS_PENDING, REPORT_STATUS_RESOLVED, REPORT_STATUS_DISMISSED)


class ModerationReport(Base):
    """A user's complaint about exactly one piece of content."""

    __tablename__ = "moderation_reports"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'resolved', 'dismissed')",
            name="ck_moderation_reports_status",
        ),
        CheckConstraint(
            "(CASE WHEN question_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN answer_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN reply_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="ck_moderation_reports_single_target",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reporter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    answer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True,
    )
    reply_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("replies.id", ondelete="CASCADE"),
        nullable=True,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=REPORT_STATUS_PENDING
    )
    # "<reporter>:<kind>:<id>" while pending, NULL afterwards. The unique
    # index makes duplicate pending reports impossible.
    pending_key: Mapped[str | None] = mapped_column(String(96), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def target_kind(self) -> str:
        if self.question_id is not None:
            return "question"
        if self.answer_id is not None:
            return "answer"
        return "reply"

    @property
    def target_id(self) -> int:
        return self.question_id or self.answer_id or self.reply_id or 0
