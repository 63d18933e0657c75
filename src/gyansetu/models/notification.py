"""In-app notifications produced as side effects of user actions."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gyansetu.db.session import Base
from gyansetu.db.time import utcnow

NOTIFICATION_ANSWER = "answer"
NOTIFICATION_UPVOTE = "upvote"
NOTIFICATION_ACCEPTED = "accepted"
NOTIFICATION_REPLY = "reply"
NOTIFICATION_RESOLVED = "resolved"
NOTIFICATION_WELCOME = "welcome"


class Notification(Base):
    """Message addressed to a single recipient."""

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint(
            "type IN ('answer', 'upvote', 'accepted', 'reply', 'resolved', 'welcome')",
            name="ck_notifications_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    seen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    related_question_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=True,
    )
    related_answer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True,
    )
    related_reply_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("replies.id", ondelete="CASCADE"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
