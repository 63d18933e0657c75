"""Notification writer and inbox helpers.

The ``notify_*`` functions only add rows to the session; they are flushed
and committed together with the action that triggered them.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import NotFoundError
from gyansetu.models import Answer, Notification, Question, Reply
from gyansetu.models.notification import (
    NOTIFICATION_ACCEPTED,
    NOTIFICATION_ANSWER,
    NOTIFICATION_REPLY,
    NOTIFICATION_RESOLVED,
    NOTIFICATION_UPVOTE,
    NOTIFICATION_WELCOME,
)

logger = logging.getLogger(__name__)


def _excerpt(title: str, limit: int) -> str:
    return title[:limit]


def _add(db: Session, **fields: object) -> Notification:
    notification = Notification(**fields)
    db.add(notification)
    logger.debug("Queued %s notification for user %s", fields.get("type"), fields.get("user_id"))
    return notification


def notify_welcome(db: Session, user_id: int, app_name: str) -> Notification:
    return _add(
        db,
        user_id=user_id,
        message=f"Welcome to {app_name}! Ask questions in your courses and help your peers.",
        type=NOTIFICATION_WELCOME,
    )


def notify_new_answer(db: Session, question: Question, answer: Answer) -> Notification:
    return _add(
        db,
        user_id=question.author_id,
        message=f'Your question "{_excerpt(question.title, 50)}" received a new answer',
        type=NOTIFICATION_ANSWER,
        related_question_id=question.id,
        related_answer_id=answer.id,
    )


def notify_new_reply(db: Session, answer: Answer, reply: Reply) -> Notification:
    question = answer.question
    suffix = f' on "{_excerpt(question.title, 30)}"' if question is not None else ""
    return _add(
        db,
        user_id=answer.author_id,
        message=f"Your answer received a new reply{suffix}",
        type=NOTIFICATION_REPLY,
        related_question_id=answer.question_id,
        related_answer_id=answer.id,
        related_reply_id=reply.id,
    )


def notify_question_upvote(db: Session, question: Question) -> Notification:
    return _add(
        db,
        user_id=question.author_id,
        message=f'Your question "{_excerpt(question.title, 50)}" received an upvote',
        type=NOTIFICATION_UPVOTE,
        related_question_id=question.id,
    )


def notify_answer_upvote(db: Session, answer: Answer) -> Notification:
    return _add(
        db,
        user_id=answer.author_id,
        message="Your answer received an upvote",
        type=NOTIFICATION_UPVOTE,
        related_question_id=answer.question_id,
        related_answer_id=answer.id,
    )


def notify_answer_accepted(db: Session, answer: Answer) -> Notification:
    return _add(
        db,
        user_id=answer.author_id,
        message="Your answer was accepted!",
        type=NOTIFICATION_ACCEPTED,
        related_question_id=answer.question_id,
        related_answer_id=answer.id,
    )


def notify_best_answer(db: Session, answer: Answer) -> Notification:
    return _add(
        db,
        user_id=answer.author_id,
        message="Your answer was marked as the best answer!",
        type=NOTIFICATION_ACCEPTED,
        related_question_id=answer.question_id,
        related_answer_id=answer.id,
    )


def notify_question_resolved(db: Session, question: Question) -> Notification:
    return _add(
        db,
        user_id=question.author_id,
        message=f'Your question "{_excerpt(question.title, 50)}" was marked as resolved!',
        type=NOTIFICATION_RESOLVED,
        related_question_id=question.id,
    )


def list_notifications(
    db: Session,
    user_id: int,
    *,
    unseen_only: bool = False,
    limit: int = 50,
) -> Sequence[Notification]:
    """Return a user's notifications, newest first."""
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unseen_only:
        stmt = stmt.where(Notification.seen.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return db.scalars(stmt).all()


def count_unseen(db: Session, user_id: int) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.seen.is_(False))
        )
        or 0
    )


def mark_all_seen(db: Session, user_id: int) -> int:
    """Mark every unseen notification of the user as seen; return how many changed."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.seen.is_(False))
        .values(seen=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return int(result.rowcount or 0)


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
    """Delete one of the user's notifications."""
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    db.delete(notification)
    db.commit()
