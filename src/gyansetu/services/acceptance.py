"""Answer acceptance and best-answer marking."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from gyansetu.core.exceptions import NotFoundError, PermissionDeniedError
from gyansetu.core.policy import Action, enforce
from gyansetu.core.settings import settings
from gyansetu.models import Answer, Profile, Question
from gyansetu.services import notifications
from gyansetu.services.identity import current_role
from gyansetu.services.karma import apply_karma

logger = logging.getLogger(__name__)


def _get_answer_or_404(db: Session, answer_id: int) -> Answer:
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


def accept_answer(db: Session, actor: Profile, answer_id: int) -> Answer:
    """Toggle acceptance of an answer.

    Accepting an answer first unaccepts any other accepted answer on the
    same question, reversing its bonus, so at most one answer per question
    is accepted once the transaction commits. Accepting an already accepted
    answer unaccepts it.

    Args:
        db: Database session
        actor: Profile performing the action
        answer_id: Answer to toggle

    Returns:
        The updated answer.

    Raises:
        NotFoundError: The answer does not exist.
        PermissionDeniedError: The actor is neither the question author nor
            staff, or is the answer's author.
    """
    answer = _get_answer_or_404(db, answer_id)
    question = answer.question

    enforce(
        actor.role,
        actor.id,
        current_role(db, question.author_id),
        question.author_id,
        Action.ACCEPT_ANSWER,
    )
    if answer.author_id == actor.id:
        raise PermissionDeniedError("You cannot accept your own answer")

    bonus = settings.accept_karma_bonus
    if answer.is_accepted:
        answer.is_accepted = False
        apply_karma(
            db,
            answer.author_id,
            -bonus,
            "Answer unaccepted",
            question_id=question.id,
            answer_id=answer.id,
        )
    else:
        for other in question.answers:
            if other.id != answer.id and other.is_accepted:
                other.is_accepted = False
                apply_karma(
                    db,
                    other.author_id,
                    -bonus,
                    "Answer unaccepted",
                    question_id=question.id,
                    answer_id=other.id,
                )
        answer.is_accepted = True
        apply_karma(
            db,
            answer.author_id,
            bonus,
            "Answer accepted",
            question_id=question.id,
            answer_id=answer.id,
        )
        notifications.notify_answer_accepted(db, answer)

    db.commit()
    db.refresh(answer)
    logger.info(
        "User %s set accepted=%s on answer %s", actor.id, answer.is_accepted, answer.id
    )
    return answer


def mark_best_answer(db: Session, actor: Profile, answer_id: int) -> Question:
    """Toggle the staff-chosen best answer of a question."""
    answer = _get_answer_or_404(db, answer_id)
    question = answer.question

    enforce(
        actor.role,
        actor.id,
        current_role(db, answer.author_id),
        answer.author_id,
        Action.MARK_BEST_ANSWER,
    )

    bonus = settings.best_answer_karma_bonus
    if question.best_answer_id == answer.id:
        question.best_answer_id = None
        apply_karma(
            db,
            answer.author_id,
            -bonus,
            "Best answer unmarked",
            question_id=question.id,
            answer_id=answer.id,
        )
    else:
        previous = db.get(Answer, question.best_answer_id) if question.best_answer_id else None
        if previous is not None:
            apply_karma(
                db,
                previous.author_id,
                -bonus,
                "Best answer changed",
                question_id=question.id,
                answer_id=previous.id,
            )
        question.best_answer_id = answer.id
        apply_karma(
            db,
            answer.author_id,
            bonus,
            "Answer marked as best answer",
            question_id=question.id,
            answer_id=answer.id,
        )
        notifications.notify_best_answer(db, answer)

    db.commit()
    db.refresh(question)
    logger.info(
        "User %s set best answer of question %s to %s",
        actor.id,
        question.id,
        question.best_answer_id,
    )
    return question
