"""Voting state machine for questions and answers.

Each (voter, target) pair is in one of three states: no vote, upvoted or
downvoted. Submitting the current value removes the vote; submitting any
other value overwrites it. The author's karma moves by the difference
between the new and old values times ``VOTE_KARMA_WEIGHT``.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import ConflictError, NotFoundError
from gyansetu.core.policy import Action, enforce
from gyansetu.core.settings import settings
from gyansetu.models import Answer, AnswerVote, Profile, Question, QuestionVote
from gyansetu.models.vote import VOTE_UP
from gyansetu.services import notifications
from gyansetu.services.identity import current_role
from gyansetu.services.karma import apply_karma

logger = logging.getLogger(__name__)

__all__ = [
    "VoteOutcome",
    "karma_delta",
    "cast_question_vote",
    "cast_answer_vote",
    "my_question_vote",
    "my_answer_vote",
    "question_score",
    "answer_score",
]


@dataclass(frozen=True)
class VoteOutcome:
    """Result of one vote submission."""

    vote: int
    removed: bool
    score: int
    karma_change: int


def karma_delta(old_vote: int, new_vote: int, weight: int | None = None) -> int:
    """Return the karma change for moving from ``old_vote`` to ``new_vote`` (0 = none)."""
    return (new_vote - old_vote) * (settings.vote_karma_weight if weight is None else weight)


def question_score(db: Session, question_id: int) -> int:
    return int(
        db.scalar(
            select(func.coalesce(func.sum(QuestionVote.vote), 0)).where(
                QuestionVote.question_id == question_id
            )
        )
        or 0
    )


def answer_score(db: Session, answer_id: int) -> int:
    return int(
        db.scalar(
            select(func.coalesce(func.sum(AnswerVote.vote), 0)).where(
                AnswerVote.answer_id == answer_id
            )
        )
        or 0
    )


def my_question_vote(db: Session, user_id: int, question_id: int) -> int:
    """Return the caller's vote on a question, 0 when there is none."""
    vote = db.get(QuestionVote, (question_id, user_id))
    return vote.vote if vote is not None else 0


def my_answer_vote(db: Session, user_id: int, answer_id: int) -> int:
    vote = db.get(AnswerVote, (answer_id, user_id))
    return vote.vote if vote is not None else 0


def _transition(
    db: Session,
    existing: QuestionVote | AnswerVote | None,
    value: int,
    create: Callable[[], QuestionVote | AnswerVote],
) -> tuple[int, int]:
    """Apply the vote transition in the session and return (old, new)."""
    old_vote = existing.vote if existing is not None else 0
    if existing is not None and existing.vote == value:
        db.delete(existing)
        return old_vote, 0
    if existing is not None:
        existing.vote = value
    else:
        db.add(create())
    return old_vote, value


def _commit_vote(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as err:
        # Two submissions for the same pair raced on the composite key.
        db.rollback()
        raise ConflictError("Your vote changed concurrently, please try again") from err


def cast_question_vote(db: Session, actor: Profile, question_id: int, value: int) -> VoteOutcome:
    """Vote on a question and settle the author's karma in one transaction."""
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError("Question not found")

    enforce(
        actor.role,
        actor.id,
        current_role(db, question.author_id),
        question.author_id,
        Action.VOTE,
    )

    existing = db.get(QuestionVote, (question.id, actor.id))
    old_vote, new_vote = _transition(
        db,
        existing,
        value,
        lambda: QuestionVote(question_id=question.id, user_id=actor.id, vote=value),
    )

    delta = karma_delta(old_vote, new_vote)
    if delta:
        reason = "Question upvoted" if delta > 0 else "Question downvoted"
        apply_karma(db, question.author_id, delta, reason, question_id=question.id)
    if new_vote == VOTE_UP and old_vote != VOTE_UP:
        notifications.notify_question_upvote(db, question)

    _commit_vote(db)
    logger.info(
        "User %s voted on question %s: %d -> %d", actor.id, question.id, old_vote, new_vote
    )
    return VoteOutcome(
        vote=new_vote,
        removed=new_vote == 0,
        score=question_score(db, question.id),
        karma_change=delta,
    )


def cast_answer_vote(db: Session, actor: Profile, answer_id: int, value: int) -> VoteOutcome:
    """Vote on an answer and settle the author's karma in one transaction."""
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFoundError("Answer not found")

    enforce(
        actor.role,
        actor.id,
        current_role(db, answer.author_id),
        answer.author_id,
        Action.VOTE,
    )

    existing = db.get(AnswerVote, (answer.id, actor.id))
    old_vote, new_vote = _transition(
        db,
        existing,
        value,
        lambda: AnswerVote(answer_id=answer.id, user_id=actor.id, vote=value),
    )

    delta = karma_delta(old_vote, new_vote)
    if delta:
        reason = "Answer upvoted" if delta > 0 else "Answer downvoted"
        apply_karma(
            db,
            answer.author_id,
            delta,
            reason,
            question_id=answer.question_id,
            answer_id=answer.id,
        )
    if new_vote == VOTE_UP and old_vote != VOTE_UP:
        notifications.notify_answer_upvote(db, answer)

    _commit_vote(db)
    logger.info("User %s voted on answer %s: %d -> %d", actor.id, answer.id, old_vote, new_vote)
    return VoteOutcome(
        vote=new_vote,
        removed=new_vote == 0,
        score=answer_score(db, answer.id),
        karma_change=delta,
    )
