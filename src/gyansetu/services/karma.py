"""Karma ledger: apply signed point changes to profiles and record them."""
from __future__ import annotations

import logging

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import NotFoundError
from gyansetu.models import KarmaLog, Profile

logger = logging.getLogger(__name__)

__all__ = [
    "apply_karma",
    "badges_for",
    "BADGE_TIERS",
]

# Highest tier first; a profile shows only the best badge it qualifies for.
BADGE_TIERS: tuple[tuple[int, str], ...] = (
    (1000, "Expert Mentor"),
    (500, "Active Contributor"),
    (100, "Rising Star"),
)


def apply_karma(
    db: Session,
    user_id: int,
    change: int,
    reason: str,
    *,
    question_id: int | None = None,
    answer_id: int | None = None,
) -> int:
    """Add ``change`` to a profile's karma, floored at zero, and log it.

    The floor is evaluated inside a single UPDATE statement so concurrent
    writers never observe or persist a negative balance. The caller owns
    the transaction: nothing is committed here, which lets the vote or
    acceptance write, the karma update and the ledger entry land together.

    Args:
        db: Database session
        user_id: Profile receiving the change
        change: Signed number of points
        reason: Human-readable ledger reason
        question_id: Related question, if any
        answer_id: Related answer, if any

    Returns:
        The profile's karma after the update.
    """
    new_total = Profile.karma_points + change
    result = db.execute(
        update(Profile)
        .where(Profile.id == user_id)
        .values(karma_points=case((new_total < 0, 0), else_=new_total))
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        raise NotFoundError("User profile not found")

    db.add(
        KarmaLog(
            user_id=user_id,
            change=change,
            reason=reason,
            related_question_id=question_id,
            related_answer_id=answer_id,
        )
    )
    db.flush()

    karma = db.execute(select(Profile.karma_points).where(Profile.id == user_id)).scalar_one()
    logger.info("Karma %+d for user %s (%s), now %d", change, user_id, reason, karma)
    return int(karma)


def badges_for(karma_points: int) -> list[str]:
    """Return the karma badge earned at this score, if any."""
    for threshold, name in BADGE_TIERS:
        if karma_points >= threshold:
            return [name]
    return []
