# src/gyansetu/api/v1/endpoints/votes.py
"""Vote-related endpoints for the GyanSetu API."""

from fastapi import APIRouter

from gyansetu.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from gyansetu.services import voting
from gyansetu.services.content import get_answer, get_question

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


def _to_response(outcome: voting.VoteOutcome) -> VoteResponse:
    return VoteResponse(
        vote=outcome.vote,
        removed=outcome.removed,
        score=outcome.score,
        karma_change=outcome.karma_change,
    )


@router.post("/questions/{question_id}", response_model=VoteResponse)
async def vote_question(
    question_id: int,
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, change or withdraw (same value again) a vote on a question."""
    outcome = voting.cast_question_vote(db, current_user, question_id, vote_data.vote)
    return _to_response(outcome)


@router.post("/answers/{answer_id}", response_model=VoteResponse)
async def vote_answer(
    answer_id: int,
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, change or withdraw (same value again) a vote on an answer."""
    outcome = voting.cast_answer_vote(db, current_user, answer_id, vote_data.vote)
    return _to_response(outcome)


@router.get("/questions/{question_id}/my-vote", response_model=MyVoteResponse)
async def my_question_vote(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get current user's vote on a question (0 when none)."""
    get_question(db, question_id)
    return MyVoteResponse(vote=voting.my_question_vote(db, current_user.id, question_id))


@router.get("/answers/{answer_id}/my-vote", response_model=MyVoteResponse)
async def my_answer_vote(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    get_answer(db, answer_id)
    return MyVoteResponse(vote=voting.my_answer_vote(db, current_user.id, answer_id))
