"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    vote: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")


class VoteResponse(BaseModel):
    """State after a vote submission; ``vote`` is 0 when the vote was removed."""

    vote: int
    removed: bool
    score: int
    karma_change: int


class MyVoteResponse(BaseModel):
    vote: int
