# src/gyansetu/api/v1/endpoints/users.py
"""User profile, leaderboard and role endpoints for the GyanSetu API."""

from fastapi import APIRouter, Query

from gyansetu.models import Profile
from gyansetu.schemas.profile import (
    KarmaLogResponse,
    LeaderboardEntry,
    ProfileResponse,
    ProfileUpdate,
    PublicProfile,
    RoleUpdate,
)
from gyansetu.services import identity
from gyansetu.services.karma import badges_for

from ..dependencies import CurrentUserDep, SessionDep, StaffDep

router = APIRouter(prefix="/users", tags=["users"])


def _public(profile: Profile) -> PublicProfile:
    return PublicProfile.model_validate(profile).model_copy(
        update={"badges": badges_for(profile.karma_points)}
    )


@router.get("/me", response_model=ProfileResponse)
async def read_me(current_user: CurrentUserDep) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    payload: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Update the caller's display name and bio."""
    profile = identity.update_profile(
        db,
        current_user,
        display_name=payload.display_name,
        bio=payload.bio,
    )
    return ProfileResponse.model_validate(profile)


@router.get("/me/karma-log", response_model=list[KarmaLogResponse])
async def my_karma_log(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[KarmaLogResponse]:
    """Karma ledger entries of the caller, newest first."""
    entries = identity.karma_history(db, current_user.id, limit=limit)
    return [KarmaLogResponse.model_validate(entry) for entry in entries]


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def leaderboard(
    db: SessionDep,
    limit: int | None = Query(None, ge=1, le=100),
) -> list[LeaderboardEntry]:
    """Students ranked by karma."""
    return [
        LeaderboardEntry(
            rank=rank,
            id=profile.id,
            display_name=profile.display_name,
            karma_points=profile.karma_points,
            badges=badges_for(profile.karma_points),
        )
        for rank, profile in enumerate(identity.leaderboard(db, limit), start=1)
    ]


@router.get("/", response_model=list[ProfileResponse])
async def list_users(
    current_user: StaffDep,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[ProfileResponse]:
    profiles = identity.list_profiles(db, skip=skip, limit=limit)
    return [ProfileResponse.model_validate(profile) for profile in profiles]


@router.get("/{user_id}", response_model=PublicProfile)
async def read_user(user_id: int, db: SessionDep) -> PublicProfile:
    return _public(identity.get_profile(db, user_id))


@router.patch("/{user_id}/role", response_model=ProfileResponse)
async def update_role(
    user_id: int,
    payload: RoleUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Change another user's role."""
    profile = identity.update_user_role(db, current_user, user_id, payload.role)
    return ProfileResponse.model_validate(profile)
