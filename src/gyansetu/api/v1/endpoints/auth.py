# src/gyansetu/api/v1/endpoints/auth.py
"""Authentication endpoints for the GyanSetu API."""

from fastapi import APIRouter, status

from gyansetu.core.security import create_access_token
from gyansetu.models import Profile
from gyansetu.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from gyansetu.schemas.profile import ProfileResponse
from gyansetu.services import identity

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


def _token_response(profile: Profile) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(profile.id, {"role": profile.role}),
        profile=ProfileResponse.model_validate(profile),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> TokenResponse:
    """Create an account and return an access token for it."""
    profile = identity.register_account(
        db,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
    )
    return _token_response(profile)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange email and password for an access token."""
    profile = identity.authenticate(db, email=payload.email, password=payload.password)
    return _token_response(profile)


@router.get("/me", response_model=ProfileResponse)
async def me(current_user: CurrentUserDep) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)
