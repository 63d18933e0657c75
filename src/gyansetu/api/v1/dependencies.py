"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import AuthenticationError, PermissionDeniedError
from gyansetu.core.security import decode_access_token
from gyansetu.db.session import get_db
from gyansetu.models import Profile
from gyansetu.services.identity import ensure_superadmin

# Missing credentials are reported through AuthenticationError, not FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile:
    """Get the current authenticated user's profile from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        Profile of the authenticated user

    Raises:
        AuthenticationError: If the token is missing or invalid, or the user is gone
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    profile = db.get(Profile, user_id)
    if profile is None:
        raise AuthenticationError("User not found")
    ensure_superadmin(db, profile)
    return profile


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile | None:
    """Return the caller's profile when a valid token is sent, otherwise None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        user_id = decode_access_token(credentials.credentials)
    except AuthenticationError:
        return None
    return db.get(Profile, user_id)


def get_current_staff(current_user: Annotated[Profile, Depends(get_current_user)]) -> Profile:
    """Require an admin or superadmin."""
    if not current_user.is_staff:
        raise PermissionDeniedError("Only admins and superadmins can perform this action")
    return current_user


# Type aliases for current user dependencies
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]
OptionalUserDep = Annotated[Profile | None, Depends(get_optional_user)]
StaffDep = Annotated[Profile, Depends(get_current_staff)]
