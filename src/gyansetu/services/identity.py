"""Account, profile and role management."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gyansetu.core import security
from gyansetu.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from gyansetu.core.policy import Action, Role, enforce, parse_role
from gyansetu.core.settings import settings
from gyansetu.models import Account, KarmaLog, Profile
from gyansetu.services import notifications

logger = logging.getLogger(__name__)

__all__ = [
    "current_role",
    "get_profile",
    "register_account",
    "authenticate",
    "ensure_superadmin",
    "update_profile",
    "update_user_role",
    "list_profiles",
    "leaderboard",
    "karma_history",
]


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _is_designated_superadmin(email: str) -> bool:
    return bool(settings.superadmin_email) and (
        _normalize_email(email) == _normalize_email(settings.superadmin_email or "")
    )


def current_role(db: Session, user_id: int) -> Role:
    """Return the effective role of a user; missing profiles count as students."""
    role = db.scalar(select(Profile.role).where(Profile.id == user_id))
    return parse_role(role)


def get_profile(db: Session, user_id: int) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("User not found")
    return profile


def register_account(
    db: Session,
    *,
    email: str,
    password: str,
    display_name: str | None = None,
) -> Profile:
    """Create an account with its profile and send the welcome notification."""
    normalized = _normalize_email(email)
    if db.scalar(select(Account.id).where(Account.email == normalized)) is not None:
        raise ConflictError("An account with this email already exists")

    account = Account(email=normalized, password_hash=security.hash_password(password))
    role = Role.SUPERADMIN if _is_designated_superadmin(normalized) else Role.STUDENT
    account.profile = Profile(
        email=normalized,
        display_name=(display_name or "").strip() or normalized.split("@", 1)[0],
        role=role.value,
        karma_points=0,
    )
    db.add(account)
    try:
        db.flush()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("An account with this email already exists") from err

    notifications.notify_welcome(db, account.id, settings.app_name)
    db.commit()
    db.refresh(account)
    logger.info("Registered account %s as %s", account.id, role.value)
    return account.profile  # type: ignore[return-value]


def authenticate(db: Session, *, email: str, password: str) -> Profile:
    """Verify credentials and return the caller's profile."""
    account = db.scalar(select(Account).where(Account.email == _normalize_email(email)))
    if account is None or not security.verify_password(password, account.password_hash):
        raise AuthenticationError("Invalid email or password")

    if account.profile is None:
        # Identity exists without a profile row; recreate it with the default role.
        account.profile = Profile(email=account.email, role=Role.STUDENT.value, karma_points=0)
        db.commit()
    ensure_superadmin(db, account.profile)
    return account.profile


def ensure_superadmin(db: Session, profile: Profile) -> None:
    """Promote the configured superadmin email if it is not already promoted."""
    if _is_designated_superadmin(profile.email) and profile.role != Role.SUPERADMIN.value:
        profile.role = Role.SUPERADMIN.value
        db.commit()
        logger.info("Promoted designated superadmin %s", profile.id)


def update_profile(
    db: Session,
    profile: Profile,
    *,
    display_name: str | None = None,
    bio: str | None = None,
) -> Profile:
    """Change the caller's own display name and bio."""
    if display_name is not None:
        cleaned = display_name.strip()
        if not cleaned:
            raise ValidationError("Display name cannot be empty")
        profile.display_name = cleaned
    if bio is not None:
        profile.bio = bio.strip() or None
    db.commit()
    db.refresh(profile)
    return profile


def update_user_role(db: Session, actor: Profile, target_id: int, new_role: Role) -> Profile:
    """Change another user's role following the role-management rules."""
    target = db.get(Profile, target_id)
    if target is None:
        raise NotFoundError("User not found")

    enforce(actor.role, actor.id, target.role, target.id, Action.CHANGE_ROLE)
    if actor.role == Role.ADMIN.value and target.role != Role.STUDENT.value:
        raise PermissionDeniedError("Admins can only modify student roles.")
    if new_role == Role.SUPERADMIN and not _is_designated_superadmin(target.email):
        raise PermissionDeniedError(
            "SuperAdmin role can only be assigned to the designated email."
        )

    previous = target.role
    target.role = new_role.value
    db.commit()
    db.refresh(target)
    logger.info("User %s changed role of %s: %s -> %s", actor.id, target.id, previous, new_role)
    return target


def list_profiles(db: Session, *, skip: int = 0, limit: int = 100) -> Sequence[Profile]:
    return db.scalars(select(Profile).order_by(Profile.id).offset(skip).limit(limit)).all()


def leaderboard(db: Session, limit: int | None = None) -> Sequence[Profile]:
    """Return students ordered by karma, best first."""
    size = limit or settings.leaderboard_size
    return db.scalars(
        select(Profile)
        .where(Profile.role == Role.STUDENT.value)
        .order_by(Profile.karma_points.desc(), Profile.id)
        .limit(size)
    ).all()


def karma_history(db: Session, user_id: int, *, limit: int = 50) -> Sequence[KarmaLog]:
    return db.scalars(
        select(KarmaLog)
        .where(KarmaLog.user_id == user_id)
        .order_by(KarmaLog.created_at.desc(), KarmaLog.id.desc())
        .limit(limit)
    ).all()
