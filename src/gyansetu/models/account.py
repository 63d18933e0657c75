# src/gyansetu/models/account.py
"""SQLAlchemy models for identities and their public profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gyansetu.core.policy import Role
from gyansetu.db.session import Base
from gyansetu.db.time import utcnow


class Account(Base):
    """Sign-in identity: an email and a password hash, nothing else."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    profile: Mapped[Profile | None] = relationship(
        "Profile",
        back_populates="account",
        cascade="all, delete-orphan",
        uselist=False,
    )


class Profile(Base):
    """Per-user public state: role, karma and display metadata.

    A profile shares its primary key with the account it belongs to. Karma
    is only changed through the karma ledger so it never drops below zero.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'admin', 'superadmin')", name="ck_profiles_role"),
        CheckConstraint("karma_points >= 0", name="ck_profiles_karma_non_negative"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=Role.STUDENT.value)
    karma_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    account: Mapped[Account] = relationship("Account", back_populates="profile")

    @property
    def role_enum(self) -> Role:
        """Return the role as a :class:`Role` member."""
        return Role(self.role)

    @property
    def is_staff(self) -> bool:
        """Return True for admins and superadmins."""
        return self.role in (Role.ADMIN.value, Role.SUPERADMIN.value)
