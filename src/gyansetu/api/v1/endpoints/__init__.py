# src/gyansetu/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .courses import router as courses_router
from .moderation import reports_router
from .moderation import router as moderation_router
from .notifications import router as notifications_router
from .questions import answers_router, replies_router
from .questions import router as questions_router
from .uploads import router as uploads_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "courses_router",
    "questions_router",
    "answers_router",
    "replies_router",
    "votes_router",
    "reports_router",
    "moderation_router",
    "notifications_router",
    "users_router",
    "uploads_router",
]
