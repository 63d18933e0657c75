# src/gyansetu/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    answers_router,
    auth_router,
    courses_router,
    moderation_router,
    notifications_router,
    questions_router,
    replies_router,
    reports_router,
    uploads_router,
    users_router,
    votes_router,
)

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
