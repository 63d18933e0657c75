# src/gyansetu/api/v1/endpoints/notifications.py
"""Notification inbox endpoints for the GyanSetu API."""

from fastapi import APIRouter, Query

from gyansetu.schemas.common import SuccessResponse
from gyansetu.schemas.notification import (
    MarkSeenResponse,
    NotificationResponse,
    UnseenCountResponse,
)
from gyansetu.services import notifications as notification_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    unseen_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
) -> list[NotificationResponse]:
    """The caller's notifications, newest first."""
    found = notification_service.list_notifications(
        db, current_user.id, unseen_only=unseen_only, limit=limit
    )
    return [NotificationResponse.model_validate(item) for item in found]


@router.get("/unseen-count", response_model=UnseenCountResponse)
async def unseen_count(current_user: CurrentUserDep, db: SessionDep) -> UnseenCountResponse:
    return UnseenCountResponse(unseen=notification_service.count_unseen(db, current_user.id))


@router.post("/mark-all-seen", response_model=MarkSeenResponse)
async def mark_all_seen(current_user: CurrentUserDep, db: SessionDep) -> MarkSeenResponse:
    return MarkSeenResponse(updated=notification_service.mark_all_seen(db, current_user.id))


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    notification_service.delete_notification(db, current_user.id, notification_id)
    return SuccessResponse()
