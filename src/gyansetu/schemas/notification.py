"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    id: int
    message: str
    type: str
    seen: bool
    related_question_id: int | None
    related_answer_id: int | None
    related_reply_id: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnseenCountResponse(BaseModel):
    unseen: int


class MarkSeenResponse(BaseModel):
    updated: int
