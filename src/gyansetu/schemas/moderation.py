"""Moderation-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .question import QuestionResponse


class ReportCreate(BaseModel):
    """Schema for reporting exactly one question, answer or reply."""

    reason: str = Field(..., min_length=1, max_length=2000)
    question_id: int | None = None
    answer_id: int | None = None
    reply_id: int | None = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "ReportCreate":
        targets = [self.question_id, self.answer_id, self.reply_id]
        if sum(target is not None for target in targets) != 1:
            raise ValueError("Exactly one of question_id, answer_id or reply_id is required")
        return self


class ReportResponse(BaseModel):
    id: int
    reporter_id: int
    question_id: int | None
    answer_id: int | None
    reply_id: int | None
    target_kind: str
    reason: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DismissReportRequest(BaseModel):
    report_id: int


class QuestionActionRequest(BaseModel):
    question_id: int


class ReportedQuestionResponse(BaseModel):
    """A question with its pending reports, newest first."""

    question: QuestionResponse
    reports: list[ReportResponse]
    report_count: int
