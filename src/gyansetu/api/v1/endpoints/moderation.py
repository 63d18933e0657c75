# src/gyansetu/api/v1/endpoints/moderation.py
"""Reporting and staff moderation endpoints for the GyanSetu API."""

from fastapi import APIRouter, Query, status

from gyansetu.schemas.common import SuccessResponse
from gyansetu.schemas.moderation import (
    DismissReportRequest,
    QuestionActionRequest,
    ReportCreate,
    ReportedQuestionResponse,
    ReportResponse,
)
from gyansetu.schemas.question import QuestionResponse
from gyansetu.services import ModerationService

from ..dependencies import CurrentUserDep, SessionDep, StaffDep

router = APIRouter(prefix="/admin", tags=["moderation"])
reports_router = APIRouter(prefix="/reports", tags=["moderation"])


@reports_router.post("/", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def file_report(
    payload: ReportCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReportResponse:
    """Report a question, answer or reply for staff review."""
    report = ModerationService.file_report(
        db,
        current_user,
        reason=payload.reason,
        question_id=payload.question_id,
        answer_id=payload.answer_id,
        reply_id=payload.reply_id,
    )
    return ReportResponse.model_validate(report)


@router.post("/moderation/dismiss-report", response_model=SuccessResponse)
async def dismiss_report(
    payload: DismissReportRequest,
    current_user: StaffDep,
    db: SessionDep,
) -> SuccessResponse:
    ModerationService.dismiss_report(db, current_user, payload.report_id)
    return SuccessResponse()


@router.post("/moderation/resolve-question", response_model=SuccessResponse)
async def resolve_question(
    payload: QuestionActionRequest,
    current_user: StaffDep,
    db: SessionDep,
) -> SuccessResponse:
    ModerationService.resolve_question(db, current_user, payload.question_id)
    return SuccessResponse()


@router.post("/moderation/delete-question", response_model=SuccessResponse)
async def delete_question(
    payload: QuestionActionRequest,
    current_user: StaffDep,
    db: SessionDep,
) -> SuccessResponse:
    """Delete a question together with everything attached to it."""
    ModerationService.delete_question(db, current_user, payload.question_id)
    return SuccessResponse()


@router.get("/reported-questions", response_model=list[ReportedQuestionResponse])
async def reported_questions(
    current_user: StaffDep,
    db: SessionDep,
) -> list[ReportedQuestionResponse]:
    """Questions with pending reports, most recently reported first."""
    grouped = ModerationService.reported_questions(db, current_user)
    return [
        ReportedQuestionResponse(
            question=QuestionResponse.model_validate(entry.question).model_copy(
                update={"answer_count": len(entry.question.answers)}
            ),
            reports=[ReportResponse.model_validate(report) for report in entry.reports],
            report_count=len(entry.reports),
        )
        for entry in grouped
    ]


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    current_user: StaffDep,
    db: SessionDep,
    report_status: str | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
) -> list[ReportResponse]:
    reports = ModerationService.list_reports(db, current_user, status=report_status, limit=limit)
    return [ReportResponse.model_validate(report) for report in reports]
