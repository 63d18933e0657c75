# src/gyansetu/services/moderation.py
"""Moderation services for GyanSetu."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gyansetu.core.exceptions import ConflictError, NotFoundError, ValidationError
from gyansetu.core.policy import Action, enforce
from gyansetu.models import Answer, ModerationReport, Profile, Question, Reply
from gyansetu.models.moderation import (
    REPORT_STATUS_PENDING,
    REPORT_STATUS_RESOLVED,
    REPORT_STATUSES,
)
from gyansetu.services.content import purge_question

logger = logging.getLogger(__name__)

_TARGET_MODELS = {"question": Question, "answer": Answer, "reply": Reply}


def pending_key(reporter_id: int, kind: str, target_id: int) -> str:
    """Return the uniqueness key of a pending report."""
    return f"{reporter_id}:{kind}:{target_id}"


@dataclass
class ReportedQuestion:
    """A question together with its pending reports, newest report first."""

    question: Question
    reports: list[ModerationReport] = field(default_factory=list)


class ModerationService:
    """Service handling content reports and staff moderation actions."""

    @staticmethod
    def file_report(
        db: Session,
        reporter: Profile,
        *,
        reason: str,
        question_id: int | None = None,
        answer_id: int | None = None,
        reply_id: int | None = None,
    ) -> ModerationReport:
        """Record a pending report against exactly one piece of content.

        Args:
            db: Database session
            reporter: Profile filing the report
            reason: Why the content is being reported
            question_id: Reported question, if any
            answer_id: Reported answer, if any
            reply_id: Reported reply, if any

        Returns:
            The new pending report.

        Raises:
            ValidationError: Not exactly one target, or an empty reason.
            NotFoundError: The target does not exist.
            ConflictError: The reporter already has a pending report on it.
        """
        targets = {
            "question": question_id,
            "answer": answer_id,
            "reply": reply_id,
        }
        chosen = [(kind, value) for kind, value in targets.items() if value is not None]
        if len(chosen) != 1:
            raise ValidationError("A report must target exactly one question, answer or reply")
        kind, target_id = chosen[0]

        cleaned_reason = (reason or "").strip()
        if not cleaned_reason:
            raise ValidationError("Please provide a reason for the report")
        if db.get(_TARGET_MODELS[kind], target_id) is None:
            raise NotFoundError(f"{kind.capitalize()} not found")

        report = ModerationReport(
            reporter_id=reporter.id,
            question_id=question_id,
            answer_id=answer_id,
            reply_id=reply_id,
            reason=cleaned_reason,
            status=REPORT_STATUS_PENDING,
            pending_key=pending_key(reporter.id, kind, target_id),
        )
        db.add(report)
        try:
            db.commit()
        except IntegrityError as err:
            db.rollback()
            raise ConflictError(
                "You have already reported this content. It is pending review."
            ) from err
        db.refresh(report)
        logger.info("User %s reported %s %s", reporter.id, kind, target_id)
        return report

    @staticmethod
    def dismiss_report(db: Session, actor: Profile, report_id: int) -> None:
        """Delete a report without acting on the content."""
        enforce(actor.role, actor.id, None, None, Action.MODERATE)
        report = db.get(ModerationReport, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        db.delete(report)
        db.commit()
        logger.info("User %s dismissed report %s", actor.id, report_id)

    @staticmethod
    def resolve_question(db: Session, actor: Profile, question_id: int) -> Question:
        """Mark a reported question resolved and close its pending reports."""
        enforce(actor.role, actor.id, None, None, Action.MODERATE)
        question = db.get(Question, question_id)
        if question is None:
            raise NotFoundError("Question not found")

        question.resolved = True
        db.execute(
            update(ModerationReport)
            .where(
                ModerationReport.question_id == question_id,
                ModerationReport.status == REPORT_STATUS_PENDING,
            )
            .values(status=REPORT_STATUS_RESOLVED, pending_key=None)
            .execution_options(synchronize_session="fetch")
        )
        db.commit()
        db.refresh(question)
        logger.info("User %s resolved reported question %s", actor.id, question_id)
        return question

    @staticmethod
    def delete_question(db: Session, actor: Profile, question_id: int) -> None:
        """Remove a question and all dependent rows in one transaction."""
        enforce(actor.role, actor.id, None, None, Action.MODERATE)
        question = db.get(Question, question_id)
        if question is None:
            raise NotFoundError("Question not found")
        purge_question(db, question)
        logger.info("User %s removed question %s through moderation", actor.id, question_id)

    @staticmethod
    def reported_questions(db: Session, actor: Profile) -> list[ReportedQuestion]:
        """Group pending question reports by question, most recently reported first."""
        enforce(actor.role, actor.id, None, None, Action.MODERATE)
        reports = db.scalars(
            select(ModerationReport)
            .where(
                ModerationReport.question_id.is_not(None),
                ModerationReport.status == REPORT_STATUS_PENDING,
            )
            .order_by(ModerationReport.created_at.desc(), ModerationReport.id.desc())
        ).all()

        grouped: dict[int, ReportedQuestion] = {}
        for report in reports:
            question_id = report.question_id or 0
            entry = grouped.get(question_id)
            if entry is None:
                question = db.get(Question, question_id)
                if question is None:
                    continue
                entry = grouped[question_id] = ReportedQuestion(question=question)
            entry.reports.append(report)
        # dicts keep insertion order, which follows the newest report.
        return list(grouped.values())

    @staticmethod
    def list_reports(
        db: Session,
        actor: Profile,
        *,
        status: str | None = None,
        limit: int = 100,
    ) -> Sequence[ModerationReport]:
        enforce(actor.role, actor.id, None, None, Action.MODERATE)
        stmt = select(ModerationReport)
        if status is not None:
            if status not in REPORT_STATUSES:
                raise ValidationError(f"Unknown report status: {status}")
            stmt = stmt.where(ModerationReport.status == status)
        stmt = stmt.order_by(ModerationReport.created_at.desc(), ModerationReport.id.desc())
        return db.scalars(stmt.limit(limit)).all()
