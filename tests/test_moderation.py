# tests/test_moderation.py
"""Reports and staff moderation actions."""

import pytest
from sqlalchemy import func, select

from gyansetu.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from gyansetu.models import (
    Answer,
    AnswerVote,
    KarmaLog,
    ModerationReport,
    Notification,
    Question,
    QuestionVote,
    Reply,
)
from gyansetu.services import ModerationService, voting


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def test_file_report_on_question(db_session, other_student, question) -> None:
    report = ModerationService.file_report(
        db_session, other_student, reason="  Off topic  ", question_id=question.id
    )
    assert report.status == "pending"
    assert report.reason == "Off topic"
    assert report.question_id == question.id
    assert report.pending_key == f"{other_student.id}:question:{question.id}"


def test_duplicate_pending_report_conflicts(db_session, other_student, question) -> None:
    ModerationService.file_report(db_session, other_student, reason="Spam", question_id=question.id)
    with pytest.raises(ConflictError, match="already reported"):
        ModerationService.file_report(
            db_session, other_student, reason="Still spam", question_id=question.id
        )
    assert _count(db_session, ModerationReport) == 1


def test_different_reporters_can_report_same_content(
    db_session, other_student, make_user, question
) -> None:
    ModerationService.file_report(db_session, other_student, reason="Spam", question_id=question.id)
    ModerationService.file_report(db_session, make_user(), reason="Spam", question_id=question.id)
    assert _count(db_session, ModerationReport) == 2


@pytest.mark.parametrize(
    "targets",
    [
        {},
        {"question_id": 1, "answer_id": 1},
        {"question_id": 1, "answer_id": 1, "reply_id": 1},
    ],
)
def test_report_requires_exactly_one_target(db_session, student, targets) -> None:
    with pytest.raises(ValidationError, match="exactly one"):
        ModerationService.file_report(db_session, student, reason="Spam", **targets)


def test_report_requires_reason(db_session, other_student, question) -> None:
    with pytest.raises(ValidationError, match="reason"):
        ModerationService.file_report(db_session, other_student, reason="   ", question_id=question.id)


def test_report_missing_target(db_session, student) -> None:
    with pytest.raises(NotFoundError, match="Answer not found"):
        ModerationService.file_report(db_session, student, reason="Spam", answer_id=9999)


def test_dismiss_report_deletes_row(db_session, admin, other_student, question) -> None:
    report = ModerationService.file_report(
        db_session, other_student, reason="Spam", question_id=question.id
    )
    ModerationService.dismiss_report(db_session, admin, report.id)
    assert _count(db_session, ModerationReport) == 0
    # The content is untouched and can be reported again.
    assert db_session.get(Question, question.id) is not None
    ModerationService.file_report(db_session, other_student, reason="Spam", question_id=question.id)


def test_dismiss_missing_report(db_session, admin) -> None:
    with pytest.raises(NotFoundError):
        ModerationService.dismiss_report(db_session, admin, 12345)


def test_students_cannot_moderate(db_session, student, question) -> None:
    with pytest.raises(PermissionDeniedError, match="moderate"):
        ModerationService.resolve_question(db_session, student, question.id)
    with pytest.raises(PermissionDeniedError):
        ModerationService.delete_question(db_session, student, question.id)
    with pytest.raises(PermissionDeniedError):
        ModerationService.reported_questions(db_session, student)


def test_resolve_question_closes_pending_reports(
    db_session, admin, other_student, make_user, question
) -> None:
    ModerationService.file_report(db_session, other_student, reason="Spam", question_id=question.id)
    ModerationService.file_report(db_session, make_user(), reason="Rude", question_id=question.id)

    resolved = ModerationService.resolve_question(db_session, admin, question.id)

    assert resolved.resolved is True
    reports = db_session.scalars(select(ModerationReport)).all()
    assert {r.status for r in reports} == {"resolved"}
    assert all(r.pending_key is None for r in reports)
    assert ModerationService.reported_questions(db_session, admin) == []
    # Closed reports no longer block a fresh one.
    ModerationService.file_report(db_session, other_student, reason="Again", question_id=question.id)


def test_delete_question_removes_all_dependents(
    db_session, superadmin, student, other_student, make_user, question, answer
) -> None:
    """A question with N answers, M votes and K reports leaves no rows behind."""
    third = make_user()
    second = Answer(question_id=question.id, author_id=third.id, content="Use an array.")
    db_session.add(second)
    db_session.commit()
    reply = Reply(answer_id=answer.id, author_id=student.id, content="Thanks!")
    db_session.add(reply)
    db_session.commit()

    voting.cast_question_vote(db_session, other_student, question.id, 1)
    voting.cast_question_vote(db_session, third, question.id, -1)
    voting.cast_answer_vote(db_session, student, answer.id, 1)

    ModerationService.file_report(db_session, third, reason="Spam", question_id=question.id)
    ModerationService.file_report(db_session, third, reason="Rude", answer_id=answer.id)
    ModerationService.file_report(db_session, other_student, reason="Rude", reply_id=reply.id)

    question.best_answer_id = answer.id
    db_session.commit()
    question_id = question.id
    logged = _count(db_session, KarmaLog)

    ModerationService.delete_question(db_session, superadmin, question_id)

    db_session.expire_all()
    assert db_session.get(Question, question_id) is None
    for model in (Answer, Reply, QuestionVote, AnswerVote, ModerationReport):
        assert _count(db_session, model) == 0, model.__name__
    assert db_session.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.related_question_id == question_id)
    ) == 0
    # Karma history survives with its references cleared.
    entries = db_session.scalars(select(KarmaLog)).all()
    assert len(entries) == logged
    assert all(e.related_question_id is None and e.related_answer_id is None for e in entries)


def test_delete_missing_question(db_session, admin) -> None:
    with pytest.raises(NotFoundError):
        ModerationService.delete_question(db_session, admin, 777)


def test_reported_questions_grouped_newest_first(
    db_session, admin, student, other_student, make_user, question
) -> None:
    later = Question(title="Why is quicksort unstable?", author_id=other_student.id, tags=[])
    db_session.add(later)
    db_session.commit()

    reporter = make_user()
    ModerationService.file_report(db_session, reporter, reason="Spam", question_id=question.id)
    ModerationService.file_report(db_session, other_student, reason="Dup", question_id=question.id)
    ModerationService.file_report(db_session, student, reason="Spam", question_id=later.id)

    grouped = ModerationService.reported_questions(db_session, admin)

    assert [entry.question.id for entry in grouped] == [later.id, question.id]
    assert [r.reason for r in grouped[1].reports] == ["Dup", "Spam"]


def test_list_reports_filters_by_status(db_session, admin, other_student, question, answer) -> None:
    ModerationService.file_report(db_session, other_student, reason="Spam", question_id=question.id)
    ModerationService.file_report(db_session, admin, reason="Wrong", answer_id=answer.id)
    ModerationService.resolve_question(db_session, admin, question.id)

    pending = ModerationService.list_reports(db_session, admin, status="pending")
    assert [r.answer_id for r in pending] == [answer.id]
    assert len(ModerationService.list_reports(db_session, admin)) == 2

    with pytest.raises(ValidationError):
        ModerationService.list_reports(db_session, admin, status="archived")
