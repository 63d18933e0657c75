"""Unit tests for the ORM models in gyansetu.models.

These check the mapping (table names, composite keys) and that the
database constraints backing the service-level invariants are in force.
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import attributes

from gyansetu import models


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert models.Account.__tablename__ == "accounts"
    assert models.Profile.__tablename__ == "profiles"
    assert models.Course.__tablename__ == "courses"
    assert models.Enrollment.__tablename__ == "enrollments"
    assert models.Question.__tablename__ == "questions"
    assert models.Answer.__tablename__ == "answers"
    assert models.Reply.__tablename__ == "replies"
    assert models.QuestionVote.__tablename__ == "question_votes"
    assert models.AnswerVote.__tablename__ == "answer_votes"
    assert models.KarmaLog.__tablename__ == "karma_log"
    assert models.ModerationReport.__tablename__ == "moderation_reports"
    assert models.Notification.__tablename__ == "notifications"


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        (models.QuestionVote, {"question_id", "user_id"}),
        (models.AnswerVote, {"answer_id", "user_id"}),
        (models.Enrollment, {"student_id", "course_id"}),
    ],
)
def test_composite_primary_keys(model, expected):
    """One vote per (content, voter) pair and one enrollment per (student, course)."""
    assert {c.name for c in model.__table__.primary_key} == expected


def test_relationships_are_instrumented_attributes():
    for attr in (
        models.Account.profile,
        models.Course.enrollments,
        models.Question.answers,
        models.Question.votes,
        models.Answer.replies,
        models.Answer.question,
        models.Reply.answer,
    ):
        assert isinstance(attr, attributes.InstrumentedAttribute)


def test_karma_cannot_be_negative(db_session, student):
    student.karma_points = -1
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_vote_value_is_plus_or_minus_one(db_session, other_student, question):
    db_session.add(models.QuestionVote(question_id=question.id, user_id=other_student.id, vote=2))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_unknown_role_rejected(db_session, student):
    student.role = "teacher"
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_report_needs_exactly_one_target(db_session, student, question, answer):
    db_session.add(
        models.ModerationReport(
            reporter_id=student.id,
            question_id=question.id,
            answer_id=answer.id,
            reason="Both",
            status="pending",
        )
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_foreign_keys_enforced(db_session, student):
    db_session.add(models.Answer(question_id=999, author_id=student.id, content="Orphan"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_profile_role_enum(student):
    assert student.role_enum.value == "student"
    assert student.is_staff is False
