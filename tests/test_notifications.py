# tests/test_notifications.py
import pytest

from gyansetu.core.exceptions import NotFoundError
from gyansetu.services import content, notifications


@pytest.fixture()
def inbox(db_session, student, other_student, make_user, question):
    """Three answers on the student's question, one notification each."""
    content.create_answer(db_session, other_student, question.id, content="One")
    content.create_answer(db_session, make_user(), question.id, content="Two")
    content.create_answer(db_session, make_user(), question.id, content="Three")
    return notifications.list_notifications(db_session, student.id)


def test_listed_newest_first(inbox) -> None:
    assert len(inbox) == 3
    assert inbox[0].id > inbox[-1].id
    assert all(n.type == "answer" and n.seen is False for n in inbox)


def test_unseen_count_and_mark_all_seen(db_session, student, other_student, inbox) -> None:
    assert notifications.count_unseen(db_session, student.id) == 3
    assert notifications.mark_all_seen(db_session, student.id) == 3
    assert notifications.count_unseen(db_session, student.id) == 0
    assert notifications.mark_all_seen(db_session, student.id) == 0
    assert notifications.list_notifications(db_session, student.id, unseen_only=True) == []
    assert notifications.count_unseen(db_session, other_student.id) == 0


def test_limit(db_session, student, inbox) -> None:
    assert len(notifications.list_notifications(db_session, student.id, limit=2)) == 2


def test_delete_own_notification(db_session, student, inbox) -> None:
    notifications.delete_notification(db_session, student.id, inbox[0].id)
    assert len(notifications.list_notifications(db_session, student.id)) == 2


def test_cannot_delete_someone_elses(db_session, other_student, inbox) -> None:
    with pytest.raises(NotFoundError):
        notifications.delete_notification(db_session, other_student.id, inbox[0].id)


def test_long_titles_are_truncated(db_session, student, other_student) -> None:
    question = content.create_question(db_session, student, title="x" * 120)
    content.create_answer(db_session, other_student, question.id, content="Short answer")
    (note,) = notifications.list_notifications(db_session, student.id)
    assert note.message == f'Your question "{"x" * 50}" received a new answer'
