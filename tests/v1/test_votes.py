# mypy: ignore-errors
"""Tests for vote endpoints."""

from fastapi import status

from gyansetu.models import Answer


def test_upvote_then_withdraw(client, other_auth_token, student, question, db_session) -> None:
    url = f"/api/v1/votes/questions/{question.id}"

    first = client.post(url, json={"vote": 1}, headers=other_auth_token)
    assert first.status_code == status.HTTP_200_OK
    assert first.json() == {"vote": 1, "removed": False, "score": 1, "karma_change": 2}
    db_session.refresh(student)
    assert student.karma_points == 2

    mine = client.get(f"{url}/my-vote", headers=other_auth_token)
    assert mine.json() == {"vote": 1}

    second = client.post(url, json={"vote": 1}, headers=other_auth_token)
    assert second.json() == {"vote": 0, "removed": True, "score": 0, "karma_change": -2}
    db_session.refresh(student)
    assert student.karma_points == 0
    assert client.get(f"{url}/my-vote", headers=other_auth_token).json() == {"vote": 0}


def test_switch_vote(client, other_auth_token, question) -> None:
    url = f"/api/v1/votes/questions/{question.id}"
    client.post(url, json={"vote": -1}, headers=other_auth_token)
    switched = client.post(url, json={"vote": 1}, headers=other_auth_token)
    assert switched.json()["vote"] == 1
    assert switched.json()["score"] == 1
    assert switched.json()["karma_change"] == 4


def test_cannot_vote_on_own_question(client, auth_token, question) -> None:
    response = client.post(
        f"/api/v1/votes/questions/{question.id}", json={"vote": 1}, headers=auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "You cannot vote on your own content", "status": 403}


def test_student_cannot_vote_on_staff_answer(
    client, auth_token, admin, question, db_session
) -> None:
    staff_answer = Answer(question_id=question.id, author_id=admin.id, content="Official note")
    db_session.add(staff_answer)
    db_session.commit()

    response = client.post(
        f"/api/v1/votes/answers/{staff_answer.id}", json={"vote": 1}, headers=auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"] == "Students cannot vote on admin/superadmin content"


def test_vote_on_answer(client, auth_token, answer) -> None:
    response = client.post(f"/api/v1/votes/answers/{answer.id}", json={"vote": -1}, headers=auth_token)
    assert response.json() == {"vote": -1, "removed": False, "score": -1, "karma_change": -2}
    mine = client.get(f"/api/v1/votes/answers/{answer.id}/my-vote", headers=auth_token)
    assert mine.json() == {"vote": -1}


def test_invalid_vote_value(client, other_auth_token, question) -> None:
    response = client.post(
        f"/api/v1/votes/questions/{question.id}", json={"vote": 2}, headers=other_auth_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["status"] == 400
    assert body["error"].startswith("vote: Input should be")


def test_vote_on_missing_question(client, auth_token) -> None:
    response = client.post("/api/v1/votes/questions/999", json={"vote": 1}, headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_requires_login(client, question) -> None:
    response = client.post(f"/api/v1/votes/questions/{question.id}", json={"vote": 1})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
