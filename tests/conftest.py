# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from gyansetu.core.policy import Role
from gyansetu.core.security import create_access_token, hash_password
from gyansetu.db.session import Base, json_serializer
from gyansetu.db.session import get_db as app_get_session
from gyansetu.main import app as fastapi_app
from gyansetu.models import Account, Answer, Course, Enrollment, Profile, Question
from gyansetu.services import storage

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
_COURSE_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    # A fresh in-memory database per test; FK enforcement is switched on by
    # the connect listener registered in gyansetu.db.session.
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        json_serializer=json_serializer,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def blob_store(tmp_path: Path) -> Iterator[storage.BlobStore]:
    """Point blob storage at a per-test directory."""
    store = storage.BlobStore(tmp_path / "media", "/media")
    previous = storage._BlobStoreSingleton._instance
    storage._BlobStoreSingleton._instance = store
    try:
        yield store
    finally:
        storage._BlobStoreSingleton._instance = previous


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., Profile]:
    """Return a factory creating committed accounts with profiles."""

    def _make_user(
        role: Role | str = Role.STUDENT,
        *,
        karma: int = 0,
        email: str | None = None,
        display_name: str | None = None,
        password: str = "correct horse battery",
    ) -> Profile:
        number = next(_USER_COUNTER)
        address = email or f"user{number}@example.edu"
        account = Account(email=address, password_hash=hash_password(password, rounds=4))
        account.profile = Profile(
            email=address,
            display_name=display_name or f"User {number}",
            role=str(Role(role)),
            karma_points=karma,
        )
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account.profile)
        return account.profile

    return _make_user


@pytest.fixture()
def headers_for() -> Callable[[Profile], dict[str, str]]:
    """Return a helper building bearer headers for a profile."""

    def _headers(profile: Profile) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(profile.id)}"}

    return _headers


@pytest.fixture()
def student(make_user: Callable[..., Profile]) -> Profile:
    return make_user(Role.STUDENT, display_name="Asha")


@pytest.fixture()
def other_student(make_user: Callable[..., Profile]) -> Profile:
    return make_user(Role.STUDENT, display_name="Ravi")


@pytest.fixture()
def admin(make_user: Callable[..., Profile]) -> Profile:
    return make_user(Role.ADMIN, display_name="Prof. Iyer")


@pytest.fixture()
def superadmin(make_user: Callable[..., Profile]) -> Profile:
    return make_user(Role.SUPERADMIN, display_name="Dean")


@pytest.fixture()
def auth_token(student: Profile, headers_for: Callable[[Profile], dict[str, str]]) -> dict[str, str]:
    """Authorization headers for the primary student."""
    return headers_for(student)


@pytest.fixture()
def other_auth_token(
    other_student: Profile, headers_for: Callable[[Profile], dict[str, str]]
) -> dict[str, str]:
    return headers_for(other_student)


@pytest.fixture()
def admin_token(admin: Profile, headers_for: Callable[[Profile], dict[str, str]]) -> dict[str, str]:
    return headers_for(admin)


@pytest.fixture()
def course(db_session: Session, admin: Profile) -> Course:
    number = next(_COURSE_COUNTER)
    course = Course(
        name=f"Data Structures {number}",
        code=f"CS{200 + number}",
        description="Lists, trees and graphs",
        semester="Fall",
        assigned_to=admin.id,
    )
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


@pytest.fixture()
def enrolled_student(db_session: Session, student: Profile, course: Course) -> Profile:
    db_session.add(Enrollment(student_id=student.id, course_id=course.id))
    db_session.commit()
    return student


@pytest.fixture()
def question(db_session: Session, student: Profile) -> Question:
    """A general question asked by the primary student."""
    question = Question(
        title="How does a heap keep its shape?",
        content="I understand insertion but not sift-down.",
        author_id=student.id,
        tags=["heaps", "trees"],
    )
    db_session.add(question)
    db_session.commit()
    db_session.refresh(question)
    return question


@pytest.fixture()
def answer(db_session: Session, question: Question, other_student: Profile) -> Answer:
    """An answer by the other student to the primary student's question."""
    answer = Answer(
        question_id=question.id,
        author_id=other_student.id,
        content="Swap with the larger child until the heap property holds.",
    )
    db_session.add(answer)
    db_session.commit()
    db_session.refresh(answer)
    return answer
