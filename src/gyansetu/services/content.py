"""Questions, answers and replies."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import Exists

from gyansetu.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from gyansetu.core.policy import Action, enforce, is_staff
from gyansetu.db.time import utcnow
from gyansetu.models import Answer, Profile, Question, Reply
from gyansetu.services import notifications
from gyansetu.services.courses import can_post_in_course, get_course
from gyansetu.services.identity import current_role
from gyansetu.services.storage import get_blob_store

logger = logging.getLogger(__name__)


def _clean_tags(tags: Iterable[str] | None) -> list[str]:
    cleaned: list[str] = []
    for tag in tags or ():
        value = tag.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def _has_tag(db: Session, tag: str) -> Exists:
    """Exact match against one element of the JSON ``tags`` array."""
    if db.get_bind().dialect.name == "postgresql":
        elements = func.json_array_elements_text(Question.tags).table_valued("value")
    else:
        elements = func.json_each(Question.tags).table_valued("value")
    return select(elements.c.value).where(elements.c.value == tag).exists()


def _require_text(value: str | None, message: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def visible_author_id(question: Question, viewer: Profile | None) -> int | None:
    """Return the author id as the viewer may see it; anonymous authors stay hidden."""
    if not question.is_anonymous:
        return question.author_id
    if viewer is not None and (viewer.id == question.author_id or is_staff(viewer.role)):
        return question.author_id
    return None


def _check_image(actor: Profile, image_url: str | None) -> str | None:
    """Accept only images the actor uploaded into their own store prefix."""
    image_url = (image_url or "").strip() or None
    if image_url is not None and get_blob_store().owned_path(image_url, actor.id) is None:
        raise ValidationError("Attach an image you uploaded yourself")
    return image_url


def _remove_images(images: Iterable[tuple[int, str | None]]) -> None:
    # Rows are already gone; a storage failure only leaves an orphaned blob.
    removed = get_blob_store().remove_owned(images)
    if removed:
        logger.info("Removed %d image(s) from blob storage", removed)


# Questions -------------------------------------------------------------------


def get_question(db: Session, question_id: int) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError("Question not found")
    return question


def view_question(db: Session, question_id: int) -> Question:
    """Return a question and count the view."""
    result = db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(view_count=Question.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Question not found")
    db.commit()
    question = get_question(db, question_id)
    db.refresh(question)
    return question


def list_questions(
    db: Session,
    *,
    course_id: int | None = None,
    general: bool | None = None,
    resolved: bool | None = None,
    tag: str | None = None,
    author_id: int | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Question]:
    """Return questions newest first.

    ``general=True`` restricts to questions without a course and
    ``general=False`` to course questions; ``course_id`` narrows further.
    """
    stmt = select(Question)
    if course_id is not None:
        stmt = stmt.where(Question.course_id == course_id)
    if general is True:
        stmt = stmt.where(Question.course_id.is_(None))
    elif general is False:
        stmt = stmt.where(Question.course_id.is_not(None))
    if resolved is not None:
        stmt = stmt.where(Question.resolved.is_(resolved))
    if author_id is not None:
        stmt = stmt.where(Question.author_id == author_id, Question.is_anonymous.is_(False))
    if tag and tag.strip():
        stmt = stmt.where(_has_tag(db, tag.strip()))
    stmt = stmt.order_by(Question.created_at.desc(), Question.id.desc()).offset(skip).limit(limit)
    return db.scalars(stmt).all()


def create_question(
    db: Session,
    actor: Profile,
    *,
    title: str,
    content: str | None = None,
    course_id: int | None = None,
    tags: Iterable[str] | None = None,
    is_anonymous: bool = False,
    image_url: str | None = None,
) -> Question:
    """Post a question, generally or inside a course the actor is enrolled in."""
    enforce(actor.role, actor.id, None, None, Action.AUTHOR_QUESTION)
    title = _require_text(title, "Title is required")
    image_url = _check_image(actor, image_url)

    if course_id is not None:
        get_course(db, course_id)
        if not can_post_in_course(db, actor.id, course_id):
            raise PermissionDeniedError("You must be enrolled in this course to ask questions")

    question = Question(
        title=title,
        content=(content or "").strip() or None,
        author_id=actor.id,
        course_id=course_id,
        tags=_clean_tags(tags),
        is_anonymous=is_anonymous,
        image_url=image_url,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("User %s asked question %s in course %s", actor.id, question.id, course_id)
    return question


def update_question(
    db: Session,
    actor: Profile,
    question_id: int,
    *,
    title: str | None = None,
    content: str | None = None,
    tags: Iterable[str] | None = None,
) -> Question:
    question = get_question(db, question_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, question.author_id),
        question.author_id,
        Action.EDIT,
    )
    if title is not None:
        question.title = _require_text(title, "Title is required")
    if content is not None:
        question.content = content.strip() or None
    if tags is not None:
        question.tags = _clean_tags(tags)
    question.updated_at = utcnow()
    db.commit()
    db.refresh(question)
    return question


def purge_question(db: Session, question: Question) -> None:
    """Delete a question and everything hanging off it in one transaction.

    Answers, replies, votes, reports and notifications go through the ORM
    cascade (backed by ON DELETE CASCADE); karma log rows keep their
    history with the references set to NULL. Images are removed after
    the commit.
    """
    images = [(question.author_id, question.image_url)]
    for answer in question.answers:
        images.append((answer.author_id, answer.image_url))
        images.extend((reply.author_id, reply.image_url) for reply in answer.replies)

    question_id = question.id
    answer_count = len(question.answers)
    question.best_answer_id = None
    db.flush()
    db.delete(question)
    db.commit()
    logger.info("Deleted question %s with %d answer(s)", question_id, answer_count)
    _remove_images(images)


def delete_question(db: Session, actor: Profile, question_id: int) -> None:
    question = get_question(db, question_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, question.author_id),
        question.author_id,
        Action.DELETE,
    )
    purge_question(db, question)


def toggle_resolved(db: Session, actor: Profile, question_id: int) -> Question:
    """Flip a question's resolved flag; staff only."""
    if not is_staff(actor.role):
        raise PermissionDeniedError("Only admins and superadmins can mark questions as resolved")
    question = get_question(db, question_id)
    question.resolved = not question.resolved
    if question.resolved and question.author_id != actor.id:
        notifications.notify_question_resolved(db, question)
    db.commit()
    db.refresh(question)
    logger.info("User %s set resolved=%s on question %s", actor.id, question.resolved, question.id)
    return question


# Answers ---------------------------------------------------------------------


def get_answer(db: Session, answer_id: int) -> Answer:
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


def list_answers(db: Session, question_id: int) -> Sequence[Answer]:
    get_question(db, question_id)
    return db.scalars(
        select(Answer)
        .where(Answer.question_id == question_id)
        .order_by(Answer.created_at, Answer.id)
    ).all()


def create_answer(
    db: Session,
    actor: Profile,
    question_id: int,
    *,
    content: str,
    image_url: str | None = None,
) -> Answer:
    content = _require_text(content, "Answer content is required")
    question = get_question(db, question_id)
    image_url = _check_image(actor, image_url)
    if question.author_id == actor.id:
        raise PermissionDeniedError("You cannot answer your own question")

    answer = Answer(
        question_id=question.id,
        author_id=actor.id,
        content=content,
        image_url=image_url,
    )
    db.add(answer)
    db.flush()
    notifications.notify_new_answer(db, question, answer)
    db.commit()
    db.refresh(answer)
    logger.info("User %s answered question %s", actor.id, question.id)
    return answer


def update_answer(db: Session, actor: Profile, answer_id: int, *, content: str) -> Answer:
    answer = get_answer(db, answer_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, answer.author_id),
        answer.author_id,
        Action.EDIT,
    )
    answer.content = _require_text(content, "Answer content is required")
    answer.updated_at = utcnow()
    db.commit()
    db.refresh(answer)
    return answer


def delete_answer(db: Session, actor: Profile, answer_id: int) -> None:
    answer = get_answer(db, answer_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, answer.author_id),
        answer.author_id,
        Action.DELETE,
    )
    images = [
        (answer.author_id, answer.image_url),
        *((reply.author_id, reply.image_url) for reply in answer.replies),
    ]
    question = answer.question
    if question.best_answer_id == answer.id:
        question.best_answer_id = None
    question.answers.remove(answer)
    db.commit()
    logger.info("User %s deleted answer %s", actor.id, answer_id)
    _remove_images(images)


# Replies ---------------------------------------------------------------------


def get_reply(db: Session, reply_id: int) -> Reply:
    reply = db.get(Reply, reply_id)
    if reply is None:
        raise NotFoundError("Reply not found")
    return reply


def create_reply(
    db: Session,
    actor: Profile,
    answer_id: int,
    *,
    content: str,
    image_url: str | None = None,
) -> Reply:
    content = _require_text(content, "Reply content is required")
    answer = get_answer(db, answer_id)
    image_url = _check_image(actor, image_url)
    reply = Reply(answer_id=answer.id, author_id=actor.id, content=content, image_url=image_url)
    db.add(reply)
    db.flush()
    if answer.author_id != actor.id:
        notifications.notify_new_reply(db, answer, reply)
    db.commit()
    db.refresh(reply)
    return reply


def update_reply(db: Session, actor: Profile, reply_id: int, *, content: str) -> Reply:
    reply = get_reply(db, reply_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, reply.author_id),
        reply.author_id,
        Action.EDIT,
    )
    reply.content = _require_text(content, "Reply content is required")
    reply.updated_at = utcnow()
    db.commit()
    db.refresh(reply)
    return reply


def delete_reply(db: Session, actor: Profile, reply_id: int) -> None:
    reply = get_reply(db, reply_id)
    enforce(
        actor.role,
        actor.id,
        current_role(db, reply.author_id),
        reply.author_id,
        Action.DELETE,
    )
    image = (reply.author_id, reply.image_url)
    db.delete(reply)
    db.commit()
    _remove_images([image])
