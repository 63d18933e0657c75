# src/gyansetu/api/v1/endpoints/questions.py
"""Question, answer and reply endpoints for the GyanSetu API."""

from fastapi import APIRouter, Query, status

from gyansetu.models import Profile, Question
from gyansetu.schemas.common import SuccessResponse
from gyansetu.schemas.question import (
    AcceptResponse,
    AnswerCreate,
    AnswerResponse,
    AnswerUpdate,
    BestAnswerResponse,
    QuestionCreate,
    QuestionDetail,
    QuestionResponse,
    QuestionUpdate,
    ReplyCreate,
    ReplyResponse,
    ReplyUpdate,
    ResolveResponse,
)
from gyansetu.services import acceptance, content

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/questions", tags=["questions"])
answers_router = APIRouter(prefix="/answers", tags=["answers"])
replies_router = APIRouter(prefix="/replies", tags=["replies"])


def _question_response(
    question: Question,
    viewer: Profile | None,
    model: type[QuestionResponse] = QuestionResponse,
) -> QuestionResponse:
    data = model.model_validate(question)
    return data.model_copy(
        update={
            "author_id": content.visible_author_id(question, viewer),
            "answer_count": len(question.answers),
        }
    )


@router.get("/", response_model=list[QuestionResponse])
async def list_questions(
    db: SessionDep,
    viewer: OptionalUserDep,
    course_id: int | None = Query(None),
    general: bool | None = Query(None, description="True for questions without a course"),
    resolved: bool | None = Query(None),
    tag: str | None = Query(None, max_length=50),
    author_id: int | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> list[QuestionResponse]:
    """List questions, newest first."""
    found = content.list_questions(
        db,
        course_id=course_id,
        general=general,
        resolved=resolved,
        tag=tag,
        author_id=author_id,
        skip=skip,
        limit=limit,
    )
    return [_question_response(question, viewer) for question in found]


@router.post("/", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionResponse:
    question = content.create_question(
        db,
        current_user,
        title=payload.title,
        content=payload.content,
        course_id=payload.course_id,
        tags=payload.tags,
        is_anonymous=payload.is_anonymous,
        image_url=payload.image_url,
    )
    return _question_response(question, current_user)


@router.get("/{question_id}", response_model=QuestionDetail)
async def get_question(question_id: int, db: SessionDep, viewer: OptionalUserDep) -> QuestionResponse:
    """Return a question with its answers and count the view."""
    question = content.view_question(db, question_id)
    return _question_response(question, viewer, QuestionDetail)


@router.patch("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionResponse:
    question = content.update_question(
        db,
        current_user,
        question_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
    )
    return _question_response(question, current_user)


@router.delete("/{question_id}", response_model=SuccessResponse)
async def delete_question(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    content.delete_question(db, current_user, question_id)
    return SuccessResponse()


@router.post("/{question_id}/resolve", response_model=ResolveResponse)
async def toggle_resolved(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ResolveResponse:
    """Mark a question resolved or unresolved (staff only)."""
    question = content.toggle_resolved(db, current_user, question_id)
    return ResolveResponse(question_id=question.id, resolved=question.resolved)


@router.get("/{question_id}/answers", response_model=list[AnswerResponse])
async def list_answers(question_id: int, db: SessionDep) -> list[AnswerResponse]:
    return [AnswerResponse.model_validate(answer) for answer in content.list_answers(db, question_id)]


@router.post(
    "/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_answer(
    question_id: int,
    payload: AnswerCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerResponse:
    answer = content.create_answer(
        db,
        current_user,
        question_id,
        content=payload.content,
        image_url=payload.image_url,
    )
    return AnswerResponse.model_validate(answer)


@answers_router.patch("/{answer_id}", response_model=AnswerResponse)
async def update_answer(
    answer_id: int,
    payload: AnswerUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerResponse:
    answer = content.update_answer(db, current_user, answer_id, content=payload.content)
    return AnswerResponse.model_validate(answer)


@answers_router.delete("/{answer_id}", response_model=SuccessResponse)
async def delete_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    content.delete_answer(db, current_user, answer_id)
    return SuccessResponse()


@answers_router.post("/{answer_id}/accept", response_model=AcceptResponse)
async def accept_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptResponse:
    """Accept an answer, or unaccept it when it is already accepted."""
    answer = acceptance.accept_answer(db, current_user, answer_id)
    return AcceptResponse(answer_id=answer.id, is_accepted=answer.is_accepted)


@answers_router.post("/{answer_id}/best", response_model=BestAnswerResponse)
async def mark_best_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BestAnswerResponse:
    """Mark or unmark the best answer of a question (staff only)."""
    question = acceptance.mark_best_answer(db, current_user, answer_id)
    return BestAnswerResponse(question_id=question.id, best_answer_id=question.best_answer_id)


@answers_router.post(
    "/{answer_id}/replies",
    response_model=ReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    answer_id: int,
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    reply = content.create_reply(
        db,
        current_user,
        answer_id,
        content=payload.content,
        image_url=payload.image_url,
    )
    return ReplyResponse.model_validate(reply)


@replies_router.patch("/{reply_id}", response_model=ReplyResponse)
async def update_reply(
    reply_id: int,
    payload: ReplyUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    reply = content.update_reply(db, current_user, reply_id, content=payload.content)
    return ReplyResponse.model_validate(reply)


@replies_router.delete("/{reply_id}", response_model=SuccessResponse)
async def delete_reply(
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SuccessResponse:
    content.delete_reply(db, current_user, reply_id)
    return SuccessResponse()
