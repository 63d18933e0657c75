"""Question, answer and reply schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    """Schema for asking a question."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str | None = Field(None, max_length=20000)
    course_id: int | None = Field(None, description="Course ID; omit for a general question")
    tags: list[str] = Field(default_factory=list, max_length=10)
    is_anonymous: bool = False
    image_url: str | None = None


class QuestionUpdate(BaseModel):
    title: str | None = Field(None, max_length=300)
    content: str | None = Field(None, max_length=20000)
    tags: list[str] | None = Field(None, max_length=10)


class ReplyCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    image_url: str | None = None


class ReplyUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class ReplyResponse(BaseModel):
    id: int
    answer_id: int
    author_id: int
    content: str
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AnswerCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=20000)
    image_url: str | None = None


class AnswerUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=20000)


class AnswerResponse(BaseModel):
    """Answer with vote tallies derived from the vote table."""

    id: int
    question_id: int
    author_id: int
    content: str
    is_accepted: bool
    image_url: str | None
    upvotes: int
    downvotes: int
    score: int
    upvoted_by: list[int] = Field(
        default_factory=list,
        description="Deprecated: ids of users who upvoted this answer",
    )
    replies: list[ReplyResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionResponse(BaseModel):
    """Question summary; ``author_id`` is null for anonymous questions."""

    id: int
    title: str
    content: str | None
    author_id: int | None
    course_id: int | None
    tags: list[str]
    is_anonymous: bool
    resolved: bool
    best_answer_id: int | None
    view_count: int
    image_url: str | None
    score: int
    answer_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionDetail(QuestionResponse):
    answers: list[AnswerResponse] = Field(default_factory=list)


class AcceptResponse(BaseModel):
    answer_id: int
    is_accepted: bool


class BestAnswerResponse(BaseModel):
    question_id: int
    best_answer_id: int | None


class ResolveResponse(BaseModel):
    question_id: int
    resolved: bool
