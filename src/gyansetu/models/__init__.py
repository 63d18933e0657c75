# src/gyansetu/models/__init__.py
"""SQLAlchemy models for the GyanSetu application."""

from .account import Account, Profile
from .course import Course, Enrollment
from .karma import KarmaLog
from .moderation import ModerationReport
from .notification import Notification
from .question import Answer, Question, Reply
from .vote import AnswerVote, QuestionVote

__all__ = [
    "Account", "Profile",
    "Course", "Enrollment",
    "KarmaLog",
    "ModerationReport",
    "Notification",
    "Answer", "Question", "Reply",
    "AnswerVote", "QuestionVote",
]
