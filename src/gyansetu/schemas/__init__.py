"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import LoginRequest, RegisterRequest, TokenResponse
from .common import ErrorResponse, SuccessResponse
from .course import CourseCreate, CourseResponse, CourseUpdate
from .moderation import ReportCreate, ReportResponse
from .notification import NotificationResponse
from .profile import ProfileResponse, PublicProfile
from .question import AnswerResponse, QuestionCreate, QuestionResponse, ReplyResponse
from .vote import VoteCreate, VoteResponse

__all__ = [
    "LoginRequest", "RegisterRequest", "TokenResponse",
    "ErrorResponse", "SuccessResponse",
    "CourseCreate", "CourseResponse", "CourseUpdate",
    "ReportCreate", "ReportResponse",
    "NotificationResponse",
    "ProfileResponse", "PublicProfile",
    "AnswerResponse", "QuestionCreate", "QuestionResponse", "ReplyResponse",
    "VoteCreate", "VoteResponse",
]
