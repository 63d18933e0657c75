"""Authentication request and response schemas."""

from pydantic import BaseModel, EmailStr, Field

from .profile import ProfileResponse


class RegisterRequest(BaseModel):
    """Schema for creating a new account."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Bearer token issued after registration or login."""

    access_token: str
    token_type: str = "bearer"
    profile: ProfileResponse
