"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field

MAX_LENGTH = 128


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    first_name: str = Field(..., min_length=1, max_length=MAX_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=MAX_LENGTH)
    username: str = Field(..., min_length=1, max_length=MAX_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_LENGTH)


class LoginRequest(BaseModel):
    """Request model for login. Exactly one of username or email is expected."""

    username: str | None = None
    email: str | None = None
    password: str


class MessageResponse(BaseModel):
    """Success envelope."""

    status: str = "success"
    message: str


class TokenData(BaseModel):
    token: str


class LoginResponse(MessageResponse):
    """Success envelope carrying the bearer token."""

    data: TokenData


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
