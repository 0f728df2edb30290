"""
API routes - Registration, verification and login endpoints.

This module defines the HTTP endpoints:
- POST /register - Create an unverified account and mail a signed link
- GET /verify - Follow the signed link to verify the account
- POST /login - Exchange username/email + password for a bearer token
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_auth_service
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    TokenData,
)
from src.domain.auth import AuthService
from src.domain.exceptions import BadRequest
from src.domain.requests import Credential
from src.domain.requests import RegisterRequest as RegisterInput

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or duplicate email/username"},
        500: {"model": ErrorResponse, "description": "Persistence or mail failure"},
    },
    summary="Register a new user",
    description="Create an unverified account. A signed verification link "
    "valid for 24 hours is sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Register a new user and send the verification link.

    - **first_name**, **last_name**, **username**, **email**, **password**:
      required, at most 128 characters each
    """
    user = service.register(
        RegisterInput(
            first_name=request_data.first_name,
            last_name=request_data.last_name,
            username=request_data.username,
            password=request_data.password,
            email=request_data.email,
        )
    )
    return MessageResponse(
        message=f"Welcome {user.full_name}!. An email has been sent to {user.email}. "
        "Please verify your account.",
    )


@router.get(
    "/verify",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing parameters, bad signature or already verified"},
    },
    summary="Verify an account",
    description="Target of the signed link mailed at registration.",
)
def verify(
    id: str = "",
    sig: str = "",
    exp: str = "",
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Check the link signature and mark the account verified."""
    if not id or not sig or not exp:
        raise BadRequest("Invalid request")

    service.verify(id, sig, exp)
    return MessageResponse(message="Your account has been verified. You can now login.")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body or not exactly one of username/email"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
    summary="Log in",
    description="Exchange a verified account's username or email and password for a bearer token.",
)
def login(
    request_data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Authenticate and return a bearer token.

    All authentication failures return an identical generic 401 so that
    callers cannot tell which check failed.
    """
    credential = Credential.from_fields(request_data.username, request_data.email)
    token = service.login(credential.value, credential.type, request_data.password)
    return LoginResponse(
        message="You have been successfully logged in.",
        data=TokenData(token=token),
    )
