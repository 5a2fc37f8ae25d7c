"""
Authentication router.

This module provides the FastAPI router for:
- Signup and login
- Password reset requests
- The authenticated user's profile
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from authservice.auth.middleware import require_auth
from authservice.auth.models import TokenPayload
from authservice.auth.users import UserService
from authservice.base_service import BaseService
from authservice.validation.middleware import validate_request
from authservice.validation.schemas import login_schema, password_reset_schema, signup_schema

router = APIRouter(tags=["auth"])

base_service = BaseService("authservice.auth")


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


@router.post("/signup")
async def signup(
    body: Dict[str, Any] = Depends(validate_request(signup_schema)),
    users: UserService = Depends(get_user_service),
):
    """
    Register a new user.

    Returns:
        Envelope with the created user and an access token
    """
    user, token = await users.register_user(body["name"], body["email"], body["password"])
    base_service.log_event("user.registered", {"user_id": user.id, "email": user.email})
    return base_service.api_response(
        data={"user": user, "token": token},
        message="User registered successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login(
    body: Dict[str, Any] = Depends(validate_request(login_schema)),
    users: UserService = Depends(get_user_service),
):
    """Authenticate with email and password."""
    user, token = await users.authenticate_user(body["email"], body["password"])
    base_service.log_event("user.login", {"user_id": user.id})
    return base_service.api_response(data={"user": user, "token": token}, message="Login successful")


@router.post("/password-reset")
async def password_reset(
    body: Dict[str, Any] = Depends(validate_request(password_reset_schema)),
    users: UserService = Depends(get_user_service),
):
    """
    Start a password reset.

    The response is identical whether or not the address is registered.
    """
    if await users.request_password_reset(body["email"]):
        base_service.log_event("user.password_reset_requested", {"email": body["email"]})
    return base_service.api_response(
        message="If the email address is registered, password reset instructions have been sent"
    )


@router.get("/me")
async def me(
    payload: TokenPayload = Depends(require_auth),
    users: UserService = Depends(get_user_service),
):
    """Return the profile of the authenticated user."""
    user = await users.get_user(payload.user_id)
    return base_service.api_response(data=user, message="User retrieved successfully")
