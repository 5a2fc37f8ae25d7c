"""
Authentication middleware.

Provides the FastAPI dependency that protects routes with a bearer token.
"""
from fastapi import Request

from authservice.auth.jwt import TokenError, TokenService
from authservice.auth.models import TokenPayload
from authservice.errors import ApiError


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def require_auth(request: Request) -> TokenPayload:
    """
    Resolve the authenticated caller from the Authorization header.

    The decoded payload is also stored on ``request.state.user``.

    Raises:
        ApiError: 401 carrying the token error message
    """
    tokens = get_token_service(request)
    try:
        token = tokens.extract_token_from_header(request.headers.get("Authorization"))
        payload = tokens.verify_token(token)
    except TokenError as e:
        raise ApiError(401, e.message)
    request.state.user = payload
    return payload
