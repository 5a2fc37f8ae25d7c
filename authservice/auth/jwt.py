"""
JWT token handling for authentication.

This module provides functionality for:
- Signing access tokens
- Verifying and decoding access tokens
- Extracting bearer tokens from Authorization headers
"""
import enum
import time
from typing import Optional

import jwt
from jwt.exceptions import PyJWTError
from pydantic import ValidationError

from authservice.auth.models import TokenPayload
from authservice.config import Settings

ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "


class TokenErrorKind(str, enum.Enum):
    MISSING_HEADER = "missing_header"
    INVALID_FORMAT = "invalid_format"
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"


class TokenError(Exception):
    """Raised for any token or Authorization header problem."""

    def __init__(self, kind: TokenErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def extract_token_from_header(auth_header: Optional[str]) -> str:
    """
    Return the token from an ``Authorization: Bearer <token>`` header value.

    Raises:
        TokenError: If the header is missing, uses another scheme, or has no token
    """
    if not auth_header:
        raise TokenError(TokenErrorKind.MISSING_HEADER, "Authorization header missing")

    if not auth_header.startswith(BEARER_PREFIX):
        raise TokenError(TokenErrorKind.INVALID_FORMAT, "Invalid authorization header format")

    token = auth_header[len(BEARER_PREFIX):]
    if not token:
        raise TokenError(TokenErrorKind.MISSING_TOKEN, "Token missing from authorization header")

    return token


class TokenService:
    """
    Sign and verify access tokens with the process secret and expiry.
    """
    def __init__(self, settings: Settings):
        self.secret = settings.jwt.secret
        self.expires_seconds = settings.jwt_expires_seconds

    def generate_token(self, payload: TokenPayload) -> str:
        """
        Create a signed access token.

        Args:
            payload: Claims identifying the user

        Returns:
            Encoded JWT token string
        """
        issued_at = int(time.time())
        claims = payload.to_claims()
        claims.update({"iat": issued_at, "exp": issued_at + self.expires_seconds})
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify a token's signature and expiry and return its claims.

        Raises:
            TokenError: For any bad signature, malformed or expired token;
                the cause is not exposed
        """
        try:
            claims = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
            return TokenPayload.model_validate(claims)
        except (PyJWTError, ValidationError):
            raise TokenError(TokenErrorKind.INVALID_TOKEN, "Invalid token") from None

    extract_token_from_header = staticmethod(extract_token_from_header)
