"""
Authentication models.

This module defines pydantic models for:
- Token claims
- Stored users and their public projection
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TokenPayload(BaseModel):
    """Claims signed into an access token."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="userId")
    email: str
    role: str

    def to_claims(self) -> dict:
        return self.model_dump(by_alias=True)


class User(BaseModel):
    """User record as held by a user store."""
    id: str
    name: str
    email: str
    password_hash: str
    role: str = "user"
    created_at: datetime
    updated_at: datetime

    def to_response(self) -> "UserResponse":
        return UserResponse(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserResponse(BaseModel):
    """User information returned to clients."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class PasswordValidation(BaseModel):
    """Outcome of a password strength check."""
    is_valid: bool
    errors: List[str] = []
