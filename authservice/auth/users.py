"""
User management service.

This module provides functionality for:
- User registration
- User authentication
- Password reset requests
- The user store collaborator interface
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, Tuple

from authservice.auth.jwt import TokenService
from authservice.auth.models import TokenPayload, User, UserResponse
from authservice.auth.passwords import PasswordService
from authservice.errors import ApiError, ErrorKind, StoreError

DEFAULT_ROLE = "user"


class UserStore(Protocol):
    """
    Persistence collaborator for user records.

    Implementations raise ``StoreError`` with an explicit ``ErrorKind``.
    """
    async def create(self, name: str, email: str, password_hash: str, role: str = DEFAULT_ROLE) -> User:
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        ...

    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...


class InMemoryUserStore:
    """
    Process-local user store for development and tests.
    """
    def __init__(self):
        self._users: Dict[str, User] = {}

    async def create(self, name: str, email: str, password_hash: str, role: str = DEFAULT_ROLE) -> User:
        if any(u.email == email for u in self._users.values()):
            raise StoreError(
                ErrorKind.CONFLICT,
                "Unique constraint failed on the fields: (`email`)",
                fields=("email",),
            )
        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)


class UserService:
    """
    Service for user account operations.
    """
    def __init__(self, store: UserStore, passwords: PasswordService, tokens: TokenService):
        self.store = store
        self.passwords = passwords
        self.tokens = tokens

    def _issue(self, user: User) -> str:
        return self.tokens.generate_token(
            TokenPayload(user_id=user.id, email=user.email, role=user.role)
        )

    async def register_user(self, name: str, email: str, password: str) -> Tuple[UserResponse, str]:
        """
        Register a new user and issue a token.

        Raises:
            StoreError: CONFLICT if the email is already registered
        """
        password_hash = await self.passwords.hash(password)
        user = await self.store.create(name=name, email=email, password_hash=password_hash)
        return user.to_response(), self._issue(user)

    async def authenticate_user(self, email: str, password: str) -> Tuple[UserResponse, str]:
        """
        Check credentials and issue a token.

        Raises:
            ApiError: 401 if the email is unknown or the password does not match
        """
        user = await self.store.get_by_email(email)
        if user is None or not await self.passwords.compare(password, user.password_hash):
            raise ApiError(401, "Invalid email or password")
        return user.to_response(), self._issue(user)

    async def get_user(self, user_id: str) -> UserResponse:
        user = await self.store.get_by_id(user_id)
        if user is None:
            raise ApiError(404, "User not found")
        return user.to_response()

    async def request_password_reset(self, email: str) -> bool:
        """Return whether a reset could be started; callers must not reveal it."""
        return await self.store.get_by_email(email) is not None
