"""
Password hashing and strength checks.

bcrypt work is pushed to the threadpool so hashing never blocks the event
loop.
"""
import bcrypt
from fastapi.concurrency import run_in_threadpool

from authservice.auth.models import PasswordValidation
from authservice.config import Settings
from authservice.validation.schemas import PASSWORD_RULES

# bcrypt only reads the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordService:
    """
    Hash, compare and validate passwords using the configured cost factor.
    """
    def __init__(self, settings: Settings):
        self.rounds = settings.bcrypt.cost

    def _hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    @staticmethod
    def _compare_sync(password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    async def hash(self, password: str) -> str:
        """Generate a salted bcrypt hash."""
        return await run_in_threadpool(self._hash_sync, password)

    async def compare(self, password: str, hashed_password: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        return await run_in_threadpool(self._compare_sync, password, hashed_password)

    @staticmethod
    def validate(password: str) -> PasswordValidation:
        """
        Check password strength.

        Every rule is evaluated; the result lists all failures in rule order.
        """
        errors = [rule.message for rule in PASSWORD_RULES if not rule.predicate(password)]
        return PasswordValidation(is_valid=not errors, errors=errors)
