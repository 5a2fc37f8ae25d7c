"""
Environment-sourced settings for the auth service.

Settings are read once at startup by ``load_settings`` and passed explicitly
to every component that needs them.
"""
import os
import re
import logging
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DEFAULT_ENVIRONMENT = "development"
DEFAULT_JWT_SECRET = "fallback-secret-key"
DEFAULT_JWT_EXPIRES_IN = "7d"
DEFAULT_BCRYPT_ROUNDS = 12

_DURATION_PATTERN = re.compile(
    r"^(\d*\.?\d+) *(milliseconds?|msecs?|ms|seconds?|secs?|s|minutes?|mins?|m|hours?|hrs?|h"
    r"|days?|d|weeks?|w|years?|yrs?|y)?$",
    re.IGNORECASE,
)
_UNIT_ALIASES = {
    1: ("milliseconds", "millisecond", "msecs", "msec", "ms"),
    1000: ("seconds", "second", "secs", "sec", "s"),
    60 * 1000: ("minutes", "minute", "mins", "min", "m"),
    60 * 60 * 1000: ("hours", "hour", "hrs", "hr", "h"),
    24 * 60 * 60 * 1000: ("days", "day", "d"),
    7 * 24 * 60 * 60 * 1000: ("weeks", "week", "w"),
    365.25 * 24 * 60 * 60 * 1000: ("years", "year", "yrs", "yr", "y"),
}
_DURATION_UNITS_MS = {alias: ms for ms, aliases in _UNIT_ALIASES.items() for alias in aliases}


class ConfigError(ValueError):
    """Raised when an environment value cannot be parsed."""


class JWTSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: str
    expires_in: str = DEFAULT_JWT_EXPIRES_IN


class BcryptSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    cost: int = DEFAULT_BCRYPT_ROUNDS


class Settings(BaseModel):
    """Process settings. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    port: int = DEFAULT_PORT
    environment: str = DEFAULT_ENVIRONMENT
    jwt: JWTSettings
    bcrypt: BcryptSettings = BcryptSettings()
    database_url: str
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def jwt_expires_seconds(self) -> int:
        return parse_duration(self.jwt.expires_in)


def parse_duration(value: str) -> int:
    """
    Convert an expiry string to whole seconds.

    Accepts the same forms as the ``ms`` package: ``"7d"``, ``"1.5h"``,
    ``"2 days"``, ``"30 minutes"``, ``"1y"``. A bare number is milliseconds,
    so ``"3600"`` is 3 seconds. Anything shorter than a second becomes one
    second so a token never expires at the moment it is issued.

    Raises:
        ConfigError: If the value is not a number with an optional known unit
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ConfigError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    milliseconds = float(amount) * (_DURATION_UNITS_MS[unit.lower()] if unit else 1)
    return max(1, int(milliseconds // 1000))


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from the environment.

    When ``environ`` is omitted a ``.env`` file is loaded first (existing
    process variables win) and ``os.environ`` is read.

    A missing ``JWT_SECRET`` only logs a warning and falls back to a fixed
    secret. A missing ``DATABASE_URL`` is fatal: the process exits with status 1.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    jwt_secret = environ.get("JWT_SECRET")
    if not jwt_secret:
        logger.warning("JWT_SECRET not found in environment variables")
        jwt_secret = DEFAULT_JWT_SECRET

    database_url = environ.get("DATABASE_URL")
    if not database_url:
        logger.error("DATABASE_URL is required")
        raise SystemExit(1)

    expires_in = environ.get("JWT_EXPIRES_IN") or DEFAULT_JWT_EXPIRES_IN
    # Reject unparsable expiries at load time.
    parse_duration(expires_in)

    return Settings(
        port=_parse_int("PORT", environ.get("PORT"), DEFAULT_PORT),
        environment=environ.get("APP_ENV") or environ.get("NODE_ENV") or DEFAULT_ENVIRONMENT,
        jwt=JWTSettings(secret=jwt_secret, expires_in=expires_in),
        bcrypt=BcryptSettings(
            cost=_parse_int("BCRYPT_SALT_ROUNDS", environ.get("BCRYPT_SALT_ROUNDS"), DEFAULT_BCRYPT_ROUNDS)
        ),
        database_url=database_url,
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
    )
