"""
Test cases for settings loading.
"""
import pytest

from authservice.config import ConfigError, load_settings, parse_duration

BASE_ENV = {"DATABASE_URL": "postgresql://localhost/app", "JWT_SECRET": "s3cret"}


def test_defaults_applied():
    settings = load_settings(BASE_ENV)
    assert settings.port == 3000
    assert settings.environment == "development"
    assert settings.is_development
    assert settings.jwt.expires_in == "7d"
    assert settings.jwt_expires_seconds == 7 * 24 * 3600
    assert settings.bcrypt.cost == 12
    assert settings.database_url == "postgresql://localhost/app"


def test_values_read_from_environment():
    settings = load_settings({
        **BASE_ENV,
        "PORT": "8080",
        "NODE_ENV": "production",
        "JWT_EXPIRES_IN": "12h",
        "BCRYPT_SALT_ROUNDS": "10",
    })
    assert settings.port == 8080
    assert settings.environment == "production"
    assert not settings.is_development
    assert settings.jwt_expires_seconds == 12 * 3600
    assert settings.bcrypt.cost == 10


def test_app_env_takes_precedence_over_node_env():
    settings = load_settings({**BASE_ENV, "APP_ENV": "staging", "NODE_ENV": "production"})
    assert settings.environment == "staging"


def test_missing_jwt_secret_warns_and_falls_back(caplog):
    with caplog.at_level("WARNING"):
        settings = load_settings({"DATABASE_URL": "postgresql://localhost/app"})
    assert settings.jwt.secret == "fallback-secret-key"
    assert "JWT_SECRET not found" in caplog.text


def test_missing_database_url_exits(caplog):
    with caplog.at_level("ERROR"):
        with pytest.raises(SystemExit) as exc_info:
            load_settings({"JWT_SECRET": "s3cret"})
    assert exc_info.value.code == 1
    assert "DATABASE_URL is required" in caplog.text


def test_non_integer_cost_rejected():
    with pytest.raises(ConfigError):
        load_settings({**BASE_ENV, "BCRYPT_SALT_ROUNDS": "twelve"})


def test_settings_are_immutable():
    settings = load_settings(BASE_ENV)
    with pytest.raises(Exception):
        settings.port = 1


@pytest.mark.parametrize("value,seconds", [
    ("3600", 3),
    ("90000", 90),
    ("2500ms", 2),
    ("45s", 45),
    ("15m", 900),
    ("2h", 7200),
    ("7d", 604800),
    ("1w", 604800),
    ("1.5h", 5400),
    ("2 days", 172800),
    ("30 minutes", 1800),
    ("10 secs", 10),
    ("1y", 31557600),
])
def test_parse_duration(value, seconds):
    assert parse_duration(value) == seconds


def test_parse_duration_rejects_garbage():
    with pytest.raises(ConfigError):
        parse_duration("soon")


@pytest.mark.parametrize("value", ["500", "0", "999ms"])
def test_sub_second_duration_rounds_up_to_one_second(value):
    assert parse_duration(value) == 1


@pytest.mark.parametrize("value", ["1y", "2 days", "1.5h", "30 minutes"])
def test_long_form_expiry_accepted_at_load(value):
    settings = load_settings({**BASE_ENV, "JWT_EXPIRES_IN": value})
    assert settings.jwt_expires_seconds == parse_duration(value)


def test_bare_number_expiry_is_milliseconds():
    settings = load_settings({**BASE_ENV, "JWT_EXPIRES_IN": "3600"})
    assert settings.jwt_expires_seconds == 3


@pytest.mark.parametrize("value", ["soon", "-5m", "5 fortnights", "1h30m"])
def test_unparsable_expiry_rejected_at_load(value):
    with pytest.raises(ConfigError):
        load_settings({**BASE_ENV, "JWT_EXPIRES_IN": value})
