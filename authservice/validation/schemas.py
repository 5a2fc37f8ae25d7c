from authservice.validation.rules import (
    ObjectSchema,
    StringField,
    email,
    max_length,
    min_length,
    pattern,
)

SPECIAL_CHARACTERS = "@$!%*?&"

PASSWORD_RULES = (
    min_length(8, "Password must be at least 8 characters long"),
    pattern(r"[a-z]", "Password must contain at least one lowercase letter"),
    pattern(r"[A-Z]", "Password must contain at least one uppercase letter"),
    pattern(r"\d", "Password must contain at least one number"),
    pattern(r"[@$!%*?&]", f"Password must contain at least one special character ({SPECIAL_CHARACTERS})"),
)

_email_field = StringField(
    rules=(email("Please provide a valid email address"),),
    transforms=(str.lower, str.strip),
)

signup_schema = ObjectSchema({
    "name": StringField(
        rules=(
            min_length(2, "Name must be at least 2 characters long"),
            max_length(50, "Name must be less than 50 characters"),
        ),
        transforms=(str.strip,),
    ),
    "email": _email_field,
    "password": StringField(rules=PASSWORD_RULES),
})

login_schema = ObjectSchema({
    "email": _email_field,
    "password": StringField(rules=(min_length(1, "Password is required"),)),
})

password_reset_schema = ObjectSchema({
    "email": _email_field,
})

__all__ = [
    "PASSWORD_RULES",
    "SPECIAL_CHARACTERS",
    "login_schema",
    "password_reset_schema",
    "signup_schema",
]
