"""
Declarative field rules for request bodies.

A field is an ordered table of (predicate, message) rules plus the
normalizing transforms applied once every rule has passed. Object schemas
map keys to fields and may nest; errors carry the dot-joined path of the
offending field.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from email_validator import EmailNotValidError, validate_email


class Rule(NamedTuple):
    predicate: Callable[[str], bool]
    message: str


class FieldError(NamedTuple):
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class SchemaError(ValueError):
    """Raised by ``ObjectSchema.parse`` with every field error found."""

    def __init__(self, errors: Sequence[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    value: Optional[Dict[str, Any]] = None
    errors: Tuple[FieldError, ...] = ()


def min_length(length: int, message: str) -> Rule:
    return Rule(lambda value: len(value) >= length, message)


def max_length(length: int, message: str) -> Rule:
    return Rule(lambda value: len(value) <= length, message)


def pattern(regex: str, message: str) -> Rule:
    # ASCII classes: \d must not match digits from other scripts.
    compiled = re.compile(regex, re.ASCII)
    return Rule(lambda value: compiled.search(value) is not None, message)


def _is_email(value: str) -> bool:
    if not value.isascii():
        return False
    try:
        result = validate_email(
            value,
            check_deliverability=False,
            allow_smtputf8=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return False
    return "." in result.ascii_domain


def email(message: str) -> Rule:
    return Rule(_is_email, message)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _join(path: Tuple[str, ...]) -> str:
    return ".".join(path)


@dataclass(frozen=True)
class StringField:
    rules: Tuple[Rule, ...] = ()
    transforms: Tuple[Callable[[str], str], ...] = ()

    def run(self, value: Any, path: Tuple[str, ...]) -> Tuple[Any, List[FieldError]]:
        if not isinstance(value, str):
            return None, [FieldError(_join(path), f"Expected string, received {_type_name(value)}")]
        errors = [FieldError(_join(path), rule.message) for rule in self.rules if not rule.predicate(value)]
        if errors:
            return None, errors
        for transform in self.transforms:
            value = transform(value)
        return value, []


@dataclass(frozen=True)
class ObjectSchema:
    fields: Mapping[str, Any] = field(default_factory=dict)

    def run(self, value: Any, path: Tuple[str, ...] = ()) -> Tuple[Any, List[FieldError]]:
        if not isinstance(value, dict):
            return None, [FieldError(_join(path), f"Expected object, received {_type_name(value)}")]
        output: Dict[str, Any] = {}
        errors: List[FieldError] = []
        for name, spec in self.fields.items():
            if name not in value:
                errors.append(FieldError(_join(path + (name,)), "Required"))
                continue
            normalized, field_errors = spec.run(value[name], path + (name,))
            if field_errors:
                errors.extend(field_errors)
            else:
                output[name] = normalized
        return (None if errors else output), errors

    def safe_parse(self, data: Any) -> ValidationResult:
        value, errors = self.run(data)
        if errors:
            return ValidationResult(ok=False, errors=tuple(errors))
        return ValidationResult(ok=True, value=value)

    def parse(self, data: Any) -> Dict[str, Any]:
        result = self.safe_parse(data)
        if not result.ok:
            raise SchemaError(result.errors)
        return result.value
