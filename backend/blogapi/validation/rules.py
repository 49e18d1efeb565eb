"""
Blog API — Declarative Validation Rules
========================================

What:  Small rule objects and the `validate()` function that runs a ruleset.
How:   A ruleset is an ordered list of rules. Each rule reads one field from one
       location of the input ("body", "params" or "query") and either passes or yields a
       single FieldError. Every rule runs; nothing short-circuits.

Absent fields:
    Only `Required` reports a missing field. Every other rule passes when the
    field is absent, so a missing required field produces exactly one error,
    and the same rules can guard optional fields in update payloads.

Example:
    result = validate(
        {"body": {"email": "a@b.com", "password": "secret1"}},
        [Required("name"), IsString("name"), Required("email"), IsEmail("email")],
    )
    result.errors  # [FieldError(field="name", message="name is required", ...)]
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from blogapi.results import ErrorKind, Failure, FieldError

BODY = "body"
PARAMS = "params"
QUERY = "query"

# Local part, one "@", a dotted domain; no whitespace anywhere
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DIGITS_PATTERN = re.compile(r"^[0-9]+\Z")

# Top of the signed 32-bit Integer id columns
MAX_ID = 2**31 - 1


class Rule:
    """
    Base class for a single-field rule.

    Subclasses implement `check(value)` for a present value and set
    `default_message`, which is formatted with the field name.
    """

    default_message = "{field} is invalid"

    def __init__(self, field: str, location: str = BODY, message: Optional[str] = None):
        self.field = field
        self.location = location
        self.message = message

    def evaluate(self, data: Mapping[str, Mapping[str, Any]]) -> Optional[FieldError]:
        section = data.get(self.location) or {}
        value = section.get(self.field)
        if value is None:
            return None
        if self.check(value):
            return None
        return self.error()

    def check(self, value: Any) -> bool:
        raise NotImplementedError

    def error(self) -> FieldError:
        message = self.message or self.default_message.format(field=self.field)
        return FieldError(message=message, field=self.field, location=self.location)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field!r}, location={self.location!r})"


class Required(Rule):
    """Field must be present, non-null and, for strings, not blank."""

    default_message = "{field} is required"

    def evaluate(self, data: Mapping[str, Mapping[str, Any]]) -> Optional[FieldError]:
        section = data.get(self.location) or {}
        value = section.get(self.field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return self.error()
        return None


class IsString(Rule):
    default_message = "{field} must be a string"

    def check(self, value: Any) -> bool:
        return isinstance(value, str)


class IsEmail(Rule):
    default_message = "{field} must be a valid email address"

    def check(self, value: Any) -> bool:
        # Non-strings are IsString's concern
        if not isinstance(value, str):
            return True
        return bool(EMAIL_PATTERN.match(value.strip()))


class MinLength(Rule):
    default_message = "{field} must be at least {minimum} characters long"

    def __init__(self, field: str, minimum: int, location: str = BODY, message: Optional[str] = None):
        super().__init__(field, location=location, message=message)
        self.minimum = minimum

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return True
        return len(value) >= self.minimum

    def error(self) -> FieldError:
        message = self.message or self.default_message.format(field=self.field, minimum=self.minimum)
        return FieldError(message=message, field=self.field, location=self.location)


class MaxBytes(Rule):
    """UTF-8 encoded length ceiling (bcrypt only reads the first 72 bytes)."""

    default_message = "{field} must be at most {maximum} bytes long"

    def __init__(self, field: str, maximum: int, location: str = BODY, message: Optional[str] = None):
        super().__init__(field, location=location, message=message)
        self.maximum = maximum

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return True
        return len(value.encode("utf-8")) <= self.maximum

    def error(self) -> FieldError:
        message = self.message or self.default_message.format(field=self.field, maximum=self.maximum)
        return FieldError(message=message, field=self.field, location=self.location)


class PositiveInt(Rule):
    """
    Integer in [1, maximum]. Path parameters arrive as strings, so a string of
    digits counts; booleans, floats and signed strings do not. The default
    maximum is the largest value an id column can hold.
    """

    default_message = "{field} must be a positive integer"

    def __init__(
        self, field: str, location: str = BODY, message: Optional[str] = None, maximum: int = MAX_ID
    ):
        super().__init__(field, location=location, message=message)
        self.maximum = maximum

    def check(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, str):
            # Longer than the maximum's digit count is out of range without parsing
            if not DIGITS_PATTERN.match(value) or len(value) > len(str(self.maximum)):
                return False
            value = int(value)
        if isinstance(value, int):
            return 1 <= value <= self.maximum
        return False


@dataclass(frozen=True)
class ValidationResult:
    """Empty `errors` means pass."""

    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_failure(self) -> Failure:
        return Failure(kind=ErrorKind.VALIDATION_FAILED, errors=list(self.errors))


def validate(data: Mapping[str, Mapping[str, Any]], ruleset: Sequence[Rule]) -> ValidationResult:
    """
    Runs every rule of `ruleset` against `data` and collects the failures.

    Args:
        data:    {"body": {...}, "params": {...}, "query": {...}}; missing sections count as empty
        ruleset: Rules in declaration order

    Returns:
        ValidationResult whose errors keep the order of the rules that failed.
    """
    errors = []
    for rule in ruleset:
        error = rule.evaluate(data)
        if error is not None:
            errors.append(error)
    return ValidationResult(errors=errors)
