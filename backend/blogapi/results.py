"""
Blog API — Result Types
========================

What:  A success-or-tagged-failure value returned by services, token
       verification and pipeline stages.
How:   `Result.success(value)` / `Result.fail(Failure(...))`. The dispatcher
       (blogapi/pipeline.py) renders a Result into an HTTP response using the
       status code attached to each ErrorKind.

Error taxonomy:
    BAD_REQUEST        → 400  body is not valid JSON
    UNAUTHORIZED       → 401  missing/invalid/expired token (no reason given)
    NOT_FOUND          → 404  resource or credential absent
    CONFLICT           → 409  uniqueness violation (email, like)
    VALIDATION_FAILED  → 422  field errors, in rule-declaration order
    INTERNAL_FAILURE   → 500  detail withheld from the client
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_FAILED = "validation_failed"
    INTERNAL_FAILURE = "internal_failure"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.INTERNAL_FAILURE: 500,
}


@dataclass(frozen=True)
class FieldError:
    """One error descriptor. `field` is None for errors not tied to an input field."""

    message: str
    field: Optional[str] = None
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "location": self.location, "message": self.message}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    errors: List[FieldError] = field(default_factory=list)

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "Failure":
        """Failure with a single message that is not tied to a field."""
        return cls(kind=kind, errors=[FieldError(message=message)])


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either `value` (ok) or `failure`, never both."""

    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: Failure) -> "Result[T]":
        return cls(failure=failure)

    @classmethod
    def not_found(cls, resource: str) -> "Result[T]":
        return cls.fail(Failure.of(ErrorKind.NOT_FOUND, f"{resource} not found"))

    @classmethod
    def conflict(cls, message: str) -> "Result[T]":
        return cls.fail(Failure.of(ErrorKind.CONFLICT, message))

    @classmethod
    def unauthorized(cls) -> "Result[T]":
        return cls.fail(Failure.of(ErrorKind.UNAUTHORIZED, "Unauthorized"))
