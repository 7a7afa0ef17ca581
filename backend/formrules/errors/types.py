"""Error Codes and the Result Container

Validation raises. Callers that would rather branch on values convert at the
boundary (see formrules.validation.parse_ingress) into Ok(accessor) or
Err(AppError), and pattern-match on the outcome.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Validation error codes.

    E2000-E2029: the data broke a rule
    E2030-E2099: the rule set itself is defective
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2006_FIELD_NOT_FOUND = 2006
    E2007_MUTUALLY_EXCLUSIVE_FIELDS = 2007
    E2010_INVALID_EMAIL = 2010
    E2012_INVALID_DATE = 2012
    E2013_INVALID_FILE = 2013

    E2030_RULE_CONFIGURATION = 2030
    E2031_UNKNOWN_RULE = 2031


@dataclass(frozen=True, slots=True)
class AppError:
    """A validation failure carried as a value."""
    code: ErrorCode
    message: str
    origin: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def with_origin(self, origin: str) -> AppError:
        return replace(self, origin=origin)

    def __str__(self) -> str:
        where = f" ({self.origin})" if self.origin else ""
        return f"[{self.code.name}] {self.message}{where}"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
