"""Validation Error System

Every failure surfaces as a single raised exception whose message is the
complete user-facing feedback. Subclasses separate the failure kinds:

- RuleConfigurationError: the rule set itself is malformed
- RequirementError: a required / requiredWithout relation is violated
- RuleViolationError: a value fails a rule
- UnknownRuleError: a directive names no registered rule
- FieldNotFoundError: a field path does not resolve
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from formrules.errors import AppError, ErrorCode


@dataclass(eq=False)
class ValidationError(Exception):
    """Base validation error carrying a human-readable message."""
    message: str
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC
    field: str | int | None = None
    rule: str | None = None

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def with_message(self, message: str) -> ValidationError:
        """Copy of this error with the message replaced (custom message overrides)."""
        return replace(self, message=message)

    def to_app_error(self) -> AppError:
        """Convert to AppError for the Result-based error system."""
        metadata: dict[str, Any] = {"error_type": type(self).__name__}
        if self.field is not None: metadata["field"] = self.field
        if self.rule is not None: metadata["rule"] = self.rule
        return AppError(code=self.code, message=self.message, metadata=metadata, cause=self)


@dataclass(eq=False)
class RuleConfigurationError(ValidationError, ValueError):
    """Malformed rule specification. Raised before any data is inspected where possible."""
    code: ErrorCode = ErrorCode.E2030_RULE_CONFIGURATION


@dataclass(eq=False)
class RequirementError(ValidationError):
    """A field's presence contradicts its required / requiredWithout constraints."""
    code: ErrorCode = ErrorCode.E2001_REQUIRED_FIELD_MISSING


@dataclass(eq=False)
class RuleViolationError(ValidationError):
    """A field value does not satisfy a rule."""
    code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION


@dataclass(eq=False)
class UnknownRuleError(ValidationError):
    code: ErrorCode = ErrorCode.E2031_UNKNOWN_RULE


@dataclass(eq=False)
class FieldNotFoundError(ValidationError, LookupError):
    code: ErrorCode = ErrorCode.E2006_FIELD_NOT_FOUND
