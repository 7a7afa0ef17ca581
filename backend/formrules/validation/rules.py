"""Built-in Rule Implementations

One class per directive name. Rules are stateless: every input arrives
through validate(field, value, param), and the shared Predicates and
Messages are injected once by the RuleFactory.

A value failure raises RuleViolationError; an unusable parameter raises
RuleConfigurationError.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal
from enum import IntEnum
from typing import Any, ClassVar, NoReturn

from formrules.errors import ErrorCode

from .errors import RuleConfigurationError, RuleViolationError
from .messages import Messages
from .predicates import Predicates


class Rule(ABC):
    """Base class for built-in rules."""

    name: ClassVar[str]

    def __init__(self, predicates: Predicates, messages: Messages):
        self.predicates = predicates
        self.messages = messages

    @abstractmethod
    def validate(self, field: str | int, value: Any, param: Any) -> None:
        """Raise if `value` of `field` does not satisfy this rule."""

    def _violation(self, code: ErrorCode, field: str | int, key: str, *args: object) -> NoReturn:
        raise RuleViolationError(self.messages.get(key, field, *args), code=code, field=field, rule=self.name)

    def _misconfigured(self, key: str, *args: object) -> NoReturn:
        raise RuleConfigurationError(self.messages.get(key, *args), rule=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ============================================================================
# Type Rules
# ============================================================================

class StringRule(Rule):
    name = "string"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_string(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_string")


class IntegerRule(Rule):
    name = "integer"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_integer_like(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_integer")


class NumericRule(Rule):
    name = "numeric"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_numeric(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_numeric")


class ArrayRule(Rule):
    name = "array"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_array(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_array")


# ============================================================================
# Format Rules
# ============================================================================

class EmailRule(Rule):
    name = "email"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_email_address(value):
            self._violation(ErrorCode.E2010_INVALID_EMAIL, field, "field_must_be_email")


class RegexRule(Rule):
    """Matches `value` against the pattern given as parameter (bare or delimited)."""
    name = "regex"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_string(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_string")
        if not self.predicates.is_string(param) or not param:
            self._misconfigured("rule_requires_valid_pattern")
        if not self.predicates.match_regex(value, param):
            self._violation(ErrorCode.E2002_INVALID_FORMAT, field, "field_must_match_pattern", param)


class DatetimeRule(Rule):
    """Parses `value` with the strptime format given as parameter."""
    name = "datetime"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_string(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_string")
        if not self.predicates.is_string(param) or not param:
            self._misconfigured("rule_requires_valid_datetime_format")
        if not self.predicates.match_datetime(value, param):
            self._violation(ErrorCode.E2012_INVALID_DATE, field, "field_must_match_datetime_format", param)


class EnumRule(Rule):
    """Accepts values of the Enum class named by a dotted import path."""
    name = "enum"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_string(param) or not param:
            self._misconfigured("rule_requires_enum_class")
        if not self.predicates.is_enum_value(value, param):
            self._violation(ErrorCode.E2005_CONSTRAINT_VIOLATION, field, "field_must_be_enum_value", param)


# ============================================================================
# Range Rules
# ============================================================================

def _exact_number(value: Any) -> Decimal | int:
    # ints compare exactly against Decimal; floats go through their shortest repr
    if isinstance(value, int):
        return value
    return Decimal(str(value).strip())


class _NumericBoundRule(Rule):
    message_key: ClassVar[str]

    @abstractmethod
    def _out_of_bounds(self, value: Decimal | int, bound: Decimal | int) -> bool: ...

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_numeric(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_numeric")
        if not self.predicates.is_numeric(param):
            self._misconfigured("rule_requires_number", self.name)
        if self._out_of_bounds(_exact_number(value), _exact_number(param)):
            self._violation(ErrorCode.E2003_OUT_OF_RANGE, field, self.message_key, param)


class MinRule(_NumericBoundRule):
    name = "min"
    message_key = "field_min_value"

    def _out_of_bounds(self, value: Decimal | int, bound: Decimal | int) -> bool:
        return value < bound


class MaxRule(_NumericBoundRule):
    name = "max"
    message_key = "field_max_value"

    def _out_of_bounds(self, value: Decimal | int, bound: Decimal | int) -> bool:
        return value > bound


class _LengthBoundRule(Rule):
    message_key: ClassVar[str]

    @abstractmethod
    def _out_of_bounds(self, length: int, bound: int) -> bool: ...

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if not self.predicates.is_string(value):
            self._violation(ErrorCode.E2004_INVALID_TYPE, field, "field_must_be_string")
        if not self.predicates.is_integer_like(param):
            self._misconfigured("rule_requires_integer", self.name)
        if self._out_of_bounds(len(value), int(param)):
            self._violation(ErrorCode.E2003_OUT_OF_RANGE, field, self.message_key, param)


class MinLengthRule(_LengthBoundRule):
    name = "minLength"
    message_key = "field_min_length"

    def _out_of_bounds(self, length: int, bound: int) -> bool:
        return length < bound


class MaxLengthRule(_LengthBoundRule):
    name = "maxLength"
    message_key = "field_max_length"

    def _out_of_bounds(self, length: int, bound: int) -> bool:
        return length > bound


# ============================================================================
# Uploaded Files
# ============================================================================

class UploadError(IntEnum):
    """Upload status codes reported in a file descriptor's `error` entry."""
    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


_UPLOAD_ERROR_MESSAGES = {
    UploadError.INI_SIZE: "upload_error_ini_size",
    UploadError.FORM_SIZE: "upload_error_form_size",
    UploadError.PARTIAL: "upload_error_partial",
    UploadError.NO_FILE: "upload_error_no_file",
    UploadError.NO_TMP_DIR: "upload_error_no_tmp_dir",
    UploadError.CANT_WRITE: "upload_error_cant_write",
    UploadError.EXTENSION: "upload_error_extension",
}


class FileRule(Rule):
    name = "file"

    def validate(self, field: str | int, value: Any, param: Any) -> None:
        if self.predicates.is_uploaded_file(value):
            return
        if isinstance(value, Mapping) and value.get("error", UploadError.OK) != UploadError.OK:
            error = value["error"]
            key = _UPLOAD_ERROR_MESSAGES.get(error) if self.predicates.is_integer(error) else None
            if key is None:
                raise RuleViolationError(self.messages.get("upload_error_unknown", error),
                    code=ErrorCode.E2013_INVALID_FILE, field=field, rule=self.name)
            raise RuleViolationError(self.messages.get(key), code=ErrorCode.E2013_INVALID_FILE, field=field, rule=self.name)
        self._violation(ErrorCode.E2013_INVALID_FILE, field, "field_must_be_file")


BUILTIN_RULES: tuple[type[Rule], ...] = (
    ArrayRule, DatetimeRule, EmailRule, EnumRule, FileRule, IntegerRule,
    MaxLengthRule, MaxRule, MinLengthRule, MinRule, NumericRule, RegexRule, StringRule,
)
