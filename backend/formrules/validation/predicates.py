"""Primitive Predicates

Environment-agnostic type and format checks used by every rule. All checks
are pure and never raise for unexpected input types; they answer False.

Features:
- bool is never accepted where a number is expected
- Compiled pattern caching for bare and delimited patterns ("/^[a-z]+$/i").
  User patterns compile with the `regex` module, so Unicode property
  classes such as \\p{L} work
- Uploaded-file descriptor shape checked through a strict pydantic model
"""
from __future__ import annotations

import importlib
import math
import re
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import regex
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from formrules.logging import rules_logger

log = rules_logger()

_NUMERIC_STRING = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*", re.ASCII)
_INTEGER_STRING = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)
_EMAIL_ADDRESS = re.compile(r"[A-Za-z0-9._%+-]+@(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}", re.ASCII)

_PATTERN_DELIMITERS = frozenset("/#~%!@")
_PATTERN_MODIFIERS = {
    "i": regex.IGNORECASE, "m": regex.MULTILINE, "s": regex.DOTALL, "x": regex.VERBOSE, "u": regex.UNICODE,
}

UPLOAD_ERR_OK = 0


class UploadedFile(BaseModel):
    """Shape of an uploaded-file descriptor as produced by form parsers."""
    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    name: str
    type: str
    tmp_name: str
    error: int
    size: int


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> regex.Pattern[str]:
    """Compile a bare or delimited pattern.

    A pattern whose first character is one of ``/ # ~ % ! @`` and that
    contains the same character again is read as ``<d>body<d>modifiers``.

    Raises:
        regex.error: The pattern or one of its modifiers is invalid.
    """
    if len(pattern) >= 2 and pattern[0] in _PATTERN_DELIMITERS:
        end = pattern.rfind(pattern[0])
        if end > 0:
            flags = 0
            for modifier in pattern[end + 1:]:
                if modifier not in _PATTERN_MODIFIERS:
                    raise regex.error(f"unknown pattern modifier '{modifier}'")
                flags |= _PATTERN_MODIFIERS[modifier]
            return regex.compile(pattern[1:end], flags)
    return regex.compile(pattern)


@lru_cache(maxsize=64)
def resolve_enum(enum_path: str) -> type[Enum] | None:
    """Import an Enum subclass from a dotted path, or None if there is none."""
    module_name, _, attr = enum_path.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    candidate = getattr(module, attr, None)
    if isinstance(candidate, type) and issubclass(candidate, Enum):
        return candidate
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_finite(value: int | float | Decimal) -> bool:
    if isinstance(value, Decimal): return value.is_finite()
    if isinstance(value, float): return math.isfinite(value)
    return True


class Predicates:
    """Stateless checks shared by all rule implementations."""

    def is_integer(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def is_numeric(self, value: Any) -> bool:
        if _is_number(value):
            return _is_finite(value)
        if isinstance(value, str):
            return _NUMERIC_STRING.fullmatch(value) is not None
        return False

    def is_string(self, value: Any) -> bool:
        return isinstance(value, str)

    def is_integer_like(self, value: Any) -> bool:
        if self.is_integer(value):
            return True
        if isinstance(value, float):
            return math.isfinite(value) and value.is_integer()
        if isinstance(value, Decimal):
            return value.is_finite() and value == value.to_integral_value()
        if isinstance(value, str):
            return _INTEGER_STRING.fullmatch(value) is not None
        return False

    def is_email_address(self, value: Any) -> bool:
        if not isinstance(value, str) or ".." in value:
            return False
        return _EMAIL_ADDRESS.fullmatch(value) is not None

    def is_array(self, value: Any) -> bool:
        return isinstance(value, (Mapping, list, tuple))

    def is_uploaded_file(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        try:
            descriptor = UploadedFile.model_validate(dict(value))
        except PydanticValidationError:
            return False
        return descriptor.error == UPLOAD_ERR_OK and Path(descriptor.tmp_name).is_file()

    def match_regex(self, value: str, pattern: str) -> bool:
        try:
            compiled = compile_pattern(pattern)
        except regex.error as e:
            log.debug("invalid_pattern", pattern=pattern, error=str(e))
            return False
        return compiled.search(value) is not None

    def match_datetime(self, value: str, fmt: str) -> bool:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            return False
        # strptime accepts unpadded fields; the value must be the canonical rendering
        return parsed.strftime(fmt) == value

    def is_enum_value(self, value: Any, enum_path: str) -> bool:
        enum_class = resolve_enum(enum_path)
        if enum_class is None:
            return False
        if any(type(member.value) is type(value) and member.value == value for member in enum_class):
            return True
        return isinstance(value, str) and value in enum_class.__members__
