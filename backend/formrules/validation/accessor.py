"""Field Data Accessor

Read-only view over one input record. Field paths are dot-separated
segments resolved by an explicit walk over the container chain:

- mappings by key (digit segments also match integer keys)
- lists and tuples by index
- any other object by its instance attributes (numeric names included)

Resolution stops at the first missing segment or scalar parent.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from typing import Any

from .errors import FieldNotFoundError
from .messages import Messages, default_messages

FieldPath = str | int

_MISSING = object()


def _is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit()


def _child(node: Any, segment: str) -> Any:
    """Resolve one path segment against `node`, or _MISSING."""
    if isinstance(node, Mapping):
        if segment in node:
            return node[segment]
        if _is_index(segment) and int(segment) in node:
            return node[int(segment)]
        return _MISSING
    if isinstance(node, (list, tuple)):
        if _is_index(segment) and int(segment) < len(node):
            return node[int(segment)]
        return _MISSING
    if isinstance(node, (str, bytes, int, float, bool, type(None))):
        return _MISSING
    attributes = getattr(node, "__dict__", None)
    if isinstance(attributes, dict):
        return attributes.get(segment, _MISSING)
    if is_dataclass(node) and not isinstance(node, type):
        if segment in {f.name for f in fields(node)}:
            return getattr(node, segment)
    return _MISSING


class DataAccessor:
    """Wraps a mapping, sequence or object and answers path queries."""

    __slots__ = ("_data", "_messages")

    def __init__(self, data: Any, messages: Messages | None = None):
        self._data = data
        self._messages = messages or default_messages()

    @property
    def data(self) -> Any:
        """The wrapped record, unchanged."""
        return self._data

    def _resolve(self, field: FieldPath) -> Any:
        node = self._data
        for segment in str(field).split("."):
            node = _child(node, segment)
            if node is _MISSING:
                break
        return node

    def has_field(self, field: FieldPath) -> bool:
        return self._resolve(field) is not _MISSING

    def get_field(self, field: FieldPath) -> Any:
        """Return the value at `field`.

        Raises:
            FieldNotFoundError: Any segment of the path does not resolve.
        """
        value = self._resolve(field)
        if value is _MISSING:
            raise FieldNotFoundError(self._messages.get("field_does_not_exist", field), field=field)
        return value

    def get_field_or_default(self, field: FieldPath, default: Any = None) -> Any:
        if not self.has_field(field):
            return default
        return self.get_field(field)

    def __repr__(self) -> str:
        return f"DataAccessor({self._data!r})"
