"""Compiled Rule Set

Normalizes a caller's rule map into ordered MetaRule lists per field, and
indexes custom message overrides keyed ``"<field>.<rule>"``.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Callable, Union

from .accessor import FieldPath
from .errors import RuleConfigurationError
from .factory import RuleFactory
from .messages import Messages, default_messages
from .meta_rules import CustomMetaRule, MetaRule, StandardMetaRule
from .parser import parse_rule

RuleEntry = Union[str, Callable[[Any], Any]]
RuleSpec = Union[RuleEntry, Sequence[RuleEntry]]
RuleMap = Union[Mapping[FieldPath, RuleSpec], Sequence[RuleSpec]]


class CustomMessages:
    """Override messages keyed ``"<field>.<rule>"``.

    The key is split on its last dot, so dotted field paths work
    (``"user.age.min"``). The field part matches exactly; the rule part
    matches case-insensitively.
    """

    __slots__ = ("_messages",)

    def __init__(self, messages: Mapping[str, str] | None = None):
        self._messages: dict[tuple[str, str], str] = {}
        for key, message in (messages or {}).items():
            field, sep, rule = str(key).rpartition(".")
            if sep and field and rule:
                self._messages[(field, rule.lower())] = message

    def get(self, field: FieldPath, rule: str) -> str | None:
        return self._messages.get((str(field), rule.lower()))

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"CustomMessages({len(self._messages)} overrides)"


def _iter_rule_map(rules: RuleMap) -> Iterator[tuple[FieldPath, RuleSpec]]:
    if isinstance(rules, Mapping):
        yield from rules.items()
    elif isinstance(rules, Sequence) and not isinstance(rules, (str, bytes)):
        yield from enumerate(rules)
    else:
        raise TypeError(f"Rules must be a mapping or a sequence, got {type(rules).__name__}")


class CompiledRules:
    """Immutable field-to-MetaRule index built from a rule map."""

    __slots__ = ("_rules", "_custom_messages")

    def __init__(
        self,
        rules: RuleMap,
        custom_messages: Mapping[str, str] | CustomMessages | None = None,
        *,
        factory: RuleFactory | None = None,
        messages: Messages | None = None,
    ):
        if not isinstance(custom_messages, CustomMessages):
            custom_messages = CustomMessages(custom_messages)
        self._custom_messages = custom_messages
        messages = messages or (factory.messages if factory else default_messages())
        self._rules: dict[FieldPath, tuple[MetaRule, ...]] = {
            field: tuple(self._compile(spec, factory, messages)) for field, spec in _iter_rule_map(rules)
        }

    def _compile(self, spec: RuleSpec, factory: RuleFactory | None, messages: Messages) -> Iterator[MetaRule]:
        entries = [spec] if isinstance(spec, str) or callable(spec) else spec
        if not isinstance(entries, Sequence):
            raise RuleConfigurationError(messages.get("rule_must_be_non_empty"))
        for entry in entries:
            if callable(entry):
                yield CustomMetaRule(entry, messages)
            elif isinstance(entry, str) and entry.strip():
                name, param = parse_rule(entry, messages)
                yield StandardMetaRule(name, param, self._custom_messages, factory)
            else:
                raise RuleConfigurationError(messages.get("rule_must_be_non_empty"))

    @property
    def fields(self) -> list[FieldPath]:
        return list(self._rules)

    def meta_rules(self, field: FieldPath) -> list[MetaRule]:
        """Rules declared for `field`, in order. Empty for unknown fields."""
        return list(self._rules.get(field, ()))

    @property
    def custom_messages(self) -> CustomMessages:
        return self._custom_messages

    def __repr__(self) -> str:
        return f"CompiledRules(fields={self.fields!r})"
