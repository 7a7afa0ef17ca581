"""Meta-Rules

Compiled form of one rule specification entry. A StandardMetaRule carries a
directive name and parameter and delegates to the rule factory; a
CustomMetaRule wraps a caller-supplied predicate.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field as dataclass_field
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from formrules.errors import ErrorCode

from .errors import RuleViolationError, UnknownRuleError
from .factory import RuleFactory, default_rule_factory
from .messages import Messages, default_messages

if TYPE_CHECKING:
    from .compiled import CustomMessages


class MetaRule(ABC):
    """One executable entry of a field's rule list."""

    name: str
    param: str | None

    @abstractmethod
    def validate(self, field: str | int, value: Any) -> None:
        """Raise a ValidationError if `value` fails this rule."""


@dataclass(frozen=True, slots=True)
class StandardMetaRule(MetaRule):
    """A named directive such as ``max:100``, resolved through a RuleFactory."""
    name: str
    param: str | None = None
    custom_messages: CustomMessages | None = dataclass_field(default=None, compare=False, repr=False)
    factory: RuleFactory | None = dataclass_field(default=None, compare=False, repr=False)

    def validate(self, field: str | int, value: Any) -> None:
        factory = self.factory or default_rule_factory()
        rule = factory.create(self.name)
        if rule is None:
            raise UnknownRuleError(factory.messages.get("unknown_rule", self.name), field=field, rule=self.name)
        try:
            rule.validate(field, value, self.param)
        except RuleViolationError as e:
            custom = self.custom_messages.get(field, self.name) if self.custom_messages else None
            if custom is None: raise
            raise e.with_message(custom) from None


@dataclass(frozen=True, slots=True)
class CustomMetaRule(MetaRule):
    """A predicate rule. Fails only when the predicate returns exactly False."""
    name: ClassVar[str] = ""
    param: ClassVar[None] = None

    predicate: Callable[[Any], Any]
    messages: Messages | None = dataclass_field(default=None, compare=False, repr=False)

    def validate(self, field: str | int, value: Any) -> None:
        if self.predicate(value) is False:
            messages = self.messages or default_messages()
            raise RuleViolationError(messages.get("field_failed_custom_validation", field),
                code=ErrorCode.E2005_CONSTRAINT_VIOLATION, field=field)
