"""Validator

Runs a rule map against one record, fail-fast. Per field, in declaration
order: requirement directives first, then the remaining rules in the order
they were declared. The first failure is raised; success returns the
DataAccessor wrapping the unchanged input.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from formrules.logging import validation_logger

from .accessor import DataAccessor, FieldPath
from .compiled import CompiledRules, CustomMessages, RuleMap
from .errors import ValidationError
from .factory import RuleFactory
from .messages import Messages, default_messages
from .meta_rules import MetaRule
from .requirements import RequirementEngine

log = validation_logger()

NULLABLE = "nullable"


class Validator:
    """Validates records against a rule map.

    Usage:
        validator = Validator({
            "email": ["required", "email"],
            "age": ["nullable", "integer", "min:18"],
        })
        accessor = validator.validate(payload)
    """

    __slots__ = ("_rules", "_custom_messages", "_factory", "_messages")

    def __init__(
        self,
        rules: RuleMap,
        custom_messages: Mapping[str, str] | None = None,
        *,
        factory: RuleFactory | None = None,
        messages: Messages | None = None,
    ):
        self._rules = rules
        self._custom_messages = custom_messages
        self._factory = factory
        self._messages = messages or (factory.messages if factory else default_messages())

    @property
    def rules(self) -> RuleMap:
        return self._rules

    def validate(self, data: Any) -> DataAccessor:
        """Validate `data` and return an accessor over it.

        Raises:
            RuleConfigurationError: The rule map is malformed.
            UnknownRuleError: A directive names no registered rule.
            RequirementError: A required / requiredWithout constraint fails.
            RuleViolationError: A value fails one of its rules.
        """
        try:
            compiled = CompiledRules(self._rules, self._custom_messages, factory=self._factory, messages=self._messages)
            accessor = DataAccessor(data, self._messages)
            for field in compiled.fields:
                self._validate_field(field, compiled.meta_rules(field), accessor, compiled.custom_messages)
        except ValidationError as e:
            log.info("validation_failed", field=e.field, rule=e.rule, code=e.code.name)
            raise
        log.debug("validation_passed", fields=len(compiled.fields))
        return accessor

    def _validate_field(
        self, field: FieldPath, meta_rules: list[MetaRule], accessor: DataAccessor, custom_messages: CustomMessages,
    ) -> None:
        engine = RequirementEngine(field, meta_rules, accessor, custom_messages, self._messages)
        engine.validate()
        if engine.should_skip_further_validation():
            return

        remaining = engine.filter_out_requirement_rules(meta_rules)
        nullable = any(rule.name.lower() == NULLABLE for rule in remaining)
        value = accessor.get_field(field)
        if nullable and value is None:
            return
        for rule in remaining:
            if rule.name.lower() != NULLABLE: rule.validate(field, value)

    def __repr__(self) -> str:
        return f"Validator(rules={self._rules!r})"
