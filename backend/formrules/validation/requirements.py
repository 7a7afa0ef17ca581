"""Field Requirement Resolution

`required` and `requiredWithout:<field>` are not ordinary rules: they are
evaluated against the whole record before any value rule runs, and they
decide whether the field's remaining rules run at all.

Resolution order for a field F with requiredWithout references R:
1. F references itself in R: configuration error, whatever the data
2. F present and any field of R present: mutually exclusive fields
3. F absent and required: missing field
4. F absent, R non-empty and no field of R present: none of the alternatives
5. Otherwise the requirement holds
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import NoReturn

from formrules.errors import ErrorCode

from .accessor import DataAccessor, FieldPath
from .compiled import CustomMessages
from .errors import RequirementError, RuleConfigurationError
from .messages import Messages, default_messages
from .meta_rules import MetaRule

REQUIRED = "required"
REQUIRED_WITHOUT = "requiredWithout"
REQUIREMENT_RULES = frozenset({REQUIRED.lower(), REQUIRED_WITHOUT.lower()})


@dataclass(frozen=True, slots=True)
class FieldRequirementConstraints:
    """Requirement directives found in one field's rule list."""
    is_required: bool = False
    required_without_fields: tuple[str, ...] = ()

    @classmethod
    def from_meta_rules(cls, meta_rules: Iterable[MetaRule], messages: Messages | None = None) -> FieldRequirementConstraints:
        """Collect requirement directives, case-insensitively. Duplicate references are kept.

        Raises:
            RuleConfigurationError: A requiredWithout directive has no field name.
        """
        is_required, without = False, []
        for rule in meta_rules:
            name = rule.name.lower()
            if name == REQUIRED.lower():
                is_required = True
            elif name == REQUIRED_WITHOUT.lower():
                if rule.param is None or not rule.param.strip():
                    raise RuleConfigurationError((messages or default_messages()).get("required_without_requires_field_name"),
                        rule=REQUIRED_WITHOUT)
                without.append(rule.param.strip())
        return cls(is_required, tuple(without))

    @property
    def has_required_without_fields(self) -> bool:
        return bool(self.required_without_fields)

    def format_required_without_list(self) -> str:
        """``'a'`` for one reference, ``one of 'a', 'b'`` for several."""
        quoted = ", ".join(f"'{name}'" for name in self.required_without_fields)
        return quoted if len(self.required_without_fields) == 1 else f"one of {quoted}"


class RequirementEngine:
    """Evaluates one field's requirement constraints against a record."""

    def __init__(
        self,
        field: FieldPath,
        meta_rules: Iterable[MetaRule],
        accessor: DataAccessor,
        custom_messages: CustomMessages | Mapping[str, str] | None = None,
        messages: Messages | None = None,
    ):
        self.field = field
        self._accessor = accessor
        if custom_messages is not None and not isinstance(custom_messages, CustomMessages):
            custom_messages = CustomMessages(custom_messages)
        self._custom_messages = custom_messages
        self._messages = messages or default_messages()
        self.constraints = FieldRequirementConstraints.from_meta_rules(meta_rules, self._messages)

    @staticmethod
    def filter_out_requirement_rules(meta_rules: Iterable[MetaRule]) -> list[MetaRule]:
        return [rule for rule in meta_rules if rule.name.lower() not in REQUIREMENT_RULES]

    def should_skip_further_validation(self) -> bool:
        """An absent optional field, or an absent field with alternatives, has nothing left to check."""
        if self._accessor.has_field(self.field): return False
        return not self.constraints.is_required or self.constraints.has_required_without_fields

    def validate(self) -> None:
        """Raise if the field's presence contradicts its constraints.

        Raises:
            RuleConfigurationError: requiredWithout names the field itself.
            RequirementError: The field is missing, or conflicts with a referenced field.
        """
        constraints = self.constraints
        if str(self.field) in constraints.required_without_fields:
            raise RuleConfigurationError(self._messages.get("required_without_self_reference"),
                field=self.field, rule=REQUIRED_WITHOUT)

        references_present = any(self._accessor.has_field(name) for name in constraints.required_without_fields)
        if self._accessor.has_field(self.field):
            if references_present:
                self._fail(REQUIRED_WITHOUT, ErrorCode.E2007_MUTUALLY_EXCLUSIVE_FIELDS,
                    "only_one_field_can_be_present", self.field, constraints.format_required_without_list())
            return

        if constraints.is_required:
            self._fail(REQUIRED, ErrorCode.E2001_REQUIRED_FIELD_MISSING, "required_field_missing", self.field)
        if constraints.has_required_without_fields and not references_present:
            self._fail(REQUIRED_WITHOUT, ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                "either_field_must_be_present", self.field, constraints.format_required_without_list())

    def _fail(self, rule: str, code: ErrorCode, key: str, *args: object) -> NoReturn:
        custom = self._custom_messages.get(self.field, rule) if self._custom_messages else None
        message = custom if custom is not None else self._messages.get(key, *args)
        raise RequirementError(message, code=code, field=self.field, rule=rule)

    def __repr__(self) -> str:
        return f"RequirementEngine(field={self.field!r}, constraints={self.constraints!r})"
