"""Declarative Field Validation

Per-field rule lists validate nested request data, fail-fast, and hand back
a read-only DataAccessor over the verified record.

Key Features:
- Rule directives ("max:100") and predicate callables, mixed freely
- Dot-separated field paths into nested mappings, lists and objects
- Cross-field requirements: required, requiredWithout:<field>
- nullable fields that skip their rules when the value is None
- Custom message overrides keyed "<field>.<rule>"
- Localized default messages (messages.yaml)
- Result-returning boundary helper

Usage:
    from formrules.validation import Validator, ValidationError

    validator = Validator(
        {
            "ArtistName": ["requiredWithout:ArtistId", "string", "maxLength:100"],
            "ArtistId": ["requiredWithout:ArtistName", "integer", "min:1"],
            "contact.email": ["nullable", "email"],
        },
        {"ArtistId.min": "Pick an existing artist."},
    )
    try:
        accessor = validator.validate(payload)
    except ValidationError as e:
        return error_response(e.to_app_error())
    artist_id = accessor.get_field_or_default("ArtistId")
"""

# Data access and parsing
from .accessor import DataAccessor, FieldPath
from .parser import parse_rule

# Rules
from .predicates import Predicates, UploadedFile
from .rules import (
    Rule,
    StringRule,
    IntegerRule,
    NumericRule,
    EmailRule,
    RegexRule,
    DatetimeRule,
    MinRule,
    MaxRule,
    MinLengthRule,
    MaxLengthRule,
    ArrayRule,
    FileRule,
    EnumRule,
    UploadError,
)
from .factory import RuleFactory, default_rule_factory

# Compilation and execution
from .meta_rules import MetaRule, StandardMetaRule, CustomMetaRule
from .compiled import CompiledRules, CustomMessages, RuleMap
from .requirements import FieldRequirementConstraints, RequirementEngine
from .validator import Validator
from .boundaries import parse_ingress

# Messages and errors
from .messages import Messages, default_messages
from .errors import (
    ValidationError,
    RuleConfigurationError,
    RequirementError,
    RuleViolationError,
    UnknownRuleError,
    FieldNotFoundError,
)

__all__ = [
    # Data access
    "DataAccessor",
    "FieldPath",
    "parse_rule",
    # Rules
    "Predicates",
    "UploadedFile",
    "Rule",
    "StringRule",
    "IntegerRule",
    "NumericRule",
    "EmailRule",
    "RegexRule",
    "DatetimeRule",
    "MinRule",
    "MaxRule",
    "MinLengthRule",
    "MaxLengthRule",
    "ArrayRule",
    "FileRule",
    "EnumRule",
    "UploadError",
    "RuleFactory",
    "default_rule_factory",
    # Execution
    "MetaRule",
    "StandardMetaRule",
    "CustomMetaRule",
    "CompiledRules",
    "CustomMessages",
    "RuleMap",
    "FieldRequirementConstraints",
    "RequirementEngine",
    "Validator",
    "parse_ingress",
    # Messages and errors
    "Messages",
    "default_messages",
    "ValidationError",
    "RuleConfigurationError",
    "RequirementError",
    "RuleViolationError",
    "UnknownRuleError",
    "FieldNotFoundError",
]
