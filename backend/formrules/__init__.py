# Package exports
from formrules.config import settings, get_settings
from formrules.logging import (
    configure_logging,
    domain_logger,
    validation_logger,
    rules_logger,
)
from formrules.validation import (
    DataAccessor,
    Validator,
    RuleFactory,
    Messages,
    parse_ingress,
    ValidationError,
    RuleConfigurationError,
    RequirementError,
    RuleViolationError,
    UnknownRuleError,
    FieldNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "settings",
    "get_settings",
    "configure_logging",
    "domain_logger",
    "validation_logger",
    "rules_logger",
    "DataAccessor",
    "Validator",
    "RuleFactory",
    "Messages",
    "parse_ingress",
    "ValidationError",
    "RuleConfigurationError",
    "RequirementError",
    "RuleViolationError",
    "UnknownRuleError",
    "FieldNotFoundError",
]
