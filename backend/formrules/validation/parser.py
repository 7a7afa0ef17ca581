"""Rule directive parsing: "name" or "name:param"."""
from __future__ import annotations

from .errors import RuleConfigurationError
from .messages import Messages, default_messages


def parse_rule(directive: str, messages: Messages | None = None) -> tuple[str, str | None]:
    """Split a directive into its name and parameter.

    The name keeps its casing. The parameter is everything after the first
    colon, trimmed, so ``"name:"`` yields ``""`` and ``"name"`` yields None.

    Raises:
        RuleConfigurationError: The directive or its name is blank.
    """
    name, sep, param = directive.strip().partition(":")
    name = name.strip()
    if not name:
        raise RuleConfigurationError((messages or default_messages()).get("rule_must_be_non_empty"))
    return name, (param.strip() if sep else None)
