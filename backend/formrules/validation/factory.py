"""Rule Catalog / Factory

Resolves directive names (case-insensitive) to cached rule instances. All
rules built by one factory share a single lazily created Predicates object.
"""
from __future__ import annotations

import threading
from functools import lru_cache

from .errors import RuleConfigurationError
from .messages import Messages, default_messages
from .predicates import Predicates
from .rules import BUILTIN_RULES, Rule

_RULES: dict[str, type[Rule]] = {cls.name.lower(): cls for cls in BUILTIN_RULES}


class RuleFactory:
    """Creates and caches rule instances by lowercased name. Thread-safe."""

    def __init__(self, messages: Messages | None = None):
        self._messages = messages or default_messages()
        self._predicates: Predicates | None = None
        self._rules: dict[str, Rule] = {}
        self._lock = threading.Lock()

    @property
    def messages(self) -> Messages:
        return self._messages

    @property
    def predicates(self) -> Predicates:
        if self._predicates is None:
            with self._lock:
                if self._predicates is None: self._predicates = Predicates()
        return self._predicates

    def create(self, name: str) -> Rule | None:
        """Return the rule registered under `name`, or None if there is none.

        Raises:
            RuleConfigurationError: `name` is empty.
        """
        if not name:
            raise RuleConfigurationError(self._messages.get("rule_name_must_be_non_empty"))
        key = name.strip().lower()
        rule_class = _RULES.get(key)
        if rule_class is None:
            return None

        rule = self._rules.get(key)
        if rule is not None:
            return rule
        predicates = self.predicates
        with self._lock:
            return self._rules.setdefault(key, rule_class(predicates, self._messages))


@lru_cache
def default_rule_factory() -> RuleFactory:
    return RuleFactory()
