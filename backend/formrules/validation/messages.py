"""Localized default messages.

The catalogue lives in messages.yaml next to this module and is loaded once
per process. The active language is read from a provider callable on every
lookup, so a host can switch language per request without rebuilding rules.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Callable

import yaml

from formrules.config import get_settings

CATALOGUE_PATH = Path(__file__).with_name("messages.yaml")
DEFAULT_LANGUAGE = "en"


@lru_cache
def load_catalogue(path: Path = CATALOGUE_PATH) -> dict[str, dict[str, str]]:
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def _settings_language() -> str:
    return get_settings().LANGUAGE


class Messages:
    """Message lookup for the active language, falling back to English."""

    __slots__ = ("_language_provider", "_catalogue")

    def __init__(
        self,
        language_provider: Callable[[], str] | None = None,
        catalogue: dict[str, dict[str, str]] | None = None,
    ):
        self._language_provider = language_provider or _settings_language
        self._catalogue = catalogue if catalogue is not None else load_catalogue()

    @classmethod
    def for_language(cls, language: str) -> Messages:
        return cls(lambda: language)

    @property
    def language(self) -> str:
        return self._language_provider() or DEFAULT_LANGUAGE

    def get(self, key: str, *args: object) -> str:
        """Format message `key` with positional `args`.

        Raises:
            KeyError: `key` is not in the catalogue.
        """
        entry = self._catalogue[key]
        template = entry.get(self.language) or entry[DEFAULT_LANGUAGE]
        return template.format(*args)


@lru_cache
def default_messages() -> Messages:
    return Messages()
