"""Ordered configuration value providers.

Each provider answers ``get(key)`` with a value or ``None``. A
``ProviderChain`` asks its providers left to right and returns the first
answer, which gives the lookup order flag -> .env.ack -> environment ->
default.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from .store import EnvAckStore


class ConfigProvider(ABC):
    """Source of configuration values."""

    name: str = "provider"

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None when this source has none."""


class FlagProvider(ConfigProvider):
    """Values passed explicitly on the command line."""

    name = "flag"

    def __init__(self, values: Mapping[str, str | None] | None = None) -> None:
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key) or None


class FileProvider(ConfigProvider):
    """Values stored in ``.env.ack``."""

    name = "file"

    def __init__(self, store: EnvAckStore) -> None:
        self._store = store

    def get(self, key: str) -> str | None:
        return self._store.read(key)


class EnvProvider(ConfigProvider):
    """Values from the process environment."""

    name = "env"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key) or None


class DefaultProvider(ConfigProvider):
    """Hard-coded fallbacks."""

    name = "default"

    def __init__(self, defaults: Mapping[str, str]) -> None:
        self._defaults = dict(defaults)

    def get(self, key: str) -> str | None:
        return self._defaults.get(key)


class ProviderChain(ConfigProvider):
    """Composite provider returning the first non-empty answer."""

    name = "chain"

    def __init__(self, providers: Iterable[ConfigProvider]) -> None:
        self._providers = list(providers)

    def get(self, key: str) -> str | None:
        for provider in self._providers:
            value = provider.get(key)
            if value:
                return value
        return None

    def source_of(self, key: str) -> str | None:
        """Name of the provider that would answer ``key``."""
        for provider in self._providers:
            if provider.get(key):
                return provider.name
        return None
