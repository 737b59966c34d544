"""Errors raised while reading synpull settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """An environment setting holds a value synpull cannot use."""

    def __init__(self, message: str, *, variables: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.variables = tuple(variables)


class MissingConfigurationError(ConfigurationError):
    """Required settings are unset or blank."""
