# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Configuration providers and the value coercions they share."""

from abc import ABC, abstractmethod
from typing import Any

_BOOL_WORDS = {
    "true": True, "1": True, "yes": True, "on": True,
    "false": False, "0": False, "no": False, "off": False,
}


def parse_bool(value: Any, default: bool) -> bool:
    """Coerce a bool or a boolean word; anything else yields ``default``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _BOOL_WORDS.get(value.strip().lower(), default)
    return default


def parse_int(value: Any, default: int) -> int:
    """Coerce an int or numeric string; bools and garbage yield ``default``."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


class ConfigProvider(ABC):
    """A flat key/value source. Subclasses only implement ``get``."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Raw value for ``key``, or ``default`` when the key is absent."""

    def get_bool(self, key: str, default: bool = False) -> bool:
        return parse_bool(self.get(key), default)

    def get_int(self, key: str, default: int = 0) -> int:
        return parse_int(self.get(key), default)
