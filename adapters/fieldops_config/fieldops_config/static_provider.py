# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Provider over an in-process dictionary."""

from typing import Any

from .base import ConfigProvider


class StaticConfigProvider(ConfigProvider):
    """Mutable dictionary backing schema fields whose source is "static"."""

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = {} if config is None else config

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._config[key] = value
