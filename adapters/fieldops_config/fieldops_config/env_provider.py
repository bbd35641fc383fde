# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Provider over process environment variables."""

import os
from typing import Any, Mapping, Optional

from .base import ConfigProvider


class EnvConfigProvider(ConfigProvider):
    """Reads ``os.environ``, or an explicit mapping in tests."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def get(self, key: str, default: Any = None) -> Any:
        return self._environ.get(key, default)
