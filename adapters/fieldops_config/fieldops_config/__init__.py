# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps Configuration Adapter.

A shared library for schema-driven configuration across FieldOps services.
"""

__version__ = "0.1.0"

from .base import ConfigProvider
from .env_provider import EnvConfigProvider
from .schema_loader import (
    ConfigSchema,
    ConfigSchemaError,
    ConfigValidationError,
    FieldSpec,
    SchemaConfigLoader,
    load_schema,
)
from .static_provider import StaticConfigProvider
from .typed_config import (
    TypedConfig,
    load_typed_config,
)

__all__ = [
    # Version
    "__version__",
    # Configuration Providers
    "ConfigProvider",
    "EnvConfigProvider",
    "StaticConfigProvider",
    # Schema-driven configuration
    "ConfigSchema",
    "ConfigSchemaError",
    "ConfigValidationError",
    "FieldSpec",
    "SchemaConfigLoader",
    "load_schema",
    # Typed configuration
    "TypedConfig",
    "load_typed_config",
]
