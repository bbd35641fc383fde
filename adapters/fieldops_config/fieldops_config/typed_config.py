# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Immutable, attribute-only configuration objects."""

from types import MappingProxyType
from typing import Any, Dict, Optional

from .base import ConfigProvider
from .schema_loader import SchemaConfigLoader, load_schema
from .static_provider import StaticConfigProvider


class TypedConfig:
    """Validated configuration exposed as read-only attributes.

    Only attribute access is supported (``config.http_port``), so every key a
    service reads is one its schema declares.
    """

    __slots__ = ("_values", "_schema_version")

    def __init__(self, values: Dict[str, Any], schema_version: Optional[str] = None):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))
        object.__setattr__(self, "_schema_version", schema_version)

    def get_schema_version(self) -> Optional[str]:
        return self._schema_version

    def __getattr__(self, name: str) -> Any:
        values = object.__getattribute__(self, "_values")
        try:
            return values[name]
        except KeyError:
            raise AttributeError(
                f"Configuration key '{name}' not found. Known keys: {', '.join(sorted(values))}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Configuration is read-only; cannot set '{name}'")

    def __getitem__(self, key: str) -> Any:
        raise TypeError(f"TypedConfig does not support dict-style access; use config.{key}")

    def __dir__(self) -> list:
        return sorted(self._values)

    def __repr__(self) -> str:
        return f"TypedConfig({dict(self._values)!r})"


def load_typed_config(
    service_name: str,
    schema_dir: Optional[str] = None,
    env_provider: Optional[ConfigProvider] = None,
    static_provider: Optional[StaticConfigProvider] = None,
) -> TypedConfig:
    """Load and validate a service's configuration.

    Args:
        service_name: Schema name, e.g. "messaging"
        schema_dir: Schema directory. Falls back to SCHEMA_DIR, then the bundled schemas.
        env_provider: Environment provider (tests pass a dict-backed one)
        static_provider: Provider for fields with ``"source": "static"``

    Raises:
        ConfigSchemaError: If the schema is missing or invalid
        ConfigValidationError: If required fields have no value
    """
    schema = load_schema(service_name, schema_dir)
    values = SchemaConfigLoader(schema, env_provider=env_provider, static_provider=static_provider).load()
    return TypedConfig(values, schema_version=schema.schema_version)
