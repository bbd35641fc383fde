# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Schema-driven configuration loader with validation.

A service schema is a JSON document::

    {
      "service_name": "messaging",
      "schema_version": "1.0.0",
      "fields": {
        "http_port": {"type": "int", "source": "env", "env_var": "HTTP_PORT", "default": 8000}
      }
    }
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .base import ConfigProvider, parse_bool, parse_int
from .env_provider import EnvConfigProvider
from .static_provider import StaticConfigProvider

BUNDLED_SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "schemas")


class ConfigValidationError(Exception):
    """Raised when loaded values do not satisfy the schema."""
    pass


class ConfigSchemaError(Exception):
    """Raised when a schema file is missing or malformed."""
    pass


def _to_float(raw: Any, default: Any) -> Any:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def _to_string(raw: Any, default: Any) -> Any:
    # An empty environment variable counts as unset
    return default if raw == "" else raw


_CONVERTERS: Dict[str, Callable[[Any, Any], Any]] = {
    "string": _to_string,
    "int": parse_int,
    "bool": parse_bool,
    "float": _to_float,
}


@dataclass
class FieldSpec:
    """One configuration field."""
    name: str
    field_type: str = "string"
    required: bool = False
    default: Any = None
    source: str = "env"
    env_var: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FieldSpec":
        field_type = data.get("type", "string")
        if field_type not in _CONVERTERS:
            raise ConfigSchemaError(
                f"Field '{name}' has unsupported type '{field_type}'; expected one of {sorted(_CONVERTERS)}"
            )
        return cls(
            name=name,
            field_type=field_type,
            required=bool(data.get("required", False)),
            default=data.get("default"),
            source=data.get("source", "env"),
            env_var=data.get("env_var"),
            description=data.get("description"),
        )

    @property
    def key(self) -> str:
        """Lookup key in the field's provider."""
        if self.source == "env":
            return self.env_var or self.name.upper()
        return self.name


@dataclass
class ConfigSchema:
    """Parsed service schema."""
    service_name: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    schema_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigSchema":
        return cls(
            service_name=data.get("service_name", "unknown"),
            fields={name: FieldSpec.from_dict(name, spec) for name, spec in data.get("fields", {}).items()},
            metadata=data.get("metadata", {}),
            schema_version=data.get("schema_version"),
        )

    @classmethod
    def from_json_file(cls, filepath: str) -> "ConfigSchema":
        """Read a schema file.

        Raises:
            ConfigSchemaError: If the file is missing, is not JSON, or declares bad fields
        """
        if not os.path.isfile(filepath):
            raise ConfigSchemaError(f"Schema file not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigSchemaError(f"Invalid JSON in schema file {filepath}: {e}") from e
        return cls.from_dict(data)


class SchemaConfigLoader:
    """Resolves every schema field against its provider."""

    def __init__(
        self,
        schema: ConfigSchema,
        env_provider: Optional[ConfigProvider] = None,
        static_provider: Optional[StaticConfigProvider] = None,
    ):
        self.schema = schema
        self.providers: Dict[str, Optional[ConfigProvider]] = {
            "env": env_provider or EnvConfigProvider(),
            "static": static_provider,
        }

    def _resolve(self, spec: FieldSpec) -> Any:
        provider = self.providers.get(spec.source)
        raw = provider.get(spec.key) if provider is not None else None
        if raw is None:
            return spec.default
        return _CONVERTERS[spec.field_type](raw, spec.default)

    def load(self) -> Dict[str, Any]:
        """Resolve all fields.

        Raises:
            ConfigValidationError: Listing every required field left without a value
        """
        values = {name: self._resolve(spec) for name, spec in self.schema.fields.items()}

        missing = [
            f"{name} (source: {spec.source}, key: {spec.key})"
            for name, spec in self.schema.fields.items()
            if spec.required and values[name] is None
        ]
        if missing:
            raise ConfigValidationError(
                f"Configuration validation failed for {self.schema.service_name}; missing required: "
                + ", ".join(missing)
            )
        return values


def resolve_schema_dir(schema_dir: Optional[str] = None) -> str:
    """Pick the schema directory: explicit argument, then SCHEMA_DIR, then the bundled schemas."""
    return schema_dir or os.environ.get("SCHEMA_DIR") or BUNDLED_SCHEMA_DIR


def load_schema(service_name: str, schema_dir: Optional[str] = None) -> ConfigSchema:
    return ConfigSchema.from_json_file(os.path.join(resolve_schema_dir(schema_dir), f"{service_name}.json"))
