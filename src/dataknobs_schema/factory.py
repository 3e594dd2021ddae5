"""Factory for building schemas from configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import SchemaConfigurationError
from .nodes import (
    Any as AnySchema,
    Array,
    Boolean,
    Date,
    Literal,
    Map,
    NativeEnum,
    Number,
    Object,
    Promise,
    Record,
    SchemaNode,
    Set,
    String,
    Tuple,
)
from .nodes import Union as UnionSchema

logger = logging.getLogger(__name__)

# Applied in this order, before the wrapping modifiers
CONSTRAINT_KEYS = ("min", "max", "gt", "lt", "length", "nonempty", "pattern")
WRAPPER_KEYS = ("nullable", "default", "optional", "nullish")


class SchemaFactory:
    """Factory for creating schema nodes from configuration.

    Configuration Options:
        type (str): string, number, boolean, date, literal, enum, tuple,
            array, object, record, map, set, union, any or promise
        value (any): Literal value (literal)
        values (list): Allowed values (enum)
        items: Element schema (array, set), or list of position schemas (tuple)
        rest: Schema of trailing tuple elements (tuple)
        fields (dict): Field name to schema (object)
        unknown_keys (str): strip, strict or passthrough (object)
        keys / values: Key and value schemas (record, map)
        variants (list): Variant schemas (union)
        min, max, gt, lt, length, nonempty, pattern: Constraints
        optional, nullable, nullish (bool), default (any): Wrappers

    A schema may also be given as a bare type name, e.g. ``name: string``.

    Example Configuration:
        type: object
        unknown_keys: strict
        fields:
          name:
            type: string
            min: 5
          age:
            type: number
            gt: 18
          hobbies:
            type: array
            items:
              type: enum
              values: [reading, writing, coding]
            nonempty: true
            max: 3
          is_new:
            type: boolean
            default: false
    """

    def __init__(self) -> None:
        self._builders: Dict[str, Callable[[Dict[str, Any]], SchemaNode]] = {
            "string": lambda config: String(),
            "number": lambda config: Number(),
            "boolean": lambda config: Boolean(),
            "date": lambda config: Date(),
            "any": lambda config: AnySchema(),
            "literal": self._build_literal,
            "enum": self._build_enum,
            "tuple": self._build_tuple,
            "array": lambda config: Array(self._build(self._required(config, "items"))),
            "set": lambda config: Set(self._build(self._required(config, "items"))),
            "object": self._build_object,
            "record": lambda config: Record(
                self._build(self._required(config, "keys")),
                self._build(self._required(config, "values")),
            ),
            "map": lambda config: Map(
                self._build(self._required(config, "keys")),
                self._build(self._required(config, "values")),
            ),
            "union": self._build_union,
            "promise": lambda config: Promise(
                self._build(config["items"]) if config.get("items") is not None else None
            ),
        }

    def create(self, **config: Any) -> SchemaNode:
        """Create a schema node from configuration.

        Args:
            **config: Schema configuration

        Returns:
            SchemaNode instance

        Raises:
            SchemaConfigurationError: If the configuration is invalid
        """
        logger.info(f"Creating schema: {config.get('type', 'unknown')}")
        return self._build(config)

    def create_all(self, configs: Mapping[str, Any]) -> dict[str, SchemaNode]:
        """Create several named schemas.

        Args:
            configs: Mapping of schema name to schema configuration

        Returns:
            Mapping of schema name to SchemaNode
        """
        schemas = {}
        for name, config in configs.items():
            logger.info(f"Creating schema: {name}")
            schemas[name] = self._build(config)
        return schemas

    def from_file(self, path: Union[str, Path]) -> SchemaNode:
        """Create a schema node from a YAML or JSON file.

        Args:
            path: Path to the configuration file

        Returns:
            SchemaNode instance
        """
        config = read_config(path)
        logger.info(f"Creating schema from {path}")
        return self._build(config)

    def _build(self, config: Any) -> SchemaNode:
        if isinstance(config, str):
            config = {"type": config}
        if not isinstance(config, Mapping):
            raise SchemaConfigurationError(
                f"Schema configuration must be a mapping or a type name, got {type(config).__name__}"
            )
        config = dict(config)

        type_name = str(config.get("type", "")).lower()
        builder = self._builders.get(type_name)
        if builder is None:
            raise SchemaConfigurationError(
                f"Invalid schema type: {config.get('type')}",
                context={"type": config.get("type"), "available": sorted(self._builders)},
            )

        node = builder(config)
        node = self._apply_constraints(node, config)
        node = self._apply_wrappers(node, config)

        known = {"type", "description", *CONSTRAINT_KEYS, *WRAPPER_KEYS, *self._kind_keys(type_name)}
        for key in config:
            if key not in known:
                logger.warning(f"Ignoring unknown {type_name} schema option: {key}")
        return node

    @staticmethod
    def _kind_keys(type_name: str) -> tuple[str, ...]:
        return {
            "literal": ("value",),
            "enum": ("values",),
            "tuple": ("items", "rest"),
            "array": ("items",),
            "set": ("items",),
            "promise": ("items",),
            "object": ("fields", "unknown_keys"),
            "record": ("keys", "values"),
            "map": ("keys", "values"),
            "union": ("variants",),
        }.get(type_name, ())

    @staticmethod
    def _required(config: Dict[str, Any], key: str) -> Any:
        if config.get(key) is None:
            raise SchemaConfigurationError(
                f"{config.get('type')} schema configuration requires '{key}'",
                context={"type": config.get("type"), "key": key},
            )
        return config[key]

    def _build_literal(self, config: Dict[str, Any]) -> SchemaNode:
        if "value" not in config:
            raise SchemaConfigurationError("literal schema configuration requires 'value'")
        return Literal(config["value"])

    def _build_enum(self, config: Dict[str, Any]) -> SchemaNode:
        return NativeEnum(self._required(config, "values"))

    def _build_tuple(self, config: Dict[str, Any]) -> SchemaNode:
        items = config.get("items") or []
        rest = config.get("rest")
        return Tuple(
            [self._build(item) for item in items],
            rest=self._build(rest) if rest is not None else None,
        )

    def _build_object(self, config: Dict[str, Any]) -> SchemaNode:
        fields = config.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise SchemaConfigurationError("object schema 'fields' must be a mapping")
        return Object(
            {name: self._build(field_config) for name, field_config in fields.items()},
            unknown_keys=config.get("unknown_keys"),
        )

    def _build_union(self, config: Dict[str, Any]) -> SchemaNode:
        variants = self._required(config, "variants")
        return UnionSchema([self._build(variant) for variant in variants])

    def _apply_constraints(self, node: SchemaNode, config: Dict[str, Any]) -> SchemaNode:
        for key in CONSTRAINT_KEYS:
            if config.get(key) is None:
                continue
            value = config[key]
            if key == "nonempty":
                if value:
                    node = node.nonempty()
            elif key == "pattern":
                node = node.regex(value)
            else:
                node = getattr(node, key)(value)
        return node

    def _apply_wrappers(self, node: SchemaNode, config: Dict[str, Any]) -> SchemaNode:
        if config.get("nullable"):
            node = node.nullable()
        if "default" in config:
            node = node.default(config["default"])
        if config.get("nullish"):
            node = node.nullish()
        elif config.get("optional"):
            node = node.optional()
        return node


def read_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON configuration file.

    Args:
        path: Path to configuration file

    Returns:
        Parsed configuration dictionary

    Raises:
        SchemaConfigurationError: If the file is missing, has an unsupported
            format or does not hold a mapping
    """
    path = Path(path)
    if not path.exists():
        raise SchemaConfigurationError(
            f"Configuration file not found: {path}", context={"path": str(path)}
        )

    suffix = path.suffix.lower()
    with open(path) as f:
        if suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise SchemaConfigurationError(
                f"Unsupported file format: {suffix}", context={"path": str(path)}
            )

    if not isinstance(data, dict):
        raise SchemaConfigurationError(
            f"Configuration file must contain a mapping: {path}", context={"path": str(path)}
        )
    return data


# Create singleton instance for registration
schema_factory = SchemaFactory()
