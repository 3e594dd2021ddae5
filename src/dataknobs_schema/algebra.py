"""Derivation operators producing new object schemas from existing ones.

None of these operators modify their operands. Unchanged field schemas are
shared between the source and the derived schema.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from .exceptions import SchemaConfigurationError, UnknownFieldError
from .nodes import Array, Nullable, Object, Optional, SchemaNode

logger = logging.getLogger(__name__)


def _require_object(schema: Any, operation: str) -> Object:
    if not isinstance(schema, Object):
        raise SchemaConfigurationError(
            f"{operation}() requires an object schema, got {type(schema).__name__}",
            context={"operation": operation},
        )
    return schema


def merge(a: Object, b: Object) -> Object:
    """Combine the fields of two object schemas.

    On a key collision the field definition of ``b`` wins, and so does its
    unknown-keys policy when it sets one.

    Args:
        a: Base object schema
        b: Object schema whose fields override ``a``'s

    Returns:
        New object schema

    Raises:
        SchemaConfigurationError: If either operand is not an object schema
    """
    _require_object(a, "merge")
    _require_object(b, "merge")
    fields = dict(a.fields)
    fields.update(b.fields)
    logger.debug(f"Merged object schemas into {len(fields)} field(s)")
    return Object(fields, unknown_keys=b.unknown_keys or a.unknown_keys)


def extend(a: Object, fields: Mapping[str, SchemaNode]) -> Object:
    """Add or replace fields of an object schema, keeping its unknown-keys policy.

    Args:
        a: Object schema to extend
        fields: New field definitions, overriding existing ones

    Returns:
        New object schema
    """
    _require_object(a, "extend")
    return merge(a, Object(fields, unknown_keys=a.unknown_keys))


def pick(a: Object, keys: Iterable[str]) -> Object:
    """Keep only the named fields, in declaration order.

    Each field keeps its original definition, including optional and default
    wrappers.

    Args:
        a: Object schema to pick from
        keys: Names of the fields to keep, or a mapping of name to a flag
            (``{"name": True, "age": True}``)

    Returns:
        New object schema

    Raises:
        UnknownFieldError: If a requested key is not declared by ``a``
    """
    _require_object(a, "pick")
    if isinstance(keys, str):
        keys = [keys]
    elif isinstance(keys, Mapping):
        keys = [key for key, selected in keys.items() if selected]
    requested = set()
    for key in keys:
        if key not in a.fields:
            raise UnknownFieldError(key, a.fields.keys())
        requested.add(key)
    fields = {name: node for name, node in a.fields.items() if name in requested}
    return replace(a, fields=fields)


def partial(a: Object, deep: bool = False) -> Object:
    """Make every field of an object schema optional.

    Args:
        a: Object schema
        deep: If True, nested object schemas (directly, or inside optional,
            nullable or array wrappers) are made partial as well

    Returns:
        New object schema whose fields all accept an absent value
    """
    _require_object(a, "partial")
    fields = {}
    for name, node in a.fields.items():
        if deep:
            node = _deep_partial(node)
        fields[name] = node if isinstance(node, Optional) else Optional(node)
    return replace(a, fields=fields)


def _deep_partial(node: SchemaNode) -> SchemaNode:
    if isinstance(node, Object):
        return partial(node, deep=True)
    if isinstance(node, (Optional, Nullable)):
        return replace(node, inner=_deep_partial(node.inner))
    if isinstance(node, Array):
        return replace(node, element=_deep_partial(node.element))
    return node
