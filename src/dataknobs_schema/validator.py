"""Recursive validation of values against schema nodes.

The validator dispatches on the node kind. Issues from independent subtrees
(object fields, elements, mapping entries) are accumulated rather than
stopping at the first failure; only a union stops at its first matching
variant. Nothing here raises for invalid input: every problem becomes a
``ValidationIssue`` in the returned ``ValidationResult``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from .nodes import NodeKind, SchemaNode
from .result import IssueCode, Path, ValidationIssue, ValidationResult
from .settings import DEFAULT_SETTINGS, UnknownKeys, ValidationSettings
from .values import MISSING, ValueKind, describe_value, kind_of

logger = logging.getLogger(__name__)


class Validator:
    """Validates values against schema nodes.

    A validator holds only its immutable settings, so one instance can be
    shared between threads and reused for any number of calls.
    """

    def __init__(self, settings: ValidationSettings | None = None):
        """Initialize the validator.

        Args:
            settings: Validation settings, defaults to ``ValidationSettings()``
        """
        self.settings = settings or DEFAULT_SETTINGS
        self._handlers: dict[NodeKind, Callable[[Any, Any, Path], ValidationResult]] = {
            NodeKind.STRING: self._validate_string,
            NodeKind.NUMBER: self._validate_number,
            NodeKind.BOOLEAN: self._validate_boolean,
            NodeKind.DATE: self._validate_date,
            NodeKind.LITERAL: self._validate_literal,
            NodeKind.NATIVE_ENUM: self._validate_native_enum,
            NodeKind.TUPLE: self._validate_tuple,
            NodeKind.ARRAY: self._validate_array,
            NodeKind.OBJECT: self._validate_object,
            NodeKind.RECORD: self._validate_mapping,
            NodeKind.MAP: self._validate_mapping,
            NodeKind.SET: self._validate_set,
            NodeKind.UNION: self._validate_union,
            NodeKind.OPTIONAL: self._validate_optional,
            NodeKind.NULLABLE: self._validate_nullable,
            NodeKind.DEFAULT: self._validate_default,
            NodeKind.REFINEMENT: self._validate_refinement,
            NodeKind.ANY: self._validate_any,
            NodeKind.PROMISE: self._validate_promise,
        }

    def validate(self, schema: SchemaNode, value: Any, path: Sequence[Any] = ()) -> ValidationResult:
        """Validate a value against a schema.

        Args:
            schema: Schema node to validate against
            value: Value to validate, ``MISSING`` for an absent value
            path: Path of the value within a larger structure

        Returns:
            ValidationResult with the normalized value or every issue found
        """
        handler = self._handlers[schema.kind]
        return handler(schema, value, tuple(path))

    # Helpers

    def _mismatch(self, schema: SchemaNode, value: Any, path: Path) -> ValidationResult:
        if value is MISSING:
            return ValidationResult.single(path, "Required", IssueCode.TYPE_MISMATCH)
        return ValidationResult.single(
            path,
            f"Expected {schema.type_name}, received {describe_value(value)}",
            IssueCode.TYPE_MISMATCH,
        )

    def _finish(self, schema: SchemaNode, data: Any, path: Path, issues: list[ValidationIssue]) -> ValidationResult:
        """Apply the node's constraints and build the result."""
        for constraint in getattr(schema, "constraints", ()):
            issues.extend(constraint.check(data, path))
        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(data)

    def _tagged(self, schema: SchemaNode, value: Any, path: Path, kind: ValueKind) -> ValidationResult:
        if kind_of(value) is not kind:
            return self._mismatch(schema, value, path)
        return self._finish(schema, value, path, [])

    # Primitive kinds

    def _validate_string(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return self._tagged(schema, value, path, ValueKind.STRING)

    def _validate_number(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return self._tagged(schema, value, path, ValueKind.NUMBER)

    def _validate_boolean(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return self._tagged(schema, value, path, ValueKind.BOOLEAN)

    def _validate_date(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return self._tagged(schema, value, path, ValueKind.DATE)

    def _validate_any(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return ValidationResult.ok(value)

    def _validate_promise(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        return self._tagged(schema, value, path, ValueKind.PENDING)

    def _validate_literal(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        expected = schema.value
        if kind_of(value) is kind_of(expected) and value == expected:
            return ValidationResult.ok(value)
        if value is MISSING:
            return self._mismatch(schema, value, path)
        return ValidationResult.single(
            path,
            f"Invalid literal value, expected {expected!r}",
            IssueCode.INVALID_LITERAL,
        )

    def _validate_native_enum(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        enum_type = schema.enum_type
        if enum_type is not None and isinstance(value, enum_type):
            return ValidationResult.ok(value)
        value_kind = kind_of(value)
        for allowed in schema.values:
            if kind_of(allowed) is value_kind and allowed == value:
                return ValidationResult.ok(value)
        if value is MISSING:
            return self._mismatch(schema, value, path)
        expected = " | ".join(repr(allowed) for allowed in schema.values)
        return ValidationResult.single(
            path,
            f"Invalid enum value. Expected {expected}, received {value!r}",
            IssueCode.INVALID_ENUM_VALUE,
        )

    # Wrapping kinds

    def _validate_optional(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if value is MISSING:
            return ValidationResult.ok(MISSING)
        return self.validate(schema.inner, value, path)

    def _validate_nullable(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if value is None:
            return ValidationResult.ok(None)
        return self.validate(schema.inner, value, path)

    def _validate_default(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if value is not MISSING:
            return self.validate(schema.inner, value, path)
        try:
            produced = schema.produce()
        except Exception as e:
            logger.warning(f"Default producer failed at {list(path)}: {e!s}")
            return ValidationResult.single(
                path, f"Default value producer failed: {e!s}", IssueCode.CUSTOM
            )
        return self.validate(schema.inner, produced, path)

    def _validate_refinement(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        result = self.validate(schema.inner, value, path)
        if not result.success:
            return result
        try:
            passed = bool(schema.predicate(result.data))
        except Exception as e:
            logger.warning(f"Refinement predicate raised at {list(path)}: {e!s}")
            return ValidationResult.single(
                path, f"Custom validation error: {e!s}", IssueCode.CUSTOM
            )
        if not passed:
            return ValidationResult.single(path, schema.message, IssueCode.CUSTOM)
        return result

    def _validate_union(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        for variant in schema.variants:
            result = self.validate(variant, value, path)
            if result.success:
                return result
        return self._mismatch(schema, value, path)

    # Structural kinds

    def _validate_elements(self, schema: Any, value: Any, path: Path) -> tuple[list[Any], list[ValidationIssue]]:
        items = []
        issues: list[ValidationIssue] = []
        for index, element in enumerate(value):
            result = self.validate(schema.element, element, path + (index,))
            if result.success:
                items.append(result.data)
            else:
                issues.extend(result.issues)
        # Size constraints apply to the collection as given
        for constraint in schema.constraints:
            issues.extend(constraint.check(value, path))
        return items, issues

    def _validate_array(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if kind_of(value) is not ValueKind.LIST:
            return self._mismatch(schema, value, path)
        items, issues = self._validate_elements(schema, value, path)
        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(tuple(items) if isinstance(value, tuple) else items)

    def _validate_set(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if kind_of(value) is not ValueKind.SET:
            return self._mismatch(schema, value, path)
        items, issues = self._validate_elements(schema, value, path)
        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(frozenset(items) if isinstance(value, frozenset) else set(items))

    def _validate_tuple(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if kind_of(value) is not ValueKind.LIST:
            return self._mismatch(schema, value, path)
        fixed = len(schema.items)
        if len(value) < fixed:
            return ValidationResult.single(
                path, f"Tuple must contain at least {fixed} element(s)", IssueCode.TOO_SMALL
            )
        if len(value) > fixed and schema.rest is None:
            return ValidationResult.single(
                path, f"Tuple must contain at most {fixed} element(s)", IssueCode.TOO_BIG
            )

        items = []
        issues: list[ValidationIssue] = []
        for index, element in enumerate(value):
            item_schema = schema.items[index] if index < fixed else schema.rest
            result = self.validate(item_schema, element, path + (index,))
            if result.success:
                items.append(result.data)
            else:
                issues.extend(result.issues)
        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(tuple(items) if isinstance(value, tuple) else items)

    def _validate_object(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if kind_of(value) is not ValueKind.MAPPING:
            return self._mismatch(schema, value, path)

        data: dict[Any, Any] = {}
        issues: list[ValidationIssue] = []
        for name, field_schema in schema.fields.items():
            result = self.validate(field_schema, value.get(name, MISSING), path + (name,))
            if not result.success:
                issues.extend(result.issues)
            elif result.data is not MISSING:
                data[name] = result.data

        policy = schema.unknown_keys or self.settings.unknown_keys
        unknown = [key for key in value if key not in schema.fields]
        if unknown and policy is UnknownKeys.STRICT:
            names = ", ".join(repr(key) for key in unknown)
            issues.append(ValidationIssue(
                path, f"Unrecognized key(s) in object: {names}", IssueCode.UNRECOGNIZED_KEYS
            ))
        elif unknown and policy is UnknownKeys.PASSTHROUGH:
            for key in unknown:
                data[key] = value[key]

        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(data)

    def _validate_mapping(self, schema: Any, value: Any, path: Path) -> ValidationResult:
        if kind_of(value) is not ValueKind.MAPPING:
            return self._mismatch(schema, value, path)

        data: dict[Any, Any] = {}
        issues: list[ValidationIssue] = []
        for key, item in value.items():
            entry_path = path + (key,)
            key_result = self.validate(schema.key, key, entry_path)
            value_result = self.validate(schema.value, item, entry_path)
            issues.extend(key_result.issues)
            issues.extend(value_result.issues)
            if key_result.success and value_result.success:
                data[key_result.data] = value_result.data

        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.ok(data)


default_validator = Validator()
