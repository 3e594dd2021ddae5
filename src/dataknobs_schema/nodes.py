"""Schema nodes with a fluent, immutable API.

Every node is a frozen dataclass describing one expected shape. Modifiers
such as ``optional()``, ``min()`` or ``refine()`` never change the node they
are called on; they return a new node wrapping or extending it, so a schema
built once can be reused and shared freely.

Example:
    ```python
    user = Object({
        "id": Union([String(), Number()]),
        "name": String().min(5),
        "age": Number().gt(18),
        "hobbies": Array(NativeEnum(Hobbies)).nonempty().max(3),
        "is_new": Boolean().default(False),
    })

    result = user.safe_parse({"id": 1, "name": "Johnny", "age": 19, "hobbies": ["coding"]})
    ```
"""

from __future__ import annotations

import copy
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from numbers import Real
from re import Pattern as RegexPattern
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar
from typing import Any as AnyType

from .constraints import Constraint, Length, Pattern, Range, check_bounds
from .exceptions import SchemaConfigurationError
from .settings import UnknownKeys
from .values import ValueKind, kind_of

if TYPE_CHECKING:
    from .result import ValidationResult
    from .settings import ValidationSettings


class NodeKind(Enum):
    """Enumeration of schema node kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    LITERAL = "literal"
    NATIVE_ENUM = "enum"
    TUPLE = "tuple"
    ARRAY = "array"
    OBJECT = "object"
    RECORD = "record"
    MAP = "map"
    SET = "set"
    UNION = "union"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    REFINEMENT = "refinement"
    ANY = "any"
    PROMISE = "promise"


RANGE_KINDS = frozenset({NodeKind.NUMBER, NodeKind.DATE})
LENGTH_KINDS = frozenset({NodeKind.STRING, NodeKind.ARRAY, NodeKind.SET})
RECORD_KEY_KINDS = frozenset({
    NodeKind.STRING,
    NodeKind.NUMBER,
    NodeKind.LITERAL,
    NodeKind.NATIVE_ENUM,
    NodeKind.UNION,
    NodeKind.ANY,
})


def _require_node(value: AnyType, role: str) -> None:
    if not isinstance(value, SchemaNode):
        raise SchemaConfigurationError(
            f"{role} must be a schema node, got {type(value).__name__}",
            context={"role": role},
        )


class SchemaNode:
    """Base class of all schema nodes.

    Subclasses are frozen dataclasses; the methods here only ever build new
    nodes.
    """

    kind: ClassVar[NodeKind]

    @property
    def type_name(self) -> str:
        """Name of the expected type, used in issue messages."""
        return self.kind.value

    @property
    def accepts_missing(self) -> bool:
        """Whether an absent value satisfies this node (optional object field)."""
        return False

    # Wrapping modifiers

    def optional(self) -> Optional:
        """Accept an absent value in addition to this schema."""
        return Optional(self)

    def nullable(self) -> Nullable:
        """Accept ``None`` in addition to this schema."""
        return Nullable(self)

    def nullish(self) -> Optional:
        """Accept both an absent value and ``None``."""
        return Optional(Nullable(self))

    def default(self, value: AnyType) -> Default:
        """Substitute a default when the value is absent.

        Args:
            value: Default value, or a zero-argument callable producing it.
                Callables are invoked on every validation; plain values are
                deep-copied so callers never share a mutable default.
        """
        return Default(self, value)

    def refine(self, predicate: Callable[[AnyType], bool], message: str = "Invalid input") -> Refinement:
        """Add a custom check run after this schema succeeds.

        Args:
            predicate: Called with the normalized value; falsy means failure
            message: Issue message on failure
        """
        return Refinement(self, predicate, message)

    # Constraint modifiers

    def min(self, value: AnyType, message: str | None = None) -> SchemaNode:
        """Lower bound: minimum number/date, or minimum length/size."""
        if self.kind in RANGE_KINDS:
            return self._constrain(Range(min=self._bound(value, "min"), message=message))
        if self.kind in LENGTH_KINDS:
            return self._constrain(Length(min=value, message=message))
        raise self._unsupported("min")

    def max(self, value: AnyType, message: str | None = None) -> SchemaNode:
        """Upper bound: maximum number/date, or maximum length/size."""
        if self.kind in RANGE_KINDS:
            return self._constrain(Range(max=self._bound(value, "max"), message=message))
        if self.kind in LENGTH_KINDS:
            return self._constrain(Length(max=value, message=message))
        raise self._unsupported("max")

    def gt(self, value: AnyType, message: str | None = None) -> SchemaNode:
        """Exclusive lower bound for numbers and dates."""
        if self.kind not in RANGE_KINDS:
            raise self._unsupported("gt")
        return self._constrain(Range(min=self._bound(value, "gt"), min_exclusive=True, message=message))

    def lt(self, value: AnyType, message: str | None = None) -> SchemaNode:
        """Exclusive upper bound for numbers and dates."""
        if self.kind not in RANGE_KINDS:
            raise self._unsupported("lt")
        return self._constrain(Range(max=self._bound(value, "lt"), max_exclusive=True, message=message))

    def length(self, value: int, message: str | None = None) -> SchemaNode:
        """Exact length for strings and collections."""
        if self.kind not in LENGTH_KINDS:
            raise self._unsupported("length")
        return self._constrain(Length(min=value, max=value, message=message))

    def nonempty(self, message: str | None = None) -> SchemaNode:
        """Require at least one character or element."""
        if self.kind not in LENGTH_KINDS:
            raise self._unsupported("nonempty")
        return self._constrain(Length(min=1, message=message))

    def regex(self, pattern: str | RegexPattern, message: str | None = None) -> SchemaNode:
        """Require a string to match a regular expression."""
        if self.kind is not NodeKind.STRING:
            raise self._unsupported("regex")
        return self._constrain(Pattern(pattern, message=message))

    def _constrain(self, constraint: Constraint) -> SchemaNode:
        constraints = self.constraints + (constraint,)  # type: ignore[attr-defined]
        check_bounds(constraints)
        return replace(self, constraints=constraints)

    def _bound(self, value: AnyType, modifier: str) -> AnyType:
        if self.kind is NodeKind.DATE:
            valid = isinstance(value, date)
        else:
            valid = (
                isinstance(value, Real)
                and not isinstance(value, bool)
                and not (isinstance(value, float) and math.isnan(value))
            )
        if not valid:
            raise SchemaConfigurationError(
                f"{modifier}() on a {self.type_name} schema needs a {self.type_name} bound, "
                f"got {type(value).__name__}",
                context={"modifier": modifier, "kind": self.kind.value, "bound": value},
            )
        return value

    def _unsupported(self, modifier: str) -> SchemaConfigurationError:
        return SchemaConfigurationError(
            f"{modifier}() is not supported on {self.type_name} schemas",
            context={"modifier": modifier, "kind": self.kind.value},
        )

    # Validation shortcuts

    def validate(self, value: AnyType, settings: ValidationSettings | None = None) -> ValidationResult:
        """Validate a value against this schema without raising."""
        from .api import validate

        return validate(self, value, settings=settings)

    def safe_parse(self, value: AnyType, settings: ValidationSettings | None = None) -> ValidationResult:
        """Alias of ``validate``."""
        return self.validate(value, settings=settings)

    def parse(self, value: AnyType, settings: ValidationSettings | None = None) -> AnyType:
        """Validate a value and return its normalized form.

        Raises:
            SchemaValidationError: With every issue found
        """
        from .api import parse

        return parse(self, value, settings=settings)


# Primitive kinds


@dataclass(frozen=True)
class String(SchemaNode):
    """A ``str`` value."""

    constraints: tuple[Constraint, ...] = ()

    kind = NodeKind.STRING


@dataclass(frozen=True)
class Number(SchemaNode):
    """An ``int`` or ``float`` value; ``bool`` and NaN are rejected."""

    constraints: tuple[Constraint, ...] = ()

    kind = NodeKind.NUMBER


@dataclass(frozen=True)
class Boolean(SchemaNode):
    """A ``bool`` value."""

    kind = NodeKind.BOOLEAN


@dataclass(frozen=True)
class Date(SchemaNode):
    """A ``datetime.date`` or ``datetime.datetime`` value."""

    constraints: tuple[Constraint, ...] = ()

    kind = NodeKind.DATE


@dataclass(frozen=True)
class Literal(SchemaNode):
    """Exactly one string, number, boolean or ``None`` value."""

    value: AnyType

    kind = NodeKind.LITERAL

    def __post_init__(self) -> None:
        if kind_of(self.value) not in (
            ValueKind.STRING, ValueKind.NUMBER, ValueKind.BOOLEAN, ValueKind.NULL
        ):
            raise SchemaConfigurationError(
                f"Literal value must be a string, number, boolean or None, "
                f"got {type(self.value).__name__}",
                context={"value": self.value},
            )

    @property
    def type_name(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class NativeEnum(SchemaNode):
    """One of a fixed set of values.

    The source is either a Python ``Enum`` class, whose member values (and
    members) are accepted, or any iterable of allowed values.
    """

    source: AnyType
    values: tuple = field(init=False)

    kind = NodeKind.NATIVE_ENUM

    def __post_init__(self) -> None:
        if isinstance(self.source, type) and issubclass(self.source, Enum):
            values = tuple(member.value for member in self.source)
        elif isinstance(self.source, Iterable) and not isinstance(self.source, (str, bytes, Mapping)):
            values = tuple(self.source)
        else:
            raise SchemaConfigurationError(
                "NativeEnum requires an Enum class or an iterable of values",
                context={"source": repr(self.source)},
            )
        if not values:
            raise SchemaConfigurationError("NativeEnum requires at least one allowed value")
        object.__setattr__(self, "values", values)

    @property
    def enum_type(self) -> type[Enum] | None:
        """The Enum class the values came from, if any."""
        if isinstance(self.source, type) and issubclass(self.source, Enum):
            return self.source
        return None


@dataclass(frozen=True)
class Any(SchemaNode):
    """Any value, including an absent one; never normalized."""

    kind = NodeKind.ANY

    @property
    def accepts_missing(self) -> bool:
        return True


@dataclass(frozen=True)
class Promise(SchemaNode):
    """A pending asynchronous value (awaitable or future).

    Only the pending tag is checked. The eventual result is described by
    ``inner`` but not validated, since validation is synchronous.
    """

    inner: SchemaNode | None = None

    kind = NodeKind.PROMISE

    def __post_init__(self) -> None:
        if self.inner is not None:
            _require_node(self.inner, "Promise inner schema")


# Structural kinds


@dataclass(frozen=True)
class Tuple(SchemaNode):
    """Fixed positions, each with its own schema, and an optional rest schema."""

    items: tuple[SchemaNode, ...]
    rest: SchemaNode | None = None

    kind = NodeKind.TUPLE

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for index, item in enumerate(items):
            _require_node(item, f"Tuple item {index}")
        if self.rest is not None:
            _require_node(self.rest, "Tuple rest schema")
        object.__setattr__(self, "items", items)

    def with_rest(self, rest: SchemaNode) -> Tuple:
        """Validate trailing elements beyond the fixed positions against ``rest``."""
        return replace(self, rest=rest)


@dataclass(frozen=True)
class Array(SchemaNode):
    """A ``list`` or ``tuple`` whose elements all match one schema."""

    element: SchemaNode
    constraints: tuple[Constraint, ...] = ()

    kind = NodeKind.ARRAY

    def __post_init__(self) -> None:
        _require_node(self.element, "Array element schema")


@dataclass(frozen=True)
class Set(SchemaNode):
    """A ``set`` or ``frozenset`` whose elements all match one schema."""

    element: SchemaNode
    constraints: tuple[Constraint, ...] = ()

    kind = NodeKind.SET

    def __post_init__(self) -> None:
        _require_node(self.element, "Set element schema")


@dataclass(frozen=True)
class Record(SchemaNode):
    """A mapping with string-like keys and uniformly typed values."""

    key: SchemaNode
    value: SchemaNode

    kind = NodeKind.RECORD

    def __post_init__(self) -> None:
        _require_node(self.key, "Record key schema")
        _require_node(self.value, "Record value schema")
        key = self.key
        while isinstance(key, Refinement):
            key = key.inner
        if key.kind not in RECORD_KEY_KINDS:
            raise SchemaConfigurationError(
                f"Record keys must be string-like, got a {self.key.type_name} schema",
                context={"key_kind": self.key.kind.value},
            )


@dataclass(frozen=True)
class Map(SchemaNode):
    """A mapping with arbitrary hashable keys."""

    key: SchemaNode
    value: SchemaNode

    kind = NodeKind.MAP

    def __post_init__(self) -> None:
        _require_node(self.key, "Map key schema")
        _require_node(self.value, "Map value schema")


@dataclass(frozen=True)
class Object(SchemaNode):
    """A mapping with declared fields.

    Attributes:
        fields: Read-only mapping of field name to schema, in declaration order
        unknown_keys: Policy for undeclared keys; None defers to the
            validator's settings (strip by default)
    """

    fields: Mapping[str, SchemaNode]
    unknown_keys: UnknownKeys | None = None

    kind = NodeKind.OBJECT

    def __post_init__(self) -> None:
        if not isinstance(self.fields, Mapping):
            raise SchemaConfigurationError(
                f"Object fields must be a mapping, got {type(self.fields).__name__}"
            )
        for name, node in self.fields.items():
            if not isinstance(name, str):
                raise SchemaConfigurationError(
                    f"Object field names must be strings, got {name!r}",
                    context={"field_name": name},
                )
            _require_node(node, f"Field '{name}'")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        if self.unknown_keys is not None:
            object.__setattr__(self, "unknown_keys", UnknownKeys.parse(self.unknown_keys))

    @property
    def shape(self) -> Mapping[str, SchemaNode]:
        """The declared fields."""
        return self.fields

    @property
    def required_keys(self) -> list[str]:
        """Names of fields that must be present in the input."""
        return [name for name, node in self.fields.items() if not node.accepts_missing]

    def strict(self) -> Object:
        """Report undeclared keys as issues."""
        return replace(self, unknown_keys=UnknownKeys.STRICT)

    def strip(self) -> Object:
        """Drop undeclared keys from the output."""
        return replace(self, unknown_keys=UnknownKeys.STRIP)

    def passthrough(self) -> Object:
        """Keep undeclared keys in the output unchanged."""
        return replace(self, unknown_keys=UnknownKeys.PASSTHROUGH)

    def merge(self, other: Object) -> Object:
        """See ``dataknobs_schema.algebra.merge``."""
        from .algebra import merge

        return merge(self, other)

    def extend(self, fields: Mapping[str, SchemaNode]) -> Object:
        """See ``dataknobs_schema.algebra.extend``."""
        from .algebra import extend

        return extend(self, fields)

    def pick(self, *keys: AnyType) -> Object:
        """See ``dataknobs_schema.algebra.pick``.

        Accepts field names as arguments, or a single iterable or mapping.
        """
        from .algebra import pick

        if len(keys) == 1 and not isinstance(keys[0], str):
            return pick(self, keys[0])
        return pick(self, keys)

    def partial(self, deep: bool = False) -> Object:
        """See ``dataknobs_schema.algebra.partial``."""
        from .algebra import partial

        return partial(self, deep=deep)


@dataclass(frozen=True)
class Union(SchemaNode):
    """The first of several schemas that accepts the value, in declared order."""

    variants: tuple[SchemaNode, ...]

    kind = NodeKind.UNION

    def __post_init__(self) -> None:
        variants = tuple(self.variants)
        if not variants:
            raise SchemaConfigurationError("Union requires at least one variant")
        for index, variant in enumerate(variants):
            _require_node(variant, f"Union variant {index}")
        object.__setattr__(self, "variants", variants)

    @property
    def type_name(self) -> str:
        return " | ".join(variant.type_name for variant in self.variants)

    @property
    def accepts_missing(self) -> bool:
        return any(variant.accepts_missing for variant in self.variants)


# Wrapping kinds


@dataclass(frozen=True)
class Optional(SchemaNode):
    """Absent, or matching ``inner``."""

    inner: SchemaNode

    kind = NodeKind.OPTIONAL

    def __post_init__(self) -> None:
        _require_node(self.inner, "Optional inner schema")

    @property
    def type_name(self) -> str:
        return f"{self.inner.type_name} | missing"

    @property
    def accepts_missing(self) -> bool:
        return True

    def unwrap(self) -> SchemaNode:
        return self.inner


@dataclass(frozen=True)
class Nullable(SchemaNode):
    """``None``, or matching ``inner``."""

    inner: SchemaNode

    kind = NodeKind.NULLABLE

    def __post_init__(self) -> None:
        _require_node(self.inner, "Nullable inner schema")

    @property
    def type_name(self) -> str:
        return f"{self.inner.type_name} | null"

    @property
    def accepts_missing(self) -> bool:
        return self.inner.accepts_missing

    def unwrap(self) -> SchemaNode:
        return self.inner


@dataclass(frozen=True)
class Default(SchemaNode):
    """``inner``, with a value produced when the input is absent."""

    inner: SchemaNode
    producer: AnyType

    kind = NodeKind.DEFAULT

    def __post_init__(self) -> None:
        _require_node(self.inner, "Default inner schema")

    @property
    def type_name(self) -> str:
        return self.inner.type_name

    @property
    def accepts_missing(self) -> bool:
        return True

    def produce(self) -> AnyType:
        """Produce a fresh default value."""
        if callable(self.producer):
            return self.producer()
        return copy.deepcopy(self.producer)

    def unwrap(self) -> SchemaNode:
        return self.inner


@dataclass(frozen=True)
class Refinement(SchemaNode):
    """``inner``, followed by a custom predicate on the normalized value."""

    inner: SchemaNode
    predicate: Callable[[AnyType], bool]
    message: str = "Invalid input"

    kind = NodeKind.REFINEMENT

    def __post_init__(self) -> None:
        _require_node(self.inner, "Refinement inner schema")
        if not callable(self.predicate):
            raise SchemaConfigurationError(
                f"Refinement predicate must be callable, got {type(self.predicate).__name__}"
            )

    @property
    def type_name(self) -> str:
        return self.inner.type_name

    @property
    def accepts_missing(self) -> bool:
        return self.inner.accepts_missing
