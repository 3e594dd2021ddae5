"""Structural schema validation for dataknobs packages.

This package provides:
- Immutable schema nodes with a fluent construction API
- Validation that reports every issue with its path instead of stopping at the first
- Default injection, custom refinements and strip/strict/passthrough object policies
- Schema algebra (merge, extend, pick, partial) producing new schemas
- Configuration-driven schema construction from dicts, YAML or JSON
"""

from .algebra import extend, merge, partial, pick
from .api import parse, safe_parse, validate
from .constraints import Constraint, Length, Pattern, Range
from .exceptions import (
    SchemaConfigurationError,
    SchemaError,
    SchemaValidationError,
    UnknownFieldError,
)
from .factory import SchemaFactory, read_config, schema_factory
from .nodes import (
    Any,
    Array,
    Boolean,
    Date,
    Default,
    Literal,
    Map,
    NativeEnum,
    NodeKind,
    Nullable,
    Number,
    Object,
    Optional,
    Promise,
    Record,
    Refinement,
    SchemaNode,
    Set,
    String,
    Tuple,
    Union,
)
from .result import (
    IssueCode,
    ValidationIssue,
    ValidationResult,
    format_issues,
    format_path,
    format_result,
)
from .settings import UnknownKeys, ValidationSettings
from .validator import Validator
from .values import MISSING, ValueKind, describe_value, kind_of

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Values
    "MISSING",
    "ValueKind",
    "kind_of",
    "describe_value",
    # Schema nodes
    "SchemaNode",
    "NodeKind",
    "String",
    "Number",
    "Boolean",
    "Date",
    "Literal",
    "NativeEnum",
    "Tuple",
    "Array",
    "Object",
    "Record",
    "Map",
    "Set",
    "Union",
    "Optional",
    "Nullable",
    "Default",
    "Refinement",
    "Any",
    "Promise",
    # Constraints
    "Constraint",
    "Range",
    "Length",
    "Pattern",
    # Algebra
    "merge",
    "extend",
    "pick",
    "partial",
    # Validation
    "Validator",
    "validate",
    "safe_parse",
    "parse",
    # Results
    "IssueCode",
    "ValidationIssue",
    "ValidationResult",
    "format_path",
    "format_issues",
    "format_result",
    # Settings
    "UnknownKeys",
    "ValidationSettings",
    # Factory
    "SchemaFactory",
    "schema_factory",
    "read_config",
    # Exceptions
    "SchemaError",
    "SchemaConfigurationError",
    "UnknownFieldError",
    "SchemaValidationError",
]
