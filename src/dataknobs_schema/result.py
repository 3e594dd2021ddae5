"""Validation result types and issue reporting.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Tuple

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

# Field names, sequence indices or mapping keys
PathElement = Hashable
Path = Tuple[PathElement, ...]

ROOT_LABEL = "<root>"


class IssueCode(Enum):
    """Category of a validation issue."""

    TYPE_MISMATCH = "type_mismatch"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_STRING = "invalid_string"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ValidationIssue:
    """A single structural or constraint failure.

    Attributes:
        path: Field names, indices or mapping keys leading to the failing value
        message: Human-readable description of the failure
        code: Issue category
    """

    path: Path
    message: str
    code: IssueCode = IssueCode.CUSTOM

    def __str__(self) -> str:
        return f"{format_path(self.path)}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating one value against one schema.

    Either ``success`` is True and ``data`` holds the normalized value, or
    ``success`` is False and ``issues`` holds every failure in traversal
    order (depth-first, field-declaration order).
    """

    success: bool
    data: Any = None
    issues: list[ValidationIssue] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.success

    @property
    def error_messages(self) -> list[str]:
        """Rendered ``"<path>: <message>"`` lines, one per issue."""
        return [str(issue) for issue in self.issues]

    def format(self) -> Any:
        """Render the result, see ``format_result``."""
        return format_result(self)

    @classmethod
    def ok(cls, data: Any) -> ValidationResult:
        """Create a successful validation result.

        Args:
            data: The normalized value

        Returns:
            Successful ValidationResult
        """
        return cls(success=True, data=data, issues=[])

    @classmethod
    def failure(cls, issues: Iterable[ValidationIssue]) -> ValidationResult:
        """Create a failed validation result.

        Args:
            issues: Issues collected while validating

        Returns:
            Failed ValidationResult
        """
        return cls(success=False, data=None, issues=list(issues))

    @classmethod
    def single(cls, path: Path, message: str, code: IssueCode) -> ValidationResult:
        """Create a failed result holding exactly one issue."""
        return cls.failure([ValidationIssue(tuple(path), message, code)])


def format_path(path: Sequence[PathElement]) -> str:
    """Render a path as dotted identifiers and bracketed indices.

    Example:
        ``("user", "friends", 2)`` renders as ``user.friends[2]`` and
        ``("scores", "first name")`` as ``scores["first name"]``.

    Args:
        path: Sequence of path elements

    Returns:
        The rendered path, or ``<root>`` for an empty path
    """
    if not path:
        return ROOT_LABEL

    parts: list[str] = []
    for element in path:
        if isinstance(element, str) and element.isidentifier():
            parts.append(f".{element}" if parts else element)
        elif isinstance(element, int) and not isinstance(element, bool):
            parts.append(f"[{element}]")
        elif isinstance(element, str):
            parts.append(f'["{element}"]')
        else:
            parts.append(f"[{element!r}]")
    return "".join(parts)


def format_issues(issues: Iterable[ValidationIssue]) -> str:
    """Render issues as ``"<path>: <message>"`` lines joined by newlines."""
    return "\n".join(str(issue) for issue in issues)


def format_result(result: ValidationResult) -> Any:
    """Render a validation result for humans.

    Args:
        result: Result returned by a validation call

    Returns:
        For a failing result, one ``"<path>: <message>"`` line per issue in
        collection order. For a successful result, the normalized data
        unchanged.
    """
    if result.success:
        return result.data
    return format_issues(result.issues)
