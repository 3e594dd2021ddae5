"""Constraints attached to string, number, date and collection schemas.

Constraints run only after the structural check of their node succeeded, so
they can assume the value already has the right kind. Each failing bound
yields one issue and never stops the remaining checks.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from re import Pattern as RegexPattern
from typing import Any as AnyType

from .exceptions import SchemaConfigurationError
from .result import IssueCode, Path, ValidationIssue


class Constraint(ABC):
    """Base class for all constraints."""

    def __init__(self, message: str | None = None):
        """Initialize the constraint.

        Args:
            message: Optional message replacing the generated one on failure
        """
        self.message = message

    @abstractmethod
    def check(self, value: AnyType, path: Path = ()) -> list[ValidationIssue]:
        """Check a structurally valid value against this constraint.

        Args:
            value: Value to check
            path: Path of the value, attached to every issue

        Returns:
            Issues found, empty when the constraint holds
        """
        pass

    def _issue(self, path: Path, message: str, code: IssueCode) -> ValidationIssue:
        return ValidationIssue(tuple(path), self.message or message, code)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(vars(self).items(), key=lambda i: i[0]))))

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if v is not None)
        return f"{type(self).__name__}({args})"


def _comparable(value: AnyType, bound: AnyType) -> tuple[AnyType, AnyType]:
    # datetime and date do not compare with each other directly
    if isinstance(value, datetime) and not isinstance(bound, datetime) and isinstance(bound, date):
        return value.date(), bound
    if isinstance(bound, datetime) and not isinstance(value, datetime) and isinstance(value, date):
        return value, bound.date()
    # naive datetimes are read as UTC when compared with aware ones
    if isinstance(value, datetime) and isinstance(bound, datetime):
        if value.tzinfo is None and bound.tzinfo is not None:
            return value.replace(tzinfo=timezone.utc), bound
        if bound.tzinfo is None and value.tzinfo is not None:
            return value, bound.replace(tzinfo=timezone.utc)
    return value, bound


class Range(Constraint):
    """Number or date must lie within bounds."""

    def __init__(
        self,
        min: AnyType = None,
        max: AnyType = None,
        min_exclusive: bool = False,
        max_exclusive: bool = False,
        message: str | None = None,
    ):
        """Initialize range constraint.

        Args:
            min: Lower bound (inclusive unless min_exclusive)
            max: Upper bound (inclusive unless max_exclusive)
            min_exclusive: If True, value must be > min
            max_exclusive: If True, value must be < max
            message: Optional custom failure message
        """
        if min is not None and max is not None and _comparable(min, max)[0] > _comparable(min, max)[1]:
            raise SchemaConfigurationError(
                f"min ({min}) cannot be greater than max ({max})",
                context={"min": min, "max": max},
            )
        super().__init__(message)
        self.min = min
        self.max = max
        self.min_exclusive = min_exclusive
        self.max_exclusive = max_exclusive

    def check(self, value: AnyType, path: Path = ()) -> list[ValidationIssue]:
        """Check if value is in range."""
        subject = "Date" if isinstance(value, date) else "Number"
        issues = []

        if self.min is not None:
            current, bound = _comparable(value, self.min)
            if self.min_exclusive and current <= bound:
                issues.append(self._issue(
                    path, f"{subject} must be greater than {self.min}", IssueCode.TOO_SMALL
                ))
            elif not self.min_exclusive and current < bound:
                issues.append(self._issue(
                    path,
                    f"{subject} must be greater than or equal to {self.min}",
                    IssueCode.TOO_SMALL,
                ))

        if self.max is not None:
            current, bound = _comparable(value, self.max)
            if self.max_exclusive and current >= bound:
                issues.append(self._issue(
                    path, f"{subject} must be less than {self.max}", IssueCode.TOO_BIG
                ))
            elif not self.max_exclusive and current > bound:
                issues.append(self._issue(
                    path,
                    f"{subject} must be less than or equal to {self.max}",
                    IssueCode.TOO_BIG,
                ))

        return issues


class Length(Constraint):
    """String or collection length must be within bounds."""

    def __init__(self, min: int | None = None, max: int | None = None, message: str | None = None):
        """Initialize length constraint.

        Args:
            min: Minimum length (inclusive)
            max: Maximum length (inclusive)
            message: Optional custom failure message
        """
        for bound in (min, max):
            if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int)):
                raise SchemaConfigurationError(
                    f"Length bound must be an integer, got {type(bound).__name__}",
                    context={"bound": bound},
                )
        if min is not None and min < 0:
            raise SchemaConfigurationError(f"min length cannot be negative: {min}")
        if max is not None and max < 0:
            raise SchemaConfigurationError(f"max length cannot be negative: {max}")
        if min is not None and max is not None and min > max:
            raise SchemaConfigurationError(
                f"min length ({min}) cannot be greater than max ({max})",
                context={"min": min, "max": max},
            )
        super().__init__(message)
        self.min = min
        self.max = max

    def check(self, value: AnyType, path: Path = ()) -> list[ValidationIssue]:
        """Check if value length is in range."""
        if isinstance(value, str):
            subject, unit = "String", "character(s)"
        elif isinstance(value, (set, frozenset)):
            subject, unit = "Set", "element(s)"
        else:
            subject, unit = "Array", "element(s)"

        length = len(value)
        if self.min is not None and self.min == self.max and length != self.min:
            code = IssueCode.TOO_SMALL if length < self.min else IssueCode.TOO_BIG
            return [self._issue(path, f"{subject} must contain exactly {self.min} {unit}", code)]

        issues = []
        if self.min is not None and length < self.min:
            issues.append(self._issue(
                path, f"{subject} must contain at least {self.min} {unit}", IssueCode.TOO_SMALL
            ))
        if self.max is not None and length > self.max:
            issues.append(self._issue(
                path, f"{subject} must contain at most {self.max} {unit}", IssueCode.TOO_BIG
            ))
        return issues


class Pattern(Constraint):
    """String value must match regex pattern."""

    def __init__(self, pattern: str | RegexPattern, message: str | None = None):
        """Initialize pattern constraint.

        Args:
            pattern: Regex pattern (string or compiled pattern)
            message: Optional custom failure message
        """
        super().__init__(message)
        if isinstance(pattern, str):
            try:
                self.regex = re.compile(pattern)
            except re.error as e:
                raise SchemaConfigurationError(
                    f"Invalid regular expression '{pattern}': {e}",
                    context={"pattern": pattern},
                ) from e
        else:
            self.regex = pattern
        self.pattern_str = self.regex.pattern

    def check(self, value: AnyType, path: Path = ()) -> list[ValidationIssue]:
        """Check if value matches pattern."""
        if self.regex.search(value) is None:
            return [self._issue(
                path,
                f"Invalid string: must match pattern '{self.pattern_str}'",
                IssueCode.INVALID_STRING,
            )]
        return []


def check_bounds(constraints: tuple[Constraint, ...]) -> None:
    """Check that the bounds of a node's constraints can all hold together.

    Each ``Range`` or ``Length`` checks its own bounds; this covers bounds
    added by separate modifier calls, such as ``.min(10).max(5)``.

    Args:
        constraints: All constraints of one node

    Raises:
        SchemaConfigurationError: If some lower bound exceeds some upper bound
    """
    lower = [(c.min, getattr(c, "min_exclusive", False)) for c in constraints
             if isinstance(c, (Range, Length)) and c.min is not None]
    upper = [(c.max, getattr(c, "max_exclusive", False)) for c in constraints
             if isinstance(c, (Range, Length)) and c.max is not None]
    for low, low_exclusive in lower:
        for high, high_exclusive in upper:
            low_value, high_value = _comparable(low, high)
            if low_value > high_value or (
                low_value == high_value and (low_exclusive or high_exclusive)
            ):
                raise SchemaConfigurationError(
                    f"Lower bound ({low}) conflicts with upper bound ({high})",
                    context={"min": low, "max": high},
                )
