"""Validation settings and their environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from .exceptions import SchemaConfigurationError

logger = logging.getLogger(__name__)


class UnknownKeys(Enum):
    """Policy for keys present in an input mapping but not declared by an object schema.

    Attributes:
        STRIP: Drop unknown keys from the normalized output
        STRICT: Report unknown keys as a validation issue
        PASSTHROUGH: Copy unknown keys into the normalized output unchanged
    """

    STRIP = "strip"
    STRICT = "strict"
    PASSTHROUGH = "passthrough"

    @classmethod
    def parse(cls, value: UnknownKeys | str) -> UnknownKeys:
        """Convert a policy name to an UnknownKeys member.

        Args:
            value: Member or case-insensitive member value

        Returns:
            The matching policy

        Raises:
            SchemaConfigurationError: If the name is not a known policy
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise SchemaConfigurationError(
                f"Invalid unknown keys policy: {value}",
                context={"value": value, "allowed": [m.value for m in cls]},
            ) from e


@dataclass(frozen=True)
class ValidationSettings:
    """Settings applied by a Validator.

    Attributes:
        unknown_keys: Policy for object schemas that do not set their own
    """

    unknown_keys: UnknownKeys | str = UnknownKeys.STRIP

    ENV_PREFIX = "DATAKNOBS_SCHEMA_"

    def __post_init__(self) -> None:
        object.__setattr__(self, "unknown_keys", UnknownKeys.parse(self.unknown_keys))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidationSettings:
        """Create settings from a dictionary.

        Args:
            data: Settings dictionary, unknown keys are ignored with a warning

        Returns:
            ValidationSettings instance
        """
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "unknown_keys":
                kwargs[key] = value
            else:
                logger.warning(f"Ignoring unknown validation setting: {key}")
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        prefix: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ValidationSettings:
        """Create settings from environment variables.

        Environment variable format: ``DATAKNOBS_SCHEMA_<SETTING>``, e.g.
        ``DATAKNOBS_SCHEMA_UNKNOWN_KEYS=strict``.

        Args:
            prefix: Custom environment variable prefix
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ValidationSettings instance
        """
        prefix = prefix or cls.ENV_PREFIX
        environ = os.environ if environ is None else environ
        data = {
            key[len(prefix):].lower(): value
            for key, value in environ.items()
            if key.startswith(prefix)
        }
        return cls.from_dict(data)


DEFAULT_SETTINGS = ValidationSettings()
