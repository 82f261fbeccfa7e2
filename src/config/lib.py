"""Centralized environment configuration management for uischema-guard.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> high = get_environment(EnvVar.UISCHEMA_SIMILARITY_HIGH)  # Returns float
    >>> version = get_environment(EnvVar.UISCHEMA_DEFAULT_VERSION)  # Returns str
    >>>
    >>> # Override at runtime
    >>> overlap = get_environment(EnvVar.UISCHEMA_STREAM_OVERLAP, override=128)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "UISCHEMA_MAX_DEPTH").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by uischema-guard.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - fixer: Auto-repair thresholds and defaults
        - parser: Incremental parser limits
        - streaming: Streaming validator tuning
        - validation: Validator policy
        - logging: Log output and message language
    """

    # -------------------------------------------------------------------------
    # Fixer
    # -------------------------------------------------------------------------
    UISCHEMA_DEFAULT_VERSION = EnvConfig(
        name="UISCHEMA_DEFAULT_VERSION",
        default="1.0",
        var_type=str,
        description="Version written into documents that lack one",
        category="fixer",
    )
    UISCHEMA_SIMILARITY_MEDIUM = EnvConfig(
        name="UISCHEMA_SIMILARITY_MEDIUM",
        default=0.6,
        var_type=float,
        description="Minimum similarity for a correction to be proposed",
        category="fixer",
    )
    UISCHEMA_SIMILARITY_HIGH = EnvConfig(
        name="UISCHEMA_SIMILARITY_HIGH",
        default=0.8,
        var_type=float,
        description="Similarity at or above which a correction is high confidence",
        category="fixer",
    )
    UISCHEMA_ID_SUFFIX = EnvConfig(
        name="UISCHEMA_ID_SUFFIX",
        default="",
        var_type=str,
        description="Optional suffix appended to synthesized node ids",
        category="fixer",
    )
    UISCHEMA_DEFAULT_ROOT_TYPE = EnvConfig(
        name="UISCHEMA_DEFAULT_ROOT_TYPE",
        default="Container",
        var_type=str,
        description="Component type of the synthesized root node",
        category="fixer",
    )

    # -------------------------------------------------------------------------
    # Parser / Streaming
    # -------------------------------------------------------------------------
    UISCHEMA_MAX_DEPTH = EnvConfig(
        name="UISCHEMA_MAX_DEPTH",
        default=100,
        var_type=int,
        description="Maximum nesting depth accepted by the parser and validator",
        category="parser",
    )
    UISCHEMA_STREAM_OVERLAP = EnvConfig(
        name="UISCHEMA_STREAM_OVERLAP",
        default=64,
        var_type=int,
        description="Characters re-scanned before the cursor on each feed",
        category="streaming",
    )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------
    UISCHEMA_STRICT = EnvConfig(
        name="UISCHEMA_STRICT",
        default=False,
        var_type=bool,
        description="Treat validator warnings as errors",
        category="validation",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    UISCHEMA_LOG_LEVEL = EnvConfig(
        name="UISCHEMA_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level name for the CLI (DEBUG, INFO, WARNING, ...)",
        category="logging",
    )
    UISCHEMA_LANGUAGE = EnvConfig(
        name="UISCHEMA_LANGUAGE",
        default="en",
        var_type=str,
        description="Language of formatted diagnostic messages (en, zh)",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, float or bool).

    Example:
        >>> get_environment(EnvVar.UISCHEMA_MAX_DEPTH)
        100
        >>> get_environment(EnvVar.UISCHEMA_MAX_DEPTH, override=20)
        20
    """
    config: EnvConfig = env_var.value

    # Override takes highest priority
    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def get_log_level(override: str | None = None) -> int:
    """Resolve the configured log level to a `logging` constant.

    Unknown level names fall back to INFO.
    """
    name = str(get_environment(EnvVar.UISCHEMA_LOG_LEVEL, override)).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (fixer, parser, streaming, validation,
                 logging). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
