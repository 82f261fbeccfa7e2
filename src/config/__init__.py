"""Centralized configuration management for uischema-guard.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> medium = get_environment(EnvVar.UISCHEMA_SIMILARITY_MEDIUM)  # 0.6
    >>>
    >>> # Override at runtime
    >>> depth = get_environment(EnvVar.UISCHEMA_MAX_DEPTH, override=32)
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("fixer"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    fixer: Repair thresholds, default version, id suffix, default root type
    parser: Maximum nesting depth
    streaming: Re-scan overlap margin
    validation: Strict mode
    logging: CLI log level
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_log_level,
    # Introspection
    list_environment_variables,
)

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
