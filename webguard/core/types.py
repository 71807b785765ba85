"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeAlias

from starlette.requests import Request

# Context dictionary for logging additional information
# Values must be JSON-serializable for structured logging
LogContext: TypeAlias = dict[str, Any]  # JSON-serializable values

# Content-Security-Policy directives: directive name -> ordered source tokens
CspDirectives: TypeAlias = Mapping[str, Sequence[str]]

# Pure function returning an enriched copy of the log context for a request
ContextEnricher: TypeAlias = Callable[[Request, LogContext], LogContext]
