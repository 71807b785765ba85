"""Core package for shared middleware functionality.

This package provides the foundational components used by the middlewares:

- **config**: Settings and the immutable security header configuration
- **constants**: Shared constant values
- **error_context**: Redaction of sensitive fields in log context
- **faults**: Typed fault hierarchy and classification of recovered faults
- **logging**: Structured logging with Loguru
- **observability**: Distributed tracing with OpenTelemetry
- **types**: Type aliases for better code clarity
"""
