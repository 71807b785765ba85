"""Starlette middleware package for security headers and fault recovery.

- **SecurityHeadersMiddleware**: Adds configured security headers (CSP, HSTS,
  X-Frame-Options, X-Content-Type-Options) to every response
- **FaultHandlerMiddleware**: Recovers from unhandled exceptions, logs them and
  returns an HTML, JSON or plain-text 500 response

The two are independent. Register the security headers middleware outermost
so that fault responses carry the security headers too:
1. Security headers (first to process, last to respond)
2. Fault handler (catches everything raised further down)
"""

from webguard.api.middleware.fault_handler import FaultHandlerMiddleware, fault_handler
from webguard.api.middleware.security_headers import (
    SecurityHeadersMiddleware,
    security_headers,
)

__all__ = [
    "FaultHandlerMiddleware",
    "SecurityHeadersMiddleware",
    "fault_handler",
    "security_headers",
]
