"""Security headers middleware for adding common security headers to responses."""

from collections.abc import Awaitable, Callable

from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from webguard.api.constants import (
    CSP_HEADER,
    CSP_REPORT_ONLY_HEADER,
    HOST_HEADER,
    HSTS_HEADER,
    X_CONTENT_TYPE_OPTIONS_HEADER,
    X_FRAME_OPTIONS_HEADER,
)
from webguard.core.config import DEFAULT_HEADER_CONFIG, HeaderConfig
from webguard.core.types import CspDirectives


def serialize_csp(directives: CspDirectives) -> str:
    """Serialize CSP directives into a single header value.

    Each directive becomes ``"<name> <sources>;"`` and the groups are
    concatenated in sorted directive-name order, so the same configuration
    always yields the same header value.

    Args:
        directives: Directive name to its ordered source tokens.

    Returns:
        str: The policy string, empty when there are no directives.
    """
    return "".join(
        f"{name} {' '.join(sources)};" for name, sources in sorted(directives.items())
    )


def build_security_headers(
    config: HeaderConfig, host: str, root_domain: str
) -> dict[str, str]:
    """Compute the security headers for a request.

    Headers whose directive is empty are left out. Strict-Transport-Security
    is only included when ``host`` ends with ``root_domain``; the comparison
    is a case-sensitive suffix match on the raw Host value.

    Args:
        config: Header directives to apply.
        host: The request's Host header value.
        root_domain: Domain whose hosts receive the HSTS header.

    Returns:
        dict[str, str]: Header name to value, in emission order.
    """
    headers: dict[str, str] = {}

    csp = serialize_csp(config.content_security_policy)
    csp_report_only = serialize_csp(config.content_security_policy_report_only)

    if config.x_frame_options:
        headers[X_FRAME_OPTIONS_HEADER] = config.x_frame_options
    if csp:
        headers[CSP_HEADER] = csp
    if csp_report_only:
        headers[CSP_REPORT_ONLY_HEADER] = csp_report_only
    if config.strict_transport_security and host.endswith(root_domain):
        headers[HSTS_HEADER] = config.strict_transport_security
    if config.x_content_type_options:
        headers[X_CONTENT_TYPE_OPTIONS_HEADER] = config.x_content_type_options

    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add configured security headers to all responses.

    This middleware can add the following headers:
    - X-Frame-Options: Controls where the site may be displayed in a frame
    - Content-Security-Policy: Restricts where scripts and styles load from
    - Content-Security-Policy-Report-Only: Like CSP, but only reports violations
    - Strict-Transport-Security: Forces HTTPS, only for hosts under root_domain
    - X-Content-Type-Options: Prevents MIME type sniffing

    A header the downstream handler set itself is left untouched.

    Args:
        app: The ASGI application to wrap.
        config: Header directives (defaults to DEFAULT_HEADER_CONFIG).
        root_domain: Hosts ending with this domain receive the HSTS header.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: HeaderConfig = DEFAULT_HEADER_CONFIG,
        root_domain: str = "",
    ) -> None:
        super().__init__(app)
        self.config = config
        self.root_domain = root_domain

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Add security headers to the response.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler.

        Returns:
            Response: The HTTP response with security headers added.
        """
        security_headers = build_security_headers(
            self.config, request.headers.get(HOST_HEADER, ""), self.root_domain
        )

        response = await call_next(request)

        for name, value in security_headers.items():
            response.headers.setdefault(name, value)

        return response


def security_headers(root_domain: str, config: HeaderConfig | None = None) -> Middleware:
    """Create a security headers middleware entry for a Starlette app.

    Args:
        root_domain: Hosts ending with this domain receive the HSTS header.
        config: Header directives; DEFAULT_HEADER_CONFIG when omitted.

    Returns:
        Middleware: Entry for ``Starlette(middleware=[...])``.
    """
    return Middleware(
        SecurityHeadersMiddleware,
        config=DEFAULT_HEADER_CONFIG if config is None else config,
        root_domain=root_domain,
    )
