"""Fault handler middleware that recovers from unhandled exceptions.

Any exception a downstream handler lets escape is caught here, classified,
logged at ERROR level and turned into a 500 response. The response body
depends on the client and on development mode:

- **dev mode, XHR request**: the raw error message as plain text
- **dev mode, browser request**: an HTML fragment with the error and traceback
- **XHR request**: a generic JSON apology
- **anything else**: the same apology as plain text

If the fault happens after the response has started, for example while a
streaming body is being produced, it is still logged and the body is closed.

The exception is never re-raised, so the request ends normally from the
server's point of view. Only ``Exception`` subclasses are recovered;
cancellation and interpreter exit still propagate.
"""

import html

from loguru import logger
from starlette import status
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from webguard.api.constants import (
    FAULT_APOLOGY_MESSAGE,
    X_REQUESTED_WITH_HEADER,
    XHR_REQUESTED_WITH,
)
from webguard.api.schemas.errors import FaultResponse
from webguard.api.utils.responses import ORJSONResponse
from webguard.core.constants import FAULT_LOGGER_MODULE
from webguard.core.error_context import sanitize_dict
from webguard.core.faults import FaultRecord, classify_fault
from webguard.core.observability import mark_span_error
from webguard.core.types import ContextEnricher, LogContext


def is_xhr_request(request: Request) -> bool:
    """Check whether the request was sent by browser JavaScript (XHR/fetch).

    Args:
        request: The incoming request.

    Returns:
        bool: True if X-Requested-With is XMLHttpRequest.
    """
    return request.headers.get(X_REQUESTED_WITH_HEADER) == XHR_REQUESTED_WITH


def build_fault_response(
    request: Request, record: FaultRecord, *, dev_mode: bool
) -> Response:
    """Select the 500 response body for a recovered fault.

    Args:
        request: The request that faulted.
        record: The classified fault.
        dev_mode: Whether error details may be shown to the client.

    Returns:
        Response: Exactly one of the plain-text, HTML or JSON responses.
    """
    xhr = is_xhr_request(request)

    if dev_mode:
        if xhr:
            return PlainTextResponse(
                record.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return HTMLResponse(
            f"<h2>{html.escape(record.message)}</h2>"
            f"<pre>{html.escape(record.stack_trace)}</pre>",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if xhr:
        return ORJSONResponse(
            FaultResponse(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return PlainTextResponse(
        FAULT_APOLOGY_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class FaultHandlerMiddleware:
    """ASGI middleware that recovers from exceptions raised by downstream apps.

    The whole downstream call, including streaming the response body, runs
    inside the recovery boundary. A fault raised before the response starts
    is answered with a 500 fallback. A fault raised after the response has
    started is still logged, and the body is closed since the status line has
    already been sent.

    Args:
        app: The ASGI application to wrap.
        extra_fields: Optional function returning an enriched copy of the log
            context for a request, e.g. adding an installation or user ID.
        dev_mode: Show error details and tracebacks to clients.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        extra_fields: ContextEnricher | None = None,
        dev_mode: bool = False,
    ) -> None:
        self.app = app
        self.extra_fields = extra_fields
        self.dev_mode = dev_mode

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Run the downstream app, recovering from any exception it raises.

        Args:
            scope: The ASGI connection scope.
            receive: The ASGI receive channel.
            send: The ASGI send channel.
        """
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False
        response_complete = False

        async def send_tracking_response(message: Message) -> None:
            nonlocal response_started, response_complete
            if message["type"] == "http.response.start":
                response_started = True
            elif message["type"] == "http.response.body" and not message.get(
                "more_body", False
            ):
                response_complete = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking_response)
        except Exception as exc:  # noqa: BLE001 - last line of defense for the request
            request = Request(scope, receive)
            record = classify_fault(exc)

            try:
                self.report_fault(request, record)
            except Exception:  # noqa: BLE001
                logger.opt(exception=True).critical(
                    "Fault handler failed to report a recovered fault"
                )

            if not response_started:
                response = build_fault_response(request, record, dev_mode=self.dev_mode)
                await response(scope, receive, send)
            elif not response_complete:
                await send({"type": "http.response.body", "body": b"", "more_body": False})

    def build_log_context(self, request: Request) -> LogContext:
        """Build the log context for a faulted request.

        Args:
            request: The request that faulted.

        Returns:
            LogContext: Base context, enriched by ``extra_fields`` if set.
        """
        context: LogContext = {
            "module": FAULT_LOGGER_MODULE,
            "method": request.method,
            "path": request.url.path,
        }
        if self.extra_fields is None:
            return context

        try:
            return self.extra_fields(request, dict(context))
        except Exception:  # noqa: BLE001
            logger.bind(**context).opt(exception=True).warning(
                "Fault log context enrichment failed, using base context"
            )
            return context

    def report_fault(self, request: Request, record: FaultRecord) -> None:
        """Log the recovered fault and flag it on the active trace span.

        Args:
            request: The request that faulted.
            record: The classified fault.
        """
        context = sanitize_dict(self.build_log_context(request))

        context["error_type"] = record.error_type

        logger.bind(**context).opt(
            exception=record.fault
        ).error("Recovered from unhandled fault: {}", record.message)

        mark_span_error(record.error, record.error_type)


def fault_handler(
    extra_fields: ContextEnricher | None = None, *, dev_mode: bool = False
) -> Middleware:
    """Create a fault handler middleware entry for a Starlette app.

    Args:
        extra_fields: Optional log context enrichment function.
        dev_mode: Show error details and tracebacks to clients.

    Returns:
        Middleware: Entry for ``Starlette(middleware=[...])``.
    """
    return Middleware(FaultHandlerMiddleware, extra_fields=extra_fields, dev_mode=dev_mode)
