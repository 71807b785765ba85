"""Log context enrichment for the fault handler."""

from starlette.requests import Request

from webguard.api.constants import INSTALLATION_ID_HEADER
from webguard.core.types import LogContext


def add_installation_id(request: Request, context: LogContext) -> LogContext:
    """Add the client's installation ID, if sent, to the fault log context.

    Args:
        request: The request that faulted.
        context: Base log context.

    Returns:
        LogContext: A copy of the context with ``installation_id`` added.
    """
    installation_id = request.headers.get(INSTALLATION_ID_HEADER)
    if installation_id is None:
        return context
    return {**context, "installation_id": installation_id}
