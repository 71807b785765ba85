"""Error response schema returned to asynchronous (XHR) clients.

When the fault handler recovers from an unhandled exception outside of
development mode, XHR clients receive a JSON object with a single generic
``message`` field. Internal error details are never included.
"""

from pydantic import BaseModel, ConfigDict, Field

from webguard.api.constants import FAULT_APOLOGY_MESSAGE


class FaultResponse(BaseModel):
    """Generic JSON body for a request that ended in a recovered fault."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(
        default=FAULT_APOLOGY_MESSAGE,
        description="Human-readable apology safe to show to end users",
        examples=[FAULT_APOLOGY_MESSAGE],
    )
