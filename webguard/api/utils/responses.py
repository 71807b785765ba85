"""JSON response class using orjson serialization.

The fault handler answers XHR clients with an ``application/json`` body.
ORJSONResponse renders Pydantic models and plain dicts with orjson, sorting
keys so the output is byte-for-byte reproducible.
"""

from typing import Any

import orjson
from pydantic import BaseModel
from starlette.responses import JSONResponse


class ORJSONResponse(JSONResponse):
    """Starlette JSON response rendered with orjson.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: A Pydantic model or any orjson-serializable value.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        return orjson.dumps(content, option=orjson.OPT_SORT_KEYS)
