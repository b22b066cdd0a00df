"""JSON / form-encoded body codec.

Structured bodies are sent as JSON; strings are assumed to be form-encoded
already. Response decoding never raises: anything that is not JSON comes
back as the raw text.
"""

import json
import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from cordrest.domain.errors import BodyEncodingError
from cordrest.domain.interfaces.codec import BodyCodec
from cordrest.domain.models.request import EncodedBody

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"


def safe_json_parse(raw: Optional[str]) -> Any:
    """Parses JSON text, returning the input unchanged if it is not JSON.

    Args:
        raw: Raw response text, possibly None or empty.

    Returns:
        The parsed value, None for absent/empty input, or `raw` itself on parse failure.
    """
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.debug(f"Response body is not JSON ({len(raw)} chars), returning raw text.")
        return raw


def form_encode(params: Optional[Mapping[str, Any]]) -> str:
    """Encodes a mapping as application/x-www-form-urlencoded text, skipping None values."""
    if not params:
        return ""
    return urlencode({k: v for k, v in params.items() if v is not None})


class JsonBodyCodec(BodyCodec):
    """Default codec: JSON for structured bodies, passthrough for form strings."""

    def encode(self, body: Any) -> EncodedBody:
        if isinstance(body, str):
            text = body
            content_type = CONTENT_TYPE_FORM
        else:
            try:
                text = json.dumps(body, separators=(",", ":"))
            except (TypeError, ValueError) as e:
                logger.error(f"Failed to encode request body of type {type(body).__name__}: {e}")
                raise BodyEncodingError(e) from e
            content_type = CONTENT_TYPE_JSON

        return EncodedBody(
            text=text,
            content_type=content_type,
            content_length=len(text.encode("utf-8")),
        )

    def decode(self, raw: Optional[str]) -> Any:
        return safe_json_parse(raw)
