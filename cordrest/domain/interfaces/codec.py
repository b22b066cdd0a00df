"""Interface for request/response body codecs."""

import abc
from typing import Any, Optional

from cordrest.domain.models.request import EncodedBody


class BodyCodec(abc.ABC):
    """Abstract Base Class for encoding request bodies and decoding responses."""

    @abc.abstractmethod
    def encode(self, body: Any) -> EncodedBody:
        """Encodes a body. Strings are treated as already form-encoded.

        Raises:
            BodyEncodingError: If a structured body cannot be serialized.
        """
        pass

    @abc.abstractmethod
    def decode(self, raw: Optional[str]) -> Any:
        """Decodes raw response text. Never raises; returns the raw text if it is not JSON."""
        pass
