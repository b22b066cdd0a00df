"""Interface for the network transport.

Defines the one-shot request/response exchange the dispatcher depends on.
"""

import abc
from typing import Dict, Optional

from cordrest.domain.models.request import TransportResult


class Transport(abc.ABC):
    """Abstract Base Class for a single HTTPS round trip."""

    @abc.abstractmethod
    async def perform(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        timeout_ms: int,
        body: Optional[str] = None,
    ) -> TransportResult:
        """Performs one request and returns the status code and full body text.

        Args:
            url: Fully-formed target URL.
            method: HTTP verb.
            headers: Request headers, already built by the caller.
            timeout_ms: Connection timeout in milliseconds.
            body: Encoded request body, if any.

        Returns:
            A TransportResult with the status code and the body (None if empty).

        Raises:
            TransportError: On connection, timeout, or malformed-response failures.
        """
        pass
