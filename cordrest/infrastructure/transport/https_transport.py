"""Concrete implementation of the Transport interface using httpx.

Performs exactly one HTTPS round trip per call, reading the whole response
body before returning. Does not interpret content; that is left to the
dispatcher and the codec.
"""

import logging
import time
from typing import Dict, Optional

import httpx

from cordrest.domain.errors import (
    ConnectionFault,
    RequestTimeoutError,
    ResponseError,
    UnknownResponseError,
)
from cordrest.domain.interfaces.transport import Transport
from cordrest.domain.models.request import TransportResult

logger = logging.getLogger(__name__)


class HttpsTransport(Transport):
    """httpx implementation of the Transport interface.

    A fresh AsyncClient is opened and closed for every call, so no connection
    is shared between dispatches.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, verify_tls: bool = True):
        """Initializes the transport.

        Args:
            transport: Optional httpx transport to route requests through
                (e.g. httpx.MockTransport in tests).
            verify_tls: Whether to verify server certificates.
        """
        self._transport = transport
        self._verify_tls = verify_tls

    async def perform(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        timeout_ms: int,
        body: Optional[str] = None,
    ) -> TransportResult:
        timeout = httpx.Timeout(timeout_ms / 1000)
        content = body.encode("utf-8") if body is not None else None
        start_time = time.perf_counter()

        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                transport=self._transport,
                verify=self._verify_tls,
                follow_redirects=False,
            ) as client:
                async with client.stream(method, url, headers=headers, content=content) as response:
                    if not response.status_code:
                        raise UnknownResponseError()

                    chunks = []
                    total_length = 0
                    try:
                        async for chunk in response.aiter_bytes():
                            chunks.append(chunk)
                            total_length += len(chunk)
                    except (httpx.RemoteProtocolError, httpx.ReadError) as e:
                        logger.error(f"{method} {url}: response stream ended prematurely: {e}")
                        raise ResponseError() from e

                    status_code = response.status_code
                    response_headers = dict(response.headers)

        except httpx.TimeoutException as e:
            logger.error(f"{method} {url}: request timed out after {timeout_ms}ms")
            raise RequestTimeoutError() from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url}: connection error: {type(e).__name__} - {e}")
            raise ConnectionFault(str(e) or type(e).__name__) from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{method} {url} -> {status_code} ({total_length} bytes, {latency_ms:.2f}ms)")

        if total_length == 0:
            return TransportResult(status_code=status_code, body=None, headers=response_headers)

        return TransportResult(
            status_code=status_code,
            body=b"".join(chunks).decode("utf-8", errors="replace"),
            headers=response_headers,
        )
