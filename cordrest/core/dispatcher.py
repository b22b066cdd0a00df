"""Request dispatcher: builds, sends, classifies and retries API calls.

A dispatch moves through Building -> Sending -> {Success, ClientError,
RateLimited, Fatal}. Only a 429 with a `retry_after` loops back into
Sending, at most `retry_count` times. Every other outcome is terminal,
and a dispatch produces exactly one result or raises exactly once.
"""

import asyncio
import logging
import math
import time
from typing import Any, Dict, Optional

from cordrest.domain.errors import (
    ClientError,
    RateLimitedError,
    TransportError,
    UnexpectedStatusError,
)
from cordrest.domain.events.request_events import (
    DomainEvent,
    RateLimitRetryScheduled,
    RequestDispatched,
    RequestFailed,
    ResponseReceived,
)
from cordrest.domain.interfaces.codec import BodyCodec
from cordrest.domain.interfaces.transport import Transport
from cordrest.domain.models.request import HttpMethod, RequestOptions
from cordrest.infrastructure.codec.json_codec import JsonBodyCodec
from cordrest.infrastructure.config.settings import DEFAULT_API_BASE, get_api_base
from cordrest.infrastructure.transport.https_transport import HttpsTransport

logger = logging.getLogger(__name__)

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_AUTHORIZATION = "Authorization"

# --- Process-wide default options ---
_default_options = RequestOptions()


def set_default_request_options(options: Optional[RequestOptions]) -> None:
    """Replaces the defaults merged under every call's options. None resets them."""
    global _default_options
    _default_options = options if options is not None else RequestOptions()
    logger.debug(
        f"Default request options set: timeout={_default_options.connection_timeout}, "
        f"retry_count={_default_options.rate_limit.retry_count if _default_options.rate_limit else None}, "
        f"authorization={'yes' if _default_options.authorization else 'no'}"
    )


def get_default_request_options() -> RequestOptions:
    return _default_options


def _dispatch_event(event: DomainEvent) -> None:
    logger.debug(f"EVENT: {event}")


def _retry_after_seconds(response: Any) -> float:
    """Extracts a numeric `retry_after` from a decoded 429 body, 0.0 if absent or malformed."""
    if not isinstance(response, dict):
        return 0.0
    try:
        value = float(response.get("retry_after") or 0)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    # Delay is computed in milliseconds; NaN, infinities and overflowing values count as absent
    if not math.isfinite(value * 1000):
        return 0.0
    return value


class RequestDispatcher:
    """Turns (method, path, options, body) into a decoded response or a single failure."""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        codec: Optional[BodyCodec] = None,
        api_base: str = DEFAULT_API_BASE,
    ):
        """Initializes the dispatcher.

        Args:
            transport: Transport used for round trips (HttpsTransport if None).
            codec: Body codec (JsonBodyCodec if None).
            api_base: Base URL the opaque request path is appended to.
        """
        self.transport = transport or HttpsTransport()
        self.codec = codec or JsonBodyCodec()
        self.api_base = api_base

    def _build_headers(self, options: RequestOptions, body: Any):
        headers: Dict[str, str] = {}
        content: Optional[str] = None

        if body:
            encoded = self.codec.encode(body)
            content = encoded.text
            headers[HEADER_CONTENT_TYPE] = encoded.content_type
            headers[HEADER_CONTENT_LENGTH] = str(encoded.content_length)

        if options.authorization:
            headers[HEADER_AUTHORIZATION] = str(options.authorization)

        return headers, content

    def _notify_rate_limited(self, options: RequestOptions, response: Any, attempts: int) -> None:
        callback = options.rate_limit_callback
        if callback is None:
            return
        try:
            callback(response, attempts)
        except Exception as e:
            # Observers are informational only
            logger.error(f"Rate limit callback raised {type(e).__name__}: {e}", exc_info=True)

    async def dispatch(
        self,
        method: str,
        path: str,
        options: Optional[RequestOptions] = None,
        body: Any = None,
    ) -> Any:
        """Performs one logical API call, retrying on server rate limits.

        Args:
            method: HTTP verb (HttpMethod or plain string).
            path: Resource path with any query string already appended.
            options: Per-call options, merged over the process-wide defaults.
            body: Structured value to JSON-encode, or a pre-encoded form string.

        Returns:
            The decoded response body (None if the response was empty).

        Raises:
            BodyEncodingError: If `body` cannot be JSON-encoded (before any I/O).
            TransportError: On connection, timeout, or malformed-response faults.
            RateLimitedError: On a 429 without retry_after or after retries are exhausted.
            ClientError: On any other 4xx status.
            UnexpectedStatusError: On any status outside 2xx/4xx.
        """
        method_name = method.value if isinstance(method, HttpMethod) else str(method).upper()
        effective = (options or RequestOptions()).merged_over(_default_options)
        retry_count = effective.effective_retry_count
        timeout_ms = effective.effective_timeout

        # --- Building ---
        headers, content = self._build_headers(effective, body)
        url = self.api_base + path

        attempts = 0
        while True:
            # --- Sending ---
            if effective.limiter is not None:
                await effective.limiter.wait_for_permission()

            _dispatch_event(RequestDispatched(method=method_name, path=path, attempt=attempts))
            start_time = time.perf_counter()
            try:
                result = await self.transport.perform(url, method_name, headers, timeout_ms, content)
            except TransportError as e:
                logger.error(f"{method_name} {path} failed in transport: {type(e).__name__}: {e}")
                _dispatch_event(RequestFailed(method=method_name, path=path, error_type=type(e).__name__))
                raise

            code = result.status_code
            latency_ms = (time.perf_counter() - start_time) * 1000
            _dispatch_event(ResponseReceived(method=method_name, path=path, status_code=code, latency_ms=latency_ms))

            # --- Classification ---
            if 200 <= code < 300:
                return self.codec.decode(result.body)

            if 400 <= code < 500:
                response = self.codec.decode(result.body)
                if code != 429:
                    logger.warning(f"{method_name} {path} rejected with {code}")
                    _dispatch_event(RequestFailed(method=method_name, path=path, error_type="ClientError", status_code=code))
                    raise ClientError(code, response)

                attempts += 1
                self._notify_rate_limited(effective, response, attempts)

                retry_after = _retry_after_seconds(response)
                is_global = bool(response.get("global")) if isinstance(response, dict) else False
                if effective.limiter is not None and is_global and retry_after:
                    effective.limiter.block_for(retry_after)

                if retry_after and attempts <= retry_count:
                    delay = math.ceil(retry_after * 1000) / 1000
                    logger.warning(
                        f"{method_name} {path} rate limited (attempt {attempts}/{retry_count}, "
                        f"global={is_global}). Retrying in {delay:.3f}s..."
                    )
                    _dispatch_event(RateLimitRetryScheduled(
                        method=method_name, path=path, attempt_number=attempts,
                        delay_seconds=delay, is_global=is_global,
                    ))
                    await asyncio.sleep(delay)
                    continue

                logger.warning(f"{method_name} {path} rate limited; giving up after {attempts} attempt(s)")
                _dispatch_event(RequestFailed(method=method_name, path=path, error_type="RateLimitedError", status_code=code))
                raise RateLimitedError(code, response, attempts)

            logger.error(f"{method_name} {path} returned unexpected status {code}")
            _dispatch_event(RequestFailed(method=method_name, path=path, error_type="UnexpectedStatusError", status_code=code))
            raise UnexpectedStatusError(code)


# --- Shared default dispatcher ---
_default_dispatcher: Optional[RequestDispatcher] = None


def get_default_dispatcher() -> RequestDispatcher:
    """Returns the lazily created dispatcher used by `request` and the endpoint catalog."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = RequestDispatcher(api_base=get_api_base())
    return _default_dispatcher


def set_default_dispatcher(dispatcher: Optional[RequestDispatcher]) -> None:
    """Replaces the shared dispatcher (None recreates it lazily on next use)."""
    global _default_dispatcher
    _default_dispatcher = dispatcher


async def request(
    method: str,
    path: str,
    options: Optional[RequestOptions] = None,
    body: Any = None,
) -> Any:
    """Dispatches through the shared default dispatcher."""
    return await get_default_dispatcher().dispatch(method, path, options, body)
