"""Value objects describing a single request and its per-call settings.

A request descriptor is ephemeral: created at the call site, consumed by one
dispatch, never persisted.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional, TypedDict, TYPE_CHECKING

from cordrest.domain.models.credential import Authorization

if TYPE_CHECKING:
    from cordrest.infrastructure.resilience.rate_limit_gate import RateLimitGate

# === Defaults ===
DEFAULT_CONNECTION_TIMEOUT_MS = 5000
DEFAULT_RETRY_COUNT = 5


class HttpMethod(str, Enum):
    """Verbs used by the endpoint catalog."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


# Expected shape of a decoded 429 body. 'global' is a keyword, hence the
# functional syntax.
RateLimitResponse = TypedDict(
    "RateLimitResponse",
    {"message": str, "retry_after": float, "global": bool},
    total=False,
)

# Observer invoked with (decoded 429 body, attempt count)
RateLimitCallback = Callable[[Any, int], None]


@dataclass
class RateLimitPolicy:
    """Per-call rate-limit handling: retry bound and observer."""
    retry_count: Optional[int] = None  # maximum number of retries after a 429
    callback: Optional[RateLimitCallback] = None


@dataclass
class RequestOptions:
    """Per-call configuration bundle.

    Unset fields fall back to the process-wide defaults, then to
    DEFAULT_CONNECTION_TIMEOUT_MS / DEFAULT_RETRY_COUNT.
    """
    authorization: Optional[Authorization] = None
    connection_timeout: Optional[int] = None  # milliseconds
    rate_limit: Optional[RateLimitPolicy] = None
    limiter: Optional["RateLimitGate"] = None

    def merged_over(self, defaults: Optional["RequestOptions"]) -> "RequestOptions":
        """Returns a new RequestOptions with unset fields taken from `defaults`."""
        if defaults is None:
            return replace(self)

        rate_limit = self.rate_limit
        if defaults.rate_limit is not None:
            if rate_limit is None:
                rate_limit = replace(defaults.rate_limit)
            else:
                rate_limit = RateLimitPolicy(
                    retry_count=rate_limit.retry_count if rate_limit.retry_count is not None else defaults.rate_limit.retry_count,
                    callback=rate_limit.callback or defaults.rate_limit.callback,
                )

        return RequestOptions(
            authorization=self.authorization or defaults.authorization,
            connection_timeout=self.connection_timeout if self.connection_timeout is not None else defaults.connection_timeout,
            rate_limit=rate_limit,
            limiter=self.limiter or defaults.limiter,
        )

    @property
    def effective_timeout(self) -> int:
        if self.connection_timeout is None:
            return DEFAULT_CONNECTION_TIMEOUT_MS
        return self.connection_timeout

    @property
    def effective_retry_count(self) -> int:
        if self.rate_limit is None or self.rate_limit.retry_count is None:
            return DEFAULT_RETRY_COUNT
        return self.rate_limit.retry_count

    @property
    def rate_limit_callback(self) -> Optional[RateLimitCallback]:
        return self.rate_limit.callback if self.rate_limit else None


@dataclass
class EncodedBody:
    """Request body after encoding, with the headers it implies."""
    text: str
    content_type: str
    content_length: int


@dataclass
class TransportResult:
    """Raw outcome of one network round trip."""
    status_code: int
    body: Optional[str] = None
    headers: dict = field(default_factory=dict)
