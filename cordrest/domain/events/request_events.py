"""Domain Events emitted while a request is dispatched.

Covers the request leaving, a response arriving, a rate-limit retry being
scheduled, and a dispatch failing definitively.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class RequestDispatched(DomainEvent):
    """Event triggered right before a round trip is attempted."""
    method: str
    path: str
    attempt: int = 0
    timestamp: float = field(default_factory=time.time)


@dataclass
class ResponseReceived(DomainEvent):
    """Event triggered when the transport returns a status code."""
    method: str
    path: str
    status_code: int
    latency_ms: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RateLimitRetryScheduled(DomainEvent):
    """Event triggered when a 429 leads to a delayed retry."""
    method: str
    path: str
    attempt_number: int
    delay_seconds: float
    is_global: bool = False
    timestamp: float = field(default_factory=time.time)


@dataclass
class RequestFailed(DomainEvent):
    """Event triggered when a dispatch fails definitively."""
    method: str
    path: str
    error_type: str
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)
