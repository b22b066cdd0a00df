"""Shared rate-limit gate for concurrent dispatches.

Each dispatch retries on its own; this gate is an optional layer a caller
can share between dispatches (via RequestOptions.limiter). It combines a
sliding-window request budget with a global block that the dispatcher sets
when the server reports a global rate limit.
"""

import time
import asyncio
import logging
from collections import deque
from typing import Optional

logger = logging.getLogger(__name__)


class RateLimitGate:
    """Sliding window limiter with a server-driven global block."""

    def __init__(
        self,
        max_requests: Optional[int] = None,
        time_window: Optional[float] = None,
    ):
        """Initializes the gate.

        Args:
            max_requests: Maximum number of requests allowed in the time window.
                None disables the window budget.
            time_window: The time window in seconds.
        """
        if (max_requests is None) != (time_window is None):
            raise ValueError("max_requests and time_window must be given together.")
        if max_requests is not None and (max_requests <= 0 or time_window <= 0):
            raise ValueError("Max requests and time window must be positive.")

        self.max_requests = max_requests
        self.time_window = time_window
        self.timestamps = deque()
        self.blocked_until = 0.0
        self._lock = asyncio.Lock()
        if max_requests is not None:
            logger.info(f"RateLimitGate initialized: {max_requests} requests / {time_window} seconds")
        else:
            logger.info("RateLimitGate initialized without a window budget")

    def _cleanup_timestamps(self) -> None:
        """Removes timestamps older than the time window."""
        now = time.monotonic()
        while self.timestamps and now - self.timestamps[0] > self.time_window:
            self.timestamps.popleft()

    def _compute_wait(self) -> float:
        now = time.monotonic()
        wait_time = max(0.0, self.blocked_until - now)
        if self.max_requests is not None:
            self._cleanup_timestamps()
            if len(self.timestamps) >= self.max_requests:
                window_wait = self.timestamps[0] + self.time_window - now
                wait_time = max(wait_time, window_wait)
        return max(0.0, wait_time)

    def block_for(self, seconds: float) -> None:
        """Holds every waiter until `seconds` from now (never shortens an existing block)."""
        deadline = time.monotonic() + max(0.0, float(seconds))
        if deadline > self.blocked_until:
            self.blocked_until = deadline
            logger.warning(f"Global rate limit: holding requests for {seconds:.3f} seconds.")

    async def wait_for_permission(self) -> None:
        """Waits until a request is permitted."""
        while True:
            async with self._lock:
                wait_time = self._compute_wait()
                if wait_time <= 0:
                    if self.max_requests is not None:
                        self.timestamps.append(time.monotonic())
                    logger.debug("Rate limit permission granted.")
                    return

            logger.debug(f"Rate limit gate closed. Waiting for {wait_time:.2f} seconds.")
            await asyncio.sleep(wait_time)
            # Loop again to re-check condition after waiting

    async def get_wait_time(self) -> float:
        """Estimates the time needed before the next request can be made."""
        async with self._lock:
            return self._compute_wait()
