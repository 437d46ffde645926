from typing import Dict, Any, Iterable, Optional
import time
from fastapi import Request
import logging
from collections import defaultdict
from threading import Lock

logger = logging.getLogger(__name__)

class RateLimiter:
    """
    Thread-safe fixed-window rate limiter keyed on the client address.
    """

    def __init__(
        self,
        max_requests: int = 100,
        time_window: int = 900,
        cleanup_interval: int = 3600,
        trusted_proxies: Optional[Iterable[str]] = None
    ):
        """
        Args:
            max_requests (int): Maximum number of requests allowed in the time window
            time_window (int): Time window in seconds
            cleanup_interval (int): How often to clean up expired entries (seconds)
            trusted_proxies: Peer addresses whose X-Forwarded-For header is honored
        """
        if max_requests <= 0 or time_window <= 0:
            raise ValueError("max_requests and time_window must be positive")

        self.max_requests = max_requests
        self.time_window = time_window
        self._buckets: Dict[str, Dict[str, Any]] = defaultdict(dict)
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval
        self.trusted_proxies = frozenset(trusted_proxies or ())
        self._lock = Lock()

    def client_key(self, request: Request) -> str:
        peer = request.client.host if request.client else "unknown"
        if peer not in self.trusted_proxies:
            return peer

        # Walk the proxy chain from the nearest hop; the first untrusted
        # address is the client
        forwarded_for = request.headers.get("X-Forwarded-For", "")
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        for hop in reversed(hops):
            if hop not in self.trusted_proxies:
                return hop
        return peer

    def _cleanup_expired(self, current_time: float) -> None:
        """Remove expired buckets so idle clients do not pile up."""
        if current_time - self._last_cleanup < self._cleanup_interval:
            return

        expired_keys = [
            key for key, bucket in self._buckets.items()
            if bucket.get('reset_time', 0) < current_time
        ]
        for key in expired_keys:
            del self._buckets[key]

        self._last_cleanup = current_time

    def hit(self, key: str) -> bool:
        """
        Count one request for ``key``.

        Returns:
            bool: True if the request is allowed, False if the window is exhausted
        """
        current_time = time.time()

        with self._lock:
            self._cleanup_expired(current_time)
            bucket = self._buckets[key]

            # Start a new window if there is none or the last one has passed
            if not bucket or current_time > bucket['reset_time']:
                bucket.update({
                    'count': 0,
                    'reset_time': current_time + self.time_window,
                })

            if bucket['count'] >= self.max_requests:
                logger.warning(f"Rate limit exceeded for {key}")
                return False

            bucket['count'] += 1
            return True

    def get_limit_headers(self, key: str) -> Dict[str, str]:
        """
        Get rate limit headers for response.
        """
        with self._lock:
            bucket = self._buckets.get(key, {})

            if not bucket:
                return {
                    'X-RateLimit-Limit': str(self.max_requests),
                    'X-RateLimit-Remaining': str(self.max_requests),
                    'X-RateLimit-Reset': str(int(time.time() + self.time_window))
                }

            remaining = max(0, self.max_requests - bucket['count'])

            return {
                'X-RateLimit-Limit': str(self.max_requests),
                'X-RateLimit-Remaining': str(remaining),
                'X-RateLimit-Reset': str(int(bucket['reset_time']))
            }

    def reset(self, key: str) -> None:
        with self._lock:
            self._buckets.pop(key, None)
