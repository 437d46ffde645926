"""Unit tests for the fixed-window rate limiter."""

from typing import Optional
from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from school_api.core.rate_limiter import RateLimiter
from school_api.middleware.rate_limit import RateLimitMiddleware


class TestRateLimiter:
    """Tests for window accounting."""

    def test_rejects_invalid_configuration(self) -> None:
        with pytest.raises(ValueError):
            RateLimiter(max_requests=0)

    def test_allows_up_to_the_limit(self) -> None:
        limiter = RateLimiter(max_requests=2, time_window=60)

        assert limiter.hit("10.0.0.1")
        assert limiter.hit("10.0.0.1")
        assert not limiter.hit("10.0.0.1")

    def test_clients_are_counted_separately(self) -> None:
        limiter = RateLimiter(max_requests=1, time_window=60)

        assert limiter.hit("10.0.0.1")
        assert limiter.hit("10.0.0.2")

    def test_window_resets(self) -> None:
        limiter = RateLimiter(max_requests=1, time_window=60)

        with patch("school_api.core.rate_limiter.time.time", return_value=1000.0):
            assert limiter.hit("10.0.0.1")
            assert not limiter.hit("10.0.0.1")
        with patch("school_api.core.rate_limiter.time.time", return_value=1061.0):
            assert limiter.hit("10.0.0.1")

    def test_headers_report_remaining(self) -> None:
        limiter = RateLimiter(max_requests=3, time_window=60)
        limiter.hit("10.0.0.1")

        headers = limiter.get_limit_headers("10.0.0.1")

        assert headers["X-RateLimit-Limit"] == "3"
        assert headers["X-RateLimit-Remaining"] == "2"

    def test_reset_clears_client(self) -> None:
        limiter = RateLimiter(max_requests=1, time_window=60)
        limiter.hit("10.0.0.1")

        limiter.reset("10.0.0.1")

        assert limiter.hit("10.0.0.1")


def _request(peer: str, forwarded_for: Optional[str] = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded_for.encode())] if forwarded_for else []
    return Request({"type": "http", "headers": headers, "client": (peer, 50000)})


class TestClientKey:
    """Tests for picking the address a client is counted under."""

    def test_forwarded_header_ignored_from_untrusted_peer(self) -> None:
        limiter = RateLimiter()

        assert limiter.client_key(_request("203.0.113.5", "1.2.3.4")) == "203.0.113.5"

    def test_forwarded_header_honored_behind_trusted_proxy(self) -> None:
        limiter = RateLimiter(trusted_proxies=["10.0.0.2"])

        assert limiter.client_key(_request("10.0.0.2", "198.51.100.7")) == "198.51.100.7"

    def test_spoofed_hops_before_the_proxy_are_skipped(self) -> None:
        """Test that only the hop appended by the trusted proxy counts."""
        limiter = RateLimiter(trusted_proxies=["10.0.0.2"])

        key = limiter.client_key(_request("10.0.0.2", "6.6.6.6, 198.51.100.7"))

        assert key == "198.51.100.7"

    def test_trusted_proxy_without_header_is_the_client(self) -> None:
        limiter = RateLimiter(trusted_proxies=["10.0.0.2"])

        assert limiter.client_key(_request("10.0.0.2")) == "10.0.0.2"


class TestRateLimitMiddleware:
    """Tests for the 429 response."""

    async def test_exceeding_the_limit_returns_429_envelope(self) -> None:
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, limiter=RateLimiter(max_requests=2, time_window=60))

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            first = await client.get("/ping")
            await client.get("/ping")
            third = await client.get("/ping")

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert third.status_code == 429
        body = third.json()
        assert body["ok"] is False
        assert body["data"] is None
        assert body["errors"] == body["message"]

    async def test_rotating_forwarded_header_does_not_escape_the_limit(self) -> None:
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, limiter=RateLimiter(max_requests=1, time_window=60))

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            first = await client.get("/ping", headers={"X-Forwarded-For": "1.1.1.1"})
            second = await client.get("/ping", headers={"X-Forwarded-For": "2.2.2.2"})

        assert first.status_code == 200
        assert second.status_code == 429
