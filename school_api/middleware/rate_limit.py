# middleware/rate_limit.py
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from school_api.core.errors import RateLimitExceeded
from school_api.core.rate_limiter import RateLimiter
from school_api.core.responses import error_response


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        if request.method == "OPTIONS":
            return await call_next(request)

        key = self.limiter.client_key(request)
        if not self.limiter.hit(key):
            return error_response(RateLimitExceeded(), headers=self.limiter.get_limit_headers(key))

        response = await call_next(request)
        response.headers.update(self.limiter.get_limit_headers(key))
        return response
