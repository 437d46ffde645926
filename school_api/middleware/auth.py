from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from school_api.core.errors import AuthenticationError
from school_api.core.logging import logger
from school_api.core.permissions import resolve_scope
from school_api.core.responses import error_response
from school_api.core.security import TokenHandler, TokenType


class AuthMiddleware(BaseHTTPMiddleware):
    """Verify the bearer token before any route runs.

    On success the claims and the derived Scope are stored on
    ``request.state``; on failure the request ends here with a 401.
    """

    def __init__(self, app):
        super().__init__(app)
        self.exclude_paths = {
            '/health',
            '/api/auth/login',
            '/api/auth/refresh',
            '/api/docs',
            '/api/redoc',
            '/openapi.json'
        }

    def _extract_token(self, request: Request) -> str | None:
        """Extract token from the Authorization header"""
        auth_header = request.headers.get('Authorization')
        if auth_header and auth_header.startswith('Bearer '):
            token = auth_header[len('Bearer '):].strip()
            return token or None
        return None

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        # Skip middleware for excluded paths and CORS preflight
        if request.method == "OPTIONS" or request.url.path in self.exclude_paths:
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            logger.warning(f"No authentication token provided for {request.method} {request.url.path}")
            return error_response(AuthenticationError("Authentication required"))

        try:
            token_payload = TokenHandler.verify_token(token, TokenType.ACCESS)
            scope = resolve_scope(token_payload)
        except AuthenticationError as auth_err:
            logger.warning(f"Authentication failed: {auth_err.message}")
            return error_response(auth_err)

        request.state.token_payload = token_payload
        request.state.scope = scope
        request.state.user_id = scope.user_id

        return await call_next(request)
