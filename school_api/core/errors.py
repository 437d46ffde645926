from typing import Any, Dict, Optional
from fastapi import status


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(status_code={self.status_code}, message={self.message!r})>"

class ValidationError(BaseAPIError):
    """Raised when input is missing or malformed"""
    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_FAILED",
            details=details
        )

class AuthenticationError(BaseAPIError):
    """Raised when a credential is missing, invalid or expired"""
    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "UNAUTHENTICATED",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            details=details
        )

class InvalidCredentialsException(AuthenticationError):
    """Raised when login credentials are invalid"""
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")

class TokenError(AuthenticationError):
    """Raised when there's a token-related error"""
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message=message, error_code="TOKEN_ERROR")

class PermissionDenied(BaseAPIError):
    """Raised when the caller's role is insufficient"""
    def __init__(
        self,
        message: str = "Forbidden: insufficient permissions",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
            details=details
        )

class NotFoundError(BaseAPIError):
    """Raised when an entity is missing or outside the caller's scope"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details
        )

class ConflictError(BaseAPIError):
    """Raised when a write would violate a uniqueness rule"""
    def __init__(
        self,
        message: str = "Resource already exists",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details=details
        )

class RateLimitExceeded(BaseAPIError):
    """Raised when rate limit is exceeded"""
    def __init__(
        self,
        message: str = "Too many requests, please try again later.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="RATE_LIMIT_EXCEEDED",
            details=details
        )

class InternalError(BaseAPIError):
    """Raised for unexpected failures; the message shown to callers is generic"""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message)


def error_envelope(error: BaseAPIError) -> Dict[str, Any]:
    """Render an error in the uniform response envelope"""
    return {
        "ok": False,
        "data": None,
        "errors": error.message,
        "message": error.message,
    }
