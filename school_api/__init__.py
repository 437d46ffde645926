#school_api/__init__.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.database import init_db, close_db, get_db_context
from .core.errors import BaseAPIError, InternalError, ValidationError
from .core.logging import logger
from .core.rate_limiter import RateLimiter
from .core.responses import error_response
from .middleware.auth import AuthMiddleware
from .middleware.rate_limit import RateLimitMiddleware
from .middleware.request_id import RequestIDMiddleware
from .routes import (
    auth_router,
    schools_router,
    classrooms_router,
    students_router,
    users_router,
)
from .services import UserService


def _describe_validation_error(exc: RequestValidationError) -> str:
    """One line naming each offending field, e.g. ``body.schoolId: Field required``"""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}")
    return "Invalid request: " + "; ".join(parts) if parts else "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes and unsupported methods
        error = BaseAPIError(str(exc.detail), status_code=exc.status_code, error_code="HTTP_ERROR")
        return error_response(error, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(ValidationError(_describe_validation_error(exc)))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {str(exc)}",
            exc_info=True,
            extra={"request_id": getattr(request.state, "request_id", None)}
        )
        return error_response(InternalError())


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant registry of schools, classrooms and students",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # Starlette runs the last-added middleware first: CORS, request id,
    # rate limit, then authentication closest to the routes.
    app.add_middleware(AuthMiddleware)
    if settings.RATE_LIMIT_ENABLED:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
                time_window=settings.RATE_LIMIT_TIME_WINDOW,
                trusted_proxies=settings.TRUSTED_PROXIES,
            ),
        )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(schools_router, prefix="/api/schools", tags=["Schools"])
    app.include_router(classrooms_router, prefix="/api/classrooms", tags=["Classrooms"])
    app.include_router(students_router, prefix="/api/students", tags=["Students"])
    app.include_router(users_router, prefix="/api/users", tags=["Users"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "ok": True,
                "data": {"service": settings.APP_NAME},
                "errors": None,
                "message": "healthy",
            }
        )

    @app.on_event("startup")
    async def startup_event():
        await init_db()
        await create_super_admin()
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()
        logger.info("Application shutdown completed")

    return app


async def create_super_admin() -> None:
    """Create the configured superadmin when the store has none"""
    if not settings.SUPER_ADMIN_EMAIL or settings.SUPER_ADMIN_PASSWORD is None:
        logger.info("No bootstrap superadmin configured")
        return

    async with get_db_context() as db:
        await UserService(db).bootstrap_superadmin(
            username=settings.SUPER_ADMIN_USERNAME,
            email=settings.SUPER_ADMIN_EMAIL,
            password=settings.SUPER_ADMIN_PASSWORD.get_secret_value(),
        )
