"""Pytest configuration and shared fixtures.

Settings are read once at import time, so the environment is prepared here
before anything from ``school_api`` is imported.

Every test gets its own in-memory SQLite database. HTTP tests drive the
application in-process and share that database through an overridden
``get_db`` dependency.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("LOG_DIR", None)
os.environ.pop("SUPER_ADMIN_EMAIL", None)
os.environ.pop("SUPER_ADMIN_PASSWORD", None)

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any, Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from school_api import create_app  # noqa: E402
from school_api.core.database import get_db  # noqa: E402
from school_api.core.permissions import Scope  # noqa: E402
from school_api.core.security import create_access_token  # noqa: E402
from school_api.models import Base, User  # noqa: E402
from school_api.schemas.user.role import UserRoleEnum  # noqa: E402
from school_api.services import (  # noqa: E402
    ClassroomService,
    SchoolService,
    StudentService,
    UserService,
)

SUPERADMIN_EMAIL = "root@registry.edu"
SUPERADMIN_PASSWORD = "superpass123"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine():
    """A private in-memory database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(session_factory):
    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client



# =============================================================================
# Identity Fixtures
# =============================================================================


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build a bearer header carrying an access token for a user."""

    def build(user: User) -> dict[str, str]:
        token = create_access_token(user.id, user.role.value, user.school_id)
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def superadmin(db_session: AsyncSession) -> User:
    return await UserService(db_session).bootstrap_superadmin(
        username="root",
        email=SUPERADMIN_EMAIL,
        password=SUPERADMIN_PASSWORD,
    )


@pytest.fixture
def superadmin_headers(superadmin: User, headers_for) -> dict[str, str]:
    return headers_for(superadmin)


@pytest.fixture
def superadmin_scope(superadmin: User) -> Scope:
    return Scope(role=UserRoleEnum.SUPERADMIN, user_id=superadmin.id)


@pytest.fixture
def admin_scope() -> Callable[[int], Scope]:
    """Scope of a school_admin pinned to the given school."""

    def build(school_id: int, user_id: int = 99) -> Scope:
        return Scope(role=UserRoleEnum.SCHOOL_ADMIN, school_id=school_id, user_id=user_id)

    return build


# =============================================================================
# Tenant Fixtures
# =============================================================================


class TenantFactory:
    """Creates schools, classrooms and students through the services."""

    def __init__(self, session: AsyncSession, scope: Scope):
        self.session = session
        self.scope = scope

    async def school(self, name: str, **fields: Any):
        data = {"name": name, "address": f"{name} Road 1", **fields}
        result = await SchoolService(self.session).create_school(self.scope, data)
        assert result.ok, result.message
        return result.data

    async def classroom(self, school_id: int, name: str, capacity: int = 30, **fields: Any):
        result = await ClassroomService(self.session).create_classroom(
            self.scope, name=name, capacity=capacity, school_id=school_id, **fields
        )
        assert result.ok, result.message
        return result.data

    async def student(self, school_id: int, email: str, **fields: Any):
        result = await StudentService(self.session).create_student(
            self.scope,
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", "Student"),
            email=email,
            school_id=school_id,
            **fields,
        )
        assert result.ok, result.message
        return result.data

    async def school_admin(self, school_id: int, username: str, email: str, password: str = "adminpass123") -> User:
        result = await UserService(self.session).register(
            self.scope,
            username=username,
            email=email,
            password=password,
            role=UserRoleEnum.SCHOOL_ADMIN,
            school_id=school_id,
        )
        assert result.ok, result.message
        return result.data


@pytest.fixture
def tenants(db_session: AsyncSession, superadmin_scope: Scope) -> TenantFactory:
    return TenantFactory(db_session, superadmin_scope)


@pytest.fixture
async def greenwood(tenants: TenantFactory):
    return await tenants.school("Greenwood")


@pytest.fixture
async def oakdale(tenants: TenantFactory):
    return await tenants.school("Oakdale")


@pytest.fixture
async def greenwood_admin(tenants: TenantFactory, greenwood) -> User:
    return await tenants.school_admin(greenwood.id, "greenwood_admin", "admin@greenwood.edu")


@pytest.fixture
async def oakdale_admin(tenants: TenantFactory, oakdale) -> User:
    return await tenants.school_admin(oakdale.id, "oakdale_admin", "admin@oakdale.edu")
