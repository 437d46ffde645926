from typing import AsyncGenerator, Dict, Any
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from school_api.core.config import settings

# Database URL from settings
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL


def _engine_options() -> Dict[str, Any]:
    """Pool sizing only applies to server databases; SQLite uses its own pool"""
    options: Dict[str, Any] = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=20,              # Maximum number of connections in the pool
            max_overflow=10,           # Connections allowed beyond pool_size
            pool_timeout=30,           # Seconds to wait on pool checkout
            pool_recycle=1800,         # Recycle connections after 30 minutes
        )
    return options


# Create async engine
engine = create_async_engine(SQLALCHEMY_DATABASE_URL, **_engine_options())

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,    # Don't expire objects after commit
    autoflush=False            # Explicit flush management
)

# Create declarative base
Base = declarative_base()

# FastAPI dependency for database sessions
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async database session.
    Usage: db: AsyncSession = Depends(get_db)
    """
    session = AsyncSessionLocal()
    try:
        yield session
    except Exception:
        # Rollback on error
        await session.rollback()
        raise
    finally:
        # Always close the session
        await session.close()

# Context manager for startup tasks and scripts
@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions outside of request context.
    Usage: async with get_db_context() as session:
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

# Database initialization functions
async def init_db() -> None:
    """Initialize database tables"""
    import school_api.models  # noqa: F401  registers every model on Base.metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
