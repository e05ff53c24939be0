from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base

from .settings import DATABASE_URL, SQL_ECHO

Base = declarative_base()


def build_engine(url: str = DATABASE_URL, **kwargs) -> AsyncEngine:
    kwargs.setdefault("echo", SQL_ECHO)
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
