# storefront/database.py
import os
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Use DATABASE_URL env var when available (makes containerized runs configurable)
# Fallback to a sensible default pointing to the compose Postgres service.
DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    "postgresql+asyncpg://postgres:postgres@db:5432/storefront_db",
)
SQL_ECHO = os.environ.get("SQL_ECHO", "0") == "1"

# Base declarative
Base = declarative_base()


def build_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO) -> AsyncEngine:
    kwargs = {"echo": echo, "future": True}
    # in-memory sqlite lives inside a single connection; share it across sessions
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":")):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_async_engine(url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    # session factory is owned by the application (see main.create_app)
    async_session_maker = request.app.state.session_maker
    async with async_session_maker() as session:
        yield session
