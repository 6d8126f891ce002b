from datetime import date, datetime
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from gigaeats.app.core.settings import Settings
from gigaeats.app.services.cache import CacheService


# Per-request database session from the factory built at startup
async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.sessionmaker() as session:
        yield session


# Cache service over the shared Redis client
async def get_cache(request: Request) -> AsyncGenerator[CacheService, None]:
    yield CacheService(request.app.state.redis)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# "Today" in the store time zone; tests override this dependency
def get_today(request: Request) -> date:
    return datetime.now(request.app.state.settings.tzinfo).date()
