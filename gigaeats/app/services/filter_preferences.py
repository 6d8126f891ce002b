"""Saved order history filters, kept per user and role in Redis."""
from typing import Optional

from gigaeats.app.core.logging import get_logger
from gigaeats.app.services.date_filters import DateRangeFilter, QuickDateFilter

logger = get_logger(__name__)

KEY_PREFIX = "order_history_filter"


class FilterPreferenceService:
    def __init__(self, cache, ttl: int):
        self.cache = cache
        self.ttl = ttl

    @staticmethod
    def _key(role: str, user_id: str, kind: str) -> str:
        return f"{KEY_PREFIX}:{role}:{user_id}:{kind}"

    async def save_quick_filter(self, role: str, user_id: str, quick_filter: QuickDateFilter) -> None:
        await self.cache.set(self._key(role, user_id, "quick"), quick_filter.value, self.ttl)
        logger.info("Saved quick filter", role=role, user_id=user_id, quick_filter=quick_filter.value)

    async def load_quick_filter(self, role: str, user_id: str) -> Optional[QuickDateFilter]:
        """Saved preset, or None if nothing is saved. Unknown names fall back to ALL."""
        value = await self.cache.get(self._key(role, user_id, "quick"))
        if value is None:
            return None
        try:
            return QuickDateFilter(value)
        except ValueError:
            logger.warning("Unknown saved quick filter", role=role, user_id=user_id, value=value)
            return QuickDateFilter.ALL

    async def save_custom_filter(self, role: str, user_id: str, date_filter: DateRangeFilter) -> None:
        await self.cache.set(self._key(role, user_id, "custom"), date_filter.to_dict(), self.ttl)
        logger.info("Saved custom filter", role=role, user_id=user_id, description=date_filter.description)

    async def load_custom_filter(self, role: str, user_id: str) -> Optional[DateRangeFilter]:
        data = await self.cache.get(self._key(role, user_id, "custom"))
        if data is None:
            return None
        try:
            return DateRangeFilter.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding unreadable saved filter", role=role, user_id=user_id, error=str(e))
            await self.cache.delete(self._key(role, user_id, "custom"))
            return None

    async def clear(self, role: str, user_id: str) -> None:
        await self.cache.delete(self._key(role, user_id, "quick"))
        await self.cache.delete(self._key(role, user_id, "custom"))
        logger.info("Cleared saved filters", role=role, user_id=user_id)
