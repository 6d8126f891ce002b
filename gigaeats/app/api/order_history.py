from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gigaeats.app.api.deps import get_app_settings, get_cache, get_session, get_today
from gigaeats.app.core.exceptions import to_http_exception
from gigaeats.app.core.logging import get_logger
from gigaeats.app.core.settings import Settings
from gigaeats.app.schemas import (
    DateFilterResponse,
    DayGroupResponse,
    FilterPreferencesBody,
    FilterPreferencesResponse,
    OrderHistoryResponse,
    RollupSummaryResponse,
)
from gigaeats.app.services.date_filters import DateRangeFilter, HistoryStatusFilter, QuickDateFilter
from gigaeats.app.services.filter_preferences import FilterPreferenceService
from gigaeats.app.services.order_history import OrderHistoryError
from gigaeats.app.services.order_history_service import HistoryRole, OrderHistoryService

router = APIRouter()
logger = get_logger(__name__)


def _filter_response(date_filter: DateRangeFilter) -> DateFilterResponse:
    return DateFilterResponse(description=date_filter.description, **date_filter.to_dict())


class HistoryQuery:
    """Query parameters shared by the history endpoints."""

    def __init__(
        self,
        quick_filter: Optional[QuickDateFilter] = Query(None),
        start_date: Optional[date] = Query(None, description="First day, inclusive"),
        end_date: Optional[date] = Query(None, description="Last day, inclusive"),
        status: HistoryStatusFilter = Query(HistoryStatusFilter.ALL),
        limit: Optional[int] = Query(None, ge=1),
        offset: int = Query(0, ge=0),
    ):
        self.quick_filter = quick_filter
        self.start_date = start_date
        self.end_date = end_date
        self.status = status
        self.limit = limit
        self.offset = offset

    def to_filter(self, settings: Settings, today: date) -> DateRangeFilter:
        """An explicit date range wins over a quick filter."""
        limit = self.limit or settings.HISTORY_DEFAULT_LIMIT
        if self.start_date or self.end_date:
            return DateRangeFilter.for_days(
                self.start_date, self.end_date,
                limit=limit, offset=self.offset, status_filter=self.status,
            )
        if self.quick_filter:
            return self.quick_filter.to_date_range(
                today, limit=limit, offset=self.offset, status_filter=self.status,
            )
        return DateRangeFilter(limit=limit, offset=self.offset, status_filter=self.status)


def _service(session: AsyncSession, settings: Settings) -> OrderHistoryService:
    return OrderHistoryService(
        session,
        missing_policy=settings.MISSING_TIMESTAMP_POLICY,
        max_limit=settings.HISTORY_MAX_LIMIT,
    )


@router.get("/{role}/{owner_id}", response_model=OrderHistoryResponse)
async def get_order_history(
    role: HistoryRole,
    owner_id: str,
    query: HistoryQuery = Depends(),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
):
    """Orders grouped by day, with a summary of the page."""
    try:
        date_filter = query.to_filter(settings, today)
        logger.info(
            "Fetching order history",
            role=role.value,
            owner_id=owner_id,
            filter=date_filter.description,
            limit=date_filter.limit,
            offset=date_filter.offset,
        )
        page = await _service(session, settings).history_page(role, owner_id, date_filter, today)
    except OrderHistoryError as e:
        raise to_http_exception(e)

    return OrderHistoryResponse(
        groups=[DayGroupResponse.model_validate(group) for group in page.groups],
        summary=RollupSummaryResponse.model_validate(page.summary),
        has_more=page.has_more,
        filter=_filter_response(date_filter),
    )


@router.get("/{role}/{owner_id}/summary", response_model=RollupSummaryResponse)
async def get_order_history_summary(
    role: HistoryRole,
    owner_id: str,
    query: HistoryQuery = Depends(),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
):
    try:
        summary = await _service(session, settings).summary(role, owner_id, query.to_filter(settings, today), today)
    except OrderHistoryError as e:
        raise to_http_exception(e)
    return RollupSummaryResponse.model_validate(summary)


@router.get("/{role}/{owner_id}/count-by-date", response_model=dict[str, int])
async def get_order_count_by_date(
    role: HistoryRole,
    owner_id: str,
    query: HistoryQuery = Depends(),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
):
    try:
        return await _service(session, settings).count_by_date(role, owner_id, query.to_filter(settings, today), today)
    except OrderHistoryError as e:
        raise to_http_exception(e)


# --- Saved filters ---
@router.get("/{role}/{user_id}/preferences", response_model=FilterPreferencesResponse)
async def get_filter_preferences(
    role: HistoryRole,
    user_id: str,
    cache=Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    service = FilterPreferenceService(cache, settings.FILTER_PREFERENCE_TTL)
    quick_filter = await service.load_quick_filter(role.value, user_id)
    custom_filter = await service.load_custom_filter(role.value, user_id)
    return FilterPreferencesResponse(
        quick_filter=quick_filter,
        custom_filter=_filter_response(custom_filter) if custom_filter else None,
    )


@router.put("/{role}/{user_id}/preferences", response_model=FilterPreferencesResponse)
async def save_filter_preferences(
    role: HistoryRole,
    user_id: str,
    body: FilterPreferencesBody,
    cache=Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    if body.quick_filter is None and body.custom_filter is None:
        raise HTTPException(status_code=422, detail="Nothing to save")

    service = FilterPreferenceService(cache, settings.FILTER_PREFERENCE_TTL)
    custom_filter = None
    if body.quick_filter is not None:
        await service.save_quick_filter(role.value, user_id, body.quick_filter)
    if body.custom_filter is not None:
        try:
            custom_filter = DateRangeFilter.for_days(
                body.custom_filter.start_date,
                body.custom_filter.end_date,
                limit=settings.HISTORY_DEFAULT_LIMIT,
                status_filter=body.custom_filter.status_filter,
            )
        except OrderHistoryError as e:
            raise to_http_exception(e)
        await service.save_custom_filter(role.value, user_id, custom_filter)

    return FilterPreferencesResponse(
        quick_filter=body.quick_filter,
        custom_filter=_filter_response(custom_filter) if custom_filter else None,
    )


@router.delete("/{role}/{user_id}/preferences", status_code=204)
async def clear_filter_preferences(
    role: HistoryRole,
    user_id: str,
    cache=Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    service = FilterPreferenceService(cache, settings.FILTER_PREFERENCE_TTL)
    await service.clear(role.value, user_id)
    return Response(status_code=204)
