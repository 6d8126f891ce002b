"""
Date range and status filters for order history queries.

All ranges are half-open: start_date <= anchor < end_date.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from gigaeats.app.core.constants import HISTORY_DEFAULT_LIMIT, LARGE_RANGE_WARNING_DAYS
from gigaeats.app.core.date_labels import format_month_day
from gigaeats.app.models.order import OrderStatus
from gigaeats.app.services.order_history import InvalidFilterError


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


class HistoryStatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def statuses(self) -> frozenset:
        """Statuses the filter admits; empty means no constraint."""
        return STATUS_FILTER_STATUSES[self]


STATUS_FILTER_STATUSES = {
    HistoryStatusFilter.ALL: frozenset(),
    HistoryStatusFilter.ACTIVE: frozenset(s for s in OrderStatus if s.is_active),
    HistoryStatusFilter.COMPLETED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    HistoryStatusFilter.DELIVERED: frozenset({OrderStatus.DELIVERED}),
    HistoryStatusFilter.CANCELLED: frozenset({OrderStatus.CANCELLED}),
}


@dataclass(frozen=True)
class FilterValidationResult:
    errors: tuple = ()
    warnings: tuple = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class DateRangeFilter:
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = HISTORY_DEFAULT_LIMIT
    offset: int = 0
    status_filter: HistoryStatusFilter = HistoryStatusFilter.ALL

    @classmethod
    def for_days(
        cls,
        first_day: Optional[date] = None,
        last_day: Optional[date] = None,
        **kwargs,
    ) -> "DateRangeFilter":
        """Filter covering whole calendar days, both ends inclusive."""
        if last_day is not None and last_day >= date.max:
            raise InvalidFilterError(f"End date must be before {date.max.isoformat()}")
        return cls(
            start_date=start_of_day(first_day) if first_day else None,
            end_date=start_of_day(last_day + timedelta(days=1)) if last_day else None,
            **kwargs,
        )

    @property
    def has_active_filter(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    @property
    def description(self) -> str:
        if not self.has_active_filter:
            return "All Orders"
        if self.start_date and self.end_date:
            days = max((self.end_date - self.start_date).days, 1)
            return f"Custom range ({days} day{'' if days == 1 else 's'})"
        if self.start_date:
            return f"From {format_month_day(self.start_date.date())}"
        # Half-open: the last included day is the one before end_date
        last_day = (self.end_date - timedelta(microseconds=1)).date()
        return f"Until {format_month_day(last_day)}"

    def validate(self, today: Optional[date] = None) -> FilterValidationResult:
        errors = []
        warnings = []

        if self.start_date and self.end_date:
            if self.start_date > self.end_date:
                errors.append("Start date cannot be after end date")
            elif (self.end_date - self.start_date).days > LARGE_RANGE_WARNING_DAYS:
                warnings.append(
                    f"Date range is very large ({(self.end_date - self.start_date).days} days). "
                    "This may affect performance."
                )

        if today is not None and self.start_date and self.start_date.date() > today:
            warnings.append("Start date is in the future")

        if self.limit <= 0:
            errors.append("Limit must be positive")
        if self.offset < 0:
            errors.append("Offset cannot be negative")

        return FilterValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "limit": self.limit,
            "offset": self.offset,
            "status_filter": self.status_filter.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DateRangeFilter":
        return cls(
            start_date=_parse_datetime(data.get("start_date")),
            end_date=_parse_datetime(data.get("end_date")),
            limit=int(data.get("limit", HISTORY_DEFAULT_LIMIT)),
            offset=int(data.get("offset", 0)),
            status_filter=HistoryStatusFilter(data.get("status_filter", HistoryStatusFilter.ALL.value)),
        )


def _month_start(year: int, month: int) -> date:
    # month may be 0 (December of the previous year)
    if month < 1:
        return date(year - 1, 12 + month, 1)
    return date(year, month, 1)


class QuickDateFilter(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    THIS_YEAR = "this_year"
    LAST_YEAR = "last_year"
    ALL = "all"

    @property
    def display_name(self) -> str:
        return QUICK_FILTER_DISPLAY_NAMES[self]

    def day_bounds(self, today: date) -> tuple[Optional[date], Optional[date]]:
        """(first day, first day after the range) for this preset, weeks starting Monday."""
        tomorrow = today + timedelta(days=1)
        week_start = today - timedelta(days=today.weekday())

        if self is QuickDateFilter.TODAY:
            return today, tomorrow
        if self is QuickDateFilter.YESTERDAY:
            return today - timedelta(days=1), today
        if self is QuickDateFilter.THIS_WEEK:
            return week_start, tomorrow
        if self is QuickDateFilter.LAST_WEEK:
            return week_start - timedelta(days=7), week_start
        if self is QuickDateFilter.THIS_MONTH:
            return _month_start(today.year, today.month), tomorrow
        if self is QuickDateFilter.LAST_MONTH:
            return _month_start(today.year, today.month - 1), _month_start(today.year, today.month)
        if self in QUICK_FILTER_TRAILING_DAYS:
            return today - timedelta(days=QUICK_FILTER_TRAILING_DAYS[self]), tomorrow
        if self is QuickDateFilter.THIS_YEAR:
            return date(today.year, 1, 1), tomorrow
        if self is QuickDateFilter.LAST_YEAR:
            return date(today.year - 1, 1, 1), date(today.year, 1, 1)
        return None, None

    def to_date_range(self, today: date, **kwargs) -> DateRangeFilter:
        start, end = self.day_bounds(today)
        return DateRangeFilter(
            start_date=start_of_day(start) if start else None,
            end_date=start_of_day(end) if end else None,
            **kwargs,
        )


QUICK_FILTER_DISPLAY_NAMES = {
    QuickDateFilter.TODAY: "Today",
    QuickDateFilter.YESTERDAY: "Yesterday",
    QuickDateFilter.THIS_WEEK: "This Week",
    QuickDateFilter.LAST_WEEK: "Last Week",
    QuickDateFilter.THIS_MONTH: "This Month",
    QuickDateFilter.LAST_MONTH: "Last Month",
    QuickDateFilter.LAST_7_DAYS: "Last 7 Days",
    QuickDateFilter.LAST_30_DAYS: "Last 30 Days",
    QuickDateFilter.LAST_90_DAYS: "Last 90 Days",
    QuickDateFilter.THIS_YEAR: "This Year",
    QuickDateFilter.LAST_YEAR: "Last Year",
    QuickDateFilter.ALL: "All Time",
}

QUICK_FILTER_TRAILING_DAYS = {
    QuickDateFilter.LAST_7_DAYS: 7,
    QuickDateFilter.LAST_30_DAYS: 30,
    QuickDateFilter.LAST_90_DAYS: 90,
}
