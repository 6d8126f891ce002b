# gigaeats/app/services/__init__.py
"""
Services layer for business logic.
Keeps API endpoints thin and business logic testable and reusable.
"""

from gigaeats.app.services.order_history import (
    AnchorField,
    DayGroup,
    MissingTimestampPolicy,
    OrderHistoryError,
    MissingTimestampError,
    InvalidFilterError,
    build_day_groups,
    count_by_date,
    day_key,
)
from gigaeats.app.services.order_stats import (
    GroupStats,
    RollupSummary,
    compute_group_stats,
    summarize,
)
from gigaeats.app.services.date_filters import (
    DateRangeFilter,
    FilterValidationResult,
    HistoryStatusFilter,
    QuickDateFilter,
)
from gigaeats.app.services.order_history_service import (
    HistoryPage,
    HistoryRole,
    OrderHistoryService,
)
from gigaeats.app.services.filter_preferences import FilterPreferenceService
from gigaeats.app.services.cache import CacheService

__all__ = [
    # Day grouping
    "AnchorField",
    "DayGroup",
    "MissingTimestampPolicy",
    "OrderHistoryError",
    "MissingTimestampError",
    "InvalidFilterError",
    "build_day_groups",
    "count_by_date",
    "day_key",
    # Statistics
    "GroupStats",
    "RollupSummary",
    "compute_group_stats",
    "summarize",
    # Filters
    "DateRangeFilter",
    "FilterValidationResult",
    "HistoryStatusFilter",
    "QuickDateFilter",
    # History service
    "HistoryPage",
    "HistoryRole",
    "OrderHistoryService",
    # Preferences
    "FilterPreferenceService",
    # Cache service
    "CacheService",
]
