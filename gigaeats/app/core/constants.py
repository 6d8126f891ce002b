"""
Shared constants for the order history backend.
"""
from decimal import Decimal

# ---------------------------------------------------------------------------
# Decimal helpers
# ---------------------------------------------------------------------------
ZERO = Decimal("0.00")
ONE_CENT = Decimal("0.01")

# ---------------------------------------------------------------------------
# Calendar names (fixed English tables, independent of process locale)
# ---------------------------------------------------------------------------
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Indexed by date.weekday(): Monday == 0
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
)

# ---------------------------------------------------------------------------
# Order history limits
# ---------------------------------------------------------------------------
# Days back (inclusive) that still get a weekday label instead of a date
WEEKDAY_LABEL_MAX_DAYS = 6
# Ranges longer than this get a performance warning
LARGE_RANGE_WARNING_DAYS = 365
# Page sizes; Settings defaults to these
HISTORY_DEFAULT_LIMIT = 20
HISTORY_MAX_LIMIT = 200
