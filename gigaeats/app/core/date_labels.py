"""
Display labels for order history day headers.

Labels are relative to the `today` the caller passes in, so a long-running
process crosses midnight correctly and tests can pin the date. Nothing here
is cached.
"""
from datetime import date

from gigaeats.app.core.constants import (
    MONTH_ABBREVIATIONS,
    WEEKDAY_NAMES,
    WEEKDAY_LABEL_MAX_DAYS,
)


def format_month_day(day: date) -> str:
    """'Jan 15'"""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def format_month_day_year(day: date) -> str:
    """'Jan 15, 2024'"""
    return f"{format_month_day(day)}, {day.year}"


def format_day_label(day: date, today: date) -> str:
    """
    Label a calendar day relative to today.

    First match wins:
      - today                      -> "Today"
      - the day before             -> "Yesterday"
      - 2..6 days ago              -> weekday name ("Monday")
      - same calendar year         -> "Jan 15"
      - anything else              -> "Jan 15, 2024"

    Days in the future skip the relative rules and get a date.
    """
    days_ago = (today - day).days
    if days_ago == 0:
        return "Today"
    if days_ago == 1:
        return "Yesterday"
    if 2 <= days_ago <= WEEKDAY_LABEL_MAX_DAYS:
        return WEEKDAY_NAMES[day.weekday()]
    if day.year == today.year:
        return format_month_day(day)
    return format_month_day_year(day)


def format_full_date(day: date) -> str:
    """Long header form: 'Monday, Jan 15, 2024'."""
    return f"{WEEKDAY_NAMES[day.weekday()]}, {format_month_day_year(day)}"
