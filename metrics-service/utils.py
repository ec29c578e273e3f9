"""
Server Metrics Recorder - Uptime Utilities

Breaks a process uptime into coarse calendar units and formats it.
"""

from typing import NamedTuple

SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
DAYS_PER_MONTH = 31
DAYS_PER_YEAR = 52 * 7


class UptimeBreakdown(NamedTuple):
    years: int
    months: int
    days: int
    hours: int
    minutes: int
    seconds: int


def breakdown_uptime(total_seconds: float) -> UptimeBreakdown:
    """
    Decompose an uptime into years, months, days, hours, minutes and seconds.

    The constants are intentionally approximate: 31-day months and
    52-week (364-day) years. They are not calendar accurate.

    Args:
        total_seconds: Elapsed seconds, fractions are floored

    Returns:
        UptimeBreakdown with every unit carried into the next
    """
    remaining = max(int(total_seconds), 0)

    remaining, seconds = divmod(remaining, SECONDS_PER_MINUTE)
    remaining, minutes = divmod(remaining, MINUTES_PER_HOUR)
    total_days, hours = divmod(remaining, HOURS_PER_DAY)

    years, days_in_year = divmod(total_days, DAYS_PER_YEAR)
    months, days = divmod(days_in_year, DAYS_PER_MONTH)

    return UptimeBreakdown(years, months, days, hours, minutes, seconds)


def format_uptime(total_seconds: float) -> str:
    """
    Format an uptime as "Y Years, M Months, D Days, h Hours, m Min, s Sec".
    """
    b = breakdown_uptime(total_seconds)
    return (
        f"{b.years} Years, {b.months} Months, {b.days} Days, "
        f"{b.hours} Hours, {b.minutes} Min, {b.seconds} Sec"
    )
