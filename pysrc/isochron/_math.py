"""Calendar and unit arithmetic on plain integers.

Dates are handled as ``(year, month, day)`` and datetimes as a flat tuple of
``(year, month, day, hour, minute, second, nanosecond)``, so that the public
classes only have to wrap and unwrap these.
"""

from bisect import bisect_right

from ._common import (
    DAYS_IN_4_YEARS,
    DAYS_IN_400_YEARS,
    MAX_YEAR,
    MIN_YEAR,
    NS_PER_MS,
    NS_PER_SEC,
    NS_PER_US,
    YEAR_101_JAN_1,
    YEAR_201_JAN_1,
    YEAR_301_JAN_1,
    InvalidDay,
    InvalidMonth,
    Overflow,
)

YMD = tuple[int, int, int]
Fields = tuple[int, int, int, int, int, int, int]

# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
# 1-indexed days before the first of the month, in a common year
_DAYS_BEFORE_MONTH = [0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334]
# Day within a 4-year block at which each year starts. The first year of
# the block is assumed to be a leap year.
_YEAR_START_IN_BLOCK = (0, 366, 731, 1096)
# Days to add to January 1st to get to the Monday of ISO week 1,
# indexed by the weekday of January 1st.
_WEEK_01_SHIFT = (0, -1, -2, -3, 3, 2, 1)


def is_leap(year: int) -> bool:
    # Astronomical year numbering: this holds for year 0 and negative years too
    if year % 400 == 0:
        return True
    if year % 100 == 0:
        return False
    return year % 4 == 0


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_year(year: int) -> int:
    return 365 + is_leap(year)


def clamp_year(year: int) -> int:
    return min(max(year, MIN_YEAR), MAX_YEAR)


def check_year(year: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise Overflow(f"Year out of range: {year}")
    return year


def check_date(year: int, month: int, day: int) -> YMD:
    check_year(year)
    if not 1 <= month <= 12:
        raise InvalidMonth(f"Month out of range: {month}")
    if not 1 <= day <= days_in_month(year, month):
        raise InvalidDay(f"Day out of range for {year}-{month:02d}: {day}")
    return (year, month, day)


def day_of_year(year: int, month: int, day: int) -> int:
    """The 0-indexed day within the year"""
    return (
        _DAYS_BEFORE_MONTH[month] + day - 1 + (month > 2 and is_leap(year))
    )


def date_from_day_of_year(year: int, day: int) -> YMD:
    if day < 0:
        raise Overflow(f"Day of year out of range: {day}")
    if day < 31:
        return (year, 1, day + 1)

    leap = is_leap(year)
    if day < 59 + leap:
        return (year, 2, day - 30)

    # from here on, the leap day is behind us
    day -= leap
    if day >= 365:
        raise Overflow(f"Year {year} doesn't have {day + leap + 1} days")
    month = bisect_right(_DAYS_BEFORE_MONTH, day) - 1
    return (year, month, day - _DAYS_BEFORE_MONTH[month] + 1)


def day_index(year: int, month: int, day: int) -> int:
    """The number of days since 0000-01-01"""
    period, year_in_period = divmod(year, 400)
    block, year_in_block = divmod(year_in_period, 4)
    days = (
        block * DAYS_IN_4_YEARS
        + _YEAR_START_IN_BLOCK[year_in_block]
        + day_of_year(year, month, day)
    )
    # The blocks treat years 100, 200, and 300 of the period as leap years
    if year_in_period >= 301:
        days -= 3
    elif year_in_period >= 201:
        days -= 2
    elif year_in_period >= 101:
        days -= 1
    return period * DAYS_IN_400_YEARS + days


def date_from_day_index(n: int) -> YMD:
    """Inverse of ``day_index()``. Saturates at the bounds of the year range."""
    period, days = divmod(n, DAYS_IN_400_YEARS)

    # Reinsert the century leap days so that every 4-year block is equal
    if days >= YEAR_301_JAN_1:
        days += 3
    elif days >= YEAR_201_JAN_1:
        days += 2
    elif days >= YEAR_101_JAN_1:
        days += 1

    block, day_in_block = divmod(days, DAYS_IN_4_YEARS)
    if day_in_block < 366:
        year_in_block, day = 0, day_in_block
    else:
        year_in_block, day = divmod(day_in_block - 1, 365)

    year = period * 400 + block * 4 + year_in_block
    if year < MIN_YEAR:
        return (MIN_YEAR, 1, 1)
    elif year > MAX_YEAR:
        return (MAX_YEAR, 12, 31)
    return date_from_day_of_year(year, day)


def weekday_index(day_idx: int) -> int:
    """Monday is 0. Day 0 (0000-01-01) is a Saturday."""
    return (day_idx - 2) % 7


def _week_01_start(jan1_index: int) -> int:
    return jan1_index + _WEEK_01_SHIFT[weekday_index(jan1_index)]


def week_date(year: int, month: int, day: int) -> tuple[int, int, int]:
    """ISO year, week (1-53), and weekday index (Monday=0)"""
    jan1 = day_index(year, 1, 1)
    this_week_01 = _week_01_start(jan1)
    n = jan1 + day_of_year(year, month, day)
    weekday = weekday_index(n)

    if n < this_week_01:
        # December 28th is always in the last week of its year
        prev_year, prev_week, _ = week_date(clamp_year(year - 1), 12, 28)
        return (prev_year, prev_week, weekday)

    dec28 = jan1 + day_of_year(year, 12, 28)
    next_week_01 = dec28 + 7 - weekday_index(dec28)
    if n >= next_week_01:
        return (clamp_year(year + 1), 1, weekday)

    return (year, (n - this_week_01) // 7 + 1, weekday)


def weeks_in_year(year: int) -> int:
    return week_date(year, 12, 28)[1]


def date_from_week_date(year: int, week: int, weekday: int) -> YMD:
    if week < 1 or week > weeks_in_year(year):
        raise Overflow(f"Year {year} doesn't have a week {week}")
    return date_from_day_index(
        _week_01_start(day_index(year, 1, 1)) + (week - 1) * 7 + weekday
    )


def add_unit(f: Fields, unit: str, amount: int) -> Fields:
    """Add an amount of a unit, carrying over into the larger units"""
    if amount == 0:
        return f

    year, month, day, hour, minute, second, nanos = f
    if unit == "years":
        year = clamp_year(year + amount)
        day = min(day, days_in_month(year, month))
    elif unit == "months":
        # truncated division, so the month moves in the same direction
        years = abs(amount) // 12 * (1 if amount > 0 else -1)
        month += amount - years * 12
        if month < 1:
            year = clamp_year(year - 1)
            month += 12
        elif month > 12:
            year = clamp_year(year + 1)
            month -= 12
        year, month, day, *_ = add_unit(
            (year, month, day, hour, minute, second, nanos), "years", years
        )
        day = min(day, days_in_month(year, month))
    elif unit == "days":
        year, month, day = date_from_day_index(
            day_index(year, month, day) + amount
        )
    elif unit == "hours":
        days, hour = divmod(hour + amount, 24)
        return add_unit(
            (year, month, day, hour, minute, second, nanos), "days", days
        )
    elif unit == "minutes":
        hours, minute = divmod(minute + amount, 60)
        return add_unit(
            (year, month, day, hour, minute, second, nanos), "hours", hours
        )
    elif unit == "seconds":
        # a leap second (60) counts as the last second of the minute
        minutes, second = divmod(min(second, 59) + amount, 60)
        return add_unit(
            (year, month, day, hour, minute, second, nanos),
            "minutes",
            minutes,
        )
    elif unit == "milliseconds":
        return add_unit(f, "nanoseconds", amount * NS_PER_MS)
    elif unit == "microseconds":
        return add_unit(f, "nanoseconds", amount * NS_PER_US)
    elif unit == "nanoseconds":
        secs, nanos = divmod(nanos + amount, NS_PER_SEC)
        return add_unit(
            (year, month, day, hour, minute, second, nanos), "seconds", secs
        )
    else:
        raise ValueError(f"Invalid unit: {unit!r}")
    return (year, month, day, hour, minute, second, nanos)
