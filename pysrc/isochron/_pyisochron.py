# The MIT License (MIT)
#
# Copyright (c) the isochron authors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - All public classes live in this file. They 'know' about each other
#   (Date.at() creates a DateTime, DateTime.date() creates a Date, etc.),
#   which would otherwise lead to circular imports.
# - The calendar arithmetic and the ISO 8601 scanner work on plain integers
#   and live in _math.py and _parse.py. The classes here only validate,
#   wrap, and unwrap.
# - Years are bounded by a signed 64-bit integer. Arithmetic saturates at
#   these bounds instead of raising.
from __future__ import annotations

__version__ = "0.1.0"

import enum
from datetime import date as _date, datetime as _datetime, time as _time
from struct import pack, unpack
from time import time_ns
from typing import (
    TYPE_CHECKING,
    ClassVar,
    NamedTuple,
    Optional,
    Union,
    no_type_check,
)

from . import _math, _parse
from ._common import (
    MAX_YEAR,
    MIN_YEAR,
    NS_PER_MS,
    NS_PER_SEC,
    NS_PER_US,
    SECS_PER_DAY,
    BufferTooLarge,
    ConflictingDateType,
    ConflictingFormat,
    EndOfBuffer,
    InvalidCharacter,
    InvalidDay,
    InvalidLength,
    InvalidMonth,
    Overflow,
    ParseError,
)

__all__ = [
    # Date and time
    "Date",
    "Time",
    "DateTime",
    "WeekDate",
    # Time zones
    "TimeZone",
    "UtcOffset",
    "Sign",
    "UTC",
    # Arithmetic
    "Unit",
    # Exceptions
    "InvalidMonth",
    "InvalidDay",
    "Overflow",
    "ParseError",
    "InvalidCharacter",
    "InvalidLength",
    "EndOfBuffer",
    "BufferTooLarge",
    "ConflictingFormat",
    "ConflictingDateType",
    # Constants
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "Weekday",
]


class Weekday(enum.Enum):
    """The days of the week; ``.value`` counts from Monday (0) to Sunday (6)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    def add(self, days: int, /) -> Weekday:
        """The weekday the given number of days later (earlier if negative)

        Example
        -------
        >>> Weekday.SUNDAY.add(1)
        Weekday.MONDAY
        >>> Weekday.MONDAY.add(-2)
        Weekday.SATURDAY
        """
        return Weekday((self.value + days) % 7)


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY


class Sign(enum.Enum):
    """The sign of a UTC offset"""

    POSITIVE = "+"
    NEGATIVE = "-"


class Unit(enum.Enum):
    """The units accepted by :meth:`DateTime.add` and :meth:`Date.add`.

    The string values may be passed instead of the members.
    """

    YEARS = "years"
    MONTHS = "months"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"


# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_UNIX_EPOCH_DAY_INDEX = _math.day_index(1970, 1, 1)


def _unit_name(unit: Union[Unit, str]) -> str:
    try:
        return Unit(unit).value
    except ValueError:
        raise ValueError(f"Invalid unit: {unit!r}") from None


def _check_int(value: object, name: str) -> int:
    if type(value) is not int:
        raise TypeError(f"{name} must be an int, got {type(value)!r}")
    return value


def _format_year(year: int) -> str:
    if year > 9999:
        return f"+{year:04d}"
    elif year < 0:
        return f"-{-year:04d}"
    return f"{year:04d}"


def _format_nanos(nanos: int, precision: Optional[int]) -> str:
    if precision is None:
        return f".{nanos:09d}".rstrip("0") if nanos else ""
    elif not 0 <= precision <= 9:
        raise ValueError(f"precision must be in the range 0-9, got {precision}")
    return f".{nanos:09d}"[: precision + 1] if precision else ""


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


class WeekDate(NamedTuple):
    """A date expressed as ISO year, week number, and weekday.

    Obtained from :meth:`Date.week_date`. Note that the ISO year
    may differ from the calendar year around new year.

    Example
    -------
    >>> Date(2010, 1, 3).week_date()
    WeekDate(2009-W53-7)
    """

    year: int
    week: int
    day: Weekday

    def to_date(self) -> Date:
        """Convert back to a calendar date.

        Raises :class:`Overflow` if the year doesn't have this many weeks.
        """
        return Date.from_week_date(self.year, self.week, self.day)

    def format_iso(self) -> str:
        """Format as ``YYYY-Www-D``

        Example
        -------
        >>> Date(2023, 5, 15).week_date().format_iso()
        '2023-W20-1'
        """
        return f"{_format_year(self.year)}-W{self.week:02d}-{self.day.value + 1}"

    def __str__(self) -> str:
        return self.format_iso()

    def __repr__(self) -> str:
        return f"WeekDate({self})"


@final
class Date(_ImmutableBase):
    """A date in the proleptic Gregorian calendar.

    Years use astronomical numbering: there is a year 0, and year -1
    is the year before it. Any year in the signed 64-bit range is allowed.

    Example
    -------
    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)
    """

    __slots__ = ("_year", "_month", "_day")

    MIN: ClassVar[Date]
    """The minimum possible date"""
    MAX: ClassVar[Date]
    """The maximum possible date"""
    UNIX_EPOCH: ClassVar[Date]
    """1970-01-01"""

    def __init__(self, year: int, month: int, day: int) -> None:
        self._year, self._month, self._day = _math.check_date(year, month, day)

    @classmethod
    def unchecked(cls, year: int, month: int, day: int) -> Date:
        """Create a date from values that are already known to be valid.

        Important
        ---------
        Only use this with trusted input. Validity is only checked
        with ``assert`` statements, which don't run with ``python -O``.
        Use the regular constructor for anything else.
        """
        assert 1 <= month <= 12, "month must be in the range 1-12"
        assert (
            1 <= day <= _math.days_in_month(year, month)
        ), "day doesn't exist in this month"
        return cls._new(year, month, day)

    @classmethod
    def from_day_index(cls, n: int, /) -> Date:
        """Create from the number of days since 0000-01-01.

        Inverse of :meth:`day_index`. Saturates at :attr:`MIN` and :attr:`MAX`.

        Example
        -------
        >>> Date.from_day_index(719_528)
        Date(1970-01-01)
        """
        return cls._new(*_math.date_from_day_index(_check_int(n, "day index")))

    @classmethod
    def from_day_of_year(cls, year: int, day: int, /) -> Date:
        """Create from the 0-indexed day of the year.

        Inverse of :meth:`day_of_year`. Raises :class:`Overflow`
        if the year doesn't have that many days.

        Example
        -------
        >>> Date.from_day_of_year(2024, 59)
        Date(2024-02-29)
        """
        return cls._new(
            *_math.date_from_day_of_year(
                _math.check_year(year), _check_int(day, "day")
            )
        )

    @classmethod
    def from_week_date(
        cls, year: int, week: int, weekday: Weekday, /
    ) -> Date:
        """Create from an ISO week date.

        Inverse of :meth:`week_date`. Raises :class:`Overflow`
        if the year doesn't have that many weeks.

        Example
        -------
        >>> Date.from_week_date(2009, 53, Weekday.SUNDAY)
        Date(2010-01-03)
        """
        return cls._new(
            *_math.date_from_week_date(
                _math.check_year(year),
                _check_int(week, "week"),
                Weekday(weekday).value,
            )
        )

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    def is_leap_year(self) -> bool:
        return _math.is_leap(self._year)

    def days_in_month(self) -> int:
        return _math.days_in_month(self._year, self._month)

    def days_in_year(self) -> int:
        return _math.days_in_year(self._year)

    def day_of_year(self) -> int:
        """The 0-indexed day of the year: January 1st is 0, February 1st is 31.

        Example
        -------
        >>> Date(2021, 3, 1).day_of_year()
        59
        """
        return _math.day_of_year(self._year, self._month, self._day)

    def day_index(self) -> int:
        """The number of days since 0000-01-01, which is day 0.

        Example
        -------
        >>> Date(1970, 1, 1).day_index()
        719528
        """
        return _math.day_index(self._year, self._month, self._day)

    def day_of_week(self) -> Weekday:
        """The day of the week

        Example
        -------
        >>> Date(2023, 5, 14).day_of_week()
        Weekday.SUNDAY
        """
        return Weekday(_math.weekday_index(self.day_index()))

    def week_date(self) -> WeekDate:
        """The ISO week date: year, week number, and weekday.

        Example
        -------
        >>> Date(2008, 12, 29).week_date()
        WeekDate(2009-W01-1)
        """
        year, week, weekday = _math.week_date(
            self._year, self._month, self._day
        )
        return WeekDate(year, week, Weekday(weekday))

    def add(self, unit: Union[Unit, str], amount: int, /) -> Date:
        """Add an amount of the given unit.

        Time units are carried over into days, so adding 36 hours
        moves the date by one day. If the day doesn't exist in the
        resulting month, it's clamped to the last day of that month.

        Example
        -------
        >>> Date(2021, 1, 31).add(Unit.MONTHS, 1)
        Date(2021-02-28)
        >>> Date(1970, 1, 1).add("hours", 36)
        Date(1970-01-02)
        """
        return self.at(Time.MIDNIGHT).add(unit, amount).date()

    def subtract(self, unit: Union[Unit, str], amount: int, /) -> Date:
        """Subtract an amount of the given unit. See :meth:`add`.

        Example
        -------
        >>> Date(2020, 2, 29).subtract("years", 1)
        Date(2019-02-28)
        """
        return self.add(unit, -_check_int(amount, "amount"))

    def days_until(self, other: Date, /) -> int:
        """The number of days from this date to another date.
        Negative if the other date is earlier.

        Example
        -------
        >>> Date(2021, 1, 2).days_until(Date(2021, 1, 5))
        3
        """
        return other.day_index() - self.day_index()

    def days_since(self, other: Date, /) -> int:
        """The number of days this date is after another date.

        Example
        -------
        >>> Date(2021, 1, 5).days_since(Date(2021, 1, 2))
        3
        """
        return self.day_index() - other.day_index()

    def at(self, t: Time, /, tz: Optional[TimeZone] = None) -> DateTime:
        """Combine with a time (and optionally a zone) into a datetime.
        The zone defaults to UTC.

        Example
        -------
        >>> Date(2021, 1, 2).at(Time(12, 30))
        DateTime(2021-01-02 12:30:00Z)
        """
        return DateTime._new(
            (
                self._year,
                self._month,
                self._day,
                t._hour,
                t._minute,
                t._second,
                t._nanos,
            ),
            UTC if tz is None else tz,
        )

    def py_date(self) -> _date:
        """Convert to a standard library :class:`~datetime.date`.

        Raises :class:`ValueError` for years outside 1-9999.
        """
        return _date(self._year, self._month, self._day)

    @classmethod
    def from_py_date(cls, d: _date, /) -> Date:
        """Create from a :class:`~datetime.date`

        Example
        -------
        >>> Date.from_py_date(date(2021, 1, 2))
        Date(2021-01-02)
        """
        if isinstance(d, _datetime):
            d = d.date()
        elif not isinstance(d, _date):
            raise TypeError(f"Expected date, got {type(d)!r}")
        return cls._new(d.year, d.month, d.day)

    def format_iso(self) -> str:
        """Format as ``YYYY-MM-DD``. Years beyond 9999 get a ``+`` prefix,
        negative years a ``-`` prefix.

        Inverse of :meth:`parse_iso`.

        Example
        -------
        >>> Date(2021, 1, 2).format_iso()
        '2021-01-02'
        >>> Date(-44, 3, 15).format_iso()
        '-0044-03-15'
        """
        return f"{_format_year(self._year)}-{self._month:02d}-{self._day:02d}"

    @classmethod
    def parse_iso(cls, s: str, /) -> Date:
        """Parse an ISO 8601 date: calendar (``2023-05-15``, ``20230515``),
        ordinal (``2023-135``, ``2023135``), or week date
        (``2023-W20-1``, ``2023W201``). Years may be expanded
        with a sign, e.g. ``+12023-05-15``.

        Example
        -------
        >>> Date.parse_iso("2023-W20-1")
        Date(2023-05-15)
        """
        return cls._new(*_parse.date_from_scan(_parse.scan("date", s)))

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"Date({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> d = Date(2021, 1, 2)
        >>> d == Date(2021, 1, 2)
        True
        >>> d == Date(2021, 1, 3)
        False
        """
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd() == other._ymd()

    def __hash__(self) -> int:
        return hash(self._ymd())

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd() < other._ymd()

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd() <= other._ymd()

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd() > other._ymd()

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd() >= other._ymd()

    def _ymd(self) -> tuple[int, int, int]:
        return (self._year, self._month, self._day)

    @classmethod
    def _new(cls, year: int, month: int, day: int) -> Date:
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_date, (pack("<qBB", *self._ymd()),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_date(data: bytes) -> Date:
    return Date._new(*unpack("<qBB", data))


Date.MIN = Date._new(MIN_YEAR, 1, 1)
Date.MAX = Date._new(MAX_YEAR, 12, 31)
Date.UNIX_EPOCH = Date._new(1970, 1, 1)


@final
class Time(_ImmutableBase):
    """Time of day without a date component

    Example
    -------
    >>> t = Time(12, 30, 0)
    Time(12:30:00)

    Important
    ---------
    The constructor is meant for trusted input, and checks its arguments
    with ``assert`` statements only. Use :meth:`parse_iso` for untrusted input.
    A second of 60 is allowed, to be able to represent leap seconds.
    """

    __slots__ = ("_hour", "_minute", "_second", "_nanos")

    MIDNIGHT: ClassVar[Time]
    """The time at midnight"""
    NOON: ClassVar[Time]
    """The time at noon"""
    MAX: ClassVar[Time]
    """The maximum time, just before midnight"""

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
    ) -> None:
        assert 0 <= hour < 24, "hour must be in the range 0-23"
        assert 0 <= minute < 60, "minute must be in the range 0-59"
        assert 0 <= second <= 60, "second must be in the range 0-60"
        assert (
            0 <= nanosecond < NS_PER_SEC
        ), "nanosecond must be in the range 0-999_999_999"
        self._hour = hour
        self._minute = minute
        self._second = second
        self._nanos = nanosecond

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def nanosecond(self) -> int:
        return self._nanos

    def on(self, d: Date, /, tz: Optional[TimeZone] = None) -> DateTime:
        """Combine a time with a date to create a datetime

        Example
        -------
        >>> Time(12, 30).on(Date(2021, 1, 2))
        DateTime(2021-01-02 12:30:00Z)
        """
        return d.at(self, tz)

    def py_time(self) -> _time:
        """Convert to a standard library :class:`~datetime.time`.
        Nanoseconds are truncated to microseconds."""
        return _time(
            self._hour, self._minute, self._second, self._nanos // NS_PER_US
        )

    @classmethod
    def from_py_time(cls, t: _time, /) -> Time:
        """Create from a :class:`~datetime.time`

        `fold` value is ignored.

        Example
        -------
        >>> Time.from_py_time(time(12, 30, 0))
        Time(12:30:00)
        """
        if not isinstance(t, _time):
            raise TypeError(f"Expected datetime.time, got {type(t)!r}")
        if t.tzinfo is not None:
            raise ValueError("Time must be naive")
        return cls._new(t.hour, t.minute, t.second, t.microsecond * NS_PER_US)

    def format_iso(self, *, precision: Optional[int] = None) -> str:
        """Format as ``HH:MM:SS[.fff]``.

        By default, the fraction shows only as many digits as needed.
        Pass ``precision`` (0-9) for a fixed number of fractional digits.

        Example
        -------
        >>> Time(12, 30, 0, nanosecond=120_000_000).format_iso()
        '12:30:00.12'
        >>> Time(12, 30).format_iso(precision=3)
        '12:30:00.000'
        """
        return (
            f"{self._hour:02d}:{self._minute:02d}:{self._second:02d}"
            + _format_nanos(self._nanos, precision)
        )

    @classmethod
    def parse_iso(cls, s: str, /) -> Time:
        """Parse an ISO 8601 time such as ``21:20:43.123``, ``212043,123``,
        or ``T21:20``. A trailing zone designator is validated, then ignored.

        Example
        -------
        >>> Time.parse_iso("T2120")
        Time(21:20:00)
        """
        sc = _parse.scan("time", s)
        fields = _parse.time_from_scan(sc)
        if sc.time_zone:
            TimeZone.parse_iso(sc.field(sc.time_zone))
        # the 24:00 case only exists for datetimes
        assert fields is not None
        return cls._new(*fields)

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"Time({self})"

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------
        >>> t = Time(12, 30, 0)
        >>> t == Time(12, 30, 0)
        True
        >>> t == Time(12, 30, 1)
        False
        """
        if not isinstance(other, Time):
            return NotImplemented
        return self._hmsn() == other._hmsn()

    def __hash__(self) -> int:
        return hash(self._hmsn())

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._hmsn() < other._hmsn()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._hmsn() <= other._hmsn()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._hmsn() > other._hmsn()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._hmsn() >= other._hmsn()

    def _hmsn(self) -> tuple[int, int, int, int]:
        return (self._hour, self._minute, self._second, self._nanos)

    @classmethod
    def _new(cls, hour: int, minute: int, second: int, nanos: int) -> Time:
        self = _object_new(cls)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._nanos = nanos
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_time, (pack("<BBBI", *self._hmsn()),)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_time(data: bytes) -> Time:
    return Time._new(*unpack("<BBBI", data))


Time.MIDNIGHT = Time()
Time.NOON = Time(12)
Time.MAX = Time(23, 59, 59, nanosecond=999_999_999)


@final
class UtcOffset(_ImmutableBase):
    """A fixed offset from UTC, in hours and minutes.

    Example
    -------
    >>> UtcOffset(Sign.NEGATIVE, 4)
    UtcOffset(-04:00)

    Note
    ----
    Like :class:`Time`, the constructor only checks its arguments with
    ``assert`` statements. Use :meth:`parse_iso` for untrusted input.
    """

    __slots__ = ("_sign", "_hours", "_minutes")

    def __init__(
        self, sign: Union[Sign, str], hours: int, minutes: int = 0
    ) -> None:
        assert 0 <= hours < 24, "hour offset must be in the range 0-23"
        assert 0 <= minutes < 60, "minute offset must be in the range 0-59"
        self._sign = Sign(sign)
        self._hours = hours
        self._minutes = minutes

    @property
    def sign(self) -> Sign:
        return self._sign

    @property
    def hours(self) -> int:
        return self._hours

    @property
    def minutes(self) -> int:
        return self._minutes

    def total_minutes(self) -> int:
        """The offset in minutes, negative for offsets west of UTC

        Example
        -------
        >>> UtcOffset.parse_iso("-05:30").total_minutes()
        -330
        """
        minutes = self._hours * 60 + self._minutes
        return -minutes if self._sign is Sign.NEGATIVE else minutes

    def as_time_zone(self) -> TimeZone:
        return TimeZone.fixed(self)

    def format_iso(self) -> str:
        """Format as ``±hh:mm``"""
        return f"{self._sign.value}{self._hours:02d}:{self._minutes:02d}"

    @classmethod
    def parse_iso(cls, s: str, /) -> UtcOffset:
        """Parse an offset in the form ``±hh``, ``±hhmm``, or ``±hh:mm``.

        Raises :class:`InvalidLength` for any other length,
        :class:`InvalidCharacter` for unexpected characters, and
        :class:`Overflow` for hours beyond 23 or minutes beyond 59.

        Example
        -------
        >>> UtcOffset.parse_iso("+0530")
        UtcOffset(+05:30)
        """
        if not isinstance(s, str):
            raise TypeError(f"Expected a string, got {type(s)!r}")
        negative, hours, minutes = _parse.offset_from_iso(s)
        return cls._new(
            Sign.NEGATIVE if negative else Sign.POSITIVE, hours, minutes
        )

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"UtcOffset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple[Sign, int, int]:
        return (self._sign, self._hours, self._minutes)

    @classmethod
    def _new(cls, sign: Sign, hours: int, minutes: int) -> UtcOffset:
        self = _object_new(cls)
        self._sign = sign
        self._hours = hours
        self._minutes = minutes
        return self


_ZERO_OFFSET = UtcOffset._new(Sign.POSITIVE, 0, 0)


@final
class TimeZone(_ImmutableBase):
    """Either UTC, or a fixed offset from it.

    :attr:`UTC` is written as ``Z``. It has the same offset as ``+00:00``,
    but the two are different values.

    Example
    -------
    >>> TimeZone.UTC
    TimeZone(Z)
    >>> TimeZone(Sign.POSITIVE, 5, 30)
    TimeZone(+05:30)
    """

    __slots__ = ("_offset",)

    UTC: ClassVar[TimeZone]

    def __init__(
        self, sign: Union[Sign, str], hours: int, minutes: int = 0
    ) -> None:
        self._offset: Optional[UtcOffset] = UtcOffset(sign, hours, minutes)

    @classmethod
    def fixed(cls, offset: UtcOffset, /) -> TimeZone:
        """A time zone with the given fixed offset"""
        if not isinstance(offset, UtcOffset):
            raise TypeError(f"Expected UtcOffset, got {type(offset)!r}")
        return cls._new(offset)

    @property
    def offset(self) -> Optional[UtcOffset]:
        """The fixed offset, or ``None`` for UTC"""
        return self._offset

    def is_utc(self) -> bool:
        return self._offset is None

    def as_utc_offset(self) -> UtcOffset:
        """The offset from UTC. For UTC itself, this is ``+00:00``."""
        return _ZERO_OFFSET if self._offset is None else self._offset

    def format_iso(self) -> str:
        """Format as ``Z`` or ``±hh:mm``"""
        return "Z" if self._offset is None else self._offset.format_iso()

    @classmethod
    def parse_iso(cls, s: str, /) -> TimeZone:
        """Parse ``Z`` or an offset in the form ``±hh``, ``±hhmm``,
        or ``±hh:mm``.

        Example
        -------
        >>> TimeZone.parse_iso("Z")
        TimeZone(Z)
        >>> TimeZone.parse_iso("-04")
        TimeZone(-04:00)
        """
        if not isinstance(s, str):
            raise TypeError(f"Expected a string, got {type(s)!r}")
        if len(s) == 1:
            if s == "Z":
                return cls.UTC
            raise InvalidCharacter(f"Expected 'Z' or an offset, got {s!r}")
        elif len(s) in (3, 5, 6):
            return cls._new(UtcOffset.parse_iso(s))
        raise InvalidLength(
            f"Expected 'Z', ±hh, ±hhmm, or ±hh:mm, got {s!r}"
        )

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"TimeZone({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._offset == other._offset

    def __hash__(self) -> int:
        return hash(self._offset)

    @classmethod
    def _new(cls, offset: Optional[UtcOffset]) -> TimeZone:
        self = _object_new(cls)
        self._offset = offset
        return self


TimeZone.UTC = UTC = TimeZone._new(None)


def _tz_to_pkl(tz: TimeZone) -> tuple[int, int, int]:
    if tz._offset is None:
        return (0, 0, 0)
    off = tz._offset
    return (-1 if off._sign is Sign.NEGATIVE else 1, off._hours, off._minutes)


def _tz_from_pkl(kind: int, hours: int, minutes: int) -> TimeZone:
    if kind == 0:
        return UTC
    return TimeZone._new(
        UtcOffset._new(
            Sign.NEGATIVE if kind < 0 else Sign.POSITIVE, hours, minutes
        )
    )


@final
class DateTime(_ImmutableBase):
    """A date and time, with a UTC offset (UTC by default).

    Example
    -------
    >>> DateTime(2023, 5, 15, 21, 20, 43, tz=TimeZone.parse_iso("-04:00"))
    DateTime(2023-05-15 21:20:43-04:00)

    Note
    ----
    The zone only tells how to interpret the fields. Converting to
    another zone with :meth:`to_tz` shifts the fields accordingly.
    """

    __slots__ = (
        "_year",
        "_month",
        "_day",
        "_hour",
        "_minute",
        "_second",
        "_nanos",
        "_tz",
    )

    UNIX_EPOCH: ClassVar[DateTime]
    """The moment UNIX timestamps count from: 1970-01-01T00:00:00Z"""

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
        tz: TimeZone = UTC,
    ) -> None:
        if not isinstance(tz, TimeZone):
            raise TypeError(f"Expected TimeZone, got {type(tz)!r}")
        d = Date(year, month, day)
        t = Time(hour, minute, second, nanosecond=nanosecond)
        self._set_fields(
            (d._year, d._month, d._day, t._hour, t._minute, t._second, t._nanos)
        )
        self._tz = tz

    @classmethod
    def now(cls) -> DateTime:
        """The current time, in UTC"""
        return cls.from_timestamp_nanos(time_ns())

    @classmethod
    def from_timestamp(cls, i: int, /) -> DateTime:
        """Create from a UNIX timestamp (in seconds), in UTC.

        The inverse of the ``timestamp()`` method.

        Example
        -------
        >>> DateTime.from_timestamp(0)
        DateTime(1970-01-01 00:00:00Z)
        """
        return cls.UNIX_EPOCH.add(Unit.SECONDS, _check_int(i, "timestamp"))

    @classmethod
    def from_timestamp_millis(cls, i: int, /) -> DateTime:
        """Create from a UNIX timestamp (in milliseconds), in UTC.

        The inverse of the ``timestamp_millis()`` method.
        """
        return cls.UNIX_EPOCH.add(
            Unit.MILLISECONDS, _check_int(i, "timestamp")
        )

    @classmethod
    def from_timestamp_micros(cls, i: int, /) -> DateTime:
        """Create from a UNIX timestamp (in microseconds), in UTC.

        The inverse of the ``timestamp_micros()`` method.
        """
        return cls.UNIX_EPOCH.add(
            Unit.MICROSECONDS, _check_int(i, "timestamp")
        )

    @classmethod
    def from_timestamp_nanos(cls, i: int, /) -> DateTime:
        """Create from a UNIX timestamp (in nanoseconds), in UTC.

        The inverse of the ``timestamp_nanos()`` method.
        """
        return cls.UNIX_EPOCH.add(Unit.NANOSECONDS, _check_int(i, "timestamp"))

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def nanosecond(self) -> int:
        return self._nanos

    @property
    def tz(self) -> TimeZone:
        return self._tz

    def date(self) -> Date:
        """The date part of the datetime

        Example
        -------
        >>> DateTime(2021, 1, 2, 3, 4).date()
        Date(2021-01-02)
        """
        return Date._new(self._year, self._month, self._day)

    def time(self) -> Time:
        """The time part of the datetime

        Example
        -------
        >>> DateTime(2021, 1, 2, 3, 4).time()
        Time(03:04:00)
        """
        return Time._new(self._hour, self._minute, self._second, self._nanos)

    def is_leap_year(self) -> bool:
        return _math.is_leap(self._year)

    def days_in_month(self) -> int:
        return _math.days_in_month(self._year, self._month)

    def day_of_year(self) -> int:
        return _math.day_of_year(self._year, self._month, self._day)

    def day_index(self) -> int:
        return _math.day_index(self._year, self._month, self._day)

    def day_of_week(self) -> Weekday:
        return Weekday(_math.weekday_index(self.day_index()))

    def add(self, unit: Union[Unit, str], amount: int, /) -> DateTime:
        """Add an amount of the given unit.

        Each unit carries over into the next larger one, so adding
        90 minutes to 23:00 results in 00:30 the next day. Negative
        amounts borrow in the same way. Adding months or years clamps
        the day to the end of the month if needed.
        The zone is not taken into account.

        Example
        -------
        >>> d = DateTime(2023, 1, 31, 23)
        >>> d.add(Unit.HOURS, 2)
        DateTime(2023-02-01 01:00:00Z)
        >>> d.add("months", 1)
        DateTime(2023-02-28 23:00:00Z)
        """
        name = _unit_name(unit)
        if _check_int(amount, "amount") == 0:
            return self
        return self._new(_math.add_unit(self._fields(), name, amount), self._tz)

    def subtract(self, unit: Union[Unit, str], amount: int, /) -> DateTime:
        """Subtract an amount of the given unit. See :meth:`add`.

        Example
        -------
        >>> DateTime(2023, 1, 1).subtract("hours", 1)
        DateTime(2022-12-31 23:00:00Z)
        """
        return self.add(unit, -_check_int(amount, "amount"))

    def to_tz(self, tz: TimeZone, /) -> DateTime:
        """Convert to another zone. The fields are shifted so that the
        result represents the same moment in time.

        Example
        -------
        >>> d = DateTime(2023, 5, 15, 21, 20)
        >>> d.to_tz(TimeZone.parse_iso("-04:00"))
        DateTime(2023-05-15 17:20:00-04:00)
        """
        if not isinstance(tz, TimeZone):
            raise TypeError(f"Expected TimeZone, got {type(tz)!r}")
        if tz == self._tz:
            return self
        delta = (
            tz.as_utc_offset().total_minutes()
            - self._tz.as_utc_offset().total_minutes()
        )
        return self._new(
            _math.add_unit(self._fields(), "minutes", delta), tz
        )

    def to_utc(self) -> DateTime:
        """Convert to UTC. Shortcut for ``to_tz(TimeZone.UTC)``"""
        return self.to_tz(UTC)

    def same_instant(self, other: DateTime, /) -> bool:
        """Whether two datetimes represent the same moment, regardless
        of their zones.

        Example
        -------
        >>> a = DateTime.parse_iso("2023-05-15T21:20:00-04:00")
        >>> b = DateTime.parse_iso("2023-05-16T01:20:00Z")
        >>> a == b
        False
        >>> a.same_instant(b)
        True
        """
        return self.timestamp_nanos() == other.timestamp_nanos()

    def timestamp(self) -> int:
        """The UNIX timestamp in seconds. A leap second (60) counts as 59.

        Example
        -------
        >>> DateTime(1970, 1, 1, 0, 0, 30).timestamp()
        30
        """
        utc = self.to_utc()
        return (
            (utc.day_index() - _UNIX_EPOCH_DAY_INDEX) * SECS_PER_DAY
            + utc._hour * 3600
            + utc._minute * 60
            + min(utc._second, 59)
        )

    def timestamp_millis(self) -> int:
        """The UNIX timestamp in milliseconds (rounded down)"""
        return self.timestamp_nanos() // NS_PER_MS

    def timestamp_micros(self) -> int:
        """The UNIX timestamp in microseconds (rounded down)"""
        return self.timestamp_nanos() // NS_PER_US

    def timestamp_nanos(self) -> int:
        """The UNIX timestamp in nanoseconds"""
        return self.timestamp() * NS_PER_SEC + self._nanos

    def format_iso(self, *, precision: Optional[int] = None) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS[.fff]`` followed by ``Z``
        or ``±hh:mm``. See :meth:`Time.format_iso` for ``precision``.

        Inverse of :meth:`parse_iso`.

        Example
        -------
        >>> DateTime(2023, 5, 15, 21, 20, 43, nanosecond=123_000_000).format_iso()
        '2023-05-15T21:20:43.123Z'
        """
        return (
            f"{self.date()}T{self.time().format_iso(precision=precision)}"
            f"{self._tz}"
        )

    @classmethod
    def parse_iso(cls, s: str, /) -> DateTime:
        """Parse an ISO 8601 date and time, separated by ``T``.

        Any of the date forms of :meth:`Date.parse_iso` may be combined
        with any time of :meth:`Time.parse_iso`, as long as the
        basic and extended formats aren't mixed. Without a zone designator,
        the time is taken to be UTC. ``24:00`` is midnight of the next day.

        Example
        -------
        >>> DateTime.parse_iso("20230515T212043.123-0400")
        DateTime(2023-05-15 21:20:43.123-04:00)
        >>> DateTime.parse_iso("2023-05-15T24:00Z")
        DateTime(2023-05-16 00:00:00Z)
        """
        sc = _parse.scan("datetime", s)
        time_fields = _parse.time_from_scan(sc)
        date_fields = _parse.date_from_scan(sc)
        tz = (
            TimeZone.parse_iso(sc.field(sc.time_zone))
            if sc.time_zone
            else UTC
        )
        if time_fields is None:
            return cls._new((*date_fields, 0, 0, 0, 0), tz).add(Unit.DAYS, 1)
        return cls._new((*date_fields, *time_fields), tz)

    __str__ = format_iso

    def __repr__(self) -> str:
        return f"DateTime({str(self).replace('T', ' ')})"

    def __eq__(self, other: object) -> bool:
        """Compare the fields and the zone for equality.
        Use :meth:`same_instant` to compare moments in time instead.

        Example
        -------
        >>> d = DateTime(2023, 5, 15, 12)
        >>> d == DateTime(2023, 5, 15, 12)
        True
        >>> d == d.to_tz(TimeZone.parse_iso("+02:00"))
        False
        """
        if not isinstance(other, DateTime):
            return NotImplemented
        return (self._fields(), self._tz) == (other._fields(), other._tz)

    def __hash__(self) -> int:
        return hash((self._fields(), self._tz))

    def _fields(self) -> _math.Fields:
        return (
            self._year,
            self._month,
            self._day,
            self._hour,
            self._minute,
            self._second,
            self._nanos,
        )

    def _set_fields(self, f: _math.Fields) -> None:
        (
            self._year,
            self._month,
            self._day,
            self._hour,
            self._minute,
            self._second,
            self._nanos,
        ) = f

    @classmethod
    def _new(cls, f: _math.Fields, tz: TimeZone) -> DateTime:
        self = _object_new(cls)
        self._set_fields(f)
        self._tz = tz
        return self

    # a custom pickle implementation with a smaller payload
    @no_type_check
    def __reduce__(self):
        return (
            _unpkl_dt,
            (pack("<qBBBBBIbBB", *self._fields(), *_tz_to_pkl(self._tz)),),
        )


# A separate function is needed for unpickling, because the
# constructor doesn't accept positional zone argument as
# required by __reduce__.
# Also, it allows backwards-compatible changes to the pickling format.
@no_type_check
def _unpkl_dt(data: bytes) -> DateTime:
    *fields, kind, hours, minutes = unpack("<qBBBBBIbBB", data)
    return DateTime._new(tuple(fields), _tz_from_pkl(kind, hours, minutes))


DateTime.UNIX_EPOCH = DateTime._new((1970, 1, 1, 0, 0, 0, 0), UTC)


# We expose the public members in the root of the module.
# For clarity, we remove the "_pyisochron" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "isochron"

# clear up loop variables so they don't leak into the namespace
del name
del member

for _unpkl in (_unpkl_date, _unpkl_time, _unpkl_dt):
    _unpkl.__module__ = "isochron"


# disable further subclassing
final(_ImmutableBase)


def _patch_time_frozen(dt: DateTime) -> None:
    global time_ns

    def time_ns() -> int:
        return dt.timestamp_nanos()


def _patch_time_keep_ticking(dt: DateTime) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return dt.timestamp_nanos() + _time_ns() - _patched_at


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
