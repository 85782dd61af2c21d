"""Scanning and field extraction for ISO 8601 strings.

Scanning only locates the fields and works out the format (basic or
extended) and the date type (calendar, ordinal, or week date). Ranges are
checked afterwards, once the fields are converted to integers.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from ._common import (
    MAX_YEAR,
    MIN_YEAR,
    BufferTooLarge,
    ConflictingDateType,
    ConflictingFormat,
    EndOfBuffer,
    InvalidCharacter,
    InvalidLength,
    Nanos,
    Overflow,
)
from ._math import (
    YMD,
    check_date,
    date_from_day_of_year,
    date_from_week_date,
)

Mode = Literal["date", "time", "datetime"]
Format = Literal["basic", "extended"]
DateType = Literal["calendar", "ordinal", "week"]
Span = tuple[int, int]

MAX_LENGTH = 64

_DIGITS = "0123456789"
_ZONE_START = "Z+-"


@dataclass
class Scan:
    """The result of scanning a string: where each field is, and how the
    string is formatted"""

    text: str
    mode: Mode
    format: Optional[Format] = None
    date_type: Optional[DateType] = None

    year: Optional[Span] = None
    month: Optional[Span] = None
    week: Optional[Span] = None
    day: Optional[Span] = None
    hour: Optional[Span] = None
    minute: Optional[Span] = None
    second: Optional[Span] = None
    fraction: Optional[Span] = None
    time_zone: Optional[Span] = None

    def field(self, span: Span) -> str:
        return self.text[span[0] : span[1]]


def scan(mode: Mode, s: str) -> Scan:
    if not isinstance(s, str):
        raise TypeError(f"Expected a string, got {type(s)!r}")
    if len(s.encode("utf-8", "surrogatepass")) > MAX_LENGTH:
        raise BufferTooLarge(
            f"Input longer than {MAX_LENGTH} bytes: {s[:MAX_LENGTH]!r}..."
        )
    if not s.isascii():
        raise InvalidCharacter(f"Non-ASCII input: {s!r}")
    return _Scanner(mode, s).run()


class _Scanner:
    def __init__(self, mode: Mode, s: str) -> None:
        self.s = s
        self.i = 0
        self.result = Scan(s, mode)

    def run(self) -> Scan:
        mode = self.result.mode
        if mode != "time":
            self._year()
            if self.result.date_type == "week":
                self._week_date()
            else:
                self._calendar_or_ordinal_date()

            if mode == "date":
                if self.i != len(self.s):
                    raise self._invalid()
                return self.result

        c = self._peek()
        if c is None:
            raise self._end()
        elif c == "T":
            self.i += 1
        # the 'T' may only be left out if there's no date
        elif not (mode == "time" and c in _DIGITS):
            raise self._invalid()

        self._time()
        return self.result

    def _year(self) -> None:
        start = self.i
        c = self._peek()
        if c is None:
            raise self._end()
        signed = c in "+-"
        if signed:
            self._set_format("extended")
            self.i += 1

        digits = 0
        while True:
            c = self._read()
            if c in _DIGITS:
                # Only signed (expanded) years have more than 4 digits.
                # Otherwise, the digit belongs to the rest of a basic date.
                if digits < 4 or signed:
                    digits += 1
                    continue
                self._set_format("basic")
                self.i -= 1
                break
            elif c == "-":
                if digits < 4:
                    raise self._invalid(self.i - 1)
                self._set_format("extended")
                if self._peek() == "W":
                    self._set_date_type("week")
                    self.i += 1
                break
            elif c == "W":
                if digits < 4:
                    raise self._invalid(self.i - 1)
                self._set_format("basic")
                self._set_date_type("week")
                break
            else:
                raise self._invalid(self.i - 1)

        self.result.year = (start, start + signed + digits)

    def _week_date(self) -> None:
        week = self._digits(2)

        c = self._peek()
        if c is None:
            raise self._end()
        elif c in _DIGITS:
            self._set_format("basic")
        elif c == "-":
            self._set_format("extended")
            self.i += 1
        else:
            raise self._invalid()

        day = self._digits(1)

        c = self._peek()
        if c is None:
            if self.result.mode == "datetime":
                raise self._end()
        elif c != "T" or self.result.mode != "datetime":
            raise self._invalid()

        self.result.week = week
        self.result.day = day

    def _calendar_or_ordinal_date(self) -> None:
        start = self.i
        self._digits(2)

        c = self._read()
        if c in _DIGITS:
            # Three digits: either MMDD (basic) or DDD (ordinal)
            nxt = self._peek()
            if nxt is None:
                if self.result.mode == "datetime":
                    raise self._end()
                self._set_date_type("ordinal")
                self.result.day = (start, start + 3)
            elif nxt in _DIGITS:
                self._set_format("basic")
                self._set_date_type("calendar")
                self.i += 1
                self.result.month = (start, start + 2)
                self.result.day = (start + 2, start + 4)
            elif nxt == "T":
                if self.result.mode != "datetime":
                    raise self._invalid()
                self._set_date_type("ordinal")
                self.result.day = (start, start + 3)
            else:
                raise self._invalid()
            return
        elif c == "-":
            self._set_format("extended")
            self._set_date_type("calendar")
        else:
            raise self._invalid(self.i - 1)

        self._digits(2)
        self.result.month = (start, start + 2)
        self.result.day = (start + 3, start + 5)

    def _time(self) -> None:
        if self._hour_or_minute("hour") and self._hour_or_minute("minute"):
            if self._second():
                self._fraction()

        # Whatever remains is the zone designator. It's validated separately.
        if self.i < len(self.s):
            self.result.time_zone = (self.i, len(self.s))
            self.i = len(self.s)

    # Returns whether a next (smaller) time field follows
    def _hour_or_minute(self, name: Literal["hour", "minute"]) -> bool:
        setattr(self.result, name, self._digits(2))

        c = self._peek()
        if c is None or c in _ZONE_START:
            return False
        elif c in _DIGITS:
            self._set_format("basic")
        elif c == ":":
            self._set_format("extended")
            self.i += 1
        else:
            raise self._invalid()
        return True

    def _second(self) -> bool:
        self.result.second = self._digits(2)

        c = self._peek()
        if c is None or c in _ZONE_START:
            return False
        elif c in ".,":
            self.i += 1
            return True
        raise self._invalid()

    def _fraction(self) -> None:
        start = self.i
        while (c := self._peek()) is not None and c not in _ZONE_START:
            if c not in _DIGITS:
                raise self._invalid()
            self.i += 1

        if self.i == start:
            raise self._invalid()
        self.result.fraction = (start, self.i)

    def _peek(self) -> Optional[str]:
        return self.s[self.i] if self.i < len(self.s) else None

    def _read(self) -> str:
        if self.i >= len(self.s):
            raise self._end()
        c = self.s[self.i]
        self.i += 1
        return c

    def _digits(self, n: int) -> Span:
        start = self.i
        for _ in range(n):
            if self._read() not in _DIGITS:
                raise self._invalid(self.i - 1)
        return (start, self.i)

    def _set_format(self, fmt: Format) -> None:
        if self.result.format not in (None, fmt):
            raise ConflictingFormat(
                f"Mix of basic and extended format: {self.s!r}"
            )
        self.result.format = fmt

    def _set_date_type(self, date_type: DateType) -> None:
        if self.result.date_type not in (None, date_type):
            raise ConflictingDateType(f"Ambiguous date type: {self.s!r}")
        self.result.date_type = date_type

    def _invalid(self, pos: Optional[int] = None) -> InvalidCharacter:
        pos = self.i if pos is None else pos
        return InvalidCharacter(
            f"Invalid character at position {pos}: {self.s!r}"
        )

    def _end(self) -> EndOfBuffer:
        return EndOfBuffer(f"Unexpected end of input: {self.s!r}")


def _year_from_iso(s: str) -> int:
    year = int(s)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise Overflow(f"Year out of range: {s!r}")
    return year


def _parse_nanos(s: str) -> Nanos:
    # digits beyond nanosecond precision are ignored
    return int(s[:9].ljust(9, "0"))


def date_from_scan(sc: Scan) -> YMD:
    assert sc.year is not None and sc.day is not None
    year = _year_from_iso(sc.field(sc.year))
    day = int(sc.field(sc.day))

    if sc.date_type == "calendar":
        assert sc.month is not None
        return check_date(year, int(sc.field(sc.month)), day)
    elif sc.date_type == "ordinal":
        if day < 1:
            raise Overflow(f"Day of year out of range: {day}")
        return date_from_day_of_year(year, day - 1)
    else:
        assert sc.week is not None
        if not 1 <= day <= 7:
            raise Overflow(f"Day of week out of range: {day}")
        return date_from_week_date(year, int(sc.field(sc.week)), day - 1)


def time_from_scan(sc: Scan) -> Optional[tuple[int, int, int, Nanos]]:
    """Hour, minute, second, and nanosecond from a scan. ``None`` means
    24:00 at the end of the day, i.e. midnight of the next day."""
    assert sc.hour is not None
    hour = int(sc.field(sc.hour))
    minute = int(sc.field(sc.minute)) if sc.minute else 0
    second = int(sc.field(sc.second)) if sc.second else 0
    nanos = _parse_nanos(sc.field(sc.fraction)) if sc.fraction else 0

    if sc.mode == "datetime" and hour == 24 and not (minute or second or nanos):
        return None
    if hour >= 24 or minute >= 60 or second >= 60:
        raise Overflow(f"Time out of range: {sc.text!r}")
    return (hour, minute, second, nanos)


def offset_from_iso(s: str) -> tuple[bool, int, int]:
    """Parse ``±hh``, ``±hhmm``, or ``±hh:mm`` into
    (is negative, hours, minutes)"""
    if len(s) not in (3, 5, 6):
        raise InvalidLength(
            f"Expected offset in the form ±hh, ±hhmm, or ±hh:mm, got {s!r}"
        )
    if s[0] not in "+-":
        raise InvalidCharacter(f"Expected offset sign ('+' or '-'): {s!r}")

    digits = s[1:3]
    if len(s) == 6:
        if s[3] != ":":
            raise InvalidCharacter(f"Expected ':' in offset: {s!r}")
        digits += s[4:]
    else:
        digits += s[3:]

    if not all(c in _DIGITS for c in digits):
        raise InvalidCharacter(f"Invalid digit in offset: {s!r}")

    hours = int(digits[:2])
    minutes = int(digits[2:]) if len(digits) > 2 else 0
    if hours >= 24 or minutes >= 60:
        raise Overflow(f"Offset out of range: {s!r}")
    return (s[0] == "-", hours, minutes)
