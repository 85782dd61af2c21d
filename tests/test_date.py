import calendar
import pickle
import re
from copy import copy, deepcopy
from datetime import date as py_date, datetime as py_datetime

import pytest
from hypothesis import given
from hypothesis.strategies import dates, integers, text

from isochron import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    ConflictingFormat,
    Date,
    DateTime,
    EndOfBuffer,
    InvalidCharacter,
    InvalidDay,
    InvalidMonth,
    Overflow,
    Time,
    TimeZone,
    Unit,
    WeekDate,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

MIN_I64 = -(1 << 63)
MAX_I64 = (1 << 63) - 1


class TestInit:

    def test_args(self):
        d = Date(2021, 1, 2)
        assert d.year == 2021
        assert d.month == 1
        assert d.day == 2

    def test_kwargs(self):
        d = Date(year=2021, month=1, day=2)
        assert d.year == 2021
        assert d.month == 1
        assert d.day == 2

    def test_not_enough_args(self):
        with pytest.raises(TypeError, match=r"day"):
            Date(2021, 1)  # type: ignore[call-arg]

    @pytest.mark.parametrize(
        "year, month, day",
        [
            (2021, 13, 1),
            (2021, 0, 1),
            (2021, -1, 1),
        ],
    )
    def test_invalid_month(self, year, month, day):
        with pytest.raises(InvalidMonth):
            Date(year, month, day)

    @pytest.mark.parametrize(
        "year, month, day",
        [
            (2021, 1, 0),
            (2021, 1, 32),
            (2021, 2, 29),
            (1900, 2, 29),
            (2021, 4, 31),
        ],
    )
    def test_invalid_day(self, year, month, day):
        with pytest.raises(InvalidDay):
            Date(year, month, day)

    @pytest.mark.parametrize("year", [MAX_I64 + 1, MIN_I64 - 1])
    def test_year_out_of_range(self, year):
        with pytest.raises(Overflow):
            Date(year, 1, 1)

    @pytest.mark.parametrize(
        "year, month, day",
        [
            (2024, 2, 29),
            (2000, 2, 29),
            (0, 2, 29),
            (-4, 2, 29),
            (MIN_I64, 1, 1),
            (MAX_I64, 12, 31),
        ],
    )
    def test_valid_extremes(self, year, month, day):
        d = Date(year, month, day)
        assert (d.year, d.month, d.day) == (year, month, day)

    def test_unchecked(self):
        assert Date.unchecked(2021, 1, 2) == Date(2021, 1, 2)

        with pytest.raises(AssertionError):
            Date.unchecked(2021, 2, 29)

        with pytest.raises(AssertionError):
            Date.unchecked(2021, 13, 1)


@pytest.mark.parametrize(
    "year, expect",
    [
        (2024, True),
        (2023, False),
        (2000, True),
        (1900, False),
        (0, True),
        (-1, False),
        (-4, True),
        (-100, False),
        (-400, True),
    ],
)
def test_is_leap_year(year, expect):
    assert Date(year, 1, 1).is_leap_year() is expect
    assert Date(year, 1, 1).days_in_year() == (366 if expect else 365)


@given(integers(min_value=MIN_I64, max_value=MAX_I64))
def test_is_leap_year_matches_stdlib(year):
    assert Date(year, 3, 1).is_leap_year() == calendar.isleap(year)


@pytest.mark.parametrize(
    "d, expect",
    [
        (Date(2024, 2, 1), 29),
        (Date(2023, 2, 1), 28),
        (Date(2023, 4, 15), 30),
        (Date(2023, 12, 31), 31),
    ],
)
def test_days_in_month(d, expect):
    assert d.days_in_month() == expect


class TestDayOfYear:

    @pytest.mark.parametrize(
        "d, expect",
        [
            (Date(2023, 1, 1), 0),
            (Date(2023, 2, 1), 31),
            (Date(2021, 3, 1), 59),
            (Date(2024, 3, 1), 60),
            (Date(2023, 12, 31), 364),
            (Date(2024, 12, 31), 365),
        ],
    )
    def test_day_of_year(self, d, expect):
        assert d.day_of_year() == expect
        assert Date.from_day_of_year(d.year, expect) == d

    @pytest.mark.parametrize(
        "year, day",
        [
            (2023, 365),
            (2024, 366),
            (2023, -1),
        ],
    )
    def test_out_of_range(self, year, day):
        with pytest.raises(Overflow):
            Date.from_day_of_year(year, day)

    @given(dates())
    def test_matches_stdlib(self, d):
        assert (
            Date.from_py_date(d).day_of_year() == d.timetuple().tm_yday - 1
        )


class TestDayIndex:

    @pytest.mark.parametrize(
        "d, expect",
        [
            (Date(0, 1, 1), 0),
            (Date(1, 1, 1), 366),
            (Date(1970, 1, 1), 719_528),
            (Date(2023, 5, 14), 739_019),
            (Date(-1, 1, 1), -365),
        ],
    )
    def test_known_values(self, d, expect):
        assert d.day_index() == expect
        assert Date.from_day_index(expect) == d

    @given(dates())
    def test_matches_stdlib_ordinal(self, d):
        assert Date.from_py_date(d).day_index() == d.toordinal() + 365
        assert Date.from_day_index(d.toordinal() + 365).py_date() == d

    @given(
        integers(
            min_value=Date.MIN.day_index(), max_value=Date.MAX.day_index()
        )
    )
    def test_inverse(self, n):
        assert Date.from_day_index(n).day_index() == n

    def test_saturates(self):
        assert Date.from_day_index(Date.MIN.day_index() - 1) == Date.MIN
        assert Date.from_day_index(Date.MAX.day_index() + 1) == Date.MAX
        assert Date.from_day_index(-(1 << 80)) == Date.MIN
        assert Date.from_day_index(1 << 80) == Date.MAX

    def test_not_an_int(self):
        with pytest.raises(TypeError):
            Date.from_day_index(1.5)  # type: ignore[arg-type]


class TestDayOfWeek:

    @pytest.mark.parametrize(
        "d, expect",
        [
            (Date(1, 1, 1), MONDAY),
            (Date(0, 1, 1), SATURDAY),
            (Date.from_day_index(1), SUNDAY),
            (Date.from_day_index(367), TUESDAY),
            (Date.from_day_index(-1), FRIDAY),
            (Date(-1, 12, 29), WEDNESDAY),
            (Date(2023, 5, 14), SUNDAY),
            (Date.from_day_index(739_020), MONDAY),
            (Date(1970, 1, 1), THURSDAY),
        ],
    )
    def test_known_values(self, d, expect):
        assert d.day_of_week() is expect

    @given(dates())
    def test_matches_stdlib(self, d):
        assert Date.from_py_date(d).day_of_week().value == d.weekday()


class TestWeekDate:

    @pytest.mark.parametrize(
        "d, expect, formatted",
        [
            (Date(2008, 12, 28), (2008, 52, SUNDAY), "2008-W52-7"),
            (Date(2008, 12, 29), (2009, 1, MONDAY), "2009-W01-1"),
            (Date(2010, 1, 3), (2009, 53, SUNDAY), "2009-W53-7"),
            (Date(2023, 5, 15), (2023, 20, MONDAY), "2023-W20-1"),
            (Date(2021, 1, 1), (2020, 53, FRIDAY), "2020-W53-5"),
        ],
    )
    def test_known_values(self, d, expect, formatted):
        wd = d.week_date()
        assert wd == expect
        assert isinstance(wd, WeekDate)
        assert str(wd) == formatted
        assert repr(wd) == f"WeekDate({formatted})"
        assert wd.to_date() == d
        assert Date.from_week_date(*expect) == d

    def test_expanded_year(self):
        assert Date(12023, 5, 15).week_date().format_iso()[:8] == "+12023-W"
        assert Date(-44, 3, 15).week_date().format_iso()[:7] == "-0044-W"

    @given(dates())
    def test_matches_stdlib(self, d):
        year, week, day = Date.from_py_date(d).week_date()
        assert (year, week, day.value + 1) == tuple(d.isocalendar())

    @given(integers(-(10**12), 10**12))
    def test_roundtrip(self, n):
        d = Date.from_day_index(n)
        wd = d.week_date()
        assert wd.to_date() == d
        assert Date.from_week_date(*wd) == d

    @pytest.mark.parametrize(
        "d",
        [
            Date(0, 1, 1),
            Date(0, 12, 31),
            Date(-1, 1, 1),
            Date(-400, 2, 29),
            Date(12023, 5, 15),
        ],
    )
    def test_roundtrip_outside_common_era(self, d):
        assert d.week_date().to_date() == d

    @pytest.mark.parametrize(
        "year, week, day",
        [
            (2023, 0, MONDAY),
            (2023, 53, MONDAY),
            (2010, 53, MONDAY),
            (2009, 54, MONDAY),
        ],
    )
    def test_week_out_of_range(self, year, week, day):
        with pytest.raises(Overflow):
            Date.from_week_date(year, week, day)


class TestAdd:

    def test_units(self):
        d = Date(1970, 1, 1)
        next_year = Date(1971, 1, 1)
        next_day = Date(1970, 1, 2)

        assert d.add(Unit.YEARS, 1) == next_year
        assert d.add("days", 365) == next_year
        assert d.add("hours", 365 * 24) == next_year
        assert d.add("minutes", 365 * 24 * 60) == next_year
        assert d.add("seconds", 365 * 24 * 60 * 60) == next_year
        assert (
            d.add("nanoseconds", 365 * 24 * 60 * 60 * 1_000_000_000)
            == next_year
        )

        assert d.add("days", 1) == next_day
        assert d.add("hours", 24) == next_day
        assert d.add("hours", 36) == next_day
        assert d.add("minutes", 36 * 60) == next_day
        assert d.add("seconds", 36 * 60 * 60) == next_day
        assert d.add("milliseconds", 36 * 60 * 60 * 1_000) == next_day
        assert d.add("microseconds", 36 * 60 * 60 * 1_000_000) == next_day

    @pytest.mark.parametrize(
        "d, unit, amount, expect",
        [
            (Date(2021, 1, 31), "months", 1, Date(2021, 2, 28)),
            (Date(2020, 1, 31), "months", 1, Date(2020, 2, 29)),
            (Date(2020, 3, 31), "months", -1, Date(2020, 2, 29)),
            (Date(2023, 11, 15), "months", 3, Date(2024, 2, 15)),
            (Date(2023, 3, 15), "months", -14, Date(2022, 1, 15)),
            (Date(2023, 1, 15), "months", -1, Date(2022, 12, 15)),
            (Date(2023, 1, 15), "months", 24, Date(2025, 1, 15)),
            (Date(2020, 2, 29), "years", 1, Date(2021, 2, 28)),
            (Date(2020, 2, 29), "years", 4, Date(2024, 2, 29)),
            (Date(2023, 12, 31), "days", 1, Date(2024, 1, 1)),
            (Date(1970, 1, 1), "hours", -1, Date(1969, 12, 31)),
            (Date(1, 1, 1), "days", -1, Date(0, 12, 31)),
        ],
    )
    def test_calendar_units(self, d, unit, amount, expect):
        assert d.add(unit, amount) == expect

    def test_subtract(self):
        assert Date(2020, 2, 29).subtract("years", 1) == Date(2019, 2, 28)
        assert Date(2021, 3, 1).subtract(Unit.DAYS, 1) == Date(2021, 2, 28)

    def test_saturates(self):
        assert Date.MAX.add("days", 1) == Date.MAX
        assert Date.MAX.add("years", 1) == Date.MAX
        assert Date.MIN.subtract("days", 1) == Date.MIN
        assert Date.MIN.subtract("years", 1) == Date.MIN

    def test_invalid_unit(self):
        with pytest.raises(ValueError, match="weeks"):
            Date(2021, 1, 1).add("weeks", 1)  # type: ignore[arg-type]

    def test_invalid_amount(self):
        with pytest.raises(TypeError):
            Date(2021, 1, 1).add("days", 1.5)  # type: ignore[arg-type]

    @given(dates(), integers(min_value=-10_000, max_value=10_000))
    def test_days_matches_day_index(self, d, n):
        date = Date.from_py_date(d)
        assert date.add("days", n).day_index() == date.day_index() + n


def test_days_until_and_since():
    a = Date(2021, 1, 2)
    b = Date(2021, 1, 5)
    assert a.days_until(b) == 3
    assert b.days_until(a) == -3
    assert b.days_since(a) == 3
    assert a.days_since(a) == 0
    assert Date(2023, 1, 1).days_since(Date(2022, 1, 1)) == 365


def test_at():
    d = Date(2021, 1, 2)
    assert d.at(Time(12, 30)) == DateTime(2021, 1, 2, 12, 30)
    tz = TimeZone.parse_iso("+02:00")
    assert d.at(Time(12, 30), tz) == DateTime(2021, 1, 2, 12, 30, tz=tz)


class TestFormatIso:

    @pytest.mark.parametrize(
        "d, expect",
        [
            (Date(2021, 1, 2), "2021-01-02"),
            (Date(1, 1, 1), "0001-01-01"),
            (Date(0, 1, 1), "0000-01-01"),
            (Date(9999, 12, 31), "9999-12-31"),
            (Date(10_000, 1, 1), "+10000-01-01"),
            (Date(-1, 1, 1), "-0001-01-01"),
            (Date(-44, 3, 15), "-0044-03-15"),
            (Date(-12_023, 5, 15), "-12023-05-15"),
        ],
    )
    def test_format(self, d, expect):
        assert d.format_iso() == expect
        assert str(d) == expect
        assert Date.parse_iso(expect) == d

    def test_repr(self):
        assert repr(Date(2021, 1, 2)) == "Date(2021-01-02)"


class TestParseIso:

    @pytest.mark.parametrize(
        "s",
        [
            "2023-05-15",
            "20230515",
            "2023-135",
            "2023135",
            "2023-W20-1",
            "2023W201",
            "+2023-05-15",
            "+02023-135",
            "+2023-W20-1",
        ],
    )
    def test_all_date_types(self, s):
        assert Date.parse_iso(s) == Date(2023, 5, 15)

    @pytest.mark.parametrize(
        "s, expect",
        [
            ("2024-366", Date(2024, 12, 31)),
            ("2024-060", Date(2024, 2, 29)),
            ("2023-060", Date(2023, 3, 1)),
            ("2009-W53-7", Date(2010, 1, 3)),
            ("+99999-06-21", Date(99_999, 6, 21)),
            ("-099999-06-21", Date(-99_999, 6, 21)),
            ("+9223372036854775807-12-31", Date.MAX),
            ("-9223372036854775808-01-01", Date.MIN),
        ],
    )
    def test_valid(self, s, expect):
        assert Date.parse_iso(s) == expect

    @pytest.mark.parametrize(
        "s, exc",
        [
            ("", EndOfBuffer),
            ("2023-05-1", EndOfBuffer),
            ("2023-05", EndOfBuffer),
            ("2023", EndOfBuffer),
            ("202-05-15", InvalidCharacter),
            ("x023-05-15", InvalidCharacter),
            ("2023-05-15T", InvalidCharacter),
            ("2023-05-15 ", InvalidCharacter),
            ("2023/05/15", InvalidCharacter),
            ("2023-05-1٥", InvalidCharacter),
            ("2023-0515", ConflictingFormat),
            ("202305-15", ConflictingFormat),
            ("+2023W201", ConflictingFormat),
            ("2023-13-01", InvalidMonth),
            ("2023-00-01", InvalidMonth),
            ("2023-02-29", InvalidDay),
            ("2023-04-31", InvalidDay),
            ("2023-000", Overflow),
            ("2023-366", Overflow),
            ("2023-W00-1", Overflow),
            ("2023-W53-1", Overflow),
            ("2023-W20-0", Overflow),
            ("2023-W20-8", Overflow),
            ("+9223372036854775808-01-01", Overflow),
        ],
    )
    def test_invalid(self, s, exc):
        with pytest.raises(exc):
            Date.parse_iso(s)

    def test_not_a_string(self):
        with pytest.raises(TypeError):
            Date.parse_iso(20230515)  # type: ignore[arg-type]

    @given(text())
    def test_fuzzing(self, s: str):
        try:
            d = Date.parse_iso(s)
        except ValueError:
            pass
        else:
            assert isinstance(d, Date)


class TestComparison:

    def test_eq(self):
        d = Date(2021, 1, 2)
        same = Date(2021, 1, 2)
        different = Date(2021, 1, 3)

        assert d == same
        assert not d == different
        assert not d != same
        assert d != different

        assert hash(d) == hash(same)
        assert hash(d) != hash(different)

        assert d == AlwaysEqual()
        assert d != NeverEqual()
        assert not d == NeverEqual()
        assert not d != AlwaysEqual()

        assert d != 42  # type: ignore[comparison-overlap]
        assert not d == 42  # type: ignore[comparison-overlap]

    def test_order(self):
        d = Date(2021, 1, 2)
        same = Date(2021, 1, 2)
        bigger = Date(2022, 1, 1)
        smaller = Date(2020, 12, 31)

        assert d <= same
        assert d <= bigger
        assert not d <= smaller

        assert d < bigger
        assert not d < same
        assert not d < smaller

        assert d >= same
        assert d >= smaller
        assert not d >= bigger

        assert d > smaller
        assert not d > same
        assert not d > bigger

        assert Date(-1, 12, 31) < Date(0, 1, 1)

        # Ensure comparison to other types is handled correctly
        assert d < AlwaysLarger()
        assert d <= AlwaysLarger()
        assert not d > AlwaysLarger()
        assert not d >= AlwaysLarger()
        assert not d < AlwaysSmaller()
        assert not d <= AlwaysSmaller()
        assert d > AlwaysSmaller()
        assert d >= AlwaysSmaller()

        with pytest.raises(TypeError):
            d < 42  # type: ignore[operator]

    @given(dates(), dates())
    def test_order_matches_day_index(self, a, b):
        da, db = Date.from_py_date(a), Date.from_py_date(b)
        assert (da < db) == (da.day_index() < db.day_index())


class TestPyDate:

    def test_py_date(self):
        assert Date(2021, 1, 2).py_date() == py_date(2021, 1, 2)

    def test_py_date_out_of_range(self):
        with pytest.raises(ValueError):
            Date(0, 1, 1).py_date()

    def test_from_py_date(self):
        assert Date.from_py_date(py_date(2021, 1, 2)) == Date(2021, 1, 2)
        assert Date.from_py_date(py_datetime(2021, 1, 2, 3)) == Date(
            2021, 1, 2
        )

    def test_from_py_date_wrong_type(self):
        with pytest.raises(TypeError, match="date"):
            Date.from_py_date("2021-01-02")  # type: ignore[arg-type]


def test_copy():
    d = Date(2021, 1, 2)
    assert copy(d) is d
    assert deepcopy(d) is d


@pytest.mark.parametrize(
    "d", [Date(2021, 1, 2), Date.MIN, Date.MAX, Date(-44, 3, 15)]
)
def test_pickle(d):
    assert pickle.loads(pickle.dumps(d)) == d


def test_compatible_unpickle():
    dumped = (
        b"\x80\x04\x95-\x00\x00\x00\x00\x00\x00\x00\x8c\x08isochron\x94"
        b"\x8c\x0b_unpkl_date\x94\x93\x94C\n\xe5\x07\x00\x00\x00\x00\x00"
        b"\x00\x01\x02\x94\x85\x94R\x94."
    )
    assert pickle.loads(dumped) == Date(2021, 1, 2)


def test_constants():
    assert Date.MIN == Date(MIN_I64, 1, 1)
    assert Date.MAX == Date(MAX_I64, 12, 31)
    assert Date.UNIX_EPOCH == Date(1970, 1, 1)


def test_cannot_subclass():
    with pytest.raises(TypeError):

        class SubclassDate(Date):  # type: ignore[misc]
            pass


def test_error_messages_include_input():
    with pytest.raises(InvalidCharacter, match=re.escape("'2023/05/15'")):
        Date.parse_iso("2023/05/15")
