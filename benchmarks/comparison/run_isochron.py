# Run with: python benchmarks/comparison/run_isochron.py
import pyperf

runner = pyperf.Runner()

runner.timeit(
    "various operations",
    "d = DateTime.parse_iso('2020-04-05T22:04:00-04:00').to_utc();"
    "d.timestamp() - DateTime.now().timestamp();"
    "d.add('minutes', 270).to_tz(tz)",
    setup="from isochron import DateTime, TimeZone; "
    "tz = TimeZone.parse_iso('+02:00')",
)

runner.timeit(
    "new date",
    "Date(2020, 2, 29)",
    setup="from isochron import Date",
)

runner.timeit(
    "date add",
    "d.add('months', 59)",
    setup="from isochron import Date; d = Date(1987, 3, 31)",
)

runner.timeit(
    "date diff",
    "d1.days_until(d2)",
    setup="from isochron import Date; d1 = Date(2020, 2, 29); d2 = Date(2025, 2, 28)",
)

runner.timeit(
    "parse date",
    "f('2020-02-29')",
    setup="from isochron import Date; f = Date.parse_iso",
)

runner.timeit(
    "week date",
    "d.week_date()",
    setup="from isochron import Date; d = Date(2020, 2, 29)",
)

runner.timeit(
    "change tz",
    "dt.to_tz(tz)",
    setup="from isochron import DateTime, TimeZone; "
    "tz = TimeZone.parse_iso('-04:00'); "
    "dt = DateTime(2020, 3, 20, 12, 30, 45, tz=TimeZone.parse_iso('+01:00'))",
)
