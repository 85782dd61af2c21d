# Run with: python benchmarks/comparison/run_stdlib.py
import pyperf

runner = pyperf.Runner()

runner.timeit(
    "various operations",
    "d = datetime.fromisoformat('2020-04-05T22:04:00-04:00')"
    ".astimezone(timezone.utc);"
    "d - datetime.now(timezone.utc);"
    "(d + timedelta(minutes=270)).astimezone(tz)",
    setup="from datetime import datetime, timedelta, timezone; "
    "tz = timezone(timedelta(hours=2))",
)

runner.timeit(
    "new date",
    "date(2020, 2, 29)",
    setup="from datetime import date",
)

runner.timeit(
    "date diff",
    "(d2 - d1).days",
    setup="from datetime import date; d1 = date(2020, 2, 29); d2 = date(2025, 2, 28)",
)

runner.timeit(
    "parse date",
    "f('2020-02-29')",
    setup="from datetime import date; f = date.fromisoformat",
)

runner.timeit(
    "week date",
    "d.isocalendar()",
    setup="from datetime import date; d = date(2020, 2, 29)",
)

runner.timeit(
    "change tz",
    "dt.astimezone(tz)",
    setup="from datetime import datetime, timedelta, timezone; "
    "tz = timezone(timedelta(hours=-4)); "
    "dt = datetime(2020, 3, 20, 12, 30, 45, tzinfo=timezone(timedelta(hours=1)))",
)
