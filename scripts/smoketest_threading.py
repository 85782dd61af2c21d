"""
Stress test for sharing values and patching the clock between threads.

Note this isn't a unit test, because it's only meaningful on a
free-threaded build of Python.
"""

import sys
import time
from threading import Thread

from isochron import Date, DateTime, TimeZone

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


SHARED_DT = DateTime(2024, 6, 15, 12, 0)
NUM_THREADS = 16
NUM_ITERATIONS = 500
STRING_SAMPLE = [
    "2024-06-15T12:00:00Z",
    "2024-W24-6T12:00:00+02:00",
    "2024-167T12:00:00-05:30",
    "20240615T120000.123456789Z",
    "+12024-06-15T12:00Z",
    "-0044-03-15T24:00Z",
    "2024-02-29T23:59:59,5-04",
]
OFFSET_SAMPLE = ["Z", "+01:00", "-04:00", "+05:30", "+14", "-1130", "+00:00"]
assert (
    len(STRING_SAMPLE) % NUM_THREADS
), "String sample should not be evenly divisible by number of threads"
STRINGS = STRING_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)


def parse_and_format(strings):
    """Round-trip strings through the parser and formatter"""
    for s in strings:
        dt = DateTime.parse_iso(s)
        assert DateTime.parse_iso(dt.format_iso()) == dt


def convert_shared(strings):
    """Convert a datetime shared by all threads into other zones"""
    for n, _ in enumerate(strings):
        tz = TimeZone.parse_iso(OFFSET_SAMPLE[n % len(OFFSET_SAMPLE)])
        converted = SHARED_DT.to_tz(tz)
        assert converted.same_instant(SHARED_DT)
        assert Date.from_day_index(converted.day_index()) == converted.date()


def main(func):
    print(f"Starting test: {func.__name__}")
    threads = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(STRINGS[n::NUM_THREADS],))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main(parse_and_format)
    main(convert_shared)
