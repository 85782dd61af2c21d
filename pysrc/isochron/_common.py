Nanos = int  # 0-999_999_999

# Years are bounded by a signed 64-bit integer
MIN_YEAR = -(1 << 63)
MAX_YEAR = (1 << 63) - 1

DAYS_IN_400_YEARS = 400 * 365 + 100 - 3
# none of the four years is a century year
DAYS_IN_4_YEARS = 4 * 365 + 1
# days from 0000-01-01 to the 1st of January of year 101, 201, and 301
YEAR_101_JAN_1 = 101 * 365 + 25
YEAR_201_JAN_1 = 201 * 365 + 49
YEAR_301_JAN_1 = 301 * 365 + 73

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_SEC = 1_000_000_000
SECS_PER_DAY = 86_400


class InvalidMonth(ValueError):
    """A month outside the range 1-12"""


class InvalidDay(ValueError):
    """A day that doesn't exist in the given month"""


class Overflow(ValueError):
    """A value is outside of its valid range"""


class ParseError(ValueError):
    """A string is not valid ISO 8601"""


class InvalidCharacter(ParseError):
    """An unexpected character was encountered"""


class InvalidLength(ParseError):
    """A string doesn't have one of the accepted lengths"""


class EndOfBuffer(ParseError):
    """The string ended in the middle of a field"""


class BufferTooLarge(ParseError):
    """The string exceeds the maximum length that is scanned"""


class ConflictingFormat(ParseError):
    """Basic and extended format are mixed"""


class ConflictingDateType(ParseError):
    """Calendar, ordinal, and week date syntax are mixed"""
