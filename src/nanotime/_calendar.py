# The MIT License (MIT)
#
# Copyright (c) 2026 The nanotime developers
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
# The presentation computations (year, month, hour...) all divide by
# positive constants and want the division to round down. Rather than
# correcting for negative numerators everywhere, they operate on
# "absolute" seconds: seconds since the year -292277022399, which is early
# enough that every time we care about is positive there.
#
# That year is 1 mod 400, so the exceptional years of the 400-year cycle
# come as late as possible: the first leap year is the 4th year, the first
# skipped leap year the 100th, and the unskipped one the 400th.
#
# Three epochs are in use:
#
# - absolute: seconds since Jan 1 of ABSOLUTE_ZERO_YEAR
# - internal: seconds since Jan 1 of the year 1 (the zero Time)
# - unix: seconds since Jan 1 1970
from __future__ import annotations

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY
DAYS_PER_400_YEARS = 365 * 400 + 97
DAYS_PER_100_YEARS = 365 * 100 + 24
DAYS_PER_4_YEARS = 365 * 4 + 1

ABSOLUTE_ZERO_YEAR = -292277022399
INTERNAL_YEAR = 1

# (ABSOLUTE_ZERO_YEAR - INTERNAL_YEAR) * 365.2425 days, kept in integers
ABSOLUTE_TO_INTERNAL = (
    (ABSOLUTE_ZERO_YEAR - INTERNAL_YEAR) * 3_652_425 * SECONDS_PER_DAY // 10_000
)
INTERNAL_TO_ABSOLUTE = -ABSOLUTE_TO_INTERNAL

UNIX_TO_INTERNAL = (
    1969 * 365 + 1969 // 4 - 1969 // 100 + 1969 // 400
) * SECONDS_PER_DAY
INTERNAL_TO_UNIX = -UNIX_TO_INTERNAL
UNIX_TO_ABSOLUTE = UNIX_TO_INTERNAL + INTERNAL_TO_ABSOLUTE
ABSOLUTE_TO_UNIX = -UNIX_TO_ABSOLUTE

WALL_TO_INTERNAL = (
    1884 * 365 + 1884 // 4 - 1884 // 100 + 1884 // 400
) * SECONDS_PER_DAY

# Layout of the packed wall word, see Time
HAS_MONOTONIC = 1 << 63
NSEC_SHIFT = 30
NSEC_MASK = (1 << NSEC_SHIFT) - 1
WALL_SEC_MASK = (1 << 33) - 1
MIN_WALL = WALL_TO_INTERNAL  # year 1885
MAX_WALL = WALL_TO_INTERNAL + WALL_SEC_MASK  # year 2157

# Weekday numbering used by the calendar functions
SUNDAY_INDEX = 0
MONDAY_INDEX = 1
THURSDAY_INDEX = 4

# Days before the start of each month in a non-leap year.
# DAYS_BEFORE[12] is the length of the year.
DAYS_BEFORE = (
    0,
    31,
    31 + 28,
    31 + 28 + 31,
    31 + 28 + 31 + 30,
    31 + 28 + 31 + 30 + 31,
    31 + 28 + 31 + 30 + 31 + 30,
    31 + 28 + 31 + 30 + 31 + 30 + 31,
    31 + 28 + 31 + 30 + 31 + 30 + 31 + 31,
    31 + 28 + 31 + 30 + 31 + 30 + 31 + 31 + 30,
    31 + 28 + 31 + 30 + 31 + 30 + 31 + 31 + 30 + 31,
    31 + 28 + 31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30,
    31 + 28 + 31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30 + 31,
)


def is_leap(year: int) -> bool:
    """Whether the year is a leap year in the proleptic Gregorian calendar

    Example
    -------

    >>> is_leap(2000), is_leap(1900), is_leap(2024)
    (True, False, True)

    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in(month: int, year: int) -> int:
    """The number of days in the month (1-12) of the given year"""
    if month == 2 and is_leap(year):
        return 29
    return DAYS_BEFORE[month] - DAYS_BEFORE[month - 1]


def abs_date(abs_: int, full: bool) -> tuple[int, int, int, int]:
    """Decompose absolute seconds into ``(year, month, day, yday)``.

    ``yday`` is zero based. The month and day are only computed when
    ``full`` is true; otherwise both are returned as 0.

    Example
    -------

    >>> abs_date(0, True)
    (-292277022399, 1, 1, 0)

    """
    d = abs_ // SECONDS_PER_DAY

    # 400-year cycles
    n = d // DAYS_PER_400_YEARS
    y = 400 * n
    d -= DAYS_PER_400_YEARS * n

    # 100-year cycles. The last one has an extra leap day, so on the
    # last day of the cycle n is 4 instead of 3.
    n = d // DAYS_PER_100_YEARS
    n -= n >> 2
    y += 100 * n
    d -= DAYS_PER_100_YEARS * n

    # 4-year cycles. A missing leap day in the last one doesn't matter.
    n = d // DAYS_PER_4_YEARS
    y += 4 * n
    d -= DAYS_PER_4_YEARS * n

    # Years within a 4-year cycle. The last is a leap year, so on its
    # last day n is 4 instead of 3.
    n = d // 365
    n -= n >> 2
    y += n
    d -= 365 * n

    year = y + ABSOLUTE_ZERO_YEAR
    yday = d
    if not full:
        return year, 0, 0, yday

    day = yday
    if is_leap(year):
        if day > 31 + 29 - 1:
            # after the leap day; pretend it wasn't there
            day -= 1
        elif day == 31 + 29 - 1:
            return year, 2, 29, yday

    # Assume every month has 31 days. The estimate is at most one too low.
    month = day // 31
    end = DAYS_BEFORE[month + 1]
    if day >= end:
        month += 1
        begin = end
    else:
        begin = DAYS_BEFORE[month]

    return year, month + 1, day - begin + 1, yday


def abs_weekday(abs_: int) -> int:
    """The weekday (0 is Sunday) of absolute seconds"""
    # January 1 of the absolute year, like January 1 of 2001, was a Monday.
    sec = (abs_ + MONDAY_INDEX * SECONDS_PER_DAY) % SECONDS_PER_WEEK
    return sec // SECONDS_PER_DAY


def abs_iso_week(abs_: int) -> tuple[int, int]:
    """The ISO 8601 ``(year, week)`` of absolute seconds.

    The week belongs to the year of its Thursday, so Jan 1-3 may fall in
    week 52 or 53 of the previous year and Dec 29-31 in week 1 of the next.
    """
    # Mon Tue Wed Thu Fri Sat Sun
    # +3  +2  +1  0   -1  -2  -3
    d = THURSDAY_INDEX - abs_weekday(abs_)
    if d == THURSDAY_INDEX - SUNDAY_INDEX:
        d = -3
    year, _, _, yday = abs_date(abs_ + d * SECONDS_PER_DAY, False)
    return year, yday // 7 + 1


def abs_clock(abs_: int) -> tuple[int, int, int]:
    """The ``(hour, minute, second)`` within the day of absolute seconds"""
    sec = abs_ % SECONDS_PER_DAY
    hour, sec = divmod(sec, SECONDS_PER_HOUR)
    minute, sec = divmod(sec, SECONDS_PER_MINUTE)
    return hour, minute, sec


def days_since_epoch(year: int) -> int:
    """Days from the absolute epoch to Jan 1 of ``year``"""
    y = year - ABSOLUTE_ZERO_YEAR

    n = y // 400
    y -= 400 * n
    d = DAYS_PER_400_YEARS * n

    n = y // 100
    y -= 100 * n
    d += DAYS_PER_100_YEARS * n

    n = y // 4
    y -= 4 * n
    d += DAYS_PER_4_YEARS * n

    return d + 365 * y


def norm(hi: int, lo: int, base: int) -> tuple[int, int]:
    """Carry ``lo`` into ``hi`` so that ``0 <= lo < base``.

    Rounds toward negative infinity, so a negative ``lo`` borrows from
    ``hi``.

    Example
    -------

    >>> norm(1, 32, 31)
    (2, 1)
    >>> norm(5, -1, 60)
    (4, 59)

    """
    carry, lo = divmod(lo, base)
    return hi + carry, lo
