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
"""Evaluation of POSIX TZ strings, e.g. ``PST8PDT,M3.2.0,M11.1.0``.

These are found in the footer of TZif files and describe the zone for all
times after the last recorded transition. See tzset(3).
"""
from __future__ import annotations

from typing import NamedTuple, Optional, Tuple

from ._calendar import (
    ABSOLUTE_TO_UNIX,
    DAYS_BEFORE,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    UNIX_TO_ABSOLUTE,
    abs_date,
    days_in,
    days_since_epoch,
    is_leap,
)

__all__ = ["Rule", "tzset"]

OMEGA = (1 << 63) - 1

JULIAN, DAY_OF_YEAR, MONTH_WEEK_DAY = range(3)
_DEFAULT_RULES = ",M3.2.0,M11.1.0"


class Rule(NamedTuple):
    """A transition rule: ``Jn``, ``n`` or ``Mm.w.d``, plus a time of day"""

    kind: int
    day: int
    week: int = 0
    month: int = 0
    time: int = 2 * SECONDS_PER_HOUR


# (name, offset, start, end, is_dst)
_Result = Tuple[str, int, int, int, bool]


def tzset(s: str, last_tx_sec: int, sec: int) -> Optional[_Result]:
    """Evaluate the TZ string ``s`` at Unix time ``sec``.

    Returns the zone name, its UTC offset, the validity interval and the
    DST flag, or ``None`` if ``s`` can't be parsed. ``last_tx_sec`` is the
    start of validity for zones without DST.

    The interval is exact near a DST transition, and otherwise the
    surrounding year boundary.
    """
    parsed = _parse_name(s)
    if parsed is None:
        return None
    std_name, s = parsed
    parsed_offset = _parse_offset(s)
    if parsed_offset is None:
        return None
    # The string gives offsets to add to local time to get UTC.
    # Ours are the other way around.
    std_offset, s = -parsed_offset[0], parsed_offset[1]

    if not s or s[0] == ",":
        return std_name, std_offset, last_tx_sec, OMEGA, False

    parsed = _parse_name(s)
    if parsed is None:
        return None
    dst_name, s = parsed
    if not s or s[0] == ",":
        dst_offset = std_offset + SECONDS_PER_HOUR
    else:
        parsed_offset = _parse_offset(s)
        if parsed_offset is None:
            return None
        dst_offset, s = -parsed_offset[0], parsed_offset[1]

    if not s:
        s = _DEFAULT_RULES
    # tzcode also accepts ';' here
    if s[0] not in ",;":
        return None

    parsed_rule = _parse_rule(s[1:])
    if parsed_rule is None or not parsed_rule[1].startswith(","):
        return None
    start_rule, s = parsed_rule
    parsed_rule = _parse_rule(s[1:])
    if parsed_rule is None or parsed_rule[1]:
        return None
    end_rule = parsed_rule[0]

    year, _, _, yday = abs_date(sec + UNIX_TO_ABSOLUTE, False)
    ysec = yday * SECONDS_PER_DAY + sec % SECONDS_PER_DAY
    # start of the year as a Unix time
    year_start = days_since_epoch(year) * SECONDS_PER_DAY + ABSOLUTE_TO_UNIX

    start_sec = rule_time(year, start_rule, std_offset)
    end_sec = rule_time(year, end_rule, dst_offset)
    dst_is_dst, std_is_dst = True, False
    # Southern hemisphere: the "DST" period wraps around the new year.
    # Flip the roles while keeping the labels.
    if end_sec < start_sec:
        start_sec, end_sec = end_sec, start_sec
        std_name, dst_name = dst_name, std_name
        std_offset, dst_offset = dst_offset, std_offset
        std_is_dst, dst_is_dst = dst_is_dst, std_is_dst

    if ysec < start_sec:
        return (
            std_name,
            std_offset,
            year_start,
            start_sec + year_start,
            std_is_dst,
        )
    elif ysec >= end_sec:
        return (
            std_name,
            std_offset,
            end_sec + year_start,
            year_start + 365 * SECONDS_PER_DAY,
            std_is_dst,
        )
    return (
        dst_name,
        dst_offset,
        start_sec + year_start,
        end_sec + year_start,
        dst_is_dst,
    )


def rule_time(year: int, r: Rule, offset: int) -> int:
    """Seconds since the start of ``year`` (UTC) at which rule ``r`` fires,
    for a zone currently at UTC ``offset``."""
    if r.kind == JULIAN:
        s = (r.day - 1) * SECONDS_PER_DAY
        if is_leap(year) and r.day >= 60:
            s += SECONDS_PER_DAY
    elif r.kind == DAY_OF_YEAR:
        s = r.day * SECONDS_PER_DAY
    else:
        # Zeller's congruence: weekday of the first day of the month
        m1 = (r.month + 9) % 12 + 1
        yy0 = year - 1 if r.month <= 2 else year
        yy1, yy2 = divmod(yy0, 100)
        dow = ((26 * m1 - 2) // 10 + 1 + yy2 + yy2 // 4 + yy1 // 4 - 2 * yy1) % 7
        # day of the month (zero based) of the first matching weekday
        d = (r.day - dow) % 7
        for _ in range(1, r.week):
            if d + 7 >= days_in(r.month, year):
                break
            d += 7
        d += DAYS_BEFORE[r.month - 1]
        if is_leap(year) and r.month > 2:
            d += 1
        s = d * SECONDS_PER_DAY
    return s + r.time - offset


def _parse_name(s: str) -> Optional[Tuple[str, str]]:
    if not s:
        return None
    if s[0] == "<":
        end = s.find(">")
        if end == -1:
            return None
        return s[1:end], s[end + 1 :]
    for i, c in enumerate(s):
        if c in "0123456789,-+":
            if i < 3:
                return None
            return s[:i], s[i:]
    if len(s) < 3:
        return None
    return s, ""


def _parse_offset(s: str) -> Optional[Tuple[int, str]]:
    if not s:
        return None
    neg = s[0] == "-"
    if s[0] in "+-":
        s = s[1:]

    # tzcode allows up to a week here, POSIX only 24 hours
    parsed = _parse_num(s, 0, 24 * 7)
    if parsed is None:
        return None
    hours, s = parsed
    offset = hours * SECONDS_PER_HOUR
    for scale in (SECONDS_PER_MINUTE, 1):
        if not s.startswith(":"):
            break
        parsed = _parse_num(s[1:], 0, 59)
        if parsed is None:
            return None
        num, s = parsed
        offset += num * scale
    return (-offset if neg else offset), s


def _parse_rule(s: str) -> Optional[Tuple[Rule, str]]:
    if not s:
        return None
    if s[0] == "J":
        parsed = _parse_num(s[1:], 1, 365)
        if parsed is None:
            return None
        rule, s = Rule(JULIAN, parsed[0]), parsed[1]
    elif s[0] == "M":
        fields = []
        for low, high in ((1, 12), (1, 5), (0, 6)):
            if fields:
                if not s.startswith("."):
                    return None
                s = s[1:]
            else:
                s = s[1:]
            parsed = _parse_num(s, low, high)
            if parsed is None:
                return None
            fields.append(parsed[0])
            s = parsed[1]
        month, week, day = fields
        rule = Rule(MONTH_WEEK_DAY, day, week, month)
    else:
        parsed = _parse_num(s, 0, 365)
        if parsed is None:
            return None
        rule, s = Rule(DAY_OF_YEAR, parsed[0]), parsed[1]

    if not s.startswith("/"):
        return rule, s
    parsed_offset = _parse_offset(s[1:])
    if parsed_offset is None:
        return None
    return rule._replace(time=parsed_offset[0]), parsed_offset[1]


def _parse_num(s: str, low: int, high: int) -> Optional[Tuple[int, str]]:
    digits = len(s) - len(s.lstrip("0123456789"))
    if digits == 0:
        return None
    num = int(s[:digits])
    if not low <= num <= high:
        return None
    return num, s[digits:]
