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
# - The public classes live in this one file, since they all 'know' about
#   each other. Pure helpers without such ties live in the private modules:
#   - _calendar: epoch constants and calendar arithmetic
#   - _tzrule: evaluation of POSIX TZ strings
#   - _tzif: reading zone files
# - Durations and times behave as 64-bit quantities: results outside that
#   range are clamped to the nearest bound rather than wrapped or raised.
# - A Time carries an optional monotonic clock reading, see the notes on
#   the Time class.
from __future__ import annotations

__version__ = "0.1.0"

import logging
import os
import re
import threading
import zoneinfo
from datetime import (
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from enum import IntEnum
from operator import attrgetter
from time import monotonic_ns as _monotonic_ns, time_ns as _time_ns
from typing import (
    TYPE_CHECKING,
    Callable,
    ClassVar,
    Iterable,
    NamedTuple,
    Optional,
    Tuple,
    overload,
)

from . import _tzif
from ._calendar import (
    ABSOLUTE_TO_UNIX,
    DAYS_BEFORE,
    HAS_MONOTONIC,
    INTERNAL_TO_UNIX,
    MAX_WALL,
    MIN_WALL,
    NSEC_MASK,
    NSEC_SHIFT,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    UNIX_TO_ABSOLUTE,
    UNIX_TO_INTERNAL,
    WALL_SEC_MASK,
    WALL_TO_INTERNAL,
    abs_clock,
    abs_date,
    abs_iso_week,
    abs_weekday,
    days_since_epoch,
    is_leap,
    norm,
)
from ._tzif import InvalidTZData
from ._tzrule import tzset

__all__ = [
    "Month",
    "Weekday",
    "month_name",
    "weekday_name",
    "Duration",
    "NANOSECOND",
    "MICROSECOND",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
    "hours",
    "minutes",
    "seconds",
    "Zone",
    "ZoneTransition",
    "ZoneLookup",
    "Location",
    "UTC",
    "LOCAL",
    "fixed_zone",
    "load_location",
    "load_location_from_tzdata",
    "Time",
    "since",
    "until",
    "system_clock",
    "MissingLocation",
    "InvalidFormat",
    "InvalidTZData",
]

logger = logging.getLogger(__name__)

_MIN_INT64 = -(1 << 63)
_MAX_INT64 = (1 << 63) - 1
# bounds of a zone's validity interval
ALPHA = _MIN_INT64
OMEGA = _MAX_INT64

_NS_PER_SECOND = 1_000_000_000
_object_new = object.__new__


def _clamp(ns: int) -> int:
    return max(_MIN_INT64, min(ns, _MAX_INT64))


def _divmod_trunc(a: int, b: int) -> tuple[int, int]:
    # like divmod(), but rounding toward zero (b > 0)
    q, r = divmod(abs(a), b)
    return (q, r) if a >= 0 else (-q, -r)


def _clamp_sec(sec: int) -> int:
    # seconds saturate symmetrically, at ±(2**63 - 1)
    return max(-_MAX_INT64, min(sec, _MAX_INT64))


class Month(IntEnum):
    """A month of the year, where 1 is January"""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def __str__(self) -> str:
        return month_name(self)


class Weekday(IntEnum):
    """A day of the week, where 0 is Sunday

    Warning
    -------
    This is not the ISO numbering (Monday is 1, Sunday is 7).
    """

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    def __str__(self) -> str:
        return weekday_name(self)


(
    JANUARY,
    FEBRUARY,
    MARCH,
    APRIL,
    MAY,
    JUNE,
    JULY,
    AUGUST,
    SEPTEMBER,
    OCTOBER,
    NOVEMBER,
    DECEMBER,
) = Month
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = Weekday

_LONG_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_LONG_DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def month_name(m: int, /) -> str:
    """The English name of the month.

    Values outside 1-12 don't raise, but give a placeholder.

    Example
    -------

    >>> month_name(1)
    'January'
    >>> month_name(13)
    '%!Month(13)'

    """
    if 1 <= m <= 12:
        return _LONG_MONTH_NAMES[m - 1]
    return f"%!Month({int(m)})"


def weekday_name(d: int, /) -> str:
    """The English name of the weekday (0 is Sunday).

    Values outside 0-6 don't raise, but give a placeholder.

    Example
    -------

    >>> weekday_name(0)
    'Sunday'
    >>> weekday_name(9)
    '%!Weekday(9)'

    """
    if 0 <= d <= 6:
        return _LONG_DAY_NAMES[d]
    return f"%!Weekday({int(d)})"


class Duration:
    """An elapsed time as a signed number of nanoseconds.

    The range is that of a 64-bit integer, about 292 years either way.
    Arithmetic that would leave this range is clamped to
    :attr:`MIN` or :attr:`MAX`.

    Example
    -------

    >>> d = Duration(hours=1, minutes=30)
    >>> d
    Duration(1h30m0s)
    >>> d.in_minutes()
    90.0
    >>> 90 * MINUTE == d
    True

    """

    __slots__ = ("_ns",)

    def __init__(
        self,
        *,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: float = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        # catch this common mistake
        assert type(microseconds) is int and type(nanoseconds) is int
        self._ns = _clamp(
            # Cast individual components to int to avoid floating point errors
            int(hours * 3_600_000_000_000)
            + int(minutes * 60_000_000_000)
            + int(seconds * 1_000_000_000)
            + int(milliseconds * 1_000_000)
            + microseconds * 1_000
            + nanoseconds
        )

    ZERO: ClassVar[Duration]
    """A duration of zero"""
    MIN: ClassVar[Duration]
    """The most negative duration"""
    MAX: ClassVar[Duration]
    """The most positive duration"""

    @classmethod
    def _from_ns(cls, ns: int, /) -> Duration:
        self = _object_new(cls)
        self._ns = _clamp(ns)
        return self

    def in_hours(self) -> float:
        """The total duration in hours

        Example
        -------

        >>> Duration(hours=1, minutes=30).in_hours()
        1.5

        """
        hrs, rest = _divmod_trunc(self._ns, 3_600_000_000_000)
        return hrs + rest / 3_600_000_000_000

    def in_minutes(self) -> float:
        """The total duration in minutes"""
        mins, rest = _divmod_trunc(self._ns, 60_000_000_000)
        return mins + rest / 60_000_000_000

    def in_seconds(self) -> float:
        """The total duration in seconds

        The whole seconds and the fraction are converted separately,
        so the result agrees with integer arithmetic as far as a float can.

        Example
        -------

        >>> Duration(minutes=2, seconds=1, milliseconds=500).in_seconds()
        121.5

        """
        secs, rest = _divmod_trunc(self._ns, _NS_PER_SECOND)
        return secs + rest / 1e9

    def in_milliseconds(self) -> int:
        """The total duration in whole milliseconds, truncated toward zero"""
        return _divmod_trunc(self._ns, 1_000_000)[0]

    def in_microseconds(self) -> int:
        """The total duration in whole microseconds, truncated toward zero"""
        return _divmod_trunc(self._ns, 1_000)[0]

    def in_nanoseconds(self) -> int:
        """The total duration in nanoseconds

        >>> Duration(seconds=2, nanoseconds=50).in_nanoseconds()
        2000000050

        """
        return self._ns

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------

        >>> Duration(hours=1, minutes=30) == Duration(minutes=90)
        True
        >>> Duration(hours=1, minutes=30) == Duration(hours=2)
        False

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns == other._ns

    def __hash__(self) -> int:
        return hash(self._ns)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns < other._ns

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns <= other._ns

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns > other._ns

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._ns >= other._ns

    def __bool__(self) -> bool:
        """True if the duration is non-zero"""
        return bool(self._ns)

    def __add__(self, other: Duration) -> Duration:
        """Add two durations together, clamping on overflow

        Example
        -------

        >>> Duration(hours=1, minutes=30) + Duration(minutes=30)
        Duration(2h0m0s)
        >>> Duration.MAX + SECOND == Duration.MAX
        True

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_ns(self._ns + other._ns)

    def __sub__(self, other: Duration) -> Duration:
        """Subtract two durations, clamping on overflow

        Example
        -------

        >>> Duration(hours=1, minutes=30) - Duration(minutes=30)
        Duration(1h0m0s)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration._from_ns(self._ns - other._ns)

    def __mul__(self, other: float) -> Duration:
        """Multiply by a number, clamping on overflow

        Example
        -------

        >>> Duration(hours=1, minutes=30) * 2.5
        Duration(3h45m0s)
        >>> 7 * HOUR
        Duration(7h0m0s)

        """
        if isinstance(other, int):
            return Duration._from_ns(self._ns * other)
        elif isinstance(other, float):
            return Duration._from_ns(int(self._ns * other))
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> Duration:
        """Negate the duration. The negation of :attr:`MIN` is :attr:`MAX`.

        Example
        -------

        >>> -Duration(hours=1, minutes=30)
        Duration(-1h30m0s)

        """
        return Duration._from_ns(-self._ns)

    @overload
    def __truediv__(self, other: float) -> Duration: ...

    @overload
    def __truediv__(self, other: Duration) -> float: ...

    def __truediv__(self, other: float | Duration) -> Duration | float:
        """Divide by a number or another duration

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d / 2
        Duration(45m0s)
        >>> d / Duration(minutes=30)
        3.0

        """
        if isinstance(other, Duration):
            return self._ns / other._ns
        elif isinstance(other, int):
            if other == 0:
                raise ZeroDivisionError("division by zero")
            sign = -1 if other < 0 else 1
            return Duration._from_ns(
                sign * _divmod_trunc(self._ns, abs(other))[0]
            )
        elif isinstance(other, float):
            return Duration._from_ns(int(self._ns / other))
        return NotImplemented

    def __abs__(self) -> Duration:
        """The absolute value of the duration.

        :attr:`MIN` has no positive counterpart, and maps to :attr:`MAX`.

        Example
        -------

        >>> abs(Duration(hours=-1, minutes=-30))
        Duration(1h30m0s)

        """
        return Duration._from_ns(abs(self._ns))

    def truncate(self, m: Duration, /) -> Duration:
        """Round toward zero to a multiple of ``m``.

        If ``m`` is zero or negative, the duration is returned unchanged.

        Example
        -------

        >>> (7 * HOUR).truncate(2 * HOUR)
        Duration(6h0m0s)
        >>> Duration(minutes=-75).truncate(HOUR)
        Duration(-1h0m0s)

        """
        if m._ns <= 0:
            return self
        return Duration._from_ns(self._ns - _divmod_trunc(self._ns, m._ns)[1])

    def round(self, m: Duration, /) -> Duration:
        """Round to the nearest multiple of ``m``.

        Halfway values are rounded away from zero. The result is clamped
        if it would overflow. If ``m`` is zero or negative,
        the duration is returned unchanged.

        Example
        -------

        >>> (90 * MINUTE).round(HOUR)
        Duration(2h0m0s)
        >>> (-90 * MINUTE).round(HOUR)
        Duration(-2h0m0s)
        >>> Duration(minutes=89).round(HOUR)
        Duration(1h0m0s)

        """
        m_ns = m._ns
        if m_ns <= 0:
            return self
        ns = self._ns
        r = abs(ns) % m_ns
        if ns < 0:
            if r + r < m_ns:
                return Duration._from_ns(ns + r)
            return Duration._from_ns(ns - m_ns + r)
        if r + r < m_ns:
            return Duration._from_ns(ns - r)
        return Duration._from_ns(ns + m_ns - r)

    def canonical_format(self) -> str:
        """The duration in canonical format, for example ``72h3m0.5s``.

        Leading zero units are omitted. Durations under a second use
        a smaller unit (``ms``, ``µs`` or ``ns``) so that the leading digit
        is non-zero. Zero is ``0s``.

        Example
        -------

        >>> Duration(hours=1, minutes=2, milliseconds=300).canonical_format()
        '1h2m0.3s'
        >>> Duration(microseconds=1_500).canonical_format()
        '1.5ms'
        >>> Duration.ZERO.canonical_format()
        '0s'

        """
        ns = self._ns
        u = abs(ns)
        sign = "-" * (ns < 0)
        if u < _NS_PER_SECOND:
            if u == 0:
                return "0s"
            elif u < 1_000:
                return f"{sign}{u}ns"
            elif u < 1_000_000:
                return f"{sign}{_format_frac(u, 3)}µs"
            return f"{sign}{_format_frac(u, 6)}ms"

        whole_secs, frac = divmod(u, _NS_PER_SECOND)
        mins, secs = divmod(whole_secs, 60)
        hrs, mins = divmod(mins, 60)
        text = _format_frac(secs * _NS_PER_SECOND + frac, 9) + "s"
        # Stop at hours, since days can be different lengths
        if mins or hrs:
            text = f"{mins}m{text}"
        if hrs:
            text = f"{hrs}h{text}"
        return sign + text

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Duration:
        """Create from a string such as ``"300ms"``, ``"-1.5h"`` or
        ``"2h45m"``.

        Inverse of :meth:`canonical_format`. Valid units are ``ns``,
        ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.

        Example
        -------

        >>> Duration.from_canonical_format("1h30m")
        Duration(1h30m0s)

        Raises
        ------
        InvalidFormat
            If the string doesn't match the format, or the value doesn't fit.

        """
        if not (match := _match_duration(s)):
            raise InvalidFormat(f"Invalid duration: {s!r}")
        sign, body = match.groups()
        total = 0
        if body != "0":
            for whole, frac, unit in _find_duration_parts(body):
                scale = _DURATION_UNITS[unit]
                total += int(whole or 0) * scale
                if frac:
                    f, fscale = _leading_fraction(frac)
                    total += int(f * (scale / fscale))
        if sign == "-":
            total = -total
        if not _MIN_INT64 <= total <= _MAX_INT64:
            raise InvalidFormat(f"Duration out of range: {s!r}")
        return cls._from_ns(total)

    __str__ = canonical_format

    def py_timedelta(self) -> _timedelta:
        """Convert to a :class:`~datetime.timedelta`

        Precision beyond microseconds is truncated toward zero.

        Example
        -------

        >>> Duration(hours=1, minutes=30).py_timedelta()
        timedelta(seconds=5400)

        """
        return _timedelta(microseconds=self.in_microseconds())

    @classmethod
    def from_py_timedelta(cls, td: _timedelta, /) -> Duration:
        """Create from a :class:`~datetime.timedelta`

        Inverse of :meth:`py_timedelta`
        """
        return Duration(
            hours=td.days * 24,
            seconds=td.seconds,
            microseconds=td.microseconds,
        )

    def __repr__(self) -> str:
        return f"Duration({self})"


Duration.ZERO = Duration()
Duration.MIN = Duration(nanoseconds=_MIN_INT64)
Duration.MAX = Duration(nanoseconds=_MAX_INT64)

NANOSECOND = Duration(nanoseconds=1)
MICROSECOND = Duration(microseconds=1)
MILLISECOND = Duration(milliseconds=1)
SECOND = Duration(seconds=1)
MINUTE = Duration(minutes=1)
HOUR = Duration(hours=1)


def hours(i: int, /) -> Duration:
    """Create a :class:`~Duration` with the given number of hours.
    ``hours(1) == Duration(hours=1)``
    """
    return Duration(hours=i)


def minutes(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of minutes.
    ``minutes(1) == Duration(minutes=1)``
    """
    return Duration(minutes=i)


def seconds(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of seconds.
    ``seconds(1) == Duration(seconds=1)``
    """
    return Duration(seconds=i)


class Zone(NamedTuple):
    """A named UTC offset, e.g. CET (+01:00) or CEST (+02:00)"""

    name: str
    offset: int
    """Seconds east of UTC"""
    is_dst: bool = False


class ZoneTransition(NamedTuple):
    """The moment (a Unix time) from which ``zones[index]`` applies"""

    when: int
    index: int
    isstd: bool = False
    isutc: bool = False


class ZoneLookup(NamedTuple):
    """The zone in effect at some moment, and the Unix times
    ``[start, end)`` for which it stays in effect"""

    name: str
    offset: int
    start: int
    end: int
    is_dst: bool


_UTC_LOOKUP = ZoneLookup("UTC", 0, ALPHA, OMEGA, False)


class Location:
    """A timezone: the zones in use and the transitions between them.

    Locations are typically obtained with :func:`load_location`, or one of
    the singletons :data:`UTC` and :data:`LOCAL`.
    They are shared between any number of :class:`Time` values.

    Example
    -------

    >>> cet = Location(
    ...     "Europe/Example",
    ...     zones=[Zone("CET", 3600), Zone("CEST", 7200, True)],
    ...     transitions=[ZoneTransition(1711846800, 1)],
    ... )
    >>> cet.lookup(1711846800).name
    'CEST'

    Note
    ----
    Every location remembers the last zone interval it resolved,
    so that repeated lookups of nearby times don't search again.
    The remembered interval is replaced as a whole, which makes
    concurrent lookups safe: at worst they miss it.
    """

    __slots__ = ("_name", "_zones", "_transitions", "_extend", "_cache")

    def __init__(
        self,
        name: str,
        zones: Iterable[Zone | tuple] = (),
        transitions: Iterable[ZoneTransition | tuple] = (),
        extend: str = "",
    ) -> None:
        self._name = name
        self._zones = tuple(Zone(*z) for z in zones)
        self._transitions = tuple(
            sorted(
                (ZoneTransition(*t) for t in transitions),
                key=attrgetter("when"),
            )
        )
        if any(t.index >= len(self._zones) for t in self._transitions):
            raise ValueError("Transition refers to a non-existent zone")
        self._extend = extend
        self._cache: Optional[ZoneLookup] = None

    def _get(self) -> Location:
        return self

    @property
    def name(self) -> str:
        """The name of the location, e.g. ``"America/New_York"``"""
        return self._get()._name

    @property
    def zones(self) -> tuple[Zone, ...]:
        return self._get()._zones

    @property
    def transitions(self) -> tuple[ZoneTransition, ...]:
        return self._get()._transitions

    @property
    def extend(self) -> str:
        """The POSIX TZ string in effect after the last transition, if any"""
        return self._get()._extend

    def lookup(self, sec: int, /) -> ZoneLookup:
        """The zone in effect at Unix time ``sec``.

        Example
        -------

        >>> fixed_zone("EST", -5 * 3600).lookup(0)[:2]
        ('EST', -18000)

        """
        loc = self._get()
        if not loc._zones:
            return _UTC_LOOKUP

        cache = loc._cache
        if cache is not None and cache.start <= sec < cache.end:
            return cache

        result = loc._search(sec)
        loc._cache = result
        return result

    def _search(self, sec: int) -> ZoneLookup:
        tx = self._transitions
        if not tx or sec < tx[0].when:
            zone = self._zones[self._first_zone()]
            return ZoneLookup(
                zone.name,
                zone.offset,
                ALPHA,
                tx[0].when if tx else OMEGA,
                zone.is_dst,
            )

        # Find the last transition at or before sec.
        # end is narrowed to the first transition after it along the way.
        end = OMEGA
        lo, hi = 0, len(tx)
        while hi - lo > 1:
            m = (lo + hi) // 2
            lim = tx[m].when
            if sec < lim:
                end = lim
                hi = m
            else:
                lo = m
        zone = self._zones[tx[lo].index]

        # Beyond the last transition, the TZ string (if any) takes over
        if lo == len(tx) - 1 and self._extend:
            extended = tzset(self._extend, tx[lo].when, sec)
            if extended is not None:
                name, offset, start, end, is_dst = extended
                # the rule's interval may reach back before the transition
                # that made it apply
                return ZoneLookup(
                    name, offset, max(start, tx[lo].when), end, is_dst
                )

        return ZoneLookup(
            zone.name, zone.offset, tx[lo].when, end, zone.is_dst
        )

    def _first_zone(self) -> int:
        """The index of the zone in effect before the first transition

        1. If zone 0 is never the target of a transition, it's zone 0.
        2. Otherwise, if the first transition is to DST, it's the nearest
           non-DST zone before that one.
        3. Otherwise, it's the first non-DST zone.
        4. Failing all that, zone 0.
        """
        zones, tx = self._zones, self._transitions
        if all(t.index != 0 for t in tx):
            return 0
        if tx and zones[tx[0].index].is_dst:
            for i in range(tx[0].index - 1, -1, -1):
                if not zones[i].is_dst:
                    return i
        for i, zone in enumerate(zones):
            if not zone.is_dst:
                return i
        return 0

    def __repr__(self) -> str:
        return f"Location({self.name})"

    def __str__(self) -> str:
        return self.name

    # Locations are shared, never copied
    def __copy__(self) -> Location:
        return self

    def __deepcopy__(self, _: object) -> Location:
        return self


class _LocalLocation(Location):
    """The system's timezone, resolved on first use"""

    __slots__ = ("_loaded",)

    def __init__(self) -> None:
        super().__init__("Local")
        self._loaded = False

    def _get(self) -> Location:
        if not self._loaded:
            with _local_lock:
                if not self._loaded:
                    _init_local(self)
                    self._loaded = True
        return self


_local_lock = threading.Lock()
_LOCALTIME = "/etc/localtime"

UTC = Location("UTC")
"""Coordinated Universal Time"""

LOCAL: Location = _LocalLocation()
"""The system's local timezone.

Determined by the ``TZ`` environment variable when first used:
unset means ``/etc/localtime``, empty means UTC, and otherwise it's a
zone key, an absolute path to a zone file, or a POSIX TZ string.
"""


def _init_local(loc: Location) -> None:
    tz = os.environ.get("TZ")
    found: Optional[Tuple[str, Location]] = None
    if tz is None:
        found = _try_load("Local", _tzif.read_file, _LOCALTIME)
    elif tz:
        if tz.startswith(":"):
            tz = tz[1:]
        if tz.startswith("/"):
            found = _try_load(
                "Local" if tz == _LOCALTIME else tz, _tzif.read_file, tz
            )
        elif tz and tz != "UTC":
            found = _try_load(tz, _tzif.load, tz)
            if found is None and (rule := tzset(tz, ALPHA, 0)) is not None:
                name, offset, _, _, is_dst = rule
                found = tz, Location(
                    tz, [Zone(name, offset, is_dst)], [(ALPHA, 0)], tz
                )

    if found is None:
        if tz is None or (tz and tz != "UTC"):
            logger.warning("Could not determine local timezone, using UTC")
        found = "UTC", UTC
    else:
        logger.debug("Local timezone loaded from %s", found[0])

    loc._name, resolved = found
    loc._zones = resolved._zones
    loc._transitions = resolved._transitions
    loc._extend = resolved._extend
    loc._cache = None


def _try_load(
    name: str, read: Callable[[str], bytes], arg: str
) -> Optional[Tuple[str, Location]]:
    try:
        return name, load_location_from_tzdata(name, read(arg))
    except (OSError, ValueError, zoneinfo.ZoneInfoNotFoundError) as e:
        logger.debug("Could not load timezone %s: %s", arg, e)
        return None


def fixed_zone(name: str, offset: int) -> Location:
    """A location that always uses the same name and offset
    (in seconds east of UTC).

    Example
    -------

    >>> est = fixed_zone("EST", -5 * 3600)
    >>> Time(2024, 1, 1, 12, loc=est).utc().hour
    17

    """
    loc = Location(name, [Zone(name, offset)], [ZoneTransition(ALPHA, 0)])
    loc._cache = ZoneLookup(name, offset, ALPHA, OMEGA, False)
    return loc


def load_location(name: str, /) -> Location:
    """Load the location with the given IANA name, such as
    ``"America/New_York"``.

    ``""`` and ``"UTC"`` give :data:`UTC`, and ``"Local"`` gives
    :data:`LOCAL`.

    Raises
    ------
    ~zoneinfo.ZoneInfoNotFoundError
        If the name is not found in the timezone database.
    ValueError
        If the name is not a valid key, or the zone file is malformed.
    """
    if name in ("", "UTC"):
        return UTC
    if name == "Local":
        return LOCAL
    return load_location_from_tzdata(name, _tzif.load(name))


def load_location_from_tzdata(name: str, data: bytes, /) -> Location:
    """Create a location from the contents of a TZif file

    Raises
    ------
    InvalidTZData
        If the data is not a valid TZif file.
    """
    zones, transitions, extend = _tzif.parse(data)
    return Location(name, zones, transitions, extend)


_START_MONO = _monotonic_ns() - 1


def system_clock() -> tuple[int, int, int]:
    """Read the system clocks as ``(unix_seconds, nanoseconds,
    monotonic_ticks)``.

    The monotonic ticks count nanoseconds from the moment this module was
    imported, and are only meaningful within one process.
    """
    secs, nsec = divmod(_time_ns(), _NS_PER_SECOND)
    return secs, nsec, _monotonic_ns() - _START_MONO


# The clock read by Time.now(), since() and until()
_clock: Callable[[], tuple[int, int, int]] = system_clock


class Time:
    """An instant in time with nanosecond precision, in a :class:`Location`.

    The calendar fields (year, hour, ...) are those of the instant as seen
    in its location.

    Example
    -------

    >>> t = Time(2008, 9, 17, 20, 4, 26, loc=UTC)
    >>> t.weekday()
    <Weekday.WEDNESDAY: 3>
    >>> t + 90 * MINUTE
    Time(2008-09-17 21:34:26 +0000 UTC)

    Note
    ----
    Times from :meth:`now` also carry a reading of the monotonic clock.
    Subtracting two times that both carry one, or comparing them with
    :meth:`after`, :meth:`before`, :meth:`compare` or :meth:`equal`, uses
    only the readings, so results are immune to adjustments of the wall
    clock. The operators (``==``, ``<``, ...) and hashing always use the
    wall clock.
    Operations that aren't about elapsed time (:meth:`in_location`,
    :meth:`round`, :meth:`truncate` and others) drop the reading.
    """

    # When the top bit of _wall (HAS_MONOTONIC) is set, _wall holds
    # 33 bits of seconds since MIN_WALL (years 1885-2157), and _ext the
    # monotonic reading. Otherwise, _ext holds the seconds since Jan 1
    # of the year 1. The low 30 bits of _wall always hold the nanoseconds.
    # A _loc of None means UTC.
    __slots__ = ("_wall", "_ext", "_loc", "__weakref__")

    ZERO: ClassVar[Time]
    """January 1 of the year 1, 00:00:00 UTC.
    Useful as a value for "not set".
    """

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
        *,
        loc: Location,
    ) -> None:
        """The field values may be outside their usual ranges; they are
        normalized, so that October 32 becomes November 1.

        If the time is skipped or repeated by a DST transition,
        the result is correct in one of the zones involved,
        but which one is not guaranteed.

        Raises
        ------
        MissingLocation
            If ``loc`` is None
        """
        if loc is None:
            raise MissingLocation("A Location is required to create a Time")

        year, m = norm(year, int(month) - 1, 12)
        second, nanosecond = norm(second, nanosecond, _NS_PER_SECOND)
        minute, second = norm(minute, second, 60)
        hour, minute = norm(hour, minute, 60)
        day, hour = norm(day, hour, 24)

        # excess days are absorbed here
        days = days_since_epoch(year) + DAYS_BEFORE[m] + day - 1
        if is_leap(year) and m >= 2:
            days += 1
        unix = (
            days * SECONDS_PER_DAY
            + hour * SECONDS_PER_HOUR
            + minute * SECONDS_PER_MINUTE
            + second
            + ABSOLUTE_TO_UNIX
        )

        # The offset is looked up with the local time as a first guess.
        # If that lands outside the zone's interval, the instant is near
        # a transition and the offset there is used instead.
        zone = loc.lookup(unix)
        offset = zone.offset
        if offset:
            utc = unix - offset
            if not zone.start <= utc < zone.end:
                offset = loc.lookup(utc).offset
            unix -= offset

        self._wall = nanosecond
        self._ext = _clamp_sec(unix + UNIX_TO_INTERNAL)
        self._loc = None
        self._set_loc(loc)

    @classmethod
    def _from_raw(cls, wall: int, ext: int, loc: Optional[Location]) -> Time:
        self = _object_new(cls)
        self._wall = wall
        self._ext = ext
        self._loc = loc
        return self

    def _copy(self) -> Time:
        return self._from_raw(self._wall, self._ext, self._loc)

    @classmethod
    def from_unix(cls, sec: int, nsec: int = 0, /) -> Time:
        """The local time of the given Unix time.

        ``nsec`` may be outside ``[0, 999_999_999]``.

        Example
        -------

        >>> Time.from_unix(0).utc()
        Time(1970-01-01 00:00:00 +0000 UTC)

        """
        sec, nsec = norm(sec, nsec, _NS_PER_SECOND)
        return cls._from_raw(nsec, _clamp_sec(sec + UNIX_TO_INTERNAL), LOCAL)

    @classmethod
    def from_unix_milli(cls, ms: int, /) -> Time:
        """The local time of the given Unix time in milliseconds"""
        sec, ms = divmod(ms, 1_000)
        return cls.from_unix(sec, ms * 1_000_000)

    @classmethod
    def from_unix_micro(cls, us: int, /) -> Time:
        """The local time of the given Unix time in microseconds"""
        sec, us = divmod(us, 1_000_000)
        return cls.from_unix(sec, us * 1_000)

    @classmethod
    def now(cls) -> Time:
        """The current local time, with a monotonic clock reading"""
        sec, nsec, mono = _clock()
        wall_sec = sec + UNIX_TO_INTERNAL - MIN_WALL
        if not 0 <= wall_sec <= WALL_SEC_MASK:
            return cls._from_raw(
                nsec, _clamp_sec(sec + UNIX_TO_INTERNAL), LOCAL
            )
        return cls._from_raw(
            HAS_MONOTONIC | (wall_sec << NSEC_SHIFT) | nsec, mono, LOCAL
        )

    # The helpers below mutate, so only call them on fresh copies

    def _nsec(self) -> int:
        return self._wall & NSEC_MASK

    def _sec(self) -> int:
        # seconds since Jan 1 of the year 1
        if self._wall & HAS_MONOTONIC:
            return WALL_TO_INTERNAL + ((self._wall >> NSEC_SHIFT) & WALL_SEC_MASK)
        return self._ext

    def _unix_sec(self) -> int:
        return self._sec() + INTERNAL_TO_UNIX

    def _add_sec(self, d: int) -> None:
        if self._wall & HAS_MONOTONIC:
            dsec = ((self._wall >> NSEC_SHIFT) & WALL_SEC_MASK) + d
            if 0 <= dsec <= WALL_SEC_MASK:
                self._wall = (
                    (self._wall & NSEC_MASK)
                    | (dsec << NSEC_SHIFT)
                    | HAS_MONOTONIC
                )
                return
            # out of range for the packed field
            self._strip_mono()
        self._ext = _clamp_sec(self._ext + d)

    def _strip_mono(self) -> None:
        if self._wall & HAS_MONOTONIC:
            self._ext = self._sec()
            self._wall &= NSEC_MASK

    def _set_loc(self, loc: Location) -> None:
        if loc is UTC or (loc is not LOCAL and loc._name == "UTC"):
            loc = None
        self._strip_mono()
        self._loc = loc

    def _set_mono(self, m: int) -> None:
        # A no-op if the seconds don't fit in the packed field
        if not self._wall & HAS_MONOTONIC:
            sec = self._ext
            if not MIN_WALL <= sec <= MAX_WALL:
                return
            self._wall |= HAS_MONOTONIC | ((sec - MIN_WALL) << NSEC_SHIFT)
        self._ext = m

    def _with_mono(self, m: int) -> Time:
        t = self._copy()
        t._set_mono(m)
        return t

    def _mono(self) -> int:
        # 0 if there is no reading
        return self._ext if self._wall & HAS_MONOTONIC else 0

    def _locabs(self) -> tuple[str, int, int]:
        # zone name, offset, and absolute seconds in one lookup
        sec = self._unix_sec()
        loc = self._loc
        if loc is None:
            return "UTC", 0, sec + UNIX_TO_ABSOLUTE
        name, offset = loc.lookup(sec)[:2]
        return name, offset, sec + offset + UNIX_TO_ABSOLUTE

    def _abs(self) -> int:
        return self._locabs()[2]

    @property
    def year(self) -> int:
        return abs_date(self._abs(), False)[0]

    @property
    def month(self) -> Month:
        return Month(abs_date(self._abs(), True)[1])

    @property
    def day(self) -> int:
        return abs_date(self._abs(), True)[2]

    @property
    def hour(self) -> int:
        return self._abs() % SECONDS_PER_DAY // SECONDS_PER_HOUR

    @property
    def minute(self) -> int:
        return self._abs() % SECONDS_PER_HOUR // SECONDS_PER_MINUTE

    @property
    def second(self) -> int:
        return self._abs() % SECONDS_PER_MINUTE

    @property
    def nanosecond(self) -> int:
        """The nanoseconds within the second, ``[0, 999_999_999]``"""
        return self._nsec()

    def date(self) -> tuple[int, Month, int]:
        """The ``(year, month, day)`` of the time

        Example
        -------

        >>> Time.from_unix(-11644473600).utc().date()
        (1601, <Month.JANUARY: 1>, 1)

        """
        year, month, day, _ = abs_date(self._abs(), True)
        return year, Month(month), day

    def clock(self) -> tuple[int, int, int]:
        """The ``(hour, minute, second)`` of the time"""
        return abs_clock(self._abs())

    def weekday(self) -> Weekday:
        return Weekday(abs_weekday(self._abs()))

    def year_day(self) -> int:
        """The day of the year, from 1 to 365 (366 in leap years)"""
        return abs_date(self._abs(), False)[3] + 1

    def iso_week(self) -> tuple[int, int]:
        """The ISO 8601 ``(year, week)`` of the time.

        The week ranges from 1 to 53. Jan 1-3 may be in the last week of the
        previous year, and Dec 29-31 in the first week of the next.

        Example
        -------

        >>> Time(2021, 1, 1, loc=UTC).iso_week()
        (2020, 53)

        """
        return abs_iso_week(self._abs())

    def zone(self) -> tuple[str, int]:
        """The abbreviated name of the zone in effect (e.g. ``"CET"``)
        and its offset in seconds east of UTC"""
        name, offset, _ = self._locabs()
        return name, offset

    def zone_bounds(self) -> tuple[Time, Time]:
        """The interval ``[start, end)`` during which the current zone
        stays in effect, in the time's location.

        Either bound is :attr:`ZERO` if the zone is in effect
        indefinitely in that direction.
        """
        loc = self.location()
        lookup = loc.lookup(self._unix_sec())
        start = end = Time.ZERO
        if lookup.start != ALPHA:
            start = Time.from_unix(lookup.start).in_location(loc)
        if lookup.end != OMEGA:
            end = Time.from_unix(lookup.end).in_location(loc)
        return start, end

    def is_dst(self) -> bool:
        """Whether daylight saving time is in effect"""
        return self.location().lookup(self._unix_sec()).is_dst

    def location(self) -> Location:
        loc = self._loc
        return UTC if loc is None else loc

    def is_zero(self) -> bool:
        """Whether this is the zero time, January 1 of the year 1, UTC"""
        return self._sec() == 0 and self._nsec() == 0

    def unix(self) -> int:
        """Seconds since the Unix epoch

        Example
        -------

        >>> Time(2008, 9, 17, 20, 4, 26, loc=UTC).unix()
        1221681866

        """
        return self._unix_sec()

    def unix_milli(self) -> int:
        return self._unix_sec() * 1_000 + self._nsec() // 1_000_000

    def unix_micro(self) -> int:
        return self._unix_sec() * 1_000_000 + self._nsec() // 1_000

    def unix_nano(self) -> int:
        return self._unix_sec() * _NS_PER_SECOND + self._nsec()

    def in_location(self, loc: Location, /) -> Time:
        """The same instant in another location.

        The monotonic reading, if any, is dropped.

        Raises
        ------
        MissingLocation
            If ``loc`` is None
        """
        if loc is None:
            raise MissingLocation("A Location is required for in_location()")
        t = self._copy()
        t._set_loc(loc)
        return t

    def utc(self) -> Time:
        """The same instant in UTC"""
        return self.in_location(UTC)

    def local(self) -> Time:
        """The same instant in the local timezone"""
        return self.in_location(LOCAL)

    def after(self, u: Time, /) -> bool:
        """Whether this instant is after ``u``"""
        if self._wall & u._wall & HAS_MONOTONIC:
            return self._ext > u._ext
        ts, us = self._sec(), u._sec()
        return ts > us or ts == us and self._nsec() > u._nsec()

    def before(self, u: Time, /) -> bool:
        """Whether this instant is before ``u``"""
        if self._wall & u._wall & HAS_MONOTONIC:
            return self._ext < u._ext
        ts, us = self._sec(), u._sec()
        return ts < us or ts == us and self._nsec() < u._nsec()

    def compare(self, u: Time, /) -> int:
        """-1 if this instant is before ``u``, +1 if after, 0 if equal"""
        if self._wall & u._wall & HAS_MONOTONIC:
            tc, uc = self._ext, u._ext
        else:
            tc, uc = self._sec(), u._sec()
            if tc == uc:
                tc, uc = self._nsec(), u._nsec()
        return (tc > uc) - (tc < uc)

    def equal(self, u: Time, /) -> bool:
        """Whether both represent the same instant, regardless of location

        Example
        -------

        >>> a = Time(2020, 8, 15, 6, loc=fixed_zone("X", 7200))
        >>> a.equal(Time(2020, 8, 15, 4, loc=UTC))
        True

        """
        if self._wall & u._wall & HAS_MONOTONIC:
            return self._ext == u._ext
        return self._sec() == u._sec() and self._nsec() == u._nsec()

    def _instant(self) -> tuple[int, int]:
        # wall clock only, for the operators and hashing
        return self._sec(), self._nsec()

    # Hiding __eq__ from mypy ensures that --strict-equality works
    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Whether both represent the same instant, regardless of
            location.

            Unlike :meth:`equal`, the monotonic reading is never used,
            so that equal times have equal hashes.
            Use :meth:`exact_eq` to compare the values exactly.
            """
            if not isinstance(other, Time):
                return NotImplemented
            return self._instant() == other._instant()

    def __hash__(self) -> int:
        return hash(self._instant())

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._instant() < other._instant()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._instant() <= other._instant()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._instant() > other._instant()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._instant() >= other._instant()

    def exact_eq(self, other: Time, /) -> bool:
        """Compare the values exactly: the wall clock, the monotonic
        reading and the location must all be the same.

        Example
        -------

        >>> a = Time(2020, 8, 15, 6, loc=fixed_zone("X", 7200))
        >>> b = Time(2020, 8, 15, 4, loc=UTC)
        >>> a == b
        True
        >>> a.exact_eq(b)
        False

        """
        return (
            self._wall == other._wall
            and self._ext == other._ext
            and self._loc is other._loc
        )

    def __add__(self, d: Duration) -> Time:
        """Add a duration

        Example
        -------

        >>> Time(2020, 1, 1, loc=UTC) + Duration(hours=25)
        Time(2020-01-02 01:00:00 +0000 UTC)

        """
        if not isinstance(d, Duration):
            return NotImplemented
        dsec, nsec = divmod(self._nsec() + d._ns, _NS_PER_SECOND)
        t = self._copy()
        t._wall = (t._wall & ~NSEC_MASK) | nsec
        t._add_sec(dsec)
        if t._wall & HAS_MONOTONIC:
            te = t._ext + d._ns
            if _MIN_INT64 <= te <= _MAX_INT64:
                t._ext = te
            else:
                t._strip_mono()
        return t

    @overload
    def __sub__(self, other: Time) -> Duration: ...

    @overload
    def __sub__(self, other: Duration) -> Time: ...

    def __sub__(self, other: Time | Duration) -> Time | Duration:
        """Subtract a duration, or another time to get the duration between
        them.

        The difference between times is clamped to the range of
        :class:`Duration`.

        Example
        -------

        >>> t = Time(2020, 1, 1, loc=UTC)
        >>> t - Time(2019, 12, 31, 23, loc=UTC)
        Duration(1h0m0s)
        >>> t - HOUR
        Time(2019-12-31 23:00:00 +0000 UTC)

        """
        if isinstance(other, Time):
            if self._wall & other._wall & HAS_MONOTONIC:
                return _sub_mono(self._ext, other._ext)
            ns = (self._sec() - other._sec()) * _NS_PER_SECOND + (
                self._nsec() - other._nsec()
            )
            if _MIN_INT64 <= ns <= _MAX_INT64:
                return Duration._from_ns(ns)
            return Duration.MIN if self.before(other) else Duration.MAX
        elif isinstance(other, Duration):
            return self + -other
        return NotImplemented

    def add_date(self, years: int = 0, months: int = 0, days: int = 0) -> Time:
        """Add years, months and days, keeping the clock time.

        The result is normalized like the constructor does: adding a month
        to October 31 gives December 1.

        Note
        ----
        Across a DST transition, adding a day may add 23 or 25 hours.

        Example
        -------

        >>> Time(2011, 1, 1, loc=UTC).add_date(-1, 2, 3)
        Time(2010-03-04 00:00:00 +0000 UTC)

        """
        abs_ = self._abs()
        year, month, day, _ = abs_date(abs_, True)
        hour, minute, second = abs_clock(abs_)
        return Time(
            year + years,
            month + months,
            day + days,
            hour,
            minute,
            second,
            self._nsec(),
            loc=self.location(),
        )

    def truncate(self, d: Duration, /) -> Time:
        """Round down to a multiple of ``d`` since the zero time.

        This operates on the absolute time, not the calendar:
        truncating to an hour in a location with a 30-minute offset
        gives a time at half past the (local) hour.
        The monotonic reading is dropped.
        If ``d`` is zero or negative, that is the only change.

        Example
        -------

        >>> Time(2020, 1, 1, 10, 45, loc=UTC).truncate(HOUR)
        Time(2020-01-01 10:00:00 +0000 UTC)

        """
        t = self._copy()
        t._strip_mono()
        if d._ns <= 0:
            return t
        return t + Duration._from_ns(-t._remainder(d._ns))

    def round(self, d: Duration, /) -> Time:
        """Round to the nearest multiple of ``d`` since the zero time.

        Halfway values round up. Like :meth:`truncate`, the monotonic
        reading is dropped, and ``d`` of zero or less does nothing else.
        """
        t = self._copy()
        t._strip_mono()
        if d._ns <= 0:
            return t
        r = t._remainder(d._ns)
        if r + r < d._ns:
            return t + Duration._from_ns(-r)
        return t + Duration._from_ns(d._ns - r)

    def _remainder(self, d_ns: int) -> int:
        return (self._sec() * _NS_PER_SECOND + self._nsec()) % d_ns

    def _fields(self) -> tuple[str, int, int, int, int, int, int, int]:
        name, offset, abs_ = self._locabs()
        year, month, day, _ = abs_date(abs_, True)
        return (name, offset, year, month, day, *abs_clock(abs_))

    def canonical_format(self) -> str:
        """Format as ``2006-01-02 15:04:05.999999999 -0700 MST``.

        The fraction is omitted when zero. If there is a monotonic reading,
        it's appended as `` m=±<seconds>``.
        """
        name, offset, year, month, day, hour, minute, second = self._fields()
        nsec = self._nsec()
        frac = f".{nsec:09d}".rstrip("0") if nsec else ""
        zone = _format_offset(offset, "")
        text = (
            f"{'-' * (year < 0)}{abs(year):04d}-{month:02d}-{day:02d} "
            f"{hour:02d}:{minute:02d}:{second:02d}{frac} {zone} {name or zone}"
        )
        if self._wall & HAS_MONOTONIC:
            m = self._ext
            secs, ns = divmod(abs(m), _NS_PER_SECOND)
            text += f" m={'-' if m < 0 else '+'}{secs}.{ns:09d}"
        return text

    __str__ = canonical_format

    def rfc3339(self) -> str:
        """Format as RFC 3339, with as many fractional digits as needed.

        Example
        -------

        >>> Time(2020, 8, 15, 23, 12, 9, 500, loc=fixed_zone("X", 7200)).rfc3339()
        '2020-08-15T23:12:09.0000005+02:00'

        Raises
        ------
        ValueError
            If the year is outside the range 0-9999.
        """
        _, offset, year, month, day, hour, minute, second = self._fields()
        if not 0 <= year <= 9999:
            raise ValueError(f"Year {year} is outside of range [0,9999]")
        nsec = self._nsec()
        frac = f".{nsec:09d}".rstrip("0") if nsec else ""
        zone = "Z" if offset == 0 else _format_offset(offset, ":")
        return (
            f"{year:04d}-{month:02d}-{day:02d}T"
            f"{hour:02d}:{minute:02d}:{second:02d}{frac}{zone}"
        )

    def py_datetime(self) -> _datetime:
        """Convert to an aware :class:`~datetime.datetime` with a fixed
        offset. Nanoseconds are truncated to microseconds.

        Raises
        ------
        ValueError
            If the year is outside the range supported by ``datetime``.
        """
        name, offset, year, month, day, hour, minute, second = self._fields()
        return _datetime(
            year,
            month,
            day,
            hour,
            minute,
            second,
            self._nsec() // 1_000,
            tzinfo=_timezone(_timedelta(seconds=offset), name),
        )

    def __repr__(self) -> str:
        return f"Time({self})"

    # We don't need to copy, because it's immutable
    def __copy__(self) -> Time:
        return self

    def __deepcopy__(self, _: object) -> Time:
        return self


Time.ZERO = Time._from_raw(0, 0, None)


def since(t: Time, /) -> Duration:
    """The time elapsed since ``t``, i.e. ``Time.now() - t``"""
    if t._wall & HAS_MONOTONIC:
        # only the monotonic readings would be used anyway
        return _sub_mono(_clock()[2], t._ext)
    return Time.now() - t


def until(t: Time, /) -> Duration:
    """The time remaining until ``t``, i.e. ``t - Time.now()``"""
    if t._wall & HAS_MONOTONIC:
        return _sub_mono(t._ext, _clock()[2])
    return t - Time.now()


class MissingLocation(ValueError):
    """A Location is required, but None was given"""


class InvalidFormat(ValueError):
    """A string has an invalid format"""


def _sub_mono(t: int, u: int) -> Duration:
    return Duration._from_ns(t - u)


def _format_frac(v: int, prec: int) -> str:
    # v / 10**prec as a decimal, without trailing zeros
    whole, frac = divmod(v, 10**prec)
    digits = f"{frac:0{prec}d}".rstrip("0") if prec else ""
    return f"{whole}.{digits}" if digits else str(whole)


def _leading_fraction(digits: str) -> tuple[int, float]:
    # The digits as an integer with their scale. Digits beyond
    # int64 precision are ignored.
    x, scale = 0, 1.0
    for c in digits:
        y = x * 10 + int(c)
        if y > _MAX_INT64:
            break
        x, scale = y, scale * 10
    return x, scale


def _format_offset(offset: int, sep: str) -> str:
    hrs, mins = divmod(abs(offset) // 60, 60)
    return f"{'-' if offset < 0 else '+'}{hrs:02d}{sep}{mins:02d}"


_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC Greek letter mu
    "ms": 1_000_000,
    "s": _NS_PER_SECOND,
    "m": 60 * _NS_PER_SECOND,
    "h": 3_600 * _NS_PER_SECOND,
}
_UNIT_RE = "ns|us|µs|μs|ms|s|m|h"
_match_duration = re.compile(
    rf"([-+]?)((?:(?:\d+\.?\d*|\.\d+)(?:{_UNIT_RE}))+|0)", re.ASCII
).fullmatch
_find_duration_parts = re.compile(
    rf"(\d*)(?:\.(\d*))?({_UNIT_RE})", re.ASCII
).findall
