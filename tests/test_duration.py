import subprocess
import sys
from datetime import timedelta

import pytest
from pytest import approx

from nanotime import (
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    NANOSECOND,
    SECOND,
    Duration,
    InvalidFormat,
    hours,
    minutes,
    seconds,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

MAX_NS = (1 << 63) - 1
MIN_NS = -(1 << 63)


class TestInit:

    def test_basics(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        # the components are not accessible directly
        assert not hasattr(d, "hours")

    def test_defaults(self):
        d = Duration()
        assert d.in_nanoseconds() == 0

    def test_clamped(self):
        assert Duration(hours=10**9) == Duration.MAX
        assert Duration(hours=-(10**9)) == Duration.MIN


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        (dict(), Duration()),
        (dict(hours=1), Duration(nanoseconds=3_600_000_000_000)),
        (dict(minutes=1), Duration(microseconds=60_000_000)),
        (dict(seconds=1), Duration(milliseconds=1_000)),
        (dict(milliseconds=1), Duration(nanoseconds=1_000_000)),
        (
            dict(minutes=90, microseconds=-3_600_000_000),
            Duration(minutes=30),
        ),
    ],
)
def test_normalization(kwargs, expected):
    assert Duration(**kwargs) == expected


def test_fractional():
    assert Duration(minutes=1.5) == Duration(seconds=90)


def test_avoids_floating_point_errors():
    assert Duration(hours=1_000_001.0, nanoseconds=1) == Duration(
        nanoseconds=1_000_001 * 3_600_000_000_000 + 1
    )


def test_constants():
    assert Duration().ZERO == Duration()
    assert Duration.MAX.in_nanoseconds() == MAX_NS
    assert Duration.MIN.in_nanoseconds() == MIN_NS
    assert NANOSECOND.in_nanoseconds() == 1
    assert MICROSECOND == 1_000 * NANOSECOND
    assert MILLISECOND == 1_000 * MICROSECOND
    assert SECOND == 1_000 * MILLISECOND
    assert MINUTE == 60 * SECOND
    assert HOUR == 60 * MINUTE


def test_helpers():
    assert hours(2) == Duration(hours=2)
    assert minutes(3) == Duration(minutes=3)
    assert seconds(-4) == Duration(seconds=-4)


def test_boolean():
    assert not Duration(hours=0, minutes=0, seconds=0, microseconds=0)
    assert not Duration(hours=1, minutes=-60)
    assert Duration(nanoseconds=1)


def test_aggregations():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d.in_hours() == approx(1 + 2 / 60 + 3 / 3_600 + 4 / 3_600_000_000)
    assert d.in_minutes() == approx(60 + 2 + 3 / 60 + 4 / 60_000_000)
    assert d.in_seconds() == approx(3600 + 2 * 60 + 3 + 4 / 1_000_000)
    assert d.in_milliseconds() == 3_723_000
    assert (
        d.in_microseconds()
        == 3_600_000_000 + 2 * 60_000_000 + 3 * 1_000_000 + 4
    )
    assert d.in_nanoseconds() == 3_723_000_004_000


def test_aggregations_truncate_toward_zero():
    assert Duration(nanoseconds=-1_999).in_microseconds() == -1
    assert Duration(microseconds=-1_999).in_milliseconds() == -1


def test_in_seconds_precision():
    assert Duration(nanoseconds=MAX_NS).in_seconds() == approx(
        9_223_372_036.854775807
    )
    assert Duration(seconds=1, nanoseconds=1).in_seconds() == approx(
        1.000000001, abs=1e-12
    )


def test_equality():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same_total = Duration(hours=0, minutes=62, seconds=3, microseconds=4)
    different = Duration(hours=1, minutes=2, seconds=3, microseconds=5)
    assert d == same
    assert d == same_total
    assert not d == different
    assert not d == NeverEqual()
    assert d == AlwaysEqual()
    assert not d != same
    assert not d != same_total
    assert d != different
    assert d != NeverEqual()
    assert not d != AlwaysEqual()

    assert hash(d) == hash(same)
    assert hash(d) == hash(same_total)
    assert hash(d) != hash(different)


def test_comparison():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    same_total = Duration(hours=0, minutes=62, seconds=3, microseconds=4)
    bigger = Duration(hours=1, minutes=2, seconds=3, microseconds=5)
    smaller = Duration(hours=1, minutes=2, seconds=3, microseconds=3)

    assert d <= same
    assert d <= same_total
    assert d <= bigger
    assert not d <= smaller
    assert d <= AlwaysLarger()
    assert not d <= AlwaysSmaller()

    assert not d < same
    assert not d < same_total
    assert d < bigger
    assert not d < smaller
    assert d < AlwaysLarger()
    assert not d < AlwaysSmaller()

    assert d >= same
    assert d >= same_total
    assert not d >= bigger
    assert d >= smaller
    assert not d >= AlwaysLarger()
    assert d >= AlwaysSmaller()

    assert not d > same
    assert not d > same_total
    assert not d > bigger
    assert d > smaller
    assert not d > AlwaysLarger()
    assert d > AlwaysSmaller()


@pytest.mark.parametrize(
    "d, expected",
    [
        (Duration(), "0s"),
        (Duration(nanoseconds=1), "1ns"),
        (Duration(nanoseconds=1_100), "1.1µs"),
        (Duration(microseconds=2_200), "2.2ms"),
        (Duration(milliseconds=3_300), "3.3s"),
        (Duration(minutes=4, seconds=5), "4m5s"),
        (Duration(minutes=4, seconds=5, milliseconds=1), "4m5.001s"),
        (
            Duration(hours=5, minutes=6, seconds=7, milliseconds=1),
            "5h6m7.001s",
        ),
        (Duration(minutes=8, nanoseconds=1), "8m0.000000001s"),
        (
            Duration(hours=1, minutes=2, seconds=3, microseconds=4),
            "1h2m3.000004s",
        ),
        (
            Duration(hours=1, minutes=-2, seconds=3, microseconds=-4),
            "58m2.999996s",
        ),
        (Duration(hours=400), "400h0m0s"),
        (Duration(minutes=-4), "-4m0s"),
        (Duration(nanoseconds=-999), "-999ns"),
        (Duration.MAX, "2562047h47m16.854775807s"),
        (Duration.MIN, "-2562047h47m16.854775808s"),
    ],
)
def test_canonical_format(d, expected):
    assert d.canonical_format() == expected
    assert str(d) == expected


def test_repr():
    assert repr(Duration(hours=1, minutes=30)) == "Duration(1h30m0s)"


class TestFromCanonicalFormat:

    @pytest.mark.parametrize(
        "s, expected",
        [
            ("0", Duration()),
            ("-0", Duration()),
            ("+0", Duration()),
            ("5s", 5 * SECOND),
            ("30s", 30 * SECOND),
            ("1478s", 1478 * SECOND),
            ("-5s", -5 * SECOND),
            ("+5s", 5 * SECOND),
            ("5.0s", 5 * SECOND),
            ("5.6s", 5 * SECOND + 600 * MILLISECOND),
            ("5.s", 5 * SECOND),
            (".5s", 500 * MILLISECOND),
            ("1.004s", SECOND + 4 * MILLISECOND),
            ("1.0040s", SECOND + 4 * MILLISECOND),
            ("100.00100s", 100 * SECOND + MILLISECOND),
            ("10ns", 10 * NANOSECOND),
            ("11us", 11 * MICROSECOND),
            ("12µs", 12 * MICROSECOND),
            ("12μs", 12 * MICROSECOND),
            ("13ms", 13 * MILLISECOND),
            ("15m", 15 * MINUTE),
            ("16h", 16 * HOUR),
            ("3h30m", 3 * HOUR + 30 * MINUTE),
            ("10.5s4m", 4 * MINUTE + 10 * SECOND + 500 * MILLISECOND),
            ("-2m3.4s", -(2 * MINUTE + 3 * SECOND + 400 * MILLISECOND)),
            (
                "1h2m3s4ms5us6ns",
                Duration(
                    hours=1,
                    minutes=2,
                    seconds=3,
                    milliseconds=4,
                    microseconds=5,
                    nanoseconds=6,
                ),
            ),
            ("39h9m14.425s", Duration(hours=39, minutes=9, milliseconds=14_425)),
            ("52763797000ns", Duration(nanoseconds=52_763_797_000)),
            ("0.3333333333333333333h", 20 * MINUTE),
            ("9007199254740993ns", Duration(nanoseconds=(1 << 53) + 1)),
            ("9223372036854775807ns", Duration.MAX),
            ("9223372036854775.807us", Duration.MAX),
            ("9223372036s854ms775us807ns", Duration.MAX),
            ("-9223372036854775808ns", Duration.MIN),
            ("-9223372036854775.808us", Duration.MIN),
            ("0.100000000000000000000h", 6 * MINUTE),
        ],
    )
    def test_valid(self, s, expected):
        assert Duration.from_canonical_format(s) == expected

    @pytest.mark.parametrize(
        "s",
        [
            "9223372036854775808ns",
            "9223372036854775.808us",
            "9223372036854ms775us808ns",
            "-9223372036854775809ns",
        ],
    )
    def test_invalid_too_large(self, s):
        with pytest.raises(InvalidFormat):
            Duration.from_canonical_format(s)

    @pytest.mark.parametrize(
        "s",
        [
            "",
            "3",
            "-",
            "s",
            ".",
            "-.",
            ".s",
            "+.s",
            "1d",
            "1h 2m",
            "\x85\x85",
            "hello \xffff world",
            "١s",
        ],
    )
    def test_invalid(self, s):
        with pytest.raises(InvalidFormat):
            Duration.from_canonical_format(s)

    @pytest.mark.parametrize(
        "d",
        [
            Duration(),
            Duration(nanoseconds=-1_100),
            Duration(hours=5, minutes=6, seconds=7, milliseconds=1),
            Duration.MAX,
            Duration.MIN,
        ],
    )
    def test_inverse_of_canonical_format(self, d):
        assert Duration.from_canonical_format(d.canonical_format()) == d


def test_addition():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d + Duration() == d
    assert d + Duration(hours=1) == Duration(
        hours=2, minutes=2, seconds=3, microseconds=4
    )
    assert d + Duration(minutes=-1) == Duration(
        hours=1, minutes=1, seconds=3, microseconds=4
    )
    assert Duration.MAX + NANOSECOND == Duration.MAX
    assert Duration.MIN + -NANOSECOND == Duration.MIN

    with pytest.raises(TypeError, match="unsupported operand"):
        d + Ellipsis  # type: ignore[operator]


def test_subtraction():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d - Duration() == d
    assert d - Duration(hours=1) == Duration(
        hours=0, minutes=2, seconds=3, microseconds=4
    )
    assert d - Duration(minutes=-1) == Duration(
        hours=1, minutes=3, seconds=3, microseconds=4
    )
    assert Duration.MIN - NANOSECOND == Duration.MIN

    with pytest.raises(TypeError, match="unsupported operand"):
        d - Ellipsis  # type: ignore[operator]


def test_multiply():
    d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert d * 2 == Duration(hours=2, minutes=4, seconds=6, microseconds=8)
    assert 2 * d == d * 2
    assert d * 0.5 == Duration(
        hours=0, minutes=31, seconds=1, microseconds=500_002
    )
    assert HOUR * (1 << 40) == Duration.MAX
    assert HOUR * -(1 << 40) == Duration.MIN

    with pytest.raises(TypeError, match="unsupported operand"):
        d * Ellipsis  # type: ignore[operator]


class TestDivision:

    def test_by_number(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        assert d / 2 == Duration(
            hours=0, minutes=31, seconds=1, microseconds=500_002
        )
        assert d / 0.5 == Duration(
            hours=2, minutes=4, seconds=6, microseconds=8
        )

    def test_by_integer_truncates_toward_zero(self):
        assert Duration(nanoseconds=7) / 2 == Duration(nanoseconds=3)
        assert Duration(nanoseconds=-7) / 2 == Duration(nanoseconds=-3)
        assert Duration(nanoseconds=7) / -2 == Duration(nanoseconds=-3)

    def test_divide_by_duration(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        assert d / Duration(hours=1) == approx(
            1 + 2 / 60 + 3 / 3_600 + 4 / 3_600_000_000
        )

    def test_divide_by_zero(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        with pytest.raises(ZeroDivisionError):
            d / Duration()

        with pytest.raises(ZeroDivisionError):
            d / 0

    def test_invalid(self):
        d = Duration(hours=1, minutes=2, seconds=3, microseconds=4)
        with pytest.raises(TypeError):
            d / "invalid"  # type: ignore[operator]


def test_negate():
    assert Duration.ZERO == -Duration.ZERO
    assert Duration(
        hours=-1, minutes=2, seconds=-3, microseconds=4
    ) == -Duration(hours=1, minutes=-2, seconds=3, microseconds=-4)
    assert -Duration.MIN == Duration.MAX


@pytest.mark.parametrize(
    "d, m, expected",
    [
        (Duration(), SECOND, Duration()),
        (MINUTE, -7 * SECOND, MINUTE),
        (MINUTE, Duration(), MINUTE),
        (MINUTE, NANOSECOND, MINUTE),
        (MINUTE + 10 * SECOND, 10 * SECOND, MINUTE + 10 * SECOND),
        (MINUTE + 10 * SECOND, MINUTE, MINUTE),
        (10 * MINUTE + 10 * SECOND, 3 * MINUTE, 9 * MINUTE),
        (MINUTE + 10 * SECOND, MINUTE + 10 * SECOND + NANOSECOND, Duration()),
        (MINUTE + 10 * SECOND, HOUR, Duration()),
        (-MINUTE, SECOND, -MINUTE),
        (-10 * MINUTE, 3 * MINUTE, -9 * MINUTE),
        (-10 * MINUTE, HOUR, Duration()),
    ],
)
def test_truncate(d, m, expected):
    assert d.truncate(m) == expected


@pytest.mark.parametrize(
    "d, m, expected",
    [
        (Duration(), SECOND, Duration()),
        (4 * MINUTE + 20 * SECOND, SECOND, 4 * MINUTE + 20 * SECOND),
        (4 * MINUTE + 20 * SECOND, MINUTE, 4 * MINUTE),
        (4 * MINUTE + 20 * SECOND, HOUR, Duration()),
        (4 * MINUTE + 30 * SECOND, MINUTE, 5 * MINUTE),
        (-4 * MINUTE - 20 * SECOND, MINUTE, -4 * MINUTE),
        (-4 * MINUTE - 30 * SECOND, MINUTE, -5 * MINUTE),
        (MINUTE, -SECOND, MINUTE),
        (Duration.MAX, 2 * NANOSECOND, Duration.MAX),
        (Duration.MIN, 2 * NANOSECOND, Duration.MIN),
        (Duration.MAX, HOUR, Duration.MAX),
        (Duration.MIN, HOUR, Duration.MIN),
    ],
)
def test_round(d, m, expected):
    assert d.round(m) == expected


def test_py_timedelta():
    assert Duration().py_timedelta() == timedelta(0)
    assert Duration(
        hours=1, minutes=2, seconds=3, microseconds=4
    ).py_timedelta() == timedelta(
        hours=1, minutes=2, seconds=3, microseconds=4
    )
    assert Duration(nanoseconds=-1_500).py_timedelta() == timedelta(
        microseconds=-1
    )


def test_from_timedelta():
    assert Duration.from_py_timedelta(timedelta(0)) == Duration()
    assert Duration.from_py_timedelta(
        timedelta(weeks=8, hours=1, minutes=2, seconds=3, microseconds=4)
    ) == Duration(hours=1 + 7 * 24 * 8, minutes=2, seconds=3, microseconds=4)


def test_abs():
    assert abs(Duration()) == Duration()
    assert abs(
        Duration(hours=-1, minutes=-2, seconds=-3, microseconds=-4)
    ) == Duration(hours=1, minutes=2, seconds=3, microseconds=4)
    assert abs(Duration(hours=1)) == Duration(hours=1)
    assert abs(Duration.MIN) == Duration.MAX
    assert abs(Duration.MIN + NANOSECOND) == Duration.MAX


def test_import_in_fresh_interpreter():
    # module-level constants are built while the package imports
    result = subprocess.run(
        [sys.executable, "-c", "import nanotime; print(nanotime.HOUR)"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "1h0m0s"
