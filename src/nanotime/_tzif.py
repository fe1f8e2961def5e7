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
"""Reading of TZif files (RFC 8536), the output of the zic compiler.

Zone files are looked up in the directories of :data:`zoneinfo.TZPATH`
and then in the ``tzdata`` package, the same way :mod:`zoneinfo` does.
"""
from __future__ import annotations

import os
import struct
import zoneinfo
from importlib import resources
from typing import List, Tuple

__all__ = ["InvalidTZData", "parse", "load", "read_file"]

ALPHA = -(1 << 63)

_MAGIC = b"TZif"
# magic, version, 15 reserved bytes, then six counts:
# isutcnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt
_HEADER = struct.Struct(">4sc15x6L")
_TTINFO = struct.Struct(">lBB")

# (name, offset, is_dst)
_RawZone = Tuple[str, int, bool]
# (when, index, isstd, isutc)
_RawTransition = Tuple[int, int, bool, bool]


class InvalidTZData(ValueError):
    """Data is not a valid TZif file"""


def parse(
    data: bytes,
) -> tuple[list[_RawZone], list[_RawTransition], str]:
    """Parse TZif data into ``(zones, transitions, extend)``.

    The 64-bit block and the footer TZ string are used when the file is
    version 2 or later. A file without transitions gets a single
    transition at the beginning of time, so zone 0 always applies.

    Raises
    ------
    InvalidTZData
        If the data is truncated or inconsistent.
    """
    view = memoryview(data)
    magic, version, *counts = _unpack_header(view, 0)
    if magic != _MAGIC:
        raise InvalidTZData("bad magic number")

    pos = _HEADER.size
    time_size = 4
    if version not in (b"\x00", b"1"):
        # Skip the 32-bit block, which is only there for old readers.
        pos += _block_size(counts, 4)
        magic, version, *counts = _unpack_header(view, pos)
        if magic != _MAGIC:
            raise InvalidTZData("bad magic number in second header")
        pos += _HEADER.size
        time_size = 8

    isutcnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt = counts
    if typecnt == 0 or isutcnt not in (0, typecnt) or isstdcnt not in (0, typecnt):
        raise InvalidTZData("inconsistent counts in header")
    end = pos + _block_size(counts, time_size)
    if len(view) < end:
        raise InvalidTZData("file is truncated")

    fmt = ">%d%s" % (timecnt, "q" if time_size == 8 else "l")
    whens = struct.unpack_from(fmt, view, pos)
    pos += timecnt * time_size
    indices = bytes(view[pos : pos + timecnt])
    pos += timecnt

    ttinfos = [
        _TTINFO.unpack_from(view, pos + i * _TTINFO.size)
        for i in range(typecnt)
    ]
    pos += typecnt * _TTINFO.size
    # Append a NUL so that find() always succeeds
    abbrevs = bytes(view[pos : pos + charcnt]) + b"\0"
    pos += charcnt
    pos += leapcnt * (time_size + 4)  # leap seconds aren't modeled
    isstd = bytes(view[pos : pos + isstdcnt])
    pos += isstdcnt
    isut = bytes(view[pos : pos + isutcnt])
    pos += isutcnt

    zones: List[_RawZone] = []
    for offset, is_dst, abbrind in ttinfos:
        if abbrind >= len(abbrevs):
            raise InvalidTZData("abbreviation index out of range")
        name = abbrevs[abbrind : abbrevs.index(b"\0", abbrind)]
        zones.append((name.decode("ascii", "replace"), offset, bool(is_dst)))

    transitions: List[_RawTransition] = []
    for when, index in zip(whens, indices):
        if index >= typecnt:
            raise InvalidTZData("zone index out of range")
        transitions.append(
            (
                when,
                index,
                bool(isstd[index]) if isstdcnt else False,
                bool(isut[index]) if isutcnt else False,
            )
        )
    if not transitions:
        transitions.append((ALPHA, 0, False, False))

    extend = ""
    if time_size == 8:
        footer = bytes(view[pos:])
        end = footer.find(b"\n", 1)
        if footer[:1] == b"\n" and end != -1:
            extend = footer[1:end].decode("ascii", "replace")

    return zones, transitions, extend


def _unpack_header(view: memoryview, pos: int) -> tuple:
    if len(view) < pos + _HEADER.size:
        raise InvalidTZData("file is truncated")
    return _HEADER.unpack_from(view, pos)


def _block_size(counts: list[int], time_size: int) -> int:
    isutcnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt = counts
    return (
        timecnt * time_size
        + timecnt
        + typecnt * _TTINFO.size
        + charcnt
        + leapcnt * (time_size + 4)
        + isstdcnt
        + isutcnt
    )


def load(key: str) -> bytes:
    """Read the TZif data for an IANA key like ``"Europe/Amsterdam"``.

    Raises
    ------
    ValueError
        If the key is not a relative path within the database.
    ~zoneinfo.ZoneInfoNotFoundError
        If no zone file exists for the key.
    """
    _validate_key(key)
    for tzdir in zoneinfo.TZPATH:
        path = os.path.join(tzdir, key)
        if os.path.isfile(path):
            return read_file(path)

    components = key.split("/")
    package = ".".join(["tzdata", "zoneinfo", *components[:-1]])
    try:
        return resources.files(package).joinpath(components[-1]).read_bytes()
    except (
        ImportError,
        FileNotFoundError,
        IsADirectoryError,
        UnicodeEncodeError,
    ):
        raise zoneinfo.ZoneInfoNotFoundError(
            f"No time zone found with key {key}"
        ) from None


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _validate_key(key: str) -> None:
    if (
        not key
        or key.startswith(("/", "\\"))
        or ".." in key.replace("\\", "/").split("/")
    ):
        raise ValueError(f"Invalid time zone key: {key!r}")
