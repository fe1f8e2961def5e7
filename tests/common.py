import struct


def make_block(version, whens, indices, types, chars, isstd, isut, time_fmt):
    header = struct.pack(
        ">4sc15x6L",
        b"TZif",
        version,
        len(isut),
        len(isstd),
        0,
        len(whens),
        len(types),
        len(chars),
    )
    return (
        header
        + struct.pack(">%d%s" % (len(whens), time_fmt), *whens)
        + bytes(indices)
        + b"".join(struct.pack(">lBB", *t) for t in types)
        + chars
        + bytes(isstd)
        + bytes(isut)
    )


def make_tzif(
    whens=(),
    indices=(),
    types=((0, 0, 0),),
    chars=b"UTC\0",
    isstd=(),
    isut=(),
    version=b"2",
    footer=b"",
):
    data = make_block(version, whens, indices, types, chars, isstd, isut, "l")
    if version != b"\0":
        data += make_block(
            version, whens, indices, types, chars, isstd, isut, "q"
        )
        data += b"\n" + footer + b"\n"
    return data


PACIFIC = dict(
    whens=(-2000000000, 9972000, 25693200),
    indices=(1, 2, 1),
    types=((-28378, 0, 0), (-28800, 0, 4), (-25200, 1, 8)),
    chars=b"LMT\0PST\0PDT\0",
    footer=b"PST8PDT,M3.2.0,M11.1.0",
)


class AlwaysEqual:
    def __eq__(self, other):
        return True


class NeverEqual:
    def __eq__(self, other):
        return False


class AlwaysLarger:
    def __lt__(self, other):
        return False

    def __le__(self, other):
        return False

    def __gt__(self, other):
        return True

    def __ge__(self, other):
        return True


class AlwaysSmaller:
    def __lt__(self, other):
        return True

    def __le__(self, other):
        return True

    def __gt__(self, other):
        return False

    def __ge__(self, other):
        return False
