import pytest

import nanotime


@pytest.fixture
def local_tz(monkeypatch):
    """Call with a TZ value (or None to unset it) to make the local
    timezone resolve from it on next use"""

    def set_tz(tz):
        if tz is None:
            monkeypatch.delenv("TZ", raising=False)
        else:
            monkeypatch.setenv("TZ", tz)
        nanotime.LOCAL._loaded = False

    yield set_tz
    # resolve again from the restored environment
    nanotime.LOCAL._loaded = False


@pytest.fixture
def la(local_tz):
    """Make the local timezone America/Los_Angeles"""
    local_tz("America/Los_Angeles")
    return nanotime.LOCAL


@pytest.fixture
def fake_clock(monkeypatch):
    """Replace the system clock. Set ``.sec``, ``.nsec`` and ``.mono``
    on the returned object to control the next reading."""

    class Clock:
        sec = 1_221_681_866
        nsec = 0
        mono = 1_000

        def __call__(self):
            return self.sec, self.nsec, self.mono

    clock = Clock()
    monkeypatch.setattr(nanotime, "_clock", clock)
    return clock
