from datetime import timedelta

import pytest

from jwtmanager.clock import expires_at, now, retention_elapsed, to_seconds


@pytest.mark.parametrize(
    "duration,expected",
    [
        (3600, 3600),
        (1.9, 1),
        (timedelta(minutes=5), 300),
        ("90", 90),
        ("90s", 90),
        ("15 min", 900),
        ("2h", 7200),
        ("1 day", 86400),
        ("2 Weeks", 1209600),
        ("1500ms", 1),
        ("-60s", -60),
    ],
)
def test_to_seconds(duration, expected):
    assert to_seconds(duration) == expected


@pytest.mark.parametrize("duration", ["soon", "10 fortnights", "", None, True, []])
def test_to_seconds_rejects_garbage(duration):
    with pytest.raises(ValueError):
        to_seconds(duration)


def test_now_floors_clock():
    assert now(lambda: 1000.99) == 1000


def test_expires_at():
    assert expires_at(1000, "1h") == 4600


def test_retention_elapsed_uses_tolerance():
    assert not retention_elapsed(1000, 10, 1009)
    assert retention_elapsed(1000, 10, 1010)
    assert not retention_elapsed(None, 10, 10**12)
