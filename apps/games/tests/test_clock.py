from datetime import time

import pytest

from apps.games.clock import is_open_at, is_past_mid_time, seconds_until_close


@pytest.mark.parametrize('current, expected', [
    (time(8, 59, 59), False),
    (time(9, 0), True),
    (time(20, 59, 59), True),
    (time(21, 0), False),
])
def test_same_day_window(current, expected):
    assert is_open_at(time(9, 0), time(21, 0), current) is expected


@pytest.mark.parametrize('current, expected', [
    (time(0, 15), True),
    (time(2, 0), False),
    (time(7, 30), True),
    (time(23, 59, 59), True),
    (time(1, 30), False),
    (time(5, 0), False),
])
def test_window_wrapping_midnight(current, expected):
    assert is_open_at(time(7, 30), time(1, 30), current) is expected


def test_equal_open_and_close_is_never_open():
    assert not is_open_at(time(10, 0), time(10, 0), time(10, 0))


def test_seconds_until_close():
    assert seconds_until_close(time(9, 0), time(21, 0), time(20, 59)) == 60
    assert seconds_until_close(time(7, 30), time(1, 30), time(23, 30)) == 2 * 3600
    assert seconds_until_close(time(9, 0), time(21, 0), time(22, 0)) == 0


def test_mid_time_measured_from_open():
    assert not is_past_mid_time(time(22, 0), time(0, 30), time(23, 0))
    assert is_past_mid_time(time(22, 0), time(0, 30), time(0, 45))
    assert is_past_mid_time(time(9, 0), time(15, 0), time(15, 0))
