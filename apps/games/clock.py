"""Server-clock helpers for game open/close decisions."""
from datetime import datetime, time

from django.utils import timezone

SECONDS_PER_DAY = 24 * 60 * 60


def server_now() -> datetime:
    """Current local time of the server. The only clock betting decisions use."""
    return timezone.localtime()


def seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def _elapsed_and_span(open_time: time, close_time: time, current: time):
    opened = seconds_of_day(open_time)
    span = (seconds_of_day(close_time) - opened) % SECONDS_PER_DAY
    elapsed = (seconds_of_day(current) - opened) % SECONDS_PER_DAY
    return elapsed, span


def is_open_at(open_time: time, close_time: time, current: time) -> bool:
    """
    True while ``current`` lies in [open_time, close_time).

    The window may wrap past midnight (close earlier than open). Equal open
    and close times make an empty window.
    """
    elapsed, span = _elapsed_and_span(open_time, close_time, current)
    return elapsed < span


def seconds_until_close(open_time: time, close_time: time, current: time) -> int:
    elapsed, span = _elapsed_and_span(open_time, close_time, current)
    return span - elapsed if elapsed < span else 0


def is_past_mid_time(open_time: time, mid_time: time, current: time) -> bool:
    """True once ``current`` has reached mid_time, measured from open_time"""
    elapsed, mid_offset = _elapsed_and_span(open_time, mid_time, current)
    return elapsed >= mid_offset
