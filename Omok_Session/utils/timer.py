"""Wall-clock helpers for move timestamps and think-time statistics."""

import time


def now_ms():
    return int(time.time() * 1000)


def think_times_ms(timestamps):
    """Gaps between consecutive timestamps, in milliseconds."""
    return [later - earlier for earlier, later in zip(timestamps, timestamps[1:])]
