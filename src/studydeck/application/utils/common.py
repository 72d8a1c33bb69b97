import math
import time


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    # round() is banker's rounding; ratings and scores round .5 upward
    return math.floor(value + 0.5)
