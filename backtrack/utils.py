# Helper utilities
import math
import time


def now_ms() -> float:
    return time.time() * 1000


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with ties going towards +infinity.

    Python's round() is banker's rounding, which makes 12.25 -> 12.2 and
    0.5 -> 0. Readouts are shown to users and must not flip on ties.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Render 20.0 as "20" and 12.5 as "12.5" for user-facing messages."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def landmark_at(landmarks, index: int):
    """Return the landmark at index, or None when absent or out of range."""
    if landmarks is None or index < 0 or index >= len(landmarks):
        return None
    return landmarks[index]
