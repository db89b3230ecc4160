# controls.py
# Input glue: turns key presses and swipe gestures into a Direction.

from typing import Any, Dict, Optional, Tuple

from .core import Direction

# Minimum displacement before a swipe counts as a move.
DEFAULT_SWIPE_THRESHOLD = 30

KEY_BINDINGS: Dict[str, Direction] = {
    "ARROWUP": Direction.UP,
    "ARROWDOWN": Direction.DOWN,
    "ARROWLEFT": Direction.LEFT,
    "ARROWRIGHT": Direction.RIGHT,
    "W": Direction.UP,
    "A": Direction.LEFT,
    "S": Direction.DOWN,
    "D": Direction.RIGHT,
}


def parse_direction(value: Any) -> Optional[Direction]:
    """
    Resolves user input to a Direction.
    Accepts Direction members, direction names ("up", "LEFT"), browser key
    names ("ArrowUp") and WASD keys, case-insensitively.
    Args:
        value: Raw input.
    Returns:
        Optional[Direction]: The direction, or None if the input is not recognised.
    """
    if isinstance(value, Direction):
        return value
    if not isinstance(value, str):
        return None

    key = value.strip().upper()
    if key in Direction.__members__:
        return Direction[key]
    return KEY_BINDINGS.get(key)


def classify_swipe(start: Tuple[float, float], end: Tuple[float, float],
                   threshold: float = DEFAULT_SWIPE_THRESHOLD) -> Optional[Direction]:
    """
    Classifies a completed swipe by its dominant axis.
    Screen coordinates grow rightwards and downwards. A tie between the axes is
    treated as vertical. Displacements not strictly above `threshold` are taps.
    Args:
        start: (x, y) where the touch began.
        end: (x, y) where the touch ended.
        threshold: Minimum displacement along the dominant axis.
    Returns:
        Optional[Direction]: The swipe direction, or None for a tap.
    """
    diff_x = start[0] - end[0]
    diff_y = start[1] - end[1]

    if abs(diff_x) > abs(diff_y):
        if abs(diff_x) > threshold:
            return Direction.LEFT if diff_x > 0 else Direction.RIGHT
    elif abs(diff_y) > threshold:
        return Direction.UP if diff_y > 0 else Direction.DOWN
    return None
