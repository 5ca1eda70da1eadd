# apps/board/ordering.py

"""
Fractional positions for drag-and-drop ordering

Cards inside a column and columns inside a board share the same scheme: a new
position is the midpoint of its two neighbours, one step below the first
sibling or one step above the last one.
"""

import math
from typing import Optional, Sequence

from apps.core.exceptions import InvalidInput

# Distance between a boundary sibling and a new first/last position
STEP = 1.0


class InvalidNeighbors(InvalidInput):
    """The caller passed bounds that do not describe a gap"""

    default_message = 'Invalid neighbour positions'


class PrecisionExhausted(Exception):
    """
    The gap between two neighbours collapsed in floating point

    Raised instead of returning a position that collides with (or falls
    outside) its bounds. The reorder coordinator answers it with a rebalance.
    """

    def __init__(self, lower, upper):
        self.lower = lower
        self.upper = upper
        super().__init__(f"No position left between {lower!r} and {upper!r}")


def _check_bound(value):
    if value is not None and not math.isfinite(value):
        raise InvalidNeighbors(f"Position bound must be finite, got {value!r}")


def allocate_position(lower: Optional[float] = None, upper: Optional[float] = None) -> float:
    """
    Returns a position strictly between `lower` and `upper`

    - both bounds: midpoint
    - only upper: upper - 1
    - only lower: lower + 1
    - none (empty container): 0
    """
    _check_bound(lower)
    _check_bound(upper)

    if lower is None and upper is None:
        return 0.0

    if lower is None:
        position = upper - STEP
        if not position < upper:
            raise PrecisionExhausted(lower, upper)
        return position

    if upper is None:
        position = lower + STEP
        if not position > lower:
            raise PrecisionExhausted(lower, upper)
        return position

    if lower >= upper:
        raise InvalidNeighbors(f"Lower bound {lower!r} must be below upper bound {upper!r}")

    position = (lower + upper) / 2
    if not lower < position < upper:
        raise PrecisionExhausted(lower, upper)
    return position


def position_for_index(positions: Sequence[float], index: int) -> float:
    """
    Position for an insertion at `index` of an ascending list of positions

    index 0 inserts before the first sibling, len(positions) appends.
    """
    if not 0 <= index <= len(positions):
        raise InvalidNeighbors(f"Index {index} outside [0, {len(positions)}]")

    lower = positions[index - 1] if index > 0 else None
    upper = positions[index] if index < len(positions) else None
    return allocate_position(lower, upper)


def append_position(last: Optional[float]) -> float:
    """New last position: max(existing) + 1, or 0 for an empty container"""
    return allocate_position(last, None)


def evenly_spaced(count: int):
    """Positions used when a container is renumbered: 0, 1, 2, ..."""
    return [float(index) * STEP for index in range(count)]
