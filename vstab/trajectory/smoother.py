"""
Trajectory smoothing with a centered sliding-window mean.

The window is clipped at the sequence boundaries: near the start and end
it simply holds fewer points, and the mean is taken over the points that
are actually present. No padding values are ever introduced.
"""

from typing import Sequence

import numpy as np

from vstab.trajectory.types import (
    TrajectoryPoint,
    points_from_array,
    require_non_empty,
    to_array,
)

DEFAULT_SMOOTHING_RADIUS = 50


def window_bounds(index: int, radius: int, length: int) -> tuple[int, int]:
    """
    Return the half-open range ``[lo, hi)`` of the window centered on ``index``.

    Example:
        >>> window_bounds(0, 50, 5)
        (0, 5)
        >>> window_bounds(10, 2, 100)
        (8, 13)
    """
    return max(0, index - radius), min(length, index + radius + 1)


def _smooth_window(trajectory: Sequence[TrajectoryPoint], radius: int) -> list[TrajectoryPoint]:
    """Reference implementation, O(N * R)."""
    n = len(trajectory)
    smoothed = []
    for i in range(n):
        sum_x = 0.0
        sum_y = 0.0
        sum_a = 0.0
        lo, hi = window_bounds(i, radius, n)
        for j in range(lo, hi):
            sum_x += trajectory[j].x
            sum_y += trajectory[j].y
            sum_a += trajectory[j].a
        count = hi - lo
        smoothed.append(TrajectoryPoint(sum_x / count, sum_y / count, sum_a / count))
    return smoothed


def _smooth_cumsum(trajectory: Sequence[TrajectoryPoint], radius: int) -> Sequence[TrajectoryPoint]:
    """Prefix-sum implementation, O(N). Non-finite input uses the reference."""
    values = to_array(trajectory)
    # A NaN or Inf in the prefix sums leaks into every later window
    if not np.isfinite(values).all():
        return _smooth_window(trajectory, radius)
    n = len(values)

    prefix = np.zeros((n + 1, 3), dtype=np.float64)
    np.cumsum(values, axis=0, out=prefix[1:])

    idx = np.arange(n)
    lo = np.maximum(0, idx - radius)
    hi = np.minimum(n, idx + radius + 1)
    counts = (hi - lo).astype(np.float64)[:, None]

    return points_from_array((prefix[hi] - prefix[lo]) / counts)


SMOOTHING_METHODS = {
    'window': _smooth_window,
    'cumsum': _smooth_cumsum,
}


def smooth_trajectory(
    trajectory: Sequence[TrajectoryPoint],
    radius: int = DEFAULT_SMOOTHING_RADIUS,
    method: str = 'window',
) -> tuple[TrajectoryPoint, ...]:
    """
    Smooth a trajectory with a centered moving average.

    ``smoothed[i]`` is the mean of ``trajectory[j]`` for every ``j`` with
    ``|j - i| <= radius`` and ``0 <= j < len(trajectory)``. The divisor is
    the number of such ``j``, so boundary windows are smaller rather than
    zero-padded.

    Larger radii give a steadier result but follow intentional pans more
    slowly.

    Args:
        trajectory: Absolute trajectory points
        radius: Half-width of the window in frames
        method: 'window' (direct summation) or 'cumsum' (prefix sums); both
            give the same values up to floating-point rounding

    Returns:
        Smoothed points, index-aligned with ``trajectory``

    Raises:
        TrajectoryError: If ``trajectory`` is empty
        ValueError: If ``radius`` is negative or ``method`` is unknown
    """
    require_non_empty(trajectory, "trajectory")

    if radius < 0:
        raise ValueError(f"Smoothing radius must be >= 0, got {radius}")

    try:
        smoother = SMOOTHING_METHODS[method]
    except KeyError:
        raise ValueError(
            f"Unknown smoothing method: {method}. "
            f"Available: {list(SMOOTHING_METHODS.keys())}"
        ) from None

    return tuple(smoother(trajectory, int(radius)))
