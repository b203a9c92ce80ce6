"""
Trajectory integration.

Accumulates previous-to-current motion samples into an absolute
camera trajectory.
"""

from typing import Sequence

from vstab.trajectory.types import MotionSample, TrajectoryPoint, require_non_empty


def integrate_trajectory(samples: Sequence[MotionSample]) -> tuple[TrajectoryPoint, ...]:
    """
    Cumulatively sum motion samples into absolute trajectory points.

    Each component is summed independently, starting from zero. Non-finite
    values are not filtered and propagate through the sums.

    Args:
        samples: Ordered motion samples, one per frame transition

    Returns:
        Trajectory points, index-aligned with ``samples``

    Raises:
        TrajectoryError: If ``samples`` is empty

    Example:
        >>> integrate_trajectory([MotionSample(1, 0, 0), MotionSample(1, 0, 0)])
        (TrajectoryPoint(x=1.0, y=0.0, a=0.0), TrajectoryPoint(x=2.0, y=0.0, a=0.0))
    """
    require_non_empty(samples, "motion")

    x = 0.0
    y = 0.0
    a = 0.0
    trajectory = []
    for sample in samples:
        x += sample.dx
        y += sample.dy
        a += sample.da
        trajectory.append(TrajectoryPoint(x, y, a))

    return tuple(trajectory)
