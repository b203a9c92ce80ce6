"""
Corrective transform generation.

Produces a new set of previous-to-current transforms whose accumulation
lands exactly on the smoothed trajectory.
"""

from typing import Sequence

from vstab.trajectory.types import (
    CorrectedMotion,
    MotionSample,
    TrajectoryPoint,
    require_non_empty,
    require_same_length,
)


def correct_transforms(
    samples: Sequence[MotionSample],
    smoothed: Sequence[TrajectoryPoint],
) -> tuple[CorrectedMotion, ...]:
    """
    Compute corrected per-frame transforms.

    Walks the samples with a running pose. At every frame the pose is
    advanced by the original sample, the offset to the smoothed pose is
    added to that sample, and the pose is moved onto the smoothed point.
    Accumulating the result therefore reproduces ``smoothed``, i.e.
    ``corrected[i] == smoothed[i] - smoothed[i - 1]`` up to rounding.

    Args:
        samples: Original motion samples
        smoothed: Smoothed trajectory, index-aligned with ``samples``

    Returns:
        Corrected motion, one per sample

    Raises:
        TrajectoryError: If either sequence is empty or their lengths differ

    Example:
        >>> samples = [MotionSample(1, 0, 0)] * 3
        >>> smoothed = [TrajectoryPoint(1.5, 0, 0), TrajectoryPoint(2, 0, 0), TrajectoryPoint(2.5, 0, 0)]
        >>> [c.dx for c in correct_transforms(samples, smoothed)]
        [1.5, 0.5, 0.5]
    """
    require_non_empty(samples, "motion")
    require_same_length(samples, smoothed, ("motion", "smoothed trajectory"))

    x = 0.0
    y = 0.0
    a = 0.0
    corrected = []
    for sample, target in zip(samples, smoothed):
        x += sample.dx
        y += sample.dy
        a += sample.da

        # target - current
        diff_x = target.x - x
        diff_y = target.y - y
        diff_a = target.a - a

        corrected.append(CorrectedMotion(
            sample.dx + diff_x,
            sample.dy + diff_y,
            sample.da + diff_a,
        ))

        # Continue from the corrected pose
        x += diff_x
        y += diff_y
        a += diff_a

    return tuple(corrected)
