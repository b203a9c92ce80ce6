"""
Core driver for the trajectory pipeline.

Runs integration, smoothing and correction in that fixed order over a
fully materialized sequence of motion samples.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from vstab.trajectory.corrector import correct_transforms
from vstab.trajectory.integrator import integrate_trajectory
from vstab.trajectory.smoother import DEFAULT_SMOOTHING_RADIUS, smooth_trajectory
from vstab.trajectory.types import (
    CorrectedMotion,
    MotionSample,
    TrajectoryPoint,
    require_non_empty,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilizationResult:
    """All sequences produced by one pipeline run."""
    samples: tuple[MotionSample, ...]
    trajectory: tuple[TrajectoryPoint, ...]
    smoothed: tuple[TrajectoryPoint, ...]
    corrected: tuple[CorrectedMotion, ...]
    radius: int
    timings: dict[str, float] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.samples)

    def iter_corrections(self) -> Iterator[CorrectedMotion]:
        """Yield corrected transforms one at a time, in frame order."""
        yield from self.corrected


def stabilize_motion(
    samples: Iterable[MotionSample],
    radius: int = DEFAULT_SMOOTHING_RADIUS,
    method: str = 'window',
) -> StabilizationResult:
    """
    Run the full trajectory pipeline.

    The input is drained completely before anything else happens, since the
    smoother needs to look up to ``radius`` frames ahead.

    Args:
        samples: Motion samples in frame order
        radius: Smoothing radius in frames
        method: Smoothing implementation ('window' or 'cumsum')

    Returns:
        StabilizationResult with every intermediate sequence

    Raises:
        TrajectoryError: If there are no samples
        ValueError: On an invalid radius or smoothing method
    """
    samples = tuple(MotionSample(*s) for s in samples)
    require_non_empty(samples, "motion")

    timings: dict[str, float] = {}

    start = time.perf_counter()
    trajectory = integrate_trajectory(samples)
    timings['trajectory'] = time.perf_counter() - start

    start = time.perf_counter()
    smoothed = smooth_trajectory(trajectory, radius, method)
    timings['smoothing'] = time.perf_counter() - start

    start = time.perf_counter()
    corrected = correct_transforms(samples, smoothed)
    timings['generating'] = time.perf_counter() - start

    logger.info(
        "Stabilized %d transforms (radius=%d, method=%s)",
        len(samples), radius, method,
    )

    return StabilizationResult(
        samples=samples,
        trajectory=trajectory,
        smoothed=smoothed,
        corrected=corrected,
        radius=radius,
        timings=timings,
    )


class TrajectoryPipeline:
    """
    Reusable pipeline bound to one smoothing configuration.

    Example:
        >>> pipeline = TrajectoryPipeline(radius=30)
        >>> result = pipeline.run(samples)
        >>> for transform in result.iter_corrections():
        ...     renderer.render(frame, transform)
    """

    def __init__(self, radius: int = DEFAULT_SMOOTHING_RADIUS, method: str = 'window'):
        if radius < 0:
            raise ValueError(f"Smoothing radius must be >= 0, got {radius}")
        self.radius = radius
        self.method = method

    def run(self, samples: Iterable[MotionSample]) -> StabilizationResult:
        """Run the pipeline over ``samples``."""
        return stabilize_motion(samples, self.radius, self.method)

    def __repr__(self) -> str:
        return f"TrajectoryPipeline(radius={self.radius}, method={self.method!r})"


def render_pairs(
    frame_count: int,
    corrected: Sequence[CorrectedMotion],
) -> Iterator[tuple[int, CorrectedMotion]]:
    """
    Pair frame indices with the transform each one is rendered with.

    ``corrected[k]`` belongs to the pair (frame k, frame k + 1) and is
    applied to frame ``k`` while ``k < frame_count - 1``. The final frame
    has no transform past it and is skipped.

    Args:
        frame_count: Number of frames taking part in the run
        corrected: Corrected transforms in frame order

    Yields:
        (frame_index, transform) tuples, frame_index is 0-based
    """
    limit = min(frame_count - 1, len(corrected))
    for k in range(max(limit, 0)):
        yield k, corrected[k]
