"""
Trajectory module - Camera path integration, smoothing and correction.

This module provides:
- integrate_trajectory: Accumulate per-frame motion into an absolute path
- smooth_trajectory: Centered moving average with boundary-clipped windows
- correct_transforms: Per-frame transforms that follow the smoothed path
- stabilize_motion / TrajectoryPipeline: Run all three in order
- Motion dump file I/O utilities

Example:
    >>> from vstab.trajectory import MotionSample, stabilize_motion
    >>> samples = [MotionSample(1, 0, 0)] * 3
    >>> result = stabilize_motion(samples, radius=1)
    >>> [round(m.dx, 3) for m in result.corrected]
    [1.5, 0.5, 0.5]
"""

from vstab.trajectory.types import (
    MotionSample,
    TrajectoryPoint,
    SmoothedTrajectoryPoint,
    CorrectedMotion,
    TrajectoryError,
    to_array,
    samples_from_array,
    points_from_array,
)
from vstab.trajectory.integrator import integrate_trajectory
from vstab.trajectory.smoother import (
    DEFAULT_SMOOTHING_RADIUS,
    SMOOTHING_METHODS,
    smooth_trajectory,
    window_bounds,
)
from vstab.trajectory.corrector import correct_transforms
from vstab.trajectory.pipeline import (
    StabilizationResult,
    TrajectoryPipeline,
    stabilize_motion,
    render_pairs,
)
from vstab.trajectory.motion_io import (
    parse_motion_line,
    read_motion_file,
    write_motion_file,
    write_diagnostics,
)

__all__ = [
    "MotionSample",
    "TrajectoryPoint",
    "SmoothedTrajectoryPoint",
    "CorrectedMotion",
    "TrajectoryError",
    "to_array",
    "samples_from_array",
    "points_from_array",
    "integrate_trajectory",
    "DEFAULT_SMOOTHING_RADIUS",
    "SMOOTHING_METHODS",
    "smooth_trajectory",
    "window_bounds",
    "correct_transforms",
    "StabilizationResult",
    "TrajectoryPipeline",
    "stabilize_motion",
    "render_pairs",
    "parse_motion_line",
    "read_motion_file",
    "write_motion_file",
    "write_diagnostics",
]
