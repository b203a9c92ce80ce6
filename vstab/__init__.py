"""
vstab - Trajectory-smoothing video stabilizer
=============================================

Estimates per-frame camera motion, integrates it into a trajectory,
smooths the trajectory with a sliding window, and re-renders each frame
with a transform that follows the smoothed path.

Main modules:
- vstab.trajectory: Integration, smoothing and correction of camera motion
- vstab.estimation: Inter-frame motion estimators
- vstab.processing: Rendering frames with corrected transforms
- vstab.outputs: Output handlers (video, side-by-side, image sequence)
- vstab.pipeline: Two-pass stabilization of video files

Quick start:
    >>> from vstab.trajectory import MotionSample, stabilize_motion
    >>> result = stabilize_motion([MotionSample(1.0, 0.0, 0.0)] * 3, radius=1)
    >>> result.corrected[0]
    MotionSample(dx=1.5, dy=0.0, da=0.0)
"""

__version__ = "0.1.0"

from vstab.trajectory import (
    MotionSample,
    TrajectoryPoint,
    TrajectoryError,
    TrajectoryPipeline,
    StabilizationResult,
    stabilize_motion,
)
from vstab.core.config import StabilizerConfig

__all__ = [
    "__version__",
    "MotionSample",
    "TrajectoryPoint",
    "TrajectoryError",
    "TrajectoryPipeline",
    "StabilizationResult",
    "stabilize_motion",
    "StabilizerConfig",
]
