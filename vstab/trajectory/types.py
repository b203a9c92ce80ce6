"""
Data types shared by the trajectory pipeline.

All sequences handled by the pipeline are tuples of small immutable
named tuples, index-aligned one-to-one with the frame transitions.
"""

from typing import Iterable, NamedTuple, Sequence

import numpy as np


class TrajectoryError(ValueError):
    """Raised when the pipeline is handed sequences it cannot work with."""


class MotionSample(NamedTuple):
    """Relative rigid motion from frame i-1 to frame i."""
    dx: float
    dy: float
    da: float  # radians


class TrajectoryPoint(NamedTuple):
    """Absolute camera pose: running sum of motion samples."""
    x: float
    y: float
    a: float  # radians


# Same shapes, different meaning
SmoothedTrajectoryPoint = TrajectoryPoint
CorrectedMotion = MotionSample

IDENTITY_MOTION = MotionSample(0.0, 0.0, 0.0)


def require_non_empty(seq: Sequence, name: str) -> None:
    """Raise TrajectoryError if ``seq`` is empty."""
    if len(seq) == 0:
        raise TrajectoryError(f"{name} sequence is empty")


def require_same_length(first: Sequence, second: Sequence, names: tuple[str, str]) -> None:
    """Raise TrajectoryError unless both sequences have the same length."""
    if len(first) != len(second):
        raise TrajectoryError(
            f"Length mismatch: {names[0]} has {len(first)} entries, "
            f"{names[1]} has {len(second)}"
        )


def to_array(seq: Sequence[tuple[float, float, float]]) -> np.ndarray:
    """
    Convert a sequence of 3-component tuples to an (N, 3) float64 array.

    Args:
        seq: Motion samples or trajectory points

    Returns:
        Array with one row per entry
    """
    if len(seq) == 0:
        return np.zeros((0, 3), dtype=np.float64)
    return np.asarray(seq, dtype=np.float64).reshape(-1, 3)


def samples_from_array(values: np.ndarray | Iterable) -> tuple[MotionSample, ...]:
    """Build motion samples from an (N, 3) array or iterable of triples."""
    arr = np.asarray(values, dtype=np.float64).reshape(-1, 3)
    return tuple(MotionSample(float(r[0]), float(r[1]), float(r[2])) for r in arr)


def points_from_array(values: np.ndarray | Iterable) -> tuple[TrajectoryPoint, ...]:
    """Build trajectory points from an (N, 3) array or iterable of triples."""
    arr = np.asarray(values, dtype=np.float64).reshape(-1, 3)
    return tuple(TrajectoryPoint(float(r[0]), float(r[1]), float(r[2])) for r in arr)
