"""
Estimation module - Per-pair camera motion from video frames.

This module provides:
- SparseLKEstimator, DenseLKEstimator, FarnebackEstimator
- create_estimator: Look up an estimator by name
- collect_motion: Drain frames into motion samples

Example:
    >>> from vstab.estimation import create_estimator, collect_motion
    >>> estimator = create_estimator("farneback")
    >>> motion = collect_motion((f for _, f in reader), estimator, frame_cap=500)
"""

from vstab.estimation.estimators import (
    ESTIMATORS,
    SparseLKEstimator,
    DenseLKEstimator,
    FarnebackEstimator,
    create_estimator,
    rigid_motion_from_matrix,
    mean_flow_motion,
)
from vstab.estimation.collect import MotionCollection, collect_motion, to_gray

__all__ = [
    "ESTIMATORS",
    "SparseLKEstimator",
    "DenseLKEstimator",
    "FarnebackEstimator",
    "create_estimator",
    "rigid_motion_from_matrix",
    "mean_flow_motion",
    "MotionCollection",
    "collect_motion",
    "to_gray",
]
