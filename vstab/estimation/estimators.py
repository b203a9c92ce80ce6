"""
Inter-frame motion estimators.

Three interchangeable strategies turn a pair of greyscale frames into a
MotionSample:

- SparseLKEstimator: Shi-Tomasi corners tracked with pyramidal
  Lucas-Kanade, then a rigid (rotation + translation) fit
- DenseLKEstimator: Sparse-to-dense Lucas-Kanade flow, averaged
- FarnebackEstimator: Farneback dense flow, averaged

The dense estimators only recover translation; their rotation is 0.
"""

import logging
import math

import cv2
import numpy as np

from vstab.trajectory.types import MotionSample

logger = logging.getLogger(__name__)


def rigid_motion_from_matrix(matrix: np.ndarray) -> MotionSample:
    """
    Decompose a 2x3 rigid transform into (dx, dy, da).

    Args:
        matrix: 2x3 affine matrix without shear

    Returns:
        MotionSample with the translation and the rotation angle
    """
    dx = float(matrix[0, 2])
    dy = float(matrix[1, 2])
    da = math.atan2(float(matrix[1, 0]), float(matrix[0, 0]))
    return MotionSample(dx, dy, da)


def mean_flow_motion(flow: np.ndarray) -> MotionSample:
    """Average a dense flow field (H x W x 2) into a translation-only sample."""
    dx = float(np.mean(flow[..., 0], dtype=np.float64))
    dy = float(np.mean(flow[..., 1], dtype=np.float64))
    return MotionSample(dx, dy, 0.0)


class SparseLKEstimator:
    """
    Corner tracking with Lucas-Kanade optical flow and a rigid fit.

    Example:
        >>> estimator = SparseLKEstimator()
        >>> sample = estimator.estimate(prev_gray, cur_gray)
    """

    name = "lk_sparse"

    def __init__(
        self,
        max_corners: int = 200,
        quality_level: float = 0.01,
        min_distance: int = 30,
    ):
        """
        Initialize the estimator.

        Args:
            max_corners: Maximum number of Shi-Tomasi corners per frame
            quality_level: Corner quality threshold (0-1)
            min_distance: Minimum distance between corners in pixels
        """
        self.feature_params = {
            "maxCorners": max_corners,
            "qualityLevel": quality_level,
            "minDistance": min_distance,
        }

    def estimate(self, prev_gray: np.ndarray, cur_gray: np.ndarray) -> MotionSample | None:
        prev_pts = cv2.goodFeaturesToTrack(prev_gray, mask=None, **self.feature_params)
        if prev_pts is None or len(prev_pts) < 2:
            logger.debug("Not enough corners to track")
            return None

        cur_pts, status, _err = cv2.calcOpticalFlowPyrLK(prev_gray, cur_gray, prev_pts, None)
        if cur_pts is None or status is None:
            return None

        good = status.ravel() == 1
        prev_good = prev_pts[good]
        cur_good = cur_pts[good]
        if len(prev_good) < 2:
            logger.debug("Only %d corners survived tracking", len(prev_good))
            return None

        # Rotation + translation + uniform scale, no shear
        matrix, _inliers = cv2.estimateAffinePartial2D(prev_good, cur_good)
        if matrix is None:
            return None

        return rigid_motion_from_matrix(matrix)


class DenseLKEstimator:
    """Sparse-to-dense Lucas-Kanade flow (needs the OpenCV contrib optflow module)."""

    name = "lk_dense"

    def __init__(
        self,
        grid_step: int = 8,
        k: int = 128,
        sigma: float = 0.05,
        use_post_proc: bool = True,
        fgs_lambda: float = 500.0,
        fgs_sigma: float = 1.5,
    ):
        optflow = getattr(cv2, "optflow", None)
        if optflow is None:
            raise RuntimeError(
                "lk_dense requires cv2.optflow; install opencv-contrib-python"
            )
        self._optflow = optflow
        self.params = (grid_step, k, sigma, use_post_proc, fgs_lambda, fgs_sigma)

    def estimate(self, prev_gray: np.ndarray, cur_gray: np.ndarray) -> MotionSample | None:
        flow = self._optflow.calcOpticalFlowSparseToDense(prev_gray, cur_gray, None, *self.params)
        if flow is None:
            return None
        return mean_flow_motion(flow)


class FarnebackEstimator:
    """Farneback dense optical flow."""

    name = "farneback"

    def __init__(
        self,
        pyr_scale: float = 0.3,
        levels: int = 2,
        winsize: int = 10,
        iterations: int = 5,
        poly_n: int = 7,
        poly_sigma: float = 1.5,
        flags: int = 0,
    ):
        self.params = (pyr_scale, levels, winsize, iterations, poly_n, poly_sigma, flags)

    def estimate(self, prev_gray: np.ndarray, cur_gray: np.ndarray) -> MotionSample | None:
        flow = cv2.calcOpticalFlowFarneback(prev_gray, cur_gray, None, *self.params)
        if flow is None:
            return None
        return mean_flow_motion(flow)


# Registry of estimators; numeric aliases follow the classic command line
ESTIMATORS = {
    'lk_sparse': SparseLKEstimator,
    'lk_dense': DenseLKEstimator,
    'farneback': FarnebackEstimator,
    '1': SparseLKEstimator,
    '2': DenseLKEstimator,
    '3': FarnebackEstimator,
}


def create_estimator(name: str, **kwargs):
    """
    Create an estimator by registry name.

    Raises:
        ValueError: If the name is unknown
    """
    key = str(name).strip().lower()
    if key not in ESTIMATORS:
        raise ValueError(
            f"Unknown motion estimator: {name}. "
            f"Available: {list(ESTIMATORS.keys())}"
        )
    return ESTIMATORS[key](**kwargs)
