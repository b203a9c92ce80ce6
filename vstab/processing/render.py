"""
Apply corrected transforms to frames.

Each frame is warped by its rigid correction, the borders exposed by the
warp are cropped away, and the result is scaled back to the input size.
"""

import math

import cv2
import numpy as np

from vstab.trajectory.types import CorrectedMotion

HORIZONTAL_BORDER_CROP = 70  # In pixels
BORDER_CROP_RATIO = 0.25


def transform_matrix(transform: CorrectedMotion) -> np.ndarray:
    """
    Build the 2x3 rigid transform matrix for a corrected motion.

    Returns:
        [[cos da, -sin da, dx], [sin da, cos da, dy]] as float64
    """
    dx, dy, da = transform
    c = math.cos(da)
    s = math.sin(da)
    return np.array([
        [c, -s, dx],
        [s, c, dy],
    ], dtype=np.float64)


def crop_borders(width: int, height: int, horizontal: int, ratio: float) -> tuple[int, int]:
    """
    Compute the (horizontal, vertical) pixel crop for a frame size.

    The vertical crop derives from ``height * ratio`` scaled by the
    height/width aspect.
    """
    border_crop = int(height * ratio)
    vertical = border_crop * height // width if width > 0 else 0
    return horizontal, vertical


class CorrectionRenderer:
    """
    Warp, crop and resize frames with corrected transforms.

    Example:
        >>> renderer = CorrectionRenderer(horizontal_border_crop=70)
        >>> stabilized = renderer.render(frame, result.corrected[k])
    """

    def __init__(
        self,
        horizontal_border_crop: int = HORIZONTAL_BORDER_CROP,
        border_crop_ratio: float = BORDER_CROP_RATIO,
    ):
        """
        Initialize the renderer.

        Args:
            horizontal_border_crop: Pixels cropped from the left and right
            border_crop_ratio: Fraction of the height used for the vertical crop
        """
        if horizontal_border_crop < 0:
            raise ValueError(f"horizontal_border_crop must be >= 0, got {horizontal_border_crop}")
        if not 0.0 <= border_crop_ratio < 1.0:
            raise ValueError(f"border_crop_ratio must be in [0, 1), got {border_crop_ratio}")
        self.horizontal_border_crop = horizontal_border_crop
        self.border_crop_ratio = border_crop_ratio

    def render(self, frame: np.ndarray, transform: CorrectedMotion) -> np.ndarray:
        """
        Apply one corrected transform to a frame.

        Args:
            frame: BGR or greyscale frame
            transform: Corrected motion for this frame

        Returns:
            Stabilized frame with the same shape as ``frame``

        Raises:
            ValueError: If the crop leaves no pixels
        """
        height, width = frame.shape[:2]
        warped = cv2.warpAffine(frame, transform_matrix(transform), (width, height))

        h_crop, v_crop = crop_borders(
            width, height, self.horizontal_border_crop, self.border_crop_ratio
        )
        if 2 * h_crop >= width or 2 * v_crop >= height:
            raise ValueError(
                f"Border crop ({h_crop}, {v_crop}) too large for {width}x{height} frame"
            )

        cropped = warped[v_crop:height - v_crop, h_crop:width - h_crop]
        return cv2.resize(cropped, (width, height))
