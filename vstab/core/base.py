"""
Protocols for the collaborators around the trajectory pipeline.

The pipeline itself only sees motion samples and corrected transforms.
Anything that produces the former from frames, or consumes the latter to
produce frames, implements one of these protocols.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from vstab.trajectory.types import CorrectedMotion, MotionSample


@runtime_checkable
class MotionEstimator(Protocol):
    """Protocol for objects that estimate motion between two frames."""

    name: str

    def estimate(
        self,
        prev_gray: np.ndarray,
        cur_gray: np.ndarray,
    ) -> MotionSample | None:
        """
        Estimate rigid motion from ``prev_gray`` to ``cur_gray``.

        Returns None when no estimate could be made for this pair.
        """
        ...


@runtime_checkable
class FrameRenderer(Protocol):
    """Protocol for objects that apply a corrected transform to a frame."""

    def render(self, frame: np.ndarray, transform: CorrectedMotion) -> np.ndarray:
        """Return the stabilized frame."""
        ...
