"""
Drain a frame source into a sequence of motion samples.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable

import cv2
import numpy as np

from vstab.core.base import MotionEstimator
from vstab.trajectory.types import IDENTITY_MOTION, MotionSample

logger = logging.getLogger(__name__)


@dataclass
class MotionCollection:
    """
    Motion samples gathered from one pass over a video.

    ``reused`` lists the pair indices where estimation failed and the
    previous sample was repeated instead.
    """
    samples: list[MotionSample] = field(default_factory=list)
    reused: list[int] = field(default_factory=list)
    frames_read: int = 0
    elapsed: float = 0.0

    def __len__(self) -> int:
        return len(self.samples)


def to_gray(frame: np.ndarray) -> np.ndarray:
    """Convert a BGR frame to greyscale; single-channel frames pass through."""
    if frame.ndim == 2:
        return frame
    return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)


def collect_motion(
    frames: Iterable[np.ndarray],
    estimator: MotionEstimator,
    frame_cap: int | None = None,
) -> MotionCollection:
    """
    Estimate one motion sample per consecutive frame pair.

    When the estimator gives up on a pair, the last successful sample is
    repeated (identity if nothing succeeded yet) and the pair index is
    recorded in ``reused``.

    Args:
        frames: Frames in display order
        estimator: Strategy used for each pair
        frame_cap: Stop after this many samples (None = no limit)

    Returns:
        MotionCollection with the samples and bookkeeping
    """
    collection = MotionCollection()
    start = time.perf_counter()

    prev_gray = None
    last = IDENTITY_MOTION
    for frame in frames:
        if frame_cap is not None and len(collection.samples) >= frame_cap:
            break

        collection.frames_read += 1
        cur_gray = to_gray(frame)
        if prev_gray is None:
            prev_gray = cur_gray
            continue

        index = len(collection.samples)
        sample = estimator.estimate(prev_gray, cur_gray)
        if sample is None:
            logger.warning(
                "Motion estimation failed for pair %d, reusing previous transform",
                index,
            )
            collection.reused.append(index)
            sample = last
        else:
            sample = MotionSample(float(sample.dx), float(sample.dy), float(sample.da))
            last = sample

        logger.debug("Pair %d: dx=%.4f dy=%.4f da=%.6f", index, *sample)
        collection.samples.append(sample)
        prev_gray = cur_gray

    collection.elapsed = time.perf_counter() - start
    logger.info(
        "Collected %d motion samples with %s (%d reused)",
        len(collection.samples), getattr(estimator, 'name', type(estimator).__name__),
        len(collection.reused),
    )
    return collection
