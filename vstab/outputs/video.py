"""
Video output handlers.

Provides output handlers that produce video files:
- StabilizedVideoOutput: Stabilized frames only
- CompareVideoOutput: Original and stabilized side by side
"""

import cv2
import numpy as np

from vstab.core.video import VideoProperties, VideoWriter
from vstab.outputs.base import BaseOutput, OutputSpec

COMPARE_GAP = 10        # Pixels between the two halves
MAX_COMPARE_WIDTH = 1920


def side_by_side(original: np.ndarray, stabilized: np.ndarray, gap: int = COMPARE_GAP) -> np.ndarray:
    """
    Draw the original and stabilized frames next to each other.

    The canvas is halved in both dimensions when it is wider than
    MAX_COMPARE_WIDTH.
    """
    height, width = original.shape[:2]
    canvas = np.zeros((height, width * 2 + gap) + original.shape[2:], dtype=original.dtype)
    canvas[:, :width] = original
    canvas[:, width + gap:] = stabilized

    if canvas.shape[1] > MAX_COMPARE_WIDTH:
        canvas = cv2.resize(canvas, (canvas.shape[1] // 2, canvas.shape[0] // 2))
    return canvas


def compare_size(width: int, height: int, gap: int = COMPARE_GAP) -> tuple[int, int]:
    """Return the (width, height) of the canvas side_by_side() produces."""
    canvas_w = width * 2 + gap
    if canvas_w > MAX_COMPARE_WIDTH:
        return canvas_w // 2, height // 2
    return canvas_w, height


class _VideoFileOutput(BaseOutput):
    """Shared writer handling for the video outputs."""

    def __init__(self, spec: OutputSpec, input_path: str):
        super().__init__(spec, input_path)
        self.writer: VideoWriter | None = None
        self.fourcc = spec.get('fourcc', 'MJPG')
        if len(self.fourcc) != 4:
            raise ValueError(f"Invalid fourcc: {self.fourcc!r}. Must be 4 characters.")
        self.fps = spec.get_int('fps', 0)
        if self.fps < 0:
            raise ValueError(f"Invalid fps: {self.fps}. Must be >= 0.")
        self.frames_written = 0

    def _get_default_extension(self) -> str:
        return "avi"

    def _frame_size(self, width: int, height: int) -> tuple[int, int]:
        return width, height

    def initialize(self, video_props: dict) -> None:
        props = VideoProperties(
            width=video_props['width'],
            height=video_props['height'],
            fps=self.fps or video_props['fps'],
            frame_count=video_props.get('frame_count', 0),
            fourcc=self.fourcc,
        )
        size = self._frame_size(props.width, props.height)
        self.writer = VideoWriter(self.output_path, props, size=size).open()

    def finalize(self) -> None:
        if self.writer:
            self.writer.close()
            self.writer = None


class StabilizedVideoOutput(_VideoFileOutput):
    """
    Outputs the stabilized video.

    Options:
        filename: Output filename (default: input_stabilized.avi)
        fourcc: Codec (default: MJPG)
        fps: Frame rate override (default: input rate)
    """

    def _get_default_suffix(self) -> str:
        return "_stabilized"

    def process_frame(
        self,
        frame_num: int,
        original: np.ndarray,
        stabilized: np.ndarray,
    ) -> None:
        if self.writer is None:
            return
        self.writer.write(stabilized)
        self.frames_written += 1


class CompareVideoOutput(_VideoFileOutput):
    """
    Outputs original and stabilized frames side by side.

    Options:
        filename: Output filename (default: input_compare.avi)
        fourcc: Codec (default: MJPG)
        fps: Frame rate override (default: input rate)
    """

    def _get_default_suffix(self) -> str:
        return "_compare"

    def _frame_size(self, width: int, height: int) -> tuple[int, int]:
        return compare_size(width, height)

    def process_frame(
        self,
        frame_num: int,
        original: np.ndarray,
        stabilized: np.ndarray,
    ) -> None:
        if self.writer is None:
            return
        self.writer.write(side_by_side(original, stabilized))
        self.frames_written += 1
