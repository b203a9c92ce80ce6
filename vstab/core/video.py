"""
Video I/O utilities for vstab.

Thin OpenCV wrappers used by both stabilization passes. Frames are
counted by reading them; the frame count a container reports is
informational only.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30.0


@dataclass
class VideoProperties:
    """Geometry and timing of a video stream."""
    width: int
    height: int
    fps: float
    frame_count: int
    fourcc: str = "MJPG"

    @classmethod
    def from_capture(cls, cap: cv2.VideoCapture) -> "VideoProperties":
        """Read the properties of an opened capture."""
        return cls(
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=cap.get(cv2.CAP_PROP_FPS),
            frame_count=int(cap.get(cv2.CAP_PROP_FRAME_COUNT)),
        )

    def to_dict(self) -> dict:
        """Plain dictionary handed to output handlers."""
        return {
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "frame_count": self.frame_count,
        }


class VideoReader:
    """
    Sequential frame reader.

    Iterating yields ``(index, frame)`` with a 0-based index, until the
    stream ends or ``max_frames`` frames have been read.

    Example:
        with VideoReader("input.mp4", max_frames=501) as reader:
            for index, frame in reader:
                process(frame)
    """

    def __init__(self, path: str | Path, max_frames: int | None = None):
        self.path = Path(path)
        self.max_frames = max_frames
        self._cap: cv2.VideoCapture | None = None
        self._props: VideoProperties | None = None

    def open(self) -> "VideoReader":
        """
        Open the video file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RuntimeError: If OpenCV can't decode it
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Video file not found: {self.path}")

        self._cap = cv2.VideoCapture(str(self.path))
        if not self._cap.isOpened():
            raise RuntimeError(f"Failed to open video: {self.path}")

        self._props = VideoProperties.from_capture(self._cap)
        logger.debug(
            "Opened %s: %dx%d @ %.2f fps, ~%d frames",
            self.path, self._props.width, self._props.height,
            self._props.fps, self._props.frame_count,
        )
        return self

    def close(self) -> None:
        if self._cap:
            self._cap.release()
            self._cap = None

    @property
    def properties(self) -> VideoProperties:
        if self._props is None:
            raise RuntimeError("Video not opened. Call open() first.")
        return self._props

    def __iter__(self) -> Iterator[tuple[int, np.ndarray]]:
        if self._cap is None:
            self.open()

        index = 0
        while self.max_frames is None or index < self.max_frames:
            ok, frame = self._cap.read()
            if not ok:
                break
            yield index, frame
            index += 1

    def __enter__(self) -> "VideoReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


class VideoWriter:
    """
    Frame-by-frame video writer.

    Example:
        with VideoWriter("output.avi", props) as writer:
            for frame in frames:
                writer.write(frame)
    """

    def __init__(
        self,
        path: str | Path,
        props: VideoProperties,
        size: tuple[int, int] | None = None,
    ):
        """
        Args:
            path: Output video path
            props: Codec, frame rate and default frame size
            size: Frame size as (width, height) when it differs from props
        """
        self.path = Path(path)
        self.props = props
        self.size = size or (props.width, props.height)
        self._writer: cv2.VideoWriter | None = None

    def open(self) -> "VideoWriter":
        fourcc = cv2.VideoWriter_fourcc(*self.props.fourcc)
        # Streams without a usable rate still get a playable file
        fps = self.props.fps if self.props.fps > 0 else DEFAULT_FPS
        self._writer = cv2.VideoWriter(str(self.path), fourcc, fps, self.size)
        if not self._writer.isOpened():
            raise RuntimeError(f"Failed to open video writer: {self.path}")
        return self

    def write(self, frame: np.ndarray) -> None:
        if self._writer is None:
            raise RuntimeError("Writer not opened. Call open() first.")
        self._writer.write(frame)

    def close(self) -> None:
        if self._writer:
            self._writer.release()
            self._writer = None

    def __enter__(self) -> "VideoWriter":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
