"""
Image sequence output handler.
"""

from pathlib import Path

import cv2
import numpy as np

from vstab.outputs.base import BaseOutput, OutputSpec
from vstab.outputs.video import side_by_side


class FrameSequenceOutput(BaseOutput):
    """
    Writes every rendered frame as a numbered JPEG.

    Files are named ``%08d.jpg`` after the frame index.

    Options:
        dir: Output directory (default: images)
        source: 'stab' or 'compare' (default: stab)
        quality: JPEG quality 0-100 (default: 95)
    """

    def __init__(self, spec: OutputSpec, input_path: str):
        super().__init__(spec, input_path)
        self.source = spec.get('source', 'stab').lower()
        if self.source not in ('stab', 'compare'):
            raise ValueError(
                f"Invalid frames source: {self.source}. "
                "Must be 'stab' or 'compare'."
            )
        self.quality = spec.get_int('quality', 95)
        if not 0 <= self.quality <= 100:
            raise ValueError(f"Invalid JPEG quality: {self.quality}. Must be 0-100.")
        self.written: list[Path] = []

    def _get_default_suffix(self) -> str:
        return ""

    def _get_default_extension(self) -> str:
        return "jpg"

    def _resolve_output_path(self) -> Path:
        return Path(self.spec.get('dir', 'images'))

    def initialize(self, video_props: dict) -> None:
        self.output_path.mkdir(parents=True, exist_ok=True)

    def process_frame(
        self,
        frame_num: int,
        original: np.ndarray,
        stabilized: np.ndarray,
    ) -> None:
        image = stabilized
        if self.source == 'compare':
            image = side_by_side(original, stabilized)

        path = self.output_path / f"{frame_num:08d}.jpg"
        if not cv2.imwrite(str(path), image, [cv2.IMWRITE_JPEG_QUALITY, self.quality]):
            raise RuntimeError(f"Failed to write image: {path}")
        self.written.append(path)

    def finalize(self) -> None:
        pass
