"""
Output manager for coordinating multiple output handlers.
"""

from pathlib import Path
from typing import Type

import numpy as np

from vstab.outputs.base import BaseOutput, OutputSpec
from vstab.outputs.images import FrameSequenceOutput
from vstab.outputs.video import CompareVideoOutput, StabilizedVideoOutput


# Registry of available output types
OUTPUT_TYPES: dict[str, Type[BaseOutput]] = {
    'video': StabilizedVideoOutput,
    'compare': CompareVideoOutput,
    'frames': FrameSequenceOutput,
}


class OutputManager:
    """
    Manages multiple output handlers.

    Example:
        >>> manager = OutputManager("input.mp4")
        >>> manager.add_output("video")
        >>> manager.add_output("frames=dir=images")
        >>> manager.initialize_all(video_props)
        >>> manager.process_frame(k, frame, stabilized)
        >>> manager.finalize_all()
    """

    def __init__(self, input_path: str | Path):
        self.input_path = input_path
        self.outputs: list[BaseOutput] = []

    def add_output(self, spec_string: str) -> BaseOutput:
        """
        Add an output from a specification string.

        Raises:
            ValueError: If the output type is unknown
        """
        spec = OutputSpec(spec_string)

        if spec.output_type not in OUTPUT_TYPES:
            available = list(OUTPUT_TYPES.keys())
            raise ValueError(
                f"Unknown output type: {spec.output_type}. "
                f"Available: {available}"
            )

        output = OUTPUT_TYPES[spec.output_type](spec, self.input_path)
        self.outputs.append(output)
        return output

    def initialize_all(self, video_props: dict) -> None:
        """Initialize all outputs."""
        for output in self.outputs:
            output.initialize(video_props)

    def process_frame(
        self,
        frame_num: int,
        original: np.ndarray,
        stabilized: np.ndarray,
    ) -> None:
        """Send a rendered frame to all outputs."""
        for output in self.outputs:
            output.process_frame(frame_num, original, stabilized)

    def finalize_all(self) -> None:
        """Finalize all outputs."""
        for output in self.outputs:
            output.finalize()

    def get_output_paths(self) -> list[Path]:
        """Get all output paths."""
        return [output.get_output_path() for output in self.outputs]

    def __len__(self) -> int:
        return len(self.outputs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize_all()
        return False
