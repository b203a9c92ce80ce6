"""
Output handlers module.

This module provides output handlers for rendered frames:
- StabilizedVideoOutput: Stabilized video
- CompareVideoOutput: Original and stabilized side by side
- FrameSequenceOutput: Numbered JPEG frames

Example:
    >>> from vstab.outputs import OutputManager
    >>> manager = OutputManager("input.mp4")
    >>> manager.add_output("video=filename=output.avi")
    >>> manager.add_output("frames=dir=images:source=compare")
"""

from vstab.outputs.base import OutputSpec, BaseOutput
from vstab.outputs.video import StabilizedVideoOutput, CompareVideoOutput, side_by_side
from vstab.outputs.images import FrameSequenceOutput
from vstab.outputs.manager import OUTPUT_TYPES, OutputManager

__all__ = [
    "OutputSpec",
    "BaseOutput",
    "StabilizedVideoOutput",
    "CompareVideoOutput",
    "side_by_side",
    "FrameSequenceOutput",
    "OUTPUT_TYPES",
    "OutputManager",
]
