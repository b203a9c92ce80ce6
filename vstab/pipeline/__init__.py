"""
Pipeline module - End-to-end video stabilization.

This module provides:
- stabilize_video: Two-pass stabilization of a video file
- StabilizationReport: Result summary with per-phase timings
"""

from vstab.pipeline.stabilize import StabilizationReport, stabilize_video

__all__ = [
    "StabilizationReport",
    "stabilize_video",
]
