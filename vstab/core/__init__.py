"""
Core module - Collaborator protocols, video I/O and configuration.
"""

from vstab.core.base import MotionEstimator, FrameRenderer
from vstab.core.video import VideoReader, VideoWriter, VideoProperties
from vstab.core.config import (
    StabilizerConfig,
    load_config,
    save_config,
    create_example_config,
    get_env_config,
)

__all__ = [
    "MotionEstimator",
    "FrameRenderer",
    "VideoReader",
    "VideoWriter",
    "VideoProperties",
    "StabilizerConfig",
    "load_config",
    "save_config",
    "create_example_config",
    "get_env_config",
]
