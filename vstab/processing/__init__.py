"""
Processing module - Frame rendering with corrected transforms.
"""

from vstab.processing.render import (
    CorrectionRenderer,
    transform_matrix,
    crop_borders,
)

__all__ = [
    "CorrectionRenderer",
    "transform_matrix",
    "crop_borders",
]
