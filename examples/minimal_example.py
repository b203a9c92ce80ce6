#!/usr/bin/env python3
"""
Minimal Example: vstab API Usage
================================

Shows the two-pass stabilization spelled out with the individual
building blocks. ``vstab.pipeline.stabilize_video`` does the same in
one call.
"""

import sys

from vstab.core.video import VideoReader
from vstab.estimation import collect_motion, create_estimator
from vstab.outputs import OutputManager
from vstab.processing import CorrectionRenderer
from vstab.trajectory import render_pairs, stabilize_motion, write_diagnostics


input_video = sys.argv[1] if len(sys.argv) > 1 else "shaky.mp4"

# =============================================================================
# PASS 1: MOTION
# Equivalent to: vstab stabilize shaky.mp4 -m farneback -r 30 -fc 300
# =============================================================================

estimator = create_estimator("farneback")

with VideoReader(input_video) as reader:
    props = reader.properties
    motion = collect_motion((frame for _, frame in reader), estimator, frame_cap=300)

print(f"Collected {len(motion)} transforms ({len(motion.reused)} reused)")

# =============================================================================
# TRAJECTORY: integrate, smooth, correct
# =============================================================================

result = stabilize_motion(motion.samples, radius=30)
write_diagnostics(result, "diagnostics")

# =============================================================================
# PASS 2: RENDER
# =============================================================================

renderer = CorrectionRenderer(horizontal_border_crop=70)

outputs = OutputManager(input_video)
outputs.add_output("video")
outputs.add_output("compare")
outputs.initialize_all(props.to_dict())

with VideoReader(input_video, max_frames=motion.frames_read) as reader:
    for (k, transform), (_, frame) in zip(render_pairs(motion.frames_read, result.corrected), reader):
        outputs.process_frame(k, frame, renderer.render(frame, transform))

outputs.finalize_all()

for path in outputs.get_output_paths():
    print(f"Wrote {path}")
