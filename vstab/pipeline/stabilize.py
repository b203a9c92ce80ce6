"""
Two-pass video stabilization.

Pass 1 reads the video and collects inter-frame motion. The trajectory
pipeline then computes corrected transforms, and pass 2 re-reads the
video and renders each frame with its correction.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from vstab.core.config import StabilizerConfig
from vstab.core.video import VideoReader
from vstab.estimation import collect_motion, create_estimator
from vstab.outputs import OutputManager
from vstab.processing import CorrectionRenderer
from vstab.trajectory import StabilizationResult, render_pairs, stabilize_motion, write_diagnostics

logger = logging.getLogger(__name__)


@dataclass
class StabilizationReport:
    """Summary of a two-pass run."""
    result: StabilizationResult
    frames_rendered: int
    reused: list[int] = field(default_factory=list)
    timings: dict[str, float] = field(default_factory=dict)
    output_paths: list[Path] = field(default_factory=list)
    diagnostic_paths: list[Path] = field(default_factory=list)


def stabilize_video(
    input_path: str | Path,
    config: StabilizerConfig | None = None,
    outputs: list[str] | None = None,
    diagnostics_dir: str | Path | None = None,
) -> StabilizationReport:
    """
    Stabilize a video file.

    Args:
        input_path: Video to stabilize
        config: Run settings (defaults if None)
        outputs: Output specification strings (defaults to config.outputs)
        diagnostics_dir: If set, dump the four motion sequences there

    Returns:
        StabilizationReport with the pipeline result and timings

    Raises:
        FileNotFoundError: If the input video doesn't exist
        RuntimeError: If the video can't be opened
        ValueError: On invalid settings or output specs
        TrajectoryError: If fewer than two frames could be read
    """
    config = config or StabilizerConfig()
    config.validate()
    input_path = Path(input_path)

    estimator = create_estimator(config.method)
    renderer = CorrectionRenderer(config.horizontal_border_crop, config.border_crop_ratio)

    manager = OutputManager(input_path)
    for spec in (outputs if outputs is not None else config.outputs):
        manager.add_output(spec)

    total_start = time.perf_counter()
    timings: dict[str, float] = {}

    # Pass 1: collect motion
    logger.info("Estimating motion in %s with %s", input_path, estimator.name)
    with VideoReader(input_path) as reader:
        props = reader.properties
        motion = collect_motion(
            (frame for _, frame in reader),
            estimator,
            frame_cap=config.frame_cap,
        )
    timings['optical_flow'] = motion.elapsed

    result = stabilize_motion(motion.samples, config.smoothing_radius, config.smoothing_method)
    timings.update(result.timings)

    diagnostic_paths = []
    if diagnostics_dir is not None:
        diagnostic_paths = write_diagnostics(result, diagnostics_dir)

    # Pass 2: render
    logger.info("Rendering %d frames", max(motion.frames_read - 1, 0))
    start = time.perf_counter()
    frames_rendered = 0
    with manager, VideoReader(input_path, max_frames=motion.frames_read) as reader:
        manager.initialize_all(props.to_dict())
        schedule = render_pairs(motion.frames_read, result.corrected)
        for (frame_index, transform), (_, frame) in zip(schedule, reader):
            stabilized = renderer.render(frame, transform)
            manager.process_frame(frame_index, frame, stabilized)
            frames_rendered += 1
    timings['transform'] = time.perf_counter() - start
    timings['total'] = time.perf_counter() - total_start

    logger.info("Rendered %d frames in %.2fs", frames_rendered, timings['transform'])

    return StabilizationReport(
        result=result,
        frames_rendered=frames_rendered,
        reused=list(motion.reused),
        timings=timings,
        output_paths=manager.get_output_paths(),
        diagnostic_paths=diagnostic_paths,
    )
