"""
Motion and trajectory text file I/O.

Reads and writes the plain-text diagnostic dumps produced by a
stabilization run. Every line holds one frame:

    INDEX c0 c1 c2

where the components are (dx, dy, da) for transforms and (x, y, a) for
trajectories. Indices start at 1.
"""

import logging
import re
from pathlib import Path
from typing import Iterator, Sequence

from vstab.trajectory.pipeline import StabilizationResult

logger = logging.getLogger(__name__)

_NUMBER = r'([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|[-+]?nan|[-+]?inf)'

# Pattern for one dump line: INDEX c0 c1 c2
MOTION_LINE_PATTERN = re.compile(
    rf'^\s*(\d+)\s+{_NUMBER}\s+{_NUMBER}\s+{_NUMBER}\s*$',
    re.IGNORECASE,
)

# Default file names for the four sequences of a run
DIAGNOSTIC_FILES = {
    'samples': 'prev_to_cur_transformation.txt',
    'trajectory': 'trajectory.txt',
    'smoothed': 'smoothed_trajectory.txt',
    'corrected': 'new_prev_to_cur_transformation.txt',
}


def parse_motion_line(line: str) -> tuple[int, float, float, float] | None:
    """
    Parse a single line of a motion or trajectory dump.

    Args:
        line: Line of text to parse

    Returns:
        Tuple of (index, c0, c1, c2) or None if the line doesn't match
    """
    line = line.strip()
    if not line:
        return None

    match = MOTION_LINE_PATTERN.match(line)
    if not match:
        return None

    return (
        int(match.group(1)),
        float(match.group(2)),
        float(match.group(3)),
        float(match.group(4)),
    )


def iter_motion_file(path: str | Path) -> Iterator[tuple[int, float, float, float]]:
    """
    Iterate over the parsed lines of a dump file.

    Lines that don't parse are skipped.

    Yields:
        Tuples of (index, c0, c1, c2)
    """
    path = Path(path)
    with open(path, 'r') as f:
        for lineno, line in enumerate(f, start=1):
            parsed = parse_motion_line(line)
            if parsed:
                yield parsed
            elif line.strip():
                logger.debug("Skipping malformed line %d in %s", lineno, path)


def read_motion_file(path: str | Path) -> list[tuple[float, float, float]]:
    """
    Read a dump file into a list of component triples, ordered by index.

    Args:
        path: Path to the dump file

    Returns:
        List of (c0, c1, c2) tuples

    Raises:
        FileNotFoundError: If the file doesn't exist

    Example:
        >>> from vstab.trajectory.types import samples_from_array
        >>> samples = samples_from_array(read_motion_file("prev_to_cur_transformation.txt"))
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Motion file not found: {path}")

    rows = sorted(iter_motion_file(path), key=lambda r: r[0])
    return [(c0, c1, c2) for _, c0, c1, c2 in rows]


def write_motion_file(
    path: str | Path,
    values: Sequence[tuple[float, float, float]],
    start_index: int = 1,
) -> Path:
    """
    Write component triples to a dump file, one line per frame.

    Args:
        path: Output path
        values: Motion samples or trajectory points
        start_index: Index written on the first line

    Returns:
        The written path
    """
    path = Path(path)
    with open(path, 'w') as f:
        for i, (c0, c1, c2) in enumerate(values, start=start_index):
            f.write(f"{i} {float(c0)!r} {float(c1)!r} {float(c2)!r}\n")
    return path


def write_diagnostics(
    result: StabilizationResult,
    directory: str | Path = ".",
) -> list[Path]:
    """
    Dump all four sequences of a run for later analysis.

    Args:
        result: Output of a pipeline run
        directory: Directory to write into (created if missing)

    Returns:
        Paths of the written files
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    paths = []
    for attr, filename in DIAGNOSTIC_FILES.items():
        paths.append(write_motion_file(directory / filename, getattr(result, attr)))

    logger.info("Wrote %d diagnostic files to %s", len(paths), directory)
    return paths
