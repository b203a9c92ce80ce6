"""
Base classes for output handlers.

This module defines the OutputSpec parser and BaseOutput abstract class
that all output handlers must implement.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import numpy as np


class OutputSpec:
    """
    Parses output specification strings.

    Supports a colon-separated format similar to ffmpeg filters:
        video=filename=custom.avi:fourcc=XVID

    Example:
        >>> spec = OutputSpec("frames=dir=images:source=compare")
        >>> spec.output_type
        'frames'
        >>> spec.get('dir')
        'images'
        >>> spec.get('source')
        'compare'
    """

    def __init__(self, spec_string: str):
        """
        Parse a specification string.

        Args:
            spec_string: The specification string to parse

        Raises:
            ValueError: If the spec string is empty
        """
        self.output_type: str = ""
        self.options: dict[str, str] = {}

        if not spec_string or not spec_string.strip():
            raise ValueError("Empty output specification")

        # Split by '=' for the first part to get type
        parts = spec_string.split('=', 1)
        self.output_type = parts[0].strip().lower()

        if len(parts) > 1:
            self._parse_options(parts[1])

    def _parse_options(self, options_str: str) -> None:
        """Parse colon-separated key=value pairs."""
        current_key: str | None = None
        current_value: list[str] = []

        for token in options_str.split(':'):
            if '=' in token:
                if current_key is not None:
                    self.options[current_key] = ':'.join(current_value)

                key, value = token.split('=', 1)
                current_key = key.strip().lower()
                current_value = [value.strip()]
            else:
                # Value itself contained ':'
                current_value.append(token)

        if current_key is not None:
            self.options[current_key] = ':'.join(current_value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get an option value."""
        return self.options.get(key.lower(), default)

    def get_int(self, key: str, default: int = 0) -> int:
        """
        Get an option value as integer.

        Raises:
            ValueError: If the option is set but is not an integer
        """
        val = self.get(key)
        if val is None:
            return default
        try:
            return int(val)
        except ValueError:
            raise ValueError(f"Option {key}={val!r} must be an integer") from None

    def __repr__(self) -> str:
        return f"OutputSpec(type={self.output_type}, options={self.options})"


class BaseOutput(ABC):
    """
    Abstract base class for all output handlers.

    Handlers receive every rendered frame together with the original frame
    it came from.

    Subclasses must implement:
        - _get_default_suffix(): Default filename suffix
        - _get_default_extension(): Default file extension
        - initialize(): Set up the output (open files, etc.)
        - process_frame(): Handle one rendered frame
        - finalize(): Clean up resources
    """

    def __init__(self, spec: OutputSpec, input_path: str | Path):
        """
        Initialize the output handler.

        Args:
            spec: The parsed output specification
            input_path: Path to the input video file
        """
        self.spec = spec
        self.input_path = Path(input_path)
        self.output_path = self._resolve_output_path()

    @abstractmethod
    def _get_default_suffix(self) -> str:
        """Return the default suffix to add to input filename."""

    @abstractmethod
    def _get_default_extension(self) -> str:
        """Return the default file extension."""

    def _resolve_output_path(self) -> Path:
        """Resolve the output path from spec or generate default."""
        filename = self.spec.get('filename')
        if filename:
            return Path(filename)

        # Generate default: input_suffix.ext
        stem = self.input_path.stem
        suffix = self._get_default_suffix()
        ext = self._get_default_extension()
        return Path(f"{stem}{suffix}.{ext}")

    @abstractmethod
    def initialize(self, video_props: dict) -> None:
        """
        Initialize the output (open files, create writers, etc).

        Args:
            video_props: Dictionary with 'width', 'height', 'fps'
        """

    @abstractmethod
    def process_frame(
        self,
        frame_num: int,
        original: np.ndarray,
        stabilized: np.ndarray,
    ) -> None:
        """
        Handle one rendered frame.

        Args:
            frame_num: 0-based index of the frame in the run
            original: The frame as read from the input
            stabilized: The rendered frame
        """

    @abstractmethod
    def finalize(self) -> None:
        """Finalize the output (close files, etc)."""

    def get_output_path(self) -> Path:
        """Return the resolved output path."""
        return self.output_path

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()
        return False
