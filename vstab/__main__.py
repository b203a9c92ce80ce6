"""
vstab Command Line Interface

Usage:
    vstab <command> [options]

Commands:
    stabilize   Stabilize a video file
    smooth      Smooth a motion dump and write corrected transforms
    config      Write an example configuration file

Examples:
    vstab stabilize input.mp4 -m lk_sparse -r 50 -out video -out compare
    vstab stabilize input.mp4 -m 3 -fc 300 -d diagnostics
    vstab smooth prev_to_cur_transformation.txt -r 30 -o new_transforms.txt
    vstab config -o stab_config.json
"""

import sys
import argparse

from vstab import __version__
from vstab.utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='vstab',
        description='Trajectory-smoothing video stabilizer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '-V', '--version',
        action='version',
        version=f'vstab {__version__}',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Stabilize command
    stab_parser = subparsers.add_parser(
        'stabilize',
        help='Stabilize a video file',
    )
    stab_parser.add_argument('input', help='Input video file')
    stab_parser.add_argument(
        '-m', '--method',
        default=None,
        help='Motion estimator: lk_sparse (1), lk_dense (2), farneback (3)',
    )
    stab_parser.add_argument(
        '-r', '--radius',
        type=int,
        default=None,
        dest='smoothing_radius',
        help='Smoothing radius in frames (default: 50)',
    )
    stab_parser.add_argument(
        '-fc', '--frame-cap',
        type=int,
        default=None,
        dest='frame_cap',
        help='Maximum number of frame transitions processed (default: 500)',
    )
    stab_parser.add_argument(
        '--smoothing-method',
        choices=['window', 'cumsum'],
        default=None,
        dest='smoothing_method',
        help='Smoothing implementation (default: window)',
    )
    stab_parser.add_argument(
        '-out', '--output',
        action='append',
        dest='outputs',
        metavar='SPEC',
        help='Output specification (can be used multiple times)',
    )
    stab_parser.add_argument(
        '-d', '--diagnostics',
        default=None,
        metavar='DIR',
        help='Write motion and trajectory dumps to DIR',
    )
    stab_parser.add_argument(
        '-c', '--config',
        default=None,
        help='JSON configuration file',
    )
    stab_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log per-frame detail',
    )
    stab_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Only log warnings and errors',
    )

    # Smooth command
    smooth_parser = subparsers.add_parser(
        'smooth',
        help='Smooth a motion dump and write corrected transforms',
    )
    smooth_parser.add_argument('motion_file', help='prev_to_cur_transformation.txt style file')
    smooth_parser.add_argument(
        '-r', '--radius',
        type=int,
        default=50,
        help='Smoothing radius in frames (default: 50)',
    )
    smooth_parser.add_argument(
        '--smoothing-method',
        choices=['window', 'cumsum'],
        default='window',
        dest='smoothing_method',
        help='Smoothing implementation (default: window)',
    )
    smooth_parser.add_argument(
        '-o', '--output',
        default='new_prev_to_cur_transformation.txt',
        help='Corrected transforms file (default: new_prev_to_cur_transformation.txt)',
    )
    smooth_parser.add_argument(
        '-d', '--diagnostics',
        default=None,
        metavar='DIR',
        help='Also write all four dumps to DIR',
    )
    smooth_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress output',
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Write an example configuration file',
    )
    config_parser.add_argument(
        '-o', '--output',
        default='stab_config.json',
        help='Output path (default: stab_config.json)',
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        'stabilize': run_stabilize,
        'smooth': run_smooth,
        'config': run_config,
    }

    try:
        return commands[args.command](args)
    except (ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def print_timings(timings: dict[str, float]) -> None:
    """Print per-phase timings."""
    labels = [
        ('optical_flow', 'Optical Flow Time'),
        ('trajectory', 'Trajectory Calculation Time'),
        ('smoothing', 'Smoothing Time'),
        ('generating', 'Generating Time'),
        ('transform', 'Transform Calculation Time'),
        ('total', 'Total Time'),
    ]
    for key, label in labels:
        if key in timings:
            print(f"{label}: {timings[key]:.4f} seconds")


def run_stabilize(args) -> int:
    """Run the two-pass stabilization."""
    from vstab.core.config import StabilizerConfig, get_env_config, load_config
    from vstab.pipeline import stabilize_video

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    config = load_config(args.config) if args.config else StabilizerConfig()
    config = config.with_overrides(get_env_config())
    config = config.with_overrides({
        'method': args.method,
        'smoothing_radius': args.smoothing_radius,
        'frame_cap': args.frame_cap,
        'smoothing_method': args.smoothing_method,
        'outputs': args.outputs,
    })

    print(f"Stabilizing {args.input} with {config.method} (radius {config.smoothing_radius})")
    report = stabilize_video(args.input, config, diagnostics_dir=args.diagnostics)

    if report.reused:
        print(f"Reused previous transform for {len(report.reused)} frame pair(s)")
    for path in report.output_paths:
        print(f"Wrote {path}")
    print_timings(report.timings)
    return 0


def run_smooth(args) -> int:
    """Run the trajectory pipeline on a motion dump."""
    from vstab.trajectory import (
        read_motion_file,
        samples_from_array,
        stabilize_motion,
        write_diagnostics,
        write_motion_file,
    )

    configure_logging(quiet=args.quiet)

    samples = samples_from_array(read_motion_file(args.motion_file))
    result = stabilize_motion(samples, args.radius, args.smoothing_method)

    write_motion_file(args.output, result.corrected)
    if args.diagnostics:
        write_diagnostics(result, args.diagnostics)

    if not args.quiet:
        print(f"Smoothed {len(result)} transforms, wrote {args.output}")
        print_timings(result.timings)
    return 0


def run_config(args) -> int:
    """Write an example configuration file."""
    from vstab.core.config import create_example_config

    create_example_config(args.output)
    print(f"Created example configuration: {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
