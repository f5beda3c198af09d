"""
Command-Line Interface (CLI) setup for the Speech Normalizer.

This module uses Python's `argparse` to define and parse the command-line
arguments that control the application's behavior.
"""
import argparse
from pathlib import Path
from typing import List, Optional


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the Speech Normalizer.

    Args:
        argv: Argument list to parse. Defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: An object containing the parsed command-line
                            arguments as attributes. `directories` holds
                            absolute paths in the order given.
    """
    parser = argparse.ArgumentParser(
        description="Normalize speech clips (wav/mp3) to a single sample rate, channel count and 16-bit PCM WAV."
    )
    parser.add_argument(
        "directories", nargs="+", type=Path,
        help="Directories to normalize. Each is processed by its own worker; subdirectories are not descended into.",
    )
    parser.add_argument(
        "--sample-rate", type=_positive_int, default=None,
        help="Target sample rate in Hz (default: config.user.yaml or 22050).",
    )
    parser.add_argument(
        "--channels", type=_positive_int, default=None,
        help="Target channel count (default: config.user.yaml or 1).",
    )
    parser.add_argument(
        "--max-workers", type=_positive_int, default=None,
        help="Upper bound on concurrent directory workers (default: one per directory).",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level.",
    )
    parser.add_argument(
        "--log-file", type=Path, default=None,
        help="Also write log lines to this file.",
    )
    parser.add_argument(
        "--report", type=Path, default=None,
        help="Write a YAML summary of the run to this file (or into this directory).",
    )

    args = parser.parse_args(argv)
    args.directories = [d.expanduser().absolute() for d in args.directories]
    return args
