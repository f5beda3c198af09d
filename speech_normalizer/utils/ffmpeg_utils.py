"""
This module provides utility functions related to FFmpeg.
It includes a robust function for running command-line processes and the
construction of the normalization command line.
"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

import ffmpeg
from loguru import logger

from ..domain.exceptions import ConversionLaunchException
from ..domain.models import TargetAudioParams


def format_cmd_for_display(cmd_list: List[str]) -> str:
    """
    Joins a command list into a single, correctly quoted string for logging.
    """
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def build_normalize_cmd(
    input_path: Path,
    output_path: Path,
    params: TargetAudioParams,
    ffmpeg_cmd: str = "ffmpeg",
) -> List[str]:
    """
    Builds the FFmpeg argument list that re-encodes one file to the target format.

    The command overwrites an existing output (`-y`), sets the output sample rate
    (`-ar`) and channel count (`-ac`), fixes the sample format (`-sample_fmt`)
    and writes to `output_path`.

    Args:
        input_path: The source audio file.
        output_path: Where the normalized file is written.
        params: The immutable target parameters.
        ffmpeg_cmd: The executable to invoke (name on PATH or absolute path).

    Returns:
        The full argument list, executable first.
    """
    stream = ffmpeg.input(str(input_path)).output(
        str(output_path),
        ar=params.sample_rate,
        ac=params.channels,
        sample_fmt=params.sample_format,
    )
    return stream.overwrite_output().compile(cmd=ffmpeg_cmd)


def run_cmd(cmd_list: List[str], show_cmd: bool = False) -> subprocess.CompletedProcess:
    """
    Executes an external command and captures its output.

    This is a wrapper around `subprocess.run` with logging. The call blocks
    until the process exits; there is no timeout.

    Args:
        cmd_list: The command to execute as a list of arguments.
        show_cmd: If True, the command line is logged at DEBUG level first.

    Returns:
        The `subprocess.CompletedProcess`, whatever its return code.

    Raises:
        ConversionLaunchException: If the process could not be started (executable
                                   missing, not executable, empty command).
    """
    if not cmd_list:
        raise ConversionLaunchException("Received an empty command list.")

    display_cmd_str = format_cmd_for_display(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except FileNotFoundError as e:
        logger.error(
            f"Command not found: '{cmd_list[0]}'. Ensure it's in your system's PATH or configured in config.user.yaml."
        )
        raise ConversionLaunchException(f"Command not found: {cmd_list[0]}") from e
    except OSError as e:
        logger.error(f"Could not start command '{display_cmd_str}': {e}")
        raise ConversionLaunchException(f"Could not start {cmd_list[0]}: {e}") from e

    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result


def tail_text(text: Optional[str], max_chars: int = 2000) -> str:
    """Returns the last `max_chars` characters of `text` (empty string for None)."""
    if not text:
        return ""
    return text[-max_chars:]
