"""
This module defines the Transcoder service for the Speech Normalizer application.

It wraps a single FFmpeg invocation that converts one input file to one output
file in the canonical target format. Every problem with the external process
is turned into a `ConversionFailure` value, so a broken or missing FFmpeg can
never surface as a crashed worker thread.
"""

import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger

from ..config.audio import IN_PLACE_TEMP_PREFIX, TARGET_EXTENSION
from ..domain.exceptions import ConversionLaunchException
from ..domain.models import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    FailureKind,
    TargetAudioParams,
)
from ..utils.ffmpeg_utils import build_normalize_cmd, run_cmd, tail_text
from ..utils.format_utils import formatted_size


def _is_same_file(input_path: Path, output_path: Path) -> bool:
    if output_path.exists():
        try:
            return os.path.samefile(input_path, output_path)
        except OSError:
            pass
    return input_path.resolve() == output_path.resolve()


class Transcoder:
    """
    Re-encodes audio files to a fixed sample rate, channel count and sample format.

    The instance holds only immutable configuration, so one transcoder can be
    shared by every directory worker.

    Attributes:
        params (TargetAudioParams): The target format.
        ffmpeg_cmd (str): The FFmpeg executable (name on PATH or absolute path).
        show_cmd (bool): Log each command line at DEBUG level before running it.
    """

    def __init__(self, params: TargetAudioParams, ffmpeg_cmd: str = "ffmpeg", show_cmd: bool = False):
        self.params = params
        self.ffmpeg_cmd = ffmpeg_cmd
        self.show_cmd = show_cmd

    def convert(self, input_path: Path, output_path: Path) -> ConversionOutcome:
        """
        Converts `input_path` into `output_path`, overwriting any existing output.

        When both paths name the same file, FFmpeg writes to a temporary sibling
        which replaces the original only if the conversion succeeded.

        Returns:
            `ConversionSuccess` if FFmpeg exited with status 0, otherwise a
            `ConversionFailure` tagged with what went wrong.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)
        if _is_same_file(input_path, output_path):
            outcome = self._convert_in_place(input_path)
        else:
            outcome = self._run_ffmpeg(input_path, output_path)

        if outcome.ok:
            try:
                size_text = formatted_size(outcome.output_path.stat().st_size)
            except OSError:
                size_text = "size unknown"
            logger.info(f"Successfully converted {input_path} to {outcome.output_path} ({size_text})")
        return outcome

    def _run_ffmpeg(self, input_path: Path, write_path: Path) -> ConversionOutcome:
        cmd_list = build_normalize_cmd(input_path, write_path, self.params, ffmpeg_cmd=self.ffmpeg_cmd)
        try:
            res = run_cmd(cmd_list, show_cmd=self.show_cmd)
        except ConversionLaunchException as e:
            logger.debug(f"Launch failure for {input_path.name}: {e}")
            return ConversionFailure(input_path=input_path, kind=FailureKind.LAUNCH_FAILED)

        if res.returncode != 0:
            return ConversionFailure(
                input_path=input_path,
                kind=FailureKind.NON_ZERO_EXIT,
                returncode=res.returncode,
                stderr=tail_text(res.stderr),
            )

        return ConversionSuccess(input_path=input_path, output_path=write_path)

    def _convert_in_place(self, input_path: Path) -> ConversionOutcome:
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=IN_PLACE_TEMP_PREFIX, suffix=TARGET_EXTENSION, dir=input_path.parent
            )
            os.close(fd)
        except OSError as e:
            logger.debug(f"Cannot create a temporary file next to {input_path}: {e}")
            return ConversionFailure(input_path=input_path, kind=FailureKind.STAGING_FAILED)

        temp_path = Path(temp_name)
        try:
            outcome = self._run_ffmpeg(input_path, temp_path)
            if not outcome.ok:
                return outcome
            try:
                # mkstemp creates the file owner-only; keep the original's permissions.
                shutil.copymode(input_path, temp_path)
                os.replace(temp_path, input_path)
            except OSError as e:
                logger.debug(f"Cannot move {temp_path.name} over {input_path}: {e}")
                return ConversionFailure(input_path=input_path, kind=FailureKind.STAGING_FAILED)
            return ConversionSuccess(input_path=input_path, output_path=input_path)
        finally:
            temp_path.unlink(missing_ok=True)
