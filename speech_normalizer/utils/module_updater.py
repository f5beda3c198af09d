"""
This module provides the Modules class to handle the location and verification
of the external transcoding tool (FFmpeg).
"""
import subprocess
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import MODULE_PATH


class Modules:
    """
    A utility class to handle operations related to external modules like FFmpeg.

    It reads the FFmpeg directory from the user's `config.user.yaml` file and
    falls back to the system's PATH if no specific path is configured.
    """

    @staticmethod
    def get_ffmpeg_path(module_path: Optional[Path] = MODULE_PATH) -> str:
        """
        Determines the FFmpeg executable to use.

        It prioritizes the configured directory (`ffmpeg_dir`). If that is not set
        or does not contain the executable, it falls back to 'ffmpeg', which relies
        on the executable being available in the system's PATH.

        Returns:
            A string containing the command or absolute path to the FFmpeg executable.
        """
        ffmpeg_exe_name = "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"

        if module_path and module_path.is_dir():
            configured_ffmpeg_path = module_path / ffmpeg_exe_name
            if configured_ffmpeg_path.is_file():
                logger.debug(f"Using FFmpeg from configured path: '{configured_ffmpeg_path}'")
                return str(configured_ffmpeg_path)
            logger.warning(
                f"`ffmpeg_dir` is configured, but '{ffmpeg_exe_name}' was not found there. Falling back to system PATH."
            )

        return "ffmpeg"

    @staticmethod
    def verify_ffmpeg(ffmpeg_cmd: Optional[str] = None) -> bool:
        """
        Verifies that FFmpeg is installed, accessible, and can be executed.

        This method runs `ffmpeg -version` and logs the first line of the output on
        success. A failure is only logged: conversions attempted afterwards will
        report a launch failure per file.

        Returns:
            True if the version command succeeded.
        """
        ffmpeg_cmd = ffmpeg_cmd or Modules.get_ffmpeg_path()

        try:
            result = subprocess.run(
                [ffmpeg_cmd, "-version"],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"FFmpeg version command failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except FileNotFoundError:
            logger.error(
                "FFmpeg command not found. Please ensure FFmpeg is installed and accessible.\n"
                "You can either add it to your system's PATH or specify its location in the 'config.user.yaml' file."
            )
            return False
        except OSError as e:
            logger.error(f"Could not run FFmpeg to check its version: {e}")
            return False

        version_output_lines = result.stdout.splitlines()
        first_line = version_output_lines[0] if version_output_lines else "<no output>"
        logger.info(f"FFmpeg version check successful: {first_line}")
        return True
