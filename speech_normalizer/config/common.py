"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants that are
used across the entire Speech Normalizer application. It centralizes parameters for
logging and for locating the external transcoding tool. It also handles the loading
of user-specific configuration from an external YAML file, allowing for easy
customization without modifying the source code.
"""
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. It allows users to point the application at a specific
# FFmpeg build and to override the default target audio parameters.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"


def load_user_config(config_path: Path = USER_CONFIG_PATH) -> Dict[str, Any]:
    """
    Reads the optional user configuration file.

    Args:
        config_path: Location of the YAML file.

    Returns:
        The parsed mapping, or an empty dict when the file is missing, empty,
        or cannot be parsed.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(loaded, dict):
        logger.warning(f"User config '{config_path}' is not a mapping. Ignoring it.")
        return {}
    return loaded


USER_CONFIG = load_user_config()

# The directory containing the FFmpeg executable. If not provided, the
# application assumes the executable is available on the system's PATH.
MODULE_PATH: Path | None = None

_ffmpeg_dir_str = (USER_CONFIG.get("paths") or {}).get("ffmpeg_dir")
if _ffmpeg_dir_str:
    MODULE_PATH = Path(_ffmpeg_dir_str)


# --- Logging Configuration ---

# The format string for the Loguru logger. Directory workers run as threads,
# so the thread name identifies which worker emitted a line.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{thread.name} - <level>{message}</level>"
)

# Prefix given to directory worker threads.
WORKER_THREAD_NAME_PREFIX = "dir-worker"

# The default filename for the YAML batch report when `--report` points at a directory.
DEFAULT_REPORT_YAML = "normalize_report.yaml"
