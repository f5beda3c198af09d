"""
Configuration settings related to audio normalization.

This module defines the canonical target format every speech clip is converted
to, and the table that maps file extensions to a format category. These values
are read once at startup; the effective parameters are then passed explicitly
to the transcoder as an immutable `TargetAudioParams` value.
"""
from typing import Any, Optional

from ..domain.exceptions import BatchConstructionException
from ..domain.models import FormatCategory, TargetAudioParams
from .common import USER_CONFIG

# ======================================================================================
# Target Audio Parameters
# ======================================================================================

# LJSpeech-style datasets are distributed as 22.05 kHz mono 16-bit PCM.
TARGET_SAMPLE_RATE = 22_050
TARGET_CHANNELS = 1

# FFmpeg's name for signed 16-bit samples.
TARGET_SAMPLE_FORMAT = "s16"

# The container every recognized file ends up in.
TARGET_EXTENSION = ".wav"


# ======================================================================================
# File Identification
# ======================================================================================

# Lowercase extension (with leading dot) -> category. Anything else is unrecognized.
EXTENSION_CATEGORIES = {
    ".wav": FormatCategory.RECOGNIZED_TARGET,
    ".mp3": FormatCategory.RECOGNIZED_LOSSY,
}

# Prefix of the temporary file used while re-encoding a `.wav` in place.
IN_PLACE_TEMP_PREFIX = ".normalizing-"


def _positive_int(name: str, value: Any) -> int:
    # bool is an int subclass; "True" channels is a config mistake, not 1.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise BatchConstructionException(f"{name} must be a positive integer, got {value!r}")
    return value


def build_target_params(
    sample_rate: Optional[int] = None,
    channels: Optional[int] = None,
    user_config: Optional[dict] = None,
) -> TargetAudioParams:
    """
    Resolves the effective target parameters.

    Precedence is: explicit arguments, then the `audio` section of
    `config.user.yaml`, then the module defaults above.

    Args:
        sample_rate: Explicit sample rate override (e.g. from the CLI).
        channels: Explicit channel count override.
        user_config: Parsed user configuration; defaults to the one loaded at import.

    Returns:
        An immutable `TargetAudioParams`.

    Raises:
        BatchConstructionException: If a resolved value is not a positive integer.
    """
    config = USER_CONFIG if user_config is None else user_config
    audio_config = config.get("audio") or {}
    resolved_rate = sample_rate if sample_rate is not None else audio_config.get("sample_rate", TARGET_SAMPLE_RATE)
    resolved_channels = channels if channels is not None else audio_config.get("channels", TARGET_CHANNELS)
    return TargetAudioParams(
        sample_rate=_positive_int("sample_rate", resolved_rate),
        channels=_positive_int("channels", resolved_channels),
        sample_format=TARGET_SAMPLE_FORMAT,
    )
