"""
Utilities Package for the Speech Normalizer Application.

This package contains helper modules that provide reusable functionality across
the application but are not specific to any single part of the pipeline.

Modules:
    - ffmpeg_utils.py: Runs external commands and builds the FFmpeg
      normalization command line.
    - format_utils.py: Converts timedelta objects and file sizes into
      human-readable strings.
    - module_updater.py: Locates and verifies the FFmpeg executable.
"""
