"""
Main entry point for the Speech Normalizer application.

This script parses command-line arguments, configures logging, verifies that
FFmpeg can be run, and launches the batch pipeline that normalizes every given
directory concurrently.
"""

import sys
from typing import List, Optional

from loguru import logger

from speech_normalizer.cli import get_args
from speech_normalizer.config.audio import build_target_params
from speech_normalizer.domain.exceptions import BatchConstructionException, WorkerCrashedException
from speech_normalizer.pipeline.batch_pipeline import BatchCoordinator
from speech_normalizer.services.logging_service import BatchReportLog, configure_logging
from speech_normalizer.services.transcoder import Transcoder
from speech_normalizer.utils.module_updater import Modules


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one normalization batch.

    Returns:
        The process exit status: 0 when the batch ran to completion (per-file
        and per-directory failures are reported in the log only), 2 when the
        batch could not be set up, 1 when a directory worker crashed.
    """
    args = get_args(argv)
    configure_logging(args.log_level, args.log_file)
    logger.debug(f"Parsed arguments: {args}")

    try:
        params = build_target_params(sample_rate=args.sample_rate, channels=args.channels)
        ffmpeg_cmd = Modules.get_ffmpeg_path()
        Modules.verify_ffmpeg(ffmpeg_cmd)
        coordinator = BatchCoordinator(
            Transcoder(params, ffmpeg_cmd=ffmpeg_cmd, show_cmd=args.log_level in ("TRACE", "DEBUG")),
            max_workers=args.max_workers,
        )
    except BatchConstructionException as e:
        logger.error(f"Cannot start the batch: {e}")
        return 2

    logger.info(
        f"Target format: {params.sample_rate} Hz, {params.channels} channel(s), {params.sample_format}"
    )
    try:
        report = coordinator.run(args.directories)
    except WorkerCrashedException as e:
        logger.critical(str(e))
        return 1

    if args.report:
        BatchReportLog(args.report).write(report, target_params=params)
    return 0


if __name__ == "__main__":
    sys.exit(main())
