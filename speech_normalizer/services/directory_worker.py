"""
Provides the DirectoryWorker, the unit of concurrency of the normalization batch.

A worker owns exactly one `ConversionJob`. It lists the immediate entries of
the job's directory, classifies each regular file by extension, converts the
recognized ones through the `Transcoder` one at a time, and removes lossy
originals once their conversion has succeeded. Subdirectories are reported
but never descended into.
"""

from datetime import datetime
from pathlib import Path
from typing import List

from loguru import logger

from ..domain.exceptions import (
    CleanupException,
    DirectoryEnumerationException,
    SpeechNormalizerException,
)
from ..domain.models import ConversionJob, DirectoryReport, FormatCategory
from ..utils.format_utils import format_timedelta
from .classifier import classify, deletes_original, is_staging_file, output_path_for
from .transcoder import Transcoder


class DirectoryWorker:
    """
    Processes the immediate files of one directory, sequentially.

    A failure on one entry is logged and counted, and processing moves on to
    the next entry. Only a failure to list the directory itself escapes
    `run()`, as a `DirectoryEnumerationException`.

    Attributes:
        job (ConversionJob): The directory this worker owns.
        transcoder (Transcoder): Performs the actual conversions.
    """

    def __init__(self, job: ConversionJob, transcoder: Transcoder):
        self.job = job
        self.transcoder = transcoder

    def run(self) -> DirectoryReport:
        """
        Walks the directory once and returns what happened.

        A path that does not resolve to a directory is not an error: the
        returned report has `found` set to False and nothing is touched.

        Raises:
            DirectoryEnumerationException: If the directory's entries cannot be listed.
        """
        directory = self.job.directory
        report = DirectoryReport(directory=directory)
        started = datetime.now()
        logger.info(f"Start handling {directory}")
        try:
            if not directory.is_dir():
                logger.warning(f"{directory} is not a directory. Nothing to do.")
                report.found = False
                return report

            for entry in self._list_entries(directory):
                try:
                    self._handle_entry(entry, report)
                except (SpeechNormalizerException, OSError) as e:
                    report.failed += 1
                    logger.error(f"Error handling {entry}: {e}")
        finally:
            report.elapsed = datetime.now() - started
            logger.info(
                f"End handling {directory} in {format_timedelta(report.elapsed)}: "
                f"{report.converted} converted, {report.failed} failed, {report.deleted} deleted, "
                f"{report.unrecognized} unrecognized, {report.subdirectories} subdirectories"
            )
        return report

    @staticmethod
    def _list_entries(directory: Path) -> List[Path]:
        # Snapshot first, so outputs written while converting are not picked up.
        try:
            return sorted(directory.iterdir())
        except OSError as e:
            raise DirectoryEnumerationException(directory, e) from e

    def _handle_entry(self, entry: Path, report: DirectoryReport):
        if entry.is_symlink():
            logger.debug(f"Skipping symbolic link: {entry}")
            return
        if entry.is_dir():
            report.subdirectories += 1
            logger.info(f"Directory: {entry}")
            return
        if not entry.is_file():
            logger.debug(f"Skipping entry that is not a regular file: {entry}")
            return
        if is_staging_file(entry):
            logger.info(f"Skipping in-place re-encode temporary file: {entry}")
            return

        category = classify(entry)
        logger.debug(f"{entry.name}: {category.value}")
        if category is FormatCategory.UNRECOGNIZED:
            report.unrecognized += 1
            logger.info(f"Unknown format file: {entry}")
            return

        outcome = self.transcoder.convert(entry, output_path_for(entry, category))
        if not outcome.ok:
            report.failed += 1
            rc_text = f", rc={outcome.returncode}" if outcome.returncode is not None else ""
            logger.error(f"Error converting file {entry}: {outcome.message} ({outcome.kind.value}{rc_text})")
            if outcome.stderr:
                logger.debug(f"FFmpeg stderr for {entry.name}:\n{outcome.stderr}")
            return

        report.converted += 1
        if not deletes_original(category):
            return
        try:
            self._remove_original(entry)
        except CleanupException as e:
            report.cleanup_failed += 1
            logger.error(f"{e}. Keeping converted file {outcome.output_path}.")
        else:
            report.deleted += 1
            logger.info(f"Deleted original {entry.suffix.lstrip('.').upper()} file: {entry}")

    @staticmethod
    def _remove_original(file_path: Path):
        try:
            file_path.unlink()
        except OSError as e:
            raise CleanupException(f"Error deleting {file_path}: {e}") from e
