import concurrent.futures
import os
import traceback
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from loguru import logger

from ..config.common import WORKER_THREAD_NAME_PREFIX
from ..domain.exceptions import (
    BatchConstructionException,
    DirectoryEnumerationException,
    WorkerCrashedException,
)
from ..domain.models import BatchReport, ConversionJob, DirectoryReport
from ..services.directory_worker import DirectoryWorker
from ..services.transcoder import Transcoder


def build_jobs(directories: Iterable) -> List[ConversionJob]:
    """
    Turns the caller's directory list into jobs, keeping order and duplicates.

    Raises:
        BatchConstructionException: If an item is not a path.
    """
    jobs: List[ConversionJob] = []
    for item in directories:
        if not isinstance(item, (str, os.PathLike)):
            raise BatchConstructionException(f"Expected a directory path, got {item!r}")
        jobs.append(ConversionJob(directory=Path(item).expanduser().absolute()))
    return jobs


class BatchCoordinator:
    """
    Runs one DirectoryWorker per input directory, concurrently, and waits for all.

    Each job is handed to its worker and is not touched by anyone else, so the
    workers share nothing but the (immutable) transcoder. Partial failures are
    visible in the logs and in the returned `BatchReport`; they are never
    raised. The one exception is a worker that dies from an unexpected error:
    once every worker has joined, that is re-raised as `WorkerCrashedException`.
    """

    def __init__(
        self,
        transcoder: Transcoder,
        max_workers: Optional[int] = None,
        worker_factory: Callable[[ConversionJob, Transcoder], DirectoryWorker] = DirectoryWorker,
    ):
        if max_workers is not None and (isinstance(max_workers, bool) or max_workers < 1):
            raise BatchConstructionException(f"max_workers must be at least 1, got {max_workers!r}")
        self.transcoder = transcoder
        self.max_workers = max_workers
        self.worker_factory = worker_factory

    def _run_worker(self, job: ConversionJob) -> DirectoryReport:
        return self.worker_factory(job, self.transcoder).run()

    def run(self, directories: Iterable) -> BatchReport:
        """
        Processes every directory and blocks until all workers have terminated.

        Args:
            directories: Directory paths, in order. Duplicates are processed twice.

        Returns:
            A `BatchReport` with one entry per input directory, in input order.

        Raises:
            BatchConstructionException: If the input is not a list of paths.
            WorkerCrashedException: If any worker crashed; raised only after all joined.
        """
        jobs = build_jobs(directories)
        if not jobs:
            logger.info("No directories given. Nothing to do.")
            return BatchReport()

        # Default: one thread per directory, no cap.
        max_workers = self.max_workers or len(jobs)
        logger.info(f"Normalizing {len(jobs)} director{'y' if len(jobs) == 1 else 'ies'} with {min(max_workers, len(jobs))} worker(s).")

        reports: List[Optional[DirectoryReport]] = [None] * len(jobs)
        crashed: List[Path] = []
        first_crash: Optional[BaseException] = None

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=WORKER_THREAD_NAME_PREFIX
        ) as executor:
            futures = {executor.submit(self._run_worker, job): index for index, job in enumerate(jobs)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                directory = jobs[index].directory
                try:
                    reports[index] = future.result()
                except DirectoryEnumerationException as e:
                    logger.error(f"Error reading files in {directory}: {e.cause}")
                    reports[index] = DirectoryReport(directory=directory, error=str(e.cause))
                except Exception as exc:
                    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
                    logger.critical(
                        f"Directory worker for {directory} crashed:\n"
                        f"Exception type: {type(exc).__name__}\n"
                        f"Exception message: {exc}\n"
                        f"Traceback:\n{tb_str}"
                    )
                    reports[index] = DirectoryReport(directory=directory, error=f"worker crashed: {exc!r}")
                    crashed.append(directory)
                    if first_crash is None:
                        first_crash = exc

        batch_report = BatchReport(directories=[r for r in reports if r is not None])
        self._log_summary(batch_report)
        if crashed:
            raise WorkerCrashedException(crashed) from first_crash
        return batch_report

    @staticmethod
    def _log_summary(report: BatchReport):
        incomplete = report.incomplete_directories
        logger.success(
            f"Batch finished: {len(report.directories)} directories, {report.converted} converted, "
            f"{report.failed} failed, {report.deleted} deleted, {report.cleanup_failed} cleanup failures."
        )
        for directory_report in incomplete:
            logger.warning(f"Incomplete directory {directory_report.directory}: {directory_report.error}")
