"""
This module provides the application's logging set-up and the YAML batch report.

Console output (and an optional log file) go through loguru. The batch report
is a separate, machine-readable YAML record of one run, written after every
directory worker has finished.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from ..config.common import DEFAULT_REPORT_YAML, LOGGER_FORMAT
from ..domain.models import BatchReport


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None):
    """
    Replaces loguru's default sink with the application's console sink.

    Args:
        level: Minimum level shown on stderr and written to `log_file`.
        log_file: Optional file that receives the same lines. Writes are queued
                  so that concurrent workers do not interleave partial lines.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=LOGGER_FORMAT, enqueue=True, encoding="utf-8")


class Log:
    """
    A base class for file-based logs.

    It resolves the target path and makes sure its directory exists.
    """

    def __init__(self, log_path: Path, default_filename: str):
        """
        Args:
            log_path: If it is an existing directory, the log is written inside it
                      using `default_filename`. Otherwise it is the log file itself.
            default_filename: File name used when `log_path` is a directory.
        """
        if log_path.is_dir():
            self.log_file_path: Path = log_path.resolve() / default_filename
        else:
            self.log_file_path = log_path.resolve()
        self.log_dir: Path = self.log_file_path.parent
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, log_content):
        raise NotImplementedError("Subclasses must implement the write() method.")


class BatchReportLog(Log):
    """Writes a `BatchReport` as a YAML document."""

    def __init__(self, report_path: Path):
        super().__init__(report_path, DEFAULT_REPORT_YAML)

    def write(self, report: BatchReport, target_params=None) -> bool:
        """
        Dumps `report` (and the target parameters, if given) to the report file.

        Returns:
            True if the file was written. Failures are logged, never raised, so a
            reporting problem cannot hide the result of the conversions.
        """
        document = {
            "generated_at": datetime.now().isoformat(timespec="seconds"),
        }
        if target_params is not None:
            document["target"] = {
                "sample_rate": target_params.sample_rate,
                "channels": target_params.channels,
                "sample_format": target_params.sample_format,
            }
        document.update(report.as_dict())

        try:
            with self.log_file_path.open("w", encoding="utf-8") as f:
                yaml.dump(
                    document,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                    indent=4,
                    width=220,
                )
        except OSError as e:
            logger.error(f"Failed to write batch report {self.log_file_path}: {e}")
            return False
        logger.info(f"Batch report written to {self.log_file_path}")
        return True
