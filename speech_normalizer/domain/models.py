"""
Value types shared by the normalization pipeline.

Everything in this module is either immutable (`TargetAudioParams`,
`ConversionJob`, the conversion outcomes) or owned by exactly one worker
while it is being filled in (`DirectoryReport`). No instance is ever shared
for writing between directory workers.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class FormatCategory(Enum):
    """What the extension of a file says about how it must be handled."""

    RECOGNIZED_LOSSY = "recognized_lossy"
    RECOGNIZED_TARGET = "recognized_target"
    UNRECOGNIZED = "unrecognized"


class FailureKind(Enum):
    LAUNCH_FAILED = "launch_failed"
    NON_ZERO_EXIT = "non_zero_exit"
    # The temporary file of an in-place re-encode could not be created or moved into place.
    STAGING_FAILED = "staging_failed"


@dataclass(frozen=True)
class TargetAudioParams:
    """
    The canonical format every conversion normalizes to.

    Attributes:
        sample_rate (int): Output sample rate in Hz.
        channels (int): Output channel count.
        sample_format (str): FFmpeg sample format name, e.g. "s16".
    """

    sample_rate: int
    channels: int
    sample_format: str = "s16"


@dataclass(frozen=True)
class ConversionJob:
    """One input directory, handed to exactly one directory worker."""

    directory: Path


@dataclass(frozen=True)
class ConversionSuccess:
    input_path: Path
    output_path: Path

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ConversionFailure:
    """
    A transcoding attempt that did not produce output.

    `message` is intentionally generic; the exit code is kept when the process
    ran, and `stderr` only travels along for debug logging.
    """

    input_path: Path
    kind: FailureKind
    returncode: Optional[int] = None
    message: str = "conversion failed"
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return False


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]


@dataclass
class DirectoryReport:
    """
    Counters collected by one directory worker.

    Attributes:
        directory (Path): The directory the worker was given.
        found (bool): False when the path did not resolve to a directory.
        converted (int): Conversions that reported success.
        failed (int): Conversions that failed (launch failure or non-zero exit).
        deleted (int): Lossy originals removed after a successful conversion.
        cleanup_failed (int): Lossy originals that could not be removed.
        unrecognized (int): Regular files left untouched.
        subdirectories (int): Entries that were directories and were not descended into.
        error (str | None): Why enumeration stopped early, if it did.
        elapsed (timedelta): Wall-clock time spent on the directory.
    """

    directory: Path
    found: bool = True
    converted: int = 0
    failed: int = 0
    deleted: int = 0
    cleanup_failed: int = 0
    unrecognized: int = 0
    subdirectories: int = 0
    error: Optional[str] = None
    elapsed: timedelta = field(default_factory=timedelta)

    @property
    def completed(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        return {
            "directory": str(self.directory),
            "found": self.found,
            "completed": self.completed,
            "converted": self.converted,
            "failed": self.failed,
            "deleted": self.deleted,
            "cleanup_failed": self.cleanup_failed,
            "unrecognized": self.unrecognized,
            "subdirectories": self.subdirectories,
            "error": self.error,
            "elapsed_seconds": round(self.elapsed.total_seconds(), 3),
        }


@dataclass
class BatchReport:
    """Per-directory reports in input order, plus totals."""

    directories: List[DirectoryReport] = field(default_factory=list)

    @property
    def converted(self) -> int:
        return sum(r.converted for r in self.directories)

    @property
    def failed(self) -> int:
        return sum(r.failed for r in self.directories)

    @property
    def deleted(self) -> int:
        return sum(r.deleted for r in self.directories)

    @property
    def cleanup_failed(self) -> int:
        return sum(r.cleanup_failed for r in self.directories)

    @property
    def incomplete_directories(self) -> List[DirectoryReport]:
        return [r for r in self.directories if not r.completed]

    def as_dict(self) -> dict:
        return {
            "totals": {
                "directories": len(self.directories),
                "incomplete_directories": len(self.incomplete_directories),
                "converted": self.converted,
                "failed": self.failed,
                "deleted": self.deleted,
                "cleanup_failed": self.cleanup_failed,
            },
            "directories": [r.as_dict() for r in self.directories],
        }
