"""
Defines custom exception types for the Speech Normalizer application.

These exceptions allow for more specific error handling throughout the
normalization pipeline. Each one maps to a granularity at which a failure is
terminal: a single file, a single directory, or the batch set-up.

All custom exceptions inherit from the base `SpeechNormalizerException`.
"""


class SpeechNormalizerException(Exception):
    """Base class for all custom exceptions in the Speech Normalizer application."""

    pass


class BatchConstructionException(SpeechNormalizerException):
    """
    Raised when a batch cannot be set up.

    Invalid target parameters (for example a non-positive sample rate) are
    rejected here, before any directory worker has been started.
    """

    pass


class DirectoryEnumerationException(SpeechNormalizerException):
    """
    Raised when the entries of a directory cannot be listed.

    This ends the iteration of the one worker that owns the directory. The
    coordinator logs it and the remaining workers carry on.
    """

    def __init__(self, directory, cause: Exception):
        super().__init__(f"Cannot read directory {directory}: {cause}")
        self.directory = directory
        self.cause = cause


# --- Conversion Specific Exceptions ---
class ConversionException(SpeechNormalizerException):
    """Base class for failures of the external transcoding process."""

    pass


class ConversionLaunchException(ConversionException):
    """Raised when the transcoding executable could not be started at all."""

    pass


class CleanupException(SpeechNormalizerException):
    """
    Raised when an original file cannot be removed after a successful conversion.

    The converted output is kept; only the deletion is reported as failed.
    """

    pass


class WorkerCrashedException(SpeechNormalizerException):
    """
    Raised by the batch coordinator after every worker has joined, when at least
    one worker terminated with an unexpected exception.
    """

    def __init__(self, crashed_directories):
        self.crashed_directories = list(crashed_directories)
        joined = ", ".join(str(d) for d in self.crashed_directories)
        super().__init__(f"{len(self.crashed_directories)} directory worker(s) crashed: {joined}")
