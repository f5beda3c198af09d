"""
Services Package for the Speech Normalizer Application.

This package contains the "service layer" of the application: the classes and
functions that do the actual work for one file or one directory. The batch
pipeline only schedules them.

- **Classifier (`classify`, `output_path_for`):**
  Decides from a file's extension whether it is a lossy source, already in the
  target container, or unrecognized, and where its output goes.

- **Transcoder (`Transcoder`):**
  Runs FFmpeg for one input/output pair and reports a tagged success/failure
  value. It never raises for external-process problems.

- **Directory worker (`DirectoryWorker`):**
  Walks one directory's immediate entries, converts what it recognizes and
  removes lossy originals after a confirmed successful conversion.

- **Logging service (`configure_logging`, `BatchReportLog`):**
  Console/file logging via loguru and the YAML batch report.
"""
