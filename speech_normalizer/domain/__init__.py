"""
This package contains the core domain models of the Speech Normalizer application.

The domain layer describes the vocabulary of the pipeline (jobs, format
categories, conversion outcomes, reports) independently of the services that
touch the filesystem or run external tools.

Modules:
    exceptions.py: Custom exception types, one per failure granularity
                   (batch set-up, directory, file conversion, cleanup).
    models.py: Immutable value types such as `TargetAudioParams` and the
               `ConversionSuccess` / `ConversionFailure` outcomes, plus the
               per-directory and per-batch reports.
"""
