"""
Configuration Package for the Speech Normalizer.

This package centralizes the static configuration settings for the application.
By separating configuration from the application logic, parameters can be
changed without touching the core code.

This package includes settings for:
- The canonical target audio format (sample rate, channels, sample format).
- The extension table used to classify source files.
- Logging formats and the optional user configuration file (`config.user.yaml`).
"""
