"""
Speech Normalizer: converts a corpus of speech clips to one canonical WAV format.

Subpackages:
    config: Target audio parameters, the extension table and user configuration.
    domain: Value types and exceptions.
    services: Classifier, FFmpeg transcoder, directory worker and logging.
    pipeline: The batch coordinator that runs one worker per directory.
    utils: FFmpeg command helpers and formatting functions.
"""
