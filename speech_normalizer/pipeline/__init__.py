"""
This package contains the batch pipeline of the Speech Normalizer application.

The pipeline turns a list of directories into conversion jobs, runs one
directory worker per job concurrently, and joins them all before returning.
"""
