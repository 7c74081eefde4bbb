"""Helper package for command-line entry points.

This module makes the `scripts` folder importable so test suites and
installed console scripts can resolve `scripts.pa_cli` and
`scripts.run_batch` without relying on path hacks.
"""
