"""
legis package
=============

This package contains the legislation browser: load a CSV of legislation
records, filter them by element, aspect, sphere of government, location and
year, and render the matching records.

- The CLI entry point is in `legis/cli.py`.
- The core engine (filter state, matching, option lists) is in `legis/engine.py`.
- Dataset loading and field normalization are in `legis/loader.py`.
"""

__version__ = '0.1.0'
