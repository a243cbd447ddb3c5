"""
ihex Command-Line Interface
===========================

This package provides the command-line tools for the ihex package:

- **ihexdump**: List the data records and entry points of a HEX file

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["ihexdump"]
