"""
CLI module for skillbook.

Provides the command-line interface using Click.
"""

from skillbook.cli.main import cli, main

__all__ = ["main", "cli"]
