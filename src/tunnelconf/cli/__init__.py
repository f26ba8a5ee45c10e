"""
CLI module for tunnelconf.

Provides the command-line interface using Click.
"""

from tunnelconf.cli.main import cli, main

__all__ = ["main", "cli"]
