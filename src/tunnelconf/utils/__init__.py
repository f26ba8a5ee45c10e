"""
Utility functions for tunnelconf.

General-purpose helpers that don't belong to a specific settings domain.
"""

import tunnelconf.utils.durations as durations
from tunnelconf.utils.durations import format_duration, parse_duration

__all__ = ["durations", "format_duration", "parse_duration"]
