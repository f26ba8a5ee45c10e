"""
Configuration of the tunnelconf tool itself (source paths, log level).
"""

from tunnelconf.config.settings import LogLevel, ReaderSettings

__all__ = ["LogLevel", "ReaderSettings"]
