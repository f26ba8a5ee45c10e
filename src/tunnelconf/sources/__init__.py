"""
Settings sources.

Each source reads one kind of input into a partial ``Settings`` fragment:
environment variables, key files on disk, or a YAML configuration file.
"""

from tunnelconf.sources.base import Source
from tunnelconf.sources.env import EnvSource
from tunnelconf.sources.files import FilesSource
from tunnelconf.sources.yaml_file import YamlSource

__all__ = ["EnvSource", "FilesSource", "Source", "YamlSource"]
