"""
tunnelconf - layered VPN settings resolution

Reads WireGuard and OpenVPN tunnel settings from several sources, combines
them, fills in defaults, validates the result and renders it as a tree.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("tunnelconf")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from tunnelconf.resolve import Resolver, resolve_settings  # noqa: E402
from tunnelconf.settings import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "Resolver", "Settings", "resolve_settings"]
