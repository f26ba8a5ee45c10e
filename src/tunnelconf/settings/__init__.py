"""
Settings models for tunnelconf.

Each domain is a pydantic model whose fields start out absent (``UNSET``)
and are filled by combining source fragments, then defaulted and validated.
"""

from tunnelconf.settings.base import DefaultsContext, SettingsBase
from tunnelconf.settings.control_server import ControlServer
from tunnelconf.settings.errors import SettingsError, SourceError, ValidationError
from tunnelconf.settings.openvpn import OpenVPN
from tunnelconf.settings.optional import UNSET, Unset, is_set
from tunnelconf.settings.settings import Settings
from tunnelconf.settings.types import Endpoint, IPNet
from tunnelconf.settings.updater import Updater
from tunnelconf.settings.wireguard import WireGuard

__all__ = [
    "UNSET",
    "ControlServer",
    "DefaultsContext",
    "Endpoint",
    "IPNet",
    "OpenVPN",
    "Settings",
    "SettingsBase",
    "SettingsError",
    "SourceError",
    "Unset",
    "Updater",
    "ValidationError",
    "WireGuard",
    "is_set",
]
