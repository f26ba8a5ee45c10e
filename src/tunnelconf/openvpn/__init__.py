"""
OpenVPN helpers.

Reads the connection details out of custom OpenVPN configuration files.
"""

from tunnelconf.openvpn.extract import Connection, ExtractionError, extract_connection

__all__ = ["Connection", "ExtractionError", "extract_connection"]
