"""
Connection extraction from custom OpenVPN configuration files.

Only the directives needed to know where the tunnel connects are read:
``remote <host> [port] [proto]``, ``port`` and ``proto``. A ``remote``
line wins over the standalone ``port``/``proto`` directives.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib

_logger = _logging.getLogger(__name__)

DEFAULT_PORT = 1194
PROTOCOLS = ("udp", "tcp", "udp4", "udp6", "tcp4", "tcp6", "tcp-client")


class ExtractionError(Exception):
    """The configuration file cannot be used as a custom OpenVPN configuration."""


@_dataclasses.dataclass(frozen=True)
class Connection:
    """Where an OpenVPN configuration connects to."""

    host: str
    port: int
    protocol: str


def extract_connection(path: str | _pathlib.Path) -> Connection:
    """
    Read an OpenVPN configuration file and return its first connection.

    Args:
        path: Path to the configuration file.

    Returns:
        The host, port and protocol of the first ``remote`` directive.

    Raises:
        ExtractionError: If the file cannot be read, has no ``remote``
            directive, or holds an invalid port or protocol.
    """
    try:
        content = _pathlib.Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ExtractionError(f"reading file: {e}") from e
    return parse_connection(content.splitlines())


def parse_connection(lines: list[str]) -> Connection:
    """Parse configuration lines, see ``extract_connection``."""
    remote: list[str] | None = None
    port = DEFAULT_PORT
    protocol = "udp"

    for raw_line in lines:
        line = raw_line.split("#", 1)[0].split(";", 1)[0].strip()
        if not line:
            continue
        words = line.split()
        directive, arguments = words[0], words[1:]
        if directive == "remote" and remote is None:
            if not arguments:
                raise ExtractionError(f"remote line has no host: {raw_line}")
            remote = arguments
        elif directive == "port" and arguments:
            port = _parse_port(arguments[0])
        elif directive == "proto" and arguments:
            protocol = _parse_protocol(arguments[0])

    if remote is None:
        raise ExtractionError("remote line not found")

    host = remote[0]
    if len(remote) > 1:
        port = _parse_port(remote[1])
    if len(remote) > 2:
        protocol = _parse_protocol(remote[2])

    connection = Connection(host=host, port=port, protocol=protocol)
    _logger.debug("Extracted OpenVPN connection %s:%d/%s", host, port, protocol)
    return connection


def _parse_port(text: str) -> int:
    if not text.isdigit() or not 0 < int(text) <= 65535:
        raise ExtractionError(f"port is not valid: {text}")
    return int(text)


def _parse_protocol(text: str) -> str:
    protocol = text.lower()
    if protocol not in PROTOCOLS:
        raise ExtractionError(f"protocol is not valid: {text}")
    if protocol == "tcp-client":
        return "tcp"
    return protocol.rstrip("46")
