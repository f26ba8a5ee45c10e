"""
On-disk key file source.

Reads:

- a WireGuard configuration file in INI format (``wg0.conf``), taking the
  keys and addresses from ``[Interface]`` and the peer from ``[Peer]``
- OpenVPN client certificate, key and encrypted key files, in PEM or raw
  base64 form

Files that do not exist are skipped. Anything present but unreadable or
malformed raises ``SourceError`` naming the file and the key.
"""

from __future__ import annotations

import configparser as _configparser
import logging as _logging
import pathlib as _pathlib

import tunnelconf.settings.errors as errors
import tunnelconf.settings.openvpn as openvpn_settings
import tunnelconf.settings.optional as optional
import tunnelconf.settings.settings as settings_module
import tunnelconf.settings.types as types
import tunnelconf.settings.wireguard as wireguard_settings

_logger = _logging.getLogger(__name__)


class FilesSource:
    """Settings source backed by WireGuard and OpenVPN key files."""

    name = "files"

    def __init__(
        self,
        *,
        wireguard_config_path: _pathlib.Path | None = None,
        openvpn_cert_path: _pathlib.Path | None = None,
        openvpn_key_path: _pathlib.Path | None = None,
        openvpn_encrypted_key_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Args:
            wireguard_config_path: WireGuard INI configuration file.
            openvpn_cert_path: OpenVPN client certificate file.
            openvpn_key_path: OpenVPN client key file.
            openvpn_encrypted_key_path: OpenVPN encrypted client key file.

        Paths left as None are not read.
        """
        self.wireguard_config_path = wireguard_config_path
        self.openvpn_cert_path = openvpn_cert_path
        self.openvpn_key_path = openvpn_key_path
        self.openvpn_encrypted_key_path = openvpn_encrypted_key_path

    def read(self) -> settings_module.Settings:
        """
        Read every configured file into a fragment.

        Raises:
            errors.SourceError: If a file exists but cannot be read or parsed.
        """
        return settings_module.Settings(
            wireguard=self.read_wireguard(),
            openvpn=openvpn_settings.OpenVPN(
                cert=_read_pem(self.openvpn_cert_path),
                key=_read_pem(self.openvpn_key_path),
                encrypted_key=_read_pem(self.openvpn_encrypted_key_path),
            ),
        )

    def read_wireguard(self) -> wireguard_settings.WireGuard:
        """
        Read the WireGuard configuration file.

        Returns:
            An empty fragment if no path is configured or the file does
            not exist.

        Raises:
            errors.SourceError: If the file cannot be read or parsed.
        """
        path = self.wireguard_config_path
        if path is None:
            return wireguard_settings.WireGuard()
        content = _read_text(path)
        if content is None:
            return wireguard_settings.WireGuard()

        parser = _configparser.ConfigParser(interpolation=None, strict=False)
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(content, source=str(path))
        except _configparser.Error as e:
            raise errors.SourceError(str(path), f"loading ini from file: {e.message}") from e

        try:
            wireguard = parse_wireguard_config(parser)
        except ValueError as e:
            raise errors.SourceError(str(path), str(e)) from e
        _logger.debug("Read WireGuard configuration file %s", path)
        return wireguard


def parse_wireguard_config(parser: _configparser.ConfigParser) -> wireguard_settings.WireGuard:
    """
    Build a WireGuard fragment from a parsed configuration file.

    Raises:
        ValueError: With the section and key that failed to parse.
    """
    fields: dict[str, object] = {}
    if parser.has_section("Interface"):
        try:
            fields.update(parse_interface_section(parser["Interface"]))
        except ValueError as e:
            raise ValueError(f"parsing interface section: {e}") from e
    if parser.has_section("Peer"):
        try:
            fields.update(parse_peer_section(parser["Peer"]))
        except ValueError as e:
            raise ValueError(f"parsing peer section: {e}") from e
    return wireguard_settings.WireGuard(**fields)


def parse_interface_section(section: _configparser.SectionProxy) -> dict[str, object]:
    """Read ``PrivateKey``, ``PreSharedKey`` and ``Address``."""
    fields: dict[str, object] = {}
    private_key = parse_key(section, "PrivateKey")
    if optional.is_set(private_key):
        fields["private_key"] = private_key
    pre_shared_key = parse_key(section, "PreSharedKey")
    if optional.is_set(pre_shared_key):
        fields["pre_shared_key"] = pre_shared_key
    addresses = parse_ip_nets(section, "Address")
    if optional.is_set(addresses):
        fields["addresses"] = addresses
    return fields


def parse_peer_section(section: _configparser.SectionProxy) -> dict[str, object]:
    """Read ``PublicKey``, ``PresharedKey``, ``Endpoint`` and ``AllowedIPs``."""
    fields: dict[str, object] = {}
    public_key = parse_key(section, "PublicKey")
    if optional.is_set(public_key):
        fields["public_key"] = public_key
    pre_shared_key = parse_key(section, "PresharedKey")
    if optional.is_set(pre_shared_key):
        fields["pre_shared_key"] = pre_shared_key
    endpoint = section.get("Endpoint", "").strip()
    if endpoint:
        try:
            fields["endpoint"] = types.Endpoint.parse(endpoint)
        except ValueError as e:
            raise ValueError(f"parsing Endpoint: {e}") from e
    allowed_ips = parse_ip_nets(section, "AllowedIPs")
    if optional.is_set(allowed_ips):
        fields["allowed_ips"] = allowed_ips
    return fields


def parse_key(section: _configparser.SectionProxy, name: str) -> str | optional.Unset:
    """
    Read a WireGuard key, checking it decodes to 32 bytes.

    Raises:
        ValueError: ``parsing <name>: <value>: <reason>``.
    """
    value = section.get(name, "").strip()
    if not value:
        return optional.UNSET
    try:
        wireguard_settings.parse_key(value)
    except ValueError as e:
        raise ValueError(f"parsing {name}: {value}: {e}") from e
    return value


def parse_ip_nets(
    section: _configparser.SectionProxy, name: str
) -> list[types.IPNet | None] | optional.Unset:
    """
    Read a comma separated list of CIDR networks.

    Raises:
        ValueError: ``parsing <name>: invalid CIDR address: <value>``.
    """
    value = section.get(name, "").strip()
    if not value:
        return optional.UNSET
    networks: list[types.IPNet | None] = []
    for item in value.split(","):
        try:
            networks.append(types.IPNet.parse(item))
        except ValueError as e:
            raise ValueError(f"parsing {name}: {e}") from e
    return networks


def _read_text(path: _pathlib.Path | None) -> str | None:
    """Return the file content, or None if the file does not exist."""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.debug("File %s does not exist, skipping", path)
        return None
    except OSError as e:
        raise errors.SourceError(str(path), f"reading file: {e}") from e


def _read_pem(path: _pathlib.Path | None) -> str | optional.Unset:
    """
    Read a PEM or raw base64 file into a single base64 string.

    Returns UNSET for missing or empty files.
    """
    content = _read_text(path)
    if content is None or not content.strip():
        return optional.UNSET
    body: list[str] = []
    in_block = False
    saw_header = False
    for line in content.splitlines():
        line = line.strip()
        if line.startswith("-----BEGIN"):
            if saw_header:
                # Only the first block of a bundle is used
                break
            in_block = saw_header = True
            continue
        if line.startswith("-----END"):
            in_block = False
            continue
        if in_block or not saw_header:
            body.append(line)
    return "".join(body)
