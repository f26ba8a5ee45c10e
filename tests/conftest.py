"""
Shared pytest fixtures for tunnelconf tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import ipaddress as _ipaddress
import os as _os
import pathlib as _pathlib

import pytest as _pytest

import tunnelconf.settings as settings

# Valid base64 encoded 32 byte keys
PRIVATE_KEY = "oMNSf/zJ0pt1ciy+qIRk8Rlyfs9accwuRLnKd85Yl1Q="
PUBLIC_KEY = "aPjc9US5ICB30D1P4glR9tO7bkB2Ga+KZiFqnoypBHk="

# Environment variables read by the sources, cleared for isolated tests
ENV_PREFIXES_TO_CLEAR = (
    "TUNNELCONF_",
    "VPN_",
    "WIREGUARD_",
    "OPENVPN_",
    "PRIVATE_INTERNET_ACCESS_",
    "HTTP_CONTROL_SERVER_",
    "CONTROL_SERVER_",
    "UPDATER_",
)


# =============================================================================
# Environment
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Remove every variable the sources or the reader settings would read."""
    for key in list(_os.environ):
        if key.startswith(ENV_PREFIXES_TO_CLEAR):
            monkeypatch.delenv(key, raising=False)


@_pytest.fixture
def reader_env(tmp_path: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch) -> _pathlib.Path:
    """
    Point every reader path into a temporary directory.

    Returns the directory. Nothing is created in it, so all file sources
    start out empty.
    """
    monkeypatch.setenv("TUNNELCONF_CONFIG_FILE", str(tmp_path / "config.yaml"))
    monkeypatch.setenv("TUNNELCONF_WIREGUARD_CONFIG_PATH", str(tmp_path / "wg0.conf"))
    monkeypatch.setenv("TUNNELCONF_OPENVPN_CLIENT_CERT_PATH", str(tmp_path / "client.crt"))
    monkeypatch.setenv("TUNNELCONF_OPENVPN_CLIENT_KEY_PATH", str(tmp_path / "client.key"))
    monkeypatch.setenv("TUNNELCONF_OPENVPN_ENCRYPTED_KEY_PATH", str(tmp_path / "encrypted_key"))
    return tmp_path


# =============================================================================
# Settings
# =============================================================================


@_pytest.fixture
def valid_wireguard() -> settings.WireGuard:
    """WireGuard settings that pass validation."""
    return settings.WireGuard(
        interface_name="wg0",
        private_key=PRIVATE_KEY,
        public_key=PUBLIC_KEY,
        endpoint=settings.Endpoint(ip=_ipaddress.ip_address("1.2.3.4"), port=51820),
        allowed_ips=[settings.IPNet.parse("::/0")],
        ipv6=True,
        addresses=[settings.IPNet.parse("1.2.3.4/24")],
        firewall_mark=999,
        implementation="userspace",
    )
