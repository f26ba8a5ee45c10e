"""
Per-provider requirements.

Which OpenVPN credentials and blobs a provider needs, and whether it offers
WireGuard, is declared once in ``RULES`` and evaluated generically by the
validators. Providers missing from the table get ``DEFAULT_RULES``.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import re as _re
import typing as _typing

import tunnelconf.constants as constants

IVPN_ACCOUNT_ID = _re.compile(
    r"^(i|ivpn)\-[a-zA-Z0-9]{4}\-[a-zA-Z0-9]{4}\-[a-zA-Z0-9]{4}$"
)


def _is_ivpn_account_id(user: str) -> bool:
    """IVPN account IDs authenticate without a password."""
    return IVPN_ACCOUNT_ID.match(user) is not None


@_dataclasses.dataclass(frozen=True)
class ProviderRules:
    """Requirements a provider places on the OpenVPN and WireGuard settings."""

    user_required: bool = True
    password_waiver: _typing.Callable[[str], bool] | None = None
    """Given the user, returns True if no password is needed."""
    custom_config_required: bool = False
    cert_required: bool = False
    key_required: bool = False
    encrypted_key_required: bool = False
    supports_wireguard: bool = False

    def password_required(self, user: str) -> bool:
        if not self.user_required:
            return False
        return self.password_waiver is None or not self.password_waiver(user)


DEFAULT_RULES = ProviderRules()

RULES: dict[str, ProviderRules] = {
    constants.AIRVPN: ProviderRules(
        user_required=False,
        cert_required=True,
        key_required=True,
        supports_wireguard=True,
    ),
    constants.CUSTOM: ProviderRules(
        user_required=False,
        custom_config_required=True,
        supports_wireguard=True,
    ),
    constants.CYBERGHOST: ProviderRules(cert_required=True, key_required=True),
    constants.IVPN: ProviderRules(
        password_waiver=_is_ivpn_account_id,
        supports_wireguard=True,
    ),
    constants.MULLVAD: ProviderRules(supports_wireguard=True),
    constants.NORDVPN: ProviderRules(supports_wireguard=True),
    constants.PROTONVPN: ProviderRules(supports_wireguard=True),
    constants.SURFSHARK: ProviderRules(supports_wireguard=True),
    constants.VPN_SECURE: ProviderRules(
        user_required=False,
        cert_required=True,
        encrypted_key_required=True,
    ),
    constants.VPN_UNLIMITED: ProviderRules(cert_required=True, key_required=True),
    constants.WEVPN: ProviderRules(key_required=True),
    constants.WINDSCRIBE: ProviderRules(supports_wireguard=True),
}


def rules_for(provider: str) -> ProviderRules:
    """Return the requirements for a provider."""
    return RULES.get(provider, DEFAULT_RULES)
