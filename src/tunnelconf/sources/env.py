"""
Environment variable source.

Reads tunnel settings from environment variables such as
``VPN_SERVICE_PROVIDER``, ``WIREGUARD_PRIVATE_KEY`` or ``OPENVPN_USER``.
Empty variables count as unset. Some variables have retro-compatible names
that are read when the current name is not set.

Secret variables can be removed from the environment once read, so child
processes never inherit them.
"""

from __future__ import annotations

import collections.abc as _abc
import datetime as _datetime
import logging as _logging
import os as _os
import typing as _typing

import pydantic as _pydantic

import tunnelconf.settings.control_server as control_server_settings
import tunnelconf.settings.errors as errors
import tunnelconf.settings.openvpn as openvpn_settings
import tunnelconf.settings.optional as optional
import tunnelconf.settings.settings as settings_module
import tunnelconf.settings.types as types
import tunnelconf.settings.updater as updater_settings
import tunnelconf.settings.wireguard as wireguard_settings
import tunnelconf.utils.durations as durations

_logger = _logging.getLogger(__name__)

SECRET_KEYS: tuple[str, ...] = (
    "WIREGUARD_PRIVATE_KEY",
    "WIREGUARD_PRESHARED_KEY",
    "OPENVPN_PASSWORD",
    "OPENVPN_KEY_PASSPHRASE",
)

_TRUE_VALUES = frozenset({"yes", "on", "true", "1", "enabled"})
_FALSE_VALUES = frozenset({"no", "off", "false", "0", "disabled"})


class EnvSource:
    """Settings source backed by environment variables."""

    name = "environment"

    def __init__(
        self,
        environ: _abc.MutableMapping[str, str] | None = None,
        *,
        unset_secrets: bool = False,
    ) -> None:
        """
        Args:
            environ: Variables to read. Defaults to ``os.environ``.
            unset_secrets: Remove secret variables from ``environ`` after
                reading them.
        """
        self._environ = _os.environ if environ is None else environ
        self._unset_secrets = unset_secrets

    def read(self) -> settings_module.Settings:
        """
        Read every known variable into a fragment.

        Raises:
            errors.SourceError: If a variable holds a malformed value. The
                error origin names the variable.
        """
        try:
            fragment = settings_module.Settings(
                vpn_provider=self._lower("VPN_SERVICE_PROVIDER"),
                vpn_type=self._lower("VPN_TYPE"),
                wireguard=self._read_wireguard(),
                openvpn=self._read_openvpn(),
                control_server=self._read_control_server(),
                updater=self._read_updater(),
            )
        finally:
            if self._unset_secrets:
                for key in SECRET_KEYS:
                    self._environ.pop(key, None)
        _logger.debug("Read environment variables into settings fragment")
        return fragment

    # =========================================================================
    # Sections
    # =========================================================================

    def _read_wireguard(self) -> wireguard_settings.WireGuard:
        endpoint: types.Endpoint | optional.Unset = optional.UNSET
        endpoint_ip = self._ip("WIREGUARD_ENDPOINT_IP")
        endpoint_port = self._port("WIREGUARD_ENDPOINT_PORT")
        if optional.is_set(endpoint_ip) or optional.is_set(endpoint_port):
            endpoint = types.Endpoint(ip=endpoint_ip, port=endpoint_port)

        _, interface_name = self._get_with_retro("VPN_INTERFACE", "WIREGUARD_INTERFACE")
        addresses_key, _ = self._get_with_retro("WIREGUARD_ADDRESSES", "WIREGUARD_ADDRESS")

        return self._build(
            wireguard_settings.WireGuard,
            "WIREGUARD",
            interface_name=interface_name,
            private_key=self._get("WIREGUARD_PRIVATE_KEY"),
            public_key=self._get("WIREGUARD_PUBLIC_KEY"),
            pre_shared_key=self._get("WIREGUARD_PRESHARED_KEY"),
            implementation=self._get("WIREGUARD_IMPLEMENTATION"),
            allowed_ips=self._ip_nets("WIREGUARD_ALLOWED_IPS"),
            addresses=self._ip_nets(addresses_key),
            endpoint=endpoint,
            ipv6=self._bool("WIREGUARD_IPV6"),
            firewall_mark=self._int("WIREGUARD_FIREWALL_MARK"),
            rule_priority=self._int("WIREGUARD_RULE_PRIORITY"),
        )

    def _read_openvpn(self) -> openvpn_settings.OpenVPN:
        _, interface = self._get_with_retro("VPN_INTERFACE", "OPENVPN_INTERFACE")
        return self._build(
            openvpn_settings.OpenVPN,
            "OPENVPN",
            version=self._get("OPENVPN_VERSION"),
            user=self._get("OPENVPN_USER"),
            password=self._get("OPENVPN_PASSWORD"),
            conf_file=self._get("OPENVPN_CUSTOM_CONFIG"),
            ciphers=self._csv("OPENVPN_CIPHERS"),
            auth=self._get("OPENVPN_AUTH"),
            cert=self._get("OPENVPN_CERT"),
            key=self._get("OPENVPN_KEY"),
            encrypted_key=self._get("OPENVPN_ENCRYPTED_KEY"),
            key_passphrase=self._get("OPENVPN_KEY_PASSPHRASE"),
            pia_encryption_preset=self._lower(
                "PRIVATE_INTERNET_ACCESS_OPENVPN_ENCRYPTION_PRESET"
            ),
            mss_fix=self._int("OPENVPN_MSSFIX"),
            interface=interface,
            process_user=self._get("OPENVPN_PROCESS_USER"),
            verbosity=self._int("OPENVPN_VERBOSITY"),
            flags=self._words("OPENVPN_FLAGS"),
        )

    def _read_control_server(self) -> control_server_settings.ControlServer:
        key, address = self._get_with_retro(
            "HTTP_CONTROL_SERVER_ADDRESS", "CONTROL_SERVER_ADDRESS"
        )
        if optional.is_set(address) and key == "CONTROL_SERVER_ADDRESS":
            # The retro variable only held a port
            address = f":{address}"
        return self._build(
            control_server_settings.ControlServer,
            "HTTP_CONTROL_SERVER",
            address=address,
            log=self._bool("HTTP_CONTROL_SERVER_LOG"),
        )

    def _read_updater(self) -> updater_settings.Updater:
        providers: dict[str, bool] | optional.Unset = optional.UNSET
        names = self._csv("UPDATER_VPN_SERVICE_PROVIDERS")
        if optional.is_set(names):
            providers = {name.lower(): True for name in names}
        return self._build(
            updater_settings.Updater,
            "UPDATER",
            period=self._duration("UPDATER_PERIOD"),
            dns_address=self._get("UPDATER_DNS_ADDRESS"),
            providers=providers,
        )

    @staticmethod
    def _build(
        model: type[_typing.Any],
        origin: str,
        **fields: _typing.Any,
    ) -> _typing.Any:
        try:
            return model(**fields)
        except _pydantic.ValidationError as e:
            raise errors.SourceError(f"environment variables {origin}_*", str(e)) from e

    # =========================================================================
    # Value readers
    # =========================================================================

    def _get(self, key: str) -> str | optional.Unset:
        value = self._environ.get(key, "")
        if value == "":
            return optional.UNSET
        return value

    def _get_with_retro(self, key: str, *retro_keys: str) -> tuple[str, str | optional.Unset]:
        """Return the first set variable among the current and retro names."""
        for candidate in (key, *retro_keys):
            value = self._get(candidate)
            if optional.is_set(value):
                if candidate != key:
                    _logger.warning(
                        "Environment variable %s is deprecated, use %s instead",
                        candidate,
                        key,
                    )
                return candidate, value
        return key, optional.UNSET

    def _lower(self, key: str) -> str | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        return value.lower()

    def _csv(self, key: str) -> list[str] | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        return [item.strip() for item in value.split(",") if item.strip()]

    def _words(self, key: str) -> list[str] | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        return value.split()

    def _int(self, key: str) -> int | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        try:
            return int(value)
        except ValueError:
            raise errors.SourceError(key, f"value is not an integer: {value}") from None

    def _port(self, key: str) -> int | optional.Unset:
        port = self._int(key)
        if isinstance(port, int) and not 0 <= port <= 65535:
            raise errors.SourceError(key, f"port is out of range: {port}")
        return port

    def _bool(self, key: str) -> bool | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        if value.lower() in _TRUE_VALUES:
            return True
        if value.lower() in _FALSE_VALUES:
            return False
        raise errors.SourceError(key, f"value is not a binary choice: {value}")

    def _ip(self, key: str) -> types.IPAddress | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        try:
            return types.parse_ip(value)
        except ValueError as e:
            raise errors.SourceError(key, str(e)) from None

    def _ip_nets(self, key: str) -> list[types.IPNet | None] | optional.Unset:
        items = self._csv(key)
        if isinstance(items, optional.Unset):
            return items
        networks: list[types.IPNet | None] = []
        for item in items:
            try:
                networks.append(types.IPNet.parse(item))
            except ValueError as e:
                raise errors.SourceError(key, str(e)) from None
        return networks

    def _duration(self, key: str) -> _datetime.timedelta | optional.Unset:
        value = self._get(key)
        if isinstance(value, optional.Unset):
            return value
        try:
            return durations.parse_duration(value)
        except ValueError as e:
            raise errors.SourceError(key, str(e)) from None
