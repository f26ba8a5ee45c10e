"""
Top level settings aggregate.

``Settings`` holds the selected VPN provider and type plus one section per
domain. The provider is resolved first and passed as context to the section
defaults and to the OpenVPN validator.
"""

from __future__ import annotations

import typing as _typing

import pydantic as _pydantic

import tunnelconf.constants as constants
import tunnelconf.settings.base as base
import tunnelconf.settings.control_server as control_server_settings
import tunnelconf.settings.errors as errors
import tunnelconf.settings.openvpn as openvpn_settings
import tunnelconf.settings.optional as optional
import tunnelconf.settings.providers as providers
import tunnelconf.settings.updater as updater_settings
import tunnelconf.settings.wireguard as wireguard_settings
import tunnelconf.ui.tree as tree


class Settings(base.SettingsBase):
    """All tunnel settings, one section per domain."""

    vpn_provider: str | optional.Unset = optional.UNSET
    vpn_type: str | optional.Unset = optional.UNSET
    """``openvpn`` or ``wireguard``."""

    wireguard: wireguard_settings.WireGuard = _pydantic.Field(
        default_factory=wireguard_settings.WireGuard
    )
    openvpn: openvpn_settings.OpenVPN = _pydantic.Field(
        default_factory=openvpn_settings.OpenVPN
    )
    control_server: control_server_settings.ControlServer = _pydantic.Field(
        default_factory=control_server_settings.ControlServer
    )
    updater: updater_settings.Updater = _pydantic.Field(
        default_factory=updater_settings.Updater
    )

    @_pydantic.field_validator("vpn_provider", "vpn_type", mode="before")
    @classmethod
    def _lowercase(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return value.lower()
        return value

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        return {
            "vpn_provider": constants.PRIVATE_INTERNET_ACCESS,
            "vpn_type": constants.OPENVPN,
        }

    def _with_defaults(self, context: base.DefaultsContext | None = None) -> Settings:
        """Default the provider first, then every section with it as context."""
        if context is None:
            provider = optional.default_value(
                self.vpn_provider, constants.PRIVATE_INTERNET_ACCESS
            )
            context = base.DefaultsContext(vpn_provider=provider)
        return super()._with_defaults(context)

    def validate(self) -> None:  # type: ignore[override]
        """
        Check the selected tunnel section, then the control server and updater.

        Section errors keep their kind and gain the section name as context,
        e.g. ``OpenVPN settings: password is empty``.

        Raises:
            errors.ValidationError: The subclass identifies the failed check.
        """
        vpn_type = optional.value_or(self.vpn_type, "")
        if vpn_type not in constants.VPN_TYPES:
            raise errors.VPNTypeInvalidError(vpn_type, field="vpn_type", value=vpn_type)

        provider = optional.value_or(self.vpn_provider, "")
        if provider not in constants.ALL_PROVIDERS:
            raise errors.VPNProviderUnknownError(provider, field="vpn_provider", value=provider)

        if vpn_type == constants.WIREGUARD:
            if not providers.rules_for(provider).supports_wireguard:
                raise errors.WireguardNotSupportedError(
                    provider, field="vpn_provider", value=provider
                )
            _validate_section("Wireguard settings", self.wireguard.validate)
        else:
            _validate_section("OpenVPN settings", lambda: self.openvpn.validate(provider))

        _validate_section("Control server settings", self.control_server.validate)
        _validate_section("Updater settings", self.updater.validate)

    def to_node(self) -> tree.Node:
        node = tree.Node("Settings summary:")
        vpn_node = node.append("VPN settings:")
        vpn_node.append(f"VPN provider: {optional.value_or(self.vpn_provider, 'not set')}")
        vpn_node.append(f"VPN type: {optional.value_or(self.vpn_type, 'not set')}")
        if self.vpn_type == constants.WIREGUARD:
            vpn_node.add(self.wireguard.to_node())
        else:
            vpn_node.add(self.openvpn.to_node())
        node.add(self.control_server.to_node())
        node.add(self.updater.to_node())
        return node

    def to_lines(self, style: tree.LineStyle | None = None) -> list[str]:
        return self.to_node().to_lines(style)

    def __str__(self) -> str:
        return str(self.to_node())


def _validate_section(name: str, check: _typing.Callable[[], None]) -> None:
    try:
        check()
    except errors.ValidationError as e:
        raise e.wrap(name) from e
