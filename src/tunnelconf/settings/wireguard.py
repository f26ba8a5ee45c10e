"""WireGuard tunnel settings."""

from __future__ import annotations

import base64 as _base64
import binascii as _binascii
import re as _re
import typing as _typing

import pydantic as _pydantic

import tunnelconf.constants as constants
import tunnelconf.settings.base as base
import tunnelconf.settings.errors as errors
import tunnelconf.settings.optional as optional
import tunnelconf.settings.types as types
import tunnelconf.ui.tree as tree

_INTERFACE_NAME = _re.compile(constants.INTERFACE_NAME_PATTERN)

KEY_SIZE = 32


def parse_key(value: str) -> bytes:
    """
    Decode a WireGuard key.

    Raises:
        ValueError: If the value is not standard base64 of exactly 32 bytes.
    """
    try:
        decoded = _base64.b64decode(value, validate=True)
    except (_binascii.Error, ValueError) as e:
        raise ValueError(f"failed to parse base64-encoded key: {e}") from None
    if len(decoded) != KEY_SIZE:
        raise ValueError(
            f"incorrect key size: {len(decoded)} bytes instead of {KEY_SIZE}"
        )
    return decoded


class WireGuard(base.SettingsBase):
    """
    Settings to configure a WireGuard interface and its single peer.

    Keys are base64 encoded 32 byte Curve25519 keys. ``pre_shared_key``
    set to the empty string means no pre-shared key is used.
    """

    interface_name: str | optional.Unset = optional.UNSET
    firewall_mark: int | optional.Unset = optional.UNSET
    endpoint: types.Endpoint | optional.Unset = optional.UNSET
    allowed_ips: list[types.IPNet | None] | optional.Unset = optional.UNSET
    addresses: list[types.IPNet | None] | optional.Unset = optional.UNSET
    ipv6: bool | optional.Unset = optional.UNSET
    implementation: str | optional.Unset = optional.UNSET
    """One of ``auto``, ``kernelspace`` or ``userspace``."""
    private_key: str | optional.Unset = optional.UNSET
    public_key: str | optional.Unset = optional.UNSET
    pre_shared_key: str | optional.Unset = optional.UNSET
    rule_priority: int | optional.Unset = optional.UNSET
    """Priority of the routing rule; 0 leaves it to the runtime."""

    @_pydantic.field_validator("firewall_mark", "rule_priority")
    @classmethod
    def _non_negative(cls, value: int | optional.Unset) -> int | optional.Unset:
        if optional.is_set(value) and value < 0:  # type: ignore[operator]
            raise ValueError("must not be negative")
        return value

    # =========================================================================
    # Defaults
    # =========================================================================

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        allowed_ips = [types.all_ipv4()]
        if optional.value_or(self.ipv6, False):
            allowed_ips.append(types.all_ipv6())
        return {
            "interface_name": "wg0",
            "firewall_mark": constants.DEFAULT_WIREGUARD_PORT,
            "allowed_ips": allowed_ips,
            "ipv6": False,
            "implementation": "auto",
            "pre_shared_key": "",
            "rule_priority": 0,
        }

    def _with_defaults(self, context: base.DefaultsContext | None = None) -> WireGuard:
        defaulted = super()._with_defaults(context)
        endpoint = defaulted.endpoint
        if isinstance(endpoint, types.Endpoint) and not optional.value_or(endpoint.port, 0):
            endpoint = endpoint.model_copy(update={"port": constants.DEFAULT_WIREGUARD_PORT})
            defaulted = defaulted.model_copy(update={"endpoint": endpoint})
        return defaulted

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> None:  # type: ignore[override]
        """
        Check the settings, stopping at the first problem.

        Absent fields are checked as their empty value, so validating
        settings that were never defaulted reports the first missing field.

        Raises:
            errors.ValidationError: The subclass identifies the failed check.
        """
        interface_name = optional.value_or(self.interface_name, "")
        if not _INTERFACE_NAME.match(interface_name):
            raise errors.InterfaceNameInvalidError(
                interface_name, field="interface_name", value=interface_name
            )

        self._validate_keys()
        self._validate_endpoint()
        ipv6 = optional.value_or(self.ipv6, False)
        self._validate_allowed_ips(ipv6)
        self._validate_addresses(ipv6)

        if not optional.value_or(self.firewall_mark, 0):
            raise errors.FirewallMarkMissingError(field="firewall_mark")

        implementation = optional.value_or(self.implementation, "")
        if implementation not in constants.WIREGUARD_IMPLEMENTATIONS:
            raise errors.ImplementationInvalidError(
                implementation, field="implementation", value=implementation
            )

    def _validate_keys(self) -> None:
        private_key = optional.value_or(self.private_key, "")
        if not private_key:
            raise errors.PrivateKeyMissingError(field="private_key")
        try:
            parse_key(private_key)
        except ValueError:
            raise errors.PrivateKeyInvalidError(field="private_key") from None

        public_key = optional.value_or(self.public_key, "")
        if not public_key:
            raise errors.PublicKeyMissingError(field="public_key")
        try:
            parse_key(public_key)
        except ValueError:
            raise errors.PublicKeyInvalidError(
                public_key, field="public_key", value=public_key
            ) from None

        pre_shared_key = optional.value_or(self.pre_shared_key, "")
        if pre_shared_key:
            try:
                parse_key(pre_shared_key)
            except ValueError:
                raise errors.PreSharedKeyInvalidError(field="pre_shared_key") from None

    def _validate_endpoint(self) -> None:
        if not isinstance(self.endpoint, types.Endpoint):
            raise errors.EndpointMissingError(field="endpoint")
        if not optional.is_set(self.endpoint.ip):
            raise errors.EndpointIPMissingError(field="endpoint")
        if not optional.value_or(self.endpoint.port, 0):
            raise errors.EndpointPortMissingError(field="endpoint", value=str(self.endpoint))

    def _validate_allowed_ips(self, ipv6: bool) -> None:
        allowed_ips = optional.value_or(self.allowed_ips, [])
        if not allowed_ips:
            raise errors.AllowedIPsMissingError(field="allowed_ips")

        for index, allowed_ip in enumerate(allowed_ips, start=1):
            position = (index, len(allowed_ips))
            detail = errors.entry_detail("allowed IP", position)
            if allowed_ip is None:
                raise errors.AllowedIPNilError(detail, field="allowed_ips", position=position)
            if not optional.is_set(allowed_ip.ip):
                raise errors.AllowedIPIPNilError(detail, field="allowed_ips", position=position)
            if not optional.is_set(allowed_ip.mask):
                raise errors.AllowedIPMaskMissingError(
                    detail, field="allowed_ips", position=position
                )
            if not ipv6 and allowed_ip.is_ipv6:
                raise errors.AllowedIPv6NotSupportedError(
                    f"for allowed IP {allowed_ip}",
                    field="allowed_ips",
                    value=str(allowed_ip),
                    position=position,
                )

    def _validate_addresses(self, ipv6: bool) -> None:
        addresses = optional.value_or(self.addresses, [])
        if not addresses:
            raise errors.AddressMissingError(field="addresses")

        for index, address in enumerate(addresses, start=1):
            position = (index, len(addresses))
            detail = errors.entry_detail("address", position)
            if address is None:
                raise errors.AddressNilError(detail, field="addresses", position=position)
            if not optional.is_set(address.ip):
                raise errors.AddressIPMissingError(detail, field="addresses", position=position)
            if not optional.is_set(address.mask):
                raise errors.AddressMaskMissingError(detail, field="addresses", position=position)
            if not ipv6 and address.is_ipv6:
                raise errors.AddressIPv6NotSupportedError(
                    f"for address {address}",
                    field="addresses",
                    value=str(address),
                    position=position,
                )

    # =========================================================================
    # Rendering
    # =========================================================================

    def to_lines(self, style: tree.LineStyle | None = None) -> list[str]:
        """Render the settings as tree lines without a title line."""
        node = tree.Node()
        self._append_fields(node)
        return node.to_lines(style)

    def to_node(self) -> tree.Node:
        node = tree.Node("Wireguard settings:")
        self._append_fields(node)
        return node

    def _append_fields(self, node: tree.Node) -> None:
        node.append(f"Interface name: {optional.value_or(self.interface_name, '')}")
        node.append(f"Private key: {_set_or_not(self.private_key)}")
        if optional.value_or(self.public_key, ""):
            node.append(f"PublicKey: {self.public_key}")
        node.append(f"Pre shared key: {_set_or_not(self.pre_shared_key)}")

        endpoint = "not set"
        if isinstance(self.endpoint, types.Endpoint):
            endpoint = str(self.endpoint)
        node.append(f"Endpoint: {endpoint}")

        ipv6 = "not set"
        if optional.is_set(self.ipv6):
            ipv6 = "enabled" if self.ipv6 else "disabled"
        node.append(f"IPv6: {ipv6}")

        if optional.value_or(self.firewall_mark, 0):
            node.append(f"Firewall mark: {self.firewall_mark}")
        if optional.value_or(self.rule_priority, 0):
            node.append(f"Rule priority: {self.rule_priority}")

        node.append(f"Implementation: {optional.value_or(self.implementation, '')}")

        addresses = optional.value_or(self.addresses, [])
        if not addresses:
            node.append("Addresses: not set")
            return
        addresses_node = node.append("Addresses:")
        for address in addresses:
            addresses_node.append(str(address) if address is not None else "<nil>")

    def __str__(self) -> str:
        return "\n".join(self.to_lines())


def _set_or_not(secret: str | optional.Unset) -> str:
    return "set" if optional.value_or(secret, "") else "not set"
