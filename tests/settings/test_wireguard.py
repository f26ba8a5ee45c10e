"""Tests for WireGuard settings defaults, validation and rendering."""

import ipaddress as _ipaddress

import pydantic as _pydantic
import pytest as _pytest

import tunnelconf.settings.errors as errors
import tunnelconf.settings.types as types
import tunnelconf.settings.wireguard as wireguard
import tunnelconf.ui.tree as tree

VALID_KEY_1 = "oMNSf/zJ0pt1ciy+qIRk8Rlyfs9accwuRLnKd85Yl1Q="
VALID_KEY_2 = "aPjc9US5ICB30D1P4glR9tO7bkB2Ga+KZiFqnoypBHk="


def _endpoint(port: int | None = 51820) -> types.Endpoint:
    if port is None:
        return types.Endpoint(ip=_ipaddress.ip_address("1.2.3.4"))
    return types.Endpoint(ip=_ipaddress.ip_address("1.2.3.4"), port=port)


def _up_to_addresses(**fields: object) -> wireguard.WireGuard:
    """Settings valid up to and excluding the addresses check."""
    base: dict[str, object] = {
        "interface_name": "wg0",
        "private_key": VALID_KEY_1,
        "public_key": VALID_KEY_2,
        "endpoint": _endpoint(),
        "allowed_ips": [types.all_ipv6()],
        "ipv6": True,
    }
    base.update(fields)
    return wireguard.WireGuard(**base)


class TestParseKey:
    """Tests for wireguard.parse_key()."""

    def test_valid_key(self) -> None:
        assert len(wireguard.parse_key(VALID_KEY_1)) == 32

    def test_not_base64(self) -> None:
        with _pytest.raises(ValueError, match="failed to parse base64-encoded key"):
            wireguard.parse_key("bad key")

    def test_wrong_size(self) -> None:
        with _pytest.raises(ValueError, match="incorrect key size: 3 bytes instead of 32"):
            wireguard.parse_key("YWJj")


class TestWireGuardDefaults:
    """Tests for WireGuard._with_defaults()."""

    def test_empty_settings(self) -> None:
        defaulted = wireguard.WireGuard()._with_defaults()
        assert defaulted == wireguard.WireGuard(
            interface_name="wg0",
            firewall_mark=51820,
            allowed_ips=[types.all_ipv4()],
            ipv6=False,
            implementation="auto",
            pre_shared_key="",
            rule_priority=0,
        )

    def test_default_endpoint_port(self) -> None:
        """An endpoint without a port gets the WireGuard port."""
        defaulted = wireguard.WireGuard(endpoint=_endpoint(port=None))._with_defaults()
        assert defaulted.endpoint == _endpoint(51820)

    def test_zero_endpoint_port_is_defaulted(self) -> None:
        defaulted = wireguard.WireGuard(endpoint=_endpoint(port=0))._with_defaults()
        assert defaulted.endpoint == _endpoint(51820)

    def test_ipv6_adds_all_ipv6_allowed_ip(self) -> None:
        defaulted = wireguard.WireGuard(ipv6=True)._with_defaults()
        assert defaulted.allowed_ips == [types.all_ipv4(), types.all_ipv6()]

    def test_not_empty_settings_are_kept(self) -> None:
        original = wireguard.WireGuard(
            interface_name="wg1",
            firewall_mark=999,
            endpoint=_endpoint(9999),
            allowed_ips=[types.all_ipv6()],
            ipv6=True,
            implementation="userspace",
            pre_shared_key="",
            rule_priority=0,
        )
        assert original._with_defaults() == original

    def test_negative_firewall_mark_is_rejected(self) -> None:
        with _pytest.raises(_pydantic.ValidationError, match="must not be negative"):
            wireguard.WireGuard(firewall_mark=-1)


class TestWireGuardValidate:
    """Tests for WireGuard.validate(), in the order checks run."""

    def test_empty_settings(self) -> None:
        """The interface name is checked first, with an empty detail."""
        with _pytest.raises(errors.InterfaceNameInvalidError) as exc_info:
            wireguard.WireGuard().validate()
        assert str(exc_info.value) == "invalid interface name: "

    def test_bad_interface_name(self) -> None:
        with _pytest.raises(errors.InterfaceNameInvalidError) as exc_info:
            wireguard.WireGuard(interface_name="$H1T").validate()
        assert str(exc_info.value) == "invalid interface name: $H1T"
        assert exc_info.value.field == "interface_name"
        assert exc_info.value.value == "$H1T"

    def test_empty_private_key(self) -> None:
        with _pytest.raises(errors.PrivateKeyMissingError, match="^private key is missing$"):
            wireguard.WireGuard(interface_name="wg0").validate()

    def test_bad_private_key(self) -> None:
        """The invalid private key is never echoed in the message."""
        settings_ = wireguard.WireGuard(interface_name="wg0", private_key="bad key")
        with _pytest.raises(errors.PrivateKeyInvalidError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "cannot parse private key"

    def test_empty_public_key(self) -> None:
        settings_ = wireguard.WireGuard(interface_name="wg0", private_key=VALID_KEY_1)
        with _pytest.raises(errors.PublicKeyMissingError, match="^public key is missing$"):
            settings_.validate()

    def test_bad_public_key(self) -> None:
        settings_ = wireguard.WireGuard(
            interface_name="wg0", private_key=VALID_KEY_1, public_key="bad key"
        )
        with _pytest.raises(errors.PublicKeyInvalidError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "cannot parse public key: bad key"

    def test_bad_pre_shared_key(self) -> None:
        settings_ = wireguard.WireGuard(
            interface_name="wg0",
            private_key=VALID_KEY_1,
            public_key=VALID_KEY_2,
            pre_shared_key="bad key",
        )
        with _pytest.raises(errors.PreSharedKeyInvalidError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "cannot parse pre-shared key"

    def test_empty_endpoint(self) -> None:
        settings_ = wireguard.WireGuard(
            interface_name="wg0", private_key=VALID_KEY_1, public_key=VALID_KEY_2
        )
        with _pytest.raises(errors.EndpointMissingError, match="^endpoint is missing$"):
            settings_.validate()

    def test_endpoint_without_ip(self) -> None:
        settings_ = _up_to_addresses(endpoint=types.Endpoint())
        with _pytest.raises(errors.EndpointIPMissingError, match="^endpoint IP is missing$"):
            settings_.validate()

    def test_endpoint_port_zero(self) -> None:
        """Valid keys and interface, endpoint IP set but port zero."""
        settings_ = _up_to_addresses(endpoint=_endpoint(port=0))
        with _pytest.raises(errors.EndpointPortMissingError, match="^endpoint port is missing$"):
            settings_.validate()

    def test_no_allowed_ip(self) -> None:
        settings_ = _up_to_addresses(allowed_ips=[])
        with _pytest.raises(errors.AllowedIPsMissingError, match="^allowed IPs are missing$"):
            settings_.validate()

    def test_nil_allowed_ip(self) -> None:
        settings_ = _up_to_addresses(allowed_ips=[None])
        with _pytest.raises(errors.AllowedIPNilError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "allowed IP is nil: for allowed IP 1 of 1"
        assert exc_info.value.position == (1, 1)

    def test_allowed_ip_without_ip(self) -> None:
        settings_ = _up_to_addresses(allowed_ips=[types.IPNet()])
        with _pytest.raises(errors.AllowedIPIPNilError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "allowed IP IP field is nil: for allowed IP 1 of 1"

    def test_allowed_ip_without_mask(self) -> None:
        settings_ = _up_to_addresses(
            allowed_ips=[
                types.IPNet.parse("0.0.0.0/0"),
                types.IPNet(ip=_ipaddress.ip_address("::")),
            ]
        )
        with _pytest.raises(errors.AllowedIPMaskMissingError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "allowed IP mask is missing: for allowed IP 2 of 2"
        assert exc_info.value.position == (2, 2)

    def test_ipv6_allowed_ip_without_ipv6(self) -> None:
        """The message names the offending network."""
        settings_ = _up_to_addresses(ipv6=False)
        with _pytest.raises(errors.AllowedIPv6NotSupportedError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "allowed IPv6 address not supported: for allowed IP ::/0"

    def test_no_address(self) -> None:
        with _pytest.raises(errors.AddressMissingError, match="^interface address is missing$"):
            _up_to_addresses().validate()

    def test_nil_address(self) -> None:
        with _pytest.raises(errors.AddressNilError) as exc_info:
            _up_to_addresses(addresses=[None]).validate()
        assert str(exc_info.value) == "interface address is nil: for address 1 of 1"

    def test_address_without_ip(self) -> None:
        with _pytest.raises(errors.AddressIPMissingError) as exc_info:
            _up_to_addresses(addresses=[types.IPNet()]).validate()
        assert str(exc_info.value) == "interface address IP is missing: for address 1 of 1"

    def test_address_without_mask(self) -> None:
        address = types.IPNet(ip=_ipaddress.ip_address("1.2.3.4"))
        with _pytest.raises(errors.AddressMaskMissingError) as exc_info:
            _up_to_addresses(addresses=[address]).validate()
        assert str(exc_info.value) == "interface address mask is missing: for address 1 of 1"

    def test_second_address_position(self) -> None:
        addresses = [types.IPNet.parse("1.2.3.4/24"), None]
        with _pytest.raises(errors.AddressNilError) as exc_info:
            _up_to_addresses(addresses=addresses).validate()
        assert str(exc_info.value) == "interface address is nil: for address 2 of 2"

    def test_ipv6_address_without_ipv6(self) -> None:
        settings_ = _up_to_addresses(
            ipv6=False,
            allowed_ips=[types.all_ipv4()],
            addresses=[types.IPNet.parse("fd00::2/128")],
        )
        with _pytest.raises(errors.AddressIPv6NotSupportedError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == (
            "interface address IPv6 not supported: for address fd00::2/128"
        )

    def test_zero_firewall_mark(self) -> None:
        settings_ = _up_to_addresses(addresses=[types.IPNet.parse("1.2.3.4/24")])
        with _pytest.raises(errors.FirewallMarkMissingError, match="^firewall mark is missing$"):
            settings_.validate()

    def test_invalid_implementation(self, valid_wireguard: wireguard.WireGuard) -> None:
        settings_ = valid_wireguard.override_with(wireguard.WireGuard(implementation="x"))
        with _pytest.raises(errors.ImplementationInvalidError) as exc_info:
            settings_.validate()
        assert str(exc_info.value) == "invalid implementation: x"

    def test_all_valid(self, valid_wireguard: wireguard.WireGuard) -> None:
        valid_wireguard.validate()

    def test_validation_is_deterministic(self) -> None:
        """The same settings always fail with the same error."""
        settings_ = _up_to_addresses(allowed_ips=[None])
        messages = set()
        for _ in range(3):
            with _pytest.raises(errors.ValidationError) as exc_info:
                settings_.validate()
            messages.add(str(exc_info.value))
        assert messages == {"allowed IP is nil: for allowed IP 1 of 1"}


class TestWireGuardRendering:
    """Tests for WireGuard.to_lines() and str()."""

    def test_string(self) -> None:
        settings_ = wireguard.WireGuard(interface_name="wg0", ipv6=True, implementation="x")
        assert str(settings_) == "\n".join(
            [
                "├── Interface name: wg0",
                "├── Private key: not set",
                "├── Pre shared key: not set",
                "├── Endpoint: not set",
                "├── IPv6: enabled",
                "├── Implementation: x",
                "└── Addresses: not set",
            ]
        )

    def test_interface_and_ipv6_only(self) -> None:
        """Seven lines, secrets not set, IPv6 enabled."""
        lines = wireguard.WireGuard(interface_name="wg0", ipv6=True).to_lines()
        assert lines == [
            "├── Interface name: wg0",
            "├── Private key: not set",
            "├── Pre shared key: not set",
            "├── Endpoint: not set",
            "├── IPv6: enabled",
            "├── Implementation: ",
            "└── Addresses: not set",
        ]

    def test_empty_settings(self) -> None:
        lines = wireguard.WireGuard(ipv6=False).to_lines()
        assert lines == [
            "├── Interface name: ",
            "├── Private key: not set",
            "├── Pre shared key: not set",
            "├── Endpoint: not set",
            "├── IPv6: disabled",
            "├── Implementation: ",
            "└── Addresses: not set",
        ]

    def test_settings_all_set(self) -> None:
        settings_ = wireguard.WireGuard(
            interface_name="wg0",
            private_key="private key",
            public_key="public key",
            pre_shared_key="pre-shared key",
            endpoint=_endpoint(),
            firewall_mark=999,
            rule_priority=888,
            addresses=[types.IPNet.parse("1.1.1.1/24"), types.IPNet.parse("2.2.2.2/32")],
            ipv6=True,
            implementation="userspace",
        )
        assert settings_.to_lines() == [
            "├── Interface name: wg0",
            "├── Private key: set",
            "├── PublicKey: public key",
            "├── Pre shared key: set",
            "├── Endpoint: 1.2.3.4:51820",
            "├── IPv6: enabled",
            "├── Firewall mark: 999",
            "├── Rule priority: 888",
            "├── Implementation: userspace",
            "└── Addresses:",
            "    ├── 1.1.1.1/24",
            "    └── 2.2.2.2/32",
        ]

    def test_custom_line_style(self) -> None:
        settings_ = wireguard.WireGuard(
            interface_name="wg0",
            addresses=[types.IPNet.parse("1.1.1.1/24"), types.IPNet.parse("2.2.2.2/32")],
            ipv6=False,
        )
        style = tree.LineStyle(indent="  ", field_prefix="- ", last_field_prefix="* ")
        assert settings_.to_lines(style) == [
            "- Interface name: wg0",
            "- Private key: not set",
            "- Pre shared key: not set",
            "- Endpoint: not set",
            "- IPv6: disabled",
            "- Implementation: ",
            "* Addresses:",
            "  - 1.1.1.1/24",
            "  * 2.2.2.2/32",
        ]

    def test_title_node(self) -> None:
        node = wireguard.WireGuard(ipv6=False).to_node()
        assert node.to_lines()[0] == "Wireguard settings:"
