"""Tests for the environment variable source."""

import datetime as _datetime
import ipaddress as _ipaddress
import logging as _logging

import pytest as _pytest

import tunnelconf.settings as settings
import tunnelconf.settings.optional as optional
import tunnelconf.sources as sources

PRIVATE_KEY = "oMNSf/zJ0pt1ciy+qIRk8Rlyfs9accwuRLnKd85Yl1Q="


class TestEnvSourceBasics:
    """Tests for reading top level and empty variables."""

    def test_no_variables_gives_empty_fragment(self) -> None:
        assert sources.EnvSource({}).read().is_empty()

    def test_empty_variables_are_unset(self) -> None:
        fragment = sources.EnvSource({"VPN_TYPE": "", "OPENVPN_USER": ""}).read()
        assert fragment.vpn_type is optional.UNSET
        assert fragment.openvpn.user is optional.UNSET

    def test_provider_and_type_are_lowercased(self) -> None:
        fragment = sources.EnvSource(
            {"VPN_SERVICE_PROVIDER": "Mullvad", "VPN_TYPE": "WireGuard"}
        ).read()
        assert fragment.vpn_provider == "mullvad"
        assert fragment.vpn_type == "wireguard"

    def test_reads_os_environ_by_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VPN_TYPE", "wireguard")
        assert sources.EnvSource().read().vpn_type == "wireguard"


class TestEnvSourceWireGuard:
    """Tests for WIREGUARD_* variables."""

    def test_all_variables(self) -> None:
        fragment = sources.EnvSource(
            {
                "WIREGUARD_PRIVATE_KEY": PRIVATE_KEY,
                "WIREGUARD_PRESHARED_KEY": "",
                "WIREGUARD_IMPLEMENTATION": "userspace",
                "WIREGUARD_ALLOWED_IPS": "0.0.0.0/0, ::/0",
                "WIREGUARD_ADDRESSES": "10.64.222.21/32",
                "WIREGUARD_ENDPOINT_IP": "1.2.3.4",
                "WIREGUARD_ENDPOINT_PORT": "51820",
                "WIREGUARD_IPV6": "on",
                "WIREGUARD_FIREWALL_MARK": "999",
            }
        ).read()
        wireguard = fragment.wireguard
        assert wireguard.private_key == PRIVATE_KEY
        assert wireguard.pre_shared_key is optional.UNSET
        assert wireguard.implementation == "userspace"
        assert [str(ip) for ip in wireguard.allowed_ips] == ["0.0.0.0/0", "::/0"]  # type: ignore[union-attr]
        assert [str(ip) for ip in wireguard.addresses] == ["10.64.222.21/32"]  # type: ignore[union-attr]
        assert wireguard.endpoint == settings.Endpoint(
            ip=_ipaddress.ip_address("1.2.3.4"), port=51820
        )
        assert wireguard.ipv6 is True
        assert wireguard.firewall_mark == 999

    def test_endpoint_ip_without_port(self) -> None:
        fragment = sources.EnvSource({"WIREGUARD_ENDPOINT_IP": "1.2.3.4"}).read()
        assert fragment.wireguard.endpoint.port is optional.UNSET  # type: ignore[union-attr]

    def test_retro_address_variable(self, caplog: _pytest.LogCaptureFixture) -> None:
        with caplog.at_level(_logging.WARNING):
            fragment = sources.EnvSource({"WIREGUARD_ADDRESS": "10.0.0.2/32"}).read()
        assert [str(ip) for ip in fragment.wireguard.addresses] == ["10.0.0.2/32"]  # type: ignore[union-attr]
        assert "WIREGUARD_ADDRESS is deprecated" in caplog.text

    def test_current_name_wins_over_retro(self) -> None:
        fragment = sources.EnvSource(
            {"WIREGUARD_ADDRESSES": "10.0.0.1/32", "WIREGUARD_ADDRESS": "10.0.0.2/32"}
        ).read()
        assert [str(ip) for ip in fragment.wireguard.addresses] == ["10.0.0.1/32"]  # type: ignore[union-attr]

    def test_interface_name_retro_variable(self) -> None:
        fragment = sources.EnvSource({"WIREGUARD_INTERFACE": "wg1"}).read()
        assert fragment.wireguard.interface_name == "wg1"

    def test_invalid_address(self) -> None:
        with _pytest.raises(settings.SourceError) as exc_info:
            sources.EnvSource({"WIREGUARD_ADDRESSES": "10.0.0.1"}).read()
        assert str(exc_info.value) == "WIREGUARD_ADDRESSES: invalid CIDR address: 10.0.0.1"

    def test_invalid_endpoint_port(self) -> None:
        with _pytest.raises(settings.SourceError, match="^WIREGUARD_ENDPOINT_PORT: "):
            sources.EnvSource({"WIREGUARD_ENDPOINT_PORT": "70000"}).read()

    def test_invalid_boolean(self) -> None:
        with _pytest.raises(settings.SourceError) as exc_info:
            sources.EnvSource({"WIREGUARD_IPV6": "maybe"}).read()
        assert str(exc_info.value) == "WIREGUARD_IPV6: value is not a binary choice: maybe"

    def test_negative_firewall_mark(self) -> None:
        with _pytest.raises(settings.SourceError, match="WIREGUARD_"):
            sources.EnvSource({"WIREGUARD_FIREWALL_MARK": "-1"}).read()


class TestEnvSourceOpenVPN:
    """Tests for OPENVPN_* variables."""

    def test_credentials_and_lists(self) -> None:
        fragment = sources.EnvSource(
            {
                "OPENVPN_USER": "alice",
                "OPENVPN_PASSWORD": "secret",
                "OPENVPN_CIPHERS": "aes-256-gcm,chacha20-poly1305",
                "OPENVPN_FLAGS": "--fast-io  --mute-replay-warnings",
                "OPENVPN_VERBOSITY": "3",
                "PRIVATE_INTERNET_ACCESS_OPENVPN_ENCRYPTION_PRESET": "Normal",
            }
        ).read()
        openvpn = fragment.openvpn
        assert openvpn.user == "alice"
        assert openvpn.password == "secret"
        assert openvpn.ciphers == ["aes-256-gcm", "chacha20-poly1305"]
        assert openvpn.flags == ["--fast-io", "--mute-replay-warnings"]
        assert openvpn.verbosity == 3
        assert openvpn.pia_encryption_preset == "normal"

    def test_vpn_interface_applies_to_both_tunnels(self) -> None:
        fragment = sources.EnvSource({"VPN_INTERFACE": "tun1"}).read()
        assert fragment.openvpn.interface == "tun1"
        assert fragment.wireguard.interface_name == "tun1"

    def test_invalid_integer(self) -> None:
        with _pytest.raises(settings.SourceError) as exc_info:
            sources.EnvSource({"OPENVPN_MSSFIX": "big"}).read()
        assert str(exc_info.value) == "OPENVPN_MSSFIX: value is not an integer: big"


class TestEnvSourceOtherSections:
    """Tests for control server and updater variables."""

    def test_control_server(self) -> None:
        fragment = sources.EnvSource(
            {"HTTP_CONTROL_SERVER_ADDRESS": ":9000", "HTTP_CONTROL_SERVER_LOG": "no"}
        ).read()
        assert fragment.control_server.address == ":9000"
        assert fragment.control_server.log is False

    def test_retro_control_server_port(self) -> None:
        fragment = sources.EnvSource({"CONTROL_SERVER_ADDRESS": "9000"}).read()
        assert fragment.control_server.address == ":9000"

    def test_updater(self) -> None:
        fragment = sources.EnvSource(
            {
                "UPDATER_PERIOD": "24h",
                "UPDATER_DNS_ADDRESS": "9.9.9.9",
                "UPDATER_VPN_SERVICE_PROVIDERS": "Mullvad, nordvpn",
            }
        ).read()
        updater = fragment.updater
        assert updater.period == _datetime.timedelta(hours=24)
        assert updater.dns_address == "9.9.9.9"
        assert updater.enabled_providers() == ["mullvad", "nordvpn"]

    def test_invalid_period(self) -> None:
        with _pytest.raises(settings.SourceError, match="^UPDATER_PERIOD: invalid duration"):
            sources.EnvSource({"UPDATER_PERIOD": "daily"}).read()


class TestEnvSourceSecrets:
    """Tests for removing secrets from the environment."""

    def test_secrets_are_removed_when_asked(self) -> None:
        environ = {
            "WIREGUARD_PRIVATE_KEY": PRIVATE_KEY,
            "OPENVPN_PASSWORD": "secret",
            "OPENVPN_USER": "alice",
        }
        fragment = sources.EnvSource(environ, unset_secrets=True).read()
        assert fragment.openvpn.password == "secret"
        assert environ == {"OPENVPN_USER": "alice"}

    def test_secrets_are_kept_by_default(self) -> None:
        environ = {"OPENVPN_PASSWORD": "secret"}
        sources.EnvSource(environ).read()
        assert environ == {"OPENVPN_PASSWORD": "secret"}

    def test_secrets_are_removed_even_on_error(self) -> None:
        environ = {"OPENVPN_PASSWORD": "secret", "OPENVPN_MSSFIX": "big"}
        with _pytest.raises(settings.SourceError):
            sources.EnvSource(environ, unset_secrets=True).read()
        assert "OPENVPN_PASSWORD" not in environ
