"""Tests for the YAML configuration file source."""

import datetime as _datetime
import logging as _logging
import pathlib as _pathlib

import pytest as _pytest

import tunnelconf.settings as settings
import tunnelconf.settings.optional as optional
import tunnelconf.sources as sources


def _source(tmp_path: _pathlib.Path, content: str) -> sources.YamlSource:
    path = tmp_path / "config.yaml"
    path.write_text(content)
    return sources.YamlSource(path)


class TestYamlSource:
    """Tests for YamlSource.read()."""

    def test_missing_file_gives_empty_fragment(self, tmp_path: _pathlib.Path) -> None:
        assert sources.YamlSource(tmp_path / "config.yaml").read().is_empty()

    def test_empty_file_gives_empty_fragment(self, tmp_path: _pathlib.Path) -> None:
        assert _source(tmp_path, "").read().is_empty()

    def test_full_document(self, tmp_path: _pathlib.Path) -> None:
        fragment = _source(
            tmp_path,
            """
vpn_provider: mullvad
vpn_type: wireguard
wireguard:
  private_key: oMNSf/zJ0pt1ciy+qIRk8Rlyfs9accwuRLnKd85Yl1Q=
  endpoint: "[2001:db8::1]:51820"
  addresses:
    - 10.64.222.21/32
  ipv6: true
control_server:
  log: false
updater:
  period: 24h
""",
        ).read()
        assert fragment.vpn_provider == "mullvad"
        assert fragment.vpn_type == "wireguard"
        assert str(fragment.wireguard.endpoint) == "[2001:db8::1]:51820"
        assert [str(ip) for ip in fragment.wireguard.addresses] == ["10.64.222.21/32"]  # type: ignore[union-attr]
        assert fragment.wireguard.ipv6 is True
        assert fragment.control_server.log is False
        assert fragment.updater.period == _datetime.timedelta(hours=24)

    def test_omitted_keys_stay_unset(self, tmp_path: _pathlib.Path) -> None:
        fragment = _source(tmp_path, "vpn_type: openvpn\n").read()
        assert fragment.vpn_provider is optional.UNSET
        assert fragment.openvpn.is_empty()

    def test_present_empty_values_are_kept(self, tmp_path: _pathlib.Path) -> None:
        fragment = _source(tmp_path, "wireguard:\n  pre_shared_key: ''\n").read()
        assert fragment.wireguard.pre_shared_key == ""

    def test_unknown_keys_are_warned(
        self, tmp_path: _pathlib.Path, caplog: _pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(_logging.WARNING):
            fragment = _source(tmp_path, "wireguard:\n  privte_key: x\n").read()
        assert fragment.collect_all_extra_fields() == {"wireguard.privte_key": "x"}
        assert "wireguard.privte_key" in caplog.text

    def test_malformed_yaml(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(settings.SourceError, match="parsing YAML"):
            _source(tmp_path, "vpn_type: [unclosed\n").read()

    def test_top_level_must_be_mapping(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(settings.SourceError, match="expected a mapping.*got list"):
            _source(tmp_path, "- a\n- b\n").read()

    def test_wrong_value_type(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(settings.SourceError, match="invalid settings"):
            _source(tmp_path, "wireguard:\n  addresses:\n    - not-a-network\n").read()

    def test_unquoted_openvpn_version(self, tmp_path: _pathlib.Path) -> None:
        fragment = _source(tmp_path, "openvpn:\n  version: 2.6\n").read()
        assert fragment.openvpn.version == "2.6"

    def test_provider_and_type_are_lowercased(self, tmp_path: _pathlib.Path) -> None:
        fragment = _source(tmp_path, "vpn_provider: Mullvad\nvpn_type: WireGuard\n").read()
        assert fragment.vpn_provider == "mullvad"
        assert fragment.vpn_type == "wireguard"
