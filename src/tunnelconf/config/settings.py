"""
Configuration of tunnelconf itself.

``ReaderSettings`` says where the sources find their input and how loud the
tool logs. Every field can be set with a ``TUNNELCONF_`` environment
variable, for example ``TUNNELCONF_CONFIG_FILE=/etc/vpn.yaml`` or
``TUNNELCONF_LOG_LEVEL=debug``.
"""

from __future__ import annotations

import collections.abc as _abc
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import tunnelconf.sources.base as sources_base
import tunnelconf.sources.env as env
import tunnelconf.sources.files as files
import tunnelconf.sources.yaml_file as yaml_file

DEFAULT_ROOT = _pathlib.Path("/etc/tunnelconf")

LogLevel = _typing.Literal["debug", "info", "warning", "error"]


class ReaderSettings(_pydantic_settings.BaseSettings):
    """
    Where to read settings from.

    Source precedence (highest first):
    1. Environment variables
    2. Key files (WireGuard ``wg0.conf``, OpenVPN PEM files)
    3. YAML configuration file
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="TUNNELCONF_",
        extra="ignore",
    )

    config_file: _pathlib.Path = DEFAULT_ROOT / "config.yaml"
    wireguard_config_path: _pathlib.Path = DEFAULT_ROOT / "wireguard" / "wg0.conf"
    openvpn_client_cert_path: _pathlib.Path = DEFAULT_ROOT / "openvpn" / "client.crt"
    openvpn_client_key_path: _pathlib.Path = DEFAULT_ROOT / "openvpn" / "client.key"
    openvpn_encrypted_key_path: _pathlib.Path = DEFAULT_ROOT / "openvpn" / "encrypted_key"
    unset_secrets: bool = False
    """Remove secret variables from the environment once read."""
    log_level: LogLevel = "warning"

    @_pydantic.field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return value.lower()
        return value

    def source_paths(self) -> list[tuple[str, _pathlib.Path]]:
        """Return ``(label, path)`` for every file a source may read."""
        return [
            ("YAML configuration", self.config_file),
            ("WireGuard configuration", self.wireguard_config_path),
            ("OpenVPN client certificate", self.openvpn_client_cert_path),
            ("OpenVPN client key", self.openvpn_client_key_path),
            ("OpenVPN encrypted key", self.openvpn_encrypted_key_path),
        ]

    def build_sources(
        self,
        environ: _abc.MutableMapping[str, str] | None = None,
    ) -> list[sources_base.Source]:
        """
        Create the sources, highest priority first.

        Args:
            environ: Variables for the environment source. Defaults to
                ``os.environ``.
        """
        return [
            env.EnvSource(environ, unset_secrets=self.unset_secrets),
            files.FilesSource(
                wireguard_config_path=self.wireguard_config_path,
                openvpn_cert_path=self.openvpn_client_cert_path,
                openvpn_key_path=self.openvpn_client_key_path,
                openvpn_encrypted_key_path=self.openvpn_encrypted_key_path,
            ),
            yaml_file.YamlSource(self.config_file),
        ]
