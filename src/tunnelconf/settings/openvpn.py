"""OpenVPN client settings."""

from __future__ import annotations

import base64 as _base64
import binascii as _binascii
import pathlib as _pathlib
import re as _re
import typing as _typing

import pydantic as _pydantic

import tunnelconf.constants as constants
import tunnelconf.openvpn.extract as extract
import tunnelconf.settings.base as base
import tunnelconf.settings.errors as errors
import tunnelconf.settings.optional as optional
import tunnelconf.settings.providers as providers
import tunnelconf.ui.tree as tree

_INTERFACE_NAME = _re.compile(constants.INTERFACE_NAME_PATTERN)

MAX_MSS_FIX = 10000
MIN_VERBOSITY = 0
MAX_VERBOSITY = 6


class OpenVPN(base.SettingsBase):
    """
    Settings to configure the OpenVPN client.

    Optional string fields set to the empty string mean "not used": for
    example ``user=""`` declares that the provider needs no credentials,
    which is a different decision from leaving ``user`` unset.
    """

    version: str | optional.Unset = optional.UNSET
    """OpenVPN version to run, ``2.5`` or ``2.6``."""

    user: str | optional.Unset = optional.UNSET
    password: str | optional.Unset = optional.UNSET

    conf_file: str | optional.Unset = optional.UNSET
    """Path to a custom configuration file, used by the custom provider."""

    ciphers: list[str] | optional.Unset = optional.UNSET
    auth: str | optional.Unset = optional.UNSET

    cert: str | optional.Unset = optional.UNSET
    """Base64 encoded DER client certificate."""

    key: str | optional.Unset = optional.UNSET
    """Base64 encoded DER client key."""

    encrypted_key: str | optional.Unset = optional.UNSET
    """Base64 encoded DER encrypted client key, requires ``key_passphrase``."""

    key_passphrase: str | optional.Unset = optional.UNSET

    pia_encryption_preset: str | optional.Unset = optional.UNSET
    """Private Internet Access encryption preset, empty for other providers."""

    mss_fix: int | optional.Unset = optional.UNSET
    """Value for the mssfix option, 0 to leave it out."""

    interface: str | optional.Unset = optional.UNSET
    process_user: str | optional.Unset = optional.UNSET

    verbosity: int | optional.Unset = optional.UNSET
    """Verbosity level from 0 to 6."""

    flags: list[str] | optional.Unset = optional.UNSET
    """Extra command line flags for the OpenVPN program."""

    @_pydantic.field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: _typing.Any) -> _typing.Any:
        # YAML reads an unquoted 2.6 as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    # =========================================================================
    # Defaults
    # =========================================================================

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:
        password = "m" if context.vpn_provider == constants.MULLVAD else ""
        preset = ""
        if context.vpn_provider == constants.PRIVATE_INTERNET_ACCESS:
            preset = constants.PIA_PRESET_STRONG
        return {
            "version": constants.OPENVPN_25,
            "user": "",
            "password": password,
            "conf_file": "",
            "ciphers": [],
            "auth": "",
            "cert": "",
            "key": "",
            "encrypted_key": "",
            "key_passphrase": "",
            "pia_encryption_preset": preset,
            "mss_fix": 0,
            "interface": "tun0",
            "process_user": "root",
            "verbosity": 1,
            "flags": [],
        }

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, vpn_provider: str) -> None:  # type: ignore[override]
        """
        Check the settings for the given provider, stopping at the first problem.

        Args:
            vpn_provider: Resolved VPN service provider name.

        Raises:
            errors.ValidationError: The subclass identifies the failed check.
        """
        version = optional.value_or(self.version, "")
        if version not in constants.OPENVPN_VERSIONS:
            raise errors.OpenVPNVersionInvalidError(
                f"{version!r} must be one of {', '.join(constants.OPENVPN_VERSIONS)}",
                field="version",
                value=version,
            )

        rules = providers.rules_for(vpn_provider)
        user = optional.value_or(self.user, "")
        if rules.user_required and not user:
            raise errors.OpenVPNUserEmptyError(field="user")
        if rules.password_required(user) and not optional.value_or(self.password, ""):
            raise errors.OpenVPNPasswordEmptyError(field="password")

        if rules.custom_config_required:
            _validate_config_file(optional.value_or(self.conf_file, ""))

        _validate_blob("client certificate", "cert", self.cert, rules.cert_required)
        _validate_blob("client key", "key", self.key, rules.key_required)
        _validate_blob(
            "encrypted key", "encrypted_key", self.encrypted_key, rules.encrypted_key_required
        )

        if optional.value_or(self.encrypted_key, "") and not optional.value_or(
            self.key_passphrase, ""
        ):
            raise errors.KeyPassphraseEmptyError(field="key_passphrase")

        mss_fix = optional.value_or(self.mss_fix, 0)
        if mss_fix > MAX_MSS_FIX:
            raise errors.MSSFixTooHighError(
                f"{mss_fix} is over the maximum value of {MAX_MSS_FIX}",
                field="mss_fix",
                value=mss_fix,
            )

        interface = optional.value_or(self.interface, "")
        if not _INTERFACE_NAME.match(interface):
            raise errors.OpenVPNInterfaceInvalidError(
                f"'{interface}' does not match regex '{constants.INTERFACE_NAME_PATTERN}'",
                field="interface",
                value=interface,
            )

        verbosity = optional.value_or(self.verbosity, MIN_VERBOSITY)
        if not MIN_VERBOSITY <= verbosity <= MAX_VERBOSITY:
            raise errors.VerbosityOutOfBoundsError(
                f"{verbosity} can only be between {MIN_VERBOSITY} and {MAX_VERBOSITY}",
                field="verbosity",
                value=verbosity,
            )

    # =========================================================================
    # Rendering
    # =========================================================================

    def to_node(self) -> tree.Node:
        """Render the settings as a tree, secrets redacted."""
        node = tree.Node("OpenVPN settings:")
        node.append(f"OpenVPN version: {_shown(self.version)}")
        node.append(f"User: {optional.obfuscate(self.user)}")
        node.append(f"Password: {optional.obfuscate(self.password)}")

        _append_unless_empty(node, "Custom configuration file", self.conf_file)
        if self.ciphers is optional.UNSET:
            node.append("Ciphers: not set")
        elif self.ciphers:
            node.append(f"Ciphers: {', '.join(self.ciphers)}")
        _append_unless_empty(node, "Auth", self.auth)

        for label, secret in (("Client crt", self.cert), ("Client key", self.key)):
            if secret is optional.UNSET or secret:
                node.append(f"{label}: {optional.obfuscate(secret)}")

        if self.encrypted_key is optional.UNSET or self.encrypted_key:
            node.append(
                f"Encrypted key: {optional.obfuscate(self.encrypted_key)} "
                f"(key passphrase {optional.obfuscate(self.key_passphrase)})"
            )

        _append_unless_empty(
            node, "Private Internet Access encryption preset", self.pia_encryption_preset
        )

        if self.mss_fix is optional.UNSET:
            node.append("MSS Fix: not set")
        elif self.mss_fix > 0:
            node.append(f"MSS Fix: {self.mss_fix}")

        node.append(f"Network interface: {_shown(self.interface)}")
        node.append(f"Run OpenVPN as: {_shown(self.process_user)}")
        node.append(f"Verbosity level: {_shown(self.verbosity)}")

        if self.flags is optional.UNSET:
            node.append("Flags: not set")
        elif self.flags:
            flags_node = node.append("Flags:")
            for flag in self.flags:
                flags_node.append(flag)
        return node

    def __str__(self) -> str:
        return str(self.to_node())


def _validate_config_file(conf_file: str) -> None:
    context = "custom configuration file"
    if not conf_file:
        raise errors.FilepathMissingError(field="conf_file", contexts=(context,))
    if not _pathlib.Path(conf_file).is_file():
        raise errors.FileMissingError(
            conf_file, field="conf_file", value=conf_file, contexts=(context,)
        )
    try:
        extract.extract_connection(conf_file)
    except extract.ExtractionError as e:
        raise errors.ConfigFileInvalidError(
            str(e), field="conf_file", value=conf_file, contexts=(context,)
        ) from e


def _validate_blob(
    context: str,
    field: str,
    value: str | optional.Unset,
    required: bool,
) -> None:
    """Check a base64 DER blob that may be required by the provider."""
    blob = optional.value_or(value, "")
    if not blob:
        if required:
            raise errors.MissingValueError(field=field, contexts=(context,))
        return
    try:
        _base64.b64decode(blob, validate=True)
    except (_binascii.Error, ValueError):
        raise errors.Base64InvalidError(field=field, contexts=(context,)) from None


def _shown(value: object) -> str:
    return "not set" if value is optional.UNSET else str(value)


def _append_unless_empty(node: tree.Node, label: str, value: str | optional.Unset) -> None:
    """Show absent values as not set and skip values explicitly left empty."""
    if value is optional.UNSET:
        node.append(f"{label}: not set")
    elif value:
        node.append(f"{label}: {value}")
