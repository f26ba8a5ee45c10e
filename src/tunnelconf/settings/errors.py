"""
Error taxonomy for settings resolution.

Two families:

- ``SourceError``: a source could not turn its input into a fragment
  (bad env var, unreadable file, malformed INI/YAML).
- ``ValidationError``: a resolved value breaks an invariant. Each invariant
  has exactly one subclass, so callers discriminate with ``except`` or
  ``isinstance`` and never by comparing message text.

Validation errors carry structured context (field, value, position) and
render it to text only in ``__str__``.
"""

from __future__ import annotations

import typing as _typing


class SettingsError(Exception):
    """Base class for every error raised by tunnelconf."""


class SourceError(SettingsError):
    """A source failed to read or parse its input."""

    def __init__(self, origin: str, message: str) -> None:
        """
        Args:
            origin: Where the bad input came from, e.g. an environment
                variable name or a file path.
            message: What went wrong.
        """
        self.origin = origin
        self.message = message
        super().__init__(f"{origin}: {message}")


class ValidationError(SettingsError):
    """
    Base class for invariant violations.

    Subclasses set ``message``. An instance adds an optional ``detail``
    (appended after a colon) and zero or more ``contexts`` (prefixed, outermost
    first), for example ``OpenVPN settings: client certificate: missing value``.
    """

    message: _typing.ClassVar[str] = "settings are not valid"

    def __init__(
        self,
        detail: str | None = None,
        *,
        field: str | None = None,
        value: _typing.Any = None,
        position: tuple[int, int] | None = None,
        contexts: tuple[str, ...] = (),
    ) -> None:
        """
        Args:
            detail: Human readable detail appended to the message. An empty
                string still adds the separator, so an empty offending value
                stays visible (``invalid interface name: ``).
            field: Name of the offending settings field.
            value: Offending value. Never pass secrets here.
            position: ``(index, length)`` with a 1-based index, for list entries.
            contexts: Prefixes naming the enclosing settings, outermost first.
        """
        self.detail = detail
        self.field = field
        self.value = value
        self.position = position
        self.contexts = contexts
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.message
        if self.detail is not None:
            text = f"{text}: {self.detail}"
        for context in reversed(self.contexts):
            text = f"{context}: {text}"
        return text

    def wrap(self, context: str) -> _typing.Self:
        """Return the same kind of error with an extra outer context."""
        return type(self)(
            self.detail,
            field=self.field,
            value=self.value,
            position=self.position,
            contexts=(context, *self.contexts),
        )


def entry_detail(kind: str, position: tuple[int, int]) -> str:
    """Format a list position as ``for <kind> i of n``."""
    index, length = position
    return f"for {kind} {index} of {length}"


# =============================================================================
# WireGuard
# =============================================================================


class InterfaceNameInvalidError(ValidationError):
    message = "invalid interface name"


class PrivateKeyMissingError(ValidationError):
    message = "private key is missing"


class PrivateKeyInvalidError(ValidationError):
    message = "cannot parse private key"


class PublicKeyMissingError(ValidationError):
    message = "public key is missing"


class PublicKeyInvalidError(ValidationError):
    message = "cannot parse public key"


class PreSharedKeyInvalidError(ValidationError):
    message = "cannot parse pre-shared key"


class EndpointMissingError(ValidationError):
    message = "endpoint is missing"


class EndpointIPMissingError(ValidationError):
    message = "endpoint IP is missing"


class EndpointPortMissingError(ValidationError):
    message = "endpoint port is missing"


class AllowedIPsMissingError(ValidationError):
    message = "allowed IPs are missing"


class AllowedIPNilError(ValidationError):
    message = "allowed IP is nil"


class AllowedIPIPNilError(ValidationError):
    message = "allowed IP IP field is nil"


class AllowedIPMaskMissingError(ValidationError):
    message = "allowed IP mask is missing"


class AllowedIPv6NotSupportedError(ValidationError):
    message = "allowed IPv6 address not supported"


class AddressMissingError(ValidationError):
    message = "interface address is missing"


class AddressNilError(ValidationError):
    message = "interface address is nil"


class AddressIPMissingError(ValidationError):
    message = "interface address IP is missing"


class AddressMaskMissingError(ValidationError):
    message = "interface address mask is missing"


class AddressIPv6NotSupportedError(ValidationError):
    message = "interface address IPv6 not supported"


class FirewallMarkMissingError(ValidationError):
    message = "firewall mark is missing"


class ImplementationInvalidError(ValidationError):
    message = "invalid implementation"


# =============================================================================
# OpenVPN
# =============================================================================


class OpenVPNVersionInvalidError(ValidationError):
    message = "OpenVPN version is not valid"


class OpenVPNUserEmptyError(ValidationError):
    message = "user is empty"


class OpenVPNPasswordEmptyError(ValidationError):
    message = "password is empty"


class FilepathMissingError(ValidationError):
    message = "filepath is missing"


class FileMissingError(ValidationError):
    message = "file does not exist"


class ConfigFileInvalidError(ValidationError):
    message = "extracting information from custom configuration file"


class MissingValueError(ValidationError):
    message = "missing value"


class Base64InvalidError(ValidationError):
    message = "value is not valid base64"


class KeyPassphraseEmptyError(ValidationError):
    message = "key passphrase is empty"


class MSSFixTooHighError(ValidationError):
    message = "mssfix option value is too high"


class OpenVPNInterfaceInvalidError(ValidationError):
    message = "interface name is not valid"


class VerbosityOutOfBoundsError(ValidationError):
    message = "verbosity value is out of bounds"


# =============================================================================
# Control server, updater and top level
# =============================================================================


class ControlServerAddressInvalidError(ValidationError):
    message = "control server listening address is not valid"


class UpdaterPeriodTooSmallError(ValidationError):
    message = "updater period is too small"


class UpdaterDNSAddressInvalidError(ValidationError):
    message = "updater DNS address is not valid"


class UpdaterProviderUnknownError(ValidationError):
    message = "updater VPN service provider is not valid"


class VPNTypeInvalidError(ValidationError):
    message = "VPN type is not valid"


class VPNProviderUnknownError(ValidationError):
    message = "VPN service provider is not valid"


class WireguardNotSupportedError(ValidationError):
    message = "Wireguard is not supported by VPN service provider"
