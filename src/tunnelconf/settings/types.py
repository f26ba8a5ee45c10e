"""Network value types used by the settings models.

``IPNet`` and ``Endpoint`` keep each of their parts optional so that a
source can hand over an incomplete value and the validator can point at the
exact part that is missing. Both accept their usual string notation as input.
"""

from __future__ import annotations

import ipaddress as _ipaddress
import typing as _typing

import pydantic as _pydantic

import tunnelconf.settings.base as base
import tunnelconf.settings.optional as optional

IPAddress: _typing.TypeAlias = _ipaddress.IPv4Address | _ipaddress.IPv6Address


def parse_ip(value: str) -> IPAddress:
    """Parse an IPv4 or IPv6 address, raising ValueError if invalid."""
    return _ipaddress.ip_address(value.strip())


class IPNet(base.ValueBase):
    """
    A CIDR network entry: an IP address and a prefix length.

    The host part of the address is kept, so ``10.0.0.5/24`` stays
    ``10.0.0.5/24`` (an interface address) rather than ``10.0.0.0/24``.
    """

    ip: IPAddress | optional.Unset = optional.UNSET
    mask: int | optional.Unset = optional.UNSET
    """Prefix length in bits."""

    @_pydantic.model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: _typing.Any) -> _typing.Any:
        if isinstance(data, str):
            return cls.parse_fields(data)
        return data

    @staticmethod
    def parse_fields(value: str) -> dict[str, _typing.Any]:
        """
        Split CIDR notation into fields.

        Raises:
            ValueError: If the value is not valid CIDR notation.
        """
        text = value.strip()
        if "/" not in text:
            raise ValueError(f"invalid CIDR address: {value}")
        try:
            interface = _ipaddress.ip_interface(text)
        except ValueError:
            raise ValueError(f"invalid CIDR address: {value}") from None
        return {"ip": interface.ip, "mask": interface.network.prefixlen}

    @classmethod
    def parse(cls, value: str) -> IPNet:
        """Build an ``IPNet`` from CIDR notation."""
        return cls(**cls.parse_fields(value))

    @property
    def is_ipv6(self) -> bool:
        return optional.is_set(self.ip) and self.ip.version == 6  # type: ignore[union-attr]

    def __str__(self) -> str:
        ip = self.ip if optional.is_set(self.ip) else "<nil>"
        mask = self.mask if optional.is_set(self.mask) else "<nil>"
        return f"{ip}/{mask}"


def all_ipv4() -> IPNet:
    """Return ``0.0.0.0/0``."""
    return IPNet(ip=_ipaddress.IPv4Address("0.0.0.0"), mask=0)


def all_ipv6() -> IPNet:
    """Return ``::/0``."""
    return IPNet(ip=_ipaddress.IPv6Address("::"), mask=0)


class Endpoint(base.ValueBase):
    """A UDP endpoint. A port of 0 counts as missing."""

    ip: IPAddress | optional.Unset = optional.UNSET
    port: int | optional.Unset = optional.UNSET

    @_pydantic.model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: _typing.Any) -> _typing.Any:
        if isinstance(data, str):
            return cls.parse_fields(data)
        return data

    @staticmethod
    def parse_fields(value: str) -> dict[str, _typing.Any]:
        """
        Split ``host[:port]`` notation into fields.

        IPv6 hosts with a port must be bracketed: ``[::1]:51820``.

        Raises:
            ValueError: If the host is not an IP address or the port is not
                a number in 0-65535.
        """
        text = value.strip()
        host, port = text, ""
        if text.startswith("["):
            host, sep, rest = text[1:].partition("]")
            if not sep or (rest and not rest.startswith(":")):
                raise ValueError(f"invalid endpoint: {value}")
            port = rest[1:]
        elif text.count(":") == 1:
            host, _, port = text.partition(":")

        fields: dict[str, _typing.Any] = {"ip": parse_ip(host)}
        if port:
            if not port.isdigit() or int(port) > 65535:
                raise ValueError(f"invalid endpoint port: {port}")
            fields["port"] = int(port)
        return fields

    @classmethod
    def parse(cls, value: str) -> Endpoint:
        """Build an ``Endpoint`` from ``host[:port]`` notation."""
        return cls(**cls.parse_fields(value))

    def __str__(self) -> str:
        port = optional.value_or(self.port, 0)
        if not optional.is_set(self.ip):
            return f":{port}"
        if self.ip.version == 6:  # type: ignore[union-attr]
            return f"[{self.ip}]:{port}"
        return f"{self.ip}:{port}"
