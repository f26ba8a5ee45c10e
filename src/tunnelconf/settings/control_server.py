"""HTTP control server settings."""

from __future__ import annotations

import typing as _typing

import tunnelconf.settings.base as base
import tunnelconf.settings.errors as errors
import tunnelconf.settings.optional as optional
import tunnelconf.settings.types as types
import tunnelconf.ui.tree as tree


class ControlServer(base.SettingsBase):
    """Settings of the HTTP server used to control the tunnel at runtime."""

    address: str | optional.Unset = optional.UNSET
    """Listening address as ``[host]:port``, e.g. ``:8000``."""

    log: bool | optional.Unset = optional.UNSET
    """Log each request received."""

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        return {"address": ":8000", "log": True}

    def validate(self) -> None:  # type: ignore[override]
        """
        Raises:
            errors.ControlServerAddressInvalidError: If the address is not
                ``[host]:port`` with a port from 1 to 65535.
        """
        address = optional.value_or(self.address, "")
        host, sep, port = address.rpartition(":")
        valid = bool(sep) and port.isdigit() and 0 < int(port) <= 65535
        if valid and host:
            valid = _is_valid_host(host)
        if not valid:
            raise errors.ControlServerAddressInvalidError(
                address, field="address", value=address
            )

    def to_node(self) -> tree.Node:
        node = tree.Node("Control server settings:")
        address = optional.value_or(self.address, "not set")
        node.append(f"Listening address: {address}")
        log = "not set"
        if optional.is_set(self.log):
            log = "yes" if self.log else "no"
        node.append(f"Logging: {log}")
        return node

    def __str__(self) -> str:
        return str(self.to_node())


def _is_valid_host(host: str) -> bool:
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        types.parse_ip(host)
    except ValueError:
        return host.replace("-", "").replace(".", "").isalnum()
    return True
