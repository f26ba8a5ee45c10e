"""Server list updater settings."""

from __future__ import annotations

import datetime as _datetime
import typing as _typing

import pydantic as _pydantic

import tunnelconf.constants as constants
import tunnelconf.settings.base as base
import tunnelconf.settings.errors as errors
import tunnelconf.settings.optional as optional
import tunnelconf.settings.types as types
import tunnelconf.ui.tree as tree
import tunnelconf.utils.durations as durations

MIN_PERIOD = _datetime.timedelta(minutes=1)


class Updater(base.SettingsBase):
    """
    Settings of the periodic VPN server list updater.

    ``period`` set to zero disables the updater. ``providers`` holds one
    enable flag per VPN service provider.
    """

    period: _datetime.timedelta | optional.Unset = optional.UNSET
    dns_address: str | optional.Unset = optional.UNSET
    """Plaintext DNS resolver used while updating."""

    providers: dict[str, bool] | optional.Unset = optional.UNSET

    @_pydantic.field_validator("period", mode="before")
    @classmethod
    def _parse_period(cls, value: _typing.Any) -> _typing.Any:
        if isinstance(value, str):
            return durations.parse_duration(value)
        return value

    def _defaults(self, context: base.DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        return {
            "period": _datetime.timedelta(),
            # Plaintext so a DNS over TLS setup cannot block the update
            "dns_address": "1.1.1.1",
            "providers": {provider: True for provider in constants.UPDATABLE_PROVIDERS},
        }

    def enabled_providers(self) -> list[str]:
        """Return the names of providers whose flag is on, sorted."""
        flags = optional.value_or(self.providers, {})
        return sorted(name for name, enabled in flags.items() if enabled)

    def validate(self) -> None:  # type: ignore[override]
        """
        Raises:
            errors.UpdaterPeriodTooSmallError: Period is neither zero nor at
                least one minute.
            errors.UpdaterDNSAddressInvalidError: DNS address is not an IP.
            errors.UpdaterProviderUnknownError: A flag names an unknown provider.
        """
        period = optional.value_or(self.period, _datetime.timedelta())
        if period and period < MIN_PERIOD:
            raise errors.UpdaterPeriodTooSmallError(
                f"{durations.format_duration(period)} must be at least "
                f"{durations.format_duration(MIN_PERIOD)}",
                field="period",
                value=period,
            )

        dns_address = optional.value_or(self.dns_address, "")
        try:
            types.parse_ip(dns_address)
        except ValueError:
            raise errors.UpdaterDNSAddressInvalidError(
                dns_address, field="dns_address", value=dns_address
            ) from None

        for name in sorted(optional.value_or(self.providers, {})):
            if name not in constants.UPDATABLE_PROVIDERS:
                raise errors.UpdaterProviderUnknownError(name, field="providers", value=name)

    def to_node(self) -> tree.Node:
        node = tree.Node("Updater settings:")
        if self.period is optional.UNSET:
            node.append("Update period: not set")
        elif not self.period:
            node.append("Update period: disabled")
            return node
        else:
            node.append(f"Update period: every {durations.format_duration(self.period)}")
        node.append(f"DNS address: {optional.value_or(self.dns_address, 'not set')}")
        if self.providers is optional.UNSET:
            node.append("Providers to update: not set")
        else:
            enabled = self.enabled_providers()
            node.append(f"Providers to update: {', '.join(enabled) if enabled else 'none'}")
        return node

    def __str__(self) -> str:
        return str(self.to_node())
